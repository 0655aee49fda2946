"""
Помилки конфігурації розпізнавача артефактів.

Відсутність збігу ніколи не є помилкою (повертається None).
Виняток означає, що неправильно налаштовано сам розпізнавач.
"""


class ConfigurationError(ValueError):
    """Некоректна конфігурація: TLD таблиця, offset або повторне налаштування."""


class UnknownPatternError(ConfigurationError):
    """Запитано патерн, якого немає в реєстрі."""

    def __init__(self, name: str, available=()):
        self.name = name
        self.available = sorted(available)
        super().__init__(
            f"Unknown pattern '{name}'. "
            f"Available: {self.available}"
        )
