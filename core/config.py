"""
Централізована конфігурація розпізнавача артефактів.

Архітектурний принцип: Single Source of Truth для всіх налаштувань.
Це дозволяє легко модифікувати поведінку системи без зміни коду.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class EntityConfig:
    """Конфігурація для окремого типу артефакту."""
    name: str
    description: str
    enabled: bool = True
    score: float = 0.85
    anonymization_format: str = "[{entity_type}]"


@dataclass
class AppConfig:
    """Глобальна конфігурація додатку."""

    # Обмеження
    MAX_TEXT_LENGTH: int = 100_000
    MAX_BATCH_SIZE: int = 100

    # Налаштування анонімізації
    DEFAULT_ANONYMIZATION_FORMAT: str = "[{entity_type}]"

    # Альтернативна TLD таблиця (формат IANA tlds-alpha-by-domain.txt)
    TLD_FILE: Optional[str] = field(
        default_factory=lambda: os.getenv("ARTIFACT_TLD_FILE") or None
    )

    # Артефакти, які шукає аналізатор. Об'єднання (IP, PATH, ...) сюди
    # не входять: вони дублювали б результати своїх складових.
    ARTIFACT_ENTITIES: Dict[str, EntityConfig] = field(default_factory=lambda: {
        "EMAIL_ADDR": EntityConfig("EMAIL_ADDR", "Email адреси", score=0.95),
        "MAC": EntityConfig("MAC", "MAC адреси мережевих інтерфейсів", score=0.9),
        "IPv4": EntityConfig("IPv4", "IPv4 адреси (з CIDR префіксом)", score=0.9),
        "IPv6": EntityConfig("IPv6", "IPv6 адреси (повні та стиснуті)", score=0.9),
        "HOST_NAME": EntityConfig("HOST_NAME", "Доменні імена з відомим TLD", score=0.8),
        "PHONE_NUMBER": EntityConfig("PHONE_NUMBER", "Телефонні номери (NANP)", score=0.7),
        "ABSOLUTE_UNIX_PATH": EntityConfig(
            "ABSOLUTE_UNIX_PATH", "Абсолютні UNIX шляхи", score=0.6
        ),
        "RELATIVE_UNIX_PATH": EntityConfig(
            "RELATIVE_UNIX_PATH", "Відносні UNIX шляхи", score=0.5
        ),
        "ABSOLUTE_WINDOWS_PATH": EntityConfig(
            "ABSOLUTE_WINDOWS_PATH", "Абсолютні Windows шляхи", score=0.6
        ),
        "RELATIVE_WINDOWS_PATH": EntityConfig(
            "RELATIVE_WINDOWS_PATH", "Відносні Windows шляхи", score=0.5
        ),
        "USER_NAME": EntityConfig(
            "USER_NAME", "Імена користувачів", enabled=False, score=0.3
        ),
        "IDENTIFIER": EntityConfig(
            "IDENTIFIER", "Ідентифікатори в коді", enabled=False, score=0.2
        ),
        "FILE": EntityConfig("FILE", "Імена файлів з розширенням", enabled=False, score=0.3),
        "WORD": EntityConfig("WORD", "Слова природної мови", enabled=False, score=0.1),
    })

    def get_enabled_entities(self) -> List[str]:
        """Повертає список активних типів артефактів."""
        return [
            name for name, entity in self.ARTIFACT_ENTITIES.items()
            if entity.enabled
        ]

    def update_entity_state(self, entity_type: str, enabled: bool) -> None:
        """Оновлює стан активності типу артефакту."""
        if entity_type in self.ARTIFACT_ENTITIES:
            self.ARTIFACT_ENTITIES[entity_type].enabled = enabled

    def get_entity_score(self, entity_type: str) -> float:
        """Score впевненості для Presidio recognizer цього типу."""
        entity = self.ARTIFACT_ENTITIES.get(entity_type)
        return entity.score if entity else 0.5


# Глобальний екземпляр конфігурації
config = AppConfig()
