"""
Фасад розпізнавача артефактів: match / scan / pattern_names.

Архітектурний патерн: Facade над реєстром іменованих патернів.
Реєстр будується один раз для заданої TLD таблиці; після цього
всі операції чисті та реентерабельні.
"""

import logging
import threading
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Union

from core.config import config
from recognizers.errors import ConfigurationError, UnknownPatternError
from recognizers.artifact_patterns import (
    ArtifactMatch,
    ArtifactPattern,
    build_patterns,
)
from recognizers.tld_table import TLDTable

logger = logging.getLogger(__name__)

Text = Union[str, bytes, bytearray]


def _as_text(text: Text) -> str:
    """
    Приводить вхід до str.

    bytes декодуються як Latin-1: кожен байт стає одним символом, тому
    зміщення залишаються байтовими і жодна послідовність не ламає матчер.
    """
    if isinstance(text, (bytes, bytearray)):
        return bytes(text).decode("latin-1")
    if not isinstance(text, str):
        raise TypeError(f"Expected str or bytes, got {type(text).__name__}")
    return text


class ArtifactRecognizer:
    """
    Розпізнавач мережевих та файлових артефактів у вільному тексті.

    Стратегія: TLD таблиця передається явно при створенні, тому кілька
    розпізнавачів з різними таблицями можуть співіснувати в одному процесі.
    """

    def __init__(self, tld_table: Optional[TLDTable] = None):
        if tld_table is None:
            tld_table = TLDTable.default()
        elif not isinstance(tld_table, TLDTable):
            tld_table = TLDTable.from_iterable(tld_table)

        self.tld_table = tld_table
        self._patterns: Dict[str, ArtifactPattern] = build_patterns(tld_table)

        logger.info("ArtifactRecognizer initialized")

    def get_pattern(self, pattern_name: str) -> ArtifactPattern:
        """
        Повертає патерн за ім'ям.

        Raises:
            UnknownPatternError: Якщо такого патерну немає
        """
        try:
            return self._patterns[pattern_name]
        except (KeyError, TypeError):
            raise UnknownPatternError(pattern_name, self._patterns) from None

    def pattern_names(self) -> FrozenSet[str]:
        return frozenset(self._patterns)

    def match(
        self,
        pattern_name: str,
        text: Text,
        offset: int = 0
    ) -> Optional[ArtifactMatch]:
        """
        Шукає перший збіг патерну, що починається не раніше offset.

        Args:
            pattern_name: Ім'я патерну (наприклад, "IPv4")
            text: Текст для пошуку (str або bytes)
            offset: Позиція, з якої починається пошук

        Returns:
            ArtifactMatch або None, якщо збігу немає

        Raises:
            UnknownPatternError: Невідоме ім'я патерну
            ConfigurationError: offset поза межами тексту
        """
        pattern = self.get_pattern(pattern_name)
        text = _as_text(text)

        if not isinstance(offset, int) or offset < 0 or offset > len(text):
            raise ConfigurationError(
                f"Offset {offset!r} is outside of text (length {len(text)})"
            )

        return pattern.search(text, offset)

    def scan(self, pattern_name: str, text: Text) -> Iterator[ArtifactMatch]:
        """
        Лінивий прохід по всіх неперетинаючих збігах у порядку зростання start.

        Ім'я патерну перевіряється одразу, а не при першій ітерації.
        """
        pattern = self.get_pattern(pattern_name)
        return pattern.finditer(_as_text(text))

    def is_match(self, pattern_name: str, text: Text) -> bool:
        """Чи приймає патерн весь рядок цілком."""
        return self.get_pattern(pattern_name).fullmatch(_as_text(text)) is not None

    def scan_all(
        self,
        text: Text,
        pattern_names: Optional[Iterable[str]] = None
    ) -> List[ArtifactMatch]:
        """
        Сканує текст кількома патернами одразу.

        Результати різних патернів можуть перетинатися; для їх
        розв'язання див. utils.conflict_resolution.

        Returns:
            Всі збіги, відсортовані за (start, -довжина, ім'я патерну)
        """
        text = _as_text(text)
        names = list(pattern_names) if pattern_names is not None else list(self._patterns)

        results: List[ArtifactMatch] = []
        for name in names:
            results.extend(self.scan(name, text))

        return sorted(results, key=lambda m: (m.start, -len(m), m.pattern))


# ============ ГЛОБАЛЬНИЙ ЕКЗЕМПЛЯР ============

_default_recognizer: Optional[ArtifactRecognizer] = None
_default_tlds: Optional[TLDTable] = None
_lock = threading.Lock()


def configure_tlds(tlds: Union[TLDTable, Iterable[str]]) -> TLDTable:
    """
    Замінює TLD таблицю глобального розпізнавача.

    Дозволено лише до першого використання match/scan на рівні модуля.

    Raises:
        ConfigurationError: Таблиця некоректна або вже використовується
    """
    global _default_tlds

    table = tlds if isinstance(tlds, TLDTable) else TLDTable.from_iterable(tlds)

    with _lock:
        if _default_recognizer is not None:
            raise ConfigurationError(
                "TLD table is frozen: the default recognizer is already in use"
            )
        _default_tlds = table

    logger.info(f"Default TLD table replaced ({len(table)} TLDs)")
    return table


def get_recognizer() -> ArtifactRecognizer:
    """Повертає глобальний розпізнавач, створюючи його при першому виклику."""
    global _default_recognizer

    if _default_recognizer is None:
        with _lock:
            if _default_recognizer is None:
                tld_table = _default_tlds
                if tld_table is None and config.TLD_FILE:
                    tld_table = TLDTable.from_file(config.TLD_FILE)
                _default_recognizer = ArtifactRecognizer(tld_table)
    return _default_recognizer


def match(pattern_name: str, text: Text, offset: int = 0) -> Optional[ArtifactMatch]:
    return get_recognizer().match(pattern_name, text, offset)


def scan(pattern_name: str, text: Text) -> Iterator[ArtifactMatch]:
    return get_recognizer().scan(pattern_name, text)


def is_match(pattern_name: str, text: Text) -> bool:
    return get_recognizer().is_match(pattern_name, text)


def pattern_names() -> FrozenSet[str]:
    return get_recognizer().pattern_names()
