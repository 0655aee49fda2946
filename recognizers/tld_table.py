"""
Таблиця доменів верхнього рівня (TLD) для валідації HOST_NAME.

Таблиця будується один раз, нормалізується до нижнього регістру
та валідується при створенні. Після цього вона лише читається.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, Iterable, Iterator, Union

from recognizers.errors import ConfigurationError

logger = logging.getLogger(__name__)


GENERIC_TLDS = (
    "aero", "app", "arpa", "asia", "biz", "blog", "cat", "cloud", "com",
    "coop", "dev", "edu", "gov", "info", "int", "jobs", "mil", "mobi",
    "museum", "name", "net", "online", "org", "page", "post", "pro", "site",
    "shop", "tech", "tel", "travel", "xxx", "xyz",
)

COUNTRY_CODE_TLDS = (
    "ac", "ad", "ae", "af", "ag", "ai", "al", "am", "ao", "aq", "ar", "as",
    "at", "au", "aw", "ax", "az", "ba", "bb", "bd", "be", "bf", "bg", "bh",
    "bi", "bj", "bm", "bn", "bo", "br", "bs", "bt", "bw", "by", "bz", "ca",
    "cc", "cd", "cf", "cg", "ch", "ci", "ck", "cl", "cm", "cn", "co", "cr",
    "cu", "cv", "cw", "cx", "cy", "cz", "de", "dj", "dk", "dm", "do", "dz",
    "ec", "ee", "eg", "er", "es", "et", "eu", "fi", "fj", "fk", "fm", "fo",
    "fr", "ga", "gb", "gd", "ge", "gf", "gg", "gh", "gi", "gl", "gm", "gn",
    "gp", "gq", "gr", "gs", "gt", "gu", "gw", "gy", "hk", "hm", "hn", "hr",
    "ht", "hu", "id", "ie", "il", "im", "in", "io", "iq", "ir", "is", "it",
    "je", "jm", "jo", "jp", "ke", "kg", "kh", "ki", "km", "kn", "kp", "kr",
    "kw", "ky", "kz", "la", "lb", "lc", "li", "lk", "lr", "ls", "lt", "lu",
    "lv", "ly", "ma", "mc", "md", "me", "mg", "mh", "mk", "ml", "mm", "mn",
    "mo", "mp", "mq", "mr", "ms", "mt", "mu", "mv", "mw", "mx", "my", "mz",
    "na", "nc", "ne", "nf", "ng", "ni", "nl", "no", "np", "nr", "nu", "nz",
    "om", "pa", "pe", "pf", "pg", "ph", "pk", "pl", "pm", "pn", "pr", "ps",
    "pt", "pw", "py", "qa", "re", "ro", "rs", "ru", "rw", "sa", "sb", "sc",
    "sd", "se", "sg", "sh", "si", "sk", "sl", "sm", "sn", "so", "sr", "ss",
    "st", "su", "sv", "sx", "sy", "sz", "tc", "td", "tf", "tg", "th", "tj",
    "tk", "tl", "tm", "tn", "to", "tr", "tt", "tv", "tw", "tz", "ua", "ug",
    "uk", "us", "uy", "uz", "va", "vc", "ve", "vg", "vi", "vn", "vu", "wf",
    "ws", "ye", "yt", "za", "zm", "zw",
)

DEFAULT_TLDS = GENERIC_TLDS + COUNTRY_CODE_TLDS

_LABEL_RE = re.compile(r"^[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?$")


@dataclass(frozen=True)
class TLDTable:
    """
    Незмінний whitelist TLD міток.

    Створюйте через from_iterable() або from_file() - обидва методи
    нормалізують регістр і відхиляють порожні чи некоректні таблиці.
    """
    labels: FrozenSet[str]

    @classmethod
    def from_iterable(cls, tlds: Iterable[str]) -> "TLDTable":
        """
        Будує таблицю з довільної колекції міток.

        Args:
            tlds: Мітки TLD (регістр та крапка на початку ігноруються)

        Returns:
            Валідована TLDTable

        Raises:
            ConfigurationError: Таблиця порожня або містить некоректну мітку
        """
        if isinstance(tlds, (str, bytes)):
            raise ConfigurationError(
                "TLD table must be a collection of labels, not a single string"
            )

        labels = set()
        for raw in tlds:
            if not isinstance(raw, str):
                raise ConfigurationError(f"TLD label must be a string, got {raw!r}")

            label = raw.strip().lstrip(".").lower()
            if not _LABEL_RE.match(label):
                raise ConfigurationError(f"Malformed TLD label: {raw!r}")

            labels.add(label)

        if not labels:
            raise ConfigurationError("TLD table is empty")

        return cls(frozenset(labels))

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "TLDTable":
        """
        Завантажує таблицю у форматі IANA tlds-alpha-by-domain.txt.

        Одна мітка на рядок, рядки що починаються з '#' та порожні рядки
        пропускаються.
        """
        path = Path(path)
        try:
            lines = path.read_text(encoding="utf-8").splitlines()
        except OSError as e:
            raise ConfigurationError(f"Cannot read TLD file {path}: {e}") from e

        labels = [
            line for line in (raw.strip() for raw in lines)
            if line and not line.startswith("#")
        ]

        table = cls.from_iterable(labels)
        logger.info(f"Loaded {len(table)} TLDs from {path}")
        return table

    @classmethod
    def default(cls) -> "TLDTable":
        return cls.from_iterable(DEFAULT_TLDS)

    def __contains__(self, label: object) -> bool:
        return isinstance(label, str) and label.lower() in self.labels

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.labels))

    def __len__(self) -> int:
        return len(self.labels)

    def pattern_source(self) -> str:
        """
        Альтернація всіх міток для вбудовування в регулярний вираз.

        Довші мітки йдуть першими, щоб 'com' не програвав 'co'.
        """
        ordered = sorted(self.labels, key=lambda label: (-len(label), label))
        return "(?i:{})".format("|".join(re.escape(label) for label in ordered))
