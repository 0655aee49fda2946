"""
Граматика мережевих та файлових артефактів.

Архітектурна стратегія: кожен іменований патерн будується з уже
визначених нижчих патернів (примітиви → числа → мережеві ідентифікатори →
імена → файлові токени → шляхи). Там, де форми конкурують, порядок
альтернатив є частиною граматики: перша успішна альтернатива перемагає.

Патерни створюються один раз і не змінюються, тож їх можна безпечно
використовувати з будь-якої кількості потоків.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional, Tuple

from recognizers.tld_table import TLDTable

logger = logging.getLogger(__name__)


# ============ ПРИМІТИВИ ============

DIGIT = "[0-9]"
HEX_DIGIT = "[0-9A-Fa-f]"
ALPHA = "[A-Za-z]"
ALNUM = "[A-Za-z0-9]"
WORD_CHAR = "[A-Za-z0-9_]"

# Символи, які можна екранувати зворотним слешем всередині імені файлу.
# Літери, цифри, '.', '/' та '\' сюди не входять: інакше роздільники
# Windows шляхів ('\bar', '\.') поглиналися б як екрановані символи.
ESCAPED_CHAR = r"""\\[ !"#$%&'()*+,;<=>?@\[\]^`{|}~]"""


def ordered_choice(*sources: str) -> str:
    """Альтернація з пріоритетом: форми пробуються зліва направо."""
    return "(?:{})".format("|".join(sources))


def optional(source: str) -> str:
    return f"(?:{source})?"


def repeat(source: str, lower: int, upper: int) -> str:
    if lower == upper:
        return f"(?:{source}){{{lower}}}"
    return f"(?:{source}){{{lower},{upper}}}"


# ============ ЧИСЛА ТА СЛОВА ============

# 250-255, потім 200-249, потім 0-199. "256" дає "25", а не відмову:
# третя форма бере максимум дві цифри, якщо перша не 0 чи 1.
OCTET = ordered_choice("25[0-5]", "2[0-4][0-9]", "[01]?[0-9]{1,2}")

WORD = ordered_choice(
    f"{ALPHA}+(?:'{ALPHA}+)+",
    f"{ALPHA}{{2,}}",
)


# ============ МЕРЕЖЕВІ ІДЕНТИФІКАТОРИ ============

MAC = (
    f"(?<!{HEX_DIGIT})"
    f"{HEX_DIGIT}{{2}}(?::{HEX_DIGIT}{{2}}){{5}}"
    f"(?!{HEX_DIGIT})"
)

IPV4_ADDR = OCTET + repeat(r"\." + OCTET, 3, 3)
IPV4 = IPV4_ADDR + optional(f"/{DIGIT}{{1,2}}")

HEX_GROUP = f"{HEX_DIGIT}{{1,4}}"


def _ipv6_head(groups: int) -> str:
    """Групи ліворуч від '::'."""
    if groups == 0:
        return ""
    if groups == 1:
        return HEX_GROUP
    return repeat(f"{HEX_GROUP}:", groups - 1, groups - 1) + HEX_GROUP


def _ipv6_tail(max_groups: int) -> str:
    """До max_groups груп праворуч від '::' (жадібно)."""
    if max_groups <= 0:
        return ""
    if max_groups == 1:
        return optional(HEX_GROUP)
    return optional(HEX_GROUP + repeat(f":{HEX_GROUP}", 0, max_groups - 1))


def _ipv6_forms() -> Tuple[str, ...]:
    """
    Форми IPv6 у порядку пріоритету.

    1. Повна форма з 8 груп.
    2. 6 груп + вбудована IPv4 адреса.
    3. Стиснуті форми з вбудованою IPv4 (::ffff:a.b.c.d тощо).
    4. Стиснуті hex форми, по одній на кожну кількість груп перед '::'.

    Форми з IPv4 йдуть раніше hex форм, бо інакше '::ffff:192' стало б
    збігом раніше, ніж рушій дійде до крапок.
    """
    forms = [
        repeat(f"{HEX_GROUP}:", 7, 7) + HEX_GROUP,
        repeat(f"{HEX_GROUP}:", 6, 6) + IPV4_ADDR,
    ]

    # IPv4 займає дві групи, '::' замінює щонайменше одну
    for head in range(0, 6):
        middle = 5 - head
        between = repeat(f"{HEX_GROUP}:", 0, middle) if middle else ""
        forms.append(_ipv6_head(head) + "::" + between + IPV4_ADDR)

    for head in range(0, 8):
        forms.append(_ipv6_head(head) + "::" + _ipv6_tail(7 - head))

    return tuple(forms)


# Не всередині слова чи довшого ланцюжка груп: "12345::1" та "Foo::bead" не IPv6.
# Двокрапка без hex після адреси дозволена ("fe80::1: link up").
IPV6 = (
    "(?<![A-Za-z0-9:])"
    + ordered_choice(*_ipv6_forms())
    + optional(f"/{DIGIT}{{1,3}}")
    + f"(?![A-Za-z0-9]|:{HEX_DIGIT})"
)


# ============ ІМЕНА ============

HOST_LABEL = f"{ALNUM}(?:[A-Za-z0-9-]{{0,61}}{ALNUM})?"

# Кандидат починається тільки на межі ланцюжка міток, не з середини.
HOST_NAME_START = r"(?<![A-Za-z0-9.-])"
# Мітка, що продовжується після відомого TLD ('foo.community', 'foo.com.zzz'),
# відкидає кандидата повністю.
HOST_NAME_END = r"(?![A-Za-z0-9-]|\.[A-Za-z0-9])"

USER_NAME = f"{ALPHA}[A-Za-z0-9_.]*"

# Початок USER_NAME у складі EMAIL_ADDR: не після літери, "_" чи ".",
# а цифри перед ним (до 8) пропускаються, тож "1234bob@" дає "bob@".
EMAIL_USER_START = "(?<![A-Za-z_.])" + "".join(
    f"(?<![A-Za-z_.]{DIGIT}{{{count}}})" for count in range(1, 9)
)

PHONE_NUMBER = (
    optional("1-")
    + optional(f"{DIGIT}{{3}}-")
    + f"{DIGIT}{{3}}-{DIGIT}{{4}}"
    + optional(f"x{DIGIT}+")
)

IDENTIFIER = f"_*{ALPHA}{WORD_CHAR}*"


def host_name(tld_table: TLDTable) -> str:
    return (
        f"{HOST_NAME_START}(?:{HOST_LABEL}\\.)+"
        f"{tld_table.pattern_source()}{HOST_NAME_END}"
    )


# ============ ФАЙЛОВІ ТОКЕНИ ============

FILE_EXT = rf"\.{ALNUM}+"
FILE_NAME = "(?:[A-Za-z0-9_-]|{})+".format(ESCAPED_CHAR)
FILE = FILE_NAME + optional(FILE_EXT)
DIRECTORY = ordered_choice(FILE_NAME, r"\.\.", r"\.")


# ============ ШЛЯХИ ============

def relative_path(separator: str) -> str:
    """Компоненти DIRECTORY через роздільник; хоча б один роздільник."""
    return f"(?:{DIRECTORY}{separator})+" + optional(DIRECTORY)


def absolute_path(root: str, separator: str) -> str:
    """Корінь + компоненти FILE_NAME; '.' та '..' обривають збіг."""
    components = FILE_NAME + f"(?:{separator}{FILE_NAME})*" + f"{separator}?"
    return root + optional(components)


RELATIVE_UNIX_PATH = relative_path("/")
ABSOLUTE_UNIX_PATH = absolute_path("/", "/")
RELATIVE_WINDOWS_PATH = relative_path(r"\\")
ABSOLUTE_WINDOWS_PATH = absolute_path(rf"{ALPHA}:\\", r"\\")


# ============ ТИПИ ============

@dataclass(frozen=True)
class ArtifactMatch:
    """
    Результат застосування патерну до тексту.

    end не включається: text == source_text[start:end].
    alternative заповнюється тільки для об'єднань (IP, *_PATH).
    """
    pattern: str
    text: str
    start: int
    end: int
    alternative: Optional[str] = None

    @property
    def span(self) -> Tuple[int, int]:
        return self.start, self.end

    def __len__(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class ArtifactPattern:
    """
    Іменоване незмінне граматичне правило.

    Для об'єднань alternatives містить патерни-учасники в порядку
    пріоритету; скомпільований вираз позначає кожного учасника
    іменованою групою, щоб знати, хто саме спрацював.
    """
    name: str
    source: str
    alternatives: Tuple["ArtifactPattern", ...] = ()
    regex: "re.Pattern[str]" = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if self.alternatives:
            compiled_source = "|".join(
                f"(?P<{alt.name}>{alt.source})" for alt in self.alternatives
            )
        else:
            compiled_source = self.source
        object.__setattr__(self, "regex", re.compile(compiled_source))

    @classmethod
    def union(cls, name: str, *alternatives: "ArtifactPattern") -> "ArtifactPattern":
        return cls(
            name=name,
            source=ordered_choice(*(alt.source for alt in alternatives)),
            alternatives=tuple(alternatives),
        )

    def _to_match(self, m: "re.Match[str]") -> ArtifactMatch:
        return ArtifactMatch(
            pattern=self.name,
            text=m.group(0),
            start=m.start(),
            end=m.end(),
            alternative=m.lastgroup if self.alternatives else None,
        )

    def search(self, text: str, offset: int = 0) -> Optional[ArtifactMatch]:
        m = self.regex.search(text, offset)
        return self._to_match(m) if m else None

    def fullmatch(self, text: str) -> Optional[ArtifactMatch]:
        m = self.regex.fullmatch(text)
        return self._to_match(m) if m else None

    def finditer(self, text: str) -> Iterator[ArtifactMatch]:
        for m in self.regex.finditer(text):
            yield self._to_match(m)


# ============ РЕЄСТР ============

PATTERN_ORDER = (
    "WORD", "OCTET",
    "MAC", "IPv4", "IPv6", "IP",
    "HOST_NAME", "USER_NAME", "EMAIL_ADDR", "PHONE_NUMBER", "IDENTIFIER",
    "FILE_EXT", "FILE_NAME", "FILE", "DIRECTORY",
    "RELATIVE_UNIX_PATH", "ABSOLUTE_UNIX_PATH", "UNIX_PATH",
    "RELATIVE_WINDOWS_PATH", "ABSOLUTE_WINDOWS_PATH", "WINDOWS_PATH",
    "RELATIVE_PATH", "ABSOLUTE_PATH", "PATH",
)


def build_patterns(tld_table: TLDTable) -> Dict[str, ArtifactPattern]:
    """
    Будує повний реєстр патернів для заданої TLD таблиці.

    Args:
        tld_table: Валідована таблиця TLD для HOST_NAME та EMAIL_ADDR

    Returns:
        Словник ім'я → ArtifactPattern у порядку PATTERN_ORDER
    """
    host = host_name(tld_table)

    simple = {
        "WORD": WORD,
        "OCTET": OCTET,
        "MAC": MAC,
        "IPv4": IPV4,
        "IPv6": IPV6,
        "HOST_NAME": host,
        "USER_NAME": USER_NAME,
        "EMAIL_ADDR": f"{EMAIL_USER_START}{USER_NAME}@{host}",
        "PHONE_NUMBER": PHONE_NUMBER,
        "IDENTIFIER": IDENTIFIER,
        "FILE_EXT": FILE_EXT,
        "FILE_NAME": FILE_NAME,
        "FILE": FILE,
        "DIRECTORY": DIRECTORY,
        "RELATIVE_UNIX_PATH": RELATIVE_UNIX_PATH,
        "ABSOLUTE_UNIX_PATH": ABSOLUTE_UNIX_PATH,
        "RELATIVE_WINDOWS_PATH": RELATIVE_WINDOWS_PATH,
        "ABSOLUTE_WINDOWS_PATH": ABSOLUTE_WINDOWS_PATH,
    }
    patterns = {name: ArtifactPattern(name, source) for name, source in simple.items()}

    unions = {
        "IP": ("IPv4", "IPv6"),
        "UNIX_PATH": ("RELATIVE_UNIX_PATH", "ABSOLUTE_UNIX_PATH"),
        "WINDOWS_PATH": ("RELATIVE_WINDOWS_PATH", "ABSOLUTE_WINDOWS_PATH"),
        "RELATIVE_PATH": ("RELATIVE_UNIX_PATH", "RELATIVE_WINDOWS_PATH"),
        "ABSOLUTE_PATH": ("ABSOLUTE_UNIX_PATH", "ABSOLUTE_WINDOWS_PATH"),
        "PATH": (
            "RELATIVE_UNIX_PATH",
            "ABSOLUTE_UNIX_PATH",
            "RELATIVE_WINDOWS_PATH",
            "ABSOLUTE_WINDOWS_PATH",
        ),
    }
    for name, members in unions.items():
        patterns[name] = ArtifactPattern.union(
            name, *(patterns[member] for member in members)
        )

    logger.info(f"Built {len(patterns)} artifact patterns ({len(tld_table)} TLDs)")
    return {name: patterns[name] for name in PATTERN_ORDER}
