"""
Допоміжні функції для порівняння та перебору рядків.

Публічні: each_substring, each_unique_substring, common_prefix,
common_suffix, uncommon_substring (реекспортуються з utils).
"""

from typing import Iterator, Tuple


def each_substring(text: str, min_length: int = 1) -> Iterator[Tuple[str, int]]:
    """
    Перебирає всі підрядки довжиною не менше min_length.

    Yields:
        (підрядок, індекс початку)
    """
    length = len(text)
    for index in range(length):
        for end in range(index + min_length, length + 1):
            yield text[index:end], index


def each_unique_substring(text: str, min_length: int = 1) -> Iterator[Tuple[str, int]]:
    """Як each_substring, але кожен різний підрядок тільки один раз."""
    seen = set()
    for substring, index in each_substring(text, min_length):
        if substring not in seen:
            seen.add(substring)
            yield substring, index


def common_prefix(one: str, two: str) -> str:
    """Найдовший спільний префікс; '' якщо рядок порожній."""
    size = min(len(one), len(two))
    for i in range(size):
        if one[i] != two[i]:
            return one[:i]
    return one[:size]


def common_suffix(one: str, two: str) -> str:
    """Найдовший спільний суфікс; '' якщо рядок порожній."""
    size = min(len(one), len(two))
    for i in range(1, size + 1):
        if one[-i] != two[-i]:
            return one[len(one) - i + 1:]
    return one[len(one) - size:]


def uncommon_substring(one: str, two: str) -> str:
    """
    Частина one між спільним префіксом і спільним суфіксом.

    Суфікс шукається тільки після префікса, тому вони не перекриваються.
    """
    prefix = common_prefix(one, two)
    rest_one = one[len(prefix):]
    rest_two = two[len(prefix):]
    suffix = common_suffix(rest_one, rest_two)
    return rest_one[:len(rest_one) - len(suffix)]
