"""
Вибір одного артефакту там, де результати різних патернів перетинаються.

Типові перетини: HOST_NAME всередині EMAIL_ADDR, відносний шлях
всередині абсолютного, WORD всередині чого завгодно.
"""

from typing import Dict, List, Tuple

from presidio_analyzer import RecognizerResult

DEFAULT_PRIORITY = 100


def _overlaps(a: RecognizerResult, b: RecognizerResult) -> bool:
    return a.start < b.end and b.start < a.end


class _GreedyResolver:
    """
    Результати перебираються за rank(); результат відкидається, якщо
    перетинається з уже прийнятим. Повертається впорядкованим за start.
    """

    @staticmethod
    def rank(result: RecognizerResult) -> Tuple:
        raise NotImplementedError

    @classmethod
    def resolve(cls, results: List[RecognizerResult]) -> List[RecognizerResult]:
        kept: List[RecognizerResult] = []
        for candidate in sorted(results, key=cls.rank):
            if not any(_overlaps(candidate, other) for other in kept):
                kept.append(candidate)

        return sorted(kept, key=lambda r: r.start)


class ScoreBasedResolver(_GreedyResolver):
    """Вищий score перемагає."""

    @staticmethod
    def rank(result: RecognizerResult) -> Tuple:
        return (-result.score, result.start, result.end)


class PriorityBasedResolver(_GreedyResolver):
    """
    Перемагає тип з меншим числом у ENTITY_PRIORITIES, далі довший
    фрагмент, далі вищий score.

    Складений артефакт важливіший за свої частини.
    """

    ENTITY_PRIORITIES: Dict[str, int] = {
        "EMAIL_ADDR": 1,

        "IPv6": 2,
        "IPv4": 2,
        "IP": 2,
        "MAC": 2,

        "HOST_NAME": 3,
        "PHONE_NUMBER": 3,

        "ABSOLUTE_UNIX_PATH": 4,
        "ABSOLUTE_WINDOWS_PATH": 4,
        "ABSOLUTE_PATH": 4,
        "RELATIVE_UNIX_PATH": 5,
        "RELATIVE_WINDOWS_PATH": 5,
        "RELATIVE_PATH": 5,
        "UNIX_PATH": 5,
        "WINDOWS_PATH": 5,
        "PATH": 5,

        "FILE": 6,
        "USER_NAME": 7,
        "IDENTIFIER": 8,
        "WORD": 10
    }

    @staticmethod
    def rank(result: RecognizerResult) -> Tuple:
        priority = PriorityBasedResolver.ENTITY_PRIORITIES.get(
            result.entity_type, DEFAULT_PRIORITY
        )
        return (priority, result.start - result.end, -result.score, result.start)


class LengthBasedResolver(_GreedyResolver):
    """Довший фрагмент перемагає; при рівній довжині вищий score."""

    @staticmethod
    def rank(result: RecognizerResult) -> Tuple:
        return (result.start - result.end, -result.score, result.start)


RESOLVERS = {
    "score": ScoreBasedResolver,
    "priority": PriorityBasedResolver,
    "length": LengthBasedResolver,
}


def remove_overlapping_entities(
    results: List[RecognizerResult],
    strategy: str = "priority"
) -> List[RecognizerResult]:
    """
    Залишає підмножину results без перетинів.

    Raises:
        ValueError: Невідома strategy
    """
    try:
        resolver = RESOLVERS[strategy]
    except KeyError:
        raise ValueError(
            f"Unknown strategy '{strategy}'. Available: {sorted(RESOLVERS)}"
        ) from None

    return resolver.resolve(results)
