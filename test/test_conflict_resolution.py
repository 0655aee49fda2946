"""
Unit tests для розв'язання конфліктів між артефактами.

Запуск: pytest test/test_conflict_resolution.py -v
"""

import pytest
from presidio_analyzer import RecognizerResult

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from utils.conflict_resolution import (
    LengthBasedResolver,
    PriorityBasedResolver,
    ScoreBasedResolver,
    remove_overlapping_entities,
)


def result(entity_type, start, end, score=0.9):
    return RecognizerResult(entity_type=entity_type, start=start, end=end, score=score)


class TestPriorityBasedResolver:

    def test_email_beats_host_name(self):
        """Тест: EMAIL_ADDR перемагає HOST_NAME всередині себе."""
        email = result("EMAIL_ADDR", 0, 15, score=0.5)
        host = result("HOST_NAME", 4, 15, score=0.99)

        resolved = PriorityBasedResolver.resolve([host, email])

        assert resolved == [email]

    def test_absolute_path_beats_relative(self):
        absolute = result("ABSOLUTE_UNIX_PATH", 0, 12)
        relative = result("RELATIVE_UNIX_PATH", 1, 12)

        assert PriorityBasedResolver.resolve([relative, absolute]) == [absolute]

    def test_same_priority_prefers_longer(self):
        short = result("IPv4", 0, 8)
        long = result("IPv6", 0, 18)

        assert PriorityBasedResolver.resolve([short, long]) == [long]

    def test_unknown_type_has_lowest_priority(self):
        custom = result("CUSTOM", 0, 20, score=1.0)
        word = result("WORD", 0, 5)

        assert PriorityBasedResolver.resolve([custom, word]) == [word]


class TestOtherResolvers:

    def test_score_based(self):
        low = result("HOST_NAME", 0, 11, score=0.5)
        high = result("WORD", 0, 7, score=0.8)

        assert ScoreBasedResolver.resolve([low, high]) == [high]

    def test_length_based(self):
        short = result("EMAIL_ADDR", 4, 10, score=1.0)
        long = result("WORD", 0, 12, score=0.1)

        assert LengthBasedResolver.resolve([short, long]) == [long]


class TestRemoveOverlappingEntities:

    @pytest.mark.parametrize("strategy", ["priority", "score", "length"])
    def test_non_overlapping_kept_in_order(self, strategy):
        first = result("IPv4", 0, 8)
        second = result("MAC", 10, 27)
        third = result("HOST_NAME", 30, 41)

        resolved = remove_overlapping_entities([third, first, second], strategy)

        assert resolved == [first, second, third]

    def test_adjacent_results_do_not_overlap(self):
        left = result("WORD", 0, 3)
        right = result("WORD", 3, 6)

        assert remove_overlapping_entities([left, right]) == [left, right]

    def test_empty(self):
        assert remove_overlapping_entities([]) == []

    def test_unknown_strategy(self):
        with pytest.raises(ValueError, match="Unknown strategy"):
            remove_overlapping_entities([result("WORD", 0, 3)], strategy="random")
