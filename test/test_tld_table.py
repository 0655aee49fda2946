"""
Unit tests для TLD таблиці.

Запуск: pytest test/test_tld_table.py -v
"""

import dataclasses

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from recognizers.errors import ConfigurationError
from recognizers.tld_table import DEFAULT_TLDS, TLDTable


class TestFromIterable:

    def test_labels_normalized(self):
        """Тест: регістр, пробіли та крапка на початку ігноруються."""
        table = TLDTable.from_iterable([".COM", " Org ", "ua"])

        assert table.labels == frozenset({"com", "org", "ua"})

    def test_contains_is_case_insensitive(self):
        table = TLDTable.from_iterable(["com"])

        assert "COM" in table
        assert "net" not in table
        assert 42 not in table

    def test_duplicates_collapsed(self):
        assert len(TLDTable.from_iterable(["com", "COM", ".com"])) == 1

    def test_empty_table_rejected(self):
        with pytest.raises(ConfigurationError, match="empty"):
            TLDTable.from_iterable([])

    def test_single_string_rejected(self):
        """Тест: рядок 'com' не розбирається на мітки 'c', 'o', 'm'."""
        with pytest.raises(ConfigurationError):
            TLDTable.from_iterable("com")

    @pytest.mark.parametrize("label", ["", "-bad", "bad-", "a b", "co.uk", "x" * 64])
    def test_malformed_label_rejected(self, label):
        with pytest.raises(ConfigurationError, match="Malformed"):
            TLDTable.from_iterable(["com", label])

    def test_non_string_label_rejected(self):
        with pytest.raises(ConfigurationError):
            TLDTable.from_iterable(["com", 42])

    def test_table_is_immutable(self):
        table = TLDTable.default()

        with pytest.raises(dataclasses.FrozenInstanceError):
            table.labels = frozenset({"zzz"})


class TestFromFile:

    def test_iana_format(self, tmp_path):
        path = tmp_path / "tlds-alpha-by-domain.txt"
        path.write_text(
            "# Version 2024010100, Last Updated Mon Jan  1 07:07:01 2024 UTC\n"
            "AAA\n"
            "\n"
            "COM\n"
            "XN--P1AI\n",
            encoding="utf-8"
        )

        table = TLDTable.from_file(path)

        assert list(table) == ["aaa", "com", "xn--p1ai"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Cannot read"):
            TLDTable.from_file(tmp_path / "missing.txt")

    def test_comments_only(self, tmp_path):
        path = tmp_path / "tlds.txt"
        path.write_text("# nothing here\n", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            TLDTable.from_file(path)


class TestDefaultTable:

    def test_common_tlds_present(self):
        table = TLDTable.default()

        for label in ("com", "org", "net", "uk", "ua", "io"):
            assert label in table

    def test_zzz_absent(self):
        assert "zzz" not in TLDTable.default()

    def test_default_labels_are_valid(self):
        assert len(TLDTable.default()) == len(set(DEFAULT_TLDS))

    def test_longer_labels_first_in_pattern(self):
        """Тест: 'com' стоїть раніше 'co', щоб не програвати йому."""
        source = TLDTable.from_iterable(["co", "com"]).pattern_source()
        assert source == "(?i:com|co)"
