"""Tests for the Markdown partition format."""

from datetime import date, datetime

import pytest

from braglog.core.entries import BragEntry
from braglog.core.journal import format_partition, parse_partition


def entry(y, m, d, hh, mm, ss, content):
    return BragEntry(datetime(y, m, d, hh, mm, ss), content)


class TestFormatPartition:
    def test_exact_layout(self):
        """Dates ascend, entries sort by time, a blank line follows each day."""
        partition = {
            date(2025, 11, 3): [entry(2025, 11, 3, 9, 30, 0, "Another")],
            date(2025, 11, 1): [
                entry(2025, 11, 1, 12, 0, 0, "Mid"),
                entry(2025, 11, 1, 10, 0, 0, "First"),
            ],
        }

        assert format_partition(2025, partition) == (
            "# Brags 2025\n"
            "\n"
            "## 2025-11-01\n"
            "* 10:00:00 First\n"
            "* 12:00:00 Mid\n"
            "\n"
            "## 2025-11-03\n"
            "* 09:30:00 Another\n"
            "\n"
        )

    def test_empty_partition(self):
        assert format_partition(2024, {}) == "# Brags 2024\n\n"

    def test_empty_day_is_omitted(self):
        text = format_partition(2025, {date(2025, 1, 1): []})
        assert "## 2025-01-01" not in text

    def test_same_time_keeps_insertion_order(self):
        partition = {
            date(2025, 1, 1): [
                entry(2025, 1, 1, 8, 0, 0, "one"),
                entry(2025, 1, 1, 8, 0, 0, "two"),
            ]
        }
        text = format_partition(2025, partition)
        assert text.index("one") < text.index("two")


class TestParsePartition:
    def test_round_trip(self):
        partition = {
            date(2025, 3, 1): [
                entry(2025, 3, 1, 9, 0, 0, "Shipped the importer"),
                entry(2025, 3, 1, 17, 45, 12, "[PR #42] Fix race - https://github.com/o/r/pull/42"),
            ],
            date(2025, 3, 2): [entry(2025, 3, 2, 0, 0, 1, "Mentored a new hire: pairing on tests")],
        }

        assert parse_partition(format_partition(2025, partition)) == partition

    @pytest.mark.parametrize("separator", ["\u2028", "\u2029", "\x85", "\x0b", "\x0c", "\x1c", "\x1e"])
    def test_unicode_line_separators_stay_in_content(self, separator):
        content = f"Shipped search{separator}v2"
        partition = {date(2025, 3, 1): [entry(2025, 3, 1, 10, 0, 0, content)]}

        assert parse_partition(format_partition(2025, partition)) == partition

    def test_crlf_line_endings(self):
        parsed = parse_partition("## 2025-01-05\r\n* 14:30:00 Windows edit\r\n")
        assert parsed == {date(2025, 1, 5): [entry(2025, 1, 5, 14, 30, 0, "Windows edit")]}

    def test_accepts_hours_and_minutes(self):
        parsed = parse_partition("## 2025-01-05\n* 14:30 Hand-written entry\n")
        assert parsed == {date(2025, 1, 5): [entry(2025, 1, 5, 14, 30, 0, "Hand-written entry")]}

    def test_malformed_header_drops_its_entries(self):
        text = (
            "# Brags 2025\n"
            "## 2025-13-45\n"
            "* 10:00:00 Lost\n"
            "## 2025-01-02\n"
            "* 11:00:00 Kept\n"
        )

        parsed = parse_partition(text)

        assert list(parsed) == [date(2025, 1, 2)]
        assert [e.content for e in parsed[date(2025, 1, 2)]] == ["Kept"]

    def test_malformed_entries_are_skipped(self):
        text = (
            "## 2025-01-02\n"
            "* 25:99:00 Bad time\n"
            "* nospace\n"
            "* 10:00:00 Good\n"
        )

        parsed = parse_partition(text)

        assert [e.content for e in parsed[date(2025, 1, 2)]] == ["Good"]

    def test_entries_before_any_header_are_ignored(self):
        assert parse_partition("* 10:00:00 Orphan\n") == {}

    def test_free_text_is_ignored(self):
        text = "# Brags 2025\nSome notes I typed here\n\n## 2025-02-02\n* 08:00:00 Real\nmore prose\n"
        parsed = parse_partition(text)
        assert [e.content for e in parsed[date(2025, 2, 2)]] == ["Real"]

    def test_malformed_header_is_logged(self, caplog):
        parse_partition("## yesterday\n")
        assert "Skipping malformed date header" in caplog.text
