"""Markdown journal partition format - parse and format, no I/O.

One partition holds one year:

    # Brags 2025

    ## 2025-11-01
    * 10:00:00 First
    * 12:00:00 Mid

    ## 2025-11-03
    * 09:30:00 Another

The file is also meant to be edited by hand, so parsing is lenient: a bad
date header or entry line is logged and skipped, never fatal.
"""

import logging
from datetime import date, datetime, time

from .entries import BragEntry

logger = logging.getLogger(__name__)

DATE_HEADER_PREFIX = "## "
ENTRY_PREFIX = "* "
DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M:%S"


def _parse_date_header(line: str) -> date | None:
    date_str = line[len(DATE_HEADER_PREFIX):].strip()
    try:
        return datetime.strptime(date_str, DATE_FORMAT).date()
    except ValueError as e:
        logger.warning(f"Skipping malformed date header: '{date_str}'. Error: {e}")
        return None


def _parse_time(value: str) -> time:
    for fmt in (TIME_FORMAT, "%H:%M"):
        try:
            return datetime.strptime(value, fmt).time()
        except ValueError:
            continue
    raise ValueError(f"invalid time '{value}'")


def _parse_entry(line: str, entry_date: date) -> BragEntry | None:
    parts = line[len(ENTRY_PREFIX):].split(" ", 1)
    if len(parts) != 2:
        logger.warning(f"Skipping entry with invalid format on {entry_date}: '{line}'")
        return None

    time_str, content = parts
    try:
        return BragEntry(datetime.combine(entry_date, _parse_time(time_str)), content)
    except ValueError as e:
        logger.warning(f"Skipping malformed entry on {entry_date}: '{line}'. Error: {e}")
        return None


def parse_partition(text: str) -> dict[date, list[BragEntry]]:
    """
    Parse a partition into entries grouped by date.

    Entries under a malformed header are dropped until the next valid header.
    Lines that are neither headers nor entries are ignored.

    Only "\\n" ends a line; other Unicode separators belong to entry content.
    """
    entries_by_date: dict[date, list[BragEntry]] = {}
    current_date: date | None = None

    for raw_line in text.split("\n"):
        line = raw_line.removesuffix("\r")
        if line.startswith(DATE_HEADER_PREFIX):
            current_date = _parse_date_header(line)
        elif line.startswith(ENTRY_PREFIX) and current_date is not None:
            entry = _parse_entry(line, current_date)
            if entry:
                entries_by_date.setdefault(current_date, []).append(entry)

    return entries_by_date


def format_partition(year: int, entries_by_date: dict[date, list[BragEntry]]) -> str:
    """Render a partition with dates ascending and entries by time of day."""
    lines = [f"# Brags {year}", ""]

    for entry_date in sorted(entries_by_date):
        entries = entries_by_date[entry_date]
        if not entries:
            continue
        lines.append(f"{DATE_HEADER_PREFIX}{entry_date.strftime(DATE_FORMAT)}")
        for entry in sorted(entries, key=lambda e: e.timestamp):
            lines.append(f"{ENTRY_PREFIX}{entry.timestamp.strftime(TIME_FORMAT)} {entry.content}")
        lines.append("")

    return "\n".join(lines) + "\n"
