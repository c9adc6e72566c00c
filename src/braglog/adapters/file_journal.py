"""File-based journal storage adapter."""

import logging
import os
from datetime import date
from pathlib import Path

from braglog.core.entries import BragEntry, DateRange
from braglog.core.journal import format_partition, parse_partition
from braglog.ports.journal_store import InitializationError

logger = logging.getLogger(__name__)

README_TEMPLATE = """\
# Bragging Document

This is my bragging document where I keep track of my accomplishments.

Both you and your manager forget what you've achieved over time, which makes
performance reviews harder than they need to be. A regular record helps with
reviews, manager transitions, and career reflection.

When writing entries, remember to:

* Capture everything, even small wins you think you'll remember (you won't)
* Include "fuzzy work" like mentoring, process improvements, and code quality efforts
* Focus on impact and results, not just activities
* Record what you learned and skills you're developing

Entries live in one file per year (`brags-<year>.md`).

Inspired by [Julia Evans' blog post on brag documents](https://jvns.ca/blog/brag-documents/)
"""


def _atomic_write(path: Path, content: str) -> None:
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(content, encoding="utf-8")
    os.replace(tmp, path)


class MarkdownJournalStore:
    """
    Year-partitioned Markdown journal storage.

    Implements JournalStore protocol. Each year gets a brags-<year>.md file,
    rewritten in full on every save so it stays in chronological order.
    No locking: one writer at a time.
    """

    def __init__(self, docs_location: Path | str):
        self.docs_location = Path(docs_location).expanduser()

    def partition_path(self, year: int) -> Path:
        """Get the file path for a given year."""
        return self.docs_location / f"brags-{year}.md"

    def _load_partition(self, year: int) -> dict[date, list[BragEntry]]:
        path = self.partition_path(year)
        if not path.exists():
            return {}
        return parse_partition(path.read_text(encoding="utf-8"))

    def save(self, entry: BragEntry) -> bool:
        """Store an entry. Returns False if identical content already exists that year."""
        year = entry.date.year
        partition = self._load_partition(year)

        for entries in partition.values():
            if any(existing.content == entry.content for existing in entries):
                logger.debug(f"Skipping duplicate brag entry: {entry.content}")
                return False

        partition.setdefault(entry.date, []).append(entry)
        _atomic_write(self.partition_path(year), format_partition(year, partition))
        logger.debug(f"Saved brag entry for {entry.date}: {entry.content}")
        return True

    def find_by_date_range(self, date_range: DateRange) -> list[BragEntry]:
        """All entries dated within the range, oldest first."""
        entries = []
        for year in date_range.years():
            for entry_date, day_entries in self._load_partition(year).items():
                if date_range.contains(entry_date):
                    entries.extend(day_entries)

        logger.debug(f"Found {len(entries)} entries in date range {date_range.start} to {date_range.end}")
        return sorted(entries, key=lambda e: e.timestamp)

    def is_initialized(self) -> bool:
        """Check the journal directory exists and is a git repository."""
        return self.docs_location.is_dir() and (self.docs_location / ".git").exists()

    def initialize(self) -> None:
        """Write the README into an existing git repository."""
        if not self.docs_location.is_dir():
            raise InitializationError(
                f"Directory {self.docs_location} does not exist. "
                "Please create a git repository at this location first"
            )

        if not (self.docs_location / ".git").exists():
            raise InitializationError(
                f"{self.docs_location} is not a git repository. "
                "Please initialize git in this directory: git init"
            )

        readme = self.docs_location / "README.md"
        if not readme.exists():
            readme.write_text(README_TEMPLATE, encoding="utf-8")
            logger.info(f"Initialized bragging document at {self.docs_location}")
