"""Journal entry and date range value types - no I/O dependencies."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterator


@dataclass(frozen=True)
class BragEntry:
    """One accomplishment line in the journal."""

    timestamp: datetime
    content: str

    def __post_init__(self):
        if not self.content or not self.content.strip():
            raise ValueError("Entry content must not be blank")
        if "\n" in self.content or "\r" in self.content:
            raise ValueError("Entry content must be a single line")

    @property
    def date(self) -> date:
        return self.timestamp.date()


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of calendar days."""

    start: date
    end: date

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError("Start date must be before or equal to end date")

    def contains(self, d: date) -> bool:
        return self.start <= d <= self.end

    def years(self) -> Iterator[int]:
        """Every calendar year the range touches, ascending."""
        return iter(range(self.start.year, self.end.year + 1))
