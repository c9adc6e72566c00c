"""Timeframe parsing and resolution to concrete date ranges.

Pure functions - no I/O. Every operation that depends on the current date
takes an optional ``today`` so callers and tests can pin it.
"""

import calendar
import re
from dataclasses import dataclass
from datetime import MAXYEAR, MINYEAR, date, datetime, timedelta
from enum import Enum

from .entries import DateRange


class Timeframe(Enum):
    """Predefined timeframes, relative to the current date."""

    TODAY = "today"
    YESTERDAY = "yesterday"
    LAST_WEEK = "last-week"
    LAST_MONTH = "last-month"
    LAST_YEAR = "last-year"
    QUARTER_1 = "q1"
    QUARTER_2 = "q2"
    QUARTER_3 = "q3"
    QUARTER_4 = "q4"

    @classmethod
    def from_string(cls, value: str) -> "Timeframe | None":
        """Look up a keyword; also accepts the dashless forms (lastweek)."""
        value = value.strip().lower()
        return _KEYWORDS.get(value)

    @property
    def quarter(self) -> int | None:
        if self.value.startswith("q"):
            return int(self.value[1])
        return None


_KEYWORDS: dict[str, Timeframe] = {t.value: t for t in Timeframe}
_KEYWORDS.update({
    "lastweek": Timeframe.LAST_WEEK,
    "lastmonth": Timeframe.LAST_MONTH,
    "lastyear": Timeframe.LAST_YEAR,
})


@dataclass(frozen=True)
class Predefined:
    timeframe: Timeframe


@dataclass(frozen=True)
class QuarterYear:
    """A specific quarter of a specific year."""

    quarter: int
    year: int

    def __post_init__(self):
        if not 1 <= self.quarter <= 4:
            raise ValueError("Quarter must be between 1 and 4")
        if not MINYEAR <= self.year <= MAXYEAR:
            raise ValueError(f"Year must be between {MINYEAR} and {MAXYEAR}")


@dataclass(frozen=True)
class Custom:
    """Explicit inclusive date range."""

    start: date
    end: date

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError("Start date must be before or equal to end date")


TimeframeSpec = Predefined | QuarterYear | Custom

VALID_TIMEFRAMES = "today, yesterday, last-week, last-month, last-year, q1-q4, 'q1 2025', DD.MM.YYYY-DD.MM.YYYY"

_QUARTER_WITH_YEAR = re.compile(r"q([1-4])\s+(\d{4})", re.IGNORECASE)
_CUSTOM_RANGE = re.compile(r"(\d{2}\.\d{2}\.\d{4})-(\d{2}\.\d{2}\.\d{4})")
_CUSTOM_DATE_FORMAT = "%d.%m.%Y"


def parse_timeframe(value: str) -> TimeframeSpec | None:
    """
    Parse user input into a TimeframeSpec.

    Supported formats:
        today, yesterday, last-week, last-month, last-year, q1..q4
        q<1-4> <yyyy>            e.g. "Q2 2024"
        DD.MM.YYYY-DD.MM.YYYY    e.g. "06.12.2025-03.02.2026"

    Returns None for anything unrecognized, including impossible dates,
    years outside the calendar, and ranges whose start is after their end.
    """
    text = value.strip()
    if not text:
        return None

    timeframe = Timeframe.from_string(text)
    if timeframe:
        return Predefined(timeframe)

    match = _QUARTER_WITH_YEAR.fullmatch(text)
    if match:
        try:
            return QuarterYear(int(match.group(1)), int(match.group(2)))
        except ValueError:
            return None

    match = _CUSTOM_RANGE.fullmatch(text)
    if match:
        try:
            start = datetime.strptime(match.group(1), _CUSTOM_DATE_FORMAT).date()
            end = datetime.strptime(match.group(2), _CUSTOM_DATE_FORMAT).date()
            return Custom(start, end)
        except ValueError:
            return None

    return None


def quarter_range(year: int, quarter: int) -> DateRange:
    """First to last day of a quarter."""
    if not 1 <= quarter <= 4:
        raise ValueError("Quarter must be between 1 and 4")

    start_month = (quarter - 1) * 3 + 1
    end_month = quarter * 3

    last_day = calendar.monthrange(year, end_month)[1]
    return DateRange(date(year, start_month, 1), date(year, end_month, last_day))


def _months_before(d: date, months: int) -> date:
    """Shift back N months, clamping to the last day of the target month."""
    month_index = d.year * 12 + (d.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(d.day, last_day))


def resolve(spec: TimeframeSpec, today: date | None = None) -> DateRange:
    """Resolve a TimeframeSpec to a concrete inclusive DateRange."""
    today = today or date.today()

    match spec:
        case Predefined(timeframe=timeframe):
            return _resolve_predefined(timeframe, today)
        case QuarterYear(quarter=quarter, year=year):
            return quarter_range(year, quarter)
        case Custom(start=start, end=end):
            return DateRange(start, end)

    raise TypeError(f"Unsupported timeframe spec: {spec!r}")


def _resolve_predefined(timeframe: Timeframe, today: date) -> DateRange:
    match timeframe:
        case Timeframe.TODAY:
            return DateRange(today, today)
        case Timeframe.YESTERDAY:
            yesterday = today - timedelta(days=1)
            return DateRange(yesterday, yesterday)
        case Timeframe.LAST_WEEK:
            return DateRange(today - timedelta(weeks=1), today)
        case Timeframe.LAST_MONTH:
            return DateRange(_months_before(today, 1), today)
        case Timeframe.LAST_YEAR:
            return DateRange(_months_before(today, 12), today)

    return quarter_range(today.year, timeframe.quarter)
