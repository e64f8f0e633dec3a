"""Schedule text → planned window in Lagos civil time.

Utilities and media outlets describe maintenance windows in every format
imaginable. Each recognized phrasing is handled by an independent parser
``(text, reference) -> PlannedWindow | None``; ``normalize_schedule`` tries them
in priority order and the first one that produces a window wins. Failing to
find a window is a normal outcome, never an exception.

All instants are built against ``CIVIL_TZ`` (Africa/Lagos, UTC+1, no DST) so
results do not depend on the host timezone.
"""

import logging
import re
from datetime import date, datetime
from typing import Callable

from ngpower.schemas.outage import CIVIL_TZ, CIVIL_TZ_NAME, PlannedWindow

logger = logging.getLogger(__name__)

ScheduleParser = Callable[[str, datetime | None], PlannedWindow | None]

_MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}

# Working-day assumption for notices that give a date but no hours
_WORKDAY_START = (9, 0)
_WORKDAY_END = (17, 0)
_MIDNIGHT = (0, 0)

_SEP = r"[/\-\s]"
_MONTH = r"[a-z]{3,}|\d{1,2}"
_YEAR = r"\d{4}|\d{2}"
# A token that unambiguously reads as a clock time
_CLOCK = r"\d{1,2}:\d{2}\s?(?:am|pm)?\b|\d{1,2}\s?(?:am|pm)\b"
# Any time token, including a bare hour ("from 8 to 5pm")
_TIME = r"\d{1,2}(?::\d{2})?(?:\s?(?:am|pm)\b)?"
_TO = r"(?:-|\bto\b|\buntil\b|\bthrough\b)"


def _date_groups(suffix: str) -> str:
    return (
        rf"(?P<day{suffix}>\d{{1,2}})(?:st|nd|rd|th)?{_SEP}(?P<month{suffix}>{_MONTH}){_SEP}"
        rf"(?P<year{suffix}>{_YEAR})"
    )


_RANGE_RE = re.compile(
    rf"\b{_date_groups('1')}(?:[,\s]+(?:at\s+)?(?P<time1>{_CLOCK}))?"
    rf"\s*{_TO}\s*"
    rf"(?:{_date_groups('2')})?(?:[,\s]+(?:at\s+)?)?(?P<time2>{_CLOCK})?",
    re.IGNORECASE,
)
_FROM_TO_ON_RE = re.compile(
    rf"\bfrom\s+(?P<time1>{_TIME})\s*{_TO}\s*(?P<time2>{_TIME})\s+on\s+{_date_groups('')}\b",
    re.IGNORECASE,
)
_SINGLE_DATE_RE = re.compile(rf"\b{_date_groups('')}\b", re.IGNORECASE)
_TIME_RANGE_RE = re.compile(
    rf"\b(?P<time1>{_TIME})\s*{_TO}\s*(?P<time2>{_TIME})(?!\d)",
    re.IGNORECASE,
)
_TIME_TOKEN_RE = re.compile(r"(\d{1,2})(?::(\d{2}))?(am|pm)?")
_LOOKS_LIKE_TIME_RE = re.compile(r":\d{2}|am|pm", re.IGNORECASE)


def sanitize(text: str) -> str:
    """Collapse whitespace and turn en/em dashes into plain hyphens."""
    return " ".join(re.sub(r"[–—]", "-", text).split())


def parse_time_of_day(token: str) -> tuple[int, int]:
    """``"5:30 pm"`` → ``(17, 30)``. Anything unreadable falls back to 09:00."""
    match = _TIME_TOKEN_RE.search("".join(token.lower().split()))
    if not match:
        return _WORKDAY_START
    hour = int(match.group(1))
    minute = int(match.group(2) or 0)
    meridiem = match.group(3)
    if meridiem == "pm" and hour < 12:
        hour += 12
    elif meridiem == "am" and hour == 12:
        hour = 0
    return hour, minute


def _month_number(token: str) -> int | None:
    if token.isdigit():
        return int(token)
    return _MONTHS.get(token[:3].lower())


def _calendar_date(day: str, month: str, year: str) -> date | None:
    month_number = _month_number(month)
    if month_number is None:
        return None
    full_year = int(f"20{year}") if len(year) == 2 else int(year)
    try:
        return date(full_year, month_number, int(day))
    except ValueError:
        return None


def _at(day: date, clock: tuple[int, int]) -> datetime | None:
    hour, minute = clock
    try:
        return datetime(day.year, day.month, day.day, hour, minute, tzinfo=CIVIL_TZ)
    except ValueError:
        return None


def _clock(token: str | None, default: tuple[int, int]) -> tuple[int, int]:
    return parse_time_of_day(token) if token else default


def _window(start: datetime | None, end: datetime | None) -> PlannedWindow | None:
    if start is None:
        return None
    if end is not None and end < start:
        logger.debug("Dropping window end %s before start %s", end, start)
        end = None
    return PlannedWindow(start=start, end=end, timezone=CIVIL_TZ_NAME)


def explicit_date_range(text: str, reference: datetime | None = None) -> PlannedWindow | None:
    """``15/03/2025 09:00 - 16/03/2025 17:00``, ``14 April 2026 to 16 April 2026``.

    The end date defaults to the start date and may carry its own time. A side
    without a time starts at midnight; with neither end date nor end time the
    window is open-ended.
    """
    match = _RANGE_RE.search(text)
    if not match:
        return None
    start_day = _calendar_date(match["day1"], match["month1"], match["year1"])
    if start_day is None:
        return None
    start = _at(start_day, _clock(match["time1"], _MIDNIGHT))
    if start is None:
        return None

    has_end_date = match["day2"] is not None
    if not has_end_date and not match["time2"]:
        return _window(start, None)

    end_day = _calendar_date(match["day2"], match["month2"], match["year2"]) if has_end_date else start_day
    if end_day is None:
        return None
    end = _at(end_day, _clock(match["time2"], _MIDNIGHT))
    if end is None:
        return None
    return _window(start, end)


def time_range_on_date(text: str, reference: datetime | None = None) -> PlannedWindow | None:
    """``from 8am to 5pm on 10/04/2025``."""
    match = _FROM_TO_ON_RE.search(text)
    if not match:
        return None
    day = _calendar_date(match["day"], match["month"], match["year"])
    if day is None:
        return None
    start = _at(day, parse_time_of_day(match["time1"]))
    end = _at(day, parse_time_of_day(match["time2"]))
    if start is None or end is None:
        return None
    return _window(start, end)


def single_date(text: str, reference: datetime | None = None) -> PlannedWindow | None:
    """A bare date: assume the 09:00-17:00 working day."""
    match = _SINGLE_DATE_RE.search(text)
    if not match:
        return None
    day = _calendar_date(match["day"], match["month"], match["year"])
    if day is None:
        return None
    return _window(_at(day, _WORKDAY_START), _at(day, _WORKDAY_END))


def time_range_from_reference(text: str, reference: datetime | None = None) -> PlannedWindow | None:
    """``9am to 2pm`` on the Lagos calendar day of ``reference``."""
    if reference is None:
        return None
    if reference.tzinfo is None:
        reference = reference.replace(tzinfo=CIVIL_TZ)
    day = reference.astimezone(CIVIL_TZ).date()
    for match in _TIME_RANGE_RE.finditer(text):
        first, second = match["time1"], match["time2"]
        # "feeders 1 - 3" is not a schedule
        if not (_LOOKS_LIKE_TIME_RE.search(first) or _LOOKS_LIKE_TIME_RE.search(second)):
            continue
        start = _at(day, parse_time_of_day(first))
        end = _at(day, parse_time_of_day(second))
        if start is None or end is None:
            return None
        return _window(start, end)
    return None


STRATEGIES: tuple[ScheduleParser, ...] = (
    explicit_date_range,
    time_range_on_date,
    single_date,
    time_range_from_reference,
)


def normalize_schedule(
    text: str | None,
    reference: datetime | None = None,
    strategies: tuple[ScheduleParser, ...] = STRATEGIES,
) -> PlannedWindow | None:
    """Return the first window any strategy extracts from ``text``, else None."""
    cleaned = sanitize(text or "")
    if not cleaned:
        return None
    for strategy in strategies:
        window = strategy(cleaned, reference)
        if window is not None:
            return window
    logger.debug("No schedule window in %r", cleaned[:80])
    return None
