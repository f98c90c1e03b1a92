"""Week arithmetic and free-form event date handling.

Weeks start on Sunday. Event dates are stored as the provider wrote them
("December 1 2025", "December 1-3 2025", "December 30 - January 2 2026"),
so deciding whether a stored event belongs to a week means parsing that
text back into a day range.
"""

import re
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

_MONTH_LOOKUP: dict[str, int] = {}
for _index, _name in enumerate(MONTH_NAMES, start=1):
    _MONTH_LOOKUP[_name.lower()] = _index
    _MONTH_LOOKUP[_name[:3].lower()] = _index
_MONTH_LOOKUP["sept"] = 9

_DATE_RANGE_RE = re.compile(
    r"(?P<m1>[A-Za-z]+)\.?\s+(?P<d1>\d{1,2})(?:st|nd|rd|th)?"
    r"(?:\s*[-–]\s*(?:(?P<m2>[A-Za-z]+)\.?\s+)?(?P<d2>\d{1,2})(?:st|nd|rd|th)?)?"
    r",?\s+(?P<y>\d{4})"
)


def week_start(day: date) -> date:
    """Return the Sunday on or before ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def today_in(tz_name: str = "UTC") -> date:
    """Today's date in the given IANA timezone."""
    return datetime.now(ZoneInfo(tz_name)).date()


def current_week_start(today: date | None = None, tz_name: str = "UTC") -> date:
    """Start of the week containing ``today``."""
    return week_start(today or today_in(tz_name))


def upcoming_week_start(today: date | None = None, tz_name: str = "UTC") -> date:
    """Start of the week after the one containing ``today``."""
    return current_week_start(today, tz_name) + timedelta(days=7)


def week_end(start: date) -> date:
    """Last day (Saturday) of the week starting at ``start``."""
    return start + timedelta(days=6)


def format_long_date(day: date) -> str:
    """Format as "December 1 2025" independent of the process locale."""
    return f"{MONTH_NAMES[day.month - 1]} {day.day} {day.year}"


def week_month_names(start: date) -> list[str]:
    """Month names touched by the week starting at ``start``."""
    names = [MONTH_NAMES[start.month - 1]]
    end_name = MONTH_NAMES[week_end(start).month - 1]
    if end_name not in names:
        names.append(end_name)
    return names


def _month_number(token: str | None) -> int | None:
    if token is None:
        return None
    return _MONTH_LOOKUP.get(token.lower())


def parse_event_dates(text: str) -> tuple[date, date] | None:
    """Parse a free-form event date string into an inclusive day range.

    Returns None when no recognisable "<Month> <day>[-<day>] <year>" form is
    present or the day is out of range for the month.
    """
    for match in _DATE_RANGE_RE.finditer(text):
        first_month = _month_number(match.group("m1"))
        if first_month is None:
            continue

        year = int(match.group("y"))
        first_day = int(match.group("d1"))

        last_month = first_month
        if match.group("m2") is not None:
            last_month = _month_number(match.group("m2"))
            if last_month is None:
                continue
        last_day = int(match.group("d2")) if match.group("d2") else first_day

        # "December 30 - January 2 2026": the year belongs to the end
        first_year = year - 1 if last_month < first_month else year

        try:
            start = date(first_year, first_month, first_day)
            end = date(year, last_month, last_day)
        except ValueError:
            return None

        if end < start:
            return None
        return start, end

    return None


def falls_in_week(text: str, start: date) -> bool:
    """Whether an event date string overlaps the week starting at ``start``."""
    parsed = parse_event_dates(text)
    if parsed is None:
        return False
    first, last = parsed
    return first <= week_end(start) and last >= start
