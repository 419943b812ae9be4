"""Date Normalization — upstream date strings to ISO `YYYY-MM-DD`.

Invariants:
    - None, blank and "N/A" (surrounding whitespace ignored) normalize to
      None (rendered "N/A" by the mapper)
    - A parsed date is always rendered as YYYY-MM-DD (time dropped)
    - Unparseable input passes through unchanged; never raises

Design Decisions:
    - dateutil for the general parse: month-first for ambiguous numeric dates
      ("08/18/2026 00:00:00" → 2026-08-18), day-first when the first field
      cannot be a month
    - Year and month must be present in the input; a missing day becomes the
      1st ("Aug-2036" → 2036-08-01). Nothing is filled from the current date
    - Strict dd/MM/yyyy fallback on the text before the first space catches
      dates followed by tokens dateutil rejects
"""

import re
from datetime import date, datetime

from dateutil import parser as date_parser

from vehicle_relay.core.domain_types import NOT_AVAILABLE

_DAY_MONTH_YEAR = re.compile(r"(\d{2})/(\d{2})/(\d{4})")

# Two fixed fill-ins that differ in year and month but share day 1: a field
# the input lacks shows up as a difference between the two parses.
_FILL_A = datetime(2000, 1, 1)
_FILL_B = datetime(2001, 2, 1)


def _parse_general(value: str) -> date | None:
    """Parse with dateutil; year and month must come from the input, day defaults to 1."""
    try:
        first = date_parser.parse(value, default=_FILL_A)
        second = date_parser.parse(value, default=_FILL_B)
    except (ValueError, OverflowError):
        return None
    if (first.year, first.month) != (second.year, second.month):
        return None
    return first.date()


def _parse_day_month_year(value: str) -> date | None:
    match = _DAY_MONTH_YEAR.fullmatch(value.split(" ")[0])
    if not match:
        return None
    day, month, year = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def normalize_date(value: str | None) -> str | None:
    """Normalize an upstream date string; see module invariants."""
    if value is None or not value.strip() or value.strip() == NOT_AVAILABLE:
        return None
    parsed = _parse_general(value) or _parse_day_month_year(value)
    if parsed is None:
        return value
    return parsed.isoformat()
