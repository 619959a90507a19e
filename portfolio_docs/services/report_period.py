"""Report period labels -> sortable dates.

Labels come from the reporting pipeline in a handful of shapes:
"March 2024", "Q1 2024", "Jan - Mar 2024", "2023 - 2024", "2024",
"Summer 2024". Anything else sorts first (``date.min``).
"""

import re
from datetime import date
from typing import Optional

MONTHS = {
    "january": 1, "february": 2, "march": 3, "april": 4, "may": 5, "june": 6,
    "july": 7, "august": 8, "september": 9, "october": 10, "november": 11, "december": 12,
}
MONTH_ABBREVIATIONS = {name[:3]: number for name, number in MONTHS.items()}

# A quarter sorts on its last month.
QUARTERS = {"q1": 3, "q2": 6, "q3": 9, "q4": 12}

SEASONS = {"winter": 2, "spring": 5, "summer": 8, "fall": 11, "autumn": 11}

_SINGLE = re.compile(r"^([a-z0-9]+)\s+(\d{4})$")
_RANGE = re.compile(r"^(\w+)\s*-\s*(\w+)\s+(\d{4})$")
_YEAR_RANGE = re.compile(r"^(\d{4})\s*-\s*(\d{4})$")
_YEAR = re.compile(r"^(\d{4})$")


def _month_of(token: str) -> Optional[int]:
    return (
        MONTHS.get(token)
        or MONTH_ABBREVIATIONS.get(token)
        or QUARTERS.get(token)
        or SEASONS.get(token)
    )


def _safe_date(year: int, month: int, day: int) -> date:
    try:
        return date(year, month, day)
    except ValueError:
        return date.min


def parse_report_period(label: Optional[str]) -> date:
    """Sortable date for a period label."""
    if not label:
        return date.min
    text = " ".join(label.split()).lower()

    match = _SINGLE.match(text)
    if match:
        month = _month_of(match.group(1))
        if month:
            return _safe_date(int(match.group(2)), month, 1)

    match = _RANGE.match(text)
    if match:
        month = _month_of(match.group(2))
        if month:
            return _safe_date(int(match.group(3)), month, 1)

    match = _YEAR_RANGE.match(text)
    if match:
        return _safe_date(int(match.group(2)), 12, 31)

    match = _YEAR.match(text)
    if match:
        return _safe_date(int(match.group(1)), 12, 31)

    return date.min


def is_period_range(label: Optional[str]) -> bool:
    """True for labels covering more than a month (quarters, seasons, years, ranges)."""
    if not label:
        return False
    text = " ".join(label.split()).lower()
    return (
        " - " in text
        or bool(re.match(r"^q\d", text))
        or bool(re.match(r"^(winter|spring|summer|fall|autumn)", text))
        or bool(_YEAR.match(text))
    )
