"""Date-range parsing and display formatting.

Ranges look like ``"Mar 2021 — Present"``, ``"03/2021 - 06/2023"`` or
``"2019-2021"``. Tokens that are not recognized pass through verbatim.
"""

from __future__ import annotations

import re
from typing import List, Optional

from .models import MonthYear

DATE_FORMATS = ("mon_year", "slash_month_year", "year")

MONTHS_SHORT = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
_MONTH_INDEX = {name.lower(): i + 1 for i, name in enumerate(MONTHS_SHORT)}

_RANGE_SEPARATOR_RE = re.compile(r"\s*[–—-]\s*")
_MONTH_NAME_RE = re.compile(r"^([A-Za-z]{3,9})\.?\s+(\d{4})$")
_SLASH_RE = re.compile(r"^(\d{1,2})/(\d{4})$")
_YEAR_RE = re.compile(r"^(\d{4})$")
_PRESENT_RE = re.compile(r"^present$", re.IGNORECASE)


def parse_month_year(value: str) -> Optional[MonthYear]:
    """Parse ``Mar 2021``, ``March 2021``, ``03/2021`` or ``2021``."""
    token = (value or "").strip()
    if not token:
        return None

    match = _MONTH_NAME_RE.match(token)
    if match:
        month = _MONTH_INDEX.get(match.group(1)[:3].lower())
        if month:
            return MonthYear(month=month, year=int(match.group(2)))

    match = _SLASH_RE.match(token)
    if match:
        month = int(match.group(1))
        if 1 <= month <= 12:
            return MonthYear(month=month, year=int(match.group(2)))

    match = _YEAR_RE.match(token)
    if match:
        return MonthYear(month=1, year=int(match.group(1)))

    return None


def format_month_year(value: MonthYear, mode: str) -> str:
    if mode == "year":
        return str(value.year)
    if mode == "slash_month_year":
        return f"{value.month:02d}/{value.year}"
    return f"{MONTHS_SHORT[value.month - 1]} {value.year}"


def split_date_range(value: str) -> List[str]:
    """Split a range on an em dash, en dash or hyphen."""
    parts = _RANGE_SEPARATOR_RE.split((value or "").strip())
    return [part.strip() for part in parts if part.strip()]


def _format_token(token: str, mode: str) -> str:
    if _PRESENT_RE.match(token):
        return "Present"
    parsed = parse_month_year(token)
    if parsed is None:
        return token
    return format_month_year(parsed, mode)


def format_date_range(value: str, mode: str = "mon_year") -> str:
    """Render *value* in one of :data:`DATE_FORMATS`.

    Two tokens render as ``"<left> — <right>"``. Anything that is not a one
    or two token range, or an unknown *mode*, comes back unchanged.
    """
    raw = value or ""
    text = raw.strip()
    if not text:
        return ""
    if mode not in DATE_FORMATS:
        return raw

    parts = split_date_range(text)
    if len(parts) == 1:
        return _format_token(parts[0], mode)
    if len(parts) == 2:
        return f"{_format_token(parts[0], mode)} — {_format_token(parts[1], mode)}"
    return raw
