"""Flexible calendar-date parsing for entry dates and range boundaries.

Rules are tried in order and the first match wins:

1. strict ISO ``YYYY-MM-DD`` (zero padded, calendar-valid);
2. strict day-first ``D/M/YYYY`` with one or two digit day and month;
3. a best-effort generic parse through :func:`pandas.to_datetime`, year-first
   when the text opens with a four digit year and day-first otherwise.

Calendar-invalid input such as ``2025-02-30`` is never rolled forward, purely
numeric ``D?M?YYYY`` text is never read month-first, and clock-relative words
such as ``now`` or ``today`` are rejected.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Final

import pandas as pd

_ISO_PATTERN: Final[re.Pattern[str]] = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_DAY_FIRST_PATTERN: Final[re.Pattern[str]] = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_NUMERIC_DAY_FIRST_PATTERN: Final[re.Pattern[str]] = re.compile(r"^(\d{1,2})[./-](\d{1,2})[./-](\d{4})$")
_YEAR_FIRST_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\d{4}\D")
_RELATIVE_WORDS: Final[frozenset[str]] = frozenset({"now", "today", "tomorrow", "yesterday"})


class InvalidDateFormat(ValueError):
    """Raised when a date string matches none of the supported formats."""

    def __init__(self, raw: object) -> None:
        super().__init__(f"Invalid date format: {raw!r}")
        self.raw = raw


def _strict_iso(text: str) -> date | None:
    match = _ISO_PATTERN.match(text)
    if match is None:
        return None
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _strict_day_first(text: str) -> date | None:
    match = _DAY_FIRST_PATTERN.match(text)
    if match is None:
        return None
    day, month, year = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _generic(text: str) -> date | None:
    if text.lower() in _RELATIVE_WORDS:
        return None
    numeric = _NUMERIC_DAY_FIRST_PATTERN.match(text)
    if numeric is not None:
        # Numeric day/month/year shapes stay day-first; pandas would swap an
        # invalid day-first reading to month-first.
        day, month, year = (int(part) for part in numeric.groups())
        try:
            return date(year, month, day)
        except ValueError:
            return None
    if _YEAR_FIRST_PATTERN.match(text):
        options = {"yearfirst": True, "dayfirst": False}
    else:
        options = {"dayfirst": True}
    try:
        parsed = pd.to_datetime(text, **options)
    except (TypeError, ValueError, OverflowError):
        return None
    if pd.isna(parsed):
        return None
    return parsed.date()


def parse_date(raw: str | None) -> date:
    """Parse ``raw`` into a calendar date.

    Leading and trailing whitespace is ignored. ``None`` and blank strings are
    rejected with :class:`InvalidDateFormat` like any other unparseable input.
    """

    if raw is None:
        raise InvalidDateFormat(raw)
    text = str(raw).strip()
    if not text:
        raise InvalidDateFormat(raw)

    for rule in (_strict_iso, _strict_day_first, _generic):
        parsed = rule(text)
        if parsed is not None:
            return parsed
    raise InvalidDateFormat(raw)


__all__ = ["InvalidDateFormat", "parse_date"]
