from __future__ import annotations

from datetime import date

import pytest

try:
    from hypothesis import given
    from hypothesis import strategies as st
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    pytest.skip("Requires the hypothesis library", allow_module_level=True)

from finance_tracker.dates import parse_date

FOUR_DIGIT_YEARS = st.dates(min_value=date(1000, 1, 1), max_value=date(9999, 12, 31))


@given(day=FOUR_DIGIT_YEARS)
def test_iso_strings_parse_to_same_date(day: date) -> None:
    assert parse_date(day.isoformat()) == day


@given(day=FOUR_DIGIT_YEARS, pad_day=st.booleans(), pad_month=st.booleans())
def test_slash_strings_parse_day_first(day: date, pad_day: bool, pad_month: bool) -> None:
    day_part = f"{day.day:02d}" if pad_day else str(day.day)
    month_part = f"{day.month:02d}" if pad_month else str(day.month)
    assert parse_date(f"{day_part}/{month_part}/{day.year}") == day


@given(day=FOUR_DIGIT_YEARS, left=st.sampled_from(["", " ", "\t", "  "]), right=st.sampled_from(["", " ", "\n"]))
def test_surrounding_whitespace_is_ignored(day: date, left: str, right: str) -> None:
    assert parse_date(f"{left}{day.isoformat()}{right}") == day
