"""Utility functions for the loan planner.

This module provides helpers shared by the engine and its callers: converting
period counts into years and months, aligning two period-indexed sequences
for side-by-side display, month arithmetic for payoff dates and parsing of
user supplied numbers.
"""

from __future__ import annotations

import calendar
import math
from datetime import date
from typing import Any, Callable, List, Optional, Sequence, Tuple, TypeVar

from .data_models import AmortizationPoint, ComparisonRow, YearsMonths

T = TypeVar("T")
U = TypeVar("U")
V = TypeVar("V")


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with halves rounded towards +infinity."""
    return int(math.floor(value + 0.5))


def periods_to_years_months(periods: float) -> YearsMonths:
    """Split a period (month) count into whole years and remaining months.

    Non-finite counts, such as the payoff of a plan that never converges,
    map to ``(0, 0)`` so that display layers never see NaN or infinity.
    """
    if not math.isfinite(periods):
        return YearsMonths(0, 0)
    whole = max(round_half_up(periods), 0)
    years, months = divmod(whole, 12)
    return YearsMonths(years, months)


def forward_fill_join(
    coarse: Sequence[T],
    fine: Sequence[U],
    key_coarse: Callable[[T], int],
    key_fine: Callable[[U], int],
    value: Callable[[U], V],
    initial: V,
) -> List[Tuple[T, V]]:
    """Join two sequences sorted by period index, carrying values forward.

    One output pair is produced for each element of ``coarse``. The second
    item is the value of the last element of ``fine`` whose index is at or
    before the coarse element's index; ``initial`` is used until ``fine``
    reaches that far, and ``fine``'s final value is held once it is
    exhausted. Both sequences must be sorted by increasing index.
    """
    joined: List[Tuple[T, V]] = []
    current = initial
    j = 0
    for item in coarse:
        index = key_coarse(item)
        while j < len(fine) and key_fine(fine[j]) <= index:
            current = value(fine[j])
            j += 1
        joined.append((item, current))
    return joined


def align_schedules(
    base: Sequence[AmortizationPoint],
    accelerated: Sequence[AmortizationPoint],
    principal: float,
) -> List[ComparisonRow]:
    """Line up base and accelerated balances period by period.

    The longer schedule drives the timeline. The shorter one is
    forward-filled, so after its payoff its balance stays at its final value.
    """
    if len(accelerated) > len(base):
        pairs = forward_fill_join(
            accelerated, base, _period, _period, _balance, principal
        )
        return [ComparisonRow(p.period, b, p.balance) for p, b in pairs]
    pairs = forward_fill_join(base, accelerated, _period, _period, _balance, principal)
    return [ComparisonRow(p.period, p.balance, a) for p, a in pairs]


def _period(point: AmortizationPoint) -> int:
    return point.period


def _balance(point: AmortizationPoint) -> float:
    return point.balance


def add_months(dt: date, months: int) -> date:
    """Return a new date a number of months after ``dt``.

    The day of the month is clamped to the last valid day if needed (e.g.,
    adding one month to Jan 31 yields Feb 28 or 29).
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def payoff_date(start: date, payoff_months: float) -> Optional[date]:
    """Date of the final payment, or ``None`` for a plan that never pays off."""
    if not math.isfinite(payoff_months):
        return None
    return add_months(start, max(round_half_up(payoff_months), 0))


def parse_year_month(ym: str) -> date:
    """Parse a YYYY-MM string into a ``date`` object (first day of month).

    Raises
    ------
    ValueError
        If the string is not a valid year-month.
    """
    try:
        parts = ym.split("-")
        if len(parts) < 2:
            raise ValueError
        return date(int(parts[0]), int(parts[1]), 1)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid year-month string: {ym}") from exc


def parse_amount(value: Any) -> float:
    """Parse a monetary amount with optional ``k``/``m`` suffixes.

    Accepts plain numbers ("500000"), thousands separators ("1,200,000") and
    shorthand ("500k", "42m"). NaN and infinite values are rejected because
    the engine only accepts finite inputs.
    """
    text = str(value).strip().lower().replace(",", "")
    factor = 1.0
    if text.endswith("k"):
        factor = 1_000.0
        text = text[:-1]
    elif text.endswith("m"):
        factor = 1_000_000.0
        text = text[:-1]
    try:
        amount = float(text) * factor
    except ValueError as exc:
        raise ValueError(f"Invalid amount: {value}") from exc
    if not math.isfinite(amount):
        raise ValueError(f"Amount must be finite: {value}")
    return amount


def parse_rate(value: Any) -> float:
    """Parse an annual interest rate given in percent, e.g. "1.2" or "1.2%"."""
    text = str(value).strip()
    if text.endswith("%"):
        text = text[:-1]
    try:
        rate = float(text)
    except ValueError as exc:
        raise ValueError(f"Invalid percentage: {value}") from exc
    if not math.isfinite(rate):
        raise ValueError(f"Rate must be finite: {value}")
    return rate


def parse_years(value: Any) -> float:
    """Parse a loan term in years, e.g. "35" or "2.5"."""
    try:
        years = float(str(value).strip())
    except ValueError as exc:
        raise ValueError(f"Invalid term: {value}") from exc
    if not math.isfinite(years):
        raise ValueError(f"Term must be finite: {value}")
    return years
