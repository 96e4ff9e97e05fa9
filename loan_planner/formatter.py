"""Output helpers for the loan planner.

This module renders loan summaries, amortization schedules and the
base-versus-accelerated comparison as plain text tables. Values are printed
as bare numbers in whatever currency unit the caller used; plans that never
pay off are shown as ``-`` rather than ``inf``.
"""

from __future__ import annotations

import math
from datetime import date
from typing import Iterable, Optional, Sequence

from .data_models import AmortizationPoint, ComparisonRow, LoanSummary
from .utils import payoff_date, periods_to_years_months


def format_amount(value: float) -> str:
    if not math.isfinite(value):
        return "-"
    return f"{value:,.2f}"


def format_duration(periods: float, unbounded: str = "never") -> str:
    """Render a month count as e.g. ``"29y 2m (350 months)"``.

    Non-finite counts render as ``unbounded``.
    """
    if not math.isfinite(periods):
        return unbounded
    years, months = periods_to_years_months(periods)
    return f"{years}y {months}m ({int(round(periods))} months)"


def print_summary(summary: LoanSummary, start: Optional[date] = None) -> None:
    """Print a summary of loan metrics in a human-readable format."""
    base = summary.base
    print("Summary")
    print("-" * 72)
    print(f"Principal financed : {format_amount(summary.principal)}")
    print(f"Down payment ratio : {summary.down_payment_ratio * 100:.1f}%")
    print(f"Monthly payment    : {format_amount(base.monthly_payment)}")
    print(f"Total interest     : {format_amount(base.total_interest)}")
    print(f"Total payment      : {format_amount(base.total_payment)}")
    print(f"Payoff             : {format_duration(base.payoff_months)}")
    if start is not None:
        end = payoff_date(start, base.payoff_months)
        print(f"Payoff date        : {end.strftime('%Y-%m') if end else '-'}")
    if not base.converged:
        print("The scheduled payment never pays off this loan.")
    accelerated = summary.accelerated
    if accelerated:
        print("With extra payment")
        print(f"Monthly payment    : {format_amount(accelerated.monthly_payment_with_extra)}")
        print(f"Total interest     : {format_amount(accelerated.total_interest)}")
        print(f"Total payment      : {format_amount(accelerated.total_payment)}")
        print(f"Payoff             : {format_duration(accelerated.payoff_months)}")
        if start is not None:
            end = payoff_date(start, accelerated.payoff_months)
            print(f"Payoff date        : {end.strftime('%Y-%m') if end else '-'}")
        print(f"Interest saved     : {format_amount(accelerated.interest_saved)}")
        print(f"Term reduction     : {format_duration(accelerated.months_saved, unbounded='-')}")
    print("-" * 72)


def print_schedule(schedule: Iterable[AmortizationPoint]) -> None:
    """Print the amortization schedule as a simple tab separated table."""
    headers = [
        "Period",
        "Year",
        "Payment",
        "Principal",
        "Interest",
        "Balance",
        "PrincipalPaid",
        "InterestPaid",
    ]
    print("\t".join(headers))
    for point in schedule:
        row = [
            str(point.period),
            str(point.year),
            f"{point.payment:.2f}",
            f"{point.principal_payment:.2f}",
            f"{point.interest_payment:.2f}",
            f"{point.balance:.2f}",
            f"{point.total_principal_paid:.2f}",
            f"{point.total_interest_paid:.2f}",
        ]
        print("\t".join(row))


def print_comparison(rows: Sequence[ComparisonRow], every: int = 12) -> None:
    """Print base and accelerated balances side by side.

    Only every ``every``-th period is shown, plus the final row, so that a
    35-year loan fits on one screen. The difference column is the balance
    already cleared by the extra payments.
    """
    print("Comparison")
    print("=" * 72)
    print(f"{'Period':>8s} {'Base':>18s} {'Accelerated':>18s} {'Difference':>18s}")
    step = max(every, 1)
    last = len(rows) - 1
    for i, row in enumerate(rows):
        if (i + 1) % step and i != last:
            continue
        diff = row.base_balance - row.accelerated_balance
        print(
            f"{row.period:8d} {row.base_balance:18,.2f} "
            f"{row.accelerated_balance:18,.2f} {diff:18,.2f}"
        )
    print("=" * 72)
