"""Data models for the loan planner.

This module defines the dataclasses exchanged between the amortization engine
and its callers: the raw loan inputs, individual schedule points, the scalar
summaries of a plan and the full computation returned by
:func:`loan_planner.engine.calculate_loan`. Every result type can be turned
into plain JSON-friendly data with ``to_dict`` so that callers may export or
store it however they like.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, NamedTuple, Optional


def _finite_or_none(value: float) -> Optional[float]:
    # JSON has no representation for infinity; non-convergent plans export as null.
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def _serializable(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: _finite_or_none(value) for key, value in data.items()}


@dataclass(frozen=True)
class LoanInputs:
    """User supplied loan parameters.

    Attributes
    ----------
    purchase_price: float
        Price of the property. Negative values are treated as zero.
    down_payment: float
        Amount paid up front. Clamped into ``[0, purchase_price]``.
    annual_interest_rate: float
        Nominal annual rate in percent (``1.2`` means 1.2 %).
    term_years: float
        Repayment term in years. Values below ``0.1`` are raised to ``0.1``.
    extra_monthly_payment: float
        Additional principal paid every month in the accelerated plan.
    """

    purchase_price: float
    down_payment: float
    annual_interest_rate: float
    term_years: float
    extra_monthly_payment: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AmortizationPoint:
    """A single simulated month of the amortization schedule.

    ``balance`` is the remaining balance after the payment and never drops
    below zero. ``total_principal_paid`` and ``total_interest_paid`` are
    running totals up to and including this period.
    """

    period: int
    year: int
    payment: float
    principal_payment: float
    interest_payment: float
    balance: float
    total_principal_paid: float
    total_interest_paid: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AmortizationSnapshot:
    """Scalar summary of a repayment plan.

    For plans that never pay off, ``total_payment``, ``total_interest`` and
    ``payoff_months`` are ``math.inf``.
    """

    monthly_payment: float
    total_payment: float
    total_interest: float
    payoff_months: float

    @property
    def converged(self) -> bool:
        return math.isfinite(self.payoff_months)

    def to_dict(self) -> Dict[str, Any]:
        return _serializable(
            {
                "monthly_payment": self.monthly_payment,
                "total_payment": self.total_payment,
                "total_interest": self.total_interest,
                "payoff_months": self.payoff_months,
            }
        )


@dataclass(frozen=True)
class DetailedAmortization(AmortizationSnapshot):
    """A plan summary together with its month-by-month schedule."""

    schedule: List[AmortizationPoint] = field(default_factory=list)

    def snapshot(self) -> AmortizationSnapshot:
        return AmortizationSnapshot(
            monthly_payment=self.monthly_payment,
            total_payment=self.total_payment,
            total_interest=self.total_interest,
            payoff_months=self.payoff_months,
        )


@dataclass(frozen=True)
class AcceleratedAmortizationSummary(AmortizationSnapshot):
    """Summary of the plan with an extra monthly payment.

    ``interest_saved`` and ``months_saved`` are measured against the base plan
    and are never negative.
    """

    monthly_payment_with_extra: float = 0.0
    interest_saved: float = 0.0
    months_saved: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(
            _serializable(
                {
                    "monthly_payment_with_extra": self.monthly_payment_with_extra,
                    "interest_saved": self.interest_saved,
                    "months_saved": self.months_saved,
                }
            )
        )
        return data


@dataclass(frozen=True)
class AcceleratedAmortization(AcceleratedAmortizationSummary):
    schedule: List[AmortizationPoint] = field(default_factory=list)

    def snapshot(self) -> AcceleratedAmortizationSummary:
        return AcceleratedAmortizationSummary(
            monthly_payment=self.monthly_payment,
            total_payment=self.total_payment,
            total_interest=self.total_interest,
            payoff_months=self.payoff_months,
            monthly_payment_with_extra=self.monthly_payment_with_extra,
            interest_saved=self.interest_saved,
            months_saved=self.months_saved,
        )


@dataclass(frozen=True)
class LoanSummary:
    """A loan computation with the schedules stripped out."""

    principal: float
    down_payment_ratio: float
    base: AmortizationSnapshot
    accelerated: Optional[AcceleratedAmortizationSummary] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "principal": self.principal,
            "down_payment_ratio": self.down_payment_ratio,
            "base": self.base.to_dict(),
            "accelerated": self.accelerated.to_dict() if self.accelerated else None,
        }


@dataclass(frozen=True)
class LoanComputation:
    """Complete result of :func:`loan_planner.engine.calculate_loan`.

    ``accelerated`` is ``None`` unless an extra monthly payment was requested
    and the accelerated plan pays the loan off within the iteration ceiling.
    """

    principal: float
    down_payment_ratio: float
    base: DetailedAmortization
    accelerated: Optional[AcceleratedAmortization] = None


class AmortizationResult(NamedTuple):
    """Raw output of a single simulator run."""

    payoff_months: float
    total_interest: float
    total_payment: float
    schedule: List[AmortizationPoint]


class YearsMonths(NamedTuple):
    years: int
    months: int


class ComparisonRow(NamedTuple):
    """One period of the joined base/accelerated balance timeline."""

    period: int
    base_balance: float
    accelerated_balance: float
