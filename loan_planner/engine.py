"""Core calculation engine for the loan planner.

This module turns a :class:`~loan_planner.data_models.LoanInputs` record into
a base amortization plan and, when an extra monthly payment is requested, an
accelerated plan together with the interest and months it saves. Everything
here is a pure function: inputs are clamped rather than rejected, and a plan
that never pays off is reported with infinite totals instead of an exception.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from .data_models import (
    AcceleratedAmortization,
    AcceleratedAmortizationSummary,
    AmortizationPoint,
    AmortizationResult,
    DetailedAmortization,
    LoanComputation,
    LoanInputs,
    LoanSummary,
)
from .utils import round_half_up

logger = logging.getLogger(__name__)

MAX_MONTHS = 1000 * 12  # iteration ceiling; reaching it counts as non-convergence
EPSILON = 1e-6  # balances at or below this are treated as paid off


def _non_convergent() -> AmortizationResult:
    return AmortizationResult(math.inf, math.inf, math.inf, [])


def calculate_annuity_payment(principal: float, rate_per_month: float, term: int) -> float:
    """Return the annuity (equal installment) monthly payment for a loan.

    The formula is:

        payment = P * (i * (1 + i)^n) / ((1 + i)^n - 1)

    where ``P`` is the principal, ``i`` is the monthly interest rate and
    ``n`` is the number of payments. When the interest rate is zero, the
    payment simplifies to ``P / n``. A loan with no principal costs nothing.
    """
    if principal <= 0:
        return 0.0
    term = max(term, 1)
    if rate_per_month == 0:
        return principal / term
    factor = (1 + rate_per_month) ** term
    return principal * rate_per_month * factor / (factor - 1)


def amortize(
    principal: float,
    monthly_rate: float,
    scheduled_payment: float,
    extra_payment: float = 0.0,
) -> AmortizationResult:
    """Simulate month-by-month repayment of ``principal``.

    Each month the balance accrues ``monthly_rate`` interest and is reduced by
    ``scheduled_payment + extra_payment`` minus that interest. The final
    payment is capped so the balance never goes below zero.

    Returns
    -------
    AmortizationResult
        Payoff month count, total interest, total payment and the schedule.
        If the payment never reduces the balance to zero (it does not cover
        the interest, or payoff would take more than ``MAX_MONTHS``), all
        three totals are ``math.inf`` and the schedule is empty.
    """
    if principal <= 0:
        return AmortizationResult(0, 0.0, 0.0, [])

    payment = scheduled_payment + max(0.0, extra_payment)
    if payment <= 0:
        logger.debug("Payment %.2f never amortizes principal %.2f", payment, principal)
        return _non_convergent()

    balance = principal
    payoff_months = 0
    total_interest = 0.0
    total_payment = 0.0
    schedule = []

    while balance > EPSILON and payoff_months < MAX_MONTHS:
        interest = balance * monthly_rate if monthly_rate > 0 else 0.0
        principal_payment = payment if monthly_rate == 0 else payment - interest

        if principal_payment <= 0:
            # payment does not even cover the interest: negative amortization
            logger.debug(
                "Payment %.2f does not cover interest %.2f in month %d",
                payment,
                interest,
                payoff_months + 1,
            )
            return _non_convergent()

        principal_payment = min(principal_payment, balance)
        actual_payment = principal_payment + interest

        total_interest += interest
        total_payment += actual_payment
        balance -= principal_payment
        payoff_months += 1

        remaining = max(balance, 0.0)
        schedule.append(
            AmortizationPoint(
                period=payoff_months,
                year=(payoff_months - 1) // 12 + 1,
                payment=actual_payment,
                principal_payment=principal_payment,
                interest_payment=interest,
                balance=remaining,
                total_principal_paid=principal - remaining,
                total_interest_paid=total_interest,
            )
        )

    if payoff_months >= MAX_MONTHS:
        logger.debug("Schedule did not pay off within %d months", MAX_MONTHS)
        return _non_convergent()

    return AmortizationResult(payoff_months, total_interest, total_payment, schedule)


def calculate_loan(inputs: LoanInputs) -> LoanComputation:
    """Compute the base plan and, optionally, the accelerated plan for a loan.

    Parameters
    ----------
    inputs: LoanInputs
        Raw loan parameters. Out-of-range values are clamped: the price to
        at least zero, the down payment into ``[0, price]``, the rate and the
        extra payment to at least zero and the term to at least 0.1 years.

    Returns
    -------
    LoanComputation
        The financed principal, the down payment ratio, the base plan with
        its schedule and the accelerated plan. ``accelerated`` is ``None``
        when no extra payment was given or when the accelerated plan does
        not pay off.
    """
    purchase_price = max(0.0, inputs.purchase_price)
    down_payment = min(max(0.0, inputs.down_payment), purchase_price)
    term_years = max(inputs.term_years, 0.1)

    principal = max(purchase_price - down_payment, 0.0)
    months = max(round_half_up(term_years * 12), 1)
    monthly_rate = max(inputs.annual_interest_rate, 0.0) / 100 / 12
    extra_payment = max(inputs.extra_monthly_payment, 0.0)

    scheduled_payment = calculate_annuity_payment(principal, monthly_rate, months)

    base_result = amortize(principal, monthly_rate, scheduled_payment, 0.0)
    base = DetailedAmortization(
        monthly_payment=scheduled_payment,
        total_payment=base_result.total_payment,
        total_interest=base_result.total_interest,
        payoff_months=base_result.payoff_months,
        schedule=base_result.schedule,
    )

    accelerated = None
    if extra_payment > 0 and principal > 0:
        accelerated_result = amortize(principal, monthly_rate, scheduled_payment, extra_payment)
        if math.isfinite(accelerated_result.payoff_months):
            accelerated = AcceleratedAmortization(
                monthly_payment=scheduled_payment,
                total_payment=accelerated_result.total_payment,
                total_interest=accelerated_result.total_interest,
                payoff_months=accelerated_result.payoff_months,
                monthly_payment_with_extra=scheduled_payment + extra_payment,
                interest_saved=max(
                    base_result.total_interest - accelerated_result.total_interest, 0.0
                ),
                months_saved=max(
                    base_result.payoff_months - accelerated_result.payoff_months, 0
                ),
                schedule=accelerated_result.schedule,
            )
        else:
            logger.debug(
                "Dropping accelerated plan: extra payment %.2f does not pay off the loan",
                extra_payment,
            )

    down_payment_ratio = down_payment / purchase_price if purchase_price > 0 else 0.0

    return LoanComputation(
        principal=principal,
        down_payment_ratio=down_payment_ratio,
        base=base,
        accelerated=accelerated,
    )


def summarize_loan(computation: LoanComputation) -> LoanSummary:
    """Project a computation onto its scalar fields, dropping the schedules."""
    accelerated: Optional[AcceleratedAmortizationSummary] = None
    if computation.accelerated is not None:
        accelerated = computation.accelerated.snapshot()
    return LoanSummary(
        principal=computation.principal,
        down_payment_ratio=computation.down_payment_ratio,
        base=computation.base.snapshot(),
        accelerated=accelerated,
    )
