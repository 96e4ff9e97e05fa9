"""Loan amortization planner with extra-payment what-if analysis."""

from .data_models import LoanComputation, LoanInputs, LoanSummary
from .engine import calculate_loan, summarize_loan
from .utils import periods_to_years_months

__all__ = [
    "LoanComputation",
    "LoanInputs",
    "LoanSummary",
    "calculate_loan",
    "periods_to_years_months",
    "summarize_loan",
]
