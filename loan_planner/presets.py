"""Default inputs and named example scenarios.

The presets give the CLI a quick way to explore typical loans without typing
every option. Any option passed explicitly on the command line overrides the
preset value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from .data_models import LoanInputs


@dataclass(frozen=True)
class Preset:
    name: str
    description: str
    inputs: LoanInputs


DEFAULT_INPUTS = LoanInputs(
    purchase_price=42_000_000,
    down_payment=8_400_000,
    annual_interest_rate=1.2,
    term_years=35,
    extra_monthly_payment=0,
)

PRESETS: Dict[str, Preset] = {
    preset.name: preset
    for preset in (
        Preset(
            name="first-home",
            description="35M property, 15% down, 35-year fixed",
            inputs=LoanInputs(
                purchase_price=35_000_000,
                down_payment=5_250_000,
                annual_interest_rate=1.1,
                term_years=35,
                extra_monthly_payment=0,
            ),
        ),
        Preset(
            name="urban-condo",
            description="52M condo, 20% down, 30 years",
            inputs=LoanInputs(
                purchase_price=52_000_000,
                down_payment=10_400_000,
                annual_interest_rate=1.3,
                term_years=30,
                extra_monthly_payment=10_000,
            ),
        ),
        Preset(
            name="refinance",
            description="20M remaining balance, 15 years, 20k extra per month",
            inputs=LoanInputs(
                purchase_price=20_000_000,
                down_payment=0,
                annual_interest_rate=0.85,
                term_years=15,
                extra_monthly_payment=20_000,
            ),
        ),
    )
}


def get_preset(name: str) -> Preset:
    """Look up a preset by name (case-insensitive).

    Raises
    ------
    KeyError
        If no preset with that name exists.
    """
    try:
        return PRESETS[name.strip().lower()]
    except KeyError:
        raise KeyError(f"Unknown preset: {name}") from None
