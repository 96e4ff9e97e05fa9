"""Command-line interface for the loan planner.

This module uses the ``click`` library to implement a multi-command interface
on top of the engine. Users can print the full amortization schedule, view
summaries, compare the standard plan with an accelerated plan and list the
built-in presets. Results can be printed to the terminal or exported to
JSON/CSV files.

Every option can also be given through an environment variable prefixed with
``LOAN_PLANNER_``, e.g. ``LOAN_PLANNER_SUMMARY_RATE=1.5``.
"""

from __future__ import annotations

import csv
import json
import logging
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import click

from .data_models import AmortizationPoint, LoanComputation, LoanInputs
from .engine import calculate_loan, summarize_loan
from .formatter import print_comparison, print_schedule, print_summary
from .presets import DEFAULT_INPUTS, PRESETS, get_preset
from .utils import align_schedules, parse_amount, parse_rate, parse_year_month, parse_years

logger = logging.getLogger(__name__)

MAX_ROWS = 120


def build_inputs_from_options(
    price: Optional[str],
    down_payment: Optional[str],
    rate: Optional[str],
    years: Optional[str],
    extra: Optional[str],
    preset: Optional[str] = None,
) -> LoanInputs:
    """Merge explicit options over a preset (or the defaults) into ``LoanInputs``."""
    if preset:
        try:
            base = get_preset(preset).inputs
        except KeyError as exc:
            raise click.BadParameter(str(exc.args[0]), param_hint="--preset")
    else:
        base = DEFAULT_INPUTS

    overrides: Dict[str, Any] = {}
    try:
        if price is not None:
            overrides["purchase_price"] = parse_amount(price)
        if down_payment is not None:
            overrides["down_payment"] = parse_amount(down_payment)
        if rate is not None:
            overrides["annual_interest_rate"] = parse_rate(rate)
        if years is not None:
            overrides["term_years"] = parse_years(years)
        if extra is not None:
            overrides["extra_monthly_payment"] = parse_amount(extra)
    except ValueError as exc:
        raise click.BadParameter(str(exc))
    return replace(base, **overrides)


def _parse_start(start_date: Optional[str]) -> Optional[date]:
    if not start_date:
        return None
    try:
        return parse_year_month(start_date)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--start-date")


def serialize_schedule(schedule: List[AmortizationPoint]) -> List[Dict[str, Any]]:
    return [point.to_dict() for point in schedule]


def export_to_json(path: Path, inputs: LoanInputs, computation: LoanComputation) -> None:
    """Export inputs, summary and both schedules to a JSON file."""
    data = {
        "inputs": inputs.to_dict(),
        "summary": summarize_loan(computation).to_dict(),
        "schedule": serialize_schedule(computation.base.schedule),
    }
    if computation.accelerated is not None:
        data["accelerated_schedule"] = serialize_schedule(computation.accelerated.schedule)
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, schedule: List[AmortizationPoint]) -> None:
    """Export a schedule to a CSV file."""
    header = [
        "Period",
        "Year",
        "Payment",
        "Principal",
        "Interest",
        "Balance",
        "Total_Principal_Paid",
        "Total_Interest_Paid",
    ]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for p in schedule:
            writer.writerow(
                [
                    p.period,
                    p.year,
                    p.payment,
                    p.principal_payment,
                    p.interest_payment,
                    p.balance,
                    p.total_principal_paid,
                    p.total_interest_paid,
                ]
            )


def loan_options(func: Callable) -> Callable:
    """Attach the options shared by every loan command."""
    options = [
        click.option("--preset", "preset", help="Start from a named preset (see `presets`)"),
        click.option("--price", "-p", "price", help="Purchase price, e.g. 42m or 42000000"),
        click.option("--down-payment", "-d", "down_payment", help="Down payment amount"),
        click.option("--rate", "-r", "rate", help="Annual interest rate (percent)"),
        click.option("--years", "-y", "years", help="Loan term in years"),
        click.option("--extra", "-e", "extra", help="Extra principal paid every month"),
        click.option("--start-date", "-s", "start_date", help="First payment month (YYYY-MM)"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group(context_settings={"auto_envvar_prefix": "LOAN_PLANNER"})
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity",
)
def cli(log_level: str) -> None:
    """A command-line loan planner with extra-payment what-if analysis."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@loan_options
@click.option("--accelerated", "show_accelerated", is_flag=True, help="Show the schedule with extra payments")
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(
    preset: Optional[str],
    price: Optional[str],
    down_payment: Optional[str],
    rate: Optional[str],
    years: Optional[str],
    extra: Optional[str],
    start_date: Optional[str],
    show_accelerated: bool,
    output: Optional[str],
) -> None:
    """Compute and print the full amortization schedule."""
    inputs = build_inputs_from_options(price, down_payment, rate, years, extra, preset)
    start = _parse_start(start_date)
    computation = calculate_loan(inputs)
    logger.info("Computed loan with principal %.2f", computation.principal)

    entries = computation.base.schedule
    if show_accelerated:
        if computation.accelerated is None:
            raise click.ClickException("No accelerated plan: give a positive --extra that pays off the loan")
        entries = computation.accelerated.schedule

    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, inputs, computation)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, entries)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv", param_hint="--output")
        click.echo(f"Schedule exported to {path}")
        return

    print_summary(summarize_loan(computation), start)
    # Limit schedule length printed to avoid flooding the terminal
    if len(entries) > MAX_ROWS:
        click.echo(f"Schedule has {len(entries)} rows; showing first {MAX_ROWS} rows.")
        print_schedule(entries[:MAX_ROWS])
    else:
        print_schedule(entries)


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json)")
def summary(
    preset: Optional[str],
    price: Optional[str],
    down_payment: Optional[str],
    rate: Optional[str],
    years: Optional[str],
    extra: Optional[str],
    start_date: Optional[str],
    output: Optional[str],
) -> None:
    """Compute and print only the summary metrics for a loan."""
    inputs = build_inputs_from_options(price, down_payment, rate, years, extra, preset)
    start = _parse_start(start_date)
    summary_data = summarize_loan(calculate_loan(inputs))
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Summary export must use .json extension", param_hint="--output")
        with path.open("w", encoding="utf-8") as f:
            json.dump({"inputs": inputs.to_dict(), "summary": summary_data.to_dict()}, f, indent=2)
        click.echo(f"Summary exported to {path}")
    else:
        print_summary(summary_data, start)


@cli.command()
@loan_options
@click.option("--every", "every", type=int, default=12, show_default=True, help="Show one row every N months")
def compare(
    preset: Optional[str],
    price: Optional[str],
    down_payment: Optional[str],
    rate: Optional[str],
    years: Optional[str],
    extra: Optional[str],
    start_date: Optional[str],
    every: int,
) -> None:
    """Compare the standard plan with the plan that adds --extra every month.

    Example:

        loan-planner compare -p 42m -d 8.4m -r 1.2 -y 35 -e 10k
    """
    inputs = build_inputs_from_options(price, down_payment, rate, years, extra, preset)
    start = _parse_start(start_date)
    computation = calculate_loan(inputs)
    if computation.accelerated is None:
        raise click.ClickException("No accelerated plan: give a positive --extra that pays off the loan")
    rows = align_schedules(
        computation.base.schedule, computation.accelerated.schedule, computation.principal
    )
    print_summary(summarize_loan(computation), start)
    print_comparison(rows, every)


@cli.command(name="presets")
def list_presets() -> None:
    """List the built-in example scenarios."""
    for preset in PRESETS.values():
        values = preset.inputs
        click.echo(
            f"{preset.name:12s} {preset.description} "
            f"(price={values.purchase_price:,.0f}, down={values.down_payment:,.0f}, "
            f"rate={values.annual_interest_rate}%, years={values.term_years:g}, "
            f"extra={values.extra_monthly_payment:,.0f})"
        )


if __name__ == "__main__":
    cli()
