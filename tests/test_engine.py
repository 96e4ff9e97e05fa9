import math

import pytest

from loan_planner.data_models import (
    AcceleratedAmortizationSummary,
    AmortizationSnapshot,
    LoanInputs,
    LoanSummary,
)
from loan_planner.engine import (
    EPSILON,
    MAX_MONTHS,
    amortize,
    calculate_annuity_payment,
    calculate_loan,
    summarize_loan,
)


@pytest.fixture
def standard_inputs():
    return LoanInputs(
        purchase_price=42_000_000,
        down_payment=8_400_000,
        annual_interest_rate=1.2,
        term_years=35,
        extra_monthly_payment=10_000,
    )


class TestAnnuityPayment:
    def test_zero_rate_is_linear(self):
        assert calculate_annuity_payment(3_000_000, 0.0, 120) == 25_000

    def test_zero_principal(self):
        assert calculate_annuity_payment(0, 0.01, 120) == 0.0

    def test_known_mortgage(self):
        # 200k at 6% over 30 years is about 1199.10 per month
        pmt = calculate_annuity_payment(200_000, 0.06 / 12, 360)
        assert pmt == pytest.approx(1199.10, abs=0.01)


class TestAmortize:
    def test_no_principal(self):
        result = amortize(0, 0.01, 100, 50)
        assert result.payoff_months == 0
        assert result.total_interest == 0
        assert result.total_payment == 0
        assert result.schedule == []

    def test_zero_payment_never_amortizes(self):
        result = amortize(1000, 0.01, 0, 0)
        assert math.isinf(result.payoff_months)
        assert math.isinf(result.total_interest)
        assert math.isinf(result.total_payment)
        assert result.schedule == []

    def test_payment_below_interest(self):
        # 1% of 1000 is 10 in interest, a payment of 5 never reduces the balance
        result = amortize(1000, 0.01, 5)
        assert math.isinf(result.payoff_months)
        assert result.schedule == []

    def test_payment_equal_to_interest(self):
        result = amortize(1000, 0.01, 10)
        assert math.isinf(result.payoff_months)

    def test_final_payment_is_capped(self):
        result = amortize(100, 0.0, 30)
        assert result.payoff_months == 4
        assert [p.payment for p in result.schedule] == [30, 30, 30, 10]
        assert result.schedule[-1].balance == 0
        assert result.total_payment == 100
        assert result.total_interest == 0

    def test_extra_payment_is_added(self):
        result = amortize(100, 0.0, 20, 30)
        assert result.payoff_months == 2
        assert result.schedule[0].payment == 50

    def test_negative_extra_is_ignored(self):
        result = amortize(100, 0.0, 25, -10)
        assert result.payoff_months == 4

    def test_iteration_ceiling(self):
        result = amortize(1_000_000, 0.0, 1)
        assert math.isinf(result.payoff_months)
        assert result.schedule == []

    def test_just_under_ceiling_converges(self):
        result = amortize(MAX_MONTHS - 1, 0.0, 1)
        assert result.payoff_months == MAX_MONTHS - 1

    def test_points_are_consistent(self):
        result = amortize(10_000, 0.005, 500)
        principal_paid = 0.0
        interest_paid = 0.0
        for i, point in enumerate(result.schedule, start=1):
            principal_paid += point.principal_payment
            interest_paid += point.interest_payment
            assert point.period == i
            assert point.year == (i - 1) // 12 + 1
            assert point.principal_payment + point.interest_payment == pytest.approx(point.payment)
            assert point.total_principal_paid == pytest.approx(principal_paid)
            assert point.total_interest_paid == pytest.approx(interest_paid)
        assert result.total_interest == pytest.approx(interest_paid)
        assert result.schedule[-1].balance <= EPSILON


class TestCalculateLoan:
    def test_standard_case(self, standard_inputs):
        result = calculate_loan(standard_inputs)

        assert result.principal == 33_600_000
        assert result.down_payment_ratio == pytest.approx(0.2)
        assert result.base.payoff_months == 35 * 12
        assert result.base.monthly_payment > 0
        assert result.base.total_payment > result.principal

        accelerated = result.accelerated
        assert accelerated is not None
        assert accelerated.monthly_payment == result.base.monthly_payment
        assert accelerated.monthly_payment_with_extra == pytest.approx(
            result.base.monthly_payment + 10_000, abs=0.01
        )
        assert accelerated.payoff_months < result.base.payoff_months
        assert accelerated.interest_saved > 0
        assert accelerated.months_saved == result.base.payoff_months - accelerated.payoff_months
        assert accelerated.interest_saved == pytest.approx(
            result.base.total_interest - accelerated.total_interest
        )

    def test_zero_interest(self):
        inputs = LoanInputs(
            purchase_price=3_000_000,
            down_payment=0,
            annual_interest_rate=0,
            term_years=10,
            extra_monthly_payment=0,
        )

        result = calculate_loan(inputs)

        assert result.base.monthly_payment == pytest.approx(25_000, abs=0.01)
        assert result.base.total_interest == 0
        assert result.base.total_payment == pytest.approx(inputs.purchase_price, abs=0.01)
        assert result.base.payoff_months == 120
        assert result.accelerated is None

    def test_schedule_invariants(self, standard_inputs):
        result = calculate_loan(standard_inputs)
        for plan in (result.base, result.accelerated):
            schedule = plan.schedule
            assert len(schedule) == plan.payoff_months
            assert abs(schedule[-1].balance) < 1e-5
            balances = [p.balance for p in schedule]
            assert all(a >= b for a, b in zip(balances, balances[1:]))
            for point in schedule:
                assert point.principal_payment + point.interest_payment == pytest.approx(point.payment)

    def test_full_down_payment(self):
        inputs = LoanInputs(
            purchase_price=30_000_000,
            down_payment=30_000_000,
            annual_interest_rate=1.0,
            term_years=20,
            extra_monthly_payment=50_000,
        )

        result = calculate_loan(inputs)

        assert result.principal == 0
        assert result.down_payment_ratio == 1.0
        assert result.base.monthly_payment == 0
        assert result.base.payoff_months == 0
        assert result.base.schedule == []
        assert result.accelerated is None

    def test_inputs_are_clamped(self):
        result = calculate_loan(
            LoanInputs(
                purchase_price=1_000_000,
                down_payment=2_000_000,
                annual_interest_rate=-5,
                term_years=-3,
                extra_monthly_payment=-100,
            )
        )
        assert result.principal == 0
        assert result.down_payment_ratio == 1.0
        assert result.accelerated is None

    def test_negative_rate_and_short_term(self):
        result = calculate_loan(
            LoanInputs(
                purchase_price=1_200,
                down_payment=-50,
                annual_interest_rate=-2,
                term_years=0,
            )
        )
        # term raised to 0.1 years rounds to a single month at zero interest
        assert result.principal == 1_200
        assert result.down_payment_ratio == 0
        assert result.base.monthly_payment == 1_200
        assert result.base.payoff_months == 1
        assert result.base.total_interest == 0

    def test_half_month_term_rounds_up(self):
        result = calculate_loan(
            LoanInputs(purchase_price=1_000, down_payment=0, annual_interest_rate=0, term_years=0.125)
        )
        assert result.base.payoff_months == 2

    def test_zero_price(self):
        result = calculate_loan(
            LoanInputs(purchase_price=-10, down_payment=0, annual_interest_rate=1, term_years=10)
        )
        assert result.principal == 0
        assert result.down_payment_ratio == 0
        assert result.base.total_payment == 0

    def test_non_convergent_base_and_accelerated(self):
        # a 5000-year term has a payment so close to the interest that neither
        # plan pays off within the iteration ceiling
        result = calculate_loan(
            LoanInputs(
                purchase_price=1_000_000,
                down_payment=0,
                annual_interest_rate=0.01,
                term_years=5000,
                extra_monthly_payment=1,
            )
        )
        assert math.isinf(result.base.payoff_months)
        assert math.isinf(result.base.total_interest)
        assert result.base.schedule == []
        assert not result.base.converged
        assert result.accelerated is None

    def test_extra_payment_rescues_non_convergent_base(self):
        result = calculate_loan(
            LoanInputs(
                purchase_price=1_000_000,
                down_payment=0,
                annual_interest_rate=0.01,
                term_years=5000,
                extra_monthly_payment=1_000,
            )
        )
        assert math.isinf(result.base.payoff_months)
        assert result.accelerated is not None
        assert math.isfinite(result.accelerated.payoff_months)
        assert math.isinf(result.accelerated.months_saved)

    def test_is_deterministic(self, standard_inputs):
        assert calculate_loan(standard_inputs) == calculate_loan(standard_inputs)


class TestSummarizeLoan:
    def test_drops_schedules(self, standard_inputs):
        computation = calculate_loan(standard_inputs)
        summary = summarize_loan(computation)

        assert isinstance(summary, LoanSummary)
        assert summary.principal == computation.principal
        assert summary.down_payment_ratio == computation.down_payment_ratio
        assert summary.base.monthly_payment == computation.base.monthly_payment
        assert type(summary.base) is AmortizationSnapshot
        assert type(summary.accelerated) is AcceleratedAmortizationSummary
        assert not hasattr(summary.base, "schedule")
        assert not hasattr(summary.accelerated, "schedule")
        assert summary.accelerated.interest_saved == computation.accelerated.interest_saved
        assert summary.accelerated.months_saved == computation.accelerated.months_saved

    def test_without_accelerated(self):
        computation = calculate_loan(
            LoanInputs(purchase_price=1_000_000, down_payment=0, annual_interest_rate=2, term_years=10)
        )
        summary = summarize_loan(computation)
        assert summary.accelerated is None
        assert summary.to_dict()["accelerated"] is None

    def test_to_dict_has_no_schedule(self, standard_inputs):
        data = summarize_loan(calculate_loan(standard_inputs)).to_dict()
        assert set(data) == {"principal", "down_payment_ratio", "base", "accelerated"}
        assert "schedule" not in data["base"]
        assert "schedule" not in data["accelerated"]
        assert data["base"]["payoff_months"] == 420

    def test_infinite_fields_export_as_none(self):
        computation = calculate_loan(
            LoanInputs(purchase_price=1_000_000, down_payment=0, annual_interest_rate=0.01, term_years=5000)
        )
        data = summarize_loan(computation).to_dict()
        assert data["base"]["payoff_months"] is None
        assert data["base"]["total_interest"] is None
        assert data["base"]["monthly_payment"] > 0
