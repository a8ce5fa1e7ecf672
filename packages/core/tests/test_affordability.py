"""Tests for the affordability solver."""

import math

import pytest

from leadintel_core import (
    AffordabilityInput,
    AffordabilityResult,
    AffordabilityValidationFailure,
    MortgageRules,
    solve_affordability,
)
from leadintel_core.affordability import (
    max_housing_cost,
    price_fits_budget,
    round_half_up,
    search_max_price,
    validate_affordability_input,
)
from leadintel_core.exceptions import AffordabilityValidationError
from leadintel_core.models import AffordabilityErrorKind, dump_estimate, unwrap_affordability


@pytest.fixture
def typical_input() -> AffordabilityInput:
    """A household earning $120K with $100K saved and no debts."""
    return AffordabilityInput(
        annual_income=120000,
        down_payment=100000,
        monthly_debts=0,
        contract_rate=4.5,
    )


def solve(**kwargs) -> AffordabilityResult:
    """Solve and assert a result (not a failure) came back."""
    outcome = solve_affordability(AffordabilityInput(**kwargs))
    assert isinstance(outcome, AffordabilityResult), outcome
    return outcome


class TestEndToEnd:
    """Test suite for the typical buyer scenario."""

    def test_returns_result(self, typical_input: AffordabilityInput):
        """Valid input should produce an AffordabilityResult."""
        result = solve_affordability(typical_input)

        assert isinstance(result, AffordabilityResult)

    def test_stress_test_rate(self, typical_input: AffordabilityInput):
        """4.5% contract rate qualifies at 6.5%."""
        result = solve_affordability(typical_input)

        assert result.stress_test_rate == 6.5

    def test_price_and_ratios(self, typical_input: AffordabilityInput):
        """Price is a $1,000 multiple above the down payment, GDS at the limit."""
        result = solve_affordability(typical_input)

        assert result.max_home_price > 100000
        assert result.max_home_price % 1000 == 0
        assert result.gds_ratio <= 39
        assert result.gds_ratio == 39
        assert result.tds_ratio == 39

    def test_price_in_expected_range(self, typical_input: AffordabilityInput):
        """$3,900/month housing budget at 6.5% supports roughly $570K."""
        result = solve_affordability(typical_input)

        assert 560000 <= result.max_home_price <= 580000

    def test_cmhc_applies_below_twenty_percent(self, typical_input: AffordabilityInput):
        """Roughly 17.5% down lands in the 2.8% premium tier."""
        result = solve_affordability(typical_input)

        assert 15 <= result.down_payment_percent < 20
        assert result.cmhc_premium == pytest.approx(result.max_mortgage * 0.028)
        assert result.total_mortgage_with_cmhc == pytest.approx(
            result.max_mortgage + result.cmhc_premium
        )
        assert result.requires_cmhc

    def test_mortgage_is_price_minus_down_payment(self, typical_input: AffordabilityInput):
        """Mortgage amount excludes the down payment."""
        result = solve_affordability(typical_input)

        assert result.max_mortgage == result.max_home_price - 100000

    def test_monthly_breakdown_sums(self, typical_input: AffordabilityInput):
        """Total housing is payment plus property tax plus heating."""
        result = solve_affordability(typical_input)

        assert result.total_monthly_housing == (
            result.monthly_payment + result.monthly_property_tax + result.monthly_heating
        )
        assert result.monthly_heating == 150
        assert result.monthly_property_tax == pytest.approx(
            result.max_home_price * 0.012 / 12
        )

    def test_payment_quoted_at_contract_rate(self, typical_input: AffordabilityInput):
        """The quoted payment uses 4.5%, below the qualifying payment at 6.5%."""
        result = solve_affordability(typical_input)
        housing_budget = 10000 * 0.39

        assert result.monthly_payment < housing_budget - result.monthly_property_tax - 150

    def test_inputs_echoed(self, typical_input: AffordabilityInput):
        """Result carries the inputs it was computed from."""
        result = solve_affordability(typical_input)

        assert result.annual_income == 120000
        assert result.down_payment == 100000
        assert result.contract_rate == 4.5
        assert result.rules_version == "2025-CA"
        assert result.warnings == []

    def test_solver_is_deterministic(self, typical_input: AffordabilityInput):
        """Identical inputs give identical results."""
        assert solve_affordability(typical_input) == solve_affordability(typical_input)


class TestStressTest:
    """Test suite for the qualifying rate floor."""

    @pytest.mark.parametrize(
        "contract_rate,expected",
        [
            (2.5, 5.25),
            (3.25, 5.25),
            (3.5, 5.5),
            (4.5, 6.5),
            (5.0, 7.0),
        ],
    )
    def test_stress_test_rate(self, contract_rate: float, expected: float):
        """Qualifying rate is contract + 2 with a 5.25% floor."""
        result = solve(annual_income=120000, down_payment=100000, contract_rate=contract_rate)

        assert result.stress_test_rate == expected

    def test_zero_rate_supported(self):
        """A 0% contract rate amortizes without interest."""
        result = solve(annual_income=120000, down_payment=100000, contract_rate=0)

        assert result.stress_test_rate == 5.25
        assert result.monthly_payment == pytest.approx(result.max_mortgage / 300)


class TestInvariants:
    """Test suite for properties that hold for all valid inputs."""

    @pytest.mark.parametrize(
        "income,down,debts,rate",
        [
            (50000, 0, 0, 4.5),
            (75000, 25000, 300, 5.0),
            (120000, 100000, 0, 4.5),
            (150000, 60000, 1200, 6.0),
            (250000, 500000, 2500, 3.0),
            (90000, 20000, 3000, 4.5),
            (400000, 1000000, 0, 4.0),
        ],
    )
    def test_ratio_bounds_and_rounding(self, income, down, debts, rate):
        """GDS stays within 39, TDS within 44, price on a $1,000 boundary."""
        result = solve(
            annual_income=income,
            down_payment=down,
            monthly_debts=debts,
            contract_rate=rate,
        )

        assert result.gds_ratio <= 39
        assert result.tds_ratio <= 44
        assert result.max_home_price % 1000 == 0
        assert result.max_mortgage >= 0
        assert result.total_monthly_housing == (
            result.monthly_payment + result.monthly_property_tax + result.monthly_heating
        )

    def test_monotonic_in_income(self):
        """More income never lowers the price."""
        prices = [
            solve(annual_income=income, down_payment=50000).max_home_price
            for income in range(60000, 260000, 20000)
        ]

        assert prices == sorted(prices)
        assert prices[-1] > prices[0]

    def test_monotonic_in_down_payment(self):
        """A larger down payment never lowers the price."""
        prices = [
            solve(annual_income=120000, down_payment=down).max_home_price
            for down in range(0, 350000, 50000)
        ]

        assert prices == sorted(prices)
        assert prices[-1] > prices[0]

    def test_monotonic_in_down_payment_small_steps(self):
        """Shifting the down payment by a few dollars never costs a price step."""
        prices = [
            solve(annual_income=120000, down_payment=down).max_home_price
            for down in range(50000, 70000, 37)
        ]

        assert prices == sorted(prices)

    @pytest.mark.parametrize("lower,higher", [(55624, 55661), (63209, 63246)])
    def test_nearby_down_payments(self, lower: int, higher: int):
        """Close down payments keep their price order."""
        low_price = solve(annual_income=120000, down_payment=lower).max_home_price
        high_price = solve(annual_income=120000, down_payment=higher).max_home_price

        assert high_price >= low_price

    @pytest.mark.parametrize(
        "income,down,debts",
        [
            (120000, 55624, 0),
            (120000, 100000, 0),
            (75000, 25000, 300),
            (150000, 60000, 1200),
        ],
    )
    def test_price_is_largest_qualifying_boundary(self, income, down, debts):
        """The price qualifies and the next $1,000 boundary does not."""
        result = solve(annual_income=income, down_payment=down, monthly_debts=debts)
        budget = max_housing_cost(income / 12, debts)

        assert price_fits_budget(result.max_home_price, down, budget, result.stress_test_rate)
        assert not price_fits_budget(
            result.max_home_price + 1000, down, budget, result.stress_test_rate
        )

    def test_monotonic_in_debts(self):
        """More debt never raises the price."""
        prices = [
            solve(annual_income=120000, down_payment=50000, monthly_debts=debts).max_home_price
            for debts in range(0, 4000, 500)
        ]

        assert prices == sorted(prices, reverse=True)
        assert prices[-1] < prices[0]


class TestCmhc:
    """Test suite for mortgage default insurance."""

    def test_no_premium_at_twenty_percent_or_more(self):
        """A large down payment needs no insurance."""
        result = solve(annual_income=100000, down_payment=500000)

        assert result.down_payment_percent >= 20
        assert result.cmhc_premium is None
        assert result.total_mortgage_with_cmhc == result.max_mortgage
        assert not result.requires_cmhc

    def test_premium_below_twenty_percent(self):
        """A small down payment needs insurance."""
        result = solve(annual_income=150000, down_payment=30000)

        assert result.down_payment_percent < 20
        assert result.cmhc_premium is not None
        assert result.cmhc_premium > 0

    def test_lowest_tier_rate(self):
        """Under 10% down pays 4%."""
        result = solve(annual_income=150000, down_payment=30000)

        assert result.down_payment_percent < 10
        assert result.cmhc_premium == pytest.approx(result.max_mortgage * 0.04)


class TestValidation:
    """Test suite for input validation failures."""

    def test_zero_income(self):
        """Zero income is rejected."""
        outcome = solve_affordability(AffordabilityInput(annual_income=0, down_payment=1000))

        assert isinstance(outcome, AffordabilityValidationFailure)
        assert outcome.kind == AffordabilityErrorKind.INVALID_INCOME
        assert outcome.message == "Please provide a valid annual income (greater than $0)."

    def test_nan_income(self):
        """NaN income is rejected as invalid income."""
        outcome = solve_affordability(
            AffordabilityInput(annual_income=math.nan, down_payment=1000)
        )

        assert outcome.kind == AffordabilityErrorKind.INVALID_INCOME

    def test_negative_down_payment(self):
        """A negative down payment is rejected."""
        outcome = solve_affordability(AffordabilityInput(annual_income=80000, down_payment=-1))

        assert isinstance(outcome, AffordabilityValidationFailure)
        assert outcome.kind == AffordabilityErrorKind.NEGATIVE_DOWN_PAYMENT
        assert outcome.message == "Down payment cannot be negative."
        assert outcome.field == "down_payment"
        assert outcome.value == -1

    def test_negative_debts(self):
        """Negative debts are rejected."""
        outcome = solve_affordability(
            AffordabilityInput(annual_income=80000, down_payment=0, monthly_debts=-50)
        )

        assert outcome.kind == AffordabilityErrorKind.NEGATIVE_DEBTS

    def test_debts_exceed_income(self):
        """Debts equal to monthly income are rejected with both figures quoted."""
        outcome = solve_affordability(
            AffordabilityInput(annual_income=120000, down_payment=0, monthly_debts=10000)
        )

        assert isinstance(outcome, AffordabilityValidationFailure)
        assert outcome.kind == AffordabilityErrorKind.DEBTS_EXCEED_INCOME
        assert "($10,000/month) are equal to or greater" in outcome.message
        assert "monthly income ($10,000/month)" in outcome.message
        assert "speaking with one of our agents" in outcome.message

    def test_negative_rate(self):
        """A negative contract rate is rejected."""
        outcome = solve_affordability(
            AffordabilityInput(annual_income=80000, down_payment=0, contract_rate=-1)
        )

        assert outcome.kind == AffordabilityErrorKind.INVALID_RATE

    def test_infinite_rate(self):
        """A non-finite contract rate is rejected."""
        outcome = solve_affordability(
            AffordabilityInput(annual_income=80000, down_payment=0, contract_rate=math.inf)
        )

        assert outcome.kind == AffordabilityErrorKind.INVALID_RATE

    def test_infinite_income(self):
        """An infinite income is rejected as invalid income."""
        outcome = solve_affordability(
            AffordabilityInput(annual_income=math.inf, down_payment=50000)
        )

        assert isinstance(outcome, AffordabilityValidationFailure)
        assert outcome.kind == AffordabilityErrorKind.INVALID_INCOME

    def test_infinite_down_payment(self):
        """An infinite down payment is rejected."""
        outcome = solve_affordability(
            AffordabilityInput(annual_income=100000, down_payment=math.inf)
        )

        assert isinstance(outcome, AffordabilityValidationFailure)
        assert outcome.kind == AffordabilityErrorKind.INVALID_DOWN_PAYMENT
        assert outcome.message == "Please provide a valid down payment amount."
        assert outcome.field == "down_payment"

    def test_nan_down_payment(self):
        """NaN fails the sign check before the finiteness check."""
        outcome = solve_affordability(
            AffordabilityInput(annual_income=100000, down_payment=math.nan)
        )

        assert outcome.kind == AffordabilityErrorKind.NEGATIVE_DOWN_PAYMENT

    def test_first_failure_wins(self):
        """Income is checked before the down payment."""
        failure = validate_affordability_input(
            AffordabilityInput(annual_income=0, down_payment=-1)
        )

        assert failure.kind == AffordabilityErrorKind.INVALID_INCOME

    def test_valid_input_passes(self, typical_input: AffordabilityInput):
        """Valid input yields no failure."""
        assert validate_affordability_input(typical_input) is None

    def test_unwrap_raises(self):
        """unwrap_affordability raises the failure as an exception."""
        outcome = solve_affordability(AffordabilityInput(annual_income=0, down_payment=0))

        with pytest.raises(AffordabilityValidationError) as exc_info:
            unwrap_affordability(outcome)

        assert exc_info.value.kind == "invalid_income"
        assert exc_info.value.recoverable is True

    def test_unwrap_passes_result(self, typical_input: AffordabilityInput):
        """unwrap_affordability returns results unchanged."""
        result = solve_affordability(typical_input)

        assert unwrap_affordability(result) is result


class TestWarningsAndEdges:
    """Test suite for warnings and degenerate budgets."""

    def test_high_debt_warning(self):
        """Debts above half of income add a warning."""
        result = solve(annual_income=120000, down_payment=100000, monthly_debts=5500)

        assert any("50%" in warning for warning in result.warnings)

    def test_search_ceiling_warning(self):
        """A price pinned at the top of the search range is flagged."""
        result = solve(annual_income=10_000_000, down_payment=0)

        assert result.max_home_price == 1_999_000
        assert any("search range" in warning for warning in result.warnings)

    def test_budget_cannot_cover_carrying_costs(self):
        """A housing budget below heating yields a zero price."""
        result = solve(annual_income=60000, down_payment=0, monthly_debts=2150)

        assert result.max_home_price == 0
        assert result.max_mortgage == 0
        assert result.down_payment_percent == 100
        assert result.cmhc_premium is None
        assert result.monthly_payment == 0
        assert any("property tax and heating" in warning for warning in result.warnings)

    def test_zero_price_needs_no_insurance(self):
        """When no price qualifies the purchase counts as fully paid down."""
        result = solve(annual_income=3000, down_payment=500)

        assert result.max_home_price == 0
        assert result.down_payment_percent == 100
        assert result.cmhc_premium is None
        assert not result.requires_cmhc

    def test_minimum_down_payment_warning(self):
        """A down payment under the minimum for the price is flagged."""
        result = solve(annual_income=150000, down_payment=30000)

        assert 500000 < result.max_home_price <= 1_000_000
        assert any(
            warning.startswith("The minimum down payment for a $")
            for warning in result.warnings
        )

    def test_uninsurable_price_warning(self):
        """Prices over $1M with under 20% down are flagged as uninsurable."""
        result = solve(annual_income=300000, down_payment=100000)

        assert result.max_home_price > 1_000_000
        assert any("cannot be insured" in warning for warning in result.warnings)

    def test_mortgage_clamped_at_zero(self):
        """Flooring below the down payment does not produce a negative mortgage."""
        result = solve(annual_income=60000, down_payment=100500, monthly_debts=2150)

        assert result.max_home_price == 100000
        assert result.max_mortgage == 0

    def test_custom_rules(self):
        """Tighter limits lower the price."""
        inputs = AffordabilityInput(annual_income=120000, down_payment=100000)
        default = solve_affordability(inputs)
        strict = solve_affordability(inputs, MortgageRules(gds_max=0.32, tds_max=0.40))

        assert strict.max_home_price < default.max_home_price
        assert strict.gds_ratio == 32


class TestHelpers:
    """Test suite for solver building blocks."""

    def test_max_housing_cost_gds_binds(self):
        """Without debts the GDS limit binds."""
        assert max_housing_cost(10000, 0) == pytest.approx(3900)

    def test_max_housing_cost_tds_binds(self):
        """With large debts the TDS limit binds."""
        assert max_housing_cost(10000, 1000) == pytest.approx(3400)

    def test_search_returns_down_payment_when_nothing_fits(self):
        """A negative budget leaves the search at its lower bound."""
        assert search_max_price(50000, -100, 6.5) == 50000

    def test_search_stops_within_tolerance(self):
        """The search result qualifies at the stress-test rate."""
        price = search_max_price(100000, 3900, 6.5)

        assert 100000 < price < 2_100_000

    def test_price_fits_budget(self):
        """A price with no mortgage fits; a far higher one does not."""
        assert price_fits_budget(100000, 100000, 3900, 6.5)
        assert not price_fits_budget(2_000_000, 100000, 3900, 6.5)

    @pytest.mark.parametrize(
        "value,digits,expected",
        [
            (38.5, 0, 39),
            (38.49, 0, 38),
            (12.25, 1, 12.3),
            (7.04, 1, 7.0),
        ],
    )
    def test_round_half_up(self, value: float, digits: int, expected: float):
        """Halves round up rather than to even."""
        assert round_half_up(value, digits) == expected


class TestSerialization:
    """Test suite for camelCase output."""

    def test_dump_estimate_uses_wire_names(self, typical_input: AffordabilityInput):
        """Serialized keys match the CRM and card field names."""
        data = dump_estimate(solve_affordability(typical_input))

        assert "maxHomePrice" in data
        assert "totalMortgageWithCMHC" in data
        assert "stressTestRate" in data
        assert "gdsRatio" in data
        assert "warnings" not in data

    def test_input_accepts_camel_case(self):
        """Input models accept camelCase names."""
        inputs = AffordabilityInput.model_validate(
            {"annualIncome": 90000, "downPayment": 40000, "contractRate": 5.0}
        )

        assert inputs.annual_income == 90000
        assert inputs.monthly_debts == 0
        assert inputs.monthly_income == 7500
