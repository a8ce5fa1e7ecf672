"""Tests for Canadian mortgage qualification rules."""

import pytest
from pydantic import ValidationError

from leadintel_core.mortgage_rules import (
    CMHC_PREMIUM_TIERS,
    DEFAULT_RULES,
    GDS_MAX,
    TDS_MAX,
    MortgageRules,
    get_cmhc_rate,
    get_minimum_down_payment,
    get_mortgage_rules_version,
    get_payment_factor,
    get_stress_test_rate,
    is_insurable,
)


class TestConstants:
    """Test suite for rule constants."""

    def test_debt_service_limits(self):
        """GDS and TDS limits match CMHC underwriting."""
        assert GDS_MAX == 0.39
        assert TDS_MAX == 0.44

    def test_version(self):
        """Rules carry a version string."""
        assert get_mortgage_rules_version() == "2025-CA"
        assert DEFAULT_RULES.version == "2025-CA"

    def test_tiers_ordered_highest_first(self):
        """Premium tiers are checked from the largest down payment down."""
        thresholds = [minimum for minimum, _ in CMHC_PREMIUM_TIERS]

        assert thresholds == sorted(thresholds, reverse=True)
        assert thresholds[-1] == 0


class TestStressTestRate:
    """Test suite for get_stress_test_rate."""

    @pytest.mark.parametrize(
        "contract_rate,expected",
        [
            (0.0, 5.25),
            (2.5, 5.25),
            (3.25, 5.25),
            (3.26, 5.26),
            (5.0, 7.0),
            (7.5, 9.5),
        ],
    )
    def test_floor_and_buffer(self, contract_rate: float, expected: float):
        """Qualifying rate is the greater of contract + 2 and 5.25."""
        assert get_stress_test_rate(contract_rate) == pytest.approx(expected)

    def test_custom_rules(self):
        """Floor and buffer come from the rules object."""
        rules = MortgageRules(stress_test_floor=6.0, stress_test_buffer=1.0)

        assert get_stress_test_rate(4.0, rules) == 6.0
        assert get_stress_test_rate(5.5, rules) == 6.5


class TestPaymentFactor:
    """Test suite for get_payment_factor."""

    def test_five_percent_twenty_five_years(self):
        """5% over 25 years costs about $5.85 per $1,000 each month."""
        assert get_payment_factor(5.0, 25) == pytest.approx(5.846, abs=0.01)

    def test_zero_rate(self):
        """0% spreads principal evenly."""
        assert get_payment_factor(0.0, 25) == pytest.approx(1000 / 300)

    def test_increases_with_rate(self):
        """Higher rates cost more per $1,000."""
        assert get_payment_factor(6.5, 25) > get_payment_factor(4.5, 25)

    def test_decreases_with_term(self):
        """Longer amortization costs less per month."""
        assert get_payment_factor(5.0, 30) < get_payment_factor(5.0, 25)


class TestCmhcRate:
    """Test suite for get_cmhc_rate."""

    @pytest.mark.parametrize(
        "down_payment_percent,expected",
        [
            (100.0, 0.0),
            (20.0, 0.0),
            (19.99, 0.028),
            (15.0, 0.028),
            (14.99, 0.031),
            (10.0, 0.031),
            (9.99, 0.04),
            (5.0, 0.04),
            (0.0, 0.04),
        ],
    )
    def test_tiers(self, down_payment_percent: float, expected: float):
        """Premium rate steps down at 10%, 15% and 20%."""
        assert get_cmhc_rate(down_payment_percent) == expected


class TestMinimumDownPayment:
    """Test suite for minimum down payment and insurability."""

    @pytest.mark.parametrize(
        "home_price,expected",
        [
            (400_000, 20_000),
            (500_000, 25_000),
            (750_000, 50_000),
            (1_000_000, 75_000),
            (1_200_000, 240_000),
        ],
    )
    def test_minimum_down_payment(self, home_price: float, expected: float):
        """5% of the first $500K, 10% above it, 20% of the whole price over $1M."""
        assert get_minimum_down_payment(home_price) == pytest.approx(expected)

    @pytest.mark.parametrize(
        "home_price,down_payment_percent,expected",
        [
            (900_000, 10.0, True),
            (1_000_000, 19.9, True),
            (900_000, 20.0, False),
            (1_200_000, 10.0, False),
        ],
    )
    def test_is_insurable(self, home_price, down_payment_percent, expected):
        """Only high-ratio purchases up to $1M take default insurance."""
        assert is_insurable(home_price, down_payment_percent) is expected

    def test_custom_insurable_limit(self):
        """The insurable limit comes from the rules."""
        rules = MortgageRules(insurable_price_limit=1_500_000)

        assert is_insurable(1_200_000, 10.0, rules)


class TestMortgageRules:
    """Test suite for the MortgageRules bundle."""

    def test_defaults(self):
        """Defaults mirror the module constants."""
        rules = MortgageRules()

        assert rules.gds_max == 0.39
        assert rules.tds_max == 0.44
        assert rules.amortization_years == 25
        assert rules.heating_monthly == 150.0
        assert rules.property_tax_rate == 0.012

    def test_frozen(self):
        """Rules cannot be changed after construction."""
        with pytest.raises(ValidationError):
            DEFAULT_RULES.gds_max = 0.5

    @pytest.mark.parametrize(
        "field,value",
        [
            ("gds_max", 0),
            ("gds_max", 1.5),
            ("amortization_years", 0),
            ("price_search_tolerance", 0),
            ("heating_monthly", -1),
        ],
    )
    def test_rejects_out_of_range(self, field: str, value: float):
        """Out-of-range rule values are rejected."""
        with pytest.raises(ValidationError):
            MortgageRules(**{field: value})
