"""Canadian mortgage qualification rules used by the affordability solver.

This module holds the regulatory constants for insured and uninsured
mortgage qualification in Canada and the small helpers built on them.

Sources:
- Stress test (minimum qualifying rate): OSFI Guideline B-20
- GDS/TDS limits: CMHC underwriting guidelines
- Mortgage default insurance premiums: CMHC premium schedule

Property tax and heating are planning estimates, not regulatory values.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# VERSION TRACKING
# =============================================================================

MORTGAGE_RULES_VERSION = "2025-CA"


def get_mortgage_rules_version() -> str:
    """Return current mortgage rules version."""
    return MORTGAGE_RULES_VERSION


# =============================================================================
# DEBT SERVICE LIMITS
# =============================================================================

GDS_MAX = 0.39
TDS_MAX = 0.44

# Debts above this share of monthly income get flagged in the result
HIGH_DEBT_RATIO = 0.5


# =============================================================================
# STRESS TEST
# =============================================================================

STRESS_TEST_FLOOR = 5.25
STRESS_TEST_BUFFER = 2.0
DEFAULT_CONTRACT_RATE = 4.5
AMORTIZATION_YEARS = 25


# =============================================================================
# CARRYING COSTS
# =============================================================================

DEFAULT_PROPERTY_TAX_RATE = 0.012  # 1.2% of price annually
DEFAULT_HEATING_MONTHLY = 150.0


# =============================================================================
# PRICE SEARCH
# =============================================================================

PRICE_SEARCH_SPAN = 2_000_000.0
PRICE_SEARCH_TOLERANCE = 1_000.0
PRICE_ROUNDING = 1_000


# =============================================================================
# CMHC PREMIUMS
# =============================================================================
# (minimum down payment percent, premium rate on the mortgage amount),
# highest tier first.

CMHC_PREMIUM_TIERS: tuple[tuple[float, float], ...] = (
    (20.0, 0.0),
    (15.0, 0.028),
    (10.0, 0.031),
    (0.0, 0.04),
)

# Mortgages on homes at or below this price can carry default insurance
INSURABLE_PRICE_LIMIT = 1_000_000.0

# Below this percent down a mortgage is high-ratio and needs insurance
CONVENTIONAL_DOWN_PAYMENT_PERCENT = 20.0

# Provincial sales tax charged on the premium (Ontario)
CMHC_PST_RATE = 0.08


# =============================================================================
# MINIMUM DOWN PAYMENT
# =============================================================================
# 5% of the first $500K, 10% of the portion up to the insurable limit, and
# 20% of the whole price above it.

MIN_DOWN_PAYMENT_FIRST_PORTION = 500_000.0
MIN_DOWN_PAYMENT_FIRST_RATE = 0.05
MIN_DOWN_PAYMENT_REMAINDER_RATE = 0.10
MIN_DOWN_PAYMENT_UNINSURED_RATE = 0.20


class MortgageRules(BaseModel):
    """Bundle of qualification rules passed explicitly to the solver.

    Defaults mirror the module constants. Deployments that need different
    values build one from ``MortgageRulesConfig.to_rules()``.
    """

    model_config = ConfigDict(frozen=True)

    gds_max: float = Field(default=GDS_MAX, gt=0, lt=1)
    tds_max: float = Field(default=TDS_MAX, gt=0, lt=1)
    high_debt_ratio: float = Field(default=HIGH_DEBT_RATIO, gt=0, le=1)
    stress_test_floor: float = Field(default=STRESS_TEST_FLOOR, ge=0)
    stress_test_buffer: float = Field(default=STRESS_TEST_BUFFER, ge=0)
    amortization_years: int = Field(default=AMORTIZATION_YEARS, gt=0, le=40)
    property_tax_rate: float = Field(default=DEFAULT_PROPERTY_TAX_RATE, ge=0)
    heating_monthly: float = Field(default=DEFAULT_HEATING_MONTHLY, ge=0)
    price_search_span: float = Field(default=PRICE_SEARCH_SPAN, gt=0)
    price_search_tolerance: float = Field(default=PRICE_SEARCH_TOLERANCE, gt=0)
    price_rounding: int = Field(default=PRICE_ROUNDING, gt=0)
    cmhc_premium_tiers: tuple[tuple[float, float], ...] = CMHC_PREMIUM_TIERS
    cmhc_pst_rate: float = Field(default=CMHC_PST_RATE, ge=0)
    insurable_price_limit: float = Field(default=INSURABLE_PRICE_LIMIT, gt=0)
    conventional_down_payment_percent: float = Field(
        default=CONVENTIONAL_DOWN_PAYMENT_PERCENT, gt=0, le=100
    )
    min_down_payment_first_portion: float = Field(
        default=MIN_DOWN_PAYMENT_FIRST_PORTION, gt=0
    )
    min_down_payment_first_rate: float = Field(
        default=MIN_DOWN_PAYMENT_FIRST_RATE, ge=0, le=1
    )
    min_down_payment_remainder_rate: float = Field(
        default=MIN_DOWN_PAYMENT_REMAINDER_RATE, ge=0, le=1
    )
    min_down_payment_uninsured_rate: float = Field(
        default=MIN_DOWN_PAYMENT_UNINSURED_RATE, ge=0, le=1
    )
    version: str = MORTGAGE_RULES_VERSION


DEFAULT_RULES = MortgageRules()


def get_stress_test_rate(
    contract_rate: float,
    rules: Optional[MortgageRules] = None,
) -> float:
    """Get the minimum qualifying rate for a contract rate.

    Args:
        contract_rate: Annual contract rate in percent (e.g. 4.5)
        rules: Rules to apply (default: DEFAULT_RULES)

    Returns:
        The greater of contract rate plus the buffer and the floor
    """
    rules = rules or DEFAULT_RULES
    return max(contract_rate + rules.stress_test_buffer, rules.stress_test_floor)


def get_payment_factor(annual_rate: float, years: int) -> float:
    """Get the monthly payment per $1,000 borrowed.

    Uses the standard amortizing-payment formula with monthly compounding.

    Args:
        annual_rate: Annual interest rate in percent
        years: Amortization period in years

    Returns:
        Monthly principal and interest payment per $1,000 of mortgage
    """
    num_payments = years * 12
    monthly_rate = annual_rate / 100 / 12
    if monthly_rate == 0:
        return 1000 / num_payments

    compound = (1 + monthly_rate) ** num_payments
    return monthly_rate * compound / (compound - 1) * 1000


def get_cmhc_rate(
    down_payment_percent: float,
    rules: Optional[MortgageRules] = None,
) -> float:
    """Get the CMHC premium rate for a down payment percentage.

    Args:
        down_payment_percent: Down payment as a percent of price (0-100)
        rules: Rules to apply (default: DEFAULT_RULES)

    Returns:
        Premium as a fraction of the mortgage amount (0.0 when uninsured)
    """
    rules = rules or DEFAULT_RULES
    for min_percent, rate in rules.cmhc_premium_tiers:
        if down_payment_percent >= min_percent:
            return rate
    return rules.cmhc_premium_tiers[-1][1]


def get_minimum_down_payment(
    home_price: float,
    rules: Optional[MortgageRules] = None,
) -> float:
    """Get the smallest down payment allowed for a home price.

    Args:
        home_price: Purchase price
        rules: Rules to apply (default: DEFAULT_RULES)

    Returns:
        Minimum down payment in dollars

    Example:
        >>> get_minimum_down_payment(600_000)
        35000.0
    """
    rules = rules or DEFAULT_RULES
    if home_price > rules.insurable_price_limit:
        return home_price * rules.min_down_payment_uninsured_rate

    first_portion = rules.min_down_payment_first_portion
    if home_price <= first_portion:
        return home_price * rules.min_down_payment_first_rate
    return (
        first_portion * rules.min_down_payment_first_rate
        + (home_price - first_portion) * rules.min_down_payment_remainder_rate
    )


def is_insurable(
    home_price: float,
    down_payment_percent: float,
    rules: Optional[MortgageRules] = None,
) -> bool:
    """Check whether a purchase takes mortgage default insurance.

    Homes above the insurable limit cannot be insured, and purchases with a
    conventional down payment do not need to be.
    """
    rules = rules or DEFAULT_RULES
    if home_price > rules.insurable_price_limit:
        return False
    return down_payment_percent < rules.conventional_down_payment_percent
