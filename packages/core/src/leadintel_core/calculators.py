"""Qualification calculators for a known home price.

The affordability solver works backwards from income to a price. These
work forwards from a price:

1. calculate_required_income: income needed to stay within GDS and TDS
2. calculate_stress_test: payment at the contract rate against the
   qualifying payment, and the income the lender would want to see
3. calculate_cmhc_premium: default insurance premium, PST and the minimum
   down payment for the price
"""

from typing import Optional

import structlog

from .affordability import round_half_up
from .models.qualification import (
    CmhcInput,
    CmhcResult,
    RequiredIncomeInput,
    RequiredIncomeResult,
    StressTestInput,
    StressTestResult,
)
from .mortgage_rules import (
    DEFAULT_RULES,
    MortgageRules,
    get_cmhc_rate,
    get_minimum_down_payment,
    get_payment_factor,
    get_stress_test_rate,
    is_insurable,
)

logger = structlog.get_logger()


def calculate_monthly_payment(principal: float, annual_rate: float, years: int) -> float:
    """Monthly principal and interest on a fully amortizing mortgage."""
    return principal / 1000 * get_payment_factor(annual_rate, years)


def calculate_required_income(
    inputs: RequiredIncomeInput,
    rules: Optional[MortgageRules] = None,
) -> RequiredIncomeResult:
    """Calculate the income needed to qualify for a home.

    Housing costs are taken at the stress-test rate. The required income is
    the higher of what the GDS limit and the TDS limit (housing plus other
    debts) call for.

    Args:
        inputs: Home price, down payment, debts and contract rate
        rules: Qualification rules (default: DEFAULT_RULES)

    Returns:
        RequiredIncomeResult with the income and the housing cost breakdown
    """
    rules = rules or DEFAULT_RULES

    stress_test_rate = get_stress_test_rate(inputs.contract_rate, rules)
    monthly_payment = calculate_monthly_payment(
        inputs.mortgage_amount, stress_test_rate, rules.amortization_years
    )
    monthly_property_tax = inputs.home_price * rules.property_tax_rate / 12
    total_monthly_housing = (
        monthly_payment + monthly_property_tax + rules.heating_monthly
    )

    required_for_gds = total_monthly_housing / rules.gds_max
    required_for_tds = (total_monthly_housing + inputs.monthly_debts) / rules.tds_max
    required_monthly_income = max(required_for_gds, required_for_tds)

    gds_ratio = total_monthly_housing / required_monthly_income * 100
    tds_ratio = (
        (total_monthly_housing + inputs.monthly_debts) / required_monthly_income * 100
    )

    logger.debug(
        "required_income_calculated",
        tds_binds=required_for_tds > required_for_gds,
        stress_test_rate=stress_test_rate,
    )

    return RequiredIncomeResult(
        required_annual_income=round_half_up(required_monthly_income * 12),
        required_monthly_income=round_half_up(required_monthly_income),
        stress_test_rate=stress_test_rate,
        monthly_payment=round_half_up(monthly_payment),
        monthly_property_tax=round_half_up(monthly_property_tax),
        monthly_heating=rules.heating_monthly,
        total_monthly_housing=round_half_up(total_monthly_housing),
        gds_ratio=round_half_up(gds_ratio, 1),
        tds_ratio=round_half_up(tds_ratio, 1),
    )


def calculate_stress_test(
    inputs: StressTestInput,
    rules: Optional[MortgageRules] = None,
) -> StressTestResult:
    """Compare the contract payment with the stress-test payment.

    Args:
        inputs: Home price, down payment, contract rate and optional income
        rules: Qualification rules (default: DEFAULT_RULES)

    Returns:
        StressTestResult; ``passes_stress_test`` is set only when an income
        was supplied
    """
    rules = rules or DEFAULT_RULES
    years = inputs.amortization_years or rules.amortization_years

    stress_test_rate = get_stress_test_rate(inputs.contract_rate, rules)
    contract_payment = calculate_monthly_payment(
        inputs.mortgage_amount, inputs.contract_rate, years
    )
    stress_test_payment = calculate_monthly_payment(
        inputs.mortgage_amount, stress_test_rate, years
    )

    payment_increase = stress_test_payment - contract_payment
    payment_increase_percent = (
        payment_increase / contract_payment * 100 if contract_payment > 0 else 0.0
    )

    # Qualifying income under GDS at the stress-test payment
    monthly_property_tax = inputs.home_price * rules.property_tax_rate / 12
    total_housing_cost = (
        stress_test_payment + monthly_property_tax + rules.heating_monthly
    )
    qualifying_income = round_half_up(total_housing_cost / rules.gds_max * 12)

    passes: Optional[bool] = None
    if inputs.annual_income is not None:
        passes = inputs.annual_income >= qualifying_income

    return StressTestResult(
        contract_rate=inputs.contract_rate,
        stress_test_rate=stress_test_rate,
        contract_payment=round_half_up(contract_payment),
        stress_test_payment=round_half_up(stress_test_payment),
        payment_increase=round_half_up(payment_increase),
        payment_increase_percent=round_half_up(payment_increase_percent, 1),
        qualifying_income=qualifying_income,
        passes_stress_test=passes,
    )


def calculate_cmhc_premium(
    inputs: CmhcInput,
    rules: Optional[MortgageRules] = None,
) -> CmhcResult:
    """Calculate the mortgage default insurance premium for a purchase.

    No premium is charged on conventional purchases (20% or more down) or
    on homes above the insurable limit; the latter must meet the 20%
    minimum down payment instead.

    Args:
        inputs: Home price and down payment
        rules: Qualification rules (default: DEFAULT_RULES)

    Returns:
        CmhcResult with the premium, PST on it, and the minimum down payment
    """
    rules = rules or DEFAULT_RULES
    mortgage_amount = inputs.mortgage_amount
    minimum_down = get_minimum_down_payment(inputs.home_price, rules)

    if not is_insurable(inputs.home_price, inputs.down_payment_percent, rules):
        premium_rate = 0.0
        premium = 0
    else:
        premium_rate = get_cmhc_rate(inputs.down_payment_percent, rules)
        premium = round_half_up(mortgage_amount * premium_rate)
    pst = round_half_up(premium * rules.cmhc_pst_rate)

    return CmhcResult(
        is_required=premium > 0,
        premium=premium,
        premium_rate=premium_rate,
        pst_on_premium=pst,
        total_with_pst=premium + pst,
        mortgage_amount=mortgage_amount,
        minimum_down_payment=minimum_down,
        meets_minimum_down_payment=inputs.down_payment >= minimum_down,
    )
