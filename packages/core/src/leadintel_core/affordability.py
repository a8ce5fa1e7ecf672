"""Maximum affordable home price under Canadian qualification rules.

The solver sizes the largest mortgage a household qualifies for at the
stress-test rate, then quotes the monthly payment at the contract rate.
Housing costs (principal and interest, property tax, heating) must fit
under both the GDS and the TDS limit.

Invalid input is reported as a returned AffordabilityValidationFailure,
never raised, so the chat layer can show the message as-is.
"""

import math
from typing import Optional

import structlog

from .models import (
    AffordabilityErrorKind,
    AffordabilityInput,
    AffordabilityOutcome,
    AffordabilityResult,
    AffordabilityValidationFailure,
)
from .mortgage_rules import (
    DEFAULT_RULES,
    MortgageRules,
    get_cmhc_rate,
    get_minimum_down_payment,
    get_payment_factor,
    get_stress_test_rate,
)

logger = structlog.get_logger()


def round_half_up(value: float, digits: int = 0) -> float:
    """Round half up to ``digits`` decimal places.

    Returns an int when ``digits`` is 0.

    >>> round_half_up(38.5)
    39
    >>> round_half_up(12.25, 1)
    12.3
    """
    if digits == 0:
        return math.floor(value + 0.5)
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def validate_affordability_input(
    inputs: AffordabilityInput,
) -> Optional[AffordabilityValidationFailure]:
    """Check solver inputs, returning the first failure found.

    Args:
        inputs: Household financials

    Returns:
        A failure describing the problem, or None when inputs are usable
    """
    # "not > 0" also rejects NaN
    if not (inputs.annual_income > 0 and math.isfinite(inputs.annual_income)):
        return AffordabilityValidationFailure(
            kind=AffordabilityErrorKind.INVALID_INCOME,
            message="Please provide a valid annual income (greater than $0).",
            field="annual_income",
            value=inputs.annual_income,
        )

    if not inputs.down_payment >= 0:
        return AffordabilityValidationFailure(
            kind=AffordabilityErrorKind.NEGATIVE_DOWN_PAYMENT,
            message="Down payment cannot be negative.",
            field="down_payment",
            value=inputs.down_payment,
        )

    if not math.isfinite(inputs.down_payment):
        return AffordabilityValidationFailure(
            kind=AffordabilityErrorKind.INVALID_DOWN_PAYMENT,
            message="Please provide a valid down payment amount.",
            field="down_payment",
            value=inputs.down_payment,
        )

    if not inputs.monthly_debts >= 0:
        return AffordabilityValidationFailure(
            kind=AffordabilityErrorKind.NEGATIVE_DEBTS,
            message="Monthly debt payments cannot be negative.",
            field="monthly_debts",
            value=inputs.monthly_debts,
        )

    monthly_income = inputs.monthly_income
    if inputs.monthly_debts >= monthly_income:
        return AffordabilityValidationFailure(
            kind=AffordabilityErrorKind.DEBTS_EXCEED_INCOME,
            message=(
                f"It looks like your monthly debt payments "
                f"(${inputs.monthly_debts:,.0f}/month) are equal to or greater "
                f"than your monthly income (${round_half_up(monthly_income):,}/month). "
                "Please verify your debt amount. If this is correct, I'd recommend "
                "speaking with one of our agents for personalized advice."
            ),
            field="monthly_debts",
            value=inputs.monthly_debts,
        )

    if not (inputs.contract_rate >= 0 and math.isfinite(inputs.contract_rate)):
        return AffordabilityValidationFailure(
            kind=AffordabilityErrorKind.INVALID_RATE,
            message="Please provide a valid mortgage rate (0% or higher).",
            field="contract_rate",
            value=inputs.contract_rate,
        )

    return None


def max_housing_cost(
    monthly_income: float,
    monthly_debts: float,
    rules: Optional[MortgageRules] = None,
) -> float:
    """Largest monthly housing cost allowed by both GDS and TDS.

    Args:
        monthly_income: Gross monthly income
        monthly_debts: Monthly non-housing debt payments
        rules: Rules to apply (default: DEFAULT_RULES)

    Returns:
        The lesser of the GDS and TDS housing allowances (may be negative
        when debts alone exceed the TDS limit)
    """
    rules = rules or DEFAULT_RULES
    by_gds = monthly_income * rules.gds_max
    by_tds = monthly_income * rules.tds_max - monthly_debts
    return min(by_gds, by_tds)


def price_fits_budget(
    price: float,
    down_payment: float,
    housing_budget: float,
    stress_test_rate: float,
    rules: Optional[MortgageRules] = None,
) -> bool:
    """Check whether a price qualifies at the stress-test rate.

    The mortgage (price less down payment) must not exceed what the housing
    budget supports once property tax and heating at that price are paid.
    """
    rules = rules or DEFAULT_RULES
    factor = get_payment_factor(stress_test_rate, rules.amortization_years)
    return _fits(price, down_payment, housing_budget, factor, rules)


def _fits(
    price: float,
    down_payment: float,
    housing_budget: float,
    factor: float,
    rules: MortgageRules,
) -> bool:
    monthly_tax = price * rules.property_tax_rate / 12
    available_for_pi = housing_budget - monthly_tax - rules.heating_monthly
    max_mortgage_at_price = available_for_pi / factor * 1000
    return price - down_payment <= max_mortgage_at_price


def search_max_price(
    down_payment: float,
    housing_budget: float,
    stress_test_rate: float,
    rules: Optional[MortgageRules] = None,
) -> float:
    """Binary-search the highest price whose mortgage fits the housing budget.

    The search runs over [down_payment, down_payment + span] until the
    bracket is narrower than the tolerance. Bounds are not rounded.

    Args:
        down_payment: Cash down payment
        housing_budget: Maximum monthly housing cost
        stress_test_rate: Qualifying rate in percent
        rules: Rules to apply (default: DEFAULT_RULES)

    Returns:
        Lower bound of the final bracket (always a qualifying price, or the
        down payment itself when nothing above it qualifies)
    """
    rules = rules or DEFAULT_RULES
    factor = get_payment_factor(stress_test_rate, rules.amortization_years)

    low = down_payment
    high = down_payment + rules.price_search_span

    while high - low > rules.price_search_tolerance:
        mid = (low + high) / 2
        if mid <= low or mid >= high:
            # bracket narrower than float resolution
            break

        if _fits(mid, down_payment, housing_budget, factor, rules):
            low = mid
        else:
            high = mid

    return low


def solve_affordability(
    inputs: AffordabilityInput,
    rules: Optional[MortgageRules] = None,
) -> AffordabilityOutcome:
    """Solve for the maximum qualifying home price.

    Args:
        inputs: Household financials
        rules: Qualification rules (default: DEFAULT_RULES)

    Returns:
        AffordabilityResult, or AffordabilityValidationFailure for bad input
    """
    rules = rules or DEFAULT_RULES

    failure = validate_affordability_input(inputs)
    if failure is not None:
        logger.info(
            "affordability_validation_failed",
            kind=failure.kind.value,
            field=failure.field,
        )
        return failure

    warnings: list[str] = []
    monthly_income = inputs.monthly_income
    monthly_debts = inputs.monthly_debts
    down_payment = inputs.down_payment

    if monthly_debts > monthly_income * rules.high_debt_ratio:
        logger.warning(
            "affordability_high_debt_ratio",
            debt_ratio=round(monthly_debts / monthly_income * 100, 1),
        )
        warnings.append(
            f"Monthly debts are above {rules.high_debt_ratio:.0%} of gross "
            "monthly income, which sharply limits borrowing."
        )

    # Step 1: Qualifying rate
    stress_test_rate = get_stress_test_rate(inputs.contract_rate, rules)

    # Step 2: Housing budget under GDS and TDS
    housing_budget = max_housing_cost(monthly_income, monthly_debts, rules)
    carrying_at_floor = (
        down_payment * rules.property_tax_rate / 12 + rules.heating_monthly
    )
    if housing_budget <= carrying_at_floor:
        warnings.append(
            "The allowable housing budget does not cover property tax and "
            "heating, so no mortgage can be supported."
        )

    # Step 3: Price search at the stress-test rate
    searched_price = search_max_price(
        down_payment, housing_budget, stress_test_rate, rules
    )
    if searched_price >= down_payment + rules.price_search_span - rules.price_search_tolerance:
        warnings.append(
            "Estimate reached the top of the search range; actual "
            "affordability may be higher."
        )

    # Step 4: Round down to the pricing boundary, then take the largest
    # qualifying boundary below the search ceiling. The search grid moves
    # with the down payment, so flooring alone can land one step short.
    step = rules.price_rounding
    max_home_price = float(math.floor(searched_price / step) * step)
    ceiling = down_payment + rules.price_search_span
    candidate = max_home_price + step
    while max_home_price < candidate < ceiling and price_fits_budget(
        candidate, down_payment, housing_budget, stress_test_rate, rules
    ):
        max_home_price = candidate
        candidate = max_home_price + step
    max_mortgage = max(max_home_price - down_payment, 0.0)

    # Step 5: Quoted payment at the contract rate
    payment_factor = get_payment_factor(inputs.contract_rate, rules.amortization_years)
    monthly_payment = max_mortgage / 1000 * payment_factor

    # Step 6: Mortgage default insurance; nothing is borrowed at a zero price
    down_payment_percent = (
        down_payment / max_home_price * 100 if max_home_price > 0 else 100.0
    )
    cmhc_premium = max_mortgage * get_cmhc_rate(down_payment_percent, rules)
    total_mortgage = max_mortgage + cmhc_premium if cmhc_premium > 0 else max_mortgage

    if max_home_price > 0:
        minimum_down = get_minimum_down_payment(max_home_price, rules)
        if down_payment < minimum_down:
            if max_home_price > rules.insurable_price_limit:
                warnings.append(
                    f"Homes over ${rules.insurable_price_limit:,.0f} cannot be "
                    f"insured and need at least ${minimum_down:,.0f} down at "
                    "this price."
                )
            else:
                warnings.append(
                    f"The minimum down payment for a ${max_home_price:,.0f} "
                    f"home is ${minimum_down:,.0f}."
                )

    # Step 7: Carrying costs and ratios
    monthly_property_tax = max_home_price * rules.property_tax_rate / 12
    total_monthly_housing = monthly_payment + monthly_property_tax + rules.heating_monthly
    gds_ratio = round_half_up(housing_budget / monthly_income * 100)
    tds_ratio = round_half_up((housing_budget + monthly_debts) / monthly_income * 100)

    result = AffordabilityResult(
        max_home_price=max_home_price,
        max_mortgage=max_mortgage,
        down_payment_percent=down_payment_percent,
        cmhc_premium=cmhc_premium if cmhc_premium > 0 else None,
        total_mortgage_with_cmhc=total_mortgage,
        monthly_payment=monthly_payment,
        monthly_property_tax=monthly_property_tax,
        monthly_heating=rules.heating_monthly,
        total_monthly_housing=total_monthly_housing,
        stress_test_rate=stress_test_rate,
        gds_ratio=gds_ratio,
        tds_ratio=tds_ratio,
        annual_income=inputs.annual_income,
        down_payment=down_payment,
        monthly_debts=monthly_debts,
        contract_rate=inputs.contract_rate,
        warnings=warnings,
        rules_version=rules.version,
    )

    logger.info(
        "affordability_solved",
        max_home_price=max_home_price,
        stress_test_rate=stress_test_rate,
        gds_ratio=gds_ratio,
        tds_ratio=tds_ratio,
        cmhc_required=result.requires_cmhc,
    )
    return result
