"""Models for the stand-alone qualification calculators.

Unlike the affordability solver, these calculators take a known home price
and reject out-of-range input when the model is built.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from ..mortgage_rules import DEFAULT_CONTRACT_RATE

_CAMEL_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    frozen=True,
    allow_inf_nan=False,
)


class _PurchaseInput(BaseModel):
    """A home price and the cash put down on it."""

    model_config = _CAMEL_CONFIG

    home_price: float = Field(gt=0, description="Purchase price")
    down_payment: float = Field(ge=0, description="Cash down payment")

    @model_validator(mode="after")
    def down_payment_within_price(self) -> "_PurchaseInput":
        if self.down_payment > self.home_price:
            raise ValueError("down_payment cannot exceed home_price")
        return self

    @property
    def mortgage_amount(self) -> float:
        return self.home_price - self.down_payment

    @property
    def down_payment_percent(self) -> float:
        return self.down_payment / self.home_price * 100


# =============================================================================
# REQUIRED INCOME
# =============================================================================


class RequiredIncomeInput(_PurchaseInput):
    """Inputs for the income needed to qualify for a given home."""

    monthly_debts: float = Field(default=0.0, ge=0)
    contract_rate: float = Field(default=DEFAULT_CONTRACT_RATE, ge=0)


class RequiredIncomeResult(BaseModel):
    """Income needed to keep housing costs within GDS and TDS.

    Dollar amounts are rounded to whole dollars and ratios to one decimal.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    required_annual_income: int
    required_monthly_income: int
    stress_test_rate: float
    monthly_payment: int = Field(description="Principal and interest at the stress-test rate")
    monthly_property_tax: int
    monthly_heating: float
    total_monthly_housing: int
    gds_ratio: float
    tds_ratio: float


# =============================================================================
# STRESS TEST
# =============================================================================


class StressTestInput(_PurchaseInput):
    """Inputs for comparing contract and qualifying payments."""

    contract_rate: float = Field(ge=0)
    amortization_years: Optional[int] = Field(default=None, gt=0, le=40)
    annual_income: Optional[float] = Field(
        default=None,
        gt=0,
        description="Household income; when given, the result says whether it qualifies",
    )


class StressTestResult(BaseModel):
    """Payment at the contract rate against the payment the lender qualifies on."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    contract_rate: float
    stress_test_rate: float
    contract_payment: int
    stress_test_payment: int
    payment_increase: int
    payment_increase_percent: float
    qualifying_income: int = Field(description="Annual income needed under the GDS limit")
    passes_stress_test: Optional[bool] = Field(
        default=None,
        description="None when no income was supplied",
    )


# =============================================================================
# CMHC PREMIUM
# =============================================================================


class CmhcInput(_PurchaseInput):
    """Inputs for the mortgage default insurance premium."""


class CmhcResult(BaseModel):
    """Mortgage default insurance premium for a purchase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    is_required: bool
    premium: int
    premium_rate: float
    pst_on_premium: int
    total_with_pst: int
    mortgage_amount: float
    minimum_down_payment: float
    meets_minimum_down_payment: bool


__all__ = [
    "RequiredIncomeInput",
    "RequiredIncomeResult",
    "StressTestInput",
    "StressTestResult",
    "CmhcInput",
    "CmhcResult",
]
