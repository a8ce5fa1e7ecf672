"""Affordability models: solver input, result, and validation failure.

All models accept snake_case or camelCase field names and serialize to the
camelCase names the chat tools and CRM sync use (``by_alias=True``).
"""

from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..exceptions import AffordabilityValidationError
from ..mortgage_rules import DEFAULT_CONTRACT_RATE, DEFAULT_HEATING_MONTHLY

_CAMEL_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    frozen=True,
)


class AffordabilityErrorKind(str, Enum):
    """Kinds of affordability input failures."""

    INVALID_INCOME = "invalid_income"
    NEGATIVE_DOWN_PAYMENT = "negative_down_payment"
    INVALID_DOWN_PAYMENT = "invalid_down_payment"
    NEGATIVE_DEBTS = "negative_debts"
    DEBTS_EXCEED_INCOME = "debts_exceed_income"
    INVALID_RATE = "invalid_rate"


class AffordabilityInput(BaseModel):
    """Household financials supplied by the user.

    Range checks happen in ``solve_affordability``, which returns bad values
    as a displayable failure.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        json_schema_extra={
            "examples": [
                {
                    "annualIncome": 120000,
                    "downPayment": 100000,
                    "monthlyDebts": 0,
                    "contractRate": 4.5,
                }
            ]
        },
    )

    annual_income: float = Field(
        description="Gross annual household income before taxes"
    )
    down_payment: float = Field(
        description="Cash available for the down payment"
    )
    monthly_debts: float = Field(
        default=0.0,
        description="Monthly payments on car loans, credit cards and other debts",
    )
    contract_rate: float = Field(
        default=DEFAULT_CONTRACT_RATE,
        description="Expected mortgage contract rate in percent",
    )

    @property
    def monthly_income(self) -> float:
        """Gross monthly income."""
        return self.annual_income / 12


class AffordabilityResult(BaseModel):
    """Maximum qualifying home price and its monthly cost breakdown."""

    model_config = _CAMEL_CONFIG

    max_home_price: float = Field(
        description="Largest qualifying price, floored to a $1,000 boundary"
    )
    max_mortgage: float = Field(description="Mortgage amount before insurance")
    down_payment_percent: float = Field(
        description="Down payment as a percent of max_home_price (100 when no price qualifies)"
    )
    cmhc_premium: Optional[float] = Field(
        default=None,
        description="Mortgage default insurance premium, None when not required",
    )
    total_mortgage_with_cmhc: float = Field(
        alias="totalMortgageWithCMHC",
        description="Mortgage amount including any insurance premium",
    )
    monthly_payment: float = Field(
        description="Principal and interest at the contract rate"
    )
    monthly_property_tax: float
    monthly_heating: float = DEFAULT_HEATING_MONTHLY
    total_monthly_housing: float
    stress_test_rate: float = Field(description="Qualifying rate in percent")
    gds_ratio: int = Field(description="Gross debt service ratio in percent")
    tds_ratio: int = Field(description="Total debt service ratio in percent")

    # Echoed inputs
    annual_income: float
    down_payment: float
    monthly_debts: float = 0.0
    contract_rate: float = DEFAULT_CONTRACT_RATE

    warnings: list[str] = Field(default_factory=list)
    rules_version: Optional[str] = None

    @property
    def requires_cmhc(self) -> bool:
        """Whether mortgage default insurance is required."""
        return self.cmhc_premium is not None and self.cmhc_premium > 0


class AffordabilityValidationFailure(BaseModel):
    """Returned by the solver instead of a result when inputs are invalid.

    ``message`` is written for the end user and should be shown unchanged.
    """

    model_config = _CAMEL_CONFIG

    kind: AffordabilityErrorKind
    message: str
    field: Optional[str] = None
    value: Optional[float] = None

    def to_exception(self) -> AffordabilityValidationError:
        """Convert into an exception for callers that prefer raising."""
        return AffordabilityValidationError(
            self.message,
            kind=self.kind.value,
            field=self.field,
            value=self.value,
        )


AffordabilityOutcome = Union[AffordabilityResult, AffordabilityValidationFailure]


def unwrap_affordability(outcome: AffordabilityOutcome) -> AffordabilityResult:
    """Return the result or raise the failure as AffordabilityValidationError."""
    if isinstance(outcome, AffordabilityValidationFailure):
        raise outcome.to_exception()
    return outcome


def dump_estimate(result: AffordabilityResult) -> dict[str, Any]:
    """Serialize a result with the camelCase field names used on the wire."""
    return result.model_dump(by_alias=True, exclude={"warnings", "rules_version"})
