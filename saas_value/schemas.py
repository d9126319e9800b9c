"""Request and response shapes.

Wire names are camelCase (what the dashboard form submits); Python attributes
are snake_case. Both spellings are accepted on input, responses use camelCase.
Human-facing labels and descriptions live in ``field_catalog``.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from .core.errors import ModelOutputInvalid, ValidationError, violations_from_errors
from .core.utils import as_finite_float

MAX_HISTORICAL_YEARS = 5


def _reject_bool(value: Any) -> Any:
    # Lax mode would read true/false as 1/0
    if isinstance(value, bool):
        raise ValueError("must be a number, not a boolean")
    return value


class _InputModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False, extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def _no_booleans(cls, value: Any) -> Any:
        return _reject_bool(value)

    @model_validator(mode="before")
    @classmethod
    def _blank_means_absent(cls, data: Any) -> Any:
        # Empty form inputs arrive as "" and mean "not provided"
        if isinstance(data, dict):
            return {
                k: (None if isinstance(v, str) and not v.strip() else v)
                for k, v in data.items()
            }
        return data


class HistoricalFinancialItem(_InputModel):
    year: Optional[int] = None
    arr: Optional[float] = None
    revenue: Optional[float] = None
    expenses: Optional[float] = None
    net_profit_or_loss: Optional[float] = Field(default=None, alias="netProfitOrLoss")
    customer_count: Optional[int] = Field(default=None, alias="customerCount", gt=0)


class MetricsInput(_InputModel):
    # Identity
    software_name: Optional[str] = Field(default=None, alias="softwareName", max_length=100)

    # Core metrics
    arr: float = Field(gt=0)
    new_business_arr_growth_rate: float = Field(alias="newBusinessARRGrowthRate", ge=0, le=5)
    expansion_arr_growth_rate: float = Field(alias="expansionARRGrowthRate", ge=-1, le=5)
    churn_rate: float = Field(alias="churnRate", ge=0, le=1)
    net_revenue_retention: float = Field(alias="netRevenueRetention", ge=0, le=3)
    gross_margin: float = Field(alias="grossMargin", ge=0, le=1)

    # Historical
    historical_financials: Optional[List[HistoricalFinancialItem]] = Field(
        default=None, alias="historicalFinancials", max_length=MAX_HISTORICAL_YEARS
    )

    # P&L
    cost_of_goods_sold: Optional[float] = Field(default=None, alias="costOfGoodsSold", ge=0)
    sales_marketing_spend_percentage: Optional[float] = Field(
        default=None, alias="salesMarketingSpendPercentage", ge=0, le=1
    )
    research_development_spend_percentage: Optional[float] = Field(
        default=None, alias="researchDevelopmentSpendPercentage", ge=0, le=1
    )
    general_administrative_spend_percentage: Optional[float] = Field(
        default=None, alias="generalAdministrativeSpendPercentage", ge=0, le=1
    )
    ebitda: Optional[float] = None

    # Unit economics
    total_customers: Optional[int] = Field(default=None, alias="totalCustomers", gt=0)
    customer_acquisition_cost: Optional[float] = Field(default=None, alias="customerAcquisitionCost", gt=0)
    ltv_to_cac_ratio: Optional[float] = Field(default=None, alias="ltvToCacRatio", gt=0)
    cac_by_channel: Optional[str] = Field(default=None, alias="cacByChannel", max_length=500)
    cohort_analysis_summary: Optional[str] = Field(default=None, alias="cohortAnalysisSummary", max_length=1000)

    # Pricing & sales
    pricing_tiers: Optional[str] = Field(default=None, alias="pricingTiers", max_length=500)
    average_deal_size: Optional[float] = Field(default=None, alias="averageDealSize", gt=0)
    average_contract_length_months: Optional[int] = Field(default=None, alias="averageContractLengthMonths", gt=0)
    sales_cycle_length_days: Optional[int] = Field(default=None, alias="salesCycleLengthDays", gt=0)
    customer_acquisition_channels: Optional[str] = Field(
        default=None, alias="customerAcquisitionChannels", max_length=500
    )
    marketing_spend_breakdown: Optional[str] = Field(default=None, alias="marketingSpendBreakdown", max_length=500)

    # Team
    total_employees: Optional[int] = Field(default=None, alias="totalEmployees", gt=0)
    sales_team_size: Optional[int] = Field(default=None, alias="salesTeamSize", gt=0)
    marketing_team_size: Optional[int] = Field(default=None, alias="marketingTeamSize", gt=0)
    engineering_team_size: Optional[int] = Field(default=None, alias="engineeringTeamSize", gt=0)

    # Capital
    cash_burn_rate_monthly: Optional[float] = Field(default=None, alias="cashBurnRateMonthly")
    cash_runway_months: Optional[float] = Field(default=None, alias="cashRunwayMonths", gt=0)
    total_debt: Optional[float] = Field(default=None, alias="totalDebt", ge=0)
    equity_structure_summary: Optional[str] = Field(default=None, alias="equityStructureSummary", max_length=1000)

    # Product usage
    daily_active_users: Optional[int] = Field(default=None, alias="dailyActiveUsers", gt=0)
    monthly_active_users: Optional[int] = Field(default=None, alias="monthlyActiveUsers", gt=0)
    key_feature_adoption_rate: Optional[str] = Field(default=None, alias="keyFeatureAdoptionRate", max_length=500)

    # Context
    funding_stage: Optional[str] = Field(default=None, alias="fundingStage", max_length=100)
    industry_vertical: Optional[str] = Field(default=None, alias="industryVertical", max_length=100)
    target_market: Optional[str] = Field(default=None, alias="targetMarket", max_length=100)
    customer_geographic_concentration: Optional[str] = Field(
        default=None, alias="customerGeographicConcentration", max_length=500
    )

    @field_validator("historical_financials")
    @classmethod
    def _drop_undated_years(cls, items):
        if items is None:
            return None
        return [item for item in items if item.year is not None]


class BenchmarkInput(MetricsInput):
    estimated_average_valuation: float = Field(alias="estimatedAverageValuation", gt=0)

    @property
    def total_growth_rate(self) -> float:
        # Rounded so 0.2 + 0.1 reads as 0.3 in prompts
        return round(self.new_business_arr_growth_rate + self.expansion_arr_growth_rate, 6)


class _OutputModel(BaseModel):
    # No whitespace stripping: analysis markup must survive verbatim
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)


class ValuationResult(_OutputModel):
    low_valuation: float = Field(alias="lowValuation")
    high_valuation: float = Field(alias="highValuation")
    average_valuation: float = Field(alias="averageValuation")
    implied_arr_multiple: Optional[float] = Field(default=None, alias="impliedARRMultiple")
    analysis: str

    @field_validator("low_valuation", "high_valuation", "average_valuation", mode="before")
    @classmethod
    def _no_booleans(cls, value):
        return _reject_bool(value)

    @field_validator("implied_arr_multiple", mode="before")
    @classmethod
    def _unusable_multiple_is_absent(cls, value):
        # Recomputed locally when the model omits it or sends garbage
        return as_finite_float(value)


class BenchmarkResult(_OutputModel):
    benchmark_analysis: str = Field(alias="benchmarkAnalysis")
    strength_areas: List[str] = Field(alias="strengthAreas")
    improvement_areas: List[str] = Field(alias="improvementAreas")


class BenchmarkRequest(BaseModel):
    metrics: MetricsInput
    valuation: ValuationResult


class StepError(BaseModel):
    error: str
    detail: str


class AnalysisResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    valuation: ValuationResult
    benchmark: Optional[BenchmarkResult] = None
    benchmark_error: Optional[StepError] = Field(default=None, alias="benchmarkError")


def _validate(model_cls, raw, error_cls=ValidationError):
    if isinstance(raw, BaseModel):
        # Re-check instances too; model_construct() skips validation
        raw = raw.model_dump(by_alias=True)
    try:
        return model_cls.model_validate(raw)
    except PydanticValidationError as exc:
        violations = violations_from_errors(exc.errors())
        raise error_cls(violations, f"{model_cls.__name__} failed validation") from exc


def validate_metrics(raw) -> MetricsInput:
    """Validate and coerce a raw metrics mapping (or re-check a model instance)."""
    return _validate(MetricsInput, raw)


def validate_benchmark_input(metrics, valuation) -> BenchmarkInput:
    """Merge a prior valuation's average into the metrics and validate the result.

    ``valuation`` may be a ValuationResult, a mapping in wire format, or None;
    without an average valuation this fails rather than dropping the line.
    """
    data = validate_metrics(metrics).model_dump(by_alias=True)
    if isinstance(valuation, ValuationResult):
        average = valuation.average_valuation
    elif isinstance(valuation, dict):
        average = valuation.get("averageValuation", valuation.get("average_valuation"))
    else:
        average = None
    data["estimatedAverageValuation"] = average
    return _validate(BenchmarkInput, data)


def validate_output(model_cls, payload):
    """Validate a decoded model reply against an output model."""
    return _validate(model_cls, payload, error_cls=ModelOutputInvalid)
