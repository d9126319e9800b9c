"""Static field metadata for form renderers.

Validation does not read this table; ``schemas.MetricsInput`` owns the
constraints. The ranges are repeated here so a form can show them before
submitting, and ``tests/test_field_catalog.py`` keeps the two in step.
"""

from dataclasses import asdict, dataclass
from typing import Optional


@dataclass(frozen=True)
class FieldSpec:
    name: str
    label: str
    group: str
    description: str
    unit: Optional[str] = None          # "USD", "ratio", "count", "months", "days"; None for text
    # for text and list fields `maximum` is the max length
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    exclusive_minimum: bool = False
    required: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


GROUPS = (
    "identity",
    "core",
    "historical",
    "pnl",
    "unit_economics",
    "pricing_sales",
    "team",
    "capital",
    "product_usage",
    "context",
)

FIELD_CATALOG = (
    FieldSpec("softwareName", "Software Name", "identity",
              "The name of the SaaS software or company.", maximum=100),

    FieldSpec("arr", "Annual Recurring Revenue (ARR)", "core",
              "Current total ARR in USD.", "USD", 0, None, True, True),
    FieldSpec("newBusinessARRGrowthRate", "New Business ARR Growth Rate", "core",
              "Annual growth from new business as a decimal (0.25 for 25%).", "ratio", 0, 5, required=True),
    FieldSpec("expansionARRGrowthRate", "Expansion ARR Growth Rate", "core",
              "Annual growth from expansion/upsell as a decimal; negative for contraction.", "ratio", -1, 5,
              required=True),
    FieldSpec("churnRate", "Annual Churn Rate", "core",
              "Annual churn as a decimal (0.05 for 5%).", "ratio", 0, 1, required=True),
    FieldSpec("netRevenueRetention", "Net Revenue Retention (NRR)", "core",
              "NRR / DBNER as a decimal (1.1 for 110%).", "ratio", 0, 3, required=True),
    FieldSpec("grossMargin", "Gross Margin", "core",
              "Gross margin as a decimal (0.8 for 80%).", "ratio", 0, 1, required=True),

    FieldSpec("historicalFinancials", "Historical Financials", "historical",
              "Up to 5 prior years of {year, arr, revenue, expenses, netProfitOrLoss, customerCount}; "
              "entries without a year are ignored.", maximum=5),

    FieldSpec("costOfGoodsSold", "Cost of Goods Sold (COGS)", "pnl",
              "Annual COGS in USD: hosting, third-party software, delivery support.", "USD", 0),
    FieldSpec("salesMarketingSpendPercentage", "Sales & Marketing Spend", "pnl",
              "S&M spend as a fraction of ARR (0.4 for 40%).", "ratio", 0, 1),
    FieldSpec("researchDevelopmentSpendPercentage", "Research & Development Spend", "pnl",
              "R&D spend as a fraction of ARR (0.2 for 20%).", "ratio", 0, 1),
    FieldSpec("generalAdministrativeSpendPercentage", "General & Administrative Spend", "pnl",
              "G&A spend as a fraction of ARR (0.15 for 15%).", "ratio", 0, 1),
    FieldSpec("ebitda", "EBITDA", "pnl",
              "Annual EBITDA in USD; may be negative.", "USD"),

    FieldSpec("totalCustomers", "Total Customers", "unit_economics",
              "Number of active customers.", "count", 0, None, True),
    FieldSpec("customerAcquisitionCost", "Customer Acquisition Cost (CAC)", "unit_economics",
              "Average CAC in USD.", "USD", 0, None, True),
    FieldSpec("ltvToCacRatio", "LTV to CAC Ratio", "unit_economics",
              "Customer lifetime value over CAC (3 for 3:1).", "ratio", 0, None, True),
    FieldSpec("cacByChannel", "CAC by Channel", "unit_economics",
              'Approximate CAC per channel, e.g. "Google Ads: $500, SEO: $200".', maximum=500),
    FieldSpec("cohortAnalysisSummary", "Cohort Analysis Summary", "unit_economics",
              "Cohort retention trends and LTV insights.", maximum=1000),

    FieldSpec("pricingTiers", "Pricing Tiers", "pricing_sales",
              'Pricing tiers, e.g. "Basic: $29/mo, Pro: $99/mo, Enterprise: Custom".', maximum=500),
    FieldSpec("averageDealSize", "Average Deal Size (ACV)", "pricing_sales",
              "Average annual contract value in USD.", "USD", 0, None, True),
    FieldSpec("averageContractLengthMonths", "Average Contract Length", "pricing_sales",
              "Average contract length in months.", "months", 0, None, True),
    FieldSpec("salesCycleLengthDays", "Average Sales Cycle", "pricing_sales",
              "Average sales cycle in days.", "days", 0, None, True),
    FieldSpec("customerAcquisitionChannels", "Customer Acquisition Channels", "pricing_sales",
              "Main acquisition channels and their rough contribution.", maximum=500),
    FieldSpec("marketingSpendBreakdown", "Marketing Spend Breakdown", "pricing_sales",
              "Marketing spend split across channels or categories.", maximum=500),

    FieldSpec("totalEmployees", "Total Employees", "team",
              "Full-time employees.", "count", 0, None, True),
    FieldSpec("salesTeamSize", "Sales Team Size", "team",
              "Employees in sales roles.", "count", 0, None, True),
    FieldSpec("marketingTeamSize", "Marketing Team Size", "team",
              "Employees in marketing roles.", "count", 0, None, True),
    FieldSpec("engineeringTeamSize", "Engineering Team Size", "team",
              "Employees in engineering/R&D roles.", "count", 0, None, True),

    FieldSpec("cashBurnRateMonthly", "Monthly Cash Burn", "capital",
              "Average monthly net cash flow in USD; positive when cash flow positive.", "USD"),
    FieldSpec("cashRunwayMonths", "Cash Runway", "capital",
              "Months of runway at the current burn.", "months", 0, None, True),
    FieldSpec("totalDebt", "Total Debt", "capital",
              "Outstanding debt in USD.", "USD", 0),
    FieldSpec("equityStructureSummary", "Equity Structure Summary", "capital",
              "Share classes, preferences and similar terms.", maximum=1000),

    FieldSpec("dailyActiveUsers", "Daily Active Users (DAU)", "product_usage",
              "Daily active users.", "count", 0, None, True),
    FieldSpec("monthlyActiveUsers", "Monthly Active Users (MAU)", "product_usage",
              "Monthly active users.", "count", 0, None, True),
    FieldSpec("keyFeatureAdoptionRate", "Key Feature Adoption Rate", "product_usage",
              'Adoption of key features, e.g. "Feature X: 60% of MAU".', maximum=500),

    FieldSpec("fundingStage", "Funding Stage", "context",
              "Bootstrap, Seed, Series A, Growth Stage, Public...", maximum=100),
    FieldSpec("industryVertical", "Industry Vertical", "context",
              "FinTech, HealthTech, Enterprise SaaS, MarTech...", maximum=100),
    FieldSpec("targetMarket", "Target Market", "context",
              "SMB, Mid-Market or Enterprise.", maximum=100),
    FieldSpec("customerGeographicConcentration", "Customer Geographic Concentration", "context",
              'Revenue split by region, e.g. "North America: 70%, Europe: 20%".', maximum=500),
)


def catalog_as_dicts() -> list[dict]:
    return [spec.to_dict() for spec in FIELD_CATALOG]
