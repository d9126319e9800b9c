from ..schemas import HistoricalFinancialItem, MetricsInput, ValuationResult, validate_metrics
from .base import Prompt, Section, field_rule, indent, render_sections

PROMPT_NAME = "valuation_estimation"

PREAMBLE = (
    "You are an expert SaaS company valuation analyst providing a professional, in-depth valuation. "
    "Given the following metrics, estimate a valuation range (low, high and average) for the company in USD. "
    "Provide a comprehensive qualitative analysis supporting your valuation and calculate the implied ARR multiple. "
    "Rates and percentages are decimals (0.25 means 25%); currency amounts are USD."
)

HISTORICAL_RULES = (
    field_rule("arr", "ARR", " USD"),
    field_rule("revenue", "Total Revenue", " USD"),
    field_rule("expenses", "Total Expenses", " USD"),
    field_rule("net_profit_or_loss", "Net Profit/Loss", " USD"),
    field_rule("customer_count", "Customer Count"),
)


def _render_year(item: HistoricalFinancialItem) -> str:
    lines = [f"- Year: {item.year}"]
    lines += [indent(render(item)) for present, render in HISTORICAL_RULES if present(item)]
    return "\n".join(lines)


def _has_history(metrics: MetricsInput) -> bool:
    return bool(metrics.historical_financials)


def _render_history(metrics: MetricsInput) -> str:
    return "\n".join(_render_year(item) for item in metrics.historical_financials)


SECTIONS = (
    Section("Company", (
        field_rule("software_name", "Software Name"),
    )),
    Section("Current Core Metrics", (
        field_rule("arr", "Annual Recurring Revenue (ARR)", " USD"),
        field_rule("new_business_arr_growth_rate", "New Business ARR Growth Rate (annual)"),
        field_rule("expansion_arr_growth_rate", "Expansion ARR Growth Rate (annual)"),
        field_rule("churn_rate", "Annual Churn Rate"),
        field_rule("net_revenue_retention", "Net Revenue Retention (NRR/DBNER)"),
        field_rule("gross_margin", "Gross Margin"),
    )),
    Section("Historical Financial Performance (up to 5 years)", (
        (_has_history, _render_history),
    )),
    Section("P&L and Operational Costs", (
        field_rule("cost_of_goods_sold", "Cost of Goods Sold (COGS)", " USD"),
        field_rule("sales_marketing_spend_percentage", "Sales & Marketing Spend (% of ARR)"),
        field_rule("research_development_spend_percentage", "Research & Development Spend (% of ARR)"),
        field_rule("general_administrative_spend_percentage", "General & Administrative Spend (% of ARR)"),
        field_rule("ebitda", "EBITDA", " USD"),
    )),
    Section("Customer Segmentation & Unit Economics", (
        field_rule("total_customers", "Total Customers"),
        field_rule("customer_acquisition_cost", "Customer Acquisition Cost (CAC)", " USD"),
        field_rule("ltv_to_cac_ratio", "LTV to CAC Ratio"),
        field_rule("cac_by_channel", "CAC by Channel"),
        field_rule("cohort_analysis_summary", "Cohort Analysis Summary"),
    )),
    Section("Pricing & Sales", (
        field_rule("pricing_tiers", "Pricing Tiers"),
        field_rule("average_deal_size", "Average Deal Size (ACV)", " USD"),
        field_rule("average_contract_length_months", "Average Contract Length", " months"),
        field_rule("sales_cycle_length_days", "Average Sales Cycle", " days"),
        field_rule("customer_acquisition_channels", "Customer Acquisition Channels"),
        field_rule("marketing_spend_breakdown", "Marketing Spend Breakdown"),
    )),
    Section("Team & Operations", (
        field_rule("total_employees", "Total Employees"),
        field_rule("sales_team_size", "Sales Team Size"),
        field_rule("marketing_team_size", "Marketing Team Size"),
        field_rule("engineering_team_size", "Engineering Team Size"),
    )),
    Section("Capital Position", (
        field_rule("cash_burn_rate_monthly", "Monthly Net Cash Flow (negative = burn)", " USD"),
        field_rule("cash_runway_months", "Cash Runway", " months"),
        field_rule("total_debt", "Total Debt", " USD"),
        field_rule("equity_structure_summary", "Equity Structure Summary"),
    )),
    Section("Product Usage", (
        field_rule("daily_active_users", "Daily Active Users (DAU)"),
        field_rule("monthly_active_users", "Monthly Active Users (MAU)"),
        field_rule("key_feature_adoption_rate", "Key Feature Adoption Rate"),
    )),
    Section("Context", (
        field_rule("funding_stage", "Funding Stage"),
        field_rule("industry_vertical", "Industry Vertical"),
        field_rule("target_market", "Target Market"),
        field_rule("customer_geographic_concentration", "Customer Geographic Concentration"),
    )),
)

INSTRUCTIONS = """Analysis Instructions:
Write a detailed, professional analysis covering only the data provided above:
1. **Overall Valuation Rationale**: the primary drivers of the range. Refer to the company by name if one is given.
2. **Impact of Key Metrics**:
   - ARR size and growth: new business versus expansion, NRR, and historical trajectory when history is given.
   - Profitability and margins: gross margin, spend mix (S&M, R&D, G&A), COGS and EBITDA when given.
   - Unit economics and customer health: CAC, LTV/CAC, churn, ARR per customer, channel and cohort insights.
   - Pricing and sales efficiency: tiers, deal size, contract length, sales cycle.
   - Team and operational scale: headcount mix and ARR per employee.
   - Capital position: burn, runway, debt and equity structure (e.g. liquidation preferences).
   - Product engagement: DAU/MAU and feature adoption.
   - Context: funding stage, industry vertical, target market and geography.
3. **Valuation Multiples**: the implied ARR multiple (average valuation / ARR) and typical multiples for comparable profiles.
4. **Strengths & Weaknesses**: 2-3 key strengths and 2-3 key weaknesses that move the valuation.
Use "## " or "### " lines for subheadings, **double asterisks** for emphasis and a blank line between paragraphs."""

OUTPUT_FORMAT = """Output Format:
Respond with a JSON object with the keys lowValuation, highValuation, averageValuation, impliedARRMultiple and analysis.
Valuations are numbers in USD, impliedARRMultiple is a number and analysis is a single well-structured string."""


def build_valuation_prompt(metrics) -> Prompt:
    """Assemble the valuation prompt; raises ValidationError for bad input before rendering."""
    metrics = validate_metrics(metrics)
    text = "\n\n".join([
        PREAMBLE,
        render_sections(metrics, SECTIONS),
        INSTRUCTIONS,
        OUTPUT_FORMAT,
    ])
    return Prompt(
        name=PROMPT_NAME,
        text=text,
        output_model=ValuationResult,
        variables=metrics.model_dump(by_alias=True, exclude_none=True),
    )
