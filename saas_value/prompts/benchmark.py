from ..core.utils import format_number
from ..schemas import BenchmarkInput, BenchmarkResult, validate_benchmark_input
from .base import Prompt, Section, field_rule, render_sections

PROMPT_NAME = "benchmark_comparison"

PREAMBLE = (
    "You are a seasoned SaaS industry analyst. Provide a competitive benchmark analysis for a SaaS company "
    "based on the following metrics and its AI-estimated valuation. "
    "Rates are decimals (0.3 means 30%); currency amounts are USD."
)


def _render_growth(data: BenchmarkInput) -> str:
    return (
        f"- Year-over-Year Growth Rate: {format_number(data.total_growth_rate)}"
        f" (new business {format_number(data.new_business_arr_growth_rate)}"
        f" + expansion {format_number(data.expansion_arr_growth_rate)})"
    )


SECTIONS = (
    Section("Company", (
        field_rule("software_name", "Software Name"),
    )),
    Section("Company Metrics", (
        field_rule("arr", "Annual Recurring Revenue (ARR)", " USD"),
        (lambda data: True, _render_growth),
        field_rule("churn_rate", "Annual Churn Rate"),
        field_rule("net_revenue_retention", "Net Revenue Retention (NRR)"),
        field_rule("gross_margin", "Gross Margin"),
        field_rule("estimated_average_valuation", "Estimated Average Valuation", " USD"),
    )),
    Section("Unit Economics", (
        field_rule("customer_acquisition_cost", "Customer Acquisition Cost (CAC)", " USD"),
        field_rule("ltv_to_cac_ratio", "LTV to CAC Ratio"),
        field_rule("sales_marketing_spend_percentage", "Sales & Marketing Spend (% of ARR)"),
    )),
    Section("Context", (
        field_rule("funding_stage", "Funding Stage"),
        field_rule("industry_vertical", "Industry Vertical"),
        field_rule("target_market", "Target Market"),
    )),
)

INSTRUCTIONS = """Instructions:
1. **Overall Benchmark Analysis**: compare ARR size, growth, churn, NRR and gross margin, and the estimated valuation, with typical SaaS benchmarks for a company of this ARR level. For each metric say whether it is strong, average or a concern, and how together they influence the valuation.
2. **Strength Areas**: 2-3 areas where the company performs notably well against industry expectations.
3. **Improvement Areas**: 2-3 areas where the company trails benchmarks; make them actionable or name the risk.
Be realistic, note that benchmarks vary, and write for founders and investors."""

OUTPUT_FORMAT = (
    'Output Format:\nRespond with a JSON object with the keys "benchmarkAnalysis" (string), '
    '"strengthAreas" (array of short strings) and "improvementAreas" (array of short strings).'
)


def build_benchmark_prompt(metrics, valuation) -> Prompt:
    """Assemble the benchmark prompt from metrics plus a prior valuation result.

    Raises ValidationError when the metrics are invalid or no average
    valuation is available.
    """
    data = validate_benchmark_input(metrics, valuation)
    text = "\n\n".join([
        PREAMBLE,
        render_sections(data, SECTIONS),
        INSTRUCTIONS,
        OUTPUT_FORMAT,
    ])
    variables = data.model_dump(by_alias=True, exclude_none=True)
    variables["totalGrowthRate"] = data.total_growth_rate
    return Prompt(
        name=PROMPT_NAME,
        text=text,
        output_model=BenchmarkResult,
        variables=variables,
    )
