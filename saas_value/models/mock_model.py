from typing import Any, Dict

from .base import LanguageModel
from ..core.utils import fnv1a_32, seeded_rand, valuation_band
from ..prompts.base import Prompt
from ..schemas import BenchmarkResult, ValuationResult

class MockModel(LanguageModel):
    """
    Deterministic offline stand-in for a language model. Seeds on the prompt
    text and reads the validated variables to produce plausible replies in
    the same shape a real model returns. The valuation reply leaves out
    impliedARRMultiple, as real models sometimes do.
    """
    async def generate(self, prompt: Prompt) -> Any:
        seed = fnv1a_32(prompt.text)
        if prompt.output_model is ValuationResult:
            return self._valuation(prompt.variables, seed)
        if prompt.output_model is BenchmarkResult:
            return self._benchmark(prompt.variables)
        return None

    def _valuation(self, v: Dict[str, Any], seed: int) -> Dict[str, Any]:
        arr = float(v.get("arr", 0))
        growth = float(v.get("newBusinessARRGrowthRate", 0)) + float(v.get("expansionARRGrowthRate", 0))
        nrr = float(v.get("netRevenueRetention", 1))
        margin = float(v.get("grossMargin", 0.7))

        # Rough multiple: growth and retention push it up, noise keeps it lively
        multiple = 2.0 + growth * 8.0 + max(0.0, nrr - 1.0) * 10.0 + (margin - 0.7) * 5.0
        multiple = max(1.0, multiple + (seeded_rand(seed, 1)[0] - 0.5))
        average = int(round(arr * multiple))
        low, high = valuation_band(average, seed)

        name = v.get("softwareName") or "The company"
        analysis = (
            "## Overall Valuation Rationale\n\n"
            f"{name} is valued at roughly **{multiple:.1f}x ARR**, driven by combined growth of "
            f"{growth:.0%} and net revenue retention of {nrr:.0%}.\n\n"
            "### Strengths & Weaknesses\n\n"
            f"Gross margin of {margin:.0%} "
            + ("supports the multiple." if margin >= 0.75 else "weighs on the multiple.")
        )
        return {
            "lowValuation": low,
            "highValuation": high,
            "averageValuation": average,
            "analysis": analysis,
        }

    def _benchmark(self, v: Dict[str, Any]) -> Dict[str, Any]:
        growth = float(v.get("totalGrowthRate", 0))
        churn = float(v.get("churnRate", 0))
        nrr = float(v.get("netRevenueRetention", 1))
        margin = float(v.get("grossMargin", 0))
        ltv_cac = v.get("ltvToCacRatio")

        checks = [
            (growth >= 0.3, "Growth rate above average for its ARR level", "Growth rate below typical SaaS benchmarks"),
            (churn <= 0.1, "Churn in line with healthy SaaS companies", "Churn higher than typical for well-performing SaaS"),
            (nrr >= 1.1, "Strong net revenue retention", "Net revenue retention leaves room for expansion"),
            (margin >= 0.75, "Gross margin at or above SaaS norms", "Gross margin below the 75% SaaS norm"),
        ]
        if ltv_cac is not None:
            checks.append((float(ltv_cac) >= 3, "Efficient unit economics (LTV/CAC of 3 or more)",
                           "LTV/CAC below the 3:1 rule of thumb"))

        strengths = [good for ok, good, _ in checks if ok]
        improvements = [bad for ok, _, bad in checks if not ok]
        return {
            "benchmarkAnalysis": (
                f"{len(strengths)} of {len(checks)} key metrics meet or beat typical SaaS benchmarks. "
                "Benchmarks vary by segment and stage."
            ),
            "strengthAreas": strengths,
            "improvementAreas": improvements,
        }
