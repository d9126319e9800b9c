import logging

from ..core.config import settings
from ..core.errors import SaasValueError
from ..models.base import LanguageModel
from ..models.http_model import HttpModel
from ..models.mock_model import MockModel
from ..models.openai_model import OpenAIModel
from ..prompts.benchmark import build_benchmark_prompt
from ..prompts.valuation import build_valuation_prompt
from ..schemas import (
    AnalysisResult,
    BenchmarkResult,
    MetricsInput,
    StepError,
    ValuationResult,
    validate_metrics,
)
from .invocation import invoke_model

logger = logging.getLogger(__name__)


def implied_arr_multiple(average_valuation: float, arr: float) -> float:
    """average / ARR rounded to 2 places; 0 when ARR is 0."""
    if not arr:
        return 0.0
    return round(average_valuation / arr, 2)


def language_model() -> LanguageModel:
    """
    Factory picks the model provider based on env flags.
    """
    provider = settings.MODEL_PROVIDER
    if provider == "openai":
        return OpenAIModel()
    if provider == "http":
        if not settings.MODEL_BASE_URL:
            raise RuntimeError("MODEL_BASE_URL is required for the http model provider")
        return HttpModel(settings.MODEL_BASE_URL)
    return MockModel()


class ValuationService:
    """
    Orchestrates:
      metrics → validation → prompt → model → output validation → post-processing
    Holds no state between calls; every call hits the model.
    """
    def __init__(self, model: LanguageModel | None = None, timeout: float | None = None):
        self.model = model or language_model()
        self.timeout = timeout or settings.MODEL_TIMEOUT_SECONDS

    async def estimate_valuation(self, raw) -> ValuationResult:
        metrics = validate_metrics(raw)
        prompt = build_valuation_prompt(metrics)
        result = await invoke_model(self.model, prompt, self.timeout)

        if result.implied_arr_multiple is None:
            result.implied_arr_multiple = implied_arr_multiple(result.average_valuation, metrics.arr)
        else:
            result.implied_arr_multiple = round(result.implied_arr_multiple, 2)
        return result

    async def compare_benchmarks(self, metrics, valuation: ValuationResult | None) -> BenchmarkResult:
        """Benchmark the metrics against the average of a prior valuation.

        Raises ValidationError when ``valuation`` is missing.
        """
        prompt = build_benchmark_prompt(metrics, valuation)
        return await invoke_model(self.model, prompt, self.timeout)

    async def run_analysis(self, raw) -> AnalysisResult:
        """Valuation first, then the benchmark that depends on it.

        A valuation failure propagates and the benchmark is never attempted.
        A benchmark failure is reported next to the valuation, never instead of it.
        """
        metrics: MetricsInput = validate_metrics(raw)
        valuation = await self.estimate_valuation(metrics)

        try:
            benchmark = await self.compare_benchmarks(metrics, valuation)
        except SaasValueError as exc:
            logger.warning("benchmark step failed after a successful valuation: %s", exc.message)
            return AnalysisResult(
                valuation=valuation,
                benchmark_error=StepError(error=exc.code, detail=exc.message),
            )
        return AnalysisResult(valuation=valuation, benchmark=benchmark)
