from fastapi import APIRouter, Depends

from ..core.security import require_api_key, rate_limit
from ..field_catalog import GROUPS, catalog_as_dicts
from ..schemas import AnalysisResult, BenchmarkRequest, BenchmarkResult, MetricsInput, ValuationResult
from ..services.valuation_service import ValuationService

router = APIRouter()

def service_dep() -> ValuationService:
    # Stateless; building one per request keeps provider settings fresh.
    return ValuationService()

@router.get("/fields")
def get_fields():
    """Field metadata for form renderers (labels, groups, ranges)."""
    return {"groups": list(GROUPS), "fields": catalog_as_dicts()}

@router.post("/valuation", response_model=ValuationResult, response_model_by_alias=True)
async def post_valuation(
    body: MetricsInput,
    _auth = Depends(require_api_key),
    _lim  = Depends(rate_limit),
    svc: ValuationService = Depends(service_dep),
):
    return await svc.estimate_valuation(body)

@router.post("/benchmark", response_model=BenchmarkResult, response_model_by_alias=True)
async def post_benchmark(
    body: BenchmarkRequest,
    _auth = Depends(require_api_key),
    _lim  = Depends(rate_limit),
    svc: ValuationService = Depends(service_dep),
):
    return await svc.compare_benchmarks(body.metrics, body.valuation)

@router.post("/analysis", response_model=AnalysisResult, response_model_by_alias=True)
async def post_analysis(
    body: MetricsInput,
    _auth = Depends(require_api_key),
    _lim  = Depends(rate_limit),
    svc: ValuationService = Depends(service_dep),
):
    """Valuation then benchmark, in that order, in one round trip."""
    return await svc.run_analysis(body)
