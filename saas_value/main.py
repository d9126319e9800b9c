import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Routers
from .routers.valuation import router as valuation_router

# Core modules
from .core.config import settings
from .core.errors import ModelOutputInvalid, ModelOutputMissing, ValidationError, violations_from_errors
from .core.logging import configure_logging, CorrelationIdMiddleware
from .core.metrics import PromMiddleware, metrics_endpoint

logger = logging.getLogger(__name__)

async def _validation_error(request: Request, exc: ValidationError):
    return JSONResponse(status_code=422, content=exc.to_dict())

async def _request_validation_error(request: Request, exc: RequestValidationError):
    # Same shape as ValidationError so clients handle one format
    err = ValidationError(violations_from_errors(exc.errors(), skip_prefix=("body",)), "Request failed validation")
    return JSONResponse(status_code=422, content=err.to_dict())

async def _model_error(request: Request, exc: ModelOutputMissing | ModelOutputInvalid):
    logger.error("model failure on %s: %s", request.url.path, exc.message)
    return JSONResponse(status_code=502, content=exc.to_dict())

def create_app() -> FastAPI:
    """
    App factory so tests and ASGI servers can instantiate cleanly.
    """
    configure_logging()  # JSON logs + request-id filter

    app = FastAPI(
        title="SaaS Value API",
        version="1.0.0",
        description="SaaS valuation estimates and benchmark comparisons from a language model.",
    )

    allow_origins = [o.strip() for o in settings.ALLOW_ORIGINS.split(",")] if settings.ALLOW_ORIGINS else ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-Id"],
    )

    # Observability middlewares
    app.add_middleware(CorrelationIdMiddleware)  # Adds/propagates X-Request-Id
    if settings.PROMETHEUS_ENABLED:
        app.add_middleware(PromMiddleware)       # Records req/latency metrics

    # Error taxonomy → HTTP
    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(RequestValidationError, _request_validation_error)
    app.add_exception_handler(ModelOutputMissing, _model_error)
    app.add_exception_handler(ModelOutputInvalid, _model_error)

    # Meta routes
    @app.get("/v1/health", tags=["meta"])
    def health():
        return {"status": "ok", "model_provider": settings.MODEL_PROVIDER}

    @app.get("/v1/ping", tags=["meta"])
    def ping():
        return {"pong": True}

    if settings.PROMETHEUS_ENABLED:
        app.add_route("/v1/metrics", metrics_endpoint, methods=["GET"])

    # Business routes
    app.include_router(valuation_router, prefix="/v1", tags=["valuation"])

    return app

app = create_app()
