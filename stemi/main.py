"""
STEMI Detector - FastAPI Application

API endpoints for:
- STEMI probability prediction with per-feature explanations
- Feature schema and model reference data
- Health checks

Educational demo only; not for diagnosis or treatment.
"""
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from stemi import config
from stemi.core.features import schema_description
from stemi.core.validation import FeatureValidator
from stemi.models import (
    PredictionResponse,
    ValidationErrorResponse,
    ErrorResponse,
    HealthResponse,
    FeatureSchemaResponse,
    ModelInfoResponse,
)
from stemi.services import PredictionService
from stemi.utils import get_logger, setup_logging
from stemi.utils.exceptions import (
    StemiDetectorError,
    RequestFormatError,
    FeatureValidationError,
)

setup_logging(level=config.LOG_LEVEL, log_file=config.LOG_FILE or None)
logger = get_logger(__name__)


# ---- Prediction service (model constants are loaded once, here) ----
_prediction_service = PredictionService(
    validator=FeatureValidator(reject_unknown=config.REJECT_UNKNOWN_FIELDS),
)
START_TIME = datetime.now()


# ---- Application Lifespan ----

@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.prediction_service = _prediction_service
    logger.info(
        f"API ready to accept requests (model={_prediction_service.engine.model_version})"
    )
    yield
    logger.info("STEMI Detector API shut down.")


# ---- FastAPI Application ----

app = FastAPI(
    title=config.APP_NAME,
    description="Educational STEMI probability estimate with log-odds explanations (not for clinical use)",
    version=config.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


# ---- Error handling ----

@app.exception_handler(StemiDetectorError)
async def stemi_error_handler(request: Request, exc: StemiDetectorError) -> JSONResponse:
    """Translate the exception hierarchy into HTTP responses."""
    if isinstance(exc, FeatureValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid input", "issues": exc.issues},
        )
    if isinstance(exc, RequestFormatError):
        return JSONResponse(status_code=400, content={"error": "Bad request"})

    # Anything else is an internal model failure
    logger.error(f"{request.url.path} failed: [{exc.code}] {exc.message}")
    return JSONResponse(status_code=500, content=exc.to_dict())


# ---- Utility Functions ----

async def _read_json_object(request: Request) -> Dict[str, Any]:
    """Decode the request body, which must be a single JSON object."""
    try:
        body = await request.json()
    except ValueError as e:
        logger.info(f"Rejected unparseable request body: {e}")
        raise RequestFormatError(details={"reason": "body is not valid JSON"}) from e

    if not isinstance(body, dict):
        logger.info(f"Rejected request body of type {type(body).__name__}")
        raise RequestFormatError(details={"reason": "body must be a JSON object"})
    return body


# ---- API Endpoints ----

@app.get("/", response_model=HealthResponse, tags=["Health"])
async def root():
    """API root - health check."""
    return await health_check()


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Liveness probe with model version and uptime."""
    return HealthResponse(
        status="healthy",
        version=config.APP_VERSION,
        model_version=_prediction_service.engine.model_version,
        uptime_seconds=(datetime.now() - START_TIME).total_seconds(),
    )


@app.get("/api/v1/features", response_model=FeatureSchemaResponse, tags=["Reference"])
async def list_features():
    """Canonical feature names, types and bounds."""
    return FeatureSchemaResponse(features=schema_description())


@app.get("/api/v1/model", response_model=ModelInfoResponse, tags=["Reference"])
async def model_info():
    """Coefficient table, risk thresholds and feature schema of the served model."""
    return ModelInfoResponse(**_prediction_service.model_info())


@app.post(
    "/api/v1/predict",
    response_model=PredictionResponse,
    tags=["Prediction"],
    responses={
        400: {"model": ValidationErrorResponse, "description": "Invalid input or malformed body"},
        500: {"model": ErrorResponse, "description": "Internal model failure"},
    },
)
async def predict(request: Request):
    """
    Estimate the probability of STEMI for one patient.

    The body must be a JSON object with the ten canonical features (see
    ``GET /api/v1/features``). Numbers must be JSON numbers and flags JSON
    booleans.
    """
    body = await _read_json_object(request)
    result = _prediction_service.predict(body)
    return PredictionResponse(**result.to_dict())


# Path used by the browser form
app.add_api_route(
    "/api/predict",
    predict,
    methods=["POST"],
    response_model=PredictionResponse,
    tags=["Prediction"],
    include_in_schema=False,
)


# ---- Run with uvicorn ----
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=config.HOST, port=config.PORT)
