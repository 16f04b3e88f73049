import hmac
import time
from functools import lru_cache
from typing import Any, Optional

from fastapi import Body, Depends, FastAPI, Header, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, StrictInt, ValidationError
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from sqlalchemy.engine import Engine
from starlette.middleware.base import BaseHTTPMiddleware

from .api_sports_client import ApiSportsClient, ApiSportsError
from .config import settings
from .db import create_db_engine, create_schema
from .editorial_picks import PicksCache, get_editorial_picks
from .grading import evaluate_value_bet, grade_manual_result
from .logging_config import get_logger, log_error, log_request
from .match_validation import check_cron_auth, run_match_validation
from .metrics import increment_counter, metrics, observe_histogram
from .models import GradedPrediction, MatchResult
from .persistence import get_prediction, save_grade

logger = get_logger(__name__)

limiter = Limiter(key_func=get_remote_address)

picks_cache = PicksCache()


# -----------------------------
# Request Logging Middleware
# -----------------------------

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every HTTP request and record its duration."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            log_error(
                logger,
                e,
                context={
                    "method": request.method,
                    "path": request.url.path,
                    "duration_ms": duration_ms,
                },
            )
            raise

        duration = time.perf_counter() - start_time
        log_request(
            logger,
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=duration * 1000,
        )
        increment_counter("http_requests_total")
        observe_histogram("http_request_duration_seconds", duration)
        return response


# -----------------------------
# Dependencies
# -----------------------------

@lru_cache(maxsize=1)
def _engine_for(database_url: str) -> Engine:
    engine = create_db_engine(database_url)
    if settings.auto_create_schema:
        create_schema(engine)
    return engine


def get_engine() -> Engine:
    if not settings.database_url:
        raise HTTPException(status_code=503, detail="DATABASE_URL is not configured")
    return _engine_for(settings.database_url)


def get_api_sports_client() -> ApiSportsClient:
    try:
        return ApiSportsClient(api_key=settings.api_football_key, timeout=settings.api_timeout_seconds)
    except ApiSportsError as e:
        raise HTTPException(status_code=503, detail=str(e))


def get_picks_cache() -> PicksCache:
    return picks_cache


class ApiError(Exception):
    """Error rendered as `{"error": message}`, the shape the web front end reads."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def require_admin(authorization: Optional[str] = Header(default=None)) -> None:
    """Bearer ADMIN_TOKEN; without a configured token every admin call is refused."""
    token = settings.admin_token
    if not token or not hmac.compare_digest(authorization or "", f"Bearer {token}"):
        raise ApiError(401, "Unauthorized")


def require_cron(
    authorization: Optional[str] = Header(default=None),
    x_vercel_cron: Optional[str] = Header(default=None),
) -> None:
    if not check_cron_auth(authorization, x_vercel_cron, settings.cron_secret):
        raise ApiError(401, "Unauthorized")


class ScoreUpdate(BaseModel):
    homeScore: StrictInt
    awayScore: StrictInt


# -----------------------------
# App
# -----------------------------

app = FastAPI(
    title="SportBot Results Service",
    description="""
    Prediction grading and editorial picks for SportBot.

    - **/api/cron/match-validation**: grade overdue predictions (scheduler)
    - **/api/editorial-picks**: top upcoming picks, tiered by plan
    - **/api/admin/...**: manual results and cache control (bearer token)
    """,
    version=settings.service_version,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(RequestLoggingMiddleware)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    return {
        "message": "SportBot Results Service",
        "docs_url": "/docs",
        "health_url": "/health",
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "service": settings.service_name,
        "version": settings.service_version,
        "status": "ok",
    }


@app.get("/metrics")
async def get_metrics():
    """Metrics in the Prometheus text format."""
    return PlainTextResponse(metrics.render_prometheus(settings.service_version), media_type="text/plain")


# -----------------------------
# Match validation (cron)
# -----------------------------

@app.api_route("/api/cron/match-validation", methods=["GET", "POST"], dependencies=[Depends(require_cron)])
def match_validation(
    engine: Engine = Depends(get_engine),
    client: ApiSportsClient = Depends(get_api_sports_client),
):
    try:
        summary = run_match_validation(engine, client)
    except Exception as e:
        log_error(logger, e, context={"job": "match_validation"})
        return JSONResponse({"success": False, "error": str(e) or type(e).__name__}, status_code=500)
    return {"success": True, **summary.to_dict()}


# -----------------------------
# Editorial picks
# -----------------------------

@app.get("/api/editorial-picks")
@limiter.limit(settings.picks.rate_limit)
def editorial_picks(
    request: Request,
    limit: Optional[int] = None,
    x_user_plan: Optional[str] = Header(default=None),
    engine: Engine = Depends(get_engine),
    cache: PicksCache = Depends(get_picks_cache),
):
    is_pro = (x_user_plan or "").strip().upper() in settings.picks.pro_plans
    try:
        return get_editorial_picks(engine, cache, is_pro, limit)
    except Exception as e:
        log_error(logger, e, context={"endpoint": "editorial_picks"})
        return JSONResponse({"success": False, "error": "Failed to fetch picks"}, status_code=500)


# -----------------------------
# Admin
# -----------------------------

@app.patch("/api/admin/predictions/{prediction_id}/result", dependencies=[Depends(require_admin)])
def update_prediction_result(
    prediction_id: str,
    payload: Any = Body(default=None),
    engine: Engine = Depends(get_engine),
):
    """Enter a final score by hand and grade the prediction against it."""
    try:
        scores = ScoreUpdate.model_validate(payload)
    except ValidationError:
        raise ApiError(400, "Invalid scores")
    if scores.homeScore < 0 or scores.awayScore < 0:
        raise ApiError(400, "Scores cannot be negative")

    record = get_prediction(engine, prediction_id)
    if record is None:
        raise ApiError(404, "Prediction not found")

    result = MatchResult(record.match_id, scores.homeScore, scores.awayScore, "FT")
    actual = result.actual_result
    graded = GradedPrediction(
        prediction_id=record.id,
        outcome=grade_manual_result(record.prediction, record.selection, actual),
        actual_result=actual.value,
        actual_score=result.actual_score,
        value_bet=evaluate_value_bet(record.value_bet_side, record.value_bet_odds, actual),
    )
    save_grade(engine, graded)
    logger.info("manual_result_saved", prediction_id=record.id, score=graded.actual_score, outcome=graded.outcome.value)

    return {
        "success": True,
        "prediction": {
            "id": record.id,
            "matchName": record.match_name,
            "actualScore": graded.actual_score,
            "actualResult": graded.actual_result,
            "outcome": graded.outcome.value,
            "binaryOutcome": graded.binary_outcome,
            "valueBetOutcome": graded.value_bet.outcome.value if graded.value_bet else None,
            "valueBetProfit": graded.value_bet.profit if graded.value_bet else None,
        },
    }


@app.post("/api/admin/clear-cache", dependencies=[Depends(require_admin)])
def clear_cache(cache: PicksCache = Depends(get_picks_cache)):
    cleared = cache.clear()
    logger.info("picks_cache_cleared", entries=cleared)
    return {"success": True, "cleared": cleared}


@app.post("/api/admin/predictions/fetch-results", dependencies=[Depends(require_admin)])
def fetch_results(
    engine: Engine = Depends(get_engine),
    client: ApiSportsClient = Depends(get_api_sports_client),
):
    """Run the match-validation job on demand."""
    try:
        summary = run_match_validation(engine, client)
    except Exception as e:
        log_error(logger, e, context={"job": "match_validation", "trigger": "admin"})
        return JSONResponse({"success": False, "error": str(e) or type(e).__name__}, status_code=500)
    return {"success": True, **summary.to_dict()}
