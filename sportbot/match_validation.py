"""
Match validation job.

Grades PENDING predictions whose kickoff is safely in the past against final
scores from API-Sports, then folds the run into today's `daily_stats` row.

Result lookup, in order:
1. A numeric `match_id` is an API-Football id: fetch it directly.
2. Otherwise (Odds-API hex ids, slugs, or a direct miss) split the match name
   on " vs " and search the kickoff date +/- `search_days`, stopping at the
   first matching event that is finished. Stored kickoffs are not always the
   real kickoff, which is why neighbouring days are searched.
"""

from __future__ import annotations

import hmac
import re
import time
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

from sqlalchemy.engine import Engine

from .api_sports_client import ApiSportsClient, ApiSportsError
from .config import ValidationConfig, settings
from .grading import build_graded, classify_call
from .logging_config import get_logger, log_error, log_validation
from .metrics import Timer, increment_counter
from .models import FINISHED_STATUSES, CallOutcome, GradedPrediction, MatchResult, PredictionRecord
from .persistence import fetch_pending_predictions, record_daily_stats, save_grade
from .sport_detection import SportType, detect_sport_type
from .team_matching import find_match_by_teams

logger = get_logger(__name__)

_NUMERIC_ID = re.compile(r"^\d+$")

PRODUCTS = {
    SportType.SOCCER: "football",
    SportType.BASKETBALL: "basketball",
    SportType.HOCKEY: "hockey",
}


@dataclass
class ValidationSummary:
    processed: int = 0
    hits: int = 0
    misses: int = 0
    pushes: int = 0
    errors: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


def _as_int(value: Any) -> int:
    try:
        return int(value) if value is not None else 0
    except (TypeError, ValueError):
        return 0


def event_status(event: dict[str, Any], sport_type: SportType) -> str:
    """Short status code; soccer nests it under `fixture`."""
    if sport_type == SportType.SOCCER:
        holder = event.get("fixture") or {}
    else:
        holder = event
    return ((holder.get("status") or {}).get("short")) or ""


def extract_result(event: dict[str, Any], sport_type: SportType, match_id: str) -> MatchResult:
    """
    Build a MatchResult from an API-Sports event.

    Basketball scores are `scores.<side>.total`, hockey `scores.<side>`, soccer
    `goals.<side>`. Missing scores count as 0.
    """
    if sport_type == SportType.BASKETBALL:
        scores = event.get("scores") or {}
        home = _as_int((scores.get("home") or {}).get("total"))
        away = _as_int((scores.get("away") or {}).get("total"))
    elif sport_type == SportType.HOCKEY:
        scores = event.get("scores") or {}
        home = _as_int(scores.get("home"))
        away = _as_int(scores.get("away"))
    else:
        goals = event.get("goals") or {}
        home = _as_int(goals.get("home"))
        away = _as_int(goals.get("away"))

    teams = event.get("teams") or {}
    return MatchResult(
        match_id=match_id,
        home_score=home,
        away_score=away,
        status=event_status(event, sport_type),
        home_team=(teams.get("home") or {}).get("name"),
        away_team=(teams.get("away") or {}).get("name"),
    )


def search_dates(kickoff: datetime, search_days: int) -> list[str]:
    """ISO dates kickoff-search_days .. kickoff+search_days, deduplicated, in order."""
    seen: list[str] = []
    for offset in range(-search_days, search_days + 1):
        day = (kickoff + timedelta(days=offset)).date().isoformat()
        if day not in seen:
            seen.append(day)
    return seen


def fetch_match_result(
    client: ApiSportsClient,
    record: PredictionRecord,
    config: Optional[ValidationConfig] = None,
) -> Optional[MatchResult]:
    """Resolve the vendor result for a prediction, or None when nothing was found."""
    config = config or settings.validation
    sport_type = detect_sport_type(record.sport)
    product = PRODUCTS[sport_type]
    event: Optional[dict[str, Any]] = None

    if _NUMERIC_ID.match(record.match_id or ""):
        try:
            event = client.get_by_id(product, record.match_id)
        except ApiSportsError as e:
            logger.warning("result_lookup_by_id_failed", match_id=record.match_id, error=str(e))
        if event:
            logger.info("result_found_by_id", match_id=record.match_id)

    home_team, away_team = record.teams
    if not event and home_team and away_team:
        for day in search_dates(record.kickoff, config.search_days):
            try:
                events = client.get_by_date(product, day)
            except ApiSportsError as e:
                logger.warning("result_search_failed", date=day, error=str(e))
                continue

            candidate = find_match_by_teams(
                events,
                home_team,
                away_team,
                sport=record.sport,
                enable_fuzzy=config.enable_fuzzy,
                fuzzy_threshold=config.fuzzy_threshold,
            )
            if candidate is None:
                continue

            status = event_status(candidate, sport_type)
            if status in FINISHED_STATUSES:
                logger.info("finished_match_found", date=day, match_name=record.match_name, status=status)
                event = candidate
                break
            # Found but not over; a fixture on another day may be the real one.
            logger.info("unfinished_match_skipped", date=day, match_name=record.match_name, status=status)

    if not event:
        return None
    return extract_result(event, sport_type, record.match_id)


def grade_prediction(record: PredictionRecord, result: MatchResult) -> Optional[GradedPrediction]:
    """Grade against a finished result; None when the call cannot be read."""
    verdict = classify_call(record.type, record.prediction, result)
    if verdict.outcome == CallOutcome.PENDING:
        return None
    return build_graded(record, result, verdict.outcome)


def run_match_validation(
    engine: Engine,
    client: ApiSportsClient,
    now: Optional[datetime] = None,
    config: Optional[ValidationConfig] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> ValidationSummary:
    """Grade one batch of overdue PENDING predictions and update today's stats."""
    config = config or settings.validation
    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(hours=config.grace_hours)

    pending = fetch_pending_predictions(engine, kicked_off_before=cutoff, limit=config.batch_size)
    logger.info("validation_started", pending=len(pending), cutoff=cutoff.isoformat())

    summary = ValidationSummary()
    with Timer("validation_run_duration_seconds"):
        for i, record in enumerate(pending):
            if i and config.request_delay_seconds > 0:
                sleep(config.request_delay_seconds)
            try:
                result = fetch_match_result(client, record, config)
                if result is None:
                    logger.info("no_result", prediction_id=record.id, match_name=record.match_name)
                    continue
                if not result.is_finished:
                    logger.info("match_not_finished", prediction_id=record.id, status=result.status)
                    continue

                graded = grade_prediction(record, result)
                if graded is None:
                    logger.info("could_not_auto_validate", prediction_id=record.id, prediction=record.prediction)
                    continue

                save_grade(engine, graded, now=now)
                log_validation(
                    logger,
                    prediction_id=record.id,
                    match_name=record.match_name,
                    actual_score=graded.actual_score,
                    outcome=graded.outcome.value,
                    value_bet=graded.value_bet.outcome.value if graded.value_bet else None,
                )

                summary.processed += 1
                if graded.outcome == CallOutcome.HIT:
                    summary.hits += 1
                elif graded.outcome == CallOutcome.MISS:
                    summary.misses += 1
                elif graded.outcome == CallOutcome.PUSH:
                    summary.pushes += 1
            except Exception as e:
                summary.errors += 1
                log_error(logger, e, context={"prediction_id": record.id})

    record_daily_stats(
        engine,
        now.astimezone(timezone.utc).date() if now.tzinfo else now.date(),
        hits=summary.hits,
        misses=summary.misses,
        pushes=summary.pushes,
        processed=summary.processed,
    )

    increment_counter("validation_runs_total")
    increment_counter("validation_hits_total", summary.hits)
    increment_counter("validation_misses_total", summary.misses)
    increment_counter("validation_pushes_total", summary.pushes)
    increment_counter("validation_errors_total", summary.errors)
    logger.info("validation_complete", **summary.to_dict())
    return summary


def check_cron_auth(
    authorization: Optional[str],
    vercel_cron: Optional[str],
    secret: Optional[str],
) -> bool:
    """
    Cron requests are open when no secret is configured; otherwise they need
    the scheduler's `x-vercel-cron: 1` header or `Authorization: Bearer <secret>`.
    """
    if not secret:
        return True
    if vercel_cron == "1":
        return True
    return hmac.compare_digest(authorization or "", f"Bearer {secret}")
