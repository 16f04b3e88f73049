"""
Reads and writes for the `predictions` and `daily_stats` tables.

Each write runs in its own short transaction (`engine.begin()`), so one failed
update never rolls back predictions graded earlier in the same batch.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from sqlalchemy import and_, func, select, update
from sqlalchemy.engine import Engine

from .db import daily_stats, predictions, to_naive_utc, utcnow_naive
from .models import CallOutcome, GradedPrediction, PredictionRecord

_RECORD_COLUMNS = (
    predictions.c.id,
    predictions.c.match_id,
    predictions.c.match_name,
    predictions.c.sport,
    predictions.c.kickoff,
    predictions.c.type,
    predictions.c.prediction,
    predictions.c.conviction,
    predictions.c.selection,
    predictions.c.value_bet_side,
    predictions.c.value_bet_odds,
)


def fetch_pending_predictions(
    engine: Engine,
    kicked_off_before: Optional[datetime] = None,
    limit: Optional[int] = None,
) -> list[PredictionRecord]:
    """PENDING predictions, oldest kickoff first."""
    stmt = select(*_RECORD_COLUMNS).where(predictions.c.outcome == CallOutcome.PENDING.value)
    if kicked_off_before is not None:
        stmt = stmt.where(predictions.c.kickoff < to_naive_utc(kicked_off_before))
    stmt = stmt.order_by(predictions.c.kickoff.asc())
    if limit is not None:
        stmt = stmt.limit(limit)

    with engine.connect() as conn:
        rows = conn.execute(stmt).mappings().all()
    return [PredictionRecord.from_row(r) for r in rows]


def get_prediction(engine: Engine, prediction_id: str) -> Optional[PredictionRecord]:
    stmt = select(*_RECORD_COLUMNS).where(predictions.c.id == prediction_id)
    with engine.connect() as conn:
        row = conn.execute(stmt).mappings().first()
    return PredictionRecord.from_row(row) if row else None


def save_grade(engine: Engine, graded: GradedPrediction, now: Optional[datetime] = None) -> bool:
    """
    Write a graded outcome back to its prediction row.

    Value-bet columns are only touched when the prediction carried a value bet.
    Returns False when no row has the given id.
    """
    ts = to_naive_utc(now) if now else utcnow_naive()
    values: dict[str, Any] = {
        "outcome": graded.outcome.value,
        "actual_result": graded.actual_result,
        "actual_score": graded.actual_score,
        "binary_outcome": graded.binary_outcome,
        "validated_at": ts,
        "result_timestamp": ts,
    }
    if graded.value_bet is not None:
        values["value_bet_outcome"] = graded.value_bet.outcome.value
        values["value_bet_profit"] = graded.value_bet.profit

    stmt = update(predictions).where(predictions.c.id == graded.prediction_id).values(**values)
    with engine.begin() as conn:
        res = conn.execute(stmt)
    return res.rowcount > 0


def record_daily_stats(
    engine: Engine,
    day: date,
    hits: int,
    misses: int,
    pushes: int,
    processed: int,
) -> dict[str, Any]:
    """
    Add one run's counts to the day's totals and recompute the hit rate.

    hit_rate is hits / (hits + misses) * 100 over the accumulated totals, and
    0.0 while nothing has been decided.
    """
    with engine.begin() as conn:
        row = conn.execute(
            select(daily_stats).where(daily_stats.c.date == day)
        ).mappings().first()

        if row is None:
            totals = {
                "hits": hits,
                "misses": misses,
                "pushes": pushes,
                "total_predictions": processed,
            }
        else:
            totals = {
                "hits": row["hits"] + hits,
                "misses": row["misses"] + misses,
                "pushes": row["pushes"] + pushes,
                "total_predictions": row["total_predictions"] + processed,
            }

        decided = totals["hits"] + totals["misses"]
        totals["hit_rate"] = (totals["hits"] / decided) * 100 if decided > 0 else 0.0

        if row is None:
            conn.execute(daily_stats.insert().values(date=day, **totals))
        else:
            conn.execute(update(daily_stats).where(daily_stats.c.date == day).values(**totals))

    return {"date": day, **totals}


def _editorial_filter(start: datetime, end: datetime, min_probability: float, min_edge: float):
    return and_(
        predictions.c.kickoff >= to_naive_utc(start),
        predictions.c.kickoff <= to_naive_utc(end),
        predictions.c.outcome == CallOutcome.PENDING.value,
        predictions.c.model_probability >= min_probability,
        predictions.c.edge_value >= min_edge,
    )


def fetch_editorial_candidates(
    engine: Engine,
    start: datetime,
    end: datetime,
    min_probability: float,
    min_edge: float,
    limit: int,
) -> tuple[int, list[dict[str, Any]]]:
    """
    Upcoming high-confidence predictions for the editorial picks page.

    Returns (total matching rows, top `limit` rows by model probability then edge).
    """
    where = _editorial_filter(start, end, min_probability, min_edge)
    count_stmt = select(func.count()).select_from(predictions).where(where)
    rows_stmt = (
        select(
            predictions.c.id,
            predictions.c.match_id,
            predictions.c.match_name,
            predictions.c.sport,
            predictions.c.league,
            predictions.c.kickoff,
            predictions.c.edge_value,
            predictions.c.edge_bucket,
            predictions.c.model_probability,
            predictions.c.market_odds_at_prediction,
            predictions.c.selection,
            predictions.c.value_bet_side,
            predictions.c.home_win,
            predictions.c.draw,
            predictions.c.away_win,
            predictions.c.predicted_score,
            predictions.c.headline,
            predictions.c.reasoning,
            predictions.c.full_response,
        )
        .where(where)
        .order_by(predictions.c.model_probability.desc(), predictions.c.edge_value.desc())
        .limit(limit)
    )

    with engine.connect() as conn:
        total = conn.execute(count_stmt).scalar_one()
        rows = [dict(r) for r in conn.execute(rows_stmt).mappings().all()]
    return int(total), rows
