"""
Database schema for predictions and daily stats.

Tables are declared with SQLAlchemy Core so the same metadata drives the
production Postgres database and the in-memory SQLite engine used by tests.
All datetimes are stored as naive UTC.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Column,
    Date,
    DateTime,
    Float,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
)
from sqlalchemy.engine import Engine

from .logging_config import get_logger

logger = get_logger(__name__)

metadata = MetaData()

predictions = Table(
    "predictions",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("match_id", String(128), nullable=False),
    Column("match_name", String(255), nullable=False),
    Column("sport", String(64), nullable=False),
    Column("league", String(128)),
    Column("kickoff", DateTime, nullable=False, index=True),
    Column("type", String(32), nullable=False),
    Column("prediction", Text, nullable=False),
    Column("selection", String(32)),
    Column("conviction", Integer, nullable=False, default=1),
    Column("outcome", String(16), nullable=False, default="PENDING", index=True),
    Column("actual_result", String(32)),
    Column("actual_score", String(32)),
    Column("binary_outcome", Integer),
    Column("validated_at", DateTime),
    Column("result_timestamp", DateTime),
    Column("value_bet_side", String(8)),
    Column("value_bet_odds", Float),
    Column("value_bet_outcome", String(8)),
    Column("value_bet_profit", Float),
    Column("edge_value", Float),
    Column("edge_bucket", String(32)),
    Column("model_probability", Float),
    Column("market_odds_at_prediction", Float),
    Column("home_win", Float),
    Column("draw", Float),
    Column("away_win", Float),
    Column("predicted_score", String(32)),
    Column("headline", JSON),
    Column("reasoning", Text),
    Column("full_response", JSON),
    Column("created_at", DateTime, nullable=False, default=lambda: utcnow_naive()),
)

daily_stats = Table(
    "daily_stats",
    metadata,
    Column("date", Date, primary_key=True),
    Column("hits", Integer, nullable=False, default=0),
    Column("misses", Integer, nullable=False, default=0),
    Column("pushes", Integer, nullable=False, default=0),
    Column("total_predictions", Integer, nullable=False, default=0),
    Column("hit_rate", Float, nullable=False, default=0.0),
)


def utcnow_naive() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are assumed UTC."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def create_db_engine(database_url: str, **kwargs) -> Engine:
    """Create an engine with pre-ping so stale pooled connections are replaced."""
    kwargs.setdefault("pool_pre_ping", True)
    return create_engine(database_url, **kwargs)


def create_schema(engine: Engine) -> None:
    """Create any missing tables."""
    metadata.create_all(engine)
    logger.info(
        "schema_ready",
        tables=sorted(metadata.tables),
        url=engine.url.render_as_string(hide_password=True),
    )
