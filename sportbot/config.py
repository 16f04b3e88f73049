"""
Configuration for the SportBot results service.

Everything is read from the environment (no .env file). Nested groups use the
`__` delimiter, e.g. `VALIDATION__BATCH_SIZE=50` or `PICKS__MIN_EDGE=4`.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from . import __version__ as APP_VERSION


class ValidationConfig(BaseModel):
    """Knobs for the match-validation cron job."""

    grace_hours: float = Field(
        default=2.0,
        description="Only predictions whose kickoff is older than this are checked."
    )
    batch_size: int = Field(
        default=20,
        description="Maximum predictions graded per run."
    )
    search_days: int = Field(
        default=2,
        description="Days either side of the stored kickoff searched by team names."
    )
    request_delay_seconds: float = Field(
        default=0.5,
        description="Pause between predictions to stay under the vendor rate limit."
    )
    enable_fuzzy: bool = Field(
        default=False,
        description="Fall back to token-set fuzzy matching for team names."
    )
    fuzzy_threshold: int = Field(
        default=90,
        description="Minimum token-set ratio (0-100) for a fuzzy team match."
    )


class PicksConfig(BaseModel):
    """Editorial picks selection rules."""

    default_limit: int = 3
    max_limit: int = 12
    min_model_probability: float = Field(
        default=60.0,
        description="Minimum model probability (percent) for a pick."
    )
    min_edge: float = Field(
        default=3.0,
        description="Minimum edge (points) over the implied probability."
    )
    lookahead_days: int = Field(
        default=3,
        description="Picks kick off between now and the end of this many UTC days ahead."
    )
    rate_limit: str = "30/minute"
    pro_plans: list[str] = Field(default=["PRO", "PREMIUM"])

    @field_validator("pro_plans", mode="before")
    @classmethod
    def parse_pro_plans(cls, v):
        """Accept a comma-separated string."""
        if isinstance(v, str):
            return [s.strip().upper() for s in v.split(",") if s.strip()]
        return v


class Settings(BaseSettings):
    """Application settings."""

    service_name: str = "sportbot-results"
    service_version: str = APP_VERSION
    debug: bool = False

    database_url: Optional[str] = Field(
        default=None,
        description="SQLAlchemy URL, e.g. postgresql://user:pw@host/db."
    )
    auto_create_schema: bool = Field(
        default=False,
        description="Create missing tables at startup (local development)."
    )

    api_football_key: Optional[str] = Field(
        default=None,
        description="API-Sports key, shared by every sport endpoint."
    )
    api_timeout_seconds: float = 30.0

    cron_secret: Optional[str] = None
    admin_token: Optional[str] = None

    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    picks: PicksConfig = Field(default_factory=PicksConfig)

    class Config:
        env_nested_delimiter = "__"


settings = Settings()
