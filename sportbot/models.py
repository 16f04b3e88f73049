"""
Domain models for prediction grading.

Plain dataclasses and string enums; persistence lives in `db.py` / `persistence.py`.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class CallType(str, Enum):
    """Market a prediction is made on."""
    MATCH_RESULT = "MATCH_RESULT"
    OVER_UNDER = "OVER_UNDER"
    BTTS = "BTTS"
    CLEAN_SHEET = "CLEAN_SHEET"
    DOUBLE_CHANCE = "DOUBLE_CHANCE"


class CallOutcome(str, Enum):
    """Grading state of a prediction."""
    PENDING = "PENDING"
    HIT = "HIT"
    MISS = "MISS"
    PUSH = "PUSH"


class ActualResult(str, Enum):
    """Final result from the home side's perspective."""
    HOME_WIN = "HOME_WIN"
    AWAY_WIN = "AWAY_WIN"
    DRAW = "DRAW"

    @property
    def side(self) -> str:
        """HOME, AWAY or DRAW - the value-bet side this result pays."""
        return self.value.split("_")[0]


# Statuses API-Sports uses for a match that is over: full time, after extra
# time, penalties, after overtime, after penalties (hockey), post-game.
FINISHED_STATUSES = frozenset({"FT", "AET", "PEN", "AOT", "AP", "POST"})


@dataclass(frozen=True)
class MatchResult:
    """Final (or current) score of a match as reported by the vendor."""
    match_id: str
    home_score: int
    away_score: int
    status: str
    home_team: Optional[str] = None
    away_team: Optional[str] = None

    @property
    def winner(self) -> str:
        """'home', 'away' or 'draw'."""
        if self.home_score > self.away_score:
            return "home"
        if self.home_score < self.away_score:
            return "away"
        return "draw"

    @property
    def actual_result(self) -> ActualResult:
        return {
            "home": ActualResult.HOME_WIN,
            "away": ActualResult.AWAY_WIN,
            "draw": ActualResult.DRAW,
        }[self.winner]

    @property
    def actual_score(self) -> str:
        return f"{self.home_score}-{self.away_score}"

    @property
    def total(self) -> int:
        return self.home_score + self.away_score

    @property
    def is_finished(self) -> bool:
        return self.status in FINISHED_STATUSES


@dataclass(frozen=True)
class Verdict:
    """Outcome of grading one call, with a human-readable reason."""
    outcome: CallOutcome
    reason: str


@dataclass(frozen=True)
class ValueBetGrade:
    outcome: CallOutcome
    profit: float


@dataclass
class PredictionRecord:
    """The subset of a `predictions` row the graders need."""
    id: str
    match_id: str
    match_name: str
    sport: str
    kickoff: datetime
    type: str
    prediction: str
    conviction: int = 1
    selection: Optional[str] = None
    value_bet_side: Optional[str] = None
    value_bet_odds: Optional[float] = None

    @property
    def teams(self) -> tuple[Optional[str], Optional[str]]:
        """(home, away) split out of "Home vs Away"; either may be None."""
        parts = [p.strip() for p in self.match_name.split(" vs ")]
        home = parts[0] if parts and parts[0] else None
        away = parts[1] if len(parts) > 1 and parts[1] else None
        return home, away

    @classmethod
    def from_row(cls, row: Any) -> "PredictionRecord":
        return cls(
            id=row["id"],
            match_id=row["match_id"],
            match_name=row["match_name"],
            sport=row["sport"] or "",
            kickoff=row["kickoff"],
            type=row["type"] or "",
            prediction=row["prediction"] or "",
            conviction=row["conviction"] or 1,
            selection=row["selection"],
            value_bet_side=row["value_bet_side"],
            value_bet_odds=row["value_bet_odds"],
        )


@dataclass
class GradedPrediction:
    """Everything written back to a prediction row once it is graded."""
    prediction_id: str
    outcome: CallOutcome
    actual_result: str
    actual_score: str
    value_bet: Optional[ValueBetGrade] = None

    @property
    def binary_outcome(self) -> int:
        return 1 if self.outcome == CallOutcome.HIT else 0
