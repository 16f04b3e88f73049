"""
Test doubles and payload builders shared by the test modules.

Payload builders mirror the shapes API-Sports returns for each product.
"""

from datetime import date, datetime
from typing import Any, Optional

from sqlalchemy import select

from sportbot.api_sports_client import ApiSportsError
from sportbot.db import predictions, to_naive_utc


class FakeApiSportsClient:
    """
    Stands in for ApiSportsClient.

    `by_date` maps (product, "YYYY-MM-DD") to a list of events, `by_id` maps
    (product, id) to one event. Products/dates in `fail_dates` raise
    ApiSportsError; ids in `explode_ids` raise RuntimeError.
    """

    def __init__(self, by_date=None, by_id=None, fail_dates=(), explode_ids=()):
        self.by_date = by_date or {}
        self.by_id = by_id or {}
        self.fail_dates = set(fail_dates)
        self.explode_ids = set(explode_ids)
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def get(self, sport: str, endpoint: Optional[str] = None, **params: Any) -> list[dict[str, Any]]:
        self.calls.append((sport, params))
        if "id" in params:
            match_id = str(params["id"])
            if match_id in self.explode_ids:
                raise RuntimeError(f"boom {match_id}")
            event = self.by_id.get((sport, match_id))
            return [event] if event else []

        day = params.get("date")
        if (sport, day) in self.fail_dates:
            raise ApiSportsError(f"API-Sports error (status 500) for {day}")
        return list(self.by_date.get((sport, day), []))

    def get_by_id(self, sport: str, match_id) -> Optional[dict[str, Any]]:
        results = self.get(sport, id=match_id)
        return results[0] if results else None

    def get_by_date(self, sport: str, day, **params: Any) -> list[dict[str, Any]]:
        day_str = day.isoformat() if isinstance(day, date) else day
        return self.get(sport, date=day_str, **{k: v for k, v in params.items() if v is not None})

    def dates_queried(self, sport: str) -> list[str]:
        return [p["date"] for s, p in self.calls if s == sport and "date" in p]


def soccer_fixture(home, away, home_goals, away_goals, status="FT", fixture_id=1):
    return {
        "fixture": {"id": fixture_id, "status": {"short": status}},
        "teams": {"home": {"name": home}, "away": {"name": away}},
        "goals": {"home": home_goals, "away": away_goals},
    }


def basketball_game(home, away, home_total, away_total, status="FT", game_id=1):
    return {
        "id": game_id,
        "status": {"short": status},
        "teams": {"home": {"name": home}, "away": {"name": away}},
        "scores": {"home": {"total": home_total}, "away": {"total": away_total}},
    }


def hockey_game(home, away, home_score, away_score, status="FT", game_id=1):
    return {
        "id": game_id,
        "status": {"short": status},
        "teams": {"home": {"name": home}, "away": {"name": away}},
        "scores": {"home": home_score, "away": away_score},
    }


def nfl_game(home, away, home_total, away_total, status="FT", game_id=1):
    return {
        "game": {"id": game_id, "status": {"short": status}},
        "teams": {"home": {"name": home}, "away": {"name": away}},
        "scores": {"home": {"total": home_total}, "away": {"total": away_total}},
    }


def mma_fight(first, second, winner_id, first_id=1, second_id=2, status="FT", fight_id=1):
    return {
        "id": fight_id,
        "status": {"short": status},
        "fighters": {
            "first": {"id": first_id, "name": first},
            "second": {"id": second_id, "name": second},
        },
        "winner": {"id": winner_id},
    }


_PREDICTION_DEFAULTS = {
    "match_id": "1001",
    "match_name": "Arsenal vs Chelsea",
    "sport": "soccer_epl",
    "league": "Premier League",
    "type": "MATCH_RESULT",
    "prediction": "Home Win",
    "conviction": 3,
    "outcome": "PENDING",
}


def insert_prediction(engine, id: str, kickoff: datetime, **overrides: Any) -> str:
    """Insert a prediction row; kickoff may be aware (stored as naive UTC)."""
    values = dict(_PREDICTION_DEFAULTS)
    values.update(overrides)
    with engine.begin() as conn:
        conn.execute(predictions.insert().values(id=id, kickoff=to_naive_utc(kickoff), **values))
    return id


def fetch_row(engine, prediction_id: str) -> dict[str, Any]:
    with engine.connect() as conn:
        row = conn.execute(select(predictions).where(predictions.c.id == prediction_id)).mappings().first()
    return dict(row)
