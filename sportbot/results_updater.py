"""
Operator batch job: grade every PENDING prediction from league-specific feeds.

Unlike the validation cron (which only distinguishes soccer, basketball and
hockey), this job targets the exact league: NBA, Euroleague, NHL, NFL, soccer
or MMA, each with its own query, finished statuses, score layout and matcher.
It searches the stored kickoff date and then the following day, since late
North American games land on the next UTC date.

Run: python update_results.py [--sport nba] [--dry-run] [--delay 0.1]
"""

from __future__ import annotations

import argparse
import sys
import time
from dataclasses import asdict, dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Optional

from sqlalchemy.engine import Engine

from .api_sports_client import ApiSportsClient, ApiSportsError
from .config import settings
from .db import create_db_engine
from .grading import build_graded, classify_call, grade_winner_pick
from .logging_config import get_logger, log_error, log_validation
from .metrics import increment_counter
from .models import CallOutcome, CallType, GradedPrediction, MatchResult, PredictionRecord
from .persistence import fetch_pending_predictions, save_grade
from .sport_detection import LEAGUE_IDS, Sport, detect_sport, season_for
from .team_matching import contains_match, keyword_match, word_overlap_match

logger = get_logger(__name__)

Matcher = Callable[[Optional[str], Optional[str]], bool]

BASKETBALL_FINISHED = frozenset({"FT", "AOT", "AP"})
HOCKEY_FINISHED = frozenset({"FT", "AOT", "AP", "POST"})
NFL_FINISHED = frozenset({"FT", "AOT", "POST"})
MMA_FINISHED = frozenset({"FT"})


@dataclass
class ResultsUpdateSummary:
    checked: int = 0
    updated: int = 0
    skipped_unknown_sport: int = 0
    not_found: int = 0
    ungradable: int = 0
    errors: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


def _score(value: Any) -> int:
    try:
        return int(value) if value is not None else 0
    except (TypeError, ValueError):
        return 0


def _total_scores(game: dict[str, Any]) -> tuple[int, int]:
    scores = game.get("scores") or {}
    return _score((scores.get("home") or {}).get("total")), _score((scores.get("away") or {}).get("total"))


def _flat_scores(game: dict[str, Any]) -> tuple[int, int]:
    scores = game.get("scores") or {}
    return _score(scores.get("home")), _score(scores.get("away"))


def _goals(game: dict[str, Any]) -> tuple[int, int]:
    goals = game.get("goals") or {}
    return _score(goals.get("home")), _score(goals.get("away"))


def _status(game: dict[str, Any]) -> str:
    return (game.get("status") or {}).get("short") or ""


def _nfl_status(game: dict[str, Any]) -> str:
    return ((game.get("game") or {}).get("status") or {}).get("short") or ""


def _team_names(game: dict[str, Any]) -> tuple[str, str]:
    teams = game.get("teams") or {}
    return (teams.get("home") or {}).get("name") or "", (teams.get("away") or {}).get("name") or ""


def scan_games(
    games: list[dict[str, Any]],
    home: str,
    away: str,
    matcher: Matcher,
    scores: Callable[[dict[str, Any]], tuple[int, int]],
    status: Optional[Callable[[dict[str, Any]], str]] = None,
    finished: frozenset = frozenset(),
    allow_swapped: bool = False,
) -> Optional[MatchResult]:
    """
    First finished game matching `home` and `away`.

    With `allow_swapped`, a game listed the other way round also matches; the
    result is then flipped so scores line up with the prediction's home/away.
    `status=None` means the query already filtered to finished games.
    """
    for game in games:
        if not isinstance(game, dict):
            continue
        game_status = status(game) if status else "FT"
        if status and game_status not in finished:
            continue

        api_home, api_away = _team_names(game)
        home_score, away_score = scores(game)

        if matcher(api_home, home) and matcher(api_away, away):
            logger.info("game_matched", home=api_home, away=api_away)
            return MatchResult(str(game.get("id", "")), home_score, away_score, game_status, api_home, api_away)

        if allow_swapped and matcher(api_home, away) and matcher(api_away, home):
            logger.info("game_matched_swapped", home=api_home, away=api_away)
            return MatchResult(str(game.get("id", "")), away_score, home_score, game_status, api_away, api_home)
    return None


def _league_games(client: ApiSportsClient, product: str, sport: Sport, day: date) -> list[dict[str, Any]]:
    return client.get_by_date(product, day, league=LEAGUE_IDS[sport], season=season_for(sport, day))


def fetch_nba_result(client: ApiSportsClient, home: str, away: str, day: date) -> Optional[MatchResult]:
    games = _league_games(client, "basketball", Sport.NBA, day)
    return scan_games(games, home, away, keyword_match, _total_scores, _status, BASKETBALL_FINISHED, allow_swapped=True)


def fetch_euroleague_result(client: ApiSportsClient, home: str, away: str, day: date) -> Optional[MatchResult]:
    games = _league_games(client, "basketball", Sport.EUROLEAGUE, day)
    return scan_games(games, home, away, word_overlap_match, _total_scores, _status, BASKETBALL_FINISHED)


def fetch_nhl_result(client: ApiSportsClient, home: str, away: str, day: date) -> Optional[MatchResult]:
    games = _league_games(client, "hockey", Sport.NHL, day)
    return scan_games(games, home, away, contains_match, _flat_scores, _status, HOCKEY_FINISHED)


def fetch_nfl_result(client: ApiSportsClient, home: str, away: str, day: date) -> Optional[MatchResult]:
    games = _league_games(client, "american-football", Sport.NFL, day)
    return scan_games(games, home, away, word_overlap_match, _total_scores, _nfl_status, NFL_FINISHED, allow_swapped=True)


def fetch_football_result(client: ApiSportsClient, home: str, away: str, day: date) -> Optional[MatchResult]:
    fixtures = client.get_by_date("football", day, status="FT")
    return scan_games(fixtures, home, away, word_overlap_match, _goals)


def fetch_mma_result(client: ApiSportsClient, fighter1: str, fighter2: str, day: date) -> Optional[MatchResult]:
    """
    A finished fight between the two fighters, in either billing order.

    The winner is encoded as a 1-0 score oriented to the prediction's order;
    a draw or no-contest (no winner id) is 0-0.
    """
    fights = client.get_by_date("mma", day)
    for fight in fights:
        if not isinstance(fight, dict) or _status(fight) not in MMA_FINISHED:
            continue

        fighters = fight.get("fighters") or {}
        first = fighters.get("first") or {}
        second = fighters.get("second") or {}
        first_name = first.get("name") or ""
        second_name = second.get("name") or ""

        in_order = word_overlap_match(first_name, fighter1) and word_overlap_match(second_name, fighter2)
        reversed_order = word_overlap_match(first_name, fighter2) and word_overlap_match(second_name, fighter1)
        if not (in_order or reversed_order):
            continue

        winner_id = (fight.get("winner") or {}).get("id")
        first_won = 1 if winner_id is not None and winner_id == first.get("id") else 0
        second_won = 1 if winner_id is not None and winner_id == second.get("id") else 0
        logger.info("fight_matched", first=first_name, second=second_name, winner_id=winner_id)

        fight_id = str(fight.get("id", ""))
        if in_order:
            return MatchResult(fight_id, first_won, second_won, "FT", first_name, second_name)
        return MatchResult(fight_id, second_won, first_won, "FT", second_name, first_name)
    return None


FETCHERS: dict[Sport, Callable[[ApiSportsClient, str, str, date], Optional[MatchResult]]] = {
    Sport.NFL: fetch_nfl_result,
    Sport.NHL: fetch_nhl_result,
    Sport.EUROLEAGUE: fetch_euroleague_result,
    Sport.NBA: fetch_nba_result,
    Sport.FOOTBALL: fetch_football_result,
    Sport.MMA: fetch_mma_result,
}


def find_result(client: ApiSportsClient, sport: Sport, home: str, away: str, kickoff: datetime) -> Optional[MatchResult]:
    """Search the kickoff date, then the next day. Fetch errors count as no result."""
    fetcher = FETCHERS[sport]
    first_day = kickoff.date()
    for day in (first_day, first_day + timedelta(days=1)):
        try:
            result = fetcher(client, home, away, day)
        except ApiSportsError as e:
            logger.warning("results_fetch_failed", sport=sport.value, date=day.isoformat(), error=str(e))
            continue
        if result is not None:
            return result
    return None


def grade_record(record: PredictionRecord, result: MatchResult) -> Optional[GradedPrediction]:
    """
    Winner picks go through team-aware `grade_winner_pick`; every other call
    type through `classify_call`. None when the pick cannot be read.
    """
    if record.type == CallType.MATCH_RESULT or not record.type:
        home, away = record.teams
        outcome = grade_winner_pick(record.prediction, home, away, result.winner)
    else:
        verdict = classify_call(record.type, record.prediction, result)
        outcome = None if verdict.outcome == CallOutcome.PENDING else verdict.outcome

    if outcome is None:
        return None
    return build_graded(record, result, outcome)


def update_prediction_results(
    engine: Engine,
    client: ApiSportsClient,
    sport_filter: Optional[Sport] = None,
    dry_run: bool = False,
    delay: float = 0.1,
    now: Optional[datetime] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> ResultsUpdateSummary:
    now = now or datetime.now(timezone.utc)
    pending = fetch_pending_predictions(engine, kicked_off_before=now)
    logger.info("results_update_started", pending=len(pending), sport=sport_filter.value if sport_filter else None, dry_run=dry_run)

    summary = ResultsUpdateSummary()
    for record in pending:
        home, away = record.teams
        if not home or not away:
            continue

        sport = detect_sport(record.sport, home, away)
        if sport is None:
            summary.skipped_unknown_sport += 1
            logger.info("unknown_sport_skipped", prediction_id=record.id, sport=record.sport, match_name=record.match_name)
            continue
        if sport_filter is not None and sport != sport_filter:
            continue

        summary.checked += 1
        try:
            result = find_result(client, sport, home.lower(), away.lower(), record.kickoff)
            if result is None:
                summary.not_found += 1
                logger.info("result_not_found", prediction_id=record.id, match_name=record.match_name, sport=sport.value)
            else:
                graded = grade_record(record, result)
                if graded is None:
                    summary.ungradable += 1
                    logger.info("pick_not_gradable", prediction_id=record.id, prediction=record.prediction)
                else:
                    if not dry_run:
                        save_grade(engine, graded, now=now)
                    summary.updated += 1
                    log_validation(
                        logger,
                        prediction_id=record.id,
                        match_name=record.match_name,
                        actual_score=graded.actual_score,
                        outcome=graded.outcome.value,
                        sport=sport.value,
                        dry_run=dry_run,
                        value_bet=graded.value_bet.outcome.value if graded.value_bet else None,
                        value_bet_profit=graded.value_bet.profit if graded.value_bet else None,
                    )
        except Exception as e:
            summary.errors += 1
            log_error(logger, e, context={"prediction_id": record.id, "sport": sport.value})

        if delay > 0:
            sleep(delay)

    if not dry_run:
        increment_counter("results_updated_total", summary.updated)
    logger.info("results_update_complete", dry_run=dry_run, **summary.to_dict())
    return summary


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Grade pending predictions from API-Sports results")
    parser.add_argument(
        "--sport",
        choices=[s.value for s in Sport],
        help="Only grade predictions detected as this sport"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Match and grade but do not write to the database"
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=0.1,
        help="Seconds to wait between predictions (default: 0.1)"
    )
    args = parser.parse_args(argv)

    if not settings.database_url:
        parser.error("DATABASE_URL is not set")

    engine = create_db_engine(settings.database_url)
    try:
        client = ApiSportsClient(api_key=settings.api_football_key, timeout=settings.api_timeout_seconds)
    except ApiSportsError as e:
        logger.error("api_client_unavailable", error=str(e))
        return 1

    summary = update_prediction_results(
        engine,
        client,
        sport_filter=Sport(args.sport) if args.sport else None,
        dry_run=args.dry_run,
        delay=args.delay,
    )
    print(f"Updated {summary.updated} of {summary.checked} checked predictions"
          f" ({summary.not_found} not found, {summary.ungradable} ungradable,"
          f" {summary.errors} errors, {summary.skipped_unknown_sport} unknown sport)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
