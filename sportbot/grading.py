"""
Rule-based grading of predictions against final scores.

Prediction text is free-form ("Home Win", "Over 2.5 Goals", "BTTS - No",
"Lakers to win"), so every rule is a case-insensitive keyword test. Rules that
cannot read the text return PENDING / None and the prediction is left for a
human to grade.
"""

import re
from typing import Optional

from .models import (
    ActualResult,
    CallOutcome,
    CallType,
    GradedPrediction,
    MatchResult,
    PredictionRecord,
    ValueBetGrade,
    Verdict,
)

_OVER = re.compile(r"over\s*(\d+\.?\d*)", re.IGNORECASE)
_UNDER = re.compile(r"under\s*(\d+\.?\d*)", re.IGNORECASE)
_NO = re.compile(r"\bno\b")

UNGRADABLE = Verdict(CallOutcome.PENDING, "Could not auto-validate")


def _line(value: float) -> str:
    return f"{value:g}"


def _hit_or_miss(ok: bool, hit_reason: str, miss_reason: str) -> Verdict:
    if ok:
        return Verdict(CallOutcome.HIT, hit_reason)
    return Verdict(CallOutcome.MISS, miss_reason)


def _total_line(pred: str, total: int) -> Optional[Verdict]:
    over = _OVER.search(pred)
    if over:
        line = float(over.group(1))
        if total > line:
            return Verdict(CallOutcome.HIT, f"Over {_line(line)} hit ({total} total)")
        if total < line:
            return Verdict(CallOutcome.MISS, f"Over {_line(line)} missed ({total} total)")
        return Verdict(CallOutcome.PUSH, f"Landed exactly on {_line(line)}")

    under = _UNDER.search(pred)
    if under:
        line = float(under.group(1))
        if total < line:
            return Verdict(CallOutcome.HIT, f"Under {_line(line)} hit ({total} total)")
        if total > line:
            return Verdict(CallOutcome.MISS, f"Under {_line(line)} missed ({total} total)")
        return Verdict(CallOutcome.PUSH, f"Landed exactly on {_line(line)}")
    return None


def classify_call(call_type: str, prediction: str, result: MatchResult) -> Verdict:
    """
    Grade one call against a final score.

    Returns a PENDING verdict ("Could not auto-validate") when the call type is
    unknown or the text matches no rule.
    """
    pred = (prediction or "").lower()
    winner = result.winner
    home, away = result.home_score, result.away_score

    if call_type == CallType.MATCH_RESULT:
        # Home before away, and a bare "home" only when "away" is absent, so
        # "Away Win" is never read as a home pick.
        if "home win" in pred or ("home" in pred and "away" not in pred):
            return _hit_or_miss(winner == "home", "Home team won as predicted", f"Predicted home win, got {winner}")
        if "away win" in pred or ("away" in pred and "home" not in pred):
            return _hit_or_miss(winner == "away", "Away team won as predicted", f"Predicted away win, got {winner}")
        if "draw" in pred:
            return _hit_or_miss(winner == "draw", "Draw as predicted", f"Predicted draw, got {winner} win")

    elif call_type == CallType.OVER_UNDER:
        verdict = _total_line(pred, result.total)
        if verdict is not None:
            return verdict

    elif call_type == CallType.BTTS:
        both_scored = home > 0 and away > 0
        # "BTTS - No" contains "btts", so the explicit "no" goes first.
        if _NO.search(pred):
            return _hit_or_miss(not both_scored, "BTTS No hit", "BTTS No missed")
        if "yes" in pred or "btts" in pred:
            return _hit_or_miss(both_scored, "BTTS Yes hit", "BTTS Yes missed")

    elif call_type == CallType.CLEAN_SHEET:
        if "home" in pred:
            return _hit_or_miss(away == 0, "Home clean sheet hit", "Home clean sheet missed")
        if "away" in pred:
            return _hit_or_miss(home == 0, "Away clean sheet hit", "Away clean sheet missed")

    elif call_type == CallType.DOUBLE_CHANCE:
        if "1x" in pred or "home or draw" in pred:
            return _hit_or_miss(winner != "away", "Home or Draw hit", "Home or Draw missed")
        if "x2" in pred or "away or draw" in pred:
            return _hit_or_miss(winner != "home", "Away or Draw hit", "Away or Draw missed")
        if "12" in pred or "home or away" in pred:
            return _hit_or_miss(winner != "draw", "Home or Away hit", "Home or Away missed (draw)")

    return UNGRADABLE


def _keyword(team: Optional[str]) -> str:
    parts = (team or "").lower().split()
    return parts[-1] if parts else ""


def grade_winner_pick(
    prediction: str,
    home_team: Optional[str],
    away_team: Optional[str],
    winner: str,
) -> Optional[CallOutcome]:
    """
    Grade a winner pick that may name a side ("Home Win") or a team ("Bulls ML").

    Returns HIT/MISS, or None when the pick names neither a side nor a team.
    """
    pred = (prediction or "").lower().strip()
    home_kw = _keyword(home_team)
    away_kw = _keyword(away_team)

    if "home win" in pred or "home victory" in pred or pred == "home":
        picked = "home"
    elif "away win" in pred or "away victory" in pred or pred == "away":
        picked = "away"
    elif "draw" in pred:
        picked = "draw"
    elif len(home_kw) > 2 and home_kw in pred:
        picked = "home"
    elif len(away_kw) > 2 and away_kw in pred:
        picked = "away"
    else:
        return None

    return CallOutcome.HIT if picked == winner else CallOutcome.MISS


def grade_manual_result(prediction: str, selection: Optional[str], actual_result: ActualResult) -> CallOutcome:
    """HIT when the prediction text or the stored selection names the actual result."""
    pred = (prediction or "").lower()
    sel = (selection or "").lower().strip()
    side = actual_result.side.lower()

    if side in pred or sel == side:
        return CallOutcome.HIT
    return CallOutcome.MISS


def evaluate_value_bet(
    side: Optional[str],
    odds: Optional[float],
    actual_result: ActualResult,
) -> Optional[ValueBetGrade]:
    """1-unit stake at decimal `odds`: profit odds - 1 on a win, -1 otherwise."""
    if not side or not odds:
        return None
    if side.strip().upper() == actual_result.side:
        return ValueBetGrade(CallOutcome.HIT, float(odds) - 1)
    return ValueBetGrade(CallOutcome.MISS, -1.0)


def build_graded(record: PredictionRecord, result: MatchResult, outcome: CallOutcome) -> GradedPrediction:
    """Attach the score, result and value-bet grade to an outcome."""
    actual = result.actual_result
    return GradedPrediction(
        prediction_id=record.id,
        outcome=outcome,
        actual_result=actual.value,
        actual_score=result.actual_score,
        value_bet=evaluate_value_bet(record.value_bet_side, record.value_bet_odds, actual),
    )
