"""
Editorial picks: the most confident upcoming predictions, tiered by plan.

Picks are ranked by model probability (then edge), not by edge alone, so the
page shows the calls the model is surest about. Free users see a teaser
(teams, probabilities, headline); PRO/PREMIUM users also get the selection,
odds and the normalized AI analysis.

AI analysis documents (`full_response`) come from several prompt versions, so
most text fields may be a plain string or an object such as
`{"text": ..., "icon": ...}` / `{"narrative": ...}`. Everything is normalized
to strings here.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from threading import Lock
from typing import Any, Optional

from sqlalchemy.engine import Engine

from .config import PicksConfig, settings
from .db import to_naive_utc
from .logging_config import get_logger
from .metrics import increment_counter
from .persistence import fetch_editorial_candidates

logger = get_logger(__name__)

DEFAULT_HEADLINE = "AI has identified an opportunity in this match"


def clamp_limit(limit: Optional[int], config: Optional[PicksConfig] = None) -> int:
    config = config or settings.picks
    if limit is None:
        return config.default_limit
    return max(1, min(int(limit), config.max_limit))


def normalize_text(value: Any) -> Optional[str]:
    """A string, or the `text` / `narrative` of an object; None otherwise."""
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        if "text" in value:
            return str(value.get("text") or "")
        if "narrative" in value:
            return str(value.get("narrative") or "")
    return None


def _text_list(items: Any) -> list[str]:
    if not isinstance(items, list):
        return []
    out = []
    for item in items:
        text = normalize_text(item)
        if text is not None:
            out.append(text)
    return out


def format_form(form: Any) -> Optional[str]:
    """Recent matches as "W W L D W" (last five), or a preformatted string."""
    if isinstance(form, str):
        return form
    if isinstance(form, list):
        results = " ".join(
            (m.get("result") if isinstance(m, dict) and m.get("result") else "?") for m in form[:5]
        )
        return results or None
    return None


def format_h2h(h2h: Any) -> Optional[str]:
    """H2H record as "3 home wins, 1 draws in last 4 meetings"; zero counts are omitted."""
    if isinstance(h2h, str):
        return h2h
    if isinstance(h2h, dict) and ("homeWins" in h2h or "awayWins" in h2h):
        parts = []
        if h2h.get("homeWins"):
            parts.append(f"{h2h['homeWins']} home wins")
        if h2h.get("awayWins"):
            parts.append(f"{h2h['awayWins']} away wins")
        if h2h.get("draws"):
            parts.append(f"{h2h['draws']} draws")
        return ", ".join(parts) + f" in last {h2h.get('totalMatches') or '?'} meetings"
    return None


def _story(full_response: dict[str, Any], reasoning: Optional[str]) -> Optional[str]:
    story = full_response.get("story")
    text = None
    if isinstance(story, str):
        text = story
    elif isinstance(story, dict):
        text = normalize_text(story)
    return text or reasoning or None


def display_headline(full_response: dict[str, Any], headline: Any) -> str:
    """First AI headline, else the stored headline, else a generic teaser."""
    headlines = full_response.get("headlines")
    first = normalize_text(headlines[0]) if isinstance(headlines, list) and headlines else None
    return first or normalize_text(headline) or DEFAULT_HEADLINE


def _iso_z(value: datetime) -> str:
    naive = to_naive_utc(value)
    return naive.isoformat(timespec="milliseconds") + "Z"


def build_analysis(full_response: dict[str, Any], reasoning: Optional[str]) -> dict[str, Any]:
    form = full_response.get("momentumAndForm") or {}
    if not isinstance(form, dict):
        form = {}
    return {
        "story": _story(full_response, reasoning),
        "headlines": _text_list(full_response.get("headlines")),
        "viralStats": _text_list(full_response.get("viralStats")),
        "form": {
            "homeForm": format_form(form.get("homeForm")),
            "awayForm": format_form(form.get("awayForm")),
            "homeTrend": normalize_text(form.get("homeTrend")),
            "awayTrend": normalize_text(form.get("awayTrend")),
            "h2hSummary": format_h2h(form.get("h2hSummary")),
            "keyFactors": [t for t in _text_list(form.get("keyFormFactors")) if t],
        },
        "injuries": full_response.get("injuries"),
        "contextFactors": _text_list(full_response.get("contextFactors")),
        "signals": full_response.get("universalSignals") or [],
        "marketIntel": full_response.get("marketIntel"),
    }


def build_pick(row: dict[str, Any], rank: int, is_pro: bool) -> dict[str, Any]:
    parts = (row.get("match_name") or "").split(" vs ")
    home_team = parts[0].strip() if parts and parts[0].strip() else "TBD"
    away_team = parts[1].strip() if len(parts) > 1 and parts[1].strip() else "TBD"
    full_response = row.get("full_response") if isinstance(row.get("full_response"), dict) else {}

    pick = {
        "rank": rank,
        "id": row["id"],
        "matchId": row["match_id"],
        "homeTeam": home_team,
        "awayTeam": away_team,
        "sport": row["sport"],
        "league": row.get("league"),
        "kickoff": _iso_z(row["kickoff"]),
        "confidence": row.get("model_probability"),
        "edgeValue": row.get("edge_value"),
        "edgeBucket": row.get("edge_bucket"),
        "probabilities": {
            "home": row.get("home_win"),
            "draw": row.get("draw"),
            "away": row.get("away_win"),
        },
        "headline": display_headline(full_response, row.get("headline")),
    }

    if not is_pro:
        pick.update(selection=None, odds=None, locked=True, analysis=None)
        return pick

    pick.update(
        selection=row.get("selection") or row.get("value_bet_side"),
        odds=row.get("market_odds_at_prediction"),
        predictedScore=row.get("predicted_score"),
        locked=False,
        analysis=build_analysis(full_response, row.get("reasoning")),
    )
    return pick


def pick_window(now: datetime, lookahead_days: int) -> tuple[datetime, datetime]:
    """now .. 23:59:59.999 UTC on the day `lookahead_days` after now."""
    now_utc = now.astimezone(timezone.utc) if now.tzinfo else now.replace(tzinfo=timezone.utc)
    last_day = now_utc.date() + timedelta(days=lookahead_days)
    end = datetime.combine(last_day, time(23, 59, 59, 999000), tzinfo=timezone.utc)
    return now_utc, end


def build_editorial_picks(
    engine: Engine,
    is_pro: bool,
    limit: Optional[int] = None,
    now: Optional[datetime] = None,
    config: Optional[PicksConfig] = None,
) -> dict[str, Any]:
    config = config or settings.picks
    limit = clamp_limit(limit, config)
    start, end = pick_window(now or datetime.now(timezone.utc), config.lookahead_days)

    total, rows = fetch_editorial_candidates(
        engine,
        start,
        end,
        min_probability=config.min_model_probability,
        min_edge=config.min_edge,
        limit=limit,
    )
    picks = [build_pick(row, rank, is_pro) for rank, row in enumerate(rows, start=1)]

    logger.info("editorial_picks_built", is_pro=is_pro, limit=limit, total=total, showing=len(picks))
    return {
        "success": True,
        "date": f"{start:%A}, {start:%B} {start.day}, {start.year}",
        "picks": picks,
        "isPro": is_pro,
        "meta": {
            "generatedAt": _iso_z(start),
            "total": total,
            "showing": len(picks),
            "moreAvailable": total > len(picks),
        },
    }


@dataclass
class _CacheEntry:
    day: date
    payload: dict[str, Any]


class PicksCache:
    """
    Process-local picks cache keyed by (UTC date, tier, limit).

    An entry is only served on the UTC day it was built; stale days are
    evicted on the next write.
    """

    def __init__(self):
        self._entries: dict[tuple[date, bool, int], _CacheEntry] = {}
        self._lock = Lock()

    @staticmethod
    def _today(now: Optional[datetime]) -> date:
        now = now or datetime.now(timezone.utc)
        return (now.astimezone(timezone.utc) if now.tzinfo else now).date()

    def get(self, is_pro: bool, limit: int, now: Optional[datetime] = None) -> Optional[dict[str, Any]]:
        day = self._today(now)
        with self._lock:
            entry = self._entries.get((day, is_pro, limit))
        if entry is None:
            increment_counter("picks_cache_misses_total")
            return None
        increment_counter("picks_cache_hits_total")
        return entry.payload

    def put(self, is_pro: bool, limit: int, payload: dict[str, Any], now: Optional[datetime] = None) -> None:
        day = self._today(now)
        with self._lock:
            for key in [k for k in self._entries if k[0] != day]:
                del self._entries[key]
            self._entries[(day, is_pro, limit)] = _CacheEntry(day, payload)

    def clear(self) -> int:
        with self._lock:
            n = len(self._entries)
            self._entries.clear()
        return n

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def get_editorial_picks(
    engine: Engine,
    cache: PicksCache,
    is_pro: bool,
    limit: Optional[int] = None,
    now: Optional[datetime] = None,
    config: Optional[PicksConfig] = None,
) -> dict[str, Any]:
    """Cached `build_editorial_picks`."""
    config = config or settings.picks
    limit = clamp_limit(limit, config)
    cached = cache.get(is_pro, limit, now)
    if cached is not None:
        return cached

    payload = build_editorial_picks(engine, is_pro, limit, now, config)
    cache.put(is_pro, limit, payload, now)
    return payload
