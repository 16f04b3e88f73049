"""
Team-name matching between stored predictions and API-Sports events.

Prediction match names come from several upstream feeds ("Man Utd", "LA Lakers",
"Sixers") while API-Sports uses its own spelling, so every matcher here is a
loose, symmetric comparison. Different callers use different strictness:

- `compact_match`      : validation job, punctuation-insensitive containment
- `keyword_match`      : NBA results, last word ("Bulls") comparison
- `word_overlap_match` : soccer / Euroleague / NFL / MMA, shared long words
- `aliases_match`      : NBA/NFL/NHL nickname tables
- `fuzzy_match`        : opt-in token-set ratio

An empty name never matches anything.
"""

import re
from typing import Any, Iterable, Optional

from fuzzywuzzy import fuzz

from .team_aliases import alias_map_for

_NON_ALPHA = re.compile(r"[^a-z]")


def compact(name: Optional[str]) -> str:
    """Lowercase and drop everything outside a-z ("Paris Saint-Germain" -> "parissaintgermain")."""
    return _NON_ALPHA.sub("", (name or "").lower())


def _contains_either(a: str, b: str) -> bool:
    if not a or not b:
        return False
    return a in b or b in a


def contains_match(api_name: Optional[str], wanted: Optional[str]) -> bool:
    """Case-insensitive containment either way."""
    return _contains_either((api_name or "").lower().strip(), (wanted or "").lower().strip())


def compact_match(api_name: Optional[str], wanted: Optional[str]) -> bool:
    return _contains_either(compact(api_name), compact(wanted))


def team_keyword(name: Optional[str]) -> str:
    """Last word of a team name, lowercased ("Chicago Bulls" -> "bulls")."""
    parts = (name or "").lower().split()
    return parts[-1] if parts else ""


def keyword_match(api_name: Optional[str], wanted: Optional[str]) -> bool:
    api = (api_name or "").lower().strip()
    search = (wanted or "").lower().strip()
    if not api or not search:
        return False

    if _contains_either(api, search):
        return True

    api_kw = team_keyword(api)
    search_kw = team_keyword(search)
    if api_kw == search_kw:
        return True
    return search_kw in api or api_kw in search


def _long_words(name: str) -> list[str]:
    return [w for w in name.split() if len(w) > 3]


def word_overlap_match(api_name: Optional[str], wanted: Optional[str]) -> bool:
    """Containment either way, or a word longer than 3 chars of one name inside the other."""
    api = (api_name or "").lower().strip()
    search = (wanted or "").lower().strip()
    if not api or not search:
        return False

    if _contains_either(api, search):
        return True
    return any(w in search for w in _long_words(api)) or any(w in api for w in _long_words(search))


def normalize_team_name(name: Optional[str], sport: str) -> str:
    """
    Resolve a nickname to the full team name for NBA, NFL and NHL.

    Exact alias lookups win; otherwise the first alias of 4+ characters found
    as a whole word inside the name is used ("nets" does not
    resolve "Charlotte Hornets"). Unknown names are returned unchanged.
    """
    raw = name or ""
    lowered = raw.lower().strip()
    aliases = alias_map_for(sport)

    if lowered in aliases:
        return aliases[lowered]

    for alias, full_name in aliases.items():
        if len(alias) >= 4 and re.search(rf"\b{re.escape(alias)}\b", lowered):
            return full_name
    return raw


def aliases_match(name1: Optional[str], name2: Optional[str], sport: str) -> bool:
    """
    Compare names after nickname resolution.

    A shared first word ("Philadelphia ...") only counts when both names
    resolved to a full name from the alias table; "Manchester United" and
    "Manchester City" never match this way.
    """
    n1 = normalize_team_name(name1, sport).lower().strip()
    n2 = normalize_team_name(name2, sport).lower().strip()
    if not n1 or not n2:
        return False

    if n1 == n2 or _contains_either(n1, n2):
        return True

    known = {full_name.lower() for full_name in alias_map_for(sport).values()}
    if n1 not in known or n2 not in known:
        return False

    # Same city ("Los Angeles ..." is excluded by the 4-char minimum on "los").
    city1 = n1.split()[0]
    city2 = n2.split()[0]
    return len(city1) >= 4 and city1 == city2


def fuzzy_match(name1: Optional[str], name2: Optional[str], threshold: int = 90) -> bool:
    a = (name1 or "").strip()
    b = (name2 or "").strip()
    if not a or not b:
        return False
    return fuzz.token_set_ratio(a, b) >= threshold


def names_match(
    api_name: Optional[str],
    wanted: Optional[str],
    sport: str = "",
    enable_fuzzy: bool = False,
    fuzzy_threshold: int = 90,
) -> bool:
    """Compact containment, then aliases (leagues with a nickname table), then (optionally) fuzzy."""
    if compact_match(api_name, wanted):
        return True
    if alias_map_for(sport) and aliases_match(api_name, wanted, sport):
        return True
    return enable_fuzzy and fuzzy_match(api_name, wanted, fuzzy_threshold)


def event_team_names(event: dict[str, Any]) -> tuple[str, str]:
    """(home, away) team names of an API-Sports event; missing names are ''."""
    teams = event.get("teams") or {}
    home = (teams.get("home") or {}).get("name") or ""
    away = (teams.get("away") or {}).get("name") or ""
    return home, away


def find_match_by_teams(
    events: Iterable[dict[str, Any]],
    home_team: str,
    away_team: str,
    sport: str = "",
    enable_fuzzy: bool = False,
    fuzzy_threshold: int = 90,
) -> Optional[dict[str, Any]]:
    """First event whose home and away names both match, or None."""
    for event in events:
        if not isinstance(event, dict):
            continue
        api_home, api_away = event_team_names(event)
        if names_match(api_home, home_team, sport, enable_fuzzy, fuzzy_threshold) and names_match(
            api_away, away_team, sport, enable_fuzzy, fuzzy_threshold
        ):
            return event
    return None
