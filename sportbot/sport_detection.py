"""
Sport detection from prediction sport keys and team names.

Two vocabularies exist: the validation job only distinguishes the three
API-Sports families it queries (`SportType`), while the results updater
targets specific leagues (`Sport`).
"""

from datetime import date
from enum import Enum
from typing import Optional, Union


class SportType(str, Enum):
    SOCCER = "soccer"
    BASKETBALL = "basketball"
    HOCKEY = "hockey"


class Sport(str, Enum):
    NFL = "nfl"
    NHL = "nhl"
    EUROLEAGUE = "euroleague"
    NBA = "nba"
    FOOTBALL = "football"
    MMA = "mma"


# API-Sports league ids
LEAGUE_IDS = {
    Sport.NBA: 12,
    Sport.EUROLEAGUE: 120,
    Sport.NHL: 57,
    Sport.NFL: 1,
}

EUROLEAGUE_TEAMS = [
    "fenerbahce", "barcelona", "real madrid", "olympiacos", "panathinaikos", "maccabi",
    "anadolu efes", "efes", "cska", "milano", "olimpia", "bayern", "baskonia", "valencia basket",
    "virtus", "partizan", "crvena zvezda", "zvezda", "zalgiris", "alba berlin", "asvel",
    "lyon", "villeurbanne", "paris basketball", "hapoel", "monaco", "dubai",
]

NBA_TEAMS = [
    "bulls", "cavaliers", "timberwolves", "grizzlies", "heat", "pistons", "celtics",
    "lakers", "warriors", "nuggets", "suns", "bucks", "nets", "knicks", "clippers",
    "mavs", "mavericks", "rockets", "spurs", "jazz", "thunder", "pelicans", "blazers",
    "76ers", "raptors", "wizards", "hawks", "hornets", "pacers", "magic",
]

NHL_TEAMS = [
    "predators", "hurricanes", "panthers", "kings", "red wings", "bruins", "rangers",
    "penguins", "capitals", "flyers", "devils", "islanders", "canadiens", "senators",
    "maple leafs", "lightning", "blue jackets", "blackhawks", "wild", "blues", "jets",
    "avalanche", "stars", "ducks", "sharks", "kraken", "golden knights", "flames",
    "oilers", "canucks", "coyotes", "sabres",
]

NFL_TEAMS = [
    "chiefs", "bills", "ravens", "dolphins", "steelers", "bengals", "browns", "texans",
    "colts", "jaguars", "titans", "broncos", "chargers", "raiders", "eagles", "cowboys",
    "commanders", "giants", "49ers", "seahawks", "rams", "cardinals", "lions", "packers",
    "vikings", "bears", "buccaneers", "saints", "falcons", "panthers", "jets", "patriots",
]

MMA_KEYWORDS = [
    "ufc", "mma", "bellator", "pfl", "one championship", "cage warriors",
    "flyweight", "bantamweight", "featherweight", "lightweight", "welterweight",
    "middleweight", "light heavyweight", "heavyweight",
]

# Sport-key fragments, checked in order. Euroleague precedes NBA because its
# keys also contain "basketball".
_SPORT_KEY_MARKERS: list[tuple[Sport, tuple[str, ...]]] = [
    (Sport.NFL, ("americanfootball", "nfl")),
    (Sport.NHL, ("hockey", "nhl")),
    (Sport.EUROLEAGUE, ("euroleague",)),
    (Sport.NBA, ("basketball", "nba")),
    (Sport.FOOTBALL, ("soccer", "epl", "la_liga", "serie_a", "bundesliga", "ligue_1")),
    (Sport.MMA, ("mma", "ufc", "mixed_martial_arts")),
]

# Team-name keyword lists, used only when the sport key is not recognised.
# NFL precedes NHL: "jets", "panthers" and "wild" appear in both.
_TEAM_KEYWORDS: list[tuple[Sport, list[str]]] = [
    (Sport.NFL, NFL_TEAMS),
    (Sport.NHL, NHL_TEAMS),
    (Sport.EUROLEAGUE, EUROLEAGUE_TEAMS),
    (Sport.NBA, NBA_TEAMS),
    (Sport.MMA, MMA_KEYWORDS),
]


def detect_sport_type(sport_key: Optional[str]) -> SportType:
    s = (sport_key or "").lower()
    if "hockey" in s or "nhl" in s:
        return SportType.HOCKEY
    if "basketball" in s or "nba" in s or "euroleague" in s:
        return SportType.BASKETBALL
    return SportType.SOCCER


def detect_sport(sport_key: Optional[str], home_team: str = "", away_team: str = "") -> Optional[Sport]:
    """
    League for the results updater, or None when it cannot be told.

    The sport key decides whenever it names a known sport; team-name keywords
    are a fallback for legacy rows with blank or generic keys.
    """
    key = (sport_key or "").lower()
    for sport, markers in _SPORT_KEY_MARKERS:
        if any(m in key for m in markers):
            return sport

    home = (home_team or "").lower()
    away = (away_team or "").lower()
    for sport, keywords in _TEAM_KEYWORDS:
        if any(k in home or k in away for k in keywords):
            return sport
    return None


def season_for(sport: Sport, day: date) -> Optional[Union[str, int]]:
    """
    API-Sports `season` parameter for a game on `day`.

    NBA seasons are "2025-2026" strings starting in October; NHL, NFL and
    soccer use the starting year (October, September and August respectively);
    Euroleague uses the calendar year. MMA has no season.
    """
    year, month = day.year, day.month
    if sport == Sport.NBA:
        return f"{year}-{year + 1}" if month >= 10 else f"{year - 1}-{year}"
    if sport == Sport.NHL:
        return year if month >= 10 else year - 1
    if sport == Sport.NFL:
        return year if month >= 9 else year - 1
    if sport == Sport.FOOTBALL:
        return year if month >= 8 else year - 1
    if sport == Sport.EUROLEAGUE:
        return year
    return None
