"""
Short-name aliases for North American league teams.

Keys are lowercase nicknames and abbreviations as they appear in prediction
match names; values are the full names the API-Sports feeds use.
"""

NBA_ALIASES: dict[str, str] = {
    "76ers": "Philadelphia 76ers",
    "sixers": "Philadelphia 76ers",
    "lakers": "Los Angeles Lakers",
    "la lakers": "Los Angeles Lakers",
    "clippers": "Los Angeles Clippers",
    "la clippers": "Los Angeles Clippers",
    "celtics": "Boston Celtics",
    "nets": "Brooklyn Nets",
    "knicks": "New York Knicks",
    "warriors": "Golden State Warriors",
    "gsw": "Golden State Warriors",
    "bulls": "Chicago Bulls",
    "heat": "Miami Heat",
    "nuggets": "Denver Nuggets",
    "suns": "Phoenix Suns",
    "bucks": "Milwaukee Bucks",
    "mavs": "Dallas Mavericks",
    "mavericks": "Dallas Mavericks",
    "rockets": "Houston Rockets",
    "spurs": "San Antonio Spurs",
    "jazz": "Utah Jazz",
    "thunder": "Oklahoma City Thunder",
    "okc": "Oklahoma City Thunder",
    "grizzlies": "Memphis Grizzlies",
    "pelicans": "New Orleans Pelicans",
    "timberwolves": "Minnesota Timberwolves",
    "wolves": "Minnesota Timberwolves",
    "blazers": "Portland Trail Blazers",
    "trail blazers": "Portland Trail Blazers",
    "kings": "Sacramento Kings",
    "magic": "Orlando Magic",
    "hawks": "Atlanta Hawks",
    "hornets": "Charlotte Hornets",
    "pistons": "Detroit Pistons",
    "pacers": "Indiana Pacers",
    "cavaliers": "Cleveland Cavaliers",
    "cavs": "Cleveland Cavaliers",
    "raptors": "Toronto Raptors",
    "wizards": "Washington Wizards",
}

NFL_ALIASES: dict[str, str] = {
    "chiefs": "Kansas City Chiefs",
    "bills": "Buffalo Bills",
    "ravens": "Baltimore Ravens",
    "bengals": "Cincinnati Bengals",
    "dolphins": "Miami Dolphins",
    "patriots": "New England Patriots",
    "pats": "New England Patriots",
    "jets": "New York Jets",
    "ny jets": "New York Jets",
    "steelers": "Pittsburgh Steelers",
    "browns": "Cleveland Browns",
    "titans": "Tennessee Titans",
    "colts": "Indianapolis Colts",
    "jaguars": "Jacksonville Jaguars",
    "jags": "Jacksonville Jaguars",
    "texans": "Houston Texans",
    "broncos": "Denver Broncos",
    "raiders": "Las Vegas Raiders",
    "lv raiders": "Las Vegas Raiders",
    "chargers": "Los Angeles Chargers",
    "la chargers": "Los Angeles Chargers",
    "eagles": "Philadelphia Eagles",
    "cowboys": "Dallas Cowboys",
    "giants": "New York Giants",
    "ny giants": "New York Giants",
    "commanders": "Washington Commanders",
    "lions": "Detroit Lions",
    "packers": "Green Bay Packers",
    "vikings": "Minnesota Vikings",
    "bears": "Chicago Bears",
    "buccaneers": "Tampa Bay Buccaneers",
    "bucs": "Tampa Bay Buccaneers",
    "saints": "New Orleans Saints",
    "falcons": "Atlanta Falcons",
    "panthers": "Carolina Panthers",
    "seahawks": "Seattle Seahawks",
    "49ers": "San Francisco 49ers",
    "niners": "San Francisco 49ers",
    "cardinals": "Arizona Cardinals",
    "rams": "Los Angeles Rams",
    "la rams": "Los Angeles Rams",
}

NHL_ALIASES: dict[str, str] = {
    "bruins": "Boston Bruins",
    "rangers": "New York Rangers",
    "ny rangers": "New York Rangers",
    "penguins": "Pittsburgh Penguins",
    "pens": "Pittsburgh Penguins",
    "capitals": "Washington Capitals",
    "caps": "Washington Capitals",
    "flyers": "Philadelphia Flyers",
    "devils": "New Jersey Devils",
    "islanders": "New York Islanders",
    "isles": "New York Islanders",
    "canadiens": "Montreal Canadiens",
    "habs": "Montreal Canadiens",
    "senators": "Ottawa Senators",
    "sens": "Ottawa Senators",
    "maple leafs": "Toronto Maple Leafs",
    "leafs": "Toronto Maple Leafs",
    "lightning": "Tampa Bay Lightning",
    "bolts": "Tampa Bay Lightning",
    "panthers": "Florida Panthers",
    "cats": "Florida Panthers",
    "hurricanes": "Carolina Hurricanes",
    "canes": "Carolina Hurricanes",
    "predators": "Nashville Predators",
    "preds": "Nashville Predators",
    "blue jackets": "Columbus Blue Jackets",
    "cbj": "Columbus Blue Jackets",
    "red wings": "Detroit Red Wings",
    "wings": "Detroit Red Wings",
    "blackhawks": "Chicago Blackhawks",
    "hawks": "Chicago Blackhawks",
    "wild": "Minnesota Wild",
    "blues": "St. Louis Blues",
    "jets": "Winnipeg Jets",
    "avalanche": "Colorado Avalanche",
    "avs": "Colorado Avalanche",
    "stars": "Dallas Stars",
    "coyotes": "Arizona Coyotes",
    "yotes": "Arizona Coyotes",
    "ducks": "Anaheim Ducks",
    "kings": "Los Angeles Kings",
    "la kings": "Los Angeles Kings",
    "sharks": "San Jose Sharks",
    "kraken": "Seattle Kraken",
    "golden knights": "Vegas Golden Knights",
    "vgk": "Vegas Golden Knights",
    "knights": "Vegas Golden Knights",
    "flames": "Calgary Flames",
    "oilers": "Edmonton Oilers",
    "canucks": "Vancouver Canucks",
}


def alias_map_for(sport: str) -> dict[str, str]:
    """Alias table for a sport key such as `basketball_nba`; empty for soccer."""
    s = (sport or "").lower()
    if "nba" in s or "basketball" in s:
        return NBA_ALIASES
    if "nfl" in s or "americanfootball" in s:
        return NFL_ALIASES
    if "nhl" in s or "hockey" in s:
        return NHL_ALIASES
    return {}
