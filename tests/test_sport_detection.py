"""
Tests for sport detection and season parameters.
"""

from datetime import date

import pytest

from sportbot.sport_detection import Sport, SportType, detect_sport, detect_sport_type, season_for


class TestDetectSportType:
    """Validation-job sport families."""

    @pytest.mark.parametrize("key,expected", [
        ("icehockey_nhl", SportType.HOCKEY),
        ("basketball_nba", SportType.BASKETBALL),
        ("basketball_euroleague", SportType.BASKETBALL),
        ("soccer_epl", SportType.SOCCER),
        ("", SportType.SOCCER),
        (None, SportType.SOCCER),
    ])
    def test_families(self, key, expected):
        assert detect_sport_type(key) == expected


class TestDetectSport:
    """League detection for the results updater."""

    @pytest.mark.parametrize("key,expected", [
        ("americanfootball_nfl", Sport.NFL),
        ("icehockey_nhl", Sport.NHL),
        ("basketball_euroleague", Sport.EUROLEAGUE),
        ("basketball_nba", Sport.NBA),
        ("soccer_epl", Sport.FOOTBALL),
        ("mma_mixed_martial_arts", Sport.MMA),
    ])
    def test_sport_key(self, key, expected):
        assert detect_sport(key, "Home", "Away") == expected

    def test_sport_key_beats_team_keywords(self):
        """Real Madrid and Barcelona are Euroleague keywords, but the key says soccer."""
        assert detect_sport("soccer_spain_la_liga", "Real Madrid", "Barcelona") == Sport.FOOTBALL

    def test_team_keyword_fallback(self):
        assert detect_sport("", "New York Jets", "Miami Dolphins") == Sport.NFL
        assert detect_sport("", "Boston Bruins", "Toronto Maple Leafs") == Sport.NHL
        assert detect_sport(None, "Fenerbahce", "Olympiacos") == Sport.EUROLEAGUE
        assert detect_sport(None, "Chicago Bulls", "Miami Heat") == Sport.NBA

    def test_unknown_returns_none(self):
        assert detect_sport("", "Arsenal", "Chelsea") is None
        assert detect_sport(None, "Jon Jones", "Stipe Miocic") is None


class TestSeasonFor:
    """API-Sports season parameter per league."""

    def test_nba_season_string(self):
        assert season_for(Sport.NBA, date(2025, 12, 1)) == "2025-2026"
        assert season_for(Sport.NBA, date(2026, 3, 1)) == "2025-2026"
        assert season_for(Sport.NBA, date(2026, 10, 17)) == "2026-2027"

    def test_starting_year_leagues(self):
        assert season_for(Sport.NHL, date(2025, 10, 10)) == 2025
        assert season_for(Sport.NHL, date(2026, 2, 1)) == 2025
        assert season_for(Sport.NFL, date(2025, 9, 7)) == 2025
        assert season_for(Sport.NFL, date(2025, 8, 20)) == 2024
        assert season_for(Sport.FOOTBALL, date(2025, 8, 16)) == 2025
        assert season_for(Sport.FOOTBALL, date(2026, 5, 1)) == 2025

    def test_euroleague_calendar_year(self):
        assert season_for(Sport.EUROLEAGUE, date(2026, 1, 10)) == 2026

    def test_mma_has_no_season(self):
        assert season_for(Sport.MMA, date(2026, 1, 10)) is None
