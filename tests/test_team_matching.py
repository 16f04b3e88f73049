"""
Tests for team-name matching between predictions and API-Sports events.
"""

from sportbot.team_matching import (
    aliases_match,
    compact,
    compact_match,
    contains_match,
    find_match_by_teams,
    fuzzy_match,
    keyword_match,
    names_match,
    normalize_team_name,
    word_overlap_match,
)

from fakes import basketball_game, soccer_fixture


class TestBasicMatchers:
    """Containment, keyword and word-overlap matchers."""

    def test_compact_strips_punctuation_and_case(self):
        assert compact("Paris Saint-Germain") == "parissaintgermain"
        assert compact("Brighton & Hove Albion") == "brightonhovealbion"

    def test_compact_match_either_direction(self):
        assert compact_match("Paris Saint Germain", "Paris Saint-Germain")
        assert compact_match("Arsenal FC", "Arsenal")
        assert compact_match("Arsenal", "Arsenal FC")

    def test_empty_names_never_match(self):
        assert not compact_match("", "Arsenal")
        assert not compact_match("Arsenal", None)
        # Nothing left after compaction
        assert not compact_match("123", "Arsenal")
        assert not contains_match("", "Arsenal")
        assert not keyword_match("", "bulls")
        assert not word_overlap_match("Real Madrid", "   ")

    def test_keyword_match(self):
        assert keyword_match("Chicago Bulls", "bulls")
        assert keyword_match("Los Angeles Clippers", "la clippers")
        assert not keyword_match("Boston Celtics", "miami heat")

    def test_word_overlap_match(self):
        assert word_overlap_match("Real Madrid CF", "real madrid")
        assert word_overlap_match("Panathinaikos Athens", "panathinaikos")
        assert not word_overlap_match("Olympiacos", "panathinaikos")

    def test_word_overlap_ignores_short_words(self):
        """Words of 3 characters or fewer ("fc") are not evidence of a match."""
        assert not word_overlap_match("FC Bayern", "fc porto")

    def test_contains_match_is_case_insensitive(self):
        assert contains_match("Boston Bruins", "bruins")
        assert not contains_match("Boston Bruins", "rangers")


class TestAliases:
    """NBA / NFL / NHL nickname resolution."""

    def test_exact_alias(self):
        assert normalize_team_name("Sixers", "basketball_nba") == "Philadelphia 76ers"
        assert normalize_team_name("habs", "icehockey_nhl") == "Montreal Canadiens"
        assert normalize_team_name("Niners", "americanfootball_nfl") == "San Francisco 49ers"

    def test_alias_inside_longer_name(self):
        assert normalize_team_name("Boston Celtics", "basketball_nba") == "Boston Celtics"

    def test_alias_must_be_whole_word(self):
        """'nets' inside 'hornets' must not resolve to Brooklyn."""
        assert normalize_team_name("Charlotte Hornets", "basketball_nba") == "Charlotte Hornets"

    def test_unknown_names_unchanged(self):
        assert normalize_team_name("Arsenal", "soccer_epl") == "Arsenal"
        assert normalize_team_name("Some Team", "basketball_nba") == "Some Team"

    def test_aliases_match(self):
        assert aliases_match("Sixers", "Philadelphia 76ers", "basketball_nba")
        assert aliases_match("LA Lakers", "Los Angeles Lakers", "basketball_nba")

    def test_short_city_is_not_a_match(self):
        assert not aliases_match("Lakers", "Clippers", "basketball_nba")

    def test_shared_first_word_needs_alias_resolution(self):
        assert not aliases_match("Manchester United", "Manchester City", "soccer_epl")
        assert not aliases_match("Real Madrid", "Real Betis", "")
        assert not names_match("Manchester City", "Manchester United", "soccer_epl")


class TestFuzzy:
    """Token-set fuzzy matching is opt-in."""

    def test_fuzzy_match(self):
        assert fuzzy_match("Manchester United", "Manchester United FC", 90)
        assert not fuzzy_match("Arsenal", "Chelsea", 90)
        assert not fuzzy_match("", "Chelsea", 0)

    def test_names_match_only_fuzzy_when_enabled(self):
        api_name, wanted = "Wolverhampton Wanderers", "Wanderers Wolverhampton"
        assert not names_match(api_name, wanted, "soccer_epl")
        assert names_match(api_name, wanted, "soccer_epl", enable_fuzzy=True, fuzzy_threshold=90)


class TestFindMatchByTeams:
    """Locating an event in a day's listing."""

    def test_finds_event_by_both_teams(self):
        events = [
            soccer_fixture("Liverpool", "Everton", 2, 0, fixture_id=1),
            soccer_fixture("Arsenal FC", "Chelsea FC", 1, 1, fixture_id=2),
        ]
        found = find_match_by_teams(events, "Arsenal", "Chelsea", sport="soccer_epl")
        assert found["fixture"]["id"] == 2

    def test_uses_nicknames(self):
        events = [basketball_game("Philadelphia 76ers", "Boston Celtics", 101, 99)]
        assert find_match_by_teams(events, "Sixers", "Celtics", sport="basketball_nba") is not None

    def test_same_city_rival_is_not_matched(self):
        events = [
            soccer_fixture("Manchester City", "Liverpool", 3, 0, fixture_id=1),
            soccer_fixture("Manchester United", "Liverpool", 1, 1, fixture_id=2),
        ]
        found = find_match_by_teams(events, "Manchester United", "Liverpool", sport="soccer_epl")
        assert found["fixture"]["id"] == 2

    def test_requires_both_teams(self):
        events = [soccer_fixture("Arsenal", "Liverpool", 1, 0)]
        assert find_match_by_teams(events, "Arsenal", "Chelsea") is None

    def test_events_without_names_are_skipped(self):
        events = [
            {"teams": {"home": {"name": ""}, "away": {"name": None}}},
            {"teams": {}},
            "not-an-event",
        ]
        assert find_match_by_teams(events, "Arsenal", "Chelsea") is None
