"""Tests for CLI input parsing and rendering."""

from cinepick.cli.display import format_details, format_preferences, format_season
from cinepick.cli.prompts import parse_choice, parse_float, parse_int, parse_list
from cinepick.models.catalog import ItemKind
from cinepick.models.schemas import Episode, Preferences, SeasonDetails, SeasonSummary

from tests.conftest import make_item


class TestParsers:
    def test_blank_keeps_current(self):
        assert parse_list("", ["Drama"]) == ["Drama"]
        assert parse_int("", 2000) == 2000
        assert parse_float("", 7.0) == 7.0

    def test_clear_words_unset(self):
        assert parse_list("any", ["Drama"]) is None
        assert parse_int("None", 2000) is None
        assert parse_float("-", 7.0) is None

    def test_list_values(self):
        assert parse_list(" Drama, Comedy ,,", None) == ["Drama", "Comedy"]
        assert parse_list("EN,Fr", None, lower=True) == ["en", "fr"]

    def test_unparsable_number_keeps_current(self):
        assert parse_int("abc", 1990) == 1990
        assert parse_float("high", None) is None

    def test_choice(self):
        assert parse_choice("1", 3) == 0
        assert parse_choice("3", 3) == 2
        assert parse_choice("4", 3) is None
        assert parse_choice("x", 3) is None


class TestDisplay:
    def test_provider_states(self):
        assert "Streaming (US): unknown" in format_details(make_item(1, providers=None), "US")
        assert "Streaming (US): not available" in format_details(make_item(1, providers=[]), "US")
        assert "Streaming (US): Netflix, Hulu" in format_details(
            make_item(1, providers=["Netflix", "Hulu"]), "US"
        )

    def test_poster_url(self):
        details = format_details(make_item(1, poster_path="/abc.jpg"), "US")
        assert "https://image.tmdb.org/t/p/w342/abc.jpg" in details

    def test_preferences(self):
        text = format_preferences(Preferences(genres=["Drama", "Comedy"]))
        assert "Genres: Drama, Comedy" in text
        assert "Languages: Any" in text

    def test_season_list_is_capped(self):
        seasons = [SeasonSummary(season_number=n, episode_count=8) for n in range(1, 8)]
        details = format_details(make_item(1, kind=ItemKind.TV, number_of_seasons=7, seasons=seasons), "US")

        assert "Seasons: 7" in details
        assert "S5: Season 5 (8 episodes) - Air date: N/A" in details
        assert "S6:" not in details
        assert "...and more seasons." in details

    def test_movies_show_no_seasons(self):
        assert "Seasons:" not in format_details(make_item(1), "US")

    def test_episode_list(self):
        episodes = [Episode(episode_number=n, name=f"Episode {n}") for n in range(1, 13)]
        episodes[0] = Episode(episode_number=1, name="Pilot", vote_average=8.0, overview="x" * 150)

        text = format_season(SeasonDetails(season_number=2, name="Season 2", episodes=episodes))

        assert text.startswith("--- Season 2: Season 2 - Episodes (Top 10) ---")
        assert "E1: Pilot (Air: TBA, Rating: 8.0)" in text
        assert f"    {'x' * 100}..." in text
        assert "E10:" in text
        assert "E11:" not in text
        assert "...and more episodes." in text
