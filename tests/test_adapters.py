from datetime import datetime, timezone

import pytest

from slatescore.adapters.base import ParseError
from slatescore.adapters.delimited_text import DelimitedTextAdapter
from slatescore.adapters.espn_matchup_quality import MATCHUP_QUALITIES, EspnMatchupQualityAdapter
from slatescore.adapters.espn_power_index import POWER_INDEXES, EspnPowerIndexAdapter
from slatescore.adapters.espn_roster import EspnRosterAdapter
from slatescore.adapters.espn_schedule import EspnScheduleAdapter
from slatescore.adapters.html_table import HtmlTableAdapter
from slatescore.adapters.registry import default_registry
from slatescore.models.enums import KeyType, MetricKind, SeasonPhase, Sport
from slatescore.models.game import UNDETERMINED, Game

RPI_HTML = """
<html><body>
<table class="tablehead">
  <tr class="stathead"><td colspan="4">MLB RPI Rankings</td></tr>
  <tr class="colhead"><td>RK</td><td>TEAM</td><td>W</td><td>RPI</td></tr>
  <tr><td>1</td><td><a href="https://www.espn.com/mlb/team/_/name/nyy/new-york-yankees">NY Yankees</a></td><td>60</td><td>.561</td></tr>
  <tr><td>2</td><td><a href="https://www.espn.com/mlb/team/_/name/sf/san-francisco-giants">San Francisco</a></td><td>55</td><td>.540</td></tr>
  <tr class="colhead"><td>RK</td><td>TEAM</td><td>W</td><td>RPI</td></tr>
  <tr><td>3</td><td>No link here</td><td>50</td><td>.520</td></tr>
  <tr><td>4</td><td><a href="/mlb/team/_/name/bos/boston-red-sox">Boston</a></td><td>.510</td></tr>
</table>
</body></html>
"""

PREDICTIONS_CSV = """team,avg_overall_prediction,playoffPct
BOS,0.56,0.71
T.B,0.49,0.33

,0.50,0.5
NYR,0.52
"""


class TestEspnRosterAdapter:
    def test_parses_teams(self, roster_payload):
        records = EspnRosterAdapter().parse(roster_payload)

        assert [r.key for r in records] == ["2", "18"]
        assert records[0].data == {
            "id": "2",
            "name": "Boston Celtics",
            "short_name": "Celtics",
            "abbreviation": "BOS",
            "logo": "i/teamlogos/nba/500/bos.png",
        }

    @pytest.mark.parametrize("payload", [{}, {"sports": []}, {"sports": [{"leagues": [{"teams": []}]}]}])
    def test_unusable_payload_raises(self, payload):
        with pytest.raises(ParseError):
            EspnRosterAdapter().parse(payload)


class TestEspnPowerIndexAdapter:
    def test_zips_category_names_and_values(self, power_index_payload):
        records = EspnPowerIndexAdapter().parse(power_index_payload)

        celtics = records[0]
        assert celtics.key == "2"
        assert celtics.key_type == KeyType.ID
        assert celtics.data["metrics"] == {POWER_INDEXES: {"bpi": {"bpi": 5.0, "bpirank": 1}}}
        assert celtics.data["division_name"] == "Atlantic"
        assert celtics.data["conference_name"] == "East"

    def test_mismatched_values_skip_only_that_team(self, power_index_payload):
        power_index_payload["teams"][0]["categories"][0]["values"] = [5.0]
        records = EspnPowerIndexAdapter().parse(power_index_payload)
        assert [r.key for r in records] == ["18"]

    def test_empty_teams_raises(self):
        with pytest.raises(ParseError):
            EspnPowerIndexAdapter().parse({"categories": [], "teams": []})


class TestEspnMatchupQualityAdapter:
    def test_builds_home_and_away_fragments(self, matchup_quality_payload):
        records = EspnMatchupQualityAdapter().parse(matchup_quality_payload)

        assert len(records) == 1
        game = records[0]
        assert game.key == "401705000"
        assert game.data["home"] == {
            "id": "2",
            "metrics": {
                MATCHUP_QUALITIES: {"matchupquality": 80.0, "teampredwinpct": 60.0, "teampredmov": 3.0}
            },
        }
        # "gameprojection" is reported under the canonical win-probability name
        assert game.data["away"]["metrics"][MATCHUP_QUALITIES]["teampredwinpct"] == 40.0

    def test_missing_events_raises(self):
        with pytest.raises(ParseError):
            EspnMatchupQualityAdapter().parse({"data": []})


class TestEspnScheduleAdapter:
    def test_parses_game(self, schedule_payload):
        records = EspnScheduleAdapter(Sport.NBA).parse(schedule_payload)

        assert len(records) == 1
        game = Game.model_validate(records[0].data)
        assert game.id == "401705000"
        assert game.sport == Sport.NBA
        assert game.date == datetime(2025, 1, 15, 0, 30, tzinfo=timezone.utc)
        assert game.season_phase == SeasonPhase.REGULAR_SEASON
        assert game.home.abbreviation == "BOS"
        assert game.home.record == "50-20"
        assert game.away.record == "40-30"
        assert game.home.rank == 99
        assert game.link == "https://www.espn.com/nba/game/_/gameId/401705000"
        assert game.broadcasts["TNT"].type == "TV"
        assert game.broadcasts["TNT"].market == "National"
        assert game.broadcasts["MSG"].market == "Away"
        assert game.notes[0].headline == "Rivalry Week"
        assert game.description == "nba: Knicks @ Celtics (2025-01-15 00:30)"

    def test_invalid_time_is_undetermined(self, schedule_payload):
        schedule_payload["events"][0]["competitions"][0]["timeValid"] = False
        game = EspnScheduleAdapter(Sport.NBA).parse(schedule_payload)[0]
        assert game.data["date"] == UNDETERMINED

    def test_season_phase_falls_back_to_league(self, schedule_payload):
        del schedule_payload["events"][0]["season"]
        schedule_payload["leagues"][0]["season"] = {"type": {"type": 3}}
        game = EspnScheduleAdapter(Sport.NBA).parse(schedule_payload)[0]
        assert game.data["season_phase"] == SeasonPhase.POST_SEASON

    def test_off_day_is_empty_not_an_error(self):
        assert EspnScheduleAdapter(Sport.NBA).parse({"events": []}) == []

    def test_event_without_both_sides_is_skipped(self, schedule_payload):
        competitors = schedule_payload["events"][0]["competitions"][0]["competitors"]
        competitors.pop()
        assert EspnScheduleAdapter(Sport.NBA).parse(schedule_payload) == []


class TestHtmlTableAdapter:
    @pytest.fixture
    def adapter(self) -> HtmlTableAdapter:
        return HtmlTableAdapter(
            metric_name=POWER_INDEXES,
            table_attrs={"class": "tablehead"},
            skip_rows=1,
            header_row=0,
        )

    def test_rows_keyed_by_link_abbreviation(self, adapter):
        records = adapter.parse(RPI_HTML)

        assert [r.key for r in records] == ["NYY", "SF"]
        assert all(r.key_type == KeyType.ABBREVIATION for r in records)
        assert records[0].data == {
            "metrics": {POWER_INDEXES: {"RK": 1.0, "TEAM": "NY Yankees", "W": 60.0, "RPI": 0.561}}
        }

    def test_missing_table_raises(self, adapter):
        with pytest.raises(ParseError):
            adapter.parse("<html><body><table class='other'><tr><td>x</td></tr></table></body></html>")

    def test_empty_payload_raises(self, adapter):
        with pytest.raises(ParseError):
            adapter.parse("")


class TestDelimitedTextAdapter:
    def test_parses_rows_and_skips_bad_ones(self):
        records = DelimitedTextAdapter(metric_name=POWER_INDEXES).parse(PREDICTIONS_CSV)

        assert [r.key for r in records] == ["BOS", "T.B"]
        assert records[0].data == {
            "metrics": {POWER_INDEXES: {"avg_overall_prediction": 0.56, "playoffPct": 0.71}}
        }

    def test_alternate_delimiter(self):
        records = DelimitedTextAdapter("stats", delimiter="|").parse("team|rating\nBOS|1.5\n")
        assert records[0].data == {"metrics": {"stats": {"rating": 1.5}}}

    @pytest.mark.parametrize("payload", ["", "   \n", {"team": "BOS"}, "team\nBOS\n"])
    def test_unusable_payload_raises(self, payload):
        with pytest.raises(ParseError):
            DelimitedTextAdapter(metric_name=POWER_INDEXES).parse(payload)


class TestDefaultRegistry:
    def test_every_sport_has_schedule_and_roster(self):
        registry = default_registry()
        for sport in Sport:
            games = registry.sources(sport, MetricKind.GAME)
            assert [s.name for s in games if s.primary] == ["schedule"]
            assert "roster" in [s.name for s in registry.sources(sport, MetricKind.TEAM)]

    def test_every_sport_has_a_required_power_index_feed(self):
        registry = default_registry()
        for sport in Sport:
            assert any(s.required_for_scoring for s in registry.sources(sport, MetricKind.TEAM))

    def test_urls_carry_date_and_groups(self):
        registry = default_registry()
        schedule = registry.sources(Sport.NCAAMBB, MetricKind.GAME)[0]
        url = schedule.url("20250115")
        assert "mens-college-basketball" in url
        assert "groups=50" in url
        assert url.endswith("dates=20250115")
