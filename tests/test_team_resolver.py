import pytest

from slatescore.adapters.base import ParsedRecord
from slatescore.models.enums import KeyType, Sport
from slatescore.normalization.team_resolver import TeamIdentityResolver, UnresolvedTeamError

MLB_ROSTER = {"10": "NYY", "26": "SF", "30": "WSH", "11": "ATH"}


@pytest.fixture
def resolver() -> TeamIdentityResolver:
    return TeamIdentityResolver(Sport.MLB, MLB_ROSTER)


class TestTeamIdentityResolver:
    def test_exact_match_is_case_insensitive(self, resolver):
        assert resolver.resolve("NYY") == "10"
        assert resolver.resolve("nyy ") == "10"

    @pytest.mark.parametrize("abbreviation,team_id", [("SFG", "26"), ("WSN", "30"), ("OAK", "11")])
    def test_overrides(self, resolver, abbreviation, team_id):
        assert resolver.resolve(abbreviation) == team_id

    def test_unknown_abbreviation_raises(self, resolver):
        with pytest.raises(UnresolvedTeamError):
            resolver.resolve("XYZ")

    def test_override_to_team_missing_from_roster_raises(self):
        resolver = TeamIdentityResolver(Sport.MLB, {"10": "NYY"})
        with pytest.raises(UnresolvedTeamError):
            resolver.resolve("SFG")

    def test_explicit_overrides_replace_defaults(self):
        resolver = TeamIdentityResolver(Sport.MLB, MLB_ROSTER, overrides={"GIANTS": "SF"})
        assert resolver.resolve("GIANTS") == "26"
        with pytest.raises(UnresolvedTeamError):
            resolver.resolve("SFG")

    def test_resolve_records_drops_unresolvable_rows(self, resolver):
        records = [
            ParsedRecord(key="NYY", data={"metrics": {"power_indexes": {"RPI": 0.55}}}, key_type=KeyType.ABBREVIATION),
            ParsedRecord(key="XYZ", data={"metrics": {"power_indexes": {"RPI": 0.40}}}, key_type=KeyType.ABBREVIATION),
            ParsedRecord(key="SFG", data={"metrics": {"power_indexes": {"RPI": 0.48}}}, key_type=KeyType.ABBREVIATION),
            ParsedRecord(key="30", data={"name": "Washington Nationals"}),
        ]

        resolved = resolver.resolve_records(records)

        assert [(r.key, r.key_type) for r in resolved] == [
            ("10", KeyType.ID),
            ("26", KeyType.ID),
            ("30", KeyType.ID),
        ]
        assert resolved[1].data == {"metrics": {"power_indexes": {"RPI": 0.48}}}
