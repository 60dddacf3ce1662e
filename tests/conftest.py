"""Shared pytest fixtures: trimmed-down provider payloads for two NBA teams."""
from typing import Any, Dict

import pytest

from slatescore.reference.tables import ReferenceTables


def espn_team(team_id: str, abbreviation: str, name: str, short_name: str) -> Dict[str, Any]:
    return {
        "id": team_id,
        "abbreviation": abbreviation,
        "displayName": name,
        "shortDisplayName": short_name,
        "logos": [{"href": f"https://a.espncdn.com/i/teamlogos/nba/500/{abbreviation.lower()}.png"}],
    }


CELTICS = espn_team("2", "BOS", "Boston Celtics", "Celtics")
KNICKS = espn_team("18", "NY", "New York Knicks", "Knicks")


@pytest.fixture
def roster_payload() -> Dict[str, Any]:
    return {
        "sports": [
            {
                "leagues": [
                    {"teams": [{"team": CELTICS}, {"team": KNICKS}]},
                ]
            }
        ]
    }


@pytest.fixture
def power_index_payload() -> Dict[str, Any]:
    def entry(team: Dict[str, Any], bpi: float, rank: int) -> Dict[str, Any]:
        return {
            "team": {
                **team,
                "group": {"shortName": "Atlantic", "parent": {"shortName": "East"}},
            },
            "categories": [{"name": "bpi", "values": [bpi, rank]}],
        }

    return {
        "categories": [{"name": "bpi", "names": ["bpi", "bpirank"]}],
        "teams": [entry(CELTICS, 5.0, 1), entry(KNICKS, 3.0, 4)],
    }


@pytest.fixture
def schedule_payload() -> Dict[str, Any]:
    def competitor(team: Dict[str, Any], side: str, record: str) -> Dict[str, Any]:
        return {
            "homeAway": side,
            "team": team,
            "records": [
                {"type": "total", "summary": record},
                {"type": "home", "summary": "30-5"},
            ],
            "curatedRank": {"current": 99},
        }

    return {
        "leagues": [{"season": {"type": {"type": 2}}}],
        "events": [
            {
                "id": "401705000",
                "date": "2025-01-15T00:30Z",
                "season": {"slug": "regular-season"},
                "links": [
                    {"text": "Gamecast", "href": "https://www.espn.com/nba/game/_/gameId/401705000"},
                    {"text": "Box Score", "href": "https://www.espn.com/nba/boxscore/_/gameId/401705000"},
                ],
                "competitions": [
                    {
                        "timeValid": True,
                        "competitors": [
                            competitor(CELTICS, "home", "50-20"),
                            competitor(KNICKS, "away", "40-30"),
                        ],
                        "broadcasts": [{"market": "national", "names": ["TNT"]}],
                        "geoBroadcasts": [
                            {
                                "media": {"shortName": "TNT"},
                                "market": {"type": "National"},
                                "type": {"shortName": "TV"},
                            },
                            {
                                "media": {"shortName": "MSG"},
                                "market": {"type": "Away"},
                                "type": {"shortName": "TV"},
                            },
                        ],
                        "notes": [{"type": "event", "headline": "Rivalry Week"}],
                    }
                ],
            }
        ],
    }


@pytest.fixture
def matchup_quality_payload() -> Dict[str, Any]:
    return {
        "events": [
            {
                "id": "401705000",
                "competitions": [
                    {
                        "competitors": [
                            {"homeAway": "home", "team": {"id": "2"}},
                            {"homeAway": "away", "team": {"id": "18"}},
                        ],
                        "powerIndexes": [
                            {
                                "id": "2",
                                "stats": [
                                    {"name": "matchupquality", "value": 80.0},
                                    {"name": "teampredwinpct", "value": 60.0},
                                    {"name": "teampredmov", "value": 3.0},
                                ],
                            },
                            {
                                "id": "18",
                                "stats": [
                                    {"name": "matchupquality", "value": 80.0},
                                    {"name": "gameprojection", "value": 40.0},
                                    {"name": "teampredmov", "value": -3.0},
                                ],
                            },
                        ],
                    }
                ],
            },
            {
                "id": "401705999",
                "competitions": [
                    {
                        "competitors": [
                            {"homeAway": "home", "team": {"id": "5"}},
                            {"homeAway": "away", "team": {"id": "6"}},
                        ],
                        "powerIndexes": [],
                    }
                ],
            },
        ]
    }


@pytest.fixture
def empty_reference() -> ReferenceTables:
    return ReferenceTables()
