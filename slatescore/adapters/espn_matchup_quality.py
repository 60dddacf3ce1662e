# slatescore/adapters/espn_matchup_quality.py
from typing import Any, Dict, List, Optional

from loguru import logger

from .base import ParsedRecord, SourceAdapter, require_list

MATCHUP_QUALITIES = "matchup_qualities"

# Provider stat names -> the names scoring reads. The feed reports the same
# quantity under different names depending on the day's game state.
STAT_NAME_MAPPER: Dict[str, str] = {
    "matchupquality": "matchupquality",
    "teampredwinpct": "teampredwinpct",
    "gameprojection": "teampredwinpct",
    "opponentpredwinpct": "teampredlosspct",
    "teamchanceloss": "teampredlosspct",
    "teampredmov": "teampredmov",
    "teampredptdiff": "favoredteampredmov",
    "teamexpectedpts": "teamexpectedpts",
    "oppexpectedpts": "oppexpectedpts",
}


class EspnMatchupQualityAdapter(SourceAdapter):
    """ESPN daily power index: per-game, per-team matchup statistics.

    Produces game fragments shaped like
    {"home": {"metrics": {"matchup_qualities": {...}}}, "away": {...}}.
    """

    def parse(self, payload: Any) -> List[ParsedRecord]:
        events = require_list(payload, "events", self.name)

        records: List[ParsedRecord] = []
        for event in events:
            try:
                record = self._parse_event(event)
            except (KeyError, IndexError, TypeError) as e:
                logger.warning(f"Skipping matchup quality event ({e!r}): {event!r:.200}")
                continue
            if record is not None:
                records.append(record)

        logger.debug(f"Parsed matchup qualities for {len(records)} of {len(events)} events")
        return records

    def _parse_event(self, event: Dict[str, Any]) -> Optional[ParsedRecord]:
        competition = event["competitions"][0]

        stats_by_team: Dict[str, Dict[str, Any]] = {}
        for team_stats in competition.get("powerIndexes") or []:
            stats_by_team[str(team_stats["id"])] = {
                STAT_NAME_MAPPER.get(stat["name"], stat["name"]): stat.get("value")
                for stat in team_stats.get("stats", [])
            }

        game: Dict[str, Any] = {}
        for competitor in competition["competitors"]:
            team_id = str(competitor["team"]["id"])
            side = competitor["homeAway"]
            if team_id not in stats_by_team:
                continue
            game[side] = {
                "id": team_id,
                "metrics": {MATCHUP_QUALITIES: stats_by_team[team_id]},
            }

        if not game:
            logger.debug(f"Event {event.get('id')} carries no matchup statistics")
            return None
        return ParsedRecord(key=str(event["id"]), data=game)
