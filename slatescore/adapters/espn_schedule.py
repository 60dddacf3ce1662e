# slatescore/adapters/espn_schedule.py
from typing import Any, Dict, List, Optional

from loguru import logger

from slatescore.models.enums import SeasonPhase, Sport
from slatescore.models.game import UNDETERMINED
from slatescore.utils.date_utils import parse_provider_datetime
from .base import ParsedRecord, SourceAdapter, require_list
from .espn_roster import team_info

SEASON_SLUGS: Dict[str, SeasonPhase] = {
    "preseason": SeasonPhase.PRE_SEASON,
    "pre-season": SeasonPhase.PRE_SEASON,
    "regular-season": SeasonPhase.REGULAR_SEASON,
    "post-season": SeasonPhase.POST_SEASON,
    "postseason": SeasonPhase.POST_SEASON,
}

# ESPN season type ids
SEASON_TYPES: Dict[int, SeasonPhase] = {
    1: SeasonPhase.PRE_SEASON,
    2: SeasonPhase.REGULAR_SEASON,
    3: SeasonPhase.POST_SEASON,
}


class EspnScheduleAdapter(SourceAdapter):
    """ESPN scoreboard: the day's games with team snapshots and broadcasts.

    An empty `events` list is a normal off-day; a missing one is a parse error.
    """

    def __init__(self, sport: Sport):
        self.sport = sport

    def parse(self, payload: Any) -> List[ParsedRecord]:
        events = require_list(payload, "events", self.name)
        default_phase = self._league_season_phase(payload)

        records: List[ParsedRecord] = []
        for event in events:
            try:
                records.append(self._parse_event(event, default_phase))
            except (KeyError, IndexError, TypeError, ValueError) as e:
                logger.warning(
                    f"Skipping {self.sport.value} schedule event ({e!r}): {event!r:.200}"
                )

        logger.debug(f"Parsed {len(records)} {self.sport.value} games from schedule")
        return records

    def _parse_event(
        self, event: Dict[str, Any], default_phase: SeasonPhase
    ) -> ParsedRecord:
        competition = event["competitions"][0]

        game: Dict[str, Any] = {"id": str(event["id"]), "sport": self.sport.value}
        for competitor in competition["competitors"]:
            game[competitor["homeAway"]] = self._team_snapshot(competitor)
        if "home" not in game or "away" not in game:
            raise ValueError("event does not list both home and away competitors")

        start = parse_provider_datetime(event.get("date"))
        game["date"] = start if start and competition.get("timeValid", True) else UNDETERMINED
        game["season_phase"] = self._season_phase(event.get("season")) or default_phase
        game["link"] = next(
            (
                link.get("href")
                for link in event.get("links") or []
                if link.get("text") == "Gamecast"
            ),
            None,
        )
        game["broadcasts"] = self._broadcasts(competition)
        game["notes"] = [
            {"type": note.get("type"), "headline": note.get("headline")}
            for note in competition.get("notes") or []
        ]
        return ParsedRecord(key=game["id"], data=game)

    def _team_snapshot(self, competitor: Dict[str, Any]) -> Dict[str, Any]:
        snapshot = team_info(competitor["team"])
        snapshot["record"] = next(
            (
                record.get("summary")
                for record in competitor.get("records") or []
                if record.get("type") == "total"
            ),
            None,
        )
        curated_rank = competitor.get("curatedRank") or {}
        snapshot["rank"] = curated_rank.get("current")
        snapshot["metrics"] = {}
        return snapshot

    @staticmethod
    def _broadcasts(competition: Dict[str, Any]) -> Dict[str, Dict[str, Optional[str]]]:
        broadcasts: Dict[str, Dict[str, Optional[str]]] = {}
        for market_broadcasts in competition.get("broadcasts") or []:
            for name in market_broadcasts.get("names") or []:
                broadcasts[name] = {"market": market_broadcasts.get("market"), "type": None}

        # Geo broadcasts carry the channel type and win on conflicts
        for broadcast in competition.get("geoBroadcasts") or []:
            name = (broadcast.get("media") or {}).get("shortName")
            if not name:
                continue
            broadcasts[name] = {
                "market": (broadcast.get("market") or {}).get("type"),
                "type": (broadcast.get("type") or {}).get("shortName"),
            }
        return broadcasts

    @staticmethod
    def _season_phase(season: Optional[Dict[str, Any]]) -> Optional[SeasonPhase]:
        if not isinstance(season, dict):
            return None
        slug = season.get("slug")
        if slug in SEASON_SLUGS:
            return SEASON_SLUGS[slug]
        season_type = season.get("type")
        if isinstance(season_type, dict):
            season_type = season_type.get("type")
        try:
            return SEASON_TYPES.get(int(season_type))
        except (TypeError, ValueError):
            return None

    def _league_season_phase(self, payload: Dict[str, Any]) -> SeasonPhase:
        leagues = payload.get("leagues") or []
        if leagues and isinstance(leagues[0], dict):
            phase = self._season_phase(leagues[0].get("season"))
            if phase:
                return phase
        return SeasonPhase.REGULAR_SEASON
