# slatescore/adapters/espn_roster.py
from typing import Any, Dict, List

from loguru import logger

from slatescore.utils.misc_utils import url_path
from .base import ParsedRecord, ParseError, SourceAdapter


def team_info(team: Dict[str, Any]) -> Dict[str, Any]:
    """Common ESPN team block -> Team fields."""
    logos = team.get("logos") or []
    logo = logos[0].get("href") if logos and isinstance(logos[0], dict) else team.get("logo")
    info = {
        "id": str(team["id"]),
        "name": team.get("displayName"),
        "short_name": team.get("shortDisplayName"),
        "abbreviation": team.get("abbreviation"),
        "logo": url_path(logo),
    }
    return {k: v for k, v in info.items() if v is not None}


class EspnRosterAdapter(SourceAdapter):
    """ESPN `/teams` listing: the canonical roster (id, names, abbreviation)."""

    def parse(self, payload: Any) -> List[ParsedRecord]:
        try:
            leagues = payload["sports"][0]["leagues"]
            raw_teams = [entry for league in leagues for entry in league.get("teams", [])]
        except (KeyError, IndexError, TypeError) as e:
            raise ParseError(f"{self.name}: missing sports[0].leagues[].teams") from e

        if not raw_teams:
            raise ParseError(f"{self.name}: roster payload lists no teams")

        records: List[ParsedRecord] = []
        for entry in raw_teams:
            team = entry.get("team") if isinstance(entry, dict) else None
            if not isinstance(team, dict) or "id" not in team:
                logger.warning(f"Skipping malformed roster entry: {entry!r:.200}")
                continue
            info = team_info(team)
            records.append(ParsedRecord(key=info["id"], data=info))

        logger.debug(f"Parsed {len(records)} roster teams")
        return records
