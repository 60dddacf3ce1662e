# slatescore/adapters/espn_power_index.py
from typing import Any, Dict, List

from loguru import logger

from slatescore.utils.misc_utils import mappify
from .base import ParsedRecord, ParseError, SourceAdapter, require_list
from .espn_roster import team_info

POWER_INDEXES = "power_indexes"


class EspnPowerIndexAdapter(SourceAdapter):
    """ESPN power index feed (BPI/FPI).

    The payload lists each team's stat categories as bare value arrays and
    describes the stat names once, at the top level, per category:

        {"categories": [{"name": "bpi", "names": ["bpi", "bpirank", ...]}],
         "teams": [{"team": {...}, "categories": [{"name": "bpi", "values": [4.1, 3, ...]}]}]}

    Values are zipped against the names by position into
    metrics.power_indexes.<category>.<stat>.
    """

    def parse(self, payload: Any) -> List[ParsedRecord]:
        raw_teams = require_list(payload, "teams", self.name)
        category_names: Dict[str, List[str]] = {
            category["name"]: category.get("names", [])
            for category in require_list(payload, "categories", self.name)
            if isinstance(category, dict) and "name" in category
        }
        if not raw_teams:
            raise ParseError(f"{self.name}: power index payload lists no teams")

        records: List[ParsedRecord] = []
        for entry in raw_teams:
            try:
                records.append(self._parse_team(entry, category_names))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping power index entry ({e}): {entry!r:.200}")

        logger.debug(f"Parsed power indexes for {len(records)} teams")
        return records

    def _parse_team(
        self, entry: Dict[str, Any], category_names: Dict[str, List[str]]
    ) -> ParsedRecord:
        team = entry["team"]
        data: Dict[str, Any] = team_info(team)

        group = team.get("group") or {}
        if group.get("shortName"):
            data["division_name"] = group["shortName"]
        parent = group.get("parent") or {}
        if parent.get("shortName"):
            data["conference_name"] = parent["shortName"]

        power_indexes: Dict[str, Any] = {}
        for stat_category in entry.get("categories", []):
            name = stat_category["name"]
            if name not in category_names:
                logger.debug(f"No stat names for category '{name}', skipping it")
                continue
            power_indexes[name] = mappify(category_names[name], stat_category["values"])

        data["metrics"] = {POWER_INDEXES: power_indexes}
        return ParsedRecord(key=data["id"], data=data)
