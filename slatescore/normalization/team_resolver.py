from typing import Dict, Iterable, List, Mapping, Optional

from loguru import logger

from slatescore.adapters.base import ParsedRecord
from slatescore.models.enums import KeyType, Sport

# Provider abbreviation -> canonical roster abbreviation, for providers whose
# codes differ from the roster's for the same franchise.
ABBREVIATION_OVERRIDES: Dict[Sport, Dict[str, str]] = {
    Sport.MLB: {
        "AZ": "ARI",
        "CWS": "CHW",
        "KCR": "KC",
        "OAK": "ATH",
        "SDP": "SD",
        "SFG": "SF",
        "TBR": "TB",
        "WAS": "WSH",
        "WSN": "WSH",
    },
    Sport.NHL: {
        "L.A": "LA",
        "LAK": "LA",
        "N.J": "NJ",
        "NJD": "NJ",
        "S.J": "SJ",
        "SJS": "SJ",
        "T.B": "TB",
        "TBL": "TB",
        "UTA": "UTAH",
        "WAS": "WSH",
    },
    Sport.NBA: {
        "GSW": "GS",
        "NOP": "NO",
        "NYK": "NY",
        "PHO": "PHX",
        "SAS": "SA",
        "UTA": "UTAH",
        "WAS": "WSH",
    },
}


class UnresolvedTeamError(Exception):
    """Raised when a provider abbreviation matches no roster team."""

    pass


class TeamIdentityResolver:
    """Maps provider team abbreviations to canonical team ids for one sport."""

    def __init__(
        self,
        sport: Sport,
        roster: Mapping[str, str],
        overrides: Optional[Mapping[str, str]] = None,
    ):
        """
        Args:
            sport: Sport the roster belongs to.
            roster: Canonical team id -> roster abbreviation.
            overrides: Provider abbreviation -> roster abbreviation. Defaults
                to the sport's entry in ABBREVIATION_OVERRIDES.
        """
        self.sport = sport
        self.ids_by_abbreviation: Dict[str, str] = {
            abbreviation.upper(): team_id
            for team_id, abbreviation in roster.items()
            if abbreviation
        }
        source = ABBREVIATION_OVERRIDES.get(sport, {}) if overrides is None else overrides
        self.overrides: Dict[str, str] = {k.upper(): v.upper() for k, v in source.items()}
        logger.debug(
            f"Resolver for {sport.value} initialized with {len(self.ids_by_abbreviation)} "
            f"teams and {len(self.overrides)} overrides."
        )

    def resolve(self, abbreviation: str) -> str:
        key = abbreviation.strip().upper()
        team_id = self.ids_by_abbreviation.get(key)
        if team_id:
            return team_id

        override = self.overrides.get(key)
        if override and override in self.ids_by_abbreviation:
            return self.ids_by_abbreviation[override]

        raise UnresolvedTeamError(
            f"Unknown {self.sport.value} team abbreviation '{abbreviation}'"
        )

    def resolve_records(self, records: Iterable[ParsedRecord]) -> List[ParsedRecord]:
        """Re-keys abbreviation records by team id, dropping unresolvable rows."""
        resolved: List[ParsedRecord] = []
        for record in records:
            if record.key_type == KeyType.ID:
                resolved.append(record)
                continue
            try:
                team_id = self.resolve(record.key)
            except UnresolvedTeamError as e:
                logger.error(f"{e}; dropping row")
                continue
            resolved.append(ParsedRecord(key=team_id, data=record.data, key_type=KeyType.ID))
        return resolved
