# slatescore/reference/tables.py
import json
from pathlib import Path
from typing import Dict, Mapping, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from slatescore.models.enums import Sport

DATA_DIR = Path(__file__).parent / "data"
POPULARITY_FILE = "popularity.json"
CONFERENCE_FILE = "conference_strength.json"


class PopularityTable(BaseModel):
    """Follower counts per team id plus the sport's median combined count."""

    model_config = ConfigDict(frozen=True)

    followers: Dict[str, float] = {}
    median_combined_followers: float = Field(..., gt=0)

    @property
    def center(self) -> float:
        return self.median_combined_followers / 2

    @property
    def scale(self) -> float:
        return self.median_combined_followers / 4


class ConferenceTable(BaseModel):
    """Conference strengths, min-max normalized to [0, 1] at load time."""

    model_config = ConfigDict(frozen=True)

    strengths: Dict[str, float] = {}
    # team id -> conference an independent effectively plays in
    independents: Dict[str, str] = {}

    def strength_for(self, team_id: str, conference: Optional[str]) -> Optional[float]:
        conference = self.independents.get(team_id, conference)
        if conference is None:
            return None
        return self.strengths.get(conference)


class ReferenceTables(BaseModel):
    """Precomputed popularity and conference-strength tables, per sport."""

    model_config = ConfigDict(frozen=True)

    popularity: Dict[Sport, PopularityTable] = {}
    conferences: Dict[Sport, ConferenceTable] = {}


def normalize_strengths(raw: Mapping[str, float]) -> Dict[str, float]:
    """Min-max scales raw conference strengths onto [0, 1]."""
    if not raw:
        return {}
    low, high = min(raw.values()), max(raw.values())
    if high == low:
        return {name: 0.5 for name in raw}
    return {name: (value - low) / (high - low) for name, value in raw.items()}


def _read_json(directory: Path, filename: str) -> dict:
    path = directory / filename
    if not path.exists():
        logger.warning(f"Reference table {path} not found; continuing without it")
        return {}
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def build_reference_tables(directory: Path = DATA_DIR) -> ReferenceTables:
    popularity_raw = _read_json(directory, POPULARITY_FILE)
    conference_raw = _read_json(directory, CONFERENCE_FILE)

    popularity = {
        Sport(sport): PopularityTable(**table) for sport, table in popularity_raw.items()
    }
    conferences = {
        Sport(sport): ConferenceTable(
            strengths=normalize_strengths(table.get("strengths", {})),
            independents=table.get("independents", {}),
        )
        for sport, table in conference_raw.items()
    }
    logger.info(
        f"Loaded reference tables from {directory}: popularity for "
        f"{[s.value for s in popularity]}, conferences for {[s.value for s in conferences]}"
    )
    return ReferenceTables(popularity=popularity, conferences=conferences)


# Loaded tables per directory, shared for the life of the process
_reference_tables: Dict[Path, ReferenceTables] = {}


def load_reference_tables(directory: Optional[Path] = None) -> ReferenceTables:
    """Returns the tables for `directory`, loading them on first use."""
    directory = directory or DATA_DIR
    if directory not in _reference_tables:
        _reference_tables[directory] = build_reference_tables(directory)
    return _reference_tables[directory]
