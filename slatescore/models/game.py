from datetime import datetime
from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, computed_field
from pydantic.alias_generators import to_camel

from .enums import SeasonPhase, Sport
from .score import GameScore
from .team import Team

# Marker used by providers when a game's start time is not yet set
UNDETERMINED = "TBD"


class Broadcast(BaseModel):
    market: Optional[str] = None
    type: Optional[str] = None


class Note(BaseModel):
    type: Optional[str] = None
    headline: Optional[str] = None


class Game(BaseModel):
    """Represents a single scheduled game and, once scored, its slate score."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    id: str
    sport: Sport
    date: Union[datetime, Literal["TBD"]] = UNDETERMINED
    season_phase: SeasonPhase = SeasonPhase.REGULAR_SEASON
    home: Team
    away: Team
    link: Optional[str] = None
    broadcasts: Dict[str, Broadcast] = {}
    notes: List[Note] = []
    score: Optional[GameScore] = None

    @computed_field  # type: ignore[misc]
    @property
    def description(self) -> str:
        """A human-readable description of the game."""
        home = self.home.short_name or self.home.abbreviation or self.home.id
        away = self.away.short_name or self.away.abbreviation or self.away.id
        when = (
            self.date.strftime("%Y-%m-%d %H:%M")
            if isinstance(self.date, datetime)
            else UNDETERMINED
        )
        return f"{self.sport.value}: {away} @ {home} ({when})"

    @property
    def slate_score(self) -> Optional[float]:
        return self.score.slate_score if self.score else None
