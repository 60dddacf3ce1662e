# slatescore/models/team.py
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Team(BaseModel):
    """A team, either as the sport-wide record or as a per-game snapshot.

    The sport-wide record carries season-long metrics (power indexes,
    roster info). A game snapshot carries the fields specific to that
    matchup: the record and rank at game time and the matchup qualities.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    id: str
    name: Optional[str] = None
    short_name: Optional[str] = None
    abbreviation: Optional[str] = None
    logo: Optional[str] = None
    record: Optional[str] = None  # "W-L" summary
    rank: Optional[int] = None
    division_name: Optional[str] = None
    conference_name: Optional[str] = None
    # metric name -> nested metric map; unknown keys are carried untouched
    metrics: Dict[str, Any] = {}
