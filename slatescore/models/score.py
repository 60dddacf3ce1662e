from typing import Dict

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Slate score reported when no component could be computed
NO_SCORE: float = -1.0


class ScoreComponent(BaseModel):
    """One contributing term of a game's raw score."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: float  # centered on [-1, 1]
    weight: float  # configured weight after season-phase dampening

    @property
    def contribution(self) -> float:
        return self.value * self.weight


class GameScore(BaseModel):
    """Calibrated interest score attached to a game after scoring."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    slate_score: float = Field(..., description="Final score in [0, 1], or -1.")
    components: Dict[str, ScoreComponent] = {}
    unbaselined_slate_score: float = Field(
        ..., description="sigmoid(raw score) before baseline calibration."
    )

    @property
    def has_score(self) -> bool:
        return self.slate_score != NO_SCORE

    @classmethod
    def unavailable(cls) -> "GameScore":
        return cls(slate_score=NO_SCORE, components={}, unbaselined_slate_score=NO_SCORE)
