# slatescore/config/sports.py
from typing import Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from slatescore.models.enums import Sport

# Accessor names tried in order to find a team's power index; see
# slatescore.calculation.slate_scores.POWER_INDEX_ACCESSORS.
DEFAULT_POWER_INDEX_FIELDS: Tuple[str, ...] = ("bpi", "fpi", "RPI", "avg_overall_prediction")


class ScalePair(BaseModel):
    """(scale, center) for a sigmoid; scale must be non-zero."""

    model_config = ConfigDict(frozen=True)

    scale: float
    center: float = 0.0

    @field_validator("scale")
    @classmethod
    def _non_zero_scale(cls, value: float) -> float:
        if value == 0:
            raise ValueError("sigmoid scale must be non-zero")
        return value


class ComponentWeights(BaseModel):
    model_config = ConfigDict(frozen=True)

    matchup_quality: float = 2
    win_probability: float = 1
    record: float = 3
    power_index: float = 3
    spread: float = 1
    popularity: float = 1
    conference: float = 1
    rank: float = 1


class CalibrationBands(BaseModel):
    """[low, baseline, high] over [0, 1] with low <= baseline <= high."""

    model_config = ConfigDict(frozen=True)

    low: float = Field(0.0, ge=0, le=1)
    baseline: float = Field(..., gt=0, lt=1)
    high: float = Field(1.0, ge=0, le=1)

    @model_validator(mode="after")
    def _ordered(self) -> "CalibrationBands":
        if not (self.low <= self.baseline <= self.high):
            raise ValueError(
                f"calibration bands must satisfy low <= baseline <= high, got "
                f"[{self.low}, {self.baseline}, {self.high}]"
            )
        return self


class SportScoringConfig(BaseModel):
    """Everything the scorer and calibrator need to know about one sport."""

    model_config = ConfigDict(frozen=True)

    sport: Sport
    weights: ComponentWeights = ComponentWeights()
    power_index: ScalePair
    power_index_fields: Tuple[str, ...] = DEFAULT_POWER_INDEX_FIELDS
    spread_scale: float = 50
    calibration: CalibrationBands
    record_pseudo_count: float = 2
    preseason_dampening: float = Field(0.2, ge=0, le=1)
    ncaa: bool = False

    @field_validator("spread_scale")
    @classmethod
    def _non_zero_spread_scale(cls, value: float) -> float:
        if value == 0:
            raise ValueError("spread scale must be non-zero")
        return value


def default_sport_configs() -> Dict[Sport, SportScoringConfig]:
    """Builds the shipped per-sport configuration."""
    return {
        Sport.NBA: SportScoringConfig(
            sport=Sport.NBA,
            power_index=ScalePair(scale=2, center=0),
            calibration=CalibrationBands(baseline=0.75),
        ),
        Sport.NCAAMBB: SportScoringConfig(
            sport=Sport.NCAAMBB,
            power_index=ScalePair(scale=8, center=0),
            calibration=CalibrationBands(baseline=0.60),
            ncaa=True,
        ),
        Sport.MLB: SportScoringConfig(
            sport=Sport.MLB,
            power_index=ScalePair(scale=0.15, center=0.5),
            calibration=CalibrationBands(baseline=0.50),
        ),
        Sport.NHL: SportScoringConfig(
            sport=Sport.NHL,
            power_index=ScalePair(scale=0.05, center=0.5),
            calibration=CalibrationBands(baseline=0.50),
        ),
        Sport.NFL: SportScoringConfig(
            sport=Sport.NFL,
            power_index=ScalePair(scale=5, center=0),
            calibration=CalibrationBands(baseline=0.70),
        ),
        Sport.NCAAF: SportScoringConfig(
            sport=Sport.NCAAF,
            power_index=ScalePair(scale=10, center=0),
            calibration=CalibrationBands(baseline=0.55),
            ncaa=True,
        ),
    }
