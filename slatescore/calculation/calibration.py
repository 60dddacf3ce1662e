from slatescore.config.sports import CalibrationBands
from slatescore.models.enums import SeasonPhase


def phase_bands(bands: CalibrationBands, phase: SeasonPhase) -> CalibrationBands:
    """Shifts a sport's bands for the season phase.

    Pre-season compresses scores into [0, baseline], centered on baseline/2;
    post-season lifts them into [baseline, 1], centered on (baseline+1)/2.
    """
    baseline = bands.baseline
    if phase == SeasonPhase.PRE_SEASON:
        return CalibrationBands(low=0.0, baseline=baseline / 2, high=baseline)
    if phase == SeasonPhase.POST_SEASON:
        return CalibrationBands(low=baseline, baseline=(baseline + 1) / 2, high=1.0)
    return bands


def baseline_slate_score(score: float, low: float, baseline: float, high: float) -> float:
    """Piecewise-linear remap fixing `baseline`.

    [0, baseline] maps onto [low, baseline] and [baseline, 1] onto
    [baseline, high]; scores outside [0, 1] are clamped first.
    """
    score = min(max(score, 0.0), 1.0)
    if score < baseline:
        return low + (score / baseline) * (baseline - low)
    if baseline >= 1:
        return baseline
    return baseline + ((score - baseline) / (1 - baseline)) * (high - baseline)


def calibrate(score: float, bands: CalibrationBands) -> float:
    return baseline_slate_score(score, bands.low, bands.baseline, bands.high)
