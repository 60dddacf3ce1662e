# slatescore/utils/calcs.py
import math
import re
from typing import Optional, Tuple

# W-L or W-L-T/OTL; only the first two fields count toward win percentage
_RECORD_RE = re.compile(r"^\s*(\d+)\s*-\s*(\d+)(?:\s*-\s*\d+)*\s*$")


def sigmoid(x: float, scale: float, center: float) -> float:
    """Logistic curve mapping x onto (0, 1), 0.5 at `center`."""
    return 1 / (1 + math.exp(-(x - center) / scale))


def inverse_sigmoid(p: float, scale: float, center: float) -> float:
    """Exact inverse of `sigmoid` for p in (0, 1)."""
    return center + scale * math.log(p / (1 - p))


def neg_exp(x: float, scale: float) -> float:
    """Bell curve on (0, 1], 1 at x == 0 and symmetric around it."""
    return math.exp(-(x**2) / scale)


def parse_record(record: str) -> Tuple[int, int]:
    """Splits a "W-L" record summary into (wins, losses)."""
    match = _RECORD_RE.match(record or "")
    if not match:
        raise ValueError(f"Invalid record format: {record!r}")
    return int(match.group(1)), int(match.group(2))


def calculate_win_percentage(record: str, pseudo: float = 2) -> float:
    """Win percentage regularized with `pseudo` wins and losses.

    Falls back to 0.5 when the regularized game count is not positive.
    """
    wins, losses = parse_record(record)
    games = wins + losses + 2 * pseudo
    if games <= 0:
        return 0.5
    return (wins + pseudo) / games


def to_float(value: object) -> Optional[float]:
    """Best-effort numeric conversion for provider cell text ("1,234", "52.1%")."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip().replace(",", "").rstrip("%")
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None
