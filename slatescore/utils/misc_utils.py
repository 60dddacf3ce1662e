# slatescore/utils/misc_utils.py
from typing import Any, Dict, Optional, Sequence
from urllib.parse import urlparse


def mappify(keys: Sequence[str], values: Sequence[Any]) -> Dict[str, Any]:
    """Zips parallel name/value arrays by position.

    Raises ValueError when the arrays disagree in length, since a shifted
    zip would silently attach values to the wrong stat names.
    """
    if len(keys) != len(values):
        raise ValueError(
            f"Mismatched name/value arrays ({len(keys)} names, {len(values)} values)"
        )
    return dict(zip(keys, values))


def url_path(url: Optional[str]) -> Optional[str]:
    """Strips scheme and host, keeping the path ("a.espncdn.com/i/x.png" -> "i/x.png")."""
    if not url:
        return None
    parsed = urlparse(url)
    if parsed.netloc:
        return parsed.path.lstrip("/") or None
    return url.split(".com/")[-1]


def path_segment_after(href: Optional[str], marker: str) -> Optional[str]:
    """Returns the path segment following `marker` ("/mlb/team/_/name/nyy/..", "name" -> "nyy")."""
    if not href:
        return None
    segments = [s for s in urlparse(href).path.split("/") if s]
    try:
        index = segments.index(marker)
    except ValueError:
        return None
    if index + 1 >= len(segments):
        return None
    return segments[index + 1]
