from typing import Any, Dict, Iterable, Mapping, Optional

from loguru import logger

from slatescore.adapters.base import MetricMap, ParsedRecord


def deep_merge(target: Mapping[str, Any], source: Mapping[str, Any]) -> Dict[str, Any]:
    """Merges `source` into a copy of `target`.

    Where both sides hold a map under the same key the maps are merged
    recursively; any other source value overwrites the target's. Keys only
    present in `target` are always kept. Neither input is modified.
    """
    merged: Dict[str, Any] = dict(target)
    for key, source_value in source.items():
        target_value = merged.get(key)
        if isinstance(source_value, Mapping) and isinstance(target_value, Mapping):
            merged[key] = deep_merge(target_value, source_value)
        elif isinstance(source_value, Mapping):
            # Copy so later merges into the result never reach back into `source`
            merged[key] = deep_merge({}, source_value)
        else:
            merged[key] = source_value
    return merged


def merge_records(
    records: Iterable[ParsedRecord],
    into: Optional[Mapping[str, MetricMap]] = None,
) -> Dict[str, MetricMap]:
    """Folds parsed fragments into an id -> merged map dictionary."""
    merged: Dict[str, MetricMap] = dict(into or {})
    count = 0
    for record in records:
        merged[record.key] = deep_merge(merged.get(record.key, {}), record.data)
        count += 1
    logger.debug(f"Merged {count} fragments into {len(merged)} records")
    return merged
