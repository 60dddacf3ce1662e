from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Union

from slatescore.models.enums import KeyType, PayloadFormat

# Recursive metric value: a scalar leaf or a nested map of metric values
MetricValue = Union[str, int, float, bool, None, Mapping[str, "MetricValue"]]
MetricMap = Dict[str, MetricValue]


class ParseError(Exception):
    """Raised when a payload lacks the top-level structure an adapter needs."""

    pass


@dataclass
class ParsedRecord:
    """One entity's metric fragment as reported by a single provider.

    `key` is a canonical id when `key_type` is ID, otherwise the provider's
    own abbreviation, which the identity resolver maps to an id.
    """

    key: str
    data: MetricMap = field(default_factory=dict)
    key_type: KeyType = KeyType.ID


class SourceAdapter(ABC):
    """Parses one provider's raw payload into canonical metric fragments."""

    payload_format: PayloadFormat = PayloadFormat.JSON

    @abstractmethod
    def parse(self, payload: Any) -> List[ParsedRecord]:
        """Parse a raw payload.

        Args:
            payload: Decoded JSON document or raw text, per `payload_format`.

        Returns:
            One ParsedRecord per entity that parsed cleanly. Malformed rows are
            logged and skipped.

        Raises:
            ParseError: If the payload is unusable as a whole.
        """
        pass

    @property
    def name(self) -> str:
        return type(self).__name__


def require_list(payload: Any, key: str, source: str) -> List[Any]:
    """Fetches a top-level list from a JSON payload or raises ParseError."""
    if not isinstance(payload, dict):
        raise ParseError(f"{source}: expected a JSON object, got {type(payload).__name__}")
    value = payload.get(key)
    if not isinstance(value, list):
        raise ParseError(f"{source}: missing '{key}' list in payload")
    return value
