# slatescore/adapters/delimited_text.py
import csv
from typing import Any, Dict, List

from loguru import logger

from slatescore.models.enums import KeyType, PayloadFormat
from slatescore.utils.calcs import to_float
from .base import ParsedRecord, ParseError, SourceAdapter


class DelimitedTextAdapter(SourceAdapter):
    """Header line followed by one delimited row per team.

    The first field of every row is the provider's team abbreviation; the
    remaining fields are zipped against the remaining headers and stored
    under metrics.<metric_name>.
    """

    payload_format = PayloadFormat.TEXT

    def __init__(self, metric_name: str, delimiter: str = ","):
        self.metric_name = metric_name
        self.delimiter = delimiter

    def parse(self, payload: Any) -> List[ParsedRecord]:
        if not isinstance(payload, str):
            raise ParseError(f"{self.name}: expected text payload, got {type(payload).__name__}")

        lines = [line for line in payload.splitlines() if line.strip()]
        if not lines:
            raise ParseError(f"{self.name}: empty payload")

        reader = csv.reader(lines, delimiter=self.delimiter)
        headers = [h.strip() for h in next(reader)]
        if len(headers) < 2:
            raise ParseError(f"{self.name}: header row has no metric columns: {headers}")

        records: List[ParsedRecord] = []
        for line_number, fields in enumerate(reader, start=2):
            if len(fields) != len(headers):
                logger.warning(
                    f"Skipping line {line_number}: {len(fields)} fields, expected {len(headers)}"
                )
                continue
            abbreviation = fields[0].strip()
            if not abbreviation:
                logger.warning(f"Skipping line {line_number}: no team abbreviation")
                continue

            values: Dict[str, Any] = {}
            for header, raw in zip(headers[1:], fields[1:]):
                number = to_float(raw)
                values[header] = number if number is not None else raw.strip()

            records.append(
                ParsedRecord(
                    key=abbreviation.upper(),
                    data={"metrics": {self.metric_name: values}},
                    key_type=KeyType.ABBREVIATION,
                )
            )

        logger.debug(f"Parsed {len(records)} rows from delimited text")
        return records
