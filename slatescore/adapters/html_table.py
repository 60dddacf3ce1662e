# slatescore/adapters/html_table.py
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup
from loguru import logger

from slatescore.models.enums import KeyType, PayloadFormat
from slatescore.utils.calcs import to_float
from slatescore.utils.misc_utils import path_segment_after
from .base import ParsedRecord, ParseError, SourceAdapter


class HtmlTableAdapter(SourceAdapter):
    """Reads team rows out of one identifiable HTML table.

    The table is located by its attributes. Its first `skip_rows` rows are
    title rows; the header texts come from row `header_row` (an index
    counted after skipping); every later row is zipped against those
    headers. The team is identified by the path segment that follows
    `link_marker` in the row's first anchor, e.g. "nyy" in
    "/mlb/team/_/name/nyy/new-york-yankees", not by the visible cell text.

    Numeric-looking cells are stored as floats under
    metrics.<metric_name>.<header>.
    """

    payload_format = PayloadFormat.TEXT

    def __init__(
        self,
        metric_name: str,
        table_attrs: Dict[str, str],
        skip_rows: int = 0,
        header_row: int = 0,
        link_marker: str = "name",
    ):
        self.metric_name = metric_name
        self.table_attrs = table_attrs
        self.skip_rows = skip_rows
        self.header_row = header_row
        self.link_marker = link_marker

    def parse(self, payload: Any) -> List[ParsedRecord]:
        if not isinstance(payload, str) or not payload.strip():
            raise ParseError(f"{self.name}: empty HTML payload")

        soup = BeautifulSoup(payload, "lxml")
        table = soup.find("table", attrs=self.table_attrs)
        if table is None:
            raise ParseError(f"{self.name}: no table matching {self.table_attrs}")

        rows = table.find_all("tr")[self.skip_rows:]
        if len(rows) <= self.header_row:
            raise ParseError(f"{self.name}: table has no header row")

        headers = [cell.get_text(strip=True) for cell in rows[self.header_row].find_all(["th", "td"])]
        if not any(headers):
            raise ParseError(f"{self.name}: header row is empty")

        records: List[ParsedRecord] = []
        for row in rows[self.header_row + 1:]:
            cells = row.find_all(["td", "th"])
            texts = [cell.get_text(strip=True) for cell in cells]
            # Long tables repeat the header row every few rows
            if texts == headers:
                continue
            record = self._parse_row(row, headers, texts)
            if record is not None:
                records.append(record)

        logger.debug(f"Parsed {len(records)} team rows from HTML table")
        return records

    def _parse_row(
        self, row: Any, headers: List[str], texts: List[str]
    ) -> Optional[ParsedRecord]:
        if len(texts) != len(headers):
            logger.warning(
                f"Skipping table row with {len(texts)} cells (expected {len(headers)}): {texts}"
            )
            return None

        anchor = row.find("a", href=True)
        abbreviation = path_segment_after(anchor["href"] if anchor else None, self.link_marker)
        if not abbreviation:
            logger.warning(f"Skipping table row without a team link: {texts}")
            return None

        values: Dict[str, Any] = {}
        for header, text in zip(headers, texts):
            if not header:
                continue
            number = to_float(text)
            values[header] = number if number is not None else text

        return ParsedRecord(
            key=abbreviation.upper(),
            data={"metrics": {self.metric_name: values}},
            key_type=KeyType.ABBREVIATION,
        )
