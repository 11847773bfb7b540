"""Turn an uploaded CSV of holders into bulk issuance rows."""

import csv
import io
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from models.bulk import BulkTicketRow

HEADER_ALIASES: Dict[str, str] = {
    "name": "name",
    "first name": "name",
    "firstname": "name",
    "surname": "surname",
    "last name": "surname",
    "lastname": "surname",
    "email": "email",
}
REQUIRED_COLUMNS = ("name", "surname")


@dataclass
class CsvParseResult:
    """Rows in file order plus file-level problems."""

    rows: List[BulkTicketRow] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _column_map(header: List[str]) -> Dict[int, str]:
    columns = {}
    for position, title in enumerate(header):
        target = HEADER_ALIASES.get(title.strip().lower())
        if target and target not in columns.values():
            columns[position] = target
    return columns


def parse_ticket_csv(text: Optional[str]) -> CsvParseResult:
    """
    Parse a header-first CSV. Row-level validation is left to bulk issuance
    so error indexes match the file's data rows.
    """
    result = CsvParseResult()
    reader = csv.reader(io.StringIO((text or "").lstrip("\ufeff")))
    lines = [line for line in reader if any(cell.strip() for cell in line)]
    if len(lines) < 2:
        result.errors.append("CSV file is empty")
        return result

    columns = _column_map(lines[0])
    missing = [name for name in REQUIRED_COLUMNS if name not in columns.values()]
    if missing:
        result.errors.append(f"Missing required columns: {', '.join(missing)}")
        return result

    for line in lines[1:]:
        values = {
            target: line[position].strip()
            for position, target in columns.items()
            if position < len(line)
        }
        result.rows.append(BulkTicketRow(**values))
    return result
