from __future__ import annotations

import csv
import io
from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping, Sequence

from ..core.constants import CSV_BOM

ATTENDANCE_HEADERS = (
    "date",
    "cohortNumber",
    "learnerDocId",
    "learnerName",
    "present",
    "excused",
    "reason",
)

ALERT_HEADERS = (
    "learnerDocId",
    "learnerName",
    "consecutiveUnexcused",
    "monthlyUnexcused",
    "criterion",
)


def format_value(value: Any) -> str:
    """Render one cell: booleans lower-case, dates ISO, enums by value."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return format_value(value.value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def to_csv(rows: Sequence[Mapping[str, Any]], headers: Sequence[str]) -> str:
    """Serialize flat records into a spreadsheet-friendly CSV string.

    The output starts with a UTF-8 BOM so Excel detects the encoding, has one
    header line, joins lines with ``\\n`` and has no trailing newline.
    Cells are quoted only when they hold a quote, a comma or a line break.
    Missing keys become empty cells.
    """
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=list(headers), lineterminator="\n", extrasaction="ignore")
    writer.writeheader()
    for row in rows:
        writer.writerow({h: format_value(row.get(h)) for h in headers})

    return CSV_BOM + out.getvalue().removesuffix("\n")
