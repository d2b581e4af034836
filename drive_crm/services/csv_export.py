"""
CSV export for ledger and client listings.

Rows are joined with CRLF and the document has no trailing line
break. A cell is quoted only when it contains a comma, a double
quote, CR or LF; embedded quotes are doubled. An empty cell is
written as nothing at all, never as "".
"""

import enum
import re
from typing import Any, Iterable, Mapping, Sequence

from fastapi.responses import Response

CSV_MEDIA_TYPE = "text/csv; charset=utf-8"
LINE_TERMINATOR = "\r\n"
DELIMITER = ","

_NEEDS_QUOTING = re.compile(r'[",\r\n]')


def to_csv_rows(
    rows: Sequence[Mapping[str, Any]],
    columns: Iterable[str] | None = None,
) -> str:
    """
    Serialize uniform records to CSV.

    The header is ``columns`` when given, otherwise the keys of the
    first row. Zero rows yield an empty string. None becomes an
    empty cell.
    """
    if not rows:
        return ""

    keys = list(columns) if columns is not None else list(rows[0].keys())

    lines = [_line(keys)]
    lines.extend(_line(row.get(key) for key in keys) for row in rows)
    return LINE_TERMINATOR.join(lines)


def _line(values: Iterable[Any]) -> str:
    return DELIMITER.join(escape_cell(value) for value in values)


def escape_cell(value: Any) -> str:
    text = _cell(value)
    if _NEEDS_QUOTING.search(text):
        return '"' + text.replace('"', '""') + '"'
    return text


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, enum.Enum):
        return str(value.value)
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def csv_download(content: str, filename: str) -> Response:
    """Offer a CSV document as a file download."""
    return Response(
        content=content,
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
