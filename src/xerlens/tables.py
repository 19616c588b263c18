"""Generic table parser for tab-delimited schedule exports.

An export is a sequence of lines whose first tab-separated field is a
record marker:

- ``%T`` starts a table (field 1 is its name)
- ``%F`` declares the current table's columns
- ``%R`` is a data row, zipped positionally with the columns

Every other line (``ERMHDR``, ``%E``, blank lines, ...) is ignored.  The
parser never raises: lines it cannot place are dropped and counted.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from xerlens.logging.events import EventType, emit_warning
from xerlens.models import ExportHeader

TABLE_MARKER = "%T"
FIELDS_MARKER = "%F"
ROW_MARKER = "%R"
HEADER_MARKER = "ERMHDR"

_HEADER_FIELDS = (
    "version",
    "export_date",
    "user_type",
    "user_name",
    "user_full_name",
    "database",
    "module",
    "currency",
)


class XerTable(BaseModel):
    """One named table of an export.

    Every row maps exactly the names in ``columns`` to string values.
    """

    name: str
    columns: list[str] = Field(default_factory=list)
    rows: list[dict[str, str]] = Field(default_factory=list)


def _split_lines(text: str) -> list[str]:
    """Split on ``\\n``, removing one trailing ``\\r`` per line.

    A leading byte-order mark is dropped so the first marker still matches.
    """
    lines = text.removeprefix("\ufeff").split("\n")
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _rekey(row: dict[str, str], columns: list[str]) -> dict[str, str]:
    values = list(row.values())
    n = len(values)
    return {col: values[i] if i < n else "" for i, col in enumerate(columns)}


def parse_tables(text: str) -> list[XerTable]:
    """Parse raw export text into tables, in the order they appear.

    Args:
        text: Already-decoded export contents.

    Returns:
        List of tables; empty when the text contains no ``%T`` marker.
    """
    tables: list[XerTable] = []
    current: XerTable | None = None
    dropped = 0

    for line in _split_lines(text):
        parts = line.split("\t")
        marker = parts[0]

        if marker == TABLE_MARKER:
            current = XerTable(name=parts[1] if len(parts) > 1 else "")
            tables.append(current)
        elif marker == FIELDS_MARKER:
            if current is None:
                dropped += 1
                continue
            current.columns = parts[1:]
            # Rows read so far are re-keyed positionally to the new columns.
            current.rows = [_rekey(row, current.columns) for row in current.rows]
        elif marker == ROW_MARKER:
            if current is None:
                dropped += 1
                continue
            values = parts[1:]
            n = len(values)
            current.rows.append(
                {col: values[i] if i < n else "" for i, col in enumerate(current.columns)}
            )

    if dropped:
        emit_warning(
            EventType.lines_dropped,
            f"Dropped {dropped} %F/%R line(s) appearing before any %T marker",
            {"dropped_lines": dropped},
        )
    return tables


def read_export_header(text: str) -> ExportHeader | None:
    """Read the ``ERMHDR`` line, if the export starts with one.

    Only the first non-blank line is inspected.

    Returns:
        The header, or ``None`` when the first line is not an ``ERMHDR``.
    """
    for line in _split_lines(text):
        if not line.strip():
            continue
        parts = line.split("\t")
        if parts[0] != HEADER_MARKER:
            return None
        values = parts[1:]
        return ExportHeader(**{
            field: values[i] if i < len(values) else ""
            for i, field in enumerate(_HEADER_FIELDS)
        })
    return None


def find_table(tables: list[XerTable], name: str) -> XerTable | None:
    """Return the first table named exactly *name*, or ``None``."""
    for table in tables:
        if table.name == name:
            return table
    return None
