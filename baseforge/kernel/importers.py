"""
BaseForge Kernel: Importers

Turn pasted or uploaded tabular text into a Table value ready for
TableStore.insert_table. Columns become NUMBER when every non-empty value
reads as a number, TEXT otherwise.
"""

from __future__ import annotations

import csv
import io
import re

from baseforge.kernel.errors import ValidationError
from baseforge.kernel.fields import NUMBER_RE, coerce_cell
from baseforge.kernel.types import Field, FieldType, Row, Table, new_id

_SEPARATOR_CELL_RE = re.compile(r"^:?-{3,}:?$")


def parse_markdown_table(text: str, name: str) -> Table:
    """Import the first pipe table found in `text`."""
    block: list[list[str]] = []
    for line in text.splitlines():
        stripped = line.strip()
        if stripped.startswith("|"):
            block.append(_split_pipe_row(stripped))
        elif block:
            break

    if len(block) >= 2 and all(_SEPARATOR_CELL_RE.match(c.replace(" ", "")) for c in block[1] if c):
        del block[1]
    if not block:
        raise ValidationError("No markdown table found")
    return build_table(name, block[0], block[1:])


def parse_csv(text: str, name: str) -> Table:
    records = [r for r in csv.reader(io.StringIO(text)) if any(c.strip() for c in r)]
    if not records:
        raise ValidationError("CSV is empty")
    return build_table(name, records[0], records[1:])


def build_table(name: str, header: list[str], records: list[list[str]]) -> Table:
    """Make a Table from a header row and string records."""
    if not name or not name.strip():
        raise ValidationError("Table name is required")
    headers = [h.strip() or f"Column {i}" for i, h in enumerate(header, start=1)]
    if not headers:
        raise ValidationError("Table has no columns")

    fields: list[Field] = []
    for i, title in enumerate(headers):
        column = [r[i].strip() for r in records if i < len(r) and r[i].strip()]
        numeric = bool(column) and all(NUMBER_RE.match(v) for v in column)
        fields.append(
            Field(id=new_id("fld"), name=title, type=FieldType.NUMBER if numeric else FieldType.TEXT)
        )

    rows = tuple(
        Row(
            id=new_id("rec"),
            cells={f.id: coerce_cell(f, r[i].strip() if i < len(r) else "") for i, f in enumerate(fields)},
        )
        for r in records
    )
    return Table(id=new_id("tbl"), name=name.strip(), fields=tuple(fields), rows=rows)


def _split_pipe_row(line: str) -> list[str]:
    inner = line.strip().strip("|")
    return [cell.strip() for cell in inner.split("|")]
