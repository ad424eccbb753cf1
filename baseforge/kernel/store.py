"""
BaseForge Kernel: Table Store

Owns the ordered table collection and the active-table pointer. Every
mutation validates first, then swaps in a rebuilt Table (or a rebuilt
collection) in a single assignment, so a failed call leaves nothing half
applied. Listeners are notified after each successful mutation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, replace
from datetime import date
from typing import Any

from baseforge.kernel.errors import ResolutionError, ValidationError
from baseforge.kernel.fields import coerce_cell, coerce_untyped, default_value
from baseforge.kernel.types import (
    DEFAULT_STATUS_OPTIONS,
    PLACEHOLDER_STATUS_OPTIONS,
    Field,
    FieldType,
    Row,
    Table,
    is_valid_field_type,
    new_id,
)

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class TableStore:
    """The single owner of every Table, Field and Row in a session."""

    def __init__(self, tables: Iterable[Table] = (), active_table_id: str | None = None) -> None:
        self._tables: tuple[Table, ...] = tuple(tables)
        self._active_table_id: str = active_table_id or ""
        self._listeners: list[Listener] = []

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def tables(self) -> tuple[Table, ...]:
        return self._tables

    @property
    def active_table_id(self) -> str:
        """The active pointer, resolved. Falls back to the first table; '' when empty."""
        table = self.active_table
        return table.id if table else ""

    @property
    def active_table(self) -> Table | None:
        if not self._tables:
            return None
        for t in self._tables:
            if t.id == self._active_table_id:
                return t
        return self._tables[0]

    def get_table(self, table_id: str) -> Table:
        for t in self._tables:
            if t.id == table_id:
                return t
        raise ResolutionError(f"Table not found: {table_id}")

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener. Returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def create_table(self, name: str, fields: Sequence[Mapping[str, Any]] | None = None) -> Table:
        """
        Append a new empty table and make it active.

        `fields` is a list of {name, type, options?} specs. Omitted means the
        default Name/Status template.
        """
        name = _require_name(name, "Table name")
        if fields is None:
            schema = (
                Field(id=new_id("fld"), name="Name", type=FieldType.TEXT),
                Field(
                    id=new_id("fld"),
                    name="Status",
                    type=FieldType.STATUS,
                    options=DEFAULT_STATUS_OPTIONS,
                ),
            )
        else:
            schema = tuple(
                _build_field(spec.get("name", ""), spec.get("type", FieldType.TEXT), spec.get("options"))
                for spec in fields
            )

        table = Table(id=new_id("tbl"), name=name, fields=schema)
        self._tables = self._tables + (table,)
        self._active_table_id = table.id
        logger.debug("store: created table %s (%d fields)", table.id, len(schema))
        self._notify()
        return table

    def insert_table(self, table: Table) -> Table:
        """Add an externally built table (e.g. an import) and make it active."""
        if any(t.id == table.id for t in self._tables):
            table = replace(table, id=new_id("tbl"))
        self._tables = self._tables + (table,)
        self._active_table_id = table.id
        self._notify()
        return table

    def rename_table(self, table_id: str, name: str) -> Table:
        name = _require_name(name, "Table name")
        table = replace(self.get_table(table_id), name=name)
        self._put(table)
        return table

    def set_active_table(self, table_id: str) -> None:
        """Point at `table_id`, or at the first table if it does not resolve."""
        if any(t.id == table_id for t in self._tables):
            self._active_table_id = table_id
        else:
            logger.debug("store: table %s not found, falling back to first table", table_id)
            self._active_table_id = self._tables[0].id if self._tables else ""
        self._notify()

    # ------------------------------------------------------------------
    # Fields
    # ------------------------------------------------------------------

    def add_field(
        self,
        table_id: str,
        name: str,
        type: FieldType | str,
        options: Sequence[str] | None = None,
    ) -> Field:
        """Append a column. Existing rows are left without a value for it."""
        table = self.get_table(table_id)
        new_field = _build_field(name, type, options)
        self._put(replace(table, fields=table.fields + (new_field,)))
        return new_field

    def rename_field(self, table_id: str, field_id: str, name: str) -> Field:
        name = _require_name(name, "Field name")
        table = self.get_table(table_id)
        target = table.field(field_id)
        if target is None:
            raise ResolutionError(f"Field not found: {field_id}")
        renamed = replace(target, name=name)
        self._put(replace(table, fields=tuple(renamed if f.id == field_id else f for f in table.fields)))
        return renamed

    def delete_field(self, table_id: str, field_id: str) -> None:
        """
        Drop a column from the schema only. Row values stored under
        `field_id` stay in place as orphans and are never rendered.
        """
        table = self.get_table(table_id)
        remaining = tuple(f for f in table.fields if f.id != field_id)
        if len(remaining) == len(table.fields):
            return
        self._put(replace(table, fields=remaining))

    # ------------------------------------------------------------------
    # Rows
    # ------------------------------------------------------------------

    def add_row(self, table_id: str, today: date | None = None) -> Row:
        """Append a row holding the type default for every current field."""
        table = self.get_table(table_id)
        row = Row(id=new_id("rec"), cells={f.id: default_value(f, today) for f in table.fields})
        self._put(replace(table, rows=table.rows + (row,)))
        return row

    def delete_row(self, table_id: str, row_id: str) -> None:
        table = self.get_table(table_id)
        remaining = tuple(r for r in table.rows if r.id != row_id)
        if len(remaining) == len(table.rows):
            return
        self._put(replace(table, rows=remaining))

    def update_cell(self, table_id: str, row_id: str, field_id: str, value: Any) -> Row | None:
        """
        Write one cell. Values for known fields are coerced to the field's
        type first; ids with no field keep JSON scalars and stringify the
        rest. Unknown rows are a no-op and return None.
        """
        table = self.get_table(table_id)
        row = table.row(row_id)
        if row is None:
            return None
        target = table.field(field_id)
        stored = coerce_cell(target, value) if target is not None else coerce_untyped(value)
        updated = replace(row, cells={**row.cells, field_id: stored})
        self._put(replace(table, rows=tuple(updated if r.id == row_id else r for r in table.rows)))
        return updated

    def move_card(self, table_id: str, row_id: str, status: str) -> Row | None:
        """Kanban drop: write `status` into the table's first STATUS field."""
        status_field = self.get_table(table_id).first_field_of(FieldType.STATUS)
        if status_field is None:
            return None
        return self.update_cell(table_id, row_id, status_field.id, status)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _put(self, table: Table) -> None:
        self._tables = tuple(table if t.id == table.id else t for t in self._tables)
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()


def _require_name(name: Any, label: str) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError(f"{label} is required")
    return name.strip()


def _build_field(name: Any, type: Any, options: Sequence[str] | None) -> Field:
    name = _require_name(name, "Field name")
    if not is_valid_field_type(type):
        raise ValidationError(f"Unknown field type: {type!r}")
    field_type = FieldType(type)
    opts: tuple[str, ...] | None = None
    if field_type == FieldType.STATUS:
        opts = tuple(str(o) for o in options) if options else PLACEHOLDER_STATUS_OPTIONS
    return Field(id=new_id("fld"), name=name, type=field_type, options=opts)


# ---------------------------------------------------------------------------
# In-progress cell edits
# ---------------------------------------------------------------------------


@dataclass
class CellEdit:
    """
    A cell being edited. Holds copies of the ids and a string draft; nothing
    reaches the store until commit().
    """

    table_id: str
    row_id: str
    field_id: str
    draft: str = ""

    @classmethod
    def begin(cls, table: Table, row_id: str, field_id: str) -> CellEdit:
        row = table.row(row_id)
        current = row.get(field_id) if row is not None else None
        return cls(
            table_id=table.id,
            row_id=row_id,
            field_id=field_id,
            draft="" if current is None else str(current),
        )

    def commit(self, store: TableStore) -> Row | None:
        return store.update_cell(self.table_id, self.row_id, self.field_id, self.draft)
