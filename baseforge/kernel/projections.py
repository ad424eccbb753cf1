"""
BaseForge Kernel: View Projections

Pure functions: Table → projection. No IO, no caching, no store access.
Callers re-derive on every read.

A projection that needs schema the table does not have returns
InsufficientSchema instead of raising, the same way the reducer returns a
rejected result rather than throwing.

Projections:
  grid:      fields + rows with a 1-based display index
  kanban:    rows grouped by the first STATUS field's options
  gantt:     bars from the first two DATE fields (single-month axis)
  dashboard: row count, completion rate, per-status distribution
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from baseforge.kernel.fields import parse_date
from baseforge.kernel.types import (
    DATA_VIEWS,
    DONE_STATUS,
    Field,
    FieldType,
    Row,
    Table,
)

# Horizontal size of one day on the timeline
DAY_WIDTH_PX = 32


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InsufficientSchema:
    """The table lacks the columns a projection needs. Render `message` instead."""

    view: str
    message: str


@dataclass(frozen=True)
class GridRow:
    index: int  # 1-based, display only
    row: Row


@dataclass(frozen=True)
class GridProjection:
    fields: tuple[Field, ...]
    rows: tuple[GridRow, ...]


@dataclass(frozen=True)
class KanbanColumn:
    status: str | None  # None for the implicit group of an option-less field
    rows: tuple[Row, ...]

    @property
    def count(self) -> int:
        return len(self.rows)


@dataclass(frozen=True)
class KanbanProjection:
    status_field: Field
    label_field: Field | None
    columns: tuple[KanbanColumn, ...]


@dataclass(frozen=True)
class GanttBar:
    row_id: str
    label: Any
    start_day: int  # day-of-month of the start date
    duration_days: int  # may be zero or negative for malformed ranges
    width_days: int  # never below 1

    @property
    def left_px(self) -> int:
        return (self.start_day - 1) * DAY_WIDTH_PX

    @property
    def width_px(self) -> int:
        return self.width_days * DAY_WIDTH_PX


@dataclass(frozen=True)
class GanttProjection:
    start_field: Field
    end_field: Field
    bars: tuple[GanttBar, ...]
    skipped_row_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class StatusShare:
    status: str
    count: int
    percentage: int


@dataclass(frozen=True)
class DashboardProjection:
    total_rows: int
    completed_rows: int
    completion_rate: int  # rounded percentage
    field_count: int
    distribution: tuple[StatusShare, ...] = ()


Projection = GridProjection | KanbanProjection | GanttProjection | DashboardProjection | InsufficientSchema


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def project(view_id: str, table: Table) -> Projection:
    """Dispatch to the projection for a data view id."""
    builder = _BUILDERS.get(view_id)
    if builder is None:
        raise ValueError(f"Not a data view: {view_id!r}. Data views: {list(DATA_VIEWS)}")
    return builder(table)


def grid_projection(table: Table) -> GridProjection:
    return GridProjection(
        fields=table.fields,
        rows=tuple(GridRow(index=i, row=r) for i, r in enumerate(table.rows, start=1)),
    )


def kanban_projection(table: Table) -> KanbanProjection | InsufficientSchema:
    """
    One column per option of the first STATUS field, in option order.
    Rows whose value matches no option are left out of every column.
    """
    status_field = table.first_field_of(FieldType.STATUS)
    if status_field is None:
        return InsufficientSchema(view="kanban", message="Add a STATUS field to use the kanban board.")

    if not status_field.options:
        columns = (KanbanColumn(status=None, rows=table.rows),)
    else:
        columns = tuple(
            KanbanColumn(
                status=option,
                rows=tuple(r for r in table.rows if r.get(status_field.id) == option),
            )
            for option in status_field.options
        )

    return KanbanProjection(status_field=status_field, label_field=table.primary_field, columns=columns)


def gantt_projection(table: Table) -> GanttProjection | InsufficientSchema:
    """
    Bars from the first two DATE fields. The axis is a single month: offsets
    come from the start date's day-of-month only.
    """
    date_fields = table.fields_of(FieldType.DATE)
    if len(date_fields) < 2:
        return InsufficientSchema(
            view="gantt", message="Add at least two DATE fields (start and end) to use the timeline."
        )

    start_field, end_field = date_fields[0], date_fields[1]
    label_field = table.primary_field
    bars: list[GanttBar] = []
    skipped: list[str] = []

    for row in table.rows:
        start = parse_date(row.get(start_field.id))
        end = parse_date(row.get(end_field.id))
        if start is None or end is None:
            skipped.append(row.id)
            continue
        duration = math.ceil((end - start).total_seconds() / 86400)
        bars.append(
            GanttBar(
                row_id=row.id,
                label=row.get(label_field.id) if label_field else None,
                start_day=start.day,
                duration_days=duration,
                width_days=max(duration, 1),
            )
        )

    return GanttProjection(
        start_field=start_field,
        end_field=end_field,
        bars=tuple(bars),
        skipped_row_ids=tuple(skipped),
    )


def dashboard_projection(table: Table) -> DashboardProjection:
    total = len(table.rows)
    status_field = table.first_field_of(FieldType.STATUS)

    completed = 0
    distribution: list[StatusShare] = []
    if status_field is not None:
        values = [r.get(status_field.id) for r in table.rows]
        completed = values.count(DONE_STATUS)
        for option in status_field.options or ():
            n = values.count(option)
            distribution.append(StatusShare(status=option, count=n, percentage=_percent(n, total)))

    return DashboardProjection(
        total_rows=total,
        completed_rows=completed,
        completion_rate=_percent(completed, total),
        field_count=len(table.fields),
        distribution=tuple(distribution),
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _percent(part: int, whole: int) -> int:
    """Percentage rounded half-up; 0 when there is nothing to divide."""
    if whole == 0:
        return 0
    return math.floor(part * 100 / whole + 0.5)


_BUILDERS = {
    "table": grid_projection,
    "kanban": kanban_projection,
    "gantt": gantt_projection,
    "dashboard": dashboard_projection,
}
