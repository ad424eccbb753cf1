"""
Built-in sample data used when no snapshot has been persisted yet.
"""

from __future__ import annotations

from baseforge.kernel.types import Field, FieldType, Row, Table

SEED_TABLE_ID = "t1"

SEED_FIELDS: tuple[Field, ...] = (
    Field(id="f1", name="Task Name", type=FieldType.TEXT),
    Field(
        id="f2",
        name="Status",
        type=FieldType.STATUS,
        options=("BACKLOG", "IN_PROGRESS", "REVIEW", "DONE"),
    ),
    Field(id="f3", name="Start Date", type=FieldType.DATE),
    Field(id="f4", name="End Date", type=FieldType.DATE),
    Field(id="f5", name="Priority", type=FieldType.NUMBER),
)

_SEED_ROWS: list[tuple[str, str, str, str, str, int]] = [
    ("r1", "Initialize API Gateway", "DONE", "2024-01-01", "2024-01-05", 1),
    ("r2", "Setup PostgreSQL RLS", "IN_PROGRESS", "2024-01-06", "2024-01-12", 1),
    ("r3", "Formula Engine Stress Test", "REVIEW", "2024-01-10", "2024-01-15", 2),
    ("r4", "Websocket Load Balancing", "BACKLOG", "2024-01-15", "2024-01-25", 3),
    ("r5", "Security Audit v1", "BACKLOG", "2024-01-20", "2024-02-01", 1),
]


def seed_table() -> Table:
    rows = tuple(
        Row(id=rid, cells={"f1": name, "f2": status, "f3": start, "f4": end, "f5": priority})
        for rid, name, status, start, end, priority in _SEED_ROWS
    )
    return Table(id=SEED_TABLE_ID, name="Project Tracker", fields=SEED_FIELDS, rows=rows)
