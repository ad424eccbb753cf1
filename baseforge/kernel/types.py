"""
BaseForge Kernel: Shared Types

Data classes used across the store, projections, commands and snapshot layer.
These are the contracts that bind the kernel together.

All entities are frozen. A mutation never edits a Field, Row or Table in
place; it builds a replacement with dataclasses.replace and swaps it into the
owning collection.
"""

from __future__ import annotations

import time
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from types import MappingProxyType
from typing import Any

# ---------------------------------------------------------------------------
# Field types
# ---------------------------------------------------------------------------


class FieldType(StrEnum):
    TEXT = "TEXT"
    NUMBER = "NUMBER"
    DATE = "DATE"
    STATUS = "STATUS"
    USER = "USER"


FIELD_TYPES: set[str] = {t.value for t in FieldType}

# Options given to a STATUS column when nobody supplied any
PLACEHOLDER_STATUS_OPTIONS: tuple[str, ...] = ("Option 1", "Option 2", "Option 3")

# Status column of the default two-field template used by create_table
DEFAULT_STATUS_OPTIONS: tuple[str, ...] = ("Todo", "In Progress", "Done")

# The literal a STATUS cell must hold to count as completed on the dashboard
DONE_STATUS = "DONE"

# ---------------------------------------------------------------------------
# View ids
# ---------------------------------------------------------------------------

DATA_VIEWS: tuple[str, ...] = ("table", "kanban", "gantt", "dashboard")
SYSTEM_VIEWS: tuple[str, ...] = ("data_sources", "ai_manager")
VIEW_IDS: tuple[str, ...] = DATA_VIEWS + SYSTEM_VIEWS
DEFAULT_VIEW = "table"

# ---------------------------------------------------------------------------
# Placeholder data sources and assistant providers
# ---------------------------------------------------------------------------

DB_TYPES: set[str] = {"POSTGRES", "MONGODB", "SQLITE"}
DATA_SOURCE_STATUSES: set[str] = {"CONNECTED", "DISCONNECTED", "ERROR"}
AI_PROVIDERS: set[str] = {"ANTHROPIC", "OPENAI"}


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Field:
    """
    A typed column. `options` is only meaningful for STATUS fields and keeps
    the enumerated labels in display order.
    """

    id: str
    name: str
    type: FieldType
    options: tuple[str, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"id": self.id, "name": self.name, "type": self.type.value}
        if self.options is not None:
            d["options"] = list(self.options)
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Field:
        options = d.get("options")
        return cls(
            id=str(d["id"]),
            name=str(d.get("name", "")),
            type=FieldType(d.get("type", FieldType.TEXT)),
            options=tuple(str(o) for o in options) if options is not None else None,
        )


@dataclass(frozen=True)
class Row:
    """
    One record. `cells` maps field id to a JSON scalar. Keys may be missing
    (treated as empty) or stale (left behind by a deleted field).

    `cells` is a read-only copy of whatever mapping was passed in.
    """

    id: str
    cells: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "cells", MappingProxyType(dict(self.cells)))

    def get(self, field_id: str, default: Any = None) -> Any:
        return self.cells.get(field_id, default)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, **self.cells}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Row:
        cells = {k: v for k, v in d.items() if k != "id"}
        return cls(id=str(d["id"]), cells=cells)


@dataclass(frozen=True)
class Table:
    """A named schema (ordered fields) plus its insertion-ordered rows."""

    id: str
    name: str
    fields: tuple[Field, ...] = ()
    rows: tuple[Row, ...] = ()

    def field(self, field_id: str) -> Field | None:
        for f in self.fields:
            if f.id == field_id:
                return f
        return None

    def row(self, row_id: str) -> Row | None:
        for r in self.rows:
            if r.id == row_id:
                return r
        return None

    def fields_of(self, field_type: FieldType) -> list[Field]:
        return [f for f in self.fields if f.type == field_type]

    def first_field_of(self, field_type: FieldType) -> Field | None:
        for f in self.fields:
            if f.type == field_type:
                return f
        return None

    @property
    def primary_field(self) -> Field | None:
        """The label column: whichever field comes first."""
        return self.fields[0] if self.fields else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "fields": [f.to_dict() for f in self.fields],
            "rows": [r.to_dict() for r in self.rows],
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Table:
        return cls(
            id=str(d["id"]),
            name=str(d.get("name", "")),
            fields=tuple(Field.from_dict(f) for f in d.get("fields", [])),
            rows=tuple(Row.from_dict(r) for r in d.get("rows", [])),
        )


@dataclass(frozen=True)
class DataSource:
    """A linked-database placeholder. Nothing ever connects to it."""

    id: str
    name: str
    type: str
    connection_string: str
    status: str = "CONNECTED"
    last_sync: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "connectionString": self.connection_string,
            "status": self.status,
            "lastSync": self.last_sync,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> DataSource:
        status = d.get("status", "CONNECTED")
        return cls(
            id=str(d["id"]),
            name=str(d.get("name", "")),
            type=d.get("type", "POSTGRES"),
            connection_string=d.get("connectionString", ""),
            status=status if status in DATA_SOURCE_STATUSES else "ERROR",
            last_sync=d.get("lastSync"),
        )


@dataclass(frozen=True)
class AiConfig:
    """Which assistant provider to call, and with which credentials."""

    provider: str = "ANTHROPIC"
    api_key: str = ""
    model: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"provider": self.provider, "apiKey": self.api_key, "model": self.model}

    @classmethod
    def from_dict(cls, d: dict[str, Any], defaults: AiConfig | None = None) -> AiConfig:
        base = defaults or cls()
        return cls(
            provider=d.get("provider", base.provider),
            api_key=d.get("apiKey", base.api_key),
            model=d.get("model", base.model),
        )


@dataclass
class ChatMessage:
    role: str  # "user", "assistant" or "system"
    content: str
    timestamp: int  # epoch millis


@dataclass(frozen=True)
class ExecutionLogEntry:
    """One dispatched assistant action, as shown on the operator console."""

    timestamp: datetime
    action: str

    def __str__(self) -> str:
        return f"[{self.timestamp.strftime('%H:%M:%S')}] AI Action: {self.action}"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def is_valid_field_type(value: Any) -> bool:
    return isinstance(value, str) and value in FIELD_TYPES


def new_id(prefix: str) -> str:
    """A fresh unique id such as 'fld_3f2a9c1b7d4e'."""
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def now_millis() -> int:
    return int(time.time() * 1000)
