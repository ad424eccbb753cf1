"""
BaseForge Kernel: the in-memory table engine.

Components:
  store        TableStore, the owner of tables, fields and rows
  projections  grid / kanban / gantt / dashboard, pure and recomputed per read
  commands     assistant text → one validated command → workspace
  workspace    session object tying the store to view and operator state
  snapshot     whole-workspace JSON blob save/restore
  storage      key-value blob stores behind the snapshot
  importers    markdown / CSV text into new tables
"""

from baseforge.kernel.commands import CommandInterpreter, extract_payload, parse_command
from baseforge.kernel.errors import (
    BaseForgeError,
    ExternalServiceError,
    ProtocolParseError,
    ResolutionError,
    ValidationError,
)
from baseforge.kernel.fields import coerce_cell, default_value
from baseforge.kernel.projections import (
    InsufficientSchema,
    dashboard_projection,
    gantt_projection,
    grid_projection,
    kanban_projection,
    project,
)
from baseforge.kernel.snapshot import SnapshotPersister, load_workspace, restore_workspace
from baseforge.kernel.store import CellEdit, TableStore
from baseforge.kernel.types import Field, FieldType, Row, Table
from baseforge.kernel.workspace import Workspace

__all__ = [
    "BaseForgeError",
    "CellEdit",
    "CommandInterpreter",
    "ExternalServiceError",
    "Field",
    "FieldType",
    "InsufficientSchema",
    "ProtocolParseError",
    "ResolutionError",
    "Row",
    "SnapshotPersister",
    "Table",
    "TableStore",
    "ValidationError",
    "Workspace",
    "coerce_cell",
    "dashboard_projection",
    "default_value",
    "extract_payload",
    "gantt_projection",
    "grid_projection",
    "kanban_projection",
    "load_workspace",
    "parse_command",
    "project",
    "restore_workspace",
]
