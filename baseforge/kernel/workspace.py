"""
BaseForge Kernel: Workspace

The explicit session object. Owns the TableStore plus the selection and
operator state that sits beside the data: active view, assistant config,
linked data-source placeholders, chat transcript and execution log.

Listeners fire whenever persisted state changes (tables, active table,
assistant config, data sources). Switching views, chatting and logging are
session-only and do not notify.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any

from baseforge.kernel.errors import ValidationError
from baseforge.kernel.projections import Projection, project
from baseforge.kernel.seed import SEED_TABLE_ID, seed_table
from baseforge.kernel.store import TableStore
from baseforge.kernel.types import (
    DATA_VIEWS,
    DB_TYPES,
    DEFAULT_VIEW,
    VIEW_IDS,
    AiConfig,
    ChatMessage,
    DataSource,
    ExecutionLogEntry,
    new_id,
    now_millis,
)

Listener = Callable[[], None]


def seeded_store() -> TableStore:
    return TableStore([seed_table()], SEED_TABLE_ID)


class Workspace:
    def __init__(
        self,
        store: TableStore | None = None,
        ai_config: AiConfig | None = None,
        data_sources: Iterable[DataSource] = (),
        active_view: str = DEFAULT_VIEW,
    ) -> None:
        self.store = store if store is not None else seeded_store()
        self._ai_config = ai_config or AiConfig()
        self._data_sources: tuple[DataSource, ...] = tuple(data_sources)
        self._active_view = active_view if active_view in VIEW_IDS else DEFAULT_VIEW
        self.execution_log: list[ExecutionLogEntry] = []
        self.messages: list[ChatMessage] = []
        self._listeners: list[Listener] = []
        self.store.subscribe(self._notify)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def active_view(self) -> str:
        return self._active_view

    def switch_view(self, view_id: str) -> None:
        if view_id not in VIEW_IDS:
            raise ValidationError(f"Unknown view: {view_id!r}")
        self._active_view = view_id

    def current_projection(self) -> Projection | None:
        """
        The active view's projection of the active table. None for the
        system views and for an empty store.
        """
        table = self.store.active_table
        if table is None or self._active_view not in DATA_VIEWS:
            return None
        return project(self._active_view, table)

    # ------------------------------------------------------------------
    # Assistant config and data sources
    # ------------------------------------------------------------------

    @property
    def ai_config(self) -> AiConfig:
        return self._ai_config

    def update_ai_config(self, config: AiConfig) -> None:
        self._ai_config = config
        self._notify()

    @property
    def data_sources(self) -> tuple[DataSource, ...]:
        return self._data_sources

    def add_data_source(self, name: str, type: str, connection_string: str) -> DataSource:
        """Record a linked-database placeholder. Nothing is connected."""
        if not name or not name.strip():
            raise ValidationError("Data source name is required")
        if not connection_string or not connection_string.strip():
            raise ValidationError("Connection string is required")
        if type not in DB_TYPES:
            raise ValidationError(f"Unknown database type: {type!r}")
        source = DataSource(
            id=new_id("ds"),
            name=name.strip(),
            type=type,
            connection_string=connection_string.strip(),
            status="CONNECTED",
            last_sync=now_millis(),
        )
        self._data_sources = self._data_sources + (source,)
        self._notify()
        return source

    # ------------------------------------------------------------------
    # Operator log and chat transcript
    # ------------------------------------------------------------------

    def log_action(self, action: str, timestamp: datetime | None = None) -> ExecutionLogEntry:
        """Record a dispatched assistant action. Newest entries come first."""
        entry = ExecutionLogEntry(timestamp=timestamp or datetime.now(), action=action)
        self.execution_log.insert(0, entry)
        return entry

    def add_message(self, role: str, content: str) -> ChatMessage:
        message = ChatMessage(role=role, content=content, timestamp=now_millis())
        self.messages.append(message)
        return message

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    def to_snapshot(self) -> dict[str, Any]:
        return {
            "tables": [t.to_dict() for t in self.store.tables],
            "activeTableId": self.store.active_table_id,
            "aiConfig": self._ai_config.to_dict(),
            "dataSources": [d.to_dict() for d in self._data_sources],
        }

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()
