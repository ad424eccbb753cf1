"""
BaseForge Kernel: Snapshot Persistence

Serializes a whole Workspace to one JSON blob and restores it.

Blob shape (keys kept camelCase for compatibility with existing blobs):
  {"tables": [...], "activeTableId": str, "aiConfig": {...}, "dataSources": [...]}

Schema evolution is additive only. A key missing from the blob keeps the
in-memory default. Malformed tables, fields and rows are repaired or skipped
one at a time; only a blob that is not a JSON object (or whose tables are not
a list) is discarded in favour of the seed.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any

from baseforge.kernel.storage import SnapshotStorage
from baseforge.kernel.store import TableStore
from baseforge.kernel.types import AiConfig, DataSource, Field, Row, Table, new_id
from baseforge.kernel.workspace import Workspace

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "baseforge_data"


def dump_snapshot(workspace: Workspace) -> str:
    return json.dumps(workspace.to_snapshot())


def restore_workspace(data: dict[str, Any], defaults: Workspace | None = None) -> Workspace:
    """
    Build a Workspace from a decoded snapshot, taking anything the snapshot
    lacks from `defaults` (a seeded workspace when not given).

    Malformed entries are repaired or skipped one at a time with a warning:
    a table or row without an id gets a fresh one, and a field, table or
    data source that cannot be read is dropped.

    Raises:
        TypeError: `tables` or `dataSources` is not a list
    """
    base = defaults or Workspace()

    if "tables" in data:
        tables = [t for t in (_restore_table(d) for d in _entries(data, "tables")) if t is not None]
    else:
        tables = list(base.store.tables)

    active_table_id = data.get("activeTableId") or base.store.active_table_id

    ai_config = base.ai_config
    if isinstance(data.get("aiConfig"), dict):
        ai_config = AiConfig.from_dict(data["aiConfig"], base.ai_config)

    if "dataSources" in data:
        data_sources = []
        for d in _entries(data, "dataSources"):
            try:
                data_sources.append(DataSource.from_dict(d))
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                logger.warning("snapshot: skipping unreadable data source %r: %s", d, e)
    else:
        data_sources = list(base.data_sources)

    return Workspace(TableStore(tables, active_table_id), ai_config, data_sources)


def _entries(data: dict[str, Any], key: str) -> list[Any]:
    entries = data[key]
    if not isinstance(entries, list):
        raise TypeError(f"{key} is not a list")
    return entries


def _restore_table(d: Any) -> Table | None:
    if not isinstance(d, dict):
        logger.warning("snapshot: skipping table that is not an object: %r", d)
        return None

    table_id = d.get("id")
    if not table_id:
        table_id = new_id("tbl")
        logger.warning("snapshot: table %r has no id, assigned %s", d.get("name"), table_id)

    fields: list[Field] = []
    for f in _list_of(d.get("fields")):
        try:
            fields.append(Field.from_dict(f))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning("snapshot: table %s: skipping unreadable field %r: %s", table_id, f, e)

    rows: list[Row] = []
    for r in _list_of(d.get("rows")):
        if not isinstance(r, dict):
            logger.warning("snapshot: table %s: skipping row that is not an object: %r", table_id, r)
            continue
        if not r.get("id"):
            r = {**r, "id": new_id("rec")}
            logger.warning("snapshot: table %s: row without id, assigned %s", table_id, r["id"])
        rows.append(Row.from_dict(r))

    return Table(id=str(table_id), name=str(d.get("name", "")), fields=tuple(fields), rows=tuple(rows))


def _list_of(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def load_workspace(
    storage: SnapshotStorage,
    key: str = DEFAULT_STORAGE_KEY,
    ai_config: AiConfig | None = None,
) -> Workspace:
    """Restore the workspace stored under `key`, or start from the seed."""
    defaults = Workspace(ai_config=ai_config)
    blob = storage.get(key)
    if blob is None:
        logger.info("snapshot: nothing stored under %s, starting from seed", key)
        return defaults

    try:
        data = json.loads(blob)
        if not isinstance(data, dict):
            raise TypeError("snapshot is not an object")
        workspace = restore_workspace(data, defaults)
    except (ValueError, KeyError, TypeError) as e:
        logger.warning("snapshot: failed to load %s, starting from seed: %s", key, e)
        return defaults

    logger.info("snapshot: loaded %d tables from %s", len(workspace.store.tables), key)
    return workspace


class SnapshotPersister:
    """Writes the full snapshot after every workspace change. Last write wins."""

    def __init__(self, storage: SnapshotStorage, key: str = DEFAULT_STORAGE_KEY) -> None:
        self.storage = storage
        self.key = key

    def attach(self, workspace: Workspace) -> Callable[[], None]:
        """Save now and after each change. Returns a function that detaches."""
        self.save(workspace)
        return workspace.subscribe(lambda: self.save(workspace))

    def save(self, workspace: Workspace) -> None:
        """Write the snapshot. A failed write is logged and the in-memory workspace stays as it is."""
        try:
            self.storage.put(self.key, dump_snapshot(workspace))
        except (OSError, TypeError, ValueError):
            logger.exception("snapshot: failed to save %s", self.key)
