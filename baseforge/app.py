"""
BaseForge application wiring.

Opens the persisted workspace at startup (or the seed when nothing is
stored) and keeps it saved after every change.
"""

from __future__ import annotations

import logging
from pathlib import Path

from baseforge.config import settings
from baseforge.kernel.snapshot import SnapshotPersister, load_workspace
from baseforge.kernel.storage import FileStorage
from baseforge.kernel.types import AiConfig
from baseforge.kernel.workspace import Workspace
from baseforge.services.session import AssistantSession

logger = logging.getLogger(__name__)


def open_workspace(
    data_dir: str | Path | None = None,
    storage_key: str | None = None,
    ai_config: AiConfig | None = None,
) -> Workspace:
    """
    Load the workspace from disk and attach a persister to it.

    Arguments left as None come from `settings`.
    """
    storage = FileStorage(data_dir or settings.DATA_DIR)
    key = storage_key or settings.STORAGE_KEY
    workspace = load_workspace(storage, key, ai_config or settings.default_ai_config())
    SnapshotPersister(storage, key).attach(workspace)
    logger.info("app: workspace open with %d tables (%s)", len(workspace.store.tables), storage.directory)
    return workspace


def open_session(workspace: Workspace | None = None) -> AssistantSession:
    """An assistant chat session over `workspace`, opened from disk when not given."""
    return AssistantSession(workspace if workspace is not None else open_workspace())
