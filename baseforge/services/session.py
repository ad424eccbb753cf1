"""
Assistant chat session.

One user turn: record the message, ask the assistant with a short context
line, let the interpreter apply whatever command the reply carries, then
record the reply. A failed provider call becomes a single assistant message
and leaves the store untouched.
"""

from __future__ import annotations

import logging
from typing import Protocol

from baseforge.kernel.commands import CommandInterpreter
from baseforge.kernel.errors import ExternalServiceError
from baseforge.kernel.types import VIEW_IDS, ChatMessage
from baseforge.kernel.workspace import Workspace
from baseforge.services.assistant import AssistantClient

logger = logging.getLogger(__name__)

ERROR_REPLY = "Error communicating with AI. Check Settings."


class Assistant(Protocol):
    async def ask(self, prompt: str, context: str) -> str: ...


def build_context(workspace: Workspace) -> str:
    table = workspace.store.active_table
    table_name = table.name if table else "(none)"
    fields = ", ".join(f.name for f in table.fields) if table else ""
    return f"Active Table: {table_name}, Views: {','.join(VIEW_IDS)}, Fields: {fields}"


class AssistantSession:
    def __init__(self, workspace: Workspace, assistant: Assistant | None = None) -> None:
        self.workspace = workspace
        self.assistant = assistant
        self.interpreter = CommandInterpreter(workspace)

    async def send(self, text: str) -> ChatMessage | None:
        """Run one turn. Returns the assistant's message, or None for blank input."""
        if not text.strip():
            return None

        self.workspace.add_message("user", text)
        context = build_context(self.workspace)
        assistant = self.assistant or AssistantClient(self.workspace.ai_config)

        try:
            reply = await assistant.ask(text, context)
        except ExternalServiceError as e:
            logger.warning("session: assistant request failed: %s", e)
            return self.workspace.add_message("assistant", ERROR_REPLY)

        self.interpreter.interpret(reply)
        return self.workspace.add_message("assistant", reply)
