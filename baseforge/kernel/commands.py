"""
BaseForge Kernel: Command Interpreter

Turns free-form assistant text into at most one structured command and
applies it to a Workspace.

Extraction prefers a ```json fenced block and otherwise decodes the first
bare top-level {...} object; anything after that object is ignored.

Failure policy: nothing here raises. Text without a payload is the common
case (the assistant just answered in prose), and a malformed or invalid
payload is treated the same way: logged and dropped, with no store mutation
and no execution-log entry.
"""

from __future__ import annotations

import json
import logging
import re
from typing import TYPE_CHECKING, Any

import pydantic

from baseforge.kernel.errors import BaseForgeError, ProtocolParseError
from baseforge.models.commands import (
    AddFieldCommand,
    Command,
    CreateTableCommand,
    SwitchViewCommand,
    command_adapter,
)

if TYPE_CHECKING:
    from baseforge.kernel.workspace import Workspace

logger = logging.getLogger(__name__)

_FENCED_JSON_RE = re.compile(r"```json[ \t]*\r?\n(.*?)```", re.DOTALL | re.IGNORECASE)
_DECODER = json.JSONDecoder()


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


def extract_payload(text: str) -> dict[str, Any]:
    """
    Locate and decode the one JSON object embedded in `text`.

    Raises:
        ProtocolParseError: no object found, or it does not decode to a dict
    """
    match = _FENCED_JSON_RE.search(text)
    if match:
        source, start = match.group(1), 0
    else:
        source, start = text, text.find("{")
        if start < 0:
            raise ProtocolParseError("no JSON object in text")

    source_start = len(source) - len(source[start:].lstrip())
    try:
        payload, _end = _DECODER.raw_decode(source, source_start)
    except json.JSONDecodeError as e:
        raise ProtocolParseError(f"malformed JSON payload: {e}") from e

    if not isinstance(payload, dict):
        raise ProtocolParseError("payload is not an object")
    return payload


def parse_command(text: str) -> Command:
    """
    Extract and validate a command.

    Raises:
        ProtocolParseError: no payload, or payload fails validation
    """
    payload = extract_payload(text)
    try:
        return command_adapter.validate_python(payload)
    except pydantic.ValidationError as e:
        raise ProtocolParseError(f"invalid command payload: {e.error_count()} error(s)") from e


# ---------------------------------------------------------------------------
# Interpreter
# ---------------------------------------------------------------------------


class CommandInterpreter:
    """Applies assistant commands to a workspace, one per response."""

    def __init__(self, workspace: Workspace) -> None:
        self.workspace = workspace

    def interpret(self, text: str) -> Command | None:
        """
        Parse `text` and apply the command it carries.
        Returns the applied command, or None when nothing was applied.
        """
        try:
            command = parse_command(text)
        except ProtocolParseError as e:
            if "{" in text:
                logger.warning("interpreter: ignoring assistant payload: %s", e)
            else:
                logger.debug("interpreter: no command in assistant text")
            return None

        try:
            self.apply(command)
        except BaseForgeError as e:
            logger.warning("interpreter: %s rejected: %s", command.action, e)
            return None

        self.workspace.log_action(command.action)
        logger.info("interpreter: applied %s", command.action)
        return command

    def apply(self, command: Command) -> None:
        handler = _HANDLERS[command.action]
        handler(self.workspace, command)


def _apply_create_table(workspace: Workspace, command: CreateTableCommand) -> None:
    fields = None
    if command.field_specs is not None:
        fields = [spec.model_dump() for spec in command.field_specs]
    workspace.store.create_table(command.name, fields)


def _apply_add_field(workspace: Workspace, command: AddFieldCommand) -> None:
    store = workspace.store
    store.add_field(store.active_table_id, command.name, command.type, command.options)


def _apply_switch_view(workspace: Workspace, command: SwitchViewCommand) -> None:
    workspace.switch_view(command.view_id)


_HANDLERS = {
    "CREATE_TABLE": _apply_create_table,
    "ADD_FIELD": _apply_add_field,
    "SWITCH_VIEW": _apply_switch_view,
}
