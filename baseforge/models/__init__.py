"""
Pydantic models for BaseForge.

Payload shapes only. No imports from the kernel or services.
"""

from baseforge.models.commands import (
    PROTOCOL_VERSION,
    AddFieldCommand,
    Command,
    CreateTableCommand,
    FieldSpec,
    SwitchViewCommand,
    command_adapter,
)

__all__ = [
    "PROTOCOL_VERSION",
    "AddFieldCommand",
    "Command",
    "CreateTableCommand",
    "FieldSpec",
    "SwitchViewCommand",
    "command_adapter",
]
