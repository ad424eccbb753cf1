"""Assistant command payloads: the closed vocabulary the interpreter accepts."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field, TypeAdapter

PROTOCOL_VERSION = 1

FieldTypeName = Literal["TEXT", "NUMBER", "DATE", "STATUS", "USER"]
ViewId = Literal["table", "kanban", "gantt", "dashboard", "data_sources", "ai_manager"]


class FieldSpec(BaseModel):
    """One column of a CREATE_TABLE request."""

    name: str = Field(min_length=1)
    type: FieldTypeName = "TEXT"
    options: list[str] | None = None


class CreateTableCommand(BaseModel):
    """Create a table and make it active. No `fields` means the default template."""

    model_config = {"populate_by_name": True}

    action: Literal["CREATE_TABLE"]
    name: str = Field(min_length=1, max_length=200)
    field_specs: list[FieldSpec] | None = Field(default=None, alias="fields")


class AddFieldCommand(BaseModel):
    """Append a column to the active table."""

    action: Literal["ADD_FIELD"]
    name: str = Field(min_length=1, max_length=200)
    type: FieldTypeName = "TEXT"
    options: list[str] | None = None


class SwitchViewCommand(BaseModel):
    """Change the active view. Touches no table data."""

    model_config = {"populate_by_name": True}

    action: Literal["SWITCH_VIEW"]
    view_id: ViewId = Field(alias="viewId")


Command = Annotated[
    CreateTableCommand | AddFieldCommand | SwitchViewCommand,
    Field(discriminator="action"),
]

command_adapter: TypeAdapter[Command] = TypeAdapter(Command)
