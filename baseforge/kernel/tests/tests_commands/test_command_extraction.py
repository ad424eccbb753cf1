"""
BaseForge Commands: locating and validating the payload inside assistant text.
"""

import pytest

from baseforge.kernel.commands import extract_payload, parse_command
from baseforge.kernel.errors import ProtocolParseError
from baseforge.models.commands import PROTOCOL_VERSION, AddFieldCommand, CreateTableCommand, SwitchViewCommand


class TestExtractPayload:
    def test_fenced_block(self):
        text = 'Sure, switching now.\n```json\n{"action": "SWITCH_VIEW", "viewId": "kanban"}\n```\nDone.'
        assert extract_payload(text) == {"action": "SWITCH_VIEW", "viewId": "kanban"}

    def test_fenced_block_preferred_over_earlier_bare_object(self):
        text = 'Example: {"x": 1}\n```json\n{"action": "SWITCH_VIEW", "viewId": "gantt"}\n```'
        assert extract_payload(text)["viewId"] == "gantt"

    def test_bare_object(self):
        text = 'Adding it. {"action": "ADD_FIELD", "name": "Owner", "type": "USER"}'
        assert extract_payload(text)["name"] == "Owner"

    def test_trailing_content_ignored(self):
        text = '{"action": "SWITCH_VIEW", "viewId": "table"} and then {"action": "SWITCH_VIEW", "viewId": "kanban"}'
        assert extract_payload(text)["viewId"] == "table"

    def test_nested_braces(self):
        text = 'Here: {"action": "CREATE_TABLE", "name": "T", "fields": [{"name": "A", "type": "TEXT"}]} bye'
        assert extract_payload(text)["fields"] == [{"name": "A", "type": "TEXT"}]

    def test_prose_only(self):
        with pytest.raises(ProtocolParseError):
            extract_payload("A kanban board groups cards by status.")

    def test_malformed_fenced_block(self):
        with pytest.raises(ProtocolParseError):
            extract_payload('```json\n{"action": "ADD_FIELD", \n```')

    def test_non_object_payload(self):
        with pytest.raises(ProtocolParseError):
            extract_payload("```json\n[1, 2, 3]\n```")

    def test_prose_with_stray_brace(self):
        with pytest.raises(ProtocolParseError):
            extract_payload("Use {Price} * {Quantity} in a formula.")


class TestParseCommand:
    def test_create_table(self):
        command = parse_command(
            '{"action": "CREATE_TABLE", "name": "Leads", "fields": [{"name": "Email", "type": "TEXT"}]}'
        )
        assert isinstance(command, CreateTableCommand)
        assert command.field_specs[0].name == "Email"

    def test_create_table_without_fields(self):
        command = parse_command('{"action": "CREATE_TABLE", "name": "Leads"}')
        assert command.field_specs is None

    def test_add_field_type_defaults_to_text(self):
        command = parse_command('{"action": "ADD_FIELD", "tableId": "current", "name": "Notes"}')
        assert isinstance(command, AddFieldCommand)
        assert command.type == "TEXT"

    def test_switch_view(self):
        command = parse_command('{"action": "SWITCH_VIEW", "viewId": "dashboard"}')
        assert isinstance(command, SwitchViewCommand)
        assert command.view_id == "dashboard"

    def test_protocol_version(self):
        assert PROTOCOL_VERSION == 1

    @pytest.mark.parametrize(
        "payload",
        [
            '{"action": "DROP_TABLE", "name": "x"}',
            '{"name": "no action"}',
            '{"action": "ADD_FIELD", "name": ""}',
            '{"action": "ADD_FIELD", "name": "X", "type": "FORMULA"}',
            '{"action": "SWITCH_VIEW", "viewId": "calendar"}',
            '{"action": "CREATE_TABLE", "fields": []}',
        ],
    )
    def test_invalid_payloads(self, payload):
        with pytest.raises(ProtocolParseError):
            parse_command(payload)
