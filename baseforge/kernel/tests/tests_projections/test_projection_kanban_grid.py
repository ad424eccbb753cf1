"""
BaseForge Projections: grid and kanban.
"""

import pytest

from baseforge.kernel.projections import (
    GridProjection,
    InsufficientSchema,
    KanbanProjection,
    grid_projection,
    kanban_projection,
    project,
)
from baseforge.kernel.seed import seed_table


class TestGrid:
    def test_identity_of_fields_and_rows(self):
        table = seed_table()
        grid = grid_projection(table)
        assert grid.fields == table.fields
        assert [g.row for g in grid.rows] == list(table.rows)

    def test_one_based_index(self):
        grid = grid_projection(seed_table())
        assert [g.index for g in grid.rows] == [1, 2, 3, 4, 5]

    def test_empty_table(self, table_factory):
        grid = grid_projection(table_factory([("a", "A", "TEXT")]))
        assert grid.rows == ()

    def test_rows_are_read_only(self, seeded):
        grid = grid_projection(seeded.active_table)
        with pytest.raises(TypeError):
            grid.rows[0].row.cells["f1"] = "edited through the view"
        assert seeded.get_table("t1").row("r1").get("f1") == "Initialize API Gateway"


class TestKanban:
    def test_columns_follow_option_order(self):
        board = kanban_projection(seed_table())
        assert isinstance(board, KanbanProjection)
        assert [c.status for c in board.columns] == ["BACKLOG", "IN_PROGRESS", "REVIEW", "DONE"]

    def test_rows_grouped_by_status(self):
        board = kanban_projection(seed_table())
        grouped = {c.status: [r.id for r in c.rows] for c in board.columns}
        assert grouped == {
            "BACKLOG": ["r4", "r5"],
            "IN_PROGRESS": ["r2"],
            "REVIEW": ["r3"],
            "DONE": ["r1"],
        }

    def test_unknown_status_in_no_column(self, table_factory):
        table = table_factory(
            [("n", "Name", "TEXT"), ("s", "Status", "STATUS", ["A", "B"])],
            [{"n": "one", "s": "A"}, {"n": "legacy", "s": "ARCHIVED"}, {"n": "blank"}],
        )
        board = kanban_projection(table)
        placed = [r.id for c in board.columns for r in c.rows]
        assert placed == ["r1"]
        assert [c.count for c in board.columns] == [1, 0]

    def test_uses_first_status_field(self, table_factory):
        table = table_factory(
            [("s1", "Stage", "STATUS", ["X"]), ("s2", "Other", "STATUS", ["Y"])],
            [{"s1": "X", "s2": "Y"}],
        )
        board = kanban_projection(table)
        assert board.status_field.id == "s1"
        assert [c.status for c in board.columns] == ["X"]

    def test_label_field_is_first_field(self):
        board = kanban_projection(seed_table())
        assert board.label_field.id == "f1"

    def test_missing_status_field_is_insufficient_schema(self, table_factory):
        result = kanban_projection(table_factory([("n", "Name", "TEXT")], [{"n": "x"}]))
        assert isinstance(result, InsufficientSchema)
        assert result.view == "kanban"

    def test_empty_options_single_implicit_group(self, table_factory):
        table = table_factory([("s", "Stage", "STATUS", [])], [{"s": "anything"}, {}])
        board = kanban_projection(table)
        assert len(board.columns) == 1
        assert board.columns[0].status is None
        assert board.columns[0].count == 2

    def test_drop_moves_card_between_columns(self, seeded):
        seeded.move_card("t1", "r4", "DONE")
        board = kanban_projection(seeded.active_table)
        done = next(c for c in board.columns if c.status == "DONE")
        assert [r.id for r in done.rows] == ["r1", "r4"]


class TestProjectDispatch:
    def test_table_view_is_grid(self):
        assert isinstance(project("table", seed_table()), GridProjection)

    def test_system_views_rejected(self):
        with pytest.raises(ValueError):
            project("ai_manager", seed_table())

    def test_recomputed_after_mutation(self, seeded):
        first = project("dashboard", seeded.active_table)
        seeded.add_row("t1")
        second = project("dashboard", seeded.active_table)
        assert (first.total_rows, second.total_rows) == (5, 6)
