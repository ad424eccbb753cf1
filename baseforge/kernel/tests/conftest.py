"""
Kernel test fixtures.

Every fixture builds fresh state; nothing is shared between tests.
"""

from datetime import date

import pytest

from baseforge.kernel.seed import SEED_TABLE_ID, seed_table
from baseforge.kernel.store import TableStore
from baseforge.kernel.types import Field, FieldType, Row, Table
from baseforge.kernel.workspace import Workspace

TODAY = date(2024, 3, 9)


@pytest.fixture
def seeded():
    """Store holding the sample Project Tracker table."""
    return TableStore([seed_table()], SEED_TABLE_ID)


@pytest.fixture
def empty_store():
    return TableStore()


@pytest.fixture
def workspace():
    return Workspace()


def make_table(fields, rows=(), table_id="tbl_test", name="Test"):
    """Build a Table from (id, name, type[, options]) tuples and {field_id: value} dicts."""
    built = []
    for spec in fields:
        fid, fname, ftype = spec[:3]
        options = tuple(spec[3]) if len(spec) > 3 else None
        built.append(Field(id=fid, name=fname, type=FieldType(ftype), options=options))
    return Table(
        id=table_id,
        name=name,
        fields=tuple(built),
        rows=tuple(Row(id=f"r{i}", cells=dict(cells)) for i, cells in enumerate(rows, start=1)),
    )


@pytest.fixture
def table_factory():
    return make_table


@pytest.fixture
def today():
    return TODAY
