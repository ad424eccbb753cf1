"""
BaseForge Kernel: Cell Values

Default values for freshly materialized rows and the one coercion boundary
every cell write goes through. Text, User and Status cells hold strings,
Number cells hold int or float, Date cells hold an ISO calendar date string.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import Any

from baseforge.kernel.errors import ValidationError
from baseforge.kernel.types import Field, FieldType

# Plain decimal or exponent notation. No underscores, no nan/inf spellings.
NUMBER_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


def default_value(field: Field, today: date | None = None) -> Any:
    """The value a new row gets for `field`."""
    if field.type == FieldType.NUMBER:
        return 0
    if field.type == FieldType.DATE:
        return (today or date.today()).isoformat()
    if field.type == FieldType.STATUS:
        return field.options[0] if field.options else ""
    return ""


def coerce_cell(field: Field, raw: Any) -> Any:
    """
    Convert `raw` into the variant `field.type` stores.

    Number cells use parse-or-zero: anything that does not read as a finite
    number becomes 0. Date cells reject text that is not an ISO date.
    """
    if field.type == FieldType.NUMBER:
        return parse_number(raw)
    if field.type == FieldType.DATE:
        return _coerce_date(raw)
    if raw is None:
        return ""
    return str(raw)


def coerce_untyped(raw: Any) -> Any:
    """Coerce a value written under an id with no field: JSON scalars stay, the rest become text."""
    if raw is None:
        return ""
    if isinstance(raw, (str, int)):
        return raw
    if isinstance(raw, float) and math.isfinite(raw):
        return raw
    return str(raw)


def parse_number(raw: Any) -> int | float:
    if isinstance(raw, bool):
        return 0
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = "" if raw is None else str(raw).strip()
        if not NUMBER_RE.match(text):
            return 0
        value = float(text)
    if not math.isfinite(value):
        return 0
    if value.is_integer():
        return int(value)
    return value


def parse_date(raw: Any) -> date | None:
    """Read an ISO date or ISO datetime. None if unreadable."""
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if not isinstance(raw, str) or not raw.strip():
        return None
    try:
        return datetime.fromisoformat(raw.strip()).date()
    except ValueError:
        return None


def _coerce_date(raw: Any) -> str:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return ""
    parsed = parse_date(raw)
    if parsed is None:
        raise ValidationError(f"Not a calendar date: {raw!r}")
    return parsed.isoformat()
