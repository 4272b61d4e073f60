"""
sabres.values

Canonical SQL text for Python values and identifiers.

Responsibilities:
- Stringify supported values (number, text, boolean, timestamp, object reference).
- Render SQL literals and quoted identifiers from those strings.
"""

from __future__ import annotations

import math
import numbers
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Any

from sabres.errors import UnsupportedValueType


def stringify(value: Any) -> str:
    """
    Canonical text form used by every predicate and insert path:

    - bool -> "1" / "0"
    - number -> decimal text (NaN and infinities are rejected)
    - str -> verbatim
    - datetime / date -> milliseconds since the epoch (naive values are UTC)
    - object reference (anything with an `object_id`) -> the referenced id
    """

    # bool is an int subclass; check it first.
    if isinstance(value, bool):
        return "1" if value else "0"

    if isinstance(value, Decimal):
        if not value.is_finite():
            raise UnsupportedValueType(value)
        return str(value)

    if isinstance(value, numbers.Real):
        if not math.isfinite(value):
            raise UnsupportedValueType(value)
        return str(value)

    if isinstance(value, str):
        return value

    if isinstance(value, datetime):
        return str(to_epoch_millis(value))

    if isinstance(value, date):
        return str(to_epoch_millis(datetime.combine(value, time.min)))

    if hasattr(value, "object_id"):
        object_id = value.object_id
        if object_id is None:
            raise UnsupportedValueType(value)
        return str(object_id)

    raise UnsupportedValueType(value)


def to_epoch_millis(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)


def from_epoch_millis(value: int) -> datetime:
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


def to_sql_literal(value: Any) -> str:
    if value is None:
        return "NULL"
    text = stringify(value)
    if isinstance(value, str):
        return quote_string(text)
    return text


def quote_string(text: str) -> str:
    return "'" + text.replace("'", "''") + "'"


def quote_identifier(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


# --- Module Notes -----------------------------------------------------------
# `stringify` stays verbatim for text; quoting happens only in `to_sql_literal`.
