from __future__ import annotations

import math
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from sabres.errors import UnsupportedValueType
from sabres.values import (
    from_epoch_millis,
    quote_identifier,
    stringify,
    to_epoch_millis,
    to_sql_literal,
)

from conftest import Director


def test_numbers_render_as_decimal_text() -> None:
    assert stringify(42) == "42"
    assert stringify(-7) == "-7"
    assert stringify(8.5) == "8.5"
    assert stringify(Decimal("1.25")) == "1.25"


def test_booleans_render_as_one_and_zero() -> None:
    assert stringify(True) == "1"
    assert stringify(False) == "0"


def test_text_is_verbatim() -> None:
    assert stringify("it's") == "it's"


def test_timestamps_render_as_epoch_millis() -> None:
    assert stringify(datetime(2020, 1, 1, tzinfo=timezone.utc)) == "1577836800000"
    # Naive datetimes are taken as UTC.
    assert stringify(datetime(2020, 1, 1)) == "1577836800000"
    assert stringify(date(2020, 1, 1)) == "1577836800000"

    plus_two = timezone(timedelta(hours=2))
    assert stringify(datetime(2020, 1, 1, 2, tzinfo=plus_two)) == "1577836800000"


def test_epoch_millis_round_trip() -> None:
    moment = datetime(2015, 6, 1, 12, 30, 15, 250000, tzinfo=timezone.utc)
    assert from_epoch_millis(to_epoch_millis(moment)) == moment


def test_object_reference_renders_its_id() -> None:
    director = Director(name="Quentin Tarantino")
    director._object_id = 17
    assert stringify(director) == "17"


def test_unsaved_object_reference_is_rejected() -> None:
    with pytest.raises(UnsupportedValueType):
        stringify(Director(name="unsaved"))


@pytest.mark.parametrize("value", [object(), [1, 2], {"a": 1}, b"bytes", 1 + 2j])
def test_unsupported_values_fail(value) -> None:
    with pytest.raises(UnsupportedValueType) as exc:
        stringify(value)
    assert exc.value.code == 104
    assert isinstance(exc.value, ValueError)


@pytest.mark.parametrize(
    "value",
    [math.inf, -math.inf, math.nan, Decimal("NaN"), Decimal("Infinity"), Decimal("-Infinity")],
)
def test_non_finite_numbers_fail(value) -> None:
    with pytest.raises(UnsupportedValueType) as exc:
        stringify(value)
    assert exc.value.code == 104


def test_sql_literals_quote_only_text() -> None:
    assert to_sql_literal("Se7en") == "'Se7en'"
    assert to_sql_literal("it's") == "'it''s'"
    assert to_sql_literal(3) == "3"
    assert to_sql_literal(True) == "1"
    assert to_sql_literal(None) == "NULL"


def test_identifiers_are_double_quoted() -> None:
    assert quote_identifier("title") == '"title"'
    assert quote_identifier('we"ird') == '"we""ird"'
