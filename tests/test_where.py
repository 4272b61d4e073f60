from __future__ import annotations

import dataclasses

import pytest

from sabres.errors import UnsupportedValueType
from sabres.where import Where


def test_leaf_predicates_render() -> None:
    assert Where.equal_to("title", "Se7en").to_sql() == "\"title\" = 'Se7en'"
    assert Where.not_equal_to("year", 1995).to_sql() == '"year" <> 1995'
    assert Where.does_not_start_with("name", "abc").to_sql() == "\"name\" NOT LIKE 'abc%'"


def test_and_wraps_each_side_in_parentheses() -> None:
    where = Where.equal_to("a", 1).and_(Where.equal_to("b", 2)) & Where.equal_to("c", 3)
    assert where.to_sql() == '(("a" = 1) AND ("b" = 2)) AND ("c" = 3)'


def test_and_leaves_operands_untouched() -> None:
    left = Where.equal_to("a", 1)
    right = Where.equal_to("b", 2)
    combined = left & right

    assert left.to_sql() == '"a" = 1'
    assert right.to_sql() == '"b" = 2'
    assert combined.to_sql() == '("a" = 1) AND ("b" = 2)'
    with pytest.raises(dataclasses.FrozenInstanceError):
        left.root = None  # type: ignore[misc]


def test_empty_where_renders_as_absent() -> None:
    assert Where.empty().is_empty
    assert Where.empty().to_sql() is None
    assert (Where.empty() & Where.equal_to("a", 1)).to_sql() == '"a" = 1'
    assert (Where.equal_to("a", 1) & Where.empty()).to_sql() == '"a" = 1'


def test_qualifier_prefixes_every_key() -> None:
    where = Where.equal_to("title", "x") & Where.not_equal_to("year", 2)
    assert where.to_sql("Movie") == (
        '("Movie"."title" = \'x\') AND ("Movie"."year" <> 2)'
    )


def test_like_wildcards_in_prefix_are_escaped() -> None:
    sql = Where.does_not_start_with("name", "_List_").to_sql()
    assert sql == "\"name\" NOT LIKE '\\_List\\_%' ESCAPE '\\'"


def test_text_values_are_escaped() -> None:
    assert Where.equal_to("title", "Ocean's Eleven").to_sql() == (
        "\"title\" = 'Ocean''s Eleven'"
    )


@pytest.mark.parametrize("build", [Where.equal_to, Where.not_equal_to])
def test_null_comparisons_are_rejected(build) -> None:
    with pytest.raises(UnsupportedValueType) as exc:
        build("title", None)
    assert exc.value.code == 104
