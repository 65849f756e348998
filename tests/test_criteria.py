"""Tests for where-clause parsing and evaluation."""

from __future__ import annotations

import datetime

import pytest

from criteria_engine import (
    AndCriterion,
    AttributeCriterion,
    CriteriaFactory,
    CriteriaOperator,
    InListCriterion,
    InvalidModifierError,
    LikeCriterion,
    NotCriterion,
    NotInCriterion,
    OrCriterion,
    UnparseableWhereClauseError,
    matches,
    where_filter,
)


def ids(rows):
    return [row["id"] for row in rows]


# -- Vacuous clauses ---------------------------------------------------------


def test_empty_where_keeps_everything(muppets):
    assert where_filter(muppets, {}) == muppets


def test_none_where_keeps_everything(muppets):
    assert where_filter(muppets, None) == muppets


def test_none_tuples_pass_through():
    assert where_filter(None, {"name": "Kermit"}) is None


def test_empty_or_matches_nothing(muppets):
    assert where_filter(muppets, {"or": []}) == []


def test_empty_and_matches_everything(muppets):
    assert where_filter(muppets, {"and": []}) == muppets


# -- Literal equality --------------------------------------------------------


def test_literal_is_case_insensitive(muppets):
    assert ids(where_filter(muppets, {"name": "kermit"})) == [1]


def test_missing_attribute_never_matches(muppets):
    assert where_filter(muppets, {"nickname": "Kermit"}) == []
    assert where_filter(muppets, {"nickname": None}) == []


def test_present_none_matches_none(muppets):
    assert ids(where_filter(muppets, {"age": None})) == [3]


def test_numeric_string_matches_number(muppets):
    assert ids(where_filter(muppets, {"age": 38})) == [2]
    assert ids(where_filter(muppets, {"age": "42"})) == [1]


def test_multiple_keys_are_anded(muppets):
    assert ids(where_filter(muppets, {"species": "frog", "age": 42})) == [1]
    assert where_filter(muppets, {"species": "frog", "age": 40}) == []


def test_filter_keeps_input_order(muppets):
    reversed_rows = list(reversed(muppets))
    assert ids(where_filter(reversed_rows, {"age": {">": 0}})) == [4, 2, 1]


# -- Combinators -------------------------------------------------------------


def test_or(muppets):
    where = {"or": [{"name": "Kermit"}, {"species": "pig"}]}
    assert ids(where_filter(muppets, where)) == [1, 2]


def test_nested_and_or(muppets):
    where = {"and": [{"age": {">": 30}}, {"or": [{"species": "pig"}, {"name": "Gonzo"}]}]}
    assert ids(where_filter(muppets, where)) == [2, 4]


def test_not(muppets):
    assert ids(where_filter(muppets, {"not": {"species": "frog"}})) == [2, 3, 4]


def test_combinator_keys_are_case_insensitive(muppets):
    where = {"OR": [{"name": "Kermit"}, {"name": "Gonzo"}]}
    assert ids(where_filter(muppets, where)) == [1, 4]


@pytest.mark.parametrize(
    "where",
    [
        {"species": "frog"},
        {"age": {">": 39}},
        {"or": [{"name": "Piggy"}, {"age": None}]},
        {"species": ["pig", "bear"]},
    ],
)
def test_not_is_negation(muppets, where):
    for row in muppets:
        assert matches(row, {"not": where}) is (not matches(row, where))


# -- IN / NOT IN -------------------------------------------------------------


def test_in_list(muppets):
    assert ids(where_filter(muppets, {"species": ["frog", "bear"]})) == [1, 3]


def test_empty_in_list_matches_nothing(muppets):
    assert where_filter(muppets, {"species": []}) == []


def test_in_list_coerces_like_equality(muppets):
    assert ids(where_filter(muppets, {"age": [38, "40"]})) == [2, 4]


def test_in_list_reads_missing_attribute_as_blank(muppets):
    assert ids(where_filter(muppets, {"nickname": [""]})) == [1, 2, 3, 4]


def test_not_in(muppets):
    assert ids(where_filter(muppets, {"species": {"not": ["frog", "pig"]}})) == [3, 4]
    assert ids(where_filter(muppets, {"species": {"!": ["bear"]}})) == [1, 2, 4]


# -- Sub-attribute modifiers -------------------------------------------------


def test_greater_than(muppets):
    assert ids(where_filter(muppets, {"age": {">": 39}})) == [1, 4]
    assert ids(where_filter(muppets, {"age": {"greaterThan": 39}})) == [1, 4]


def test_range(muppets):
    where = {"age": {">=": 38, "<": 42}}
    assert ids(where_filter(muppets, where)) == [2, 4]
    where = {"age": {"greaterThanOrEqual": 38, "lessThanOrEqual": 40}}
    assert ids(where_filter(muppets, where)) == [2, 4]


def test_not_equal(muppets):
    assert ids(where_filter(muppets, {"species": {"!": "frog"}})) == [2, 3, 4]


def test_equals_modifier(muppets):
    assert ids(where_filter(muppets, {"name": {"equals": "PIGGY"}})) == [2]


def test_string_search_modifiers(muppets):
    assert ids(where_filter(muppets, {"name": {"startsWith": "k"}})) == [1]
    assert ids(where_filter(muppets, {"name": {"endsWith": "O"}})) == [4]
    assert ids(where_filter(muppets, {"name": {"contains": "ZZ"}})) == [3]
    assert ids(where_filter(muppets, {"name": {"like": "k%t"}})) == [1]


def test_like_block(muppets):
    where = {"like": {"name": "%i%", "species": "p%"}}
    assert ids(where_filter(muppets, where)) == [2]


def test_mapping_without_modifiers_is_a_literal(muppets):
    rows = [{"id": 1, "meta": {"a": 1}}]
    assert where_filter(rows, {"meta": {"b": 2}}) == []


def test_unknown_modifier_raises_with_suggestion(muppets):
    where = {"name": {"contains": "e", "contans": "x"}}
    with pytest.raises(InvalidModifierError) as exc_info:
        where_filter(muppets, where)
    assert exc_info.value.modifier == "contans"
    assert exc_info.value.attribute == "name"
    assert "contains" in exc_info.value.suggestions


def test_unknown_modifier_raises_on_empty_input():
    with pytest.raises(InvalidModifierError):
        where_filter([], {"age": {">": 1, "biggerThan": 2}})


# -- Date schema hint ---------------------------------------------------------


SCHEMA = {"born": "date"}


def test_date_schema_matches_iso_equivalents(muppets):
    assert ids(where_filter(muppets, {"born": "1955-05-09"}, SCHEMA)) == [1]


def test_date_schema_accepts_date_objects(muppets):
    born = datetime.datetime(1955, 5, 9, tzinfo=datetime.timezone.utc)
    assert ids(where_filter(muppets, {"born": born}, SCHEMA)) == [1]
    assert ids(where_filter(muppets, {"born": datetime.date(1974, 1, 1)}, SCHEMA)) == [2]


def test_date_schema_orders_by_instant(muppets):
    assert ids(where_filter(muppets, {"born": {">": "1970-01-01"}}, SCHEMA)) == [2]


def test_date_schema_accepts_mapping_hint(muppets):
    schema = {"born": {"type": "date"}}
    assert ids(where_filter(muppets, {"born": "1974-01-01T00:00:00Z"}, schema)) == [2]


def test_unparseable_date_does_not_match():
    rows = [{"id": 1, "born": "someday"}]
    assert where_filter(rows, {"born": "1955-05-09"}, SCHEMA) == []


# -- Errors ------------------------------------------------------------------


def test_non_mapping_where_raises(muppets):
    with pytest.raises(UnparseableWhereClauseError) as exc_info:
        where_filter(muppets, "name = Kermit")
    assert exc_info.value.path == "<where>"


def test_or_without_list_raises(muppets):
    with pytest.raises(UnparseableWhereClauseError) as exc_info:
        where_filter(muppets, {"or": {"name": "Kermit"}})
    assert exc_info.value.key == "or"
    assert exc_info.value.path == "<where>.or"


def test_non_mapping_inside_or_raises(muppets):
    with pytest.raises(UnparseableWhereClauseError) as exc_info:
        where_filter(muppets, {"or": [{"name": "Kermit"}, "Gonzo"]})
    assert exc_info.value.path == "<where>.or[1]"


def test_like_block_requires_mapping(muppets):
    with pytest.raises(UnparseableWhereClauseError):
        where_filter(muppets, {"like": "K%"})


# -- Registry injection ------------------------------------------------------


def test_custom_registry_is_used(muppets, registry):
    registry.unregister(CriteriaOperator.CONTAINS)
    with pytest.raises(InvalidModifierError):
        where_filter(muppets, {"name": {"contains": "e"}}, registry=registry)


def test_attribute_criterion_requires_registry():
    with pytest.raises(ValueError, match="registry"):
        AttributeCriterion("name", CriteriaOperator.EQ, "x", registry=None)


# -- Factory -----------------------------------------------------------------


class TestCriteriaFactory:
    def test_single_key_is_unwrapped(self, registry):
        node = CriteriaFactory.from_where({"name": "Kermit"}, registry=registry)
        assert isinstance(node, AttributeCriterion)
        assert node.op is CriteriaOperator.EQ

    def test_node_shapes(self, registry):
        node = CriteriaFactory.from_where(
            {
                "or": [{"a": 1}],
                "not": {"b": 2},
                "c": [1, 2],
                "d": {"not": [3]},
                "like": {"e": "x%"},
            },
            registry=registry,
        )
        assert isinstance(node, AndCriterion)
        kinds = [type(child) for child in node.criteria]
        assert kinds == [
            OrCriterion,
            NotCriterion,
            InListCriterion,
            NotInCriterion,
            LikeCriterion,
        ]

    def test_none_builds_match_all(self, registry):
        node = CriteriaFactory.from_where(None, registry=registry)
        assert isinstance(node, AndCriterion)
        assert node.is_satisfied_by({}) is True

    def test_to_dict_round_trips_shape(self, registry):
        where = {"name": "Kermit", "age": {">": 3}, "species": {"not": ["pig"]}}
        node = CriteriaFactory.from_where(where, registry=registry)
        assert node.to_dict() == {
            "and": [
                {"name": "Kermit"},
                {"age": {">": 3}},
                {"species": {"not": ["pig"]}},
            ]
        }

    def test_operator_overloads(self, registry):
        kermit = CriteriaFactory.from_where({"name": "Kermit"}, registry=registry)
        frog = CriteriaFactory.from_where({"species": "frog"}, registry=registry)
        row = {"name": "Kermit", "species": "pig"}
        assert (kermit & frog).is_satisfied_by(row) is False
        assert (kermit | frog).is_satisfied_by(row) is True
        assert (~frog).is_satisfied_by(row) is True
