"""
Structural validation for ``where`` and ``sort`` clauses.

These checks are not schema-aware: their job is to reject clauses that
are obviously malformed before they reach the evaluation stages, with
an error that names the offending key, value and path.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import Any

from .coercion import is_date, is_number
from .exceptions import (
    MissingClauseError,
    UnparseableSortClauseError,
    UnparseableWhereClauseError,
)
from .operators import NIN_MODIFIERS, STRING_SEARCH_MODIFIERS, SUB_ATTR_MODIFIERS

_PREDICATES = frozenset({"and", "or"})

_ASCENDING = frozenset({"asc", "ascending"})
_DESCENDING = frozenset({"desc", "descending"})


def is_eq_filter(value: Any) -> bool:
    """True for primitives usable in an equality filter."""
    if value is None or isinstance(value, str | bool) or is_date(value):
        return True
    if is_number(value):
        return not isinstance(value, float) or math.isfinite(value)
    return False


def _is_search_term(value: Any) -> bool:
    return isinstance(value, str | bool) or is_number(value)


# ---------------------------------------------------------------------------
# WHERE
# ---------------------------------------------------------------------------


def validate_where_clause(where: Any) -> None:
    """
    Check a ``where`` clause for obviously unsupported usage.

    Raises:
        MissingClauseError: If *where* is ``None``.
        UnparseableWhereClauseError: If the clause cannot be parsed.
    """
    if where is None:
        raise MissingClauseError("where")
    if not isinstance(where, Mapping):
        raise UnparseableWhereClauseError(
            f"Expected `where` to be a dictionary, but got: {where!r}",
            value=where,
            path="<where>",
        )
    _validate_clause(where, "<where>")


def _validate_clause(clause: Mapping[str, Any], path: str) -> None:
    for key, rhs in clause.items():
        key_path = f"{path}.{key}"
        combinator = key.lower() if isinstance(key, str) else key

        if combinator in _PREDICATES:
            _validate_predicate(key, rhs, key_path)
        elif combinator == "not":
            if not isinstance(rhs, Mapping):
                raise UnparseableWhereClauseError(
                    f"Expected a dictionary at `{key}`, but got: {rhs!r}",
                    key=key,
                    value=rhs,
                    path=key_path,
                )
            _validate_clause(rhs, key_path)
        elif combinator == "like":
            _validate_like_block(key, rhs, key_path)
        elif isinstance(rhs, list | tuple):
            _validate_in_list(key, rhs, key_path)
        elif isinstance(rhs, Mapping):
            _validate_modifiers(key, rhs, key_path)
        elif not is_eq_filter(rhs):
            raise UnparseableWhereClauseError(
                f"Unexpected value at `{key}`: {rhs!r} "
                "(When filtering by exact match, use a primitive value: "
                "a string, number, boolean, date or None.)",
                key=key,
                value=rhs,
                path=key_path,
            )


def _validate_predicate(key: str, rhs: Any, path: str) -> None:
    if not isinstance(rhs, list | tuple):
        raise UnparseableWhereClauseError(
            f"Expected a list at `{key}`, but instead got: {rhs!r} "
            f"(`{key}` should always be provided with a list on the right-hand side.)",
            key=key,
            value=rhs,
            path=path,
        )
    # An empty list is tolerated.
    for idx, sub_clause in enumerate(rhs):
        sub_path = f"{path}[{idx}]"
        if not isinstance(sub_clause, Mapping):
            raise UnparseableWhereClauseError(
                f"Expected each item within a `{key}` predicate's list to be "
                f"a dictionary, but got: {sub_clause!r}",
                key=key,
                value=sub_clause,
                path=sub_path,
            )
        _validate_clause(sub_clause, sub_path)


def _validate_like_block(key: str, rhs: Any, path: str) -> None:
    if not isinstance(rhs, Mapping) or not rhs:
        raise UnparseableWhereClauseError(
            f"Expected a non-empty dictionary of patterns at `{key}`, but got: {rhs!r}",
            key=key,
            value=rhs,
            path=path,
        )
    for attr, pattern in rhs.items():
        if not (isinstance(pattern, re.Pattern) or _is_search_term(pattern)):
            raise UnparseableWhereClauseError(
                f"Unexpected pattern for `{attr}` within `{key}`: {pattern!r} "
                "(Patterns must be strings, numbers, booleans or compiled "
                "regular expressions.)",
                key=attr,
                value=pattern,
                path=f"{path}.{attr}",
            )


def _validate_in_list(key: str, rhs: list[Any] | tuple[Any, ...], path: str) -> None:
    # An empty list is tolerated.
    for idx, item in enumerate(rhs):
        if not is_eq_filter(item):
            raise UnparseableWhereClauseError(
                f"Unexpected value at `{key}`: {item!r} "
                "(Items within an `in` list must be primitive values like "
                "strings, numbers, booleans, dates and None.)",
                key=key,
                value=item,
                path=f"{path}[{idx}]",
            )


def _validate_modifiers(key: str, rhs: Mapping[str, Any], path: str) -> None:
    if not rhs:
        raise UnparseableWhereClauseError(
            f"Unexpected value at `{key}`: {{}} (If a dictionary is provided, "
            "it is expected to consist of sub-attribute modifiers like "
            "`contains`, etc. But this dictionary is empty!)",
            key=key,
            value=rhs,
            path=path,
        )

    for modifier, sub_filter in rhs.items():
        modifier_path = f"{path}.{modifier}"
        if modifier not in SUB_ATTR_MODIFIERS:
            raise UnparseableWhereClauseError(
                f"Unrecognized sub-attribute modifier (`{modifier}`) for `{key}`. "
                "Make sure to use a recognized sub-attribute modifier such as "
                "`startsWith`, `<=`, `!`, etc.",
                key=key,
                value=modifier,
                path=modifier_path,
            )

        if isinstance(sub_filter, list | tuple):
            if modifier not in NIN_MODIFIERS:
                raise UnparseableWhereClauseError(
                    f"Unexpected list at sub-attribute modifier (`{modifier}`) "
                    f"for `{key}`: {sub_filter!r} (A list can only be used with "
                    "`not` / `!`. Instead, try using `or` at the top level.)",
                    key=key,
                    value=sub_filter,
                    path=modifier_path,
                )
            _validate_in_list(key, sub_filter, modifier_path)
        elif modifier in STRING_SEARCH_MODIFIERS:
            allowed = _is_search_term(sub_filter) or (
                modifier == "like" and isinstance(sub_filter, re.Pattern)
            )
            if not allowed:
                raise UnparseableWhereClauseError(
                    f"Unexpected value at sub-attribute modifier (`{modifier}`) "
                    f"for `{key}`: {sub_filter!r} (The right-hand side of a "
                    f"string search modifier like `{modifier}` must always be "
                    "a string, number, or boolean.)",
                    key=key,
                    value=sub_filter,
                    path=modifier_path,
                )
        elif not is_eq_filter(sub_filter):
            raise UnparseableWhereClauseError(
                f"Unexpected value at sub-attribute modifier (`{modifier}`) for "
                f"`{key}`: {sub_filter!r} (The right-hand side of a `{modifier}` "
                "must be a primitive value, like a string, number, boolean, "
                "date or None.)",
                key=key,
                value=sub_filter,
                path=modifier_path,
            )


# ---------------------------------------------------------------------------
# SORT
# ---------------------------------------------------------------------------


def validate_sort_clause(sort: Any) -> None:
    """
    Check a ``sort`` clause for obviously unsupported usage.

    Strings (``"age DESC, name"``) and dictionaries (``{"age": -1}``)
    are accepted. An empty dictionary is tolerated.

    Raises:
        MissingClauseError: If *sort* is ``None``.
        UnparseableSortClauseError: If the clause cannot be parsed.
    """
    normalize_sort_clause(sort)


def normalize_sort_clause(sort: Any) -> dict[str, int]:
    """
    Convert a sort clause to an ordered ``{attribute: 1 | -1}`` vector.

    Examples::

        normalize_sort_clause("age DESC, name")  # {"age": -1, "name": 1}
        normalize_sort_clause("-age")            # {"age": -1}
        normalize_sort_clause({"age": "desc"})   # {"age": -1}
    """
    if sort is None:
        raise MissingClauseError("sort")
    if isinstance(sort, str):
        if not sort.strip():
            raise UnparseableSortClauseError(
                'If `sort` is specified as a string, it must not be the empty string ("")!',
                value=sort,
            )
        return _parse_sort_string(sort)
    if isinstance(sort, list | tuple):
        raise UnparseableSortClauseError(
            "Expected `sort` to be a string or dictionary, but instead got "
            f"an array: {sort!r}",
            value=sort,
        )
    if isinstance(sort, Mapping):
        return {attr: _direction(attr, value, sort) for attr, value in sort.items()}
    raise UnparseableSortClauseError(
        f"Expected `sort` to be a string or dictionary, but instead got: {sort!r}",
        value=sort,
    )


def _direction(attr: str, value: Any, clause: Any) -> int:
    if is_number(value) and value != 0:
        return 1 if value > 0 else -1
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _ASCENDING:
            return 1
        if word in _DESCENDING:
            return -1
    raise UnparseableSortClauseError(
        f"Unrecognized sort direction for `{attr}`: {value!r} "
        "(Use 1, -1, 'ASC' or 'DESC'.)",
        value=clause,
    )


def _parse_sort_string(sort: str) -> dict[str, int]:
    vector: dict[str, int] = {}
    for part in sort.split(","):
        tokens = part.split()
        if not tokens:
            continue
        if len(tokens) > 2:
            raise UnparseableSortClauseError(
                f"Could not understand sort fragment {part.strip()!r}.",
                value=sort,
            )
        attr = tokens[0]
        if len(tokens) == 2:
            vector[attr] = _direction(attr, tokens[1], sort)
        elif attr.startswith("-"):
            vector[attr[1:]] = -1
        else:
            vector[attr.lstrip("+")] = 1
    if not vector or any(not attr for attr in vector):
        raise UnparseableSortClauseError(
            f"Could not find an attribute name in {sort!r}.",
            value=sort,
        )
    return vector
