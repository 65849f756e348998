"""Comparison operators: =, !=, >, <, >=, <= over normalized operands."""

from __future__ import annotations

import operator
from typing import TYPE_CHECKING, Any

from ..coercion import normalize_comparison
from ..evaluator import MemoryOperator
from ..exceptions import InvalidModifierError
from ..operators import CriteriaOperator

if TYPE_CHECKING:
    from collections.abc import Callable

_COMPARISONS: dict[CriteriaOperator, Callable[[Any, Any], Any]] = {
    CriteriaOperator.EQ: operator.eq,
    CriteriaOperator.NE: operator.ne,
    CriteriaOperator.GT: operator.gt,
    CriteriaOperator.LT: operator.lt,
    CriteriaOperator.GE: operator.ge,
    CriteriaOperator.LE: operator.le,
}

_ALIASES: dict[str, CriteriaOperator] = {"!": CriteriaOperator.NE}


def compare(op: CriteriaOperator | str, a: Any, b: Any) -> bool:
    """
    Compare two values after normalization.

    ``op`` is one of ``=``, ``!=`` (or ``!``), ``<``, ``<=``, ``>``, ``>=``.
    String comparison is case-insensitive; dates compare by instant.
    """
    key = _ALIASES.get(op, op) if isinstance(op, str) else op
    try:
        func = _COMPARISONS[CriteriaOperator(key)]
    except (KeyError, ValueError):
        raise InvalidModifierError(
            str(op), [o.value for o in _COMPARISONS] + list(_ALIASES)
        ) from None
    left, right = normalize_comparison(a, b)
    return bool(func(left, right))


class _ComparisonOperator(MemoryOperator):
    _op: CriteriaOperator

    @property
    def name(self) -> CriteriaOperator:
        return self._op

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        left, right = normalize_comparison(field_value, condition_value)
        return bool(_COMPARISONS[self._op](left, right))


class EqualOperator(_ComparisonOperator):
    _op = CriteriaOperator.EQ


class NotEqualOperator(_ComparisonOperator):
    _op = CriteriaOperator.NE


class GreaterThanOperator(_ComparisonOperator):
    _op = CriteriaOperator.GT


class LessThanOperator(_ComparisonOperator):
    _op = CriteriaOperator.LT


class GreaterEqualOperator(_ComparisonOperator):
    _op = CriteriaOperator.GE


class LessEqualOperator(_ComparisonOperator):
    _op = CriteriaOperator.LE
