"""SORT stage: stable multi-key ordering with unranked values last."""

from __future__ import annotations

import copy
import logging
from functools import cmp_to_key
from typing import TYPE_CHECKING, Any

from .validators import normalize_sort_clause

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from .base import Record

    RankFunction = Callable[[Record, str], bool]

logger = logging.getLogger("criteria_engine.sort")

GREATER_THAN = 1
LESS_THAN = -1
EQUAL = 0


def is_ranked(record: Record, attr_name: str) -> bool:
    """Default rank function: ``None`` and missing values are unranked."""
    return record.get(attr_name) is not None


def native_order(a: Any, b: Any) -> int:
    """
    Order two raw values with ``<`` and ``>``.

    Values Python refuses to order against each other are equal.
    """
    try:
        if a < b:
            return LESS_THAN
        if a > b:
            return GREATER_THAN
    except TypeError:
        pass
    return EQUAL


def sort_tuples(
    tuples: Iterable[Record] | None,
    sort_vector: Mapping[str, Any] | str | None,
    rank: RankFunction | None = None,
) -> Any:
    """
    Sort deep copies of *tuples* by *sort_vector*.

    Keys are applied in declared order; the first key that tells two
    tuples apart decides. For each key a tuple that does not rank (per
    *rank*) sorts after one that does, whatever the direction. Ties keep
    their input order.
    """
    if not sort_vector or tuples is None:
        return tuples

    vector = normalize_sort_clause(sort_vector)
    when = rank if rank is not None else is_ranked

    def _compare(a: Record, b: Record) -> int:
        for attr_name, direction in vector.items():
            ranked_a, ranked_b = when(a, attr_name), when(b, attr_name)
            if ranked_a and not ranked_b:
                return LESS_THAN
            if ranked_b and not ranked_a:
                return GREATER_THAN
            if not ranked_a:
                continue
            outcome = native_order(a.get(attr_name), b.get(attr_name))
            if outcome != EQUAL:
                return outcome * direction
        return EQUAL

    rows = copy.deepcopy(list(tuples))
    logger.debug("sort: %d tuples by %r", len(rows), vector)
    return sorted(rows, key=cmp_to_key(_compare))
