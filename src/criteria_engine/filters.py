"""WHERE, SKIP and LIMIT stages over a sequence of tuples."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .ast import CriteriaFactory
from .operators_memory import build_default_registry

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from .base import Record
    from .evaluator import MemoryOperatorRegistry

logger = logging.getLogger("criteria_engine.filters")


def matches(
    record: Record,
    where: Mapping[str, Any] | None,
    schema: Mapping[str, Any] | None = None,
    *,
    registry: MemoryOperatorRegistry | None = None,
) -> bool:
    """Return whether a single tuple satisfies *where*."""
    criterion = CriteriaFactory.from_where(
        where,
        registry=registry if registry is not None else build_default_registry(),
        schema=schema,
    )
    return criterion.is_satisfied_by(record)


def where_filter(
    tuples: Iterable[Record] | None,
    where: Mapping[str, Any] | None,
    schema: Mapping[str, Any] | None = None,
    *,
    registry: MemoryOperatorRegistry | None = None,
) -> list[Record] | None:
    """
    Keep the tuples matching *where*, in their input order.

    The clause is parsed once for the whole sequence. ``None`` input is
    returned unchanged; a ``None`` or empty clause keeps every tuple.
    """
    if tuples is None:
        return None

    criterion = CriteriaFactory.from_where(
        where,
        registry=registry if registry is not None else build_default_registry(),
        schema=schema,
    )
    rows = list(tuples)
    result = [row for row in rows if criterion.is_satisfied_by(row)]
    logger.debug("where: %d of %d tuples matched", len(result), len(rows))
    return result


def skip(tuples: Sequence[Record] | None, num_to_skip: int | None) -> Any:
    """Drop the first *num_to_skip* tuples."""
    if not num_to_skip or not tuples:
        return tuples
    return list(tuples[num_to_skip:])


def limit(tuples: Sequence[Record] | None, num: int | None) -> Any:
    """Keep at most the first *num* tuples; ``None`` or ``0`` means no limit."""
    if num is None or num == 0 or not tuples:
        return tuples
    return list(tuples[:num])
