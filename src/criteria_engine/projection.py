"""SELECT stage: pick or omit attributes, recursing into nested tuples."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .base import Record

logger = logging.getLogger("criteria_engine.projection")

WILDCARD = "*"


def _as_spec(fields: Any) -> dict[str, Any] | None:
    if fields == WILDCARD:
        return {WILDCARD: True}
    if isinstance(fields, Mapping):
        return dict(fields)
    if isinstance(fields, list | tuple | set | frozenset):
        return {name: True for name in fields}
    return None


def _nested(value: Any) -> bool:
    return isinstance(value, Mapping | list | tuple | set | frozenset)


def _project(record: Record, spec: Mapping[str, Any]) -> dict[str, Any]:
    if spec.get(WILDCARD):
        picked = {k: v for k, v in record.items() if spec.get(k) is not False}
    else:
        picked = {
            k: record[k]
            for k, wanted in spec.items()
            if k != WILDCARD and wanted is not False and k in record
        }

    for attr, sub_select in spec.items():
        if attr == WILDCARD or attr not in picked or not _nested(sub_select):
            continue
        value = picked[attr]
        if isinstance(value, list | tuple):
            picked[attr] = select(value, sub_select)
        elif isinstance(value, Mapping):
            picked[attr] = select([value], sub_select)[0]
    return picked


def select(tuples: Iterable[Record] | None, fields: Any) -> Any:
    """
    Project every tuple through *fields*.

    ``"*"`` keeps everything; a list of names keeps only those names; a
    mapping with a truthy ``"*"`` drops the names mapped to ``False``,
    otherwise it keeps the names it lists. Mapping or list values recurse
    into nested tuples. Any other *fields* returns the input unchanged.

    Elements that are not mappings (scalars inside a nested list) have no
    attributes to pick and are kept as they are.
    """
    spec = _as_spec(fields)
    if spec is None or tuples is None:
        return tuples

    result = [
        _project(record, spec) if isinstance(record, Mapping) else record
        for record in tuples
    ]
    logger.debug("select: projected %d tuples", len(result))
    return result
