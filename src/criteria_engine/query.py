"""
Immutable criteria object bundling every result-shaping clause.

``Criteria`` carries the ``where`` filter together with ``sort``,
``skip``, ``limit`` and ``select``. Clauses are validated on
construction; ``apply`` runs them against an in-memory collection.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .filters import limit as limit_stage
from .filters import skip as skip_stage
from .filters import where_filter
from .projection import WILDCARD, select
from .sort import sort_tuples
from .validators import (
    normalize_sort_clause,
    validate_sort_clause,
    validate_where_clause,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from .base import Record
    from .evaluator import MemoryOperatorRegistry
    from .sort import RankFunction

logger = logging.getLogger("criteria_engine.query")


class Criteria(BaseModel):
    """
    Immutable container for a where clause and result-shaping parameters.

    Attributes:
        where: The filter clause (``None`` = keep every tuple).
        sort: Sort clause, as a mapping (``{"age": -1}``) or a string
            (``"age DESC, name"``). ``None`` keeps the input order.
        skip: Number of tuples to drop from the front.
        limit: Maximum number of tuples to return (``None``/``0`` = all).
        select: Projection: ``"*"``, a list of names or a mapping.

    Example::

        criteria = Criteria(where={"age": {">": 30}}, sort={"name": 1}, limit=10)
        rows = criteria.apply(people)
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    where: Any = None
    sort: Any = None
    skip: int | None = Field(default=None, ge=0)
    limit: int | None = Field(default=None, ge=0)
    select: Any = WILDCARD

    @field_validator("where")
    @classmethod
    def _check_where(cls, value: Any) -> Any:
        if value is not None:
            validate_where_clause(value)
        return value

    @field_validator("sort")
    @classmethod
    def _check_sort(cls, value: Any) -> Any:
        if value is not None:
            validate_sort_clause(value)
        return value

    # -- evaluation ----------------------------------------------------------

    def apply(
        self,
        tuples: Iterable[Record] | None,
        schema: Mapping[str, Any] | None = None,
        *,
        registry: MemoryOperatorRegistry | None = None,
        rank: RankFunction | None = None,
    ) -> Any:
        """Run filter, sort, skip, limit and select over *tuples*."""
        if tuples is None:
            return None

        rows = where_filter(tuples, self.where, schema, registry=registry)
        rows = sort_tuples(rows, self.sort, rank)
        rows = skip_stage(rows, self.skip)
        rows = limit_stage(rows, self.limit)
        rows = select(rows, self.select)
        logger.debug("criteria applied: %d tuples returned", len(rows))
        return rows

    # -- derivation ----------------------------------------------------------

    def _replace(self, **changes: Any) -> Criteria:
        fields = {name: getattr(self, name) for name in type(self).model_fields}
        fields.update(changes)
        return type(self)(**fields)

    def with_pagination(
        self,
        skip: int | None = None,
        limit: int | None = None,
    ) -> Criteria:
        """Return a copy with updated pagination parameters."""
        return self._replace(
            skip=skip if skip is not None else self.skip,
            limit=limit if limit is not None else self.limit,
        )

    def merge(self, other: Criteria) -> Criteria:
        """
        Merge two ``Criteria`` instances.

        - Where clauses are combined with AND.
        - ``other``'s skip/limit override ``self``'s if set.
        - Sort keys of ``other`` are appended after ``self``'s; a key
          already sorted on keeps ``self``'s direction.
        - ``other``'s select wins unless it is ``"*"``.
        """
        where = self.where
        if other.where is not None:
            where = other.where if where is None else {"and": [where, other.where]}

        sort = self.sort
        if other.sort is not None:
            vector = normalize_sort_clause(self.sort) if self.sort is not None else {}
            for attr, direction in normalize_sort_clause(other.sort).items():
                vector.setdefault(attr, direction)
            sort = vector

        return self._replace(
            where=where,
            sort=sort,
            skip=other.skip if other.skip is not None else self.skip,
            limit=other.limit if other.limit is not None else self.limit,
            select=self.select if other.select == WILDCARD else other.select,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise the clauses that are set."""
        result: dict[str, Any] = {}
        if self.where is not None:
            result["where"] = self.where
        if self.sort is not None:
            result["sort"] = normalize_sort_clause(self.sort)
        if self.skip is not None:
            result["skip"] = self.skip
        if self.limit is not None:
            result["limit"] = self.limit
        if self.select != WILDCARD:
            result["select"] = self.select
        return result
