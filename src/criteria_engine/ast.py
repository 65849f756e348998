from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .base import AndCriterion, BaseCriterion, NotCriterion, OrCriterion
from .coercion import coerce_to_iso, is_numbery, to_number
from .exceptions import InvalidModifierError, UnparseableWhereClauseError
from .operators import (
    MODIFIER_ALIASES,
    NIN_MODIFIERS,
    SUB_ATTR_MODIFIERS,
    CriteriaOperator,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .base import Record
    from .evaluator import MemoryOperatorRegistry

logger = logging.getLogger("criteria_engine.parser")

# Canonical modifier key for each operator, used when serialising.
_MODIFIER_KEYS: dict[CriteriaOperator, str] = {
    CriteriaOperator.EQ: "equals",
    CriteriaOperator.NE: "!",
    CriteriaOperator.GT: ">",
    CriteriaOperator.LT: "<",
    CriteriaOperator.GE: ">=",
    CriteriaOperator.LE: "<=",
    CriteriaOperator.LIKE: "like",
    CriteriaOperator.CONTAINS: "contains",
    CriteriaOperator.STARTSWITH: "startsWith",
    CriteriaOperator.ENDSWITH: "endsWith",
}


def schema_type_of(schema: Mapping[str, Any] | None, attr: str) -> str | None:
    """
    Declared type of *attr* in a schema hint.

    The hint maps attribute names either to a type name (``"date"``) or
    to a mapping with a ``"type"`` key (``{"type": "date"}``).
    """
    if not schema:
        return None
    declared = schema.get(attr)
    if isinstance(declared, Mapping):
        declared = declared.get("type")
    return declared if isinstance(declared, str) else None


class AttributeCriterion(BaseCriterion):
    """
    Compare one attribute of the tuple against a literal.

    The attribute must be present on the tuple. Under a ``date`` schema
    hint both sides are compared as ISO-8601 instants; when both sides
    read as finite numbers they are compared numerically. The actual
    comparison is delegated to a :class:`MemoryOperatorRegistry`.
    """

    def __init__(
        self,
        attr: str,
        op: CriteriaOperator | str,
        val: Any,
        *,
        registry: MemoryOperatorRegistry,
        schema_type: str | None = None,
    ) -> None:
        self.attr = attr
        self.op = CriteriaOperator(op) if isinstance(op, str) else op
        self.val = val
        self.schema_type = schema_type
        if registry is None:
            raise ValueError(
                "registry parameter is required. "
                "Use build_default_registry() from operators_memory to create one."
            )
        self._registry = registry

    def is_satisfied_by(self, candidate: Record) -> bool:
        if self.attr not in candidate:
            return False
        value, criterion = candidate[self.attr], self.val

        if self.schema_type == "date":
            value, criterion = coerce_to_iso(value), coerce_to_iso(criterion)
            if value is None or criterion is None:
                return False

        if is_numbery(value) and is_numbery(criterion):
            value, criterion = to_number(value), to_number(criterion)

        return self._registry.evaluate(self.op, value, criterion)

    def to_dict(self) -> dict[str, Any]:
        if self.op is CriteriaOperator.EQ and not isinstance(
            self.val, Mapping | list | tuple
        ):
            return {self.attr: self.val}
        return {self.attr: {_MODIFIER_KEYS[self.op]: self.val}}


class InListCriterion(BaseCriterion):
    """Match when the attribute equals any of the listed values."""

    def __init__(
        self,
        attr: str,
        values: Sequence[Any],
        *,
        registry: MemoryOperatorRegistry,
    ) -> None:
        self.attr = attr
        self.values = list(values)
        self._registry = registry

    def _any_equal(self, candidate: Record) -> bool:
        actual = candidate.get(self.attr)
        return any(
            self._registry.evaluate(CriteriaOperator.EQ, actual, v) for v in self.values
        )

    def is_satisfied_by(self, candidate: Record) -> bool:
        return self._any_equal(candidate)

    def to_dict(self) -> dict[str, Any]:
        return {self.attr: list(self.values)}


class NotInCriterion(InListCriterion):
    """Match when the attribute equals none of the listed values."""

    def is_satisfied_by(self, candidate: Record) -> bool:
        return not self._any_equal(candidate)

    def to_dict(self) -> dict[str, Any]:
        return {self.attr: {"not": list(self.values)}}


class LikeCriterion(BaseCriterion):
    """``like`` combinator: every attribute must match its pattern."""

    def __init__(
        self,
        patterns: Mapping[str, Any],
        *,
        registry: MemoryOperatorRegistry,
    ) -> None:
        self.patterns = dict(patterns)
        self._registry = registry

    def is_satisfied_by(self, candidate: Record) -> bool:
        return all(
            self._registry.evaluate(CriteriaOperator.LIKE, candidate.get(attr), pattern)
            for attr, pattern in self.patterns.items()
        )

    def to_dict(self) -> dict[str, Any]:
        return {"like": dict(self.patterns)}


class CriteriaFactory:
    """
    Parse a where clause into a criterion tree.

    The clause shape is resolved once here; evaluation never re-inspects
    the raw dictionaries.

    - a mapping is an implicit AND over its entries
    - ``or`` / ``and`` take a list of sub-clauses
    - ``not`` negates a sub-clause, ``like`` maps attributes to patterns
    - a list value is an IN filter
    - a mapping value with a known modifier key is a set of modifiers
    - anything else is a literal equality filter
    """

    @staticmethod
    def from_where(
        where: Mapping[str, Any] | None,
        *,
        registry: MemoryOperatorRegistry,
        schema: Mapping[str, Any] | None = None,
    ) -> BaseCriterion:
        criterion = CriteriaFactory._build_set(
            where, registry=registry, schema=schema, path="<where>"
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Parsed where clause: %r", criterion.to_dict())
        return criterion

    # ------------------------------------------------------------------ #
    # Internal: recursive build                                          #
    # ------------------------------------------------------------------ #

    @staticmethod
    def _build_set(
        clause: Any,
        *,
        registry: MemoryOperatorRegistry,
        schema: Mapping[str, Any] | None,
        path: str,
    ) -> BaseCriterion:
        if clause is None:
            return AndCriterion()
        if not isinstance(clause, Mapping):
            raise UnparseableWhereClauseError(
                f"Expected a dictionary, but got: {clause!r}",
                value=clause,
                path=path,
            )
        children = [
            CriteriaFactory._build_item(
                key, rhs, registry=registry, schema=schema, path=f"{path}.{key}"
            )
            for key, rhs in clause.items()
        ]
        if len(children) == 1:
            return children[0]
        return AndCriterion(*children)

    @staticmethod
    def _build_list(
        key: str,
        rhs: Any,
        *,
        registry: MemoryOperatorRegistry,
        schema: Mapping[str, Any] | None,
        path: str,
    ) -> list[BaseCriterion]:
        if not isinstance(rhs, list | tuple):
            raise UnparseableWhereClauseError(
                f"Expected a list at `{key}`, but got: {rhs!r}",
                key=key,
                value=rhs,
                path=path,
            )
        return [
            CriteriaFactory._build_set(
                sub, registry=registry, schema=schema, path=f"{path}[{idx}]"
            )
            for idx, sub in enumerate(rhs)
        ]

    @staticmethod
    def _build_item(
        key: str,
        rhs: Any,
        *,
        registry: MemoryOperatorRegistry,
        schema: Mapping[str, Any] | None,
        path: str,
    ) -> BaseCriterion:
        combinator = key.lower() if isinstance(key, str) else key

        if combinator == "or":
            return OrCriterion(
                *CriteriaFactory._build_list(
                    key, rhs, registry=registry, schema=schema, path=path
                )
            )
        if combinator == "and":
            return AndCriterion(
                *CriteriaFactory._build_list(
                    key, rhs, registry=registry, schema=schema, path=path
                )
            )
        if combinator == "not":
            return NotCriterion(
                CriteriaFactory._build_set(
                    rhs, registry=registry, schema=schema, path=path
                )
            )
        if combinator == "like":
            if not isinstance(rhs, Mapping):
                raise UnparseableWhereClauseError(
                    f"Expected a dictionary of patterns at `{key}`, but got: {rhs!r}",
                    key=key,
                    value=rhs,
                    path=path,
                )
            return LikeCriterion(rhs, registry=registry)

        if isinstance(rhs, list | tuple):
            return InListCriterion(key, rhs, registry=registry)

        if isinstance(rhs, Mapping) and any(k in SUB_ATTR_MODIFIERS for k in rhs):
            return CriteriaFactory._build_modifiers(
                key, rhs, registry=registry, schema=schema
            )

        return AttributeCriterion(
            key,
            CriteriaOperator.EQ,
            rhs,
            registry=registry,
            schema_type=schema_type_of(schema, key),
        )

    @staticmethod
    def _build_modifiers(
        attr: str,
        modifiers: Mapping[str, Any],
        *,
        registry: MemoryOperatorRegistry,
        schema: Mapping[str, Any] | None,
    ) -> BaseCriterion:
        children: list[BaseCriterion] = []
        for modifier, value in modifiers.items():
            op = MODIFIER_ALIASES.get(modifier)
            if op is None:
                raise InvalidModifierError(
                    modifier, sorted(MODIFIER_ALIASES), attribute=attr
                )
            if modifier in NIN_MODIFIERS and isinstance(value, list | tuple):
                children.append(NotInCriterion(attr, value, registry=registry))
                continue
            children.append(
                AttributeCriterion(
                    attr,
                    op,
                    value,
                    registry=registry,
                    schema_type=schema_type_of(schema, attr),
                )
            )
        if len(children) == 1:
            return children[0]
        return AndCriterion(*children)
