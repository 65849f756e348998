"""
In-memory operator implementations.

Provides concrete MemoryOperator subclasses for each comparison and
pattern CriteriaOperator and a factory function to create registries.

Usage::

    from criteria_engine.operators_memory import build_default_registry

    registry = build_default_registry()
    result = registry.evaluate(CriteriaOperator.EQ, actual, expected)
"""

from __future__ import annotations

from ..evaluator import MemoryOperatorRegistry
from .standard import (
    EqualOperator,
    GreaterEqualOperator,
    GreaterThanOperator,
    LessEqualOperator,
    LessThanOperator,
    NotEqualOperator,
    compare,
)
from .string import (
    ContainsOperator,
    EndsWithOperator,
    LikeOperator,
    StartsWithOperator,
    like_match,
    sql_like_to_regex,
)


def build_default_registry() -> MemoryOperatorRegistry:
    """
    Create a registry with all built-in operators.

    Each call returns a fresh registry, so callers may register or
    unregister operators without affecting anyone else.

    Example:
        >>> registry = build_default_registry()
        >>> registry.evaluate(CriteriaOperator.EQ, "Kermit", "kermit")
        True
    """
    registry = MemoryOperatorRegistry()
    registry.register_all(
        # Comparison
        EqualOperator(),
        NotEqualOperator(),
        GreaterThanOperator(),
        LessThanOperator(),
        GreaterEqualOperator(),
        LessEqualOperator(),
        # Pattern search
        LikeOperator(),
        ContainsOperator(),
        StartsWithOperator(),
        EndsWithOperator(),
    )
    return registry


__all__ = [
    "build_default_registry",
    "MemoryOperatorRegistry",
    "compare",
    "like_match",
    "sql_like_to_regex",
]
