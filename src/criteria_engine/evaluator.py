"""
In-memory operator evaluation strategy.

Provides the MemoryOperator protocol and a registry that maps
CriteriaOperator → evaluation function.

New operators are added by subclassing MemoryOperator and
registering via ``register()``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from .exceptions import InvalidModifierError

if TYPE_CHECKING:
    from .operators import CriteriaOperator


class MemoryOperator(ABC):
    """
    Strategy interface for in-memory operator evaluation.

    Each operator is an isolated class with a single ``evaluate`` method.
    """

    @property
    @abstractmethod
    def name(self) -> CriteriaOperator:
        """The operator this strategy handles."""
        ...

    @abstractmethod
    def evaluate(
        self,
        field_value: Any,
        condition_value: Any,
    ) -> bool:
        """
        Evaluate the operator against concrete values.

        Args:
            field_value: The value read from the tuple.
            condition_value: The value given in the where clause.

        Returns:
            True if the condition is satisfied.
        """
        ...


class MemoryOperatorRegistry:
    """
    Registry of MemoryOperator instances keyed by CriteriaOperator.

    Usage::

        registry = MemoryOperatorRegistry()
        registry.register(EqualOperator())

        result = registry.evaluate(CriteriaOperator.EQ, actual, expected)
    """

    def __init__(self) -> None:
        self._operators: dict[CriteriaOperator, MemoryOperator] = {}

    # -- registration --------------------------------------------------------

    def register(self, operator: MemoryOperator) -> None:
        """Register an operator strategy instance, replacing any previous one."""
        self._operators[operator.name] = operator

    def register_all(self, *operators: MemoryOperator) -> None:
        for op in operators:
            self.register(op)

    def unregister(self, name: CriteriaOperator) -> None:
        self._operators.pop(name, None)

    # -- evaluation ----------------------------------------------------------

    def evaluate(
        self,
        name: CriteriaOperator,
        field_value: Any,
        condition_value: Any,
    ) -> bool:
        """
        Evaluate the operator registered under *name*.

        Raises:
            InvalidModifierError: If the operator is not registered.
        """
        op = self._operators.get(name)
        if op is None:
            raise InvalidModifierError(
                str(getattr(name, "value", name)),
                [o.value for o in self._operators],
            )
        return op.evaluate(field_value, condition_value)
