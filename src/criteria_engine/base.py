from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

Record = Mapping[str, Any]


class BaseCriterion(ABC):
    """Base class for criterion nodes with logic operator support."""

    @abstractmethod
    def is_satisfied_by(self, candidate: Record) -> bool: ...

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Render the node back as an equivalent where clause."""
        ...

    def __and__(self, other: BaseCriterion) -> AndCriterion:
        return AndCriterion(self, other)

    def __or__(self, other: BaseCriterion) -> OrCriterion:
        return OrCriterion(self, other)

    def __invert__(self) -> NotCriterion:
        return NotCriterion(self)

    def merge(self, other: BaseCriterion) -> AndCriterion:
        """Merge with another criterion using logical AND."""
        return AndCriterion(self, other)


class AndCriterion(BaseCriterion):
    """Logical AND; with no children it matches everything."""

    def __init__(self, *criteria: BaseCriterion) -> None:
        self.criteria = criteria

    def is_satisfied_by(self, candidate: Record) -> bool:
        return all(c.is_satisfied_by(candidate) for c in self.criteria)

    def to_dict(self) -> dict[str, Any]:
        return {"and": [c.to_dict() for c in self.criteria]}


class OrCriterion(BaseCriterion):
    """Logical OR; with no children it matches nothing."""

    def __init__(self, *criteria: BaseCriterion) -> None:
        self.criteria = criteria

    def is_satisfied_by(self, candidate: Record) -> bool:
        return any(c.is_satisfied_by(candidate) for c in self.criteria)

    def to_dict(self) -> dict[str, Any]:
        return {"or": [c.to_dict() for c in self.criteria]}


class NotCriterion(BaseCriterion):
    """Logical NOT composite."""

    def __init__(self, criterion: BaseCriterion) -> None:
        self.criterion = criterion

    def is_satisfied_by(self, candidate: Record) -> bool:
        return not self.criterion.is_satisfied_by(candidate)

    def to_dict(self) -> dict[str, Any]:
        return {"not": self.criterion.to_dict()}
