"""
Criteria exception hierarchy with fuzzy-match suggestions.

All exceptions inherit from ``CriteriaError`` and provide
``to_dict()`` for API-friendly error responses.
"""

from __future__ import annotations

import pprint
from difflib import get_close_matches
from typing import Any

_WHERE_PREFIX = "Could not parse the provided `where` clause. "
_SORT_PREFIX = "Could not parse the provided `sort` clause. "


def _inspect(value: Any) -> str:
    return pprint.pformat(value, compact=True)


class CriteriaError(Exception):
    """Base exception for all criteria errors."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class ValidationError(CriteriaError):
    """Clause structure validation failed."""

    def __init__(self, message: str, path: str | None = None) -> None:
        self.message = message
        self.path = path
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "VALIDATION_ERROR",
            "message": self.message,
            "path": self.path,
        }


class UnparseableWhereClauseError(ValidationError):
    """
    A ``where`` clause is structurally illegal.

    Carries the offending key, the offending value and the dotted path
    of the clause fragment so callers can build an actionable message.
    """

    code = "E_WHERE_CLAUSE_UNPARSEABLE"

    def __init__(
        self,
        details: str,
        *,
        key: str | None = None,
        value: Any = None,
        path: str | None = None,
    ) -> None:
        self.details = details
        self.key = key
        self.value = value
        super().__init__(_WHERE_PREFIX + details, path=path)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "key": self.key,
            "value": _inspect(self.value),
            "path": self.path,
        }


class UnparseableSortClauseError(ValidationError):
    """A ``sort`` clause is structurally illegal."""

    code = "E_SORT_CLAUSE_UNPARSEABLE"

    def __init__(self, details: str, *, value: Any = None) -> None:
        self.details = details
        self.value = value
        super().__init__(_SORT_PREFIX + details, path="<sort>")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "value": _inspect(self.value),
        }


class MissingClauseError(CriteriaError):
    """A clause validator was called without a clause."""

    def __init__(self, clause: str) -> None:
        self.clause = clause
        super().__init__(f"Cannot validate a `{clause}` clause that is None.")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "CLAUSE_MISSING",
            "clause": self.clause,
        }


class InvalidModifierError(CriteriaError):
    """
    Unknown sub-attribute modifier.

    Provides fuzzy-matched suggestions for likely intended modifiers.
    """

    def __init__(
        self,
        modifier: str,
        valid_modifiers: list[str],
        attribute: str | None = None,
    ) -> None:
        self.modifier = modifier
        self.attribute = attribute
        self.valid_modifiers = valid_modifiers
        self.suggestions = get_close_matches(
            str(modifier), valid_modifiers, n=3, cutoff=0.6
        )

        message = f"Invalid query syntax: unknown modifier '{modifier}'"
        if attribute is not None:
            message += f" for attribute '{attribute}'"
        message += "."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "INVALID_MODIFIER",
            "modifier": self.modifier,
            "attribute": self.attribute,
            "suggestions": self.suggestions,
            "valid_modifiers": sorted(self.valid_modifiers),
        }


class InvalidPatternArgumentError(CriteriaError):
    """A pattern is neither a string nor a compiled regular expression."""

    def __init__(self, pattern: Any) -> None:
        self.pattern = pattern
        super().__init__(
            f"Unexpected match pattern: {pattern!r}. "
            "Please use a regular expression or a string."
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "INVALID_PATTERN_ARGUMENT",
            "pattern": repr(self.pattern),
            "pattern_type": type(self.pattern).__name__,
        }
