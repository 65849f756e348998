"""Pattern operators: like, contains, startsWith, endsWith."""

from __future__ import annotations

import re
from typing import Any

from ..coercion import is_number, stringify
from ..evaluator import MemoryOperator
from ..exceptions import InvalidPatternArgumentError
from ..operators import CriteriaOperator

# A literal percent sign is written as three in a row.
ESCAPED_PERCENT = "%%%"


def sql_like_to_regex(pattern: str) -> re.Pattern[str]:
    """
    Convert a SQL LIKE pattern to an anchored, case-insensitive regex.

    ``%`` matches zero or more characters; ``%%%`` matches a literal
    ``%``. Everything else is matched literally.
    """
    chunks = pattern.split(ESCAPED_PERCENT)
    translated = [
        ".*".join(re.escape(part) for part in chunk.split("%")) for chunk in chunks
    ]
    return re.compile(re.escape("%").join(translated), re.IGNORECASE | re.DOTALL)


def like_match(value: Any, pattern: str | re.Pattern[str]) -> bool:
    """
    Match *value* against a SQL LIKE pattern or a compiled regex.

    String patterns must match the whole value; a compiled regex is
    searched as-is. Numbers and booleans are matched by their string
    form. Mappings, sequences and ``None`` never match.

    Raises:
        InvalidPatternArgumentError: If *pattern* is neither a string
            nor a compiled regular expression.
    """
    if isinstance(pattern, re.Pattern):
        regex, anchored = pattern, False
    elif isinstance(pattern, str):
        regex, anchored = sql_like_to_regex(pattern), True
    else:
        raise InvalidPatternArgumentError(pattern)

    if isinstance(value, bool) or is_number(value):
        value = stringify(value)
    elif not isinstance(value, str):
        return False

    if anchored:
        return regex.fullmatch(value) is not None
    return regex.search(value) is not None


def _search_term(term: Any) -> str:
    """
    Text of a contains/startsWith/endsWith term.

    Only strings, numbers and booleans have a text form here. ``None``,
    mappings and sequences raise instead of turning into a pattern such
    as ``"%"`` that would match almost anything.

    Raises:
        InvalidPatternArgumentError: For any other term.
    """
    if isinstance(term, str):
        return term
    if isinstance(term, bool) or is_number(term):
        return stringify(term)
    raise InvalidPatternArgumentError(term)


def starts_with(value: Any, term: Any) -> bool:
    return like_match(value, f"{_search_term(term)}%")


def ends_with(value: Any, term: Any) -> bool:
    return like_match(value, f"%{_search_term(term)}")


def contains(value: Any, term: Any) -> bool:
    return like_match(value, f"%{_search_term(term)}%")


class LikeOperator(MemoryOperator):
    @property
    def name(self) -> CriteriaOperator:
        return CriteriaOperator.LIKE

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if isinstance(condition_value, bool) or is_number(condition_value):
            condition_value = stringify(condition_value)
        return like_match(field_value, condition_value)


class ContainsOperator(MemoryOperator):
    @property
    def name(self) -> CriteriaOperator:
        return CriteriaOperator.CONTAINS

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return contains(field_value, condition_value)


class StartsWithOperator(MemoryOperator):
    @property
    def name(self) -> CriteriaOperator:
        return CriteriaOperator.STARTSWITH

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return starts_with(field_value, condition_value)


class EndsWithOperator(MemoryOperator):
    @property
    def name(self) -> CriteriaOperator:
        return CriteriaOperator.ENDSWITH

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return ends_with(field_value, condition_value)
