from .ast import (
    AttributeCriterion,
    CriteriaFactory,
    InListCriterion,
    LikeCriterion,
    NotInCriterion,
)
from .base import AndCriterion, BaseCriterion, NotCriterion, OrCriterion
from .evaluator import MemoryOperator, MemoryOperatorRegistry
from .exceptions import (
    CriteriaError,
    InvalidModifierError,
    InvalidPatternArgumentError,
    MissingClauseError,
    UnparseableSortClauseError,
    UnparseableWhereClauseError,
    ValidationError,
)
from .filters import limit, matches, skip, where_filter
from .operators import CriteriaOperator
from .operators_memory import build_default_registry, compare, like_match
from .projection import select
from .query import Criteria
from .sort import sort_tuples
from .validators import (
    normalize_sort_clause,
    validate_sort_clause,
    validate_where_clause,
)

__all__ = [
    # Core types
    "CriteriaOperator",
    "CriteriaFactory",
    "BaseCriterion",
    "AttributeCriterion",
    "InListCriterion",
    "NotInCriterion",
    "LikeCriterion",
    "AndCriterion",
    "OrCriterion",
    "NotCriterion",
    # Query object
    "Criteria",
    # Stages
    "where_filter",
    "matches",
    "sort_tuples",
    "select",
    "skip",
    "limit",
    # Comparator / pattern matcher
    "compare",
    "like_match",
    # Validation
    "validate_where_clause",
    "validate_sort_clause",
    "normalize_sort_clause",
    # Evaluator / strategy
    "MemoryOperator",
    "MemoryOperatorRegistry",
    "build_default_registry",
    # Exceptions
    "CriteriaError",
    "ValidationError",
    "UnparseableWhereClauseError",
    "UnparseableSortClauseError",
    "MissingClauseError",
    "InvalidModifierError",
    "InvalidPatternArgumentError",
]
