from enum import Enum


class CriteriaOperator(str, Enum):
    """Operators understood by the criteria language."""

    # Comparison
    EQ = "="
    NE = "!="
    GT = ">"
    LT = "<"
    GE = ">="
    LE = "<="

    # Pattern search
    LIKE = "like"
    CONTAINS = "contains"
    STARTSWITH = "startsWith"
    ENDSWITH = "endsWith"

    # Combinators
    AND = "and"
    OR = "or"
    NOT = "not"


# Keys whose presence marks a mapping as a set of sub-attribute modifiers.
SUB_ATTR_MODIFIERS: frozenset[str] = frozenset(
    {
        "equals",
        "not",
        "greaterThan",
        "lessThan",
        "greaterThanOrEqual",
        "lessThanOrEqual",
        "<",
        "<=",
        "!",
        ">",
        ">=",
        "startsWith",
        "endsWith",
        "contains",
        "like",
    }
)

# Every key accepted once a mapping is evaluated as attribute-scoped.
MODIFIER_ALIASES: dict[str, CriteriaOperator] = {
    "equals": CriteriaOperator.EQ,
    "equal": CriteriaOperator.EQ,
    "=": CriteriaOperator.EQ,
    "not": CriteriaOperator.NE,
    "!": CriteriaOperator.NE,
    "greaterThan": CriteriaOperator.GT,
    ">": CriteriaOperator.GT,
    "greaterThanOrEqual": CriteriaOperator.GE,
    ">=": CriteriaOperator.GE,
    "lessThan": CriteriaOperator.LT,
    "<": CriteriaOperator.LT,
    "lessThanOrEqual": CriteriaOperator.LE,
    "<=": CriteriaOperator.LE,
    "startsWith": CriteriaOperator.STARTSWITH,
    "endsWith": CriteriaOperator.ENDSWITH,
    "contains": CriteriaOperator.CONTAINS,
    "like": CriteriaOperator.LIKE,
}

# Modifiers that accept a list on the right-hand side ("not in").
NIN_MODIFIERS: frozenset[str] = frozenset({"not", "!"})

STRING_SEARCH_MODIFIERS: frozenset[str] = frozenset(
    {"like", "contains", "startsWith", "endsWith"}
)
