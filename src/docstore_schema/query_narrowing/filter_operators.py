"""Query filter operators and predicates."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from docstore_schema.schema_tree.field_types import FieldType


class OperatorError(Exception):
    """Raised when an operator symbol is not supported."""


class Operator(str, Enum):
    """Supported filter operators, valued by their query symbols."""

    HAS_FIELD = "has-field"
    EQUAL = "=="
    LESS_THAN = "<"
    LESS_THAN_OR_EQUAL = "<="
    GREATER_THAN = ">"
    GREATER_THAN_OR_EQUAL = ">="
    NOT_EQUAL = "!="
    IN = "in"
    NOT_IN = "not-in"
    ARRAY_CONTAINS = "array-contains"
    ARRAY_CONTAINS_ANY = "array-contains-any"

    @classmethod
    def from_symbol(cls, symbol: str | Operator) -> Operator:
        if isinstance(symbol, Operator):
            return symbol
        if isinstance(symbol, str):
            normalized = symbol.strip()
            for operator in cls:
                if operator.value == normalized:
                    return operator
        supported = ", ".join(operator.value for operator in cls)
        raise OperatorError(f"Unsupported filter operator {symbol!r}. Supported: {supported}.")

    @property
    def takes_candidates(self) -> bool:
        """Whether the comparison value is a collection of alternatives."""
        return self in _CANDIDATE_OPERATORS

    @property
    def is_ordering(self) -> bool:
        return self in _ORDERING_OPERATORS


_CANDIDATE_OPERATORS = frozenset({Operator.IN, Operator.NOT_IN, Operator.ARRAY_CONTAINS_ANY})
_ORDERING_OPERATORS = frozenset(
    {
        Operator.LESS_THAN,
        Operator.LESS_THAN_OR_EQUAL,
        Operator.GREATER_THAN,
        Operator.GREATER_THAN_OR_EQUAL,
    }
)


@dataclass(frozen=True)
class Predicate:
    """One `(field, operator, comparison type)` filter applied to a query.

    `field` is usually a top-level or dotted field name. Any other value stands
    for an opaque field path that cannot be checked against declared fields.
    """

    field: Any
    operator: Operator
    compare_type: FieldType | tuple[FieldType, ...] | None = None
