"""Query narrowing exports."""

from .filter_operators import Operator, OperatorError, Predicate
from .schema_filter import filter_union, narrow, narrow_all, predicate_from_value, project
from .type_compatibility import array_element_types, is_subtype, types_overlap

__all__ = [
    "Operator",
    "OperatorError",
    "Predicate",
    "filter_union",
    "narrow",
    "narrow_all",
    "predicate_from_value",
    "project",
    "array_element_types",
    "is_subtype",
    "types_overlap",
]
