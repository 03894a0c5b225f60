"""Narrowing of schema unions by query predicates and field projections."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from docstore_schema.path_resolution.schema_union import SchemaUnion
from docstore_schema.schema_tree.field_types import (
    ANY,
    ArrayType,
    FieldType,
    members_of,
    type_of_value,
)
from docstore_schema.schema_tree.tree_models import DocumentSchema

from .filter_operators import Operator, Predicate
from .type_compatibility import array_element_types, is_subtype, types_overlap

_LOGGER = logging.getLogger(__name__)

CompareType = FieldType | Sequence[FieldType] | None


def filter_union(
    union: SchemaUnion,
    field: Any,
    operator: Operator | str,
    compare_type: CompareType = None,
) -> SchemaUnion:
    """Keep the variants of `union` that could satisfy `field <operator> compare_type`.

    Every operator first requires the variant to declare `field`. A field that no
    variant declares, or a field path that is not a string, cannot be narrowed
    statically and yields the generic union. Declarations are looked up in the
    union the filtering started from, so predicates apply in any order with the
    same result.

    Args:
        union: Candidate document schemas.
        field: Top-level or dotted field name.
        operator: Operator member or its query symbol.
        compare_type: Field type of the comparison value. For `in`, `not-in` and
            `array-contains-any` a sequence of candidate types or an array type.

    Returns:
        The narrowed union. Generic inputs and empty resolution results are
        returned unchanged.
    """
    resolved_operator = Operator.from_symbol(operator)
    if union.is_generic or not union.declared_schemas:
        return union
    if not isinstance(field, str) or not any(
        schema.has_field(field) for schema in union.declared_schemas
    ):
        _LOGGER.debug("Field %r is not declared by any variant; widening to generic.", field)
        return SchemaUnion.generic()

    matches = _matcher_for(resolved_operator, compare_type)

    def keep(schema: DocumentSchema) -> bool:
        field_type = schema.field_type_at(field)
        return field_type is not None and matches(field_type)

    narrowed = union.filtered(keep)
    _LOGGER.debug(
        "Filter %s %s kept %d of %d variants.",
        field,
        resolved_operator.value,
        len(narrowed),
        len(union),
    )
    return narrowed


def narrow(union: SchemaUnion, predicate: Predicate) -> SchemaUnion:
    return filter_union(union, predicate.field, predicate.operator, predicate.compare_type)


def narrow_all(union: SchemaUnion, predicates: Iterable[Predicate]) -> SchemaUnion:
    narrowed = union
    for predicate in predicates:
        narrowed = narrow(narrowed, predicate)
    return narrowed


def predicate_from_value(field: Any, operator: Operator | str, value: Any = None) -> Predicate:
    """Build a predicate, inferring the comparison type from a concrete query value."""
    resolved_operator = Operator.from_symbol(operator)
    if resolved_operator == Operator.HAS_FIELD:
        return Predicate(field=field, operator=resolved_operator)
    compare_type: FieldType | tuple[FieldType, ...]
    if resolved_operator.takes_candidates and _is_value_sequence(value):
        compare_type = tuple(type_of_value(item) for item in value)
    else:
        compare_type = type_of_value(value)
    return Predicate(field=field, operator=resolved_operator, compare_type=compare_type)


def project(union: SchemaUnion, fields: Sequence[str]) -> SchemaUnion:
    """Restrict every variant to the selected top-level fields.

    Selecting nothing leaves every variant with an empty schema. Selecting a field
    no variant declares yields the generic union.
    """
    if union.is_generic or not union.declared_schemas:
        return union
    selected = set(fields)
    declared = union.declared_field_names()
    if any(not isinstance(name, str) or name not in declared for name in selected):
        return SchemaUnion.generic()
    return union.mapped(lambda schema: schema.restricted_to(selected))


def _matcher_for(operator: Operator, compare_type: CompareType) -> Callable[[FieldType], bool]:
    if operator in (Operator.HAS_FIELD, Operator.NOT_IN):
        return lambda field_type: True
    if operator == Operator.NOT_EQUAL:
        single = _single_type(compare_type)
        return lambda field_type: not is_subtype(field_type, single)
    if operator == Operator.IN:
        candidates = _candidate_types(compare_type)
        return lambda field_type: any(
            types_overlap(field_type, candidate) for candidate in candidates
        )
    if operator == Operator.ARRAY_CONTAINS:
        single = _single_type(compare_type)
        return lambda field_type: any(
            types_overlap(element, single) for element in array_element_types(field_type)
        )
    if operator == Operator.ARRAY_CONTAINS_ANY:
        candidates = _candidate_types(compare_type)
        return lambda field_type: any(
            types_overlap(element, candidate)
            for element in array_element_types(field_type)
            for candidate in candidates
        )
    single = _single_type(compare_type)
    return lambda field_type: types_overlap(field_type, single)


def _single_type(compare_type: CompareType) -> FieldType:
    if compare_type is None:
        return ANY
    if isinstance(compare_type, tuple | list):
        raise TypeError("This operator compares against a single field type.")
    return compare_type


def _candidate_types(compare_type: CompareType) -> tuple[FieldType, ...]:
    if compare_type is None:
        return (ANY,)
    if isinstance(compare_type, tuple | list):
        return tuple(compare_type)
    if isinstance(compare_type, ArrayType):
        return members_of(compare_type.element)
    return members_of(compare_type)


def _is_value_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, str | bytes | bytearray)
