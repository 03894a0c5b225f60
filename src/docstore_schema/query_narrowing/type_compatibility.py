"""Structural compatibility between field types."""

from __future__ import annotations

from docstore_schema.schema_tree.field_types import (
    AnyType,
    ArrayType,
    FieldType,
    LiteralType,
    MapType,
    PrimitiveType,
    UnionType,
    members_of,
)


def is_subtype(candidate: FieldType, target: FieldType) -> bool:
    """Return True when every value of `candidate` is also a value of `target`."""
    if isinstance(candidate, AnyType) or isinstance(target, AnyType):
        return True
    if isinstance(candidate, UnionType):
        return all(is_subtype(member, target) for member in candidate.members)
    if isinstance(target, UnionType):
        return any(is_subtype(candidate, member) for member in target.members)
    if isinstance(candidate, LiteralType):
        if isinstance(target, LiteralType):
            return candidate == target
        return isinstance(target, PrimitiveType) and target.name == candidate.base
    if isinstance(candidate, PrimitiveType):
        return isinstance(target, PrimitiveType) and target.name == candidate.name
    if isinstance(candidate, ArrayType):
        return isinstance(target, ArrayType) and is_subtype(candidate.element, target.element)
    if isinstance(candidate, MapType):
        return isinstance(target, MapType) and _is_map_subtype(candidate, target)
    return False


def types_overlap(left: FieldType, right: FieldType) -> bool:
    """Return True when some member of `left` and some member of `right` are related.

    Members are related when either one is a subtype of the other, so a declared
    `string` field overlaps the literal `'admin'` and vice versa. The empty union
    overlaps nothing.
    """
    return any(
        is_subtype(left_member, right_member) or is_subtype(right_member, left_member)
        for left_member in members_of(left)
        for right_member in members_of(right)
    )


def array_element_types(field_type: FieldType) -> tuple[FieldType, ...]:
    """Element types of the array members of `field_type`."""
    if isinstance(field_type, AnyType):
        return (field_type,)
    return tuple(
        member.element for member in members_of(field_type) if isinstance(member, ArrayType)
    )


def _is_map_subtype(candidate: MapType, target: MapType) -> bool:
    if not target.fields:
        return True
    if not candidate.fields:
        return False
    candidate_fields = candidate.field_map()
    return all(
        name in candidate_fields and is_subtype(candidate_fields[name], field_type)
        for name, field_type in target.fields
    )
