"""Field type model for document schemas."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

PRIMITIVE_TYPE_NAMES: tuple[str, ...] = (
    "string",
    "number",
    "boolean",
    "null",
    "timestamp",
    "bytes",
    "geopoint",
    "reference",
)

_TOKEN_PATTERN = re.compile(
    r"""\s*(?:
        (?P<string>'[^']*'|"[^"]*")
        |(?P<number>-?\d+(?:\.\d+)?)
        |(?P<name>[A-Za-z_][A-Za-z0-9_]*)
        |(?P<symbol>\[\]|[|<>()])
    )""",
    re.VERBOSE,
)


class TypeExpressionError(Exception):
    """Raised when a field type expression cannot be parsed."""


@dataclass(frozen=True)
class PrimitiveType:
    """One of the scalar value types a document store returns."""

    name: str


@dataclass(frozen=True)
class LiteralType:
    """A single concrete value, e.g. `'admin'`, `42` or `true`."""

    base: str
    value: str | int | float | bool

    @classmethod
    def of(cls, value: str | int | float | bool) -> LiteralType:
        if isinstance(value, bool):
            return cls(base="boolean", value=value)
        if isinstance(value, int | float):
            return cls(base="number", value=value)
        return cls(base="string", value=value)


@dataclass(frozen=True)
class ArrayType:
    """Homogeneous array whose items have `element` type."""

    element: FieldType


@dataclass(frozen=True)
class MapType:
    """Map value. Without fields it accepts any keys."""

    fields: tuple[tuple[str, FieldType], ...] = ()

    def field_map(self) -> dict[str, FieldType]:
        return dict(self.fields)


@dataclass(frozen=True)
class UnionType:
    """Union of alternatives. An empty union is the bottom type."""

    members: frozenset[FieldType]


@dataclass(frozen=True)
class AnyType:
    """Unknown value type, compatible with every other type."""


FieldType = PrimitiveType | LiteralType | ArrayType | MapType | UnionType | AnyType

ANY = AnyType()
NEVER = UnionType(members=frozenset())


def union_of(types: Iterable[FieldType]) -> FieldType:
    """Build a flattened union, collapsing single members and absorbing `any`."""
    flattened: set[FieldType] = set()
    for item in types:
        if isinstance(item, AnyType):
            return ANY
        flattened.update(members_of(item))
    if len(flattened) == 1:
        return next(iter(flattened))
    return UnionType(members=frozenset(flattened))


def members_of(field_type: FieldType) -> tuple[FieldType, ...]:
    """Return union members, or the type itself for non-unions."""
    if isinstance(field_type, UnionType):
        return tuple(field_type.members)
    return (field_type,)


def map_type(fields: Mapping[str, FieldType]) -> MapType:
    return MapType(fields=tuple(sorted(fields.items())))


def parse_type_expression(text: str) -> FieldType:
    """Parse a type expression such as `string | null` or `array<'a' | 'b'>`."""
    if not isinstance(text, str) or not text.strip():
        raise TypeExpressionError("Type expression must be a non-empty string.")
    parser = _TypeExpressionParser(_tokenize(text), text)
    parsed = parser.parse_union()
    if not parser.at_end():
        raise TypeExpressionError(f"Unexpected trailing input in type expression: {text!r}")
    return parsed


def type_from_declaration(value: Any) -> FieldType:
    """Convert a declared field value (expression string or nested mapping) into a type."""
    if isinstance(value, str):
        return parse_type_expression(value)
    if isinstance(value, Mapping):
        nested: dict[str, FieldType] = {}
        for key, child in value.items():
            if not isinstance(key, str):
                raise TypeExpressionError(f"Map field names must be strings, got {key!r}.")
            nested[key] = type_from_declaration(child)
        return map_type(nested)
    raise TypeExpressionError(
        f"Field types must be expression strings or mappings, got {type(value).__name__}."
    )


def type_of_value(value: Any) -> FieldType:
    """Infer the field type of a concrete value passed to a query predicate."""
    if isinstance(value, PrimitiveType | LiteralType | ArrayType | MapType | UnionType | AnyType):
        return value
    if value is None:
        return PrimitiveType("null")
    if isinstance(value, bool | int | float | str):
        return LiteralType.of(value)
    if isinstance(value, bytes | bytearray):
        return PrimitiveType("bytes")
    if isinstance(value, datetime | date):
        return PrimitiveType("timestamp")
    if isinstance(value, Mapping):
        return map_type({str(key): type_of_value(child) for key, child in value.items()})
    if isinstance(value, Sequence):
        return ArrayType(element=union_of(type_of_value(item) for item in value))
    return ANY


def render_type(field_type: FieldType) -> str:
    """Render a field type as a readable expression."""
    if isinstance(field_type, AnyType):
        return "any"
    if isinstance(field_type, PrimitiveType):
        return field_type.name
    if isinstance(field_type, LiteralType):
        if isinstance(field_type.value, bool):
            return "true" if field_type.value else "false"
        if isinstance(field_type.value, str):
            return f"'{field_type.value}'"
        return str(field_type.value)
    if isinstance(field_type, ArrayType):
        return f"array<{render_type(field_type.element)}>"
    if isinstance(field_type, MapType):
        if not field_type.fields:
            return "map"
        inner = ", ".join(f"{name}: {render_type(child)}" for name, child in field_type.fields)
        return "{" + inner + "}"
    if not field_type.members:
        return "never"
    return " | ".join(sorted(render_type(member) for member in field_type.members))


def _tokenize(text: str) -> list[tuple[str, str]]:
    tokens: list[tuple[str, str]] = []
    position = 0
    while position < len(text):
        if not text[position:].strip():
            break
        match = _TOKEN_PATTERN.match(text, position)
        if match is None or match.end() == position:
            raise TypeExpressionError(
                f"Invalid character in type expression {text!r} at offset {position}."
            )
        kind = match.lastgroup
        assert kind is not None
        tokens.append((kind, match.group(kind)))
        position = match.end()
    return tokens


class _TypeExpressionParser:
    """Recursive-descent parser over the token list of one expression."""

    def __init__(self, tokens: list[tuple[str, str]], source: str) -> None:
        self._tokens = tokens
        self._source = source
        self._index = 0

    def at_end(self) -> bool:
        return self._index >= len(self._tokens)

    def parse_union(self) -> FieldType:
        alternatives = [self._parse_postfix()]
        while self._peek_symbol("|"):
            self._index += 1
            alternatives.append(self._parse_postfix())
        if len(alternatives) == 1:
            return alternatives[0]
        return union_of(alternatives)

    def _parse_postfix(self) -> FieldType:
        parsed = self._parse_atom()
        while self._peek_symbol("[]"):
            self._index += 1
            parsed = ArrayType(element=parsed)
        return parsed

    def _parse_atom(self) -> FieldType:
        kind, value = self._next()
        if kind == "string":
            return LiteralType.of(value[1:-1])
        if kind == "number":
            return LiteralType.of(float(value) if "." in value else int(value))
        if kind == "symbol" and value == "(":
            inner = self.parse_union()
            self._expect_symbol(")")
            return inner
        if kind == "name":
            return self._parse_named(value)
        raise TypeExpressionError(f"Unexpected {value!r} in type expression {self._source!r}.")

    def _parse_named(self, name: str) -> FieldType:
        if name == "true":
            return LiteralType.of(True)
        if name == "false":
            return LiteralType.of(False)
        if name == "any":
            return ANY
        if name == "map":
            return MapType()
        if name == "array":
            self._expect_symbol("<")
            element = self.parse_union()
            self._expect_symbol(">")
            return ArrayType(element=element)
        if name in PRIMITIVE_TYPE_NAMES:
            return PrimitiveType(name)
        raise TypeExpressionError(f"Unknown type name {name!r} in {self._source!r}.")

    def _next(self) -> tuple[str, str]:
        if self.at_end():
            raise TypeExpressionError(f"Unexpected end of type expression {self._source!r}.")
        token = self._tokens[self._index]
        self._index += 1
        return token

    def _peek_symbol(self, symbol: str) -> bool:
        if self.at_end():
            return False
        kind, value = self._tokens[self._index]
        return kind == "symbol" and value == symbol

    def _expect_symbol(self, symbol: str) -> None:
        kind, value = self._next()
        if kind != "symbol" or value != symbol:
            raise TypeExpressionError(
                f"Expected {symbol!r} but found {value!r} in type expression {self._source!r}."
            )
