"""Schema union value produced by resolution and narrowing."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from docstore_schema.schema_tree.tree_models import DocumentSchema


@dataclass(frozen=True)
class SchemaVariant:
    """One candidate document schema and the declared paths it was found at."""

    schema: DocumentSchema
    origins: tuple[str, ...]


@dataclass(frozen=True)
class SchemaUnion:
    """Unordered set of candidate document schemas.

    Variants are deduplicated by structural schema equality. Origins are kept for
    reporting only and never take part in equality. Neither does `narrowed_from`,
    the variants a filtered union started from, which decides whether a field is
    declared at all. A generic union stands for "any document shape" and is what
    narrowing falls back to when a predicate cannot be related to a declared field.
    """

    schemas: frozenset[DocumentSchema] = frozenset()
    is_generic: bool = False
    origins: Mapping[DocumentSchema, tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({}), compare=False, repr=False
    )
    narrowed_from: frozenset[DocumentSchema] | None = field(
        default=None, compare=False, repr=False
    )

    @classmethod
    def empty(cls) -> SchemaUnion:
        return cls()

    @classmethod
    def generic(cls) -> SchemaUnion:
        return cls(is_generic=True)

    @classmethod
    def from_variants(cls, variants: Iterable[tuple[DocumentSchema, str]]) -> SchemaUnion:
        """Build a union from `(schema, origin path)` pairs."""
        collected: dict[DocumentSchema, list[str]] = {}
        for schema, origin in variants:
            origins = collected.setdefault(schema, [])
            if origin not in origins:
                origins.append(origin)
        return cls._from_collected(collected)

    @classmethod
    def _from_collected(
        cls,
        collected: Mapping[DocumentSchema, list[str]],
        narrowed_from: frozenset[DocumentSchema] | None = None,
    ) -> SchemaUnion:
        return cls(
            schemas=frozenset(collected),
            narrowed_from=narrowed_from,
            origins=MappingProxyType(
                {schema: tuple(sorted(origins)) for schema, origins in collected.items()}
            ),
        )

    @property
    def is_empty(self) -> bool:
        return not self.is_generic and not self.schemas

    @property
    def declared_schemas(self) -> frozenset[DocumentSchema]:
        """Schemas before any filtering, or the current ones for an unfiltered union."""
        return self.schemas if self.narrowed_from is None else self.narrowed_from

    @property
    def variants(self) -> tuple[SchemaVariant, ...]:
        """Variants in a deterministic order."""
        return tuple(
            SchemaVariant(schema=schema, origins=self.origins.get(schema, ()))
            for schema in sorted(self.schemas, key=DocumentSchema.sort_key)
        )

    def __iter__(self) -> Iterator[DocumentSchema]:
        return iter(variant.schema for variant in self.variants)

    def __len__(self) -> int:
        return len(self.schemas)

    def __contains__(self, schema: object) -> bool:
        return schema in self.schemas

    def union(self, other: SchemaUnion) -> SchemaUnion:
        if self.is_generic or other.is_generic:
            return SchemaUnion.generic()
        collected: dict[DocumentSchema, list[str]] = {}
        for source in (self, other):
            for schema in source.schemas:
                origins = collected.setdefault(schema, [])
                origins.extend(
                    origin for origin in source.origins.get(schema, ()) if origin not in origins
                )
        narrowed_from = None
        if self.narrowed_from is not None or other.narrowed_from is not None:
            narrowed_from = self.declared_schemas | other.declared_schemas
        return SchemaUnion._from_collected(collected, narrowed_from)

    def filtered(self, keep: Callable[[DocumentSchema], bool]) -> SchemaUnion:
        """Keep the variants for which `keep` returns True."""
        if self.is_generic:
            return self
        collected = {
            schema: list(self.origins.get(schema, ())) for schema in self.schemas if keep(schema)
        }
        return SchemaUnion._from_collected(collected, self.declared_schemas)

    def mapped(self, transform: Callable[[DocumentSchema], DocumentSchema]) -> SchemaUnion:
        """Replace each variant's schema, merging variants that become identical."""
        if self.is_generic:
            return self
        collected: dict[DocumentSchema, list[str]] = {}
        for variant in self.variants:
            origins = collected.setdefault(transform(variant.schema), [])
            origins.extend(origin for origin in variant.origins if origin not in origins)
        return SchemaUnion._from_collected(collected)

    def field_names(self) -> frozenset[str]:
        """Top-level field names declared by at least one variant."""
        return frozenset(name for schema in self.schemas for name in schema.field_names)

    def declared_field_names(self) -> frozenset[str]:
        """Top-level field names of the schemas this union was filtered from."""
        return frozenset(name for schema in self.declared_schemas for name in schema.field_names)
