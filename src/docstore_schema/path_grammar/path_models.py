"""Path grammar entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

PATH_SEPARATOR = "/"


class PathKind(str, Enum):
    """Whether a path names a collection (odd length) or a document (even length)."""

    COLLECTION = "collection"
    DOCUMENT = "document"


class SegmentKind(str, Enum):
    """Literal name or wildcard matching every node at its position."""

    LITERAL = "literal"
    WILDCARD = "wildcard"


@dataclass(frozen=True)
class PathSegment:
    """One parsed path segment."""

    text: str
    kind: SegmentKind

    @property
    def is_wildcard(self) -> bool:
        return self.kind == SegmentKind.WILDCARD


@dataclass(frozen=True)
class ParsedPath:
    """Validated segment sequence; its kind follows from segment-count parity."""

    segments: tuple[PathSegment, ...]

    @property
    def kind(self) -> PathKind:
        return PathKind.COLLECTION if len(self.segments) % 2 == 1 else PathKind.DOCUMENT

    @property
    def texts(self) -> tuple[str, ...]:
        return tuple(segment.text for segment in self.segments)

    @property
    def text(self) -> str:
        return PATH_SEPARATOR.join(self.texts)

    @property
    def has_wildcards(self) -> bool:
        return any(segment.is_wildcard for segment in self.segments)

    def __len__(self) -> int:
        return len(self.segments)
