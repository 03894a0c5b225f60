"""Path parsing and parity checks."""

from __future__ import annotations

from collections.abc import Sequence

from .path_models import PATH_SEPARATOR, ParsedPath, PathKind, PathSegment, SegmentKind

WILDCARD_OPEN = "{"
WILDCARD_CLOSE = "}"

PathInput = str | Sequence[str] | ParsedPath


class PathError(Exception):
    """Base class for structural path errors."""


class MalformedPathError(PathError):
    """Raised when a path or segment cannot be split into valid segments."""


class PathKindMismatchError(PathError):
    """Raised when a document path is used as a collection path or vice versa."""


def parse_path(path: PathInput, *, allow_wildcards: bool = True) -> ParsedPath:
    """Parse a `/`-separated string or a pre-split segment sequence.

    Segments wrapped in `{` `}` become wildcards when `allow_wildcards` is set,
    otherwise they are literal names. A pre-split segment containing `/` or an
    empty segment raises MalformedPathError.
    """
    if isinstance(path, ParsedPath):
        return path
    if isinstance(path, str):
        raw_segments = path.split(PATH_SEPARATOR)
    elif isinstance(path, Sequence):
        raw_segments = list(path)
        for raw in raw_segments:
            if not isinstance(raw, str):
                raise MalformedPathError(f"Path segments must be strings, got {raw!r}.")
            if PATH_SEPARATOR in raw:
                raise MalformedPathError(
                    f"Path segment '{raw}' must not contain '{PATH_SEPARATOR}'."
                )
    else:
        raise MalformedPathError(f"Unsupported path value: {path!r}")

    if not raw_segments:
        raise MalformedPathError("Path must contain at least one segment.")
    if any(not raw for raw in raw_segments):
        joined = PATH_SEPARATOR.join(raw_segments)
        raise MalformedPathError(f"Path '{joined}' has an empty segment.")

    return ParsedPath(
        segments=tuple(_parse_segment(raw, allow_wildcards) for raw in raw_segments)
    )


def require_path_kind(path: ParsedPath, expected: PathKind) -> ParsedPath:
    """Return `path` unchanged, or raise PathKindMismatchError on a parity mismatch."""
    if path.kind != expected:
        parity = "odd" if expected == PathKind.COLLECTION else "even"
        raise PathKindMismatchError(
            f"'{path.text}' is a {path.kind.value} path with {len(path)} segments; "
            f"a {expected.value} path needs an {parity} number of segments."
        )
    return path


def join_path_segments(segments: Sequence[str]) -> str:
    return PATH_SEPARATOR.join(parse_path(segments, allow_wildcards=False).texts)


def validate_collection_id(collection_id: str) -> str:
    """Validate a collection-group identifier, which is a single segment."""
    if not isinstance(collection_id, str) or not collection_id:
        raise MalformedPathError("Collection group id must be a non-empty string.")
    if PATH_SEPARATOR in collection_id:
        raise MalformedPathError(
            f"Collection group id '{collection_id}' must not contain '{PATH_SEPARATOR}'."
        )
    return collection_id


def is_wildcard_text(text: str) -> bool:
    return len(text) >= 2 and text.startswith(WILDCARD_OPEN) and text.endswith(WILDCARD_CLOSE)


def _parse_segment(raw: str, allow_wildcards: bool) -> PathSegment:
    if allow_wildcards and is_wildcard_text(raw):
        return PathSegment(text=raw, kind=SegmentKind.WILDCARD)
    return PathSegment(text=raw, kind=SegmentKind.LITERAL)
