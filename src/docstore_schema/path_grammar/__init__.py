"""Path grammar exports."""

from .path_models import PATH_SEPARATOR, ParsedPath, PathKind, PathSegment, SegmentKind
from .path_parser import (
    MalformedPathError,
    PathError,
    PathInput,
    PathKindMismatchError,
    is_wildcard_text,
    join_path_segments,
    parse_path,
    require_path_kind,
    validate_collection_id,
)

__all__ = [
    "PATH_SEPARATOR",
    "ParsedPath",
    "PathKind",
    "PathSegment",
    "SegmentKind",
    "MalformedPathError",
    "PathError",
    "PathInput",
    "PathKindMismatchError",
    "is_wildcard_text",
    "join_path_segments",
    "parse_path",
    "require_path_kind",
    "validate_collection_id",
]
