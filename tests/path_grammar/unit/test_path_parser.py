"""Path parser tests."""

from __future__ import annotations

import pytest
from docstore_schema.path_grammar.path_models import PathKind, SegmentKind
from docstore_schema.path_grammar.path_parser import (
    MalformedPathError,
    PathKindMismatchError,
    join_path_segments,
    parse_path,
    require_path_kind,
    validate_collection_id,
)


def test_string_and_sequence_inputs_parse_alike() -> None:
    assert parse_path("users/u1/posts") == parse_path(["users", "u1", "posts"])


def test_parity_determines_kind() -> None:
    assert parse_path("users").kind == PathKind.COLLECTION
    assert parse_path("users/u1").kind == PathKind.DOCUMENT
    assert parse_path(["users", "u1", "posts"]).kind == PathKind.COLLECTION


def test_braced_segments_are_wildcards_only_when_allowed() -> None:
    parsed = parse_path("users/{uid}")
    literal = parse_path("users/{uid}", allow_wildcards=False)

    assert [segment.kind for segment in parsed.segments] == [
        SegmentKind.LITERAL,
        SegmentKind.WILDCARD,
    ]
    assert parsed.has_wildcards
    assert not literal.has_wildcards
    assert literal.texts == ("users", "{uid}")


def test_pre_split_segment_with_separator_is_malformed() -> None:
    with pytest.raises(MalformedPathError):
        parse_path(["a/b", "c"])


@pytest.mark.parametrize("path", ["", "/users", "users/", "users//u1", [], ["users", ""]])
def test_empty_segments_are_malformed(path: str | list[str]) -> None:
    with pytest.raises(MalformedPathError):
        parse_path(path)


def test_non_string_segment_is_malformed() -> None:
    with pytest.raises(MalformedPathError):
        parse_path(["users", 3])  # type: ignore[list-item]


def test_require_path_kind_reports_parity() -> None:
    with pytest.raises(PathKindMismatchError, match="even number"):
        require_path_kind(parse_path(["users"]), PathKind.DOCUMENT)

    parsed = parse_path("users/u1")
    assert require_path_kind(parsed, PathKind.DOCUMENT) is parsed


def test_join_path_segments() -> None:
    assert join_path_segments(["users", "u1"]) == "users/u1"
    with pytest.raises(MalformedPathError):
        join_path_segments(["users/u1"])


def test_validate_collection_id() -> None:
    assert validate_collection_id("posts") == "posts"
    for invalid in ("", "users/posts"):
        with pytest.raises(MalformedPathError):
            validate_collection_id(invalid)
