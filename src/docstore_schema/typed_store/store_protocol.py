"""Boundary to the underlying document-store client."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Any, Protocol


class NodeKind(str, Enum):
    """Kind of node requested from the client."""

    COLLECTION = "collection"
    DOCUMENT = "document"
    COLLECTION_GROUP = "collection_group"


class DocumentStoreClient(Protocol):
    """Protocol implemented by real and fake document-store clients.

    `parent` is the handle returned by a previous `get_child` call, or None for
    the database root. A document `name` of None asks for a generated id.
    Handles are opaque to this package.
    """

    def get_child(self, parent: Any | None, kind: NodeKind, name: str | None) -> Any: ...

    def list_children(self, parent: Any | None) -> Iterable[str]: ...
