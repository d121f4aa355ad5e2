"""Shared interface for the in-memory and SQLite indexes."""

from __future__ import annotations

import os
from typing import Protocol, runtime_checkable

from tfidf_search.search.models import RankedDocument


@runtime_checkable
class SearchIndexProtocol(Protocol):
    """Capability surface callers depend on, regardless of storage backend."""

    @property
    def document_count(self) -> int:  # pragma: no cover - Protocol only
        """Return the number of indexed documents."""

    def add_document(self, path: str | os.PathLike[str], content: str) -> None:  # pragma: no cover - Protocol only
        """Tokenize ``content`` and index it under ``path``."""

    def search_query(self, query: str) -> list[RankedDocument]:  # pragma: no cover - Protocol only
        """Score every indexed document against ``query``, best first."""
