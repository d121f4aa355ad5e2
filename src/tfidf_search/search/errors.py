"""Exceptions raised by the search index backends."""

from __future__ import annotations


class SearchIndexError(Exception):
    """Base class for index failures surfaced to callers."""


class StorageError(SearchIndexError):
    """Raised when the persisted backend cannot open, migrate or run a statement."""

    def __init__(self, statement: str, detail: str) -> None:
        self.statement = " ".join(statement.split())
        self.detail = detail
        super().__init__(f"could not execute {self.statement!r}: {detail}")


class InvalidKeyError(SearchIndexError, ValueError):
    """Raised when a document path cannot be stored as UTF-8 text."""
