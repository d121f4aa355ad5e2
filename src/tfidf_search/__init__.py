"""Small full-text indexing and TF-IDF ranking engine."""

from tfidf_search.search import (
    Corpus,
    Document,
    InMemoryIndex,
    RankedDocument,
    SearchIndexError,
    SearchIndexProtocol,
    SqliteIndex,
    StorageError,
)


__version__ = "0.1.0"

__all__ = [
    "Corpus",
    "Document",
    "InMemoryIndex",
    "RankedDocument",
    "SearchIndexError",
    "SearchIndexProtocol",
    "SqliteIndex",
    "StorageError",
]
