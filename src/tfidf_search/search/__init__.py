"""
TF-IDF indexing and ranking engine.

- analyzers: Tokenizers and filters (lowercase, stop, stemming)
- models: Document and corpus statistics
- stats: tf, idf and rank functions
- memory_index: Volatile in-memory index with snapshots
- sqlite_index: Persisted SQLite index
"""

from tfidf_search.search.errors import SearchIndexError, StorageError
from tfidf_search.search.memory_index import InMemoryIndex
from tfidf_search.search.models import Corpus, Document, RankedDocument
from tfidf_search.search.protocol import SearchIndexProtocol
from tfidf_search.search.sqlite_index import SqliteIndex


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
