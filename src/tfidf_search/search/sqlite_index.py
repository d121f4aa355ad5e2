"""SQLite-backed TF-IDF index.

The database keeps three relations:

- ``documents``: one row per indexed path with its total token count
- ``term_freq``: per-document term counts
- ``doc_freq``: number of documents containing each term

Searching rebuilds the same statistics ``InMemoryIndex`` holds in memory, so
both backends return identical rankings for the same corpus. The connection
runs in autocommit mode; wrap bulk loads in ``begin``/``commit`` or
``transaction()``. Mutations never roll back on their own.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Iterator, Sequence
from contextlib import contextmanager
import logging
import os
from pathlib import Path
import sqlite3
from typing import Any

from tfidf_search.observability.metrics import DOCUMENTS_INDEXED, SEARCH_LATENCY, STORAGE_ERRORS, track_latency
from tfidf_search.observability.tracing import create_span
from tfidf_search.search.analyzers import Analyzer, get_analyzer
from tfidf_search.search.errors import StorageError
from tfidf_search.search.models import RankedDocument, normalize_key
from tfidf_search.search.sqlite_pragmas import apply_index_pragmas
from tfidf_search.search.stats import count_terms, inverse_document_frequency, sort_ranked, term_frequency


logger = logging.getLogger(__name__)

_BACKEND = "sqlite"

_SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS documents (
        id INTEGER NOT NULL PRIMARY KEY,
        path TEXT NOT NULL UNIQUE,
        term_count INTEGER NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS term_freq (
        term TEXT NOT NULL,
        doc_id INTEGER NOT NULL,
        freq INTEGER NOT NULL,
        UNIQUE(term, doc_id),
        FOREIGN KEY(doc_id) REFERENCES documents(id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS doc_freq (
        term TEXT NOT NULL UNIQUE,
        freq INTEGER
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_term_freq_doc_id ON term_freq(doc_id)",
)

_SELECT_DOCUMENT_ID = "SELECT id FROM documents WHERE path = ?"
_INSERT_DOCUMENT = "INSERT INTO documents (path, term_count) VALUES (?, ?)"
_UPDATE_DOCUMENT = "UPDATE documents SET term_count = ? WHERE id = ?"
_INSERT_TERM_FREQ = "INSERT INTO term_freq (term, doc_id, freq) VALUES (?, ?, ?)"
_INCREMENT_DOC_FREQ = """
    INSERT INTO doc_freq (term, freq) VALUES (?, 1)
    ON CONFLICT(term) DO UPDATE SET freq = freq + 1
"""
_RETRACT_DOC_FREQ = """
    UPDATE doc_freq SET freq = freq - 1
    WHERE term IN (SELECT term FROM term_freq WHERE doc_id = ?)
"""
_PRUNE_DOC_FREQ = "DELETE FROM doc_freq WHERE freq <= 0"
_DELETE_TERM_FREQ = "DELETE FROM term_freq WHERE doc_id = ?"
_COUNT_DOCUMENTS = "SELECT COUNT(*) FROM documents"
_SELECT_DOC_FREQ = "SELECT freq FROM doc_freq WHERE term = ?"
_SELECT_POSTINGS = """
    SELECT term_freq.doc_id, term_freq.freq, documents.term_count
    FROM term_freq
    JOIN documents ON documents.id = term_freq.doc_id
    WHERE term_freq.term = ?
"""
_SELECT_PATHS = "SELECT id, path FROM documents"


class SqliteIndex:
    """Persisted index backed by a single SQLite connection.

    The connection is owned for the lifetime of the instance. Writers must be
    serialized by the caller; readers on other connections see the last
    committed state (WAL journaling).
    """

    def __init__(
        self,
        db_path: str | os.PathLike[str],
        analyzer: Analyzer | None = None,
        *,
        busy_timeout_ms: int | None = 30000,
    ) -> None:
        self.db_path = Path(db_path)
        self.analyzer = analyzer or get_analyzer(None)
        try:
            self._conn = sqlite3.connect(self.db_path, isolation_level=None, check_same_thread=False)
        except sqlite3.Error as exc:
            STORAGE_ERRORS.inc()
            logger.error("Could not open sqlite database %s: %s", self.db_path, exc)
            raise StorageError(f"open {self.db_path}", str(exc)) from exc
        self._execute_pragmas(busy_timeout_ms)
        try:
            self._migrate()
        except StorageError:
            self.close()
            raise
        logger.info("Opened sqlite index %s", self.db_path)

    @classmethod
    def open(cls, db_path: str | os.PathLike[str], analyzer: Analyzer | None = None, **kwargs: Any) -> SqliteIndex:
        return cls(db_path, analyzer, **kwargs)

    def __enter__(self) -> SqliteIndex:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        try:
            self._conn.close()
        except sqlite3.Error as close_error:
            logger.warning("Failed to close SQLite connection for %s: %s", self.db_path, close_error)

    def _execute(self, statement: str, params: Sequence[Any] = ()) -> sqlite3.Cursor:
        try:
            return self._conn.execute(statement, params)
        except (sqlite3.Error, UnicodeEncodeError) as exc:
            STORAGE_ERRORS.inc()
            error = StorageError(statement, str(exc))
            logger.error("%s", error)
            raise error from exc

    def _execute_pragmas(self, busy_timeout_ms: int | None) -> None:
        try:
            apply_index_pragmas(self._conn, busy_timeout_ms=busy_timeout_ms)
        except sqlite3.Error as exc:
            STORAGE_ERRORS.inc()
            logger.error("Could not configure sqlite database %s: %s", self.db_path, exc)
            self.close()
            raise StorageError("PRAGMA", str(exc)) from exc

    def _migrate(self) -> None:
        for statement in _SCHEMA_STATEMENTS:
            self._execute(statement)

    # Transactions -----------------------------------------------------------

    def begin(self) -> None:
        self._execute("BEGIN")

    def commit(self) -> None:
        self._execute("COMMIT")

    def rollback(self) -> None:
        self._execute("ROLLBACK")

    @property
    def in_transaction(self) -> bool:
        return self._conn.in_transaction

    @contextmanager
    def transaction(self) -> Iterator[SqliteIndex]:
        """Commit the enclosed mutations, or roll them back if the block raises."""
        self.begin()
        try:
            yield self
        except BaseException:
            if self._conn.in_transaction:
                self.rollback()
            raise
        self.commit()

    # Reads -------------------------------------------------------------------

    @property
    def document_count(self) -> int:
        return int(self._execute(_COUNT_DOCUMENTS).fetchone()[0])

    def document_frequency(self, term: str) -> int:
        row = self._execute(_SELECT_DOC_FREQ, (term,)).fetchone()
        return int(row[0]) if row and row[0] is not None else 0

    # Mutations ---------------------------------------------------------------

    def add_document(self, path: str | os.PathLike[str], content: str) -> None:
        """Tokenize ``content`` and index it under ``path``."""
        self.add_terms(path, self.analyzer(content))

    def add_terms(self, path: str | os.PathLike[str], terms: Iterable[str]) -> None:
        """Index an already tokenized document.

        Re-adding a known path retracts the old rows first, so ``doc_freq``
        always matches the documents that currently contain each term.
        """
        key = normalize_key(path)
        with create_span("index.add_document", attributes={"index.backend": _BACKEND, "document.path": key}):
            term_frequency_table, term_count = count_terms(terms)
            doc_id = self._upsert_document(key, term_count)
            for term, freq in term_frequency_table.items():
                self._execute(_INSERT_TERM_FREQ, (term, doc_id, freq))
                self._execute(_INCREMENT_DOC_FREQ, (term,))
            DOCUMENTS_INDEXED.labels(backend=_BACKEND).inc()
            logger.debug("Indexed %s (%d terms, %d distinct)", key, term_count, len(term_frequency_table))

    def _upsert_document(self, key: str, term_count: int) -> int:
        row = self._execute(_SELECT_DOCUMENT_ID, (key,)).fetchone()
        if row is None:
            cursor = self._execute(_INSERT_DOCUMENT, (key, term_count))
            return int(cursor.lastrowid)

        doc_id = int(row[0])
        logger.debug("Replacing document %s", key)
        self._execute(_RETRACT_DOC_FREQ, (doc_id,))
        self._execute(_PRUNE_DOC_FREQ)
        self._execute(_DELETE_TERM_FREQ, (doc_id,))
        self._execute(_UPDATE_DOCUMENT, (term_count, doc_id))
        return doc_id

    # Search ------------------------------------------------------------------

    def search_query(self, query: str) -> list[RankedDocument]:
        """Score every indexed document against ``query``, best first."""
        return self.search_terms(self.analyzer(query))

    def search_terms(self, terms: Sequence[str]) -> list[RankedDocument]:
        """Rebuild tf-idf scores from the stored tables.

        Documents without any query term keep a score of 0.0 so the output
        lists the whole corpus, matching ``InMemoryIndex``.
        """
        with create_span("index.search", attributes={"index.backend": _BACKEND, "query.terms": len(terms)}):
            with track_latency(SEARCH_LATENCY, backend=_BACKEND):
                total_docs = self.document_count
                if total_docs == 0:
                    return []

                scores: dict[int, float] = defaultdict(float)
                for term in terms:
                    idf = inverse_document_frequency(self.document_frequency(term), total_docs)
                    for doc_id, freq, term_count in self._execute(_SELECT_POSTINGS, (term,)).fetchall():
                        scores[doc_id] += term_frequency(freq, term_count) * idf

                by_path = {path: scores.get(doc_id, 0.0) for doc_id, path in self._execute(_SELECT_PATHS).fetchall()}
                return sort_ranked(by_path)
