"""In-memory TF-IDF index with whole-corpus snapshots.

``InMemoryIndex`` keeps every ``Document`` and the document frequency table
resident and scores queries directly with ``stats.rank_corpus``. Snapshots are
minified JSON written with orjson and validated with pydantic on load, so a
restored index answers every query exactly like the one that was saved.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
import logging
import os
from pathlib import Path
from typing import Any

import orjson
from pydantic import BaseModel, Field, NonNegativeInt

from tfidf_search.observability.metrics import DOCUMENTS_INDEXED, SEARCH_LATENCY, track_latency
from tfidf_search.observability.tracing import create_span
from tfidf_search.search.analyzers import Analyzer, get_analyzer
from tfidf_search.search.models import Corpus, Document, RankedDocument, normalize_key
from tfidf_search.search.stats import count_terms, rank_corpus


logger = logging.getLogger(__name__)

_BACKEND = "memory"


class DocumentSnapshot(BaseModel):
    term_count: NonNegativeInt
    term_frequency: dict[str, NonNegativeInt] = Field(default_factory=dict)


class CorpusSnapshot(BaseModel):
    """Validated on-disk shape of an ``InMemoryIndex`` snapshot."""

    documents: dict[str, DocumentSnapshot] = Field(default_factory=dict)
    document_frequency: dict[str, NonNegativeInt] = Field(default_factory=dict)


class InMemoryIndex:
    """Volatile index holding the full corpus in process memory."""

    def __init__(self, analyzer: Analyzer | None = None, corpus: Corpus | None = None) -> None:
        self.analyzer = analyzer or get_analyzer(None)
        self._corpus = corpus or Corpus()

    @property
    def document_count(self) -> int:
        return self._corpus.doc_count

    def document_frequency(self, term: str) -> int:
        return self._corpus.document_frequency.get(term, 0)

    def get_document(self, path: str | os.PathLike[str]) -> Document | None:
        return self._corpus.documents.get(os.fspath(path))

    def add_document(self, path: str | os.PathLike[str], content: str) -> None:
        """Tokenize ``content`` and index it under ``path``."""
        self.add_terms(path, self.analyzer(content))

    def add_terms(self, path: str | os.PathLike[str], terms: Iterable[str]) -> None:
        """Index an already tokenized document.

        Re-adding a known path first retracts the old document's terms from
        the document frequency table.
        """
        key = normalize_key(path)
        with create_span("index.add_document", attributes={"index.backend": _BACKEND, "document.path": key}):
            term_frequency, term_count = count_terms(terms)
            previous = self._corpus.documents.get(key)
            if previous is not None:
                self._retract(previous)
                logger.debug("Replacing document %s", key)

            document_frequency = self._corpus.document_frequency
            for term in term_frequency:
                document_frequency[term] = document_frequency.get(term, 0) + 1

            self._corpus.documents[key] = Document(term_count=term_count, term_frequency=term_frequency)
            DOCUMENTS_INDEXED.labels(backend=_BACKEND).inc()
            logger.debug("Indexed %s (%d terms, %d distinct)", key, term_count, len(term_frequency))

    def _retract(self, document: Document) -> None:
        document_frequency = self._corpus.document_frequency
        for term in document.term_frequency:
            remaining = document_frequency.get(term, 0) - 1
            if remaining > 0:
                document_frequency[term] = remaining
            else:
                document_frequency.pop(term, None)

    def search_query(self, query: str) -> list[RankedDocument]:
        """Score every indexed document against ``query``, best first."""
        return self.search_terms(self.analyzer(query))

    def search_terms(self, terms: Sequence[str]) -> list[RankedDocument]:
        with create_span("index.search", attributes={"index.backend": _BACKEND, "query.terms": len(terms)}):
            with track_latency(SEARCH_LATENCY, backend=_BACKEND):
                return rank_corpus(self._corpus, terms)

    def to_snapshot(self) -> dict[str, Any]:
        return self._corpus.to_dict()

    @classmethod
    def from_snapshot(cls, data: Any, analyzer: Analyzer | None = None) -> InMemoryIndex:
        """Rebuild an index from ``to_snapshot`` output.

        Raises ``pydantic.ValidationError`` when the payload has the wrong shape.
        """
        snapshot = CorpusSnapshot.model_validate(data)
        return cls(analyzer=analyzer, corpus=Corpus.from_dict(snapshot.model_dump()))

    def save(self, path: str | os.PathLike[str]) -> Path:
        """Write the snapshot atomically and return its path."""
        target = Path(path)
        tmp_path = target.with_name(target.name + ".tmp")
        try:
            tmp_path.write_bytes(orjson.dumps(self.to_snapshot()))
            tmp_path.replace(target)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
        logger.info("Saved index snapshot to %s (%d documents)", target, self.document_count)
        return target

    @classmethod
    def load(cls, path: str | os.PathLike[str], analyzer: Analyzer | None = None) -> InMemoryIndex:
        """Restore an index saved with ``save``.

        I/O, decoding and validation errors propagate unchanged.
        """
        source = Path(path)
        index = cls.from_snapshot(orjson.loads(source.read_bytes()), analyzer=analyzer)
        logger.info("Loaded index snapshot from %s (%d documents)", source, index.document_count)
        return index
