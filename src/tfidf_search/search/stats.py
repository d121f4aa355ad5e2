"""TF-IDF scoring helpers.

The functions here stay independent of any storage backend so the in-memory
and SQLite indexes share one definition of the ranking formula. Both the
SQLite backend and ``rank_corpus`` feed the same ``term_frequency`` and
``inverse_document_frequency`` functions, which keeps their scores identical.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
import math
from pathlib import Path

from tfidf_search.search.models import Corpus, Document, RankedDocument


# Unseen terms are treated as if one document contained them so idf stays finite.
UNSEEN_TERM_DOC_FREQ = 1


def count_terms(terms: Iterable[str]) -> tuple[dict[str, int], int]:
    """Return the per-term counts and total token count of a term stream."""

    counts = Counter(terms)
    return dict(counts), sum(counts.values())


def term_frequency(occurrences: int, term_count: int) -> float:
    """Return ``occurrences / term_count``, or 0.0 for an empty document."""

    if term_count <= 0:
        return 0.0
    return occurrences / term_count


def inverse_document_frequency(doc_freq: int | None, total_docs: int) -> float:
    """Return ``log10(N / df)``.

    A missing ``doc_freq`` defaults to 1, so a term that was never indexed
    still contributes ``log10(N)``. An empty corpus has no idf and yields 0.0.
    """

    if total_docs <= 0:
        return 0.0
    df = doc_freq if doc_freq else UNSEEN_TERM_DOC_FREQ
    return math.log10(total_docs / df)


def rank(document: Document, query_terms: Sequence[str], document_frequency: Mapping[str, int], total_docs: int) -> float:
    """Sum ``tf * idf`` over the query terms for one document."""

    score = 0.0
    for term in query_terms:
        tf = term_frequency(document.term_frequency.get(term, 0), document.term_count)
        score += tf * inverse_document_frequency(document_frequency.get(term), total_docs)
    return score


def sort_ranked(scores: Mapping[str, float]) -> list[RankedDocument]:
    """Order by descending score, breaking ties by ascending path."""

    ordered = sorted(scores.items(), key=lambda item: (-item[1], item[0]))
    return [RankedDocument(path=Path(path), score=score) for path, score in ordered]


def rank_corpus(corpus: Corpus, query_terms: Sequence[str]) -> list[RankedDocument]:
    """Score every document in ``corpus`` against ``query_terms``."""

    total_docs = corpus.doc_count
    scores = {
        path: rank(document, query_terms, corpus.document_frequency, total_docs)
        for path, document in corpus.documents.items()
    }
    return sort_ranked(scores)
