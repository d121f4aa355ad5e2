"""Unit tests for tf-idf scoring helpers."""

from __future__ import annotations

import math
from pathlib import Path

import pytest

from tfidf_search.search.models import Corpus, Document
from tfidf_search.search.stats import (
    count_terms,
    inverse_document_frequency,
    rank,
    rank_corpus,
    sort_ranked,
    term_frequency,
)


pytestmark = pytest.mark.unit


def _corpus(**docs: list[str]) -> Corpus:
    corpus = Corpus()
    for path, terms in docs.items():
        counts, total = count_terms(terms)
        corpus.documents[path] = Document(term_count=total, term_frequency=counts)
        for term in counts:
            corpus.document_frequency[term] = corpus.document_frequency.get(term, 0) + 1
    return corpus


def test_count_terms_counts_repeats() -> None:
    counts, total = count_terms(["a", "b", "a", "a"])

    assert counts == {"a": 3, "b": 1}
    assert total == 4
    assert sum(counts.values()) == total


def test_term_frequency_is_ratio_of_counts() -> None:
    assert term_frequency(2, 8) == 0.25


def test_term_frequency_of_empty_document_is_zero() -> None:
    assert term_frequency(0, 0) == 0.0


def test_idf_is_zero_for_term_in_every_document() -> None:
    assert inverse_document_frequency(4, 4) == 0.0


def test_idf_defaults_unseen_terms_to_one_document() -> None:
    assert inverse_document_frequency(None, 3) == pytest.approx(math.log10(3))
    assert inverse_document_frequency(None, 3) > 0


def test_idf_of_empty_corpus_is_zero() -> None:
    assert inverse_document_frequency(None, 0) == 0.0


def test_rank_ignores_terms_present_everywhere() -> None:
    corpus = _corpus(a=["common", "common", "rare"], b=["common"])

    score = rank(corpus.documents["b"], ["common"], corpus.document_frequency, corpus.doc_count)

    assert score == 0.0


def test_rank_sums_tf_idf_over_query_terms() -> None:
    corpus = _corpus(doc1=["the", "cat", "sat"], doc2=["the", "dog", "sat"], doc3=["cat", "dog", "bird"])
    idf = math.log10(3 / 2)

    score = rank(corpus.documents["doc3"], ["cat", "dog"], corpus.document_frequency, 3)

    assert score == pytest.approx(2 * idf / 3)


def test_sort_ranked_orders_by_score_then_path() -> None:
    ranked = sort_ranked({"b": 0.5, "a": 0.5, "c": 0.9, "d": 0.0})

    assert [doc.path for doc in ranked] == [Path("c"), Path("a"), Path("b"), Path("d")]
    assert ranked[0].score == 0.9


def test_rank_corpus_includes_zero_score_documents() -> None:
    corpus = _corpus(x=["alpha"], y=["beta"])

    ranked = rank_corpus(corpus, ["alpha"])

    assert [doc.path for doc in ranked] == [Path("x"), Path("y")]
    assert ranked[1].score == 0.0


def test_rank_corpus_on_empty_corpus_returns_nothing() -> None:
    assert rank_corpus(Corpus(), ["anything"]) == []
