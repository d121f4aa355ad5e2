"""Unit tests for analyzers."""

from __future__ import annotations

import pytest

from tfidf_search.search.analyzers import (
    AnalyzerPipeline,
    LowercaseFilter,
    RegexTokenizer,
    StandardAnalyzer,
    StopFilter,
    available_analyzers,
    get_analyzer,
    stem,
)


pytestmark = pytest.mark.unit


def test_default_analyzer_keeps_stopwords_and_lowercases() -> None:
    analyzer = get_analyzer("default")

    assert analyzer("The Cat sat") == ["the", "cat", "sat"]


def test_default_analyzer_stems_plurals() -> None:
    analyzer = get_analyzer(None)

    assert analyzer("cats running") == ["cat", "runn"]


def test_english_analyzer_removes_stopwords() -> None:
    analyzer = get_analyzer("english")

    assert analyzer("the cat and the dog") == ["cat", "dog"]


def test_english_nostem_leaves_words_intact() -> None:
    analyzer = get_analyzer("english-nostem")

    assert analyzer("Indexing documents") == ["indexing", "documents"]


def test_simple_analyzer_only_lowercases() -> None:
    assert get_analyzer("SIMPLE")("Cats, Dogs!") == ["cats", "dogs"]


def test_get_analyzer_rejects_unknown_names() -> None:
    with pytest.raises(ValueError, match="Unknown analyzer"):
        get_analyzer("klingon")


def test_available_analyzers_is_sorted() -> None:
    names = available_analyzers()

    assert names == sorted(names)
    assert "default" in names


def test_stem_keeps_short_words() -> None:
    assert stem("is") == "is"
    assert stem("sat") == "sat"
    assert stem("normalization") == "normalize"


def test_pipeline_composes_filters_in_order() -> None:
    pipeline = AnalyzerPipeline(RegexTokenizer(), [LowercaseFilter(), StopFilter(["skip"])])

    assert pipeline("Keep SKIP this") == ["keep", "this"]


def test_analyzer_output_is_restartable() -> None:
    analyzer = StandardAnalyzer()
    tokens = analyzer("one two three")

    assert list(tokens) == list(tokens) == ["one", "two", "three"]
