"""Shared test fixtures and configuration."""

from __future__ import annotations

import os

import pytest

from tfidf_search.search.memory_index import InMemoryIndex
from tfidf_search.search.sqlite_index import SqliteIndex


SAMPLE_CORPUS = {
    "doc1": "the cat sat",
    "doc2": "the dog sat",
    "doc3": "cat dog bird",
}


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Drop TFIDF_* variables so settings tests start from defaults."""
    for key in list(os.environ):
        if key.upper().startswith("TFIDF_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def memory_index() -> InMemoryIndex:
    return InMemoryIndex()


@pytest.fixture
def sqlite_index(tmp_path):
    index = SqliteIndex(tmp_path / "index.db")
    yield index
    index.close()


@pytest.fixture
def populated_memory_index(memory_index: InMemoryIndex) -> InMemoryIndex:
    for path, content in SAMPLE_CORPUS.items():
        memory_index.add_document(path, content)
    return memory_index


@pytest.fixture
def populated_sqlite_index(sqlite_index: SqliteIndex) -> SqliteIndex:
    with sqlite_index.transaction():
        for path, content in SAMPLE_CORPUS.items():
            sqlite_index.add_document(path, content)
    return sqlite_index
