"""Unit tests for backend selection."""

from __future__ import annotations

import logging
from pathlib import Path

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
import pytest

from tfidf_search.config import Settings
from tfidf_search.index_factory import configure_observability, create_index
from tfidf_search.observability import JsonFormatter
from tfidf_search.search.memory_index import InMemoryIndex
from tfidf_search.search.protocol import SearchIndexProtocol
from tfidf_search.search.sqlite_index import SqliteIndex


pytestmark = pytest.mark.unit


def test_create_index_defaults_to_memory() -> None:
    index = create_index(Settings(_env_file=None))

    assert isinstance(index, InMemoryIndex)
    assert isinstance(index, SearchIndexProtocol)
    assert index.document_count == 0


def test_create_index_builds_sqlite_backend(tmp_path: Path) -> None:
    settings = Settings(_env_file=None, index_backend="sqlite", sqlite_path=tmp_path / "factory.db")

    index = create_index(settings)
    try:
        assert isinstance(index, SqliteIndex)
        assert index.db_path == tmp_path / "factory.db"
    finally:
        index.close()


def test_create_index_restores_existing_snapshot(tmp_path: Path) -> None:
    source = InMemoryIndex()
    source.add_document("a", "restored words")
    snapshot = source.save(tmp_path / "snapshot.json")

    index = create_index(Settings(_env_file=None, snapshot_path=snapshot))

    assert index.document_count == 1
    assert index.search_query("restored") == source.search_query("restored")


def test_create_index_starts_empty_without_snapshot_file(tmp_path: Path) -> None:
    index = create_index(Settings(_env_file=None, snapshot_path=tmp_path / "absent.json"))

    assert index.document_count == 0


def test_create_index_uses_configured_analyzer() -> None:
    index = create_index(Settings(_env_file=None, analyzer="english"))
    index.add_document("a", "the cat")

    assert index.get_document("a").term_frequency == {"cat": 1}


def test_create_index_applies_logging_settings() -> None:
    create_index(Settings(_env_file=None, log_level="warning", log_json=False))

    root = logging.getLogger()
    assert root.level == logging.WARNING
    assert len(root.handlers) == 1
    assert not isinstance(root.handlers[0].formatter, JsonFormatter)


def test_configure_observability_uses_json_formatter() -> None:
    configure_observability(Settings(_env_file=None, log_level="debug"))

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert isinstance(root.handlers[0].formatter, JsonFormatter)
    assert isinstance(trace.get_tracer_provider(), TracerProvider)
