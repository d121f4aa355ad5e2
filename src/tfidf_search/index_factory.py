"""Index factory for choosing between the in-memory and SQLite backends."""

from __future__ import annotations

import logging

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider

from tfidf_search.config import Settings
from tfidf_search.observability import configure_logging, init_tracing
from tfidf_search.search.analyzers import get_analyzer
from tfidf_search.search.memory_index import InMemoryIndex
from tfidf_search.search.protocol import SearchIndexProtocol
from tfidf_search.search.sqlite_index import SqliteIndex


logger = logging.getLogger(__name__)


def configure_observability(settings: Settings) -> None:
    """Apply the configured log level and format, and start tracing once."""
    configure_logging(level=settings.log_level, json_output=settings.log_json)
    if isinstance(trace.get_tracer_provider(), TracerProvider):
        return
    init_tracing(service_name="tfidf-search", resource_attributes={"index.backend": settings.index_backend})


def create_index(settings: Settings | None = None) -> SearchIndexProtocol:
    """Configure observability and create the configured backend.

    The memory backend restores ``settings.snapshot_path`` when that file
    exists and starts empty otherwise.
    """
    settings = settings or Settings()
    configure_observability(settings)
    analyzer = get_analyzer(settings.analyzer)

    if settings.is_persistent():
        return SqliteIndex(settings.sqlite_path, analyzer, busy_timeout_ms=settings.sqlite_busy_timeout_ms)

    snapshot_path = settings.snapshot_path
    if snapshot_path is not None and snapshot_path.exists():
        return InMemoryIndex.load(snapshot_path, analyzer=analyzer)
    if snapshot_path is not None:
        logger.info("No snapshot at %s, starting with an empty index", snapshot_path)
    return InMemoryIndex(analyzer)
