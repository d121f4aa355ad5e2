"""Prometheus metrics for indexing and search."""

from __future__ import annotations

from contextlib import contextmanager
import time
from typing import TYPE_CHECKING

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest


if TYPE_CHECKING:
    from collections.abc import Generator


DOCUMENTS_INDEXED = Counter(
    "tfidf_documents_indexed_total",
    "Documents added to an index",
    ["backend"],
)

SEARCH_LATENCY = Histogram(
    "tfidf_search_latency_seconds",
    "Time spent scoring a query",
    ["backend"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

STORAGE_ERRORS = Counter(
    "tfidf_storage_errors_total",
    "Failed statements in the persisted index",
)


@contextmanager
def track_latency(histogram: Histogram, **labels: str) -> Generator[None, None, None]:
    """Context manager to track operation latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        histogram.labels(**labels).observe(time.perf_counter() - start)


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()


def get_metrics_content_type() -> str:
    return CONTENT_TYPE_LATEST
