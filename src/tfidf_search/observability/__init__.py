"""Observability module: structured logging, tracing spans and metrics."""

from tfidf_search.observability.context import get_trace_context, set_trace_context, trace_context
from tfidf_search.observability.logging import JsonFormatter, configure_logging
from tfidf_search.observability.metrics import (
    DOCUMENTS_INDEXED,
    SEARCH_LATENCY,
    STORAGE_ERRORS,
    get_metrics,
    get_metrics_content_type,
    track_latency,
)
from tfidf_search.observability.tracing import create_span, get_tracer, init_tracing


__all__ = [
    "DOCUMENTS_INDEXED",
    "SEARCH_LATENCY",
    "STORAGE_ERRORS",
    "JsonFormatter",
    "configure_logging",
    "create_span",
    "get_metrics",
    "get_metrics_content_type",
    "get_trace_context",
    "get_tracer",
    "init_tracing",
    "set_trace_context",
    "trace_context",
    "track_latency",
]
