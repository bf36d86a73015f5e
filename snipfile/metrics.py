"""Prometheus metrics helpers."""

from __future__ import annotations

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()

LINES_SCANNED = Counter(
    "snipfile_lines_scanned_total",
    "Number of source lines read by parsers",
    registry=REGISTRY,
)

SNIPPETS_PARSED = Counter(
    "snipfile_snippets_parsed_total",
    "Number of snippets completed by scanning",
    registry=REGISTRY,
)

SNIPPET_BODY_LINES = Histogram(
    "snipfile_snippet_body_lines",
    "Number of body lines per parsed snippet",
    buckets=(1, 2, 5, 10, 25, 50, 100, 250, 1000),
    registry=REGISTRY,
)

PARSE_ERRORS = Counter(
    "snipfile_parse_errors_total",
    "Number of errors raised while scanning, grouped by kind",
    labelnames=("kind",),
    registry=REGISTRY,
)


def observe_lines(count: int = 1) -> None:
    LINES_SCANNED.inc(count)


def observe_snippet(*, body_lines: int) -> None:
    SNIPPETS_PARSED.inc()
    SNIPPET_BODY_LINES.observe(body_lines)


def observe_error(kind: str) -> None:
    PARSE_ERRORS.labels(kind=kind).inc()


def render_metrics() -> tuple[bytes, str]:
    payload = generate_latest(REGISTRY)
    return payload, CONTENT_TYPE_LATEST
