"""
Prometheus Metrics — draft assistant observability.

Exposes counters and a histogram for:
- Boundary detections per region and strategy (thread / signature)
- Completion calls per provider and outcome, and their latency
- Completions that fell back to "raw text is the body"
- Capture cycles and host write failures

Usage
-----
    from draftsplice.observability.metrics import record_detection, timed_completion

    with timed_completion("openai"):
        raw = adapter.complete(context, instruction)

    record_detection("thread", "marker")
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Generator

from prometheus_client import Counter, Histogram

# ---------------------------------------------------------------------------
# Metric definitions
# ---------------------------------------------------------------------------

# Which strategy found a region boundary ("none" when nothing was found).
DETECTIONS: Counter = Counter(
    "draftsplice_boundary_detections_total",
    "Boundary detections by region (thread / signature) and strategy",
    ["region", "strategy"],
)

# Completion calls, labelled by provider and outcome.
COMPLETION_CALLS: Counter = Counter(
    "draftsplice_completion_calls_total",
    "Completion calls by provider and outcome (ok / provider_error / configuration_error)",
    ["provider", "outcome"],
)

# Model output that was not the requested JSON object.
COMPLETION_FALLBACKS: Counter = Counter(
    "draftsplice_completion_fallbacks_total",
    "Completions whose raw text was used as the body",
)

# Latency of one vendor call (seconds).
COMPLETION_LATENCY: Histogram = Histogram(
    "draftsplice_completion_seconds",
    "Completion call latency per provider in seconds",
    ["provider"],
    buckets=(0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0),
)

CAPTURES: Counter = Counter(
    "draftsplice_capture_cycles_total",
    "Capture cycles by outcome (captured / skipped)",
    ["outcome"],
)

HOST_FAILURES: Counter = Counter(
    "draftsplice_host_failures_total",
    "Failed host operations by action",
    ["action"],
)


# ---------------------------------------------------------------------------
# Convenience helpers
# ---------------------------------------------------------------------------

def record_detection(region: str, strategy: str) -> None:
    """Increment the detection counter for *region* found by *strategy*."""
    DETECTIONS.labels(region=region, strategy=strategy).inc()


def record_completion(provider: str, outcome: str) -> None:
    COMPLETION_CALLS.labels(provider=provider, outcome=outcome).inc()


def record_completion_fallback() -> None:
    COMPLETION_FALLBACKS.inc()


def record_capture(outcome: str) -> None:
    CAPTURES.labels(outcome=outcome).inc()


def record_host_failure(action: str) -> None:
    HOST_FAILURES.labels(action=action).inc()


@contextmanager
def timed_completion(provider: str) -> Generator[None, None, None]:
    """
    Context manager that records completion latency.

    Usage::

        with timed_completion("claude"):
            raw = adapter.complete(context, instruction)
    """
    with COMPLETION_LATENCY.labels(provider=provider).time():
        yield
