"""Prometheus metrics for the Interpreter Service.

Defines and exports metrics for monitoring:
- Stage timings (STT, translation, TTS histogram)
- Utterance round-trip latency (histogram)
- Error counts by code (counter)
- Active sessions and pipelines (gauges)
"""

import logging

from prometheus_client import Counter, Gauge, Histogram

logger = logging.getLogger(__name__)

STAGES = ("stt", "translation", "tts")

# -----------------------------------------------------------------------------
# Latency Metrics
# -----------------------------------------------------------------------------

interpreter_stage_duration_seconds = Histogram(
    "interpreter_stage_duration_seconds",
    "Per-utterance stage duration in seconds",
    labelnames=["stage"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 4.0, float("inf")),
)

interpreter_utterance_latency_seconds = Histogram(
    "interpreter_utterance_latency_seconds",
    "Total utterance latency (STT + translation + TTS) in seconds",
    buckets=(0.25, 0.5, 1.0, 2.0, 4.0, 8.0, float("inf")),
)

# -----------------------------------------------------------------------------
# Error Metrics
# -----------------------------------------------------------------------------

interpreter_errors_total = Counter(
    "interpreter_errors_total",
    "Total errors reported to clients",
    labelnames=["code"],
)

# -----------------------------------------------------------------------------
# Session Metrics
# -----------------------------------------------------------------------------

interpreter_sessions_active = Gauge(
    "interpreter_sessions_active",
    "Current number of sessions with at least one participant",
)

interpreter_pipelines_active = Gauge(
    "interpreter_pipelines_active",
    "Current number of connections streaming audio",
)

# -----------------------------------------------------------------------------
# Metric Recording Functions
# -----------------------------------------------------------------------------


def record_stage_timing(stage: str, duration_ms: int) -> None:
    """Record individual stage timing.

    Args:
        stage: Stage name (stt, translation, tts)
        duration_ms: Duration in milliseconds
    """
    if stage not in STAGES:
        logger.warning(f"Unknown stage for timing: {stage}")
        return

    try:
        interpreter_stage_duration_seconds.labels(stage=stage).observe(duration_ms / 1000.0)
    except Exception as e:
        logger.error(f"Failed to record stage timing: {e}")


def record_utterance_latency(total_ms: int) -> None:
    """Record total round-trip latency of an utterance."""
    try:
        interpreter_utterance_latency_seconds.observe(total_ms / 1000.0)
    except Exception as e:
        logger.error(f"Failed to record utterance latency: {e}")


def record_error(code: str) -> None:
    """Count an error reported to a client.

    Args:
        code: Error code (STT_ERROR, TTS_ERROR, ...)
    """
    try:
        interpreter_errors_total.labels(code=code).inc()
    except Exception as e:
        logger.error(f"Failed to record error metric: {e}")


def set_active_sessions(count: int) -> None:
    """Set the active session gauge."""
    try:
        interpreter_sessions_active.set(count)
    except Exception as e:
        logger.error(f"Failed to set active sessions: {e}")


def increment_active_pipelines() -> None:
    """Increment active pipelines count."""
    try:
        interpreter_pipelines_active.inc()
    except Exception as e:
        logger.error(f"Failed to increment active pipelines: {e}")


def decrement_active_pipelines() -> None:
    """Decrement active pipelines count."""
    try:
        interpreter_pipelines_active.dec()
    except Exception as e:
        logger.error(f"Failed to decrement active pipelines: {e}")
