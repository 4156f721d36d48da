"""Interpretation pipeline: directions, latency tracking and orchestration.

The orchestrator lives in `interpreter_service.pipeline.orchestrator` and is
imported from there directly.
"""

from .directions import DIRECTIONS, EN_TO_ZH, ZH_TO_EN, Direction, resolve_direction
from .latency import STAGES, LatencyTracker

__all__ = [
    "DIRECTIONS",
    "EN_TO_ZH",
    "ZH_TO_EN",
    "Direction",
    "resolve_direction",
    "LatencyTracker",
    "STAGES",
]
