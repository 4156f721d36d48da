"""Per-utterance latency accumulation."""

from dataclasses import dataclass

from interpreter_service.models.events import LatencyMetrics

STAGES = ("stt", "translation", "tts")


@dataclass
class LatencyTracker:
    """Stage durations (ms) for the current utterance.

    Values are clamped to non-negative integers so that `total` is always
    the exact sum of the three reported stages.
    """

    stt: int = 0
    translation: int = 0
    tts: int = 0

    def record(self, stage: str, duration_ms: float) -> int:
        """Store the duration of one stage, replacing any earlier value.

        Raises:
            ValueError: If stage is not stt, translation or tts.
        """
        if stage not in STAGES:
            raise ValueError(f"Unknown stage: {stage}")
        value = max(0, int(duration_ms))
        setattr(self, stage, value)
        return value

    @property
    def total(self) -> int:
        return self.stt + self.translation + self.tts

    def snapshot(self) -> LatencyMetrics:
        """Build the `status:latency` payload."""
        return LatencyMetrics(
            stt=self.stt,
            translation=self.translation,
            tts=self.tts,
            total=self.total,
        )
