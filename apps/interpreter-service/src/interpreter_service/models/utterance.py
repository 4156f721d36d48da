"""Utterance model threading one finalized transcript through the pipeline."""

import time
import uuid
from dataclasses import dataclass, field

from interpreter_service.pipeline.latency import LatencyTracker


def _elapsed_ms(start: float | None, end: float | None) -> int:
    if start is None or end is None:
        return 0
    return max(0, int((end - start) * 1000))


@dataclass
class Utterance:
    """One finalized span of speech and its translation/synthesis lifecycle.

    Stage timestamps are `time.perf_counter()` readings; `latency` holds the
    per-utterance stage durations derived from them.
    """

    original_text: str
    source_language: str
    target_language: str
    direction: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    sequence_number: int = 0
    translated_text: str = ""

    started_at: float | None = None
    recognized_at: float | None = None
    translation_started_at: float | None = None
    translated_at: float | None = None
    synthesis_started_at: float | None = None
    synthesized_at: float | None = None

    latency: LatencyTracker = field(default_factory=LatencyTracker)

    def mark_recognized(self, started_at: float | None) -> int:
        """Record the final transcript; returns STT latency in ms."""
        self.recognized_at = time.perf_counter()
        self.started_at = started_at if started_at is not None else self.recognized_at
        stt_ms = _elapsed_ms(self.started_at, self.recognized_at)
        self.latency.record("stt", stt_ms)
        return stt_ms

    def mark_translation_started(self) -> None:
        self.translation_started_at = time.perf_counter()

    def mark_translated(self, translated_text: str) -> int:
        """Record translation completion; returns translation latency in ms."""
        self.translated_text = translated_text
        self.translated_at = time.perf_counter()
        translation_ms = _elapsed_ms(self.translation_started_at, self.translated_at)
        self.latency.record("translation", translation_ms)
        return translation_ms

    def mark_synthesis_started(self) -> None:
        self.synthesis_started_at = time.perf_counter()

    def mark_synthesized(self) -> int:
        """Record synthesis completion; returns TTS latency in ms."""
        self.synthesized_at = time.perf_counter()
        tts_ms = _elapsed_ms(self.synthesis_started_at, self.synthesized_at)
        self.latency.record("tts", tts_ms)
        return tts_ms
