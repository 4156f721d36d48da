"""Unit tests for LatencyTracker, Utterance timing and directions."""

import time

import pytest

from interpreter_service.models.utterance import Utterance
from interpreter_service.pipeline.directions import DIRECTIONS, resolve_direction
from interpreter_service.pipeline.latency import LatencyTracker


class TestLatencyTracker:
    def test_total_is_sum(self):
        tracker = LatencyTracker()
        tracker.record("stt", 120.7)
        tracker.record("translation", 340)
        tracker.record("tts", 510.2)

        assert tracker.total == 120 + 340 + 510
        snapshot = tracker.snapshot()
        assert snapshot.total == snapshot.stt + snapshot.translation + snapshot.tts

    def test_negative_durations_clamped(self):
        tracker = LatencyTracker()

        assert tracker.record("tts", -3) == 0
        assert tracker.snapshot().tts == 0

    def test_unknown_stage(self):
        with pytest.raises(ValueError):
            LatencyTracker().record("mixing", 10)

    def test_snapshot_wire_format(self):
        assert LatencyTracker(stt=1, translation=2, tts=3).snapshot().to_wire() == {
            "stt": 1,
            "translation": 2,
            "tts": 3,
            "total": 6,
        }


class TestUtterance:
    def test_stage_timings(self):
        utterance = Utterance(
            original_text="Hello",
            source_language="en",
            target_language="zh",
            direction="en-to-zh",
        )
        started = time.perf_counter() - 0.05

        stt_ms = utterance.mark_recognized(started)
        utterance.mark_translation_started()
        translation_ms = utterance.mark_translated("你好")
        utterance.mark_synthesis_started()
        tts_ms = utterance.mark_synthesized()

        assert stt_ms >= 50
        assert utterance.translated_text == "你好"
        assert utterance.latency.snapshot().total == stt_ms + translation_ms + tts_ms

    def test_recognized_without_start(self):
        utterance = Utterance("Hi", "en", "zh", "en-to-zh")

        assert utterance.mark_recognized(None) == 0
        assert utterance.started_at == utterance.recognized_at

    def test_unique_ids(self):
        assert Utterance("a", "en", "zh", "en-to-zh").id != Utterance("a", "en", "zh", "en-to-zh").id


class TestDirections:
    def test_table(self):
        assert DIRECTIONS["en"].name == "en-to-zh"
        assert DIRECTIONS["en"].synthesizer == "azure"
        assert DIRECTIONS["zh"].name == "zh-to-en"
        assert DIRECTIONS["zh"].synthesizer == "elevenlabs"

    def test_resolve(self):
        direction = resolve_direction("zh")
        assert (direction.source_language, direction.target_language) == ("zh", "en")

    def test_unsupported_language(self):
        with pytest.raises(ValueError, match="Unsupported language"):
            resolve_direction("fr")
