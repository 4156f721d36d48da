"""Event payload and error models for the Interpreter Service."""

from .error import ErrorCode, ErrorResponse
from .events import (
    AudioStartPayload,
    ConnectionEstablishedPayload,
    Language,
    LatencyMetrics,
    ParticipantEventPayload,
    ParticipantInfo,
    ProcessingStatusPayload,
    Role,
    SessionJoinedPayload,
    SessionJoinPayload,
    Stage,
    TranscriptPayload,
    TranslationChunkPayload,
    TranslationCompletePayload,
    TTSChunkPayload,
    TTSEventPayload,
    UtteranceRef,
    now_ms,
)

__all__ = [
    # Errors
    "ErrorCode",
    "ErrorResponse",
    # Enums
    "Language",
    "Role",
    "Stage",
    # Inbound
    "AudioStartPayload",
    "SessionJoinPayload",
    # Outbound
    "ConnectionEstablishedPayload",
    "LatencyMetrics",
    "ParticipantEventPayload",
    "ParticipantInfo",
    "ProcessingStatusPayload",
    "SessionJoinedPayload",
    "TranscriptPayload",
    "TranslationChunkPayload",
    "TranslationCompletePayload",
    "TTSChunkPayload",
    "TTSEventPayload",
    "UtteranceRef",
    "now_ms",
]
