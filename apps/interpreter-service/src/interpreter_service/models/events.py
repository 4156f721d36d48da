"""Socket.IO event payload models.

Inbound payloads are validated with these models; outbound payloads are built
from them and serialized with camelCase keys to match the browser client.
"""

import time
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt
from pydantic.alias_generators import to_camel


def now_ms() -> int:
    """Wall-clock timestamp in epoch milliseconds."""
    return int(time.time() * 1000)


class Role(str, Enum):
    """Participant roles. A session holds at most one connection per role."""

    STUDENT = "student"
    COUNSELOR = "counselor"

    @property
    def peer(self) -> "Role":
        """The opposite role in a two-party session."""
        return Role.COUNSELOR if self is Role.STUDENT else Role.STUDENT


class Language(str, Enum):
    """Spoken languages supported by the direction table."""

    EN = "en"
    ZH = "zh"


class Stage(str, Enum):
    """Pipeline stages reported in `status:processing`."""

    STT = "stt"
    TRANSLATION = "translation"
    TTS = "tts"


class WireModel(BaseModel):
    """Base for all event payloads: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )

    def to_wire(self) -> dict[str, Any]:
        """Serialize for Socket.IO emission."""
        return self.model_dump(by_alias=True)


# -----------------------------------------------------------------------------
# Client -> Server
# -----------------------------------------------------------------------------


class SessionJoinPayload(WireModel):
    """`session:join` payload."""

    session_id: str = Field(min_length=1, max_length=64)
    role: Role


class AudioStartPayload(WireModel):
    """`audio:start` payload."""

    language: str = Field(min_length=1)


# -----------------------------------------------------------------------------
# Server -> Client: connection and session
# -----------------------------------------------------------------------------


class ConnectionEstablishedPayload(WireModel):
    """`connection:established` payload."""

    connection_id: str


class ParticipantInfo(WireModel):
    """One entry of `session:joined.participants`."""

    role: Role
    connection_id: str
    connected: bool = True


class SessionJoinedPayload(WireModel):
    """`session:joined` payload."""

    session_id: str
    participants: list[ParticipantInfo]
    started_at: int = Field(default_factory=now_ms)


class ParticipantEventPayload(WireModel):
    """`session:participant-joined` / `session:participant-left` payload."""

    role: Role
    connection_id: str


# -----------------------------------------------------------------------------
# Server -> Client: pipeline output
# -----------------------------------------------------------------------------


class TranscriptPayload(WireModel):
    """`transcript:interim` / `transcript:final` payload."""

    id: str
    text: str
    speaker: Role
    language: str
    timestamp: int = Field(default_factory=now_ms)
    is_final: bool


class UtteranceRef(WireModel):
    """`translation:start` payload."""

    id: str


class TranslationChunkPayload(WireModel):
    """`translation:chunk` payload."""

    id: str
    chunk: str


class TranslationCompletePayload(WireModel):
    """`translation:complete` payload."""

    id: str
    original_text: str
    translated_text: str
    direction: str
    timestamp: int = Field(default_factory=now_ms)


class TTSEventPayload(WireModel):
    """`tts:start` / `tts:complete` payload."""

    id: str
    timestamp: int = Field(default_factory=now_ms)


class TTSChunkPayload(WireModel):
    """`tts:chunk` payload. `chunk` is opaque encoded audio."""

    id: str
    chunk: bytes
    timestamp: int = Field(default_factory=now_ms)


class ProcessingStatusPayload(WireModel):
    """`status:processing` payload."""

    stage: Stage
    active: bool


class LatencyMetrics(WireModel):
    """`status:latency` payload, all values in milliseconds."""

    stt: NonNegativeInt
    translation: NonNegativeInt
    tts: NonNegativeInt
    total: NonNegativeInt
