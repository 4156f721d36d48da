"""Translation directions keyed by the speaker's announced language.

A direction fixes the source and target languages, the translation
instruction profile, and which synthesizer voices the result.
"""

from dataclasses import dataclass

from interpreter_service.models.events import Language


@dataclass(frozen=True)
class Direction:
    """One interpretation direction."""

    name: str  # also the translation profile name
    source_language: str
    target_language: str
    synthesizer: str  # "azure" or "elevenlabs"


EN_TO_ZH = Direction(
    name="en-to-zh",
    source_language=Language.EN.value,
    target_language=Language.ZH.value,
    synthesizer="azure",
)

ZH_TO_EN = Direction(
    name="zh-to-en",
    source_language=Language.ZH.value,
    target_language=Language.EN.value,
    synthesizer="elevenlabs",
)

DIRECTIONS: dict[str, Direction] = {
    EN_TO_ZH.source_language: EN_TO_ZH,
    ZH_TO_EN.source_language: ZH_TO_EN,
}


def resolve_direction(language: str) -> Direction:
    """Return the direction for a source language.

    Raises:
        ValueError: If the language has no direction.
    """
    direction = DIRECTIONS.get(language)
    if direction is None:
        raise ValueError(
            f"Unsupported language '{language}'. Supported: {', '.join(sorted(DIRECTIONS))}"
        )
    return direction
