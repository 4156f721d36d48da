"""
OpenAI Streaming Translation Provider.

Translates counseling utterances with OpenAI chat completions in streaming
mode, forwarding each content delta as soon as it arrives.
"""

import asyncio
import logging

import openai
from openai import AsyncOpenAI

from .errors import TranslationError, TranslationErrorType, create_translation_error
from .interface import BaseStreamingTranslator, FragmentCallback
from .profiles import PROFILES, get_profile

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o"
DEFAULT_TIMEOUT_MS = 10000


class OpenAIStreamingTranslator(BaseStreamingTranslator):
    """Streaming translator using the OpenAI chat completions API.

    Environment Variables:
    - OPENAI_API_KEY: Required. API key for OpenAI.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        client: AsyncOpenAI | None = None,
    ):
        """Initialize the translator.

        Args:
            api_key: OpenAI API key (ignored when a client is given)
            model: Chat model name
            timeout_ms: Upper bound for one whole streamed translation
            client: Pre-built client, mainly for tests

        Raises:
            ValueError: If neither an API key nor a client is provided
        """
        if client is None and not api_key:
            raise ValueError("OpenAI API key is required")
        self._client = client or AsyncOpenAI(api_key=api_key)
        self._model = model
        self._timeout_s = timeout_ms / 1000

    @property
    def component_instance(self) -> str:
        return f"openai-{self._model}"

    async def translate_streaming(
        self,
        text: str,
        direction: str,
        on_fragment: FragmentCallback,
    ) -> str:
        if not text.strip():
            raise TranslationError("Cannot translate empty text", TranslationErrorType.EMPTY_INPUT)
        if direction not in PROFILES:
            raise TranslationError(
                f"Unsupported translation direction: {direction}",
                TranslationErrorType.UNSUPPORTED_DIRECTION,
            )

        try:
            translated = await asyncio.wait_for(
                self._stream(text, direction, on_fragment),
                timeout=self._timeout_s,
            )
        except TranslationError:
            raise
        except (openai.OpenAIError, TimeoutError, ConnectionError) as e:
            logger.error(f"Translation failed: direction={direction}, error={e!r}")
            raise create_translation_error(e) from e

        if not translated.strip():
            raise TranslationError(
                "Translation produced no text", TranslationErrorType.EMPTY_OUTPUT
            )

        return translated

    async def _stream(self, text: str, direction: str, on_fragment: FragmentCallback) -> str:
        profile = get_profile(direction)
        stream = await self._client.chat.completions.create(
            model=self._model,
            messages=[
                {"role": "system", "content": profile.system_prompt},
                {"role": "user", "content": text},
            ],
            temperature=profile.temperature,
            max_tokens=profile.max_tokens,
            stream=True,
        )

        fragments: list[str] = []
        async for chunk in stream:
            if not chunk.choices:
                continue
            content = chunk.choices[0].delta.content
            if content:
                fragments.append(content)
                await on_fragment(content)

        return "".join(fragments)

    async def shutdown(self) -> None:
        await self._client.close()
