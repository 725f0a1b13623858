from __future__ import annotations

import asyncio
import logging

from google import genai
from google.genai import types

from quickgpt.core.errors import UpstreamError
from quickgpt.core.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class GeminiService:
    """Single-turn text completion; the prompt is sent without prior history."""

    def __init__(self, settings: Settings | None = None):
        self._settings = settings or get_settings()

        if not self._settings.gemini_api_key:
            raise RuntimeError("GEMINI_API_KEY is not configured")

        self._client = genai.Client(api_key=self._settings.gemini_api_key)

    async def generate_reply(self, prompt: str) -> str:
        contents = [
            types.Content(role="user", parts=[types.Part.from_text(text=prompt)])
        ]

        def _send() -> str:
            response = self._client.models.generate_content(
                model=self._settings.gemini_model,
                contents=contents,
            )

            # google-genai responses typically expose aggregated text via `.text`.
            text = getattr(response, "text", None)
            if isinstance(text, str) and text.strip():
                return text
            raise UpstreamError("The model returned an empty reply")

        try:
            return await asyncio.to_thread(_send)
        except UpstreamError:
            raise
        except Exception as e:
            logger.exception("Gemini request failed")
            raise UpstreamError(f"Text generation failed: {e}") from e
