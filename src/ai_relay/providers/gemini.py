"""Gemini backend via the google-genai SDK."""
from __future__ import annotations
from typing import Any, Mapping, Sequence

from google import genai
from google.genai import types

from ai_relay.common.errors import GenerationError
from ai_relay.common.schema import Attachment


def _safety_settings(safety: Sequence[tuple[str, str]]) -> list[types.SafetySetting]:
    return [
        types.SafetySetting(
            category=types.HarmCategory(category),
            threshold=types.HarmBlockThreshold(threshold),
        )
        for category, threshold in safety
    ]


class GeminiProvider:
    """Calls ``models.generate_content`` on a single shared SDK client."""

    name = "gemini"

    def __init__(self, api_key: str | None = None, client: Any | None = None) -> None:
        self._client = client if client is not None else genai.Client(api_key=api_key)

    def complete(
        self,
        model: str,
        prompt: str,
        attachments: Sequence[Attachment],
        config: Mapping[str, Any],
        safety: Sequence[tuple[str, str]],
    ) -> str:
        contents: list[Any] = [prompt]
        contents.extend(types.Part.from_bytes(data=a.data, mime_type=a.mime_type) for a in attachments)

        resp = self._client.models.generate_content(
            model=model,
            contents=contents,
            config=types.GenerateContentConfig(
                safety_settings=_safety_settings(safety),
                **config,
            ),
        )
        text = resp.text
        if text is None:
            feedback = getattr(resp, "prompt_feedback", None)
            reason = getattr(feedback, "block_reason", None)
            if reason is not None:
                raise GenerationError(f"Response was blocked: {reason}")
            raise GenerationError("Model returned no text")
        return text
