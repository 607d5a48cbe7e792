"""Backend for OpenAI-compatible chat servers (vLLM, llama.cpp server, ...)."""
from __future__ import annotations
import base64
import logging
from typing import Any, Mapping, Sequence

import httpx

from ai_relay.common.errors import GenerationError
from ai_relay.common.schema import Attachment

LOGGER = logging.getLogger("ai_relay.providers.openai")

# generation config key -> chat completions field
_PARAM_MAP = {
    "temperature": "temperature",
    "top_p": "top_p",
    "top_k": "top_k",
    "max_output_tokens": "max_tokens",
}


def _user_content(prompt: str, attachments: Sequence[Attachment]) -> str | list[dict[str, Any]]:
    if not attachments:
        return prompt
    parts: list[dict[str, Any]] = [{"type": "text", "text": prompt}]
    for a in attachments:
        b64 = base64.b64encode(a.data).decode("ascii")
        parts.append({"type": "image_url", "image_url": {"url": f"data:{a.mime_type};base64,{b64}"}})
    return parts


class OpenAICompatProvider:
    """POSTs ``/v1/chat/completions``. Safety settings have no wire equivalent and are not sent."""

    name = "openai"

    def __init__(self, base_url: str, api_key: str = "not-required", timeout: float = 120.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    def complete(
        self,
        model: str,
        prompt: str,
        attachments: Sequence[Attachment],
        config: Mapping[str, Any],
        safety: Sequence[tuple[str, str]],
    ) -> str:
        url = f"{self.base_url}/v1/chat/completions"
        headers = {"Authorization": f"Bearer {self.api_key}"}
        payload: dict[str, Any] = {
            "model": model,
            "messages": [{"role": "user", "content": _user_content(prompt, attachments)}],
            "stream": False,
        }
        for key, field in _PARAM_MAP.items():
            if key in config:
                payload[field] = config[key]

        with httpx.Client(timeout=self.timeout) as client:
            r = client.post(url, headers=headers, json=payload)
            r.raise_for_status()
            data = r.json()

        try:
            return str(data["choices"][0]["message"]["content"])
        except (KeyError, IndexError, TypeError) as e:
            LOGGER.error("Malformed response: %s", e)
            raise GenerationError("Malformed upstream response") from e
