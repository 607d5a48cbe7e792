"""Provider backends and the factory that picks one from settings."""
from __future__ import annotations
from typing import Any, Mapping, Protocol, Sequence

from ai_relay.common.config import Settings
from ai_relay.common.errors import ConfigError
from ai_relay.common.schema import Attachment


class Provider(Protocol):
    name: str

    def complete(
        self,
        model: str,
        prompt: str,
        attachments: Sequence[Attachment],
        config: Mapping[str, Any],
        safety: Sequence[tuple[str, str]],
    ) -> str:
        """Return the raw text produced by ``model`` for ``prompt``."""
        ...


def build_provider(settings: Settings) -> Provider:
    """
    Construct the provider named by ``settings.provider``.

    Raises:
        ConfigError: Unknown provider or missing credential.
    """
    if settings.provider == "gemini":
        if not settings.gemini_api_key:
            raise ConfigError("GEMINI_API_KEY is not set. Please check your .env file.")
        from ai_relay.providers.gemini import GeminiProvider

        return GeminiProvider(api_key=settings.gemini_api_key)
    if settings.provider == "openai":
        from ai_relay.providers.openai_compat import OpenAICompatProvider

        return OpenAICompatProvider(
            base_url=settings.openai_base_url,
            api_key=settings.openai_api_key,
            timeout=settings.upstream_timeout,
        )
    raise ConfigError(f"Unknown provider: {settings.provider!r} (expected 'gemini' or 'openai')")
