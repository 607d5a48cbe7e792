"""Generation client: the single seam between handlers and the provider."""
from __future__ import annotations
import logging
import time
from typing import Any

from ai_relay.common.config import Settings
from ai_relay.common.errors import GenerationError
from ai_relay.common.schema import GenerationRequest, GenerationResult, ModelClass
from ai_relay.providers import Provider, build_provider

LOGGER = logging.getLogger("ai_relay.serve.client")

GENERATION_CONFIG: dict[str, Any] = {
    "temperature": 0.7,
    "top_p": 0.95,
    "top_k": 64,
    "max_output_tokens": 8192,
    "response_mime_type": "text/plain",
}

SAFETY_SETTINGS: tuple[tuple[str, str], ...] = tuple(
    (category, "BLOCK_MEDIUM_AND_ABOVE")
    for category in (
        "HARM_CATEGORY_HARASSMENT",
        "HARM_CATEGORY_HATE_SPEECH",
        "HARM_CATEGORY_SEXUALLY_EXPLICIT",
        "HARM_CATEGORY_DANGEROUS_CONTENT",
    )
)


class GenerationClient:
    """
    Read-only wrapper around one provider, shared by all requests.

    Args:
        provider: Backend implementing ``complete``.
        text_model: Model used for text-only requests.
        vision_model: Model used when an attachment is present.
    """

    def __init__(self, provider: Provider, text_model: str, vision_model: str) -> None:
        self.provider = provider
        self.text_model = text_model
        self.vision_model = vision_model

    def model_for(self, model_class: ModelClass) -> str:
        return self.vision_model if model_class is ModelClass.VISION else self.text_model

    def generate(self, request: GenerationRequest, model_class: ModelClass | None = None) -> GenerationResult:
        """
        Make exactly one provider call and return the trimmed text.

        Raises:
            GenerationError: Any provider failure, carrying the provider's message.
        """
        if model_class is None:
            model_class = ModelClass.VISION if request.attachments else ModelClass.TEXT
        model = self.model_for(model_class)
        # Fixed config is applied last so requests cannot override it.
        config = {**request.options, **GENERATION_CONFIG}

        start = time.time()
        try:
            raw = self.provider.complete(model, request.prompt, request.attachments, config, SAFETY_SETTINGS)
        except GenerationError as e:
            LOGGER.error("Provider %s returned no usable output from %s: %s", self.provider.name, model, e)
            raise
        except Exception as e:
            LOGGER.error("Provider %s request to %s failed: %s", self.provider.name, model, e)
            raise GenerationError(str(e)) from e

        latency = int((time.time() - start) * 1000)
        LOGGER.debug("Provider %s model=%s latency=%sms", self.provider.name, model, latency)
        return GenerationResult(text=raw.strip(), model=model, latency_ms=latency)


def build_client(settings: Settings) -> GenerationClient:
    """
    Construct the process-wide client.

    Raises:
        ConfigError: Provider cannot be built (e.g. missing credential).
    """
    return GenerationClient(
        provider=build_provider(settings),
        text_model=settings.text_model,
        vision_model=settings.vision_model,
    )
