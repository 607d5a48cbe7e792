from __future__ import annotations

from typing import Any, Mapping, Sequence

import pytest
from fastapi.testclient import TestClient

from ai_relay.common.config import Settings
from ai_relay.common.schema import Attachment
from ai_relay.serve.client import GenerationClient
from ai_relay.serve.fastapi_app import create_app


class StubProvider:
    """Records every call and answers with queued replies (or raises)."""

    name = "stub"

    def __init__(self, replies: Sequence[str] = ("stub reply",), error: Exception | None = None) -> None:
        self.replies = list(replies)
        self.error = error
        self.calls: list[dict[str, Any]] = []

    def complete(
        self,
        model: str,
        prompt: str,
        attachments: Sequence[Attachment],
        config: Mapping[str, Any],
        safety: Sequence[tuple[str, str]],
    ) -> str:
        self.calls.append(
            {"model": model, "prompt": prompt, "attachments": list(attachments), "config": dict(config), "safety": list(safety)}
        )
        if self.error is not None:
            raise self.error
        if len(self.replies) > 1:
            return self.replies.pop(0)
        return self.replies[0]


@pytest.fixture
def provider() -> StubProvider:
    return StubProvider()


@pytest.fixture
def gen_client(provider: StubProvider) -> GenerationClient:
    return GenerationClient(provider, text_model="text-model", vision_model="vision-model")


@pytest.fixture
def settings() -> Settings:
    return Settings(gemini_api_key="test-key")


@pytest.fixture
def client(gen_client: GenerationClient, settings: Settings) -> TestClient:
    return TestClient(create_app(client=gen_client, settings=settings))
