from __future__ import annotations

from pathlib import Path

import pytest

from ai_relay.common.config import Settings, load_settings
from ai_relay.common.errors import ConfigError
from ai_relay.providers import build_provider
from ai_relay.providers.openai_compat import OpenAICompatProvider
from ai_relay.serve import server
from ai_relay.serve.client import build_client


def test_defaults() -> None:
    s = load_settings({}, dotenv=False)
    assert s == Settings()
    assert s.port == 3000
    assert s.max_body_bytes == 10 * 1024 * 1024
    assert s.text_model == "gemini-1.5-flash"
    assert s.vision_model == "gemini-1.5-flash-001"


def test_env_overrides_and_casts() -> None:
    s = load_settings(
        {"PORT": "8080", "GEMINI_API_KEY": "abc", "AI_RELAY_PROVIDER": "OpenAI", "UPSTREAM_TIMEOUT": "5"},
        dotenv=False,
    )
    assert s.port == 8080
    assert s.gemini_api_key == "abc"
    assert s.provider == "openai"
    assert s.upstream_timeout == 5.0


def test_yaml_file_then_env(tmp_path: Path) -> None:
    cfg = tmp_path / "relay.yaml"
    cfg.write_text("port: 9000\ntext_model: file-model\nlog_level: DEBUG\n", encoding="utf-8")
    s = load_settings({"AI_RELAY_CONFIG": str(cfg), "TEXT_MODEL_NAME": "env-model"}, dotenv=False)
    assert s.port == 9000
    assert s.text_model == "env-model"
    assert s.log_level == "DEBUG"


def test_unknown_yaml_key(tmp_path: Path) -> None:
    cfg = tmp_path / "relay.yaml"
    cfg.write_text("colour: blue\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="colour"):
        load_settings({"AI_RELAY_CONFIG": str(cfg)}, dotenv=False)


def test_bad_port() -> None:
    with pytest.raises(ConfigError, match="PORT"):
        load_settings({"PORT": "eighty"}, dotenv=False)


def test_gemini_requires_api_key() -> None:
    with pytest.raises(ConfigError, match="GEMINI_API_KEY"):
        build_client(Settings())


def test_unknown_provider() -> None:
    with pytest.raises(ConfigError, match="Unknown provider"):
        build_provider(Settings(provider="bard"))


def test_openai_provider_needs_no_gemini_key() -> None:
    client = build_client(Settings(provider="openai", openai_base_url="http://vllm:8001", text_model="m"))
    assert isinstance(client.provider, OpenAICompatProvider)
    assert client.provider.base_url == "http://vllm:8001"
    assert client.text_model == "m"


def test_main_exits_without_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(server, "load_settings", lambda: Settings())
    monkeypatch.setattr(server.uvicorn, "run", lambda *a, **kw: pytest.fail("server must not start"))
    with pytest.raises(SystemExit) as exc:
        server.main()
    assert exc.value.code == 1


def test_main_starts_uvicorn(monkeypatch: pytest.MonkeyPatch) -> None:
    started: dict = {}
    monkeypatch.setattr(server, "load_settings", lambda: Settings(provider="openai", port=4321))
    monkeypatch.setattr(server.uvicorn, "run", lambda app, **kw: started.update(app=app, **kw))
    server.main()
    assert started["port"] == 4321
    assert started["app"].state.client.provider.name == "openai"
