"""Tests for application configuration."""

import logging

import pytest

from hoopsim.config import DEFAULT_COMMENTARY_MODEL, Settings, configure_logging


class TestSettings:
    def test_defaults(self, settings: Settings) -> None:
        assert settings.hoopsim_commentary_model == DEFAULT_COMMENTARY_MODEL
        assert settings.hoopsim_commentary_timeout_seconds == 20.0
        assert not settings.commentary_enabled

    def test_key_enables_commentary(self) -> None:
        assert Settings(anthropic_api_key="sk-test").commentary_enabled

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-env")
        monkeypatch.setenv("HOOPSIM_COMMENTARY_MAX_TOKENS", "400")
        settings = Settings()
        assert settings.anthropic_api_key == "sk-env"
        assert settings.hoopsim_commentary_max_tokens == 400


class TestLogging:
    def test_configure_logging_sets_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[dict] = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))
        configure_logging(Settings(hoopsim_log_level="debug"))
        assert calls[0]["level"] == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[dict] = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))
        configure_logging(Settings(hoopsim_log_level="chatty"))
        assert calls[0]["level"] == logging.INFO
