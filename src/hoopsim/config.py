"""Application settings via pydantic-settings. Loads from environment and .env file."""

from __future__ import annotations

import logging

from pydantic_settings import BaseSettings

DEFAULT_COMMENTARY_MODEL = "claude-sonnet-4-5-20250929"


class Settings(BaseSettings):
    """hoopsim configuration.

    All values can be overridden via environment variables or .env file.
    An empty ``anthropic_api_key`` disables AI commentary; highlights then use
    the deterministic templates.
    """

    # External services
    anthropic_api_key: str = ""

    # Commentary
    hoopsim_commentary_model: str = DEFAULT_COMMENTARY_MODEL
    hoopsim_commentary_max_tokens: int = 1000
    hoopsim_commentary_timeout_seconds: float = 20.0

    # Environment
    hoopsim_env: str = "development"

    # Logging
    hoopsim_log_level: str = "INFO"

    model_config = {"env_prefix": "", "env_file": ".env", "extra": "ignore"}

    @property
    def commentary_enabled(self) -> bool:
        return bool(self.anthropic_api_key)


def configure_logging(settings: Settings) -> None:
    """Set up root logging from settings."""
    logging.basicConfig(
        level=getattr(logging, settings.hoopsim_log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
