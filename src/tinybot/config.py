"""Configuration loading from YAML files and environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml


def _load_dotenv() -> None:
    """Load a .env file from the current directory if present, without python-dotenv."""
    env_path = Path(".env")
    if not env_path.exists():
        return
    with open(env_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip()
            # Don't override existing env vars
            if key not in os.environ:
                os.environ[key] = value


@dataclass
class BotConfig:
    token: str = ""
    api_url: str = "https://slack.com/api"
    default_channel: str = ""
    extensions: list[str] = field(default_factory=list)
    log_level: str = "INFO"

    @classmethod
    def load(
        cls,
        config_path: str | Path | None = None,
        *,
        token: str | None = None,
        api_url: str | None = None,
        default_channel: str | None = None,
        extensions: list[str] | None = None,
    ) -> BotConfig:
        """Load config from YAML file, then overlay env vars, then explicit args."""
        data: dict = {}

        # 0. Load .env file if present (before reading env vars)
        _load_dotenv()

        # 1. YAML file (optional)
        if config_path:
            path = Path(config_path)
            if path.exists():
                with open(path) as f:
                    data = yaml.safe_load(f) or {}

        config = cls(
            token=data.get("token", cls.token),
            api_url=data.get("api_url", cls.api_url),
            default_channel=data.get("default_channel", cls.default_channel),
            extensions=data.get("extensions", []),
            log_level=data.get("log_level", cls.log_level),
        )

        # 2. Environment variables
        if env_token := os.environ.get("TINYBOT_TOKEN"):
            config.token = env_token
        if env_api_url := os.environ.get("TINYBOT_API_URL"):
            config.api_url = env_api_url
        if env_channel := os.environ.get("TINYBOT_DEFAULT_CHANNEL"):
            config.default_channel = env_channel
        if env_level := os.environ.get("TINYBOT_LOG_LEVEL"):
            config.log_level = env_level.upper()

        # 3. Explicit arguments (highest priority)
        if token is not None:
            config.token = token
        if api_url is not None:
            config.api_url = api_url
        if default_channel is not None:
            config.default_channel = default_channel
        if extensions is not None:
            config.extensions = extensions

        return config

    @property
    def rtm_start_url(self) -> str:
        return f"{self.api_url.rstrip('/')}/rtm.start"
