"""
BaseForge configuration: all environment variables in one place.

Read from environment at runtime. Never hardcode secrets.
"""

from __future__ import annotations

import os

from baseforge.kernel.snapshot import DEFAULT_STORAGE_KEY
from baseforge.kernel.types import AI_PROVIDERS, AiConfig

DEFAULT_MODELS: dict[str, str] = {
    "ANTHROPIC": "claude-sonnet-4-20250514",
    "OPENAI": "gpt-4-turbo",
}


class Settings:
    """Application settings from environment variables."""

    # Assistant
    AI_PROVIDER: str = os.environ.get("BASEFORGE_AI_PROVIDER", "ANTHROPIC").upper()
    AI_MODEL: str = os.environ.get("BASEFORGE_AI_MODEL", "")
    AI_MAX_TOKENS: int = int(os.environ.get("BASEFORGE_AI_MAX_TOKENS", "1024"))
    AI_MAX_RETRIES: int = 1
    ANTHROPIC_API_KEY: str = os.environ.get("ANTHROPIC_API_KEY", "")
    OPENAI_API_KEY: str = os.environ.get("OPENAI_API_KEY", "")

    # Snapshot storage
    DATA_DIR: str = os.environ.get("BASEFORGE_DATA_DIR", os.path.expanduser("~/.baseforge"))
    STORAGE_KEY: str = os.environ.get("BASEFORGE_STORAGE_KEY", DEFAULT_STORAGE_KEY)

    def default_ai_config(self) -> AiConfig:
        """Assistant config used until a snapshot supplies one."""
        provider = self.AI_PROVIDER if self.AI_PROVIDER in AI_PROVIDERS else "ANTHROPIC"
        api_key = self.OPENAI_API_KEY if provider == "OPENAI" else self.ANTHROPIC_API_KEY
        return AiConfig(
            provider=provider,
            api_key=api_key,
            model=self.AI_MODEL or DEFAULT_MODELS[provider],
        )


settings = Settings()
