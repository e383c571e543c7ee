"""Project configuration and paths.

Loads settings from config/settings.yaml and environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .models import LLMProvider

# === Paths ===
PROJECT_ROOT = Path(__file__).resolve().parents[3]
CONFIG_DIR = PROJECT_ROOT / "config"
DATA_DIR = PROJECT_ROOT / "data"

# Load .env from project root
load_dotenv(PROJECT_ROOT / ".env")


class StorageSettings(BaseModel):
    """Snapshot storage settings."""
    db_path: str = str(DATA_DIR / "compressor_guard.db")
    storage_key: str = "compressor_guard_data_v1"


class TickerSettings(BaseModel):
    """Runtime simulation ticker settings."""
    period_seconds: float = Field(default=60.0, gt=0)
    minutes_per_tick: int = Field(default=1, ge=0)


class AdvisorSettings(BaseModel):
    """LLM settings for the health advisor."""
    provider: LLMProvider = LLMProvider.OPENAI
    openai_model: str = "gpt-4o"
    anthropic_model: str = "claude-sonnet-4-5-20250929"
    max_tokens: int = 1024
    temperature: float = 0.3


class Settings(BaseModel):
    """Top-level application settings."""
    storage: StorageSettings = Field(default_factory=StorageSettings)
    ticker: TickerSettings = Field(default_factory=TickerSettings)
    advisor: AdvisorSettings = Field(default_factory=AdvisorSettings)
    operator_name: str = "current user"
    seed_path: str = str(CONFIG_DIR / "seed.yaml")

    @classmethod
    def load(cls, settings_path: str | Path | None = None) -> Settings:
        """Load settings from config/settings.yaml, falling back to defaults.

        COMPRESSOR_GUARD_DB_PATH overrides the configured database path.
        """
        path = Path(settings_path) if settings_path else CONFIG_DIR / "settings.yaml"
        data: dict = {}
        if path.exists():
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        settings = cls(**data)
        if db_path := os.getenv("COMPRESSOR_GUARD_DB_PATH"):
            settings.storage.db_path = db_path
        return settings


def get_openai_api_key() -> str:
    """Get OpenAI API key from environment."""
    key = os.getenv("OPENAI_API_KEY", "")
    if not key:
        raise ValueError("OPENAI_API_KEY not set in environment")
    return key


def get_anthropic_api_key() -> str:
    """Get Anthropic API key from environment."""
    key = os.getenv("ANTHROPIC_API_KEY", "")
    if not key:
        raise ValueError("ANTHROPIC_API_KEY not set in environment")
    return key


# Singleton settings instance
settings = Settings.load()
