"""Data models for the health advisor module."""

from __future__ import annotations

from dataclasses import dataclass

from ..common.models import LLMProvider


@dataclass
class AdvisorConfig:
    """Configuration for the health advisor."""
    provider: LLMProvider = LLMProvider.OPENAI
    model: str = ""  # Empty = use default from settings
    temperature: float = 0.3
    max_tokens: int = 1024
    recent_run_count: int = 5
    recent_maintenance_count: int = 3
