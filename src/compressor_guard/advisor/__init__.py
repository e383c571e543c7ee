"""Health Advisor Module - LLM maintenance advisory with a fixed fallback."""

from .advisor import (
    EMPTY_RESPONSE_MESSAGE,
    UNAVAILABLE_MESSAGE,
    UNKNOWN_UNIT_MESSAGE,
    HealthAdvisor,
)
from .models import AdvisorConfig, LLMProvider

__all__ = [
    "AdvisorConfig",
    "EMPTY_RESPONSE_MESSAGE",
    "HealthAdvisor",
    "LLMProvider",
    "UNAVAILABLE_MESSAGE",
    "UNKNOWN_UNIT_MESSAGE",
]
