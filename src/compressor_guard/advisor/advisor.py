"""Health Advisor - LLM-written maintenance advisory for one unit.

The advisor reads a snapshot of ledger data and never mutates it. Any
failure (missing API key, SDK not installed, network error) is logged and
replaced by a fixed message, so callers always get displayable text.

Usage:
    advisor = HealthAdvisor()
    text = advisor.analyze_unit(ledger, "c1")
"""

from __future__ import annotations

import logging

from ..common.config import Settings, get_anthropic_api_key, get_openai_api_key, settings
from ..common.models import CompressorUnit, MaintenanceRecord, RunSession
from ..ledger import Ledger
from .models import AdvisorConfig, LLMProvider
from .prompts import SYSTEM_PROMPT, build_analysis_prompt

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = (
    "AI analysis is temporarily unavailable. Check the network settings or API key."
)
EMPTY_RESPONSE_MESSAGE = "Could not generate an analysis report, please try again later."
UNKNOWN_UNIT_MESSAGE = "Unit not found."


class HealthAdvisor:
    """Generates a short health report from a unit's runtime and history."""

    def __init__(self, config: AdvisorConfig | None = None, app_settings: Settings | None = None):
        self.settings = app_settings or settings
        self.config = config or AdvisorConfig(
            provider=self.settings.advisor.provider,
            temperature=self.settings.advisor.temperature,
            max_tokens=self.settings.advisor.max_tokens,
        )

    def analyze(
        self,
        unit: CompressorUnit,
        recent_runs: list[RunSession],
        maintenance_history: list[MaintenanceRecord],
    ) -> str:
        """Return advisory text for ``unit``; never raises on LLM failure."""
        prompt = build_analysis_prompt(
            unit,
            recent_runs[: self.config.recent_run_count],
            maintenance_history[: self.config.recent_maintenance_count],
        )
        try:
            text = self._call_llm(SYSTEM_PROMPT, prompt)
        except Exception:
            logger.error("Health analysis failed for %s", unit.name, exc_info=True)
            return UNAVAILABLE_MESSAGE

        text = (text or "").strip()
        if not text:
            logger.warning("Empty analysis response for %s", unit.name)
            return EMPTY_RESPONSE_MESSAGE
        return text

    def analyze_unit(self, ledger: Ledger, compressor_id: str) -> str:
        """Look up a unit and its recent history in the ledger, then analyze it."""
        unit = ledger.get_unit(compressor_id)
        if unit is None:
            return UNKNOWN_UNIT_MESSAGE
        return self.analyze(
            unit,
            ledger.recent_run_sessions(compressor_id, self.config.recent_run_count),
            ledger.recent_maintenance(compressor_id, self.config.recent_maintenance_count),
        )

    # --- LLM Integration ---

    def _call_llm(self, system_prompt: str, user_prompt: str) -> str:
        if self.config.provider == LLMProvider.OPENAI:
            return self._call_openai(system_prompt, user_prompt)
        return self._call_anthropic(system_prompt, user_prompt)

    def _call_openai(self, system_prompt: str, user_prompt: str) -> str:
        """Call OpenAI GPT API."""
        import openai

        client = openai.OpenAI(api_key=get_openai_api_key())
        model = self.config.model or self.settings.advisor.openai_model

        response = client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=self.config.temperature,
            max_tokens=self.config.max_tokens,
        )
        return response.choices[0].message.content or ""

    def _call_anthropic(self, system_prompt: str, user_prompt: str) -> str:
        """Call Anthropic Claude API."""
        import anthropic

        client = anthropic.Anthropic(api_key=get_anthropic_api_key())
        model = self.config.model or self.settings.advisor.anthropic_model

        response = client.messages.create(
            model=model,
            max_tokens=self.config.max_tokens,
            system=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
            temperature=self.config.temperature,
        )
        return response.content[0].text
