"""Arbitration service built on OpenAI Agents SDK."""

from __future__ import annotations

from dataclasses import dataclass
import importlib.util
import logging

from veritas_check.arbiter.prompts import INSTRUCTIONS, build_request
from veritas_check.arbiter.providers import (
    ProviderConfig,
    build_model_reference,
    requires_api_key,
    resolve_api_key,
)
from veritas_check.core.errors import ArbiterUnavailable
from veritas_check.domain.models import ArbiterOutput, ArbiterVerdict, ScoreResult, Variant

logger = logging.getLogger(__name__)


@dataclass
class LlmArbitrationService:
    provider: str = "litellm"
    model: str = "gemini/gemini-2.0-flash-lite"
    temperature: float = 0.0
    api_base: str | None = None
    api_key: str | None = None
    max_turns: int = 2

    @property
    def provider_config(self) -> ProviderConfig:
        return ProviderConfig(
            provider=self.provider,
            model=self.model,
            api_base=self.api_base,
            api_key=self.api_key,
        )

    def is_available(self) -> bool:
        if importlib.util.find_spec("agents") is None:
            return False
        cfg = self.provider_config
        if requires_api_key(cfg):
            return bool(resolve_api_key(cfg))
        return True

    def _build_agent(self, variant: Variant):  # type: ignore[no-untyped-def]
        from agents import Agent, AgentOutputSchema, ModelSettings

        return Agent(
            name=f"veritas-{variant}-arbiter",
            instructions=INSTRUCTIONS[variant],
            output_type=AgentOutputSchema(ArbiterOutput, strict_json_schema=False),
            model=build_model_reference(self.provider_config),
            model_settings=ModelSettings(temperature=self.temperature),
        )

    async def classify(self, identifier: str, variant: Variant, local: ScoreResult) -> ArbiterVerdict:
        if not self.is_available():
            raise ArbiterUnavailable(f"Provider '{self.provider}' is not configured.")

        from agents import Runner

        agent = self._build_agent(variant)
        logger.debug("Consulting %s/%s for %s %s", self.provider, self.model, variant, identifier)
        run = await Runner.run(
            agent,
            build_request(identifier, variant, local),
            max_turns=self.max_turns,
        )
        output = ArbiterOutput.model_validate(getattr(run, "final_output", {}))
        return ArbiterVerdict(
            verdict=output.verdict.strip().lower(),
            explanation=output.explanation.strip(),
        )
