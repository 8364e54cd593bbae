"""Pipeline data model: identifiers, indicators, scores, chains and verdicts."""

from __future__ import annotations

from typing import Any, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, computed_field

Variant = Literal["email", "url"]
EmailBand = Literal["safe", "risky", "invalid"]
UrlBand = Literal["safe", "suspicious", "dangerous"]
RiskBand = Literal["safe", "risky", "invalid", "suspicious", "dangerous"]
EmailVerdict = Literal["legitimate", "suspicious", "fake"]
UrlVerdict = Literal["safe", "suspicious", "dangerous"]
VerdictSource = Literal["arbiter", "fallback"]
GatewayTransition = Literal[
    "arbiter_verdict",
    "fallback_unavailable",
    "fallback_timeout",
    "fallback_error",
    "fallback_invalid_verdict",
    "fallback_invalid_input",
]
StopReason = Literal[
    "completed",
    "cycle",
    "hop_budget",
    "time_budget",
    "hop_timeout",
    "hop_error",
    "unsupported_scheme",
]

VERDICTS: dict[str, tuple[str, ...]] = {
    "email": get_args(EmailVerdict),
    "url": get_args(UrlVerdict),
}


class Identifier(BaseModel):
    model_config = ConfigDict(frozen=True)

    raw: str
    variant: Variant


class Indicator(BaseModel):
    model_config = ConfigDict(frozen=True)

    rule: str
    description: str
    weight: int = Field(ge=0)


class ScoreResult(BaseModel):
    variant: Variant
    raw_score: int = Field(ge=0)
    normalized_score: int = Field(ge=0, le=100)
    indicators: list[Indicator] = Field(default_factory=list)
    risk_band: RiskBand
    reason: str = ""

    @computed_field
    @property
    def is_spam(self) -> bool:
        return self.variant == "email" and self.normalized_score > 35

    @computed_field
    @property
    def is_safe(self) -> bool:
        return self.variant == "url" and self.normalized_score < 30

    def descriptions(self) -> list[str]:
        return [item.description for item in self.indicators]


class RedirectChain(BaseModel):
    urls: list[str] = Field(min_length=1)
    is_shortened: bool = False
    truncated_by_budget: bool = False
    cycle_detected: bool = False
    stop_reason: StopReason = "completed"
    elapsed_ms: int = 0

    @property
    def original_url(self) -> str:
        return self.urls[0]

    @property
    def final_url(self) -> str:
        return self.urls[-1]

    @property
    def scoring_target(self) -> str:
        # An expired total budget means the chain is not trusted as a destination.
        if self.stop_reason == "time_budget":
            return self.original_url
        return self.final_url


class ArbiterVerdict(BaseModel):
    verdict: str
    explanation: str = ""


class ArbiterOutput(BaseModel):
    """Structured output requested from the LLM arbiter."""

    verdict: str
    explanation: str = Field(default="", description="Clear 2-3 sentence explanation for end users.")
    reasoning: str = Field(default="", description="Technical analysis for security professionals.")


class GatewayOutcome(BaseModel):
    verdict: ArbiterVerdict
    source: VerdictSource
    transition: GatewayTransition


class FinalResult(BaseModel):
    identifier: str
    variant: Variant
    is_risky: bool
    risk_band: RiskBand
    normalized_score: int = Field(ge=0, le=100)
    verdict: str
    indicators: list[Indicator] = Field(default_factory=list)
    local_score: ScoreResult
    redirect_chain: list[str] | None = None
    final_destination: str | None = None
    is_shortened: bool | None = None
    redirect_stop_reason: StopReason | None = None
    explanation: str
    verdict_source: VerdictSource
    transition: GatewayTransition
    trace: list[dict[str, Any]] = Field(default_factory=list)
