"""Combine local score, arbiter outcome and redirect chain into the public result."""

from __future__ import annotations

from typing import Any

from veritas_check.domain.models import FinalResult, GatewayOutcome, RedirectChain, RiskBand, ScoreResult, Variant

DISPLAY_SCORES: dict[str, dict[str, int]] = {
    "email": {"fake": 85, "suspicious": 60, "legitimate": 20},
    "url": {"dangerous": 85, "suspicious": 60, "safe": 15},
}

_VERDICT_BANDS: dict[str, dict[str, RiskBand]] = {
    "email": {"fake": "invalid", "suspicious": "risky", "legitimate": "safe"},
    "url": {"dangerous": "dangerous", "suspicious": "suspicious", "safe": "safe"},
}

SAFE_VERDICTS = {"email": "legitimate", "url": "safe"}


def assemble(
    identifier: str,
    variant: Variant,
    local: ScoreResult,
    outcome: GatewayOutcome,
    chain: RedirectChain | None = None,
    trace: list[dict[str, Any]] | None = None,
) -> FinalResult:
    verdict = outcome.verdict.verdict
    redirect_fields: dict[str, Any] = {}
    if chain is not None:
        redirect_fields = {
            "redirect_chain": list(chain.urls),
            "final_destination": chain.scoring_target,
            "is_shortened": chain.is_shortened,
            "redirect_stop_reason": chain.stop_reason,
        }
    return FinalResult(
        identifier=identifier,
        variant=variant,
        is_risky=verdict != SAFE_VERDICTS[variant],
        risk_band=_VERDICT_BANDS[variant][verdict],
        normalized_score=DISPLAY_SCORES[variant][verdict],
        verdict=verdict,
        indicators=list(local.indicators),
        local_score=local,
        explanation=outcome.verdict.explanation,
        verdict_source=outcome.source,
        transition=outcome.transition,
        trace=list(trace or []),
        **redirect_fields,
    )
