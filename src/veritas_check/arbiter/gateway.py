"""Arbiter gateway: consult the remote classifier under a hard deadline.

The gateway never lets an arbiter failure escape as an exception (except a
contract violation in strict mode). Every degraded path maps the local risk
band to a verdict of the same variant and records which transition was taken.
"""

from __future__ import annotations

import asyncio
import logging

from veritas_check.arbiter.service import ArbitrationService
from veritas_check.core.errors import ArbiterContractError, ArbiterTimeout, ArbiterUnavailable
from veritas_check.domain.models import (
    VERDICTS,
    ArbiterVerdict,
    GatewayOutcome,
    GatewayTransition,
    ScoreResult,
    Variant,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 22.0

_BAND_VERDICTS: dict[str, dict[str, str]] = {
    "email": {"invalid": "fake", "risky": "suspicious", "safe": "legitimate"},
    "url": {"dangerous": "dangerous", "suspicious": "suspicious", "safe": "safe"},
}

_FALLBACK_MESSAGES: dict[str, str] = {
    "fallback_unavailable": "Arbitration is not configured; this verdict comes from local analysis only.",
    "fallback_timeout": "Arbitration timed out; this verdict comes from local analysis only. Verify manually before trusting it.",
    "fallback_error": "Arbitration encountered an error; this verdict comes from local analysis only. Verify manually before trusting it.",
    "fallback_invalid_verdict": "Arbitration returned an unusable answer; this verdict comes from local analysis only.",
}


def verdict_from_band(variant: Variant, risk_band: str) -> str:
    try:
        return _BAND_VERDICTS[variant][risk_band]
    except KeyError as exc:
        raise ArbiterContractError(f"Band '{risk_band}' is not defined for variant '{variant}'.") from exc


def fallback_outcome(variant: Variant, local: ScoreResult, transition: GatewayTransition) -> GatewayOutcome:
    message = _FALLBACK_MESSAGES.get(transition, "This verdict comes from local analysis only.")
    explanation = f"{message} {local.reason}." if local.reason else message
    return GatewayOutcome(
        verdict=ArbiterVerdict(verdict=verdict_from_band(variant, local.risk_band), explanation=explanation),
        source="fallback",
        transition=transition,
    )


class ArbiterGateway:
    def __init__(
        self,
        service: ArbitrationService | None = None,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        strict_verdicts: bool = False,
    ):
        self.service = service
        self.timeout_s = timeout_s
        self.strict_verdicts = strict_verdicts

    def _available(self, service: ArbitrationService) -> bool:
        try:
            return bool(service.is_available())
        except Exception as exc:
            logger.warning("Arbiter availability check failed: %s", exc)
            return False

    async def arbitrate(self, identifier: str, variant: Variant, local: ScoreResult) -> GatewayOutcome:
        service = self.service
        if service is None or not self._available(service):
            logger.debug("Arbiter unavailable; using local %s band '%s'", variant, local.risk_band)
            return fallback_outcome(variant, local, "fallback_unavailable")

        try:
            verdict = await asyncio.wait_for(
                service.classify(identifier, variant, local),
                timeout=self.timeout_s,
            )
        except ArbiterUnavailable as exc:
            logger.info("Arbiter reported unavailable: %s", exc)
            return fallback_outcome(variant, local, "fallback_unavailable")
        except (asyncio.TimeoutError, ArbiterTimeout):
            logger.warning("Arbiter exceeded %.1fs for %s", self.timeout_s, variant)
            return fallback_outcome(variant, local, "fallback_timeout")
        except Exception as exc:
            logger.warning("Arbiter call failed: %s: %s", type(exc).__name__, exc)
            return fallback_outcome(variant, local, "fallback_error")

        if verdict.verdict not in VERDICTS[variant]:
            if self.strict_verdicts:
                raise ArbiterContractError(
                    f"Arbiter returned verdict '{verdict.verdict}' outside {VERDICTS[variant]}."
                )
            logger.warning("Arbiter returned unknown %s verdict '%s'", variant, verdict.verdict)
            return fallback_outcome(variant, local, "fallback_invalid_verdict")

        return GatewayOutcome(verdict=verdict, source="arbiter", transition="arbiter_verdict")
