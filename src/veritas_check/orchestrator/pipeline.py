"""Risk pipeline: features -> redirects -> local score -> arbiter -> result."""

from __future__ import annotations

import logging

from veritas_check.arbiter.gateway import ArbiterGateway
from veritas_check.domain.features import extract_email_features, extract_url_features, split_email
from veritas_check.domain.models import (
    ArbiterVerdict,
    FinalResult,
    GatewayOutcome,
    Identifier,
    Indicator,
    RedirectChain,
    ScoreResult,
)
from veritas_check.orchestrator.assembler import assemble
from veritas_check.orchestrator.tracing import TraceEvent, make_event
from veritas_check.scoring.engine import LocalScorer
from veritas_check.tools.redirects import RedirectResolver

logger = logging.getLogger(__name__)

INVALID_INPUT_EXPLANATION = (
    "This is not a valid email address: it needs a name, an @ sign and a domain. "
    "Treat any message claiming to come from it as fake."
)


def _with_redirect_notice(local: ScoreResult, chain: RedirectChain) -> ScoreResult:
    if not chain.is_shortened or chain.scoring_target == chain.original_url:
        return local
    notice = Indicator(
        rule="shortened_redirect",
        description=f"Shortened URL: redirects to {chain.scoring_target}",
        weight=0,
    )
    return local.model_copy(update={"indicators": [notice, *local.indicators]})


def _outcome_event(outcome: GatewayOutcome) -> TraceEvent:
    status = "done" if outcome.source == "arbiter" else "fallback"
    return make_event(
        "arbiter",
        status,
        f"Verdict '{outcome.verdict.verdict}' via {outcome.transition}.",
        data={"source": outcome.source, "transition": outcome.transition},
    )


class RiskPipeline:
    """Stateless per request; collaborators are shared and read-only."""

    def __init__(
        self,
        scorer: LocalScorer | None = None,
        gateway: ArbiterGateway | None = None,
        resolver: RedirectResolver | None = None,
    ):
        self.scorer = scorer or LocalScorer()
        self.gateway = gateway or ArbiterGateway()
        self.resolver = resolver

    async def evaluate(self, identifier: Identifier) -> FinalResult:
        if identifier.variant == "email":
            return await self.evaluate_email(identifier.raw)
        return await self.evaluate_url(identifier.raw)

    async def evaluate_email(self, identifier: str) -> FinalResult:
        raw = (identifier or "").strip()
        trace: list[TraceEvent] = []

        if split_email(raw) is None:
            logger.info("Rejected structurally invalid email %r", raw)
            local = self.scorer.invalid_email_result(raw)
            trace.append(make_event("features", "failed", "Email address could not be split into local part and domain."))
            trace.append(make_event("local_score", "skipped", "Rules skipped for invalid input.", data={"score": 100}))
            outcome = GatewayOutcome(
                verdict=ArbiterVerdict(verdict="fake", explanation=INVALID_INPUT_EXPLANATION),
                source="fallback",
                transition="fallback_invalid_input",
            )
            trace.append(make_event("arbiter", "skipped", "Arbiter not consulted for invalid input."))
            trace.append(make_event("assemble", "done", "Result assembled."))
            return assemble(raw, "email", local, outcome, trace=trace)

        features = extract_email_features(raw)
        trace.append(
            make_event(
                "features",
                "done",
                "Email features extracted.",
                data={"domain": features.domain, "base_domain": features.base_domain},
            )
        )
        local = self.scorer.score_email(features)
        trace.append(
            make_event(
                "local_score",
                "done",
                local.reason,
                data={"score": local.normalized_score, "band": local.risk_band, "indicators": len(local.indicators)},
            )
        )
        outcome = await self.gateway.arbitrate(raw, "email", local)
        trace.append(_outcome_event(outcome))
        trace.append(make_event("assemble", "done", "Result assembled."))
        return assemble(raw, "email", local, outcome, trace=trace)

    async def evaluate_url(self, identifier: str) -> FinalResult:
        raw = (identifier or "").strip()
        trace: list[TraceEvent] = []

        original = extract_url_features(raw)
        trace.append(
            make_event(
                "features",
                "done",
                "URL features extracted.",
                data={"scheme": original.scheme, "host": original.host},
            )
        )

        if self.resolver is None:
            chain = RedirectChain(urls=[raw])
            trace.append(make_event("redirects", "skipped", "Redirect resolution disabled."))
        else:
            chain = await self.resolver.resolve(raw)
            trace.append(
                make_event(
                    "redirects",
                    "done" if chain.stop_reason == "completed" else "partial",
                    f"Followed {len(chain.urls) - 1} redirect(s).",
                    data={"stop_reason": chain.stop_reason, "final_url": chain.final_url},
                )
            )

        target = chain.scoring_target
        features = original if target == raw else extract_url_features(target)
        local = self.scorer.score_url(features)
        local = _with_redirect_notice(local, chain)
        trace.append(
            make_event(
                "local_score",
                "done",
                local.reason,
                data={
                    "target": target,
                    "score": local.normalized_score,
                    "band": local.risk_band,
                    "indicators": len(local.indicators),
                },
            )
        )
        outcome = await self.gateway.arbitrate(target, "url", local)
        trace.append(_outcome_event(outcome))
        trace.append(make_event("assemble", "done", "Result assembled."))
        return assemble(raw, "url", local, outcome, chain=chain, trace=trace)
