"""Build and wire the risk pipeline from config."""

from __future__ import annotations

import asyncio

from veritas_check.arbiter.gateway import ArbiterGateway
from veritas_check.arbiter.llm import LlmArbitrationService
from veritas_check.arbiter.service import ArbitrationService
from veritas_check.config.settings import AppConfig, load_config
from veritas_check.domain.models import FinalResult
from veritas_check.orchestrator.pipeline import RiskPipeline
from veritas_check.policy.reference import load_reference
from veritas_check.scoring.engine import LocalScorer
from veritas_check.tools.redirects import RedirectPolicy, RedirectProbe, RedirectResolver


def build_pipeline(
    cfg: AppConfig,
    *,
    service: ArbitrationService | None = None,
    probe: RedirectProbe | None = None,
) -> RiskPipeline:
    reference = load_reference(cfg.reference_path)
    arbiter = service or LlmArbitrationService(
        provider=cfg.provider,
        model=cfg.model,
        temperature=cfg.temperature,
        api_base=cfg.api_base,
        api_key=cfg.api_key,
        max_turns=cfg.max_turns,
    )
    resolver = None
    if cfg.enable_redirects:
        resolver = RedirectResolver(
            probe=probe,
            policy=RedirectPolicy(
                max_hops=cfg.redirect_max_hops,
                total_budget_s=cfg.redirect_total_budget_s,
                hop_timeout_s=cfg.redirect_hop_timeout_s,
                user_agent=cfg.redirect_user_agent,
            ),
            reference=reference,
        )
    return RiskPipeline(
        scorer=LocalScorer(reference),
        gateway=ArbiterGateway(arbiter, timeout_s=cfg.arbiter_timeout_s, strict_verdicts=cfg.strict_verdicts),
        resolver=resolver,
    )


def create_pipeline(*, profile_override: str | None = None) -> tuple[RiskPipeline, AppConfig]:
    cfg, _ = load_config(profile_override=profile_override)
    return build_pipeline(cfg), cfg


def evaluate_email(identifier: str, *, profile: str | None = None) -> FinalResult:
    pipeline, _ = create_pipeline(profile_override=profile)
    return asyncio.run(pipeline.evaluate_email(identifier))


def evaluate_url(identifier: str, *, profile: str | None = None) -> FinalResult:
    pipeline, _ = create_pipeline(profile_override=profile)
    return asyncio.run(pipeline.evaluate_url(identifier))
