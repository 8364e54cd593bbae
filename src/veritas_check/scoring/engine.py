"""Local scorer: run a variant's rule table, clamp the sum and assign a band."""

from __future__ import annotations

import logging

from veritas_check.domain.features import EmailFeatures, UrlFeatures
from veritas_check.domain.models import EmailBand, Indicator, ScoreResult, UrlBand, Variant
from veritas_check.policy.reference import ReferenceData, VariantPolicy, load_reference
from veritas_check.scoring.email_rules import EMAIL_RULES
from veritas_check.scoring.rules import RuleContext, RuleSpec
from veritas_check.scoring.url_rules import URL_RULES

logger = logging.getLogger(__name__)

MAX_SCORE = 100


def clamp_score(raw_score: int) -> int:
    return max(0, min(MAX_SCORE, int(raw_score)))


def email_band(score: int, policy: VariantPolicy) -> EmailBand:
    if score >= policy.threshold("invalid"):
        return "invalid"
    if score >= policy.threshold("risky"):
        return "risky"
    return "safe"


def url_band(score: int, policy: VariantPolicy) -> UrlBand:
    if score >= policy.threshold("dangerous"):
        return "dangerous"
    if score >= policy.threshold("suspicious"):
        return "suspicious"
    return "safe"


def _run_rules(rules: tuple[RuleSpec, ...], ctx: RuleContext) -> list[Indicator]:
    indicators: list[Indicator] = []
    for rule in rules:
        indicators.extend(rule.check(ctx))
    return indicators


def _reason(variant: Variant, count: int) -> str:
    if variant == "email":
        return f"Detected {count} risk indicator(s)" if count else "Email appears legitimate"
    return f"Detected {count} security concern(s)" if count else "URL appears safe - no red flags detected"


class LocalScorer:
    """Deterministic, network-free scorer over the reference policy table."""

    def __init__(self, reference: ReferenceData | None = None):
        self.reference = reference or load_reference()

    def _result(self, variant: Variant, indicators: list[Indicator], band_fn, policy: VariantPolicy) -> ScoreResult:
        raw_score = sum(item.weight for item in indicators)
        normalized = clamp_score(raw_score)
        result = ScoreResult(
            variant=variant,
            raw_score=raw_score,
            normalized_score=normalized,
            indicators=indicators,
            risk_band=band_fn(normalized, policy),
            reason=_reason(variant, len(indicators)),
        )
        logger.debug(
            "Scored %s: raw=%d normalized=%d band=%s indicators=%d",
            variant,
            raw_score,
            normalized,
            result.risk_band,
            len(indicators),
        )
        return result

    def score_email(self, features: EmailFeatures) -> ScoreResult:
        policy = self.reference.email
        ctx = RuleContext(features=features, reference=self.reference, policy=policy)
        return self._result("email", _run_rules(EMAIL_RULES, ctx), email_band, policy)

    def score_url(self, features: UrlFeatures) -> ScoreResult:
        policy = self.reference.url
        ctx = RuleContext(features=features, reference=self.reference, policy=policy)
        return self._result("url", _run_rules(URL_RULES, ctx), url_band, policy)

    def invalid_email_result(self, raw: str) -> ScoreResult:
        """Maximum-severity result for an address that could not be split."""

        weight = self.reference.email.weight("invalid_format")
        indicator = Indicator(
            rule="invalid_format",
            description=f'Invalid email format: "{raw}" is missing a local part, "@" or domain',
            weight=weight,
        )
        return ScoreResult(
            variant="email",
            raw_score=weight,
            normalized_score=clamp_score(weight),
            indicators=[indicator],
            risk_band="invalid",
            reason=_reason("email", 1),
        )
