"""Identifier features and pipeline models."""

from veritas_check.domain.features import (
    EmailFeatures,
    UrlFeatures,
    extract_email_features,
    extract_url_features,
    split_email,
    split_host,
)
from veritas_check.domain.models import (
    ArbiterVerdict,
    FinalResult,
    GatewayOutcome,
    Identifier,
    Indicator,
    RedirectChain,
    ScoreResult,
    Variant,
)

__all__ = [
    "EmailFeatures",
    "UrlFeatures",
    "extract_email_features",
    "extract_url_features",
    "split_email",
    "split_host",
    "ArbiterVerdict",
    "FinalResult",
    "GatewayOutcome",
    "Identifier",
    "Indicator",
    "RedirectChain",
    "ScoreResult",
    "Variant",
]
