from veritas_check.arbiter.gateway import ArbiterGateway, fallback_outcome, verdict_from_band
from veritas_check.arbiter.llm import LlmArbitrationService
from veritas_check.arbiter.providers import ProviderConfig, build_model_reference
from veritas_check.arbiter.service import ArbitrationService

__all__ = [
    "ArbiterGateway",
    "ArbitrationService",
    "LlmArbitrationService",
    "ProviderConfig",
    "build_model_reference",
    "fallback_outcome",
    "verdict_from_band",
]
