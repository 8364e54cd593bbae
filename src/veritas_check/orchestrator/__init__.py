from veritas_check.orchestrator.assembler import DISPLAY_SCORES, assemble
from veritas_check.orchestrator.build import build_pipeline, create_pipeline, evaluate_email, evaluate_url
from veritas_check.orchestrator.pipeline import RiskPipeline
from veritas_check.orchestrator.tracing import make_event

__all__ = [
    "DISPLAY_SCORES",
    "RiskPipeline",
    "assemble",
    "build_pipeline",
    "create_pipeline",
    "evaluate_email",
    "evaluate_url",
    "make_event",
]
