"""Risk evaluation for sender email addresses and URLs."""

from veritas_check.domain.models import FinalResult
from veritas_check.orchestrator.build import create_pipeline, evaluate_email, evaluate_url
from veritas_check.orchestrator.pipeline import RiskPipeline

__version__ = "0.1.0"

__all__ = ["FinalResult", "RiskPipeline", "create_pipeline", "evaluate_email", "evaluate_url", "__version__"]
