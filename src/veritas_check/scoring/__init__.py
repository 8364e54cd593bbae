"""Local heuristic scoring."""

from veritas_check.scoring.email_rules import EMAIL_RULES
from veritas_check.scoring.engine import LocalScorer, clamp_score, email_band, url_band
from veritas_check.scoring.url_rules import URL_RULES

__all__ = ["EMAIL_RULES", "URL_RULES", "LocalScorer", "clamp_score", "email_band", "url_band"]
