"""Contract for the remote classifier consulted after local scoring."""

from __future__ import annotations

from typing import Protocol

from veritas_check.domain.models import ArbiterVerdict, ScoreResult, Variant


class ArbitrationService(Protocol):
    def is_available(self) -> bool: ...

    async def classify(self, identifier: str, variant: Variant, local: ScoreResult) -> ArbiterVerdict:
        """Return a verdict; may raise ArbiterUnavailable, ArbiterTimeout or any error."""
        ...
