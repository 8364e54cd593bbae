from __future__ import annotations

import asyncio
import os

import pytest

from veritas_check.domain.models import ArbiterVerdict
from veritas_check.policy.reference import load_reference
from veritas_check.scoring.engine import LocalScorer
from veritas_check.tools.redirects import ProbeResponse

_KEY_ENV = ("OPENAI_API_KEY", "GEMINI_API_KEY", "ANTHROPIC_API_KEY", "GROQ_API_KEY", "MISTRAL_API_KEY")


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    for name in list(os.environ):
        if name.startswith("VERITAS_"):
            monkeypatch.delenv(name, raising=False)
    for name in _KEY_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def reference():
    return load_reference()


@pytest.fixture
def scorer(reference):
    return LocalScorer(reference)


class FakeProbe:
    """Serves canned HEAD responses keyed by URL; unknown URLs answer 200."""

    def __init__(self, routes: dict[str, object] | None = None):
        self.routes = dict(routes or {})
        self.calls: list[str] = []

    async def head(self, url: str, timeout: float) -> ProbeResponse:
        self.calls.append(url)
        route = self.routes.get(url)
        if isinstance(route, BaseException):
            raise route
        if isinstance(route, (int, float)) and not isinstance(route, bool):
            await asyncio.sleep(route)
            return ProbeResponse(status=200)
        if isinstance(route, str):
            return ProbeResponse(status=301, location=route)
        return ProbeResponse(status=200)


class FakeArbiter:
    def __init__(self, verdict: str = "", explanation: str = "arbiter says so", *, available: bool = True):
        self.verdict = verdict
        self.explanation = explanation
        self.available = available
        self.calls: list[tuple[str, str]] = []

    def is_available(self) -> bool:
        return self.available

    async def classify(self, identifier, variant, local):
        self.calls.append((identifier, variant))
        return ArbiterVerdict(verdict=self.verdict, explanation=self.explanation)


@pytest.fixture
def fake_probe():
    return FakeProbe


@pytest.fixture
def fake_arbiter():
    return FakeArbiter
