import asyncio
import importlib.machinery
import sys
import types
from types import SimpleNamespace

import pytest

from veritas_check.arbiter.llm import LlmArbitrationService
from veritas_check.arbiter.prompts import EMAIL_PROMPT, URL_PROMPT, build_request
from veritas_check.arbiter.providers import ProviderConfig, build_model_reference, resolve_api_key
from veritas_check.core.errors import ArbiterUnavailable
from veritas_check.domain.models import Indicator, ScoreResult


def _local() -> ScoreResult:
    return ScoreResult(
        variant="email",
        raw_score=130,
        normalized_score=100,
        indicators=[
            Indicator(rule="lookalike_domain", description='Typosquatting confirmed: "amason.com"', weight=75),
            Indicator(rule="service_id_pattern", description="Generic service ID pattern", weight=30),
        ],
        risk_band="invalid",
        reason="Detected 2 risk indicator(s)",
    )


def _fake_module(name: str, **attrs) -> types.ModuleType:
    module = types.ModuleType(name)
    module.__spec__ = importlib.machinery.ModuleSpec(name, None)
    for key, value in attrs.items():
        setattr(module, key, value)
    return module


@pytest.fixture
def fake_agents(monkeypatch):
    captured: dict[str, object] = {}

    class _FakeAgent:
        def __init__(self, *args, **kwargs):
            captured["agent"] = kwargs

    class _FakeAgentOutputSchema:
        def __init__(self, output_type, strict_json_schema=True):
            captured["output_type"] = output_type
            captured["strict_json_schema"] = strict_json_schema

    class _FakeModelSettings:
        def __init__(self, temperature=None):
            self.temperature = temperature

    class _FakeRunner:
        final_output: dict[str, str] = {
            "verdict": " Fake ",
            "explanation": "The domain imitates Amazon. Do not trust it.",
            "reasoning": "lookalike + service id",
        }

        @staticmethod
        async def run(agent, text, max_turns=None):
            captured["input"] = text
            captured["max_turns"] = max_turns
            return SimpleNamespace(final_output=_FakeRunner.final_output)

    monkeypatch.setitem(
        sys.modules,
        "agents",
        _fake_module(
            "agents",
            Agent=_FakeAgent,
            AgentOutputSchema=_FakeAgentOutputSchema,
            ModelSettings=_FakeModelSettings,
            Runner=_FakeRunner,
        ),
    )
    return captured


def test_unavailable_without_agents_package(monkeypatch):
    monkeypatch.setitem(sys.modules, "agents", None)
    service = LlmArbitrationService(provider="openai", model="gpt-4o-mini", api_key="sk-test")
    assert service.is_available() is False
    with pytest.raises(ArbiterUnavailable):
        asyncio.run(service.classify("a@b.com", "email", _local()))


def test_availability_depends_on_api_key(fake_agents, monkeypatch):
    assert LlmArbitrationService(provider="openai", model="gpt-4o-mini").is_available() is False
    assert LlmArbitrationService(provider="openai", model="gpt-4o-mini", api_key="sk-test").is_available() is True
    assert LlmArbitrationService(provider="local", model="ollama/qwen2.5:7b").is_available() is True

    gemini = LlmArbitrationService(provider="litellm", model="gemini/gemini-2.0-flash-lite")
    assert gemini.is_available() is False
    monkeypatch.setenv("GEMINI_API_KEY", "gm-test")
    assert gemini.is_available() is True


def test_classify_runs_agent_with_structured_output(fake_agents):
    service = LlmArbitrationService(provider="openai", model="gpt-4o-mini", api_key="sk-test", max_turns=3)
    verdict = asyncio.run(service.classify("support-id-7193@service.amason.com", "email", _local()))

    assert verdict.verdict == "fake"
    assert verdict.explanation == "The domain imitates Amazon. Do not trust it."
    assert fake_agents["agent"]["instructions"] == EMAIL_PROMPT
    assert fake_agents["agent"]["model"] == "gpt-4o-mini"
    assert fake_agents["strict_json_schema"] is False
    assert fake_agents["max_turns"] == 3
    assert "support-id-7193@service.amason.com" in fake_agents["input"]
    assert '1. Typosquatting confirmed: "amason.com"' in fake_agents["input"]
    assert "Risk score: 100/100" in fake_agents["input"]


def test_url_requests_use_url_prompt(fake_agents):
    service = LlmArbitrationService(provider="openai", model="gpt-4o-mini", api_key="sk-test")
    local = _local().model_copy(update={"variant": "url", "risk_band": "dangerous"})
    asyncio.run(service.classify("https://paypal.com-verify.info/login", "url", local))
    assert fake_agents["agent"]["instructions"] == URL_PROMPT
    assert fake_agents["input"].startswith("URL UNDER INVESTIGATION:")


def test_build_request_without_findings():
    local = ScoreResult(variant="url", raw_score=0, normalized_score=0, risk_band="safe")
    text = build_request("https://example.com", "url", local)
    assert "no obvious red flags" in text


def test_litellm_providers_use_litellm_model(monkeypatch):
    class _FakeLitellmModel:
        def __init__(self, model, base_url=None, api_key=None):
            self.model = model
            self.base_url = base_url
            self.api_key = api_key

    monkeypatch.setitem(
        sys.modules,
        "agents.extensions.models.litellm_model",
        _fake_module("agents.extensions.models.litellm_model", LitellmModel=_FakeLitellmModel),
    )
    monkeypatch.setenv("GEMINI_API_KEY", "gm-test")

    gemini = build_model_reference(ProviderConfig(provider="litellm", model="gemini/gemini-2.0-flash-lite"))
    assert isinstance(gemini, _FakeLitellmModel)
    assert gemini.api_key == "gm-test"

    ollama = build_model_reference(
        ProviderConfig(provider="local", model="ollama/qwen2.5:7b", api_base="http://127.0.0.1:11434")
    )
    assert ollama.base_url == "http://127.0.0.1:11434"
    assert ollama.api_key is None

    assert build_model_reference(ProviderConfig(provider="openai", model="gpt-4o-mini")) == "gpt-4o-mini"


def test_explicit_api_key_wins(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "from-env")
    assert resolve_api_key(ProviderConfig(provider="openai", model="gpt-4o-mini", api_key="explicit")) == "explicit"
    assert resolve_api_key(ProviderConfig(provider="openai", model="gpt-4o-mini")) == "from-env"
