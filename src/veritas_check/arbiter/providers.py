"""Provider and model selection for OpenAI Agents SDK."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Any

LITELLM_PROVIDERS = frozenset({"local", "ollama", "litellm"})

# LiteLLM model prefix -> environment variable holding that vendor's key.
_PREFIX_KEY_ENV = {
    "gemini": "GEMINI_API_KEY",
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "groq": "GROQ_API_KEY",
    "mistral": "MISTRAL_API_KEY",
}


@dataclass(frozen=True)
class ProviderConfig:
    provider: str
    model: str
    api_base: str | None = None
    api_key: str | None = None

    @property
    def normalized_provider(self) -> str:
        return (self.provider or "openai").strip().lower()


def resolve_api_key(cfg: ProviderConfig) -> str | None:
    """Explicit key first, then the vendor environment variable; local models need none."""

    if cfg.api_key:
        return cfg.api_key
    provider = cfg.normalized_provider
    if provider in {"local", "ollama"}:
        return None
    if provider == "openai":
        return os.getenv("OPENAI_API_KEY") or None
    prefix = cfg.model.split("/", 1)[0].strip().lower() if "/" in cfg.model else ""
    env_name = _PREFIX_KEY_ENV.get(prefix)
    return (os.getenv(env_name) or None) if env_name else None


def requires_api_key(cfg: ProviderConfig) -> bool:
    return cfg.normalized_provider not in {"local", "ollama"}


def build_model_reference(cfg: ProviderConfig) -> Any:
    """Return model reference accepted by `agents.Agent`.

    - `openai`: model name string (SDK resolves via OpenAI client/env).
    - `local`: `LitellmModel` pointed at an Ollama server.
    - `litellm`: `LitellmModel` for any LiteLLM-routed model, e.g. `gemini/...`.
    """

    if cfg.normalized_provider in LITELLM_PROVIDERS:
        from agents.extensions.models.litellm_model import LitellmModel

        return LitellmModel(
            model=cfg.model,
            base_url=cfg.api_base,
            api_key=resolve_api_key(cfg),
        )
    return cfg.model
