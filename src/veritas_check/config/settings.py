"""Config loader from env + yaml."""

from __future__ import annotations

from pathlib import Path
import os
from typing import Any

import yaml
from pydantic import BaseModel, Field

from veritas_check.tools.redirects import DEFAULT_USER_AGENT

PACKAGE_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_CONFIG_PATH = PACKAGE_ROOT / "config" / "defaults.yaml"
ENV_PREFIX = "VERITAS_"


class AppConfig(BaseModel):

    profile: str = Field(default="gemini")
    provider: str = Field(default="litellm")
    model: str = Field(default="gemini/gemini-2.0-flash-lite")
    temperature: float = Field(default=0.0)
    api_base: str | None = Field(default=None)
    api_key: str | None = Field(default=None)
    max_turns: int = Field(default=2)
    arbiter_timeout_s: float = Field(default=22.0)
    strict_verdicts: bool = Field(default=False)
    enable_redirects: bool = Field(default=True)
    redirect_max_hops: int = Field(default=5)
    redirect_total_budget_s: float = Field(default=5.0)
    redirect_hop_timeout_s: float = Field(default=2.0)
    redirect_user_agent: str = Field(default=DEFAULT_USER_AGENT)
    reference_path: str | None = Field(default=None)
    log_level: str = Field(default="WARNING")
    default_config_path: str = Field(default=str(DEFAULT_CONFIG_PATH))


def _normalize_provider(raw: Any) -> str:
    provider = str(raw or "").strip().lower()
    if provider in {"ollama", "local"}:
        return "local"
    return provider or "openai"


def load_yaml(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        return {}
    payload = yaml.safe_load(p.read_text(encoding="utf-8"))
    return payload if isinstance(payload, dict) else {}


def _pick_env(name: str, fallback: Any) -> Any:
    value = os.getenv(name)
    return value if value not in (None, "") else fallback


def _parse_int(raw: Any, fallback: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return fallback
    return value if value > 0 else fallback


def _parse_float(raw: Any, fallback: float) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return fallback
    return value if value >= 0 else fallback


def _parse_bool(raw: Any, fallback: bool) -> bool:
    if isinstance(raw, bool):
        return raw
    if raw is None:
        return fallback
    value = str(raw).strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    return fallback


def _parse_str(raw: Any, fallback: str) -> str:
    value = str(raw if raw is not None else "").strip()
    return value or fallback


def _parse_optional_str(raw: Any) -> str | None:
    value = str(raw if raw is not None else "").strip()
    return value or None


def _resolve_default_config_path(path: str | Path | None) -> Path:
    if path is not None:
        return Path(path)
    env_default_path = os.getenv(f"{ENV_PREFIX}DEFAULT_CONFIG_PATH")
    if env_default_path:
        return Path(env_default_path)
    return DEFAULT_CONFIG_PATH


def load_config(
    path: str | Path | None = None,
    *,
    profile_override: str | None = None,
) -> tuple[AppConfig, dict[str, Any]]:
    default_path = _resolve_default_config_path(path)
    merged = load_yaml(default_path)
    profiles = merged.get("profiles")
    profile_map = profiles if isinstance(profiles, dict) else {}

    active_profile = str(profile_override or _pick_env(f"{ENV_PREFIX}PROFILE", merged.get("profile", "gemini")))
    selected_profile = profile_map.get(active_profile, {})
    selected = selected_profile if isinstance(selected_profile, dict) else {}
    # An explicit profile keeps provider/model/temperature from that profile only.
    use_selector_env = profile_override is None

    def _setting(key: str, default: Any, *, selector: bool = False) -> Any:
        fallback = selected.get(key, merged.get(key, default))
        if selector and not use_selector_env:
            return fallback
        return _pick_env(f"{ENV_PREFIX}{key.upper()}", fallback)

    payload = {
        "profile": active_profile,
        "provider": _normalize_provider(_setting("provider", "litellm", selector=True)),
        "model": _parse_str(_setting("model", "gemini/gemini-2.0-flash-lite", selector=True), "gemini/gemini-2.0-flash-lite"),
        "temperature": _parse_float(_setting("temperature", 0.0, selector=True), 0.0),
        "api_base": _parse_optional_str(_setting("api_base", None)),
        "api_key": _parse_optional_str(_setting("api_key", None)),
        "max_turns": _parse_int(_setting("max_turns", 2), 2),
        "arbiter_timeout_s": _parse_float(_setting("arbiter_timeout_s", 22.0), 22.0),
        "strict_verdicts": _parse_bool(_setting("strict_verdicts", False), False),
        "enable_redirects": _parse_bool(_setting("enable_redirects", True), True),
        "redirect_max_hops": _parse_int(_setting("redirect_max_hops", 5), 5),
        "redirect_total_budget_s": _parse_float(_setting("redirect_total_budget_s", 5.0), 5.0),
        "redirect_hop_timeout_s": _parse_float(_setting("redirect_hop_timeout_s", 2.0), 2.0),
        "redirect_user_agent": _parse_str(_setting("redirect_user_agent", DEFAULT_USER_AGENT), DEFAULT_USER_AGENT),
        "reference_path": _parse_optional_str(_setting("reference_path", None)),
        "log_level": _parse_str(_setting("log_level", "WARNING"), "WARNING").upper(),
        "default_config_path": str(default_path),
    }
    return AppConfig.model_validate(payload), merged
