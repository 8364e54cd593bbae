from veritas_check.config.settings import load_config


def test_defaults_come_from_packaged_yaml():
    cfg, merged = load_config()
    assert cfg.profile == "gemini"
    assert cfg.provider == "litellm"
    assert cfg.model == "gemini/gemini-2.0-flash-lite"
    assert cfg.arbiter_timeout_s == 22.0
    assert cfg.enable_redirects is True
    assert cfg.redirect_max_hops == 5
    assert cfg.redirect_total_budget_s == 5.0
    assert cfg.redirect_hop_timeout_s == 2.0
    assert cfg.log_level == "WARNING"
    assert "ollama" in merged["profiles"]


def test_profile_override_selects_profile_values(monkeypatch):
    monkeypatch.setenv("VERITAS_MODEL", "ignored-model")
    cfg, _ = load_config(profile_override="ollama")
    assert cfg.profile == "ollama"
    assert cfg.provider == "local"
    assert cfg.model == "ollama/qwen2.5:7b"
    assert cfg.api_base == "http://127.0.0.1:11434"


def test_env_overrides_yaml(monkeypatch):
    monkeypatch.setenv("VERITAS_PROFILE", "openai")
    monkeypatch.setenv("VERITAS_MODEL", "gpt-4.1-mini")
    monkeypatch.setenv("VERITAS_ENABLE_REDIRECTS", "off")
    monkeypatch.setenv("VERITAS_REDIRECT_MAX_HOPS", "3")
    monkeypatch.setenv("VERITAS_ARBITER_TIMEOUT_S", "7.5")
    monkeypatch.setenv("VERITAS_STRICT_VERDICTS", "yes")
    monkeypatch.setenv("VERITAS_LOG_LEVEL", "debug")
    cfg, _ = load_config()
    assert cfg.profile == "openai"
    assert cfg.provider == "openai"
    assert cfg.model == "gpt-4.1-mini"
    assert cfg.enable_redirects is False
    assert cfg.redirect_max_hops == 3
    assert cfg.arbiter_timeout_s == 7.5
    assert cfg.strict_verdicts is True
    assert cfg.log_level == "DEBUG"


def test_bad_values_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("VERITAS_REDIRECT_MAX_HOPS", "-2")
    monkeypatch.setenv("VERITAS_ARBITER_TIMEOUT_S", "soon")
    monkeypatch.setenv("VERITAS_ENABLE_REDIRECTS", "maybe")
    cfg, _ = load_config()
    assert cfg.redirect_max_hops == 5
    assert cfg.arbiter_timeout_s == 22.0
    assert cfg.enable_redirects is True


def test_custom_config_file(tmp_path):
    path = tmp_path / "veritas.yaml"
    path.write_text(
        "profile: mine\n"
        "enable_redirects: false\n"
        "profiles:\n"
        "  mine:\n"
        "    provider: ollama\n"
        "    model: ollama/llama3.1\n",
        encoding="utf-8",
    )
    cfg, _ = load_config(path)
    assert cfg.profile == "mine"
    assert cfg.provider == "local"
    assert cfg.model == "ollama/llama3.1"
    assert cfg.enable_redirects is False
    assert cfg.default_config_path == str(path)


def test_missing_config_file_uses_built_in_defaults(tmp_path, monkeypatch):
    monkeypatch.setenv("VERITAS_DEFAULT_CONFIG_PATH", str(tmp_path / "absent.yaml"))
    cfg, merged = load_config()
    assert merged == {}
    assert cfg.profile == "gemini"
    assert cfg.provider == "litellm"
    assert cfg.redirect_hop_timeout_s == 2.0
