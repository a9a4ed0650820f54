"""Tests for environment-driven configuration."""

from a2awatch.config import A2AWatchSettings


def test_defaults(monkeypatch):
    for name in ("BASE_URL", "AUTH_TOKEN", "POLL_INTERVAL", "MAX_WAIT"):
        monkeypatch.delenv(f"A2AWATCH_{name}", raising=False)
    config = A2AWatchSettings()
    assert config.poll_interval == 5.0
    assert config.max_wait is None
    assert config.request_timeout == 30.0


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("A2AWATCH_BASE_URL", "https://agents.example.com")
    monkeypatch.setenv("A2AWATCH_AUTH_TOKEN", "tok")
    monkeypatch.setenv("A2AWATCH_POLL_INTERVAL", "1.5")
    monkeypatch.setenv("A2AWATCH_MAX_WAIT", "120")
    config = A2AWatchSettings()
    assert config.base_url == "https://agents.example.com"
    assert config.auth_token == "tok"
    assert config.poll_interval == 1.5
    assert config.max_wait == 120.0
