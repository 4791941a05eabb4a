import logging

import pytest

from prompt_forge.core.config import ConfigLoader, PipelineConfig, load_credentials_from_env


def test_defaults():
    config = ConfigLoader(environ={}).load()
    assert config == PipelineConfig()
    assert config.model == "gemini-2.5-flash-lite"
    assert config.cooldown_base == 30.0
    assert config.cooldown_cap == 600.0
    assert config.min_request_interval == 4.0
    assert config.inter_round_delay == 1.0


def test_explicit_overrides():
    config = ConfigLoader(environ={}).load(model="gemini-2.5-flash", temperature=None)
    assert config.model == "gemini-2.5-flash"
    assert config.temperature == 0.9


def test_unknown_override_rejected():
    with pytest.raises(TypeError):
        ConfigLoader(environ={}).load(no_such_field=1)


def test_environment_wins():
    env = {
        "PROMPT_FORGE_MODEL": "gemini-2.5-pro",
        "PROMPT_FORGE_COOLDOWN_BASE": "10",
        "PROMPT_FORGE_MAX_OUTPUT_TOKENS": "256",
        "PROMPT_FORGE_LOG_TRANSACTIONS": "true",
        "PROMPT_FORGE_LOG_DIR": "/tmp/pf-logs",
    }
    config = ConfigLoader(environ=env).load(model="gemini-2.5-flash")
    assert config.model == "gemini-2.5-pro"
    assert config.cooldown_base == 10.0
    assert config.max_output_tokens == 256
    assert config.log_transactions is True
    assert config.log_dir == "/tmp/pf-logs"


def test_invalid_env_value_keeps_default(caplog):
    with caplog.at_level(logging.WARNING, logger="prompt_forge"):
        config = ConfigLoader(environ={"PROMPT_FORGE_TEMPERATURE": "hot"}).load()
    assert config.temperature == 0.9
    assert "PROMPT_FORGE_TEMPERATURE" in caplog.text


def test_negative_values_reset():
    config = ConfigLoader(environ={"PROMPT_FORGE_MIN_REQUEST_INTERVAL": "-1"}).load()
    assert config.min_request_interval == 4.0


def test_cap_raised_to_base():
    env = {"PROMPT_FORGE_COOLDOWN_BASE": "120", "PROMPT_FORGE_COOLDOWN_CAP": "60"}
    config = ConfigLoader(environ=env).load()
    assert config.cooldown_cap == 120.0


def test_credentials_from_env_keep_order_and_dedupe():
    env = {
        "GEMINI_API_KEY": "k-main",
        "GEMINI_API_KEYS": "k-one, k-two,,k-main",
        "GEMINI_API_KEY_10": "k-ten",
        "GEMINI_API_KEY_2": "k-two-numbered",
        "GEMINI_API_KEY_1": "k-one",
        "GEMINI_API_KEY_X": "ignored",
    }
    assert load_credentials_from_env(env) == [
        "k-main",
        "k-one",
        "k-two",
        "k-two-numbered",
        "k-ten",
    ]


def test_credentials_from_os_environ(monkeypatch):
    for key in ("GEMINI_API_KEYS", "GEMINI_API_KEY_1"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("GEMINI_API_KEY", "only")
    assert load_credentials_from_env() == ["only"]
