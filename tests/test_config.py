"""Tests for configuration module."""

from site_editor.config import (
    AppConfig,
    CosmosConfig,
    EditConfig,
    OpenAIConfig,
    ServiceBusConfig,
    _env,
    _env_bool,
    _env_int,
)


def test_env_returns_value(monkeypatch):
    monkeypatch.setenv("TEST_KEY", "hello")
    assert _env("TEST_KEY") == "hello"


def test_env_returns_default_when_missing(monkeypatch):
    monkeypatch.delenv("TEST_KEY", raising=False)
    assert _env("TEST_KEY", "fallback") == "fallback"


def test_env_int_falls_back_on_garbage(monkeypatch):
    monkeypatch.setenv("TEST_INT", "ten")
    assert _env_int("TEST_INT", 10) == 10


def test_env_bool_parses_false(monkeypatch):
    monkeypatch.setenv("TEST_BOOL", "false")
    assert _env_bool("TEST_BOOL", default=True) is False


def test_app_config_is_development_true():
    config = AppConfig.__new__(AppConfig)
    object.__setattr__(config, "env", "development")
    assert config.is_development is True


def test_app_config_is_development_false():
    config = AppConfig.__new__(AppConfig)
    object.__setattr__(config, "env", "production")
    assert config.is_development is False


def test_cosmos_config_defaults(monkeypatch):
    monkeypatch.setenv("COSMOS_ENDPOINT", "https://cosmos.example.com")
    monkeypatch.setenv("COSMOS_KEY", "secret")
    monkeypatch.delenv("COSMOS_DATABASE", raising=False)
    config = CosmosConfig()
    assert config.endpoint == "https://cosmos.example.com"
    assert config.key == "secret"
    assert config.database == "site-editor"


def test_openai_reply_deployment_falls_back(monkeypatch):
    monkeypatch.setenv("AZURE_OPENAI_DEPLOYMENT", "gpt-4o")
    monkeypatch.delenv("AZURE_OPENAI_CLASSIFIER_DEPLOYMENT", raising=False)
    assert OpenAIConfig().reply_deployment == "gpt-4o"


def test_openai_reply_deployment_override(monkeypatch):
    monkeypatch.setenv("AZURE_OPENAI_DEPLOYMENT", "gpt-4o")
    monkeypatch.setenv("AZURE_OPENAI_CLASSIFIER_DEPLOYMENT", "gpt-4o-mini")
    assert OpenAIConfig().reply_deployment == "gpt-4o-mini"


def test_servicebus_default_topic(monkeypatch):
    monkeypatch.delenv("AZURE_SERVICEBUS_TOPIC", raising=False)
    assert ServiceBusConfig().topic_name == "site-edit-notifications"


def test_edit_config_defaults(monkeypatch):
    for key in (
        "EDIT_PROPOSAL_TIMEOUT_SECONDS",
        "EDIT_BURST_LIMIT",
        "EDIT_HOURLY_LIMIT",
        "EDIT_MAX_SNAPSHOTS",
        "EDIT_DRAFT_COMPLEX",
    ):
        monkeypatch.delenv(key, raising=False)
    config = EditConfig()
    assert config.proposal_timeout_seconds == 300
    assert config.burst_limit == 3
    assert config.hourly_limit == 5
    assert config.max_snapshots == 20
    assert config.draft_complex_edits is True


def test_edit_config_from_env(monkeypatch):
    monkeypatch.setenv("EDIT_BURST_LIMIT", "4")
    monkeypatch.setenv("EDIT_DRAFT_COMPLEX", "0")
    config = EditConfig()
    assert config.burst_limit == 4
    assert config.draft_complex_edits is False
