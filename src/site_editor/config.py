"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv


def _env(key: str, default: str = "") -> str:
    return os.environ.get(key, default)


def _env_int(key: str, default: int) -> int:
    raw = _env(key)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_bool(key: str, *, default: bool) -> bool:
    raw = _env(key).strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class CosmosConfig:
    endpoint: str = field(default_factory=lambda: _env("COSMOS_ENDPOINT"))
    key: str = field(default_factory=lambda: _env("COSMOS_KEY"))
    database: str = field(default_factory=lambda: _env("COSMOS_DATABASE", "site-editor"))


@dataclass(frozen=True)
class OpenAIConfig:
    endpoint: str = field(default_factory=lambda: _env("AZURE_OPENAI_ENDPOINT"))
    deployment: str = field(default_factory=lambda: _env("AZURE_OPENAI_DEPLOYMENT"))
    classifier_deployment: str = field(
        default_factory=lambda: _env("AZURE_OPENAI_CLASSIFIER_DEPLOYMENT")
    )

    @property
    def reply_deployment(self) -> str:
        """Deployment used for reply classification, falling back to the editor model."""
        return self.classifier_deployment or self.deployment


@dataclass(frozen=True)
class ServiceBusConfig:
    connection_string: str = field(
        default_factory=lambda: _env("AZURE_SERVICEBUS_CONNECTION_STRING")
    )
    topic_name: str = field(
        default_factory=lambda: _env("AZURE_SERVICEBUS_TOPIC", "site-edit-notifications")
    )


@dataclass(frozen=True)
class MonitorConfig:
    connection_string: str = field(
        default_factory=lambda: _env("APPLICATIONINSIGHTS_CONNECTION_STRING")
    )


@dataclass(frozen=True)
class EditConfig:
    """Tunables for the edit pipeline: timeouts, rate limits and retention."""

    proposal_timeout_seconds: int = field(
        default_factory=lambda: _env_int("EDIT_PROPOSAL_TIMEOUT_SECONDS", 300)
    )
    burst_limit: int = field(default_factory=lambda: _env_int("EDIT_BURST_LIMIT", 3))
    burst_window_minutes: int = field(
        default_factory=lambda: _env_int("EDIT_BURST_WINDOW_MINUTES", 10)
    )
    hourly_limit: int = field(default_factory=lambda: _env_int("EDIT_HOURLY_LIMIT", 5))
    hourly_window_minutes: int = field(
        default_factory=lambda: _env_int("EDIT_HOURLY_WINDOW_MINUTES", 60)
    )
    weekly_alert_limit: int = field(
        default_factory=lambda: _env_int("EDIT_WEEKLY_ALERT_LIMIT", 3)
    )
    weekly_window_days: int = field(default_factory=lambda: _env_int("EDIT_WEEKLY_WINDOW_DAYS", 7))
    max_snapshots: int = field(default_factory=lambda: _env_int("EDIT_MAX_SNAPSHOTS", 20))
    max_prior_summaries: int = field(
        default_factory=lambda: _env_int("EDIT_MAX_PRIOR_SUMMARIES", 10)
    )
    draft_complex_edits: bool = field(
        default_factory=lambda: _env_bool("EDIT_DRAFT_COMPLEX", default=True)
    )
    preview_base_url: str = field(default_factory=lambda: _env("EDIT_PREVIEW_BASE_URL"))


@dataclass(frozen=True)
class AppConfig:
    env: str = field(default_factory=lambda: _env("APP_ENV", "development"))
    log_level: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))
    log_file: str = field(default_factory=lambda: _env("LOG_FILE"))
    secret_key: str = field(default_factory=lambda: _env("SECRET_KEY"))

    @property
    def is_development(self) -> bool:
        return self.env == "development"


@dataclass(frozen=True)
class Settings:
    cosmos: CosmosConfig = field(default_factory=CosmosConfig)
    openai: OpenAIConfig = field(default_factory=OpenAIConfig)
    servicebus: ServiceBusConfig = field(default_factory=ServiceBusConfig)
    monitor: MonitorConfig = field(default_factory=MonitorConfig)
    edits: EditConfig = field(default_factory=EditConfig)
    app: AppConfig = field(default_factory=AppConfig)


def load_settings() -> Settings:
    """Load ``.env`` (if present) and build the settings tree."""
    load_dotenv()
    return Settings()
