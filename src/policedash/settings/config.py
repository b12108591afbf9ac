"""Typed configuration for the police dashboard.

Values resolve in this order, highest first:

1. keyword arguments passed to :class:`Settings`
2. ``POLICEDASH_*`` environment variables (nested sections use ``__``,
   e.g. ``POLICEDASH_MATCH__DUPLICATE_THRESHOLD=85``)
3. ``.env``, ``.env.<env>`` and ``.env.local`` in the project root
4. the TOML file named by ``POLICEDASH_SETTINGS_FILE``
5. ``config/settings.local.toml``
6. ``config/settings.default.toml``
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, TomlConfigSettingsSource

ENV_VAR_NAME = "POLICEDASH_ENV"
SETTINGS_FILE_ENV_VAR = "POLICEDASH_SETTINGS_FILE"
DEFAULT_ENV = "local"
PROJECT_ROOT = Path(__file__).resolve().parents[3]
CONFIG_DIR = PROJECT_ROOT / "config"
DEFAULT_CONFIG_FILE = CONFIG_DIR / "settings.default.toml"
LOCAL_CONFIG_FILE = CONFIG_DIR / "settings.local.toml"

# Frontend builds exported the API URL under a public prefix; honour it after our own names.
API_URL_OVERRIDES = ("POLICEDASH_API__BASE_URL", "POLICEDASH_API_BASE_URL", "NEXT_PUBLIC_API_BASE_URL")


def _active_env(explicit: str | None = None) -> str:
    return (explicit or os.getenv(ENV_VAR_NAME) or DEFAULT_ENV).strip()


def _project_path(raw: str) -> Path:
    path = Path(raw).expanduser()
    return path if path.is_absolute() else (PROJECT_ROOT / path).resolve()


def _config_files() -> tuple[Path, ...]:
    """Existing TOML config files, most specific first."""

    candidates: list[Path] = []
    explicit = os.getenv(SETTINGS_FILE_ENV_VAR)
    if explicit:
        candidates.append(_project_path(explicit))
    candidates.extend((LOCAL_CONFIG_FILE, DEFAULT_CONFIG_FILE))
    return tuple(path for path in candidates if path.exists())


def _dotenv_files(env: str) -> list[Path]:
    names = (".env", f".env.{env}", ".env.local")
    return [PROJECT_ROOT / name for name in names if (PROJECT_ROOT / name).exists()]


class _Section(BaseSettings):
    """Base for nested sections; unknown keys are ignored and field names are accepted."""

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)


class RuntimeSettings(_Section):
    log_level: str = Field(default="INFO", validation_alias=AliasChoices("LOG_LEVEL", "RUNTIME__LOG_LEVEL"))


class APISettings(_Section):
    """Face-recognition API endpoint used by the dashboard and the CLI."""

    base_url: str = Field(
        default="http://127.0.0.1:8000",
        validation_alias=AliasChoices("API_BASE_URL", "API__BASE_URL"),
    )
    token: str | None = Field(default=None, validation_alias=AliasChoices("API_TOKEN", "API__TOKEN", "AUTH_TOKEN"))
    timeout_seconds: float = Field(
        default=30.0,
        validation_alias=AliasChoices("API_TIMEOUT_SECONDS", "API__TIMEOUT_SECONDS"),
    )
    health_timeout_seconds: float = Field(
        default=5.0,
        validation_alias=AliasChoices("API_HEALTH_TIMEOUT_SECONDS", "API__HEALTH_TIMEOUT_SECONDS"),
    )


class DataStoreSettings(_Section):
    """Relational store for complaints, citizen users, RTI requests and admins.

    ``url`` takes any SQLAlchemy URL; when unset a SQLite file at
    ``sqlite_path`` is used.
    """

    url: str | None = Field(default=None, validation_alias=AliasChoices("DATABASE_URL", "DATASTORE__URL"))
    sqlite_path: Path = Field(
        default=Path("data/policedash.db"),
        validation_alias=AliasChoices("DATASTORE_SQLITE_PATH", "DATASTORE__SQLITE_PATH"),
    )


class UploadSettings(_Section):
    max_size_mb: float = Field(
        default=10.0,
        validation_alias=AliasChoices("UPLOAD_MAX_SIZE_MB", "UPLOADS__MAX_SIZE_MB"),
    )


class MatchSettings(_Section):
    """Face-match defaults and the confidence at which enrollment flags a duplicate."""

    duplicate_threshold: float = Field(
        default=80.0,
        validation_alias=AliasChoices("MATCH_DUPLICATE_THRESHOLD", "MATCH__DUPLICATE_THRESHOLD"),
    )
    default_threshold: float = Field(
        default=80.0,
        validation_alias=AliasChoices("MATCH_DEFAULT_THRESHOLD", "MATCH__DEFAULT_THRESHOLD"),
    )
    default_max_results: int = Field(
        default=5,
        validation_alias=AliasChoices("MATCH_DEFAULT_MAX_RESULTS", "MATCH__DEFAULT_MAX_RESULTS"),
    )
    create_alert: bool = Field(default=True, validation_alias=AliasChoices("MATCH_CREATE_ALERT", "MATCH__CREATE_ALERT"))

    @field_validator("duplicate_threshold", "default_threshold")
    @classmethod
    def _percentage(cls, value: float) -> float:
        if not 0 <= value <= 100:
            raise ValueError("threshold must be between 0 and 100")
        return value


class BrowserSettings(_Section):
    page_size: int = Field(default=20, validation_alias=AliasChoices("BROWSER_PAGE_SIZE", "BROWSER__PAGE_SIZE"))
    debounce_seconds: float = Field(
        default=0.5,
        validation_alias=AliasChoices("BROWSER_DEBOUNCE_SECONDS", "BROWSER__DEBOUNCE_SECONDS"),
    )


class ObservabilitySettings(_Section):
    structured_logging: bool = Field(
        default=True,
        validation_alias=AliasChoices("OBS_STRUCTURED_LOGGING", "OBSERVABILITY__STRUCTURED_LOGGING"),
    )
    statsd_host: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OBS_STATSD_HOST", "OBSERVABILITY__STATSD_HOST"),
    )
    statsd_port: int = Field(
        default=8125,
        validation_alias=AliasChoices("OBS_STATSD_PORT", "OBSERVABILITY__STATSD_PORT"),
    )
    statsd_prefix: str = Field(
        default="policedash",
        validation_alias=AliasChoices("OBS_STATSD_PREFIX", "OBSERVABILITY__STATSD_PREFIX"),
    )
    service_name: str = Field(
        default="policedash-dashboard",
        validation_alias=AliasChoices("OBS_SERVICE_NAME", "OBSERVABILITY__SERVICE_NAME"),
    )


class Settings(BaseSettings):
    """Dashboard configuration, one nested section per subsystem."""

    env: str = Field(
        default_factory=lambda: _active_env(),
        validation_alias=AliasChoices("ENV", "ENVIRONMENT", "RUNTIME__ENV"),
    )
    project_root: Path = Field(default=PROJECT_ROOT)
    runtime: RuntimeSettings = Field(default_factory=RuntimeSettings)
    api: APISettings = Field(default_factory=APISettings)
    datastore: DataStoreSettings = Field(default_factory=DataStoreSettings)
    uploads: UploadSettings = Field(default_factory=UploadSettings)
    match: MatchSettings = Field(default_factory=MatchSettings)
    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)
    env_files: tuple[Path, ...] = Field(default_factory=tuple, exclude=True)
    config_files: tuple[Path, ...] = Field(default_factory=tuple, exclude=True)

    model_config = SettingsConfigDict(
        env_prefix="POLICEDASH_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        toml_sources = [TomlConfigSettingsSource(settings_cls, toml_file=path) for path in _config_files()]
        return (init_settings, env_settings, dotenv_settings, *toml_sources, file_secret_settings)

    @model_validator(mode="after")
    def _finalize(self) -> "Settings":
        sqlite_path = self.datastore.sqlite_path
        if not sqlite_path.is_absolute():
            resolved = (self.project_root / sqlite_path).resolve()
            object.__setattr__(self, "datastore", self.datastore.model_copy(update={"sqlite_path": resolved}))

        if self.is_local:
            quiet = {"structured_logging": False, "statsd_host": None}
            object.__setattr__(self, "observability", self.observability.model_copy(update=quiet))

        override = next((os.environ[name] for name in API_URL_OVERRIDES if os.environ.get(name, "").strip()), None)
        if override:
            api = self.api.model_copy(update={"base_url": override.strip()})
            object.__setattr__(self, "api", api)
        return self

    @property
    def log_level(self) -> str:
        return self.runtime.log_level

    @property
    def api_base_url(self) -> str:
        return self.api.base_url

    @property
    def is_local(self) -> bool:
        return self.env.lower() == "local"


@lru_cache(maxsize=1)
def get_settings(env: str | None = None) -> Settings:
    """Return the process-wide settings, loading them on first use."""

    active = _active_env(env)
    dotenv = _dotenv_files(active)
    return Settings(
        _env_file=[str(path) for path in dotenv],
        _env_file_encoding="utf-8",
        env=active,
        env_files=tuple(dotenv),
        config_files=_config_files(),
    )


def reload_settings(env: str | None = None) -> Settings:
    """Drop the cached settings and load them again (tests and config edits)."""

    get_settings.cache_clear()
    return get_settings(env)


__all__ = [
    "ENV_VAR_NAME",
    "PROJECT_ROOT",
    "Settings",
    "get_settings",
    "reload_settings",
]
