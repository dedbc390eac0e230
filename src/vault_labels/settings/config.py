"""Configuration loader for the labels tooling using Pydantic settings."""

from __future__ import annotations

import os
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

ENV_VAR_NAME = "LABELS_ENV"
DEFAULT_ENV = "local"
PROJECT_ROOT = Path(__file__).resolve().parents[3]
CONFIG_DIR = PROJECT_ROOT / "config"
DEFAULT_CONFIG_FILE = CONFIG_DIR / "settings.default.toml"
LOCAL_CONFIG_FILE = CONFIG_DIR / "settings.local.toml"
SETTINGS_FILE_ENV_VAR = "LABELS_SETTINGS_FILE"

CHAIN_DOCUMENTS = ("entities", "vaults", "products", "points", "opportunities")
LEGACY_RASTER_LOGOS = (
    "re7labs.png",
    "apostro.png",
    "usual.png",
    "dinero.png",
    "alterscope_wb.png",
    "ethena.png",
)


def _resolve_env(explicit_env: str | None = None) -> str:
    """Return the active environment name.

    Args:
        explicit_env: Environment value supplied directly by the caller.

    Returns:
        A stripped environment name, falling back to ``DEFAULT_ENV``.
    """

    env = explicit_env or os.getenv(ENV_VAR_NAME) or DEFAULT_ENV
    return env.strip()


def _env_file_candidates(env: str) -> list[Path]:
    """List candidate ``.env`` files used during settings resolution."""

    return [
        PROJECT_ROOT / ".env",
        PROJECT_ROOT / f".env.{env}",
        PROJECT_ROOT / ".env.local",
    ]


def _resolve_config_path(raw_path: str | None) -> Path | None:
    """Return an absolute config path from user input."""

    if not raw_path:
        return None
    candidate = Path(raw_path).expanduser()
    if not candidate.is_absolute():
        candidate = (Path.cwd() / candidate).resolve()
    return candidate


def _config_file_priority(include_missing: bool = False) -> tuple[Path, ...]:
    """Return config files in descending precedence order."""

    ordered: list[Path] = []
    env_override = _resolve_config_path(os.getenv(SETTINGS_FILE_ENV_VAR))
    if env_override:
        ordered.append(env_override)
    ordered.append(LOCAL_CONFIG_FILE)
    ordered.append(DEFAULT_CONFIG_FILE)
    if include_missing:
        return tuple(ordered)
    return tuple(path for path in ordered if path.exists())


class TomlConfigSettingsSource(PydanticBaseSettingsSource):
    """Pydantic settings source that loads values from a TOML file."""

    def __init__(self, settings_cls: type[BaseSettings], path: Path) -> None:
        super().__init__(settings_cls)
        self.path = path
        self._data: dict[str, Any] | None = None

    def _load(self) -> dict[str, Any]:
        if self._data is not None:
            return self._data
        if not self.path.exists():
            self._data = {}
            return self._data
        try:
            with self.path.open("rb") as handle:
                self._data = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:  # pragma: no cover - invalid files surface immediately
            raise ValueError(f"Invalid TOML syntax in {self.path}") from exc
        return self._data

    def __call__(self) -> dict[str, Any]:  # pragma: no cover - trivial wrapper
        return self._load()

    def get_field_value(self, field_name: str, field):  # pragma: no cover - passthrough helper
        data = self._load()
        return data.get(field_name), field_name in data


class RuntimeSettings(BaseSettings):
    """Process-level runtime controls."""

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("LOG_LEVEL", "RUNTIME__LOG_LEVEL"),
    )


class DataSettings(BaseSettings):
    """Location and layout of the labels dataset."""

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    root: Path = Field(
        default_factory=Path.cwd,
        validation_alias=AliasChoices("LABELS_DATA_ROOT", "DATA__ROOT"),
    )
    logo_dir: Path = Field(
        default=Path("logo"),
        validation_alias=AliasChoices("LABELS_LOGO_DIR", "DATA__LOGO_DIR"),
    )
    documents: tuple[str, ...] = Field(default=CHAIN_DOCUMENTS)


class ValidationSettings(BaseSettings):
    """Knobs for the integrity checklist."""

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    reserved_entity: str | None = Field(
        default="euler-dao",
        validation_alias=AliasChoices("VALIDATION_RESERVED_ENTITY", "VALIDATION__RESERVED_ENTITY"),
    )
    legacy_raster_logos: tuple[str, ...] = Field(
        default=LEGACY_RASTER_LOGOS,
        validation_alias=AliasChoices("VALIDATION_LEGACY_RASTER_LOGOS", "VALIDATION__LEGACY_RASTER_LOGOS"),
    )
    require_vault_description: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "VALIDATION_REQUIRE_VAULT_DESCRIPTION",
            "VALIDATION__REQUIRE_VAULT_DESCRIPTION",
        ),
    )
    max_vault_name_length: int | None = Field(
        default=None,
        validation_alias=AliasChoices("VALIDATION_MAX_VAULT_NAME_LENGTH", "VALIDATION__MAX_VAULT_NAME_LENGTH"),
    )


class FormatterSettings(BaseSettings):
    """Serialization settings used when rewriting documents."""

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    indent: int | str = Field(
        default="\t",
        validation_alias=AliasChoices("FORMATTER_INDENT", "FORMATTER__INDENT"),
    )
    command: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("FORMATTER_COMMAND", "FORMATTER__COMMAND"),
    )

    @field_validator("indent", mode="after")
    @classmethod
    def _coerce_numeric_indent(cls, value: int | str) -> int | str:
        if isinstance(value, str) and value.strip().isdigit():
            return int(value.strip())
        return value


class ObservabilitySettings(BaseSettings):
    """Structured logging configuration."""

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    structured_logging: bool = Field(
        default=False,
        validation_alias=AliasChoices("OBS_STRUCTURED_LOGGING", "OBSERVABILITY__STRUCTURED_LOGGING"),
    )
    service_name: str = Field(
        default="vault-labels",
        validation_alias=AliasChoices("OBS_SERVICE_NAME", "OBSERVABILITY__SERVICE_NAME"),
    )


class Settings(BaseSettings):
    """Top-level configuration model with nested sections for each subsystem."""

    env: str = Field(
        default_factory=lambda: _resolve_env(),
        validation_alias=AliasChoices("ENV", "ENVIRONMENT", "RUNTIME__ENV"),
    )
    runtime: RuntimeSettings = Field(default_factory=RuntimeSettings)
    data: DataSettings = Field(default_factory=DataSettings)
    validation: ValidationSettings = Field(default_factory=ValidationSettings)
    formatter: FormatterSettings = Field(default_factory=FormatterSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)
    env_files: tuple[Path, ...] = Field(default_factory=tuple, exclude=True)
    config_files: tuple[Path, ...] = Field(default_factory=tuple, exclude=True)

    model_config = SettingsConfigDict(
        env_prefix="LABELS_",
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
        """Extend settings sources with TOML-based config files."""

        config_sources = [TomlConfigSettingsSource(settings_cls, path) for path in _config_file_priority()]
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            *config_sources,
            file_secret_settings,
        )

    @model_validator(mode="after")
    def _resolve_paths(self) -> "Settings":
        """Normalize relative data paths once the model is initialised."""

        data_updates: dict[str, Path] = {}
        root = self.data.root
        if not root.is_absolute():
            root = (Path.cwd() / root).resolve()
            data_updates["root"] = root
        if not self.data.logo_dir.is_absolute():
            data_updates["logo_dir"] = root / self.data.logo_dir
        if data_updates:
            object.__setattr__(self, "data", self.data.model_copy(update=data_updates))
        return self

    def with_data_root(self, root: Path | str) -> "Settings":
        """Return a copy pointed at another dataset root.

        A logo directory that was derived from the old root follows the new
        one; an explicitly absolute logo directory outside the old root is kept.
        """

        new_root = Path(root).expanduser()
        if not new_root.is_absolute():
            new_root = (Path.cwd() / new_root).resolve()
        logo_dir = self.data.logo_dir
        try:
            relative_logo = logo_dir.relative_to(self.data.root)
        except ValueError:
            relative_logo = None
        if relative_logo is not None:
            logo_dir = new_root / relative_logo
        data = self.data.model_copy(update={"root": new_root, "logo_dir": logo_dir})
        return self.model_copy(update={"data": data})

    @property
    def log_level(self) -> str:
        """str: Effective logging level for the running process."""

        return self.runtime.log_level

    @property
    def data_root(self) -> Path:
        """Path: Directory holding the numeric chain directories."""

        return self.data.root

    @property
    def logo_dir(self) -> Path:
        """Path: Directory holding logo assets referenced by filename."""

        return self.data.logo_dir

    @property
    def is_local(self) -> bool:
        """bool: True when the active environment is ``local``."""

        return self.env.lower() == "local"


def _load_settings(env: str | None = None) -> Settings:
    """Load settings with optional environment override.

    Args:
        env: Environment name supplied programmatically.

    Returns:
        Fully parsed :class:`Settings` instance with env files applied.
    """

    resolved_env = _resolve_env(env)
    candidate_files = [path for path in _env_file_candidates(resolved_env) if path.exists()]
    config_files = _config_file_priority()
    return Settings(
        _env_file=[str(path) for path in candidate_files],
        _env_file_encoding="utf-8",
        env=resolved_env,
        env_files=tuple(candidate_files),
        config_files=config_files,
    )


@lru_cache(maxsize=1)
def get_settings(env: str | None = None) -> Settings:
    """Return cached settings for the requested environment."""

    return _load_settings(env)


def reload_settings(env: str | None = None) -> Settings:
    """Clear the cached settings and reload from disk."""

    get_settings.cache_clear()
    return get_settings(env)


__all__ = [
    "Settings",
    "get_settings",
    "reload_settings",
    "PROJECT_ROOT",
    "ENV_VAR_NAME",
    "CHAIN_DOCUMENTS",
    "LEGACY_RASTER_LOGOS",
]
