"""Configuration loading and validation for the GWT project configurator."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .eclipse import GDT_CORE_PREFERENCE_NODE, GWT_NATURE_ID
from .models import RemoteRepository
from .resolver import DEFAULT_TIMEOUT, default_local_repository


class RepositoryConfig(BaseModel):
    """Additional remote repository searched after the POM's own repositories."""

    id: str
    url: str

    @field_validator("url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value:
            raise ValueError("Repository URL cannot be empty")
        return value

    def to_repository(self) -> RemoteRepository:
        return RemoteRepository(self.id, self.url)


class ResolutionConfig(BaseModel):
    local_repository: Optional[Path] = Field(
        default=None, description="Local Maven repository; defaults to ~/.m2/repository."
    )
    offline: bool = False
    timeout: float = DEFAULT_TIMEOUT
    repositories: List[RepositoryConfig] = Field(default_factory=list)
    resolve_dev_jar: bool = Field(
        default=True, description="Download gwt-dev when a GWT dependency is found."
    )

    @field_validator("timeout")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be positive")
        return value

    def effective_local_repository(self) -> Path:
        if self.local_repository is not None:
            return self.local_repository.expanduser()
        return default_local_repository()


class EclipseConfig(BaseModel):
    nature_id: str = GWT_NATURE_ID
    preference_node: str = GDT_CORE_PREFERENCE_NODE


class Config(BaseModel):
    """Top-level configuration."""

    resolution: ResolutionConfig = Field(default_factory=ResolutionConfig)
    eclipse: EclipseConfig = Field(default_factory=EclipseConfig)


class ConfigError(Exception):
    """Raised when a configuration file is invalid."""


def load_config(path: Optional[Path]) -> Config:
    """Load configuration from a YAML file; ``None`` yields the defaults."""

    if path is None:
        return Config()
    try:
        data = yaml.safe_load(path.read_text())
    except FileNotFoundError as exc:
        raise ConfigError(f"Configuration file not found: {path}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse YAML: {exc}") from exc

    try:
        return Config.model_validate(data or {})
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def save_config(config: Config, path: Path) -> None:
    """Persist configuration to disk as YAML."""

    rendered = config.model_dump(mode="json")
    path.write_text(yaml.safe_dump(rendered, sort_keys=False))


__all__ = [
    "Config",
    "ConfigError",
    "EclipseConfig",
    "RepositoryConfig",
    "ResolutionConfig",
    "load_config",
    "save_config",
]
