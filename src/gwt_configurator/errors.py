"""Exceptions raised by the GWT project configurator."""

from __future__ import annotations


class ConfiguratorError(Exception):
    """Base class for configurator failures."""


class PomError(ConfiguratorError):
    """Raised when a POM file cannot be read or parsed."""


class ArtifactResolutionError(ConfiguratorError):
    """Raised when an artifact cannot be resolved into the local repository."""


class PreferenceStoreError(ConfiguratorError):
    """Raised when project preferences or the project file cannot be persisted."""


class WarOutDirError(ConfiguratorError):
    """Raised when no WAR output directory can be computed for a project."""


__all__ = [
    "ConfiguratorError",
    "PomError",
    "ArtifactResolutionError",
    "PreferenceStoreError",
    "WarOutDirError",
]
