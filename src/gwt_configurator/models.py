"""Shared models for project descriptors and configuration results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional


MAVEN_GWT_GROUP_ID = "com.google.gwt"
MAVEN_GWT_USER_ARTIFACT_ID = "gwt-user"
MAVEN_GWT_SERVLET_ARTIFACT_ID = "gwt-servlet"
MAVEN_GWT_DEV_JAR_ARTIFACT_ID = "gwt-dev"

GWT_MAVEN_PLUGIN_ARTIFACT_ID = "gwt-maven-plugin"
GWT_MAVEN_PLUGIN_1_GROUP_ID = "org.codehaus.mojo"
GWT_MAVEN_PLUGIN_2_GROUP_ID = "net.ltgt.gwt.maven"


class MessageLevel(str, Enum):
    """Severity for configuration messages."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class PluginConvention(str, Enum):
    """Which gwt-maven-plugin layout a project follows."""

    LEGACY = "legacy"
    MODERN = "modern"
    NONE = "none"


class SideEffectKind(str, Enum):
    NATURE_ADDED = "nature-added"
    ARTIFACT_RESOLVED = "artifact-resolved"
    DIRECTORY_CREATED = "directory-created"
    PREFERENCE_SET = "preference-set"


@dataclass(slots=True)
class MavenDependency:
    """A dependency declared in the POM."""

    group_id: str
    artifact_id: str
    version: Optional[str] = None
    scope: str = "compile"
    type: str = "jar"

    @property
    def coordinates(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version or ''}"


@dataclass(slots=True)
class MavenPlugin:
    """A build plugin and its raw ``<configuration>`` element."""

    group_id: str
    artifact_id: str
    version: Optional[str] = None
    configuration: Any = None


@dataclass(slots=True)
class RemoteRepository:
    id: str
    url: str


@dataclass(slots=True)
class ProjectDescriptor:
    """Identity, location and declarations of the project being configured."""

    artifact_id: Optional[str]
    version: Optional[str]
    location: Optional[Path]
    group_id: Optional[str] = None
    packaging: str = "jar"
    dependencies: List[MavenDependency] = field(default_factory=list)
    plugins: List[MavenPlugin] = field(default_factory=list)
    repositories: List[RemoteRepository] = field(default_factory=list)
    properties: Dict[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class BuildConfigSettings:
    """Overrides read from the gwt-maven-plugin configuration."""

    launch_from_war_dir: bool = False
    war_src_dir: str = "src/main/webapp"


@dataclass(slots=True)
class ResolvedPaths:
    war_src_dir: Path
    war_out_dir: Path


@dataclass(slots=True)
class SideEffect:
    """Describes one change made to the outside world during a configuration pass."""

    kind: SideEffectKind
    target: str
    detail: Optional[str] = None


@dataclass(slots=True)
class ConfigurationMessage:
    level: MessageLevel
    text: str


@dataclass(slots=True)
class ConfigurationResult:
    """Outcome of a single configuration pass."""

    has_nature: bool = False
    nature_added: bool = False
    gwt_version: Optional[str] = None
    settings: Optional[BuildConfigSettings] = None
    paths: Optional[ResolvedPaths] = None
    persisted: bool = False
    side_effects: List[SideEffect] = field(default_factory=list)
    errors: List[ConfigurationMessage] = field(default_factory=list)
    warnings: List[ConfigurationMessage] = field(default_factory=list)

    def record(self, kind: SideEffectKind, target: object, detail: Optional[str] = None) -> None:
        self.side_effects.append(SideEffect(kind, str(target), detail))

    def add_message(self, level: MessageLevel, text: str) -> None:
        message = ConfigurationMessage(level, text)
        if level == MessageLevel.ERROR:
            self.errors.append(message)
        elif level == MessageLevel.WARNING:
            self.warnings.append(message)

    def effects_of(self, kind: SideEffectKind) -> List[SideEffect]:
        return [effect for effect in self.side_effects if effect.kind == kind]

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)


__all__ = [
    "MAVEN_GWT_GROUP_ID",
    "MAVEN_GWT_USER_ARTIFACT_ID",
    "MAVEN_GWT_SERVLET_ARTIFACT_ID",
    "MAVEN_GWT_DEV_JAR_ARTIFACT_ID",
    "GWT_MAVEN_PLUGIN_ARTIFACT_ID",
    "GWT_MAVEN_PLUGIN_1_GROUP_ID",
    "GWT_MAVEN_PLUGIN_2_GROUP_ID",
    "MessageLevel",
    "PluginConvention",
    "SideEffectKind",
    "MavenDependency",
    "MavenPlugin",
    "RemoteRepository",
    "ProjectDescriptor",
    "BuildConfigSettings",
    "ResolvedPaths",
    "SideEffect",
    "ConfigurationMessage",
    "ConfigurationResult",
]
