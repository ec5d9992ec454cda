"""Read the parts of a Maven POM the configurator needs."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger
from lxml import etree

from .errors import PomError
from .models import (
    GWT_MAVEN_PLUGIN_1_GROUP_ID,
    GWT_MAVEN_PLUGIN_2_GROUP_ID,
    GWT_MAVEN_PLUGIN_ARTIFACT_ID,
    MavenDependency,
    MavenPlugin,
    ProjectDescriptor,
    RemoteRepository,
)

POM_FILE_NAME = "pom.xml"
CENTRAL_REPOSITORY = RemoteRepository("central", "https://repo.maven.apache.org/maven2")
DEFAULT_PLUGIN_GROUP_ID = "org.apache.maven.plugins"

_PROPERTY_PATTERN = re.compile(r"\$\{([^}]+)\}")


def _child(node: Any, name: str) -> Any:
    return node.find("{*}" + name) if node is not None else None


def _child_text(node: Any, name: str, default: Optional[str] = None) -> Optional[str]:
    child = _child(node, name)
    if child is None or child.text is None:
        return default
    value = child.text.strip()
    return value or default


def _children(node: Any, container: str, name: str) -> List[Any]:
    parent = _child(node, container)
    if parent is None:
        return []
    return parent.findall("{*}" + name)


def interpolate(value: Optional[str], properties: Dict[str, str]) -> Optional[str]:
    """Expand ``${name}`` references; unknown references are kept verbatim."""

    if value is None:
        return None

    def _replace(match: re.Match) -> str:
        return properties.get(match.group(1), match.group(0))

    return _PROPERTY_PATTERN.sub(_replace, value)


def _read_properties(root: Any) -> Dict[str, str]:
    properties: Dict[str, str] = {}
    node = _child(root, "properties")
    if node is None:
        return properties
    for child in node:
        if not isinstance(child.tag, str):
            continue
        properties[etree.QName(child).localname] = (child.text or "").strip()
    return properties


def _read_managed_versions(root: Any, properties: Dict[str, str]) -> Dict[Tuple[str, str], str]:
    """Versions from ``<dependencyManagement>``, keyed by groupId and artifactId."""

    managed: Dict[Tuple[str, str], str] = {}
    for node in _children(_child(root, "dependencyManagement"), "dependencies", "dependency"):
        group_id = interpolate(_child_text(node, "groupId"), properties)
        artifact_id = interpolate(_child_text(node, "artifactId"), properties)
        version = interpolate(_child_text(node, "version"), properties)
        if group_id and artifact_id and version:
            managed.setdefault((group_id, artifact_id), version)
    return managed


def _read_dependencies(root: Any, properties: Dict[str, str]) -> List[MavenDependency]:
    dependencies: List[MavenDependency] = []
    managed = _read_managed_versions(root, properties)
    for node in _children(root, "dependencies", "dependency"):
        group_id = _child_text(node, "groupId")
        artifact_id = _child_text(node, "artifactId")
        if not group_id or not artifact_id:
            logger.warning("Skipping dependency without groupId/artifactId")
            continue
        group_id = interpolate(group_id, properties)
        artifact_id = interpolate(artifact_id, properties)
        version = interpolate(_child_text(node, "version"), properties)
        if version is None:
            version = managed.get((group_id, artifact_id))
        dependencies.append(
            MavenDependency(
                group_id=group_id,
                artifact_id=artifact_id,
                version=version,
                scope=_child_text(node, "scope", "compile"),
                type=_child_text(node, "type", "jar"),
            )
        )
    return dependencies


def _read_plugins(root: Any, properties: Dict[str, str]) -> List[MavenPlugin]:
    plugins: List[MavenPlugin] = []
    for node in _children(_child(root, "build"), "plugins", "plugin"):
        artifact_id = _child_text(node, "artifactId")
        if not artifact_id:
            continue
        plugins.append(
            MavenPlugin(
                group_id=_child_text(node, "groupId", DEFAULT_PLUGIN_GROUP_ID),
                artifact_id=artifact_id,
                version=interpolate(_child_text(node, "version"), properties),
                configuration=_child(node, "configuration"),
            )
        )
    return plugins


def _read_repositories(root: Any, properties: Dict[str, str]) -> List[RemoteRepository]:
    repositories: List[RemoteRepository] = []
    for node in _children(root, "repositories", "repository"):
        url = interpolate(_child_text(node, "url"), properties)
        if not url:
            continue
        repositories.append(RemoteRepository(_child_text(node, "id", url), url))
    if not any(repo.id == CENTRAL_REPOSITORY.id for repo in repositories):
        repositories.append(RemoteRepository(CENTRAL_REPOSITORY.id, CENTRAL_REPOSITORY.url))
    return repositories


def load_project(path: Path) -> ProjectDescriptor:
    """Parse ``pom.xml`` (or the directory holding it) into a project descriptor."""

    pom_path = path / POM_FILE_NAME if path.is_dir() else path
    try:
        tree = etree.parse(str(pom_path))
    except OSError as exc:
        raise PomError(f"Could not read POM {pom_path}: {exc}") from exc
    except etree.XMLSyntaxError as exc:
        raise PomError(f"Failed to parse POM {pom_path}: {exc}") from exc

    root = tree.getroot()
    if etree.QName(root).localname != "project":
        raise PomError(f"{pom_path} is not a Maven POM (root element <{root.tag}>)")

    parent = _child(root, "parent")
    group_id = _child_text(root, "groupId") or _child_text(parent, "groupId")
    artifact_id = _child_text(root, "artifactId")
    raw_version = _child_text(root, "version") or _child_text(parent, "version")

    location = pom_path.resolve().parent
    properties = _read_properties(root)
    builtins = {
        "basedir": str(location),
        "project.basedir": str(location),
        "project.groupId": group_id or "",
        "project.artifactId": artifact_id or "",
    }
    for key, value in builtins.items():
        properties.setdefault(key, value)
    version = interpolate(raw_version, properties)
    properties.setdefault("project.version", version or "")

    descriptor = ProjectDescriptor(
        artifact_id=artifact_id,
        version=version,
        location=location,
        group_id=group_id,
        packaging=_child_text(root, "packaging", "jar"),
        dependencies=_read_dependencies(root, properties),
        plugins=_read_plugins(root, properties),
        repositories=_read_repositories(root, properties),
        properties=properties,
    )
    logger.debug(
        "Loaded POM {}: {} dependencies, {} plugins",
        pom_path,
        len(descriptor.dependencies),
        len(descriptor.plugins),
    )
    return descriptor


def find_gwt_maven_plugin(project: ProjectDescriptor) -> Optional[MavenPlugin]:
    """Return the first gwt-maven-plugin of either convention."""

    for plugin in project.plugins:
        if plugin.artifact_id == GWT_MAVEN_PLUGIN_ARTIFACT_ID and plugin.group_id in (
            GWT_MAVEN_PLUGIN_1_GROUP_ID,
            GWT_MAVEN_PLUGIN_2_GROUP_ID,
        ):
            return plugin
    return None


__all__ = ["CENTRAL_REPOSITORY", "POM_FILE_NAME", "find_gwt_maven_plugin", "interpolate", "load_project"]
