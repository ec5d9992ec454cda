"""Compute the WAR output directory for the detected plugin convention."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from loguru import logger

from .errors import WarOutDirError
from .models import (
    GWT_MAVEN_PLUGIN_1_GROUP_ID,
    GWT_MAVEN_PLUGIN_2_GROUP_ID,
    GWT_MAVEN_PLUGIN_ARTIFACT_ID,
    MavenPlugin,
    PluginConvention,
    ProjectDescriptor,
)


def detect_convention(plugins: Iterable[MavenPlugin]) -> PluginConvention:
    """Return the convention of the first gwt-maven-plugin declared."""

    for plugin in plugins:
        if plugin.artifact_id != GWT_MAVEN_PLUGIN_ARTIFACT_ID:
            continue
        if plugin.group_id == GWT_MAVEN_PLUGIN_1_GROUP_ID:
            return PluginConvention.LEGACY
        if plugin.group_id == GWT_MAVEN_PLUGIN_2_GROUP_ID:
            return PluginConvention.MODERN
    return PluginConvention.NONE


def war_out_dir_for(project: ProjectDescriptor, convention: PluginConvention) -> Path:
    """Return the WAR output path without touching the filesystem."""

    location = project.location
    if location is None:
        raise WarOutDirError(f"Project {project.artifact_id or '<unknown>'} has no location")

    if convention == PluginConvention.LEGACY:
        if not project.artifact_id or not project.version:
            raise WarOutDirError(
                "Legacy gwt-maven-plugin layout needs both artifactId and version "
                f"(artifactId={project.artifact_id}, version={project.version})"
            )
        return location / "target" / f"{project.artifact_id}-{project.version}"
    if convention == PluginConvention.MODERN:
        return location / "target" / "gwt" / "devmode" / "war"
    raise WarOutDirError(
        f"No gwt-maven-plugin convention applies to {project.artifact_id or location}; "
        "cannot compute the WAR output directory"
    )


def resolve_war_out_dir(project: ProjectDescriptor, convention: PluginConvention) -> Path:
    """Return the WAR output directory, creating it and any missing parents."""

    war_out = war_out_dir_for(project, convention)
    try:
        war_out.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise WarOutDirError(f"Could not create WAR output directory {war_out}: {exc}") from exc
    logger.debug("WAR output directory ({}): {}", convention.value, war_out)
    return war_out


__all__ = ["detect_convention", "war_out_dir_for", "resolve_war_out_dir"]
