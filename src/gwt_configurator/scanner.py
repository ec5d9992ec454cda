"""Detect GWT libraries among declared dependencies."""

from __future__ import annotations

from typing import Iterable, Optional

from loguru import logger

from .models import (
    MAVEN_GWT_GROUP_ID,
    MAVEN_GWT_SERVLET_ARTIFACT_ID,
    MAVEN_GWT_USER_ARTIFACT_ID,
    MavenDependency,
)


def find_gwt_dependency(dependencies: Iterable[MavenDependency]) -> Optional[MavenDependency]:
    """Return the first ``gwt-user`` or ``gwt-servlet`` dependency in declaration order."""

    for dependency in dependencies:
        has_gwt_group_id = dependency.group_id == MAVEN_GWT_GROUP_ID
        has_gwt_user = dependency.artifact_id == MAVEN_GWT_USER_ARTIFACT_ID
        has_gwt_servlet = dependency.artifact_id == MAVEN_GWT_SERVLET_ARTIFACT_ID
        if has_gwt_group_id and (has_gwt_user or has_gwt_servlet):
            logger.debug(
                "GWT dependency found: hasGwtGroupId={} hasGwtUser={} hasGwtServlet={}",
                has_gwt_group_id,
                has_gwt_user,
                has_gwt_servlet,
            )
            return dependency
    return None


def find_gwt_version(dependencies: Iterable[MavenDependency]) -> Optional[str]:
    """Return the version of the first matching GWT dependency, or ``None``."""

    dependency = find_gwt_dependency(dependencies)
    return dependency.version if dependency is not None else None


def is_gwt_project(dependencies: Iterable[MavenDependency]) -> bool:
    return find_gwt_dependency(dependencies) is not None


__all__ = ["find_gwt_dependency", "find_gwt_version", "is_gwt_project"]
