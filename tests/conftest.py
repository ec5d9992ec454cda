from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import pytest
from loguru import logger

POM_NAMESPACE = "http://maven.apache.org/POM/4.0.0"


def create_pom(
    path: Path,
    *,
    artifact_id: str = "webapp",
    version: str = "1.0-SNAPSHOT",
    dependencies: Iterable[Tuple[str, str, Optional[str]]] = (),
    managed_dependencies: Iterable[Tuple[str, str, str]] = (),
    plugin: Optional[Tuple[str, str]] = None,
    plugin_configuration: str = "",
    repositories: Iterable[Tuple[str, str]] = (),
    properties: str = "",
) -> Path:
    """Write a minimal namespaced pom.xml into directory ``path``."""

    path.mkdir(parents=True, exist_ok=True)
    deps = "".join(
        f"<dependency><groupId>{group}</groupId><artifactId>{artifact}</artifactId>"
        + (f"<version>{dep_version}</version>" if dep_version is not None else "")
        + "</dependency>"
        for group, artifact, dep_version in dependencies
    )
    managed = "".join(
        f"<dependency><groupId>{group}</groupId><artifactId>{artifact}</artifactId>"
        f"<version>{dep_version}</version></dependency>"
        for group, artifact, dep_version in managed_dependencies
    )
    build = ""
    if plugin is not None:
        configuration = f"<configuration>{plugin_configuration}</configuration>" if plugin_configuration else ""
        build = (
            "<build><plugins><plugin>"
            f"<groupId>{plugin[0]}</groupId><artifactId>{plugin[1]}</artifactId>"
            f"{configuration}</plugin></plugins></build>"
        )
    repos = "".join(f"<repository><id>{rid}</id><url>{url}</url></repository>" for rid, url in repositories)
    content = (
        f'<?xml version="1.0" encoding="UTF-8"?>\n<project xmlns="{POM_NAMESPACE}">'
        "<modelVersion>4.0.0</modelVersion>"
        f"<groupId>com.example</groupId><artifactId>{artifact_id}</artifactId>"
        f"<version>{version}</version><packaging>war</packaging>"
        + (f"<properties>{properties}</properties>" if properties else "")
        + (f"<dependencyManagement><dependencies>{managed}</dependencies></dependencyManagement>" if managed else "")
        + (f"<dependencies>{deps}</dependencies>" if deps else "")
        + (f"<repositories>{repos}</repositories>" if repos else "")
        + build
        + "</project>"
    )
    pom = path / "pom.xml"
    pom.write_text(content, encoding="utf-8")
    return pom


def publish_artifact(repo_root: Path, group_id: str, artifact_id: str, version: str) -> Path:
    """Place a fake jar into a Maven-layout directory."""

    directory = repo_root.joinpath(*group_id.split("."), artifact_id, version)
    directory.mkdir(parents=True, exist_ok=True)
    jar = directory / f"{artifact_id}-{version}.jar"
    jar.write_bytes(b"PK\x03\x04 fake jar for " + artifact_id.encode())
    return jar


@pytest.fixture()
def log_messages():
    messages: List[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture()
def remote_repo(tmp_path: Path) -> Path:
    root = tmp_path / "remote"
    root.mkdir()
    return root


@pytest.fixture()
def local_repo(tmp_path: Path) -> Path:
    return tmp_path / "m2" / "repository"


@pytest.fixture()
def pom_factory(tmp_path: Path):
    def _factory(name: str = "webapp", **kwargs) -> Path:
        kwargs.setdefault("artifact_id", name)
        return create_pom(tmp_path / name, **kwargs)

    return _factory


@pytest.fixture()
def publish():
    return publish_artifact
