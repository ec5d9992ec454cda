from __future__ import annotations

from pathlib import Path

import pytest

from gwt_configurator.errors import PomError
from gwt_configurator.pom import CENTRAL_REPOSITORY, find_gwt_maven_plugin, interpolate, load_project
from gwt_configurator.settings import get_war_src_dir


def test_load_project_reads_identity_and_declarations(pom_factory) -> None:
    pom = pom_factory(
        "shop",
        version="2.3",
        properties="<gwt.version>2.8.2</gwt.version>",
        dependencies=[
            ("com.google.gwt", "gwt-user", "${gwt.version}"),
            ("com.example", "shared", "${project.version}"),
            ("junit", "junit", None),
        ],
        plugin=("net.ltgt.gwt.maven", "gwt-maven-plugin"),
        plugin_configuration="<warSourceDirectory>src/main/war</warSourceDirectory>",
        repositories=[("internal", "https://repo.example.com/maven2/")],
    )

    project = load_project(pom)
    assert project.artifact_id == "shop"
    assert project.version == "2.3"
    assert project.group_id == "com.example"
    assert project.packaging == "war"
    assert project.location == pom.parent.resolve()
    assert [dep.version for dep in project.dependencies] == ["2.8.2", "2.3", None]
    assert [repo.id for repo in project.repositories] == ["internal", "central"]

    plugin = find_gwt_maven_plugin(project)
    assert plugin is not None
    assert get_war_src_dir(plugin.configuration) == "src/main/war"


def test_load_project_accepts_directory(pom_factory) -> None:
    pom = pom_factory("dir-project")
    assert load_project(pom.parent).artifact_id == "dir-project"


def test_declared_central_is_not_duplicated(pom_factory) -> None:
    pom = pom_factory(repositories=[("central", "https://mirror.example.com/central")])
    project = load_project(pom)
    assert len(project.repositories) == 1
    assert project.repositories[0].url != CENTRAL_REPOSITORY.url


def test_group_and_version_inherited_from_parent(tmp_path: Path) -> None:
    pom = tmp_path / "pom.xml"
    pom.write_text(
        "<project><parent><groupId>org.parent</groupId><artifactId>p</artifactId>"
        "<version>5</version></parent><artifactId>child</artifactId>"
        "<dependencies><dependency><artifactId>no-group</artifactId></dependency></dependencies>"
        "</project>"
    )
    project = load_project(pom)
    assert project.group_id == "org.parent"
    assert project.version == "5"
    assert project.dependencies == []
    assert find_gwt_maven_plugin(project) is None


def test_malformed_pom_raises(tmp_path: Path) -> None:
    pom = tmp_path / "pom.xml"
    pom.write_text("<project><artifactId>broken</project>")
    with pytest.raises(PomError):
        load_project(pom)


def test_missing_pom_raises(tmp_path: Path) -> None:
    with pytest.raises(PomError):
        load_project(tmp_path)


def test_non_pom_root_raises(tmp_path: Path) -> None:
    pom = tmp_path / "pom.xml"
    pom.write_text("<settings/>")
    with pytest.raises(PomError):
        load_project(pom)


def test_interpolate_keeps_unknown_references() -> None:
    assert interpolate("${a}-${b}", {"a": "1"}) == "1-${b}"
    assert interpolate(None, {}) is None


def test_managed_version_fills_undeclared_version(pom_factory) -> None:
    pom = pom_factory(
        "managed",
        properties="<gwt.version>2.8.2</gwt.version>",
        managed_dependencies=[("com.google.gwt", "gwt-user", "${gwt.version}"), ("junit", "junit", "4.13.2")],
        dependencies=[("com.google.gwt", "gwt-user", None), ("com.google.gwt", "gwt-servlet", "2.9.0")],
    )
    project = load_project(pom)
    assert [(dep.artifact_id, dep.version) for dep in project.dependencies] == [
        ("gwt-user", "2.8.2"),
        ("gwt-servlet", "2.9.0"),
    ]


def test_basedir_properties_point_at_project(pom_factory) -> None:
    pom = pom_factory("based")
    project = load_project(pom)
    assert project.properties["basedir"] == str(pom.parent.resolve())
    assert project.properties["project.basedir"] == str(pom.parent.resolve())
    assert interpolate("${project.basedir}/war", project.properties) == f"{pom.parent.resolve()}/war"
