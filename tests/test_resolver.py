from __future__ import annotations

from pathlib import Path
from typing import List

import pytest

from gwt_configurator.errors import ArtifactResolutionError
from gwt_configurator.models import RemoteRepository
from gwt_configurator.resolver import ArtifactResolver, artifact_relative_path, default_local_repository


class RecordingMonitor:
    def __init__(self, cancel: bool = False) -> None:
        self.events: List[str] = []
        self.cancel = cancel

    def begin_task(self, name: str, total: int) -> None:
        self.events.append(f"begin:{total}")

    def worked(self, amount: int) -> None:
        self.events.append("worked")

    def done(self) -> None:
        self.events.append("done")

    def is_canceled(self) -> bool:
        return self.cancel


def test_relative_path_layout() -> None:
    assert artifact_relative_path("com.google.gwt", "gwt-dev", "2.8.2") == "com/google/gwt/gwt-dev/2.8.2/gwt-dev-2.8.2.jar"
    assert (
        artifact_relative_path("org.example", "lib", "1.0", "zip", "sources")
        == "org/example/lib/1.0/lib-1.0-sources.zip"
    )


def test_downloads_from_second_repository(remote_repo: Path, local_repo: Path, tmp_path: Path, publish) -> None:
    published = publish(remote_repo, "com.google.gwt", "gwt-dev", "2.8.2")
    empty = tmp_path / "empty-remote"
    empty.mkdir()
    monitor = RecordingMonitor()

    resolver = ArtifactResolver(local_repo)
    jar = resolver.resolve(
        "com.google.gwt",
        "gwt-dev",
        "2.8.2",
        repositories=[RemoteRepository("empty", empty.as_uri()), RemoteRepository("files", remote_repo.as_uri())],
        monitor=monitor,
    )

    assert jar == local_repo / "com" / "google" / "gwt" / "gwt-dev" / "2.8.2" / "gwt-dev-2.8.2.jar"
    assert jar.read_bytes() == published.read_bytes()
    assert monitor.events == ["begin:2", "worked", "worked", "done"]
    assert [p.name for p in jar.parent.iterdir()] == ["gwt-dev-2.8.2.jar"]


def test_cached_artifact_needs_no_repository(local_repo: Path, publish) -> None:
    cached = publish(local_repo, "com.google.gwt", "gwt-dev", "2.8.2")
    resolver = ArtifactResolver(local_repo, offline=True)
    assert resolver.resolve("com.google.gwt", "gwt-dev", "2.8.2") == cached


def test_offline_miss_raises(local_repo: Path, remote_repo: Path, publish) -> None:
    publish(remote_repo, "com.google.gwt", "gwt-dev", "2.8.2")
    resolver = ArtifactResolver(local_repo, offline=True)
    with pytest.raises(ArtifactResolutionError):
        resolver.resolve("com.google.gwt", "gwt-dev", "2.8.2", repositories=[RemoteRepository("r", remote_repo.as_uri())])


def test_missing_everywhere_raises(local_repo: Path, remote_repo: Path) -> None:
    resolver = ArtifactResolver(local_repo)
    with pytest.raises(ArtifactResolutionError) as excinfo:
        resolver.resolve("com.google.gwt", "gwt-dev", "9.9.9", repositories=[RemoteRepository("r", remote_repo.as_uri())])
    assert "com.google.gwt:gwt-dev:jar:9.9.9" in str(excinfo.value)
    assert not (local_repo / "com" / "google" / "gwt" / "gwt-dev" / "9.9.9" / "gwt-dev-9.9.9.jar").exists()


def test_no_repositories_raises(local_repo: Path) -> None:
    with pytest.raises(ArtifactResolutionError):
        ArtifactResolver(local_repo).resolve("com.google.gwt", "gwt-dev", "2.8.2")


def test_canceled_monitor_stops_resolution(local_repo: Path, remote_repo: Path, publish) -> None:
    publish(remote_repo, "com.google.gwt", "gwt-dev", "2.8.2")
    monitor = RecordingMonitor(cancel=True)
    with pytest.raises(ArtifactResolutionError):
        ArtifactResolver(local_repo).resolve(
            "com.google.gwt", "gwt-dev", "2.8.2", repositories=[RemoteRepository("r", remote_repo.as_uri())], monitor=monitor
        )
    assert monitor.events == ["begin:1", "done"]


def test_default_local_repository_from_settings(tmp_path: Path) -> None:
    assert default_local_repository(tmp_path) == tmp_path / ".m2" / "repository"

    settings = tmp_path / ".m2" / "settings.xml"
    settings.parent.mkdir(parents=True)
    settings.write_text(
        '<settings xmlns="http://maven.apache.org/SETTINGS/1.0.0">'
        "<localRepository>${user.home}/cache/m2</localRepository></settings>"
    )
    assert default_local_repository(tmp_path) == tmp_path / "cache" / "m2"


@pytest.mark.parametrize("url", ["${nexus.url}/content/groups/public", "repo.example.com/maven2"])
def test_unusable_repository_url_falls_through(
    url: str, remote_repo: Path, local_repo: Path, publish
) -> None:
    publish(remote_repo, "com.google.gwt", "gwt-dev", "2.8.2")
    monitor = RecordingMonitor()

    jar = ArtifactResolver(local_repo).resolve(
        "com.google.gwt",
        "gwt-dev",
        "2.8.2",
        repositories=[RemoteRepository("broken", url), RemoteRepository("files", remote_repo.as_uri())],
        monitor=monitor,
    )

    assert jar.is_file()
    assert monitor.events == ["begin:2", "worked", "worked", "done"]


def test_only_unresolved_repository_raises_resolution_error(local_repo: Path, log_messages) -> None:
    with pytest.raises(ArtifactResolutionError) as excinfo:
        ArtifactResolver(local_repo).resolve(
            "com.google.gwt",
            "gwt-dev",
            "2.8.2",
            repositories=[RemoteRepository("nexus", "${nexus.url}/content/groups/public")],
        )
    assert "unresolved URL" in str(excinfo.value)
    assert any("Skipping repository nexus" in message for message in log_messages)
