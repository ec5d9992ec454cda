"""Resolve Maven artifacts into the local repository."""

from __future__ import annotations

import os
import shutil
import tempfile
from http.client import HTTPException
from pathlib import Path
from typing import Iterable, List, Optional, Protocol
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from loguru import logger
from lxml import etree

from .errors import ArtifactResolutionError
from .models import RemoteRepository

DEFAULT_TIMEOUT = 30.0
USER_AGENT = "gwt-configurator"


class ProgressMonitor(Protocol):
    def begin_task(self, name: str, total: int) -> None: ...

    def worked(self, amount: int) -> None: ...

    def done(self) -> None: ...

    def is_canceled(self) -> bool: ...


class NullProgressMonitor:
    """Monitor that ignores progress and is never canceled."""

    def begin_task(self, name: str, total: int) -> None:
        pass

    def worked(self, amount: int) -> None:
        pass

    def done(self) -> None:
        pass

    def is_canceled(self) -> bool:
        return False


def default_local_repository(home: Path | None = None) -> Path:
    """Return ``<localRepository>`` from ``~/.m2/settings.xml`` or ``~/.m2/repository``."""

    home = home or Path.home()
    settings_path = home / ".m2" / "settings.xml"
    if settings_path.is_file():
        try:
            root = etree.parse(str(settings_path)).getroot()
        except etree.XMLSyntaxError as exc:
            logger.warning("Ignoring unreadable Maven settings {}: {}", settings_path, exc)
        else:
            node = root.find("{*}localRepository")
            if node is not None and node.text and node.text.strip():
                value = node.text.strip().replace("${user.home}", str(home))
                return Path(os.path.expanduser(value))
    return home / ".m2" / "repository"


def artifact_relative_path(
    group_id: str,
    artifact_id: str,
    version: str,
    extension: str = "jar",
    classifier: Optional[str] = None,
) -> str:
    """Maven default layout path of an artifact, using forward slashes."""

    file_name = f"{artifact_id}-{version}"
    if classifier:
        file_name += f"-{classifier}"
    file_name += f".{extension}"
    return "/".join([*group_id.split("."), artifact_id, version, file_name])


class ArtifactResolver:
    """Download artifacts from remote repositories into a local Maven repository."""

    def __init__(
        self,
        local_repository: Path,
        *,
        offline: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.local_repository = local_repository
        self.offline = offline
        self.timeout = timeout

    def local_path(
        self,
        group_id: str,
        artifact_id: str,
        version: str,
        extension: str = "jar",
        classifier: Optional[str] = None,
    ) -> Path:
        relative = artifact_relative_path(group_id, artifact_id, version, extension, classifier)
        return self.local_repository.joinpath(*relative.split("/"))

    def resolve(
        self,
        group_id: str,
        artifact_id: str,
        version: str,
        extension: str = "jar",
        classifier: Optional[str] = None,
        repositories: Iterable[RemoteRepository] = (),
        monitor: Optional[ProgressMonitor] = None,
    ) -> Path:
        """Return the local path of the artifact, downloading it if it is not cached."""

        monitor = monitor or NullProgressMonitor()
        coordinates = f"{group_id}:{artifact_id}:{extension}:{version}"
        target = self.local_path(group_id, artifact_id, version, extension, classifier)
        if target.is_file() and target.stat().st_size > 0:
            logger.debug("{} already present at {}", coordinates, target)
            return target

        if self.offline:
            raise ArtifactResolutionError(f"{coordinates} is not cached and resolution is offline")

        repos: List[RemoteRepository] = list(repositories)
        if not repos:
            raise ArtifactResolutionError(f"No remote repositories to resolve {coordinates} from")

        relative = artifact_relative_path(group_id, artifact_id, version, extension, classifier)
        failures: List[str] = []
        monitor.begin_task(f"Resolving {coordinates}", len(repos))
        try:
            for repo in repos:
                if monitor.is_canceled():
                    raise ArtifactResolutionError(f"Resolution of {coordinates} was canceled")
                if "${" in repo.url:
                    logger.warning("Skipping repository {} with unresolved URL {}", repo.id, repo.url)
                    failures.append(f"{repo.id}: unresolved URL {repo.url}")
                    monitor.worked(1)
                    continue
                url = f"{repo.url.rstrip('/')}/{relative}"
                try:
                    self._download(url, target)
                except (HTTPError, URLError, HTTPException, OSError, ValueError) as exc:
                    logger.debug("{} not available from {}: {}", coordinates, repo.id, exc)
                    failures.append(f"{repo.id}: {exc}")
                    monitor.worked(1)
                    continue
                monitor.worked(1)
                logger.info("Resolved {} from {} into {}", coordinates, repo.id, target)
                return target
        finally:
            monitor.done()

        raise ArtifactResolutionError(
            f"Could not resolve {coordinates} from {len(repos)} repositories: " + "; ".join(failures)
        )

    def _download(self, url: str, target: Path) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        request = Request(url, headers={"User-Agent": USER_AGENT})
        handle, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", dir=target.parent)
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(handle, "wb") as out, urlopen(request, timeout=self.timeout) as response:
                shutil.copyfileobj(response, out)
            if tmp_path.stat().st_size == 0:
                raise OSError(f"Downloaded file is empty: {url}")
            tmp_path.replace(target)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()


__all__ = [
    "ArtifactResolver",
    "NullProgressMonitor",
    "ProgressMonitor",
    "artifact_relative_path",
    "default_local_repository",
]
