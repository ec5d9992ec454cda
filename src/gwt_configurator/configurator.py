"""Configure a Maven project as a GWT project for Eclipse."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, List, Optional

from loguru import logger

from .config import Config, load_config
from .eclipse import (
    LAST_USED_WAR_OUT_DIR_KEY,
    WAR_SRC_DIR_IS_OUTPUT_KEY,
    WAR_SRC_DIR_KEY,
    EclipseProjectFile,
    ProjectPreferences,
    WebAppProjectProperties,
)
from .errors import ArtifactResolutionError, PreferenceStoreError, WarOutDirError
from .models import (
    MAVEN_GWT_DEV_JAR_ARTIFACT_ID,
    MAVEN_GWT_GROUP_ID,
    ConfigurationResult,
    MessageLevel,
    PluginConvention,
    ProjectDescriptor,
    RemoteRepository,
    ResolvedPaths,
    SideEffectKind,
)
from .paths import detect_convention, resolve_war_out_dir, war_out_dir_for
from .pom import find_gwt_maven_plugin, load_project
from .resolver import ArtifactResolver, ProgressMonitor
from .scanner import find_gwt_dependency
from .settings import read_build_settings


@dataclass(slots=True)
class ProjectSummary:
    """What a configuration pass would do, computed without side effects."""

    artifact_id: Optional[str]
    version: Optional[str]
    gwt_version: Optional[str]
    is_gwt_project: bool
    convention: PluginConvention
    launch_from_war_dir: bool
    war_src_dir: str
    war_out_dir: Optional[Path]
    war_out_dir_error: Optional[str]
    has_nature: bool


class GwtProjectConfigurator:
    """Attach the GWT nature to a Maven project and persist its web app settings."""

    def __init__(
        self,
        resolver: Optional[ArtifactResolver],
        *,
        config: Optional[Config] = None,
    ) -> None:
        self.resolver = resolver
        self.config = config or Config()

    @property
    def nature_id(self) -> str:
        return self.config.eclipse.nature_id

    def configure(
        self,
        project: ProjectDescriptor,
        *,
        project_file: Optional[EclipseProjectFile] = None,
        preferences: Optional[ProjectPreferences] = None,
        monitor: Optional[ProgressMonitor] = None,
    ) -> ConfigurationResult:
        """Run one configuration pass. Failures are logged and recorded, never raised."""

        logger.debug("Configuring project {}", project.artifact_id)
        result = ConfigurationResult()

        if project_file is None or preferences is None:
            if project.location is None:
                self._fail(result, f"Project {project.artifact_id} has no location; nothing to configure")
                return result
            try:
                project_file = project_file or EclipseProjectFile(project.location, project.artifact_id)
                preferences = preferences or ProjectPreferences(
                    project.location, self.config.eclipse.preference_node
                )
            except PreferenceStoreError as exc:
                self._fail(result, f"Problem configuring maven project: {exc}")
                return result

        dependency = find_gwt_dependency(project.dependencies)
        gwt_version = dependency.version if dependency is not None else None
        has_gwt_nature = self.configure_nature(
            project_file,
            dependency is not None,
            lambda: self.configure_gwt_project(project, gwt_version, result, monitor),
            result,
        )

        if not has_gwt_nature:
            logger.info(
                "Skipping Maven configuration of {} because GWT nature is false. hasGwtNature={}",
                project.artifact_id,
                has_gwt_nature,
            )
            return result

        plugin = find_gwt_maven_plugin(project)
        maven_config = plugin.configuration if plugin is not None else None

        try:
            self.persist_gwt_nature_settings(project, preferences, maven_config, result)
        except (PreferenceStoreError, WarOutDirError) as exc:
            self._fail(result, f"Problem configuring maven project {project.artifact_id}: {exc}")
        return result

    def configure_nature(
        self,
        project_file: EclipseProjectFile,
        add_nature: bool,
        before_adding_nature: Callable[[], None],
        result: ConfigurationResult,
    ) -> bool:
        """Ensure the GWT nature is attached when ``add_nature`` is set.

        ``before_adding_nature`` runs only when the nature is newly added.
        Returns whether the project ends up with the nature.
        """

        if not add_nature:
            return False
        try:
            if project_file.has_nature(self.nature_id):
                result.has_nature = True
                return True
            before_adding_nature()
            project_file.add_nature(self.nature_id)
        except PreferenceStoreError as exc:
            self._fail(result, f"Could not add nature {self.nature_id}: {exc}")
            return False
        result.has_nature = True
        result.nature_added = True
        result.record(SideEffectKind.NATURE_ADDED, project_file.path, self.nature_id)
        return True

    def configure_gwt_project(
        self,
        project: ProjectDescriptor,
        gwt_version: Optional[str],
        result: ConfigurationResult,
        monitor: Optional[ProgressMonitor] = None,
    ) -> None:
        """Fetch the gwt-dev jar matching the GWT version declared in the POM."""

        logger.info("Setting up GWT project {}: gwtVersion={}", project.artifact_id, gwt_version)
        result.gwt_version = gwt_version
        self.resolve_gwt_dev_jar(project, gwt_version, result, monitor)

    def resolve_gwt_dev_jar(
        self,
        project: ProjectDescriptor,
        gwt_version: Optional[str],
        result: ConfigurationResult,
        monitor: Optional[ProgressMonitor] = None,
    ) -> Optional[Path]:
        if gwt_version is None or not gwt_version.strip():
            return None
        if self.resolver is None or not self.config.resolution.resolve_dev_jar:
            logger.debug("gwt-dev resolution disabled")
            return None
        try:
            jar = self.resolver.resolve(
                MAVEN_GWT_GROUP_ID,
                MAVEN_GWT_DEV_JAR_ARTIFACT_ID,
                gwt_version.strip(),
                "jar",
                None,
                self._repositories(project),
                monitor,
            )
        except ArtifactResolutionError as exc:
            logger.error(
                "Problem configuring the maven project because it could not download the "
                "gwt-dev.jar which is used to determine the version: {}",
                exc,
            )
            result.add_message(MessageLevel.WARNING, f"gwt-dev {gwt_version} not resolved: {exc}")
            return None
        result.record(SideEffectKind.ARTIFACT_RESOLVED, jar, f"{MAVEN_GWT_DEV_JAR_ARTIFACT_ID}:{gwt_version}")
        return jar

    def persist_gwt_nature_settings(
        self,
        project: ProjectDescriptor,
        preferences: ProjectPreferences,
        maven_config: Any,
        result: ConfigurationResult,
    ) -> None:
        """Save the web app settings into the project preferences."""

        convention = detect_convention(project.plugins)
        existed = war_out_dir_for(project, convention).is_dir()
        war_out_dir = resolve_war_out_dir(project, convention)
        if not existed:
            result.record(SideEffectKind.DIRECTORY_CREATED, war_out_dir)

        settings = read_build_settings(maven_config, project.properties, project.location)
        result.settings = settings
        result.paths = ResolvedPaths(war_src_dir=Path(settings.war_src_dir), war_out_dir=war_out_dir)

        properties = WebAppProjectProperties(preferences)
        properties.set_war_src_dir(result.paths.war_src_dir)
        properties.set_war_src_dir_is_output(settings.launch_from_war_dir)
        # TODO derive the extension-specific location from the plugin's hostedWebapp setting
        properties.set_last_used_war_out_location(war_out_dir)
        properties.flush()

        result.persisted = True
        for key in (WAR_SRC_DIR_KEY, WAR_SRC_DIR_IS_OUTPUT_KEY, LAST_USED_WAR_OUT_DIR_KEY):
            result.record(SideEffectKind.PREFERENCE_SET, preferences.path, f"{key}={preferences.get(key)}")

        logger.info(
            "Success with setting up GWT nature\n\tartifactId={}\n\tversion={}\n\twarOutDir={}",
            project.artifact_id,
            project.version,
            war_out_dir,
        )

    def _repositories(self, project: ProjectDescriptor) -> List[RemoteRepository]:
        repositories = list(project.repositories)
        known = {repo.url.rstrip("/") for repo in repositories}
        for extra in self.config.resolution.repositories:
            url = extra.url.rstrip("/")
            if url not in known:
                known.add(url)
                repositories.append(extra.to_repository())
        return repositories

    @staticmethod
    def _fail(result: ConfigurationResult, text: str) -> None:
        logger.error(text)
        result.add_message(MessageLevel.ERROR, text)


def build_configurator(config: Config) -> GwtProjectConfigurator:
    resolution = config.resolution
    resolver = ArtifactResolver(
        resolution.effective_local_repository(),
        offline=resolution.offline,
        timeout=resolution.timeout,
    )
    return GwtProjectConfigurator(resolver, config=config)


def configure_project(
    path: Path,
    *,
    config: Optional[Config] = None,
    config_path: Optional[Path] = None,
    monitor: Optional[ProgressMonitor] = None,
) -> ConfigurationResult:
    """Configure the Maven project at ``path`` (a ``pom.xml`` or its directory).

    Raises ``PomError`` when the POM cannot be read, and ``ConfigError`` for an
    invalid configuration file; everything after that is best effort.
    """

    if config is None:
        config = load_config(config_path)
    project = load_project(path)
    return build_configurator(config).configure(project, monitor=monitor)


def describe_project(
    path: Path,
    *,
    config: Optional[Config] = None,
) -> ProjectSummary:
    """Report what ``configure_project`` would compute, without touching disk."""

    config = config or Config()
    project = load_project(path)
    plugin = find_gwt_maven_plugin(project)
    dependency = find_gwt_dependency(project.dependencies)
    settings = read_build_settings(
        plugin.configuration if plugin is not None else None, project.properties, project.location
    )
    convention = detect_convention(project.plugins)
    war_out_dir: Optional[Path] = None
    error: Optional[str] = None
    try:
        war_out_dir = war_out_dir_for(project, convention)
    except WarOutDirError as exc:
        error = str(exc)
    has_nature = False
    if project.location is not None:
        try:
            has_nature = EclipseProjectFile(project.location).has_nature(config.eclipse.nature_id)
        except PreferenceStoreError as exc:
            logger.warning("{}", exc)
    return ProjectSummary(
        artifact_id=project.artifact_id,
        version=project.version,
        gwt_version=dependency.version if dependency is not None else None,
        is_gwt_project=dependency is not None,
        convention=convention,
        launch_from_war_dir=settings.launch_from_war_dir,
        war_src_dir=settings.war_src_dir,
        war_out_dir=war_out_dir,
        war_out_dir_error=error,
        has_nature=has_nature,
    )


__all__ = [
    "GwtProjectConfigurator",
    "ProjectSummary",
    "build_configurator",
    "configure_project",
    "describe_project",
]
