"""Installed-state tracking that keeps samuel.toml consistent with the filesystem.

The config only advances after the filesystem confirms success:

    NotInstalled --(extract ok)--> Installed --(update ok)--> Installed
    Installed --(every deletion ok)--> NotInstalled

Any failure leaves a component in its prior recorded state. Template
components are always part of an install and are never recorded.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from samuel.core.diff import DiffReport, collect_files, compute_diff
from samuel.core.downloader import Downloader
from samuel.core.errors import ComponentNotInstalledError, ProjectNotInitializedError
from samuel.core.extractor import ExtractionPlan, ExtractionResult, Extractor, RemovalResult
from samuel.core.models import Component, ComponentKey
from samuel.core.project_config import (
    ProjectConfig,
    create_default_config,
    load_project_config,
    save_project_config,
)
from samuel.core.registry import Registry
from samuel.gateway.filesystem.abc import FileSystem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstallReport:
    """Outcome of applying components and recording them."""

    config: ProjectConfig
    result: ExtractionResult
    recorded: tuple[ComponentKey, ...]
    not_recorded: tuple[ComponentKey, ...]
    version_updated: bool


@dataclass(frozen=True)
class RemoveReport:
    component: Component
    removal: RemovalResult
    config: ProjectConfig
    removed_from_config: bool


IssueKind = Literal["missing-files", "unknown-component", "missing-template"]


@dataclass(frozen=True)
class ConsistencyIssue:
    """A divergence between the installed record and the project directory."""

    kind: IssueKind
    key: ComponentKey
    path: str | None
    message: str


class InstalledStateTracker:
    """Owns samuel.toml and advances it only on confirmed filesystem success."""

    def __init__(
        self,
        *,
        fs: FileSystem,
        project_dir: Path,
        registry: Registry,
        extractor: Extractor,
        downloader: Downloader,
    ) -> None:
        self._fs = fs
        self._project_dir = project_dir
        self._registry = registry
        self._extractor = extractor
        self._downloader = downloader

    def load(self) -> ProjectConfig | None:
        return load_project_config(self._fs, self._project_dir)

    def require(self) -> ProjectConfig:
        """Load the config or raise if the project was never initialized."""
        config = self.load()
        if config is None:
            raise ProjectNotInitializedError(self._project_dir)
        return config

    def installed_selection(self, config: ProjectConfig) -> list[Component]:
        """Core templates plus every recorded component known to the registry."""
        selection = self._registry.core_templates()
        for key in config.installed_components:
            component = self._registry.get(key)
            if component is None:
                logger.warning("Installed component %s is not in the registry", key)
                continue
            selection.append(component)
        return selection

    def install(
        self,
        config: ProjectConfig | None,
        components: Sequence[Component],
        *,
        version: str,
        force: bool,
        bump_version: bool = True,
    ) -> InstallReport:
        """Fetch a version, apply components from it, and record the result.

        With bump_version off the project keeps its installed version even
        when everything applied; used when a single component is taken from
        another version.

        Raises:
            DownloadError: If the version cannot be materialized
        """
        entry = self._downloader.ensure(version)
        plan = ExtractionPlan.build(
            fs=self._fs, snapshot_root=entry.root_path, components=components
        )
        logger.debug("Applying %d files from %s", len(plan), entry.version_label)
        result = self._extractor.apply(plan, force=force)
        return self.record_install(
            config, components, entry.version_label, result, bump_version=bump_version
        )

    def record_install(
        self,
        config: ProjectConfig | None,
        components: Sequence[Component],
        version: str,
        result: ExtractionResult,
        *,
        bump_version: bool = True,
    ) -> InstallReport:
        """Record components whose files all succeeded and save the config.

        The installed version is bumped only when every planned file now holds
        the new content: any failure or skipped conflict keeps the old version.
        A fresh project has no prior version, so it takes the new one
        regardless.
        """
        if config is None:
            updated = create_default_config(version)
            version_updated = True
        elif not bump_version or not result.fully_applied:
            updated = config
            version_updated = False
        else:
            updated = config.with_version(version)
            version_updated = config.installed_version != version

        recorded: list[ComponentKey] = []
        not_recorded: list[ComponentKey] = []
        for component in components:
            if component.type == "template":
                continue
            if result.component_succeeded(component.key):
                updated = updated.with_component(component.key)
                recorded.append(component.key)
            else:
                logger.debug("Not recording %s: extraction failed", component.key)
                not_recorded.append(component.key)

        save_project_config(self._fs, self._project_dir, updated)
        return InstallReport(
            config=updated,
            result=result,
            recorded=tuple(recorded),
            not_recorded=tuple(not_recorded),
            version_updated=version_updated,
        )

    def record_remove(self, config: ProjectConfig, component: Component) -> RemoveReport:
        """Delete a component's files and drop it from the config if all deletions succeed.

        Destinations of other installed components and of core templates are
        never deleted.

        Raises:
            ComponentNotInstalledError: If the component is not recorded; no
                file operation is attempted
        """
        if not config.is_installed(component.key):
            raise ComponentNotInstalledError(component.key)

        others = [c for c in self.installed_selection(config) if c.key != component.key]
        protected = self._registry.destinations_for(others)
        targets = self._registry.destinations_for([component])
        removal = self._extractor.remove(targets, protected=protected)

        if removal.had_failures:
            logger.warning("Keeping %s in config: some files could not be removed", component.key)
            return RemoveReport(
                component=component, removal=removal, config=config, removed_from_config=False
            )

        updated = config.without_component(component.key)
        save_project_config(self._fs, self._project_dir, updated)
        return RemoveReport(
            component=component, removal=removal, config=updated, removed_from_config=True
        )

    def tracked_scope(self, config: ProjectConfig) -> dict[str, bool]:
        """Destination paths tracked by the config, mapped to is_directory."""
        return {c.dest_path: c.is_directory for c in self.installed_selection(config)}

    def diff_against(self, config: ProjectConfig, version: str) -> DiffReport:
        """Compare the project's tracked files with a fetched version.

        Added entries exist only in the version; removed entries exist only
        locally.

        Raises:
            DownloadError: If the version cannot be materialized
        """
        entry = self._downloader.ensure(version)
        scope = self.tracked_scope(config)
        local = collect_files(self._fs, self._project_dir, scope=scope)
        remote = collect_files(self._fs, entry.template_root, scope=scope)
        return compute_diff(
            local,
            remote,
            from_label="local",
            to_label=entry.version_label,
            registry=self._registry,
        )

    def check_consistency(self, config: ProjectConfig) -> list[ConsistencyIssue]:
        """Report installed components and core templates whose files are absent.

        Reports only; nothing is repaired.
        """
        issues: list[ConsistencyIssue] = []
        for template in self._registry.core_templates():
            if self._fs.stat(self._project_dir / template.dest_path) is None:
                issues.append(
                    ConsistencyIssue(
                        kind="missing-template",
                        key=template.key,
                        path=template.dest_path,
                        message=f"Core file {template.dest_path} is missing",
                    )
                )

        for key in config.installed_components:
            component = self._registry.get(key)
            if component is None:
                issues.append(
                    ConsistencyIssue(
                        kind="unknown-component",
                        key=key,
                        path=None,
                        message=f"{key} is recorded but not a known component",
                    )
                )
                continue
            if not self._has_files(component):
                issues.append(
                    ConsistencyIssue(
                        kind="missing-files",
                        key=key,
                        path=component.dest_path,
                        message=f"{key} is recorded but {component.dest_path} is missing",
                    )
                )
        return issues

    def _has_files(self, component: Component) -> bool:
        target = self._project_dir / component.dest_path
        target_stat = self._fs.stat(target)
        if target_stat is None:
            return False
        if component.is_directory:
            return target_stat.is_dir and bool(self._fs.list_files(target))
        return not target_stat.is_dir
