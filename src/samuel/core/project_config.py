"""Project config I/O for samuel.toml."""

from dataclasses import dataclass, replace
from pathlib import Path

import tomli
import tomli_w

from samuel.core.errors import ConfigParseError
from samuel.core.models import COMPONENT_TYPES, ComponentKey
from samuel.gateway.filesystem.abc import FileSystem

CONFIG_FILE_NAME = "samuel.toml"
ALT_CONFIG_FILE_NAME = ".samuel.toml"


@dataclass(frozen=True)
class ProjectConfig:
    """Installed version and components; the source of truth for update and remove."""

    installed_version: str
    installed_components: tuple[ComponentKey, ...] = ()

    def is_installed(self, key: ComponentKey) -> bool:
        return key in self.installed_components

    def with_component(self, key: ComponentKey) -> "ProjectConfig":
        if self.is_installed(key):
            return self
        return replace(self, installed_components=(*self.installed_components, key))

    def without_component(self, key: ComponentKey) -> "ProjectConfig":
        remaining = tuple(k for k in self.installed_components if k != key)
        return replace(self, installed_components=remaining)

    def with_version(self, version: str) -> "ProjectConfig":
        return replace(self, installed_version=version)


def find_config_path(fs: FileSystem, project_dir: Path) -> Path | None:
    """Locate the config file, preferring samuel.toml over .samuel.toml."""
    for name in (CONFIG_FILE_NAME, ALT_CONFIG_FILE_NAME):
        path = project_dir / name
        if fs.stat(path) is not None:
            return path
    return None


def parse_project_config(path: Path, content: bytes) -> ProjectConfig:
    """Parse config bytes.

    Raises:
        ConfigParseError: If the document is malformed or has invalid fields
    """
    try:
        data = tomli.loads(content.decode("utf-8"))
    except (UnicodeDecodeError, tomli.TOMLDecodeError) as e:
        raise ConfigParseError(path, str(e)) from e

    version = data.get("installed_version")
    if not isinstance(version, str) or not version:
        raise ConfigParseError(path, "missing 'installed_version'")

    raw_components = data.get("installed_components", [])
    if not isinstance(raw_components, list):
        raise ConfigParseError(path, "'installed_components' must be an array of tables")

    keys: list[ComponentKey] = []
    for index, raw in enumerate(raw_components):
        if not isinstance(raw, dict):
            raise ConfigParseError(path, f"installed_components[{index}] must be a table")
        component_type = raw.get("type")
        name = raw.get("name")
        if component_type not in COMPONENT_TYPES:
            raise ConfigParseError(
                path, f"installed_components[{index}] has unknown type {component_type!r}"
            )
        if not isinstance(name, str) or not name:
            raise ConfigParseError(path, f"installed_components[{index}] is missing 'name'")
        key = ComponentKey(type=component_type, name=name)
        if key not in keys:
            keys.append(key)
    return ProjectConfig(installed_version=version, installed_components=tuple(keys))


def load_project_config(fs: FileSystem, project_dir: Path) -> ProjectConfig | None:
    """Load the project config.

    Returns None if no config file exists.
    """
    path = find_config_path(fs, project_dir)
    if path is None:
        return None
    try:
        content = fs.read_bytes(path)
    except OSError as e:
        raise ConfigParseError(path, f"cannot read file: {e}") from e
    return parse_project_config(path, content)


def save_project_config(fs: FileSystem, project_dir: Path, config: ProjectConfig) -> Path:
    """Write the config, keeping the existing file name if there is one."""
    path = find_config_path(fs, project_dir) or project_dir / CONFIG_FILE_NAME
    data = {
        "installed_version": config.installed_version,
        "installed_components": [
            {"type": key.type, "name": key.name} for key in config.installed_components
        ],
    }
    fs.make_dirs(project_dir)
    fs.write_bytes(path, tomli_w.dumps(data).encode("utf-8"), mode=None)
    return path


def create_default_config(version: str) -> ProjectConfig:
    return ProjectConfig(installed_version=version, installed_components=())
