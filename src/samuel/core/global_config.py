"""User-scoped settings from ~/.config/samuel/config.toml.

Example config.toml:
  cache_path = "/var/cache/samuel"
  owner = "ar4mirez"
  repo = "samuel"
  default_branch = "main"
  fetch_timeout = 30
"""

import os
from dataclasses import dataclass
from pathlib import Path

import tomli

from samuel.core.errors import ConfigParseError

DEFAULT_OWNER = "ar4mirez"
DEFAULT_REPO = "samuel"
DEFAULT_BRANCH = "main"
DEFAULT_FETCH_TIMEOUT = 30.0

CONFIG_DIR_ENV = "SAMUEL_CONFIG_DIR"
CACHE_DIR_ENV = "SAMUEL_CACHE_DIR"


@dataclass(frozen=True)
class GlobalConfig:
    cache_path: Path
    owner: str
    repo: str
    default_branch: str
    fetch_timeout: float


def get_config_dir() -> Path:
    """Directory holding config.toml (and the default cache)."""
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "samuel"


def _string_field(data: dict, key: str, default: str, path: Path) -> str:
    value = data.get(key, default)
    if not isinstance(value, str) or not value:
        raise ConfigParseError(path, f"'{key}' must be a non-empty string")
    return value


def load_global_config() -> GlobalConfig:
    """Load the user config, falling back to defaults when absent.

    SAMUEL_CACHE_DIR overrides cache_path from the file.

    Raises:
        ConfigParseError: If config.toml exists but is malformed
    """
    config_dir = get_config_dir()
    cfg_path = config_dir / "config.toml"
    data: dict = {}
    if cfg_path.exists():
        try:
            data = tomli.loads(cfg_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, tomli.TOMLDecodeError) as e:
            raise ConfigParseError(cfg_path, str(e)) from e

    timeout = data.get("fetch_timeout", DEFAULT_FETCH_TIMEOUT)
    if isinstance(timeout, bool) or not isinstance(timeout, int | float) or timeout <= 0:
        raise ConfigParseError(cfg_path, "'fetch_timeout' must be a positive number")

    cache_path = config_dir / "cache"
    if "cache_path" in data:
        cache_path = Path(_string_field(data, "cache_path", "", cfg_path)).expanduser()
    env_cache = os.environ.get(CACHE_DIR_ENV)
    if env_cache:
        cache_path = Path(env_cache).expanduser()

    return GlobalConfig(
        cache_path=cache_path,
        owner=_string_field(data, "owner", DEFAULT_OWNER, cfg_path),
        repo=_string_field(data, "repo", DEFAULT_REPO, cfg_path),
        default_branch=_string_field(data, "default_branch", DEFAULT_BRANCH, cfg_path),
        fetch_timeout=float(timeout),
    )
