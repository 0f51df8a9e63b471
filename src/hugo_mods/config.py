# SPDX-License-Identifier: MIT
"""Configuration loading for projects and theme components.

Both the project (site) and each theme component may carry a ``config``
file in one of the supported formats. The first existing format wins; files
are never merged across formats.
"""

from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

import yaml

from .module import ModsError


# Probed in this order.
CONFIG_FILE_EXTENSIONS = ("toml", "yaml", "yml", "json")

# Base names accepted for the project config; components only use "config".
PROJECT_CONFIG_BASENAMES = ("config", "hugo")

DEFAULT_THEMES_DIR = "themes"

PROXY_ENV_KEY = "HUGO_MODPROXY"


class ConfigDecodeError(ModsError):
    """Raised when a config file exists but cannot be decoded."""

    def __init__(self, filename: str | Path, reason: str):
        self.filename = str(filename)
        self.reason = reason
        super().__init__(f"failed to load config {self.filename!r}: {reason}")


def find_config_file(directory: str | Path, basenames: tuple[str, ...] = ("config",)) -> Optional[Path]:
    """Find the first config file in directory.

    Args:
        directory: Directory to probe
        basenames: File base names to try, in order

    Returns:
        Path to the first existing file, or None
    """
    directory = Path(directory)
    for basename in basenames:
        for ext in CONFIG_FILE_EXTENSIONS:
            candidate = directory / f"{basename}.{ext}"
            if candidate.is_file():
                return candidate
    return None


def load_config_file(filename: str | Path) -> dict[str, Any]:
    """Decode a config file into a dictionary.

    Raises:
        ConfigDecodeError: If the file cannot be read or parsed, or does not
            hold a mapping at the top level
    """
    path = Path(filename)
    ext = path.suffix.lstrip(".").lower()

    try:
        if ext == "toml":
            with open(path, "rb") as f:
                data = tomllib.load(f)
        elif ext in ("yaml", "yml"):
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        elif ext == "json":
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        else:
            raise ConfigDecodeError(path, f"unsupported config format {ext!r}")
    except tomllib.TOMLDecodeError as e:
        raise ConfigDecodeError(path, f"invalid TOML syntax: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigDecodeError(path, f"invalid YAML syntax: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigDecodeError(path, f"invalid JSON syntax: {e}") from e
    except OSError as e:
        raise ConfigDecodeError(path, str(e)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigDecodeError(path, "top level must be a mapping")
    return data


def _scalar_to_string(value: Any) -> str:
    """Convert a decoded scalar to its config file spelling, "" for non-scalars."""
    if value is None or isinstance(value, (dict, list, tuple, set, frozenset)):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def to_string_list(value: Any) -> list[str]:
    """Normalize a scalar or a sequence of scalars to a list of strings.

    Booleans are spelled in lower case. Mappings and nested lists carry no
    import path and are dropped.
    """
    if isinstance(value, (list, tuple)):
        items = [_scalar_to_string(v) for v in value]
    elif isinstance(value, (set, frozenset)):
        items = sorted(_scalar_to_string(v) for v in value)
    else:
        items = [_scalar_to_string(value)]
    return [item for item in items if item]


def get_imports(config: dict[str, Any]) -> list[str]:
    """Get the theme imports declared in a decoded config."""
    return to_string_list(config.get("theme"))


def get_proxy() -> str:
    """Get the GOPROXY value to use for toolchain calls."""
    return os.environ.get(PROXY_ENV_KEY) or "direct"


@dataclass
class ProjectConfig:
    """Project configuration read from the site config file.

    Attributes:
        project_dir: Project root directory
        imports: Top-level theme imports, in declaration order
        themes_dir: Directory holding local theme components
        config_file: Site config file, if found
    """

    project_dir: Path
    imports: list[str] = field(default_factory=list)
    themes_dir: Optional[Path] = None
    config_file: Optional[Path] = None

    def __post_init__(self) -> None:
        if self.themes_dir is None:
            self.themes_dir = self.project_dir / DEFAULT_THEMES_DIR

    @classmethod
    def from_dir(cls, project_dir: str | Path) -> ProjectConfig:
        """Load configuration from the site config in project_dir.

        Raises:
            ConfigDecodeError: If the site config cannot be decoded
        """
        project_path = Path(project_dir).resolve()
        config_file = find_config_file(project_path, PROJECT_CONFIG_BASENAMES)
        if config_file is None:
            return cls(project_dir=project_path)

        return cls.from_dict(load_config_file(config_file), project_path, config_file)

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        project_dir: Path,
        config_file: Optional[Path] = None,
    ) -> ProjectConfig:
        """Create a ProjectConfig from a decoded site config."""
        themes_dir = Path(data.get("themesDir") or DEFAULT_THEMES_DIR)
        if not themes_dir.is_absolute():
            themes_dir = project_dir / themes_dir

        return cls(
            project_dir=project_dir,
            imports=get_imports(data),
            themes_dir=themes_dir,
            config_file=config_file,
        )


def find_project_root(start_dir: Optional[str | Path] = None) -> Path:
    """Find the project root by looking for a site config or go.mod.

    Raises:
        ModsError: If no project root is found
    """
    current = Path(start_dir) if start_dir else Path.cwd()
    current = current.resolve()

    while True:
        if find_config_file(current, PROJECT_CONFIG_BASENAMES) is not None:
            return current
        if (current / "go.mod").exists():
            return current
        if current == current.parent:
            break
        current = current.parent

    raise ModsError("Could not find project root (no site config or go.mod found)")
