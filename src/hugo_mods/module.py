# SPDX-License-Identifier: MIT
"""Resolved packages and collected components.

A ``ResolvedPackage`` is one entry of the module list reported by the Go
toolchain. A ``Component`` is what the collector actually orders: either a
directory backed by a ``ResolvedPackage`` or a bare folder below the themes
directory.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional


class ModsError(Exception):
    """Base class for module resolution failures."""

    pass


@dataclass(frozen=True)
class ResolvedPackage:
    """One entry of ``go list -m -json all``.

    Attributes:
        path: Module path, e.g. "github.com/gohugoio/hugoTestModule2"
        version: Module version string (empty for the main module)
        directory: Directory holding the module files, empty if not downloaded
        replacement: Package replacing this one, if any
        is_primary: True for the project's own module
        error: Error message reported by the toolchain for this entry
        indirect: True if only an indirect dependency of the main module
        go_mod: Path to the module's go.mod file, if any
    """

    path: str
    version: str = ""
    directory: str = ""
    replacement: Optional[ResolvedPackage] = None
    is_primary: bool = False
    error: Optional[str] = None
    indirect: bool = False
    go_mod: str = ""

    @classmethod
    def from_json(cls, data: dict[str, Any], follow_replace: bool = True) -> ResolvedPackage:
        """Create a package from one decoded ``go list`` JSON object.

        Only one level of ``Replace`` is read.
        """
        replacement = None
        replace_data = data.get("Replace")
        if follow_replace and isinstance(replace_data, dict):
            replacement = cls.from_json(replace_data, follow_replace=False)

        error = None
        error_data = data.get("Error")
        if isinstance(error_data, dict):
            error = error_data.get("Err") or "unknown error"
        elif error_data:
            error = str(error_data)

        return cls(
            path=data.get("Path", ""),
            version=data.get("Version", ""),
            directory=data.get("Dir", ""),
            replacement=replacement,
            is_primary=bool(data.get("Main", False)),
            error=error,
            indirect=bool(data.get("Indirect", False)),
            go_mod=data.get("GoMod", ""),
        )


class ResolvedPackages:
    """Case-insensitive index over the packages reported by the toolchain."""

    def __init__(self, packages: Optional[list[ResolvedPackage]] = None) -> None:
        self._packages: list[ResolvedPackage] = list(packages or [])
        self._by_path: dict[str, ResolvedPackage] = {}
        for package in self._packages:
            # Last one wins on duplicates.
            self._by_path[package.path.lower()] = package

    def lookup(self, path: str) -> Optional[ResolvedPackage]:
        """Get a package by module path, ignoring case."""
        return self._by_path.get(path.lower())

    def primary(self) -> Optional[ResolvedPackage]:
        """Get the project's own module, if the toolchain reported one."""
        for package in self._packages:
            if package.is_primary:
                return package
        return None

    def __iter__(self) -> Iterator[ResolvedPackage]:
        return iter(self._packages)

    def __len__(self) -> int:
        return len(self._packages)


def normalize_dir(directory: str | os.PathLike[str]) -> str:
    """Return directory as a string ending with the path separator."""
    directory = os.fspath(directory)
    if not directory.endswith(os.sep):
        directory += os.sep
    return directory


@dataclass
class Component:
    """A collected theme component.

    Attributes:
        import_path: The import as declared, e.g. "mytheme" or a module path
        directory: Directory holding the component files, ends with os.sep
        is_snapshot_sourced: True if directory points below a _vendor dir
        owning_parent: First component that declared this one as an import
        package: Resolved package backing this component, if any
        config_file: Component config filename, if one was found
        config_data: Decoded component config
    """

    import_path: str
    directory: str
    is_snapshot_sourced: bool = False
    owning_parent: Optional[Component] = field(default=None, repr=False)
    package: Optional[ResolvedPackage] = None
    config_file: str = ""
    config_data: dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def path(self) -> str:
        if self.package is not None:
            return self.package.path
        return self.import_path

    @property
    def version(self) -> str:
        if self.package is not None:
            return self.package.version
        return ""

    @property
    def is_module(self) -> bool:
        """True if this component is backed by a Go module."""
        return self.package is not None

    def replacement(self) -> Optional[Component]:
        """Get the component replacing this one.

        Replacements are followed one hop only and never for snapshot
        sourced components.
        """
        if self.package is None or self.is_snapshot_sourced:
            return None
        replaced_by = self.package.replacement
        if replaced_by is None:
            return None
        return Component(
            import_path=replaced_by.path,
            directory=normalize_dir(replaced_by.directory) if replaced_by.directory else "",
            owning_parent=self.owning_parent,
            package=replaced_by,
        )
