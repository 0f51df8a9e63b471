# SPDX-License-Identifier: MIT
"""Recursive collection of theme components.

Starting from the project's top-level imports, each import is located and
its own config is read for further imports. The result is the pre-order
list of components, each distinct import path appearing once.

A component directory is chosen from, in order:

1. the _vendor snapshot of the project or of a parent component,
2. the directory reported by the Go toolchain,
3. the same after a "go get" of the import path,
4. the themes directory.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from .config import find_config_file, get_imports, load_config_file
from .module import Component, ModsError, ResolvedPackage, ResolvedPackages, normalize_dir

if TYPE_CHECKING:
    from .client import Client

logger = logging.getLogger(__name__)

# The "vendor" dir name is reserved for Go itself.
VENDOR_DIR = "_vendor"
VENDOR_MODULES_FILENAME = "modules.txt"


class ComponentNotFound(ModsError):
    """Raised when an import cannot be located in any location."""

    def __init__(self, import_path: str, message: str):
        self.import_path = import_path
        super().__init__(message)


class SnapshotIndexMalformed(ModsError):
    """Raised when a _vendor/modules.txt line is not "<path> <version>"."""

    def __init__(self, filename: str | Path, line: str):
        self.filename = str(filename)
        self.line = line
        super().__init__(f"invalid modules list: {self.filename!r}: {line!r}")


@dataclass
class ModulesConfig:
    """Result of a collection run.

    Attributes:
        modules: Collected components in pre-order
        go_modules_filename: Path to the project's go.mod, empty if none
    """

    modules: list[Component] = field(default_factory=list)
    go_modules_filename: str = ""

    def get_module(self, path: str) -> Optional[Component]:
        """Get a collected component by path, ignoring case."""
        lowered = path.lower()
        for component in self.modules:
            if component.import_path.lower() == lowered or component.path.lower() == lowered:
                return component
        return None

    def active_versions(self) -> set[str]:
        """Get "<path> <version>" for every module-backed component."""
        return {f"{c.path} {c.version}" for c in self.modules if c.package is not None}


def read_snapshot_index(filename: str | Path) -> list[tuple[str, str]]:
    """Read the (path, version) pairs of a _vendor/modules.txt file.

    Lines look like ``# github.com/alecthomas/chroma v0.6.3``.

    Raises:
        SnapshotIndexMalformed: On any line without exactly two fields
    """
    entries: list[tuple[str, str]] = []
    with open(filename, encoding="utf-8") as f:
        for raw_line in f:
            line = raw_line.strip().strip("# ").strip()
            if not line:
                continue
            parts = line.split()
            if len(parts) != 2:
                raise SnapshotIndexMalformed(filename, raw_line.rstrip("\n"))
            entries.append((parts[0], parts[1]))
    return entries


class Collector:
    """State for one collection run.

    Holds the seen set, the snapshot index and the resolved package list.
    A new Collector must be used for every run.
    """

    def __init__(self, client: Client) -> None:
        self.client = client
        # Lower-cased import paths; picks the first and breaks cycles.
        self.seen: set[str] = set()
        # Module path -> _vendor dir. The first (top-most) mapping wins.
        self.vendored: dict[str, str] = {}
        self._scanned_vendor_dirs: set[str] = set()
        self.resolved = ResolvedPackages()
        self.modules: list[Component] = []

    def collect(self) -> ModulesConfig:
        """Collect all components reachable from the client's imports."""
        self.load_resolved()
        for import_path in self.client.imports:
            self.add_and_recurse(self.client.working_dir, [import_path])

        return ModulesConfig(
            modules=self.modules,
            go_modules_filename=self.client.go_modules_filename,
        )

    def load_resolved(self) -> None:
        """(Re)load the package list from the toolchain."""
        self.resolved = ResolvedPackages(self.client.list_resolved())

    def is_seen(self, import_path: str) -> bool:
        """Check and mark import_path as seen."""
        key = import_path.lower()
        if key in self.seen:
            return True
        self.seen.add(key)
        return False

    def add_and_recurse(
        self,
        base_dir: str | Path,
        imports: list[str],
        owner: Optional[Component] = None,
    ) -> None:
        """Add each unseen import, then the imports it declares."""
        for import_path in imports:
            if self.is_seen(import_path):
                logger.debug("Skipping already collected %s", import_path)
                continue
            component = self.add(base_dir, import_path, owner)
            self.add_and_recurse(component.directory, get_imports(component.config_data), component)

    def add(self, base_dir: str | Path, import_path: str, owner: Optional[Component] = None) -> Component:
        """Resolve one import and append it to the collected modules."""
        self.collect_snapshot_index(base_dir)

        directory, vendored, package = self.resolve(import_path)
        component = Component(
            import_path=import_path,
            directory=directory,
            is_snapshot_sourced=vendored,
            owning_parent=owner,
            package=package,
        )
        self.apply_component_config(component)

        self.modules.append(component)
        return component

    def resolve(self, import_path: str) -> tuple[str, bool, Optional[ResolvedPackage]]:
        """Locate the directory for an import.

        Returns:
            Tuple of (directory ending with os.sep, is snapshot sourced,
            backing package or None)

        Raises:
            ComponentNotFound: If no location has the import
            ExternalResolverError: If an on-demand "go get" fails
        """
        directory = "" if self.client.ignore_vendor else self.vendored.get(import_path, "")
        vendored = directory != ""
        package: Optional[ResolvedPackage] = None

        if not directory:
            package = self._lookup(import_path)
            if package is not None:
                directory = package.directory

        if not directory and self.client.is_probably_module(import_path):
            logger.debug("Fetching %s", import_path)
            self.client.fetch(import_path)
            self.load_resolved()
            package = self._lookup(import_path)
            if package is not None:
                directory = package.directory

        if not directory:
            package = None
            directory = str(self.client.themes_dir / import_path)
            if not Path(directory).exists():
                raise self._not_found(
                    import_path,
                    f"module {import_path!r} not found; either add it as a Hugo Module "
                    f"or store it in {str(self.client.themes_dir)!r}.",
                )

        if not Path(directory).exists():
            raise self._not_found(import_path, f"{directory!r} not found")

        logger.debug("Resolved %s to %s (vendored=%s)", import_path, directory, vendored)
        return normalize_dir(directory), vendored, package

    def collect_snapshot_index(self, base_dir: str | Path) -> None:
        """Add the entries of base_dir/_vendor/modules.txt not already known."""
        vendor_dir = Path(base_dir) / VENDOR_DIR
        key = str(vendor_dir)
        if key in self._scanned_vendor_dirs:
            return
        self._scanned_vendor_dirs.add(key)

        filename = vendor_dir / VENDOR_MODULES_FILENAME
        if not filename.is_file():
            return

        for path, _version in read_snapshot_index(filename):
            if path not in self.vendored:
                self.vendored[path] = str(vendor_dir / path)

    def apply_component_config(self, component: Component) -> None:
        """Load the component's own config file, if it has one."""
        config_file = find_config_file(component.directory)
        if config_file is None:
            return
        component.config_file = str(config_file)
        component.config_data = load_config_file(config_file)

    def _lookup(self, import_path: str) -> Optional[ResolvedPackage]:
        package = self.resolved.lookup(import_path)
        if package is None or not package.directory:
            return None
        return package

    def _not_found(self, import_path: str, message: str) -> ComponentNotFound:
        if self.client.modules_enabled:
            hint = self.client.toolchain_hint()
            if hint:
                message = f"{message}: we found a go.mod file in your project, but {hint}"
        return ComponentNotFound(import_path, message)


def collect(client: Client) -> ModulesConfig:
    """Collect the module tree for the client's imports.

    Any failure aborts the whole run; no partial result is returned.
    """
    if not client.imports:
        return ModulesConfig(go_modules_filename=client.go_modules_filename)

    return Collector(client).collect()
