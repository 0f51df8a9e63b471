# SPDX-License-Identifier: MIT
"""Write module dependencies to the project's _vendor directory.

Like "go mod vendor", the list of vendored modules is recorded in
_vendor/modules.txt, one ``# <path> <version>`` line per module. Unlike Go,
only the folders that make up a theme are copied.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from .collector import VENDOR_DIR, VENDOR_MODULES_FILENAME, collect
from .module import Component, ModsError, ResolvedPackages

if TYPE_CHECKING:
    from .client import Client

logger = logging.getLogger(__name__)

# Top-level folders considered part of a module when vendoring it.
VENDORED_DIRNAMES = frozenset(
    {
        "archetypes",
        "assets",
        "data",
        "i18n",
        "layouts",
        "resources",
        "static",
    }
)


class SnapshotWriteError(ModsError):
    """Raised when writing the _vendor directory fails."""

    pass


@dataclass
class VendorResult:
    """Result of a vendor run.

    Attributes:
        vendor_dir: The _vendor directory
        modules: Components that were copied, in modules.txt order
        modules_file: The written modules.txt, None if nothing was vendored
    """

    vendor_dir: Path
    modules: list[Component] = field(default_factory=list)
    modules_file: Optional[Path] = None


def _ignore_unvendored(root: str):
    """Build a copytree ignore callback keeping only VENDORED_DIRNAMES at root."""
    root_path = Path(root).resolve()

    def ignore(directory: str, names: list[str]) -> set[str]:
        if Path(directory).resolve() != root_path:
            return set()
        return {
            name
            for name in names
            if name not in VENDORED_DIRNAMES or not (Path(directory) / name).is_dir()
        }

    return ignore


def copy_module_dir(source: str | Path, target: str | Path) -> None:
    """Copy the vendorable folders of a module directory to target.

    Only the vendorable folders of a previous snapshot are replaced. Anything
    else below target, such as the snapshot of a nested module path like
    <path>/v2, is left alone.

    Raises:
        SnapshotWriteError: If the copy fails
    """
    target = Path(target)
    try:
        for name in VENDORED_DIRNAMES:
            previous = target / name
            if previous.is_dir():
                shutil.rmtree(previous)
        shutil.copytree(
            source, target, ignore=_ignore_unvendored(str(source)), dirs_exist_ok=True
        )
    except (OSError, shutil.Error) as e:
        raise SnapshotWriteError(f"failed to copy module to vendor dir: {e}") from e


def vendor_modules(client: Client) -> VendorResult:
    """Copy all collected Go modules into the project's _vendor dir.

    Snapshots are taken from the module cache, never from an existing
    _vendor dir. Theme components below the themes dir are skipped.

    Raises:
        SnapshotWriteError: If the main module is unknown or a copy fails
    """
    resolved = ResolvedPackages(client.list_resolved())
    if resolved.primary() is None:
        raise SnapshotWriteError("vendor: main module not found")

    ignore_vendor = client.ignore_vendor
    client.ignore_vendor = True
    try:
        collected = collect(client)
    finally:
        client.ignore_vendor = ignore_vendor

    vendor_dir = client.working_dir / VENDOR_DIR
    result = VendorResult(vendor_dir=vendor_dir)

    lines: list[str] = []
    for component in collected.modules:
        package = component.package
        if package is None:
            continue

        lines.append(f"# {package.path} {package.version}")
        logger.debug("Vendoring %s %s from %s", package.path, package.version, component.directory)
        copy_module_dir(component.directory, vendor_dir / package.path)
        result.modules.append(component)

    if lines:
        modules_file = vendor_dir / VENDOR_MODULES_FILENAME
        try:
            modules_file.write_text("\n".join(lines) + "\n", encoding="utf-8")
        except OSError as e:
            raise SnapshotWriteError(f"failed to write {modules_file}: {e}") from e
        result.modules_file = modules_file

    return result
