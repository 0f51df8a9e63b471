# SPDX-License-Identifier: MIT
"""Prune go.mod and go.sum to the modules still in use.

A module is in use when the collector resolves a component to it. Lines for
any other module are dropped. A file is only rewritten when at least one
line was dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional

from .client import GO_MOD_FILENAME, GO_SUM_FILENAME
from .collector import VENDOR_DIR, collect
from .module import Component, ModsError

if TYPE_CHECKING:
    from .client import Client

logger = logging.getLogger(__name__)

_GO_MOD_SUFFIX = "/" + GO_MOD_FILENAME


class ManifestRewriteError(ModsError):
    """Raised when go.mod or go.sum cannot be read or rewritten."""

    pass


@dataclass
class TidyResult:
    """Result of a tidy run.

    Attributes:
        go_mod_rewritten: Whether go.mod was rewritten
        go_sum_rewritten: Whether go.sum was rewritten
        snapshot_sourced: Components read from _vendor; they carry no module
            version, so their go.mod and go.sum lines count as unused
    """

    go_mod_rewritten: bool = False
    go_sum_rewritten: bool = False
    snapshot_sourced: list[Component] = field(default_factory=list)


def _module_version(line: str) -> Optional[str]:
    """Get "<path> <version>" from a dependency line, None if it has no pair."""
    parts = line.split()
    if parts and parts[0] == "require":
        parts = parts[1:]
    if len(parts) < 2:
        return None
    path, version = parts[0], parts[1]
    if version.endswith(_GO_MOD_SUFFIX):
        version = version[: -len(_GO_MOD_SUFFIX)]
    return f"{path} {version}"


def _go_mod_line_filter() -> Callable[[str], bool]:
    """Build a predicate telling which go.mod lines declare a dependency.

    Dependency lines are single line ``require`` statements and the
    indented lines of a ``require ( ... )`` block. Comment lines never are.
    """
    in_require_block = False

    def is_dependency_line(line: str) -> bool:
        nonlocal in_require_block
        stripped = line.strip()
        if in_require_block:
            if stripped.startswith(")"):
                in_require_block = False
                return False
            if stripped.startswith("//"):
                return False
            return line[:1].isspace()
        if stripped.startswith("require"):
            rest = stripped[len("require") :].strip()
            if rest.startswith("("):
                in_require_block = True
                return False
            return line.startswith("require") and rest != ""
        return False

    return is_dependency_line


def filter_manifest_lines(
    lines: list[str],
    active: set[str],
    is_dependency_line: Callable[[str], bool],
) -> tuple[list[str], bool]:
    """Drop dependency lines whose "<path> <version>" is not active.

    Returns:
        Tuple of (kept lines, whether any line was dropped)
    """
    kept: list[str] = []
    dirty = False

    for line in lines:
        keep = True
        if line.strip() and is_dependency_line(line):
            pair = _module_version(line)
            keep = pair is not None and pair in active
        if keep:
            kept.append(line)
        else:
            dirty = True

    return kept, dirty


def rewrite_manifest(filename: str | Path, active: set[str], is_go_mod: bool) -> bool:
    """Rewrite a go.mod or go.sum file keeping only active modules.

    Args:
        filename: The file to rewrite; a missing file is skipped
        active: "<path> <version>" pairs still in use
        is_go_mod: True for go.mod, False for go.sum where every line is a
            dependency line

    Returns:
        True if the file was rewritten

    Raises:
        ManifestRewriteError: On I/O failure
    """
    path = Path(filename)
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return False
    except OSError as e:
        raise ManifestRewriteError(f"failed to read {path}: {e}") from e

    is_dependency_line = _go_mod_line_filter() if is_go_mod else (lambda line: True)
    kept, dirty = filter_manifest_lines(content.splitlines(), active, is_dependency_line)

    if not dirty:
        return False

    logger.debug("Rewriting %s", path)
    try:
        path.write_text("".join(line + "\n" for line in kept), encoding="utf-8")
    except OSError as e:
        raise ManifestRewriteError(f"failed to write {path}: {e}") from e
    return True


def tidy_modules(client: Client) -> TidyResult:
    """Remove go.mod and go.sum entries not reachable from the imports."""
    collected = collect(client)
    active = collected.active_versions()

    result = TidyResult(
        snapshot_sourced=[c for c in collected.modules if c.is_snapshot_sourced]
    )
    if result.snapshot_sourced:
        logger.debug(
            "%d component(s) resolved from %s; their entries will be pruned",
            len(result.snapshot_sourced),
            VENDOR_DIR,
        )
    if client.modules_enabled:
        result.go_mod_rewritten = rewrite_manifest(client.go_modules_filename, active, is_go_mod=True)
    # go.sum holds the entire dependency graph.
    result.go_sum_rewritten = rewrite_manifest(
        client.working_dir / GO_SUM_FILENAME, active, is_go_mod=False
    )
    return result
