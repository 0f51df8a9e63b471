# SPDX-License-Identifier: MIT
"""Client for the Go toolchain.

The Go toolchain solves module versions and downloads them into its module
cache. This client wraps the handful of ``go`` commands the collector needs
and remembers when the binary is missing or too old, so that a project
without a working Go install does not spawn a failing subprocess per call.
"""

from __future__ import annotations

import enum
import json
import logging
import os
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from .config import DEFAULT_THEMES_DIR, get_proxy
from .module import ModsError, ResolvedPackage

if TYPE_CHECKING:
    from .collector import ModulesConfig
    from .tidy import TidyResult
    from .vendor import VendorResult

logger = logging.getLogger(__name__)

GO_MOD_FILENAME = "go.mod"
GO_SUM_FILENAME = "go.sum"

# Printed by older Go versions that lack "go list -m -json" and friends.
_TOO_OLD_MARKER = "flag provided but not defined"


class ExternalResolverError(ModsError):
    """Raised when a go command fails.

    Attributes:
        args: The go arguments that were run
        stderr: Captured diagnostic output
    """

    def __init__(self, message: str, args: list[str] | None = None, stderr: str = ""):
        self.command_args = list(args or [])
        self.stderr = stderr
        super().__init__(message)


class ToolchainStatus(enum.Enum):
    """State of the go binary, sticky for the life of a Client."""

    OK = "ok"
    NOT_FOUND = "not-found"
    TOO_OLD = "too-old"


class Client:
    """Module operations for one project.

    Args:
        working_dir: Absolute path to the project dir
        themes_dir: Directory holding local theme components
        imports: Top-level theme imports
        ignore_vendor: Do not resolve components from _vendor
        go_binary: Name or path of the go executable
    """

    def __init__(
        self,
        working_dir: str | Path,
        themes_dir: Optional[str | Path] = None,
        imports: Optional[list[str]] = None,
        ignore_vendor: bool = False,
        go_binary: str = "go",
    ) -> None:
        self.working_dir = Path(working_dir)
        self.themes_dir = Path(themes_dir) if themes_dir else self.working_dir / DEFAULT_THEMES_DIR
        self.imports = list(imports or [])
        self.ignore_vendor = ignore_vendor
        self.go_binary = go_binary

        go_mod = self.working_dir / GO_MOD_FILENAME
        # Set when Go modules are initialized in the project.
        self.go_modules_filename = str(go_mod) if go_mod.exists() else ""

        self.environ = dict(os.environ)
        self.environ["PWD"] = str(self.working_dir)
        self.environ["GOPROXY"] = get_proxy()

        self.toolchain_status = ToolchainStatus.OK

    @property
    def modules_enabled(self) -> bool:
        """True if the project has a go.mod file."""
        return self.go_modules_filename != ""

    def toolchain_hint(self) -> str:
        """Describe what the user must do to get a working go binary."""
        if self.toolchain_status is ToolchainStatus.NOT_FOUND:
            return "you need to install Go to use it. See https://golang.org/dl/."
        if self.toolchain_status is ToolchainStatus.TOO_OLD:
            return "you need a newer version of Go to use it. See https://golang.org/dl/."
        return ""

    def is_probably_module(self, path: str) -> bool:
        """Check whether path looks like something "go get" can fetch."""
        return self.modules_enabled and "/" in path

    def init(self, path: str) -> None:
        """Initialize Go modules in the project, creating go.mod."""
        try:
            self._run_go("mod", "init", path)
        except ExternalResolverError as e:
            raise ExternalResolverError(
                f"failed to init modules: {e}", e.command_args, e.stderr
            ) from e

        if self.toolchain_status is not ToolchainStatus.OK:
            raise ExternalResolverError(
                f"failed to init modules: {self.toolchain_hint()}", ["mod", "init", path]
            )

        self.go_modules_filename = str(self.working_dir / GO_MOD_FILENAME)

    def list_resolved(self) -> list[ResolvedPackage]:
        """Download and list all modules in the build list.

        Returns:
            Resolved packages in the order reported by the toolchain, or an
            empty list if the project has no go.mod or Go is unavailable
        """
        if not self.modules_enabled:
            return []

        self._run_go("mod", "download")
        output = self._run_go("list", "-m", "-json", "all")
        if output is None:
            return []

        return parse_module_list(output)

    def fetch(self, *args: str) -> None:
        """Run "go get" for the given module paths."""
        self._run_go("get", *args)

    def graph(self) -> str:
        """Get the module requirement graph as printed by "go mod graph"."""
        return self._run_go("mod", "graph") or ""

    def collect(self) -> ModulesConfig:
        """Collect the module tree for the configured imports."""
        from .collector import collect

        return collect(self)

    def vendor(self) -> VendorResult:
        """Write all module dependencies to the _vendor folder."""
        from .vendor import vendor_modules

        return vendor_modules(self)

    def tidy(self) -> TidyResult:
        """Remove unused entries from go.mod and go.sum."""
        from .tidy import tidy_modules

        return tidy_modules(self)

    def _run_go(self, *args: str) -> Optional[str]:
        """Run a go command in the project dir.

        Returns:
            Captured stdout, or None if Go is missing or too old

        Raises:
            ExternalResolverError: If the command fails for any other reason
        """
        if self.toolchain_status is not ToolchainStatus.OK:
            return None

        cmd = [self.go_binary, *args]
        logger.debug("Running %s in %s", " ".join(cmd), self.working_dir)

        try:
            result = subprocess.run(
                cmd,
                cwd=self.working_dir,
                env=self.environ,
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError:
            logger.warning("%s binary not found; Go modules are disabled", self.go_binary)
            self.toolchain_status = ToolchainStatus.NOT_FOUND
            return None
        except OSError as e:
            raise ExternalResolverError(
                f"failed to execute 'go {' '.join(args)}': {e}", list(args)
            ) from e

        if result.returncode != 0:
            if _TOO_OLD_MARKER in result.stderr:
                logger.warning("%s binary is too old; Go modules are disabled", self.go_binary)
                self.toolchain_status = ToolchainStatus.TOO_OLD
                return None
            raise ExternalResolverError(
                f"go command failed: {result.stderr.strip()}", list(args), result.stderr
            )

        return result.stdout


def parse_module_list(output: str) -> list[ResolvedPackage]:
    """Decode the concatenated JSON objects printed by "go list -m -json".

    Raises:
        ExternalResolverError: If the output is not a stream of JSON objects
    """
    decoder = json.JSONDecoder()
    packages: list[ResolvedPackage] = []
    pos = 0
    end = len(output)

    while True:
        while pos < end and output[pos].isspace():
            pos += 1
        if pos >= end:
            break
        try:
            data, pos = decoder.raw_decode(output, pos)
        except json.JSONDecodeError as e:
            raise ExternalResolverError(f"failed to decode modules list: {e}") from e
        if not isinstance(data, dict):
            raise ExternalResolverError("failed to decode modules list: expected JSON object")
        packages.append(ResolvedPackage.from_json(data))

    return packages
