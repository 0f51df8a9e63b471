# SPDX-License-Identifier: MIT
"""Theme component resolution for Hugo Modules.

This package collects the theme components a project imports, whether they
live in the project's _vendor snapshot, in the Go module cache or below the
themes directory, and keeps go.mod, go.sum and _vendor in sync with them.

Example:
    >>> from hugo_mods import Client, ProjectConfig
    >>>
    >>> config = ProjectConfig.from_dir("my-site")
    >>> client = Client(config.project_dir, config.themes_dir, config.imports)
    >>>
    >>> # Ordered, de-duplicated component list
    >>> for component in client.collect().modules:
    ...     print(component.path, component.directory)
    >>>
    >>> client.vendor()
    >>> client.tidy()
"""

__version__ = "0.1.0"

from .module import (
    Component,
    ModsError,
    ResolvedPackage,
    ResolvedPackages,
)
from .config import (
    CONFIG_FILE_EXTENSIONS,
    ConfigDecodeError,
    ProjectConfig,
    find_project_root,
    load_config_file,
)
from .client import (
    Client,
    ExternalResolverError,
    ToolchainStatus,
)
from .collector import (
    Collector,
    ComponentNotFound,
    ModulesConfig,
    SnapshotIndexMalformed,
    collect,
)
from .vendor import (
    VENDORED_DIRNAMES,
    SnapshotWriteError,
    VendorResult,
    vendor_modules,
)
from .tidy import (
    ManifestRewriteError,
    TidyResult,
    rewrite_manifest,
    tidy_modules,
)

__all__ = [
    # Module
    "Component",
    "ModsError",
    "ResolvedPackage",
    "ResolvedPackages",
    # Config
    "CONFIG_FILE_EXTENSIONS",
    "ConfigDecodeError",
    "ProjectConfig",
    "find_project_root",
    "load_config_file",
    # Client
    "Client",
    "ExternalResolverError",
    "ToolchainStatus",
    # Collector
    "Collector",
    "ComponentNotFound",
    "ModulesConfig",
    "SnapshotIndexMalformed",
    "collect",
    # Vendor
    "VENDORED_DIRNAMES",
    "SnapshotWriteError",
    "VendorResult",
    "vendor_modules",
    # Tidy
    "ManifestRewriteError",
    "TidyResult",
    "rewrite_manifest",
    "tidy_modules",
]
