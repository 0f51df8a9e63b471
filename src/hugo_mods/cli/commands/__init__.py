# SPDX-License-Identifier: MIT
"""CLI command implementations."""

from . import init, get, graph, list_modules, vendor, tidy

__all__ = ["init", "get", "graph", "list_modules", "vendor", "tidy"]
