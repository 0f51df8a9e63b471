# SPDX-License-Identifier: MIT
"""Command line interface for hugo-mods."""

from .main import cli, main

__all__ = ["cli", "main"]
