# SPDX-License-Identifier: MIT
"""Pytest configuration and fixtures for hugo-mods tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

import pytest
from click.testing import CliRunner

from hugo_mods.module import ResolvedPackage

from helpers import write_theme


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Create an empty project directory with a themes folder."""
    project = tmp_path / "site"
    (project / "themes").mkdir(parents=True)
    return project


@pytest.fixture
def module_project(project_dir: Path) -> Path:
    """Create a project with go.mod and go.sum."""
    (project_dir / "go.mod").write_text("module github.com/me/site\n\ngo 1.12\n")
    (project_dir / "go.sum").write_text("")
    return project_dir


@pytest.fixture
def module_cache(tmp_path: Path) -> Path:
    """Directory standing in for the Go module cache."""
    cache = tmp_path / "pkg" / "mod"
    cache.mkdir(parents=True)
    return cache


@pytest.fixture
def make_package(module_cache: Path) -> Callable[..., ResolvedPackage]:
    """Create a module directory in the cache and a package pointing to it."""

    def _make(
        path: str,
        version: str = "v1.0.0",
        imports: Optional[list[str]] = None,
        dirs: tuple[str, ...] = ("layouts",),
    ) -> ResolvedPackage:
        directory = write_theme(module_cache / f"{path}@{version}", imports, dirs=dirs)
        return ResolvedPackage(path=path, version=version, directory=str(directory))

    return _make


@pytest.fixture
def main_package(module_project: Path) -> ResolvedPackage:
    """The project's own module."""
    return ResolvedPackage(
        path="github.com/me/site",
        directory=str(module_project),
        is_primary=True,
    )
