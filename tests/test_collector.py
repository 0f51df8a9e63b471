# SPDX-License-Identifier: MIT
"""Tests for the recursive component collector."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from hugo_mods.collector import (
    Collector,
    ComponentNotFound,
    SnapshotIndexMalformed,
    collect,
    read_snapshot_index,
)
from hugo_mods.client import ExternalResolverError, ToolchainStatus
from hugo_mods.config import ConfigDecodeError
from hugo_mods.module import ResolvedPackage

from helpers import FakeClient, write_theme


def paths(collected) -> list[str]:
    return [c.import_path for c in collected.modules]


class TestLocalThemes:
    """Collection of components below the themes dir."""

    def test_no_imports(self, project_dir: Path):
        client = FakeClient(project_dir)

        collected = collect(client)

        assert collected.modules == []
        assert client.list_calls == 0

    def test_single_theme(self, project_dir: Path):
        write_theme(project_dir / "themes" / "a")
        client = FakeClient(project_dir, imports=["a"])

        collected = collect(client)

        assert paths(collected) == ["a"]
        component = collected.modules[0]
        assert component.directory == str(project_dir / "themes" / "a") + os.sep
        assert component.is_snapshot_sourced is False
        assert component.package is None
        assert component.owning_parent is None
        assert component.config_file == ""

    def test_self_import_is_suppressed(self, project_dir: Path):
        """A theme importing ["b", "a"] from "a" yields [a, b]."""
        write_theme(project_dir / "themes" / "a", ["b", "a"])
        write_theme(project_dir / "themes" / "b")

        collected = collect(FakeClient(project_dir, imports=["a"]))

        assert paths(collected) == ["a", "b"]

    def test_pre_order(self, project_dir: Path):
        themes = project_dir / "themes"
        write_theme(themes / "a", ["a1", "a2"])
        write_theme(themes / "a1", ["a11"])
        write_theme(themes / "a11")
        write_theme(themes / "a2")
        write_theme(themes / "b", ["a2", "b1"])
        write_theme(themes / "b1")

        collected = collect(FakeClient(project_dir, imports=["a", "b"]))

        assert paths(collected) == ["a", "a1", "a11", "a2", "b", "b1"]

    def test_owning_parent(self, project_dir: Path):
        themes = project_dir / "themes"
        write_theme(themes / "a", ["c"])
        write_theme(themes / "b", ["c"])
        write_theme(themes / "c")

        collected = collect(FakeClient(project_dir, imports=["a", "b"]))

        c = collected.get_module("c")
        assert c.owning_parent is collected.get_module("a")

    def test_cycle(self, project_dir: Path):
        themes = project_dir / "themes"
        write_theme(themes / "a", ["b"])
        write_theme(themes / "b", ["a"])

        collected = collect(FakeClient(project_dir, imports=["a"]))

        assert paths(collected) == ["a", "b"]

    def test_case_insensitive_dedup(self, project_dir: Path):
        themes = project_dir / "themes"
        write_theme(themes / "Foo", ["foo"])

        collected = collect(FakeClient(project_dir, imports=["Foo", "FOO"]))

        assert paths(collected) == ["Foo"]

    @pytest.mark.parametrize("fmt", ["toml", "yaml", "yml", "json"])
    def test_config_formats(self, project_dir: Path, fmt: str):
        themes = project_dir / "themes"
        write_theme(themes / "a", ["b"], fmt=fmt)
        write_theme(themes / "b")

        collected = collect(FakeClient(project_dir, imports=["a"]))

        assert paths(collected) == ["a", "b"]
        assert collected.modules[0].config_file.endswith(f"config.{fmt}")
        assert collected.modules[0].config_data == {"theme": ["b"]}

    def test_scalar_theme_import(self, project_dir: Path):
        themes = project_dir / "themes"
        write_theme(themes / "a", "b")
        write_theme(themes / "b")

        assert paths(collect(FakeClient(project_dir, imports=["a"]))) == ["a", "b"]

    def test_first_config_format_wins(self, project_dir: Path):
        themes = project_dir / "themes"
        write_theme(themes / "a", ["b"], fmt="toml")
        write_theme(themes / "a", ["c"], fmt="json")
        write_theme(themes / "b")
        write_theme(themes / "c")

        assert paths(collect(FakeClient(project_dir, imports=["a"]))) == ["a", "b"]

    def test_not_found(self, project_dir: Path):
        client = FakeClient(project_dir, imports=["missing"])

        with pytest.raises(ComponentNotFound) as exc_info:
            collect(client)

        assert exc_info.value.import_path == "missing"
        assert "either add it as a Hugo Module" in str(exc_info.value)
        assert "go.mod" not in str(exc_info.value)

    def test_nested_not_found_aborts(self, project_dir: Path):
        write_theme(project_dir / "themes" / "a", ["missing"])

        with pytest.raises(ComponentNotFound):
            collect(FakeClient(project_dir, imports=["a"]))

    def test_broken_config_aborts(self, project_dir: Path):
        theme = write_theme(project_dir / "themes" / "a")
        (theme / "config.toml").write_text("theme = [\n")

        with pytest.raises(ConfigDecodeError):
            collect(FakeClient(project_dir, imports=["a"]))


class TestModules:
    """Collection of components backed by Go modules."""

    def test_resolved_package(self, module_project: Path, make_package):
        package = make_package("github.com/me/theme")
        client = FakeClient(module_project, imports=["github.com/me/theme"], packages=[package])

        collected = collect(client)

        component = collected.modules[0]
        assert component.package is package
        assert component.directory == package.directory + os.sep
        assert component.version == "v1.0.0"
        assert collected.go_modules_filename == str(module_project / "go.mod")

    def test_resolved_package_case_insensitive(self, module_project: Path, make_package):
        package = make_package("github.com/Me/Theme")
        client = FakeClient(module_project, imports=["github.com/me/theme"], packages=[package])

        component = collect(client).modules[0]

        assert component.import_path == "github.com/me/theme"
        assert component.path == "github.com/Me/Theme"

    def test_module_imports_local_theme(self, module_project: Path, make_package):
        package = make_package("github.com/me/theme", imports=["base"])
        write_theme(module_project / "themes" / "base")
        client = FakeClient(module_project, imports=["github.com/me/theme"], packages=[package])

        collected = collect(client)

        assert paths(collected) == ["github.com/me/theme", "base"]
        assert collected.modules[1].package is None

    def test_fetch_on_demand(self, module_project: Path, make_package):
        package = make_package("github.com/me/theme")
        client = FakeClient(
            module_project,
            imports=["github.com/me/theme"],
            fetchable={"github.com/me/theme": package},
        )

        collected = collect(client)

        assert client.fetched == ["github.com/me/theme"]
        assert client.list_calls == 2
        assert collected.modules[0].package is package

    def test_no_fetch_without_go_mod(self, project_dir: Path):
        write_theme(project_dir / "themes" / "github.com" / "me" / "theme")
        client = FakeClient(project_dir, imports=["github.com/me/theme"])

        collected = collect(client)

        assert client.fetched == []
        assert collected.modules[0].package is None

    def test_no_fetch_for_plain_names(self, module_project: Path):
        write_theme(module_project / "themes" / "a")
        client = FakeClient(module_project, imports=["a"])

        collect(client)

        assert client.fetched == []

    def test_fetch_failure_propagates(self, module_project: Path):
        class FailingClient(FakeClient):
            def fetch(self, *args: str) -> None:
                raise ExternalResolverError("go command failed: boom", ["get", *args])

        client = FailingClient(module_project, imports=["github.com/me/theme"])

        with pytest.raises(ExternalResolverError, match="boom"):
            collect(client)

    def test_errored_package_falls_back_to_themes_dir(self, module_project: Path):
        errored = ResolvedPackage(path="github.com/me/theme", error="not found")
        write_theme(module_project / "themes" / "github.com" / "me" / "theme")
        client = FakeClient(module_project, imports=["github.com/me/theme"], packages=[errored])

        component = collect(client).modules[0]

        assert component.package is None
        assert client.fetched == ["github.com/me/theme"]

    @pytest.mark.parametrize(
        "status,hint",
        [
            (ToolchainStatus.NOT_FOUND, "install Go"),
            (ToolchainStatus.TOO_OLD, "newer version of Go"),
        ],
    )
    def test_not_found_toolchain_hint(self, module_project: Path, status, hint):
        client = FakeClient(module_project, imports=["github.com/me/theme"])
        client.toolchain_status = status

        with pytest.raises(ComponentNotFound) as exc_info:
            collect(client)

        message = str(exc_info.value)
        assert "we found a go.mod file in your project" in message
        assert hint in message

    def test_not_found_with_working_toolchain(self, module_project: Path):
        client = FakeClient(module_project, imports=["github.com/me/theme"])

        with pytest.raises(ComponentNotFound) as exc_info:
            collect(client)

        assert "we found a go.mod" not in str(exc_info.value)


class TestSnapshot:
    """Resolution from _vendor snapshots."""

    def _vendor(self, base: Path, path: str, version: str = "v1.0.0") -> Path:
        vendor_dir = base / "_vendor"
        write_theme(vendor_dir / path)
        modules_txt = vendor_dir / "modules.txt"
        existing = modules_txt.read_text() if modules_txt.exists() else ""
        modules_txt.write_text(existing + f"# {path} {version}\n")
        return vendor_dir / path

    def test_snapshot_wins_over_resolved(self, module_project: Path, make_package):
        package = make_package("github.com/me/theme")
        vendored = self._vendor(module_project, "github.com/me/theme")
        client = FakeClient(module_project, imports=["github.com/me/theme"], packages=[package])

        component = collect(client).modules[0]

        assert component.directory == str(vendored) + os.sep
        assert component.is_snapshot_sourced is True
        assert component.package is None

    def test_ignore_vendor(self, module_project: Path, make_package):
        package = make_package("github.com/me/theme")
        self._vendor(module_project, "github.com/me/theme")
        client = FakeClient(
            module_project,
            imports=["github.com/me/theme"],
            packages=[package],
            ignore_vendor=True,
        )

        component = collect(client).modules[0]

        assert component.is_snapshot_sourced is False
        assert component.package is package

    def test_top_most_snapshot_wins(self, project_dir: Path):
        top = self._vendor(project_dir, "github.com/me/base")
        parent = write_theme(project_dir / "themes" / "parent", ["github.com/me/base"])
        self._vendor(parent, "github.com/me/base")

        collected = collect(FakeClient(project_dir, imports=["parent"]))

        assert collected.modules[1].directory == str(top) + os.sep

    def test_parent_snapshot_used(self, project_dir: Path):
        parent = write_theme(project_dir / "themes" / "parent", ["github.com/me/base"])
        nested = self._vendor(parent, "github.com/me/base")

        collected = collect(FakeClient(project_dir, imports=["parent"]))

        assert collected.modules[1].directory == str(nested) + os.sep
        assert collected.modules[1].is_snapshot_sourced

    def test_malformed_index(self, project_dir: Path):
        vendor_dir = project_dir / "_vendor"
        vendor_dir.mkdir()
        (vendor_dir / "modules.txt").write_text("# github.com/me/theme\n")
        write_theme(project_dir / "themes" / "a")

        with pytest.raises(SnapshotIndexMalformed) as exc_info:
            collect(FakeClient(project_dir, imports=["a"]))

        assert "modules.txt" in str(exc_info.value)

    def test_read_snapshot_index(self, tmp_path: Path):
        index = tmp_path / "modules.txt"
        index.write_text("# github.com/a/b v1.0.0\n\n#github.com/c/d v0.2.0 \n")

        assert read_snapshot_index(index) == [
            ("github.com/a/b", "v1.0.0"),
            ("github.com/c/d", "v0.2.0"),
        ]

    def test_index_scanned_once_per_dir(self, project_dir: Path, monkeypatch: pytest.MonkeyPatch):
        from hugo_mods import collector as collector_module

        self._vendor(project_dir, "github.com/me/theme")
        write_theme(project_dir / "themes" / "a")
        write_theme(project_dir / "themes" / "b")
        reads: list[Path] = []
        original = collector_module.read_snapshot_index

        def counting(filename):
            reads.append(Path(filename))
            return original(filename)

        monkeypatch.setattr(collector_module, "read_snapshot_index", counting)
        collect(FakeClient(project_dir, imports=["a", "b"]))

        assert len(reads) == 1


def test_runs_do_not_share_state(project_dir: Path):
    write_theme(project_dir / "themes" / "a", ["b"])
    write_theme(project_dir / "themes" / "b")
    client = FakeClient(project_dir, imports=["a"])

    first = Collector(client).collect()
    second = Collector(client).collect()

    assert paths(first) == paths(second) == ["a", "b"]
    assert first.modules[0] is not second.modules[0]
