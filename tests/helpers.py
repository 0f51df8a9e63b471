# SPDX-License-Identifier: MIT
"""Helpers shared by the hugo-mods tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from hugo_mods.client import Client
from hugo_mods.module import ResolvedPackage

class FakeClient(Client):
    """Client serving canned packages instead of running go.

    Args:
        packages: Packages returned by list_resolved
        fetchable: Packages that appear in the list once fetched
    """

    def __init__(
        self,
        working_dir: Path,
        imports: Optional[list[str]] = None,
        packages: Optional[list[ResolvedPackage]] = None,
        fetchable: Optional[dict[str, ResolvedPackage]] = None,
        **kwargs,
    ) -> None:
        super().__init__(working_dir, imports=imports, **kwargs)
        self.packages = list(packages or [])
        self.fetchable = dict(fetchable or {})
        self.fetched: list[str] = []
        self.list_calls = 0

    def list_resolved(self) -> list[ResolvedPackage]:
        self.list_calls += 1
        if not self.modules_enabled:
            return []
        return list(self.packages)

    def fetch(self, *args: str) -> None:
        self.fetched.extend(args)
        for arg in args:
            if arg in self.fetchable:
                self.packages.append(self.fetchable.pop(arg))

    def graph(self) -> str:
        return "".join(f"{p.path} {p.path}@{p.version}\n" for p in self.packages)


def write_theme(
    directory: Path,
    imports: Optional[list[str] | str] = None,
    fmt: str = "toml",
    dirs: tuple[str, ...] = ("layouts",),
) -> Path:
    """Create a theme component directory with an optional config file."""
    directory.mkdir(parents=True, exist_ok=True)
    for name in dirs:
        (directory / name).mkdir(exist_ok=True)
        (directory / name / "index.html").write_text(f"<!-- {directory.name} -->\n")

    if imports is None:
        return directory

    if fmt == "toml":
        if isinstance(imports, str):
            content = f'theme = "{imports}"\n'
        else:
            content = "theme = [" + ", ".join(f'"{i}"' for i in imports) + "]\n"
        (directory / "config.toml").write_text(content)
    elif fmt in ("yaml", "yml"):
        if isinstance(imports, str):
            content = f"theme: {imports}\n"
        else:
            content = "theme:\n" + "".join(f"  - {i}\n" for i in imports)
        (directory / f"config.{fmt}").write_text(content)
    else:
        (directory / "config.json").write_text(json.dumps({"theme": imports}))
    return directory
