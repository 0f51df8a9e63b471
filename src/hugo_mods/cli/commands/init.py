# SPDX-License-Identifier: MIT
"""Initialize Go modules in a Hugo project."""

from __future__ import annotations

import click

from ...module import ModsError
from ..main import Context, echo_success, fail, pass_context


@click.command()
@click.argument("module_path")
@pass_context
def init(ctx: Context, module_path: str) -> None:
    """Initialize this project as a Hugo Module.

    MODULE_PATH is the module path of the project, usually the repository
    path, e.g. github.com/me/my-site.
    """
    try:
        client = ctx.make_client()
        client.init(module_path)
    except ModsError as e:
        fail(e)

    echo_success(f"Initialized {client.go_modules_filename}")
