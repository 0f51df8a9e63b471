# SPDX-License-Identifier: MIT
"""List the collected theme components."""

from __future__ import annotations

import click

from ...module import ModsError
from ..main import Context, echo_info, echo_warning, fail, pass_context


@click.command("list")
@click.option(
    "--ignore-vendor",
    is_flag=True,
    default=False,
    help="Ignore any _vendor directory.",
)
@pass_context
def list_modules(ctx: Context, ignore_vendor: bool) -> None:
    """List theme components in the order they are applied.

    Each line shows the component path, its version (for Go modules) and
    the directory it was resolved to. Components read from a _vendor
    directory are marked "(vendor)".
    """
    try:
        client = ctx.make_client(ignore_vendor=ignore_vendor)
        collected = client.collect()
    except ModsError as e:
        fail(e)

    if not collected.modules:
        echo_warning("no theme components configured")
        return

    for component in collected.modules:
        fields = [component.path]
        if component.version:
            fields.append(component.version)
        fields.append(component.directory)
        if component.is_snapshot_sourced:
            fields.append("(vendor)")
        echo_info(" ".join(fields))
