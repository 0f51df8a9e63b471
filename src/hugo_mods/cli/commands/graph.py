# SPDX-License-Identifier: MIT
"""Print the module requirement graph."""

from __future__ import annotations

import click

from ...module import ModsError
from ..main import Context, echo_info, fail, pass_context


@click.command()
@pass_context
def graph(ctx: Context) -> None:
    """Print the module requirement graph as reported by "go mod graph"."""
    try:
        output = ctx.make_client().graph()
    except ModsError as e:
        fail(e)

    if output:
        echo_info(output.rstrip("\n"))
