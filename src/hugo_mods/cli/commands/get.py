# SPDX-License-Identifier: MIT
"""Fetch modules with "go get"."""

from __future__ import annotations

import click

from ...module import ModsError
from ..main import Context, echo_warning, fail, pass_context


@click.command(context_settings={"ignore_unknown_options": True})
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@pass_context
def get(ctx: Context, args: tuple[str, ...]) -> None:
    """Resolve and download module dependencies.

    All arguments are passed on to "go get".

    \b
    Examples:
        hugo-mods get github.com/gohugoio/hugo-mod-bootstrap-scss
        hugo-mods get -u
    """
    try:
        client = ctx.make_client()
        if not client.modules_enabled:
            echo_warning("no go.mod found; run \"hugo-mods init\" first")
        client.fetch(*args)
    except ModsError as e:
        fail(e)
