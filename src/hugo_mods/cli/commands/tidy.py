# SPDX-License-Identifier: MIT
"""Remove unused entries from go.mod and go.sum."""

from __future__ import annotations

import click

from ...client import GO_MOD_FILENAME, GO_SUM_FILENAME
from ...module import ModsError
from ..main import Context, echo_info, echo_success, echo_warning, fail, pass_context


@click.command()
@click.option(
    "--ignore-vendor",
    is_flag=True,
    default=False,
    help="Ignore any _vendor directory.",
)
@pass_context
def tidy(ctx: Context, ignore_vendor: bool) -> None:
    """Remove unused dependencies from go.mod and go.sum."""
    try:
        result = ctx.make_client(ignore_vendor=ignore_vendor).tidy()
    except ModsError as e:
        fail(e)

    if result.snapshot_sourced:
        echo_warning(
            f"{len(result.snapshot_sourced)} component(s) resolved from _vendor; "
            "their go.mod and go.sum entries were treated as unused. "
            "Run with --ignore-vendor to keep them."
        )

    rewritten = []
    if result.go_mod_rewritten:
        rewritten.append(GO_MOD_FILENAME)
    if result.go_sum_rewritten:
        rewritten.append(GO_SUM_FILENAME)

    if rewritten:
        echo_success(f"Updated {', '.join(rewritten)}")
    else:
        echo_info("Nothing to tidy")
