# SPDX-License-Identifier: MIT
"""Vendor module dependencies into _vendor."""

from __future__ import annotations

import click

from ...module import ModsError
from ..main import Context, echo_info, echo_success, fail, pass_context


@click.command()
@pass_context
def vendor(ctx: Context) -> None:
    """Write the module dependencies to the _vendor folder.

    Only the archetypes, assets, data, i18n, layouts, resources and static
    folders of each module are copied. The module list is written to
    _vendor/modules.txt.
    """
    try:
        result = ctx.make_client().vendor()
    except ModsError as e:
        fail(e)

    if not result.modules:
        echo_info("Nothing to vendor")
        return

    for component in result.modules:
        echo_info(f"  {component.path} {component.version}")
    echo_success(f"Vendored {len(result.modules)} module(s) into {result.vendor_dir}")
