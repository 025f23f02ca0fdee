from __future__ import annotations

import typer

from zrci.cli.commands._helpers import exit_on_errors, resolve_platform
from zrci.cli.context import build_context
from zrci.core.result import Err
from zrci.pipeline.matrix import matrix_entry
from zrci.pipeline.runner import release_platform


def release(
    platform: str | None = typer.Option(
        None, "--platform", help="linux | macos | windows (default: host)"
    ),
    skip_shrink: bool = typer.Option(
        False, "--skip-shrink", help="Package without strip/upx (local testing)"
    ),
) -> None:
    """Build, shrink and package the release archive of one platform.

    Meant for a per-platform CI job that already depends on every check job.
    """
    ctx = build_context()
    entry = matrix_entry(resolve_platform(platform, ctx))

    result = release_platform(
        ctx.backend(),
        entry,
        project_root=ctx.project.root,
        out_dir=ctx.project.root / ctx.config.pipeline.out_dir,
        console=ctx.console,
        skip_shrink=skip_shrink,
    )
    if isinstance(result, Err):
        exit_on_errors((result.error,), ctx)
        return

    ctx.console.print(f"sha256 {result.value.sha256}  {result.value.name}")
