from __future__ import annotations

import typer

from zrci.cli.commands._helpers import exit_on_errors, resolve_platform
from zrci.cli.context import build_context
from zrci.output.console import Style
from zrci.pipeline.check_stage import CheckReport, check_platform, run_check_stage
from zrci.pipeline.matrix import release_matrix


def check(
    platform: str | None = typer.Option(
        None, "--platform", help="linux | macos | windows (default: host)"
    ),
    all_platforms: bool = typer.Option(
        False, "--all", help="Verify every matrix platform in parallel"
    ),
) -> None:
    """Compile and test; lint on the designated platform."""
    ctx = build_context()
    backend = ctx.backend()
    lint_platform = ctx.config.pipeline.lint_platform

    if all_platforms:
        report = run_check_stage(
            backend,
            [e.platform for e in release_matrix()],
            lint_platform=lint_platform,
            console=ctx.console,
        )
    else:
        target = resolve_platform(platform, ctx)
        result, error = check_platform(
            backend, target, lint_platform=lint_platform, console=ctx.console
        )
        report = CheckReport(
            platforms=(target,),
            results=(result,),
            errors=(error,) if error is not None else (),
        )

    for r in report.results:
        lint = "-" if r.linted is None else str(r.linted).lower()
        ctx.console.print(
            f"{r.platform}: compiled={str(r.compiled).lower()} "
            f"tested={str(r.tested).lower()} linted={lint}",
            Style.DIM,
        )
    exit_on_errors(report.errors, ctx)
