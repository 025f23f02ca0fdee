from __future__ import annotations

import os

import typer

from zrci.cli.commands._helpers import exit_on_errors
from zrci.cli.context import build_context
from zrci.output.console import Style
from zrci.pipeline.model import EventKind
from zrci.pipeline.runner import run_pipeline
from zrci.pipeline.trigger import decide, trigger_from_env


def pipeline(
    event: str | None = typer.Option(
        None, "--event", help="push | pull_request | tag (default: $GITHUB_EVENT_NAME)"
    ),
    ref: str | None = typer.Option(None, "--ref", help="Git ref (default: $GITHUB_REF)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Do everything except the upload"),
    skip_shrink: bool = typer.Option(False, "--skip-shrink", help="Package without strip/upx"),
) -> None:
    """Run the whole pipeline: check, gate, release, package, publish."""
    ctx = build_context()
    tag_prefix = ctx.config.pipeline.tag_prefix

    env_event, env_ref = trigger_from_env(os.environ, tag_prefix=tag_prefix)
    kind = EventKind.parse(event) if event is not None else env_event
    decision = decide(kind, ref if ref is not None else env_ref, tag_prefix=tag_prefix)

    report = run_pipeline(
        decision,
        backend=ctx.backend(),
        project_root=ctx.project.root,
        config=ctx.config,
        token=ctx.token(),
        console=ctx.console,
        dry_run=dry_run,
        skip_shrink=skip_shrink,
    )

    if report.published is not None:
        action = "created" if report.published.created else "updated"
        ctx.console.success(f"release {report.published.tag} {action}")
    for asset in report.assets:
        ctx.console.print(f"sha256 {asset.sha256}  {asset.name}", Style.DIM)
    exit_on_errors(report.errors, ctx)
