from __future__ import annotations

import os

import typer

from zrci.cli.commands._helpers import exit_on_errors, exit_with_code
from zrci.cli.context import build_context
from zrci.core.errors import ErrorCode
from zrci.core.result import Err
from zrci.pipeline.matrix import release_matrix
from zrci.pipeline.publisher import collect_assets, publish
from zrci.pipeline.trigger import decide, trigger_from_env


def publish_release(
    tag: str | None = typer.Option(None, "--tag", help="Release tag (default: from $GITHUB_REF)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Validate files, upload nothing"),
) -> None:
    """Attach every platform archive plus the benchmark archive to a release."""
    ctx = build_context()
    root = ctx.project.root

    if tag is None:
        tag_prefix = ctx.config.pipeline.tag_prefix
        event, ref = trigger_from_env(os.environ, tag_prefix=tag_prefix)
        tag = decide(event, ref, tag_prefix=tag_prefix).tag
    if not tag:
        ctx.console.error("no tag: pass --tag or run on a tag ref")
        exit_with_code(int(ErrorCode.USER_ERROR))

    assets = collect_assets(release_matrix(), root / ctx.config.pipeline.out_dir)
    if isinstance(assets, Err):
        exit_on_errors((assets.error,), ctx)
        return

    result = publish(
        tag=tag,
        assets=assets.value,
        bench_archive=root / ctx.config.pipeline.bench_archive,
        token=ctx.token(),
        project_root=root,
        console=ctx.console,
        repo=ctx.config.publish.repo,
        dry_run=dry_run,
    )
    if isinstance(result, Err):
        exit_on_errors((result.error,), ctx)
