from __future__ import annotations

import os
from pathlib import Path

import typer

from zrci.cli.commands._helpers import exit_with_code
from zrci.cli.context import build_context
from zrci.core.errors import ErrorCode
from zrci.output.console import Style
from zrci.pipeline.model import EventKind
from zrci.pipeline.trigger import decide, trigger_from_env


def gate(
    event: str | None = typer.Option(
        None, "--event", help="push | pull_request | tag (default: $GITHUB_EVENT_NAME)"
    ),
    ref: str | None = typer.Option(None, "--ref", help="Git ref (default: $GITHUB_REF)"),
    github_output: bool = typer.Option(
        False, "--github-output", help="Append the decision to $GITHUB_OUTPUT"
    ),
) -> None:
    """Decide which stages the triggering event runs."""
    ctx = build_context()
    tag_prefix = ctx.config.pipeline.tag_prefix

    env_event, env_ref = trigger_from_env(os.environ, tag_prefix=tag_prefix)
    kind = EventKind.parse(event) if event is not None else env_event
    decision = decide(kind, ref if ref is not None else env_ref, tag_prefix=tag_prefix)

    ctx.console.print(f"event: {kind}", Style.DIM)
    ctx.console.print(f"run_check: {str(decision.run_check).lower()}")
    ctx.console.print(f"run_release: {str(decision.run_release).lower()}")
    if decision.tag:
        ctx.console.print(f"tag: {decision.tag}")

    if not github_output:
        return

    out = os.environ.get("GITHUB_OUTPUT")
    if not out:
        ctx.console.error("--github-output requires $GITHUB_OUTPUT")
        exit_with_code(int(ErrorCode.USER_ERROR))

    lines = [
        f"run_check={str(decision.run_check).lower()}",
        f"run_release={str(decision.run_release).lower()}",
        f"tag={decision.tag or ''}",
    ]
    with Path(out).open("a", encoding="utf-8") as f:
        f.write("\n".join(lines) + "\n")
