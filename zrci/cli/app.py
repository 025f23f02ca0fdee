from __future__ import annotations

import os
from pathlib import Path

import typer

from zrci import __version__
from zrci.cli.commands.check_cmd import check
from zrci.cli.commands.gate import gate
from zrci.cli.commands.matrix_cmd import matrix
from zrci.cli.commands.pipeline_cmd import pipeline
from zrci.cli.commands.publish_cmd import publish_release
from zrci.cli.commands.release_cmd import release
from zrci.core.errors import ErrorCode
from zrci.core.project import PROJECT_ENV_VAR, is_project_root


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


app.command()(gate)
app.command()(matrix)
app.command()(check)
app.command()(release)
app.command("publish")(publish_release)
app.command()(pipeline)


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    project: Path | None = typer.Option(
        None,
        "--project",
        help="Project root (overrides auto detection)",
    ),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)

    if project is not None:
        try:
            root = project.expanduser().resolve()
        except OSError as e:
            typer.echo(f"error: invalid --project: {e}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        if not root.is_dir() or not is_project_root(root):
            typer.echo(f"error: --project '{root}' has no Cargo.toml", err=True)
            raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

        os.environ[PROJECT_ENV_VAR] = str(root)


def main() -> None:
    app()
