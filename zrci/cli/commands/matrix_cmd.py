from __future__ import annotations

import json

import typer

from zrci.pipeline.matrix import github_matrix, release_matrix


def matrix(
    json_output: bool = typer.Option(
        False, "--json", help="Print as a GitHub Actions strategy.matrix value"
    ),
) -> None:
    """Show the release matrix."""
    if json_output:
        typer.echo(json.dumps(github_matrix(), separators=(",", ":")))
        return

    for e in release_matrix():
        strip = "strip" if e.strip_symbols else "no-strip"
        typer.echo(
            f"{e.platform!s:<8} {e.binary_name:<7} {e.source_binary_path.as_posix():<22} "
            f"{e.archive_name:<16} upx {e.compression_args:<14} {strip}"
        )
