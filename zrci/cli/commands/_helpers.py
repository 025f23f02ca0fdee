"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import typer

from zrci.core.errors import ErrorCode
from zrci.output.errors import pipeline_error_exit_code, print_pipeline_error
from zrci.pipeline.errors import PipelineError
from zrci.platform.detection import Platform, detect_platform

if TYPE_CHECKING:
    from zrci.cli.context import CLIContext


def exit_on_errors(errors: tuple[PipelineError, ...], ctx: CLIContext) -> None:
    """Print every error and exit with the code of the first one.

    Returns normally when there are no errors.
    """
    if not errors:
        return
    for error in errors:
        print_pipeline_error(error, ctx.console)
    raise typer.Exit(code=pipeline_error_exit_code(errors[0]))


def resolve_platform(value: str | None, ctx: CLIContext) -> Platform:
    """Parse a --platform value, defaulting to the host platform."""
    if value is None:
        host = detect_platform()
        if host is None:
            ctx.console.error("host platform is not in the release matrix; pass --platform")
            exit_with_code(int(ErrorCode.USER_ERROR))
        return host
    try:
        return Platform.parse(value)
    except ValueError as e:
        ctx.console.error(str(e))
        exit_with_code(int(ErrorCode.USER_ERROR))


def exit_with_code(code: int) -> NoReturn:
    """Exit with given code. Explicit helper for clarity."""
    raise typer.Exit(code=code)
