"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from zrci.core.errors import ErrorCode
from zrci.output.console import Style
from zrci.pipeline.errors import (
    BuildFailed,
    MatrixInvalid,
    OutputMissing,
    PackagingFailed,
    PipelineError,
    PublishFailed,
    VerifyFailed,
)

if TYPE_CHECKING:
    from zrci.output.console import ConsoleProtocol

__all__ = ["print_pipeline_error", "pipeline_error_exit_code"]


def print_pipeline_error(error: PipelineError, console: ConsoleProtocol) -> None:
    """Print a pipeline error to console with appropriate formatting."""
    match error:
        case VerifyFailed(platform=platform, step=step, returncode=rc, detail=detail):
            console.error(f"{platform}: {step} failed (exit {rc})")
            if detail:
                console.print(detail, Style.DIM)
        case BuildFailed(platform=platform, returncode=rc, detail=detail):
            console.error(f"{platform}: release build failed (exit {rc})")
            if detail:
                console.print(detail, Style.DIM)
        case OutputMissing(platform=platform, path=path):
            console.error(f"{platform}: release binary not found: {path}")
        case PackagingFailed(platform=platform, step=step, message=message):
            console.error(f"{platform}: {step} failed: {message}")
        case PublishFailed(message=message, hint=hint):
            console.error(message)
            if hint:
                console.print(f"hint: {hint}", Style.DIM)
        case MatrixInvalid(message=message):
            console.error(f"invalid release matrix: {message}")


def pipeline_error_exit_code(error: PipelineError) -> int:
    """Get exit code for a pipeline error."""
    match error:
        case VerifyFailed():
            return int(ErrorCode.CHECK_ERROR)
        case BuildFailed() | OutputMissing():
            return int(ErrorCode.BUILD_ERROR)
        case PackagingFailed():
            return int(ErrorCode.PACKAGE_ERROR)
        case PublishFailed():
            return int(ErrorCode.PUBLISH_ERROR)
        case MatrixInvalid():
            return int(ErrorCode.ENV_ERROR)
