"""Release build of one matrix entry."""

from __future__ import annotations

from pathlib import Path

from zrci.core.result import Err, Ok, Result
from zrci.pipeline.backend import BuildBackend
from zrci.pipeline.errors import BuildFailed, OutputMissing
from zrci.pipeline.model import MatrixEntry


def build_release(
    backend: BuildBackend,
    entry: MatrixEntry,
    *,
    project_root: Path,
) -> Result[Path, BuildFailed | OutputMissing]:
    """Build the release binary and return its absolute path."""
    built = backend.build_release(entry)
    if isinstance(built, Err):
        return built

    binary = project_root / entry.source_binary_path
    if not binary.is_file():
        return Err(OutputMissing(entry.platform, binary))
    return Ok(binary)
