"""Release matrix: one closed table of per-platform release settings.

Stripping and archive format are derived from the platform family here and
nowhere else: unix binaries are stripped and shipped as tar.gz, the Windows
binary is never stripped and ships as zip.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from zrci.core.result import Err, Ok, Result
from zrci.pipeline.errors import MatrixInvalid
from zrci.pipeline.model import ArchiveFormat, MatrixEntry
from zrci.platform.detection import Platform

__all__ = [
    "BINARY_NAME",
    "RELEASE_MATRIX",
    "github_matrix",
    "matrix_entry",
    "release_matrix",
    "validate_matrix",
]

BINARY_NAME = "zr"

_COMPRESSION_ARGS: dict[Platform, str] = {
    Platform.LINUX: "--best --lzma",
    Platform.MACOS: "--best",
    Platform.WINDOWS: "-9",
}


def _entry(platform: Platform) -> MatrixEntry:
    binary = platform.exe_name(BINARY_NAME)
    archive_format = ArchiveFormat.for_platform(platform)
    return MatrixEntry(
        platform=platform,
        binary_name=binary,
        source_binary_path=Path("target") / "release" / binary,
        archive_name=f"{BINARY_NAME}-{platform.value}{archive_format.suffix}",
        compression_args=_COMPRESSION_ARGS[platform],
        strip_symbols=platform.is_unix,
        archive_format=archive_format,
    )


RELEASE_MATRIX: tuple[MatrixEntry, ...] = tuple(_entry(p) for p in Platform)


def release_matrix() -> tuple[MatrixEntry, ...]:
    """All entries, in platform declaration order."""
    return RELEASE_MATRIX


def matrix_entry(platform: Platform) -> MatrixEntry:
    for entry in RELEASE_MATRIX:
        if entry.platform == platform:
            return entry
    raise KeyError(platform)


def validate_matrix(
    entries: Iterable[MatrixEntry],
) -> Result[tuple[MatrixEntry, ...], MatrixInvalid]:
    """Check the matrix covers every platform once with unique archive names."""
    items = tuple(entries)

    seen: set[Platform] = set()
    for e in items:
        if e.platform in seen:
            return Err(MatrixInvalid(f"duplicate entry for platform {e.platform}"))
        seen.add(e.platform)

    missing = [str(p) for p in Platform if p not in seen]
    if missing:
        return Err(MatrixInvalid(f"missing entries for: {', '.join(missing)}"))

    names = [e.archive_name for e in items]
    dupes = sorted({n for n in names if names.count(n) > 1})
    if dupes:
        return Err(MatrixInvalid(f"archive names not unique: {', '.join(dupes)}"))

    for e in items:
        expected = ArchiveFormat.for_platform(e.platform)
        if e.archive_format != expected:
            return Err(MatrixInvalid(f"{e.platform}: archive format must be {expected.suffix}"))
        if e.strip_symbols != e.platform.is_unix:
            return Err(MatrixInvalid(f"{e.platform}: strip_symbols must be {e.platform.is_unix}"))
        if not e.archive_name.endswith(expected.suffix):
            return Err(
                MatrixInvalid(f"{e.platform}: {e.archive_name} does not end in {expected.suffix}")
            )

    return Ok(items)


def github_matrix() -> dict[str, list[dict[str, object]]]:
    """Render the matrix as a GitHub Actions ``strategy.matrix`` value."""
    return {
        "include": [
            {
                "os": e.platform.runner_label,
                "file": e.binary_name,
                "from-file": f"./{e.source_binary_path.as_posix()}",
                "to-file": e.archive_name,
                "args": e.compression_args,
                "strip": e.strip_symbols,
            }
            for e in RELEASE_MATRIX
        ]
    }
