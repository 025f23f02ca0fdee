"""Shrink a release binary and wrap it in its distribution archive.

Archive names are deterministic (``zr-<os>.<ext>``) and every archive lands
in one shared output directory, so the publisher finds them by name alone.
"""

from __future__ import annotations

import hashlib
import shlex
import shutil
import tarfile
from pathlib import Path
from zipfile import ZIP_DEFLATED, ZipFile

from zrci.core.result import Err, Ok, Result
from zrci.output.console import ConsoleProtocol, Style
from zrci.pipeline.errors import PackagingFailed
from zrci.pipeline.model import ArchiveFormat, MatrixEntry, ReleaseAsset
from zrci.platform.process import run as run_process

__all__ = [
    "STAGING_DIR",
    "describe_asset",
    "package",
    "package_platform",
    "shrink",
    "stage_binary",
]

# Per-platform working copies live under <project>/target/zrci/<platform>/.
STAGING_DIR = Path("target") / "zrci"


def _sha256_file(path: Path) -> str:
    h = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b""):
            h.update(chunk)
    return h.hexdigest()


def describe_asset(name: str, path: Path) -> ReleaseAsset:
    """Size and checksum an existing archive.

    Raises:
        OSError: If the file cannot be read.
    """
    return ReleaseAsset(name=name, path=path, size=path.stat().st_size, sha256=_sha256_file(path))


def stage_binary(
    entry: MatrixEntry,
    binary: Path,
    staging_root: Path,
) -> Result[Path, PackagingFailed]:
    """Copy the built binary into a directory owned by this platform alone.

    strip and upx rewrite the binary in place, and several platforms can
    share one build output path.
    """
    dest = staging_root / entry.platform.value / entry.binary_name
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(binary, dest)
    except OSError as e:
        return Err(PackagingFailed(entry.platform, "stage", str(e)))
    return Ok(dest)


def shrink(
    entry: MatrixEntry,
    binary: Path,
    *,
    console: ConsoleProtocol,
) -> Result[None, PackagingFailed]:
    """Strip (unix only) then upx-compress the binary in place."""
    if entry.strip_symbols:
        stripped = run_process(["strip", str(binary)], cwd=binary.parent)
        if isinstance(stripped, Err):
            e = stripped.error
            return Err(PackagingFailed(entry.platform, "strip", e.stderr.strip() or str(e)))
        console.print(f"{entry.platform}: stripped {binary.name}", Style.DIM)

    cmd = ["upx", *shlex.split(entry.compression_args), str(binary)]
    compressed = run_process(cmd, cwd=binary.parent)
    if isinstance(compressed, Err):
        e = compressed.error
        return Err(PackagingFailed(entry.platform, "upx", e.stderr.strip() or str(e)))
    console.print(f"{entry.platform}: upx {entry.compression_args}", Style.DIM)
    return Ok(None)


def _write_archive(entry: MatrixEntry, binary: Path, archive: Path) -> None:
    if entry.archive_format == ArchiveFormat.TAR_GZ:
        with tarfile.open(archive, "w:gz") as tar:
            tar.add(binary, arcname=entry.binary_name)
        return

    # Build outputs restored from caches may carry pre-1980 mtimes, which
    # ZIP cannot represent.
    with ZipFile(archive, "w", compression=ZIP_DEFLATED, strict_timestamps=False) as zf:
        zf.write(binary, arcname=entry.binary_name)


def package(
    entry: MatrixEntry,
    binary: Path,
    out_dir: Path,
) -> Result[ReleaseAsset, PackagingFailed]:
    """Archive the binary as the sole member next to it, then move the archive into out_dir."""
    staged = binary.parent / entry.archive_name
    dest = out_dir / entry.archive_name
    try:
        _write_archive(entry, binary, staged)
        out_dir.mkdir(parents=True, exist_ok=True)
        if staged.resolve() != dest.resolve():
            dest.unlink(missing_ok=True)
            shutil.move(staged, dest)
        asset = describe_asset(entry.archive_name, dest)
    except (OSError, tarfile.TarError, ValueError) as e:
        return Err(PackagingFailed(entry.platform, "archive", str(e)))
    return Ok(asset)


def package_platform(
    entry: MatrixEntry,
    binary: Path,
    out_dir: Path,
    *,
    console: ConsoleProtocol,
    skip_shrink: bool = False,
) -> Result[ReleaseAsset, PackagingFailed]:
    """Shrink then package. Either failure ends this platform's job."""
    if skip_shrink:
        console.warning(f"{entry.platform}: skipping strip/upx")
    else:
        shrunk = shrink(entry, binary, console=console)
        if isinstance(shrunk, Err):
            return shrunk

    packaged = package(entry, binary, out_dir)
    if isinstance(packaged, Ok):
        console.success(f"{entry.platform}: {packaged.value.name} ({packaged.value.size} bytes)")
    return packaged
