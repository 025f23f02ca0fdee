from __future__ import annotations

import hashlib
import os
import tarfile
import zipfile
from pathlib import Path

import pytest

from zrci.core.result import Err, Ok, Result
from zrci.output.console import MockConsole
from zrci.pipeline import packager as packager_mod
from zrci.pipeline.matrix import matrix_entry
from zrci.pipeline.model import MatrixEntry
from zrci.platform.detection import Platform
from zrci.platform.process import ProcessError


def _fake_tools(
    monkeypatch: pytest.MonkeyPatch, *, missing: frozenset[str] = frozenset()
) -> list[list[str]]:
    calls: list[list[str]] = []

    def fake_run(cmd: list[str], cwd: Path) -> Result[str, ProcessError]:
        del cwd
        calls.append(cmd)
        if cmd[0] in missing:
            return Err(ProcessError(tuple(cmd), -1, "", f"{cmd[0]}: not found"))
        return Ok("")

    monkeypatch.setattr(packager_mod, "run_process", fake_run)
    return calls


def _binary(root: Path, entry: MatrixEntry) -> Path:
    path = root / entry.source_binary_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"zr binary")
    return path


def test_unix_binary_is_stripped_before_upx(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    calls = _fake_tools(monkeypatch)
    entry = matrix_entry(Platform.LINUX)
    binary = _binary(tmp_path, entry)

    result = packager_mod.shrink(entry, binary, console=MockConsole())

    assert isinstance(result, Ok)
    assert calls == [["strip", str(binary)], ["upx", "--best", "--lzma", str(binary)]]


def test_windows_binary_is_never_stripped(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    calls = _fake_tools(monkeypatch)
    entry = matrix_entry(Platform.WINDOWS)
    binary = _binary(tmp_path, entry)

    packager_mod.shrink(entry, binary, console=MockConsole())

    assert calls == [["upx", "-9", str(binary)]]


def test_missing_upx_is_packaging_failure(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    _fake_tools(monkeypatch, missing=frozenset({"upx"}))
    entry = matrix_entry(Platform.MACOS)

    result = packager_mod.shrink(entry, _binary(tmp_path, entry), console=MockConsole())

    assert isinstance(result, Err)
    assert result.error.step == "upx"
    assert "not found" in result.error.message


def test_strip_failure_stops_before_upx(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    calls = _fake_tools(monkeypatch, missing=frozenset({"strip"}))
    entry = matrix_entry(Platform.LINUX)

    result = packager_mod.shrink(entry, _binary(tmp_path, entry), console=MockConsole())

    assert isinstance(result, Err)
    assert result.error.step == "strip"
    assert [c[0] for c in calls] == ["strip"]


def test_tar_gz_archive_holds_only_the_binary(tmp_path: Path) -> None:
    entry = matrix_entry(Platform.LINUX)
    binary = _binary(tmp_path, entry)
    out_dir = tmp_path / "out"

    result = packager_mod.package(entry, binary, out_dir)

    assert isinstance(result, Ok)
    asset = result.value
    assert asset.path == out_dir / "zr-linux.tar.gz"
    assert asset.size == asset.path.stat().st_size
    assert asset.sha256 == hashlib.sha256(asset.path.read_bytes()).hexdigest()
    with tarfile.open(asset.path, "r:gz") as tar:
        assert tar.getnames() == ["zr"]
        member = tar.extractfile("zr")
        assert member is not None and member.read() == b"zr binary"


def test_zip_archive_holds_only_the_binary(tmp_path: Path) -> None:
    entry = matrix_entry(Platform.WINDOWS)
    binary = _binary(tmp_path, entry)

    result = packager_mod.package(entry, binary, tmp_path)

    assert isinstance(result, Ok)
    assert zipfile.is_zipfile(result.value.path)
    with zipfile.ZipFile(result.value.path) as zf:
        assert zf.namelist() == ["zr.exe"]


def test_archive_is_moved_out_of_build_dir(tmp_path: Path) -> None:
    entry = matrix_entry(Platform.MACOS)
    binary = _binary(tmp_path, entry)

    packager_mod.package(entry, binary, tmp_path)

    assert (tmp_path / "zr-macos.tar.gz").is_file()
    assert not (binary.parent / "zr-macos.tar.gz").exists()


def test_existing_archive_is_replaced(tmp_path: Path) -> None:
    entry = matrix_entry(Platform.LINUX)
    binary = _binary(tmp_path, entry)
    (tmp_path / entry.archive_name).write_bytes(b"stale")

    result = packager_mod.package(entry, binary, tmp_path)

    assert isinstance(result, Ok)
    assert tarfile.is_tarfile(result.value.path)


def test_zip_accepts_epoch_mtime(tmp_path: Path) -> None:
    entry = matrix_entry(Platform.WINDOWS)
    binary = _binary(tmp_path, entry)
    os.utime(binary, (0, 0))

    assert isinstance(packager_mod.package(entry, binary, tmp_path), Ok)


def test_missing_binary_is_archive_failure(tmp_path: Path) -> None:
    entry = matrix_entry(Platform.LINUX)

    result = packager_mod.package(entry, tmp_path / "nope" / "zr", tmp_path)

    assert isinstance(result, Err)
    assert result.error.step == "archive"


def test_package_platform_skip_shrink(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    calls = _fake_tools(monkeypatch)
    entry = matrix_entry(Platform.LINUX)
    console = MockConsole()

    result = packager_mod.package_platform(
        entry, _binary(tmp_path, entry), tmp_path, console=console, skip_shrink=True
    )

    assert isinstance(result, Ok)
    assert calls == []
    assert console.find("skipping strip/upx")


def test_package_platform_stops_on_shrink_failure(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    _fake_tools(monkeypatch, missing=frozenset({"upx"}))
    entry = matrix_entry(Platform.WINDOWS)

    result = packager_mod.package_platform(
        entry, _binary(tmp_path, entry), tmp_path, console=MockConsole()
    )

    assert isinstance(result, Err)
    assert not (tmp_path / "zr-windows.zip").exists()


def test_stage_binary_copies_per_platform(tmp_path: Path) -> None:
    linux = matrix_entry(Platform.LINUX)
    macos = matrix_entry(Platform.MACOS)
    built = _binary(tmp_path, linux)
    staging = tmp_path / packager_mod.STAGING_DIR

    first = packager_mod.stage_binary(linux, built, staging)
    second = packager_mod.stage_binary(macos, built, staging)

    assert isinstance(first, Ok) and isinstance(second, Ok)
    assert first.value == staging / "linux" / "zr"
    assert second.value == staging / "macos" / "zr"
    first.value.write_bytes(b"packed")
    assert second.value.read_bytes() == b"zr binary"
    assert built.read_bytes() == b"zr binary"


def test_stage_binary_missing_source(tmp_path: Path) -> None:
    entry = matrix_entry(Platform.WINDOWS)

    result = packager_mod.stage_binary(entry, tmp_path / "nope.exe", tmp_path / "stage")

    assert isinstance(result, Err)
    assert result.error.step == "stage"
