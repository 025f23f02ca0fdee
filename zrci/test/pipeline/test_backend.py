from __future__ import annotations

from pathlib import Path

import pytest

from zrci.core.result import Err, Ok, Result
from zrci.pipeline import backend as backend_mod
from zrci.pipeline.backend import CargoBackend
from zrci.pipeline.matrix import matrix_entry
from zrci.platform.detection import Platform
from zrci.platform.process import ProcessError


def _fake_cargo(
    monkeypatch: pytest.MonkeyPatch, *, failing: dict[str, int] | None = None
) -> list[tuple[list[str], dict[str, str] | None]]:
    calls: list[tuple[list[str], dict[str, str] | None]] = []
    failing = failing or {}

    def fake_run(
        cmd: list[str], cwd: Path, env: dict[str, str] | None = None
    ) -> Result[str, ProcessError]:
        del cwd
        calls.append((cmd, env))
        verb = cmd[1]
        if verb in failing:
            return Err(ProcessError(tuple(cmd), failing[verb], "", f"error in {verb}\n"))
        return Ok("")

    monkeypatch.setattr(backend_mod, "run_process", fake_run)
    return calls


def test_verify_runs_check_then_test(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    calls = _fake_cargo(monkeypatch)
    backend = CargoBackend(project_root=tmp_path, env={"CARGO_TERM_COLOR": "always"})

    assert isinstance(backend.verify(Platform.LINUX), Ok)
    assert [cmd for cmd, _ in calls] == [["cargo", "check"], ["cargo", "test"]]
    assert all(env == {"CARGO_TERM_COLOR": "always"} for _, env in calls)


def test_verify_stops_after_compile_failure(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    calls = _fake_cargo(monkeypatch, failing={"check": 101})

    result = CargoBackend(project_root=tmp_path).verify(Platform.MACOS)

    assert isinstance(result, Err)
    assert result.error.step == "compile"
    assert result.error.returncode == 101
    assert result.error.detail == "error in check"
    assert len(calls) == 1


def test_test_failure_is_reported_as_test_step(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    _fake_cargo(monkeypatch, failing={"test": 101})

    result = CargoBackend(project_root=tmp_path).verify(Platform.WINDOWS)

    assert isinstance(result, Err)
    assert result.error.step == "test"
    assert result.error.platform == Platform.WINDOWS


def test_lint_runs_clippy(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    calls = _fake_cargo(monkeypatch, failing={"clippy": 1})

    result = CargoBackend(project_root=tmp_path).lint(Platform.LINUX)

    assert isinstance(result, Err)
    assert result.error.step == "lint"
    assert calls[0][0] == ["cargo", "clippy"]


def test_build_release(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    calls = _fake_cargo(monkeypatch, failing={"build": 101})
    backend = CargoBackend(project_root=tmp_path, env={"STATIC_BUILD_TARGET": "x"})

    result = backend.build_release(matrix_entry(Platform.LINUX))

    assert isinstance(result, Err)
    assert result.error.platform == Platform.LINUX
    assert calls == [(["cargo", "build", "--release"], {"STATIC_BUILD_TARGET": "x"})]
