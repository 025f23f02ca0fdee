from __future__ import annotations

from pathlib import Path

from zrci.output.console import MockConsole
from zrci.pipeline.backend import MockBackend
from zrci.pipeline.check_stage import (
    CheckReport,
    check_platform,
    release_gate,
    run_check_stage,
)
from zrci.pipeline.model import CheckResult, RunDecision
from zrci.platform.detection import Platform

ALL = list(Platform)
TAG = RunDecision(run_check=True, run_release=True, tag="v1.2.0")
BRANCH = RunDecision(run_check=True, run_release=False)


def test_lint_only_on_designated_platform(tmp_path: Path) -> None:
    backend = MockBackend(project_root=tmp_path)

    report = run_check_stage(backend, ALL, lint_platform=Platform.LINUX, console=MockConsole())

    assert report.ok
    assert backend.verbs_for(Platform.LINUX) == ["verify", "lint"]
    assert backend.verbs_for(Platform.MACOS) == ["verify"]
    assert backend.verbs_for(Platform.WINDOWS) == ["verify"]
    linux = report.result_for(Platform.LINUX)
    macos = report.result_for(Platform.MACOS)
    assert linux is not None and linux.linted is True
    assert macos is not None and macos.linted is None


def test_results_follow_platform_order(tmp_path: Path) -> None:
    report = run_check_stage(
        MockBackend(project_root=tmp_path),
        ALL,
        lint_platform=Platform.LINUX,
        console=MockConsole(),
    )

    assert [r.platform for r in report.results] == ALL


def test_compile_failure_skips_remaining_steps(tmp_path: Path) -> None:
    backend = MockBackend(project_root=tmp_path, fail={Platform.LINUX: "compile"})

    result, error = check_platform(
        backend, Platform.LINUX, lint_platform=Platform.LINUX, console=MockConsole()
    )

    assert result == CheckResult(Platform.LINUX, compiled=False, tested=False)
    assert error is not None and error.step == "compile"
    assert backend.verbs_for(Platform.LINUX) == ["verify"]


def test_test_failure_marks_compiled(tmp_path: Path) -> None:
    backend = MockBackend(project_root=tmp_path, fail={Platform.MACOS: "test"})

    result, _ = check_platform(
        backend, Platform.MACOS, lint_platform=Platform.LINUX, console=MockConsole()
    )

    assert result.compiled
    assert not result.tested
    assert not result.ok


def test_lint_failure_fails_aggregate(tmp_path: Path) -> None:
    backend = MockBackend(project_root=tmp_path, fail={Platform.LINUX: "lint"})
    console = MockConsole()

    report = run_check_stage(backend, ALL, lint_platform=Platform.LINUX, console=console)

    assert not report.ok
    assert [e.step for e in report.errors] == ["lint"]
    assert console.find("linux: lint failed")


def test_one_red_platform_closes_gate_for_all(tmp_path: Path) -> None:
    backend = MockBackend(project_root=tmp_path, fail={Platform.WINDOWS: "test"})

    report = run_check_stage(backend, ALL, lint_platform=Platform.LINUX, console=MockConsole())

    linux = report.result_for(Platform.LINUX)
    assert linux is not None and linux.ok
    assert not report.ok
    assert not release_gate(TAG, report)


def test_missing_platform_result_is_failure() -> None:
    report = CheckReport(
        platforms=(Platform.LINUX, Platform.MACOS),
        results=(CheckResult(Platform.LINUX, True, True, True),),
    )
    assert not report.ok


def test_release_gate() -> None:
    green = CheckReport(
        platforms=(Platform.LINUX,),
        results=(CheckResult(Platform.LINUX, True, True, True),),
    )

    assert release_gate(TAG, green)
    assert not release_gate(BRANCH, green)
    assert not release_gate(TAG, None)
