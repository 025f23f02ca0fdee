"""Verification stage: compile and test on every platform, lint on one.

Platforms run in parallel and share nothing. The aggregate result is the
barrier in front of release work: one red platform closes the gate for all.
"""

from __future__ import annotations

from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from zrci.core.result import Err
from zrci.output.console import ConsoleProtocol
from zrci.pipeline.backend import BuildBackend
from zrci.pipeline.errors import VerifyFailed
from zrci.pipeline.model import CheckResult, RunDecision
from zrci.platform.detection import Platform

__all__ = ["CheckReport", "check_platform", "release_gate", "run_check_stage"]


@dataclass(frozen=True, slots=True)
class CheckReport:
    platforms: tuple[Platform, ...]
    results: tuple[CheckResult, ...]
    errors: tuple[VerifyFailed, ...] = ()

    @property
    def ok(self) -> bool:
        """True iff every platform in the set reported success."""
        reported = {r.platform: r for r in self.results}
        return all(p in reported and reported[p].ok for p in self.platforms)

    def result_for(self, platform: Platform) -> CheckResult | None:
        for r in self.results:
            if r.platform == platform:
                return r
        return None


def check_platform(
    backend: BuildBackend,
    platform: Platform,
    *,
    lint_platform: Platform,
    console: ConsoleProtocol,
) -> tuple[CheckResult, VerifyFailed | None]:
    """Run verification for one platform.

    Lint runs only on ``lint_platform`` and only after verify passed.
    """
    verified = backend.verify(platform)
    if isinstance(verified, Err):
        error = verified.error
        console.error(f"{platform}: {error.step} failed")
        return (
            CheckResult(platform, compiled=error.step != "compile", tested=False),
            error,
        )

    if platform != lint_platform:
        console.success(f"{platform}: verified")
        return CheckResult(platform, compiled=True, tested=True), None

    linted = backend.lint(platform)
    if isinstance(linted, Err):
        console.error(f"{platform}: lint failed")
        return CheckResult(platform, compiled=True, tested=True, linted=False), linted.error

    console.success(f"{platform}: verified and linted")
    return CheckResult(platform, compiled=True, tested=True, linted=True), None


def run_check_stage(
    backend: BuildBackend,
    platforms: Sequence[Platform],
    *,
    lint_platform: Platform,
    console: ConsoleProtocol,
) -> CheckReport:
    """Verify every platform in parallel and join on all of them."""
    console.header("Check")
    with ThreadPoolExecutor(max_workers=max(1, len(platforms))) as pool:
        futures = [
            pool.submit(
                check_platform,
                backend,
                p,
                lint_platform=lint_platform,
                console=console,
            )
            for p in platforms
        ]
        outcomes = [f.result() for f in futures]

    return CheckReport(
        platforms=tuple(platforms),
        results=tuple(result for result, _ in outcomes),
        errors=tuple(error for _, error in outcomes if error is not None),
    )


def release_gate(decision: RunDecision, report: CheckReport | None) -> bool:
    """Tag trigger AND aggregate verification success."""
    return decision.run_release and report is not None and report.ok
