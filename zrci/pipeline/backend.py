"""Build backend: the toolchain that compiles, tests and lints the binary.

The pipeline only ever calls three verbs. ``CargoBackend`` maps them to
cargo; ``MockBackend`` records calls and fails on demand for tests.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from zrci.core.result import Err, Ok, Result
from zrci.pipeline.errors import BuildFailed, VerifyFailed, VerifyStep
from zrci.pipeline.model import MatrixEntry
from zrci.platform.detection import Platform
from zrci.platform.process import ProcessError
from zrci.platform.process import run as run_process

__all__ = ["BuildBackend", "CargoBackend", "MockBackend"]

_DETAIL_LINES = 20


class BuildBackend(Protocol):
    def verify(self, platform: Platform) -> Result[None, VerifyFailed]:
        """Compile, then run the test suite. Stops at the first failure."""
        ...

    def lint(self, platform: Platform) -> Result[None, VerifyFailed]:
        """Run static analysis."""
        ...

    def build_release(self, entry: MatrixEntry) -> Result[None, BuildFailed]:
        """Produce a release-mode binary at ``entry.source_binary_path``."""
        ...


def _tail(error: ProcessError) -> str:
    text = error.stderr.strip() or error.stdout.strip()
    return "\n".join(text.splitlines()[-_DETAIL_LINES:])


class CargoBackend:
    """Drive cargo in the project root.

    ``env`` is layered over the process environment for every call; it
    carries the display flag and the static build target.
    """

    def __init__(self, *, project_root: Path, env: dict[str, str] | None = None) -> None:
        self._root = project_root
        self._env = dict(env or {})

    def _cargo(self, *args: str) -> Result[str, ProcessError]:
        return run_process(["cargo", *args], cwd=self._root, env=self._env)

    def _step(
        self, platform: Platform, step: VerifyStep, *args: str
    ) -> Result[None, VerifyFailed]:
        result = self._cargo(*args)
        if isinstance(result, Err):
            e = result.error
            return Err(VerifyFailed(platform, step, e.returncode, _tail(e)))
        return Ok(None)

    def verify(self, platform: Platform) -> Result[None, VerifyFailed]:
        compiled = self._step(platform, "compile", "check")
        if isinstance(compiled, Err):
            return compiled
        return self._step(platform, "test", "test")

    def lint(self, platform: Platform) -> Result[None, VerifyFailed]:
        return self._step(platform, "lint", "clippy")

    def build_release(self, entry: MatrixEntry) -> Result[None, BuildFailed]:
        result = self._cargo("build", "--release")
        if isinstance(result, Err):
            e = result.error
            return Err(BuildFailed(entry.platform, e.returncode, _tail(e)))
        return Ok(None)


def _empty_calls() -> list[tuple[str, Platform]]:
    return []


@dataclass
class MockBackend:
    """Backend that records calls instead of running a toolchain.

    ``fail`` maps a platform to the verify/lint step that should fail there;
    ``fail_build`` lists platforms whose release build fails. A successful
    ``build_release`` writes a placeholder binary under ``project_root``.
    """

    project_root: Path
    fail: dict[Platform, VerifyStep] = field(default_factory=dict)
    fail_build: frozenset[Platform] = frozenset()
    calls: list[tuple[str, Platform]] = field(default_factory=_empty_calls)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def _record(self, verb: str, platform: Platform) -> None:
        with self._lock:
            self.calls.append((verb, platform))

    def verify(self, platform: Platform) -> Result[None, VerifyFailed]:
        self._record("verify", platform)
        step = self.fail.get(platform)
        if step in ("compile", "test"):
            return Err(VerifyFailed(platform, step, 101))
        return Ok(None)

    def lint(self, platform: Platform) -> Result[None, VerifyFailed]:
        self._record("lint", platform)
        if self.fail.get(platform) == "lint":
            return Err(VerifyFailed(platform, "lint", 101))
        return Ok(None)

    def build_release(self, entry: MatrixEntry) -> Result[None, BuildFailed]:
        self._record("build_release", entry.platform)
        if entry.platform in self.fail_build:
            return Err(BuildFailed(entry.platform, 101))
        binary = self.project_root / entry.source_binary_path
        # Unix entries share one output path; write it once.
        with self._lock:
            if not binary.exists():
                binary.parent.mkdir(parents=True, exist_ok=True)
                binary.write_bytes(b"\x7fELF zr release build\n")
        return Ok(None)

    def verbs_for(self, platform: Platform) -> list[str]:
        return [verb for verb, p in self.calls if p == platform]
