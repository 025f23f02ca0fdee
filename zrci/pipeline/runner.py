"""Pipeline orchestration.

    trigger -> check (parallel per platform) -> [gate] ->
        release + package (parallel per platform) -> publish (once)

The gate fails closed: a red check on any platform means no release job is
scheduled on any platform. Release jobs are independent of each other, but
publishing requires all of them; a partial release is never published.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from zrci.core.config import Config
from zrci.core.result import Err, Ok, Result
from zrci.output.console import ConsoleProtocol
from zrci.pipeline.backend import BuildBackend
from zrci.pipeline.check_stage import CheckReport, release_gate, run_check_stage
from zrci.pipeline.errors import PipelineError
from zrci.pipeline.matrix import release_matrix, validate_matrix
from zrci.pipeline.model import MatrixEntry, ReleaseAsset, RunDecision
from zrci.pipeline.packager import STAGING_DIR, package_platform, stage_binary
from zrci.pipeline.publisher import PublishedRelease, publish
from zrci.pipeline.release_stage import build_release

__all__ = ["PipelineReport", "release_platform", "run_pipeline"]


@dataclass(frozen=True, slots=True)
class PipelineReport:
    decision: RunDecision
    checks: CheckReport | None = None
    gate_open: bool = False
    assets: tuple[ReleaseAsset, ...] = ()
    errors: tuple[PipelineError, ...] = ()
    published: PublishedRelease | None = None

    @property
    def ok(self) -> bool:
        return not self.errors


def release_platform(
    backend: BuildBackend,
    entry: MatrixEntry,
    *,
    project_root: Path,
    out_dir: Path,
    console: ConsoleProtocol,
    skip_shrink: bool = False,
) -> Result[ReleaseAsset, PipelineError]:
    """Release job of one platform: build, stage a private copy, shrink, package."""
    console.info(f"{entry.platform}: cargo build --release")
    built = build_release(backend, entry, project_root=project_root)
    if isinstance(built, Err):
        return built
    staged = stage_binary(entry, built.value, project_root / STAGING_DIR)
    if isinstance(staged, Err):
        return staged
    return package_platform(
        entry,
        staged.value,
        out_dir,
        console=console,
        skip_shrink=skip_shrink,
    )


def run_pipeline(
    decision: RunDecision,
    *,
    backend: BuildBackend,
    project_root: Path,
    config: Config,
    token: str | None,
    console: ConsoleProtocol,
    dry_run: bool = False,
    skip_shrink: bool = False,
) -> PipelineReport:
    """Run one pipeline execution for an already computed trigger decision."""
    matrix = validate_matrix(release_matrix())
    if isinstance(matrix, Err):
        return PipelineReport(decision=decision, errors=(matrix.error,))
    entries = matrix.value

    if not decision.run_check:
        console.info("event does not trigger verification")
        return PipelineReport(decision=decision)

    checks = run_check_stage(
        backend,
        [e.platform for e in entries],
        lint_platform=config.pipeline.lint_platform,
        console=console,
    )
    gate_open = release_gate(decision, checks)
    report = PipelineReport(decision=decision, checks=checks, errors=checks.errors)

    if not gate_open:
        if not decision.run_release:
            console.info("not a tag ref: no release")
        else:
            console.error("verification failed: release blocked on every platform")
        return report

    out_dir = project_root / config.pipeline.out_dir
    console.header(f"Release {decision.tag}")
    with ThreadPoolExecutor(max_workers=len(entries)) as pool:
        futures = [
            pool.submit(
                release_platform,
                backend,
                entry,
                project_root=project_root,
                out_dir=out_dir,
                console=console,
                skip_shrink=skip_shrink,
            )
            for entry in entries
        ]
        outcomes = [f.result() for f in futures]

    assets = tuple(o.value for o in outcomes if isinstance(o, Ok))
    errors = tuple(o.error for o in outcomes if isinstance(o, Err))
    if errors:
        console.error(f"{len(errors)} release job(s) failed: not publishing")
        return PipelineReport(
            decision=decision,
            checks=checks,
            gate_open=True,
            assets=assets,
            errors=errors,
        )

    # Gate open implies a tag.
    assert decision.tag is not None
    published = publish(
        tag=decision.tag,
        assets=assets,
        bench_archive=project_root / config.pipeline.bench_archive,
        token=token,
        project_root=project_root,
        console=console,
        repo=config.publish.repo,
        dry_run=dry_run,
    )
    if isinstance(published, Err):
        return PipelineReport(
            decision=decision,
            checks=checks,
            gate_open=True,
            assets=assets,
            errors=(published.error,),
        )

    return PipelineReport(
        decision=decision,
        checks=checks,
        gate_open=True,
        assets=assets,
        published=published.value,
    )
