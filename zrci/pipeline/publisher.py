"""Attach release archives to the GitHub release of a tag.

All files go up in a single gh call. Existing assets are never replaced, so
re-running a release for the same tag fails on the duplicate names instead
of silently overwriting them.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from zrci.core.result import Err, Ok, Result
from zrci.output.console import ConsoleProtocol, Style
from zrci.pipeline.errors import PublishFailed
from zrci.pipeline.model import MatrixEntry, ReleaseAsset
from zrci.pipeline.packager import describe_asset
from zrci.platform.process import run as run_process

__all__ = ["PublishedRelease", "collect_assets", "publish", "release_files"]


@dataclass(frozen=True, slots=True)
class PublishedRelease:
    tag: str
    files: tuple[Path, ...]
    created: bool


def release_files(assets: Sequence[ReleaseAsset], bench_archive: Path) -> tuple[Path, ...]:
    """Files attached to a release: platform archives then the benchmark archive."""
    return (*(a.path for a in assets), bench_archive)


def collect_assets(
    entries: Sequence[MatrixEntry], out_dir: Path
) -> Result[tuple[ReleaseAsset, ...], PublishFailed]:
    """Find the archive of every entry in out_dir by its canonical name."""
    missing = [e.archive_name for e in entries if not (out_dir / e.archive_name).is_file()]
    if missing:
        return Err(
            PublishFailed(
                "missing_asset",
                f"archives missing from {out_dir}: {', '.join(missing)}",
                hint="Every platform release job must finish before publishing",
            )
        )
    try:
        return Ok(tuple(describe_asset(e.archive_name, out_dir / e.archive_name) for e in entries))
    except OSError as e:
        return Err(PublishFailed("missing_asset", f"cannot read archive: {e}"))


def _repo_args(repo: str | None) -> list[str]:
    return ["--repo", repo] if repo else []


def _release_exists(
    *,
    tag: str,
    repo: str | None,
    project_root: Path,
    env: dict[str, str],
) -> Result[bool, PublishFailed]:
    cmd = ["gh", "release", "view", tag, "--json", "tagName", *_repo_args(repo)]
    result = run_process(cmd, cwd=project_root, env=env)
    if isinstance(result, Ok):
        return Ok(True)
    stderr = result.error.stderr.strip()
    if "not found" in stderr.lower():
        return Ok(False)
    return Err(PublishFailed("upload", f"failed to query release {tag}", hint=stderr or None))


def publish(
    *,
    tag: str,
    assets: Sequence[ReleaseAsset],
    bench_archive: Path,
    token: str | None,
    project_root: Path,
    console: ConsoleProtocol,
    repo: str | None = None,
    dry_run: bool = False,
) -> Result[PublishedRelease, PublishFailed]:
    """Authenticate with ``token`` and attach every archive to the ``tag`` release.

    The release record is created when it does not exist yet.
    """
    console.header(f"Publish {tag}")
    if not token:
        return Err(
            PublishFailed(
                "credential_missing",
                "release credential is not set",
                hint="Export GITHUB_TOKEN (or the variable named by publish.token_env)",
            )
        )

    files = release_files(assets, bench_archive)
    missing = [str(f) for f in files if not f.is_file()]
    if missing:
        return Err(PublishFailed("missing_asset", f"release files missing: {', '.join(missing)}"))

    if dry_run:
        for f in files:
            console.print(f"would attach {f}", Style.DIM)
        return Ok(PublishedRelease(tag=tag, files=files, created=False))

    env = {"GH_TOKEN": token}
    auth = run_process(["gh", "auth", "status"], cwd=project_root, env=env)
    if isinstance(auth, Err):
        return Err(
            PublishFailed(
                "auth",
                "gh rejected the release credential",
                hint=auth.error.stderr.strip() or None,
            )
        )

    exists = _release_exists(tag=tag, repo=repo, project_root=project_root, env=env)
    if isinstance(exists, Err):
        return exists

    paths = [str(f) for f in files]
    if exists.value:
        cmd = ["gh", "release", "upload", tag, *paths, *_repo_args(repo)]
    else:
        cmd = [
            "gh",
            "release",
            "create",
            tag,
            *paths,
            "--title",
            tag,
            "--notes",
            "",
            "--verify-tag",
            *_repo_args(repo),
        ]

    console.print(" ".join(cmd[:4]) + " ...", Style.DIM)
    result = run_process(cmd, cwd=project_root, env=env)
    if isinstance(result, Err):
        return Err(
            PublishFailed(
                "upload",
                f"failed to attach assets to release {tag}",
                hint=result.error.stderr.strip() or None,
            )
        )

    for f in files:
        console.success(f"attached {f.name}")
    return Ok(PublishedRelease(tag=tag, files=files, created=not exists.value))
