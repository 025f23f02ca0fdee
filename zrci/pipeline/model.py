"""Data model shared by the pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from zrci.platform.detection import Platform

__all__ = [
    "ArchiveFormat",
    "CheckResult",
    "EventKind",
    "MatrixEntry",
    "Platform",
    "ReleaseAsset",
    "RunDecision",
]


class EventKind(Enum):
    """Kind of event that triggered a pipeline run."""

    PUSH = "push"
    PULL_REQUEST = "pull_request"
    TAG_PUSH = "tag_push"
    OTHER = "other"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str) -> EventKind:
        """Parse a CLI value or a GitHub ``event_name``.

        Unknown names (``workflow_dispatch``, ``schedule``...) map to OTHER.
        """
        key = value.strip().lower().replace("-", "_")
        aliases = {
            "push": cls.PUSH,
            "pull_request": cls.PULL_REQUEST,
            "pr": cls.PULL_REQUEST,
            "tag": cls.TAG_PUSH,
            "tag_push": cls.TAG_PUSH,
        }
        return aliases.get(key, cls.OTHER)


class ArchiveFormat(Enum):
    """Archive container for a release binary."""

    TAR_GZ = ".tar.gz"
    ZIP = ".zip"

    @property
    def suffix(self) -> str:
        return self.value

    @classmethod
    def for_platform(cls, platform: Platform) -> ArchiveFormat:
        return cls.TAR_GZ if platform.is_unix else cls.ZIP


@dataclass(frozen=True, slots=True)
class MatrixEntry:
    """Release configuration of one target platform.

    Attributes:
        platform: Target platform (one entry per platform).
        binary_name: Executable file name, also its name inside the archive.
        source_binary_path: Release binary location, relative to the project root.
        archive_name: Archive file name (unique within a release).
        compression_args: upx arguments, e.g. "--best --lzma".
        strip_symbols: Strip debug/symbol info before compressing.
        archive_format: tar.gz for unix platforms, zip for windows.
    """

    platform: Platform
    binary_name: str
    source_binary_path: Path
    archive_name: str
    compression_args: str
    strip_symbols: bool
    archive_format: ArchiveFormat


@dataclass(frozen=True, slots=True)
class CheckResult:
    """Verification outcome of one platform.

    ``linted`` is None on platforms where lint never runs.
    """

    platform: Platform
    compiled: bool
    tested: bool
    linted: bool | None = None

    @property
    def ok(self) -> bool:
        return self.compiled and self.tested and self.linted is not False


@dataclass(frozen=True, slots=True)
class RunDecision:
    """What a trigger asks for.

    ``run_release`` is only a candidate: release work additionally needs every
    platform to pass verification.
    """

    run_check: bool
    run_release: bool
    tag: str | None = None


@dataclass(frozen=True, slots=True)
class ReleaseAsset:
    """A packaged archive ready for upload. Lives for one run."""

    name: str
    path: Path
    size: int
    sha256: str
