from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from zrci.platform.detection import Platform

VerifyStep = Literal["compile", "test", "lint"]
PackagingStep = Literal["stage", "strip", "upx", "archive"]
PublishErrorKind = Literal["credential_missing", "missing_asset", "auth", "upload"]


@dataclass(frozen=True, slots=True)
class VerifyFailed:
    platform: Platform
    step: VerifyStep
    returncode: int
    detail: str = ""


@dataclass(frozen=True, slots=True)
class BuildFailed:
    platform: Platform
    returncode: int
    detail: str = ""


@dataclass(frozen=True, slots=True)
class OutputMissing:
    platform: Platform
    path: Path


@dataclass(frozen=True, slots=True)
class PackagingFailed:
    platform: Platform
    step: PackagingStep
    message: str


@dataclass(frozen=True, slots=True)
class PublishFailed:
    kind: PublishErrorKind
    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class MatrixInvalid:
    message: str


PipelineError = (
    VerifyFailed | BuildFailed | OutputMissing | PackagingFailed | PublishFailed | MatrixInvalid
)
