"""Release pipeline: trigger gate, check stage, release stage, packaging, publishing."""

from .backend import BuildBackend, CargoBackend, MockBackend
from .check_stage import CheckReport, release_gate, run_check_stage
from .matrix import RELEASE_MATRIX, matrix_entry, release_matrix, validate_matrix
from .model import ArchiveFormat, CheckResult, EventKind, MatrixEntry, ReleaseAsset, RunDecision
from .runner import PipelineReport, run_pipeline
from .trigger import decide, trigger_from_env

__all__ = [
    "ArchiveFormat",
    "BuildBackend",
    "CargoBackend",
    "CheckReport",
    "CheckResult",
    "EventKind",
    "MatrixEntry",
    "MockBackend",
    "PipelineReport",
    "RELEASE_MATRIX",
    "ReleaseAsset",
    "RunDecision",
    "decide",
    "matrix_entry",
    "release_gate",
    "release_matrix",
    "run_check_stage",
    "run_pipeline",
    "trigger_from_env",
    "validate_matrix",
]
