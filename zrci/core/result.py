"""Result type for explicit error handling.

Pipeline stages never raise for expected failures (a failed cargo step, a
missing upx, a rejected upload). They return ``Ok(value)`` or ``Err(error)``
and the caller decides what a failure means for the rest of the run.

Usage:
    match build_release(backend, entry):
        case Ok(path):
            console.success(f"built {path}")
        case Err(error):
            print_pipeline_error(error, console)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result carrying a value."""

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failed result carrying an error value."""

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result: TypeAlias = Ok[T] | Err[E]
