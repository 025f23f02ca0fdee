"""Target platforms of the release matrix.

The set is closed: every release carries exactly one archive per member.
"""

from __future__ import annotations

import sys as _sys
from enum import Enum
from functools import lru_cache

__all__ = ["Platform", "detect_platform"]


class Platform(Enum):
    """Operating system a CI job runs on."""

    LINUX = "linux"
    MACOS = "macos"
    WINDOWS = "windows"

    def __str__(self) -> str:
        return self.value

    @property
    def is_unix(self) -> bool:
        """Check if this is a Unix-like platform (Linux or macOS)."""
        return self in (Platform.LINUX, Platform.MACOS)

    @property
    def exe_suffix(self) -> str:
        return ".exe" if self == Platform.WINDOWS else ""

    def exe_name(self, name: str) -> str:
        """Get executable name with platform-appropriate suffix.

        Example: exe_name("zr") -> "zr.exe" on Windows, "zr" elsewhere.
        """
        return f"{name}{self.exe_suffix}"

    @property
    def runner_label(self) -> str:
        """GitHub Actions runner image for this platform."""
        return {
            Platform.LINUX: "ubuntu-latest",
            Platform.MACOS: "macos-latest",
            Platform.WINDOWS: "windows-latest",
        }[self]

    @classmethod
    def parse(cls, value: str) -> Platform:
        """Parse a platform name ("linux") or runner label ("ubuntu-latest").

        Raises:
            ValueError: If the value names no known platform.
        """
        key = value.strip().lower()
        for p in cls:
            if key in (p.value, p.name.lower(), p.runner_label):
                return p
        raise ValueError(f"unknown platform: {value!r}")


@lru_cache(maxsize=1)
def detect_platform() -> Platform | None:
    """Detect the host platform (cached). None when it is not in the matrix."""
    # NOTE: avoid platform.system() on Windows (may query WMI).
    system = _sys.platform.lower()
    if system.startswith("linux"):
        return Platform.LINUX
    if system.startswith("darwin"):
        return Platform.MACOS
    if system.startswith(("win32", "cygwin", "msys")):
        return Platform.WINDOWS
    return None
