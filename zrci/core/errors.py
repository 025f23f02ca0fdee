"""Exit codes for the zrci command line.

Each pipeline failure category maps to its own exit code so a CI log (or a
wrapping script) can tell a red test run from a failed upload without
parsing output.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes. Values are stable.

    - 0: Success
    - 1: User error (bad option, unknown platform)
    - 2: Environment error (no project root, invalid config)
    - 3: Verification failure (compile, test or lint)
    - 4: Release build failure
    - 5: Packaging failure (strip, upx, archiver)
    - 6: Publish failure (credential, auth, upload)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    CHECK_ERROR = 3
    BUILD_ERROR = 4
    PACKAGE_ERROR = 5
    PUBLISH_ERROR = 6

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")
