"""Exit codes for the relkit CLI.

The numeric values are process exit codes and should remain stable:
- 0: Success
- 1: User error (missing configuration, malformed version)
- 2: Environment error (missing tools, no prior release tag)
- 3: Build error (build or test step failed)
- 4: Network error (clone, push or release host failure)
- 5: I/O error (checkout cleanup, version file, template)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands."""

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    BUILD_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")
