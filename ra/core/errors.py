"""Exit codes for CLI commands.

Each command maps its outcome onto one of these codes so scripts and CI jobs
can tell a blocked release apart from a broken environment.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes. Values are stable.

    - 0: Success (GO / WARN verdict, workflow completed)
    - 1: User error (bad arguments, missing directory)
    - 2: Environment error (git or gh unavailable)
    - 3: Validation failed (NO-GO verdict)
    - 4: Release failed (required workflow step failed, CI failed or timed out)
    - 5: Configuration error (invalid config file, dependency cycle)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    VALIDATION_FAILED = 3
    RELEASE_FAILED = 4
    CONFIG_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
