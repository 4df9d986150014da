"""Run external tools (git, gh, configured check commands).

``run`` never raises for a command that fails or cannot start. A missing
executable comes back as return code 127 so checkers can report
"<tool>: not found" instead of treating it as a skipped check.
"""

from __future__ import annotations

import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

from ra.core.result import Err, Ok, Result

__all__ = ["NOT_FOUND_RETURNCODE", "ProcessError", "run", "which"]

NOT_FOUND_RETURNCODE = 127
TIMEOUT_RETURNCODE = -1


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A command that exited non-zero, timed out or never started.

    Attributes:
        command: argv as executed
        returncode: exit status; 127 when the executable is missing, -1 on
            timeout or another OS error
        stdout: captured standard output
        stderr: captured standard error, or why the command did not run
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def not_found(self) -> bool:
        return self.returncode == NOT_FOUND_RETURNCODE and not self.stdout

    @property
    def output(self) -> str:
        """Non-empty stdout and stderr, stripped and joined."""
        return "\n".join(p.strip() for p in (self.stdout, self.stderr) if p.strip())

    def __str__(self) -> str:
        shown = " ".join(self.command[:3])
        if len(self.command) > 3:
            shown = f"{shown} ..."
        return f"{shown} failed (exit {self.returncode})"


def which(executable: str) -> str | None:
    return shutil.which(executable)


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Run ``cmd`` in ``cwd`` and capture its output as text.

    ``env`` holds extra variables layered over the current environment.
    Returns ``Ok(stdout)`` on exit status 0.
    """
    full_env = {**os.environ, **env} if env else None

    def error(returncode: int, stdout: str = "", stderr: str = "") -> Err[ProcessError]:
        return Err(ProcessError(tuple(cmd), returncode, stdout, stderr))

    # FileNotFoundError does not say whether cwd or the executable is missing.
    if not cwd.is_dir():
        return error(-1, stderr=f"{cwd}: no such directory")

    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=full_env,
            capture_output=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        return error(TIMEOUT_RETURNCODE, _text(e.stdout), f"timed out after {timeout:g}s")
    except FileNotFoundError:
        return error(NOT_FOUND_RETURNCODE, stderr=f"{cmd[0]}: not found")
    except OSError as e:
        return error(-1, stderr=str(e))

    if proc.returncode != 0:
        return error(proc.returncode, proc.stdout, proc.stderr)
    return Ok(proc.stdout)


def _text(output: str | bytes | None) -> str:
    # TimeoutExpired keeps raw bytes even when the run decodes its output.
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output or ""
