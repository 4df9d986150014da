"""Checks backed by configured external commands.

Only the exit status and output of the command are interpreted; the build,
test or lint work itself is the tool's business.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from ra.checks.base import CheckOptions, check_id, short_detail
from ra.core.config import CommandSpec
from ra.core.result import Err, Ok
from ra.platform.process import run as run_process
from ra.validation.model import Check

_COMMAND_TIMEOUT_SECONDS = 30 * 60.0


@dataclass(frozen=True, slots=True)
class CommandChecker:
    """Run each command in the directory and turn its exit status into a check.

    - exit 0: GO
    - non-zero: NO-GO, or WARN for ``warn_only`` commands
    - executable missing: NO-GO with "<tool>: not found", never SKIP
    """

    commands: Sequence[CommandSpec]
    timeout: float = _COMMAND_TIMEOUT_SECONDS

    def check(self, directory: Path, options: CheckOptions) -> list[Check]:
        return [self._run(spec, directory, options) for spec in self.commands]

    def _run(self, spec: CommandSpec, directory: Path, options: CheckOptions) -> Check:
        cid = check_id(spec.id)
        result = run_process(list(spec.argv), cwd=directory, timeout=self.timeout)
        match result:
            case Ok(stdout):
                return Check.go(cid, short_detail(stdout, verbose=options.verbose))
            case Err(e) if e.not_found:
                return Check.no_go(cid, f"{spec.argv[0]}: not found")
            case Err(e):
                detail = short_detail(e.output, verbose=options.verbose) or f"exit {e.returncode}"
                if spec.warn_only:
                    return Check.warn(cid, detail)
                return Check.no_go(cid, detail)
