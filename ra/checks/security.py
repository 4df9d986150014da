"""Security and compliance checks."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ra.checks.base import CheckOptions
from ra.validation.model import Check

_LICENSE_NAMES = ("LICENSE", "LICENSE.md", "LICENSE.txt", "COPYING")


@dataclass(frozen=True, slots=True)
class SecurityChecker:
    """License presence. Vulnerability scanners are configured as area commands."""

    def check(self, directory: Path, options: CheckOptions) -> list[Check]:
        del options
        for name in _LICENSE_NAMES:
            if (directory / name).is_file():
                return [Check.go("license", name)]
        return [Check.no_go("license", "LICENSE missing")]
