"""Checker capability and shared helpers for building checks."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from ra.validation.model import Check

__all__ = ["CheckOptions", "Checker", "check_id", "short_detail"]

_DETAIL_MAX = 40


@dataclass(frozen=True, slots=True)
class CheckOptions:
    """Inputs shared by every checker in a validation run.

    Attributes:
        version: Target release version, empty when not releasing
        verbose: Keep full command output in check details
    """

    version: str = ""
    verbose: bool = False


class Checker(Protocol):
    """Runs one group of checks for a directory.

    Must not raise for "no issues found": a passing area is a GO check, not
    an empty list. A missing external tool is reported as a NO-GO check.
    """

    def check(self, directory: Path, options: CheckOptions) -> list[Check]: ...


def check_id(name: str) -> str:
    """Turn a display name into a kebab-case id ("Go: unit tests" -> "unit-tests")."""
    _, sep, rest = name.partition(": ")
    base = rest if sep else name
    return re.sub(r"\s+", "-", base.strip()).lower()


def short_detail(output: str, *, verbose: bool = False) -> str:
    """First line of ``output``, truncated to fit a report row."""
    text = output.strip()
    if verbose:
        return text
    first = text.split("\n", 1)[0]
    if len(first) > _DETAIL_MAX:
        return first[: _DETAIL_MAX - 3] + "..."
    return first
