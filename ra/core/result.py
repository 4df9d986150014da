"""Ok/Err values for operations that can fail.

Git calls, CI queries, check commands and workflow step actions all return
``Result`` values. Failure is data here: the workflow engine records an
``Err`` on the step result and decides whether to go on, so nothing along
that path raises for an expected failure.

    match repository.push_tag(tag):
        case Ok(_):
            ctx.log(f"  Pushed tag: {tag}")
        case Err(e):
            return Err(StepError(kind="git", message=e.message))
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

__all__ = ["Err", "Ok", "Result"]


@dataclass(frozen=True, slots=True)
class Ok[T]:
    value: T

    def map[U](self, f: Callable[[T], U]) -> Ok[U]:
        """Apply ``f`` to the value."""
        return Ok(f(self.value))


@dataclass(frozen=True, slots=True)
class Err[E]:
    error: E

    def map[U](self, f: Callable[[object], U]) -> Err[E]:
        del f
        return self


type Result[T, E] = Ok[T] | Err[E]
