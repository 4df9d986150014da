"""Process execution helpers."""

from .process import ProcessError, run, which

__all__ = ["ProcessError", "run", "which"]
