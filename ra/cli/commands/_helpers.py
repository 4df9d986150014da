"""Shared helpers for CLI commands."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, NoReturn

import typer

from ra.core.errors import ErrorCode
from ra.output.console import Style

if TYPE_CHECKING:
    from ra.cli.context import CLIContext


def fail(ctx: CLIContext, message: str, *, code: ErrorCode, hint: str | None = None) -> NoReturn:
    """Print an error (and optional hint) and exit with ``code``."""
    ctx.console.error(message)
    if hint:
        ctx.console.print(f"hint: {hint}", Style.DIM)
    raise typer.Exit(code=int(code))


def echo_json(data: object) -> None:
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))


def exit_with_code(code: ErrorCode) -> None:
    """Exit unless ``code`` is success."""
    if not code.is_success:
        raise typer.Exit(code=int(code))
