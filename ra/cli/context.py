from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from ra.core.config import Config, load_config_or_default
from ra.core.errors import ErrorCode
from ra.core.result import Err
from ra.git.ci import parse_github_slug
from ra.git.repository import Repository
from ra.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    directory: Path
    config: Config
    repository: Repository
    console: ConsoleProtocol

    def project_name(self) -> str:
        """``github.com/owner/repo`` from the remote, else the directory name."""
        url = self.repository.remote_url()
        if not isinstance(url, Err):
            slug = parse_github_slug(url.value)
            if slug is not None:
                return f"github.com/{slug}"
        return self.directory.name


def build_context(directory: Path) -> CLIContext:
    try:
        root = directory.expanduser().resolve()
    except OSError as e:
        typer.echo(f"error: invalid directory: {e}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    if not root.is_dir():
        typer.echo(f"error: not a directory: {root}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    config_result = load_config_or_default(root)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))
    config = config_result.value

    return CLIContext(
        directory=root,
        config=config,
        repository=Repository(root, remote=config.release.remote),
        console=RichConsole(),
    )
