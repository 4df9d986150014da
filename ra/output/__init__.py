"""Output abstraction layer."""

from .console import (
    ConsoleProtocol,
    MockConsole,
    RichConsole,
    Style,
)
from .report import format_team, print_report, print_workflow_result, style_for_status

__all__ = [
    "ConsoleProtocol",
    "MockConsole",
    "RichConsole",
    "Style",
    "format_team",
    "print_report",
    "print_workflow_result",
    "style_for_status",
]
