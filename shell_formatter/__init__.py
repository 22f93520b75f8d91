"""
shell-formatter

A heuristic re-indenting formatter for shell scripts, Dockerfile RUN
instructions and shell blocks embedded in Markdown.
"""

__version__ = "1.0.0"
__author__ = "shell-formatter contributors"

from .core.formatter import ShellFormatter, FormatResult, FormatStatus, format_shell
from .core.dispatch import FormatKind, detect_kind, format_dispatch

__all__ = [
    'ShellFormatter',
    'FormatResult',
    'FormatStatus',
    'format_shell',
    'FormatKind',
    'detect_kind',
    'format_dispatch',
]
