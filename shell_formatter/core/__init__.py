"""
Core modules for splitting, normalizing, indenting and dispatching.
"""

from .formatter import ShellFormatter, FormatResult, FormatStatus, format_shell
from .dispatch import FormatKind, detect_kind, detect_kind_from_label, format_dispatch
from .scanner import FileScanner
from .aggregator import RunAggregator

__all__ = [
    'ShellFormatter',
    'FormatResult',
    'FormatStatus',
    'format_shell',
    'FormatKind',
    'detect_kind',
    'detect_kind_from_label',
    'format_dispatch',
    'FileScanner',
    'RunAggregator',
]
