"""
Kind Dispatch Module

Maps file names and fenced-code labels to a file kind and routes text to
the formatter for that kind.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from .dockerfile import DockerfileFormatter
from .formatter import FormatResult, ShellFormatter
from .markdown import MarkdownFormatter

logger = logging.getLogger(__name__)


class FormatKind(Enum):
    """Kinds of files the formatter understands."""
    SHELL = "shell"
    DOCKERFILE = "dockerfile"
    MARKDOWN = "markdown"


class FormatterError(Exception):
    """Base class for formatter usage errors."""


class UnsupportedKindError(FormatterError):
    """Raised when asked to format a kind with no formatter."""


EXTENSION_KINDS = {
    'sh': FormatKind.SHELL,
    'bash': FormatKind.SHELL,
    'dockerfile': FormatKind.DOCKERFILE,
    'md': FormatKind.MARKDOWN,
    'markdown': FormatKind.MARKDOWN,
}

LABEL_KINDS = {
    'bash': FormatKind.SHELL,
    'sh': FormatKind.SHELL,
    'shell': FormatKind.SHELL,
    'docker': FormatKind.DOCKERFILE,
    'dockerfile': FormatKind.DOCKERFILE,
    'md': FormatKind.MARKDOWN,
    'markdown': FormatKind.MARKDOWN,
}

FAKE_PATHS = {
    FormatKind.SHELL: 'code.sh',
    FormatKind.DOCKERFILE: 'Dockerfile',
    FormatKind.MARKDOWN: 'code.md',
}


def detect_kind(path: Union[str, Path]) -> Optional[FormatKind]:
    """
    Detect the kind of a file from its name.

    Args:
        path: File path

    Returns:
        FormatKind, or None for unsupported files
    """
    path = Path(path)
    if path.name.lower() == 'dockerfile':
        return FormatKind.DOCKERFILE
    return EXTENSION_KINDS.get(path.suffix.lower().lstrip('.'))


def detect_kind_from_label(label: str) -> Optional[FormatKind]:
    """Detect a kind from a fenced-code language label or a CLI kind name."""
    return LABEL_KINDS.get(label.strip().lower())


def fake_path_for_kind(kind: FormatKind) -> str:
    """Synthetic file name used when formatting an embedded fragment."""
    return FAKE_PATHS[kind]


def format_code_block(label: str, code: str) -> FormatResult:
    """Format the content of a fenced code block labelled ``label``."""
    kind = detect_kind_from_label(label)
    if kind is None or kind == FormatKind.MARKDOWN:
        return FormatResult.unchanged()
    return format_dispatch(kind, fake_path_for_kind(kind), code)


_shell_formatter = ShellFormatter()
_FORMATTERS = {
    FormatKind.SHELL: _shell_formatter,
    FormatKind.DOCKERFILE: DockerfileFormatter(_shell_formatter),
    FormatKind.MARKDOWN: MarkdownFormatter(format_code_block),
}


def format_dispatch(kind: FormatKind, path: Union[str, Path], text: str) -> FormatResult:
    """
    Format ``text`` with the formatter registered for ``kind``.

    Args:
        kind: Kind of the content
        path: File name hint passed on to the formatter
        text: Content to format

    Returns:
        FormatResult

    Raises:
        UnsupportedKindError: If no formatter handles ``kind``
    """
    formatter = _FORMATTERS.get(kind)
    if formatter is None:
        raise UnsupportedKindError(f"No formatter for kind: {kind}")

    logger.debug(f"Dispatching {path} as {kind.value}")
    return formatter.format(str(path), text)
