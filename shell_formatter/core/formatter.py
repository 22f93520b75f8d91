"""
Shell Formatter Module

This module drives the heuristic shell formatter. It walks the input line
by line, collapses runs of blank lines, asks the indentation tracker for
each line's level, normalizes the code part and re-attaches comments.
The assembled buffer is compared with the input so callers can tell an
already-formatted script from a rewritten one.
"""

import logging
import shlex
from enum import Enum
from typing import Iterator, List, Optional, Union

from .indenter import IndentationTracker
from .normalizer import TokenNormalizer, collapse_split_comparisons
from .splitter import split_comment

logger = logging.getLogger(__name__)


class FormatStatus(Enum):
    """Outcome of a format call."""
    UNCHANGED = "unchanged"
    REWRITTEN = "rewritten"
    FAILED = "failed"


class FormatResult:
    """Result of a formatting operation."""

    def __init__(self, status: FormatStatus, text: Optional[str] = None, message: str = ""):
        self.status = status
        self.text = text
        self.message = message

    @classmethod
    def unchanged(cls) -> 'FormatResult':
        return cls(FormatStatus.UNCHANGED)

    @classmethod
    def rewritten(cls, text: str) -> 'FormatResult':
        return cls(FormatStatus.REWRITTEN, text)

    @classmethod
    def failure(cls, message: str) -> 'FormatResult':
        return cls(FormatStatus.FAILED, message=message)

    @property
    def changed(self) -> bool:
        return self.status == FormatStatus.REWRITTEN

    @property
    def success(self) -> bool:
        return self.status != FormatStatus.FAILED

    def text_or(self, original: str) -> str:
        """Return the rewritten text, or ``original`` when nothing changed."""
        return self.text if self.changed else original

    def __repr__(self):
        return f"FormatResult(status={self.status.value}, message='{self.message}')"


def physical_lines(text: str) -> Iterator[str]:
    """Yield the lines of ``text`` without their terminators."""
    lines = text.split('\n')
    if lines and lines[-1] == '':
        lines.pop()
    for line in lines:
        yield line[:-1] if line.endswith('\r') else line


def ensure_single_newline(text: str) -> str:
    """Make ``text`` end with exactly one newline."""
    return text.rstrip('\n') + '\n'


class ShellFormatter:
    """
    Heuristic re-indenting formatter for shell scripts.

    This class provides:
    - Collapsing of consecutive blank lines
    - Re-indentation of if/for/while/until/select/case blocks and functions
    - Operator, redirect and keyword spacing
    - Preservation of trailing comments
    """

    def __init__(self, indent_width: int = 2):
        """
        Initialize the shell formatter.

        Args:
            indent_width: Number of spaces per indentation level
        """
        self.indent_width = indent_width
        self.normalizer = TokenNormalizer()

    def check_structure(self, text: str) -> bool:
        """
        Best-effort structural check of a script.

        Only used for diagnostics: the result never changes the output.

        Returns:
            True if the script tokenizes cleanly
        """
        try:
            shlex.split(text, comments=True)
        except ValueError as e:
            logger.debug(f"Structural check failed, formatting heuristically: {e}")
            return False
        return True

    def _indent(self, level: int) -> str:
        return ' ' * (level * self.indent_width)

    def format_line(self, trimmed: str, level: int) -> str:
        """
        Render one non-blank line at the given indent level.

        Args:
            trimmed: Line with surrounding whitespace removed
            level: Indentation level

        Returns:
            The formatted line without a newline
        """
        code, comment = split_comment(trimmed)
        code = self.normalizer.normalize(code)
        indent = self._indent(level)

        if not code and comment is not None:
            return f"{indent}{comment}"
        if comment is not None:
            return f"{indent}{code}  {comment}"
        return f"{indent}{code}"

    def format_text(self, text: str) -> str:
        """
        Format a script and return the new buffer, changed or not.

        Args:
            text: Shell script source

        Returns:
            Formatted script ending with exactly one newline
        """
        tracker = IndentationTracker()
        out: List[str] = []
        last_blank = False

        for raw in physical_lines(text):
            line = raw.rstrip()
            trimmed = line.lstrip()

            if not trimmed:
                if not last_blank:
                    out.append('')
                last_blank = True
                continue
            last_blank = False

            level = tracker.indent_for(trimmed)
            out.append(self.format_line(trimmed, level))
            tracker.advance(trimmed)

        ctx = tracker.context
        if ctx.indent or ctx.case_stack:
            logger.debug(f"Unbalanced script: indent={ctx.indent}, open case blocks={len(ctx.case_stack)}")

        result = ''.join(f"{line}\n" for line in out)
        result = collapse_split_comparisons(result)
        return ensure_single_newline(result)

    def format(self, path_hint: str, text: Union[str, bytes]) -> FormatResult:
        """
        Format a shell script.

        Args:
            path_hint: Name of the file being formatted, used for logging only
            text: Script source as text, or UTF-8 encoded bytes

        Returns:
            FormatResult that is unchanged, rewritten, or failed when
            bytes cannot be decoded
        """
        if isinstance(text, bytes):
            try:
                text = text.decode('utf-8')
            except UnicodeDecodeError as e:
                return FormatResult.failure(f"{path_hint}: not valid UTF-8 ({e})")

        if not text:
            return FormatResult.unchanged()

        self.check_structure(text)
        formatted = self.format_text(text)

        if formatted == text:
            logger.debug(f"{path_hint}: already formatted")
            return FormatResult.unchanged()

        logger.debug(f"{path_hint}: rewritten")
        return FormatResult.rewritten(formatted)


def format_shell(path_hint: str, text: Union[str, bytes]) -> FormatResult:
    """Format a shell script with the default settings."""
    return ShellFormatter().format(path_hint, text)
