"""
Markdown Module

Finds fenced code blocks in a Markdown document and hands their content
to a code formatter chosen by the block's language label. Text outside
fenced blocks is not touched.
"""

import logging
import re
from typing import Callable, List

from .formatter import FormatResult, ensure_single_newline

logger = logging.getLogger(__name__)

_FENCE_OPEN = re.compile(r'^(?P<indent>[ \t]*)(?P<fence>`{3,}|~{3,})(?P<info>.*)$')

CodeFormatter = Callable[[str, str], FormatResult]


class MarkdownFormatter:
    """
    Formatter for fenced code blocks inside Markdown.

    The code formatter is called with the block's language label and its
    content, and returns a FormatResult for the content.
    """

    def __init__(self, code_formatter: CodeFormatter):
        self.code_formatter = code_formatter

    @staticmethod
    def _closes(line: str, fence: str) -> bool:
        stripped = line.strip()
        return (len(stripped) >= len(fence)
                and set(stripped) == {fence[0]})

    @staticmethod
    def _dedent_block(indent: str, body: List[str]) -> str:
        """Strip the fence's indentation from the block body."""
        return ''.join(f"{line[len(indent):] if line.startswith(indent) else line.lstrip()}\n"
                       for line in body)

    @staticmethod
    def _indent_block(indent: str, text: str) -> List[str]:
        return [f"{indent}{line}" if line else line
                for line in text.rstrip('\n').split('\n')]

    def format(self, path_hint: str, text: str) -> FormatResult:
        """
        Format every labelled fenced block of a Markdown document.

        Args:
            path_hint: Name of the document, used for messages only
            text: Markdown content

        Returns:
            FormatResult; failed if an embedded block could not be formatted
        """
        lines = text.split('\n')
        out: List[str] = []
        i = 0

        while i < len(lines):
            match = _FENCE_OPEN.match(lines[i])
            if not match:
                out.append(lines[i])
                i += 1
                continue

            fence = match.group('fence')
            info = match.group('info').strip()
            # Backtick fences may not carry backticks in their info string.
            if fence[0] == '`' and '`' in info:
                out.append(lines[i])
                i += 1
                continue

            end = i + 1
            while end < len(lines) and not self._closes(lines[end], fence):
                end += 1
            if end >= len(lines):
                out.extend(lines[i:])
                break

            body = lines[i + 1:end]
            label = info.split()[0] if info else ''
            if label and body:
                indent = match.group('indent')
                result = self.code_formatter(label, self._dedent_block(indent, body))
                if not result.success:
                    return FormatResult.failure(f"{path_hint}:{i + 1}: {result.message}")
                if result.changed:
                    logger.debug(f"{path_hint}:{i + 1}: rewrote fenced {label} block")
                    body = self._indent_block(indent, result.text)

            out.append(lines[i])
            out.extend(body)
            out.append(lines[end])
            i = end + 1

        content = '\n'.join(out)
        if content == text:
            return FormatResult.unchanged()
        return FormatResult.rewritten(ensure_single_newline(content))
