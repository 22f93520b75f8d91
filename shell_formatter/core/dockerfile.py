"""
Dockerfile Module

Re-formats the shell fragments of ``RUN`` instructions with the shell
formatter. Everything outside ``RUN`` instructions is left as written.
"""

import logging
from typing import List, Optional

from .formatter import FormatResult, ShellFormatter, ensure_single_newline

logger = logging.getLogger(__name__)

RUN_PREFIX = "RUN "
FRAGMENT_PATH = "inline.sh"
CONTINUATION_INDENT = "  "


class DockerfileFormatter:
    """Formatter for the ``RUN`` fragments of a Dockerfile."""

    def __init__(self, shell_formatter: Optional[ShellFormatter] = None):
        self.shell_formatter = shell_formatter or ShellFormatter()

    def _collect_fragment(self, first: str, lines: List[str], start: int):
        """
        Gather a RUN instruction and its continuation lines.

        Returns:
            Tuple of (fragment lines, index of the first line after the instruction)
        """
        collected = [first[len(RUN_PREFIX):]]
        i = start
        while i < len(lines):
            following = lines[i]
            stripped = following.rstrip()
            if stripped.endswith('\\') or following.startswith((' ', '\t')):
                collected.append(stripped.lstrip())
                i += 1
            else:
                break
        return collected, i

    def format(self, path_hint: str, text: str) -> FormatResult:
        """
        Format the RUN instructions of a Dockerfile.

        Args:
            path_hint: Name of the Dockerfile, used for logging only
            text: Dockerfile content

        Returns:
            FormatResult
        """
        if RUN_PREFIX not in text:
            return FormatResult.unchanged()

        lines = text.split('\n')
        out: List[str] = []
        i = 0

        while i < len(lines):
            line = lines[i]
            trimmed = line.lstrip()
            if not trimmed.startswith(RUN_PREFIX):
                out.append(line)
                i += 1
                continue

            fragment, i = self._collect_fragment(trimmed, lines, i + 1)
            result = self.shell_formatter.format(FRAGMENT_PATH, '\n'.join(fragment))

            if result.changed:
                shell_lines = result.text.rstrip().split('\n')
                out.append(f"{RUN_PREFIX}{shell_lines[0]}")
                out.extend(f"{CONTINUATION_INDENT}{extra}" for extra in shell_lines[1:])
            else:
                # Keep the instruction exactly as written.
                out.append(line)
                out.extend(lines[i - len(fragment) + 1:i])

        content = '\n'.join(out)
        if content == text:
            return FormatResult.unchanged()

        logger.debug(f"{path_hint}: RUN instructions rewritten")
        return FormatResult.rewritten(ensure_single_newline(content))
