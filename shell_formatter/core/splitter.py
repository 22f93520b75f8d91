"""
Comment Splitter Module

Separates the code part of a single shell line from its trailing comment,
respecting single and double quotes.
"""

from typing import Optional, Tuple


def split_comment(line: str) -> Tuple[str, Optional[str]]:
    """
    Split a trimmed line into its code segment and trailing comment.

    A ``#`` starts a comment only when it is outside of quotes and is either
    the first character of the line or preceded by whitespace.

    Args:
        line: A single physical line, already trimmed

    Returns:
        Tuple of (code, comment). ``comment`` is None when the line has none.
    """
    in_single = False
    in_double = False

    for idx, char in enumerate(line):
        if char == "'" and not in_double:
            in_single = not in_single
        elif char == '"' and not in_single:
            in_double = not in_double
        elif char == '#' and not in_single and not in_double:
            if idx == 0 or line[idx - 1].isspace():
                return line[:idx].rstrip(), line[idx:]

    return line.rstrip(), None
