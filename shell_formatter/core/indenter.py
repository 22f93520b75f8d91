"""
Indentation State Machine Module

Tracks the nesting context of a shell script line by line: open control
blocks, open ``case`` statements and backslash continuations.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional

DEDENT_KEYWORDS = ('fi', 'done', 'esac', 'elif', 'else')

CASE_TERMINATORS = (';;&', ';;', ';&')

LOOP_KEYWORDS = ('for', 'while', 'until', 'select')

_CLOSER_TOKEN = re.compile(r'(?:^|[\s;&|])(?:fi|done)(?:$|[\s;&|)<>])')
_THEN_TOKEN = re.compile(r'(?:^|[\s;])then(?:$|[\s;])')
_DO_TOKEN = re.compile(r'(?:^|[\s;])do(?:$|[\s;])')


@dataclass
class CaseFrame:
    """One open ``case ... esac`` block."""
    base_indent: int


@dataclass
class FormattingContext:
    """Mutable state threaded across the lines of one format call."""
    indent: int = 0
    continuation: bool = False
    case_stack: List[CaseFrame] = field(default_factory=list)

    @property
    def top_frame(self) -> Optional[CaseFrame]:
        return self.case_stack[-1] if self.case_stack else None

    def dedent(self):
        self.indent = max(0, self.indent - 1)


def starts_with_keyword(lower: str, keyword: str) -> bool:
    """True if ``keyword`` is the leading token of the lowercased line."""
    if not lower.startswith(keyword):
        return False
    rest = lower[len(keyword):]
    return not rest or not (rest[0].isalnum() or rest[0] in '_-')


def is_case_pattern(trimmed: str, context: FormattingContext) -> bool:
    if not context.case_stack:
        return False
    if trimmed.startswith('#'):
        return False
    return trimmed.endswith(')') and not trimmed.startswith('case ')


def is_case_terminator(lower: str) -> bool:
    return lower.startswith(CASE_TERMINATORS)


def opens_block(trimmed: str) -> bool:
    """
    Decide whether a line opens a block whose body is indented.

    Args:
        trimmed: The line with surrounding whitespace removed

    Returns:
        True if the following lines belong one level deeper
    """
    lower = trimmed.lower()

    if lower in ('then', 'do'):
        return True
    if _CLOSER_TOKEN.search(lower):
        return False
    if starts_with_keyword(lower, 'if') and _THEN_TOKEN.search(lower):
        return True
    if any(starts_with_keyword(lower, kw) for kw in LOOP_KEYWORDS) and _DO_TOKEN.search(lower):
        return True
    if lower.startswith('function ') and trimmed.endswith('{'):
        return True
    return trimmed.endswith('{')


def ends_with_continuation(line: str) -> bool:
    """True if the line ends with a backslash that is not itself escaped."""
    stripped = line.rstrip()
    trailing = len(stripped) - len(stripped.rstrip('\\'))
    return trailing % 2 == 1


class IndentationTracker:
    """
    Line-by-line indentation state machine.

    Call :meth:`indent_for` with each non-blank line to get its indent
    level, then :meth:`advance` with the same line to update the context
    for the next one.
    """

    def __init__(self):
        self.context = FormattingContext()

    def indent_for(self, trimmed: str) -> int:
        """
        Compute the indent level of a line.

        Closers and ``elif``/``else`` dedent themselves before the level
        is computed. Case patterns and terminators sit one level inside
        their ``case`` line regardless of the ambient indent.
        """
        ctx = self.context
        lower = trimmed.lower()

        if trimmed.startswith('}') or any(
                starts_with_keyword(lower, kw) for kw in DEDENT_KEYWORDS):
            ctx.dedent()

        frame = ctx.top_frame
        if frame is not None and (is_case_pattern(trimmed, ctx) or is_case_terminator(lower)):
            base_indent = frame.base_indent + 1
        else:
            base_indent = ctx.indent

        return base_indent + 1 if ctx.continuation else base_indent

    def advance(self, trimmed: str):
        """Update the context after ``trimmed`` has been emitted."""
        ctx = self.context
        lower = trimmed.lower()
        frame = ctx.top_frame

        if lower.startswith('case '):
            ctx.case_stack.append(CaseFrame(base_indent=ctx.indent))
            ctx.indent += 1
        elif is_case_pattern(trimmed, ctx):
            if frame is not None:
                ctx.indent = frame.base_indent + 2
            else:
                ctx.indent += 1
        elif is_case_terminator(lower):
            if frame is not None:
                ctx.indent = frame.base_indent + 1
            else:
                ctx.dedent()
        elif starts_with_keyword(lower, 'else') or starts_with_keyword(lower, 'elif'):
            ctx.indent += 1

        if opens_block(trimmed):
            ctx.indent += 1

        if starts_with_keyword(lower, 'esac') and ctx.case_stack:
            ctx.indent = ctx.case_stack.pop().base_indent

        ctx.continuation = ends_with_continuation(trimmed)
