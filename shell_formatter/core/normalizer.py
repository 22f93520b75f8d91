"""
Token Normalizer Module

This module rewrites the code segment of a shell line: tab expansion,
keyword spacing, function brace collapsing, and spacing around pipes,
logical operators, redirects and comparison operators.

The rewrite works on raw substrings. Operator characters inside quoted
literals are re-spaced as well, and runs of whitespace inside quotes are
collapsed to a single space.

No step puts whitespace in front of a ``#`` that followed code directly,
since a whitespace-preceded ``#`` would start a comment on the next run.
"""

import re
from typing import List, Optional, Tuple

TAB_EXPANSION = ' ' * 4

# Checked in this order; the first operator found in a token wins.
REDIRECT_OPERATORS = ['<<<', '<<-', '<<', '>>', '>&', '&>', '<&', '>|', '>', '<']

BRACKET_KEYWORDS = ['if', 'while', 'for', 'until', 'select']

SPLIT_COMPARISONS = {'> =': '>=', '< =': '<=', '! =': '!='}

# "||" must not be mistaken for two pipes, and "|&" is a pipe of its own.
_BINARY_OPERATORS = [
    ('&&', re.compile(r'&&')),
    ('||', re.compile(r'\|\|')),
    ('|', re.compile(r'(?<![|>])\|(?![|&])')),
]


def collapse_split_comparisons(text: str) -> str:
    """Turn "> =", "< =" and "! =" back into ">=", "<=" and "!="."""
    for split, joined in SPLIT_COMPARISONS.items():
        while split in text:
            text = text.replace(split, joined)
    return text


class TokenNormalizer:
    """
    Normalizer for the code part of a shell line.

    Comments must be split off before calling :meth:`normalize`; the
    normalizer treats its whole input as code.
    """

    def normalize(self, code: str) -> str:
        """
        Apply every rewrite step to a code segment.

        Args:
            code: Code segment of one line, without its comment

        Returns:
            The normalized, trimmed code
        """
        text = code.replace('\t', TAB_EXPANSION)
        text = self._space_after_semicolon(text)
        text = collapse_split_comparisons(text)
        text = self._space_keyword_bracket(text)
        text = self._collapse_function_brace(text)
        text = self._space_binary_operators(text)
        text = self._space_redirects(text)
        text = self._merge_comparisons(text)
        return text.strip()

    def _space_after_semicolon(self, text: str) -> str:
        for keyword in ('then', 'do', 'else'):
            text = text.replace(f';{keyword}', f'; {keyword}')
        return text

    def _space_keyword_bracket(self, text: str) -> str:
        for keyword in BRACKET_KEYWORDS:
            needle = f'{keyword}['
            if needle in text:
                text = text.replace(needle, f'{keyword} [')
        return text

    def _collapse_function_brace(self, text: str) -> str:
        """Rewrite ``name(){body`` as ``name() { body``."""
        pos = text.find('(){')
        if pos == -1:
            return text

        name = text[:pos].rstrip()
        rest = text[pos + 3:]
        if not rest.strip():
            return f'{name}() {{'
        if rest.startswith('#'):
            return f'{name}() {{{rest}'
        return f'{name}() {{ {rest.lstrip()}'

    def _space_binary_operators(self, text: str) -> str:
        """
        Put exactly one space on each side of ``&&``, ``||`` and ``|``.

        The line is split on each operator in turn, fragments are trimmed
        and empty ones dropped, then rejoined around the operator. An
        operator at the very start or end of the line is kept, since a
        trailing ``&&`` or ``|`` continues the command on the next line.
        """
        for op, pattern in _BINARY_OPERATORS:
            if pattern.search(text):
                text = join_fragments(op, pattern.split(text.strip()))
        return text

    def _space_redirects(self, text: str) -> str:
        parts: List[str] = []
        for token in text.split():
            parts.extend(split_redirects(token))
        return ' '.join(parts)

    def _merge_comparisons(self, text: str) -> str:
        """Merge a ``>``, ``<`` or ``!`` token followed by a bare ``=`` token."""
        tokens = text.split()
        merged: List[str] = []

        i = 0
        while i < len(tokens):
            if (i + 1 < len(tokens)
                    and tokens[i] in ('>', '<', '!')
                    and tokens[i + 1] == '='):
                merged.append(tokens[i] + '=')
                i += 2
                continue
            merged.append(tokens[i])
            i += 1

        return ' '.join(merged)


def join_fragments(op: str, raw_parts: List[str]) -> str:
    """
    Rejoin the pieces of a line split on ``op``.

    Empty pieces are dropped. A piece that began with ``#`` right after the
    operator stays attached to it.

    Args:
        op: The operator the line was split on
        raw_parts: Untrimmed pieces between the operators

    Returns:
        The rejoined line
    """
    fragments = [(raw.strip(), raw.startswith('#')) for raw in raw_parts if raw.strip()]
    if not fragments:
        return op

    leading_op = not raw_parts[0].strip()
    text = ''
    for i, (fragment, attached) in enumerate(fragments):
        if i == 0 and not leading_op:
            text = fragment
            continue
        sep = '' if attached else ' '
        text = f'{text} {op}{sep}{fragment}' if text else f'{op}{sep}{fragment}'

    if not raw_parts[-1].strip():
        text = f'{text} {op}'
    return text


def split_redirect(token: str) -> Optional[Tuple[str, str, str]]:
    """
    Split a whitespace-delimited token around its redirect operator.

    Process substitutions (``<(cmd)`` and ``>(cmd)``) are left whole.

    Returns:
        Tuple of (lhs, operator, rhs), or None if the token has no redirect
    """
    for op in REDIRECT_OPERATORS:
        pos = token.find(op)
        if pos == -1:
            continue

        rhs = token[pos + len(op):]
        if op in ('<', '>') and rhs.startswith('('):
            return None
        return token[:pos], op, rhs

    return None


def split_redirects(token: str) -> List[str]:
    """
    Split a token around every redirect operator it contains.

    A pipe directly before the operator and a pipe or ``#`` directly after
    it stay attached to the operator.

    Returns:
        The resulting tokens, in order
    """
    split = split_redirect(token)
    if split is None:
        return [token]

    lhs, op, rhs = split
    left = split_redirects(lhs) if lhs else []
    right = split_redirects(rhs) if rhs else []

    if left and left[-1].endswith('|'):
        op = left.pop() + op
    if right and right[0].startswith(('|', '#')):
        op = op + right.pop(0)
    return left + [op] + right
