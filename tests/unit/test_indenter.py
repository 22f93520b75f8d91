"""
Unit tests for the indentation state machine.
"""

import pytest

from shell_formatter.core.indenter import (
    CaseFrame, FormattingContext, IndentationTracker, ends_with_continuation,
    is_case_pattern, is_case_terminator, opens_block, starts_with_keyword
)


def levels(lines):
    """Run the tracker over trimmed lines and collect their indent levels."""
    tracker = IndentationTracker()
    result = []
    for line in lines:
        result.append(tracker.indent_for(line))
        tracker.advance(line)
    return result


class TestClassifiers:
    """Test the line classification helpers."""

    @pytest.mark.parametrize("line,keyword,expected", [
        ("fi", "fi", True),
        ("fi;", "fi", True),
        ("done < list.txt", "done", True),
        ("done|sort", "done", True),
        ("file=1", "fi", False),
        ("find . -name x", "fi", False),
        ("done_x", "done", False),
        ("elsewhere", "else", False),
    ])
    def test_starts_with_keyword(self, line, keyword, expected):
        assert starts_with_keyword(line, keyword) is expected

    @pytest.mark.parametrize("line,expected", [
        ("then", True),
        ("do", True),
        ('if [ "$a" -gt 0 ];then', True),
        ("if x; then", True),
        ("if[ -d x ];then", True),
        ("while[ 1 ];do", True),
        ("if grep -q foo file; then", True),
        ("if x; then echo; fi", False),
        ("for i in a b; do", True),
        ("while true; do echo; done", False),
        ("select opt in a b; do", True),
        ("foo() {", True),
        ("function foo {", True),
        ("echo hi", False),
        ("if [ x ]", False),
        ("while docker ps", False),
    ])
    def test_opens_block(self, line, expected):
        assert opens_block(line) is expected

    @pytest.mark.parametrize("line,expected", [
        ("echo \\", True),
        ("echo \\\\", False),
        ("echo \\\\\\", True),
        ("echo", False),
        ("echo \\   ", True),
    ])
    def test_ends_with_continuation(self, line, expected):
        assert ends_with_continuation(line) is expected

    @pytest.mark.parametrize("line,expected", [
        (";;", True),
        (";;&", True),
        (";&", True),
        ("echo ;;", False),
    ])
    def test_is_case_terminator(self, line, expected):
        assert is_case_terminator(line) is expected

    def test_is_case_pattern_requires_open_case(self):
        assert is_case_pattern("a)", FormattingContext()) is False

        ctx = FormattingContext(case_stack=[CaseFrame(base_indent=0)])
        assert is_case_pattern("a)", ctx) is True
        assert is_case_pattern("# note)", ctx) is False
        assert is_case_pattern("case $(x) in)", ctx) is False


class TestIndentationTracker:
    """Test the IndentationTracker state machine."""

    def test_initial_state(self):
        tracker = IndentationTracker()

        assert tracker.context.indent == 0
        assert tracker.context.continuation is False
        assert tracker.context.case_stack == []

    def test_if_else_block(self):
        lines = ["if x; then", "echo yes", "else", "echo no", "fi"]
        assert levels(lines) == [0, 1, 0, 1, 0]

    def test_elif_aligns_with_if(self):
        lines = ["if a; then", "x", "elif b; then", "y", "else", "z", "fi"]
        assert levels(lines) == [0, 1, 0, 1, 0, 1, 0]

    def test_then_on_own_line(self):
        lines = ["if a", "then", "x", "fi"]
        assert levels(lines) == [0, 0, 1, 0]

    def test_nested_loops(self):
        lines = ["for f in *.sh; do", "if [ -x $f ]; then", "echo $f", "fi", "done"]
        assert levels(lines) == [0, 1, 2, 1, 0]

    def test_case_arms(self):
        lines = ['case "$1" in', "a)", "echo a", ";;", "*)", "echo other", ";;", "esac"]
        assert levels(lines) == [0, 1, 2, 1, 1, 2, 1, 0]

    def test_nested_case(self):
        lines = [
            'case "$a" in', "x)", 'case "$b" in', "y)", "echo xy", ";;", "esac", ";;", "esac",
        ]
        assert levels(lines) == [0, 1, 2, 3, 4, 3, 2, 1, 0]

    def test_case_stack_tracks_case_and_esac(self):
        tracker = IndentationTracker()
        for line in ['case "$a" in', "x)", 'case "$b" in']:
            tracker.indent_for(line)
            tracker.advance(line)

        assert [frame.base_indent for frame in tracker.context.case_stack] == [0, 2]

        for line in ["y)", ";;", "esac"]:
            tracker.indent_for(line)
            tracker.advance(line)

        assert len(tracker.context.case_stack) == 1

    def test_function_body(self):
        lines = ["foo() {", "echo hi", "}"]
        assert levels(lines) == [0, 1, 0]

    def test_continuation_lines(self):
        lines = ["protoc --a \\", "--b \\", "./x", "echo done"]
        assert levels(lines) == [0, 1, 1, 0]

    def test_stray_closers_saturate_at_zero(self):
        lines = ["fi", "done", "}", "esac", "echo"]
        assert levels(lines) == [0, 0, 0, 0, 0]

    def test_terminator_without_case(self):
        assert levels([";;", "echo"]) == [0, 0]

    def test_unbalanced_state_is_kept(self):
        tracker = IndentationTracker()
        for line in ["if x; then", "while true; do"]:
            tracker.indent_for(line)
            tracker.advance(line)

        assert tracker.context.indent == 2
