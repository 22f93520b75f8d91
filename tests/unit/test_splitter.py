"""
Unit tests for the comment splitter.
"""

import pytest

from shell_formatter.core.splitter import split_comment


class TestSplitComment:
    """Test splitting code from trailing comments."""

    def test_no_comment(self):
        assert split_comment("echo hello") == ("echo hello", None)

    def test_trailing_comment(self):
        assert split_comment("echo hi  #comment") == ("echo hi", "#comment")

    def test_comment_only_line(self):
        assert split_comment("#!/bin/bash") == ("", "#!/bin/bash")

    def test_hash_inside_double_quotes(self):
        assert split_comment('echo "a # b"') == ('echo "a # b"', None)

    def test_hash_inside_single_quotes_then_real_comment(self):
        code, comment = split_comment("echo 'x # y' # real")

        assert code == "echo 'x # y'"
        assert comment == "# real"

    def test_hash_not_preceded_by_whitespace(self):
        assert split_comment("echo ${var#prefix}") == ("echo ${var#prefix}", None)
        assert split_comment("echo a#b") == ("echo a#b", None)

    def test_single_quote_inside_double_quotes_is_ignored(self):
        code, comment = split_comment('echo "it\'s" # note')

        assert code == 'echo "it\'s"'
        assert comment == "# note"

    def test_parameter_expansion_inside_quotes(self):
        line = 'CUR_VER="${PROTOC_VERSION##* }"  # "33.0.0"'
        assert split_comment(line) == ('CUR_VER="${PROTOC_VERSION##* }"', '# "33.0.0"')

    @pytest.mark.parametrize("line", ["", "echo", "a b c"])
    def test_code_is_right_trimmed(self, line):
        code, comment = split_comment(line + "   ")
        assert code == line
        assert comment is None
