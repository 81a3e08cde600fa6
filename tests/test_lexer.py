"""
Tests for hocon_config.lexer module.

Tests quote-aware scanning including:
- Comment stripping (`#` and `//`)
- Operator detection
- Group matching and counting
- Tokenizing and item splitting
"""

from __future__ import annotations

from hocon_config.lexer import (
    bracket_depth,
    count_groups,
    find_group_end,
    find_operator,
    is_single_group,
    match_group,
    skip_quoted,
    split_items,
    strip_comment,
    tokenize,
)


class TestStripComment:
    """Tests for end-of-line comment removal."""

    def test_hash_comment(self):
        """Test that `#` starts a comment."""
        assert strip_comment("a = 1 # note") == "a = 1 "

    def test_slash_comment_after_whitespace(self):
        """Test that `//` after whitespace starts a comment."""
        assert strip_comment("a = 1 // note") == "a = 1 "

    def test_slash_comment_at_line_start(self):
        """Test that a line starting with `//` is all comment."""
        assert strip_comment("// whole line") == ""

    def test_unquoted_url_keeps_slashes(self):
        """Test that `//` inside a bare URL is not a comment."""
        assert strip_comment("url = http://host/path") == "url = http://host/path"

    def test_markers_inside_quotes_ignored(self):
        """Test that comment markers inside quotes are kept."""
        line = 'tag = "#1 // not a comment"'
        assert strip_comment(line) == line

    def test_comment_after_quoted_value(self):
        """Test that a comment after a closed quote is removed."""
        assert strip_comment('a = "x" # c') == 'a = "x" '


class TestFindOperator:
    """Tests for locating assignment and block operators."""

    def test_equals(self):
        """Test plain assignment."""
        assert find_operator("a.b = 1") == (4, "=")

    def test_colon(self):
        """Test colon assignment."""
        assert find_operator("a: 1") == (1, ":")

    def test_append(self):
        """Test that `+=` is reported as one operator."""
        assert find_operator("list += [1]") == (5, "+=")

    def test_block_opener(self):
        """Test that `{` is found as a block operator."""
        assert find_operator("server {") == (7, "{")

    def test_first_operator_wins(self):
        """Test that `=` before `{` is reported first."""
        assert find_operator("server = {") == (7, "=")

    def test_quoted_operator_skipped(self):
        """Test that operators inside quoted keys are ignored."""
        assert find_operator('"k=v" = 1') == (6, "=")

    def test_no_operator(self):
        """Test that a line without operators yields None."""
        assert find_operator("just words") is None


class TestGroups:
    """Tests for bracket and brace group scanning."""

    def test_find_group_end_skips_quoted_closer(self):
        """Test that a closer inside quotes does not end the group."""
        assert find_group_end('{a = "}"} x', 0) == 9

    def test_find_group_end_unclosed(self):
        """Test that an unclosed group returns -1."""
        assert find_group_end("[1, 2", 0) == -1

    def test_match_group_unclosed_runs_to_end(self):
        """Test that match_group treats an unclosed group as ending at len."""
        assert match_group("[1, 2", 0) == 5

    def test_count_groups(self):
        """Test counting top-level groups."""
        assert count_groups("[1] [2, [3]]") == 2
        assert count_groups("{a = 1}") == 1

    def test_count_groups_ignores_quotes_and_substitutions(self):
        """Test that quoted text and ${...} are not groups."""
        assert count_groups('"[x]" ${a}') == 0

    def test_is_single_group(self):
        """Test single-group detection."""
        assert is_single_group("[1, [2]]", "[")
        assert not is_single_group("[1] [2]", "[")
        assert not is_single_group("[1, 2", "[")
        assert not is_single_group("{a = 1}", "[")

    def test_bracket_depth_ignores_quoted(self):
        """Test that quoted brackets do not count toward depth."""
        assert bracket_depth('a = [1, "]"') == 1
        assert bracket_depth("a = [1]") == 0


class TestSkipQuoted:
    """Tests for quoted region scanning."""

    def test_single_quotes(self):
        """Test a simple single-quoted region."""
        assert skip_quoted("'abc' rest", 0) == 5

    def test_unterminated(self):
        """Test that an unterminated quote runs to the end."""
        assert skip_quoted('"abc', 0) == 4

    def test_triple_quote_honors_escapes(self):
        """Test that escaped quotes do not close a triple-quoted body."""
        text = '"""x \\""" y""" z'
        assert skip_quoted(text, 0) == 14


class TestTokenize:
    """Tests for value tokenizing."""

    def test_fallback_expression(self):
        """Test tokenizing an `or` expression."""
        assert tokenize('${?PORT} or "8080"') == ["${?PORT}", "or", '"8080"']

    def test_groups_are_single_tokens(self):
        """Test that whole groups become one token each."""
        assert tokenize("[1, 2] [3]") == ["[1, 2]", "[3]"]

    def test_quoted_string_kept_whole(self):
        """Test that quoted strings keep their quotes and spaces."""
        assert tokenize('"a b" c') == ['"a b"', "c"]

    def test_substitution_splits_words(self):
        """Test that ${...} is its own token."""
        assert tokenize("${a} world") == ["${a}", "world"]

    def test_stray_closer(self):
        """Test that a stray closer is emitted and scanning continues."""
        assert tokenize("a ] b") == ["a", "]", "b"]


class TestSplitItems:
    """Tests for top-level separator splitting."""

    def test_nested_and_quoted_separators(self):
        """Test that separators inside groups and quotes are kept."""
        assert split_items('1, [2, 3], "x, y"', ", ") == ["1", "[2, 3]", '"x, y"']

    def test_empty_items_dropped(self):
        """Test that consecutive separators yield no empty items."""
        assert split_items("a,,b,\n", ",\n") == ["a", "b"]


class TestModuleDocs:
    """Tests for the lexer module documentation."""

    def test_quoting_rules_documented(self):
        """Test that the module imports and documents triple-quoted regions."""
        import hocon_config.lexer as lexer

        assert '"""..."""' in lexer.__doc__
        assert lexer.TRIPLE_QUOTE == '"""'
