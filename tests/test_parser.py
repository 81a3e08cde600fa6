"""
Tests for hocon_config.parser module.

Tests the block grammar including:
- Nested, repeated and inline blocks
- Dotted keys and assignment operators
- Append and skip-on-absent assignment
- Comments, stray braces and unparsable lines
"""

from __future__ import annotations

from hocon_config.core import parse_string
from hocon_config.parser import BlockParser, clean_lines
from hocon_config.preprocess import preprocess


def _parse(text: str, **kwargs):
    kwargs.setdefault("env", {})
    return parse_string(text, **kwargs)


class TestBlocks:
    """Tests for block structure."""

    def test_multiline_block(self):
        """Test a `key {` block spanning several lines."""
        text = """
server {
  host = localhost
  port = 8080
}
"""
        assert _parse(text) == {"server": {"host": "localhost", "port": 8080}}

    def test_equals_block(self):
        """Test the `key = {` opener."""
        text = "server = {\n  port = 1\n}"

        assert _parse(text) == {"server": {"port": 1}}

    def test_nested_blocks(self):
        """Test blocks inside blocks."""
        text = """
a {
  b {
    c = 1
  }
  d = 2
}
e = 3
"""
        assert _parse(text) == {"a": {"b": {"c": 1}, "d": 2}, "e": 3}

    def test_repeated_blocks_merge(self):
        """Test that a block opened twice accumulates keys."""
        text = "a { x = 1 }\na { y = 2 }"

        assert _parse(text) == {"a": {"x": 1, "y": 2}}

    def test_inline_block_with_commas(self):
        """Test comma-separated fields inside an inline block."""
        text = "point { x = 1, y = 2 }"

        assert _parse(text) == {"point": {"x": 1, "y": 2}}

    def test_inline_mapping_value(self):
        """Test `key = { ... }` on one line."""
        text = 'point = { x = 1, label = "a, b" }'

        assert _parse(text) == {"point": {"x": 1, "label": "a, b"}}

    def test_block_with_dotted_key(self):
        """Test a block opened on a dotted key."""
        text = "a.b {\n  c = 1\n}"

        assert _parse(text) == {"a": {"b": {"c": 1}}}


class TestAssignments:
    """Tests for assignment lines."""

    def test_literal_types(self):
        """Test that values are coerced by type."""
        text = 'a = 2.0\nb = 2.5\nc = "42"\nd = 42\ne = true\nf: null'

        assert _parse(text) == {"a": "2.0", "b": 2.5, "c": "42", "d": 42, "e": True, "f": None}

    def test_dotted_keys(self):
        """Test that dotted keys build nested mappings."""
        assert _parse("a.b.c = 1\na.b.d = 2") == {"a": {"b": {"c": 1, "d": 2}}}

    def test_quoted_key_segment(self):
        """Test that a quoted key keeps its dots."""
        assert _parse('"host.name" = x') == {"host.name": "x"}

    def test_later_assignment_wins(self):
        """Test that reassignment replaces a scalar."""
        assert _parse("a = 1\na = 2") == {"a": 2}

    def test_absent_value_skips(self):
        """Test that an unset environment value keeps the earlier default."""
        text = "port = 8080\nport = ${?HOCON_TEST_UNSET}"

        assert _parse(text) == {"port": 8080}

    def test_null_does_not_overwrite(self):
        """Test that an explicit null never replaces a present value."""
        assert _parse("a = 1\na = null") == {"a": 1}

    def test_list_patch_on_reassignment(self):
        """Test that a one-element list patches the first element."""
        text = "ports = [80, 443, 8080]\nports = [9999]"

        assert _parse(text) == {"ports": [9999, 443, 8080]}

    def test_append(self):
        """Test `+=` on lists and strings."""
        text = "list = [1, 2]\nlist += [3]\ns = foo\ns += bar"

        assert _parse(text) == {"list": [1, 2, 3], "s": "foobar"}

    def test_append_to_missing_key(self):
        """Test that `+=` on a new key sets it."""
        assert _parse("list += [1]") == {"list": [1]}

    def test_multiline_array(self):
        """Test an array spread over several lines."""
        text = "hosts = [\n  a,  # first\n  b\n]\nafter = 1"

        assert _parse(text) == {"hosts": ["a", "b"], "after": 1}

    def test_triple_quoted_value(self):
        """Test a multi-line string value."""
        text = 'text = """line one\nline "two"\n"""'

        assert _parse(text) == {"text": 'line one\nline "two"\n'}

    def test_concatenation_uses_block_scope(self):
        """Test that earlier keys feed text concatenation."""
        text = "name = hello\ngreeting = ${name} world"

        assert _parse(text)["greeting"] == "hello world"


class TestPermissiveParsing:
    """Tests for comments and lines that do not parse."""

    def test_comments_ignored(self):
        """Test both comment styles."""
        text = "# header\na = 1 // trailing\n// b = 2\nurl = http://example.com"

        assert _parse(text) == {"a": 1, "url": "http://example.com"}

    def test_unparsable_lines_skipped(self, recording_logger):
        """Test that lines without an operator are skipped and logged."""
        text = "just some words\na = 1"

        assert _parse(text, logger=recording_logger) == {"a": 1}
        assert any("skipping" in message for _, _, message in recording_logger.messages)

    def test_stray_closing_brace_skipped(self):
        """Test that an unmatched `}` at top level is ignored."""
        assert _parse("a = 1\n}\nb = 2") == {"a": 1, "b": 2}

    def test_unclosed_block_runs_to_end(self):
        """Test that a block left open takes the remaining lines."""
        assert _parse("a {\n  b = 1") == {"a": {"b": 1}}

    def test_empty_document(self):
        """Test that an empty document is an empty mapping."""
        assert _parse("") == {}
        assert _parse("# only a comment\n\n") == {}


class TestBlockParser:
    """Tests for the parser class used directly."""

    def test_clean_lines(self):
        """Test comment and blank line removal."""
        assert clean_lines(["  a = 1 # c", "", "   ", "// x", "b = 2"]) == ["a = 1", "b = 2"]

    def test_references_stay_deferred(self, make_context):
        """Test that the parser leaves references for the resolver."""
        from hocon_config.nodes import Reference

        tree = BlockParser(preprocess("a = 1\nb = ${a}"), make_context()).parse()

        assert tree == {"a": 1, "b": Reference("a")}
