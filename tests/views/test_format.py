"""Tests for text helpers and the plain node table."""

from kvlens.views.format import paint, stringify, truncate, wrap_at_width
from kvlens.views.table import render_node_table


class TestStringify:
    """Test one-line value text."""

    def test_scalars(self):
        assert stringify(None) == ""
        assert stringify(True) == "true"
        assert stringify(2.0) == "2"
        assert stringify(2.5) == "2.5"
        assert stringify("x") == "x"

    def test_containers(self):
        assert stringify({"a": [1, 2]}) == '{"a":[1,2]}'


class TestTruncateAndWrap:
    """Test width handling."""

    def test_truncate(self):
        assert truncate("abcdefghij", 20) == "abcdefghij"
        assert truncate("abcdefghij", 6) == "abc..."
        assert truncate("abcdefghij", 0) == ""

    def test_wrap(self):
        assert wrap_at_width("one two three", 7) == ["one two", "three"]
        assert wrap_at_width("short", 20) == ["short"]


class TestPaint:
    """Test rendering to strings."""

    def test_plain_has_no_escape_codes(self):
        assert "\x1b[" not in paint("[bold]hi[/bold]", 20, color=False)
        assert paint("[bold]hi[/bold]", 20, color=False) == "hi"

    def test_color_has_escape_codes(self):
        assert "\x1b[" in paint("[bold]hi[/bold]", 20, color=True)


class TestNodeTable:
    """Test the KEY/VALUE table for nodes without a custom view."""

    def test_map(self, document):
        frame = render_node_table(document["regions"], 60, color=False)
        assert "KEY" in frame
        assert "VALUE" in frame
        assert "asia" in frame
        assert '{"zones":3}' in frame

    def test_list(self, document):
        frame = render_node_table(document["counts"], 60, color=False)
        assert "[2]" in frame
        assert "30" in frame

    def test_scalar(self):
        assert "(string)" in render_node_table("hello", 60, color=False)
