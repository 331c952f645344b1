"""Comprehensive tests for the stack-based tree builder.

Covers well-formed construction, deferred attribute and text assignment, the
lossy handling of misnested and unclosed markup, and build accounting.
"""

import logging
from typing import List

from lenient_markup_parser.shared import TreeConfig
from lenient_markup_parser.tokenization import Token, TokenType, tokenize
from lenient_markup_parser.tree import HTMLNode, TreeBuilder, build


def _parse(markup: str) -> List[HTMLNode]:
    return build(tokenize(markup))


def _shape(node: HTMLNode):
    """Reduce a subtree to comparable tag/attribute/content tuples."""
    return (
        node.tag_name,
        node.attributes,
        node.content,
        [_shape(child) for child in node.children],
    )


class TestWellFormedMarkup:
    """Tree construction for well-formed input."""

    def test_basic_structure(self) -> None:
        """A single nested element."""
        nodes = _parse("<div><p>Hello, world!</p></div>")

        assert len(nodes) == 1
        assert nodes[0].tag_name == "div"
        assert len(nodes[0].children) == 1
        assert nodes[0].children[0].tag_name == "p"
        assert nodes[0].children[0].content == "Hello, world!"

    def test_nested_lists(self) -> None:
        """Deeper nesting keeps document order."""
        nodes = _parse(
            "<ul><li>Item 1</li><li>Item 2<ul><li>Subitem 1</li>"
            "<li>Subitem 2</li></ul></li></ul>"
        )

        assert len(nodes) == 1
        outer = nodes[0]
        assert outer.tag_name == "ul"
        assert [child.tag_name for child in outer.children] == ["li", "li"]
        assert outer.children[0].content == "Item 1"

        inner = outer.children[1].children[0]
        assert inner.tag_name == "ul"
        assert [li.content for li in inner.children] == ["Subitem 1", "Subitem 2"]

    def test_text_after_last_child_appends_with_space(self) -> None:
        """Closing text is joined to earlier content with one space."""
        nodes = _parse(
            "<ul><li>Item 2<ul><li>Sub</li></ul></li></ul>"
        )
        assert nodes[0].children[0].content == "Item 2 "

    def test_self_closing_child(self) -> None:
        """A void child is closed by its marker token."""
        nodes = _parse('<div><img src="image.jpg" /></div>')

        assert len(nodes) == 1
        assert nodes[0].tag_name == "div"
        assert len(nodes[0].children) == 1
        image = nodes[0].children[0]
        assert image.tag_name == "img"
        assert image.is_self_closing is True
        assert image.attributes["src"] == "image.jpg"
        assert nodes[0].is_self_closing is False

    def test_attributes_without_values(self) -> None:
        """Boolean attributes receive the empty string."""
        nodes = _parse('<input type="checkbox" checked />')

        assert len(nodes) == 1
        assert nodes[0].tag_name == "input"
        assert nodes[0].attributes["type"] == "checkbox"
        assert nodes[0].attributes["checked"] == ""

    def test_empty_attribute_value(self) -> None:
        """An explicit empty value is kept."""
        nodes = _parse('<input type="text" disabled="" />')

        assert nodes[0].attributes == {"type": "text", "disabled": ""}

    def test_quoted_attributes_with_special_characters(self) -> None:
        """Values are raw."""
        nodes = _parse('<a href="http://example.com?param1=value1&param2=value2">Link</a>')

        assert len(nodes) == 1
        assert nodes[0].attributes["href"] == "http://example.com?param1=value1&param2=value2"
        assert nodes[0].content == "Link"

    def test_attribute_name_case(self) -> None:
        """Attribute names are lower-cased, tag names are not."""
        nodes = _parse('<DIV id="main" CLASS="container">Content</DIV>')

        assert nodes[0].tag_name == "DIV"
        assert nodes[0].attributes == {"id": "main", "class": "container"}
        assert nodes[0].content == "Content"

    def test_duplicate_attribute_last_value_wins(self) -> None:
        """A repeated attribute name keeps the last value."""
        nodes = _parse('<div a="1" a="2"></div>')
        assert nodes[0].attributes == {"a": "2"}

    def test_whitespace_is_preserved_on_close(self) -> None:
        """Text assigned on close is not trimmed."""
        nodes = _parse("<div>   <p>  Extra   whitespace </p>   </div>")

        assert len(nodes) == 1
        assert nodes[0].children[0].content == "  Extra   whitespace "

    def test_script_and_style_siblings(self) -> None:
        """Top-level siblings become separate roots."""
        nodes = _parse(
            "<script>alert('Hello');</script><style>body { background-color: #f00; }</style>"
        )

        assert [node.tag_name for node in nodes] == ["script", "style"]
        assert nodes[0].content == "alert('Hello');"
        assert nodes[1].content == "body { background-color: #f00; }"

    def test_entities_are_not_decoded(self) -> None:
        """Entities stay as written."""
        nodes = _parse("<div>Some &amp; special &lt;characters&gt;</div>")
        assert nodes[0].text() == "Some &amp; special &lt;characters&gt;"

    def test_root_count_matches_closed_siblings(self) -> None:
        """Closed and void top-level tags each yield one root."""
        nodes = _parse('<p>a</p><br><img src="x"><span>b</span>')

        assert [node.tag_name for node in nodes] == ["p", "br", "img", "span"]
        assert [node.is_self_closing for node in nodes] == [False, True, True, False]


class TestDeferredAssignment:
    """Attribute and text assignment at structural boundaries."""

    def test_mixed_content(self) -> None:
        """Text around a child is joined onto the parent."""
        nodes = _parse("<div>Text before <p>text inside</p>text after</div>")

        assert len(nodes) == 1
        assert nodes[0].content == "Text before text after"
        assert len(nodes[0].children) == 1
        assert nodes[0].children[0].content == "text inside"

    def test_child_open_overwrites_earlier_content(self) -> None:
        """Each child open replaces the parent's content with the trimmed buffer."""
        nodes = _parse("<div>A<p>x</p>B<span>y</span>C</div>")
        assert nodes[0].content == "B C"

    def test_content_without_text_before_child(self) -> None:
        """Empty content on child open is replaced on close."""
        nodes = _parse("<div><br>text</div>")

        assert nodes[0].content == "text"
        assert nodes[0].children[0].tag_name == "br"
        assert nodes[0].children[0].is_self_closing is True

    def test_nested_attributes_stay_with_their_tags(self) -> None:
        """Parent attributes are assigned when the child opens."""
        nodes = _parse('<div class="a"><p class="b">x</p></div>')

        assert nodes[0].attributes == {"class": "a"}
        assert nodes[0].children[0].attributes == {"class": "b"}

    def test_value_without_name_is_discarded(self) -> None:
        """A value with no preceding name is dropped."""
        nodes = _parse('<div ="x">y</div>')
        assert nodes[0].attributes == {}
        assert nodes[0].content == "y"

    def test_text_outside_nodes_is_discarded(self) -> None:
        """Top-level text has nowhere to go."""
        nodes = _parse("hello<div>x</div>world")

        assert len(nodes) == 1
        assert nodes[0].html() == "<div>x</div>"


class TestMalformedMarkup:
    """The lossy, silent malformed-input policy."""

    def test_misnested_tags_yield_empty_forest(self) -> None:
        """A close for an ancestor finalizes the descendant instead."""
        assert _parse("<div><p>Misnested <div>tags</p></div>") == []

    def test_unclosed_tags_are_dropped(self) -> None:
        """Nodes still open at end of input never reach the forest."""
        assert _parse("<div><p>Malformed <span> tags") == []

    def test_close_ignores_tag_name(self) -> None:
        """Overlapping tags reshape the tree without error."""
        nodes = _parse("<b><i>x</b></i>")

        assert len(nodes) == 1
        assert nodes[0].tag_name == "b"
        assert nodes[0].children[0].tag_name == "i"
        assert nodes[0].children[0].content == "x"

    def test_orphan_close_is_ignored(self) -> None:
        """A close with nothing open is a no-op."""
        nodes = _parse("</p><div>x</div></span>")
        assert [node.tag_name for node in nodes] == ["div"]

    def test_trailing_slash_does_not_close_non_void(self) -> None:
        """<custom /> stays open and is lost."""
        assert _parse("<custom-tag />") == []

    def test_empty_input(self) -> None:
        """No tokens, no roots."""
        assert _parse("") == []


class TestTreeBuilder:
    """Tests for the builder class and direct token input."""

    def test_build_from_explicit_tokens(self) -> None:
        """Close names are not checked against open names."""
        nodes = build([
            Token(TokenType.TAG_OPEN, "x"),
            Token(TokenType.TEXT, "body"),
            Token(TokenType.TAG_CLOSE, "y"),
        ])

        assert len(nodes) == 1
        assert nodes[0].tag_name == "x"
        assert nodes[0].content == "body"

    def test_self_closing_without_current_is_ignored(self) -> None:
        """A stray self-closing marker does nothing."""
        assert build([Token(TokenType.SELF_CLOSING_TAG, "br")]) == []

    def test_build_result_counts(self) -> None:
        """Created and dropped nodes are counted."""
        builder = TreeBuilder()

        result = builder.build_result(tokenize("<div><p>Misnested <div>tags</p></div>"))
        assert result.roots == []
        assert result.nodes_created == 3
        assert result.nodes_dropped == 1

        result = builder.build_result(tokenize("<div><p>x"))
        assert result.nodes_created == 2
        assert result.nodes_dropped == 2

        result = builder.build_result(tokenize("<p>a</p><p>b</p>"))
        assert len(result.roots) == 2
        assert result.nodes_dropped == 0

    def test_builder_is_reusable(self) -> None:
        """State does not leak between builds."""
        builder = TreeBuilder()
        builder.build(tokenize("<div><p>unclosed"))

        nodes = builder.build(tokenize("<p>ok</p>"))

        assert len(nodes) == 1
        assert nodes[0].content == "ok"

    def test_round_trip_through_html(self) -> None:
        """Serialized trees re-parse into equivalent trees."""
        for markup in (
            '<div class="c">Hello<p id="x">inside</p></div>',
            "<ul><li>a</li><li>b</li></ul>",
            '<section><img src="a.jpg" /><br></section>',
        ):
            original = _parse(markup)
            reparsed = _parse("".join(node.html() for node in original))

            assert [_shape(node) for node in reparsed] == [
                _shape(node) for node in original
            ]

    def test_dropped_nodes_logged(self, caplog) -> None:
        """Dropped nodes are reported at DEBUG when configured."""
        caplog.set_level(logging.DEBUG, logger="lenient_markup_parser")

        TreeBuilder(correlation_id="b-1").build(tokenize("<div><p>"))

        records = [
            r for r in caplog.records
            if r.getMessage() == "Unclosed nodes dropped at end of input"
        ]
        assert len(records) == 1
        assert records[0].nodes_dropped == 2
        assert records[0].open_tags == ["div", "p"]
        assert records[0].correlation_id == "b-1"

    def test_dropped_nodes_logging_disabled(self, caplog) -> None:
        """The dropped-node record can be switched off."""
        caplog.set_level(logging.DEBUG, logger="lenient_markup_parser")

        TreeBuilder(config=TreeConfig(log_dropped_nodes=False)).build(tokenize("<div>"))

        messages = [r.getMessage() for r in caplog.records]
        assert "Unclosed nodes dropped at end of input" not in messages
        assert "Tree building completed" in messages
