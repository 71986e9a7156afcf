"""Tests for HtmlMarkdownVisitor, PlainTextMarkdownVisitor and the base visitor."""

from __future__ import annotations

from dataclasses import dataclass
from unittest.mock import MagicMock, call

import pytest

from discord_markdown.core.markdown.html_visitor import (
    HtmlMarkdownVisitor,
    is_jumbo,
    render,
    render_with_resolvers,
)
from discord_markdown.core.markdown.nodes import (
    EmojiNode,
    FormattingKind,
    FormattingNode,
    MarkdownNode,
    NewlineNode,
    TextNode,
)
from discord_markdown.core.markdown.parser import parse, parse_with_alt_text_links
from discord_markdown.core.markdown.plaintext_visitor import (
    PlainTextMarkdownVisitor,
    render_plain_text,
)
from discord_markdown.core.markdown.resolvers import Resolvers, identity_resolver
from discord_markdown.core.markdown.visitor import MarkdownVisitor


@dataclass(frozen=True)
class ForeignNode(MarkdownNode):
    value: str


def _html(markdown: str) -> str:
    return render(parse(markdown))


# ---------------------------------------------------------------------------
# HTML
# ---------------------------------------------------------------------------


class TestHtmlVisitor:
    def test_plain_text(self):
        assert _html("Hello world") == "Hello world"

    def test_html_encoding(self):
        assert render([TextNode("<script>")]) == "&lt;script&gt;"

    def test_html_encoding_quotes(self):
        assert render([TextNode("\"'&")]) == "&quot;&#x27;&amp;"

    @pytest.mark.parametrize(
        ("markdown", "expected"),
        [
            ("**b**", "<strong>b</strong>"),
            ("*i*", "<em>i</em>"),
            ("_i_", "<em>i</em>"),
            ("__u__", "<u>u</u>"),
            ("~~s~~", '<span class="strikethrough">s</span>'),
            ("||s||", '<span class="spoiler">s</span>'),
            ("> q", "<blockquote>q</blockquote>"),
        ],
    )
    def test_formatting(self, markdown, expected):
        assert _html(markdown) == expected

    def test_newline(self):
        assert _html("a\nb") == "a<br>b"

    def test_inline_code(self):
        assert _html("`a<b`") == '<span class="inline_code">a<b</span>'

    def test_inline_code_newlines(self):
        assert _html("``a\nb``") == '<span class="inline_code">a<br>b</span>'

    def test_multi_line_code_block(self):
        assert _html("```\n  a\nb  \n```") == '<pre class="multiline_code">a<br>b</pre>'

    def test_link(self):
        assert _html("https://example.com") == (
            '<a href="https://example.com" target="_blank">https://example.com</a>'
        )

    def test_alt_text_link(self):
        html = render(parse_with_alt_text_links("[foo](https://example.com)"))
        assert html == '<a href="https://example.com" target="_blank">foo</a>'

    def test_hyperlinks_plain_mode(self):
        source = (
            "<https://www.example.com/> https://example.com "
            "[foo](https://example.com/) [foo](<http://example.com>)"
        )
        assert render(parse(source)) == (
            '<a href="https://www.example.com/" target="_blank">https://www.example.com/</a> '
            '<a href="https://example.com" target="_blank">https://example.com</a> '
            '[foo](<a href="https://example.com/" target="_blank">https://example.com/</a>) '
            '[foo](<a href="http://example.com" target="_blank">http://example.com</a>)'
        )
        assert render(parse_with_alt_text_links(source)) == (
            '<a href="https://www.example.com/" target="_blank">https://www.example.com/</a> '
            '<a href="https://example.com" target="_blank">https://example.com</a> '
            '<a href="https://example.com/" target="_blank">foo</a> '
            '<a href="http://example.com" target="_blank">foo</a>'
        )

    def test_user_mention_default(self):
        assert _html("<@!123>") == '<span class="user">@123</span>'

    def test_role_mention_default_color(self):
        assert _html("<@&5>") == (
            '<div class="role" style="color: #afafaf">@5'
            '<span style="background-color: #afafaf"></span></div>'
        )

    def test_channel_mention_default(self):
        assert _html("<#7>") == '<span class="channel" data-id="7">#7</span>'

    def test_quote_round_trip(self):
        assert _html("> _**example** formatted_ ||string||") == (
            "<blockquote><em><strong>example</strong> formatted</em> "
            '<span class="spoiler">string</span></blockquote>'
        )

    def test_mixed_document(self):
        source = (
            "foo > _foo bar_ *foo bar* **foo bar** __foo bar__\n"
            "> `foo bar` ``foo bar`` ||foo bar||\n> \n> test"
        )
        assert _html(source) == (
            "foo &gt; <em>foo bar</em> <em>foo bar</em> <strong>foo bar</strong> "
            "<u>foo bar</u><br><blockquote>"
            '<span class="inline_code">foo bar</span> '
            '<span class="inline_code">foo bar</span> '
            '<span class="spoiler">foo bar</span></blockquote>'
            "<blockquote><br></blockquote><blockquote>test</blockquote>"
        )

    def test_nested_document(self):
        source = "foo _> foo_ _bar\n> foo_ ||***__~~foo\nbar~~__***||"
        assert _html(source) == (
            "foo <em>&gt; foo</em> <em>bar<br><blockquote>foo</blockquote></em> "
            '<span class="spoiler"><strong><em><u><span class="strikethrough">'
            "foo<br>bar</span></u></em></strong></span>"
        )

    @pytest.mark.parametrize("kind", list(FormattingKind))
    def test_every_formatting_kind_has_tags(self, kind):
        html = render([FormattingNode(kind, [TextNode("x")])])
        assert html.startswith("<")
        assert ">x</" in html

    def test_foreign_node_raises(self):
        with pytest.raises(TypeError):
            render([ForeignNode("x")])


class TestJumboEmoji:
    def test_single_emoji(self):
        assert _html("<:foo:9>") == (
            '<img src="9.png" alt="foo" class="emoji wumboji" title="foo"></img>'
        )

    def test_emojis_and_whitespace(self):
        html = _html(" <:foo:9> <a:bar:1> ")
        assert html.count("emoji wumboji") == 2

    def test_emoji_with_text(self):
        html = _html("hi <:foo:9>")
        assert 'class="emoji"' in html
        assert "wumboji" not in html

    def test_emoji_inside_formatting(self):
        assert "wumboji" not in _html("**<:foo:9>**")

    def test_emoji_across_lines(self):
        assert "wumboji" not in _html("<:a:1>\n<:b:2>")

    def test_is_jumbo(self):
        assert is_jumbo([EmojiNode("a", "1.png"), TextNode("  ")])
        assert not is_jumbo([EmojiNode("a", "1.png"), NewlineNode()])
        assert not is_jumbo([TextNode("x")])

    def test_explicit_flag_applies_to_nested_emoji(self):
        from io import StringIO

        buf = StringIO()
        tree = [FormattingNode(FormattingKind.BOLD, [EmojiNode("a", "1.png")])]
        HtmlMarkdownVisitor(Resolvers(), buf, is_jumbo=True).visit_many(tree)
        assert "emoji wumboji" in buf.getvalue()


class TestResolvers:
    def test_render_with_resolvers(self):
        html = render_with_resolvers(
            parse("<:foo:777><@111><@&444><#333>"),
            lambda name: (f"/emojis/{name}", None),
            lambda _: ("Jane Doe", None),
            lambda _: ("green", "#00ff00"),
            lambda _: ("general", None),
        )
        assert html == (
            '<img src="/emojis/777.png" alt="foo" class="emoji" title="foo"></img>'
            '<span class="user">@Jane Doe</span>'
            '<div class="role" style="color: #00ff00">@green'
            '<span style="background-color: #00ff00"></span></div>'
            '<span class="channel" data-id="333">#general</span>'
        )

    def test_all_entity_kinds(self):
        html = render_with_resolvers(
            parse("<#1><@&2><@3><@!3><:foo:4><a:foo:4>"),
            identity_resolver,
            identity_resolver,
            lambda x: (x, "#ff00ff"),
            identity_resolver,
        )
        assert html == (
            '<span class="channel" data-id="1">#1</span>'
            '<div class="role" style="color: #ff00ff">@2'
            '<span style="background-color: #ff00ff"></span></div>'
            '<span class="user">@3</span><span class="user">@3</span>'
            '<img src="4.png" alt="foo" class="emoji" title="foo"></img>'
            '<img src="4.gif" alt="foo" class="emoji" title="foo"></img>'
        )

    def test_resolver_call_order(self):
        user = MagicMock(return_value=("someone", None))
        render_with_resolvers(
            parse("<@1> **<@2> _<@3>_** <@4>"),
            identity_resolver,
            user,
            identity_resolver,
            identity_resolver,
        )
        assert user.call_args_list == [call("1"), call("2"), call("3"), call("4")]

    def test_emoji_resolver_receives_extension(self):
        emoji = MagicMock(return_value=("path", None))
        render_with_resolvers(
            parse("<a:x:42>"), emoji, identity_resolver, identity_resolver, identity_resolver
        )
        emoji.assert_called_once_with("42.gif")

    def test_resolved_names_are_escaped(self):
        html = render_with_resolvers(
            parse("<@1>"),
            identity_resolver,
            lambda _: ("<b>", None),
            identity_resolver,
            identity_resolver,
        )
        assert html == '<span class="user">@&lt;b&gt;</span>'

    def test_role_and_channel_names_are_escaped(self):
        html = render_with_resolvers(
            parse("<@&2><#3>"),
            identity_resolver,
            identity_resolver,
            lambda _: ("<i>mod</i>", "red"),
            lambda _: ("a&b", None),
        )
        assert html == (
            '<div class="role" style="color: red">@&lt;i&gt;mod&lt;/i&gt;'
            '<span style="background-color: red"></span></div>'
            '<span class="channel" data-id="3">#a&amp;b</span>'
        )

    def test_table_resolvers(self, resolver_table):
        html = HtmlMarkdownVisitor.format(parse("<@&2001> <@&2002>"), resolver_table.resolvers())
        assert 'style="color: #ff5733">@Moderator' in html
        assert 'style="color: #afafaf">@Member' in html


# ---------------------------------------------------------------------------
# Plain text
# ---------------------------------------------------------------------------


class TestPlainTextVisitor:
    def test_plain_text_passthrough(self):
        assert render_plain_text(parse("a <b> & c")) == "a <b> & c"

    def test_formatting_dropped(self):
        assert render_plain_text(parse("**b** _i_ ~~s~~ ||x||")) == "b i s x"

    def test_quote_and_entities(self):
        text = render_plain_text(parse("> **hi** <@1>\nbye <:e:2>"))
        assert text == "> hi @1\nbye :e:"

    def test_consecutive_quotes(self):
        assert render_plain_text(parse("> a\n> b")) == "> a\n> b\n"

    def test_empty_quoted_line(self):
        assert render_plain_text(parse("> \n> b")) == "> \n> b\n"

    def test_code(self):
        assert render_plain_text(parse("`x` ```\ny\n```")) == "x y"

    def test_bare_link(self):
        assert render_plain_text(parse("https://example.com")) == "https://example.com"

    def test_alt_text_link(self):
        text = render_plain_text(parse_with_alt_text_links("[docs](https://example.com)"))
        assert text == "docs (https://example.com)"

    def test_mentions_with_table(self, resolver_table):
        text = PlainTextMarkdownVisitor.format(
            parse("<@1001> <@&2001> <#3001> <#9>"), resolver_table.resolvers()
        )
        assert text == "@Jane Doe @Moderator #general #9"


# ---------------------------------------------------------------------------
# Base visitor
# ---------------------------------------------------------------------------


class _TextCollector(MarkdownVisitor):
    def __init__(self) -> None:
        self.texts: list[str] = []

    def visit_text(self, node: TextNode) -> None:
        self.texts.append(node.text)


class TestBaseVisitor:
    def test_document_order(self):
        collector = _TextCollector()
        collector.visit_many(parse("a **b _c_** d\n> e"))
        assert collector.texts == ["a ", "b ", "c", " d", "e"]

    def test_unknown_node(self):
        with pytest.raises(TypeError):
            MarkdownVisitor().visit(ForeignNode("x"))
