"""HTML markdown visitor - renders AST nodes to an HTML fragment."""

from __future__ import annotations

from html import escape as html_escape
from io import StringIO
from typing import Sequence

from discord_markdown.core.markdown.nodes import (
    EmojiNode,
    FormattingKind,
    FormattingNode,
    InlineCodeBlockNode,
    LinkNode,
    MarkdownNode,
    MentionKind,
    MentionNode,
    MultiLineCodeBlockNode,
    NewlineNode,
    TextNode,
)
from discord_markdown.core.markdown.resolvers import DEFAULT_RESOLVERS, Resolver, Resolvers
from discord_markdown.core.markdown.visitor import MarkdownVisitor

DEFAULT_ROLE_COLOR = "#afafaf"

_FORMATTING_TAGS: dict[FormattingKind, tuple[str, str]] = {
    FormattingKind.QUOTE: ("<blockquote>", "</blockquote>"),
    FormattingKind.SPOILER: ('<span class="spoiler">', "</span>"),
    FormattingKind.UNDERLINE: ("<u>", "</u>"),
    FormattingKind.STRIKETHROUGH: ('<span class="strikethrough">', "</span>"),
    FormattingKind.BOLD: ("<strong>", "</strong>"),
    FormattingKind.ITALIC: ("<em>", "</em>"),
}


def _html_encode(text: str) -> str:
    return html_escape(text, quote=True)


def is_jumbo(nodes: Sequence[MarkdownNode]) -> bool:
    """Return True if the message consists solely of emoji and whitespace."""
    return all(
        isinstance(n, EmojiNode)
        or (isinstance(n, TextNode) and not n.text.strip())
        for n in nodes
    )


class HtmlMarkdownVisitor(MarkdownVisitor):
    """Renders a markdown AST to HTML.

    Entity nodes are turned into display strings through *resolvers*; the
    *is_jumbo* flag is decided once for the top-level message and applies
    to every emoji in the tree.
    """

    def __init__(
        self,
        resolvers: Resolvers,
        buffer: StringIO,
        is_jumbo: bool,
    ) -> None:
        self._resolvers = resolvers
        self._buffer = buffer
        self._is_jumbo = is_jumbo

    # -- text --

    def visit_text(self, node: TextNode) -> None:
        self._buffer.write(_html_encode(node.text))

    def visit_newline(self, node: NewlineNode) -> None:
        self._buffer.write("<br>")

    # -- formatting --

    def visit_formatting(self, node: FormattingNode) -> None:
        opening, closing = _FORMATTING_TAGS[node.kind]
        self._buffer.write(opening)
        self.visit_many(node.children)
        self._buffer.write(closing)

    # -- code blocks --

    def visit_inline_code_block(self, node: InlineCodeBlockNode) -> None:
        code = node.code.replace("\n", "<br>")
        self._buffer.write(f'<span class="inline_code">{code}</span>')

    def visit_multi_line_code_block(self, node: MultiLineCodeBlockNode) -> None:
        code = node.code.strip().replace("\n", "<br>")
        self._buffer.write(f'<pre class="multiline_code">{code}</pre>')

    # -- links --

    def visit_link(self, node: LinkNode) -> None:
        self._buffer.write(f'<a href="{node.url}" target="_blank">{node.label}</a>')

    # -- emoji --

    def visit_emoji(self, node: EmojiNode) -> None:
        jumbo_class = " wumboji" if self._is_jumbo else ""
        path, _ = self._resolvers.emoji(node.id)
        self._buffer.write(
            f'<img src="{path}" '
            f'alt="{node.name}" '
            f'class="emoji{jumbo_class}" '
            f'title="{node.name}"></img>'
        )

    # -- mentions --

    def visit_mention(self, node: MentionNode) -> None:
        if node.kind == MentionKind.USER:
            name, _ = self._resolvers.user(node.target_id)
            self._buffer.write(f'<span class="user">@{_html_encode(name)}</span>')

        elif node.kind == MentionKind.ROLE:
            name, color = self._resolvers.role(node.target_id)
            color = color or DEFAULT_ROLE_COLOR
            self._buffer.write(
                f'<div class="role" style="color: {color}">'
                f"@{_html_encode(name)}"
                f'<span style="background-color: {color}"></span></div>'
            )

        elif node.kind == MentionKind.CHANNEL:
            name, _ = self._resolvers.channel(node.target_id)
            self._buffer.write(
                f'<span class="channel" data-id="{_html_encode(node.target_id)}">'
                f"#{_html_encode(name)}</span>"
            )

    # -- static entry point --

    @staticmethod
    def format(nodes: Sequence[MarkdownNode], resolvers: Resolvers = DEFAULT_RESOLVERS) -> str:
        """Render an already parsed message as HTML."""
        buf = StringIO()
        visitor = HtmlMarkdownVisitor(resolvers, buf, is_jumbo(nodes))
        visitor.visit_many(nodes)
        return buf.getvalue()


def render(nodes: Sequence[MarkdownNode]) -> str:
    """Render *nodes* as HTML, displaying every entity by its raw id."""
    return HtmlMarkdownVisitor.format(nodes)


def render_with_resolvers(
    nodes: Sequence[MarkdownNode],
    emoji: Resolver,
    user: Resolver,
    role: Resolver,
    channel: Resolver,
) -> str:
    """Render *nodes* as HTML, looking entities up through the given resolvers.

    The emoji resolver receives ``"<id>.png"`` or ``"<id>.gif"`` and returns
    the image path.  The role resolver may return a colour as the second
    tuple element; the other resolvers' second element is ignored.

    User, role and channel names are HTML-escaped, so a resolver cannot
    inject markup through them.  The emoji path and role colour are
    written into attributes as-is.
    """
    return HtmlMarkdownVisitor.format(nodes, Resolvers(emoji, user, role, channel))
