"""Plain text markdown visitor - strips formatting, resolves mentions."""

from __future__ import annotations

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
from discord_markdown.core.markdown.resolvers import DEFAULT_RESOLVERS, Resolvers
from discord_markdown.core.markdown.visitor import MarkdownVisitor


class PlainTextMarkdownVisitor(MarkdownVisitor):
    """Renders a markdown AST as plain text.

    Formatting markers are dropped, quotes keep their ``> `` prefix and
    entities are written out with the names the resolvers return.
    """

    def __init__(self, resolvers: Resolvers, buffer: StringIO) -> None:
        self._resolvers = resolvers
        self._buffer = buffer

    # -- text --

    def visit_text(self, node: TextNode) -> None:
        self._buffer.write(node.text)

    def visit_newline(self, node: NewlineNode) -> None:
        self._buffer.write("\n")

    def visit_formatting(self, node: FormattingNode) -> None:
        if node.kind != FormattingKind.QUOTE:
            self.visit_many(node.children)
            return

        # The quote swallowed the newline that ended its line
        self._buffer.write("> ")
        self.visit_many(node.children)
        if not node.children or not isinstance(node.children[-1], NewlineNode):
            self._buffer.write("\n")

    # -- code blocks --

    def visit_inline_code_block(self, node: InlineCodeBlockNode) -> None:
        self._buffer.write(node.code)

    def visit_multi_line_code_block(self, node: MultiLineCodeBlockNode) -> None:
        self._buffer.write(node.code.strip())

    # -- links --

    def visit_link(self, node: LinkNode) -> None:
        self._buffer.write(node.label)
        if node.label != node.url:
            self._buffer.write(f" ({node.url})")

    # -- emoji --

    def visit_emoji(self, node: EmojiNode) -> None:
        self._buffer.write(f":{node.name}:")

    # -- mentions --

    def visit_mention(self, node: MentionNode) -> None:
        if node.kind == MentionKind.USER:
            name, _ = self._resolvers.user(node.target_id)
            self._buffer.write(f"@{name}")

        elif node.kind == MentionKind.ROLE:
            name, _ = self._resolvers.role(node.target_id)
            self._buffer.write(f"@{name}")

        elif node.kind == MentionKind.CHANNEL:
            name, _ = self._resolvers.channel(node.target_id)
            self._buffer.write(f"#{name}")

    # -- static entry point --

    @staticmethod
    def format(nodes: Sequence[MarkdownNode], resolvers: Resolvers = DEFAULT_RESOLVERS) -> str:
        """Render an already parsed message as plain text."""
        buf = StringIO()
        visitor = PlainTextMarkdownVisitor(resolvers, buf)
        visitor.visit_many(nodes)
        return buf.getvalue()


def render_plain_text(
    nodes: Sequence[MarkdownNode],
    resolvers: Resolvers = DEFAULT_RESOLVERS,
) -> str:
    """Render *nodes* as plain text; every quoted line ends with a newline."""
    return PlainTextMarkdownVisitor.format(nodes, resolvers)
