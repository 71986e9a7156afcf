"""Base markdown visitor."""

from __future__ import annotations

from typing import Sequence

from discord_markdown.core.markdown.nodes import (
    EmojiNode,
    FormattingNode,
    InlineCodeBlockNode,
    LinkNode,
    MarkdownNode,
    MentionNode,
    MultiLineCodeBlockNode,
    NewlineNode,
    TextNode,
)


class MarkdownVisitor:
    """Abstract visitor that walks a markdown AST.

    Override the ``visit_*`` methods in subclasses to implement custom
    behaviour.  The default implementation for formatting nodes simply
    recurses into their children.  Nodes are visited in document order:
    siblings left to right, depth-first into containers.
    """

    # -- leaf visitors (no-ops by default) --

    def visit_text(self, node: TextNode) -> None:
        pass

    def visit_newline(self, node: NewlineNode) -> None:
        pass

    def visit_emoji(self, node: EmojiNode) -> None:
        pass

    def visit_mention(self, node: MentionNode) -> None:
        pass

    def visit_link(self, node: LinkNode) -> None:
        pass

    def visit_inline_code_block(self, node: InlineCodeBlockNode) -> None:
        pass

    def visit_multi_line_code_block(self, node: MultiLineCodeBlockNode) -> None:
        pass

    # -- container visitors (recurse by default) --

    def visit_formatting(self, node: FormattingNode) -> None:
        self.visit_many(node.children)

    # -- dispatch --

    def visit(self, node: MarkdownNode) -> None:
        if isinstance(node, TextNode):
            self.visit_text(node)
        elif isinstance(node, NewlineNode):
            self.visit_newline(node)
        elif isinstance(node, FormattingNode):
            self.visit_formatting(node)
        elif isinstance(node, InlineCodeBlockNode):
            self.visit_inline_code_block(node)
        elif isinstance(node, MultiLineCodeBlockNode):
            self.visit_multi_line_code_block(node)
        elif isinstance(node, LinkNode):
            self.visit_link(node)
        elif isinstance(node, EmojiNode):
            self.visit_emoji(node)
        elif isinstance(node, MentionNode):
            self.visit_mention(node)
        else:
            raise TypeError(f"Unknown markdown node type: {type(node).__name__}")

    def visit_many(self, nodes: Sequence[MarkdownNode]) -> None:
        for node in nodes:
            self.visit(node)
