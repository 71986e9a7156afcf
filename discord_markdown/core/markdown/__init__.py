"""Discord markdown parsing and rendering."""

from discord_markdown.core.markdown.html_visitor import (
    HtmlMarkdownVisitor,
    render,
    render_with_resolvers,
)
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
    to_dict,
)
from discord_markdown.core.markdown.parser import (
    extract_emojis,
    extract_links,
    extract_mentions,
    parse,
    parse_with_alt_text_links,
)
from discord_markdown.core.markdown.plaintext_visitor import (
    PlainTextMarkdownVisitor,
    render_plain_text,
)
from discord_markdown.core.markdown.resolvers import (
    DEFAULT_RESOLVERS,
    Resolver,
    Resolvers,
    identity_resolver,
)
from discord_markdown.core.markdown.visitor import MarkdownVisitor

__all__ = [
    # Nodes
    "MarkdownNode",
    "TextNode",
    "NewlineNode",
    "FormattingNode",
    "InlineCodeBlockNode",
    "MultiLineCodeBlockNode",
    "LinkNode",
    "MentionNode",
    "EmojiNode",
    "to_dict",
    # Enums
    "FormattingKind",
    "MentionKind",
    # Parser
    "parse",
    "parse_with_alt_text_links",
    "extract_emojis",
    "extract_links",
    "extract_mentions",
    # Resolvers
    "Resolver",
    "Resolvers",
    "DEFAULT_RESOLVERS",
    "identity_resolver",
    # Visitors
    "MarkdownVisitor",
    "HtmlMarkdownVisitor",
    "PlainTextMarkdownVisitor",
    "render",
    "render_with_resolvers",
    "render_plain_text",
]
