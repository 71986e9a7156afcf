"""Discord markdown AST node types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class FormattingKind(Enum):
    QUOTE = "quote"
    SPOILER = "spoiler"
    UNDERLINE = "underline"
    STRIKETHROUGH = "strikethrough"
    BOLD = "bold"
    ITALIC = "italic"


class MentionKind(Enum):
    USER = "user"
    ROLE = "role"
    CHANNEL = "channel"


# ---------------------------------------------------------------------------
# Base node
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MarkdownNode:
    """Abstract base for every markdown AST node."""


# ---------------------------------------------------------------------------
# Concrete nodes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TextNode(MarkdownNode):
    text: str


@dataclass(frozen=True)
class NewlineNode(MarkdownNode):
    pass


@dataclass(frozen=True)
class FormattingNode(MarkdownNode):
    kind: FormattingKind
    children: Sequence[MarkdownNode]


@dataclass(frozen=True)
class InlineCodeBlockNode(MarkdownNode):
    code: str


@dataclass(frozen=True)
class MultiLineCodeBlockNode(MarkdownNode):
    # Raw text between the fences, newlines included
    code: str


@dataclass(frozen=True)
class LinkNode(MarkdownNode):
    url: str
    # Same as url for bare links
    label: str


@dataclass(frozen=True)
class MentionNode(MarkdownNode):
    kind: MentionKind
    target_id: str


@dataclass(frozen=True)
class EmojiNode(MarkdownNode):
    name: str
    # Numeric id with the image extension appended, e.g. "1234.gif"
    id: str

    @property
    def is_animated(self) -> bool:
        return self.id.endswith(".gif")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def get_children(node: MarkdownNode) -> Sequence[MarkdownNode] | None:
    """Return the children of a container node, or None if it is a leaf."""
    if isinstance(node, FormattingNode):
        return node.children
    return None


def to_dict(node: MarkdownNode) -> dict[str, Any]:
    """Convert *node* (and its children) to JSON-compatible dicts."""
    if isinstance(node, TextNode):
        return {"type": "text", "text": node.text}
    if isinstance(node, NewlineNode):
        return {"type": "newline"}
    if isinstance(node, FormattingNode):
        return {
            "type": "formatting",
            "kind": node.kind.value,
            "children": [to_dict(child) for child in node.children],
        }
    if isinstance(node, InlineCodeBlockNode):
        return {"type": "inline_code", "code": node.code}
    if isinstance(node, MultiLineCodeBlockNode):
        return {"type": "multiline_code", "code": node.code}
    if isinstance(node, LinkNode):
        return {"type": "link", "url": node.url, "label": node.label}
    if isinstance(node, MentionNode):
        return {"type": "mention", "kind": node.kind.value, "id": node.target_id}
    if isinstance(node, EmojiNode):
        return {"type": "emoji", "name": node.name, "id": node.id}
    raise TypeError(f"Unknown markdown node type: {type(node).__name__}")
