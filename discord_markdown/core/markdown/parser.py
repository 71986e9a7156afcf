"""Discord markdown parser.

Discord markdown is scanned left to right.  At every position a fixed list
of matchers is tried in priority order and the first one that recognises
the text starting exactly at that position wins; the order, not the match
length, settles ambiguous delimiter runs such as ``***``.  Formatting
matchers hand their inner text back to the scanner, so containers nest.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Sequence

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
    get_children,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

_MAX_DEPTH = 32

_SHRUG = "¯\\_(ツ)_/¯"


@dataclass(frozen=True)
class _Segment:
    """A view into the original source string."""

    source: str
    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length

    def relocate(self, new_start: int, new_length: int) -> _Segment:
        return _Segment(self.source, new_start, new_length)

    def __str__(self) -> str:
        return self.source[self.start : self.end]


@dataclass(frozen=True)
class _ParsedMatch:
    segment: _Segment
    value: MarkdownNode


@dataclass(frozen=True)
class _Options:
    """Settings fixed for a whole parse, nested parses included."""

    alt_text_links: bool


_DEFAULT_OPTIONS = _Options(alt_text_links=False)
_ALT_TEXT_OPTIONS = _Options(alt_text_links=True)

# Matcher: callable that takes (depth, options, segment) and tries to match
# the text starting exactly at segment.start -> Optional[_ParsedMatch]
_Matcher = Callable[[int, _Options, _Segment], _ParsedMatch | None]

# Bounds: callable that takes a segment and returns
# (inner_start, inner_end, match_end) when its delimiters are found at
# segment.start, or None
_Bounds = Callable[[_Segment], tuple[int, int, int] | None]

_Transform = Callable[[int, _Options, _Segment], MarkdownNode]


def _regex_matcher(
    pattern: re.Pattern[str],
    transform: Callable[[re.Match[str]], MarkdownNode],
) -> _Matcher:
    """Build a matcher from a compiled regex anchored at the segment start."""

    def _match(depth: int, options: _Options, segment: _Segment) -> _ParsedMatch | None:
        m = pattern.match(segment.source, segment.start, segment.end)
        if m is None:
            return None
        seg_match = segment.relocate(m.start(), m.end() - m.start())
        return _ParsedMatch(seg_match, transform(m))

    return _match


def _span_matcher(bounds: _Bounds, transform: _Transform) -> _Matcher:
    """Build a matcher from a delimiter locator and an inner-text transform."""

    def _match(depth: int, options: _Options, segment: _Segment) -> _ParsedMatch | None:
        hit = bounds(segment)
        if hit is None:
            return None
        inner_start, inner_end, end = hit
        inner = segment.relocate(inner_start, inner_end - inner_start)
        seg_match = segment.relocate(segment.start, end - segment.start)
        return _ParsedMatch(seg_match, transform(depth, options, inner))

    return _match


def _first_matcher(matchers: Sequence[_Matcher]) -> _Matcher:
    """Build a matcher that returns the hit of the first sub-matcher that succeeds."""

    def _match(depth: int, options: _Options, segment: _Segment) -> _ParsedMatch | None:
        for matcher in matchers:
            hit = matcher(depth, options, segment)
            if hit is not None:
                return hit
        return None

    return _match


def _delimited(
    segment: _Segment,
    opening: str,
    closing: str,
    min_length: int = 0,
) -> tuple[int, int, int] | None:
    """Locate *opening* at the segment start and the first *closing* after it."""
    source, start, end = segment.source, segment.start, segment.end
    if not source.startswith(opening, start, end):
        return None
    inner_start = start + len(opening)
    idx = source.find(closing, inner_start, end)
    if idx < inner_start + min_length:
        return None
    return inner_start, idx, idx + len(closing)


def _is_quote(node: MarkdownNode) -> bool:
    return isinstance(node, FormattingNode) and node.kind is FormattingKind.QUOTE


# ---------------------------------------------------------------------------
# Scanner
# ---------------------------------------------------------------------------


def _scan(
    depth: int,
    options: _Options,
    segment: _Segment,
    allow_quote: bool,
) -> list[MarkdownNode]:
    """Turn *segment* into nodes, filling the gaps between matches with TextNodes."""
    source = segment.source
    end = segment.end
    results: list[MarkdownNode] = []
    # Start of the text not yet emitted
    pending = segment.start
    current = segment.start

    def _flush(upto: int) -> None:
        if upto > pending:
            results.append(TextNode(source[pending:upto]))

    while current < end:
        char = source[current]

        if char == "\n":
            _flush(current)
            results.append(NewlineNode())
            allow_quote = True
            current = pending = current + 1
            continue

        if char == "¯" and source.startswith(_SHRUG, current, end):
            _flush(current)
            results.append(TextNode(_SHRUG))
            current = pending = current + len(_SHRUG)
            continue

        if char == "\\" and current + 1 < end:
            _flush(current)
            results.append(TextNode(source[current + 1]))
            current = pending = current + 2
            continue

        matcher = _QUOTED_NODE_MATCHER if allow_quote else _NODE_MATCHER
        hit = matcher(depth, options, segment.relocate(current, end - current))
        if hit is None:
            allow_quote = False
            current += 1
            continue

        # A quote already consumed its trailing newline, if it had one
        if not _is_quote(hit.value):
            allow_quote = False
        _flush(current)
        results.append(hit.value)
        current = pending = hit.segment.end

    _flush(end)
    return results


def _parse(
    depth: int,
    options: _Options,
    segment: _Segment,
    allow_quote: bool = False,
) -> list[MarkdownNode]:
    if depth >= _MAX_DEPTH:
        logger.debug(
            "Markdown nested deeper than %d levels; keeping %d characters verbatim",
            _MAX_DEPTH,
            segment.length,
        )
        return [TextNode(str(segment))] if segment.length else []
    return _scan(depth + 1, options, segment, allow_quote)


def _formatting(kind: FormattingKind) -> _Transform:
    def _t(d: int, o: _Options, inner: _Segment) -> MarkdownNode:
        return FormattingNode(kind, _parse(d, o, inner))

    return _t


# ---------------------------------------------------------------------------
# Matchers – mentions and emoji
# ---------------------------------------------------------------------------


def _mk_custom_emoji() -> _Matcher:
    pat = re.compile(r"<(a?):(\w+):(\d+)>")

    def _t(m: re.Match[str]) -> MarkdownNode:
        extension = "gif" if m.group(1) else "png"
        return EmojiNode(name=m.group(2), id=f"{m.group(3)}.{extension}")

    return _regex_matcher(pat, _t)


def _mk_user_mention() -> _Matcher:
    # "!" marks a nickname mention; both forms point at the same user
    pat = re.compile(r"<@!?(\d+)>")

    def _t(m: re.Match[str]) -> MarkdownNode:
        return MentionNode(MentionKind.USER, m.group(1))

    return _regex_matcher(pat, _t)


def _mk_role_mention() -> _Matcher:
    pat = re.compile(r"<@&(\d+)>")

    def _t(m: re.Match[str]) -> MarkdownNode:
        return MentionNode(MentionKind.ROLE, m.group(1))

    return _regex_matcher(pat, _t)


def _mk_channel_mention() -> _Matcher:
    pat = re.compile(r"<\#(\d+)>")

    def _t(m: re.Match[str]) -> MarkdownNode:
        return MentionNode(MentionKind.CHANNEL, m.group(1))

    return _regex_matcher(pat, _t)


# ---------------------------------------------------------------------------
# Matchers – links
# ---------------------------------------------------------------------------

# Trailing punctuation is left out so sentences ending in a link keep their period
_URL_PATTERN = re.compile(
    r"(?:https?|ftp|file)://[-A-Za-z0-9+&@\#/%?=~_|!:,.;]*[A-Za-z0-9+&@\#/%=~_|]"
)


def _url_bounds(source: str, start: int, end: int) -> tuple[int, int, int] | None:
    """Locate a bare or ``<...>``-wrapped URL at *start*: (url_start, url_end, match_end)."""
    m = _URL_PATTERN.match(source, start, end)
    if m is not None:
        return m.start(), m.end(), m.end()
    if source.startswith("<", start, end):
        m = _URL_PATTERN.match(source, start + 1, end)
        if m is not None and source.startswith(">", m.end(), end):
            return m.start(), m.end(), m.end() + 1
    return None


def _mk_link() -> _Matcher:
    def _match(depth: int, options: _Options, segment: _Segment) -> _ParsedMatch | None:
        source, start, end = segment.source, segment.start, segment.end

        hit = _url_bounds(source, start, end)
        if hit is not None:
            url_start, url_end, match_end = hit
            url = source[url_start:url_end]
            return _ParsedMatch(segment.relocate(start, match_end - start), LinkNode(url, url))

        if not options.alt_text_links:
            return None

        # [label](url)
        label = _delimited(segment, "[", "]")
        if label is None:
            return None
        label_start, label_end, after_label = label
        if not source.startswith("(", after_label, end):
            return None
        hit = _url_bounds(source, after_label + 1, end)
        if hit is None:
            return None
        url_start, url_end, url_match_end = hit
        if not source.startswith(")", url_match_end, end):
            return None
        node = LinkNode(source[url_start:url_end], source[label_start:label_end])
        return _ParsedMatch(segment.relocate(start, url_match_end + 1 - start), node)

    return _match


# ---------------------------------------------------------------------------
# Matchers – code blocks
# ---------------------------------------------------------------------------


def _mk_multi_line_code_block() -> _Matcher:
    def _t(d: int, o: _Options, inner: _Segment) -> MarkdownNode:
        return MultiLineCodeBlockNode(str(inner))

    return _span_matcher(lambda s: _delimited(s, "```", "```"), _t)


def _mk_inline_code_block() -> _Matcher:
    def _bounds(segment: _Segment) -> tuple[int, int, int] | None:
        # Double backticks first so the content may hold a single backtick
        return _delimited(segment, "``", "``") or _delimited(segment, "`", "`", min_length=1)

    def _t(d: int, o: _Options, inner: _Segment) -> MarkdownNode:
        return InlineCodeBlockNode(str(inner))

    return _span_matcher(_bounds, _t)


# ---------------------------------------------------------------------------
# Matchers – formatting
# ---------------------------------------------------------------------------


def _mk_quote() -> _Matcher:
    def _bounds(segment: _Segment) -> tuple[int, int, int] | None:
        source, start, end = segment.source, segment.start, segment.end
        if not source.startswith("> ", start, end):
            return None
        inner_start = start + 2
        newline = source.find("\n", inner_start, end)
        if newline < 0:
            # Quote running to the end of the input
            if inner_start == end:
                return None
            return inner_start, end, end
        if newline == inner_start:
            # Empty quoted line: the newline itself is the content
            return inner_start, newline + 1, newline + 1
        return inner_start, newline, newline + 1

    return _span_matcher(_bounds, _formatting(FormattingKind.QUOTE))


def _mk_spoiler() -> _Matcher:
    return _span_matcher(
        lambda s: _delimited(s, "||", "||"),
        _formatting(FormattingKind.SPOILER),
    )


def _mk_strikethrough() -> _Matcher:
    return _span_matcher(
        lambda s: _delimited(s, "~~", "~~"),
        _formatting(FormattingKind.STRIKETHROUGH),
    )


def _double_marker_bounds(marker: str) -> _Bounds:
    """Delimiters for ``__`` / ``**`` runs, disambiguated against a single *marker*."""
    double = marker * 2
    triple = marker * 3
    quadruple = marker * 4

    def _bounds(segment: _Segment) -> tuple[int, int, int] | None:
        source, start, end = segment.source, segment.start, segment.end

        # Four markers on both sides
        hit = _delimited(segment, quadruple, quadruple)
        if hit is not None:
            return hit

        if not source.startswith(double, start, end):
            return None
        inner_start = start + 2

        # Three markers on both sides: the innermost pair stays in the content
        if source.startswith(marker, inner_start, end):
            idx = source.find(triple, inner_start + 1, end)
            if idx >= 0:
                return inner_start, idx + 1, idx + 3

        # Three markers at the end only: the first one stays in the content
        idx = source.find(triple, inner_start, end)
        if idx >= 0:
            return inner_start, idx + 1, idx + 3

        return _delimited(segment, double, double)

    return _bounds


def _mk_underline() -> _Matcher:
    return _span_matcher(_double_marker_bounds("_"), _formatting(FormattingKind.UNDERLINE))


def _mk_bold() -> _Matcher:
    return _span_matcher(_double_marker_bounds("*"), _formatting(FormattingKind.BOLD))


def _mk_italic() -> _Matcher:
    def _bounds(segment: _Segment) -> tuple[int, int, int] | None:
        return _delimited(segment, "_", "_", min_length=1) or _delimited(
            segment, "*", "*", min_length=1
        )

    return _span_matcher(_bounds, _formatting(FormattingKind.ITALIC))


# ---------------------------------------------------------------------------
# Build the aggregate matchers
# ---------------------------------------------------------------------------

# Priority order is significant: earlier matchers win at the same position
_INLINE_MATCHERS: list[_Matcher] = [
    # Mentions and emoji
    _mk_custom_emoji(),
    _mk_user_mention(),
    _mk_role_mention(),
    _mk_channel_mention(),
    # Links
    _mk_link(),
    # Code blocks
    _mk_multi_line_code_block(),
    _mk_inline_code_block(),
    # Formatting
    _mk_spoiler(),
    _mk_underline(),
    _mk_strikethrough(),
    _mk_bold(),
    _mk_italic(),
]

_NODE_MATCHER = _first_matcher(_INLINE_MATCHERS)

# Used at the start of the input and right after a newline
_QUOTED_NODE_MATCHER = _first_matcher([_mk_quote(), *_INLINE_MATCHERS])


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse(markdown: str) -> list[MarkdownNode]:
    """Parse Discord markdown text into an AST (bare links only)."""
    segment = _Segment(markdown, 0, len(markdown))
    return _parse(0, _DEFAULT_OPTIONS, segment, allow_quote=True)


def parse_with_alt_text_links(markdown: str) -> list[MarkdownNode]:
    """Parse Discord markdown text into an AST, also recognising ``[label](url)`` links.

    Alt-text links are only rendered by Discord inside embeds.
    """
    segment = _Segment(markdown, 0, len(markdown))
    return _parse(0, _ALT_TEXT_OPTIONS, segment, allow_quote=True)


def _extract_nodes_of_type(
    nodes: Sequence[MarkdownNode],
    node_type: type,
    result: list[MarkdownNode],
) -> None:
    """Recursively extract all nodes of a given type from the AST."""
    for node in nodes:
        if isinstance(node, node_type):
            result.append(node)
        children = get_children(node)
        if children is not None:
            _extract_nodes_of_type(children, node_type, result)


def extract_emojis(markdown: str) -> list[EmojiNode]:
    """Extract all custom emoji nodes from parsed markdown."""
    result: list[MarkdownNode] = []
    _extract_nodes_of_type(parse(markdown), EmojiNode, result)
    return result  # type: ignore[return-value]


def extract_links(markdown: str, alt_text_links: bool = False) -> list[LinkNode]:
    """Extract all link nodes from parsed markdown."""
    nodes = parse_with_alt_text_links(markdown) if alt_text_links else parse(markdown)
    result: list[MarkdownNode] = []
    _extract_nodes_of_type(nodes, LinkNode, result)
    return result  # type: ignore[return-value]


def extract_mentions(markdown: str, kind: MentionKind | None = None) -> list[MentionNode]:
    """Extract mention nodes from parsed markdown, optionally of one *kind* only."""
    result: list[MarkdownNode] = []
    _extract_nodes_of_type(parse(markdown), MentionNode, result)
    return [
        m for m in result if isinstance(m, MentionNode) and (kind is None or m.kind is kind)
    ]
