"""
Parsed Markdown Model

Turns markdown-it-py output into a small tree of block and inline variants that
the converters dispatch on. Parsing uses the same parser setup as before:
CommonMark plus GFM tables, strikethrough and task list checkboxes.

Block variants:  HeadingBlock, ParagraphBlock, ListBlock, TableBlock,
                 BlockquoteBlock, CodeBlock, RuleBlock, HtmlBlock
Inline variants: TextNode, SoftBreak, LineBreak, MarkupNode, ImageNode, CheckboxNode
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from html.parser import HTMLParser
from typing import TYPE_CHECKING, Union

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode
from mdit_py_plugins.tasklists import tasklists_plugin

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

# Inline markup kinds that produce a FormatRange
MARKUP_BOLD = "bold"
MARKUP_ITALIC = "italic"
MARKUP_CODE = "code"
MARKUP_LINK = "link"
MARKUP_STRIKETHROUGH = "strikethrough"

# markdown-it node type -> markup kind
MARKUP_NODE_TYPES: dict[str, str] = {
    "strong": MARKUP_BOLD,
    "em": MARKUP_ITALIC,
    "s": MARKUP_STRIKETHROUGH,
    "link": MARKUP_LINK,
}

_HTML_IMG_RE = re.compile(r"^<img\b", re.IGNORECASE)
_HTML_BR_RE = re.compile(r"^<br\s*/?>$", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Inline variants
# ---------------------------------------------------------------------------


@dataclass
class TextNode:
    text: str


@dataclass
class SoftBreak:
    """Source line break inside a paragraph; rendered as a space."""


@dataclass
class LineBreak:
    """Hard line break (two trailing spaces, backslash or <br>)."""


@dataclass
class MarkupNode:
    kind: str
    children: list[InlineNode] = field(default_factory=list)
    url: str | None = None


@dataclass
class ImageNode:
    src: str
    alt: str = ""
    title: str = ""
    width: str | None = None
    height: str | None = None


@dataclass
class CheckboxNode:
    checked: bool


InlineNode = Union[TextNode, SoftBreak, LineBreak, MarkupNode, ImageNode, CheckboxNode]


# ---------------------------------------------------------------------------
# Block variants
# ---------------------------------------------------------------------------


@dataclass
class HeadingBlock:
    level: int
    children: list[InlineNode] = field(default_factory=list)


@dataclass
class ParagraphBlock:
    children: list[InlineNode] = field(default_factory=list)


@dataclass
class ListItemBlock:
    children: list[Block] = field(default_factory=list)


@dataclass
class ListBlock:
    ordered: bool
    items: list[ListItemBlock] = field(default_factory=list)


@dataclass
class TableCellSource:
    children: list[InlineNode] = field(default_factory=list)
    is_header: bool = False


@dataclass
class TableBlock:
    rows: list[list[TableCellSource]] = field(default_factory=list)


@dataclass
class BlockquoteBlock:
    children: list[Block] = field(default_factory=list)


@dataclass
class CodeBlock:
    content: str
    language: str = ""


@dataclass
class RuleBlock:
    pass


@dataclass
class HtmlBlock:
    content: str


Block = Union[
    HeadingBlock, ParagraphBlock, ListBlock, TableBlock, BlockquoteBlock, CodeBlock, RuleBlock, HtmlBlock
]


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def create_markdown_parser() -> MarkdownIt:
    """CommonMark base with GFM tables, strikethrough and task list checkboxes."""
    return MarkdownIt("commonmark").enable("table").enable("strikethrough").use(tasklists_plugin)


def parse_blocks(markdown_text: str, md: MarkdownIt | None = None) -> list[Block]:
    """Parse Markdown into the ordered list of top-level blocks."""
    md = md or create_markdown_parser()
    root = SyntaxTreeNode(md.parse(markdown_text))
    return _build_blocks(root.children)


def _build_blocks(nodes: list[SyntaxTreeNode]) -> list[Block]:
    blocks: list[Block] = []
    for node in nodes:
        block = _build_block(node)
        if block is not None:
            blocks.append(block)
    return blocks


def _build_block(node: SyntaxTreeNode) -> Block | None:
    if node.type == "heading":
        return HeadingBlock(level=int(node.tag[1]), children=_inline_children(node))
    if node.type == "paragraph":
        return ParagraphBlock(children=_inline_children(node))
    if node.type in ("bullet_list", "ordered_list"):
        items = [ListItemBlock(children=_build_blocks(item.children)) for item in node.children]
        return ListBlock(ordered=node.type == "ordered_list", items=items)
    if node.type == "table":
        return _build_table(node)
    if node.type == "blockquote":
        return BlockquoteBlock(children=_build_blocks(node.children))
    if node.type in ("fence", "code_block"):
        return CodeBlock(content=node.content, language=(node.info or "").strip())
    if node.type == "hr":
        return RuleBlock()
    if node.type == "html_block":
        return HtmlBlock(content=node.content)

    logger.warning(f"Skipping unsupported block node: type={node.type}")
    return None


def _build_table(node: SyntaxTreeNode) -> TableBlock:
    rows: list[list[TableCellSource]] = []
    for section in node.children:
        for row in section.children:
            cells = [
                TableCellSource(children=_inline_children(cell), is_header=cell.type == "th")
                for cell in row.children
            ]
            rows.append(cells)
    return TableBlock(rows=rows)


def _inline_children(node: SyntaxTreeNode) -> list[InlineNode]:
    """Inline content of a heading/paragraph/cell (its single `inline` child)."""
    for child in node.children:
        if child.type == "inline":
            return _build_inline(child.children)
    return []


def _build_inline(nodes: list[SyntaxTreeNode]) -> list[InlineNode]:
    result: list[InlineNode] = []
    for node in nodes:
        inline = _build_inline_node(node)
        if inline is not None:
            result.append(inline)
    return result


def _build_inline_node(node: SyntaxTreeNode) -> InlineNode | None:
    if node.type == "text":
        return TextNode(node.content) if node.content else None
    if node.type == "softbreak":
        return SoftBreak()
    if node.type == "hardbreak":
        return LineBreak()
    if node.type == "code_inline":
        return MarkupNode(kind=MARKUP_CODE, children=[TextNode(node.content)])
    if node.type in MARKUP_NODE_TYPES:
        kind = MARKUP_NODE_TYPES[node.type]
        url = str(node.attrs.get("href", "")) if kind == MARKUP_LINK else None
        return MarkupNode(kind=kind, children=_build_inline(node.children), url=url)
    if node.type == "image":
        return ImageNode(
            src=str(node.attrs.get("src", "")),
            alt=node.content,
            title=str(node.attrs.get("title", "") or ""),
        )
    if node.type == "html_inline":
        return _build_html_inline(node.content)

    logger.debug(f"Inline node {node.type} kept as text")
    return TextNode(node.content) if node.content else None


def _build_html_inline(content: str) -> InlineNode | None:
    """
    Handle raw inline HTML.

    Task list checkboxes (emitted by the tasklists plugin as <input> tags),
    <img> tags and <br> tags are recognised; anything else is kept as text.
    """
    if not content:
        return None
    if 'class="task-list-item-checkbox"' in content:
        return CheckboxNode(checked='checked="checked"' in content)
    if _HTML_BR_RE.match(content.strip()):
        return LineBreak()
    if _HTML_IMG_RE.match(content.strip()):
        attrs = parse_html_attrs(content)
        return ImageNode(
            src=attrs.get("src", ""),
            alt=attrs.get("alt", ""),
            title=attrs.get("title", ""),
            width=attrs.get("width"),
            height=attrs.get("height"),
        )
    return TextNode(content)


class _TagAttrCollector(HTMLParser):
    """Collect the attributes of the first start tag fed to it."""

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.attrs: dict[str, str] | None = None

    def handle_starttag(self, tag, attrs):
        if self.attrs is None:
            # Valueless attributes come through as None
            self.attrs = {name: value or "" for name, value in attrs}


def parse_html_attrs(tag: str) -> dict[str, str]:
    """Attributes of a single HTML tag; names are lowercased, entities decoded."""
    collector = _TagAttrCollector()
    collector.feed(tag)
    collector.close()
    return collector.attrs or {}


# ---------------------------------------------------------------------------
# Tree helpers
# ---------------------------------------------------------------------------


def iter_inline(nodes: list[InlineNode]) -> Iterator[InlineNode]:
    """Depth-first walk over inline nodes."""
    for node in nodes:
        yield node
        if isinstance(node, MarkupNode):
            yield from iter_inline(node.children)


def contains_image(nodes: list[InlineNode]) -> bool:
    return any(isinstance(node, ImageNode) for node in iter_inline(nodes))


def contains_checkbox(block: Block) -> bool:
    """True if any list item below `block` starts with a task checkbox."""
    if isinstance(block, ListBlock):
        return any(contains_checkbox(child) for item in block.items for child in item.children)
    if isinstance(block, ParagraphBlock):
        return any(isinstance(node, CheckboxNode) for node in block.children)
    return False


def has_inline_formatting(nodes: list[InlineNode]) -> bool:
    """True if the run carries markup or explicit line breaks."""
    return any(isinstance(node, (MarkupNode, LineBreak)) for node in iter_inline(nodes))


def plain_text(nodes: list[InlineNode]) -> str:
    """Concatenated text of a run without any formatting."""
    parts: list[str] = []
    for node in iter_inline(nodes):
        if isinstance(node, TextNode):
            parts.append(node.text)
        elif isinstance(node, SoftBreak):
            # Soft breaks join lines with a space rather than keeping the source newline
            parts.append(" ")
        elif isinstance(node, LineBreak):
            parts.append("\n")
    return "".join(parts)
