"""
Markdown exporter for chapnum.

Renders a (possibly rewritten) document back to Markdown text. Rendering
is driven by a node-type -> render method mapping; tables get a
dedicated renderer that keeps their pipe layout and column alignment.
Reference-style link definitions have no entry in the mapping: the
parser resolves them into the links themselves, so links are always
written inline and no definition section is ever emitted.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import ClassVar

from markdown_it.tree import SyntaxTreeNode

from chapnum.core.document import MarkdownDocument

logger = logging.getLogger(__name__)

PIPE_SEPARATOR = "|"
HEADER_SEPARATOR = "---"
ALIGNMENT_CHAR = ":"
MARGIN_SEPARATOR = " "

# Line starts that open a block (ATX heading, block quote, bullet, fence,
# setext underline, thematic break, table row) when not escaped.
_BLOCK_START_RE = re.compile(
    r"(?:#{1,6}(?=[ \t]|$)|>|[-+*](?=[ \t]|$)|`{3,}|~{3,}|=+[ \t]*$|-+[ \t]*$|\|"
    r"|([-*_])(?:[ \t]*\1){2,}[ \t]*$)"
)
_ORDERED_MARKER_RE = re.compile(r"(\d{1,9})[.)](?=[ \t]|$)")


@dataclass(frozen=True)
class RenderContext:
    """State handed down while rendering nested nodes."""

    in_table: bool = False


class MarkdownRenderer:
    """
    Render markdown-it-py syntax trees back to Markdown.

    Untouched content comes back with the same meaning it was parsed
    with; whitespace and marker choices follow a normalized style
    (ATX headings, blank line between blocks).
    """

    RENDERERS: ClassVar[dict[str, str]] = {
        # Blocks
        "heading": "_render_heading",
        "paragraph": "_render_paragraph",
        "fence": "_render_fence",
        "code_block": "_render_code_block",
        "bullet_list": "_render_bullet_list",
        "ordered_list": "_render_ordered_list",
        "blockquote": "_render_blockquote",
        "hr": "_render_hr",
        "html_block": "_render_html_block",
        "table": "_render_table",
        # Inlines
        "inline": "_render_children",
        "text": "_render_text",
        "text_special": "_render_text_special",
        "softbreak": "_render_softbreak",
        "hardbreak": "_render_hardbreak",
        "code_inline": "_render_code_inline",
        "em": "_render_delimited",
        "strong": "_render_delimited",
        "s": "_render_delimited",
        "link": "_render_link",
        "image": "_render_image",
        "html_inline": "_render_html_inline",
    }

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def render(self, document: MarkdownDocument) -> str:
        """Render a whole document, front matter included."""
        body = self._render_blocks(document.tree().children, RenderContext())
        text = body + "\n" if body else ""

        if document.front_matter:
            front_matter = document.front_matter
            if not front_matter.endswith("\n"):
                front_matter += "\n"
            text = front_matter + text

        return text

    def render_to_file(self, document: MarkdownDocument, path: Path) -> Path:
        """
        Render a document and write it to ``path``.

        The text is rendered before the file is opened, so a rendering
        failure never leaves a truncated output file behind.
        """
        logger.info("Creating %s", path)
        text = self.render(document)

        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding=self.encoding, newline="\n") as f:
            f.write(text)

        return path

    def render_node(self, node: SyntaxTreeNode, ctx: RenderContext | None = None) -> str:
        """Render a single node with the renderer registered for its type."""
        ctx = ctx or RenderContext()
        method_name = self.RENDERERS.get(node.type)
        if method_name is None:
            return self._render_unknown(node, ctx)
        return getattr(self, method_name)(node, ctx)

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def _render_blocks(
        self, nodes: list[SyntaxTreeNode], ctx: RenderContext, separator: str = "\n\n"
    ) -> str:
        parts = [self.render_node(node, ctx) for node in nodes]
        return separator.join(part for part in parts if part)

    def _render_heading(self, node: SyntaxTreeNode, ctx: RenderContext) -> str:
        level = int(node.tag[1:])
        text = self._render_children(node, ctx).replace("\n", " ").strip()
        marker = "#" * level
        return f"{marker} {text}" if text else marker

    def _render_paragraph(self, node: SyntaxTreeNode, ctx: RenderContext) -> str:
        return self._render_children(node, ctx)

    def _render_fence(self, node: SyntaxTreeNode, ctx: RenderContext) -> str:
        markup = node.markup or "```"
        content = node.content
        if content and not content.endswith("\n"):
            content += "\n"
        return f"{markup}{node.info}\n{content}{markup}"

    def _render_code_block(self, node: SyntaxTreeNode, ctx: RenderContext) -> str:
        lines = node.content.rstrip("\n").split("\n")
        return "\n".join("    " + line if line else "" for line in lines)

    def _render_bullet_list(self, node: SyntaxTreeNode, ctx: RenderContext) -> str:
        tight = _is_tight(node)
        items = []
        for item in node.children:
            marker = item.markup or node.markup or "-"
            items.append(self._render_list_item(item, marker, tight, ctx))
        return ("\n" if tight else "\n\n").join(items)

    def _render_ordered_list(self, node: SyntaxTreeNode, ctx: RenderContext) -> str:
        tight = _is_tight(node)
        start = int(node.attrs.get("start", 1))
        items = []
        for offset, item in enumerate(node.children):
            delimiter = item.markup or "."
            marker = f"{start + offset}{delimiter}"
            items.append(self._render_list_item(item, marker, tight, ctx))
        return ("\n" if tight else "\n\n").join(items)

    def _render_list_item(
        self, node: SyntaxTreeNode, marker: str, tight: bool, ctx: RenderContext
    ) -> str:
        content = self._render_blocks(node.children, ctx, separator="\n" if tight else "\n\n")
        if not content:
            return marker

        indent = " " * (len(marker) + 1)
        first, *rest = content.split("\n")
        lines = [f"{marker} {first}" if first else marker]
        lines.extend(indent + line if line else "" for line in rest)
        return "\n".join(lines)

    def _render_blockquote(self, node: SyntaxTreeNode, ctx: RenderContext) -> str:
        content = self._render_blocks(node.children, ctx)
        if not content:
            return ">"
        return "\n".join(f"> {line}" if line else ">" for line in content.split("\n"))

    def _render_hr(self, node: SyntaxTreeNode, ctx: RenderContext) -> str:
        return node.markup or HEADER_SEPARATOR

    def _render_html_block(self, node: SyntaxTreeNode, ctx: RenderContext) -> str:
        return node.content.rstrip("\n")

    def _render_table(self, node: SyntaxTreeNode, ctx: RenderContext) -> str:
        """
        Render a GFM table.

        Every row is written as ``| cell | cell |``. The header row is
        followed by a ``| --- |`` separator; alignment markers only appear
        when at least one column is not left-aligned.
        """
        cell_ctx = replace(ctx, in_table=True)
        alignments: list[str | None] = []
        lines: list[str] = []

        for section in node.children:
            is_header = section.type == "thead"
            for row in section.children:
                cells = []
                for cell in row.children:
                    cells.append(self._render_children(cell, cell_ctx).strip())
                    if is_header:
                        alignments.append(_cell_alignment(cell))

                line = PIPE_SEPARATOR
                for cell_text in cells:
                    line += f"{MARGIN_SEPARATOR}{cell_text}{MARGIN_SEPARATOR}{PIPE_SEPARATOR}"
                lines.append(line)

                if is_header:
                    lines.append(_separator_row(alignments))

        return "\n".join(lines)

    def _render_unknown(self, node: SyntaxTreeNode, ctx: RenderContext) -> str:
        if node.children:
            return self._render_children(node, ctx)
        try:
            return node.content
        except AttributeError:
            return ""

    # ------------------------------------------------------------------
    # Inlines
    # ------------------------------------------------------------------

    def _render_children(self, node: SyntaxTreeNode, ctx: RenderContext) -> str:
        parts = []
        line_start = False
        for child in node.children:
            rendered = self.render_node(child, ctx)
            if line_start and child.type == "text":
                rendered = _escape_line_start(rendered)
            parts.append(rendered)
            line_start = child.type in ("softbreak", "hardbreak")
        return "".join(parts)

    def _render_text(self, node: SyntaxTreeNode, ctx: RenderContext) -> str:
        if ctx.in_table:
            return node.content.replace("|", "\\|")
        return node.content

    def _render_text_special(self, node: SyntaxTreeNode, ctx: RenderContext) -> str:
        # Escapes and entities keep the source spelling in their markup.
        text = node.markup or node.content
        if ctx.in_table and text == "|":
            return "\\|"
        return text

    def _render_softbreak(self, node: SyntaxTreeNode, ctx: RenderContext) -> str:
        return "\n"

    def _render_hardbreak(self, node: SyntaxTreeNode, ctx: RenderContext) -> str:
        return "\\\n"

    def _render_code_inline(self, node: SyntaxTreeNode, ctx: RenderContext) -> str:
        content = node.content
        if ctx.in_table:
            content = content.replace("|", "\\|")
        fence = node.markup or "`"
        padded = (
            content.startswith("`")
            or content.endswith("`")
            or (content.startswith(" ") and content.endswith(" ") and content.strip() != "")
        )
        if padded:
            content = f" {content} "
        return f"{fence}{content}{fence}"

    def _render_delimited(self, node: SyntaxTreeNode, ctx: RenderContext) -> str:
        return f"{node.markup}{self._render_children(node, ctx)}{node.markup}"

    def _render_link(self, node: SyntaxTreeNode, ctx: RenderContext) -> str:
        label = self._render_children(node, ctx)
        if node.markup == "autolink":
            return f"<{label}>"
        href = str(node.attrs.get("href", ""))
        title = node.attrs.get("title")
        return f"[{label}]({_link_destination(href)}{_link_title(title)})"

    def _render_image(self, node: SyntaxTreeNode, ctx: RenderContext) -> str:
        alt = self._render_children(node, ctx)
        src = str(node.attrs.get("src", ""))
        title = node.attrs.get("title")
        return f"![{alt}]({_link_destination(src)}{_link_title(title)})"

    def _render_html_inline(self, node: SyntaxTreeNode, ctx: RenderContext) -> str:
        return node.content


def _is_tight(node: SyntaxTreeNode) -> bool:
    """A list is tight when the parser hid its item paragraphs."""
    for item in node.children:
        for child in item.children:
            if child.type == "paragraph":
                return bool(child.hidden)
    return True


def _cell_alignment(cell: SyntaxTreeNode) -> str | None:
    """Column alignment from a header cell's ``style="text-align:..."``."""
    style = cell.attrs.get("style")
    if not style:
        return None
    _, found, value = str(style).partition("text-align:")
    if not found:
        return None
    return value.strip().rstrip(";") or None


def _separator_row(alignments: list[str | None]) -> str:
    alignment_enabled = any(alignment != "left" for alignment in alignments)

    line = PIPE_SEPARATOR
    for alignment in alignments:
        line += MARGIN_SEPARATOR
        if alignment_enabled and alignment in ("left", "center"):
            line += ALIGNMENT_CHAR
        line += HEADER_SEPARATOR
        if alignment_enabled and alignment in ("right", "center"):
            line += ALIGNMENT_CHAR
        line += MARGIN_SEPARATOR + PIPE_SEPARATOR
    return line


def _escape_line_start(text: str) -> str:
    """
    Escape text that would open a block when it starts a line.

    The parser drops the indentation of continuation lines, so a line
    like ``    # not a heading`` comes back at column 0.
    """
    match = _ORDERED_MARKER_RE.match(text)
    if match:
        return f"{match.group(1)}\\{text[match.end(1):]}"
    if _BLOCK_START_RE.match(text):
        return "\\" + text
    return text


def _link_destination(url: str) -> str:
    if not url:
        return "<>"
    if any(ch in url for ch in " <>") or url.count("(") != url.count(")"):
        return "<" + url.replace("<", "%3C").replace(">", "%3E") + ">"
    return url


def _link_title(title: object) -> str:
    if not title:
        return ""
    escaped = str(title).replace("\\", "\\\\").replace('"', '\\"')
    return f' "{escaped}"'
