"""
Document model for chapnum.

A ``MarkdownDocument`` owns the markdown-it-py token stream of a single
file. Headings are exposed as lightweight ``Heading`` views over the
underlying tokens, so rewriting a heading mutates the document in place
while every other token is left exactly as parsed.
"""

from __future__ import annotations

import copy
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from markdown_it.token import Token
from markdown_it.tree import SyntaxTreeNode

# Inline token types whose content is part of a heading's visible text.
_TEXT_TOKEN_TYPES = frozenset({"text", "text_special", "code_inline", "html_inline"})

# Inline token types that can take a chapter number in front of them.
_LITERAL_TOKEN_TYPES = frozenset({"text", "text_special"})


@dataclass
class Heading:
    """
    A heading block inside a document.

    Wraps the ``heading_open`` token (which carries the level in its tag)
    and the ``inline`` token holding the heading's spans.
    """

    open_token: Token
    inline: Token

    @property
    def level(self) -> int:
        """Heading depth: h1 -> 1, h2 -> 2, etc."""
        return int(self.open_token.tag[1:])

    @property
    def spans(self) -> list[Token]:
        """Inline spans in document order (nested spans included)."""
        if self.inline.children is None:
            self.inline.children = []
        return self.inline.children

    @property
    def text(self) -> str:
        """Plain visible text of the heading."""
        parts: list[str] = []
        for span in self.spans:
            if span.type in _TEXT_TOKEN_TYPES:
                parts.append(span.content)
            elif span.type in ("softbreak", "hardbreak"):
                parts.append(" ")
        return "".join(parts)

    def numbering_target(self) -> Token | None:
        """
        Find the literal span a chapter number should be prepended to.

        Scans the top-level spans in order and returns the first literal
        span (plain text, escape or entity), or the first literal span of
        a link label when the link is reached first. Returns None when
        neither exists.
        """
        index = self._numbering_index()
        return None if index is None else self.spans[index]

    def _numbering_index(self) -> int | None:
        spans = self.spans
        depth = 0
        for index, span in enumerate(spans):
            if depth == 0:
                if span.type in _LITERAL_TOKEN_TYPES:
                    return index
                if span.type == "link_open":
                    label = index + 1
                    if label < len(spans) and spans[label].type in _LITERAL_TOKEN_TYPES:
                        return label
            depth += span.nesting
        return None

    def prepend_text(self, prefix: str) -> bool:
        """
        Put ``prefix`` in front of the numbering target.

        Escapes and entities are rendered from their source markup, so a
        prefix in front of one goes into a new text span of its own.

        Returns:
            False when the heading has no literal span to prefix.
        """
        index = self._numbering_index()
        if index is None:
            return False
        span = self.spans[index]
        if span.type == "text":
            span.content = prefix + span.content
        else:
            self.spans.insert(index, Token("text", "", 0, content=prefix, level=span.level))
        return True

    def link_target(self) -> str | None:
        """Target URL of the first top-level link, or None without a link."""
        depth = 0
        for span in self.spans:
            if depth == 0 and span.type == "link_open":
                href = span.attrGet("href")
                return str(href) if href is not None else ""
            depth += span.nesting
        return None


@dataclass
class MarkdownDocument:
    """
    A parsed Markdown document.

    Attributes:
        tokens: Block-level token stream as produced by markdown-it-py.
        env: Parser environment (reference definitions end up here and are
            never rendered back).
        source_path: File the document was loaded from, if any.
        front_matter: YAML front matter block, kept verbatim and written
            back ahead of the body.
    """

    tokens: list[Token]
    env: dict[str, Any] = field(default_factory=dict)
    source_path: Path | None = None
    front_matter: str | None = None

    def headings(self) -> list[Heading]:
        """All headings in document order, including nested ones."""
        return list(self._iter_headings())

    def _iter_headings(self) -> Iterator[Heading]:
        for index, token in enumerate(self.tokens):
            if token.type != "heading_open":
                continue
            inline = self.tokens[index + 1]
            if inline.type != "inline":
                continue
            yield Heading(open_token=token, inline=inline)

    def insert_heading(
        self,
        index: int,
        level: int,
        text: str,
        spans: list[Token] | None = None,
    ) -> Heading:
        """
        Insert a synthesized heading.

        Args:
            index: Position among the top-level blocks; values past the end
                append the heading.
            level: Heading depth (1-6).
            text: Plain heading text. Without ``spans`` it becomes the only
                inline span and is written out as-is.
            spans: Inline spans copied from another heading. They are
                deep-copied, so escapes and emphasis keep their source
                spelling and the original heading is never shared.

        Returns:
            The inserted heading.
        """
        if not 1 <= level <= 6:
            raise ValueError(f"Heading level must be between 1 and 6, got {level}")

        starts = [
            i for i, token in enumerate(self.tokens) if token.level == 0 and token.nesting != -1
        ]
        position = starts[index] if index < len(starts) else len(self.tokens)

        new_tokens = make_heading_tokens(level, text, spans)
        self.tokens[position:position] = new_tokens
        return Heading(open_token=new_tokens[0], inline=new_tokens[1])

    def tree(self) -> SyntaxTreeNode:
        """Build a syntax tree over the current token stream."""
        return SyntaxTreeNode(self.tokens)


def make_heading_tokens(level: int, text: str, spans: list[Token] | None = None) -> list[Token]:
    """Create the open/inline/close token triple for an ATX heading."""
    tag = f"h{level}"
    markup = "#" * level
    if spans:
        children = copy.deepcopy(spans)
    else:
        children = [Token("text", "", 0, content=text)]
    return [
        Token("heading_open", tag, 1, markup=markup, block=True, level=0),
        Token("inline", "", 0, content=text, children=children, block=True, level=1),
        Token("heading_close", tag, -1, markup=markup, block=True, level=0),
    ]
