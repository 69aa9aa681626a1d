"""Segment assistant reply text into paragraph and list blocks with bold spans.

The grammar is deliberately tiny:

* ``1. item`` lines form ordered lists,
* ``- item``, ``* item`` and ``• item`` lines form unordered lists,
* any other non-blank lines form paragraphs, keeping their line breaks,
* ``**text**`` inside any line is bold.

Nothing else (italics, links, escapes, nesting) is recognised, and no input
makes the parser raise.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import re

ORDERED_ITEM_PATTERN = re.compile(r"^\s*\d+\.\s+")
UNORDERED_ITEM_PATTERN = re.compile(r"^\s*[-*•]\s+")
BOLD_PATTERN = re.compile(r"(\*\*[^*]+?\*\*)")


class BlockKind(str, Enum):
    """Structural kinds a reply can be split into."""

    PARAGRAPH = "paragraph"
    ORDERED_LIST = "ordered-list"
    UNORDERED_LIST = "unordered-list"


@dataclass(frozen=True)
class Span:
    """An inline run of text, bold or plain."""

    bold: bool
    text: str


@dataclass(frozen=True)
class Block:
    """A paragraph (``lines`` are its lines) or a list (``lines`` are its items)."""

    kind: BlockKind
    lines: tuple[str, ...]
    spans: tuple[tuple[Span, ...], ...]

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    @property
    def items(self) -> tuple[str, ...]:
        return self.lines


def parse_inline(line: str) -> list[Span]:
    """Split a single line into bold and plain spans."""
    spans: list[Span] = []
    # The capturing split alternates plain text (even) and bold matches (odd).
    for position, part in enumerate(BOLD_PATTERN.split(line)):
        if not part:
            continue
        if position % 2:
            spans.append(Span(bold=True, text=part[2:-2]))
        else:
            spans.append(Span(bold=False, text=part))
    return spans


def _make_block(kind: BlockKind, lines: list[str]) -> Block:
    return Block(
        kind=kind,
        lines=tuple(lines),
        spans=tuple(tuple(parse_inline(line)) for line in lines),
    )


def _list_kind(line: str) -> BlockKind | None:
    if ORDERED_ITEM_PATTERN.match(line):
        return BlockKind.ORDERED_LIST
    if UNORDERED_ITEM_PATTERN.match(line):
        return BlockKind.UNORDERED_LIST
    return None


def parse(text: str | None) -> list[Block]:
    """Parse raw reply text into blocks in encounter order."""
    if not text:
        return []

    lines = text.split("\n")
    blocks: list[Block] = []
    index = 0

    while index < len(lines):
        line = lines[index]

        if not line.strip():
            index += 1
            continue

        kind = _list_kind(line)
        if kind is not None:
            pattern = (
                ORDERED_ITEM_PATTERN
                if kind is BlockKind.ORDERED_LIST
                else UNORDERED_ITEM_PATTERN
            )
            items: list[str] = []
            while index < len(lines) and pattern.match(lines[index]):
                items.append(pattern.sub("", lines[index], count=1))
                index += 1
            blocks.append(_make_block(kind, items))
            continue

        paragraph: list[str] = []
        while (
            index < len(lines)
            and lines[index].strip()
            and _list_kind(lines[index]) is None
        ):
            paragraph.append(lines[index])
            index += 1
        blocks.append(_make_block(BlockKind.PARAGRAPH, paragraph))

    return blocks
