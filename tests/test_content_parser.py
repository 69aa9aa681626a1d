"""Tests for reply text segmentation into blocks and spans."""

from __future__ import annotations

import unittest

from support_chat.content_parser import BlockKind, Span, parse, parse_inline


class ParseBlocksTests(unittest.TestCase):
    """Validate block grouping rules."""

    def test_empty_text_yields_no_blocks(self) -> None:
        self.assertEqual(parse(""), [])
        self.assertEqual(parse(None), [])

    def test_blank_only_text_yields_no_blocks(self) -> None:
        self.assertEqual(parse("\n   \n\t\n"), [])

    def test_bold_only_text_is_one_paragraph(self) -> None:
        blocks = parse("**bold**")
        self.assertEqual(len(blocks), 1)
        self.assertEqual(blocks[0].kind, BlockKind.PARAGRAPH)
        self.assertEqual(blocks[0].spans, ((Span(bold=True, text="bold"),),))

    def test_ordered_list_strips_numerals(self) -> None:
        blocks = parse("1. a\n2. b")
        self.assertEqual(len(blocks), 1)
        self.assertEqual(blocks[0].kind, BlockKind.ORDERED_LIST)
        self.assertEqual(blocks[0].items, ("a", "b"))

    def test_unordered_list_then_paragraph(self) -> None:
        blocks = parse("- a\n\nplain text")
        self.assertEqual(
            [block.kind for block in blocks],
            [BlockKind.UNORDERED_LIST, BlockKind.PARAGRAPH],
        )
        self.assertEqual(blocks[0].items, ("a",))
        self.assertEqual(blocks[1].text, "plain text")

    def test_all_bullet_markers_are_recognised(self) -> None:
        blocks = parse("- dash\n* star\n• dot\n   - indented")
        self.assertEqual(len(blocks), 1)
        self.assertEqual(blocks[0].items, ("dash", "star", "dot", "indented"))

    def test_paragraph_keeps_line_breaks(self) -> None:
        blocks = parse("first line\nsecond line")
        self.assertEqual(len(blocks), 1)
        self.assertEqual(blocks[0].lines, ("first line", "second line"))
        self.assertEqual(blocks[0].text, "first line\nsecond line")

    def test_blank_line_splits_paragraphs(self) -> None:
        blocks = parse("one\n\ntwo")
        self.assertEqual([block.text for block in blocks], ["one", "two"])

    def test_paragraph_list_paragraph_are_three_blocks(self) -> None:
        blocks = parse("Steps:\n1. Log in\n2. Open **Settings**\nThat's it.")
        self.assertEqual(
            [block.kind for block in blocks],
            [BlockKind.PARAGRAPH, BlockKind.ORDERED_LIST, BlockKind.PARAGRAPH],
        )
        self.assertEqual(blocks[1].items, ("Log in", "Open **Settings**"))
        self.assertEqual(
            blocks[1].spans[1],
            (Span(bold=False, text="Open "), Span(bold=True, text="Settings")),
        )

    def test_ordered_then_unordered_are_separate_blocks(self) -> None:
        blocks = parse("1. one\n- two")
        self.assertEqual(
            [block.kind for block in blocks],
            [BlockKind.ORDERED_LIST, BlockKind.UNORDERED_LIST],
        )

    def test_leading_number_without_period_is_paragraph(self) -> None:
        blocks = parse("2024 was a good year")
        self.assertEqual(blocks[0].kind, BlockKind.PARAGRAPH)

    def test_number_period_without_space_is_paragraph(self) -> None:
        blocks = parse("3.14 is pi\n-dash without space")
        self.assertEqual(len(blocks), 1)
        self.assertEqual(blocks[0].kind, BlockKind.PARAGRAPH)
        self.assertEqual(len(blocks[0].lines), 2)

    def test_bold_line_is_not_a_bullet(self) -> None:
        blocks = parse("**Note:** read this")
        self.assertEqual(blocks[0].kind, BlockKind.PARAGRAPH)

    def test_no_block_is_empty(self) -> None:
        text = "\n\nintro\n\n1. a\n\n\n- b\n\noutro\n\n"
        for block in parse(text):
            self.assertTrue(block.lines)

    def test_parse_is_deterministic(self) -> None:
        text = "Hello **there**\n1. one\n2. two\n\n- x\nbye"
        self.assertEqual(parse(text), parse(text))


class ParseInlineTests(unittest.TestCase):
    """Validate the bold-span grammar."""

    def test_plain_text_is_single_span(self) -> None:
        self.assertEqual(parse_inline("hello"), [Span(bold=False, text="hello")])

    def test_mixed_spans_are_not_merged(self) -> None:
        self.assertEqual(
            parse_inline("a **b** c **d**"),
            [
                Span(bold=False, text="a "),
                Span(bold=True, text="b"),
                Span(bold=False, text=" c "),
                Span(bold=True, text="d"),
            ],
        )

    def test_adjacent_bold_segments_stay_separate(self) -> None:
        self.assertEqual(
            parse_inline("**a****b**"),
            [Span(bold=True, text="a"), Span(bold=True, text="b")],
        )

    def test_unmatched_delimiter_is_plain(self) -> None:
        self.assertEqual(
            parse_inline("price ** not bold"),
            [Span(bold=False, text="price ** not bold")],
        )

    def test_empty_emphasis_is_plain(self) -> None:
        self.assertEqual(parse_inline("****"), [Span(bold=False, text="****")])

    def test_delimiters_around_star_content_are_plain(self) -> None:
        self.assertEqual(parse_inline("**a*b**"), [Span(bold=False, text="**a*b**")])

    def test_empty_line_has_no_spans(self) -> None:
        self.assertEqual(parse_inline(""), [])


if __name__ == "__main__":
    unittest.main()
