"""Unit tests for inline formatting ranges."""

from gdocs.blocks import ImageNode, LineBreak, MarkupNode, TextNode, parse_blocks
from gdocs.inline_formatter import (
    CODE_FONT_FAMILY,
    FormatRange,
    create_range_style_request,
    format_inline,
    slice_ranges,
    split_run,
    strip_run,
    style_requests_for_run,
)


def _inline(markdown: str):
    return parse_blocks(markdown)[0].children


class TestFormatInline:
    def test_bold_and_italic(self):
        text, ranges = format_inline(_inline("**bold** and *italic*"))
        assert text == "bold and italic"
        assert ranges == [FormatRange(0, 4, "bold"), FormatRange(9, 15, "italic")]

    def test_nested_range_is_pushed_before_parent(self):
        text, ranges = format_inline(_inline("**a _b_**"))
        assert text == "a b"
        assert ranges == [FormatRange(2, 3, "italic"), FormatRange(0, 3, "bold")]

    def test_inline_code_and_strikethrough(self):
        text, ranges = format_inline(_inline("`x` ~~y~~"))
        assert text == "x y"
        assert ranges == [FormatRange(0, 1, "code"), FormatRange(2, 3, "strikethrough")]

    def test_soft_break_becomes_space(self):
        text, ranges = format_inline(_inline("one\n**two**"))
        assert text == "one two"
        assert ranges == [FormatRange(4, 7, "bold")]

    def test_link_carries_url(self):
        text, ranges = format_inline(_inline("see [docs](https://example.com)"))
        assert text == "see docs"
        assert ranges == [FormatRange(4, 8, "link", "https://example.com")]

    def test_link_without_url_has_no_range(self):
        text, ranges = format_inline([MarkupNode(kind="link", children=[TextNode("x")], url="")])
        assert text == "x"
        assert ranges == []

    def test_empty_span_has_no_range(self):
        text, ranges = format_inline([TextNode("a"), MarkupNode(kind="bold", children=[])])
        assert text == "a"
        assert ranges == []

    def test_breaks(self):
        text, _ = format_inline(_inline("a\nb"))
        assert text == "a b"

        text, _ = format_inline([TextNode("a"), LineBreak(), TextNode("b")])
        assert text == "a\nb"

    def test_images_contribute_no_text(self):
        text, ranges = format_inline([TextNode("a"), ImageNode(src="https://example.com/x.png"), TextNode("b")])
        assert text == "ab"
        assert ranges == []

    def test_offsets_are_utf16(self):
        text, ranges = format_inline(_inline("😀 **b**"))
        assert text == "😀 b"
        assert ranges == [FormatRange(3, 4, "bold")]

    def test_ranges_stay_inside_text(self):
        text, ranges = format_inline(_inline("*a* **b `c` [d](https://e.com)** ~~f~~"))
        for fmt in ranges:
            assert 0 <= fmt.start < fmt.end <= len(text)


class TestRunHelpers:
    def test_slice_ranges_clips_and_rebases(self):
        ranges = [FormatRange(0, 4, "bold"), FormatRange(6, 8, "italic")]
        assert slice_ranges(ranges, 2, 7) == [FormatRange(0, 2, "bold"), FormatRange(4, 5, "italic")]

    def test_split_run(self):
        pieces = split_run("ab\ncd", [FormatRange(1, 4, "bold")])
        assert pieces == [("ab", [FormatRange(1, 2, "bold")]), ("cd", [FormatRange(0, 1, "bold")])]

    def test_strip_run_shifts_ranges(self):
        text, ranges = strip_run("  ab ", [FormatRange(2, 3, "bold"), FormatRange(0, 1, "italic")])
        assert text == "ab"
        assert ranges == [FormatRange(0, 1, "bold")]

    def test_shifted(self):
        assert FormatRange(1, 3, "bold").shifted(2) == FormatRange(3, 5, "bold")


class TestRangeStyleRequests:
    def test_bold(self):
        request = create_range_style_request(FormatRange(0, 4, "bold"), 10)
        assert request == {
            "updateTextStyle": {
                "range": {"startIndex": 10, "endIndex": 14},
                "textStyle": {"bold": True},
                "fields": "bold",
            }
        }

    def test_code(self):
        request = create_range_style_request(FormatRange(0, 2, "code"), 1)
        body = request["updateTextStyle"]
        assert body["textStyle"]["weightedFontFamily"] == {"fontFamily": CODE_FONT_FAMILY}
        assert "backgroundColor" in body["textStyle"]
        assert body["fields"] == "weightedFontFamily,backgroundColor"

    def test_link(self):
        request = create_range_style_request(FormatRange(0, 2, "link", "https://example.com"), 1)
        assert request["updateTextStyle"]["textStyle"] == {"link": {"url": "https://example.com"}}
        assert request["updateTextStyle"]["fields"] == "link"

    def test_strikethrough(self):
        request = create_range_style_request(FormatRange(1, 3, "strikethrough"), 4)
        assert request["updateTextStyle"]["range"] == {"startIndex": 5, "endIndex": 7}
        assert request["updateTextStyle"]["fields"] == "strikethrough"

    def test_empty_range_is_skipped(self):
        assert create_range_style_request(FormatRange(2, 2, "bold"), 1) is None

    def test_unknown_kind_is_skipped(self):
        assert create_range_style_request(FormatRange(0, 2, "underline"), 1) is None
        assert style_requests_for_run([FormatRange(0, 2, "underline"), FormatRange(0, 1, "italic")], 5) == [
            create_range_style_request(FormatRange(0, 1, "italic"), 5)
        ]
