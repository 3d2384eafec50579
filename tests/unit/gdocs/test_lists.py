"""Unit tests for list flattening, layout and TAB correction."""

import pytest

from gdocs.blocks import ListBlock, ListItemBlock, ParagraphBlock, TextNode, parse_blocks
from gdocs.cursor import next_index
from gdocs.inline_formatter import FormatRange
from gdocs.lists import (
    BULLET_PRESET_CHECKBOX,
    BULLET_PRESET_ORDERED,
    BULLET_PRESET_UNORDERED,
    LIST_INDENT_PT,
    apply_tab_correction,
    bullet_preset_for,
    convert_list,
    flatten_list,
    layout_list_lines,
)


def _list(markdown: str) -> ListBlock:
    (block,) = parse_blocks(markdown)
    assert isinstance(block, ListBlock)
    return block


def _outline(items):
    return [(item.level, [line.text for line in item.lines]) for item in items]


def _of_kind(requests, kind):
    return [r[kind] for r in requests if kind in r]


class TestBulletPreset:
    @pytest.mark.parametrize(
        "markdown,preset",
        [
            ("- a\n- b", BULLET_PRESET_UNORDERED),
            ("1. a\n2. b", BULLET_PRESET_ORDERED),
            ("- [ ] a\n- b", BULLET_PRESET_CHECKBOX),
            ("- a\n  - [x] b", BULLET_PRESET_CHECKBOX),
            ("1. [x] a", BULLET_PRESET_ORDERED),
        ],
    )
    def test_preset(self, markdown, preset):
        assert bullet_preset_for(_list(markdown)) == preset


class TestFlattenList:
    def test_depth_first_order(self):
        items = flatten_list(_list("- A\n  - B\n    - C\n- D"))
        assert _outline(items) == [(0, ["A"]), (1, ["B"]), (2, ["C"]), (0, ["D"])]

    def test_flattening_is_idempotent(self):
        block = _list("- A\n  - **B**\n- C")
        assert flatten_list(block) == flatten_list(block)

    def test_hard_break_makes_secondary_line(self):
        (item,) = flatten_list(_list("- first  \n  second"))
        assert [(line.text, line.is_primary) for line in item.lines] == [("first", True), ("second", False)]

    def test_loose_item_paragraphs(self):
        (item,) = flatten_list(_list("- one\n\n  two"))
        assert [(line.text, line.is_primary) for line in item.lines] == [("one", True), ("two", False)]

    def test_empty_item_keeps_a_line(self):
        block = ListBlock(
            ordered=False,
            items=[ListItemBlock(children=[]), ListItemBlock(children=[ParagraphBlock(children=[TextNode("B")])])],
        )
        items = flatten_list(block)
        assert _outline(items) == [(0, [""]), (0, ["B"])]
        assert items[0].lines[0].is_primary

    def test_checkbox_prefix_shifts_ranges(self):
        done, todo = flatten_list(_list("- [x] **done**\n- [ ] todo"))
        assert done.lines[0].text == "✅ done"
        assert done.lines[0].format_ranges == [FormatRange(2, 6, "bold")]
        assert todo.lines[0].text == "❌ todo"

    def test_plain_item_in_checkbox_list_has_no_prefix(self):
        items = flatten_list(_list("- A\n  - [x] B"))
        assert _outline(items) == [(0, ["A"]), (1, ["✅ B"])]

    def test_ordered_list_never_gets_prefix(self):
        (item,) = flatten_list(_list("1. [x] done"))
        assert item.lines[0].text == "done"


class TestLayout:
    def test_tabs_and_naive_offsets(self):
        full_text, placements = layout_list_lines(flatten_list(_list("- A\n  - B\n    - C\n- D")), 2)
        assert full_text == "A\n\tB\n\t\tC\nD\n"
        assert [p.naive_start for p in placements] == [2, 4, 7, 11]

    def test_tab_correction(self):
        _, placements = layout_list_lines(flatten_list(_list("- A\n  - B\n    - C\n- D")), 2)
        assert apply_tab_correction(placements) == 3
        assert [p.corrected_start for p in placements] == [2, 4, 6, 8]

    def test_secondary_lines_carry_no_tabs(self):
        full_text, placements = layout_list_lines(flatten_list(_list("- A\n  - b1  \n    b2")), 2)
        assert full_text == "A\n\tb1\nb2\n"
        assert apply_tab_correction(placements) == 1
        assert [p.corrected_start for p in placements] == [2, 4, 7]


class TestConvertList:
    def test_nested_bold_uses_corrected_offset(self):
        requests = convert_list(_list("- A\n  - **B**"), 1)

        inserts = _of_kind(requests, "insertText")
        assert inserts[0] == {"location": {"index": 1}, "text": "\n"}
        assert inserts[1] == {"location": {"index": 2}, "text": "A\n\tB\n"}
        assert inserts[-1] == {"location": {"index": 6}, "text": "\n"}

        (bullets,) = _of_kind(requests, "createParagraphBullets")
        assert bullets["range"] == {"startIndex": 2, "endIndex": 6}
        assert bullets["bulletPreset"] == BULLET_PRESET_UNORDERED

        # "B" sits at 5 in the inserted text and at 4 once the TAB is gone
        (bold,) = _of_kind(requests, "updateTextStyle")
        assert bold["range"] == {"startIndex": 4, "endIndex": 5}

        assert next_index(requests, 1) == 7

    def test_last_request_is_closing_newline(self):
        requests = convert_list(_list("- a\n- b"), 1)
        assert requests[-1] == {"insertText": {"location": {"index": 6}, "text": "\n"}}

    def test_secondary_line_loses_bullet_and_is_indented(self):
        requests = convert_list(_list("- first  \n  second"), 1)

        (delete,) = _of_kind(requests, "deleteParagraphBullets")
        assert delete["range"] == {"startIndex": 8, "endIndex": 15}

        indents = [p for p in _of_kind(requests, "updateParagraphStyle") if "indentStart" in p["paragraphStyle"]]
        assert len(indents) == 1
        assert indents[0]["range"] == {"startIndex": 8, "endIndex": 15}
        assert indents[0]["paragraphStyle"]["indentStart"] == {"magnitude": LIST_INDENT_PT, "unit": "PT"}
        assert indents[0]["paragraphStyle"]["indentFirstLine"] == {"magnitude": LIST_INDENT_PT, "unit": "PT"}

    def test_spacing_on_first_and_last_lines(self):
        requests = convert_list(_list("- first  \n  second"), 1)
        spacing = [p for p in _of_kind(requests, "updateParagraphStyle") if "indentStart" not in p["paragraphStyle"]]
        assert spacing[0]["range"] == {"startIndex": 2, "endIndex": 8}
        assert spacing[0]["fields"] == "spaceAbove"
        assert spacing[1]["range"] == {"startIndex": 8, "endIndex": 15}
        assert spacing[1]["fields"] == "spaceBelow"

    def test_checkbox_list(self):
        requests = convert_list(_list("- [x] **done**"), 1)
        (bullets,) = _of_kind(requests, "createParagraphBullets")
        assert bullets["bulletPreset"] == BULLET_PRESET_CHECKBOX

        (bold,) = _of_kind(requests, "updateTextStyle")
        assert bold["range"] == {"startIndex": 4, "endIndex": 8}

    def test_styles_stay_inside_list(self):
        requests = convert_list(_list("- *a*\n  - **b**\n    - `c`\n- [d](https://example.com)"), 1)
        end = next_index(requests, 1)
        for style in _of_kind(requests, "updateTextStyle"):
            assert 1 < style["range"]["startIndex"] < style["range"]["endIndex"] < end
