"""Unit tests for insertion cursor helpers."""

import pytest

from gdocs.cursor import insert_text_spans, last_insert_text, next_index, utf16_len
from gdocs.docs_helpers import create_format_text_request, create_insert_text_request


class TestUtf16Len:
    @pytest.mark.parametrize(
        "text,expected",
        [("", 0), ("abc", 3), ("é", 1), ("😀", 2), ("a😀b", 4)],
    )
    def test_counts_code_units(self, text, expected):
        assert utf16_len(text) == expected


class TestNextIndex:
    def test_no_insert_keeps_index(self):
        requests = [create_format_text_request(1, 3, bold=True)]
        assert last_insert_text(requests) is None
        assert next_index(requests, 7) == 7

    def test_uses_last_insert(self):
        requests = [
            create_insert_text_request(5, "abc"),
            create_insert_text_request(9, "😀\n"),
            create_format_text_request(5, 8, italic=True),
        ]
        assert next_index(requests, 5) == 12

    def test_insert_text_spans(self):
        requests = [create_insert_text_request(1, "a"), {"insertPageBreak": {"location": {"index": 2}}}]
        assert insert_text_spans(requests) == [(1, "a")]
