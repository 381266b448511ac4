"""
Unit tests for services/highlight.py
"""
import pytest

from writing_eval.models.analysis import ErrorAnnotation
from writing_eval.services.highlight import annotate_text, build_highlight_segments, display_category


@pytest.mark.unit
class TestHighlightSegments:

    def test_segments_cover_whole_text(self):
        text = "I seen him and he were happy."
        errors = [
            ErrorAnnotation(text="were", correction="was", type="grammar", start=18, end=22),
            ErrorAnnotation(text="seen", correction="saw", type="grammar", start=2, end=6),
        ]
        segments = build_highlight_segments(text, errors)

        assert "".join(s.text for s in segments) == text
        assert [s.highlighted for s in segments] == [False, True, False, True, False]
        assert segments[1].error.correction == "saw"
        assert (segments[3].start, segments[3].end) == (18, 22)

    def test_unlocated_errors_are_ignored(self):
        text = "Nothing to mark here."
        segments = build_highlight_segments(text, [ErrorAnnotation(text="recieve")])
        assert len(segments) == 1
        assert segments[0].highlighted is False

    def test_overlapping_span_is_skipped(self):
        text = "abcdefghij"
        errors = [ErrorAnnotation(text="cdef", start=2, end=6), ErrorAnnotation(text="ef", start=4, end=6)]
        segments = build_highlight_segments(text, errors)
        assert [s.text for s in segments if s.highlighted] == ["cdef"]

    def test_span_past_end_is_skipped(self):
        segments = build_highlight_segments("short", [ErrorAnnotation(text="x", start=3, end=20)])
        assert [s.text for s in segments] == ["short"]

    def test_error_at_very_start_and_end(self):
        text = "gonna win"
        segments = build_highlight_segments(text, [ErrorAnnotation(text="gonna", start=0, end=5)])
        assert segments[0].highlighted
        assert segments[1].text == " win"


@pytest.mark.unit
def test_display_category():
    assert display_category("spelling") == "spelling"
    assert display_category("register") == "style"
    assert display_category("punctuation") == "style"


@pytest.mark.unit
def test_annotate_text():
    text = "We are gonna win."
    errors = [ErrorAnnotation(text="gonna", correction="going to", type="style", start=7, end=12)]
    assert annotate_text(text, errors) == "We are [[gonna|style -> going to]] win."
