"""
Unit tests for services/evaluation/segment_splitter.py
"""
import pytest

from writing_eval.services.evaluation.segment_splitter import ERRORS_MARKER, split_segments


@pytest.mark.unit
class TestSplitSegments:

    def test_marker_stays_with_errors_segment(self):
        segments = split_segments("Content (4/5): ok\nERRORS:\n[]")
        assert segments.analysis == "Content (4/5): ok\n"
        assert segments.errors == "ERRORS:\n[]"

    def test_no_marker(self):
        segments = split_segments("Content (4/5): ok")
        assert segments.analysis == "Content (4/5): ok"
        assert segments.errors == ""

    def test_only_first_marker_splits(self):
        segments = split_segments("A ERRORS: [1] ERRORS: [2]")
        assert segments.analysis == "A "
        assert segments.errors == "ERRORS: [1] ERRORS: [2]"

    def test_marker_is_case_sensitive(self):
        assert split_segments("errors: []").errors == ""

    def test_marker_at_start(self):
        segments = split_segments(f"{ERRORS_MARKER} []")
        assert segments.analysis == ""
        assert segments.errors == "ERRORS: []"
