"""
Tests for positional lookup, segment listing and company search.
"""

import pytest

from cnab_rows.errors import InvalidQueryError, InvalidRangeError
from cnab_rows.query_engine import list_segments, lookup_position, search_company


class TestLookupPosition:
    """Test positional range lookup."""

    def test_first_matching_line(self, body_lines):
        report = lookup_position(body_lines, "P", 1, 14)

        assert report is not None
        assert report.segment_type == "P"
        assert report.line_number == 1
        assert report.extracted == "0010001300001P"

    def test_segment_is_upper_cased(self, body_lines):
        report = lookup_position(body_lines, "q", 34, 47, start_line=3)

        assert report.segment_type == "Q"
        assert report.extracted == "ACME CORP LTDA"
        assert report.line_number == 4

    def test_highlight_spans(self, body_lines):
        report = lookup_position(body_lines, "Q", 34, 47)
        line = body_lines[1]

        assert report.line.prefix == line[:33]
        assert report.line.highlight == line[33:47]
        assert report.line.suffix == line[47:]
        assert report.line.text == line

    def test_single_character_range(self, body_lines):
        report = lookup_position(body_lines, "R", 14, 14)
        assert report.extracted == "R"

    def test_full_line_range(self, body_lines):
        report = lookup_position(body_lines, "P", 1, 240)

        assert report.extracted == body_lines[0]
        assert report.line.suffix == ""

    def test_missing_segment_returns_none(self, line_factory):
        """No P line in the body: nothing found, no exception."""
        lines = [line_factory("Q"), line_factory("R")]
        assert lookup_position(lines, "P", 21, 34) is None

    def test_missing_segment_skips_range_check(self, line_factory):
        assert lookup_position([line_factory("Q")], "P", 300, 10) is None

    @pytest.mark.parametrize(
        ("from_pos", "to_pos"),
        [(0, 10), (10, 9), (1, 241), (241, 241), (-3, 2)],
    )
    def test_invalid_ranges(self, body_lines, from_pos, to_pos):
        with pytest.raises(InvalidRangeError, match="Invalid range"):
            lookup_position(body_lines, "P", from_pos, to_pos)

    def test_idempotent(self, body_lines):
        first = lookup_position(body_lines, "Q", 21, 34)
        second = lookup_position(body_lines, "Q", 21, 34)
        assert first == second

    def test_segment_must_be_single_character(self, body_lines):
        with pytest.raises(InvalidQueryError):
            lookup_position(body_lines, "PQ", 1, 2)


class TestListSegments:
    """Test segment-type listing."""

    def test_all_matches_in_order(self, body_lines):
        matches = list_segments(body_lines, "p", start_line=3)

        assert [match.line_number for match in matches] == [3, 6]
        assert all(match.segment_type == "P" for match in matches)

    def test_highlight_is_discriminator(self, body_lines):
        for match in list_segments(body_lines, "R"):
            assert match.line.highlight == "R"
            assert len(match.line.prefix) == 13

    def test_no_segment_found(self, body_lines):
        """Zero X lines is an empty result, not an error."""
        assert list_segments(body_lines, "X") == []

    def test_empty_body(self):
        assert list_segments([], "Q") == []


class TestSearchCompany:
    """Test company-name search."""

    def test_acme_scenario(self, body_lines):
        matches = search_company(body_lines, "ACME")

        assert len(matches) == 1
        match = matches[0]
        assert match.segment_type == "Q"
        assert match.company_name == "ACME CORP LTDA"
        assert (match.start, match.end) == (33, 47)
        assert (match.from_pos, match.to_pos) == (34, 47)

    def test_span_covers_full_trimmed_name(self, body_lines):
        """A fragment match still reports the whole trimmed company name."""
        for pattern in ("CORP", "LTDA", "P L", "acme corp ltda"):
            matches = search_company(body_lines, pattern)
            assert len(matches) == 1
            assert matches[0].line.highlight == "ACME CORP LTDA"
            assert matches[0].end - matches[0].start == len("ACME CORP LTDA")

    def test_pattern_is_upper_cased(self, body_lines):
        assert len(search_company(body_lines, "padaria")) == 1

    def test_only_q_lines_searched(self, line_factory):
        lines = [
            line_factory("P", company_name="CAIXA"),
            line_factory("Q", company_name="CAIXA ECONOMICA FEDERAL", sequence=2),
        ]
        matches = search_company(lines, "CAIXA", start_line=10)

        assert [match.line_number for match in matches] == [11]

    def test_only_company_field_searched(self, line_factory):
        lines = [line_factory("Q", company_name="PADARIA", city="CAIXA PRETA")]
        assert search_company(lines, "CAIXA") == []

    def test_every_match_reported_in_order(self, line_factory):
        lines = [
            line_factory("Q", company_name="CAIXA ECONOMICA FEDERAL", sequence=1),
            line_factory("R", sequence=2),
            line_factory("Q", company_name="CAIXA ESCOLAR", sequence=3),
        ]
        matches = search_company(lines, "caixa")

        assert [match.company_name for match in matches] == ["CAIXA ECONOMICA FEDERAL", "CAIXA ESCOLAR"]
        assert [match.line_number for match in matches] == [1, 3]

    def test_no_company_found(self, body_lines):
        assert search_company(body_lines, "NOBODY") == []

    def test_blank_pattern_rejected(self, body_lines):
        with pytest.raises(InvalidQueryError):
            search_company(body_lines, "   ")
