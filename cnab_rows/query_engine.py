from __future__ import annotations

import logging
from typing import Sequence

from .errors import InvalidQueryError, InvalidRangeError
from .extractor import segment_of
from .layouts import COMPANY_SEGMENT, SEGMENT_INDEX, company_name_field
from .models import CompanyMatch, HighlightedLine, PositionReport, SegmentMatch

LOGGER = logging.getLogger(__name__)


def _normalize_segment(segment_type: str) -> str:
    normalized = (segment_type or "").strip().upper()
    if len(normalized) != 1:
        raise InvalidQueryError(f"Segment type must be a single character, got '{segment_type}'.")
    return normalized


def _validate_range(from_pos: int, to_pos: int, line_length: int) -> None:
    if not 1 <= from_pos <= to_pos <= line_length:
        raise InvalidRangeError(
            f"Invalid range from={from_pos} to={to_pos}: expected 1 <= from <= to <= {line_length}."
        )


def lookup_position(
    lines: Sequence[str],
    segment_type: str,
    from_pos: int,
    to_pos: int,
    *,
    start_line: int = 1,
) -> PositionReport | None:
    """Isolate ``[from_pos, to_pos]`` (1-based, inclusive) in the first line of a segment.

    Returns ``None`` when no line carries ``segment_type``. The range is only
    validated against a line that was actually found.
    """
    segment = _normalize_segment(segment_type)
    for offset, line in enumerate(lines):
        if segment_of(line) != segment:
            continue
        _validate_range(from_pos, to_pos, len(line))
        start = from_pos - 1
        return PositionReport(
            segment_type=segment,
            from_pos=from_pos,
            to_pos=to_pos,
            line_number=start_line + offset,
            extracted=line[start:to_pos],
            line=HighlightedLine.from_range(line, start, to_pos),
        )

    LOGGER.debug("No line found for segment %s among %s lines", segment, len(lines))
    return None


def list_segments(
    lines: Sequence[str],
    segment_type: str,
    *,
    start_line: int = 1,
) -> list[SegmentMatch]:
    segment = _normalize_segment(segment_type)
    matches = [
        SegmentMatch(
            segment_type=segment,
            line_number=start_line + offset,
            line=HighlightedLine.from_range(line, SEGMENT_INDEX, SEGMENT_INDEX + 1),
        )
        for offset, line in enumerate(lines)
        if segment_of(line) == segment
    ]
    LOGGER.debug("Segment %s: %s match(es)", segment, len(matches))
    return matches


def search_company(
    lines: Sequence[str],
    name: str,
    *,
    start_line: int = 1,
) -> list[CompanyMatch]:
    """Find "Q" lines whose company name field contains ``name``.

    Stored names are upper case, so only the pattern is upper-cased. Each
    match spans the whole trimmed company name, whatever fragment matched.
    """
    pattern = (name or "").upper()
    if not pattern.strip():
        raise InvalidQueryError("Company name to search must not be empty.")

    field = company_name_field()
    matches: list[CompanyMatch] = []
    for offset, line in enumerate(lines):
        if segment_of(line) != COMPANY_SEGMENT:
            continue
        stored = line[field.start : field.end]
        if pattern not in stored:
            continue
        company_name = stored.strip()
        end = field.start + len(company_name)
        matches.append(
            CompanyMatch(
                company_name=company_name,
                segment_type=COMPANY_SEGMENT,
                start=field.start,
                end=end,
                line_number=start_line + offset,
                line=HighlightedLine.from_range(line, field.start, end),
            )
        )

    LOGGER.debug("Company search '%s': %s match(es)", pattern, len(matches))
    return matches
