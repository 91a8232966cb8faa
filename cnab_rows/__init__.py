"""Fixed-width CNAB 240 record parsing, search and export."""

from .models import (
    CnabDocument,
    CompanyMatch,
    FieldSpec,
    FieldValue,
    HighlightedLine,
    PositionReport,
    SegmentLayout,
    SegmentMatch,
)

__all__ = [
    "CnabDocument",
    "CompanyMatch",
    "FieldSpec",
    "FieldValue",
    "HighlightedLine",
    "PositionReport",
    "SegmentLayout",
    "SegmentMatch",
]
