from __future__ import annotations

from .errors import UnsupportedSegmentError
from .models import FieldSpec, SegmentLayout

# 0-based index of the segment discriminator, identical for every segment type.
SEGMENT_INDEX = 13

COMPANY_SEGMENT = "Q"


def _build_default_layouts() -> dict[str, SegmentLayout]:
    segment_q = SegmentLayout(
        segment="Q",
        description="Segmento Q - dados do pagador",
        fields=(
            FieldSpec(name="company_name", start=33, end=73, description="Nome do pagador"),
            FieldSpec(name="address", start=73, end=113, description="Endereco"),
            FieldSpec(name="district", start=113, end=128, description="Bairro"),
            FieldSpec(name="postal_code", start=128, end=136, trim=False, description="CEP"),
            FieldSpec(name="city", start=136, end=151, description="Cidade"),
            FieldSpec(name="state", start=151, end=154, trim=False, description="UF"),
        ),
    )
    return {layout.segment: layout for layout in (segment_q,)}


SEGMENT_LAYOUTS: dict[str, SegmentLayout] = _build_default_layouts()


def get_layout(segment_type: str) -> SegmentLayout:
    layout = SEGMENT_LAYOUTS.get(segment_type.upper())
    if layout is None:
        allowed = ", ".join(sorted(SEGMENT_LAYOUTS))
        raise UnsupportedSegmentError(
            f"No offset table for segment '{segment_type}'. Supported: {allowed}"
        )
    return layout


def company_name_field() -> FieldSpec:
    layout = get_layout(COMPANY_SEGMENT)
    return next(field for field in layout.fields if field.name == "company_name")
