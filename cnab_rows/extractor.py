from __future__ import annotations

from .layouts import SEGMENT_INDEX, get_layout
from .models import FieldSpec, FieldValue


def segment_of(line: str) -> str | None:
    if len(line) <= SEGMENT_INDEX:
        return None
    return line[SEGMENT_INDEX]


def _field_value(line: str, field: FieldSpec) -> FieldValue:
    raw_value = line[field.start : field.end]
    value = raw_value.strip() if field.trim else raw_value
    return FieldValue(name=field.name, value=value, start=field.start, end=field.end)


def extract_fields(line: str, segment_type: str = "Q") -> list[FieldValue]:
    layout = get_layout(segment_type)
    return [_field_value(line, field) for field in layout.fields]


def extract_record(line: str, segment_type: str = "Q") -> dict[str, FieldValue]:
    return {field.name: field for field in extract_fields(line, segment_type)}
