from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

HEADER_LINES = 2
TRAILER_LINES = 2


class FieldSpec(BaseModel):
    """One named field of a segment layout, as a half-open [start, end) range (0-based)."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    start: int = Field(ge=0)
    end: int = Field(ge=1)
    trim: bool = True
    description: str | None = None

    @model_validator(mode="after")
    def validate_range(self) -> "FieldSpec":
        if self.end <= self.start:
            raise ValueError(f"Field {self.name}: end={self.end} must be greater than start={self.start}.")
        return self

    @property
    def length(self) -> int:
        return self.end - self.start


class SegmentLayout(BaseModel):
    model_config = ConfigDict(frozen=True)

    segment: str = Field(min_length=1, max_length=1)
    description: str | None = None
    fields: tuple[FieldSpec, ...] = Field(min_length=1)

    @field_validator("fields")
    @classmethod
    def validate_unique_field_names(cls, fields: tuple[FieldSpec, ...]) -> tuple[FieldSpec, ...]:
        names = [field.name for field in fields]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate field names: {', '.join(duplicates)}")
        return fields

    @model_validator(mode="after")
    def validate_field_positions(self) -> "SegmentLayout":
        ordered = sorted(self.fields, key=lambda field: field.start)
        previous_end = 0
        previous_name = None
        for field in ordered:
            if field.start < previous_end:
                raise ValueError(
                    f"Overlapping fields in segment {self.segment}: {field.name} starts at {field.start} "
                    f"but {previous_name} ends at {previous_end}."
                )
            previous_end = field.end
            previous_name = field.name
        return self

    @property
    def field_names(self) -> list[str]:
        return [field.name for field in self.fields]


class FieldValue(BaseModel):
    """Extracted value of one field together with the source range it came from.

    The range is serialized as ``from``/``to`` to match the export format.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    value: str
    start: int = Field(alias="from", ge=0)
    end: int = Field(alias="to", ge=0)


class CnabDocument(BaseModel):
    """A loaded CNAB file, partitioned by fixed line counts.

    ``header`` is the first two lines, ``tail`` the last two and ``body``
    everything in between. Short files follow plain slice semantics, so the
    partitions may overlap or be empty.
    """

    model_config = ConfigDict(frozen=True)

    full: tuple[str, ...] = ()
    source: str | None = None

    @property
    def header(self) -> tuple[str, ...]:
        return self.full[:HEADER_LINES]

    @property
    def body(self) -> tuple[str, ...]:
        return self.full[HEADER_LINES:-TRAILER_LINES]

    @property
    def tail(self) -> tuple[str, ...]:
        return self.full[-TRAILER_LINES:]

    @property
    def body_start_line(self) -> int:
        return HEADER_LINES + 1


class HighlightedLine(BaseModel):
    """A record line cut into three spans around a highlighted range."""

    model_config = ConfigDict(frozen=True)

    prefix: str
    highlight: str
    suffix: str

    @classmethod
    def from_range(cls, line: str, start: int, end: int) -> "HighlightedLine":
        return cls(prefix=line[:start], highlight=line[start:end], suffix=line[end:])

    @property
    def text(self) -> str:
        return f"{self.prefix}{self.highlight}{self.suffix}"


class PositionReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    segment_type: str
    from_pos: int
    to_pos: int
    line_number: int
    extracted: str
    line: HighlightedLine


class SegmentMatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    segment_type: str
    line_number: int
    line: HighlightedLine


class CompanyMatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    company_name: str
    segment_type: str
    start: int
    end: int
    line_number: int
    line: HighlightedLine

    @property
    def from_pos(self) -> int:
        return self.start + 1

    @property
    def to_pos(self) -> int:
        return self.end
