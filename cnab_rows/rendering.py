from __future__ import annotations

from rich.console import Console
from rich.text import Text

from .models import CompanyMatch, HighlightedLine, PositionReport, SegmentMatch

HIGHLIGHT_STYLE = "reverse"
EMPTY_STYLE = "yellow"

NO_LINE_MESSAGE = "No line found for the given segment type."
NO_SEGMENT_MESSAGE = "No segment found."
NO_COMPANY_MESSAGE = "No company found with that name."


def highlighted_text(line: HighlightedLine) -> Text:
    text = Text(line.prefix)
    text.append(line.highlight, style=HIGHLIGHT_STYLE)
    text.append(line.suffix)
    return text


def _position_block(
    segment_type: str,
    from_pos: int,
    to_pos: int,
    line_number: int,
    extracted: str,
    line: HighlightedLine,
    source: str | None,
) -> Text:
    block = Text()
    block.append(f"----- CNAB line {segment_type} -----\n\n", style="bold")
    if source:
        block.append(f"file: {source}\n")
    block.append(f"line: {line_number}\n")
    block.append("from: ")
    block.append(str(from_pos), style=HIGHLIGHT_STYLE)
    block.append("  to: ")
    block.append(str(to_pos), style=HIGHLIGHT_STYLE)
    block.append("\n\nisolated item: ")
    block.append(extracted, style=HIGHLIGHT_STYLE)
    block.append(f"\n\nitem inside line {segment_type}:\n  ")
    block.append_text(highlighted_text(line))
    block.append("\n\n----- END -----", style="bold")
    return block


def print_position_report(console: Console, report: PositionReport | None, source: str | None = None) -> None:
    if report is None:
        console.print(NO_LINE_MESSAGE, style=EMPTY_STYLE)
        return
    console.print(
        _position_block(
            report.segment_type,
            report.from_pos,
            report.to_pos,
            report.line_number,
            report.extracted,
            report.line,
            source,
        ),
        soft_wrap=True,
    )


def print_segment_matches(console: Console, segment_type: str, matches: list[SegmentMatch]) -> None:
    if not matches:
        console.print(NO_SEGMENT_MESSAGE, style=EMPTY_STYLE)
        return
    console.print(Text(f"----- CNAB segment {segment_type} -----", style="bold"))
    for match in matches:
        console.print(highlighted_text(match.line), soft_wrap=True)
    console.print(Text(f"----- END ({len(matches)} line(s)) -----", style="bold"))


def print_company_matches(console: Console, matches: list[CompanyMatch], source: str | None = None) -> None:
    if not matches:
        console.print(NO_COMPANY_MESSAGE, style=EMPTY_STYLE)
        return
    for match in matches:
        console.print(
            _position_block(
                match.segment_type,
                match.from_pos,
                match.to_pos,
                match.line_number,
                match.company_name,
                match.line,
                source,
            ),
            soft_wrap=True,
        )
