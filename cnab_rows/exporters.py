from __future__ import annotations

import json
import logging
import os
import tempfile
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Iterator

import pandas as pd

from .errors import ExportError
from .extractor import extract_record, segment_of
from .layouts import COMPANY_SEGMENT, get_layout
from .models import CnabDocument, FieldValue

LOGGER = logging.getLogger(__name__)

_SHEET_DATA = "SEGMENTO_Q"
_SHEET_DICTIONARY = "DICIONARIO"


def _collect_records(document: CnabDocument, segment_type: str) -> list[tuple[int, dict[str, FieldValue]]]:
    records: list[tuple[int, dict[str, FieldValue]]] = []
    for offset, line in enumerate(document.body):
        if segment_of(line) != segment_type:
            continue
        records.append((document.body_start_line + offset, extract_record(line, segment_type)))
    return records


def _serialize_record(record: dict[str, FieldValue]) -> dict[str, dict[str, Any]]:
    return {
        name: field.model_dump(by_alias=True, exclude={"name"})
        for name, field in record.items()
    }


def _target_mode(output_path: Path) -> int:
    """Permission bits the export should end up with: the existing file's, else the umask default."""
    try:
        return output_path.stat().st_mode & 0o777
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


@contextmanager
def _atomic_destination(output_path: Path) -> Iterator[Path]:
    """Yield a temporary path next to ``output_path`` and move it into place on success."""
    try:
        handle = tempfile.NamedTemporaryFile(
            dir=output_path.parent,
            prefix=f".{output_path.name}.",
            suffix=output_path.suffix,
            delete=False,
        )
    except OSError as error:
        raise ExportError(f"Unable to write export file {output_path}: {error}") from error
    handle.close()
    temp_path = Path(handle.name)

    try:
        yield temp_path
        # NamedTemporaryFile creates 0600 files.
        os.chmod(temp_path, _target_mode(output_path))
        os.replace(temp_path, output_path)
    except OSError as error:
        raise ExportError(f"Unable to write export file {output_path}: {error}") from error
    finally:
        if temp_path.exists():
            temp_path.unlink()


def export_to_json(
    records: list[dict[str, FieldValue]],
    output_path: Path,
    indent: int = 2,
) -> None:
    payload = [_serialize_record(record) for record in records]
    with _atomic_destination(output_path) as temp_path:
        temp_path.write_text(json.dumps(payload, ensure_ascii=False, indent=indent), encoding="utf-8")
    LOGGER.info("JSON exported to %s (%s records)", output_path, len(records))


def _build_dictionary_df(segment_type: str) -> pd.DataFrame:
    layout = get_layout(segment_type)
    rows = [
        {
            "Campo": field.name,
            "Descricao": field.description or "",
            "Inicio": field.start,
            "Fim": field.end,
            "Tamanho": field.length,
            "Aparado": "sim" if field.trim else "nao",
        }
        for field in layout.fields
    ]
    return pd.DataFrame(rows)


def _set_column_widths(worksheet, header_row: int) -> None:
    from openpyxl.utils import get_column_letter

    for col_idx in range(1, worksheet.max_column + 1):
        max_len = 0
        for row_idx in range(header_row, min(worksheet.max_row, 3000) + 1):
            value = worksheet.cell(row_idx, col_idx).value
            if value is not None:
                max_len = max(max_len, len(str(value)))
        worksheet.column_dimensions[get_column_letter(col_idx)].width = min(max(max_len + 2, 10), 54)


def _style_sheet(worksheet, title: str, record_count: int, generated_at: str) -> None:
    from openpyxl.styles import Alignment, Font, PatternFill
    from openpyxl.utils import get_column_letter

    header_row = 3
    if worksheet.max_row < header_row or worksheet.max_column < 1:
        return

    max_row = worksheet.max_row
    max_col = worksheet.max_column
    worksheet.sheet_view.showGridLines = False
    worksheet.freeze_panes = f"A{header_row + 1}"

    worksheet.merge_cells(start_row=1, start_column=1, end_row=1, end_column=max_col)
    worksheet["A1"] = title
    worksheet["A2"] = f"Gerado em: {generated_at} | Registros: {record_count:,}"
    worksheet["A1"].font = Font(color="FFFFFF", bold=True, size=13, name="Calibri")
    worksheet["A1"].fill = PatternFill(fill_type="solid", fgColor="0B1F33")
    worksheet["A1"].alignment = Alignment(horizontal="left", vertical="center")
    worksheet["A2"].font = Font(color="0B1F33", size=10, name="Calibri")

    header_fill = PatternFill(fill_type="solid", fgColor="0F766E")
    stripe_fill = PatternFill(fill_type="solid", fgColor="F6FAFF")
    for col_idx in range(1, max_col + 1):
        cell = worksheet.cell(header_row, col_idx)
        cell.fill = header_fill
        cell.font = Font(color="FFFFFF", bold=True)
        cell.alignment = Alignment(horizontal="center", vertical="center")

    for row_idx in range(header_row + 1, max_row + 1):
        if row_idx % 2 == 0:
            for col_idx in range(1, max_col + 1):
                worksheet.cell(row_idx, col_idx).fill = stripe_fill

    _set_column_widths(worksheet, header_row)
    if max_row > header_row:
        worksheet.auto_filter.ref = f"A{header_row}:{get_column_letter(max_col)}{max_row}"


def export_to_excel(
    records: list[tuple[int, dict[str, FieldValue]]],
    output_path: Path,
    segment_type: str = COMPANY_SEGMENT,
) -> None:
    layout = get_layout(segment_type)
    rows = [
        {"line_number": line_number, **{name: field.value for name, field in record.items()}}
        for line_number, record in records
    ]
    data_df = pd.DataFrame(rows, columns=["line_number", *layout.field_names])
    dictionary_df = _build_dictionary_df(segment_type)
    generated_at = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

    with _atomic_destination(output_path) as temp_path:
        with pd.ExcelWriter(temp_path, engine="openpyxl") as writer:
            data_df.to_excel(writer, index=False, sheet_name=_SHEET_DATA, startrow=2)
            dictionary_df.to_excel(writer, index=False, sheet_name=_SHEET_DICTIONARY, startrow=2)
            _style_sheet(
                writer.book[_SHEET_DATA],
                title=f"Segmento {segment_type}",
                record_count=len(data_df),
                generated_at=generated_at,
            )
            _style_sheet(
                writer.book[_SHEET_DICTIONARY],
                title="Dicionario de campos",
                record_count=len(dictionary_df),
                generated_at=generated_at,
            )
    LOGGER.info("Excel exported to %s (%s records)", output_path, len(records))


def export_document(document: CnabDocument, output_path: Path, indent: int = 2) -> str:
    """Export every "Q" line of the document body to ``output_path``.

    ``.xlsx`` destinations get a workbook, anything else gets a JSON array with
    one object per line. Existing files are overwritten; a failed write leaves
    no file behind.
    """
    records = _collect_records(document, COMPANY_SEGMENT)
    if output_path.suffix.lower() == ".xlsx":
        export_to_excel(records, output_path)
    else:
        export_to_json([record for _, record in records], output_path, indent=indent)
    return f"CNAB data exported to {output_path}"


def load_export(input_path: Path) -> list[dict[str, FieldValue]]:
    payload = json.loads(input_path.read_text(encoding="utf-8"))
    return [
        {name: FieldValue.model_validate({"name": name, **item}) for name, item in entry.items()}
        for entry in payload
    ]
