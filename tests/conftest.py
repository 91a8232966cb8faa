"""Shared fixtures for CNAB tests."""

from pathlib import Path

import pytest

from cnab_rows.loader import split_document
from tests.cnab_lines import HEADER_BATCH, HEADER_FILE, TRAILER_BATCH, TRAILER_FILE, build_line


@pytest.fixture
def line_factory():
    return build_line


@pytest.fixture
def acme_line():
    return build_line(
        "Q",
        company_name="ACME CORP LTDA",
        address="RUA DAS FLORES 100",
        district="CENTRO",
        postal_code="01001000",
        city="SAO PAULO",
        state="SP",
    )


@pytest.fixture
def body_lines(acme_line):
    return [
        build_line("P", sequence=1),
        acme_line,
        build_line("R", sequence=3),
        build_line("P", sequence=4),
        build_line("Q", company_name="PADARIA BOM PAO", city="RIO DE JANEIRO", state="RJ", sequence=5),
        build_line("R", sequence=6),
    ]


@pytest.fixture
def document(body_lines):
    return split_document([HEADER_FILE, HEADER_BATCH, *body_lines, TRAILER_BATCH, TRAILER_FILE])


@pytest.fixture
def cnab_file(tmp_path: Path, document) -> Path:
    path = tmp_path / "remessa.rem"
    path.write_text("\n".join(document.full) + "\n", encoding="utf-8")
    return path
