from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from .errors import CnabEncodingError, CnabFileNotFoundError, CnabReadError
from .models import CnabDocument

LOGGER = logging.getLogger(__name__)


def split_lines(text: str, strip_carriage_returns: bool = True) -> list[str]:
    """Split raw file contents into record lines.

    Lines are split on ``"\\n"`` only. A trailing ``"\\r"`` is removed from each
    line when ``strip_carriage_returns`` is set, so CRLF and LF files yield
    the same records. The empty string left behind by a terminating newline
    is dropped.
    """
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    if strip_carriage_returns:
        lines = [line[:-1] if line.endswith("\r") else line for line in lines]
    return lines


def split_document(lines: Iterable[str], source: str | None = None) -> CnabDocument:
    return CnabDocument(full=tuple(lines), source=source)


def read_cnab_file(
    path: Path,
    encoding: str = "utf-8",
    strip_carriage_returns: bool = True,
) -> CnabDocument:
    try:
        raw = path.read_bytes()
    except FileNotFoundError as error:
        raise CnabFileNotFoundError(f"CNAB file not found: {path}") from error
    except OSError as error:
        raise CnabReadError(f"Unable to read CNAB file {path}: {error}") from error

    try:
        text = raw.decode(encoding)
    except UnicodeDecodeError as error:
        raise CnabEncodingError(
            f"CNAB file {path} is not valid {encoding} text (byte {error.start})."
        ) from error
    except LookupError as error:
        raise CnabEncodingError(f"Unknown encoding '{encoding}'.") from error

    lines = split_lines(text, strip_carriage_returns=strip_carriage_returns)
    document = split_document(lines, source=str(path))
    LOGGER.info(
        "Loaded %s lines from %s (header=%s, body=%s, tail=%s)",
        len(document.full),
        path,
        len(document.header),
        len(document.body),
        len(document.tail),
    )
    return document
