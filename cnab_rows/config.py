from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

LOGGER = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parent
BUNDLED_SAMPLE_PATH = PACKAGE_DIR / "data" / "cnab_example.rem"

_ALLOWED_ENCODINGS = {"utf-8", "latin-1"}
_ALLOWED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR"}


@dataclass
class CnabSettings:
    default_input_path: Path = field(default_factory=lambda: BUNDLED_SAMPLE_PATH)
    input_encoding: str = "utf-8"
    strip_carriage_returns: bool = True
    json_indent: int = 2
    log_level: str = "WARNING"
    source: str = "internal defaults"


def _config_candidates(explicit: Path | None = None) -> list[Path]:
    if explicit is not None:
        return [explicit.expanduser()]
    candidates: list[Path] = []
    from_env = os.getenv("CNAB_ROWS_CONFIG_FILE")
    if from_env:
        candidates.append(Path(from_env).expanduser())
    candidates.extend(
        [
            Path.cwd() / "config" / "cnab_rows.toml",
            Path.cwd() / "cnab_rows.toml",
        ]
    )
    return candidates


def load_settings(config_path: Path | None = None) -> CnabSettings:
    """Build settings from the first readable TOML candidate and the environment.

    Values of the wrong type or outside the allowed sets are ignored and the
    default is kept. ``CNAB_ROWS_INPUT`` overrides ``default_input_path``.
    """
    settings = CnabSettings()

    for path in _config_candidates(config_path):
        if not path.exists():
            continue
        try:
            with path.open("rb") as handle:
                payload = tomllib.load(handle)
        except (tomllib.TOMLDecodeError, OSError) as error:
            LOGGER.warning("Unable to read config file %s: %s", path, error)
            continue

        section = payload.get("cnab_rows", payload)
        settings.source = str(path)

        if isinstance(section.get("default_input_path"), str) and section["default_input_path"].strip():
            input_path = Path(section["default_input_path"].strip()).expanduser()
            # Relative paths are relative to the config file, not the working directory.
            settings.default_input_path = input_path if input_path.is_absolute() else path.parent / input_path

        if isinstance(section.get("input_encoding"), str):
            value = section["input_encoding"].strip().lower()
            if value in _ALLOWED_ENCODINGS:
                settings.input_encoding = value

        if isinstance(section.get("strip_carriage_returns"), bool):
            settings.strip_carriage_returns = section["strip_carriage_returns"]

        indent = section.get("json_indent")
        if isinstance(indent, int) and not isinstance(indent, bool) and 0 <= indent <= 8:
            settings.json_indent = indent

        if isinstance(section.get("log_level"), str):
            value = section["log_level"].strip().upper()
            if value in _ALLOWED_LOG_LEVELS:
                settings.log_level = value
        break

    from_env = os.getenv("CNAB_ROWS_INPUT")
    if from_env and from_env.strip():
        settings.default_input_path = Path(from_env.strip()).expanduser()

    return settings
