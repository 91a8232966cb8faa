from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path

from rich.console import Console

from .config import CnabSettings, load_settings
from .errors import CnabError
from .exporters import export_document
from .loader import read_cnab_file
from .models import CnabDocument
from .query_engine import list_segments, lookup_position, search_company
from .rendering import print_company_matches, print_position_report, print_segment_matches

LOGGER = logging.getLogger(__name__)

MODE_LOOKUP = "lookup"
MODE_SEGMENT_SEARCH = "segment-search"
MODE_NAME_SEARCH = "name-search"
MODE_EXPORT = "export"


def _setup_logging(verbose: bool, level_name: str = "WARNING") -> None:
    level = logging.DEBUG if verbose else getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )


def resolve_mode(args: argparse.Namespace) -> str:
    """Return the single mode requested by ``args``.

    Raises ``ValueError`` with a user-facing message on incomplete or
    conflicting options.
    """
    if args.segment is not None and len(args.segment.strip()) != 1:
        raise ValueError(f"--segment expects a single character, got '{args.segment}'.")
    for option, value in (("--from", args.from_pos), ("--to", args.to_pos)):
        if value is not None and value < 1:
            raise ValueError(f"{option} must be a positive position, got {value}.")
    if (args.from_pos is None) != (args.to_pos is None):
        raise ValueError("--from and --to must be given together.")
    if args.name is not None and not args.search:
        raise ValueError("--name requires --search.")
    if args.segment is not None and not args.search and args.from_pos is None:
        raise ValueError("--segment requires --search or --from/--to.")

    modes: list[str] = []
    if args.from_pos is not None:
        if args.segment is None:
            raise ValueError("--from/--to require --segment.")
        if args.search:
            raise ValueError("--from/--to cannot be combined with --search.")
        modes.append(MODE_LOOKUP)
    if args.search:
        if args.segment is not None and args.name is not None:
            raise ValueError("--search takes either --segment or --name, not both.")
        if args.segment is not None:
            modes.append(MODE_SEGMENT_SEARCH)
        elif args.name is not None:
            modes.append(MODE_NAME_SEARCH)
        else:
            raise ValueError("--search requires --segment or --name.")
    if args.json is not None:
        modes.append(MODE_EXPORT)

    if not modes:
        raise ValueError("Invalid combination of arguments. Use --help to see the options.")
    if len(modes) > 1:
        raise ValueError(f"Only one operation per run, got: {', '.join(modes)}.")
    return modes[0]


def _input_path(args: argparse.Namespace, settings: CnabSettings) -> Path:
    if args.file:
        return Path(args.file).resolve()
    return settings.default_input_path


def _run(
    mode: str,
    args: argparse.Namespace,
    document: CnabDocument,
    settings: CnabSettings,
    console: Console,
) -> int:
    segment_type = args.segment.strip().upper() if args.segment else None

    if mode == MODE_LOOKUP:
        report = lookup_position(
            document.body,
            segment_type,
            args.from_pos,
            args.to_pos,
            start_line=document.body_start_line,
        )
        print_position_report(console, report, source=document.source)
    elif mode == MODE_SEGMENT_SEARCH:
        matches = list_segments(document.body, segment_type, start_line=document.body_start_line)
        print_segment_matches(console, segment_type, matches)
    elif mode == MODE_NAME_SEARCH:
        matches = search_company(document.body, args.name, start_line=document.body_start_line)
        print_company_matches(console, matches, source=document.source)
    else:
        message = export_document(document, Path(args.json), indent=settings.json_indent)
        console.print(message, style="green", markup=False)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cnab-rows",
        description="Inspect CNAB 240 fixed-width files: field positions, segment and company search, export.",
        epilog=(
            "examples:\n"
            "  cnab-rows -f 21 -t 34 -s p         show positions 21..34 of the first P line\n"
            "  cnab-rows -b -s p                  list every P segment\n"
            '  cnab-rows -b -n "CAIXA"            search a company name in Q segments\n'
            '  cnab-rows -j "output.json"         export Q segments to JSON (.xlsx for Excel)\n'
            '  cnab-rows -a "path/to/file.rem"    use another CNAB file'
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-a", "--file", default=None, help="CNAB file path (defaults to the configured sample).")
    parser.add_argument("-f", "--from", dest="from_pos", type=int, default=None, help="Start position (1-based).")
    parser.add_argument("-t", "--to", dest="to_pos", type=int, default=None, help="End position (inclusive).")
    parser.add_argument("-s", "--segment", default=None, help="Segment type, e.g. P or Q.")
    parser.add_argument("-b", "--search", action="store_true", help="Search by company name or segment.")
    parser.add_argument("-n", "--name", default=None, help="Company name to search for.")
    parser.add_argument(
        "-j",
        "--json",
        "--output",
        dest="json",
        default=None,
        help="Export Q segments to this path (JSON, or Excel when ending in .xlsx).",
    )
    parser.add_argument("--encoding", default=None, choices=["utf-8", "latin-1"], help="Input file encoding.")
    parser.add_argument("--config", default=None, help="Optional TOML settings file.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logs.")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        mode = resolve_mode(args)
    except ValueError as error:
        parser.error(str(error))

    settings = load_settings(Path(args.config) if args.config else None)
    _setup_logging(verbose=args.verbose, level_name=settings.log_level)
    LOGGER.debug("Settings loaded from %s", settings.source)

    console = Console()
    started = time.perf_counter()
    try:
        document = read_cnab_file(
            _input_path(args, settings),
            encoding=args.encoding or settings.input_encoding,
            strip_carriage_returns=settings.strip_carriage_returns,
        )
        return _run(mode, args, document, settings, console)
    except CnabError as error:
        LOGGER.debug("%s failed", mode, exc_info=True)
        Console(stderr=True).print(f"Error while processing the file: {error}", style="red", markup=False)
        return 1
    finally:
        LOGGER.debug("Total time: %.3fs", time.perf_counter() - started)


if __name__ == "__main__":
    raise SystemExit(main())
