"""
keycorr CLI.

Usage
-----
keycorr measurements.txt
keycorr measurements.txt --mode equal-length
keycorr measurements.txt --json-out out/table.json --parquet-out out/table.parquet
keycorr                       # prompts for the document path on stdin

Each result is printed as ``<key1> -> <key2>: <r>``. Undefined coefficients
(fewer than two paired samples, or a constant sample) print as ``NaN``.

Exit codes: 0 ok, 1 document syntax error, 2 document/argument error,
3 export error.
"""

from __future__ import annotations

import argparse
import math
import sys
from pathlib import Path
from typing import List, Optional

from contracts.errors import BlockSyntaxError, DocumentError, ExportError
from contracts.observations import CorrelationMode, CorrelationTable
from infra.config import get_settings
from infra.logging_config import clear_run_context, set_run_context, setup_logging
from pipeline.correlation.correlate_document import run_correlation_from_path
from pipeline.export_json import ExportConfig, export_table_json
from pipeline.writer_parquet import write_correlation_parquet

PROMPT = "Enter a path to the document: "
INVALID_PATH = "Invalid path. Try again."


def _try_get_file(path: str) -> Optional[Path]:
    """Return the path when it names an existing file, else report and return None."""
    text = path.replace('"', "").strip()
    if text and Path(text).is_file():
        return Path(text)
    print(INVALID_PATH, file=sys.stderr)
    return None


def get_document(path_arg: Optional[str]) -> Path:
    """
    Resolve the document from the command line, or ask for it on stdin.

    The prompt is shown once; every rejected entry prints an error and the
    next stdin line is tried. EOF on stdin raises DocumentError.
    """
    if path_arg:
        found = _try_get_file(path_arg)
        if found is not None:
            return found

    print(PROMPT, end="", flush=True)
    while True:
        line = sys.stdin.readline()
        if line == "":
            raise DocumentError("No document path given (end of input).")
        found = _try_get_file(line.rstrip("\r\n"))
        if found is not None:
            return found


def format_coefficient(r: float) -> str:
    return "NaN" if math.isnan(r) else repr(r)


def print_table(table: CorrelationTable) -> None:
    for pair, r in table.items():
        print(f"{pair.label}: {format_coefficient(r)}")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="keycorr",
        description="Pairwise Pearson correlation of key: value measurement blocks.",
    )
    p.add_argument("path", nargs="?", default=None, help="Document path. Prompted on stdin when missing.")
    p.add_argument(
        "--mode",
        default=None,
        choices=[m.value for m in CorrelationMode],
        help="Alignment policy (or KEYCORR_MODE env var). Default: intersection",
    )
    p.add_argument("--json-out", default=None, help="Write the table as JSON (or KEYCORR_JSON_OUT env var).")
    p.add_argument("--parquet-out", default=None, help="Write the table as Parquet (or KEYCORR_PARQUET_OUT env var).")
    p.add_argument("--log-level", default=None, help="DEBUG|INFO|WARNING|ERROR (or KEYCORR_LOG_LEVEL env var).")
    p.add_argument("--log-json", action="store_true", help="Emit JSON logs on stderr.")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level, json_logs=True if args.log_json else None)
    settings = get_settings()

    mode = CorrelationMode.parse(args.mode) if args.mode else settings.correlation.mode
    json_out = args.json_out or settings.output.json_out
    parquet_out = args.parquet_out or settings.output.parquet_out

    try:
        document = get_document(args.path)
    except DocumentError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    set_run_context(document=str(document), mode=mode.value)
    try:
        try:
            run = run_correlation_from_path(document, mode=mode)
        except BlockSyntaxError as exc:
            print(str(exc), file=sys.stderr)
            return 1
        except DocumentError as exc:
            print(str(exc), file=sys.stderr)
            return 2

        print_table(run.table)

        try:
            if json_out:
                export_table_json(run.table, ExportConfig(path=json_out))
            if parquet_out:
                write_correlation_parquet(run.table, parquet_out, compression=settings.output.compression)
        except ExportError as exc:
            print(str(exc), file=sys.stderr)
            return 3
    finally:
        clear_run_context()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
