from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from equipment_import.config.loader import (
    DEFAULT_CONFIG_PATH,
    ConfigError,
    IngestConfig,
    default_config,
    load_config,
)
from equipment_import.excel.reader import DecodeError, read_workbook_file
from equipment_import.excel.shape import SheetShape, classify_sheet
from equipment_import.logging.diagnostic_log import DiagnosticLogBuffer
from equipment_import.logging.init import log_summary, setup_logging
from equipment_import.services.batch import ProcessingError, expand_paths, process_paths, scan_excel_files
from equipment_import.services.ingest import SheetParser
from equipment_import.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env, resolve and load the config
- Collect workbook paths (arguments, or the configured source_directory)
- Ingest every workbook, write the aggregated JSON, print the SUMMARY line

Exit codes: 0 all files decoded, 2 some files failed to decode, 1 fatal.
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

CONFIG_ENV_VAR = "EQUIPMENT_IMPORT_CONFIG"


def _load_env_file(path: Path, override: bool = False) -> None:
    """Load .env using python-dotenv.

    既存の環境変数を優先する (override=False)。失敗時は警告を出すのみで続行。
    """
    try:
        if path.exists():
            load_dotenv(dotenv_path=path, override=override)
    except (OSError, UnicodeDecodeError) as e:  # pragma: no cover
        print(f"WARNING: failed to load .env via python-dotenv: {e}")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Equipment inventory workbook importer (Excel -> JSON)")
    p.add_argument("paths", nargs="*", type=Path, help="Workbook files or directories (default: source_directory)")
    p.add_argument("--config", type=Path, default=None, help=f"YAML config (default: {DEFAULT_CONFIG_PATH})")
    p.add_argument("--output", "-o", default="-", help="Output JSON file ('-' for stdout)")
    p.add_argument("--diagnostics", action="store_true", help="Collect diagnostics and write them to logs/")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print sheet shapes & first rows then exit")
    return p.parse_args(argv)


def _resolve_config(explicit: Path | None) -> IngestConfig:
    """--config > $EQUIPMENT_IMPORT_CONFIG > config/ingest.yml (if present) > built-in defaults."""
    if explicit is not None:
        return load_config(explicit)
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return load_config(Path(env_path))
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return default_config()


def _inspect_data(paths: list[Path], cfg: IngestConfig) -> int:
    if not paths:
        print("inspect: no workbook files")
        return EXIT_SUCCESS_ALL
    parser = SheetParser(cfg)
    for f in paths:
        print(f"FILE: {f.name}")
        try:
            sheets = read_workbook_file(f, keep_na_strings=cfg.keep_na_strings)
        except DecodeError as e:
            print(f"  read_error: {e}")
            continue
        for sheet in sheets:
            classified = classify_sheet(sheet, parser.is_header, cfg.section_markers)
            print(f"  SHEET: {sheet.name} rows={sheet.row_count} shape={classified.shape.value}")
            if classified.shape is SheetShape.KEYED:
                print(f"    headers={list(classified.headers)}")
                sample = [
                    {k: (v.isoformat() if hasattr(v, "isoformat") else v) for k, v in r.values.items()}
                    for r in classified.keyed_rows[:3]
                ]
            else:
                if classified.fallback_reason:
                    print(f"    fallback={classified.fallback_reason}")
                sample = [
                    [v.isoformat() if hasattr(v, "isoformat") else v for v in r]
                    for r in classified.positional_rows[:3]
                ]
            print("    sample_rows=", sample)
    return EXIT_SUCCESS_ALL


def _write_output(payload: dict, output: str) -> None:
    text = json.dumps(payload, ensure_ascii=False, indent=2)
    if output == "-":
        sys.stdout.write(text + "\n")
        sys.stdout.flush()
        return
    out_path = Path(output)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(text + "\n", encoding="utf-8")


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Args:
        argv: Arguments without the program name (sys.argv[1:] when None)

    Returns:
        0 when every workbook decoded, 2 when some failed, 1 on fatal errors
    """
    logger = setup_logging()

    # NOTE: 空リスト [] (テストからの呼び出し) で sys.argv[1:] を読まないよう None のときのみ参照
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"))

    if args.debug:
        setup_logging(debug=True)
        logger.debug("debug mode enabled")

    try:
        cfg = _resolve_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    try:
        if args.paths:
            paths = expand_paths(args.paths)
        else:
            directory = Path(cfg.source_directory)
            logger.info(f"Processing files from: {directory}")
            paths = scan_excel_files(directory)
    except ProcessingError as e:
        logger.error(str(e))
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(paths, cfg)

    diagnostic_log = DiagnosticLogBuffer() if args.diagnostics else None
    result, records = process_paths(
        paths, cfg, diagnostics=args.diagnostics, diagnostic_log=diagnostic_log,
    )

    try:
        _write_output(records.to_dict(), args.output)
    except OSError as e:
        logger.error(f"output: {e}")
        return EXIT_FATAL
    if args.output != "-":
        logger.info(f"wrote {result.total_records} records to {args.output}")
    if diagnostic_log is not None and diagnostic_log.file_path_if_written is not None:
        logger.info(f"diagnostics: {diagnostic_log.file_path_if_written}")

    # log_summary が "SUMMARY " を付けるので本文のみ渡す
    summary_line = render_summary_line(result)
    log_summary(summary_line[len("SUMMARY "):])

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
