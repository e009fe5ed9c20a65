from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import Optional, Sequence

from . import __version__
from .config import ConfigManager
from .core import SwapError, SwapInRunner, SwapOutRunner
from .utils import reporting
from .utils.logger import get_logger


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    try:
        config = ConfigManager(Path(args.config) if args.config else None)
    except (OSError, ValueError) as exc:
        print(f"Config error: {exc}", file=sys.stderr)
        return 2
    errors = config.validate_config()
    if errors:
        for error in errors:
            print(f"Config error: {error}", file=sys.stderr)
        return 2

    error_log = config.get("logging.error_log")
    logger = get_logger(
        "pptx_slim_swapper",
        log_file=Path(error_log) if error_log else None,
        level=str(config.get("logging.level", "INFO")).upper(),
    )

    print(f"pptx-slim-swapper v{__version__}")
    try:
        if args.command == "out":
            _run_out(args, config, logger)
        elif args.command == "in":
            _run_in(args, config, logger)
    except (SwapError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pptx-slim-swapper",
        description="Swap media in a PPTX for small placeholders and restore them later",
    )
    parser.add_argument("--config", help="Path to config file", default=None)

    subparsers = parser.add_subparsers(dest="command")

    swap_out = subparsers.add_parser("out", help="Move media out and insert placeholders")
    swap_out.add_argument("input", help="Input PPTX file")
    swap_out.add_argument("--output", "-o", help="Output folder (default: ./output)")

    swap_in = subparsers.add_parser("in", help="Restore media from a manifest")
    swap_in.add_argument("input", help="Slim PPTX file")
    swap_in.add_argument(
        "--manifest-dir",
        "-m",
        help="Folder containing swap-manifest.json (default: the input's folder)",
    )

    return parser


def _run_out(args: argparse.Namespace, config: ConfigManager, logger) -> None:
    input_path = Path(args.input)
    output_dir = Path(args.output) if args.output else None
    print(f"Input: {input_path}")

    start_time = time.monotonic()
    result = SwapOutRunner(config, logger=logger).run(input_path, output_dir)
    elapsed_ms = int((time.monotonic() - start_time) * 1000)

    lines = reporting.build_swap_out_lines(
        media_count=result.media_count,
        output_path=str(result.output_path),
        manifest_path=str(result.manifest_path),
        sizes=reporting.SizeComparison(result.original_size_bytes, result.slim_size_bytes),
        elapsed_ms=elapsed_ms,
    )
    print("\n".join(lines))


def _run_in(args: argparse.Namespace, config: ConfigManager, logger) -> None:
    input_path = Path(args.input)
    manifest_dir = Path(args.manifest_dir) if args.manifest_dir else None
    print(f"Input: {input_path}")
    print(f"Manifest folder: {manifest_dir or input_path.parent}")

    start_time = time.monotonic()
    result = SwapInRunner(config, logger=logger).run(input_path, manifest_dir)
    elapsed_ms = int((time.monotonic() - start_time) * 1000)

    lines = reporting.build_swap_in_lines(
        restored_count=result.restored_count,
        record_count=result.record_count,
        output_path=str(result.output_path),
        sizes=reporting.SizeComparison(result.slim_size_bytes, result.restored_size_bytes),
        skipped=len(result.skipped),
        elapsed_ms=elapsed_ms,
    )
    print("\n".join(lines))
    for skipped in result.skipped:
        print(f"  {skipped.describe()}")


if __name__ == "__main__":
    sys.exit(main())
