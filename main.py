import argparse
import logging
import sys
from typing import List, Optional

from input_loader import load_settings
from packer import pack_report
from packer_errors import SettingsError, SourceUnavailable
from packer_types import PackerSettings
from utilities import reports_markdown_table


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Pick the highest-cost items that fit each pack")
    parser.add_argument("--input-file", required=True, help="Path to the packs text file")
    parser.add_argument("--settings-file", help="Path to a settings JSON file")
    parser.add_argument("--backend", choices=["dp", "cp-sat"], help="Solving backend (overrides settings)")
    parser.add_argument("--time-limit", type=float, help="CP-SAT time limit in seconds (overrides settings)")
    parser.add_argument("--report", action="store_true", help="Also print a Markdown table of per-line diagnostics")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (logs go to stderr)",
    )
    return parser


def run(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format='%(asctime)s - %(levelname)s - %(message)s')

    try:
        settings: PackerSettings = load_settings(args.settings_file) if args.settings_file else {}
    except SettingsError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    if args.backend is not None:
        settings["backend"] = args.backend
    if args.time_limit is not None:
        if args.time_limit <= 0:
            print("Error: --time-limit must be > 0", file=sys.stderr)
            return 1
        settings["max_time_seconds"] = args.time_limit

    try:
        reports = pack_report(args.input_file, settings)
    except SourceUnavailable as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if reports:
        print("\n".join(r["output"] for r in reports))
    if args.report:
        print()
        print(reports_markdown_table(reports))
    return 0


if __name__ == "__main__":
    sys.exit(run())
