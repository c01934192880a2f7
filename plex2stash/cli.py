from __future__ import annotations

import argparse
import logging
from pathlib import Path

from .client import StashAPIError
from .config import DEFAULT_CONFIG_NAME, ConfigError, MigrationConfig
from .normalization import NormalizationError
from .pipeline import MigrationContext, run_migration
from .report import DEFAULT_REPORT_NAME, ReportWriteError, generate_summary

LOGGER = logging.getLogger(__name__)

MISSING_FILES_MESSAGE = (
    "Missing one or more required files. Please make sure config.json, "
    "the Plex CSV and the Stash JSON exist where config.json says they are."
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Migrate Plex view counts and ratings into Stash")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser(
        "run", help="Match scenes and apply the updates")
    run_parser.add_argument(
        "--config",
        type=Path,
        default=Path(DEFAULT_CONFIG_NAME),
        help="Path to the JSON configuration file.",
    )
    run_parser.add_argument(
        "--output",
        type=Path,
        default=Path(DEFAULT_REPORT_NAME),
        help="Where to write the per-scene results.",
    )
    run_parser.add_argument(
        "--live",
        action="store_true",
        help="Query Stash for all scenes even when stash_json is configured.",
    )
    run_parser.add_argument(
        "--simple-csv",
        action="store_true",
        help="Split the Plex export on '|' line by line instead of parsing it as CSV.",
    )
    run_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Compute and log the updates without sending them.",
    )
    run_parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable progress bars.",
    )
    run_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    return parser


def _run(args: argparse.Namespace) -> int:
    try:
        config = MigrationConfig.from_file(args.config)
    except ConfigError as exc:
        print(exc)
        return 1

    context = MigrationContext.from_config(config)
    try:
        summary = run_migration(
            context,
            output_path=args.output,
            simple_csv=args.simple_csv,
            fetch_live=args.live,
            dry_run=args.dry_run,
            show_progress=not args.no_progress,
        )
    except FileNotFoundError as exc:
        LOGGER.error("Input file not found: %s", exc)
        print(MISSING_FILES_MESSAGE)
        return 1
    except NormalizationError as exc:
        print(f"Could not read input: {exc}")
        return 1
    except StashAPIError as exc:
        print(f"Could not load scenes from Stash: {exc}")
        return 1
    except ReportWriteError as exc:
        print(exc)
        return 1

    print(generate_summary(summary))
    if summary.candidates == 0:
        print("No scenes to update, exiting...")
    elif summary.report_path is not None:
        print(f"Results are in the {summary.report_path} file")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "verbose", False) else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    if args.command == "run":
        return _run(args)

    parser.error("Unknown command")
    return 1


if __name__ == "__main__":  # pragma: no cover - exercised via CLI entry point
    raise SystemExit(main())
