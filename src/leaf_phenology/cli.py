"""
Command-line interface for the application.

This module provides the main entry point for the CLI.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from leaf_phenology import __version__
from leaf_phenology.config import get_settings
from leaf_phenology.errors import PhenologyError
from leaf_phenology.flows.analyze import analyze_all


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="leaf-phenology",
        description="Fit annual leaf phenology cycles to NEON plant observations",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # 'info' command
    subparsers.add_parser("info", help="Show application info and analysis settings")

    # 'analyze' command - join tables, fit phases, write outputs
    analyze_parser = subparsers.add_parser("analyze", help="Fit phases from NEON CSV exports")
    analyze_parser.add_argument(
        "--status",
        type=Path,
        default=None,
        help="phe_statusintensity CSV (default: status_csv from settings)",
    )
    analyze_parser.add_argument(
        "--individuals",
        type=Path,
        default=None,
        help="phe_perindividual CSV (default: individual_csv from settings)",
    )
    analyze_parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Store directory for outputs (default: data_dir from settings)",
    )

    return parser


def cmd_info(_args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    settings = get_settings()
    options = settings.analysis_options()
    print(f"Application: {settings.app_name}")
    print(f"Version: {__version__}")
    print(f"Environment: {settings.app_env}")
    print(f"Debug: {settings.debug}")
    print(f"Phenophase: {options.phenophase}")
    print(
        f"Phase grid: {options.grid.start} to {options.grid.stop} step {options.grid.step} (radians)"
    )
    print(f"Date reference: {options.date_reference.value}")
    return 0


def cmd_analyze(args: argparse.Namespace) -> int:
    """Handle the 'analyze' command."""
    settings = get_settings()
    if args.debug:
        print(f"Debug mode enabled. Settings: {settings}")

    try:
        summary = analyze_all(
            status_csv=args.status,
            individual_csv=args.individuals,
            options=settings.analysis_options(),
            data_dir=args.data_dir or settings.data_dir,
        )
    except (PhenologyError, FileNotFoundError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Joined rows: {summary['joined_rows']}")
    for fit in summary["species"]:
        if fit["status"] == "ok":
            print(f"  {fit['group']}: phase={fit['phase']:.3f} rss={fit['rss']:.4f} n={fit['n_obs']}")
        else:
            print(f"  {fit['group']}: no fit ({fit['status']})")
    return 0


def main() -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "info": cmd_info,
        "analyze": cmd_analyze,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
