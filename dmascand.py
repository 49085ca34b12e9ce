#!/usr/bin/env python3
"""DMA Scan - DMA and cheat-assist device scanner.

Entry point for the command-line interface.
"""

import argparse
import logging
import sys
from pathlib import Path

from dmascan import __version__
from dmascan.core.config import Config, load_config
from dmascan.core.logging_config import setup_logging
from dmascan.discovery import SOURCE_NAMES
from dmascan.ui.cli import (
    run_config_command,
    run_devices_command,
    run_scan_command,
    run_signatures_command,
)


def positive_int(value: str) -> int:
    """Parse a command-line integer that must be at least 1."""
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="dmascand",
        description="Point-in-time scanner for DMA-capable and cheat-assist devices",
        epilog="Detection is signature based; a clean result is not a guarantee.",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="count",
        default=0,
        help="Increase verbosity (use -vv for debug)",
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress console log output",
    )

    parser.add_argument(
        "--source",
        choices=SOURCE_NAMES,
        help="Device source to enumerate (default from config)",
    )

    # Subcommands
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Scan command
    scan_parser = subparsers.add_parser("scan", help="Scan attached devices for suspicious hardware")
    scan_parser.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Agree to the scan without prompting",
    )
    scan_parser.add_argument(
        "--json",
        action="store_true",
        help="Output results as JSON",
    )
    scan_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Write results to file",
    )
    scan_parser.add_argument(
        "--input", "-i",
        type=Path,
        help="Scan a device inventory JSON file instead of this host",
    )
    scan_parser.add_argument(
        "--signatures", "-s",
        type=Path,
        action="append",
        help="Extra signature catalog file (can be repeated)",
    )
    scan_parser.add_argument(
        "--workers", "-w",
        type=positive_int,
        help="Number of classification threads",
    )

    # Devices command
    devices_parser = subparsers.add_parser("devices", help="List all enumerated devices")
    devices_parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON (usable with scan --input)",
    )
    devices_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Write device list to file",
    )
    devices_parser.add_argument(
        "--input", "-i",
        type=Path,
        help="Read a device inventory JSON file instead of this host",
    )

    # Signatures command
    signatures_parser = subparsers.add_parser("signatures", help="Show the signature catalog")
    signatures_parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )
    signatures_parser.add_argument(
        "--signatures", "-s",
        type=Path,
        action="append",
        help="Extra signature catalog file (can be repeated)",
    )
    signatures_parser.add_argument(
        "--export",
        type=Path,
        help="Write the merged catalog to a JSON file",
    )

    # Config command
    config_parser = subparsers.add_parser("config", help="Manage configuration")
    config_parser.add_argument(
        "--init",
        action="store_true",
        help="Create default configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        help="Show current configuration",
    )

    return parser


def get_log_level(verbose: int) -> int:
    """Get logging level from verbosity count."""
    if verbose >= 2:
        return logging.DEBUG
    elif verbose >= 1:
        return logging.INFO
    return logging.WARNING


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    # Load configuration
    config: Config = load_config(args.config) if args.config else load_config()
    if args.source:
        config.scan.source = args.source

    # Ensure directories exist
    config.ensure_directories()

    # Setup logging
    log_level = get_log_level(args.verbose)
    setup_logging(
        config.logs_dir,
        log_level=log_level,
        console_output=not args.quiet,
    )

    # Execute command
    if args.command == "scan":
        return run_scan_command(args, config)
    elif args.command == "devices":
        return run_devices_command(args, config)
    elif args.command == "signatures":
        return run_signatures_command(args, config)
    elif args.command == "config":
        return run_config_command(args, config)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
