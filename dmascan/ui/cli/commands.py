"""CLI command implementations.

This module provides the command handlers for all CLI commands.
"""

import argparse
import json
import sys
from collections.abc import Callable
from pathlib import Path
from typing import TextIO

from dmascan.classification.signatures import SignatureCatalog, load_catalog
from dmascan.core.config import Config, save_config
from dmascan.core.logging_config import get_logger
from dmascan.core.orchestrator import ScanOrchestrator
from dmascan.discovery import BaseDeviceSource, JsonDeviceSource

from .formatters import BANNER, get_formatter

# Exit codes
EXIT_CLEAN = 0
EXIT_SUSPICIOUS = 1
EXIT_ERROR = 1
EXIT_ENUMERATION_FAILED = 2

CONSENT_PROMPT = "Do you agree to the system scan? (yes/no): "
CONSENT_ANSWERS = ("yes", "y")

logger = get_logger("cli")


def print_banner() -> None:
    """Print the program banner."""
    print(BANNER)
    print()


def ask_consent(
    input_func: Callable[[str], str] = input,
    prompt_stream: TextIO | None = None,
) -> bool:
    """Ask the user to agree to the scan.

    Args:
        input_func: Function used to read the answer.
        prompt_stream: Stream to write the question to instead of passing
            it to input_func. Used to keep stdout free for JSON output.

    Returns:
        True if the user answered yes.
    """
    try:
        if prompt_stream is not None:
            prompt_stream.write(CONSENT_PROMPT)
            prompt_stream.flush()
            answer = input_func("")
        else:
            answer = input_func(CONSENT_PROMPT)
    except EOFError:
        return False
    return answer.strip().lower() in CONSENT_ANSWERS


def _build_catalog(args: argparse.Namespace, config: Config) -> SignatureCatalog:
    """Build the catalog from config plus any --signatures files."""
    paths = config.signature_paths()
    paths.extend(getattr(args, "signatures", None) or [])
    return load_catalog(paths)


def _build_source(args: argparse.Namespace) -> BaseDeviceSource | None:
    """Get the replay source for --input, or None for the platform source."""
    input_path: Path | None = getattr(args, "input", None)
    if input_path is not None:
        return JsonDeviceSource(input_path)
    return None


def _write_output(text: str, output: Path | None) -> None:
    if output:
        output.write_text(text + "\n", encoding="utf-8")
        print(f"Results written to {output}")
    else:
        print(text)


def run_scan_command(
    args: argparse.Namespace,
    config: Config,
    input_func: Callable[[str], str] = input,
) -> int:
    """Execute the scan command.

    Args:
        args: Command-line arguments
        config: Configuration object
        input_func: Function used to read the consent answer

    Returns:
        Exit code: 0 when clean, 1 when suspicious devices were found,
        2 when device enumeration failed.
    """
    as_json = getattr(args, "json", False)
    output: Path | None = getattr(args, "output", None)

    if config.ui.show_banner and not as_json:
        print_banner()

    if config.ui.require_consent and not getattr(args, "yes", False):
        if not ask_consent(input_func, prompt_stream=sys.stderr if as_json else None):
            logger.info("Scan declined by user")
            print("Scan aborted. You must agree to proceed.", file=sys.stderr if as_json else sys.stdout)
            return EXIT_CLEAN

    try:
        catalog = _build_catalog(args, config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return EXIT_ERROR

    workers = getattr(args, "workers", None)
    if workers is not None:
        config.scan.max_workers = max(1, workers)

    try:
        orchestrator = ScanOrchestrator(config, source=_build_source(args), catalog=catalog)
    except ValueError as e:
        print(f"Error: {e}")
        return EXIT_ERROR

    if not as_json:
        print("[!] Starting device scan...")

    report = orchestrator.run_scan()

    formatter = get_formatter(
        as_json,
        use_colors=config.ui.use_colors and not output,
        verbose=getattr(args, "verbose", 0) > 0,
    )
    _write_output(formatter.format_report(report), output)

    if report.enumeration_failed:
        return EXIT_ENUMERATION_FAILED
    if report.results:
        return EXIT_SUSPICIOUS
    return EXIT_CLEAN


def run_devices_command(args: argparse.Namespace, config: Config) -> int:
    """Execute the devices command.

    Lists every enumerated device without classifying it. The JSON output
    can be replayed later with ``scan --input``.

    Args:
        args: Command-line arguments
        config: Configuration object

    Returns:
        Exit code
    """
    try:
        orchestrator = ScanOrchestrator(
            config,
            source=_build_source(args),
            catalog=SignatureCatalog(),
        )
        devices = orchestrator.list_devices()
    except OSError as e:
        print(f"Device enumeration failed: {e}")
        return EXIT_ENUMERATION_FAILED
    except ValueError as e:
        print(f"Error: {e}")
        return EXIT_ERROR

    formatter = get_formatter(getattr(args, "json", False), use_colors=config.ui.use_colors)
    _write_output(formatter.format_device_list(devices), getattr(args, "output", None))
    return 0


def run_signatures_command(args: argparse.Namespace, config: Config) -> int:
    """Execute the signatures command.

    Args:
        args: Command-line arguments
        config: Configuration object

    Returns:
        Exit code
    """
    try:
        catalog = _build_catalog(args, config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return EXIT_ERROR

    export_path: Path | None = getattr(args, "export", None)
    if export_path:
        catalog.export_to_file(export_path)
        print(f"Signature catalog exported to {export_path}")
        return 0

    formatter = get_formatter(getattr(args, "json", False), use_colors=config.ui.use_colors)
    print(formatter.format_catalog(catalog))
    return 0


def run_config_command(args: argparse.Namespace, config: Config) -> int:
    """Execute the config command.

    Args:
        args: Command-line arguments
        config: Configuration object

    Returns:
        Exit code
    """
    if args.init:
        save_config(config)
        print(f"Configuration saved to {config.config_dir / 'config.json'}")
        return 0

    if args.show:
        print(json.dumps(config.to_dict(), indent=2))
        return 0

    print("Use --init to create config or --show to display current config")
    return 1
