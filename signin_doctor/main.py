"""signin-doctor - Google Sign-In fingerprint diagnostics for Titanium Android.

Usage:
    signin-doctor                                   # interactive
    signin-doctor --non-interactive --package com.example.app
    signin-doctor --production-keystore ~/keys/release.jks --alias upload --json

Exit codes:
    0  at least one fingerprint was extracted
    1  no fingerprints were extracted
    2  keytool is not installed, or invalid arguments/settings
    130 interrupted
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import get_args

from pydantic import ValidationError
from rich.console import Console

from signin_doctor.config import LogLevel, get_settings
from signin_doctor.data.guide import GuideLoadError, load_guide
from signin_doctor.models.schemas import AggregationResult, ProductionKeystoreInput, RunConfiguration
from signin_doctor.services.certificate_inspector import KeytoolInspector
from signin_doctor.services.device_bridge import AdbDeviceBridge
from signin_doctor.services.errors import ToolMissing
from signin_doctor.services.filesystem import LocalFileSystem
from signin_doctor.services.fingerprint_aggregator import FingerprintAggregator
from signin_doctor.services.platform_locator import PlatformLocator, detect_os_kind
from signin_doctor.services.prompter import Prompter
from signin_doctor.services.reporter import ConsoleReporter, copy_to_clipboard, default_summary_path

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NO_FINGERPRINTS = 1
EXIT_TOOL_MISSING = 2
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="signin-doctor",
        description="Extract SHA-1/SHA-256 signing fingerprints for Google Sign-In setup.",
    )
    production = parser.add_argument_group("production keystore")
    production.add_argument("--production-keystore", type=Path, help="Path to the release keystore")
    production.add_argument("--alias", default=None, help="Key alias (default: production)")
    production.add_argument("--store-password", default=None, help="Keystore password")
    production.add_argument("--key-password", default=None, help="Key password (default: store password)")

    device = parser.add_argument_group("device")
    device.add_argument("--package", default=None, help="Package name of the installed app to inspect")
    device.add_argument("--serial", default=None, help="adb device serial")

    output = parser.add_argument_group("output")
    output.add_argument("--non-interactive", action="store_true", help="Never prompt; use arguments only")
    output.add_argument("--summary-file", type=Path, default=None, help="Where to write the summary file")
    output.add_argument("--no-clipboard", action="store_true", help="Do not copy the first SHA-1")
    output.add_argument("--no-guide", action="store_true", help="Skip the Firebase setup walkthrough")
    output.add_argument("--json", action="store_true", help="Print results as JSON on stdout")
    output.add_argument(
        "--log-level",
        default=None,
        choices=list(get_args(LogLevel)),
        help="Logging level (default from SIGNIN_DOCTOR_LOG_LEVEL)",
    )
    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def run_configuration_from_args(args: argparse.Namespace) -> RunConfiguration:
    production = None
    if args.production_keystore is not None:
        production = ProductionKeystoreInput(
            path=args.production_keystore.expanduser(),
            alias=args.alias or "production",
            store_password=args.store_password or "",
            key_password=args.key_password,
        )
    return RunConfiguration(production=production, package_name=args.package)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = get_settings()
    except ValidationError as e:
        parser.error(f"invalid SIGNIN_DOCTOR_* setting: {e}")
    configure_logging(args.log_level or settings.log_level)

    # With --json, human-readable output moves to stderr so stdout stays parseable.
    console = Console(stderr=args.json)
    reporter = ConsoleReporter(console)

    filesystem = LocalFileSystem()
    inspector = KeytoolInspector(settings.keytool_path, timeout=settings.command_timeout_seconds)
    try:
        bridge = AdbDeviceBridge(
            settings.adb_path,
            serial=args.serial or settings.adb_serial or None,
            timeout=settings.command_timeout_seconds,
        )
    except ValueError as e:
        parser.error(f"invalid device serial: {e}")
    os_kind = detect_os_kind()
    locator = PlatformLocator(os_kind, Path.home(), filesystem, settings.titanium_sdk_path)

    reporter.banner()
    try:
        keytool_path = inspector.ensure_available()
    except ToolMissing as e:
        reporter.tool_missing(e.tool)
        return EXIT_TOOL_MISSING

    adb_available = bridge.is_available()
    device_count = bridge.connected_device_count() if adb_available else 0
    reporter.prerequisites(
        keytool_path,
        adb_available,
        bridge.describe_devices() if adb_available else [],
        os_kind.value,
    )

    aggregator = FingerprintAggregator(
        inspector=inspector,
        device_bridge=bridge,
        filesystem=filesystem,
        locator=locator,
        debug_keystore_path=settings.debug_keystore_path.expanduser(),
    )

    try:
        configuration = run_configuration_from_args(args)
        if not args.non_interactive:
            configuration = Prompter(console).collect(configuration, device_count)
        result = aggregator.run_all(configuration, listener=reporter.source_outcome)
    except ToolMissing as e:
        reporter.tool_missing(e.tool)
        return EXIT_TOOL_MISSING
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        return EXIT_INTERRUPTED

    if device_count:
        reporter.device_information(bridge.play_services_version(), bridge.google_accounts())

    return report(args, settings, reporter, result)


def report(args, settings, reporter: ConsoleReporter, result: AggregationResult) -> int:
    """Summary, clipboard, guide and JSON output. Returns the exit code."""
    try:
        guide = load_guide(settings.guide_path)
    except GuideLoadError as e:
        logger.error(f"Failed to load setup guide: {e}")
        guide = None

    summary_path = None
    if not result.is_empty:
        summary_path = reporter.write_summary_file(
            result, args.summary_file or default_summary_path(settings.summary_dir)
        )

    reporter.summary(result, summary_path)

    if args.json:
        print(result.model_dump_json(indent=2))

    if result.is_empty:
        if guide is not None:
            reporter.failure_help(guide)
        return EXIT_NO_FINGERPRINTS

    first_sha1 = result.first_sha1
    if first_sha1 is not None and settings.copy_to_clipboard and not args.no_clipboard:
        reporter.clipboard_result(copy_to_clipboard(first_sha1.colon_value))

    if guide is not None and not args.no_guide:
        reporter.guide(guide)

    return EXIT_OK


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
