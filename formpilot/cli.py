"""CLI entry point for Form-Pilot."""
import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

import yaml
from pydantic import ValidationError

from .browser.connection import BrowserConnection
from .core.config import Settings
from .core.errors import BrowserUnavailableError
from .core.logging import setup_logging
from .schema.models import FormResult
from .schema.registry import supported_pages
from .workflow.orchestrator import FormOrchestrator, PageJob

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = Path("config/settings.yaml")


def positive_int(text: str) -> int:
    """Parse an integer of at least 1."""
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected an integer, got {text!r}") from None
    if value < 1:
        raise argparse.ArgumentTypeError(f"Must be at least 1, got {value}")
    return value


def parse_assignment(text: str) -> tuple[str, str]:
    """Parse a ``KEY=VALUE`` override."""
    key, sep, value = text.partition("=")
    if not sep or not key.strip():
        raise argparse.ArgumentTypeError(f"Expected KEY=VALUE, got {text!r}")
    return key.strip(), value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="formpilot",
        description="Fill, verify and submit authentication forms in a browser",
    )
    parser.add_argument(
        "mode",
        choices=["single", "multi"],
        help="Run one page, or several pages in sequence"
    )
    parser.add_argument(
        "--page",
        help=f"Page to run in single mode ({', '.join(supported_pages())})"
    )
    parser.add_argument(
        "--pages",
        help="Comma-separated pages for multi mode (default: all pages)"
    )
    parser.add_argument(
        "--set", "-s",
        dest="assignments",
        action="append",
        type=parse_assignment,
        default=[],
        metavar="LABEL=VALUE",
        help="Override the value for a field (repeatable)"
    )
    parser.add_argument(
        "--overrides", "-o",
        type=Path,
        help="YAML file of overrides, flat or keyed by page id"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=DEFAULT_CONFIG,
        help="Path to settings YAML file"
    )
    parser.add_argument(
        "--max-attempts",
        type=positive_int,
        help="Fill/verify attempts per field"
    )
    parser.add_argument(
        "--no-discovery",
        action="store_true",
        help="Only fill fields declared in the page schema"
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Launch the browser headless"
    )
    parser.add_argument(
        "--cdp-port",
        type=int,
        help="Attach to a running Chrome on this CDP port instead of launching"
    )
    parser.add_argument(
        "--base-url",
        help="Run the pages against another host"
    )
    parser.add_argument(
        "--screenshots",
        type=Path,
        help="Directory for before/after submit screenshots"
    )
    parser.add_argument(
        "--run-log",
        type=Path,
        help="Append a JSON line per page run to this file"
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Also write log output to this file"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable debug logging"
    )
    return parser


def load_settings(args: argparse.Namespace) -> Settings:
    """Settings from the config file (if present) with CLI options applied."""
    if args.config and args.config.exists():
        settings = Settings.from_yaml(args.config)
    else:
        settings = Settings()

    if args.max_attempts is not None:
        settings.fill.max_attempts = args.max_attempts
    if args.no_discovery:
        settings.run.discovery = False
    if args.headless:
        settings.browser.headless = True
    if args.cdp_port is not None:
        settings.browser.cdp_port = args.cdp_port
    if args.base_url:
        settings.run.base_url = args.base_url
    if args.screenshots:
        settings.run.screenshot_dir = args.screenshots
    if args.run_log:
        settings.run.run_log_path = args.run_log
    if args.log_file:
        settings.log_file = args.log_file
    if args.debug:
        settings.log_level = "DEBUG"
    return settings


def load_overrides(path: Optional[Path]) -> dict[str, Any]:
    """Load an overrides YAML file; empty when no file is given."""
    if path is None:
        return {}
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Overrides file must contain a mapping: {path}")
    return data


def overrides_for(
    page_id: str, file_overrides: dict[str, Any], assignments: Sequence[tuple[str, str]]
) -> dict[str, str]:
    """Overrides for one page: flat file entries, page entries, then ``--set``."""
    pages = set(supported_pages())
    merged: dict[str, str] = {}
    for key, value in file_overrides.items():
        if key not in pages and not isinstance(value, dict):
            merged[str(key)] = str(value)
    page_section = file_overrides.get(page_id)
    if isinstance(page_section, dict):
        merged.update({str(k): str(v) for k, v in page_section.items()})
    merged.update(dict(assignments))
    return merged


def select_pages(args: argparse.Namespace, parser: argparse.ArgumentParser) -> list[str]:
    """Validate the requested pages against the registry."""
    supported = supported_pages()
    if args.mode == "single":
        if not args.page:
            parser.error("single mode requires --page")
        requested = [args.page]
    elif args.pages:
        requested = [p.strip() for p in args.pages.split(",") if p.strip()]
    else:
        requested = supported

    requested = [p.lower() for p in requested]
    unknown = [p for p in requested if p not in supported]
    if unknown:
        parser.error(
            f"unknown page(s): {', '.join(unknown)} "
            f"(choose from {', '.join(supported)})"
        )
    return requested


def report(results: Sequence[FormResult]) -> None:
    logger.info("=" * 50)
    for result in results:
        status = "SUBMITTED" if result.submitted else "NOT SUBMITTED"
        logger.info(f"{result.page_id}: {status} ({result.summary})")
        for outcome in result.failed_outcomes:
            logger.warning(
                f"  {outcome.field.label}: {outcome.error} "
                f"after {outcome.attempts_used} attempt(s)"
            )
        if result.error:
            logger.warning(f"  error: {result.error}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the requested pages. Returns 0 only if every page submitted."""
    parser = build_parser()
    args = parser.parse_args(argv)
    pages = select_pages(args, parser)

    try:
        settings = load_settings(args)
    except (OSError, ValidationError, yaml.YAMLError) as e:
        logger.error(f"Could not load settings from {args.config}: {e}")
        return 2
    setup_logging(settings.log_level, settings.log_file)
    logger.info("=== Form-Pilot ===")

    try:
        file_overrides = load_overrides(args.overrides)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error(f"Could not load overrides: {e}")
        return 2

    jobs: list[PageJob] = [
        (page_id, overrides_for(page_id, file_overrides, args.assignments))
        for page_id in pages
    ]

    try:
        with BrowserConnection(settings.browser) as connection:
            orchestrator = FormOrchestrator(connection.page, settings)
            results = orchestrator.run_all_pages(jobs)
    except BrowserUnavailableError as e:
        logger.error(f"{e}. Check the browser install or --cdp-port.")
        return 1

    report(results)
    return 0 if results and all(r.submitted for r in results) else 1


if __name__ == "__main__":
    sys.exit(main())
