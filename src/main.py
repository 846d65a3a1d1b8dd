"""
ParaBank registration harness.
Main entry point for the application.
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.panel import Panel

from src.config.settings import get_settings
from src.core.types import TestResult, TestStatus
from src.monitoring.logger import get_logger, setup_logging
from src.probe.readiness import run_with_readiness
from src.runner.harness import TestHarness

__version__ = "0.1.0"

console = Console()
logger = get_logger("main")


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        description=f"ParaBank registration harness v{__version__}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run TC 001 against the public demo site
  python -m src.main

  # Run with a visible browser and a custom reports directory
  python -m src.main --headed -o out/reports

  # Wait for a local server, then run an external test command
  python -m src.main --probe --health-url http://localhost:3000/health -- npm test
        """,
    )

    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        "--probe",
        action="store_true",
        help="Wait for the health endpoint, then run COMMAND",
    )
    mode_group.add_argument(
        "--version",
        action="store_true",
        help="Show version information",
    )

    browser_group = parser.add_mutually_exclusive_group()
    browser_group.add_argument(
        "--headless",
        dest="headless",
        action="store_true",
        default=None,
        help="Run browser in headless mode",
    )
    browser_group.add_argument(
        "--headed",
        dest="headless",
        action="store_false",
        help="Run browser with a visible window",
    )

    parser.add_argument(
        "-u", "--url",
        help="Landing page of the application under test",
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        help="Output directory for reports (default: reports/)",
    )
    parser.add_argument(
        "--health-url",
        help="Health endpoint polled in --probe mode",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable structured logging output (JSON)",
    )
    parser.add_argument(
        "command",
        nargs=argparse.REMAINDER,
        help="External test command run after the probe succeeds",
    )

    return parser


def show_version() -> int:
    """Show version information."""
    console.print("\n[bold cyan]ParaBank registration harness[/bold cyan]")
    console.print(f"Version: [green]{__version__}[/green]")
    console.print("Python: [dim]3.10+[/dim]")
    return 0


def print_summary(result: TestResult, reports_dir: Path) -> None:
    """Print the end-of-run summary."""
    status_color = "green" if result.status == TestStatus.PASSED else "red"
    console.print("\n[bold]Test Execution Summary:[/bold]")
    console.print(f"Status: [{status_color}]{result.status.value}[/{status_color}]")
    console.print(f"Username: [cyan]{result.username or '-'}[/cyan]")
    console.print(f"Total Steps: {len(result.steps)}")
    console.print(f"Passed Steps: [green]{result.passed_count}[/green]")
    console.print(f"Failed Steps: [red]{result.failed_count}[/red]")
    for error in result.errors:
        console.print(f"[red]{error.step}: {error.error}[/red]")
    console.print(f"Reports directory: [cyan]{reports_dir}[/cyan]")


async def run_test() -> int:
    """
    Run TC 001.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    settings = get_settings()
    console.print(Panel.fit(
        "[bold cyan]ParaBank registration harness[/bold cyan]\n"
        "TC 001 - Verify that user can register a new customer",
        border_style="cyan",
    ))

    harness = TestHarness(settings)
    exit_code = await harness.run()
    print_summary(harness.result, settings.reports_dir)
    return exit_code


async def async_main(args: Optional[list[str]] = None) -> int:
    """Async main entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if parsed_args.version:
        return show_version()

    settings = get_settings()

    if parsed_args.debug:
        settings.log_level = "DEBUG"
    if parsed_args.verbose:
        settings.log_format = "json"
    if parsed_args.headless is not None:
        settings.browser_headless = parsed_args.headless
    if parsed_args.url:
        settings.target_url = parsed_args.url
    if parsed_args.output:
        settings.reports_dir = parsed_args.output

    setup_logging(
        log_level=settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
    )

    if parsed_args.probe:
        command = list(parsed_args.command)
        if command[:1] == ["--"]:
            command = command[1:]
        if not command:
            parser.error("--probe requires a COMMAND to run")
        return await run_with_readiness(
            command,
            url=parsed_args.health_url or settings.health_url,
            max_attempts=settings.health_max_attempts,
            interval=settings.health_interval_seconds,
        )

    return await run_test()


def main(args: Optional[list[str]] = None) -> int:
    """
    Main entry point.

    Args:
        args: Command line arguments

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    try:
        return asyncio.run(async_main(args))
    except KeyboardInterrupt:
        console.print("\n[yellow]Test execution interrupted by user[/yellow]")
        return 130
    except Exception as e:
        console.print(f"[red]Fatal error: {e}[/red]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
