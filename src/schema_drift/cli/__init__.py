"""CLI module for schema drift checks.

Usage:
    DB_PROFILE=dev schema-drift check
    schema-drift check --profile staging --json
    schema-drift --config ci/schema-drift.toml profiles

Commands:
    profiles  - List available profiles
    check     - Audit configured models against a profile's database
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from schema_drift.config.loader import load_config
from schema_drift.factory import check_profile
from schema_drift.schema.models import DriftReport, qualified_name

console = Console()

_KIND_LABELS = {
    "missing_table": "[bold red]MISSING TABLE[/bold red]",
    "column_added_in_model": "[yellow]NOT IN TABLE[/yellow]",
    "column_missing_in_model": "[cyan]NOT IN MODEL[/cyan]",
    "column_changed": "[magenta]CHANGED[/magenta]",
}


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _issue_row(issue) -> tuple[str, str, str, str, str]:
    """Table, Column, Issue, Database, Model cells for one issue."""
    table = qualified_name(issue.namespace, issue.table)
    label = _KIND_LABELS[issue.kind]

    if issue.kind == "missing_table":
        return table, "", label, "", ""
    if issue.kind == "column_added_in_model":
        col = issue.column
        return table, col.name, label, "", _describe(col.declared_type, col.nullable)
    if issue.kind == "column_missing_in_model":
        col = issue.column
        return table, col.name, label, _describe(col.data_type, col.is_nullable), ""

    diff = issue.diff
    return (
        table,
        diff.column,
        label,
        _describe(diff.db_type, diff.db_nullable),
        _describe(diff.model_type, diff.model_nullable),
    )


def _describe(type_name: str, nullable: bool) -> str:
    return type_name if nullable else f"{type_name} NOT NULL"


def _print_report(report: DriftReport) -> None:
    issue_table = Table(
        title="Schema Drift", show_header=True, header_style="bold"
    )
    issue_table.add_column("Table", style="dim")
    issue_table.add_column("Column")
    issue_table.add_column("Issue")
    issue_table.add_column("Database")
    issue_table.add_column("Model")

    for issue in report.issues:
        issue_table.add_row(*_issue_row(issue))

    console.print(issue_table)


# ============================================================================
# Async command implementations
# ============================================================================


async def _async_check(args: argparse.Namespace) -> int:
    """Async implementation for check command.

    Returns:
        0 when no drift is found, 1 on drift or failure.
    """
    result = await check_profile(
        profile_name=args.profile,
        config_path=args.config,
        env_prefix=args.env_prefix,
    )

    if args.json:
        if result.report is not None:
            print(result.report.model_dump_json(indent=2))
        else:
            print(result.model_dump_json(indent=2))
        return 0 if result.success else 1

    if result.report is None:
        console.print(f"[bold red]x[/bold red] {result.error}")
        return 1

    checked = len(result.report.audits)
    console.print(
        f"Checked {checked} tables on profile: "
        f"[bold cyan]{result.profile_name}[/bold cyan]"
    )

    if result.success:
        console.print("[bold green]v[/bold green] No schema drift detected")
        return 0

    console.print()
    _print_report(result.report)
    console.print()
    console.print(f"[bold red]x[/bold red] {result.error}")
    return 1


# ============================================================================
# Command wrappers
# ============================================================================


def cmd_check(args: argparse.Namespace) -> int:
    """Audit configured models against a profile's database.

    Wraps the async implementation with ``asyncio.run()``.
    """
    return asyncio.run(_async_check(args))


def cmd_profiles(args: argparse.Namespace) -> int:
    """List available profiles from the config file.

    Reads only the local TOML config -- no database calls.

    Returns:
        0 on success, 1 if the config file is missing or invalid.
    """
    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    table = Table(
        title="Database Profiles", show_header=True, header_style="bold"
    )
    table.add_column("Profile")
    table.add_column("Dialect")
    table.add_column("Description")

    for name, profile in config.profiles.items():
        try:
            dialect = profile.syntax.value
        except ValueError:
            dialect = "[red]unsupported[/red]"
        table.add_row(name, dialect, profile.description or "")

    console.print(table)
    return 0


# ============================================================================
# Main entry point
# ============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schema-drift",
        description="Detect drift between model definitions and live database tables",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: ./schema-drift.toml)",
    )
    parser.add_argument(
        "--env-prefix",
        default="",
        help=(
            "Prefix for environment variable lookup "
            "(e.g., --env-prefix APP_ reads APP_DB_PROFILE)"
        ),
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # profiles command
    p_profiles = subparsers.add_parser(
        "profiles",
        help="List available profiles",
    )
    p_profiles.set_defaults(func=cmd_profiles)

    # check command
    p_check = subparsers.add_parser(
        "check",
        help="Audit configured models against a profile's database",
    )
    p_check.add_argument(
        "--profile",
        "-p",
        default=None,
        help="Profile to check (default: DB_PROFILE environment variable)",
    )
    p_check.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON",
    )
    p_check.set_defaults(func=cmd_check)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Returns:
        Exit code (0 for success, non-zero for errors or drift).
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
