"""Output formatting functions for CLI commands."""

import json

import click

from enrollsched import constants

SUMMARY_COLUMNS = [
    ("id", "ID"),
    ("client", "Client"),
    ("charge", "Charge"),
    ("service", "Service"),
    ("first_occurrence", "First occurrence"),
]


def print_summary_table(rows: list[dict[str, str]]) -> None:
    """
    Print enrollment summaries as a formatted ASCII table.

    Column widths are auto-calculated from the content and capped at
    MAX_TABLE_COLUMN_WIDTH, except for the last column.

    Args:
        rows: Summary rows as built by build_summary_row().
    """
    widths = {}
    for key, title in SUMMARY_COLUMNS:
        width = max([len(title)] + [len(row[key]) for row in rows])
        widths[key] = min(width, constants.MAX_TABLE_COLUMN_WIDTH)

    header = "  ".join(f"{title:<{widths[key]}}" for key, title in SUMMARY_COLUMNS)
    click.echo(header.rstrip())
    click.echo("-" * len(header.rstrip()))

    last_key = SUMMARY_COLUMNS[-1][0]
    for row in rows:
        cells = []
        for key, _ in SUMMARY_COLUMNS:
            value = row[key] if key == last_key else row[key][: widths[key]]
            cells.append(f"{value:<{widths[key]}}")
        click.echo("  ".join(cells).rstrip())

    click.echo(f"\nTotal: {len(rows)} enrollments")


def print_summary_json(rows: list[dict[str, str]]) -> None:
    """Print enrollment summaries as JSON."""
    click.echo(json.dumps(rows, indent=2, ensure_ascii=False))
