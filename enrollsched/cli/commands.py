"""Click CLI commands for enrollsched."""

import json
import logging
import sys
import traceback
from pathlib import Path
from typing import NoReturn, Optional

import click
import pydantic
import yaml

from enrollsched import __version__, constants
from enrollsched.errors import EnrollSchedError, ValidationError
from enrollsched.loader import load_config, load_enrollments, load_form
from enrollsched.normalizer import normalize, validate_for_submission
from enrollsched.recurrence import OccurrenceCalculator
from enrollsched.summary import summarize_charge, summarize_service
from enrollsched.types import ServiceFrequency

from .builders import build_service_schedule, build_summary_row, parse_date_argument, preview_text
from .formatters import print_summary_json, print_summary_table

logger = logging.getLogger(__name__)

LOAD_ERRORS = (EnrollSchedError, pydantic.ValidationError, OSError, ValueError, yaml.YAMLError)


def _fail(message: str) -> NoReturn:
    click.echo(message, err=True)
    if logger.isEnabledFor(logging.DEBUG) and sys.exc_info()[0] is not None:
        traceback.print_exc()
    sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to engine config YAML (default: $ENROLLSCHED_CONFIG or ./enrollsched.yaml)",
)
@click.version_option(version=__version__)
@click.pass_context
def main(ctx: click.Context, verbose: bool, config_path: Optional[str]):
    """Enrollsched - Enrollment schedule calculator and payload normalizer."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")
    ctx.obj = load_config(Path(config_path) if config_path else None)


@main.command()
@click.argument("start_date")
@click.option(
    "--frequency",
    type=click.Choice([f.value for f in ServiceFrequency], case_sensitive=False),
    default=None,
    help="Service frequency (omit for a one-time service)",
)
@click.option("--day", "days", type=int, multiple=True, help="Weekday for WEEKLY (0=Sunday)")
@click.option("--day-of-month", type=int, default=None, help="Day of month for MONTHLY")
@click.pass_obj
def preview(config, start_date: str, frequency: Optional[str], days, day_of_month: Optional[int]):
    """Show the first service occurrence for an enrollment.

    START_DATE: Enrollment start date (DD/MM/YYYY or YYYY-MM-DD)

    Examples:
        enrollsched preview 04/03/2024 --frequency WEEKLY --day 1 --day 3
        enrollsched preview 20/03/2024 --frequency MONTHLY --day-of-month 5
    """
    anchor = parse_date_argument(start_date)
    if anchor is None:
        _fail(f"Error: {constants.PREVIEW_MISSING_START_DATE}: {start_date}")

    schedule = build_service_schedule(frequency, days, day_of_month)
    click.echo(preview_text(OccurrenceCalculator(config), anchor, schedule))


@main.command(name="normalize")
@click.argument("form_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "yaml"]),
    default="json",
    help="Output format (default: json)",
)
def normalize_form(form_path: str, output_format: str):
    """Normalize a form snapshot into the enrollment request body.

    FORM_PATH: YAML or JSON file with the raw form values

    Examples:
        enrollsched normalize form.yaml
        enrollsched normalize form.json --format yaml
    """
    try:
        form = load_form(Path(form_path))
        request = validate_for_submission(normalize(form))
    except LOAD_ERRORS as e:
        _fail(f"Error: {e}")

    payload = request.to_payload()
    if output_format == "json":
        click.echo(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        click.echo(yaml.safe_dump(payload, sort_keys=False, allow_unicode=True), nl=False)


@main.command()
@click.argument("form_path", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def validate(config, form_path: str):
    """Validate a form snapshot and preview its schedules.

    FORM_PATH: YAML or JSON file with the raw form values

    Examples:
        enrollsched validate form.yaml
    """
    click.echo(f"Validating form: {form_path}")

    try:
        form = load_form(Path(form_path))
        request = validate_for_submission(normalize(form))
    except ValidationError as e:
        _fail(f"✗ Validation failed: {e}")
    except LOAD_ERRORS as e:
        _fail(f"✗ Could not read form: {e}")

    calculator = OccurrenceCalculator(config)
    click.echo("✓ Validation successful!")
    click.echo(f"  Charge: {summarize_charge(request.charge_schedule, config)}")
    click.echo(f"  Service: {summarize_service(request.service_schedule, config)}")
    click.echo(
        "  First occurrence: "
        f"{preview_text(calculator, request.start_date, request.service_schedule)}"
    )


@main.command()
@click.argument("records_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format (default: table)",
)
@click.pass_obj
def summarize(config, records_path: str, output_format: str):
    """Summarize enrollments returned by the backend.

    RECORDS_PATH: YAML or JSON file with one or more enrollment records

    Examples:
        enrollsched summarize enrollments.json
        enrollsched summarize enrollments.json --format json
    """
    try:
        records = load_enrollments(Path(records_path))
    except LOAD_ERRORS as e:
        _fail(f"Error: {e}")

    if not records:
        click.echo("No enrollments found")
        return

    rows = [build_summary_row(record, config) for record in records]
    if output_format == "table":
        print_summary_table(rows)
    else:
        print_summary_json(rows)
