"""Helper functions for building CLI data."""

import logging
from datetime import date
from typing import Optional

from enrollsched import constants
from enrollsched.errors import ScheduleError
from enrollsched.recurrence import OccurrenceCalculator
from enrollsched.schema import EngineConfig, EnrollmentRecord, ServiceSchedule, StoredServiceSchedule
from enrollsched.summary import (
    describe_schedule_error,
    format_occurrence_preview,
    summarize_charge,
    summarize_service,
)
from enrollsched.utils import parse_input_date, parse_iso_date

logger = logging.getLogger(__name__)


def parse_date_argument(text: str) -> Optional[date]:
    """Read a command-line date as DD/MM/YYYY, falling back to YYYY-MM-DD."""
    return parse_input_date(text) or parse_iso_date(text)


def build_service_schedule(
    frequency: Optional[str],
    days: tuple[int, ...],
    day_of_month: Optional[int],
) -> Optional[ServiceSchedule]:
    """Build a service schedule from preview options; no frequency means one-time."""
    if not frequency:
        return None
    return ServiceSchedule(
        frequency=frequency.upper(),
        days_of_week=list(days),
        day_of_month=day_of_month,
    )


def preview_text(
    calculator: OccurrenceCalculator,
    anchor: date,
    schedule: Optional[StoredServiceSchedule],
) -> str:
    """First occurrence label, or the hint explaining why there is none."""
    try:
        result = calculator.first(anchor, schedule)
    except ScheduleError as e:
        logger.debug("No occurrence for %s: %s", anchor, e.code)
        return describe_schedule_error(e)
    return format_occurrence_preview(result, calculator.config)


def build_summary_row(record: EnrollmentRecord, config: EngineConfig) -> dict[str, str]:
    """Display fields for one enrollment record."""
    service = record.service_schedules[0] if record.service_schedules else None

    if record.start_date is None:
        first = constants.PREVIEW_MISSING_START_DATE
    else:
        first = preview_text(OccurrenceCalculator(config), record.start_date, service)

    client = ""
    if record.client is not None:
        client = record.client.name or record.client.id

    return {
        "id": record.id or "",
        "client": client,
        "charge": summarize_charge(record.charge_schedule, config),
        "service": summarize_service(service, config),
        "first_occurrence": first,
    }
