"""Human-readable (pt-BR) labels for charge and service schedules.

Everything here feeds display only, so nothing raises: missing or
unrecognized input degrades to a fallback label.
"""

import logging
from collections.abc import Iterable
from typing import Any, Optional

from . import constants
from .errors import ScheduleError
from .schema import EngineConfig, OccurrenceResult, StoredChargeSchedule, StoredServiceSchedule
from .types import BillingModel, DayOfWeek, OccurrenceKind, RecurrenceInterval, ServiceFrequency
from .utils import format_date, format_time

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = EngineConfig()


def _coerce_day(value: Any) -> Optional[DayOfWeek]:
    try:
        return DayOfWeek(int(value))
    except (TypeError, ValueError):
        return None


def billing_model_label(value: Any) -> str:
    try:
        return constants.BILLING_MODEL_LABELS[BillingModel(value)]
    except ValueError:
        return constants.NOT_AVAILABLE


def recurrence_interval_label(value: Any) -> str:
    try:
        return constants.RECURRENCE_INTERVAL_LABELS[RecurrenceInterval(value)]
    except ValueError:
        return constants.NOT_AVAILABLE


def service_frequency_label(value: Any) -> str:
    try:
        return constants.SERVICE_FREQUENCY_LABELS[ServiceFrequency(value)]
    except ValueError:
        return constants.NOT_AVAILABLE


def day_of_week_label(value: Any, abbreviated: bool = False) -> str:
    """Weekday name for a 0-6 number (0 = Sunday); unknown values echo back."""
    day = _coerce_day(value)
    if day is None:
        return str(value)
    labels = constants.DAY_OF_WEEK_ABBREVIATIONS if abbreviated else constants.DAY_OF_WEEK_LABELS
    return labels[day]


def days_of_week_labels(values: Optional[Iterable[Any]], abbreviated: bool = False) -> str:
    """Comma-separated weekday names in Sunday-first order; unknown values are skipped."""
    days = sorted({d for d in (_coerce_day(v) for v in values or ()) if d is not None})
    if not days:
        return constants.NOT_AVAILABLE
    return ", ".join(day_of_week_label(d, abbreviated) for d in days)


def aggregate_days_of_week(schedules: Iterable[StoredServiceSchedule]) -> list[DayOfWeek]:
    """Union of the weekdays selected across all weekly schedules, sorted."""
    days: set[DayOfWeek] = set()
    for schedule in schedules:
        if schedule.frequency == ServiceFrequency.WEEKLY:
            days.update(schedule.days_of_week)
    return sorted(days)


def charge_day_field_label(
    billing_model: Optional[BillingModel],
    recurrence_interval: Optional[RecurrenceInterval],
) -> str:
    """Caption for the charge day input, which changes meaning with the schedule."""
    if billing_model == BillingModel.ONE_TIME:
        return constants.CHARGE_DAY_LABEL_ONE_TIME
    if recurrence_interval == RecurrenceInterval.MONTHLY:
        return constants.CHARGE_DAY_LABEL_MONTHLY
    if recurrence_interval == RecurrenceInterval.WEEKLY:
        return constants.CHARGE_DAY_LABEL_WEEKLY
    return constants.CHARGE_DAY_LABEL_GENERIC


def charge_day_display(schedule: Optional[StoredChargeSchedule]) -> str:
    """Charge day for read-only display: weekday name for weekly charges, number otherwise."""
    if schedule is None or schedule.charge_day is None:
        return constants.NOT_AVAILABLE
    if schedule.recurrence_interval == RecurrenceInterval.WEEKLY:
        return day_of_week_label(schedule.charge_day)
    return str(schedule.charge_day)


def summarize_charge(
    schedule: Optional[StoredChargeSchedule],
    config: Optional[EngineConfig] = None,
) -> str:
    """
    Summarize a charge schedule, e.g. ``Mensal (dia 5)`` or ``Única (10/04/2024)``.

    Weekly charges never show their day: the charge day of a weekly schedule
    is a weekday number and the summary only renders days of month.

    Args:
        schedule: Charge schedule or None
        config: Engine config (fallback label, date format)

    Returns:
        Summary label, or the fallback label when there is no schedule
    """
    config = config or _DEFAULT_CONFIG
    if schedule is None:
        return config.fallback_label

    if schedule.billing_model == BillingModel.ONE_TIME:
        due = (
            format_date(schedule.due_date, config.date_format)
            if schedule.due_date
            else constants.UNKNOWN_VALUE
        )
        return constants.CHARGE_ONE_TIME_SUMMARY.format(due_date=due)

    interval = schedule.recurrence_interval
    if not interval:
        return constants.CHARGE_RECURRING_FALLBACK

    # Intervals the labels do not know are shown as stored
    text = constants.RECURRENCE_INTERVAL_LABELS.get(interval, str(interval))
    if interval != RecurrenceInterval.WEEKLY and schedule.charge_day:
        text += constants.CHARGE_DAY_SUFFIX.format(day=schedule.charge_day)
    return text


def summarize_service(
    schedule: Optional[StoredServiceSchedule],
    config: Optional[EngineConfig] = None,
) -> str:
    """
    Summarize a service schedule, e.g. ``Semanal (Seg, Qua) 09:00 - 10:00``.

    Args:
        schedule: Service schedule or None
        config: Engine config (fallback label)

    Returns:
        Summary label, or the fallback label when there is no schedule or frequency
    """
    config = config or _DEFAULT_CONFIG
    if schedule is None or schedule.frequency is None:
        return config.fallback_label

    frequency = schedule.frequency
    if frequency == ServiceFrequency.DAILY:
        summary = constants.SERVICE_DAILY_SUMMARY
    elif frequency == ServiceFrequency.WEEKLY:
        days = (
            days_of_week_labels(schedule.days_of_week, abbreviated=True)
            if schedule.days_of_week
            else constants.SERVICE_WEEKLY_NO_DAYS
        )
        summary = constants.SERVICE_WEEKLY_SUMMARY.format(days=days)
    elif frequency == ServiceFrequency.MONTHLY:
        summary = constants.SERVICE_MONTHLY_SUMMARY.format(
            day=schedule.day_of_month or constants.UNKNOWN_VALUE
        )
    elif frequency == ServiceFrequency.CUSTOM_DAYS:
        summary = constants.SERVICE_CUSTOM_DAYS_SUMMARY
    else:
        summary = str(frequency)

    if schedule.start_time:
        summary += f" {format_time(schedule.start_time)}"
        if schedule.end_time:
            summary += f" - {format_time(schedule.end_time)}"

    return summary


def format_occurrence_preview(
    result: OccurrenceResult,
    config: Optional[EngineConfig] = None,
) -> str:
    """Render a first occurrence the way the enrollment form previews it."""
    config = config or _DEFAULT_CONFIG
    formatted = format_date(result.occurs_on, config.date_format)
    if result.kind == OccurrenceKind.WEEKLY:
        suffix = day_of_week_label(DayOfWeek.from_date(result.occurs_on))
    elif result.kind == OccurrenceKind.MONTHLY:
        suffix = constants.PREVIEW_MONTHLY
    elif result.kind == OccurrenceKind.DAILY:
        suffix = constants.PREVIEW_DAILY
    else:
        suffix = constants.PREVIEW_ONE_TIME
    return f"{formatted} ({suffix})"


def describe_schedule_error(error: ScheduleError) -> str:
    """User-facing hint for a calculation failure."""
    logger.debug("Describing schedule error %s", error.code)
    return error.message
