"""Occurrence calculator: first concrete service date for an enrollment."""

import logging
from datetime import date, timedelta
from typing import Optional

from dateutil.relativedelta import relativedelta

from . import constants
from .errors import ComputationExhausted, InvalidDayOfMonth, InvalidDaySelection, Unsupported
from .schema import EngineConfig, OccurrenceResult, StoredServiceSchedule
from .types import DayOfWeek, MonthOverflowPolicy, OccurrenceKind, ServiceFrequency
from .utils import to_date

logger = logging.getLogger(__name__)


class OccurrenceCalculator:
    """Computes the first occurrence of a service schedule relative to an anchor date."""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()

    def first(self, anchor: date, schedule: Optional[StoredServiceSchedule]) -> OccurrenceResult:
        """
        Compute the first occurrence on or after the enrollment start date.

        Args:
            anchor: Enrollment start date (a datetime is truncated to its date)
            schedule: Service schedule, or None for a single-occurrence service

        Returns:
            The first occurrence and how it was derived

        Raises:
            InvalidDaySelection: Weekly schedule with no valid weekday selected
            InvalidDayOfMonth: Monthly schedule without a day in 1-31
            ComputationExhausted: Weekly scan ran past its iteration bound
            Unsupported: Frequency has no construction rule (CUSTOM_DAYS or unknown)
        """
        anchor = to_date(anchor)

        if schedule is None or schedule.frequency is None:
            return OccurrenceResult(occurs_on=anchor, kind=OccurrenceKind.ONE_TIME)
        if schedule.frequency == ServiceFrequency.DAILY:
            return OccurrenceResult(occurs_on=anchor, kind=OccurrenceKind.DAILY)
        if schedule.frequency == ServiceFrequency.WEEKLY:
            return self._first_weekly(anchor, schedule)
        if schedule.frequency == ServiceFrequency.MONTHLY:
            return self._first_monthly(anchor, schedule)

        logger.debug("No occurrence rule for frequency %r", schedule.frequency)
        raise Unsupported()

    def _first_weekly(self, anchor: date, schedule: StoredServiceSchedule) -> OccurrenceResult:
        """Scan forward day by day until a selected weekday is hit."""
        if not schedule.days_of_week:
            if schedule.ignored_days_of_week:
                raise InvalidDaySelection(InvalidDaySelection.unreadable_message)
            raise InvalidDaySelection()

        current = anchor
        for _ in range(self.config.max_scan_days):
            if DayOfWeek.from_date(current) in schedule.days_of_week:
                return OccurrenceResult(occurs_on=current, kind=OccurrenceKind.WEEKLY)
            current += timedelta(days=1)

        logger.error(
            "Weekly scan found no selected weekday within %d days of %s (days=%s)",
            self.config.max_scan_days,
            anchor,
            sorted(int(d) for d in schedule.days_of_week),
        )
        raise ComputationExhausted()

    def _first_monthly(self, anchor: date, schedule: StoredServiceSchedule) -> OccurrenceResult:
        """Same day in the anchor's month, or the next month if that day already passed."""
        day = schedule.day_of_month
        if day is None or not constants.MIN_DAY_OF_MONTH <= day <= constants.MAX_DAY_OF_MONTH:
            raise InvalidDayOfMonth()

        month_start = anchor.replace(day=1)
        occurrence = self._day_in_month(month_start, day)
        if occurrence < anchor:
            # One calendar month later, clamped at month end
            occurrence += relativedelta(months=1)
            logger.debug("Day %d already passed in %s, rolled forward to %s", day, anchor, occurrence)

        return OccurrenceResult(occurs_on=occurrence, kind=OccurrenceKind.MONTHLY)

    def _day_in_month(self, month_start: date, day: int) -> date:
        """Build ``day`` within the month starting at ``month_start``."""
        if self.config.month_overflow == MonthOverflowPolicy.ROLLOVER:
            # Feb 31 -> Mar 2/3
            return month_start + timedelta(days=day - 1)
        # relativedelta(day=N) stops at the last day of the month
        return month_start + relativedelta(day=day)


def first_occurrence(
    anchor: date,
    schedule: Optional[StoredServiceSchedule],
    config: Optional[EngineConfig] = None,
) -> OccurrenceResult:
    """Shortcut for ``OccurrenceCalculator(config).first(anchor, schedule)``."""
    return OccurrenceCalculator(config).first(anchor, schedule)
