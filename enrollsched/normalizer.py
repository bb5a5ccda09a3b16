"""Payload normalizer: raw enrollment form <-> backend request.

Normalization runs a fixed sequence of gates over a form snapshot. Only the
facts an enrollment cannot exist without are fatal (start date, charge day,
a complete charge schedule). Optional and cosmetic fields that cannot be read
are dropped with a log line instead of failing the whole form.
"""

import logging
from datetime import date
from enum import Enum
from typing import Any, Optional

from . import constants
from .errors import (
    IncompleteChargeSchedule,
    InvalidChargeDay,
    InvalidPrice,
    InvalidStartDate,
    MissingClientReference,
)
from .schema import (
    ChargeSchedule,
    EngineConfig,
    EnrollmentRecord,
    EnrollmentRequest,
    RawChargeScheduleForm,
    RawEnrollmentForm,
    RawServiceScheduleForm,
    ServiceSchedule,
    charge_day_bounds,
)
from .types import BillingModel, RecurrenceInterval, ServiceFrequency
from .utils import (
    format_currency,
    is_valid_time,
    parse_currency,
    parse_input_date,
    parse_int,
)

logger = logging.getLogger(__name__)


def normalize(form: RawEnrollmentForm) -> EnrollmentRequest:
    """
    Validate a form snapshot and map it to a backend-ready request.

    Args:
        form: Raw form values (localized strings)

    Returns:
        Normalized request; ``price`` is None when it could not be parsed and
        must be checked with :func:`validate_for_submission`

    Raises:
        InvalidStartDate: Start date missing or not a DD/MM/YYYY calendar date
        InvalidChargeDay: Charge day not a whole number or out of range
        IncompleteChargeSchedule: Charge schedule missing a required fact
    """
    start_date = parse_input_date(form.start_date)
    if start_date is None:
        logger.error("Invalid or missing start date: %r", form.start_date)
        raise InvalidStartDate()

    end_date = parse_input_date(form.end_date)
    if end_date is None and form.end_date:
        logger.warning("Dropping unparsable end date: %r", form.end_date)

    charge_schedule = build_charge_schedule(form.charge_schedule)
    service_schedule = build_service_schedule(form.service_schedule)

    price = parse_currency(form.price)
    if price is None:
        logger.debug("Price could not be parsed: %r", form.price)

    request = EnrollmentRequest(
        service_id=form.service_id,
        client_id=form.client_id,
        price=price,
        start_date=start_date,
        end_date=end_date,
        charge_schedule=charge_schedule,
        service_schedule=service_schedule,
    )
    logger.debug("Normalized enrollment request: %s", request.to_payload())
    return request


def build_charge_schedule(raw: Optional[RawChargeScheduleForm]) -> ChargeSchedule:
    """Build the mandatory charge schedule, dropping fields the billing model excludes."""
    if raw is None:
        logger.error("Charge schedule is missing from the form")
        raise IncompleteChargeSchedule()

    try:
        billing_model = BillingModel(raw.billing_model)
    except ValueError:
        logger.error("Unknown or missing billing model: %r", raw.billing_model)
        raise IncompleteChargeSchedule(field="chargeSchedule.billingModel") from None

    try:
        charge_day = parse_int(raw.charge_day)
    except ValueError:
        logger.error("Invalid charge day: %r", raw.charge_day)
        raise InvalidChargeDay() from None

    recurrence_interval = None
    due_date = None
    if billing_model == BillingModel.RECURRING:
        if raw.recurrence_interval:
            try:
                recurrence_interval = RecurrenceInterval(raw.recurrence_interval)
            except ValueError:
                logger.error("Unknown recurrence interval: %r", raw.recurrence_interval)
        if recurrence_interval is None:
            raise IncompleteChargeSchedule(field="chargeSchedule.recurrenceInterval")
    else:
        due_date = parse_input_date(raw.due_date)
        if due_date is None and raw.due_date:
            logger.warning("Dropping unparsable due date: %r", raw.due_date)

    if charge_day is None:
        logger.error("Charge schedule has no charge day")
        raise IncompleteChargeSchedule(field="chargeSchedule.chargeDay")

    if billing_model == BillingModel.RECURRING:
        low, high = charge_day_bounds(recurrence_interval)
        if not low <= charge_day <= high:
            logger.error(
                "Charge day %d outside %d-%d for %s charges",
                charge_day,
                low,
                high,
                recurrence_interval.value,
            )
            raise InvalidChargeDay(f"Dia da cobrança deve estar entre {low} e {high}.")

    return ChargeSchedule(
        billing_model=billing_model,
        recurrence_interval=recurrence_interval,
        charge_day=charge_day,
        due_date=due_date,
    )


def build_service_schedule(raw: Optional[RawServiceScheduleForm]) -> Optional[ServiceSchedule]:
    """Build the optional service schedule, keeping only fields its frequency uses."""
    if raw is None or not raw.frequency or not raw.frequency.strip():
        logger.debug("No service frequency, omitting service schedule")
        return None

    try:
        frequency = ServiceFrequency(raw.frequency.strip())
    except ValueError:
        logger.warning("Unknown service frequency %r, omitting service schedule", raw.frequency)
        return None

    fields: dict[str, Any] = {"frequency": frequency}

    for name in ("start_time", "end_time"):
        value = getattr(raw, name)
        if is_valid_time(value):
            fields[name] = value
        elif value:
            logger.warning("Dropping invalid %s: %r", name, value)

    if frequency == ServiceFrequency.WEEKLY:
        fields["days_of_week"] = raw.days_of_week
    elif frequency == ServiceFrequency.MONTHLY:
        try:
            fields["day_of_month"] = parse_int(raw.day_of_month)
        except ValueError:
            logger.warning("Dropping invalid day of month: %r", raw.day_of_month)

    return ServiceSchedule(**fields)


def validate_for_submission(request: EnrollmentRequest) -> EnrollmentRequest:
    """
    Caller-level checks run after normalization and before sending.

    Raises:
        MissingClientReference: No client selected
        InvalidPrice: Price missing, malformed or negative
        IncompleteChargeSchedule: Request carries no charge schedule
    """
    if not request.client_id:
        raise MissingClientReference()
    if request.price is None or request.price < 0:
        raise InvalidPrice()
    if request.charge_schedule is None:
        raise IncompleteChargeSchedule()
    return request


def prepare_submission(form: RawEnrollmentForm) -> dict[str, Any]:
    """Normalize, validate and render the request body in one step."""
    request = validate_for_submission(normalize(form))
    return request.to_payload()


def default_form(
    today: Optional[date] = None,
    service_id: str = "",
    config: Optional[EngineConfig] = None,
) -> RawEnrollmentForm:
    """Blank form for a new enrollment: monthly charge on day 1, weekly service."""
    config = config or EngineConfig()
    today = today or date.today()
    return RawEnrollmentForm(
        service_id=service_id,
        client_id="",
        price=constants.DEFAULT_PRICE_TEXT,
        start_date=today.strftime(constants.INPUT_DATE_FORMAT),
        charge_schedule=RawChargeScheduleForm(
            billing_model=BillingModel.RECURRING.value,
            recurrence_interval=RecurrenceInterval.MONTHLY.value,
            charge_day=constants.DEFAULT_CHARGE_DAY,
        ),
        service_schedule=RawServiceScheduleForm(
            frequency=ServiceFrequency.WEEKLY.value,
            start_time=config.default_start_time,
            end_time="",
        ),
    )


def _wire_value(value: Any) -> Any:
    """Enum members as their wire value; raw strings from stored records pass through."""
    return value.value if isinstance(value, Enum) else value


def form_from_enrollment(record: EnrollmentRecord, today: Optional[date] = None) -> RawEnrollmentForm:
    """
    Repopulate a form from an enrollment returned by the backend.

    Only the first service schedule is loaded into the form. A record without
    a start date gets ``today`` so the form always has an anchor.
    """
    today = today or date.today()
    start = record.start_date or today

    charge_form = None
    if record.charge_schedule is not None:
        charge = record.charge_schedule
        charge_form = RawChargeScheduleForm(
            billing_model=_wire_value(charge.billing_model),
            recurrence_interval=_wire_value(charge.recurrence_interval),
            charge_day="" if charge.charge_day is None else str(charge.charge_day),
            due_date=(
                charge.due_date.strftime(constants.INPUT_DATE_FORMAT) if charge.due_date else None
            ),
        )

    service_form = None
    if record.service_schedules:
        service = record.service_schedules[0]
        service_form = RawServiceScheduleForm(
            frequency=_wire_value(service.frequency),
            days_of_week=[str(int(d)) for d in sorted(service.days_of_week)],
            day_of_month=service.day_of_month,
            start_time=service.start_time or "",
            end_time=service.end_time or "",
        )

    return RawEnrollmentForm(
        service_id=record.service.id if record.service else "",
        client_id=record.client.id if record.client else "",
        price=format_currency(record.price) if record.price is not None else None,
        start_date=start.strftime(constants.INPUT_DATE_FORMAT),
        end_date=(
            record.end_date.strftime(constants.INPUT_DATE_FORMAT) if record.end_date else None
        ),
        status=record.status,
        charge_schedule=charge_form,
        service_schedule=service_form,
    )
