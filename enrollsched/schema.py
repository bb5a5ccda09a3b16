"""Pydantic schema models for schedules, forms and enrollment requests."""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from . import constants
from .types import (
    BillingModel,
    DayOfWeek,
    MonthOverflowPolicy,
    OccurrenceKind,
    RecurrenceInterval,
    ServiceFrequency,
)
from .utils import format_iso_date, is_valid_time, parse_int, parse_iso_date

logger = logging.getLogger(__name__)


def charge_day_bounds(interval: Optional[RecurrenceInterval]) -> tuple[int, int]:
    """Allowed charge day range: day of week for weekly charges, day of month otherwise."""
    if interval == RecurrenceInterval.WEEKLY:
        return constants.MIN_DAY_OF_WEEK, constants.MAX_DAY_OF_WEEK
    return constants.MIN_DAY_OF_MONTH, constants.MAX_DAY_OF_MONTH


def _coerce_iso_date(v: Any) -> Any:
    if isinstance(v, str):
        return parse_iso_date(v)
    return v


class WireModel(BaseModel):
    """Base for models exchanged with the backend (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


# ============================================================================
# Schedule value types
# ============================================================================


def _split_days_of_week(value: Any) -> tuple[frozenset[DayOfWeek], tuple[str, ...]]:
    """Weekday numbers (ints or numeric strings) in 0-6, and the raw values that are not."""
    if value is None:
        return frozenset(), ()
    if isinstance(value, (str, int)):
        value = [value]
    days = set()
    ignored = []
    for raw in value:
        try:
            day = parse_int(raw)
        except ValueError:
            day = None
        if day is None or not constants.MIN_DAY_OF_WEEK <= day <= constants.MAX_DAY_OF_WEEK:
            logger.warning("Ignoring invalid day of week: %r", raw)
            ignored.append(str(raw))
            continue
        days.add(DayOfWeek(day))
    return frozenset(days), tuple(ignored)


class StoredChargeSchedule(WireModel):
    """Charge schedule as the backend stores it.

    Read-only shape used for summaries and for repopulating the form. Values
    the enums do not know are kept as raw strings and nothing is range-checked,
    so one odd record never stops the others from being displayed.
    """

    billing_model: Union[BillingModel, str, None] = Field(
        None, union_mode="left_to_right", description="One-time or recurring"
    )
    recurrence_interval: Union[RecurrenceInterval, str, None] = Field(
        None, union_mode="left_to_right", description="Charge cadence (recurring only)"
    )
    charge_day: Optional[int] = Field(
        None, description="Day of week (0-6) for weekly charges, day of month (1-31) otherwise"
    )
    due_date: Optional[date] = Field(None, description="Due date (one-time only)")

    @field_validator("due_date", mode="before")
    @classmethod
    def parse_due_date(cls, v: Any) -> Any:
        """Accept backend timestamps as well as plain ISO dates."""
        return _coerce_iso_date(v)


class ChargeSchedule(StoredChargeSchedule):
    """Rule set governing when an enrollment is billed.

    Exactly one of ``due_date`` (one-time) or ``recurrence_interval`` +
    ``charge_day`` (recurring) is meaningful. A one-time schedule whose due
    date could not be read is still accepted and renders as ``Única (?)``.
    """

    billing_model: BillingModel = Field(..., description="One-time or recurring")
    recurrence_interval: Optional[RecurrenceInterval] = Field(
        None, description="Charge cadence (recurring only)"
    )

    @model_validator(mode="after")
    def validate_billing_fields(self) -> "ChargeSchedule":
        """Enforce the one-time/recurring field exclusivity and charge day range."""
        if self.billing_model == BillingModel.RECURRING:
            if self.recurrence_interval is None:
                raise ValueError("recurring charge schedule requires recurrence_interval")
            if self.charge_day is None:
                raise ValueError("recurring charge schedule requires charge_day")
            if self.due_date is not None:
                raise ValueError("recurring charge schedule cannot carry due_date")
            low, high = charge_day_bounds(self.recurrence_interval)
            if not low <= self.charge_day <= high:
                msg = (
                    f"charge_day must be between {low} and {high} "
                    f"for {self.recurrence_interval.value} charges"
                )
                raise ValueError(msg)
        elif self.recurrence_interval is not None:
            raise ValueError("one-time charge schedule cannot carry recurrence_interval")
        return self


class StoredServiceSchedule(WireModel):
    """Service schedule as the backend stores it.

    An unknown frequency is kept as its raw string and an unreadable day of
    month is dropped. Weekday values that are not 0-6 are left out of
    ``days_of_week`` and remembered in ``ignored_days_of_week``.
    """

    frequency: Union[ServiceFrequency, str, None] = Field(
        None, union_mode="left_to_right", description="Service frequency"
    )
    days_of_week: frozenset[DayOfWeek] = Field(
        default_factory=frozenset, description="Selected weekdays (0 = Sunday)"
    )
    ignored_days_of_week: tuple[str, ...] = Field(
        (), description="Selected values that are not a weekday"
    )
    day_of_month: Optional[int] = Field(None, description="Day of month for monthly service")
    start_time: Optional[str] = Field(None, description="Start time (HH:MM)")
    end_time: Optional[str] = Field(None, description="End time (HH:MM)")

    @model_validator(mode="before")
    @classmethod
    def split_days_of_week(cls, data: Any) -> Any:
        """Separate readable weekdays from selected values that cannot be one."""
        if not isinstance(data, dict):
            return data
        key = "daysOfWeek" if "daysOfWeek" in data else "days_of_week"
        if key not in data:
            return data
        days, ignored = _split_days_of_week(data[key])
        return {**data, key: days, "ignored_days_of_week": ignored}

    @field_validator("frequency", mode="before")
    @classmethod
    def blank_frequency_is_none(cls, v: Any) -> Any:
        """Treat an empty frequency as no frequency."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("day_of_month", mode="before")
    @classmethod
    def parse_day_of_month(cls, v: Any) -> Any:
        """Accept the numeric strings the backend sends back; drop anything else."""
        try:
            return parse_int(v)
        except ValueError:
            logger.warning("Ignoring invalid day of month: %r", v)
            return None


class ServiceSchedule(StoredServiceSchedule):
    """How the contracted service recurs.

    ``days_of_week`` only matters for weekly schedules and ``day_of_month``
    only for monthly ones. Day of month is kept raw here; the occurrence
    calculator rejects values outside 1-31.
    """

    frequency: Optional[ServiceFrequency] = Field(None, description="Service frequency")

    @field_validator("day_of_month", mode="before")
    @classmethod
    def parse_day_of_month(cls, v: Any) -> Any:
        """Accept numeric strings; anything else is an error."""
        return parse_int(v)


class OccurrenceResult(BaseModel):
    """First concrete calendar occurrence of a service."""

    model_config = ConfigDict(frozen=True)

    occurs_on: date = Field(..., description="Occurrence date")
    kind: OccurrenceKind = Field(..., description="How the date was derived")


# ============================================================================
# Raw form snapshots
# ============================================================================


class RawChargeScheduleForm(WireModel):
    """Charge fields exactly as the form holds them."""

    billing_model: Optional[str] = None
    recurrence_interval: Optional[str] = None
    charge_day: Optional[Union[str, int]] = None
    due_date: Optional[Union[str, date]] = None


class RawServiceScheduleForm(WireModel):
    """Service schedule fields exactly as the form holds them."""

    frequency: Optional[str] = None
    days_of_week: list[Union[str, int]] = Field(default_factory=list)
    day_of_month: Optional[Union[str, int]] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None

    @field_validator("days_of_week", mode="before")
    @classmethod
    def none_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class RawEnrollmentForm(WireModel):
    """Snapshot of the enrollment form: localized strings, nothing validated yet."""

    service_id: Optional[str] = ""
    client_id: Optional[str] = ""
    price: Optional[Union[str, Decimal]] = None
    start_date: Optional[Union[str, date]] = None
    end_date: Optional[Union[str, date]] = None
    status: Optional[str] = None
    charge_schedule: Optional[RawChargeScheduleForm] = None
    service_schedule: Optional[RawServiceScheduleForm] = None


# ============================================================================
# Backend request and record shapes
# ============================================================================


class EnrollmentRequest(WireModel):
    """Normalized, backend-ready enrollment request."""

    service_id: Optional[str] = None
    client_id: Optional[str] = None
    price: Optional[Decimal] = Field(None, description="Parsed price; checked before submission")
    start_date: date
    end_date: Optional[date] = None
    charge_schedule: Optional[ChargeSchedule] = None
    service_schedule: Optional[ServiceSchedule] = Field(None, alias="serviceSchedules")

    def to_payload(self) -> dict[str, Any]:
        """Render the request body the enrollments endpoint expects."""
        payload: dict[str, Any] = {
            "serviceId": self.service_id,
            "clientId": self.client_id,
            "price": float(self.price) if self.price is not None else None,
            "startDate": format_iso_date(self.start_date),
            "endDate": format_iso_date(self.end_date),
        }

        if self.charge_schedule is not None:
            charge = self.charge_schedule
            charge_payload: dict[str, Any] = {
                "billingModel": charge.billing_model.value,
                "chargeDay": charge.charge_day,
            }
            if charge.recurrence_interval is not None:
                charge_payload["recurrenceInterval"] = charge.recurrence_interval.value
            if charge.due_date is not None:
                charge_payload["dueDate"] = format_iso_date(charge.due_date)
            payload["chargeSchedule"] = charge_payload

        service = self.service_schedule
        if service is not None and service.frequency is not None:
            service_payload: dict[str, Any] = {"frequency": service.frequency.value}
            if service.start_time:
                service_payload["startTime"] = service.start_time
            if service.end_time:
                service_payload["endTime"] = service.end_time
            if service.frequency == ServiceFrequency.WEEKLY and service.days_of_week:
                service_payload["daysOfWeek"] = [str(int(d)) for d in sorted(service.days_of_week)]
            if service.frequency == ServiceFrequency.MONTHLY and service.day_of_month is not None:
                service_payload["dayOfMonth"] = str(service.day_of_month)
            payload["serviceSchedules"] = service_payload

        return {key: value for key, value in payload.items() if value is not None}


class PartyRef(WireModel):
    """Embedded client or service reference."""

    id: str
    name: Optional[str] = None


class EnrollmentRecord(WireModel):
    """Enrollment as returned by the backend.

    Reading is lenient: schedules use the stored shapes and an unreadable
    price or date becomes None.
    """

    id: Optional[str] = None
    price: Optional[Decimal] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[str] = None
    charge_schedule: Optional[StoredChargeSchedule] = None
    service_schedules: list[StoredServiceSchedule] = Field(default_factory=list)
    client: Optional[PartyRef] = None
    service: Optional[PartyRef] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_dates(cls, v: Any) -> Any:
        return _coerce_iso_date(v)

    @field_validator("price", mode="wrap")
    @classmethod
    def unreadable_price_is_none(cls, v: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        try:
            return handler(v)
        except ValidationError:
            logger.warning("Ignoring unreadable enrollment price: %r", v)
            return None

    @field_validator("service_schedules", mode="before")
    @classmethod
    def none_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v


# ============================================================================
# Configuration
# ============================================================================


class EngineConfig(BaseModel):
    """Tunables for the calculator, summarizer and normalizer."""

    model_config = ConfigDict(frozen=True)

    max_scan_days: int = Field(
        constants.DEFAULT_MAX_SCAN_DAYS, description="Bound for the weekly forward scan"
    )
    month_overflow: MonthOverflowPolicy = Field(
        MonthOverflowPolicy.CLAMP, description="Handling of days past the end of a month"
    )
    fallback_label: str = Field(
        constants.DEFAULT_FALLBACK_LABEL, description="Summary shown for missing schedules"
    )
    date_format: str = Field(constants.INPUT_DATE_FORMAT, description="Display date format")
    default_start_time: str = Field(
        constants.DEFAULT_START_TIME, description="Service start time on a blank form"
    )

    @field_validator("max_scan_days")
    @classmethod
    def validate_max_scan_days(cls, v: int) -> int:
        """Ensure a full week can always be scanned."""
        if v < constants.MIN_SCAN_DAYS:
            raise ValueError(f"max_scan_days must be at least {constants.MIN_SCAN_DAYS}")
        return v

    @field_validator("default_start_time")
    @classmethod
    def validate_default_start_time(cls, v: str) -> str:
        """Ensure default_start_time is a 24-hour HH:MM value."""
        if not is_valid_time(v):
            raise ValueError("default_start_time must be HH:MM (24-hour)")
        return v
