"""Pytest configuration and shared fixtures for enrollsched tests."""

from datetime import date
from typing import Any, Optional

import pytest
import yaml

from enrollsched.schema import (
    ChargeSchedule,
    EngineConfig,
    RawEnrollmentForm,
    ServiceSchedule,
)
from enrollsched.types import BillingModel, RecurrenceInterval, ServiceFrequency

# ============================================================================
# Schedule Builders
# ============================================================================


def make_service_schedule(
    frequency: Optional[ServiceFrequency] = ServiceFrequency.WEEKLY,
    days_of_week=(),
    day_of_month: Optional[int] = None,
    start_time: Optional[str] = None,
    end_time: Optional[str] = None,
) -> ServiceSchedule:
    """Create a ServiceSchedule with sensible defaults."""
    return ServiceSchedule(
        frequency=frequency,
        days_of_week=list(days_of_week),
        day_of_month=day_of_month,
        start_time=start_time,
        end_time=end_time,
    )


def make_charge_schedule(
    billing_model: BillingModel = BillingModel.RECURRING,
    recurrence_interval: Optional[RecurrenceInterval] = RecurrenceInterval.MONTHLY,
    charge_day: Optional[int] = 5,
    due_date: Optional[date] = None,
) -> ChargeSchedule:
    """Create a ChargeSchedule; one-time schedules drop the interval automatically."""
    if billing_model == BillingModel.ONE_TIME:
        recurrence_interval = None
    return ChargeSchedule(
        billing_model=billing_model,
        recurrence_interval=recurrence_interval,
        charge_day=charge_day,
        due_date=due_date,
    )


def make_form_dict(**overrides: Any) -> dict[str, Any]:
    """Create a valid raw form (camelCase, as the UI holds it) with overrides."""
    form = {
        "serviceId": "svc-1",
        "clientId": "cli-1",
        "price": "R$ 1.234,56",
        "startDate": "04/03/2024",
        "endDate": "04/03/2025",
        "chargeSchedule": {
            "billingModel": "RECURRING",
            "recurrenceInterval": "MONTHLY",
            "chargeDay": "10",
            "dueDate": None,
        },
        "serviceSchedule": {
            "frequency": "WEEKLY",
            "daysOfWeek": ["1", "3"],
            "dayOfMonth": None,
            "startTime": "09:00",
            "endTime": "10:30",
        },
    }
    form.update(overrides)
    return form


def make_form(**overrides: Any) -> RawEnrollmentForm:
    return RawEnrollmentForm.model_validate(make_form_dict(**overrides))


def make_record_dict(**overrides: Any) -> dict[str, Any]:
    """Create an enrollment record as the backend returns it."""
    record = {
        "id": "enr-1",
        "price": 1234.56,
        "startDate": "2024-03-04T00:00:00.000Z",
        "endDate": None,
        "status": "ACTIVE",
        "createdAt": "2024-03-01T12:00:00.000Z",
        "chargeSchedule": {
            "id": "cs-1",
            "billingModel": "RECURRING",
            "recurrenceInterval": "MONTHLY",
            "chargeDay": 10,
            "dueDate": None,
        },
        "serviceSchedules": [
            {
                "id": "ss-1",
                "frequency": "WEEKLY",
                "daysOfWeek": [1, 3],
                "dayOfMonth": None,
                "startTime": "09:00",
                "endTime": "10:30",
            },
        ],
        "client": {"id": "cli-1", "name": "Maria Souza"},
        "service": {"id": "svc-1", "name": "Aulas de Natação"},
    }
    record.update(overrides)
    return record


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def service_schedule():
    """Fixture providing a service schedule builder function."""
    return make_service_schedule


@pytest.fixture
def charge_schedule():
    """Fixture providing a charge schedule builder function."""
    return make_charge_schedule


@pytest.fixture
def raw_form():
    """Fixture providing a raw form builder function."""
    return make_form


@pytest.fixture
def default_config():
    """Fixture providing default EngineConfig."""
    return EngineConfig()


@pytest.fixture
def form_file(tmp_path):
    """Fixture writing a valid form to a temporary YAML file."""
    path = tmp_path / "form.yaml"
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(make_form_dict(), f, allow_unicode=True)
    return path


@pytest.fixture
def records_file(tmp_path):
    """Fixture writing two enrollment records to a temporary YAML file."""
    path = tmp_path / "enrollments.yaml"
    one_time = make_record_dict(
        id="enr-2",
        chargeSchedule={
            "billingModel": "ONE_TIME",
            "chargeDay": 1,
            "dueDate": "2024-04-10",
        },
        serviceSchedules=[],
        client={"id": "cli-2"},
    )
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump({"enrollments": [make_record_dict(), one_time]}, f, allow_unicode=True)
    return path
