"""Type definitions and enums for enrollsched."""

from enum import Enum, IntEnum


class BillingModel(str, Enum):
    """How an enrollment is billed."""

    ONE_TIME = "ONE_TIME"
    RECURRING = "RECURRING"


class RecurrenceInterval(str, Enum):
    """Cadence of a recurring charge."""

    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    BIMONTHLY = "BIMONTHLY"
    TRIMESTERLY = "TRIMESTERLY"
    SEMIANNUALLY = "SEMIANNUALLY"
    YEARLY = "YEARLY"


class ServiceFrequency(str, Enum):
    """How often the contracted service happens."""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    CUSTOM_DAYS = "CUSTOM_DAYS"  # No construction rule, display only


class DayOfWeek(IntEnum):
    """Days of the week, numbered the way the backend stores them (0 = Sunday)."""

    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @classmethod
    def from_date(cls, d) -> "DayOfWeek":
        # date.isoweekday(): Monday=1 ... Sunday=7
        return cls(d.isoweekday() % 7)


class OccurrenceKind(str, Enum):
    """Label attached to a computed first occurrence."""

    ONE_TIME = "one-time"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class MonthOverflowPolicy(str, Enum):
    """What to do when a day of month does not exist in the target month."""

    CLAMP = "clamp"  # Feb 31 -> Feb 28/29
    ROLLOVER = "rollover"  # Feb 31 -> Mar 2/3
