"""Locale parsing and formatting helpers for enrollsched.

The form layer speaks pt-BR: dates are typed as ``DD/MM/YYYY``, times as
``HH:MM`` and prices as ``R$ 1.234,56``. The backend speaks ISO dates and
plain numbers. These helpers convert between the two and are shared by the
normalizer (form -> request), the summarizer (record -> label) and the
read-back path (record -> form).

Parsing helpers return ``None`` for missing or malformed input instead of
raising, so callers decide which fields are fatal.
"""

import logging
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional, Union

from dateutil import parser as date_parser

from . import constants

logger = logging.getLogger(__name__)

DateLike = Union[str, date, datetime, None]

CENTS = Decimal("0.01")


def to_date(value: Union[date, datetime]) -> date:
    """Drop the time component of a datetime; dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value


def parse_input_date(value: DateLike) -> Optional[date]:
    """Parse a ``DD/MM/YYYY`` form date.

    Date and datetime objects are accepted as-is (truncated to the date).
    Strings must match the two-digit/two-digit/four-digit shape exactly and
    name a real calendar day, otherwise ``None`` is returned.
    """
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return to_date(value)
    if not isinstance(value, str) or not constants.INPUT_DATE_PATTERN.match(value.strip()):
        return None
    try:
        return datetime.strptime(value.strip(), constants.INPUT_DATE_FORMAT).date()
    except ValueError:
        return None


def parse_iso_date(value: DateLike) -> Optional[date]:
    """Parse a backend date (``YYYY-MM-DD`` or a full ISO timestamp)."""
    if value is None or value == "":
        return None
    if isinstance(value, (date, datetime)):
        return to_date(value)
    if not isinstance(value, str):
        return None
    try:
        return date_parser.isoparse(value.strip()).date()
    except (ValueError, OverflowError):
        return None


def format_iso_date(value: Optional[date]) -> Optional[str]:
    """Format a date as ``YYYY-MM-DD``; ``None`` passes through."""
    if value is None:
        return None
    return to_date(value).strftime(constants.ISO_DATE_FORMAT)


def format_date(value: DateLike, pattern: str = constants.INPUT_DATE_FORMAT) -> str:
    """Format a date for display.

    Strings are read as ISO dates first, then as form dates.

    Returns:
        The formatted date, ``""`` for missing input, or ``"Data inválida"``
        when a string cannot be read as a date.
    """
    if value is None or value == "":
        return ""
    parsed = parse_iso_date(value)
    if parsed is None:
        parsed = parse_input_date(value)
    if parsed is None:
        logger.debug("Cannot format invalid date: %r", value)
        return "Data inválida"
    return parsed.strftime(pattern)


def is_valid_time(value: Any) -> bool:
    """Check a strict 24-hour ``HH:MM`` value."""
    return isinstance(value, str) and constants.TIME_PATTERN.match(value) is not None


def format_time(value: Optional[str], include_seconds: bool = False) -> str:
    """Trim ``HH:MM:SS`` to ``HH:MM`` unless seconds were requested."""
    if not value:
        return ""
    parts = value.split(":")
    if len(parts) < 2:
        return value
    return value if include_seconds else f"{parts[0]}:{parts[1]}"


def parse_int(value: Any) -> Optional[int]:
    """Parse a free-text integer field.

    Returns:
        The integer, or ``None`` when the field is blank.

    Raises:
        ValueError: If the field holds something that is not a whole number.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"not a number: {value!r}")
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        number = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"not a number: {value!r}") from None
    # "5.0" and "1e1" are whole numbers; "5.5" and "NaN" are not
    if not number.is_finite() or number != number.to_integral_value():
        raise ValueError(f"not a whole number: {value!r}")
    return int(number)


def parse_currency(value: Any) -> Optional[Decimal]:
    """Parse a BRL amount such as ``"R$ 1.234,56"`` into a Decimal.

    Numbers are accepted directly. Returns ``None`` for missing or malformed
    amounts.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        amount = Decimal(str(value))
        return amount if amount.is_finite() else None
    text = str(value).strip()
    if not text:
        return None
    text = text.replace(constants.CURRENCY_SYMBOL, "").replace("\u00a0", "").replace(" ", "")
    text = text.replace(".", "").replace(",", ".", 1)
    try:
        amount = Decimal(text)
    except InvalidOperation:
        logger.debug("Cannot parse currency value: %r", value)
        return None
    return amount if amount.is_finite() else None


def format_currency(value: Any) -> str:
    """Format an amount as BRL, e.g. ``R$ 1.234,56``."""
    amount = parse_currency(value)
    if amount is None:
        logger.error("Invalid value passed to format_currency: %r", value)
        return "Valor inválido"
    quantized = amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    sign = "-" if quantized < 0 else ""
    # Format with US separators, then swap them
    text = f"{abs(quantized):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}{constants.CURRENCY_SYMBOL} {text}"
