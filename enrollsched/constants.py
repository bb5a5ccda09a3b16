"""
Global constants for enrollsched.

This module centralizes labels, patterns, bounds and default values
so the calculator, summarizer and normalizer agree on them.
"""

import re

from .types import BillingModel, DayOfWeek, RecurrenceInterval, ServiceFrequency

# ============================================================================
# Configuration Discovery
# ============================================================================

CONFIG_FILENAME = "enrollsched.yaml"
ENV_CONFIG_FILE = "ENROLLSCHED_CONFIG"

# ============================================================================
# Locale Formats
# ============================================================================

INPUT_DATE_FORMAT = "%d/%m/%Y"  # DD/MM/YYYY as typed in the form
ISO_DATE_FORMAT = "%Y-%m-%d"
INPUT_DATE_PATTERN = re.compile(r"^\d{2}/\d{2}/\d{4}$")
TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")  # HH:MM, 24h
CURRENCY_SYMBOL = "R$"

# ============================================================================
# Validation Constraints
# ============================================================================

MIN_DAY_OF_MONTH = 1
MAX_DAY_OF_MONTH = 31
MIN_DAY_OF_WEEK = 0
MAX_DAY_OF_WEEK = 6

# Safety bound for the weekly forward scan
DEFAULT_MAX_SCAN_DAYS = 370
MIN_SCAN_DAYS = 7

# ============================================================================
# Default Values
# ============================================================================

DEFAULT_FALLBACK_LABEL = "Não definido"
DEFAULT_START_TIME = "09:00"
DEFAULT_PRICE_TEXT = "R$ 0,00"
DEFAULT_CHARGE_DAY = "1"
UNKNOWN_VALUE = "?"
NOT_AVAILABLE = "N/A"

# ============================================================================
# Display Labels (pt-BR)
# ============================================================================

BILLING_MODEL_LABELS = {
    BillingModel.RECURRING: "Recorrente",
    BillingModel.ONE_TIME: "Única",
}

RECURRENCE_INTERVAL_LABELS = {
    RecurrenceInterval.WEEKLY: "Semanal",
    RecurrenceInterval.MONTHLY: "Mensal",
    RecurrenceInterval.BIMONTHLY: "Bimestral",
    RecurrenceInterval.TRIMESTERLY: "Trimestral",
    RecurrenceInterval.SEMIANNUALLY: "Semestral",
    RecurrenceInterval.YEARLY: "Anual",
}

SERVICE_FREQUENCY_LABELS = {
    ServiceFrequency.DAILY: "Diário",
    ServiceFrequency.WEEKLY: "Semanal",
    ServiceFrequency.MONTHLY: "Mensal",
    ServiceFrequency.CUSTOM_DAYS: "Dias Específicos",
}

DAY_OF_WEEK_LABELS = {
    DayOfWeek.SUNDAY: "Domingo",
    DayOfWeek.MONDAY: "Segunda",
    DayOfWeek.TUESDAY: "Terça",
    DayOfWeek.WEDNESDAY: "Quarta",
    DayOfWeek.THURSDAY: "Quinta",
    DayOfWeek.FRIDAY: "Sexta",
    DayOfWeek.SATURDAY: "Sábado",
}

DAY_OF_WEEK_ABBREVIATIONS = {
    DayOfWeek.SUNDAY: "Dom",
    DayOfWeek.MONDAY: "Seg",
    DayOfWeek.TUESDAY: "Ter",
    DayOfWeek.WEDNESDAY: "Qua",
    DayOfWeek.THURSDAY: "Qui",
    DayOfWeek.FRIDAY: "Sex",
    DayOfWeek.SATURDAY: "Sáb",
}

# Summary texts
CHARGE_ONE_TIME_SUMMARY = "Única ({due_date})"
CHARGE_DAY_SUFFIX = " (dia {day})"
CHARGE_RECURRING_FALLBACK = "Recorrente"
SERVICE_DAILY_SUMMARY = "Diariamente"
SERVICE_WEEKLY_SUMMARY = "Semanal ({days})"
SERVICE_WEEKLY_NO_DAYS = "Nenhum dia"
SERVICE_MONTHLY_SUMMARY = "Mensal (dia {day})"
SERVICE_CUSTOM_DAYS_SUMMARY = "Dias Específicos"

# Charge day field captions
CHARGE_DAY_LABEL_ONE_TIME = "Dia do Vencimento (Obrigatório se Cobrança Única)"
CHARGE_DAY_LABEL_MONTHLY = "Dia do Mês para Cobrança (1-31)"
CHARGE_DAY_LABEL_WEEKLY = "Dia da Semana para Cobrança (0-6)"
CHARGE_DAY_LABEL_GENERIC = "Dia da Cobrança"

# Occurrence preview suffixes
PREVIEW_ONE_TIME = "Data Única"
PREVIEW_DAILY = "Diário"
PREVIEW_MONTHLY = "Mensal"
PREVIEW_MISSING_START_DATE = "Defina uma Data de Início válida"

# ============================================================================
# Display/Formatting Constants
# ============================================================================

MAX_TABLE_COLUMN_WIDTH = 40  # Max width for table columns in CLI
