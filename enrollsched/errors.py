"""Exception hierarchy for enrollsched.

Two families are raised by the core:

* :class:`ScheduleError` from the occurrence calculator, when a service
  schedule cannot produce a concrete date.
* :class:`ValidationError` from the payload normalizer, when a form snapshot
  lacks one of the facts an enrollment cannot exist without.

Every error carries a stable ``code`` and a user-facing pt-BR ``message``.
Validation errors also name the wire ``field`` they refer to so a caller can
attach the message to the right form input.
"""

from typing import Optional


class EnrollSchedError(Exception):
    """Base class for all enrollsched errors."""

    code = "error"
    default_message = "Erro no cálculo"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# ============================================================================
# Occurrence calculation
# ============================================================================


class ScheduleError(EnrollSchedError):
    """A service schedule could not be turned into an occurrence."""

    code = "schedule_error"


class InvalidDaySelection(ScheduleError):
    """No weekday selected, or none of the selected values is a weekday."""

    code = "invalid_day_selection"
    default_message = "Selecione os dias da semana"
    unreadable_message = "Seleção de dias inválida"


class InvalidDayOfMonth(ScheduleError):
    code = "invalid_day_of_month"
    default_message = "Dia do Mês inválido (1-31)"


class ComputationExhausted(ScheduleError):
    """Weekly scan hit its iteration bound. Signals a data defect."""

    code = "computation_exhausted"
    default_message = "Erro ao calcular dia semanal"


class Unsupported(ScheduleError):
    code = "unsupported"
    default_message = "Selecione uma Frequência válida"


# ============================================================================
# Payload normalization
# ============================================================================


class ValidationError(EnrollSchedError):
    """A raw form could not be normalized into a request."""

    code = "validation_error"
    field = ""

    def __init__(self, message: Optional[str] = None, field: Optional[str] = None):
        super().__init__(message)
        if field is not None:
            self.field = field

    def __str__(self) -> str:
        return f"{self.field}: {self.message}" if self.field else self.message


class InvalidStartDate(ValidationError):
    code = "invalid_start_date"
    field = "startDate"
    default_message = "Falha na formatação dos dados. Verifique a Data de Início."


class InvalidChargeDay(ValidationError):
    code = "invalid_charge_day"
    field = "chargeSchedule.chargeDay"
    default_message = "Dia da cobrança inválido."


class IncompleteChargeSchedule(ValidationError):
    code = "incomplete_charge_schedule"
    field = "chargeSchedule"
    default_message = "Configuração de cobrança é obrigatória."


class InvalidPrice(ValidationError):
    code = "invalid_price"
    field = "price"
    default_message = "Valor inválido."


class MissingClientReference(ValidationError):
    code = "missing_client_reference"
    field = "clientId"
    default_message = "Cliente é obrigatório."
