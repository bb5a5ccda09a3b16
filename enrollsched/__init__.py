"""Enrollsched - recurrence and occurrence engine for service enrollments.

This package computes when an enrollment's service first happens, renders
charge and service schedules as short pt-BR labels, and normalizes raw
enrollment form values into the request body the backend expects.

Main exports:
    first_occurrence: First concrete service date for a start date and schedule
    summarize_charge / summarize_service: Display labels for schedules
    normalize: Raw form snapshot -> EnrollmentRequest
"""

from .normalizer import normalize, prepare_submission, validate_for_submission
from .recurrence import OccurrenceCalculator, first_occurrence
from .summary import summarize_charge, summarize_service

__all__ = [
    "OccurrenceCalculator",
    "first_occurrence",
    "normalize",
    "prepare_submission",
    "summarize_charge",
    "summarize_service",
    "validate_for_submission",
]
__version__ = "1.0.0"
