"""Validation module for the save gate of week plans."""

from shiftplanner.validation.validator import (
    PlanValidator,
    ValidationError,
    ValidationErrorType,
    ValidationResult,
)

__all__ = [
    "PlanValidator",
    "ValidationError",
    "ValidationErrorType",
    "ValidationResult",
]
