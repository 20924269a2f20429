"""Validation module for the save gate of week plans.

This module is the single place where a plan is checked before it is
persisted. The weekly hour limits and the overtime position are the
user-facing checks; the other structural checks only fail when a plan was
built outside the planner's operations, which indicates a defect rather than
a user error.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from shiftplanner.domain.models import (
    LUNCH_SLOTS,
    WeekPlan,
    Weekday,
    format_hours,
    overtime_placement,
    slot_to_time,
)
from shiftplanner.domain.policies import DefaultHoursPolicy, HoursPolicy
from shiftplanner.errors import PlanValidationError
from shiftplanner.planning.summary import (
    day_effective_hours,
    day_overtime_hours,
    day_total_hours,
    week_extra_hours,
    week_ordinary_hours,
    week_total_hours,
)


class ValidationErrorType(Enum):
    """Types of validation errors."""

    WEEKLY_ORDINARY_EXCEEDED = "weekly_ordinary_exceeded"
    WEEKLY_EXTRA_EXCEEDED = "weekly_extra_exceeded"
    WEEKLY_TOTAL_EXCEEDED = "weekly_total_exceeded"
    DAILY_CAP_EXCEEDED = "daily_cap_exceeded"
    LUNCH_NOT_SELECTED = "lunch_not_selected"
    LUNCH_NOT_PAIR = "lunch_not_pair"
    OVERTIME_NOT_SELECTED = "overtime_not_selected"
    LUNCH_OVERTIME_OVERLAP = "lunch_overtime_overlap"
    OVERTIME_NOT_WHOLE_HOURS = "overtime_not_whole_hours"
    OVERTIME_NOT_PLACEABLE = "overtime_not_placeable"


WEEKLY_ERROR_TYPES = frozenset({
    ValidationErrorType.WEEKLY_ORDINARY_EXCEEDED,
    ValidationErrorType.WEEKLY_EXTRA_EXCEEDED,
    ValidationErrorType.WEEKLY_TOTAL_EXCEEDED,
})

# Errors that ordinary editing can lead to; everything else is a defect.
USER_ERROR_TYPES = WEEKLY_ERROR_TYPES | {ValidationErrorType.OVERTIME_NOT_PLACEABLE}


@dataclass
class ValidationError:
    """A single validation error."""

    error_type: ValidationErrorType
    message: str
    day: Optional[Weekday] = None
    details: dict = field(default_factory=dict)

    @property
    def is_defect(self) -> bool:
        """True for structural errors the planner should never produce."""
        return self.error_type not in USER_ERROR_TYPES

    def __str__(self) -> str:
        parts = [f"[{self.error_type.value}]"]
        if self.day:
            parts.append(f"{self.day.display_name}:")
        parts.append(self.message)
        return " ".join(parts)


@dataclass
class ValidationResult:
    """Result of validating a plan."""

    is_valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, error: ValidationError) -> None:
        """Add an error and mark as invalid."""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str) -> None:
        """Add a warning (doesn't affect validity)."""
        self.warnings.append(warning)

    def raise_for_errors(self) -> None:
        """Raise ``PlanValidationError`` if the plan is invalid."""
        if not self.is_valid:
            raise PlanValidationError(self)


class PlanValidator:
    """Validates week plans before they are saved.

    Example:
        >>> validator = PlanValidator()
        >>> result = validator.validate_for_save(plan)
        >>> if not result.is_valid:
        ...     for error in result.errors:
        ...         print(error)
    """

    def __init__(self, policy: Optional[HoursPolicy] = None):
        self.policy = policy or DefaultHoursPolicy()

    def validate_for_save(self, plan: WeekPlan) -> ValidationResult:
        """Check weekly limits and plan structure.

        Args:
            plan: The plan about to be persisted.

        Returns:
            ValidationResult with is_valid flag and any errors.
        """
        result = ValidationResult(is_valid=True)

        for day in Weekday:
            self._validate_day(plan, day, result)

        self._validate_weekly_hours(plan, result)
        return result

    def _validate_weekly_hours(self, plan: WeekPlan, result: ValidationResult) -> None:
        """Check ordinary, extra and total hours against the weekly caps."""
        checks = [
            (
                ValidationErrorType.WEEKLY_ORDINARY_EXCEEDED,
                "ordinary",
                week_ordinary_hours(plan),
                self.policy.weekly_ordinary_cap(),
            ),
            (
                ValidationErrorType.WEEKLY_EXTRA_EXCEEDED,
                "extra",
                week_extra_hours(plan),
                self.policy.weekly_extra_cap(),
            ),
            (
                ValidationErrorType.WEEKLY_TOTAL_EXCEEDED,
                "total",
                week_total_hours(plan),
                self.policy.weekly_total_cap(),
            ),
        ]
        for error_type, label, actual, limit in checks:
            if actual > limit:
                result.add_error(
                    ValidationError(
                        error_type=error_type,
                        message=(
                            f"Weekly {label} hours {format_hours(actual)}h exceed "
                            f"the {format_hours(limit)}h cap by "
                            f"{format_hours(actual - limit)}h"
                        ),
                        details={
                            "limit": limit,
                            "actual": actual,
                            "excess": actual - limit,
                        },
                    )
                )

    def _validate_day(self, plan: WeekPlan, day: Weekday, result: ValidationResult) -> None:
        """Check one day's structure and daily cap."""
        slots = set(plan.day_slots(day))
        lunch = plan.day_lunch(day)
        overtime = plan.day_overtime(day)

        if not set(lunch) <= slots:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.LUNCH_NOT_SELECTED,
                    message="Lunch slots are not part of the selected time",
                    day=day,
                    details={"lunch": lunch},
                )
            )

        if lunch and (len(lunch) != LUNCH_SLOTS or lunch[1] != lunch[0] + 1):
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.LUNCH_NOT_PAIR,
                    message=f"Lunch must be two contiguous slots, got {lunch}",
                    day=day,
                    details={"lunch": lunch},
                )
            )

        if not set(overtime) <= slots:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.OVERTIME_NOT_SELECTED,
                    message="Overtime slots are not part of the selected time",
                    day=day,
                )
            )

        overlap = sorted(set(lunch) & set(overtime))
        if overlap:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.LUNCH_OVERTIME_OVERLAP,
                    message="Lunch overlaps overtime",
                    day=day,
                    details={"slots": overlap},
                )
            )

        if len(overtime) % 2:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.OVERTIME_NOT_WHOLE_HOURS,
                    message=(
                        f"Overtime of {format_hours(day_overtime_hours(plan, day))}h "
                        f"is not a whole number of hours"
                    ),
                    day=day,
                )
            )

        if overtime and set(overtime) <= slots and not overlap and not len(overtime) % 2:
            self._validate_overtime_position(plan, day, result)

        cap = self.policy.daily_cap_hours(bool(lunch))
        total = day_total_hours(plan, day)
        if total > cap:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.DAILY_CAP_EXCEEDED,
                    message=f"Daily hours {format_hours(total)}h exceed {format_hours(cap)}h",
                    day=day,
                    details={
                        "limit": cap,
                        "actual": total,
                        "ordinary": day_effective_hours(plan, day),
                    },
                )
            )

        if plan.is_day_off(day) and slots:
            result.add_warning(
                f"{day.display_name} is the day off but has {len(slots)} slots scheduled"
            )

    def _validate_overtime_position(
        self, plan: WeekPlan, day: Weekday, result: ValidationResult
    ) -> None:
        """Check that the day's overtime reloads where it is now.

        The payload stores overtime as whole hours and places it back right
        after the last ordinary or lunch slot; overtime anywhere else would
        move or be dropped on the next load.
        """
        overtime = plan.day_overtime(day)
        try:
            expected = list(
                overtime_placement(plan.day_ordinary(day), plan.day_lunch(day), len(overtime))
            )
        except ValueError as exc:
            reason = str(exc)
            expected = None
        else:
            if overtime == expected:
                return
            reason = (
                f"Overtime at {slot_to_time(overtime[0])} must start right after "
                f"the last ordinary slot, at {slot_to_time(expected[0])}"
            )

        result.add_error(
            ValidationError(
                error_type=ValidationErrorType.OVERTIME_NOT_PLACEABLE,
                message=reason,
                day=day,
                details={"overtime": overtime, "expected": expected},
            )
        )
