"""Editing session for one employee's week.

The session owns the current plan and talks to the shifts API at its
edges. Each employee/week selection gets a ticket; a load that completes
after a newer selection was made is ignored so it cannot overwrite newer
edits. Only one save may be in flight at a time, and a failed save leaves
the in-memory plan untouched so it can be retried.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import date
from typing import Optional, Union

from shiftplanner.client.api import ShiftsApiClient, summary_email_days
from shiftplanner.domain.models import (
    DaySelection,
    Employee,
    WeekPlan,
    Weekday,
    WeeklySummary,
)
from shiftplanner.domain.policies import DefaultHoursPolicy, HoursPolicy
from shiftplanner.errors import SaveInProgressError, ShiftPlannerError
from shiftplanner.planning.planner import DragMode, PlanResult, Rejection, SlotPlanner
from shiftplanner.planning.summary import build_weekly_summary
from shiftplanner.serialization.payload import PayloadWarning, from_payload, to_payload
from shiftplanner.validation.validator import PlanValidator, ValidationResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadTicket:
    """Identifies one employee/week selection."""

    generation: int
    employee_id: str
    center_id: str
    week_start: date


class PlannerSession:
    """Interactive editing of a week plan backed by the shifts API.

    Example:
        >>> session = PlannerSession(ShiftsApiClient())
        >>> session.load(employee, "center-1", date(2024, 1, 10))
        >>> session.apply_day(Weekday.MONDAY, DaySelection(16, 8, has_lunch=True))
        >>> session.save()
    """

    def __init__(
        self,
        client: ShiftsApiClient,
        policy: Optional[HoursPolicy] = None,
    ):
        policy = policy or DefaultHoursPolicy()
        self.client = client
        self.planner = SlotPlanner(policy)
        self.validator = PlanValidator(policy)
        self.plan: Optional[WeekPlan] = None
        self.employee: Optional[Employee] = None
        self.last_rejection: Optional[Rejection] = None
        self.load_warnings: list[PayloadWarning] = []
        self._generation = 0
        self._save_lock = threading.Lock()

    @property
    def is_saving(self) -> bool:
        return self._save_lock.locked()

    def select(self, employee: Employee, center_id: str, week_date: date) -> LoadTicket:
        """Switch to an employee and week, starting from an empty plan.

        Any load still pending for an earlier selection becomes stale.
        """
        self._generation += 1
        week_start = WeekPlan.week_of(week_date)
        self.employee = employee
        self.plan = WeekPlan.empty(
            employee.id, center_id, week_start, day_off=employee.default_day_off
        )
        self.last_rejection = None
        self.load_warnings = []
        return LoadTicket(
            generation=self._generation,
            employee_id=employee.id,
            center_id=center_id,
            week_start=week_start,
        )

    def is_current(self, ticket: LoadTicket) -> bool:
        return ticket.generation == self._generation

    def complete_load(self, ticket: LoadTicket, payload: dict) -> bool:
        """Apply a load response if its selection is still the current one.

        Returns:
            True if the payload was applied, False if it was stale.
        """
        if not self.is_current(ticket):
            logger.info(
                "Ignoring stale shifts load for employee %s, week %s",
                ticket.employee_id,
                ticket.week_start,
            )
            return False

        default_day_off = self.employee.default_day_off if self.employee else None
        loaded = from_payload(
            payload,
            ticket.week_start,
            employee_id=ticket.employee_id,
            center_id=ticket.center_id,
            default_day_off=default_day_off,
        )
        self.plan = loaded.plan
        self.load_warnings = loaded.warnings
        return True

    def load(self, employee: Employee, center_id: str, week_date: date) -> bool:
        """Select an employee/week and load its saved plan from the API."""
        ticket = self.select(employee, center_id, week_date)
        payload = self.client.get_shifts(
            employee.id,
            ticket.week_start,
            self.plan.week_end,
        )
        return self.complete_load(ticket, payload)

    def apply_day(self, day: Weekday, selection: DaySelection) -> PlanResult:
        return self._apply(self.planner.apply_day(self._require_plan(), day, selection))

    def toggle_slot(self, day: Weekday, index: int) -> PlanResult:
        return self._apply(self.planner.toggle_slot(self._require_plan(), day, index))

    def apply_drag_range(
        self,
        day: Weekday,
        slot_a: int,
        slot_b: int,
        mode: Union[DragMode, str],
    ) -> PlanResult:
        return self._apply(
            self.planner.apply_drag_range(self._require_plan(), day, slot_a, slot_b, mode)
        )

    def toggle_lunch(self, day: Weekday, index: int) -> PlanResult:
        return self._apply(self.planner.toggle_lunch(self._require_plan(), day, index))

    def clear_day(self, day: Weekday) -> WeekPlan:
        self.plan = self.planner.clear_day(self._require_plan(), day)
        return self.plan

    def clear_week(self) -> WeekPlan:
        self.plan = self.planner.clear_week(self._require_plan())
        return self.plan

    def set_day_off(self, day: Optional[Union[Weekday, str]]) -> WeekPlan:
        self.plan = self.planner.set_day_off(self._require_plan(), day)
        return self.plan

    def validate(self) -> ValidationResult:
        return self.validator.validate_for_save(self._require_plan())

    def summary(self) -> WeeklySummary:
        return build_weekly_summary(self._require_plan())

    def save(self, center_name: Optional[str] = None) -> dict:
        """Validate and persist the current plan.

        Raises:
            SaveInProgressError: If a previous save has not resolved.
            PlanValidationError: If the plan fails the save gate.
            TransportError: If the request fails; the plan is kept as is.
        """
        plan = self._require_plan()
        if not self._save_lock.acquire(blocking=False):
            raise SaveInProgressError("A save is already in progress")
        try:
            self.validator.validate_for_save(plan).raise_for_errors()
            payload = to_payload(plan, self.employee, center_name)
            response = self.client.save_shifts(payload)
            logger.info(
                "Saved shifts for employee %s, week %s",
                plan.employee_id,
                plan.week_start,
            )
            return response
        finally:
            self._save_lock.release()

    def send_summary(self, center_name: Optional[str] = None) -> dict:
        """Email the current weekly summary to the employee."""
        plan = self._require_plan()
        center = {"id": str(plan.center_id), "nombre": center_name} if plan.center_id else None
        return self.client.send_summary_email(
            self.employee.to_snapshot(plan.day_off),
            center,
            summary_email_days(build_weekly_summary(plan)),
        )

    def _apply(self, result: PlanResult) -> PlanResult:
        if result.accepted:
            self.plan = result.plan
            self.last_rejection = None
        else:
            self.last_rejection = result.rejection
        return result

    def _require_plan(self) -> WeekPlan:
        if self.plan is None:
            raise ShiftPlannerError("No employee and week selected")
        return self.plan
