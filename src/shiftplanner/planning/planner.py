"""Slot editing operations for week plans.

Every edit is a pure transition: it takes a ``WeekPlan`` and returns a
``PlanResult`` holding either the new plan or a ``Rejection`` that names the
violated limit. A rejected edit hands back the exact plan it was given, so
nothing partial ever leaks out.

Daily limits are enforced on every edit. Weekly limits are only checked by
the slot-level caps of click and drag editing; the full weekly gate runs at
save time (see ``shiftplanner.validation``).
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Union

from shiftplanner.domain.models import (
    LUNCH_SLOTS,
    SLOTS_PER_DAY,
    DaySelection,
    SlotRef,
    WeekPlan,
    Weekday,
    day_refs,
    format_hours,
    is_valid_slot_index,
    slot_to_time,
)
from shiftplanner.domain.policies import DefaultHoursPolicy, HoursPolicy
from shiftplanner.planning.summary import (
    day_paid_slots,
    day_total_hours,
    week_paid_slots,
)


class RejectionReason(Enum):
    """Why an edit was refused."""

    INVALID_SELECTION = "invalid_selection"
    INVALID_SLOT = "invalid_slot"
    DAY_OVERFLOW = "day_overflow"
    DAILY_CAP_EXCEEDED = "daily_cap_exceeded"
    WEEKLY_CAP_EXCEEDED = "weekly_cap_exceeded"
    LUNCH_NOT_SELECTED = "lunch_not_selected"
    INVALID_LUNCH = "invalid_lunch"
    OVERTIME_SLOT = "overtime_slot"


class DragMode(Enum):
    SELECT = "select"
    DESELECT = "deselect"


@dataclass(frozen=True)
class Rejection:
    """A refused edit.

    Attributes:
        reason: Category of the violation.
        message: Human-readable explanation.
        day: Day the edit targeted, if any.
        limit: The limit that was hit (hours for caps, slot index for overflow).
        actual: The value the edit would have produced.
    """

    reason: RejectionReason
    message: str
    day: Optional[Weekday] = None
    limit: Optional[float] = None
    actual: Optional[float] = None

    def __str__(self) -> str:
        return f"[{self.reason.value}] {self.message}"


@dataclass(frozen=True)
class PlanResult:
    """Outcome of an edit: a new plan, or the unchanged plan and a rejection."""

    plan: WeekPlan
    rejection: Optional[Rejection] = None

    @property
    def accepted(self) -> bool:
        return self.rejection is None

    @classmethod
    def ok(cls, plan: WeekPlan) -> "PlanResult":
        return cls(plan=plan)

    @classmethod
    def rejected(cls, plan: WeekPlan, rejection: Rejection) -> "PlanResult":
        return cls(plan=plan, rejection=rejection)


class SlotPlanner:
    """Applies day, slot, drag and lunch edits to week plans.

    Example:
        >>> planner = SlotPlanner()
        >>> result = planner.apply_day(plan, Weekday.MONDAY,
        ...                            DaySelection(16, 8, has_lunch=True))
        >>> if not result.accepted:
        ...     print(result.rejection)
    """

    def __init__(self, policy: Optional[HoursPolicy] = None):
        self.policy = policy or DefaultHoursPolicy()

    def apply_day(
        self,
        plan: WeekPlan,
        day: Weekday,
        selection: DaySelection,
    ) -> PlanResult:
        """Replace a day's assignment with the block described by ``selection``.

        The ordinary block starts at ``selection.start``, lunch sits at its
        midpoint and overtime follows right after. Weekly limits are not
        checked here so the week can be edited iteratively.
        """
        problem = self._check_selection(selection)
        if problem:
            return PlanResult.rejected(plan, replace(problem, day=day))

        if selection.end > SLOTS_PER_DAY:
            return PlanResult.rejected(plan, Rejection(
                reason=RejectionReason.DAY_OVERFLOW,
                message=(
                    f"Ordinary block would end at {slot_to_time(selection.end)}, "
                    f"after the end of the day"
                ),
                day=day,
                limit=SLOTS_PER_DAY - 1,
                actual=selection.end - 1,
            ))

        if selection.overtime_end > SLOTS_PER_DAY:
            return PlanResult.rejected(plan, Rejection(
                reason=RejectionReason.DAY_OVERFLOW,
                message=(
                    f"Overtime block would end at {slot_to_time(selection.overtime_end)}, "
                    f"after the end of the day"
                ),
                day=day,
                limit=SLOTS_PER_DAY - 1,
                actual=selection.overtime_end - 1,
            ))

        cap = self.policy.daily_cap_hours(selection.has_lunch)
        total = selection.day_hours
        if total > cap:
            return PlanResult.rejected(plan, self._daily_cap_rejection(day, cap, total))

        cleared = plan.without_day(day)
        lunch_indices = []
        if selection.lunch_start is not None:
            lunch_indices = range(selection.lunch_start, selection.lunch_start + LUNCH_SLOTS)
        overtime_indices = range(selection.overtime_start, selection.overtime_end)

        return PlanResult.ok(replace(
            cleared,
            slots=cleared.slots | day_refs(day, range(selection.start, selection.overtime_end)),
            lunch_slots=cleared.lunch_slots | day_refs(day, lunch_indices),
            overtime_slots=cleared.overtime_slots | day_refs(day, overtime_indices),
        ))

    def toggle_slot(self, plan: WeekPlan, day: Weekday, index: int) -> PlanResult:
        """Flip one ordinary slot on or off.

        Removing a lunch slot clears that day's lunch. Adding a slot is
        refused when the day would exceed the slot day cap or the week would
        exceed the slot week cap. Overtime slots are never edited here.
        """
        if not is_valid_slot_index(index):
            return PlanResult.rejected(plan, self._invalid_slot(day, index))

        ref = SlotRef(day, index)
        if ref in plan.overtime_slots:
            return PlanResult.rejected(plan, Rejection(
                reason=RejectionReason.OVERTIME_SLOT,
                message=(
                    f"{slot_to_time(index)} is overtime; change it from the day "
                    f"dialog or clear the day"
                ),
                day=day,
            ))

        if ref in plan.slots:
            lunch = plan.lunch_slots
            if ref in lunch:
                lunch = frozenset(s for s in lunch if s.day is not day)
            candidate = replace(plan, slots=plan.slots - {ref}, lunch_slots=lunch)
            return self._commit(plan, candidate, day)

        candidate = replace(plan, slots=plan.slots | {ref})
        return self._commit(plan, candidate, day, slot_caps=True)

    def apply_drag_range(
        self,
        plan: WeekPlan,
        day: Weekday,
        slot_a: int,
        slot_b: int,
        mode: Union[DragMode, str],
    ) -> PlanResult:
        """Select or deselect an inclusive slot range as one atomic edit.

        The whole range is staged on a scratch copy of the day and the limits
        are checked once at the end; if they fail, the gesture is discarded
        and the original plan is returned.
        """
        try:
            mode = DragMode(mode)
        except ValueError:
            return PlanResult.rejected(plan, Rejection(
                reason=RejectionReason.INVALID_SELECTION,
                message=f"Unknown drag mode: {mode!r}",
                day=day,
            ))
        for index in (slot_a, slot_b):
            if not is_valid_slot_index(index):
                return PlanResult.rejected(plan, self._invalid_slot(day, index))

        low, high = min(slot_a, slot_b), max(slot_a, slot_b)
        slots = set(plan.slots)
        lunch = set(plan.lunch_slots)

        for index in range(low, high + 1):
            ref = SlotRef(day, index)
            if mode is DragMode.SELECT:
                slots.add(ref)
            elif ref in slots and ref not in plan.overtime_slots:
                slots.discard(ref)
                if ref in lunch:
                    lunch = {s for s in lunch if s.day is not day}

        candidate = replace(plan, slots=frozenset(slots), lunch_slots=frozenset(lunch))
        if candidate == plan:
            return PlanResult.ok(plan)
        return self._commit(plan, candidate, day, slot_caps=mode is DragMode.SELECT)

    def toggle_lunch(self, plan: WeekPlan, day: Weekday, index: int) -> PlanResult:
        """Mark or unmark the one-hour lunch starting at ``index``.

        Both slots must already be selected and must not be overtime. A day
        has at most one lunch pair: any existing pair is cleared first, and
        clicking the current lunch removes it.
        """
        if not is_valid_slot_index(index) or index > SLOTS_PER_DAY - LUNCH_SLOTS:
            return PlanResult.rejected(plan, Rejection(
                reason=RejectionReason.INVALID_LUNCH,
                message="Lunch must cover two consecutive 30-minute slots",
                day=day,
            ))

        ref, following = SlotRef(day, index), SlotRef(day, index + 1)
        if ref not in plan.slots:
            return PlanResult.rejected(plan, Rejection(
                reason=RejectionReason.LUNCH_NOT_SELECTED,
                message="Lunch can only be marked on selected time",
                day=day,
            ))
        if following not in plan.slots:
            return PlanResult.rejected(plan, Rejection(
                reason=RejectionReason.LUNCH_NOT_SELECTED,
                message="Both lunch slots must be selected",
                day=day,
            ))
        if ref in plan.overtime_slots or following in plan.overtime_slots:
            return PlanResult.rejected(plan, Rejection(
                reason=RejectionReason.INVALID_LUNCH,
                message="Lunch cannot overlap overtime",
                day=day,
            ))

        is_current = ref in plan.lunch_slots or following in plan.lunch_slots
        lunch = frozenset(s for s in plan.lunch_slots if s.day is not day)
        if not is_current:
            lunch = lunch | {ref, following}

        return self._commit(plan, replace(plan, lunch_slots=lunch), day)

    def clear_day(self, plan: WeekPlan, day: Weekday) -> WeekPlan:
        """Remove every slot, lunch and overtime entry of one day."""
        return plan.without_day(day)

    def clear_week(self, plan: WeekPlan) -> WeekPlan:
        """Empty the whole week; the day off is kept."""
        return replace(
            plan,
            slots=frozenset(),
            lunch_slots=frozenset(),
            overtime_slots=frozenset(),
        )

    def set_day_off(
        self,
        plan: WeekPlan,
        day: Optional[Union[Weekday, str]],
    ) -> WeekPlan:
        """Override the rest day for this week (None removes it)."""
        if day is not None:
            day = Weekday.parse(day)
        return replace(plan, day_off=day)

    def _commit(
        self,
        original: WeekPlan,
        candidate: WeekPlan,
        day: Weekday,
        slot_caps: bool = False,
    ) -> PlanResult:
        """Accept ``candidate`` if the day's limits hold, else keep ``original``."""
        if slot_caps:
            rejection = self._check_slot_caps(candidate, day)
            if rejection:
                return PlanResult.rejected(original, rejection)

        cap = self.policy.daily_cap_hours(candidate.has_lunch(day))
        total = day_total_hours(candidate, day)
        if total > cap:
            return PlanResult.rejected(original, self._daily_cap_rejection(day, cap, total))

        return PlanResult.ok(candidate)

    def _check_slot_caps(self, plan: WeekPlan, day: Weekday) -> Optional[Rejection]:
        day_cap = self.policy.slot_day_cap()
        paid = day_paid_slots(plan, day)
        if paid > day_cap:
            return Rejection(
                reason=RejectionReason.DAILY_CAP_EXCEEDED,
                message=(
                    f"daily cap {format_hours(day_cap / 2)}h exceeded, "
                    f"got {format_hours(paid / 2)}h"
                ),
                day=day,
                limit=day_cap / 2,
                actual=paid / 2,
            )

        week_cap = self.policy.slot_week_cap()
        paid = week_paid_slots(plan)
        if paid > week_cap:
            return Rejection(
                reason=RejectionReason.WEEKLY_CAP_EXCEEDED,
                message=(
                    f"weekly cap {format_hours(week_cap / 2)}h exceeded, "
                    f"got {format_hours(paid / 2)}h"
                ),
                day=day,
                limit=week_cap / 2,
                actual=paid / 2,
            )
        return None

    def _check_selection(self, selection: DaySelection) -> Optional[Rejection]:
        max_hours = self.policy.max_selection_hours()

        if not is_valid_slot_index(selection.start):
            return Rejection(
                reason=RejectionReason.INVALID_SELECTION,
                message=f"Start slot must be an integer in [0, 47], got {selection.start!r}",
            )

        hours = selection.ordinary_hours
        if (
            isinstance(hours, bool)
            or not isinstance(hours, (int, float))
            or not 0 <= hours <= max_hours
            or hours * 2 != int(hours * 2)
        ):
            return Rejection(
                reason=RejectionReason.INVALID_SELECTION,
                message=(
                    f"Ordinary hours must be in [0, {format_hours(max_hours)}] "
                    f"in 0.5 steps, got {hours!r}"
                ),
            )

        if selection.has_lunch and selection.ordinary_slots < LUNCH_SLOTS:
            return Rejection(
                reason=RejectionReason.INVALID_SELECTION,
                message="A day with lunch needs at least 1 ordinary hour",
            )

        extra = selection.extra_hours
        if (
            isinstance(extra, bool)
            or not isinstance(extra, int)
            or not 0 <= extra <= max_hours
        ):
            return Rejection(
                reason=RejectionReason.INVALID_SELECTION,
                message=(
                    f"Extra hours must be a whole number in "
                    f"[0, {format_hours(max_hours)}], got {extra!r}"
                ),
            )

        if extra and not selection.ordinary_slots:
            return Rejection(
                reason=RejectionReason.INVALID_SELECTION,
                message="Extra hours need an ordinary block to follow",
            )
        return None

    def _daily_cap_rejection(self, day: Weekday, cap: float, total: float) -> Rejection:
        return Rejection(
            reason=RejectionReason.DAILY_CAP_EXCEEDED,
            message=f"daily cap {format_hours(cap)}h exceeded, got {format_hours(total)}h",
            day=day,
            limit=cap,
            actual=total,
        )

    def _invalid_slot(self, day: Weekday, index) -> Rejection:
        return Rejection(
            reason=RejectionReason.INVALID_SLOT,
            message=f"Slot index must be an integer in [0, 47], got {index!r}",
            day=day,
        )
