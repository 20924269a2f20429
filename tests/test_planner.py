"""Tests for slot editing operations."""

from datetime import date

import pytest

from shiftplanner.domain.models import DaySelection, SlotRef, WeekPlan, Weekday
from shiftplanner.domain.policies import DefaultHoursPolicy
from shiftplanner.planning.planner import (
    DragMode,
    PlanResult,
    RejectionReason,
    SlotPlanner,
)
from shiftplanner.planning.summary import day_effective_hours, day_overtime_hours
from shiftplanner.validation.validator import PlanValidator, ValidationErrorType

MONDAY = date(2024, 1, 8)


@pytest.fixture
def planner():
    return SlotPlanner()


@pytest.fixture
def empty_plan():
    return WeekPlan.empty("E001", "C001", MONDAY, day_off=Weekday.SUNDAY)


def apply(planner, plan, day, selection):
    """Apply a selection that is expected to be accepted."""
    result = planner.apply_day(plan, day, selection)
    assert result.accepted, result.rejection
    return result.plan


class TestApplyDay:
    """Tests for SlotPlanner.apply_day."""

    def test_eight_hours_with_lunch(self, planner, empty_plan):
        """8 ordinary hours from 08:00 with lunch at noon."""
        selection = DaySelection(start=16, ordinary_hours=8, has_lunch=True)
        result = planner.apply_day(empty_plan, Weekday.MONDAY, selection)

        assert result.accepted
        plan = result.plan
        assert plan.day_slots(Weekday.MONDAY) == list(range(16, 34))
        assert plan.day_lunch(Weekday.MONDAY) == [24, 25]
        assert plan.day_overtime(Weekday.MONDAY) == []
        assert day_effective_hours(plan, Weekday.MONDAY) == 8

    def test_overtime_appended_after_block(self, planner, empty_plan):
        selection = DaySelection(start=16, ordinary_hours=6, extra_hours=2)
        plan = apply(planner, empty_plan, Weekday.TUESDAY, selection)

        assert plan.day_slots(Weekday.TUESDAY) == list(range(16, 32))
        assert plan.day_overtime(Weekday.TUESDAY) == [28, 29, 30, 31]
        assert day_overtime_hours(plan, Weekday.TUESDAY) == 2

    def test_daily_cap_with_lunch_rejected(self, planner, empty_plan):
        """9 ordinary + 3 extra with lunch is 12h against an 11h cap."""
        selection = DaySelection(start=16, ordinary_hours=9, has_lunch=True, extra_hours=3)
        result = planner.apply_day(empty_plan, Weekday.MONDAY, selection)

        assert not result.accepted
        assert result.rejection.reason == RejectionReason.DAILY_CAP_EXCEEDED
        assert result.rejection.message == "daily cap 11h exceeded, got 12h"
        assert result.rejection.limit == 11
        assert result.rejection.actual == 12
        assert result.rejection.day is Weekday.MONDAY

    def test_daily_cap_without_lunch_rejected(self, planner, empty_plan):
        selection = DaySelection(start=16, ordinary_hours=8, extra_hours=3)
        result = planner.apply_day(empty_plan, Weekday.MONDAY, selection)

        assert result.rejection.reason == RejectionReason.DAILY_CAP_EXCEEDED
        assert result.rejection.message == "daily cap 10h exceeded, got 11h"

    def test_eleven_hours_with_lunch_accepted(self, planner, empty_plan):
        selection = DaySelection(start=10, ordinary_hours=11, has_lunch=True)
        assert planner.apply_day(empty_plan, Weekday.MONDAY, selection).accepted

    def test_rejection_returns_same_plan(self, planner, empty_plan):
        """A rejected edit hands back the exact plan it was given."""
        selection = DaySelection(start=16, ordinary_hours=9, has_lunch=True, extra_hours=3)
        result = planner.apply_day(empty_plan, Weekday.MONDAY, selection)
        assert result.plan is empty_plan

    def test_ordinary_block_past_end_of_day(self, planner, empty_plan):
        selection = DaySelection(start=40, ordinary_hours=8)
        result = planner.apply_day(empty_plan, Weekday.MONDAY, selection)

        assert result.rejection.reason == RejectionReason.DAY_OVERFLOW
        assert result.plan is empty_plan

    def test_overtime_past_end_of_day(self, planner, empty_plan):
        """Overtime running past 24:00 is rejected even under the daily cap."""
        selection = DaySelection(start=30, ordinary_hours=8, extra_hours=2)
        result = planner.apply_day(empty_plan, Weekday.MONDAY, selection)

        assert result.rejection.reason == RejectionReason.DAY_OVERFLOW
        assert result.rejection.limit == 47
        assert result.rejection.actual == 49

    def test_block_ending_at_midnight_accepted(self, planner, empty_plan):
        selection = DaySelection(start=38, ordinary_hours=3, extra_hours=2)
        plan = apply(planner, empty_plan, Weekday.MONDAY, selection)
        assert plan.day_slots(Weekday.MONDAY)[-1] == 47

    @pytest.mark.parametrize("selection", [
        DaySelection(start=48, ordinary_hours=8),
        DaySelection(start=-1, ordinary_hours=8),
        DaySelection(start=16, ordinary_hours=8.25),
        DaySelection(start=16, ordinary_hours=12.5),
        DaySelection(start=16, ordinary_hours=-1),
        DaySelection(start=16, ordinary_hours=0.5, has_lunch=True),
        DaySelection(start=16, ordinary_hours=4, extra_hours=1.5),
        DaySelection(start=16, ordinary_hours=4, extra_hours=13),
        DaySelection(start=16, ordinary_hours=0, extra_hours=2),
    ])
    def test_invalid_selection(self, planner, empty_plan, selection):
        result = planner.apply_day(empty_plan, Weekday.MONDAY, selection)

        assert result.rejection.reason == RejectionReason.INVALID_SELECTION
        assert result.rejection.day is Weekday.MONDAY
        assert result.plan is empty_plan

    def test_replaces_previous_assignment(self, planner, empty_plan):
        first = DaySelection(start=16, ordinary_hours=8, has_lunch=True, extra_hours=1)
        second = DaySelection(start=30, ordinary_hours=4)
        plan = apply(planner, empty_plan, Weekday.MONDAY, first)
        plan = apply(planner, plan, Weekday.MONDAY, second)

        assert plan.day_slots(Weekday.MONDAY) == list(range(30, 38))
        assert plan.day_lunch(Weekday.MONDAY) == []
        assert plan.day_overtime(Weekday.MONDAY) == []

    def test_other_days_untouched(self, planner, empty_plan):
        plan = apply(planner, empty_plan, Weekday.MONDAY, DaySelection(16, 8))
        plan = apply(planner, plan, Weekday.TUESDAY, DaySelection(20, 4))
        assert plan.day_slots(Weekday.MONDAY) == list(range(16, 32))

    def test_idempotent(self, planner, empty_plan):
        """Applying the same selection twice yields the same plan."""
        selection = DaySelection(start=16, ordinary_hours=7.5, has_lunch=True, extra_hours=2)
        once = apply(planner, empty_plan, Weekday.FRIDAY, selection)
        twice = apply(planner, once, Weekday.FRIDAY, selection)
        assert once == twice

    def test_zero_hours_clears_day(self, planner, empty_plan):
        plan = apply(planner, empty_plan, Weekday.MONDAY, DaySelection(16, 8))
        plan = apply(planner, plan, Weekday.MONDAY, DaySelection(16, 0))
        assert plan.day_slots(Weekday.MONDAY) == []

    def test_weekly_cap_not_checked(self, planner, empty_plan):
        """Weekly limits are left to the save gate.

        34.5 hours Tuesday to Friday plus 10 hours on Monday is 44.5 hours:
        every day is within its cap so each edit is accepted, and only
        validation reports the weekly excess.
        """
        plan = empty_plan
        for day in (Weekday.TUESDAY, Weekday.WEDNESDAY, Weekday.THURSDAY):
            plan = apply(planner, plan, day, DaySelection(16, 8.5))
        plan = apply(planner, plan, Weekday.FRIDAY, DaySelection(16, 9))

        result = planner.apply_day(plan, Weekday.MONDAY, DaySelection(16, 10))
        assert result.accepted

        validation = PlanValidator().validate_for_save(result.plan)
        assert not validation.is_valid
        assert len(validation.errors) == 1
        error = validation.errors[0]
        assert error.error_type == ValidationErrorType.WEEKLY_ORDINARY_EXCEEDED
        assert error.details["excess"] == 0.5

    def test_custom_policy(self, empty_plan):
        planner = SlotPlanner(DefaultHoursPolicy(daily_cap=6))
        result = planner.apply_day(empty_plan, Weekday.MONDAY, DaySelection(16, 7))
        assert result.rejection.message == "daily cap 6h exceeded, got 7h"


class TestToggleSlot:
    """Tests for SlotPlanner.toggle_slot."""

    def test_add_and_remove(self, planner, empty_plan):
        added = planner.toggle_slot(empty_plan, Weekday.MONDAY, 10)
        assert added.accepted
        assert added.plan.day_slots(Weekday.MONDAY) == [10]

        removed = planner.toggle_slot(added.plan, Weekday.MONDAY, 10)
        assert removed.accepted
        assert removed.plan.day_slots(Weekday.MONDAY) == []

    def test_removing_lunch_slot_clears_lunch(self, planner, empty_plan):
        plan = apply(planner, empty_plan, Weekday.MONDAY, DaySelection(16, 8, has_lunch=True))
        result = planner.toggle_slot(plan, Weekday.MONDAY, 25)

        assert result.accepted
        assert result.plan.day_lunch(Weekday.MONDAY) == []
        assert 24 in result.plan.day_slots(Weekday.MONDAY)
        assert 25 not in result.plan.day_slots(Weekday.MONDAY)

    def test_overtime_slot_rejected(self, planner, empty_plan):
        plan = apply(planner, empty_plan, Weekday.MONDAY, DaySelection(16, 4, extra_hours=1))
        result = planner.toggle_slot(plan, Weekday.MONDAY, 24)

        assert result.rejection.reason == RejectionReason.OVERTIME_SLOT
        assert result.plan is plan

    def test_day_cap(self, planner, empty_plan):
        """Adding a 21st paid slot to a day is rejected."""
        plan = apply(planner, empty_plan, Weekday.MONDAY, DaySelection(0, 10))
        result = planner.toggle_slot(plan, Weekday.MONDAY, 30)

        assert result.rejection.reason == RejectionReason.DAILY_CAP_EXCEEDED
        assert result.rejection.limit == 10
        assert result.rejection.actual == 10.5
        assert result.plan is plan

    def test_week_cap(self, planner, empty_plan):
        """Adding an 89th paid slot to the week is rejected."""
        plan = empty_plan
        for day in (Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY, Weekday.THURSDAY):
            plan = apply(planner, plan, day, DaySelection(16, 10))
        plan = apply(planner, plan, Weekday.FRIDAY, DaySelection(16, 4))

        result = planner.toggle_slot(plan, Weekday.FRIDAY, 40)

        assert result.rejection.reason == RejectionReason.WEEKLY_CAP_EXCEEDED
        assert result.rejection.limit == 44
        assert result.rejection.actual == 44.5
        assert result.plan is plan

    def test_week_cap_counts_overtime(self, planner, empty_plan):
        """Overtime counts towards the slot week cap like ordinary time."""
        plan = empty_plan
        for day in (Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY, Weekday.THURSDAY):
            plan = apply(planner, plan, day, DaySelection(16, 9, extra_hours=1))
        plan = apply(planner, plan, Weekday.FRIDAY, DaySelection(16, 4))

        result = planner.toggle_slot(plan, Weekday.FRIDAY, 40)

        assert result.rejection.reason == RejectionReason.WEEKLY_CAP_EXCEEDED
        assert result.rejection.message == "weekly cap 44h exceeded, got 44.5h"
        assert result.plan is plan

    def test_week_cap_ignores_lunch(self, planner, empty_plan):
        plan = empty_plan
        for day in (Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY, Weekday.THURSDAY):
            plan = apply(planner, plan, day, DaySelection(16, 10, has_lunch=True))
        plan = apply(planner, plan, Weekday.FRIDAY, DaySelection(16, 3))

        assert planner.toggle_slot(plan, Weekday.FRIDAY, 40).accepted

    def test_removal_allowed_at_cap(self, planner, empty_plan):
        plan = apply(planner, empty_plan, Weekday.MONDAY, DaySelection(0, 10))
        assert planner.toggle_slot(plan, Weekday.MONDAY, 0).accepted

    @pytest.mark.parametrize("index", [-1, 48, "3", None])
    def test_invalid_index(self, planner, empty_plan, index):
        result = planner.toggle_slot(empty_plan, Weekday.MONDAY, index)
        assert result.rejection.reason == RejectionReason.INVALID_SLOT


class TestApplyDragRange:
    """Tests for SlotPlanner.apply_drag_range."""

    def test_select_range(self, planner, empty_plan):
        result = planner.apply_drag_range(empty_plan, Weekday.MONDAY, 16, 23, DragMode.SELECT)
        assert result.accepted
        assert result.plan.day_slots(Weekday.MONDAY) == list(range(16, 24))

    def test_reversed_range(self, planner, empty_plan):
        forward = planner.apply_drag_range(empty_plan, Weekday.MONDAY, 16, 23, DragMode.SELECT)
        backward = planner.apply_drag_range(empty_plan, Weekday.MONDAY, 23, 16, DragMode.SELECT)
        assert forward.plan == backward.plan

    def test_mode_as_string(self, planner, empty_plan):
        result = planner.apply_drag_range(empty_plan, Weekday.MONDAY, 0, 1, "select")
        assert result.plan.day_slots(Weekday.MONDAY) == [0, 1]

    def test_unknown_mode(self, planner, empty_plan):
        result = planner.apply_drag_range(empty_plan, Weekday.MONDAY, 0, 1, "paint")
        assert result.rejection.reason == RejectionReason.INVALID_SELECTION

    def test_range_over_cap_rolled_back(self, planner, empty_plan):
        """A drag that breaks the day cap is discarded as a whole."""
        plan = apply(planner, empty_plan, Weekday.MONDAY, DaySelection(0, 9))
        result = planner.apply_drag_range(plan, Weekday.MONDAY, 18, 25, DragMode.SELECT)

        assert result.rejection.reason == RejectionReason.DAILY_CAP_EXCEEDED
        assert result.plan is plan
        assert result.plan.day_slots(Weekday.MONDAY) == list(range(0, 18))

    def test_deselect_clears_lunch_and_keeps_overtime(self, planner, empty_plan):
        selection = DaySelection(start=16, ordinary_hours=4, has_lunch=True, extra_hours=1)
        plan = apply(planner, empty_plan, Weekday.MONDAY, selection)
        assert plan.day_lunch(Weekday.MONDAY) == [20, 21]
        assert plan.day_overtime(Weekday.MONDAY) == [26, 27]

        result = planner.apply_drag_range(plan, Weekday.MONDAY, 18, 27, DragMode.DESELECT)

        assert result.accepted
        assert result.plan.day_slots(Weekday.MONDAY) == [16, 17, 26, 27]
        assert result.plan.day_lunch(Weekday.MONDAY) == []
        assert result.plan.day_overtime(Weekday.MONDAY) == [26, 27]

    def test_noop_returns_same_plan(self, planner, empty_plan):
        result = planner.apply_drag_range(empty_plan, Weekday.MONDAY, 0, 5, DragMode.DESELECT)
        assert result.accepted
        assert result.plan is empty_plan

    def test_invalid_endpoint(self, planner, empty_plan):
        result = planner.apply_drag_range(empty_plan, Weekday.MONDAY, 0, 48, DragMode.SELECT)
        assert result.rejection.reason == RejectionReason.INVALID_SLOT


class TestToggleLunch:
    """Tests for SlotPlanner.toggle_lunch."""

    @pytest.fixture
    def tuesday_plan(self, planner, empty_plan):
        """Tuesday 08:00-16:00 without lunch."""
        return apply(planner, empty_plan, Weekday.TUESDAY, DaySelection(16, 8))

    def test_mark_lunch(self, planner, tuesday_plan):
        result = planner.toggle_lunch(tuesday_plan, Weekday.TUESDAY, 24)
        assert result.accepted
        assert result.plan.day_lunch(Weekday.TUESDAY) == [24, 25]
        assert day_effective_hours(result.plan, Weekday.TUESDAY) == 7

    def test_second_slot_not_selected(self, planner, empty_plan):
        """Slot 20 occupied but slot 21 free."""
        plan = planner.toggle_slot(empty_plan, Weekday.TUESDAY, 20).plan
        result = planner.toggle_lunch(plan, Weekday.TUESDAY, 20)

        assert result.rejection.reason == RejectionReason.LUNCH_NOT_SELECTED
        assert result.rejection.message.lower() == "both lunch slots must be selected"
        assert result.plan is plan

    def test_first_slot_not_selected(self, planner, tuesday_plan):
        result = planner.toggle_lunch(tuesday_plan, Weekday.TUESDAY, 10)
        assert result.rejection.reason == RejectionReason.LUNCH_NOT_SELECTED

    def test_last_slot_cannot_start_lunch(self, planner, empty_plan):
        plan = planner.apply_drag_range(empty_plan, Weekday.TUESDAY, 40, 47, "select").plan
        result = planner.toggle_lunch(plan, Weekday.TUESDAY, 47)
        assert result.rejection.reason == RejectionReason.INVALID_LUNCH

    def test_slot_46_can_start_lunch(self, planner, empty_plan):
        plan = planner.apply_drag_range(empty_plan, Weekday.TUESDAY, 40, 47, "select").plan
        result = planner.toggle_lunch(plan, Weekday.TUESDAY, 46)
        assert result.plan.day_lunch(Weekday.TUESDAY) == [46, 47]

    def test_toggle_off(self, planner, tuesday_plan):
        plan = planner.toggle_lunch(tuesday_plan, Weekday.TUESDAY, 24).plan
        result = planner.toggle_lunch(plan, Weekday.TUESDAY, 24)
        assert result.accepted
        assert result.plan.day_lunch(Weekday.TUESDAY) == []
        assert result.plan.day_slots(Weekday.TUESDAY) == list(range(16, 32))

    def test_toggle_off_from_second_slot(self, planner, tuesday_plan):
        plan = planner.toggle_lunch(tuesday_plan, Weekday.TUESDAY, 24).plan
        result = planner.toggle_lunch(plan, Weekday.TUESDAY, 25)
        assert result.plan.day_lunch(Weekday.TUESDAY) == []

    def test_one_pair_per_day(self, planner, tuesday_plan):
        """Marking a new pair replaces the previous one."""
        plan = planner.toggle_lunch(tuesday_plan, Weekday.TUESDAY, 24).plan
        plan = planner.toggle_lunch(plan, Weekday.TUESDAY, 20).plan
        assert plan.day_lunch(Weekday.TUESDAY) == [20, 21]

    def test_lunch_on_overtime_rejected(self, planner, empty_plan):
        plan = apply(planner, empty_plan, Weekday.TUESDAY, DaySelection(16, 4, extra_hours=2))
        result = planner.toggle_lunch(plan, Weekday.TUESDAY, 23)
        assert result.rejection.reason == RejectionReason.INVALID_LUNCH

    def test_removing_lunch_from_full_day_rejected(self, planner, empty_plan):
        """Dropping lunch from an 11h day would leave 12 paid hours."""
        selection = DaySelection(start=10, ordinary_hours=11, has_lunch=True)
        plan = apply(planner, empty_plan, Weekday.TUESDAY, selection)
        lunch_start = plan.day_lunch(Weekday.TUESDAY)[0]

        result = planner.toggle_lunch(plan, Weekday.TUESDAY, lunch_start)

        assert result.rejection.reason == RejectionReason.DAILY_CAP_EXCEEDED
        assert result.plan is plan


class TestClearAndDayOff:
    """Tests for clear_day, clear_week and set_day_off."""

    @pytest.fixture
    def busy_plan(self, planner, empty_plan):
        plan = apply(planner, empty_plan, Weekday.MONDAY, DaySelection(16, 8, True, 1))
        return apply(planner, plan, Weekday.TUESDAY, DaySelection(16, 6))

    def test_clear_day(self, planner, busy_plan):
        plan = planner.clear_day(busy_plan, Weekday.MONDAY)
        assert plan.day_slots(Weekday.MONDAY) == []
        assert plan.day_lunch(Weekday.MONDAY) == []
        assert plan.day_overtime(Weekday.MONDAY) == []
        assert plan.day_slots(Weekday.TUESDAY) == list(range(16, 28))

    def test_clear_week_keeps_day_off(self, planner, busy_plan):
        plan = planner.clear_week(busy_plan)
        assert plan.slots == frozenset()
        assert plan.lunch_slots == frozenset()
        assert plan.overtime_slots == frozenset()
        assert plan.day_off is Weekday.SUNDAY

    def test_set_day_off(self, planner, busy_plan):
        assert planner.set_day_off(busy_plan, "domingo").day_off is Weekday.SUNDAY
        assert planner.set_day_off(busy_plan, Weekday.WEDNESDAY).day_off is Weekday.WEDNESDAY
        assert planner.set_day_off(busy_plan, None).day_off is None


class TestPlanResult:
    """Tests for PlanResult."""

    def test_ok(self, empty_plan):
        result = PlanResult.ok(empty_plan)
        assert result.accepted
        assert result.rejection is None

    def test_rejection_str(self, planner, empty_plan):
        result = planner.toggle_slot(empty_plan, Weekday.MONDAY, 99)
        assert str(result.rejection).startswith("[invalid_slot]")

    def test_lunch_and_overtime_stay_inside_slots(self, planner, empty_plan):
        """Every accepted edit keeps lunch and overtime within the slots."""
        plan = apply(planner, empty_plan, Weekday.MONDAY, DaySelection(16, 8, True, 2))
        plan = planner.toggle_slot(plan, Weekday.MONDAY, 16).plan
        plan = planner.apply_drag_range(plan, Weekday.MONDAY, 10, 20, DragMode.DESELECT).plan

        assert plan.lunch_slots <= plan.slots
        assert plan.overtime_slots <= plan.slots
        assert not plan.lunch_slots & plan.overtime_slots
        assert SlotRef(Weekday.MONDAY, 34) in plan.overtime_slots
