"""Weekly aggregation and summary building.

Read-only views derived from a ``WeekPlan``: per-day and per-week hour
totals, and the ``WeeklySummary`` structure handed to export code. Nothing
here mutates a plan.
"""

from collections.abc import Iterable

from shiftplanner.domain.models import (
    BlockType,
    DaySummary,
    LunchWindow,
    WeekPlan,
    Weekday,
    WeeklySummary,
    WorkBlock,
    slot_to_time,
)


def _count(slot_set, day: Weekday) -> int:
    return sum(1 for s in slot_set if s.day is day)


def day_paid_slots(plan: WeekPlan, day: Weekday) -> int:
    """Occupied slots of a day that are not lunch (ordinary plus extra)."""
    return _count(plan.slots, day) - _count(plan.lunch_slots, day)


def day_effective_hours(plan: WeekPlan, day: Weekday) -> float:
    """Ordinary hours of a day: occupied slots minus lunch and overtime."""
    ordinary = (
        _count(plan.slots, day)
        - _count(plan.lunch_slots, day)
        - _count(plan.overtime_slots, day)
    )
    return ordinary / 2


def day_overtime_hours(plan: WeekPlan, day: Weekday) -> float:
    return _count(plan.overtime_slots, day) / 2


def day_total_hours(plan: WeekPlan, day: Weekday) -> float:
    return day_effective_hours(plan, day) + day_overtime_hours(plan, day)


def week_ordinary_hours(plan: WeekPlan) -> float:
    return sum(day_effective_hours(plan, day) for day in Weekday)


def week_extra_hours(plan: WeekPlan) -> float:
    return sum(day_overtime_hours(plan, day) for day in Weekday)


def week_total_hours(plan: WeekPlan) -> float:
    return week_ordinary_hours(plan) + week_extra_hours(plan)


def week_paid_slots(plan: WeekPlan) -> int:
    """Occupied slots of the week that are not lunch (ordinary plus extra)."""
    return len(plan.slots) - len(plan.lunch_slots)


def contiguous_runs(indices: Iterable[int]) -> list[tuple[int, int]]:
    """Split slot indices into maximal runs of consecutive values.

    Returns:
        List of (start, end) pairs with ``end`` exclusive, in ascending order.
    """
    runs = []
    start = prev = None
    for idx in sorted(set(indices)):
        if start is None:
            start = prev = idx
        elif idx == prev + 1:
            prev = idx
        else:
            runs.append((start, prev + 1))
            start = prev = idx
    if start is not None:
        runs.append((start, prev + 1))
    return runs


def _blocks(indices: list[int], block_type: BlockType) -> list[tuple[int, WorkBlock]]:
    return [
        (
            start,
            WorkBlock(
                block_type=block_type,
                start=slot_to_time(start),
                end=slot_to_time(end),
                hours=(end - start) / 2,
            ),
        )
        for start, end in contiguous_runs(indices)
    ]


def build_day_summary(plan: WeekPlan, day: Weekday) -> DaySummary:
    """Summarize one day into ordinary/extra blocks and a lunch window."""
    ordinary = _blocks(plan.day_ordinary(day), BlockType.ORDINARY)
    extra = _blocks(plan.day_overtime(day), BlockType.EXTRA)
    blocks = tuple(block for _, block in sorted(ordinary + extra, key=lambda b: b[0]))

    lunch = None
    lunch_indices = plan.day_lunch(day)
    if lunch_indices:
        lunch = LunchWindow(
            start=slot_to_time(lunch_indices[0]),
            end=slot_to_time(lunch_indices[-1] + 1),
        )

    return DaySummary(
        day=day,
        date=plan.date_for(day),
        blocks=blocks,
        lunch=lunch,
        ordinary_hours=day_effective_hours(plan, day),
        extra_hours=day_overtime_hours(plan, day),
        is_day_off=plan.is_day_off(day),
    )


def build_weekly_summary(plan: WeekPlan) -> WeeklySummary:
    """Build the self-describing weekly summary of a plan."""
    days = tuple(build_day_summary(plan, day) for day in Weekday)
    ordinary = sum(d.ordinary_hours for d in days)
    extra = sum(d.extra_hours for d in days)
    return WeeklySummary(
        employee_id=plan.employee_id,
        center_id=plan.center_id,
        week_start=plan.week_start,
        week_end=plan.week_end,
        day_off=plan.day_off,
        days=days,
        ordinary_hours=ordinary,
        extra_hours=extra,
        total_hours=ordinary + extra,
    )
