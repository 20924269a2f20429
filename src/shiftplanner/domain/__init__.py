"""Domain models and business rules for shift planning."""

from shiftplanner.domain.models import (
    LUNCH_SLOTS,
    SLOT_MINUTES,
    SLOTS_PER_DAY,
    BlockType,
    DaySelection,
    DaySummary,
    Employee,
    LunchWindow,
    SlotRef,
    WeekPlan,
    Weekday,
    WeeklySummary,
    WorkBlock,
    format_hours,
    slot_to_time,
)
from shiftplanner.domain.policies import DefaultHoursPolicy, HoursPolicy

__all__ = [
    # Models
    "BlockType",
    "DaySelection",
    "DaySummary",
    "Employee",
    "LunchWindow",
    "SlotRef",
    "WeekPlan",
    "Weekday",
    "WeeklySummary",
    "WorkBlock",
    "format_hours",
    "slot_to_time",
    # Constants
    "LUNCH_SLOTS",
    "SLOT_MINUTES",
    "SLOTS_PER_DAY",
    # Policies
    "DefaultHoursPolicy",
    "HoursPolicy",
]
