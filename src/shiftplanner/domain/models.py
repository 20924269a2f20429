"""Domain models for the shift slot planner.

This module contains the core data structures of the planner: weekdays,
half-hour slot references, the immutable week plan, the transient day
selection used to configure one day at a time, and the read-only weekly
summary handed to export and notification code.
"""

import unicodedata
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Optional

SLOT_MINUTES = 30
SLOTS_PER_DAY = 48
LUNCH_SLOTS = 2
DAYS_PER_WEEK = 7


def _normalize_name(name: str) -> str:
    """Lowercase a day name and strip accents ("Miércoles" -> "miercoles")."""
    decomposed = unicodedata.normalize("NFKD", name.strip().lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


class Weekday(Enum):
    """Days of a Monday-Sunday planning week."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @property
    def offset(self) -> int:
        """Zero-based position within the week (Monday = 0)."""
        return _WEEKDAY_ORDER.index(self)

    @property
    def display_name(self) -> str:
        """English title-case name, as sent on the wire."""
        return self.value.capitalize()

    @classmethod
    def from_offset(cls, offset: int) -> "Weekday":
        if not 0 <= offset < DAYS_PER_WEEK:
            raise ValueError(f"Weekday offset out of range: {offset}")
        return _WEEKDAY_ORDER[offset]

    @classmethod
    def from_date(cls, d: date) -> "Weekday":
        return cls.from_offset(d.weekday())

    @classmethod
    def parse(cls, name: str) -> "Weekday":
        """Parse an English or Spanish day name, ignoring case and accents.

        Raises:
            ValueError: If the name is not a known weekday.
        """
        if isinstance(name, Weekday):
            return name
        key = _normalize_name(str(name))
        if key in _WEEKDAY_ALIASES:
            return _WEEKDAY_ALIASES[key]
        raise ValueError(f"Unknown weekday name: {name!r}")


_WEEKDAY_ORDER = list(Weekday)

_WEEKDAY_ALIASES = {day.value: day for day in Weekday}
_WEEKDAY_ALIASES.update({
    "lunes": Weekday.MONDAY,
    "martes": Weekday.TUESDAY,
    "miercoles": Weekday.WEDNESDAY,
    "jueves": Weekday.THURSDAY,
    "viernes": Weekday.FRIDAY,
    "sabado": Weekday.SATURDAY,
    "domingo": Weekday.SUNDAY,
})


def slot_to_time(index: int) -> str:
    """Format a slot boundary as HH:mm.

    Slot ``i`` starts at ``i * 30`` minutes past midnight. Index 48 is the end
    of the day and renders as "24:00".
    """
    hours, mins = divmod(index * SLOT_MINUTES, 60)
    return f"{hours:02d}:{mins:02d}"


def format_hours(hours: float) -> str:
    """Render hours without a trailing ".0" (11.0 -> "11", 9.5 -> "9.5")."""
    return f"{hours:g}"


def is_valid_slot_index(index) -> bool:
    """Check that a value is an integer slot index in [0, 47]."""
    return (
        isinstance(index, int)
        and not isinstance(index, bool)
        and 0 <= index < SLOTS_PER_DAY
    )


@dataclass(frozen=True)
class SlotRef:
    """A half-hour slot of the planning week.

    Attributes:
        day: Day within the week.
        index: Slot index in [0, 47]; covers [index*30min, (index+1)*30min).
    """

    day: Weekday
    index: int

    def __post_init__(self):
        if not isinstance(self.day, Weekday):
            raise ValueError(f"SlotRef day must be a Weekday, got {self.day!r}")
        if not is_valid_slot_index(self.index):
            raise ValueError(f"Slot index out of range: {self.index!r}")

    @property
    def sort_key(self) -> tuple[int, int]:
        return (self.day.offset, self.index)

    def __repr__(self) -> str:
        return f"SlotRef({self.day.value} {slot_to_time(self.index)})"


def day_refs(day: Weekday, indices) -> frozenset[SlotRef]:
    """Build slot references for a set of indices on one day."""
    return frozenset(SlotRef(day, i) for i in indices)


def overtime_placement(ordinary, lunch, slot_count: int) -> range:
    """Slots that ``slot_count`` overtime slots occupy when rebuilt for a day.

    Overtime is stored as whole hours only, so its position is implied: it
    starts right after the last ordinary or lunch slot of the day.

    Raises:
        ValueError: If the day has no ordinary slots, or the block would run
            past the end of the day.
    """
    if not ordinary:
        raise ValueError(
            f"Cannot place {format_hours(slot_count / 2)}h of overtime on a day "
            f"without ordinary slots"
        )
    last = max(set(ordinary) | set(lunch))
    end = last + 1 + slot_count
    if end > SLOTS_PER_DAY:
        raise ValueError(
            f"{format_hours(slot_count / 2)}h of overtime after slot {last} "
            f"runs past the end of the day"
        )
    return range(last + 1, end)


@dataclass(frozen=True)
class WeekPlan:
    """One employee's planned week at 30-minute granularity.

    Plans are immutable; every edit produces a new plan (see
    ``SlotPlanner``). Lunch and overtime slots are subsets of ``slots``.

    Attributes:
        employee_id: Owner of the plan.
        center_id: Work location (laundry center).
        week_start: Monday of the planned week.
        day_off: Rest day for this specific week, if any.
        slots: All occupied slots.
        lunch_slots: Unpaid lunch slots (0 or 2 contiguous per day).
        overtime_slots: Slots counted as overtime.
    """

    employee_id: str
    center_id: str
    week_start: date
    day_off: Optional[Weekday] = None
    slots: frozenset[SlotRef] = field(default_factory=frozenset)
    lunch_slots: frozenset[SlotRef] = field(default_factory=frozenset)
    overtime_slots: frozenset[SlotRef] = field(default_factory=frozenset)

    def __post_init__(self):
        if self.week_start.weekday() != 0:
            raise ValueError(f"week_start must be a Monday, got {self.week_start}")
        for name in ("slots", "lunch_slots", "overtime_slots"):
            value = getattr(self, name)
            if not isinstance(value, frozenset):
                object.__setattr__(self, name, frozenset(value))

    @classmethod
    def empty(
        cls,
        employee_id: str,
        center_id: str,
        week_start: date,
        day_off: Optional[Weekday] = None,
    ) -> "WeekPlan":
        """Create a plan with no slots assigned."""
        return cls(
            employee_id=employee_id,
            center_id=center_id,
            week_start=week_start,
            day_off=day_off,
        )

    @staticmethod
    def week_of(d: date) -> date:
        """Monday of the week containing ``d``."""
        return d - timedelta(days=d.weekday())

    @property
    def week_end(self) -> date:
        """Sunday of the planned week."""
        return self.week_start + timedelta(days=DAYS_PER_WEEK - 1)

    @property
    def dates(self) -> list[date]:
        """The seven dates of the week, Monday first."""
        return [self.week_start + timedelta(days=i) for i in range(DAYS_PER_WEEK)]

    def date_for(self, day: Weekday) -> date:
        return self.week_start + timedelta(days=day.offset)

    def day_for(self, d: date) -> Optional[Weekday]:
        """Weekday of a date inside this week, None if outside."""
        delta = (d - self.week_start).days
        if 0 <= delta < DAYS_PER_WEEK:
            return Weekday.from_offset(delta)
        return None

    def day_slots(self, day: Weekday) -> list[int]:
        """Sorted occupied slot indices for a day."""
        return sorted(s.index for s in self.slots if s.day is day)

    def day_lunch(self, day: Weekday) -> list[int]:
        return sorted(s.index for s in self.lunch_slots if s.day is day)

    def day_overtime(self, day: Weekday) -> list[int]:
        return sorted(s.index for s in self.overtime_slots if s.day is day)

    def day_ordinary(self, day: Weekday) -> list[int]:
        """Occupied slots that are neither lunch nor overtime."""
        excluded = set(self.day_lunch(day)) | set(self.day_overtime(day))
        return [i for i in self.day_slots(day) if i not in excluded]

    def has_lunch(self, day: Weekday) -> bool:
        return any(s.day is day for s in self.lunch_slots)

    def is_day_off(self, day: Weekday) -> bool:
        return self.day_off is day

    def without_day(self, day: Weekday) -> "WeekPlan":
        """Copy of the plan with every slot of ``day`` removed."""
        return WeekPlan(
            employee_id=self.employee_id,
            center_id=self.center_id,
            week_start=self.week_start,
            day_off=self.day_off,
            slots=frozenset(s for s in self.slots if s.day is not day),
            lunch_slots=frozenset(s for s in self.lunch_slots if s.day is not day),
            overtime_slots=frozenset(s for s in self.overtime_slots if s.day is not day),
        )


@dataclass(frozen=True)
class DaySelection:
    """Configuration of a single day, as entered in the day dialog.

    Attributes:
        start: First slot of the ordinary block.
        ordinary_hours: Ordinary hours, in 0.5 increments.
        has_lunch: Whether a one-hour lunch splits the ordinary block.
        extra_hours: Whole overtime hours appended after the block.
    """

    start: int
    ordinary_hours: float
    has_lunch: bool = False
    extra_hours: int = 0

    @property
    def ordinary_slots(self) -> int:
        return int(round(self.ordinary_hours * 2))

    @property
    def end(self) -> int:
        """Exclusive end of the ordinary block, lunch included."""
        return self.start + self.ordinary_slots + (LUNCH_SLOTS if self.has_lunch else 0)

    @property
    def lunch_start(self) -> Optional[int]:
        """Lunch sits at the midpoint of the ordinary hours."""
        if not self.has_lunch:
            return None
        return self.start + self.ordinary_slots // 2

    @property
    def overtime_start(self) -> int:
        return self.end

    @property
    def overtime_end(self) -> int:
        return self.end + self.extra_hours * 2

    @property
    def day_hours(self) -> float:
        """Paid hours of the day (ordinary plus extra)."""
        return self.ordinary_slots / 2 + self.extra_hours

    @classmethod
    def from_plan(cls, plan: WeekPlan, day: Weekday) -> "DaySelection":
        """Pre-fill a selection from a day's current assignment.

        Empty days default to an 8-hour block starting at 08:00.
        """
        ordinary = plan.day_ordinary(day)
        if not ordinary:
            return cls(start=16, ordinary_hours=8.0, has_lunch=False, extra_hours=0)
        return cls(
            start=ordinary[0],
            ordinary_hours=len(ordinary) / 2,
            has_lunch=plan.has_lunch(day),
            extra_hours=len(plan.day_overtime(day)) // 2,
        )


class BlockType(Enum):
    """Kinds of work block in a weekly summary."""

    ORDINARY = "ordinary"
    EXTRA = "extra"


@dataclass(frozen=True)
class WorkBlock:
    """A maximal contiguous run of ordinary or extra slots."""

    block_type: BlockType
    start: str
    end: str
    hours: float

    def to_dict(self) -> dict:
        return {
            "type": self.block_type.value,
            "start": self.start,
            "end": self.end,
            "hours": self.hours,
        }


@dataclass(frozen=True)
class LunchWindow:
    start: str
    end: str

    def to_dict(self) -> dict:
        return {"start": self.start, "end": self.end}


@dataclass(frozen=True)
class DaySummary:
    """Summary of one day of the week.

    Attributes:
        day: Day within the week.
        date: Calendar date.
        blocks: Work blocks sorted by start time.
        lunch: Lunch window, if the day has one.
        ordinary_hours: Ordinary hours (lunch and overtime excluded).
        extra_hours: Overtime hours.
        is_day_off: Whether this is the plan's rest day.
    """

    day: Weekday
    date: date
    blocks: tuple[WorkBlock, ...] = ()
    lunch: Optional[LunchWindow] = None
    ordinary_hours: float = 0.0
    extra_hours: float = 0.0
    is_day_off: bool = False

    @property
    def total_hours(self) -> float:
        return self.ordinary_hours + self.extra_hours

    def to_dict(self) -> dict:
        return {
            "day": self.day.display_name,
            "date": self.date.isoformat(),
            "blocks": [b.to_dict() for b in self.blocks],
            "lunch": self.lunch.to_dict() if self.lunch else None,
            "ordinaryHours": self.ordinary_hours,
            "extraHours": self.extra_hours,
            "totalHours": self.total_hours,
            "isDayOff": self.is_day_off,
        }


@dataclass(frozen=True)
class WeeklySummary:
    """Read-only weekly view handed to export and notification code.

    Carries no references into the slot model.
    """

    employee_id: str
    center_id: str
    week_start: date
    week_end: date
    day_off: Optional[Weekday]
    days: tuple[DaySummary, ...]
    ordinary_hours: float
    extra_hours: float
    total_hours: float

    def to_dict(self) -> dict:
        return {
            "employeeId": self.employee_id,
            "centerId": self.center_id,
            "weekStart": self.week_start.isoformat(),
            "weekEnd": self.week_end.isoformat(),
            "dayOff": self.day_off.display_name if self.day_off else None,
            "days": [d.to_dict() for d in self.days],
            "ordinaryHours": self.ordinary_hours,
            "extraHours": self.extra_hours,
            "totalHours": self.total_hours,
        }


@dataclass
class Employee:
    """Employee directory entry, read-only to the planner.

    Attributes:
        id: Directory identifier.
        name: Display name.
        cedula: National ID number.
        phone: Mobile number.
        salary: Monthly salary, passed through untouched.
        email: Address used for summary emails.
        default_day_off: Usual rest day; a week plan may override it.
    """

    id: str
    name: str
    cedula: str = ""
    phone: Optional[str] = None
    salary: Optional[float] = None
    email: Optional[str] = None
    default_day_off: Optional[Weekday] = Weekday.SUNDAY

    def to_snapshot(self, day_off: Optional[Weekday] = None) -> dict:
        """Denormalized snapshot stored alongside a saved plan."""
        rest_day = day_off or self.default_day_off
        return {
            "id": str(self.id),
            "nombre": self.name,
            "cedula": self.cedula,
            "celular": self.phone,
            "salario": self.salary,
            "correo": self.email,
            "diaDescanso": rest_day.display_name if rest_day else None,
        }
