"""Conversion between week plans and the shifts API payload.

The persistence API stores a week keyed by ISO date:

- ``shifts``: ordinary slot indices (lunch and overtime excluded)
- ``lunchHours``: first slot of the one-hour lunch
- ``overtimeHours``: whole overtime hours, placed right after the last
  ordinary or lunch slot of the day
- ``dayOff``: rest day name (``plannedDayOff`` and ``diaDescanso`` are
  accepted aliases on load)

Loading recovers day by day: a malformed day is dropped with a warning and
the rest of the week still loads.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Union

from shiftplanner.domain.models import (
    LUNCH_SLOTS,
    Employee,
    SlotRef,
    WeekPlan,
    Weekday,
    is_valid_slot_index,
    overtime_placement,
)
from shiftplanner.errors import MalformedPayloadError

logger = logging.getLogger(__name__)

DAY_OFF_KEYS = ("plannedDayOff", "dayOff", "diaDescanso")


@dataclass(frozen=True)
class PayloadWarning:
    """A problem found while loading a payload."""

    key: str
    message: str

    def __str__(self) -> str:
        return f"{self.key}: {self.message}"


@dataclass
class PayloadLoad:
    """Result of loading a payload: the plan plus anything that was dropped."""

    plan: WeekPlan
    warnings: list[PayloadWarning] = field(default_factory=list)

    @property
    def dropped_keys(self) -> list[str]:
        return [w.key for w in self.warnings]


def to_payload(
    plan: WeekPlan,
    employee: Optional[Employee] = None,
    center_name: Optional[str] = None,
) -> dict:
    """Serialize a plan into the save request body.

    Raises:
        MalformedPayloadError: If a day's overtime is not a whole number of
            hours, or does not sit right after the day's last ordinary or
            lunch slot. The payload can represent neither, and loading it
            back would move or drop that overtime.
    """
    shifts: dict[str, list[int]] = {}
    lunch_hours: dict[str, int] = {}
    overtime_hours: dict[str, int] = {}

    for day in Weekday:
        key = plan.date_for(day).isoformat()

        ordinary = plan.day_ordinary(day)
        if ordinary:
            shifts[key] = ordinary

        lunch = plan.day_lunch(day)
        if lunch:
            lunch_hours[key] = lunch[0]

        overtime = plan.day_overtime(day)
        if len(overtime) % 2:
            raise MalformedPayloadError(
                f"{key}: overtime of {len(overtime)} half-hour slots is not "
                f"a whole number of hours"
            )
        if overtime:
            _check_overtime_position(key, ordinary, lunch, overtime)
            overtime_hours[key] = len(overtime) // 2

    day_off = plan.day_off
    if day_off is None and employee is not None:
        day_off = employee.default_day_off

    return {
        "employeeId": plan.employee_id,
        "laundryCenterId": plan.center_id,
        "shifts": shifts,
        "lunchHours": lunch_hours,
        "overtimeHours": overtime_hours,
        "dayOff": day_off.display_name if day_off else None,
        "empleado": employee.to_snapshot(plan.day_off) if employee else None,
        "lavanderia": (
            {"id": str(plan.center_id), "nombre": center_name}
            if plan.center_id
            else None
        ),
    }


def from_payload(
    payload: Mapping,
    week_start: date,
    employee_id: str = "",
    center_id: str = "",
    default_day_off: Optional[Union[Weekday, str]] = None,
) -> PayloadLoad:
    """Rebuild a plan from a load response.

    Args:
        payload: Response body with ``shifts``, ``lunchHours``,
            ``overtimeHours`` and a day-off key.
        week_start: Any date of the week being loaded.
        employee_id: Owner of the plan.
        center_id: Work location of the plan.
        default_day_off: Rest day used when the payload carries none.

    Returns:
        PayloadLoad with the plan and a warning for each dropped day.

    Raises:
        MalformedPayloadError: If the payload or one of its sections is not
            a mapping.
    """
    if not isinstance(payload, Mapping):
        raise MalformedPayloadError(
            f"Payload must be a mapping, got {type(payload).__name__}"
        )

    shifts = _section(payload, "shifts")
    lunch_hours = _section(payload, "lunchHours")
    overtime_hours = _section(payload, "overtimeHours")

    warnings: list[PayloadWarning] = []
    week_start = WeekPlan.week_of(week_start)
    day_off = _read_day_off(payload, default_day_off, warnings)
    empty = WeekPlan.empty(employee_id, center_id, week_start, day_off)

    slots: set[SlotRef] = set()
    lunch_slots: set[SlotRef] = set()
    overtime_slots: set[SlotRef] = set()

    keys = sorted(set(shifts) | set(lunch_hours) | set(overtime_hours), key=str)
    for key in keys:
        try:
            day = _day_for_key(empty, key)
            day_slots, day_lunch, day_overtime = _load_day(
                shifts.get(key),
                lunch_hours.get(key),
                overtime_hours.get(key),
            )
        except MalformedPayloadError as exc:
            warning = PayloadWarning(key=str(key), message=str(exc))
            logger.warning("Dropping day from shifts payload: %s", warning)
            warnings.append(warning)
            continue

        slots.update(SlotRef(day, i) for i in day_slots)
        lunch_slots.update(SlotRef(day, i) for i in day_lunch)
        overtime_slots.update(SlotRef(day, i) for i in day_overtime)

    plan = WeekPlan(
        employee_id=employee_id,
        center_id=center_id,
        week_start=week_start,
        day_off=day_off,
        slots=frozenset(slots),
        lunch_slots=frozenset(lunch_slots),
        overtime_slots=frozenset(overtime_slots),
    )
    return PayloadLoad(plan=plan, warnings=warnings)


def _check_overtime_position(key: str, ordinary, lunch, overtime) -> None:
    try:
        expected = list(overtime_placement(ordinary, lunch, len(overtime)))
    except ValueError as exc:
        raise MalformedPayloadError(f"{key}: {exc}") from exc
    if overtime != expected:
        raise MalformedPayloadError(
            f"{key}: overtime at slots {overtime} would reload at {expected}"
        )


def _section(payload: Mapping, name: str) -> Mapping:
    value = payload.get(name)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise MalformedPayloadError(
            f"Section {name!r} must be a mapping, got {type(value).__name__}"
        )
    return value


def _read_day_off(
    payload: Mapping,
    default: Optional[Union[Weekday, str]],
    warnings: list[PayloadWarning],
) -> Optional[Weekday]:
    for key in DAY_OFF_KEYS:
        value = payload.get(key)
        if not value:
            continue
        try:
            return Weekday.parse(value)
        except ValueError as exc:
            warning = PayloadWarning(key=key, message=str(exc))
            logger.warning("Ignoring day off in shifts payload: %s", warning)
            warnings.append(warning)
            break
    if default is None:
        return None
    return Weekday.parse(default)


def _day_for_key(plan: WeekPlan, key) -> Weekday:
    try:
        day_date = date.fromisoformat(str(key)[:10])
    except ValueError:
        raise MalformedPayloadError(f"Not an ISO date: {key!r}")
    day = plan.day_for(day_date)
    if day is None:
        raise MalformedPayloadError(
            f"Date {day_date} is outside the week starting {plan.week_start}"
        )
    return day


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _load_day(shifts, lunch, overtime) -> tuple[set[int], set[int], set[int]]:
    """Decode one day's entries into (slots, lunch, overtime) index sets."""
    if shifts is None:
        shifts = []
    if not isinstance(shifts, (list, tuple)):
        raise MalformedPayloadError(f"Shift slots must be a list, got {shifts!r}")
    for index in shifts:
        if not is_valid_slot_index(index):
            raise MalformedPayloadError(f"Invalid slot index: {index!r}")
    slots = set(shifts)

    lunch_indices: set[int] = set()
    if lunch is not None:
        if _is_int(lunch):
            pair = [lunch, lunch + 1]
        elif isinstance(lunch, (list, tuple)):
            pair = sorted(lunch) if all(_is_int(i) for i in lunch) else list(lunch)
        else:
            raise MalformedPayloadError(f"Invalid lunch value: {lunch!r}")
        if (
            len(pair) != LUNCH_SLOTS
            or not all(is_valid_slot_index(i) for i in pair)
            or pair[1] != pair[0] + 1
        ):
            raise MalformedPayloadError(
                f"Lunch must be two contiguous slots in [0, 47], got {lunch!r}"
            )
        lunch_indices = set(pair)
        slots |= lunch_indices

    overtime_indices: set[int] = set()
    hours = _overtime_hours(overtime)
    if hours:
        try:
            placement = overtime_placement(slots - lunch_indices, lunch_indices, hours * 2)
        except ValueError as exc:
            raise MalformedPayloadError(str(exc)) from exc
        overtime_indices = set(placement)
        slots |= overtime_indices

    return slots, lunch_indices, overtime_indices


def _overtime_hours(value) -> int:
    if value is None:
        return 0
    if _is_int(value):
        hours = value
    elif isinstance(value, str) and value.strip().isdigit():
        hours = int(value.strip())
    else:
        raise MalformedPayloadError(f"Overtime must be whole hours, got {value!r}")
    if hours < 0:
        raise MalformedPayloadError(f"Overtime cannot be negative, got {value!r}")
    return hours
