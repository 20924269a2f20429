"""Policy definitions for labour-hour limits.

Limits are kept separate from the planner so they can be tested on their
own and changed without touching the editing logic.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class HoursPolicy(ABC):
    """Abstract base class for daily and weekly hour limits."""

    @abstractmethod
    def daily_cap_hours(self, has_lunch: bool) -> float:
        """Maximum paid hours (ordinary plus extra) in one day.

        Args:
            has_lunch: Whether the day includes a lunch break.
        """
        pass

    @abstractmethod
    def weekly_ordinary_cap(self) -> float:
        """Maximum ordinary hours in a week."""
        pass

    @abstractmethod
    def weekly_extra_cap(self) -> float:
        """Maximum overtime hours in a week."""
        pass

    @abstractmethod
    def weekly_total_cap(self) -> float:
        """Maximum ordinary plus overtime hours in a week."""
        pass

    @abstractmethod
    def slot_day_cap(self) -> int:
        """Maximum paid slots in a day when editing slot by slot."""
        pass

    @abstractmethod
    def slot_week_cap(self) -> int:
        """Maximum paid slots in a week when editing slot by slot."""
        pass

    @abstractmethod
    def max_selection_hours(self) -> float:
        """Upper bound for ordinary or extra hours in one day selection."""
        pass


@dataclass
class DefaultHoursPolicy(HoursPolicy):
    """Default labour-hour limits.

    Daily: 10 paid hours, 11 when the day has a lunch break.
    Weekly: 44 ordinary hours, 12 extra hours, 56 in total.
    Slot editing (click and drag): 20 paid slots a day, 88 paid
    slots a week (lunch excluded, overtime included).
    """

    daily_cap: float = 10.0
    daily_cap_with_lunch: float = 11.0
    weekly_ordinary: float = 44.0
    weekly_extra: float = 12.0
    weekly_total: float = 56.0
    day_slot_cap: int = 20
    week_slot_cap: int = 88
    selection_hours: float = 12.0

    def daily_cap_hours(self, has_lunch: bool) -> float:
        return self.daily_cap_with_lunch if has_lunch else self.daily_cap

    def weekly_ordinary_cap(self) -> float:
        return self.weekly_ordinary

    def weekly_extra_cap(self) -> float:
        return self.weekly_extra

    def weekly_total_cap(self) -> float:
        return self.weekly_total

    def slot_day_cap(self) -> int:
        return self.day_slot_cap

    def slot_week_cap(self) -> int:
        return self.week_slot_cap

    def max_selection_hours(self) -> float:
        return self.selection_hours
