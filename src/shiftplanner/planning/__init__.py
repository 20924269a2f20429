"""Week plan editing and aggregation.

``PlannerSession`` lives in ``shiftplanner.planning.session`` and is not
re-exported here, since it depends on the validation and client packages.
"""

from shiftplanner.planning.planner import (
    DragMode,
    PlanResult,
    Rejection,
    RejectionReason,
    SlotPlanner,
)
from shiftplanner.planning.summary import (
    build_weekly_summary,
    contiguous_runs,
    day_effective_hours,
    day_overtime_hours,
    week_extra_hours,
    week_ordinary_hours,
    week_total_hours,
)

__all__ = [
    # Editing
    "DragMode",
    "PlanResult",
    "Rejection",
    "RejectionReason",
    "SlotPlanner",
    # Aggregation
    "build_weekly_summary",
    "contiguous_runs",
    "day_effective_hours",
    "day_overtime_hours",
    "week_extra_hours",
    "week_ordinary_hours",
    "week_total_hours",
]
