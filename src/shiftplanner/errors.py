"""Exceptions raised at the planner's boundaries.

Slot edits never raise for expected rejections; they return a result
object instead (see ``shiftplanner.planning.planner``). The exceptions here
cover payloads, transport and the save gate.
"""

from typing import Optional


class ShiftPlannerError(Exception):
    """Base class for all planner errors."""


class MalformedPayloadError(ShiftPlannerError):
    """A persistence payload cannot be read or produced."""


class TransportError(ShiftPlannerError):
    """A request to the shifts API failed.

    Attributes:
        status_code: HTTP status of the response, None for network errors.
        message: Server-provided message or a description of the failure.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.message} (HTTP {self.status_code})"


class SaveInProgressError(ShiftPlannerError):
    """A save was requested while a previous one has not resolved."""


class PlanValidationError(ShiftPlannerError):
    """A plan failed the save gate."""

    def __init__(self, result):
        self.result = result
        messages = "; ".join(str(e) for e in result.errors)
        super().__init__(messages or "plan failed validation")
