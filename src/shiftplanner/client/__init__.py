"""Client for the shifts persistence API."""

from shiftplanner.client.api import ShiftsApiClient, summary_email_days

__all__ = [
    "ShiftsApiClient",
    "summary_email_days",
]
