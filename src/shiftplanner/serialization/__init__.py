"""Conversion between week plans and the shifts API payload."""

from shiftplanner.serialization.payload import (
    PayloadLoad,
    PayloadWarning,
    from_payload,
    to_payload,
)

__all__ = [
    "PayloadLoad",
    "PayloadWarning",
    "from_payload",
    "to_payload",
]
