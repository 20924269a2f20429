"""Shift slot planner for weekly employee shift plans."""

__version__ = "0.1.0"
