"""Timesheet submission and review backend."""

__version__ = "0.1.0"
