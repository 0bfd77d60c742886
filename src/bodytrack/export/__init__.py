"""Terminal output for tracking data."""

from bodytrack.export.formatters import TableFormatter

__all__ = ["TableFormatter"]
