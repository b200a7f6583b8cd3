"""Hundreds: daily exercise progress tracking with calendar history."""

__version__ = "1.0.0"
