"""Legal Time Tracker - time tracking for legal-services staff."""

__version__ = "0.1.0"
