"""Core functionality for time tracking."""

from legal_time.core.exceptions import (
    AlreadyClosedError,
    NotFoundError,
    TrackerError,
    ValidationError,
)
from legal_time.core.models import ActivityLog, TaskType, TimeEntry, User
from legal_time.core.taxonomy import TaskClassifier, TaskTaxonomy, classify
from legal_time.core.tracker import TimeTracker

__all__ = [
    "TimeEntry",
    "TaskType",
    "User",
    "ActivityLog",
    "TaskTaxonomy",
    "TaskClassifier",
    "classify",
    "TimeTracker",
    "TrackerError",
    "ValidationError",
    "NotFoundError",
    "AlreadyClosedError",
]
