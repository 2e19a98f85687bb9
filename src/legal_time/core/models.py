"""Core data models for time tracking."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4


class TaskType(str, Enum):
    """Productivity category of a task."""

    PROD_DIRECT = "Prod Direct"
    PROD_INDIRECT = "Prod Indirect"
    NON_PROD = "Non-Prod"
    UNCATEGORIZED = "Uncategorized"


@dataclass
class TimeEntry:
    """Time tracking entry representing a work session.

    Attributes:
        id: Unique identifier (UUID)
        user_id: Owner of the entry
        task: Task name as entered or selected
        jurisdiction: Jurisdiction label
        task_type: Category derived from the task at creation time
        start_time: When the entry started
        case_id: Case identifier (optional)
        end_time: When the entry ended (None while active)
        total_time: Duration in milliseconds, set together with end_time
        created_at: When this record was created
        updated_at: Last update time
    """

    user_id: str
    task: str
    jurisdiction: str
    task_type: TaskType
    start_time: datetime
    id: UUID = field(default_factory=uuid4)
    case_id: Optional[str] = None
    end_time: Optional[datetime] = None
    total_time: Optional[int] = None
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    @property
    def is_active(self) -> bool:
        """Check if this entry is still running."""
        return self.end_time is None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for CSV/JSON serialization."""
        return {
            "id": str(self.id),
            "user_id": self.user_id,
            "case_id": self.case_id or "",
            "task": self.task,
            "jurisdiction": self.jurisdiction,
            "task_type": self.task_type.value,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else "",
            "total_time": self.total_time if self.total_time is not None else "",
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TimeEntry":
        """Create TimeEntry from dictionary (CSV/JSON deserialization)."""
        total_time = data.get("total_time")
        return cls(
            id=UUID(data["id"]),
            user_id=data["user_id"],
            case_id=data["case_id"] if data.get("case_id") else None,
            task=data["task"],
            jurisdiction=data.get("jurisdiction") or "",
            task_type=TaskType(data["task_type"]),
            start_time=datetime.fromisoformat(data["start_time"]),
            end_time=datetime.fromisoformat(data["end_time"]) if data.get("end_time") else None,
            total_time=int(total_time) if total_time not in (None, "") else None,
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"]),
        )


USER_ROLES = ("admin", "manager", "user")


@dataclass
class User:
    """Registered tracker user.

    Attributes:
        username: Login name
        email: Contact address
        id: Unique identifier
        role: One of admin, manager, user
        status: active or inactive
        created_at: Registration timestamp
    """

    username: str
    email: str
    id: str = field(default_factory=lambda: str(uuid4()))
    role: str = "user"
    status: str = "active"
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    @property
    def is_admin(self) -> bool:
        """Admins and managers may review other users' statistics."""
        return self.role in ("admin", "manager")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for CSV/JSON serialization."""
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "role": self.role,
            "status": self.status,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "User":
        """Create User from dictionary (CSV/JSON deserialization)."""
        return cls(
            id=data["id"],
            username=data["username"],
            email=data["email"],
            role=data.get("role") or "user",
            status=data.get("status") or "active",
            created_at=datetime.fromisoformat(data["created_at"]),
        )


@dataclass
class ActivityLog:
    """Audit record of an account action (login, logout, registration)."""

    user_id: str
    username: str
    action: str
    timestamp: datetime
    id: str = field(default_factory=lambda: str(uuid4()))
    details: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for CSV/JSON serialization."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "username": self.username,
            "action": self.action,
            "timestamp": self.timestamp.isoformat(),
            "details": self.details or "",
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ActivityLog":
        """Create ActivityLog from dictionary (CSV/JSON deserialization)."""
        return cls(
            id=data["id"],
            user_id=data["user_id"],
            username=data["username"],
            action=data["action"],
            timestamp=datetime.fromisoformat(data["timestamp"]),
            details=data["details"] if data.get("details") else None,
        )
