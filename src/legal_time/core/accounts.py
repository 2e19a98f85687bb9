"""User registry and account activity log.

Sign-in only checks that an active account exists; no credentials are
stored or verified.
"""

import logging
from typing import TYPE_CHECKING, Optional

from legal_time.core.clock import Clock, SystemClock
from legal_time.core.exceptions import NotFoundError, ValidationError
from legal_time.core.models import USER_ROLES, ActivityLog, TimeEntry, User
from legal_time.core.storage import StorageManager

if TYPE_CHECKING:
    from legal_time.core.tracker import TimeTracker

logger = logging.getLogger(__name__)

DEMO_USERS = [
    ("admin", "admin@example.com", "admin"),
    ("Ray", "Ray@example.com", "manager"),
    ("AJ", "AJ@example.com", "user"),
    ("Ron", "Ron@example.com", "user"),
    ("Armand", "Armand@example.com", "user"),
]


class AccountService:
    """Register users, sign them in and out, and record what happened."""

    def __init__(self, storage: StorageManager, clock: Optional[Clock] = None):
        """Initialize account service.

        Args:
            storage: Storage manager holding users and the activity log
            clock: Time source. Uses the system clock if None.
        """
        self.storage = storage
        self.clock = clock or SystemClock()

    def _log(self, user: User, action: str, details: Optional[str] = None) -> None:
        self.storage.append_activity(
            ActivityLog(
                user_id=user.id,
                username=user.username,
                action=action,
                timestamp=self.clock.now(),
                details=details,
            )
        )

    def list_users(self) -> list[User]:
        """Get all registered users."""
        return self.storage.load_users()

    def find_user(self, username: str) -> Optional[User]:
        """Look up a user by name, ignoring case."""
        wanted = username.strip().lower()
        for user in self.storage.load_users():
            if user.username.lower() == wanted:
                return user
        return None

    def get_user(self, username: str) -> User:
        """Look up a user by name.

        Raises:
            NotFoundError: If no such user exists
        """
        user = self.find_user(username)
        if user is None:
            raise NotFoundError(f"User not found: {username}")
        return user

    def register(self, username: str, email: str, role: str = "user") -> User:
        """Register a new user.

        Args:
            username: Login name
            email: Contact address
            role: admin, manager or user

        Returns:
            Created user

        Raises:
            ValidationError: On missing fields, unknown role or duplicates
        """
        username = username.strip()
        email = email.strip()
        if not username:
            raise ValidationError("Username is required")
        if not email or "@" not in email:
            raise ValidationError(f"Invalid email address: {email!r}")
        if role not in USER_ROLES:
            raise ValidationError(f"Unknown role {role!r}; expected one of {', '.join(USER_ROLES)}")

        users = self.storage.load_users()
        for existing in users:
            if (
                existing.username.lower() == username.lower()
                or existing.email.lower() == email.lower()
            ):
                raise ValidationError("Username or email already exists")

        user = User(username=username, email=email, role=role, created_at=self.clock.now())
        users.append(user)
        self.storage.save_users(users)
        self._log(user, "Registration", f"New user account created with role: {role}")
        logger.info(f"Registered {username} ({role})")
        return user

    def sign_in(self, username: str) -> User:
        """Sign a user in.

        Raises:
            NotFoundError: If the user does not exist or is inactive
        """
        user = self.find_user(username)
        if user is None or not user.is_active:
            raise NotFoundError("Invalid credentials or inactive account")
        self._log(user, "Login", "User logged in successfully")
        return user

    def sign_out(self, username: str, tracker: "TimeTracker") -> Optional[TimeEntry]:
        """Sign a user out, ending whatever they were tracking.

        Args:
            username: User to sign out
            tracker: Tracker holding the user's entries

        Returns:
            The entry that was ended, if one was running
        """
        user = self.get_user(username)
        stopped = tracker.stop_active(user.id)
        details = f"Ended {stopped.task}" if stopped else None
        self._log(user, "Logout", details)
        return stopped

    def deactivate(self, username: str) -> User:
        """Mark a user inactive so they can no longer sign in."""
        users = self.storage.load_users()
        wanted = username.strip().lower()
        for user in users:
            if user.username.lower() == wanted:
                user.status = "inactive"
                self.storage.save_users(users)
                self._log(user, "Deactivated")
                return user
        raise NotFoundError(f"User not found: {username}")

    def activity(self, user_id: Optional[str] = None) -> list[ActivityLog]:
        """Get activity records, newest first, optionally for one user."""
        logs = self.storage.load_activity()
        if user_id is not None:
            logs = [log for log in logs if log.user_id == user_id]
        return list(reversed(logs))

    def seed_demo_users(self) -> list[User]:
        """Create the demo accounts when no user is registered yet."""
        if self.storage.load_users():
            return []
        return [self.register(name, email, role) for name, email, role in DEMO_USERS]
