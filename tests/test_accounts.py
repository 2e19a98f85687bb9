"""Tests for user accounts and the activity log."""

from datetime import datetime

import pytest  # type: ignore[import-not-found]

from legal_time.core.accounts import DEMO_USERS, AccountService
from legal_time.core.clock import FrozenClock
from legal_time.core.exceptions import NotFoundError, ValidationError
from legal_time.core.storage import StorageManager
from legal_time.core.tracker import TimeTracker


@pytest.fixture
def accounts(storage: StorageManager, clock: FrozenClock) -> AccountService:
    """Account service over temporary storage."""
    return AccountService(storage, clock)


class TestRegister:
    """Test registration."""

    def test_register(self, accounts: AccountService, clock: FrozenClock) -> None:
        """Test registering a user."""
        user = accounts.register("AJ", "AJ@example.com")

        assert user.role == "user"
        assert user.created_at == clock.now()
        assert accounts.get_user("aj").id == user.id

    def test_register_logs_activity(self, accounts: AccountService) -> None:
        """Test that registration is recorded."""
        user = accounts.register("Ray", "Ray@example.com", role="manager")

        logs = accounts.activity(user.id)
        assert [log.action for log in logs] == ["Registration"]
        assert "manager" in logs[0].details

    @pytest.mark.parametrize(
        "username,email,role",
        [
            ("", "x@example.com", "user"),
            ("AJ", "not-an-email", "user"),
            ("AJ", "AJ@example.com", "owner"),
        ],
    )
    def test_invalid_registration(
        self, accounts: AccountService, username: str, email: str, role: str
    ) -> None:
        """Test field validation."""
        with pytest.raises(ValidationError):
            accounts.register(username, email, role)

    def test_duplicates_rejected(self, accounts: AccountService) -> None:
        """Test that usernames and emails are unique, ignoring case."""
        accounts.register("AJ", "AJ@example.com")

        with pytest.raises(ValidationError, match="already exists"):
            accounts.register("aj", "other@example.com")
        with pytest.raises(ValidationError, match="already exists"):
            accounts.register("Other", "aj@EXAMPLE.com")

        assert len(accounts.list_users()) == 1


class TestSignInOut:
    """Test signing in and out."""

    def test_sign_in(self, accounts: AccountService) -> None:
        """Test signing in an active user."""
        accounts.register("AJ", "AJ@example.com")

        user = accounts.sign_in("AJ")

        assert user.username == "AJ"
        assert accounts.activity(user.id)[0].action == "Login"

    def test_sign_in_unknown(self, accounts: AccountService) -> None:
        """Test signing in a user that does not exist."""
        with pytest.raises(NotFoundError, match="Invalid credentials"):
            accounts.sign_in("ghost")

    def test_sign_in_deactivated(self, accounts: AccountService) -> None:
        """Test that inactive users cannot sign in."""
        accounts.register("AJ", "AJ@example.com")
        accounts.deactivate("AJ")

        with pytest.raises(NotFoundError):
            accounts.sign_in("AJ")

    def test_sign_out_ends_running_entry(
        self, accounts: AccountService, clock: FrozenClock
    ) -> None:
        """Test that signing out stops the user's session."""
        user = accounts.register("AJ", "AJ@example.com")
        tracker = TimeTracker(clock=clock)
        entry = tracker.start_entry("RECORDS", "FL-Hillsborough", user.id)
        clock.advance(minutes=10)

        stopped = accounts.sign_out("AJ", tracker)

        assert stopped is entry
        assert entry.total_time == 600_000
        assert accounts.activity(user.id)[0].action == "Logout"

    def test_sign_out_without_session(self, accounts: AccountService, clock: FrozenClock) -> None:
        """Test signing out with nothing running."""
        accounts.register("AJ", "AJ@example.com")

        assert accounts.sign_out("AJ", TimeTracker(clock=clock)) is None

    def test_deactivate_unknown(self, accounts: AccountService) -> None:
        """Test deactivating a missing user."""
        with pytest.raises(NotFoundError):
            accounts.deactivate("ghost")


class TestActivity:
    """Test the activity log."""

    def test_newest_first(self, accounts: AccountService, clock: FrozenClock) -> None:
        """Test activity ordering."""
        accounts.register("AJ", "AJ@example.com")
        clock.set(datetime(2025, 3, 5, 10, 0, 0))
        accounts.sign_in("AJ")

        logs = accounts.activity()

        assert [log.action for log in logs] == ["Login", "Registration"]
        assert logs[0].timestamp == datetime(2025, 3, 5, 10, 0, 0)

    def test_seed_demo_users(self, accounts: AccountService) -> None:
        """Test that demo accounts are only created once."""
        created = accounts.seed_demo_users()

        assert len(created) == len(DEMO_USERS)
        assert accounts.get_user("admin").is_admin
        assert accounts.seed_demo_users() == []
