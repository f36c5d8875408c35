"""
AuthService -- identity and session provider.

Responsibility:
    Logs users in and out against the user store and answers "who is acting"
    for every other service.  The authenticated profile (without password)
    lives under the session key in a separate, session-scoped store.

Architecture position:
    Kernel > Services.  Consumed by ReportStore, InstallmentService,
    UserService and the CLI.

Invariants enforced:
    - The session profile never contains the password.
    - An empty user store is seeded with the configured users on first use.
    - Every permission decision goes through ``domain.access.can``.

Failure modes:
    - NotAuthenticatedError from ``require_user`` when nobody is logged in.
    - PermissionDeniedError from ``require`` when the capability is missing.
    - CorruptRecordError when the stored user list or session profile is
      not the expected shape.

Non-goals:
    - Real authentication.  Passwords are stored and compared in plaintext.
"""

from __future__ import annotations

from typing import Any, Iterable

from sales_kernel.domain.access import Capability, User, can
from sales_kernel.domain.clock import Clock
from sales_kernel.domain.store import KeyValueStore, MemoryStore, Versioned
from sales_kernel.exceptions import (
    CorruptRecordError,
    NotAuthenticatedError,
    PermissionDeniedError,
)
from sales_kernel.logging_config import LogContext, get_logger
from sales_kernel.services.base import BaseService

logger = get_logger("services.auth")

DEFAULT_USERS_KEY = "sales_report_all_users"
DEFAULT_SESSION_KEY = "sales_report_user"


def without_password(record: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in record.items() if k != "password"}


class AuthService(BaseService):
    """
    Login/logout and current-user lookup.

    ``store`` holds the user list (durable); ``session_store`` holds the
    current profile and defaults to a fresh MemoryStore, so a new process
    starts logged out.
    """

    def __init__(
        self,
        store: KeyValueStore,
        session_store: KeyValueStore | None = None,
        seed_users: Iterable[dict[str, Any]] = (),
        users_key: str = DEFAULT_USERS_KEY,
        session_key: str = DEFAULT_SESSION_KEY,
        clock: Clock | None = None,
    ):
        super().__init__(store, clock)
        self.session_store = session_store if session_store is not None else MemoryStore()
        self.users_key = users_key
        self.session_key = session_key
        self._seed_users = [dict(u) for u in seed_users]

    # -- user list -----------------------------------------------------------

    def load_users(self) -> Versioned:
        """
        The stored user list and its version, seeding it if absent.

        Raises:
            CorruptRecordError: stored value is not a list of objects.
        """
        current = self.store.get(self.users_key)
        if current.value is None:
            version = self.store.write(self.users_key, self._seed_users, expected_version=current.version)
            logger.info("users_seeded", extra={"count": len(self._seed_users)})
            return Versioned([dict(u) for u in self._seed_users], version)
        users = current.value
        if not isinstance(users, list) or not all(isinstance(u, dict) for u in users):
            raise CorruptRecordError(self.users_key, "expected a list of user objects")
        return current

    # -- session -------------------------------------------------------------

    def login(self, username: str, password: str) -> User | None:
        """
        Authenticate and start a session.

        Returns:
            The user profile, or None when the credentials do not match.
        """
        users = self.load_users().value
        record = next(
            (u for u in users if u.get("username") == username and u.get("password") == password),
            None,
        )
        if record is None:
            logger.info("login_failed", extra={"username": username})
            return None

        profile = without_password(record)
        user = User.from_record(profile)
        self.session_store.write(self.session_key, user.to_record())
        LogContext.set(actor_id=user.id)
        logger.info("login_succeeded", extra={"user_id": user.id, "role": user.role.name})
        return user

    def logout(self) -> None:
        user = self.get_current_user()
        self.session_store.delete(self.session_key)
        if user is not None:
            logger.info("logout", extra={"user_id": user.id})
        LogContext.clear("actor_id")

    def get_current_user(self) -> User | None:
        """
        The logged-in user, or None.

        Raises:
            CorruptRecordError: the session profile cannot be decoded.
        """
        profile = self.session_store.read(self.session_key)
        if profile is None:
            return None
        try:
            return User.from_record(profile)
        except (KeyError, TypeError, ValueError) as exc:
            raise CorruptRecordError(self.session_key, str(exc)) from exc

    def is_authenticated(self) -> bool:
        return self.get_current_user() is not None

    def is_supervisor(self) -> bool:
        user = self.get_current_user()
        return user is not None and user.is_supervisor

    # -- guards --------------------------------------------------------------

    def require_user(self, action: str) -> User:
        """
        Raises:
            NotAuthenticatedError: nobody is logged in.
        """
        user = self.get_current_user()
        if user is None:
            raise NotAuthenticatedError(action)
        return user

    def require(self, capability: Capability, action: str) -> User:
        """
        The current user, if they hold ``capability``.

        Raises:
            NotAuthenticatedError: nobody is logged in.
            PermissionDeniedError: the user lacks the capability.
        """
        user = self.require_user(action)
        if not can(user, capability):
            logger.warning(
                "permission_denied",
                extra={"user_id": user.id, "capability": capability.value},
            )
            raise PermissionDeniedError(action, user.id)
        return user
