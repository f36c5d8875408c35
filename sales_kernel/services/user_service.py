"""
Service layer for user management.

Supervisors list, create, update and delete users.  Every method checks
MANAGE_USERS first and raises PermissionDeniedError otherwise.  Passwords
never leave this service.
"""

from __future__ import annotations

from typing import Any, Mapping

from sales_kernel.domain.access import AGENT_ROLE, ALL_REGIONS, SUPERVISOR_ROLE, Capability
from sales_kernel.exceptions import (
    DuplicateUsernameError,
    MissingFieldError,
    UserNotFoundError,
    ValidationError,
)
from sales_kernel.logging_config import get_logger
from sales_kernel.services.auth_service import AuthService, without_password
from sales_kernel.services.base import BaseService

logger = get_logger("services.users")

_EDITABLE_FIELDS = ("username", "password", "name", "role", "region")


def _require(data: Mapping[str, Any], *names: str) -> None:
    for name in names:
        if not str(data.get(name) or "").strip():
            raise MissingFieldError(name)


def _check_role(data: Mapping[str, Any]) -> None:
    if data.get("role") not in (AGENT_ROLE, SUPERVISOR_ROLE):
        raise ValidationError(f"Unknown role: {data.get('role')!r}")


class UserService(BaseService):
    """Supervisor-only CRUD over the stored user list."""

    def __init__(self, auth: AuthService):
        super().__init__(auth.store, auth.clock)
        self.auth = auth

    def get_all_users(self) -> list[dict[str, Any]]:
        """All users without passwords."""
        self.auth.require(Capability.MANAGE_USERS, "list users")
        return [without_password(u) for u in self.auth.load_users().value]

    def create_user(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """
        Create a user with id ``user-<epoch ms>``.

        Raises:
            PermissionDeniedError: caller is not a supervisor.
            MissingFieldError: username, password or name blank.
            DuplicateUsernameError: username already taken.
        """
        actor = self.auth.require(Capability.MANAGE_USERS, "create users")
        _require(data, "username", "password", "name")
        record = {k: data[k] for k in _EDITABLE_FIELDS if k in data}
        record.setdefault("role", AGENT_ROLE)
        _check_role(record)
        if record["role"] == SUPERVISOR_ROLE:
            record["region"] = ALL_REGIONS

        current = self.auth.load_users()
        users = list(current.value)
        if any(u.get("username") == record["username"] for u in users):
            raise DuplicateUsernameError(record["username"])

        record["id"] = f"user-{self.clock.epoch_millis()}"
        users.append(record)
        self.store.write(self.auth.users_key, users, expected_version=current.version)
        logger.info("user_created", extra={"user_id": record["id"], "created_by": actor.id})
        return without_password(record)

    def update_user(self, user_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        """
        Replace a user's details, keeping the id.

        A blank password keeps the stored one.

        Raises:
            PermissionDeniedError: caller is not a supervisor.
            UserNotFoundError: no user with that id.
            MissingFieldError: username or name blank.
            DuplicateUsernameError: username taken by another user.
        """
        actor = self.auth.require(Capability.MANAGE_USERS, "update users")
        _require(data, "username", "name")

        current = self.auth.load_users()
        users = list(current.value)
        index = next((i for i, u in enumerate(users) if u.get("id") == user_id), None)
        if index is None:
            raise UserNotFoundError(user_id)
        if any(u.get("username") == data["username"] and u.get("id") != user_id for u in users):
            raise DuplicateUsernameError(data["username"])

        existing = users[index]
        updated = {k: data[k] for k in _EDITABLE_FIELDS if k in data}
        if not updated.get("password"):
            updated["password"] = existing.get("password", "")
        updated.setdefault("role", existing.get("role", AGENT_ROLE))
        updated.setdefault("region", existing.get("region", ""))
        _check_role(updated)
        if updated["role"] == SUPERVISOR_ROLE:
            updated["region"] = ALL_REGIONS
        updated["id"] = user_id

        users[index] = updated
        self.store.write(self.auth.users_key, users, expected_version=current.version)
        logger.info("user_updated", extra={"user_id": user_id, "updated_by": actor.id})
        return without_password(updated)

    def delete_user(self, user_id: str) -> bool:
        """
        Raises:
            PermissionDeniedError: caller is not a supervisor.
            UserNotFoundError: no user with that id.
        """
        actor = self.auth.require(Capability.MANAGE_USERS, "delete users")
        current = self.auth.load_users()
        remaining = [u for u in current.value if u.get("id") != user_id]
        if len(remaining) == len(current.value):
            raise UserNotFoundError(user_id)
        self.store.write(self.auth.users_key, remaining, expected_version=current.version)
        logger.info("user_deleted", extra={"user_id": user_id, "deleted_by": actor.id})
        return True
