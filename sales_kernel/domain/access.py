"""
Access -- roles, users and the one capability check.

Responsibility:
    Represents a user's role as a closed variant (``Agent(region)`` or
    ``Supervisor()``) and routes every permission decision in the kernel
    through ``can()``.  The report access filter is ``visible_reports()``.

Invariants enforced:
    - Supervisors see and may delete every report.
    - Agents see reports whose ``agentName`` is their name or whose
      ``region`` is their region, and may delete only reports they created.
    - No user means no access.

Failure modes:
    - ``ValueError`` from ``role_from_record`` on an unknown role string.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping

from sales_kernel.domain.report import Report

SUPERVISOR_ROLE = "supervisor"
AGENT_ROLE = "agent"
ALL_REGIONS = "All"


@dataclass(frozen=True)
class Agent:
    """Sales agent bound to one region."""

    region: str

    @property
    def name(self) -> str:
        return AGENT_ROLE


@dataclass(frozen=True)
class Supervisor:
    """Supervisor with access to every region."""

    @property
    def region(self) -> str:
        return ALL_REGIONS

    @property
    def name(self) -> str:
        return SUPERVISOR_ROLE


Role = Agent | Supervisor


def role_from_record(role: str, region: str | None) -> Role:
    if role == SUPERVISOR_ROLE:
        return Supervisor()
    if role == AGENT_ROLE:
        return Agent(region or "")
    raise ValueError(f"Unknown role: {role!r}")


@dataclass(frozen=True)
class User:
    """Authenticated user profile. Never carries the password."""

    id: str
    username: str
    name: str
    role: Role

    @property
    def region(self) -> str:
        return self.role.region

    @property
    def is_supervisor(self) -> bool:
        return isinstance(self.role, Supervisor)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "User":
        return cls(
            id=record["id"],
            username=record.get("username", ""),
            name=record.get("name", ""),
            role=role_from_record(record.get("role", ""), record.get("region")),
        )

    def to_record(self) -> dict[str, Any]:
        """Session profile layout (no password)."""
        return {
            "id": self.id,
            "username": self.username,
            "name": self.name,
            "role": self.role.name,
            "region": self.region,
        }


class Capability(str, Enum):
    SUBMIT_REPORT = "submit_report"
    VIEW_REPORT = "view_report"
    VIEW_ALL_REPORTS = "view_all_reports"
    DELETE_REPORT = "delete_report"
    MANAGE_USERS = "manage_users"
    VIEW_STATISTICS = "view_statistics"
    EXPORT_REPORTS = "export_reports"
    ADVANCED_FILTER = "advanced_filter"


_SUPERVISOR_ONLY = frozenset({
    Capability.VIEW_ALL_REPORTS,
    Capability.MANAGE_USERS,
    Capability.VIEW_STATISTICS,
    Capability.EXPORT_REPORTS,
    Capability.ADVANCED_FILTER,
})


def can(user: User | None, capability: Capability, report: Report | None = None) -> bool:
    """
    Single permission check for the kernel.

    ``report`` is required for VIEW_REPORT and DELETE_REPORT.
    """
    if user is None:
        return False
    if user.is_supervisor:
        return True
    if capability in _SUPERVISOR_ONLY:
        return False
    if capability is Capability.SUBMIT_REPORT:
        return True
    if report is None:
        return False
    if capability is Capability.VIEW_REPORT:
        return report.agent_name == user.name or report.region == user.region
    if capability is Capability.DELETE_REPORT:
        return report.user_id == user.id
    return False


def visible_reports(user: User | None, reports: Iterable[Report]) -> list[Report]:
    """Access filter: the subset of ``reports`` the user may read."""
    if user is None:
        return []
    if can(user, Capability.VIEW_ALL_REPORTS):
        return list(reports)
    return [r for r in reports if can(user, Capability.VIEW_REPORT, r)]
