"""Tests for roles and the capability check (sales_kernel/domain/access.py)."""

import pytest

from sales_kernel.domain.access import (
    Agent,
    Capability,
    Supervisor,
    User,
    can,
    role_from_record,
    visible_reports,
)
from sales_kernel.domain.report import Report

SUPERVISOR = User("admin-uuid", "Remon", "Admin User", Supervisor())
AGENT = User("agent1-uuid", "agent1", "Remon", Agent("Egypt"))
OTHER_AGENT = User("agent2-uuid", "agent2", "Sarah Johnson", Agent("UAE"))


class TestRoles:

    def test_role_from_record(self):
        assert role_from_record("supervisor", "anything") == Supervisor()
        assert role_from_record("agent", "UAE") == Agent("UAE")
        assert role_from_record("agent", None) == Agent("")

    def test_unknown_role_rejected(self):
        with pytest.raises(ValueError):
            role_from_record("admin", "All")

    def test_supervisor_region_is_all(self):
        assert SUPERVISOR.region == "All"
        assert SUPERVISOR.is_supervisor
        assert not AGENT.is_supervisor

    def test_profile_has_no_password(self):
        record = User.from_record({
            "id": "u1", "username": "x", "password": "secret",
            "name": "X", "role": "agent", "region": "Egypt",
        }).to_record()
        assert "password" not in record
        assert record == {"id": "u1", "username": "x", "name": "X", "role": "agent", "region": "Egypt"}


class TestCan:

    @pytest.mark.parametrize("capability", list(Capability))
    def test_nobody_can_nothing(self, capability):
        assert not can(None, capability, Report())

    @pytest.mark.parametrize("capability", list(Capability))
    def test_supervisor_can_everything(self, capability):
        assert can(SUPERVISOR, capability, Report(user_id="someone-else"))

    @pytest.mark.parametrize(
        "capability",
        [
            Capability.VIEW_ALL_REPORTS,
            Capability.MANAGE_USERS,
            Capability.VIEW_STATISTICS,
            Capability.EXPORT_REPORTS,
            Capability.ADVANCED_FILTER,
        ],
    )
    def test_agent_denied_supervisor_capabilities(self, capability):
        assert not can(AGENT, capability)

    def test_agent_may_submit(self):
        assert can(AGENT, Capability.SUBMIT_REPORT)

    def test_agent_views_by_name_or_region(self):
        assert can(AGENT, Capability.VIEW_REPORT, Report(agent_name="Remon", region="UAE"))
        assert can(AGENT, Capability.VIEW_REPORT, Report(agent_name="Someone", region="Egypt"))
        assert not can(AGENT, Capability.VIEW_REPORT, Report(agent_name="Someone", region="UAE"))

    def test_agent_deletes_only_own(self):
        assert can(AGENT, Capability.DELETE_REPORT, Report(user_id="agent1-uuid"))
        assert not can(AGENT, Capability.DELETE_REPORT, Report(user_id="agent2-uuid", region="Egypt"))

    def test_report_scoped_capability_needs_report(self):
        assert not can(AGENT, Capability.DELETE_REPORT)


class TestVisibleReports:

    def test_filters_for_agent(self):
        reports = [
            Report(id="a", agent_name="Remon", region="UAE"),
            Report(id="b", agent_name="X", region="Egypt"),
            Report(id="c", agent_name="X", region="UAE"),
        ]
        assert [r.id for r in visible_reports(AGENT, reports)] == ["a", "b"]
        assert [r.id for r in visible_reports(OTHER_AGENT, reports)] == ["a", "c"]
        assert [r.id for r in visible_reports(SUPERVISOR, reports)] == ["a", "b", "c"]
        assert visible_reports(None, reports) == []
