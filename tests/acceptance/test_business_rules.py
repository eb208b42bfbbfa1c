"""
Business rule acceptance tests.

Exercises the engine the way a grievance back end does: analyzing new
complaints, moving them through their lifecycle and escalating them when
their SLA runs out.
"""

import pytest
from datetime import datetime, timedelta, timezone
from typing import Dict, List

from grievance_core import IntelligenceOrchestrator
from grievance_core.config import IntelligenceSettings
from grievance_core.domain.sla import build_window_summary
from grievance_core.domain.status import assert_role_can_transition, is_terminal, valid_next_statuses
from grievance_core.exceptions import RolePermissionError, TransitionError
from grievance_core.models import AnalysisRequest, ComplaintStatus, Role, SlaCandidate, SlaState, StatusChange
from grievance_core.services import InMemoryCorpusFetcher, StoredComplaint, run_sla_tick


NOW = datetime(2024, 6, 3, 9, 0, tzinfo=timezone.utc)


class InMemorySlaStore:
    """SLA store over plain dictionaries."""

    def __init__(self, complaints: List[SlaCandidate], admins: Dict[str, List[str]]):
        self.complaints = {c.id: c for c in complaints}
        self.admins = admins
        self.history: List[StatusChange] = []
        self.notifications: List[dict] = []

    def find_sla_candidates(self, limit):
        open_complaints = [
            c for c in self.complaints.values()
            if c.status not in (ComplaintStatus.RESOLVED, ComplaintStatus.CLOSED, ComplaintStatus.ESCALATED)
        ]
        return sorted(open_complaints, key=lambda c: c.created_at)[:limit]

    def admin_ids_by_tenant(self, tenant_ids):
        return {tenant: self.admins[tenant] for tenant in tenant_ids if tenant in self.admins}

    def escalate(self, candidate, actor_id):
        self.complaints[candidate.id] = candidate.model_copy(update={"status": ComplaintStatus.ESCALATED})
        self.history.append(StatusChange(
            complaint_id=candidate.id,
            old_status=candidate.status,
            new_status=ComplaintStatus.ESCALATED,
            changed_by_id=actor_id,
            changed_at=NOW
        ))
        return True

    def notify(self, user_ids, complaint_id, title, message):
        for user_id in user_ids:
            self.notifications.append({"userId": user_id, "complaintId": complaint_id, "title": title})


@pytest.fixture
def corpus():
    """Tenant corpus with one earlier water complaint."""
    return InMemoryCorpusFetcher([
        StoredComplaint(
            id="c-100",
            tenant_id="city-a",
            description="No water supply in sector 4 since yesterday morning",
            created_at=NOW - timedelta(hours=3)
        ),
    ])


@pytest.fixture
def orchestrator(corpus):
    """Orchestrator over the tenant corpus."""
    return IntelligenceOrchestrator(corpus, IntelligenceSettings(duplicate_timeout_seconds=1.0))


class TestComplaintIntake:
    """Analysis of newly filed complaints."""

    @pytest.mark.asyncio
    async def test_hazard_report_is_critical(self, orchestrator):
        """Test that a gas leak report is flagged critical and distressed."""
        result = await orchestrator.analyze(AnalysisRequest(
            description="There is a severe gas leak, extremely dangerous, people trapped",
            category=None,
            tenant_id="city-a"
        ))

        assert result.suggested_priority == "CRITICAL"
        assert result.ai_score >= 0.75
        assert result.sentiment_score <= -0.3
        assert result.duplicate_score is not None

    @pytest.mark.asyncio
    async def test_thank_you_note_is_positive(self, orchestrator):
        """Test that praise reads positive and is not urgent."""
        result = await orchestrator.analyze(AnalysisRequest(
            description="Thank you, the water issue was resolved quickly and the officer was very helpful",
            tenant_id="city-a"
        ))

        assert result.sentiment_score >= 0.3
        assert result.suggested_priority in ("LOW", "MEDIUM")

    @pytest.mark.asyncio
    async def test_resubmission_is_flagged(self, orchestrator):
        """Test that the same complaint filed again is recognised as a duplicate."""
        result = await orchestrator.analyze(AnalysisRequest(
            description="No water supply in sector 4 since yesterday morning!",
            category="Water Supply",
            tenant_id="city-a"
        ))

        assert result.duplicate_score >= 0.85
        assert result.suggested_priority == "HIGH"

    @pytest.mark.asyncio
    async def test_duplicates_stay_within_tenant(self, orchestrator):
        """Test that another tenant's complaint never counts as a duplicate."""
        result = await orchestrator.analyze(AnalysisRequest(
            description="No water supply in sector 4 since yesterday morning",
            tenant_id="city-b"
        ))

        assert result.duplicate_score == 0.0


class TestComplaintLifecycle:
    """Status changes made by staff."""

    def test_happy_path(self):
        """Test a complaint worked from OPEN to CLOSED by the right roles."""
        steps = [
            (Role.ADMIN, ComplaintStatus.OPEN, ComplaintStatus.ASSIGNED),
            (Role.OFFICER, ComplaintStatus.ASSIGNED, ComplaintStatus.IN_PROGRESS),
            (Role.OFFICER, ComplaintStatus.IN_PROGRESS, ComplaintStatus.RESOLVED),
            (Role.ADMIN, ComplaintStatus.RESOLVED, ComplaintStatus.CLOSED),
        ]
        for role, current, target in steps:
            assert_role_can_transition(role, current, target)

        assert is_terminal(ComplaintStatus.CLOSED)
        assert valid_next_statuses(ComplaintStatus.CLOSED) == []

    def test_officer_cannot_close(self):
        """Test that closing is reserved to admins."""
        with pytest.raises(RolePermissionError):
            assert_role_can_transition(Role.OFFICER, ComplaintStatus.RESOLVED, ComplaintStatus.CLOSED)

    def test_closed_complaint_cannot_reopen(self):
        """Test that nobody can move a complaint out of CLOSED."""
        with pytest.raises(TransitionError) as exc_info:
            assert_role_can_transition(Role.SUPER_ADMIN, ComplaintStatus.CLOSED, ComplaintStatus.OPEN)
        assert exc_info.value.allowed == []


class TestSlaEscalation:
    """Automatic escalation of overdue complaints."""

    def test_overdue_complaint_is_escalated(self):
        """Test a breached complaint is escalated, recorded and announced."""
        overdue = SlaCandidate(
            id="c-200",
            tenant_id="city-a",
            status=ComplaintStatus.ASSIGNED,
            created_at=NOW - timedelta(hours=30),
            sla_hours=24,
            assigned_to_id="officer-7",
            created_by_id="operator-2"
        )
        on_time = SlaCandidate(
            id="c-201",
            tenant_id="city-a",
            status=ComplaintStatus.OPEN,
            created_at=NOW - timedelta(hours=2),
            sla_hours=24,
            created_by_id="operator-2"
        )
        store = InMemorySlaStore([overdue, on_time], {"city-a": ["admin-1"]})

        assert build_window_summary(overdue.sla_window(48), NOW).state == SlaState.BREACHED

        summary = run_sla_tick(store, now=NOW)

        assert summary.escalated == 1
        assert store.complaints["c-200"].status == ComplaintStatus.ESCALATED
        assert store.complaints["c-201"].status == ComplaintStatus.OPEN
        assert [(h.complaint_id, h.old_status, h.new_status, h.changed_by_id) for h in store.history] == [
            ("c-200", ComplaintStatus.ASSIGNED, ComplaintStatus.ESCALATED, "admin-1")
        ]
        assert {n["userId"] for n in store.notifications} == {"admin-1", "operator-2", "officer-7"}

        # Escalated complaints leave the sweep
        assert run_sla_tick(store, now=NOW + timedelta(hours=1)).escalated == 0

        # A department head picks the escalated complaint back up
        assert_role_can_transition(Role.DEPARTMENT_HEAD, ComplaintStatus.ESCALATED, ComplaintStatus.IN_PROGRESS)
