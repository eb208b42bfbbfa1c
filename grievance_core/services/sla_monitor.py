# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Periodic SLA sweep that escalates complaints past their deadline.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Protocol

from apscheduler.schedulers.background import BackgroundScheduler
from opentelemetry import trace

from ..config import IntelligenceSettings, get_settings
from ..domain.sla import is_window_breached
from ..domain.status import assert_valid_transition
from ..models.enums import ComplaintStatus
from ..models.entities import SlaCandidate

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)

ESCALATION_TITLE = "Complaint Auto-Escalated (SLA Breach)"
ESCALATION_MESSAGE = "A complaint has exceeded its SLA window and has been automatically escalated."
JOB_ID = "sla-monitor"


class SlaStore(Protocol):
    """Persistence operations the SLA sweep depends on."""

    def find_sla_candidates(self, limit: int) -> List[SlaCandidate]:
        """Oldest non-deleted complaints with a department whose SLA clock still runs."""
        ...

    def admin_ids_by_tenant(self, tenant_ids: Iterable[str]) -> Dict[str, List[str]]:
        """Active ADMIN and SUPER_ADMIN user ids per tenant."""
        ...

    def escalate(self, candidate: SlaCandidate, actor_id: str) -> bool:
        """Set status to ESCALATED and append a history entry."""
        ...

    def notify(self, user_ids: Iterable[str], complaint_id: str, title: str, message: str) -> None:
        """Create in-app notifications."""
        ...


@dataclass
class SlaTickSummary:
    """Counters for one SLA sweep."""
    scanned: int = 0
    escalated: int = 0
    errors: int = 0


def escalate_complaint(store: SlaStore, candidate: SlaCandidate, admin_ids: List[str]) -> bool:
    """
    Escalate one breached complaint and notify the people involved.

    The first tenant admin acts as the author of the change, falling back to
    the complaint's creator.

    Returns:
        True if the complaint was escalated
    """
    actor_id = admin_ids[0] if admin_ids else candidate.created_by_id
    if not actor_id:
        logger.warning("No actor available to escalate complaint", extra={"complaint_id": candidate.id})
        return False

    assert_valid_transition(candidate.status, ComplaintStatus.ESCALATED)

    if not store.escalate(candidate, actor_id):
        return False

    recipients = list(dict.fromkeys(
        user_id for user_id in [*admin_ids, candidate.created_by_id, candidate.assigned_to_id] if user_id
    ))
    if recipients:
        try:
            store.notify(recipients, candidate.id, ESCALATION_TITLE, ESCALATION_MESSAGE)
        except Exception as e:
            # Notification delivery never undoes an escalation
            logger.warning(
                "Failed to notify escalation",
                extra={"complaint_id": candidate.id, "error": str(e)}
            )

    return True


def run_sla_tick(
    store: SlaStore,
    batch_size: int = 100,
    fallback_sla_hours: int = 48,
    now: Optional[datetime] = None
) -> SlaTickSummary:
    """
    Scan open complaints and escalate those past their SLA deadline.

    Args:
        store: Persistence collaborator
        batch_size: Maximum complaints scanned per tick
        fallback_sla_hours: Window for complaints without a department SLA
        now: Evaluation time, defaults to the current time

    Returns:
        SlaTickSummary; failures are counted, never raised
    """
    summary = SlaTickSummary()
    now = now or datetime.now(timezone.utc)

    with tracer.start_as_current_span("sla_monitor.tick") as span:
        try:
            candidates = store.find_sla_candidates(batch_size)
            summary.scanned = len(candidates)

            breached = [
                c for c in candidates
                if is_window_breached(c.sla_window(fallback_sla_hours), now)
            ]

            if breached:
                admin_map = store.admin_ids_by_tenant(sorted({c.tenant_id for c in breached}))

                for candidate in breached:
                    try:
                        if escalate_complaint(store, candidate, admin_map.get(candidate.tenant_id, [])):
                            summary.escalated += 1
                    except Exception as e:
                        summary.errors += 1
                        logger.error(
                            f"Failed to escalate complaint {candidate.id}",
                            extra={"complaint_id": candidate.id, "error": str(e)}
                        )

        except Exception as e:
            summary.errors += 1
            logger.error("SLA tick failed", extra={"error": str(e)}, exc_info=True)

        span.set_attributes({
            "sla.scanned": summary.scanned,
            "sla.escalated": summary.escalated,
            "sla.errors": summary.errors
        })

    return summary


class SlaMonitor:
    """Runs ``run_sla_tick`` on a background interval schedule."""

    def __init__(
        self,
        store: SlaStore,
        settings: Optional[IntelligenceSettings] = None,
        scheduler: Optional[BackgroundScheduler] = None
    ):
        self.store = store
        self.settings = settings or get_settings()
        self._scheduler = scheduler
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def tick(self) -> SlaTickSummary:
        """Run one sweep and log it when something happened."""
        summary = run_sla_tick(
            self.store,
            batch_size=self.settings.sla_monitor_batch_size,
            fallback_sla_hours=self.settings.sla_fallback_hours
        )
        if summary.escalated > 0 or summary.errors > 0:
            logger.info(
                f"SLA tick: scanned={summary.scanned} escalated={summary.escalated} errors={summary.errors}"
            )
        return summary

    def start(self) -> None:
        """Schedule the sweep, running it once immediately. No-op if already running."""
        if self._running:
            return

        if self._scheduler is None:
            self._scheduler = BackgroundScheduler()

        self._scheduler.add_job(
            self.tick,
            "interval",
            minutes=self.settings.sla_monitor_interval_minutes,
            next_run_time=datetime.now(),
            id=JOB_ID,
            max_instances=1,
            coalesce=True,
            replace_existing=True
        )
        self._scheduler.start()
        self._running = True
        logger.info(f"SLA monitor started (every {self.settings.sla_monitor_interval_minutes} min)")

    def stop(self) -> None:
        """Stop the schedule. No-op if not running."""
        if not self._running:
            return

        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        self._running = False
        logger.info("SLA monitor stopped")
