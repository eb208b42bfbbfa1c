# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Core value objects for complaint analysis and lifecycle tracking.
"""

from datetime import datetime
from typing import Optional
from pydantic import Field, field_validator
from .base import EngineModel
from .enums import ComplaintStatus, PriorityTier, SlaState


class PriorityPrediction(EngineModel):
    """Predicted priority tier with a signal-strength confidence."""

    tier: PriorityTier = Field(..., description="Predicted priority tier")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Signal strength, not a probability")

    @property
    def label(self) -> str:
        """Tier label (LOW, MEDIUM, HIGH or CRITICAL)."""
        return self.tier.name


class AnalysisRequest(EngineModel):
    """Input to a complaint-creation or re-analysis event."""

    description: Optional[str] = Field(None, description="Free-text complaint description")
    category: Optional[str] = Field(None, description="Complaint category name")
    tenant_id: str = Field(..., min_length=1, description="Tenant scope for duplicate search")
    exclude_id: Optional[str] = Field(None, description="Complaint to leave out of the corpus (re-analysis)")


class AnalysisResult(EngineModel):
    """Combined output of sentiment, priority and duplicate analysis."""

    sentiment_score: Optional[float] = Field(None, ge=-1.0, le=1.0, description="Tone score, higher is more positive")
    duplicate_score: Optional[float] = Field(None, ge=0.0, le=1.0, description="Max cosine similarity against the tenant corpus")
    suggested_priority: str = Field("MEDIUM", description="Suggested priority label")
    ai_score: Optional[float] = Field(None, ge=0.0, le=1.0, description="Priority prediction confidence")

    @field_validator('suggested_priority')
    @classmethod
    def validate_suggested_priority(cls, v):
        """Validate priority label."""
        if v not in PriorityTier.__members__:
            raise ValueError(f'Unknown priority label: {v}')
        return v

    @classmethod
    def fallback(cls) -> "AnalysisResult":
        """Result used when analysis could not run at all."""
        return cls(
            sentiment_score=None,
            duplicate_score=None,
            suggested_priority=PriorityTier.MEDIUM.name,
            ai_score=None
        )

    def is_pending(self) -> bool:
        """True when no AI score is available ("pending analysis")."""
        return self.sentiment_score is None and self.ai_score is None


class CorpusEntry(EngineModel):
    """One recent complaint description returned by a corpus fetcher."""

    id: str = Field(..., description="Complaint identifier")
    description: Optional[str] = Field(None, description="Complaint description")


class SlaWindow(EngineModel):
    """Creation timestamp and allowed resolution time."""

    created_at: datetime = Field(..., description="Complaint creation timestamp")
    sla_hours: int = Field(..., gt=0, description="Allowed resolution time in hours")


class SlaSummary(EngineModel):
    """Derived SLA view of a complaint at a point in time."""

    state: SlaState = Field(..., description="OK, WARNING or BREACHED")
    deadline: datetime = Field(..., description="Creation timestamp plus the SLA window")
    breached: bool = Field(..., description="Whether the deadline has passed")
    remaining_ms: int = Field(..., ge=0, description="Milliseconds left, 0 when breached")
    overdue_ms: int = Field(..., ge=0, description="Milliseconds past the deadline, 0 when not breached")
    remaining_label: str = Field(..., description="Human readable remaining or overdue duration")


class SlaCandidate(EngineModel):
    """Open complaint considered by the SLA escalation sweep."""

    id: str = Field(..., description="Complaint identifier")
    tenant_id: str = Field(..., description="Owning tenant")
    status: ComplaintStatus = Field(..., description="Current status")
    created_at: datetime = Field(..., description="Complaint creation timestamp")
    sla_hours: Optional[int] = Field(None, gt=0, description="Department SLA hours, if configured")
    assigned_to_id: Optional[str] = Field(None, description="Assigned officer")
    created_by_id: Optional[str] = Field(None, description="User who filed the complaint")

    def sla_window(self, fallback_sla_hours: int) -> SlaWindow:
        """SLA window, using the fallback when the department has none configured."""
        return SlaWindow(created_at=self.created_at, sla_hours=self.sla_hours or fallback_sla_hours)


class StatusChange(EngineModel):
    """Append-only status history entry."""

    complaint_id: str = Field(..., description="Complaint identifier")
    old_status: ComplaintStatus = Field(..., description="Status before the change")
    new_status: ComplaintStatus = Field(..., description="Status after the change")
    changed_by_id: str = Field(..., description="User who made the change")
    changed_at: datetime = Field(..., description="When the change happened")
