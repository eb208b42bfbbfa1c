# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Tests for SLA deadline, state and summary calculations.
"""

import pytest
from datetime import datetime, timedelta, timezone

from grievance_core.domain.sla import (
    build_sla_summary,
    build_window_summary,
    count_sla_breached,
    format_duration,
    get_sla_deadline,
    get_sla_remaining_ms,
    get_sla_state,
    is_sla_breached,
    is_window_breached
)
from grievance_core.exceptions import ConfigError
from grievance_core.models.entities import SlaCandidate, SlaWindow
from grievance_core.models.enums import ComplaintStatus, SlaState


class TestSlaDeadline:
    """Test deadline and remaining time."""

    def test_deadline(self, created_at):
        """Test that the deadline is creation time plus the window."""
        assert get_sla_deadline(created_at, 48) == created_at + timedelta(hours=48)

    def test_iso_string_timestamp(self, created_at):
        """Test that ISO-8601 strings with a Z suffix are accepted."""
        deadline = get_sla_deadline("2024-03-01T08:00:00Z", 24)
        assert deadline == created_at + timedelta(hours=24)

    def test_remaining_ms(self, created_at):
        """Test remaining milliseconds before the deadline."""
        now = created_at + timedelta(hours=36)
        assert get_sla_remaining_ms(created_at, 48, now) == 43_200_000

    def test_remaining_ms_negative_after_deadline(self, created_at):
        """Test that remaining time goes negative once breached."""
        now = created_at + timedelta(hours=48, seconds=1)
        assert get_sla_remaining_ms(created_at, 48, now) == -1000

    def test_naive_timestamps_are_utc(self, created_at):
        """Test that a naive creation time is interpreted as UTC."""
        naive = created_at.replace(tzinfo=None)
        now = created_at + timedelta(hours=1)
        assert get_sla_remaining_ms(naive, 2, now) == 3_600_000

    def test_default_now(self):
        """Test that ``now`` defaults to the current time."""
        created = datetime.now(timezone.utc) - timedelta(hours=1)
        assert not is_sla_breached(created, 48)
        assert get_sla_state(created, 48) == SlaState.OK


class TestSlaState:
    """Test OK / WARNING / BREACHED classification."""

    def test_ok_before_warning_threshold(self, created_at):
        """Test that less than 75% elapsed is OK."""
        now = created_at + timedelta(hours=36) - timedelta(milliseconds=1)
        assert get_sla_state(created_at, 48, now) == SlaState.OK

    def test_warning_at_threshold(self, created_at):
        """Test that exactly 75% elapsed is WARNING."""
        now = created_at + timedelta(hours=36)
        assert get_sla_state(created_at, 48, now) == SlaState.WARNING

    def test_warning_at_deadline(self, created_at):
        """Test that the deadline instant itself is not yet breached."""
        now = created_at + timedelta(hours=48)
        assert get_sla_state(created_at, 48, now) == SlaState.WARNING
        assert not is_sla_breached(created_at, 48, now)

    def test_breached_after_deadline(self, created_at):
        """Test that any time past the deadline is BREACHED."""
        now = created_at + timedelta(hours=48, milliseconds=1)
        assert get_sla_state(created_at, 48, now) == SlaState.BREACHED
        assert is_sla_breached(created_at, 48, now)

    def test_state_is_monotonic(self, created_at):
        """Test that the state never moves backwards as time passes."""
        order = [SlaState.OK, SlaState.WARNING, SlaState.BREACHED]
        previous = 0
        for hours in range(0, 30):
            state = get_sla_state(created_at, 24, created_at + timedelta(hours=hours))
            assert order.index(state) >= previous
            previous = order.index(state)


class TestSlaValidation:
    """Test rejection of malformed SLA input."""

    @pytest.mark.parametrize("sla_hours", [0, -5, 1.5, True, "48", None])
    def test_invalid_sla_hours(self, created_at, sla_hours):
        """Test that non-positive or non-integer windows raise ConfigError."""
        with pytest.raises(ConfigError):
            get_sla_deadline(created_at, sla_hours)

    @pytest.mark.parametrize("timestamp", ["yesterday", "", None, 1709280000])
    def test_invalid_timestamp(self, timestamp):
        """Test that unparseable timestamps raise ConfigError."""
        with pytest.raises(ConfigError):
            get_sla_deadline(timestamp, 48)

    def test_config_error_metadata(self, created_at):
        """Test the error type carried by ConfigError."""
        with pytest.raises(ConfigError) as exc_info:
            get_sla_state(created_at, 0)
        assert exc_info.value.error_type == "configuration-error"


class TestFormatDuration:
    """Test duration labels."""

    def test_hours_and_minutes(self):
        """Test the "{h}h {m}m" format."""
        assert format_duration(2 * 3_600_000 + 30 * 60_000 + 59_999) == "2h 30m"

    def test_absolute_value(self):
        """Test that negative durations are formatted by magnitude."""
        assert format_duration(-90 * 60_000) == "1h 30m"

    def test_zero(self):
        """Test a zero duration."""
        assert format_duration(0) == "0h 0m"


class TestSlaSummary:
    """Test the combined SLA view."""

    def test_summary_within_window(self, created_at):
        """Test the summary of a complaint still inside its window."""
        summary = build_sla_summary(created_at, 48, created_at + timedelta(hours=10))
        assert summary.state == SlaState.OK
        assert summary.breached is False
        assert summary.deadline == created_at + timedelta(hours=48)
        assert summary.remaining_ms == 38 * 3_600_000
        assert summary.overdue_ms == 0
        assert summary.remaining_label == "38h 0m remaining"

    def test_summary_when_breached(self, created_at):
        """Test the summary of an overdue complaint."""
        summary = build_sla_summary(created_at, 48, created_at + timedelta(hours=50, minutes=30))
        assert summary.state == SlaState.BREACHED
        assert summary.breached is True
        assert summary.remaining_ms == 0
        assert summary.overdue_ms == 9_000_000
        assert summary.remaining_label == "Overdue by 2h 30m"

    def test_summary_just_breached(self, created_at):
        """Test the label one second past the deadline."""
        summary = build_sla_summary(created_at, 48, created_at + timedelta(hours=48, seconds=1))
        assert summary.breached is True
        assert summary.overdue_ms == 1000
        assert summary.remaining_label == "Overdue by 0h 0m"

    def test_summary_serializes_camel_case(self, created_at):
        """Test wire field names."""
        data = build_sla_summary(created_at, 48, created_at).model_dump(by_alias=True)
        assert set(data) == {"state", "deadline", "breached", "remainingMs", "overdueMs", "remainingLabel"}


class TestSlaWindow:
    """Test calculations over a stored SLA window."""

    def test_window_summary_matches_raw_arguments(self, created_at):
        """Test that a window gives the same view as its two fields."""
        now = created_at + timedelta(hours=10)
        window = SlaWindow(created_at=created_at, sla_hours=48)
        assert build_window_summary(window, now) == build_sla_summary(created_at, 48, now)
        assert build_window_summary(window, now).remaining_label == "38h 0m remaining"

    def test_window_breach_boundary(self, created_at):
        """Test that a window is breached only after its deadline."""
        window = SlaWindow(created_at=created_at, sla_hours=24)
        assert not is_window_breached(window, created_at + timedelta(hours=24))
        assert is_window_breached(window, created_at + timedelta(hours=24, milliseconds=1))

    def test_candidate_window_uses_department_hours(self, created_at):
        """Test that a configured department SLA wins over the fallback."""
        candidate = SlaCandidate(
            id="c-1",
            tenant_id="tenant-north",
            status=ComplaintStatus.OPEN,
            created_at=created_at,
            sla_hours=24
        )
        assert candidate.sla_window(48) == SlaWindow(created_at=created_at, sla_hours=24)

    def test_candidate_window_fallback(self, created_at):
        """Test that a complaint without a department SLA uses the fallback."""
        candidate = SlaCandidate(
            id="c-1",
            tenant_id="tenant-north",
            status=ComplaintStatus.OPEN,
            created_at=created_at
        )
        assert candidate.sla_window(48).sla_hours == 48


class TestCountSlaBreached:
    """Test counting breached complaints."""

    def _candidate(self, complaint_id, created, sla_hours=None):
        return SlaCandidate(
            id=complaint_id,
            tenant_id="tenant-north",
            status=ComplaintStatus.OPEN,
            created_at=created,
            sla_hours=sla_hours
        )

    def test_counts_with_fallback(self, created_at):
        """Test that complaints without an SLA use the fallback window."""
        now = created_at + timedelta(hours=30)
        complaints = [
            self._candidate("a", created_at, 24),
            self._candidate("b", created_at, 72),
            self._candidate("c", created_at),
            self._candidate("d", created_at - timedelta(hours=20)),
        ]
        assert count_sla_breached(complaints, fallback_sla_hours=48, now=now) == 2

    def test_empty(self):
        """Test that no complaints means no breaches."""
        assert count_sla_breached([]) == 0
