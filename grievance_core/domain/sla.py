# SPDX-License-Identifier: Apache-2.0

"""
SLA deadline, breach and warning calculations.

All functions are pure over (created_at, sla_hours, now). ``now`` defaults to
the current UTC time; naive timestamps are interpreted as UTC.
"""

from datetime import datetime, timedelta, timezone
from numbers import Integral
from typing import Any, Iterable, Optional, Union

from ..exceptions import ConfigError
from ..models.enums import ComplaintStatus, SlaState
from ..models.entities import SlaSummary, SlaWindow


MS_PER_HOUR = 3_600_000
MS_PER_MINUTE = 60_000
WARNING_FRACTION = 0.75
DEFAULT_SLA_HOURS = 48

# Statuses whose SLA clock no longer runs
NON_SLA_STATUSES = (
    ComplaintStatus.RESOLVED,
    ComplaintStatus.CLOSED,
    ComplaintStatus.ESCALATED,
)

Timestamp = Union[datetime, str]


def _parse_timestamp(value: Timestamp) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            raise ConfigError(f"Invalid timestamp: {value!r}")
    raise ConfigError(f"Invalid timestamp type: {type(value).__name__}")


def _validate_sla_hours(sla_hours: Any) -> int:
    if isinstance(sla_hours, bool) or not isinstance(sla_hours, Integral):
        raise ConfigError(f"SLA hours must be an integer, got {sla_hours!r}")
    if sla_hours <= 0:
        raise ConfigError(f"SLA hours must be positive, got {sla_hours}")
    return int(sla_hours)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _now(now: Optional[datetime]) -> datetime:
    return _as_utc(now) if now is not None else datetime.now(timezone.utc)


def get_sla_deadline(created_at: Timestamp, sla_hours: int) -> datetime:
    """Deadline of the SLA window (created_at + sla_hours)."""
    return _parse_timestamp(created_at) + timedelta(hours=_validate_sla_hours(sla_hours))


def get_sla_remaining_ms(created_at: Timestamp, sla_hours: int, now: Optional[datetime] = None) -> int:
    """Milliseconds until the deadline; negative once it has passed."""
    deadline = _as_utc(get_sla_deadline(created_at, sla_hours))
    return (deadline - _now(now)) // timedelta(milliseconds=1)


def is_sla_breached(created_at: Timestamp, sla_hours: int, now: Optional[datetime] = None) -> bool:
    """True once the deadline has passed."""
    return get_sla_remaining_ms(created_at, sla_hours, now) < 0


def get_sla_state(created_at: Timestamp, sla_hours: int, now: Optional[datetime] = None) -> SlaState:
    """
    Classify a complaint's SLA position.

    Args:
        created_at: Complaint creation timestamp
        sla_hours: Allowed resolution time in hours
        now: Evaluation time, defaults to the current time

    Returns:
        BREACHED past the deadline, WARNING once 75% of the window has
        elapsed, OK otherwise
    """
    total_ms = _validate_sla_hours(sla_hours) * MS_PER_HOUR
    remaining_ms = get_sla_remaining_ms(created_at, sla_hours, now)

    if remaining_ms < 0:
        return SlaState.BREACHED

    elapsed_fraction = (total_ms - remaining_ms) / total_ms
    if elapsed_fraction >= WARNING_FRACTION:
        return SlaState.WARNING
    return SlaState.OK


def format_duration(ms: int) -> str:
    """Format a duration as ``"{h}h {m}m"`` using its absolute value."""
    abs_ms = abs(ms)
    hours = abs_ms // MS_PER_HOUR
    minutes = (abs_ms % MS_PER_HOUR) // MS_PER_MINUTE
    return f"{hours}h {minutes}m"


def build_sla_summary(created_at: Timestamp, sla_hours: int, now: Optional[datetime] = None) -> SlaSummary:
    """
    Build the full SLA view of a complaint.

    ``now`` is resolved once so that every field describes the same instant.

    Args:
        created_at: Complaint creation timestamp
        sla_hours: Allowed resolution time in hours
        now: Evaluation time, defaults to the current time

    Returns:
        SlaSummary with state, deadline, remaining/overdue time and label
    """
    now = _now(now)
    deadline = get_sla_deadline(created_at, sla_hours)
    remaining_ms = get_sla_remaining_ms(created_at, sla_hours, now)
    state = get_sla_state(created_at, sla_hours, now)
    breached = remaining_ms < 0

    if breached:
        label = f"Overdue by {format_duration(remaining_ms)}"
    else:
        label = f"{format_duration(remaining_ms)} remaining"

    return SlaSummary(
        state=state,
        deadline=deadline,
        breached=breached,
        remaining_ms=0 if breached else remaining_ms,
        overdue_ms=-remaining_ms if breached else 0,
        remaining_label=label
    )


def is_window_breached(window: SlaWindow, now: Optional[datetime] = None) -> bool:
    """True once the deadline of a stored SLA window has passed."""
    return is_sla_breached(window.created_at, window.sla_hours, now)


def build_window_summary(window: SlaWindow, now: Optional[datetime] = None) -> SlaSummary:
    """SLA view of a stored window."""
    return build_sla_summary(window.created_at, window.sla_hours, now)

def count_sla_breached(
    complaints: Iterable[Any],
    fallback_sla_hours: int = DEFAULT_SLA_HOURS,
    now: Optional[datetime] = None
) -> int:
    """
    Count complaints whose SLA window has passed.

    Args:
        complaints: Objects exposing ``created_at`` and an optional ``sla_hours``
        fallback_sla_hours: Window used when a complaint has no SLA configured
        now: Evaluation time, defaults to the current time

    Returns:
        Number of breached complaints
    """
    now = _now(now)
    return sum(
        1 for complaint in complaints
        if is_sla_breached(
            complaint.created_at,
            getattr(complaint, "sla_hours", None) or fallback_sla_hours,
            now
        )
    )
