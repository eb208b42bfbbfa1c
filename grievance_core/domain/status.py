# SPDX-License-Identifier: Apache-2.0

"""
Complaint status state machine.

The transition table is the only source of legal moves. CLOSED is the single
absorbing state. Role gating is a separate filter applied on top of the
topology by ``assert_role_can_transition``.
"""

from typing import Dict, List, Optional, Tuple, Union

from ..exceptions import TransitionError, RolePermissionError
from ..models.enums import ComplaintStatus, Role
from .roles import RoleLike, to_role


StatusLike = Union[ComplaintStatus, str]

TRANSITIONS: Dict[ComplaintStatus, Tuple[ComplaintStatus, ...]] = {
    ComplaintStatus.OPEN: (ComplaintStatus.ASSIGNED, ComplaintStatus.ESCALATED),
    ComplaintStatus.ASSIGNED: (ComplaintStatus.IN_PROGRESS, ComplaintStatus.ESCALATED),
    ComplaintStatus.IN_PROGRESS: (ComplaintStatus.RESOLVED, ComplaintStatus.ESCALATED),
    ComplaintStatus.ESCALATED: (ComplaintStatus.ASSIGNED, ComplaintStatus.IN_PROGRESS),
    ComplaintStatus.RESOLVED: (ComplaintStatus.CLOSED,),
    ComplaintStatus.CLOSED: (),
}

TERMINAL_STATUSES = (ComplaintStatus.CLOSED,)

# Target statuses each role may set; None means unrestricted
ROLE_STATUS_PERMISSIONS: Dict[Role, Optional[Tuple[ComplaintStatus, ...]]] = {
    Role.CALL_OPERATOR: (),
    Role.OFFICER: (ComplaintStatus.IN_PROGRESS, ComplaintStatus.RESOLVED),
    Role.DEPARTMENT_HEAD: (
        ComplaintStatus.IN_PROGRESS,
        ComplaintStatus.RESOLVED,
        ComplaintStatus.ESCALATED,
    ),
    Role.ADMIN: None,
    Role.SUPER_ADMIN: None,
}


def _to_status(status: StatusLike) -> Optional[ComplaintStatus]:
    try:
        return ComplaintStatus(status)
    except ValueError:
        return None


def _label(status: StatusLike) -> str:
    return status.value if isinstance(status, ComplaintStatus) else str(status)


def valid_next_statuses(current: StatusLike) -> List[ComplaintStatus]:
    """
    Statuses reachable from ``current`` in one step.

    Args:
        current: Current complaint status

    Returns:
        Allowed next statuses; empty for CLOSED and for unknown statuses
    """
    status = _to_status(current)
    if status is None:
        return []
    return list(TRANSITIONS[status])


def is_valid_transition(current: StatusLike, target: StatusLike) -> bool:
    """True iff ``target`` is in the edge set of ``current``."""
    target_status = _to_status(target)
    return target_status is not None and target_status in valid_next_statuses(current)


def assert_valid_transition(current: StatusLike, target: StatusLike) -> None:
    """
    Enforce the transition topology.

    Raises:
        TransitionError: carrying the currently allowed next statuses
    """
    if not is_valid_transition(current, target):
        allowed = [status.value for status in valid_next_statuses(current)]
        raise TransitionError(_label(current), _label(target), allowed)


def is_terminal(status: StatusLike) -> bool:
    return _to_status(status) in TERMINAL_STATUSES


def permitted_targets(role: RoleLike) -> Optional[Tuple[ComplaintStatus, ...]]:
    """Target statuses ``role`` may set, or None when unrestricted."""
    return ROLE_STATUS_PERMISSIONS[to_role(role)]


def valid_next_statuses_for_role(current: StatusLike, role: RoleLike) -> List[ComplaintStatus]:
    """Allowed next statuses from ``current`` that ``role`` may also set."""
    permitted = permitted_targets(role)
    next_statuses = valid_next_statuses(current)
    if permitted is None:
        return next_statuses
    return [status for status in next_statuses if status in permitted]


def assert_role_can_transition(role: RoleLike, current: StatusLike, target: StatusLike) -> None:
    """
    Enforce topology first, then the role filter.

    Raises:
        TransitionError: the move is not in the transition table
        RolePermissionError: the move is legal but not for this role
    """
    assert_valid_transition(current, target)

    permitted = permitted_targets(role)
    if permitted is not None and ComplaintStatus(target) not in permitted:
        raise RolePermissionError(
            to_role(role).value,
            _label(target),
            [status.value for status in permitted]
        )
