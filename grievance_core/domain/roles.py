# SPDX-License-Identifier: Apache-2.0

"""
Role rank primitives for staff authorization.

Roles form a strict total order. Managing another user or assigning a role
requires a strictly higher rank than the subject.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from ..exceptions import UnknownRoleError
from ..models.enums import Role


ROLE_RANK: Dict[Role, int] = {
    Role.SUPER_ADMIN: 5,
    Role.ADMIN: 4,
    Role.DEPARTMENT_HEAD: 3,
    Role.OFFICER: 2,
    Role.CALL_OPERATOR: 1,
}

RoleLike = Union[Role, str]


@dataclass
class AuthorizationResult:
    """Result of an authorization check."""
    allowed: bool
    reason: Optional[str] = None


def to_role(role: RoleLike) -> Role:
    """Coerce a role name to ``Role``, raising UnknownRoleError if it is not one."""
    try:
        return Role(role)
    except ValueError:
        raise UnknownRoleError(str(role))


def get_rank(role: RoleLike) -> int:
    """
    Get the numeric rank of a role.

    Args:
        role: Role or role name

    Returns:
        Rank from 1 (CALL_OPERATOR) to 5 (SUPER_ADMIN)
    """
    return ROLE_RANK[to_role(role)]


def is_higher_than(role_a: RoleLike, role_b: RoleLike) -> bool:
    return get_rank(role_a) > get_rank(role_b)


def is_higher_or_equal(role_a: RoleLike, role_b: RoleLike) -> bool:
    return get_rank(role_a) >= get_rank(role_b)


def can_assign_role(actor_role: RoleLike, target_role: RoleLike) -> AuthorizationResult:
    """
    Check if an actor may grant ``target_role`` to another user.

    Args:
        actor_role: Role of the user assigning
        target_role: Role being assigned

    Returns:
        AuthorizationResult indicating if the assignment is allowed
    """
    if is_higher_than(actor_role, target_role):
        return AuthorizationResult(allowed=True)

    return AuthorizationResult(
        allowed=False,
        reason=f"Role {to_role(actor_role).value} cannot assign role {to_role(target_role).value}"
    )


def can_manage_user(actor_role: RoleLike, subject_role: RoleLike) -> AuthorizationResult:
    """
    Check if an actor may manage (update, deactivate) a user holding ``subject_role``.

    Args:
        actor_role: Role of the managing user
        subject_role: Role of the managed user

    Returns:
        AuthorizationResult indicating if management is allowed
    """
    if is_higher_than(actor_role, subject_role):
        return AuthorizationResult(allowed=True)

    return AuthorizationResult(
        allowed=False,
        reason=f"Role {to_role(actor_role).value} cannot manage users with role {to_role(subject_role).value}"
    )


def assignable_roles(actor_role: RoleLike) -> List[Role]:
    """Roles strictly below ``actor_role``, highest rank first."""
    actor_rank = get_rank(actor_role)
    lower = [role for role, rank in ROLE_RANK.items() if rank < actor_rank]
    return sorted(lower, key=lambda role: ROLE_RANK[role], reverse=True)
