# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Exception hierarchy for the complaint intelligence and lifecycle engine.

Every error carries an HTTP-style status code and an error type identifier so
that a host web layer can translate it without knowing the engine internals.
"""

from typing import List, Optional, Sequence


class GrievanceCoreError(Exception):
    """Base class for engine exceptions."""

    def __init__(self, message: str, status_code: int = 500, error_type: str = "application-error"):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_type = error_type


class ConfigError(GrievanceCoreError):
    """Malformed numeric, duration or timestamp input."""

    def __init__(self, message: str):
        super().__init__(message, 500, "configuration-error")


class TransitionError(GrievanceCoreError):
    """Illegal complaint status change.

    ``allowed`` lists the statuses reachable from ``current``; an empty list
    means ``current`` is terminal.
    """

    def __init__(self, current: str, target: str, allowed: Sequence[str]):
        self.current = current
        self.target = target
        self.allowed: List[str] = list(allowed)

        if self.allowed:
            message = f"Cannot move from {current} to {target}. Allowed: {', '.join(self.allowed)}"
        else:
            message = f"{current} is a terminal status and cannot be changed"

        super().__init__(message, 422, "invalid-transition")


class RolePermissionError(GrievanceCoreError):
    """A structurally legal transition the caller's role may not perform."""

    def __init__(self, role: str, target: str, permitted: Optional[Sequence[str]]):
        self.role = role
        self.target = target
        self.permitted: List[str] = list(permitted or [])

        message = (
            f"Your role ({role}) cannot set status to {target}. "
            f"Permitted targets: {', '.join(self.permitted) or 'none'}"
        )
        super().__init__(message, 403, "insufficient-permissions")


class UnknownRoleError(GrievanceCoreError):
    """Role name outside the rank table."""

    def __init__(self, role: str):
        self.role = role
        super().__init__(f'Unknown role: "{role}"', 400, "unknown-role")


class CorpusUnavailable(GrievanceCoreError):
    """The duplicate-detection corpus could not be fetched."""

    def __init__(self, message: str, tenant_id: Optional[str] = None):
        self.tenant_id = tenant_id
        super().__init__(message, 503, "corpus-unavailable")
