# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Enumeration types for the complaint intelligence and lifecycle engine.
"""

from enum import Enum


class ComplaintStatus(str, Enum):
    """Complaint lifecycle status enumeration."""
    OPEN = "OPEN"
    ASSIGNED = "ASSIGNED"
    IN_PROGRESS = "IN_PROGRESS"
    ESCALATED = "ESCALATED"
    RESOLVED = "RESOLVED"
    CLOSED = "CLOSED"


class Role(str, Enum):
    """Staff roles, lowest rank first."""
    CALL_OPERATOR = "CALL_OPERATOR"
    OFFICER = "OFFICER"
    DEPARTMENT_HEAD = "DEPARTMENT_HEAD"
    ADMIN = "ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"


class PriorityTier(int, Enum):
    """Discrete priority tiers (0-3)."""
    LOW = 0
    MEDIUM = 1
    HIGH = 2
    CRITICAL = 3


class SlaState(str, Enum):
    """Derived SLA state, never stored."""
    OK = "OK"
    WARNING = "WARNING"
    BREACHED = "BREACHED"
