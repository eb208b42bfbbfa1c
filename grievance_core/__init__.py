# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Complaint intelligence and lifecycle engine for citizen-grievance CRMs.

Scores sentiment, predicts priority and detects near-duplicate complaints from
free text, and governs SLA deadlines and complaint status transitions.
"""

from .domain.priority import predict_priority
from .domain.sentiment import score_sentiment
from .domain.sla import build_sla_summary, get_sla_state, is_sla_breached
from .domain.status import (
    assert_valid_transition,
    is_terminal,
    is_valid_transition,
    valid_next_statuses
)
from .domain.text import preprocess, tokenize
from .exceptions import (
    ConfigError,
    CorpusUnavailable,
    GrievanceCoreError,
    RolePermissionError,
    TransitionError
)
from .services.duplicates import DuplicateDetector
from .services.intelligence import IntelligenceOrchestrator

__version__ = "1.0.0"

__all__ = [
    "predict_priority",
    "score_sentiment",
    "build_sla_summary",
    "get_sla_state",
    "is_sla_breached",
    "assert_valid_transition",
    "is_terminal",
    "is_valid_transition",
    "valid_next_statuses",
    "preprocess",
    "tokenize",
    "ConfigError",
    "CorpusUnavailable",
    "GrievanceCoreError",
    "RolePermissionError",
    "TransitionError",
    "DuplicateDetector",
    "IntelligenceOrchestrator"
]
