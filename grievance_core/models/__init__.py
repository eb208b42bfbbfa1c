# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Models package - Pydantic value objects and enumerations for the engine.
"""

# Base model
from .base import EngineModel

# Enumerations
from .enums import (
    ComplaintStatus,
    Role,
    PriorityTier,
    SlaState
)

# Value objects
from .entities import (
    PriorityPrediction,
    AnalysisRequest,
    AnalysisResult,
    CorpusEntry,
    SlaWindow,
    SlaSummary,
    SlaCandidate,
    StatusChange
)

__all__ = [
    "EngineModel",
    "ComplaintStatus",
    "Role",
    "PriorityTier",
    "SlaState",
    "PriorityPrediction",
    "AnalysisRequest",
    "AnalysisResult",
    "CorpusEntry",
    "SlaWindow",
    "SlaSummary",
    "SlaCandidate",
    "StatusChange"
]
