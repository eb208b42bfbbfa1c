# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Services package - components that await I/O or hold collaborators.
"""

from .duplicates import (
    CorpusFetcher,
    DuplicateDetector,
    InMemoryCorpusFetcher,
    StoredComplaint,
    classify_similarity,
    detect_duplicate
)
from .intelligence import AnalysisOutcome, IntelligenceOrchestrator
from .sla_monitor import SlaMonitor, SlaStore, SlaTickSummary, run_sla_tick
from .mongodb import MongoComplaintRepository

__all__ = [
    "CorpusFetcher",
    "DuplicateDetector",
    "InMemoryCorpusFetcher",
    "StoredComplaint",
    "classify_similarity",
    "detect_duplicate",
    "AnalysisOutcome",
    "IntelligenceOrchestrator",
    "SlaMonitor",
    "SlaStore",
    "SlaTickSummary",
    "run_sla_tick",
    "MongoComplaintRepository"
]
