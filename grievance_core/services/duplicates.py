# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Near-duplicate complaint detection by TF cosine similarity.

A new description is compared against the most recent complaints of the same
tenant. Score interpretation:

    >= 0.85   near-certain duplicate
    >= 0.65   likely duplicate
    >= 0.40   partially related
    <  0.40   distinct complaint
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from itertools import islice
from typing import Any, List, Mapping, Optional, Protocol, Sequence, runtime_checkable

from opentelemetry import trace

from ..domain.text import build_tf_vector, cosine_similarity, preprocess
from ..exceptions import CorpusUnavailable
from ..models.entities import CorpusEntry

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_SIZE = 200
MIN_TOKENS = 2
PERFECT_MATCH = 0.99


@runtime_checkable
class CorpusFetcher(Protocol):
    """Source of recent complaint descriptions for one tenant."""

    async def fetch(
        self,
        tenant_id: str,
        exclude_id: Optional[str] = None,
        limit: int = DEFAULT_SAMPLE_SIZE
    ) -> Sequence[Any]:
        """
        Return up to ``limit`` non-deleted complaints of ``tenant_id``,
        newest first, each exposing ``id`` and ``description``.
        """
        ...


@dataclass
class StoredComplaint:
    """Complaint row held by ``InMemoryCorpusFetcher``."""
    id: str
    tenant_id: str
    description: Optional[str]
    created_at: datetime
    is_deleted: bool = False


@dataclass
class InMemoryCorpusFetcher:
    """CorpusFetcher over an in-process list of complaints."""
    complaints: List[StoredComplaint] = field(default_factory=list)

    def add(self, complaint: StoredComplaint) -> None:
        self.complaints.append(complaint)

    async def fetch(
        self,
        tenant_id: str,
        exclude_id: Optional[str] = None,
        limit: int = DEFAULT_SAMPLE_SIZE
    ) -> List[CorpusEntry]:
        matching = [
            c for c in self.complaints
            if c.tenant_id == tenant_id and not c.is_deleted and c.id != exclude_id
        ]
        matching.sort(key=lambda c: c.created_at, reverse=True)
        return [CorpusEntry(id=c.id, description=c.description) for c in matching[:limit]]


def classify_similarity(score: Optional[float]) -> str:
    """Human reading of a duplicate score."""
    if score is None:
        return "unknown"
    if score >= 0.85:
        return "near-certain duplicate"
    if score >= 0.65:
        return "likely duplicate"
    if score >= 0.40:
        return "partially related"
    return "distinct"


def _entry_description(entry: Any) -> Optional[str]:
    if isinstance(entry, Mapping):
        return entry.get("description")
    return getattr(entry, "description", None)


class DuplicateDetector:
    """Scores how closely a description matches recent same-tenant complaints."""

    def __init__(self, corpus_fetcher: CorpusFetcher, sample_size: int = DEFAULT_SAMPLE_SIZE):
        self.corpus_fetcher = corpus_fetcher
        self.sample_size = sample_size

    async def detect(self, description: Any, tenant_id: str, exclude_id: Optional[str] = None) -> float:
        """
        Maximum cosine similarity between ``description`` and the tenant corpus.

        Args:
            description: Complaint text
            tenant_id: Tenant whose complaints form the corpus
            exclude_id: Complaint to leave out (re-analysis of an existing complaint)

        Returns:
            Similarity in [0, 1] rounded to 4 decimal places

        Raises:
            CorpusUnavailable: the corpus fetch failed
        """
        if not isinstance(description, str) or not description or not tenant_id:
            return 0.0

        tokens = list(preprocess(description))
        if len(tokens) < MIN_TOKENS:
            return 0.0

        vector = build_tf_vector(tokens)
        if not vector:
            return 0.0

        with tracer.start_as_current_span("duplicates.detect") as span:
            span.set_attribute("tenant.id", tenant_id)

            try:
                rows = await self.corpus_fetcher.fetch(tenant_id, exclude_id=exclude_id, limit=self.sample_size)
            except CorpusUnavailable:
                raise
            except Exception as e:
                logger.error(
                    "Corpus fetch failed",
                    extra={"tenant_id": tenant_id, "error_class": e.__class__.__name__}
                )
                raise CorpusUnavailable(f"Failed to fetch corpus for tenant {tenant_id}: {e}", tenant_id) from e

            corpus = list(islice(rows, self.sample_size))
            best = 0.0
            compared = 0
            for entry in corpus:
                other_tokens = list(preprocess(_entry_description(entry)))
                if len(other_tokens) < MIN_TOKENS:
                    continue

                compared += 1
                similarity = cosine_similarity(vector, build_tf_vector(other_tokens))
                if similarity > best:
                    best = similarity
                    if best >= PERFECT_MATCH:
                        break

            span.set_attributes({
                "duplicates.corpus_size": len(corpus),
                "duplicates.compared": compared,
                "duplicates.score": best
            })

        return round(min(1.0, max(0.0, best)), 4)


async def detect_duplicate(
    description: Any,
    tenant_id: str,
    corpus_fetcher: CorpusFetcher,
    exclude_id: Optional[str] = None,
    sample_size: int = DEFAULT_SAMPLE_SIZE
) -> float:
    """Run a one-off duplicate check with ``corpus_fetcher``."""
    return await DuplicateDetector(corpus_fetcher, sample_size).detect(description, tenant_id, exclude_id)
