# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Complaint intelligence orchestration.

Runs sentiment scoring and priority prediction (CPU only), then the duplicate
check (one bounded corpus fetch), and merges them into one AnalysisResult.
``analyze`` never raises: complaint creation must not be blocked by analysis.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from opentelemetry import trace

from ..config import IntelligenceSettings, get_settings
from ..domain.priority import predict_priority
from ..domain.sentiment import score_sentiment
from ..models.entities import AnalysisRequest, AnalysisResult
from .duplicates import CorpusFetcher, DuplicateDetector

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)


@dataclass
class AnalysisOutcome:
    """Internal result of an analysis run."""
    success: bool
    result: Optional[AnalysisResult] = None
    error_message: Optional[str] = None


class IntelligenceOrchestrator:
    """Composes sentiment, priority and duplicate analysis with failure isolation."""

    def __init__(self, corpus_fetcher: CorpusFetcher, settings: Optional[IntelligenceSettings] = None):
        self.settings = settings or get_settings()
        self.duplicate_detector = DuplicateDetector(
            corpus_fetcher,
            sample_size=self.settings.duplicate_sample_size
        )

    async def analyze(self, request: Union[AnalysisRequest, Mapping[str, Any]]) -> AnalysisResult:
        """
        Analyze a complaint for creation or re-analysis.

        Args:
            request: AnalysisRequest, or a mapping with description, category,
                tenant_id (or tenantId) and exclude_id (or excludeId)

        Returns:
            AnalysisResult; the all-null fallback when analysis could not run
        """
        try:
            outcome = await self.run_analysis(request)
        except Exception:
            logger.error("Complaint analysis crashed", exc_info=True)
            return AnalysisResult.fallback()

        if not outcome.success:
            logger.error(
                "Complaint analysis failed",
                extra={"error_message": outcome.error_message}
            )
            return AnalysisResult.fallback()

        return outcome.result

    async def reanalyze(
        self,
        complaint_id: str,
        description: Optional[str],
        tenant_id: str,
        category: Optional[str] = None
    ) -> AnalysisResult:
        """Re-run analysis for an existing complaint, leaving it out of its own corpus."""
        return await self.analyze(AnalysisRequest(
            description=description,
            category=category,
            tenant_id=tenant_id,
            exclude_id=complaint_id
        ))

    async def run_analysis(self, request: Union[AnalysisRequest, Mapping[str, Any]]) -> AnalysisOutcome:
        """
        Analyze a complaint, reporting failure as an AnalysisOutcome.

        Returns:
            AnalysisOutcome with the merged result or an error message
        """
        with tracer.start_as_current_span("intelligence.analyze") as span:
            try:
                if not isinstance(request, AnalysisRequest):
                    request = AnalysisRequest.model_validate(request)

                span.set_attribute("tenant.id", request.tenant_id)

                sentiment_score = score_sentiment(request.description)
                prediction = predict_priority(request.description, request.category)
                duplicate_score = await self._duplicate_phase(request)

                result = AnalysisResult(
                    sentiment_score=sentiment_score,
                    duplicate_score=duplicate_score,
                    suggested_priority=prediction.label,
                    ai_score=prediction.confidence
                )

                span.set_attributes({
                    "intelligence.priority": prediction.label,
                    "intelligence.degraded": duplicate_score is None
                })
                return AnalysisOutcome(success=True, result=result)

            except Exception as e:
                span.record_exception(e)
                return AnalysisOutcome(
                    success=False,
                    error_message=f"Failed to analyze complaint: {str(e)}"
                )

    async def _duplicate_phase(self, request: AnalysisRequest) -> Optional[float]:
        """
        Duplicate score, or None when the fetch does not finish.

        A timeout or cancellation degrades to None and keeps sentiment and
        priority. CorpusUnavailable propagates so the whole analysis falls
        back to the all-null result.
        """
        try:
            return await asyncio.wait_for(
                self.duplicate_detector.detect(request.description, request.tenant_id, request.exclude_id),
                timeout=self.settings.duplicate_timeout_seconds
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Duplicate detection timed out",
                extra={
                    "tenant_id": request.tenant_id,
                    "timeout_seconds": self.settings.duplicate_timeout_seconds
                }
            )
        except asyncio.CancelledError:
            logger.warning(
                "Duplicate detection cancelled",
                extra={"tenant_id": request.tenant_id}
            )
        return None
