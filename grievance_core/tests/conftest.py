# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Pytest configuration and fixtures.
"""

import os
import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock
from bson import ObjectId

from grievance_core.config import IntelligenceSettings
from grievance_core.services.duplicates import InMemoryCorpusFetcher, StoredComplaint

# Set test environment
os.environ['ENVIRONMENT'] = 'test'
os.environ['OTEL_ENABLED'] = 'false'
os.environ['MONGODB_DATABASE'] = 'grievance_test'


TENANT_ID = "tenant-north"
OTHER_TENANT_ID = "tenant-south"


@pytest.fixture
def fixed_now():
    """Fixed evaluation instant for SLA calculations."""
    return datetime(2024, 3, 10, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def created_at():
    """Complaint creation timestamp used with ``fixed_now`` offsets."""
    return datetime(2024, 3, 1, 8, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def settings():
    """Settings with a short duplicate timeout for tests."""
    return IntelligenceSettings(duplicate_timeout_seconds=0.5)


@pytest.fixture
def sample_complaints(fixed_now):
    """Complaints across two tenants, newest first within each tenant."""
    return [
        StoredComplaint(
            id="c-water",
            tenant_id=TENANT_ID,
            description="Water pipe burst near the school flooding the road",
            created_at=fixed_now - timedelta(hours=1)
        ),
        StoredComplaint(
            id="c-garbage",
            tenant_id=TENANT_ID,
            description="Garbage not collected for two weeks in the market area",
            created_at=fixed_now - timedelta(hours=5)
        ),
        StoredComplaint(
            id="c-streetlight",
            tenant_id=TENANT_ID,
            description="Streetlight broken on the main avenue since Monday",
            created_at=fixed_now - timedelta(days=2)
        ),
        StoredComplaint(
            id="c-deleted",
            tenant_id=TENANT_ID,
            description="Sewage overflow behind the community hall",
            created_at=fixed_now - timedelta(days=3),
            is_deleted=True
        ),
        StoredComplaint(
            id="c-other-tenant",
            tenant_id=OTHER_TENANT_ID,
            description="Sewage overflow behind the community hall",
            created_at=fixed_now - timedelta(hours=2)
        ),
    ]


@pytest.fixture
def corpus_fetcher(sample_complaints):
    """In-memory corpus fetcher seeded with ``sample_complaints``."""
    return InMemoryCorpusFetcher(list(sample_complaints))


@pytest.fixture
def sla_store():
    """Mock SLA store with no candidates and no admins."""
    store = Mock()
    store.find_sla_candidates.return_value = []
    store.admin_ids_by_tenant.return_value = {}
    store.escalate.return_value = True
    return store


@pytest.fixture
def object_id():
    """Fresh ObjectId string."""
    return str(ObjectId())
