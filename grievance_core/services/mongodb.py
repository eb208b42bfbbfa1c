# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
MongoDB-backed complaint repository.

Implements the corpus fetcher used by duplicate detection and the store used
by the SLA monitor. Documents use camelCase field names; complaints are
tenant-scoped by ``tenantId`` and soft-deleted through ``isDeleted``.
"""

import asyncio
import os
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Union
from pymongo import MongoClient, ASCENDING, DESCENDING
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, PyMongoError, ServerSelectionTimeoutError
from bson import ObjectId

from ..domain.sla import NON_SLA_STATUSES
from ..exceptions import CorpusUnavailable
from ..models.enums import ComplaintStatus, Role
from ..models.entities import CorpusEntry, SlaCandidate, StatusChange
from .duplicates import DEFAULT_SAMPLE_SIZE

logger = logging.getLogger(__name__)

COMPLAINTS = "complaints"
DEPARTMENTS = "departments"
USERS = "users"
STATUS_HISTORY = "complaint_status_history"
NOTIFICATIONS = "notifications"


def _to_object_id(value: str) -> Union[ObjectId, str]:
    """ObjectId for valid hex ids, the raw value otherwise."""
    return ObjectId(value) if ObjectId.is_valid(value) else value


def _to_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


class MongoComplaintRepository:
    """Complaint queries for the intelligence engine with connection pooling."""

    def __init__(self, connection_string: str = None, database_name: str = None):
        """Initialize repository with connection pooling settings."""
        self.connection_string = connection_string or os.getenv(
            'MONGODB_URI',
            'mongodb://localhost:27017/grievance_dev'
        )
        self.database_name = database_name or os.getenv('MONGODB_DATABASE', 'grievance_dev')
        self._client: Optional[MongoClient] = None
        self._database: Optional[Database] = None

        # Connection pool settings
        self.max_pool_size = int(os.getenv('MONGODB_MAX_POOL_SIZE', '10'))
        self.min_pool_size = int(os.getenv('MONGODB_MIN_POOL_SIZE', '1'))
        self.max_idle_time_ms = int(os.getenv('MONGODB_MAX_IDLE_TIME_MS', '30000'))
        self.server_selection_timeout_ms = int(os.getenv('MONGODB_SERVER_SELECTION_TIMEOUT_MS', '5000'))

        logger.info(f"Complaint repository initialized for database: {self.database_name}")

    @property
    def client(self) -> MongoClient:
        """Get MongoDB client with connection pooling."""
        if self._client is None:
            try:
                self._client = MongoClient(
                    self.connection_string,
                    maxPoolSize=self.max_pool_size,
                    minPoolSize=self.min_pool_size,
                    maxIdleTimeMS=self.max_idle_time_ms,
                    serverSelectionTimeoutMS=self.server_selection_timeout_ms,
                    retryWrites=True,
                    retryReads=True
                )
                self._client.admin.command('ping')
                logger.info("MongoDB connection established successfully")
            except (ConnectionFailure, ServerSelectionTimeoutError) as e:
                logger.error(f"Failed to connect to MongoDB: {e}")
                raise
        return self._client

    @property
    def database(self) -> Database:
        if self._database is None:
            self._database = self.client[self.database_name]
        return self._database

    def get_collection(self, collection_name: str) -> Collection:
        return self.database[collection_name]

    def close_connection(self) -> None:
        """Close MongoDB connection."""
        if self._client:
            self._client.close()
            self._client = None
            self._database = None
            logger.info("MongoDB connection closed")

    # Corpus fetcher

    def find_recent_descriptions(
        self,
        tenant_id: str,
        exclude_id: Optional[str] = None,
        limit: int = DEFAULT_SAMPLE_SIZE
    ) -> List[CorpusEntry]:
        """Newest non-deleted complaint descriptions of a tenant."""
        query: Dict[str, Any] = {"tenantId": tenant_id, "isDeleted": False}
        if exclude_id:
            query["_id"] = {"$ne": _to_object_id(exclude_id)}

        cursor = (
            self.get_collection(COMPLAINTS)
            .find(query, {"description": 1})
            .sort("createdAt", DESCENDING)
            .limit(limit)
        )
        entries = [CorpusEntry(id=str(doc["_id"]), description=doc.get("description")) for doc in cursor]

        logger.debug(f"Fetched {len(entries)} corpus entries for tenant {tenant_id}")
        return entries

    async def fetch(
        self,
        tenant_id: str,
        exclude_id: Optional[str] = None,
        limit: int = DEFAULT_SAMPLE_SIZE
    ) -> List[CorpusEntry]:
        """Run the corpus query in a worker thread."""
        try:
            return await asyncio.to_thread(self.find_recent_descriptions, tenant_id, exclude_id, limit)
        except PyMongoError as e:
            logger.error(f"Failed to fetch corpus for tenant {tenant_id}: {e}")
            raise CorpusUnavailable(f"MongoDB corpus query failed: {e}", tenant_id) from e

    # SLA store

    def find_sla_candidates(self, limit: int) -> List[SlaCandidate]:
        """Oldest open complaints with a department, joined with the department SLA."""
        pipeline = [
            {"$match": {
                "isDeleted": False,
                "status": {"$nin": [status.value for status in NON_SLA_STATUSES]},
                "departmentId": {"$ne": None}
            }},
            {"$sort": {"createdAt": ASCENDING}},
            {"$limit": limit},
            {"$lookup": {
                "from": DEPARTMENTS,
                "localField": "departmentId",
                "foreignField": "_id",
                "as": "department"
            }},
            {"$project": {
                "tenantId": 1,
                "status": 1,
                "createdAt": 1,
                "assignedToId": 1,
                "createdById": 1,
                "slaHours": {"$arrayElemAt": ["$department.slaHours", 0]}
            }}
        ]

        documents = self.get_collection(COMPLAINTS).aggregate(pipeline)
        return [
            SlaCandidate(
                id=str(doc["_id"]),
                tenant_id=str(doc["tenantId"]),
                status=doc["status"],
                created_at=doc["createdAt"],
                sla_hours=doc.get("slaHours"),
                assigned_to_id=_to_str(doc.get("assignedToId")),
                created_by_id=_to_str(doc.get("createdById"))
            )
            for doc in documents
        ]

    def admin_ids_by_tenant(self, tenant_ids: Iterable[str]) -> Dict[str, List[str]]:
        """Active ADMIN and SUPER_ADMIN user ids grouped by tenant."""
        tenant_ids = list(tenant_ids)
        if not tenant_ids:
            return {}

        admins = self.get_collection(USERS).find(
            {
                "tenantId": {"$in": tenant_ids},
                "isDeleted": False,
                "isActive": True,
                "role": {"$in": [Role.ADMIN.value, Role.SUPER_ADMIN.value]}
            },
            {"tenantId": 1}
        )

        admin_map: Dict[str, List[str]] = {}
        for admin in admins:
            admin_map.setdefault(str(admin["tenantId"]), []).append(str(admin["_id"]))
        return admin_map

    def escalate(self, candidate: SlaCandidate, actor_id: str) -> bool:
        """Move a complaint to ESCALATED if its status is still the one observed."""
        now = datetime.now(timezone.utc)
        result = self.get_collection(COMPLAINTS).update_one(
            {"_id": _to_object_id(candidate.id), "status": candidate.status.value},
            {"$set": {
                "status": ComplaintStatus.ESCALATED.value,
                "updatedAt": now,
                "updatedBy": actor_id
            }}
        )

        if result.modified_count == 0:
            logger.warning(f"Complaint {candidate.id} changed before escalation, skipping")
            return False

        change = StatusChange(
            complaint_id=candidate.id,
            old_status=candidate.status,
            new_status=ComplaintStatus.ESCALATED,
            changed_by_id=actor_id,
            changed_at=now
        )
        document = change.model_dump(by_alias=True)
        # Statuses are stored as plain strings
        document.update(oldStatus=change.old_status.value, newStatus=change.new_status.value)
        self.get_collection(STATUS_HISTORY).insert_one(document)

        logger.info(f"Escalated complaint {candidate.id}")
        return True

    def notify(self, user_ids: Iterable[str], complaint_id: str, title: str, message: str) -> None:
        """Create one unread notification per user."""
        now = datetime.now(timezone.utc)
        documents = [
            {
                "userId": user_id,
                "complaintId": complaint_id,
                "title": title,
                "message": message,
                "isRead": False,
                "createdAt": now
            }
            for user_id in user_ids
        ]
        if documents:
            self.get_collection(NOTIFICATIONS).insert_many(documents, ordered=False)

    # Index Management

    def create_indexes(self) -> None:
        """Create the indexes the corpus and SLA queries rely on."""
        try:
            complaints = self.get_collection(COMPLAINTS)
            complaints.create_index([("tenantId", ASCENDING), ("isDeleted", ASCENDING), ("createdAt", DESCENDING)])
            complaints.create_index([("isDeleted", ASCENDING), ("status", ASCENDING), ("createdAt", ASCENDING)])

            users = self.get_collection(USERS)
            users.create_index([("tenantId", ASCENDING), ("role", ASCENDING)])

            history = self.get_collection(STATUS_HISTORY)
            history.create_index([("complaintId", ASCENDING), ("changedAt", ASCENDING)])

            logger.info("MongoDB indexes created successfully")
        except Exception as e:
            logger.error(f"Failed to create MongoDB indexes: {e}")
            raise
