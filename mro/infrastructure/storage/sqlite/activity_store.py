"""SQLite implementation of the user activity log."""

import json
from datetime import datetime
from uuid import uuid4

import aiosqlite

from mro.config import get_logger
from mro.core.entities.activity import ActivityAction, ResourceType, UserActivity
from mro.core.exceptions import DatabaseError
from mro.core.interfaces.activity_store import IActivityStore
from mro.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from mro.infrastructure.storage.sqlite.metrics import StoreMetrics

logger = get_logger(__name__)


def _filters(
    company_id: str, action: str | None, resource_type: str | None
) -> tuple[str, list]:
    clause = "company_id = ?"
    params: list = [company_id]
    if action:
        clause += " AND action = ?"
        params.append(action)
    if resource_type:
        clause += " AND resource_type = ?"
        params.append(resource_type)
    return clause, params


class SQLiteActivityStore(IActivityStore):
    """Append-only activity log backed by the user_activities table."""

    def __init__(self, metrics: StoreMetrics | None = None):
        self.metrics = metrics or StoreMetrics()

    async def add(self, activity: UserActivity) -> UserActivity:
        activity.id = activity.id or uuid4().hex
        with self.metrics.track(activity.company_id, "add_activity", "write"):
            try:
                async with get_transaction() as conn:
                    await conn.execute(
                        """
                        INSERT INTO user_activities (
                            id, company_id, user_id, action, resource_type,
                            resource_id, resource_title, metadata,
                            ip_address, user_agent, created_at
                        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                        """,
                        (
                            activity.id,
                            activity.company_id,
                            activity.user_id,
                            activity.action.value,
                            activity.resource_type.value if activity.resource_type else None,
                            activity.resource_id,
                            activity.resource_title,
                            json.dumps(activity.metadata) if activity.metadata is not None else None,
                            activity.ip_address,
                            activity.user_agent,
                            activity.created_at.isoformat(),
                        ),
                    )
            except aiosqlite.Error as e:
                raise DatabaseError("add_activity", str(e)) from e

        logger.debug("activity_stored", activity_id=activity.id, action=activity.action.value)
        return activity

    async def list_activities(
        self,
        company_id: str,
        limit: int = 20,
        offset: int = 0,
        action: str | None = None,
        resource_type: str | None = None,
    ) -> list[UserActivity]:
        clause, params = _filters(company_id, action, resource_type)
        with self.metrics.track(company_id, "list_activities", "read"):
            async with get_connection() as conn:
                cursor = await conn.execute(
                    f"""
                    SELECT * FROM user_activities
                    WHERE {clause}
                    ORDER BY created_at DESC, id
                    LIMIT ? OFFSET ?
                    """,
                    (*params, limit, offset),
                )
                rows = await cursor.fetchall()
        return [self._row_to_activity(row) for row in rows]

    async def count(
        self,
        company_id: str,
        action: str | None = None,
        resource_type: str | None = None,
    ) -> int:
        clause, params = _filters(company_id, action, resource_type)
        with self.metrics.track(company_id, "count_activities", "read"):
            async with get_connection() as conn:
                cursor = await conn.execute(
                    f"SELECT COUNT(*) FROM user_activities WHERE {clause}", params
                )
                row = await cursor.fetchone()
        return row[0] if row else 0

    @staticmethod
    def _row_to_activity(row: aiosqlite.Row) -> UserActivity:
        return UserActivity(
            id=row["id"],
            company_id=row["company_id"],
            user_id=row["user_id"],
            action=ActivityAction(row["action"]),
            resource_type=ResourceType(row["resource_type"]) if row["resource_type"] else None,
            resource_id=row["resource_id"],
            resource_title=row["resource_title"],
            metadata=json.loads(row["metadata"]) if row["metadata"] else None,
            ip_address=row["ip_address"],
            user_agent=row["user_agent"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )
