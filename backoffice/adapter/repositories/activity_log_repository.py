import base64
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from backoffice.app.repositories.activity_log_repository import (
    ActivityLogFilter,
    IActivityLogRepository,
)
from backoffice.domain.entities import ActivityLog


class ActivityLogRepository(IActivityLogRepository):
    """ActivityLog repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, activity_log: ActivityLog) -> ActivityLog:
        self.session.add(activity_log)
        await self.session.flush()
        await self.session.refresh(activity_log)
        return activity_log

    def _apply_filters(self, stmt, filters: ActivityLogFilter):
        if filters.user_id:
            stmt = stmt.where(ActivityLog.user_id == filters.user_id)
        if filters.action:
            stmt = stmt.where(ActivityLog.action == filters.action)
        if filters.entity_type:
            stmt = stmt.where(ActivityLog.entity_type == filters.entity_type)
        if filters.entity_id:
            stmt = stmt.where(ActivityLog.entity_id == filters.entity_id)
        if filters.date_from:
            stmt = stmt.where(ActivityLog.created_at >= filters.date_from)
        if filters.date_to:
            stmt = stmt.where(ActivityLog.created_at <= filters.date_to)
        return stmt

    async def list_paginated(
        self,
        filters: ActivityLogFilter,
        limit: int = 50,
        cursor: Optional[str] = None,
    ) -> Tuple[List[ActivityLog], Optional[str]]:
        """
        Cursor format: base64-encoded ISO timestamp of created_at
        """
        stmt = self._apply_filters(select(ActivityLog), filters)

        if cursor:
            try:
                cursor_timestamp = datetime.fromisoformat(
                    base64.b64decode(cursor).decode("utf-8")
                )
                stmt = stmt.where(ActivityLog.created_at < cursor_timestamp)
            except (ValueError, TypeError):
                # Invalid cursor, start from the newest entry
                pass

        stmt = stmt.order_by(ActivityLog.created_at.desc()).limit(limit + 1)
        result = await self.session.exec(stmt)
        entries = list(result.all())

        has_more = len(entries) > limit
        if has_more:
            entries = entries[:limit]

        next_cursor = None
        if has_more and entries:
            next_cursor = base64.b64encode(
                entries[-1].created_at.isoformat().encode("utf-8")
            ).decode("utf-8")

        return entries, next_cursor

    async def count(self, filters: ActivityLogFilter) -> int:
        stmt = self._apply_filters(select(func.count()).select_from(ActivityLog), filters)
        result = await self.session.exec(stmt)
        return result.one()
