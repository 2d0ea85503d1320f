"""
Get Activity Logs Use Case

Filtered, cursor-paginated activity log for owners.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from backoffice.app.repositories.activity_log_repository import ActivityLogFilter
from backoffice.app.services.unit_of_work import UnitOfWork
from backoffice.domain.base import CamelModel
from backoffice.libs.result import Error, Result, Return

MAX_LIMIT = 100


class ActivityLogItem(CamelModel):
    id: UUID
    user_id: UUID
    action: str
    entity_type: str
    entity_id: Optional[UUID] = None
    changes: Optional[Dict[str, Any]] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime


class ActivityLogPage(CamelModel):
    items: List[ActivityLogItem]
    total: int
    limit: int
    next_cursor: Optional[str] = None

    @property
    def has_more(self) -> bool:
        return self.next_cursor is not None


class GetActivityLogsUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        filters: ActivityLogFilter,
        limit: int = 50,
        cursor: Optional[str] = None,
    ) -> Result[ActivityLogPage]:
        if limit < 1 or limit > MAX_LIMIT:
            return Return.err(
                Error("INVALID_LIMIT", f"limit must be between 1 and {MAX_LIMIT}")
            )
        if filters.date_from and filters.date_to and filters.date_from > filters.date_to:
            return Return.err(Error("INVALID_DATE_RANGE", "date_from must be before date_to"))

        async with self.uow:
            entries, next_cursor = await self.uow.activity_logs.list_paginated(
                filters, limit, cursor
            )
            total = await self.uow.activity_logs.count(filters)
            items = [ActivityLogItem.model_validate(e.model_dump()) for e in entries]

        return Return.ok(
            ActivityLogPage(items=items, total=total, limit=limit, next_cursor=next_cursor)
        )
