from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from backoffice.domain.entities import ActivityLog


@dataclass
class ActivityLogFilter:
    user_id: Optional[UUID] = None
    action: Optional[str] = None
    entity_type: Optional[str] = None
    entity_id: Optional[UUID] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None


class IActivityLogRepository(ABC):
    """ActivityLog repository interface - application layer"""

    @abstractmethod
    async def create(self, activity_log: ActivityLog) -> ActivityLog:
        """Append a new entry (immutable)"""
        pass

    @abstractmethod
    async def list_paginated(
        self,
        filters: ActivityLogFilter,
        limit: int = 50,
        cursor: Optional[str] = None,
    ) -> Tuple[List[ActivityLog], Optional[str]]:
        """
        Get entries matching the filters with cursor-based pagination.

        Returns:
            Tuple of (entries ordered by created_at DESC, next_cursor or None)
        """
        pass

    @abstractmethod
    async def count(self, filters: ActivityLogFilter) -> int:
        """Total entries matching the filters"""
        pass
