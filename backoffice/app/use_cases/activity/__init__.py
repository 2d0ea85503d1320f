"""
Activity Log Use Cases
"""

from .get_activity_logs_use_case import (
    ActivityLogItem,
    ActivityLogPage,
    GetActivityLogsUseCase,
)

__all__ = ["ActivityLogItem", "ActivityLogPage", "GetActivityLogsUseCase"]
