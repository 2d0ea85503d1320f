from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from backoffice.api.error import raise_for_error
from backoffice.api.utils.rate_limit import user_rate_limit
from backoffice.api.utils.response import ApiResponse, PaginationMeta, success
from backoffice.app.repositories.activity_log_repository import ActivityLogFilter
from backoffice.app.services.unit_of_work import UnitOfWork
from backoffice.app.use_cases.activity import ActivityLogItem, GetActivityLogsUseCase
from backoffice.depends import get_unit_of_work, require_owner

router = APIRouter(prefix="/activity-logs", tags=["Activity"])

STATUS_BY_CODE = {
    "INVALID_LIMIT": status.HTTP_400_BAD_REQUEST,
    "INVALID_DATE_RANGE": status.HTTP_400_BAD_REQUEST,
}


def _naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


@router.get(
    "",
    response_model=ApiResponse[List[ActivityLogItem]],
    dependencies=[Depends(require_owner), Depends(user_rate_limit)],
)
async def list_activity_logs(
    user_id: Optional[UUID] = Query(default=None),
    action: Optional[str] = Query(default=None),
    entity_type: Optional[str] = Query(default=None),
    entity_id: Optional[UUID] = Query(default=None),
    date_from: Optional[datetime] = Query(default=None),
    date_to: Optional[datetime] = Query(default=None),
    limit: int = Query(default=50),
    cursor: Optional[str] = Query(default=None),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Activity log, newest first, cursor paginated. Owner only.

    Raises:
        - 400 Bad Request: limit outside 1..100 or date_from after date_to
        - 403 Forbidden: Caller is not an owner
    """
    filters = ActivityLogFilter(
        user_id=user_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        date_from=_naive_utc(date_from),
        date_to=_naive_utc(date_to),
    )
    result = await GetActivityLogsUseCase(uow).execute(filters, limit, cursor)

    if result.is_err():
        raise_for_error(result.error, STATUS_BY_CODE)

    page = result.value
    return success(
        page.items,
        meta=PaginationMeta(
            total=page.total,
            limit=page.limit,
            has_more=page.has_more,
            next_cursor=page.next_cursor,
        ),
    )
