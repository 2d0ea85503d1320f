from fastapi import APIRouter, Depends

from backoffice.api.utils.response import success
from backoffice.depends import get_container

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(container=Depends(get_container)):
    """Liveness plus database and cache reachability. Not rate limited."""
    async with container.uow_factory() as uow:
        database_ok = await uow.ping()
    cache_ok = await container.cache.ping()

    return success(
        {
            "status": "ok" if database_ok and cache_ok else "degraded",
            "database": "ok" if database_ok else "unavailable",
            "cache": "ok" if cache_ok else "unavailable",
        }
    )
