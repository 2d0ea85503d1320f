from typing import Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from backoffice.app.repositories.store_repository import IStoreRepository
from backoffice.domain.entities import Store


class StoreRepository(IStoreRepository):
    """Store repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, store_id: UUID) -> Optional[Store]:
        stmt = select(Store).where(Store.id == store_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_owner_id(self, owner_id: UUID) -> Optional[Store]:
        stmt = select(Store).where(Store.owner_id == owner_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, store: Store) -> Store:
        self.session.add(store)
        await self.session.flush()
        await self.session.refresh(store)
        return store

    async def update(self, store: Store) -> Store:
        self.session.add(store)
        await self.session.flush()
        await self.session.refresh(store)
        return store
