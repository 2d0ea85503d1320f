from uuid import UUID

from backoffice.app.services.session_manager import SessionManager
from backoffice.app.services.unit_of_work import UnitOfWork
from backoffice.libs.result import Error, Result, Return
from .dtos import OwnedStore, ProfileResponse, SessionInfo, SessionListResponse


class LoadProfileUseCase:
    """Current user plus the store they own, if any."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID) -> Result[ProfileResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            store = await self.uow.stores.get_by_owner_id(user.id)
            return Return.ok(
                ProfileResponse(
                    id=user.id,
                    email=user.email,
                    name=user.name,
                    role=user.role.value,
                    avatar_url=user.avatar_url,
                    is_active=user.is_active,
                    created_at=user.created_at,
                    store=OwnedStore(id=store.id, name=store.name) if store else None,
                )
            )


class ListSessionsUseCase:
    def __init__(self, session_manager: SessionManager):
        self.session_manager = session_manager

    async def execute(self, user_id: UUID, current_session_id: UUID) -> Result[SessionListResponse]:
        sessions = await self.session_manager.get_user_sessions(user_id)
        return Return.ok(
            SessionListResponse(
                sessions=[
                    SessionInfo(**s.model_dump(), is_current=s.id == current_session_id)
                    for s in sessions
                ]
            )
        )
