from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel


class ProviderTokens(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    id_token: Optional[str] = None


class ProviderProfile(BaseModel):
    id: str
    email: str
    name: str
    picture: Optional[str] = None
    email_verified: bool = True


class IOAuthProvider(ABC):
    """External identity provider contract used by the login flow."""

    @abstractmethod
    def get_authorization_url(self, state: str) -> str:
        pass

    @abstractmethod
    async def exchange_code(self, code: str) -> ProviderTokens:
        """Raises AuthenticationError if the provider rejects the code."""
        pass

    @abstractmethod
    async def get_user_info(self, access_token: str) -> ProviderProfile:
        """Raises AuthenticationError if the profile cannot be fetched."""
        pass

    @abstractmethod
    async def revoke_token(self, token: str) -> None:
        """Best-effort, never raises."""
        pass
