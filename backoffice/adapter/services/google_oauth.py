import logging
from urllib.parse import urlencode

import httpx

from backoffice.app.services.oauth_provider import IOAuthProvider, ProviderProfile, ProviderTokens
from backoffice.domain.errors import AuthenticationError

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v3/userinfo"
GOOGLE_REVOKE_URL = "https://oauth2.googleapis.com/revoke"


class GoogleOAuthProvider(IOAuthProvider):
    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    def get_authorization_url(self, state: str) -> str:
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": "openid email profile",
            "access_type": "offline",
            "prompt": "consent",
            "state": state,
        }
        return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> ProviderTokens:
        try:
            async with self._client() as client:
                response = await client.post(
                    GOOGLE_TOKEN_URL,
                    data={
                        "code": code,
                        "client_id": self.client_id,
                        "client_secret": self.client_secret,
                        "redirect_uri": self.redirect_uri,
                        "grant_type": "authorization_code",
                    },
                )
        except httpx.RequestError as e:
            logger.error(f"Google token exchange failed: {e}")
            raise AuthenticationError("Failed to authenticate with Google")

        if response.status_code != 200:
            logger.warning(f"Google token exchange rejected: {response.status_code} {response.text}")
            raise AuthenticationError("Failed to authenticate with Google")

        return ProviderTokens.model_validate(response.json())

    async def get_user_info(self, access_token: str) -> ProviderProfile:
        try:
            async with self._client() as client:
                response = await client.get(
                    GOOGLE_USERINFO_URL,
                    headers={"Authorization": f"Bearer {access_token}"},
                )
        except httpx.RequestError as e:
            logger.error(f"Google userinfo request failed: {e}")
            raise AuthenticationError("Failed to get user info from Google")

        if response.status_code != 200:
            raise AuthenticationError("Failed to get user info from Google")

        data = response.json()
        if not data.get("email"):
            raise AuthenticationError("Email not provided by Google")

        return ProviderProfile(
            id=data["sub"],
            email=data["email"],
            name=data.get("name") or data["email"].split("@")[0],
            picture=data.get("picture"),
            email_verified=bool(data.get("email_verified", True)),
        )

    async def revoke_token(self, token: str) -> None:
        try:
            async with self._client() as client:
                response = await client.post(GOOGLE_REVOKE_URL, data={"token": token})
            if response.status_code != 200:
                logger.warning(f"Google token revocation returned {response.status_code}")
        except httpx.HTTPError as e:
            logger.warning(f"Google token revocation failed: {e}")
