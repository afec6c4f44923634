"""Microsoft OAuth token acquisition using Authlib.

Exchanges the configured refresh token for a short-lived access token at
the Microsoft identity platform v2.0 token endpoint. Tokens are never
stored: every call performs a fresh exchange.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx
from authlib.integrations.httpx_client import AsyncOAuth2Client

if TYPE_CHECKING:
    from onedrive_utils.config import Credentials

logger = logging.getLogger(__name__)


class MicrosoftOAuth:
    """Refresh-token exchange against the Microsoft identity platform.

    Example:
        >>> auth = MicrosoftOAuth(Credentials.from_env())
        >>> access_token = await auth.get_access_token()
    """

    TOKEN_URL = "https://login.microsoftonline.com/common/oauth2/v2.0/token"

    def __init__(
        self,
        credentials: Credentials,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | httpx.Timeout | None = None,
    ):
        """Initialize Microsoft OAuth.

        Args:
            credentials: Client credentials and refresh token.
            transport: Optional httpx transport (used by tests).
            timeout: Request timeout. None disables the timeout.
        """
        self.credentials = credentials
        self._transport = transport
        self._timeout = timeout

    def _session(self) -> AsyncOAuth2Client:
        """Create a one-shot OAuth client posting credentials in the form body."""
        return AsyncOAuth2Client(
            client_id=self.credentials.client_id,
            client_secret=self.credentials.client_secret,
            token_endpoint_auth_method="client_secret_post",
            transport=self._transport,
            timeout=self._timeout,
        )

    async def fetch_token(self) -> dict:
        """Exchange the refresh token for a full token response.

        Returns:
            Token response dict (access_token, token_type, expires_in, ...).

        Raises:
            httpx.HTTPError: On transport failure or 5xx response.
            authlib.integrations.base_client.OAuthError: On an OAuth error body.
        """
        logger.debug(f"Requesting access token for client {self.credentials.client_id}")
        async with self._session() as session:
            token = await session.refresh_token(
                self.TOKEN_URL,
                refresh_token=self.credentials.refresh_token,
                redirect_uri=self.credentials.redirect_uri,
            )
        return dict(token)

    async def get_access_token(self) -> str:
        """Get a fresh access token.

        Returns:
            The `access_token` field of the token response.
        """
        token = await self.fetch_token()
        return token["access_token"]
