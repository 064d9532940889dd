"""OAuth token lifecycle for a single Zoho CRM tenant."""

import asyncio
import logging
import time
from typing import Callable

import httpx

from ..core.errors import AuthenticationError
from ..core.models import CachedToken, TenantCredentials

logger = logging.getLogger(__name__)

# Tokens are treated as expired this long before Zoho says they are
EXPIRY_BUFFER_MS = 60_000

DEFAULT_TOKEN_URL = "https://accounts.zoho.com/oauth/v2/token"

# Checked in order against the lowercased API base URL
REGIONAL_TOKEN_URLS = (
    (".eu", "https://accounts.zoho.eu/oauth/v2/token"),
    (".in", "https://accounts.zoho.in/oauth/v2/token"),
    (".com.au", "https://accounts.zoho.com.au/oauth/v2/token"),
    (".com.cn", "https://accounts.zoho.com.cn/oauth/v2/token"),
    (".jp", "https://accounts.zoho.jp/oauth/v2/token"),
)


def resolve_token_url(base_url: str) -> str:
    """
    Map a Zoho API domain to its regional accounts token endpoint.

    Args:
        base_url: API base URL (e.g., "https://www.zohoapis.eu")

    Returns:
        Token endpoint URL, the global one when no region matches
    """
    domain = base_url.lower()
    for suffix, token_url in REGIONAL_TOKEN_URLS:
        if suffix in domain:
            return token_url
    return DEFAULT_TOKEN_URL


class TokenManager:
    """
    Produces a valid bearer token for exactly one tenant.

    The cached token lives on the instance only. A manager must never be
    shared between requests carrying different credentials.
    """

    def __init__(
        self,
        credentials: TenantCredentials,
        http_client: httpx.AsyncClient,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the token manager.

        Args:
            credentials: Tenant credentials for this client instance
            http_client: HTTP client used for the token endpoint
            clock: Returns the current epoch time in seconds
        """
        self.credentials = credentials
        self.http_client = http_client
        self.clock = clock
        self._cached: CachedToken | None = None
        self._lock = asyncio.Lock()

    @property
    def token_url(self) -> str:
        return resolve_token_url(self.credentials.api_base_url)

    def _now_ms(self) -> float:
        return self.clock() * 1000

    async def get_access_token(self) -> str:
        """
        Return a bearer token, refreshing it when needed.

        Returns:
            Access token string

        Raises:
            AuthenticationError: If credentials are missing or refresh fails
        """
        if self.credentials.access_token:
            return self.credentials.access_token

        if self._cached and self._cached.is_valid(self._now_ms()):
            logger.debug("Using cached access token")
            return self._cached.access_token

        async with self._lock:
            # Another coroutine may have refreshed while we waited
            if self._cached and self._cached.is_valid(self._now_ms()):
                return self._cached.access_token

            self._cached = await self._refresh()
            return self._cached.access_token

    async def _refresh(self) -> CachedToken:
        if not self.credentials.has_refresh_flow:
            raise AuthenticationError(
                "Missing OAuth credentials. Provide X-CRM-Access-Token or all of "
                "X-CRM-Client-ID, X-CRM-Client-Secret, and X-CRM-Refresh-Token headers."
            )

        token_url = self.token_url
        logger.info(f"Refreshing OAuth token via {token_url}")

        form = {
            "grant_type": "refresh_token",
            "client_id": self.credentials.client_id,
            "client_secret": self.credentials.client_secret,
            "refresh_token": self.credentials.refresh_token,
        }

        try:
            response = await self.http_client.post(token_url, data=form)
        except httpx.RequestError as e:
            raise AuthenticationError(f"Failed to refresh OAuth token: {e}")

        if not response.is_success:
            raise AuthenticationError(f"Failed to refresh OAuth token: {response.text}")

        try:
            data = response.json()
        except ValueError:
            raise AuthenticationError(f"Failed to refresh OAuth token: {response.text}")

        if data.get("error"):
            raise AuthenticationError(f"OAuth token refresh failed: {data['error']}")

        if not data.get("access_token") or data.get("expires_in") is None:
            raise AuthenticationError("Token refresh returned no access_token")

        expires_at_ms = self._now_ms() + data["expires_in"] * 1000 - EXPIRY_BUFFER_MS
        logger.debug(f"OAuth token valid for {data['expires_in']}s")
        return CachedToken(access_token=data["access_token"], expires_at_ms=expires_at_ms)
