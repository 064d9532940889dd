"""
Authenticated request execution against the Zoho CRM REST API.

The executor performs exactly one HTTP exchange per call and classifies
failures into the error taxonomy. Retrying is left to callers; see
``RetryingExecutor`` for an opt-in wrapper.
"""

import asyncio
import json
import logging
from typing import Any

import httpx

from ..auth.token_manager import TokenManager
from ..core.errors import (
    AuthenticationError,
    CrmApiError,
    RateLimitError,
    is_retryable_error,
)
from ..core.models import TenantCredentials

logger = logging.getLogger(__name__)

DEFAULT_RETRY_AFTER_SECONDS = 60


def _parse_retry_after(value: str | None) -> int:
    if not value:
        return DEFAULT_RETRY_AFTER_SECONDS
    try:
        return int(value)
    except ValueError:
        return DEFAULT_RETRY_AFTER_SECONDS


def _error_message(response: httpx.Response) -> str:
    """Extract a human-readable message from an error response body."""
    text = response.text
    try:
        body = json.loads(text)
    except ValueError:
        body = None

    if isinstance(body, dict):
        message = body.get("message") or body.get("error") or body.get("code")
        if message:
            return str(message)
    return f"API error: {response.status_code}"


class RequestExecutor:
    """
    Sends authenticated requests for one tenant.

    Example:
        executor = RequestExecutor(credentials, http_client, token_manager)
        body = await executor.request("GET", "/crm/v6/Contacts", params={"page": "1"})
    """

    def __init__(
        self,
        credentials: TenantCredentials,
        http_client: httpx.AsyncClient,
        token_manager: TokenManager,
    ):
        """
        Initialize the executor.

        Args:
            credentials: Tenant credentials (for the API base URL)
            http_client: Shared async HTTP client
            token_manager: Token source for the same tenant
        """
        self.credentials = credentials
        self.http_client = http_client
        self.token_manager = token_manager

    def _build_url(self, endpoint: str) -> str:
        base_url = self.credentials.api_base_url.rstrip("/")
        return f"{base_url}{endpoint}"

    async def request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        json_body: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """
        Make one authenticated HTTP request.

        Caller-supplied headers are merged after the defaults, so they can
        override ``Authorization`` and ``Content-Type``.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API path starting with "/" (e.g., "/crm/v6/Contacts")
            params: Query parameters
            json_body: JSON request body
            headers: Extra request headers

        Returns:
            Parsed JSON body, or None for 204 and empty bodies

        Raises:
            RateLimitError: On HTTP 429
            AuthenticationError: On HTTP 401/403 or token failure
            CrmApiError: On any other non-2xx response, an unreadable 2xx
                body, or network failure
        """
        token = await self.token_manager.get_access_token()

        request_headers = {
            "Authorization": f"Zoho-oauthtoken {token}",
            "Content-Type": "application/json",
        }
        if headers:
            request_headers.update(headers)

        url = self._build_url(endpoint)
        logger.debug(f"{method} {url}")

        try:
            response = await self.http_client.request(
                method=method,
                url=url,
                headers=request_headers,
                params=params,
                json=json_body,
            )
        except httpx.RequestError as e:
            raise CrmApiError(
                f"Request failed: {e}", code="NETWORK_ERROR", retryable=True
            )

        if response.status_code == 429:
            retry_after = _parse_retry_after(response.headers.get("Retry-After"))
            logger.warning(f"Rate limited on {endpoint}, retry after {retry_after}s")
            raise RateLimitError("Rate limit exceeded", retry_after)

        if response.status_code in (401, 403):
            raise AuthenticationError("Authentication failed. Check your OAuth credentials.")

        if response.status_code == 204:
            return None

        if not response.is_success:
            message = _error_message(response)
            logger.debug(f"{method} {endpoint} failed with {response.status_code}: {message}")
            raise CrmApiError(message, response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            raise CrmApiError(
                f"Invalid JSON response from {endpoint}",
                response.status_code,
                code="INVALID_RESPONSE",
            )


class RetryingExecutor:
    """
    Wraps an executor and retries retryable failures.

    Backoff is exponential (``2 ** attempt`` seconds). Rate-limit errors wait
    for the server-advised ``retry_after_seconds`` instead.
    """

    def __init__(self, executor: RequestExecutor, max_retries: int = 3, sleep=asyncio.sleep):
        """
        Initialize the wrapper.

        Args:
            executor: Executor performing the actual requests
            max_retries: Maximum number of retries after the first attempt
            sleep: Awaitable sleep function
        """
        self.executor = executor
        self.max_retries = max_retries
        self.sleep = sleep

    @property
    def credentials(self) -> TenantCredentials:
        return self.executor.credentials

    async def request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        json_body: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Same contract as ``RequestExecutor.request``, with retries."""
        attempt = 0
        while True:
            try:
                return await self.executor.request(
                    method, endpoint, params=params, json_body=json_body, headers=headers
                )
            except CrmApiError as e:
                if attempt >= self.max_retries or not is_retryable_error(e):
                    raise

                if isinstance(e, RateLimitError):
                    delay = e.retry_after_seconds
                else:
                    delay = 2 ** attempt

                logger.info(
                    f"Retrying {method} {endpoint} in {delay}s "
                    f"(attempt {attempt + 1}/{self.max_retries}): {e.message}"
                )
                await self.sleep(delay)
                attempt += 1
