"""
JobDash - HTTP client for the tracker API.

Thin wrapper around httpx.AsyncClient that:
- prefixes every path with the configured base URL (origin + /api)
- attaches the bearer token when one is given
- turns non-2xx responses and transport failures into typed errors

Error mapping:
    401 on an authenticated request  -> SessionExpiredError
    401 on login/registration        -> ApiError (bad credentials)
    404                              -> NotFoundError
    other 4xx/5xx                    -> ApiError
    connect/timeout/decode failures  -> TransportError
"""
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional
import logging

import httpx

from .config import ApiSettings, settings as default_settings
from .errors import ApiError, NotFoundError, SessionExpiredError, TransportError

logger = logging.getLogger("jobdash.api")


def _error_message(response: httpx.Response, default: str) -> str:
    """Pull the server's `message` out of an error body, else use the default."""
    try:
        data = response.json()
    except ValueError:
        return default
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return default


class ApiClient:
    """
    Async client for the tracker API.

    One instance is shared by the session and every store. The token is
    passed per call so the client never caches credentials itself.
    """

    def __init__(
        self,
        api_settings: Optional[ApiSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = api_settings or default_settings.api
        self.base_url = self.settings.base_url
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.settings.request_timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    async def close(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _headers(token: Optional[str]) -> Dict[str, str]:
        return {"Authorization": f"Bearer {token}"} if token else {}

    def _raise_for_status(self, response: httpx.Response, default_message: str, authenticated: bool) -> None:
        if response.is_success:
            return
        status = response.status_code
        message = _error_message(response, default_message)
        logger.warning(f"{response.request.method} {response.request.url.path} -> {status}: {message}")
        if status == 401 and authenticated:
            raise SessionExpiredError()
        if status == 404:
            raise NotFoundError(message, status)
        raise ApiError(message, status)

    async def request(
        self,
        method: str,
        path: str,
        *,
        token: Optional[str] = None,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        default_message: str = "API request failed",
    ) -> Any:
        """
        Send a JSON request and return the decoded JSON body.

        Args:
            method: HTTP method
            path: Path relative to the API base (e.g. "/jobs")
            token: Bearer token; omit only for login/registration
            json: Request body
            params: Query string parameters
            default_message: Used when the server's error body has no message

        Returns:
            Decoded JSON, or None for an empty body

        Raises:
            SessionExpiredError, NotFoundError, ApiError, TransportError
        """
        logger.debug(f"Making API request: {method} {self.base_url}{path}")
        try:
            response = await self._client.request(
                method,
                path,
                json=json,
                params=params,
                headers=self._headers(token),
            )
        except httpx.TimeoutException as e:
            logger.error(f"{method} {path} timed out: {e}")
            raise TransportError(f"{default_message}: request timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise TransportError(f"{default_message}: network error") from e

        self._raise_for_status(response, default_message, authenticated=token is not None)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"{method} {path} returned a non-JSON body")
            raise TransportError(f"{default_message}: invalid response from server") from e

    async def get(self, path: str, **kwargs) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs) -> Any:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs) -> Any:
        return await self.request("PUT", path, **kwargs)

    async def delete(self, path: str, **kwargs) -> Any:
        return await self.request("DELETE", path, **kwargs)

    @asynccontextmanager
    async def stream(
        self,
        path: str,
        *,
        token: str,
        default_message: str = "Download failed",
    ) -> AsyncIterator[httpx.Response]:
        """
        Open a streaming GET for binary payloads.

        The response is closed when the context exits, so the body is
        never held past the caller's write loop.
        """
        logger.debug(f"Opening download stream: {self.base_url}{path}")
        try:
            async with self._client.stream("GET", path, headers=self._headers(token)) as response:
                if not response.is_success:
                    await response.aread()
                    self._raise_for_status(response, default_message, authenticated=True)
                yield response
        except httpx.TimeoutException as e:
            logger.error(f"GET {path} timed out: {e}")
            raise TransportError(f"{default_message}: request timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"GET {path} failed: {e}")
            raise TransportError(f"{default_message}: network error") from e
