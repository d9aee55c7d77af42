"""
Ergast API client for fetching historical F1 data.
"""

import time
from typing import Any, Dict, Optional

import httpx
import structlog
from pydantic import ValidationError

from f1history.core.cache import ResponseCache
from f1history.core.config import settings
from f1history.core.exceptions import (
    ApiNotReachableError,
    JsonDeserializationError,
    ResourceNotFoundError,
)
from f1history.core.logging_config import log_external_api_call
from f1history.external.schemas import ErgastPayload

logger = structlog.get_logger()

ENVELOPE_KEY = "MRData"


class ErgastClient:
    """Async client for the Ergast API with response caching and error handling."""

    def __init__(
        self,
        cache: Optional[ResponseCache] = None,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the Ergast client.

        Args:
            cache: Response cache shared by every call of this client. A fresh
                one sized from settings is created when omitted.
            base_url: API base URL, defaults to the configured one
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use ``httpx.MockTransport``)
        """
        self.base_url = (base_url or settings.ergast_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.ergast_api_timeout
        self.suffix = settings.ergast_response_suffix
        self.cache = cache if cache is not None else ResponseCache(settings.cache_max_size)
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        """Async context manager entry."""
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def _ensure_client(self) -> None:
        """Ensure the HTTP client is initialized."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
                headers={"Accept": "application/json"},
            )

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def get(self, path: str) -> Dict[str, Any]:
        """
        Get the payload of a logical resource, served from cache when possible.

        Args:
            path: Logical resource path, e.g. ``"2021/22/qualifying"``

        Returns:
            The decoded object found under the ``MRData`` envelope

        Raises:
            ApiNotReachableError: If the request fails
            JsonDeserializationError: If the body is not an enveloped JSON object
            CacheError: If the cache lock cannot be acquired
        """
        return await self.cache.get_or_fetch(
            path, lambda: self._make_request("GET", path)
        )

    async def get_payload(self, path: str) -> ErgastPayload:
        """
        Get a logical resource decoded into provider records.

        Args:
            path: Logical resource path

        Returns:
            Strictly decoded payload

        Raises:
            ApiNotReachableError: If the request fails
            JsonDeserializationError: If the payload does not match the schema
            CacheError: If the cache lock cannot be acquired
        """
        data = await self.get(path)
        try:
            return ErgastPayload.model_validate(data)
        except ValidationError as e:
            logger.error(
                "Ergast payload did not match schema",
                path=path,
                error_count=e.error_count(),
            )
            raise JsonDeserializationError(
                f"Unexpected Ergast payload for {path}: {e}"
            ) from e

    async def _make_request(self, method: str, path: str) -> Dict[str, Any]:
        """
        Make an HTTP request to the Ergast API.

        Args:
            method: HTTP method
            path: Logical resource path

        Returns:
            Envelope payload

        Raises:
            ApiNotReachableError: If the transport fails or the status is not 2xx
            ResourceNotFoundError: If the resource does not exist upstream
            JsonDeserializationError: If the body cannot be decoded
        """
        await self._ensure_client()

        url = f"{self.base_url}/{path}{self.suffix}"
        start_time = time.time()

        if self._client is None:
            raise ApiNotReachableError("HTTP client not initialized")

        logger.info("Making Ergast API request", method=method, url=url)

        try:
            response = await self._client.request(method, url)
        except httpx.TimeoutException as e:
            response_time_ms = int((time.time() - start_time) * 1000)
            log_external_api_call(
                logger, "ergast", url, method, 0, response_time_ms, error=str(e)
            )
            raise ApiNotReachableError(f"Ergast API request timeout: {str(e)}", 408)
        except httpx.RequestError as e:
            response_time_ms = int((time.time() - start_time) * 1000)
            log_external_api_call(
                logger, "ergast", url, method, 0, response_time_ms, error=str(e)
            )
            raise ApiNotReachableError(f"Ergast API request error: {str(e)}")

        response_time_ms = int((time.time() - start_time) * 1000)

        if not response.is_success:
            log_external_api_call(
                logger,
                "ergast",
                url,
                method,
                response.status_code,
                response_time_ms,
                error=response.text[:200],
            )
            if response.status_code == 404:
                raise ResourceNotFoundError(f"Ergast API has no resource {path}")
            raise ApiNotReachableError(
                f"Ergast API request failed with status {response.status_code}",
                response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise JsonDeserializationError(
                f"Ergast API returned invalid JSON for {path}: {str(e)}"
            ) from e

        envelope = data.get(ENVELOPE_KEY) if isinstance(data, dict) else None
        if not isinstance(envelope, dict):
            raise JsonDeserializationError(
                f"Ergast API response for {path} has no {ENVELOPE_KEY} object"
            )

        log_external_api_call(
            logger, "ergast", url, method, response.status_code, response_time_ms
        )
        result: Dict[str, Any] = envelope
        return result
