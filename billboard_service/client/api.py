"""HTTP client for the billboard service.

Calls never raise on transport or decoding problems; they return an
``ApiResult`` and the caller decides whether the failure matters.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Any, Generic, TypeVar

import httpx

from billboard_service.features.flags.schemas import FlagSet, TrackResponse

if TYPE_CHECKING:
    from billboard_service.core.settings.client import ClientSettings
    from billboard_service.features.flags.schemas import EvaluationContext

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ApiResult(Generic[T]):
    """Either a value or the error that prevented getting one."""

    value: T | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> ApiResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: Exception) -> ApiResult[T]:
        return cls(error=error)


class FlagsApiClient:
    """Client for ``/flags``, ``/track`` and the flag admin endpoint.

    Example:
        ```python
        async with FlagsApiClient("http://localhost:3000") as api:
            result = await api.fetch_flags(session.build_context())
            if result.ok:
                session.flags = result.value
        ```
    """

    def __init__(
        self,
        base_url: str,
        api_prefix: str = "/api",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize HTTP client.

        Args:
            base_url: Base URL of the billboard service.
            api_prefix: Prefix the service mounts its API under.
            timeout: Request timeout in seconds.
            transport: Custom transport (tests pass ``httpx.MockTransport``).
        """
        self.base_url = base_url
        self.api_prefix = api_prefix.rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> FlagsApiClient:
        return cls(
            settings.server_url,
            api_prefix=settings.api_prefix,
            timeout=settings.request_timeout,
        )

    async def close(self) -> None:
        """Close the HTTP client and release connections."""
        await self.client.aclose()

    async def __aenter__(self) -> FlagsApiClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def fetch_flags(self, context: EvaluationContext | None) -> ApiResult[FlagSet]:
        """Request a one-shot snapshot for ``context``."""
        body = {"context": context.to_wire() if context else None}
        try:
            data = await self._request("POST", "/flags", json=body)
            return ApiResult.success(FlagSet.model_validate(data))
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Flag request failed", extra={"error": str(e), "error_type": type(e).__name__})
            return ApiResult.failure(e)

    async def track(self, event_name: str, context: EvaluationContext | None) -> ApiResult[bool]:
        """Report an analytics event. ``value`` is the server's ``success`` flag."""
        body = {"eventName": event_name, "context": context.to_wire() if context else None}
        try:
            data = await self._request("POST", "/track", json=body)
            result = TrackResponse.model_validate(data)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(
                "Event tracking failed",
                extra={"event_name": event_name, "error": str(e), "error_type": type(e).__name__},
            )
            return ApiResult.failure(e)
        if not result.success:
            logger.warning("Server could not track event", extra={"event_name": event_name})
        return ApiResult.success(result.success)

    async def set_flag(self, name: str, value: bool) -> ApiResult[FlagSet]:
        """Write a flag through the admin endpoint."""
        try:
            data = await self._request("PUT", f"/flags/{name}", json={"value": value})
            return ApiResult.success(FlagSet.model_validate(data))
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Flag write failed", extra={"flag": name, "error": str(e)})
            return ApiResult.failure(e)

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.api_prefix}{path}"
        logger.debug(f"{method} request to {self.base_url}{url}", extra={"path": url})

        response = await self.client.request(method, url, **kwargs)

        logger.debug(
            f"{method} response from {self.base_url}{url}",
            extra={"path": url, "status_code": response.status_code},
        )
        response.raise_for_status()
        return response.json()


__all__ = ["ApiResult", "FlagsApiClient"]
