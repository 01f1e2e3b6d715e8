"""Shared transport for the Face API clients.

Every outbound call returns a ProviderResult rather than raising, so the
pipeline can tell "the provider answered with nothing" apart from "the
provider could not be reached or refused the request".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

if TYPE_CHECKING:
    from recognizeface.config import Settings

T = TypeVar("T")

SUBSCRIPTION_KEY_HEADER = "Ocp-Apim-Subscription-Key"


@dataclass(frozen=True)
class ProviderFailure:
    """Why a provider call produced no usable data."""

    provider: str
    status_code: int | None
    reason: str


@dataclass(frozen=True)
class ProviderResult(Generic[T]):
    """Either a decoded provider payload or a ProviderFailure."""

    value: T | None = None
    failure: ProviderFailure | None = None

    @classmethod
    def succeeded(cls, value: T) -> ProviderResult[T]:
        return cls(value=value)

    @classmethod
    def failed(cls, failure: ProviderFailure) -> ProviderResult[T]:
        return cls(failure=failure)

    @property
    def ok(self) -> bool:
        return self.failure is None

    def unwrap_or(self, default: T) -> T:
        """Return the payload, or ``default`` if the call failed."""
        if self.failure is not None or self.value is None:
            return default
        return self.value


class FaceApiClient:
    """Base class for clients of one Face API endpoint."""

    provider_name: str = "face-api"

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings: Settings,
        logger: logging.Logger | None = None,
    ) -> None:
        self._http = http_client
        self._settings = settings
        self._endpoint = settings.face_api_endpoint.rstrip("/")
        self._logger = logger or logging.getLogger(type(self).__module__)

    def _url(self, path: str) -> str:
        return f"{self._endpoint}/{path.lstrip('/')}"

    async def _request(
        self,
        method: str,
        path: str,
        adapter: TypeAdapter[T],
        **kwargs: Any,
    ) -> ProviderResult[T]:
        """Send a request and decode a successful response with ``adapter``.

        Transport errors, non-success statuses, and undecodable bodies all
        come back as failed results.
        """
        headers = {SUBSCRIPTION_KEY_HEADER: self._settings.face_api_key}
        headers.update(kwargs.pop("headers", {}))

        try:
            response = await self._http.request(method, self._url(path), headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            return self._fail(None, f"{type(exc).__name__}: {exc}")

        if not response.is_success:
            return self._fail(response.status_code, response.reason_phrase or "request failed")

        try:
            value = adapter.validate_json(response.content)
        except ValidationError as exc:
            return self._fail(response.status_code, f"invalid response body ({exc.error_count()} errors)")

        return ProviderResult.succeeded(value)

    def _fail(self, status_code: int | None, reason: str) -> ProviderResult[Any]:
        self._logger.warning(
            "%s call failed (status=%s): %s",
            self.provider_name,
            status_code,
            reason,
        )
        return ProviderResult.failed(ProviderFailure(self.provider_name, status_code, reason))
