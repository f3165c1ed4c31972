"""
PeopleDesk - Remote Backend

Transport used by the live-mode facades.

The facade layer only depends on the RemoteBackend contract; the httpx
implementation here is the one the application wires in when USE_MOCK is
off. Error responses are translated back into the same exceptions the
simulation raises, so callers never branch on mode.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional

import httpx
from fastapi.encoders import jsonable_encoder

from peopledesk.config import Settings, get_settings
from peopledesk.utils.error_handling import (
    BackendUnavailableException,
    exception_from_error_body,
)

logger = logging.getLogger(__name__)


def build_query_params(params: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Drop parameters whose value is None or an empty string.

    Enum members are sent by value; everything else goes through the
    JSON encoder so dates and Decimals serialize the same way as bodies.
    """
    if not params:
        return {}
    query = {}
    for key, value in params.items():
        if value is None or (isinstance(value, str) and value == ""):
            continue
        encoded = jsonable_encoder(value)
        query[key] = str(encoded).lower() if isinstance(encoded, bool) else encoded
    return query


class RemoteBackend(ABC):
    """Contract for forwarding one facade operation to the HR backend."""

    @abstractmethod
    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> Any:
        """
        Perform one request and return the decoded JSON body.

        Raises:
            AppException subclasses mirroring the backend's error envelope
            BackendUnavailableException: transport failure or 5xx
        """

    async def aclose(self) -> None:
        """Release transport resources. Default is a no-op."""


class HttpRemoteBackend(RemoteBackend):
    """httpx-based RemoteBackend."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        client: Optional[httpx.AsyncClient] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Args:
            base_url: Backend root URL. Defaults to settings.
            timeout: Request timeout in seconds. Defaults to settings.
            transport: Optional httpx transport (tests pass MockTransport
                or ASGITransport).
            client: Pre-built client; takes precedence over the above.
        """
        settings = settings or get_settings()
        self.base_url = (base_url or settings.backend_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.backend_timeout_seconds
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=transport,
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
        )

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> Any:
        url = path if path.startswith("/") else f"/{path}"
        body = jsonable_encoder(json) if json is not None else None

        try:
            response = await self._client.request(
                method.upper(),
                url,
                params=build_query_params(params),
                json=body,
            )
        except httpx.TimeoutException as e:
            logger.error(f"Backend timeout on {method.upper()} {url}: {e}")
            raise BackendUnavailableException(
                message="Request timeout - backend did not respond in time",
                original_error=e,
                details={"path": url},
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Backend network error on {method.upper()} {url}: {e}")
            raise BackendUnavailableException(
                message=f"Network error: {e}",
                original_error=e,
                details={"path": url},
            ) from e

        data = self._decode(response)
        if response.is_success:
            return data

        error = exception_from_error_body(response.status_code, data)
        if response.status_code >= 500:
            logger.error(
                f"Backend error {response.status_code} on {method.upper()} {url}: {error.message}"
            )
        else:
            logger.info(
                f"Backend rejected {method.upper()} {url} with {response.status_code}: {error.message}"
            )
        raise error

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except json.JSONDecodeError:
            if response.is_success:
                raise BackendUnavailableException(
                    message="Invalid JSON response from backend",
                    details={"status_code": response.status_code},
                )
            return {"detail": {"message": response.text}}

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
