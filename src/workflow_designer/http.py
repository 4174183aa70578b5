"""
HTTP client base for the remote collaborators.

Every call is timeout-bounded. Transport failures, non-2xx statuses and
bodies that are not JSON are all raised as CollaboratorError.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

import httpx

from .config import get_settings
from .errors import CollaboratorError


logger = logging.getLogger(__name__)


class ServiceClient:
    """
    Async JSON client bound to one base URL.

    Pass ``http_client`` to reuse a shared ``httpx.AsyncClient`` (it is not
    closed by this class); otherwise a short-lived client is opened per call.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout_s: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.execution_base_url).rstrip("/")
        self.timeout_s = timeout_s or settings.request_timeout_s
        self._http_client = http_client

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return
        async with httpx.AsyncClient(timeout=httpx.Timeout(self.timeout_s)) as client:
            yield client

    async def request_json(
        self,
        method: str,
        path: str,
        failure_prefix: str,
        parse_error: str,
        json: Any = None,
    ) -> Any:
        """
        Send a request and decode its JSON body.

        Args:
            method: HTTP method
            path: Path below the base URL
            failure_prefix: Message prefix for transport/status failures
            parse_error: Message used when the body is not JSON
            json: Optional JSON request body
        """
        url = self.url_for(path)
        try:
            async with self._session() as client:
                response = await client.request(method, url, json=json)
        except httpx.TimeoutException as e:
            raise CollaboratorError(f"{failure_prefix}: request timed out", url=url) from e
        except httpx.HTTPError as e:
            raise CollaboratorError(f"{failure_prefix}: {e}", url=url) from e

        if response.is_error:
            raise CollaboratorError(
                f"{failure_prefix}: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
                url=url,
            )

        try:
            return response.json()
        except ValueError as e:
            raise CollaboratorError(parse_error, status_code=response.status_code, url=url) from e


__all__ = ["ServiceClient"]
