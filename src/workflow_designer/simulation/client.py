"""Client for the remote "run this graph" execution service."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from ..config import get_settings
from ..errors import CollaboratorError
from ..http import ServiceClient
from .models import SimulateResponse


logger = logging.getLogger(__name__)


class ExecutionClient(ServiceClient):
    """POSTs a minimal graph payload and returns the reported steps."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        simulate_path: Optional[str] = None,
        timeout_s: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(base_url=base_url, timeout_s=timeout_s, http_client=http_client)
        self.simulate_path = simulate_path or get_settings().simulate_path

    async def simulate(self, payload: Dict[str, Any]) -> SimulateResponse:
        """
        Run a simulation.

        Raises:
            CollaboratorError: On transport failure, non-2xx status or a
                response without a ``steps`` array
        """
        data = await self.request_json(
            "POST",
            self.simulate_path,
            failure_prefix="Simulation failed",
            parse_error="Failed to parse simulation response as JSON",
            json=payload,
        )

        if not isinstance(data, dict) or not isinstance(data.get("steps"), list):
            raise CollaboratorError(
                f"Invalid simulation response: expected {{ steps: [...] }}, got {data!r}"
            )
        try:
            return SimulateResponse.model_validate(data)
        except ValidationError as e:
            raise CollaboratorError(f"Invalid simulation response: {e}") from e


__all__ = ["ExecutionClient"]
