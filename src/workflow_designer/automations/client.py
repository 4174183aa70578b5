"""Client for the remote automations directory."""

from __future__ import annotations

import json
import logging
from typing import List, Optional

import httpx

from ..config import get_settings
from ..errors import CollaboratorError
from ..http import ServiceClient
from .models import AutomationAction


logger = logging.getLogger(__name__)


def _is_action(item: object) -> bool:
    return (
        isinstance(item, dict)
        and isinstance(item.get("id"), str)
        and isinstance(item.get("label"), str)
        and isinstance(item.get("params"), list)
        and all(isinstance(param, str) for param in item["params"])
    )


class AutomationsClient(ServiceClient):
    """GETs the list of available automation actions."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        automations_path: Optional[str] = None,
        timeout_s: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(base_url=base_url, timeout_s=timeout_s, http_client=http_client)
        self.automations_path = automations_path or get_settings().automations_path

    async def get_automations(self) -> List[AutomationAction]:
        """
        Fetch and validate the automations catalog.

        Raises:
            CollaboratorError: On transport failure, non-2xx status, or a
                body that is not an array of ``{id, label, params}`` objects
        """
        data = await self.request_json(
            "GET",
            self.automations_path,
            failure_prefix="Failed to fetch automations",
            parse_error="Failed to parse automations response as JSON",
        )

        if not isinstance(data, list):
            raise CollaboratorError(
                f"Invalid automations response: expected array, got {type(data).__name__}"
            )
        for item in data:
            if not _is_action(item):
                raise CollaboratorError(f"Invalid automation item shape: {json.dumps(item)}")

        return [AutomationAction.model_validate(item) for item in data]


__all__ = ["AutomationsClient"]
