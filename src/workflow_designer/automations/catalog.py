"""
Automations catalog cache.

A caller-owned cache around ``AutomationsClient``: concurrent callers share
one in-flight fetch, a successful result is reused, and a failure is cached
so later callers get the same error without another request.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import List, Optional

from ..errors import CollaboratorError
from .client import AutomationsClient
from .models import AutomationAction


logger = logging.getLogger(__name__)


class CatalogStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERRORED = "errored"


class AutomationCatalog:
    """
    Deduplicating, failure-caching automations cache.

    Construct once at the composition root and pass it to every consumer.

    Usage:
        catalog = AutomationCatalog(AutomationsClient(base_url="http://svc"))
        actions = await catalog.get()
    """

    def __init__(self, client: Optional[AutomationsClient] = None):
        self._client = client or AutomationsClient()
        self.status = CatalogStatus.IDLE
        self.value: Optional[List[AutomationAction]] = None
        self.error: Optional[CollaboratorError] = None
        self._inflight: Optional[asyncio.Task] = None

    @property
    def inflight(self) -> Optional[asyncio.Task]:
        return self._inflight

    async def get(self) -> List[AutomationAction]:
        """
        Return the catalog, fetching it at most once.

        Raises:
            CollaboratorError: The (cached) fetch failure
        """
        if self.status == CatalogStatus.READY and self.value is not None:
            return list(self.value)
        if self.status == CatalogStatus.ERRORED and self.error is not None:
            raise self.error

        if self._inflight is None:
            self.status = CatalogStatus.LOADING
            self._inflight = asyncio.ensure_future(self._fetch())
        # Shield so one cancelled awaiter does not cancel the shared fetch
        return list(await asyncio.shield(self._inflight))

    async def _fetch(self) -> List[AutomationAction]:
        task = asyncio.current_task()
        try:
            actions = await self._client.get_automations()
        except CollaboratorError as e:
            if self._inflight is task:
                self.status = CatalogStatus.ERRORED
                self.error = e
                logger.error(f"Failed to fetch automations: {e}")
            raise
        else:
            if self._inflight is task:
                self.value = actions
                self.status = CatalogStatus.READY
                logger.info(f"Loaded {len(actions)} automation action(s)")
            else:
                # Superseded by reset(); only its own awaiters see this result
                logger.debug("Discarding automations fetched before reset")
            return actions
        finally:
            if self._inflight is task:
                self._inflight = None

    async def refresh(self) -> List[AutomationAction]:
        """Drop a cached result or failure and fetch again."""
        if self._inflight is None:
            self.reset()
        return await self.get()

    def reset(self) -> None:
        """Forget everything. A fetch still in flight no longer updates the cache."""
        self.status = CatalogStatus.IDLE
        self.value = None
        self.error = None
        self._inflight = None

    def find(self, action_id: str) -> Optional[AutomationAction]:
        """Look up a loaded action by id."""
        for action in self.value or []:
            if action.id == action_id:
                return action
        return None


__all__ = [
    "AutomationCatalog",
    "CatalogStatus",
]
