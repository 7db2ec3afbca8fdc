"""ADLENS — Ad Account Resolution.

The ad account id is the scope for every insights query. It is resolved at
most once per resolver and shared read-only afterwards.
"""

import asyncio
from typing import Optional

from adlens.config import settings
from adlens.connectors.meta.client import MetaClient
from adlens.connectors.meta.executor import CallError
from adlens.core.logging import get_logger
from adlens.models.request_models import ErrorKind

logger = get_logger("meta.account")


class AccountResolver:
    """Lazy, memoized accessor for the ad account id."""

    def __init__(self, client: MetaClient, configured_id: Optional[str] = None):
        self.client = client
        self._configured_id = configured_id
        self._account_id: Optional[str] = None
        self._lock = asyncio.Lock()

    @property
    def cached(self) -> Optional[str]:
        return self._account_id

    async def get(self) -> str:
        """Return the account id, discovering it on first use."""
        if self._account_id:
            return self._account_id
        async with self._lock:
            # Another caller may have finished discovery while we waited
            if self._account_id:
                return self._account_id
            self._account_id = self._configured_id or await self._discover()
            logger.info(f"Using ad account: {self._account_id}")
            return self._account_id

    async def _discover(self) -> str:
        result = await self.client.get(
            "/me/adaccounts", {"fields": "id,name,account_status", "limit": 1}
        )
        accounts = result.get("data") if isinstance(result, dict) else None
        if not accounts:
            raise CallError(
                "No ad accounts found for this access token", 403, ErrorKind.CLIENT
            )
        return str(accounts[0]["id"])

    def reset(self) -> None:
        self._account_id = None


def account_resolver(client: MetaClient) -> AccountResolver:
    """Resolver seeded from settings.meta_ad_account_id when configured."""
    return AccountResolver(client, settings.meta_ad_account_id)
