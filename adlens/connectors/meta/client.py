"""ADLENS — Meta Graph API Client.

Handles token attachment, parameter encoding and transport. Timeout and
retry semantics are delegated to the RequestExecutor.
"""

import json
from typing import Any, Dict, Optional

import httpx

from adlens.config import settings
from adlens.connectors.meta.executor import RequestExecutor
from adlens.core.logging import get_logger
from adlens.models.request_models import RetryPolicy

logger = get_logger("meta.client")


def _encode_value(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_params(values: Dict[str, Any] | None) -> Dict[str, str]:
    """Drop unset values and stringify the rest; nested objects become JSON."""
    out: Dict[str, str] = {}
    for key, value in (values or {}).items():
        if value is None or value == "":
            continue
        out[key] = _encode_value(value)
    return out


class MetaClient:
    """Async HTTP client for the Meta Marketing API."""

    def __init__(
        self,
        access_token: str | None = None,
        base_url: str | None = None,
        api_version: str | None = None,
        policy: RetryPolicy | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.access_token = access_token or settings.meta_access_token
        self.base_url = (base_url or settings.meta_base_url).rstrip("/")
        self.api_version = api_version or settings.meta_api_version
        self.executor = RequestExecutor(policy or settings.retry_policy)
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def graph_url(self) -> str:
        return f"{self.base_url}/{self.api_version}"

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            # The executor owns the deadline; disable httpx's own timeout
            self._client = httpx.AsyncClient(timeout=None, transport=self._transport)
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "MetaClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # ── Core Request Method ──

    async def call(
        self,
        method: str,
        path: str,
        params: Dict[str, Any] | None = None,
        body: Dict[str, Any] | None = None,
    ) -> Any:
        """Issue one logical Graph API call with timeout + retry."""
        method = method.upper()
        if method not in ("GET", "POST"):
            raise ValueError(f"Unsupported method: {method}")

        url = f"{self.graph_url}/{path.lstrip('/')}"
        query = build_params(params)
        query["access_token"] = self.access_token
        form = build_params(body) if body is not None else None

        async def send() -> httpx.Response:
            client = await self._get_client()
            return await client.request(method, url, params=query, data=form)

        return await self.executor.execute(send, method=method, path=path)

    async def get(self, path: str, params: Dict[str, Any] | None = None) -> Any:
        return await self.call("GET", path, params=params)

    async def post(self, path: str, body: Dict[str, Any]) -> Any:
        return await self.call("POST", path, body=body)
