"""Authenticated HTTP transport for the CambAI API."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from ..config import settings

logger = logging.getLogger(__name__)


@dataclass
class BinaryPayload:
    """Raw response body returned when a binary response is requested."""

    content: bytes
    status_code: int
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def content_type(self) -> Optional[str]:
        return self.headers.get("content-type")


class CambAIClient:
    """Issues pre-authenticated calls against the CambAI job API.

    HTTP errors are raised by ``raise_for_status`` and left for the caller.
    """

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        key = (api_key or settings.cambai_api_key or "").strip()
        if not key:
            raise RuntimeError("CAMBAI_API_KEY missing; set your CambAI API key")
        raw_base = (base_url or settings.cambai_base_url or "").strip()
        if not raw_base.startswith(("http://", "https://")):
            raise RuntimeError("CAMBAI_BASE_URL must include http/https scheme")
        self._base_url = raw_base.rstrip("/")
        self._headers = {"x-api-key": key}
        self._timeout = timeout or settings.http_timeout
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    def _build_url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self._base_url}/{path.lstrip('/')}"

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
        binary: bool = False,
    ) -> Any:
        """Send one request and return the parsed JSON body or a :class:`BinaryPayload`."""

        url = self._build_url(path)
        logger.debug("CambAI %s %s params=%s", method, url, params)
        async with httpx.AsyncClient(
            timeout=self._timeout,
            headers=self._headers,
            transport=self._transport,
        ) as client:
            accept = "*/*" if binary else "application/json"
            resp = await client.request(
                method, url, json=json, params=params, headers={"Accept": accept}
            )
            resp.raise_for_status()
            if binary:
                return BinaryPayload(
                    content=resp.content,
                    status_code=resp.status_code,
                    headers=dict(resp.headers),
                )
            return resp.json()
