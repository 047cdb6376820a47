"""
API Client - JSON-over-HTTP access to the canvas backend.

Conventional REST shape: list, get-by-id, create, partial update, delete.
Each call opens its own aiohttp session and returns the decoded JSON body.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import aiohttp

from creator_canvas.config import CanvasConfig
from creator_canvas.core.errors import AuthenticationError, NotFoundError, RemoteError


logger = logging.getLogger(__name__)


def _query_params(params: dict[str, Any] | None) -> dict[str, str]:
    """Drop unset values and stringify the rest for the query string."""
    result = {}
    for key, value in (params or {}).items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        result[key] = str(value)
    return result


class ApiClient:
    """
    Async client for the backend REST API.

    Args:
        config: Supplies base URL, token, user id and timeout
    """

    def __init__(self, config: CanvasConfig | None = None):
        self.config = config or CanvasConfig()
        self.base_url = self.config.api_base_url.rstrip("/")

    def get_headers(self) -> dict[str, str]:
        """Get default headers for API requests."""
        headers = {
            "Content-Type": "application/json",
            "X-User-Id": self.config.user_id,
        }
        if self.config.api_token:
            headers["Authorization"] = f"Bearer {self.config.api_token}"
        return headers

    async def get(self, path: str, params: dict[str, Any] | None = None) -> dict:
        return await self._request("GET", path, params=params)

    async def post(self, path: str, body: dict[str, Any]) -> dict:
        return await self._request("POST", path, body=body)

    async def patch(self, path: str, body: dict[str, Any]) -> dict:
        return await self._request("PATCH", path, body=body)

    async def delete(self, path: str) -> dict:
        return await self._request("DELETE", path)

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> dict:
        url = f"{self.base_url}{path}"
        timeout = aiohttp.ClientTimeout(total=self.config.request_timeout)
        logger.debug("%s %s", method, url)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.request(
                    method,
                    url,
                    params=_query_params(params),
                    json=body,
                    headers=self.get_headers(),
                ) as resp:
                    text = await resp.text()
                    status = resp.status
        except aiohttp.ClientError as e:
            raise RemoteError(f"{method} {path} failed: {e}") from e

        data = self._decode(text, status)
        self._check_error(status, data, path)
        return data

    def _decode(self, text: str, status: int) -> dict:
        if not text:
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            if status >= 400:
                return {"message": text}
            raise RemoteError(f"Invalid JSON from backend: {e}", status) from e
        return data if isinstance(data, dict) else {"data": data}

    def _check_error(self, status: int, data: dict, path: str) -> None:
        """Check for API errors."""
        if status in (401, 403):
            raise AuthenticationError(f"Not authorized for {path}", status)
        if status == 404:
            raise NotFoundError(f"Not found: {path}", status)
        if status >= 400:
            error = data.get("error")
            if isinstance(error, dict):
                message = error.get("message", "Unknown error")
            else:
                message = error or data.get("message") or "Unknown error"
            raise RemoteError(f"Backend error {status}: {message}", status)
