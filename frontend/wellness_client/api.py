"""HTTP client for the wellness sessions API.

Every endpoint answers with ``{success, message?, data?, count?, pagination?}``;
non-2xx answers carry ``{success: false, message}`` and surface here as
:class:`ApiError`.
"""
from __future__ import annotations

import logging
from typing import Any

import httpx

from wellness_client.settings import get_client_settings

log = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class WellnessApi:
    """Thin async wrapper; ``token`` is written by the auth context."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
    ) -> None:
        settings = get_client_settings()
        self.base_url = base_url or settings.API_BASE_URL
        self.timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT
        self.token: str | None = None
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "WellnessApi":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        client = await self._get_client()
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        if params:
            params = {k: v for k, v in params.items() if v not in (None, "")}
        try:
            response = await client.request(method, path, json=json, params=params, headers=headers)
        except httpx.HTTPError as exc:
            log.error("API error: %s %s failed: %s", method, path, exc)
            raise ApiError(str(exc) or "API request failed") from exc

        try:
            body = response.json()
        except ValueError:
            body = {}
        if response.is_error:
            message = body.get("message") if isinstance(body, dict) else None
            log.error("API error: %s %s -> %s %s", method, path, response.status_code, message)
            raise ApiError(message or "API request failed", response.status_code)
        return body

    # auth
    async def register(self, email: str, password: str, name: str | None = None) -> dict[str, Any]:
        body: dict[str, Any] = {"email": email, "password": password}
        if name:
            body["name"] = name
        return (await self.request("POST", "/auth/register", json=body))["data"]

    async def login(self, email: str, password: str) -> dict[str, Any]:
        return (await self.request("POST", "/auth/login", json={"email": email, "password": password}))["data"]

    async def me(self) -> dict[str, Any]:
        return (await self.request("GET", "/auth/me"))["data"]

    async def update_details(self, **fields: Any) -> dict[str, Any]:
        return (await self.request("PUT", "/auth/updatedetails", json=fields))["data"]

    async def update_password(self, current_password: str, new_password: str) -> dict[str, Any]:
        return await self.request(
            "PUT", "/auth/updatepassword",
            json={"currentPassword": current_password, "newPassword": new_password},
        )

    async def logout(self) -> dict[str, Any]:
        return await self.request("POST", "/auth/logout")

    # sessions
    async def list_public(self, **params: Any) -> dict[str, Any]:
        """Whole envelope: callers need ``pagination`` and ``count`` as well as ``data``."""
        return await self.request("GET", "/sessions", params=params)

    async def list_mine(self, status: str | None = None) -> list[dict[str, Any]]:
        return (await self.request("GET", "/sessions/my-sessions", params={"status": status}))["data"]

    async def get_session(self, session_id: int) -> dict[str, Any]:
        return (await self.request("GET", f"/sessions/{session_id}"))["data"]

    async def create_session(self, fields: dict[str, Any]) -> dict[str, Any]:
        return (await self.request("POST", "/sessions", json=fields))["data"]

    async def update_session(self, session_id: int, fields: dict[str, Any]) -> dict[str, Any]:
        return (await self.request("PUT", f"/sessions/{session_id}", json=fields))["data"]

    async def delete_session(self, session_id: int) -> dict[str, Any]:
        return await self.request("DELETE", f"/sessions/{session_id}")

    async def publish_session(self, session_id: int) -> dict[str, Any]:
        return (await self.request("PUT", f"/sessions/{session_id}/publish"))["data"]

    async def like_session(self, session_id: int) -> dict[str, Any]:
        return (await self.request("PUT", f"/sessions/{session_id}/like"))["data"]

    async def health(self) -> dict[str, Any]:
        return await self.request("GET", "/health")
