"""Application-scoped authentication state.

One :class:`AuthContext` is built at startup and handed to every view; there
is no module-level singleton. ``logout`` tears the state down.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol

from wellness_client.api import ApiError, WellnessApi

log = logging.getLogger(__name__)


class TokenStore(Protocol):
    def load(self) -> str | None: ...
    def save(self, token: str) -> None: ...
    def clear(self) -> None: ...


class MemoryTokenStore:
    def __init__(self, token: str | None = None) -> None:
        self._token = token

    def load(self) -> str | None:
        return self._token

    def save(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class FileTokenStore:
    """Keeps the token across runs in a small JSON file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()

    def load(self) -> str | None:
        try:
            return json.loads(self.path.read_text()).get("token")
        except (OSError, ValueError):
            return None

    def save(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"token": token}))

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class AuthContext:
    def __init__(self, api: WellnessApi, store: TokenStore | None = None) -> None:
        self.api = api
        self.store: TokenStore = store or MemoryTokenStore()
        self.user: dict[str, Any] | None = None
        self.loading = True
        self._set_token(self.store.load())

    @property
    def token(self) -> str | None:
        return self.api.token

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token) and self.user is not None

    def _set_token(self, token: str | None) -> None:
        self.api.token = token
        if token:
            self.store.save(token)
        else:
            self.store.clear()

    async def restore(self) -> dict[str, Any] | None:
        """Validate a persisted token against ``/auth/me``; drop it if the server refuses."""
        try:
            if self.token:
                try:
                    self.user = await self.api.me()
                except ApiError as exc:
                    log.error("Auth check failed: %s", exc)
                    self._set_token(None)
                    self.user = None
            return self.user
        finally:
            self.loading = False

    async def login(self, email: str, password: str) -> dict[str, Any]:
        data = await self.api.login(email, password)
        self._set_token(data["token"])
        self.user = data["user"]
        return data

    async def register(self, email: str, password: str, name: str | None = None) -> dict[str, Any]:
        data = await self.api.register(email, password, name)
        self._set_token(data["token"])
        self.user = data["user"]
        return data

    async def logout(self) -> None:
        try:
            if self.token:
                await self.api.logout()
        except ApiError as exc:
            log.error("Logout failed: %s", exc)
        finally:
            self._set_token(None)
            self.user = None

    def update_user(self, user: dict[str, Any]) -> None:
        self.user = user
