"""Session editor: form state, debounced auto-save, save-as-draft and publish.

Status cycle: idle -> saving -> saved -> idle (after ``saved_reset`` seconds),
or saving -> error. Auto-save only fires when every required field is filled.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict, dataclass, fields
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable

from wellness_client.api import ApiError, WellnessApi
from wellness_client.debounce import Debouncer
from wellness_client.settings import get_client_settings

log = logging.getLogger(__name__)

DURATION_OPTIONS = ("15 min", "20 min", "30 min", "45 min", "60 min", "75 min", "90 min")
MY_SESSIONS_ROUTE = "/my-sessions"


class AutoSaveStatus(str, Enum):
    idle = "idle"
    saving = "saving"
    saved = "saved"
    error = "error"


@dataclass
class SessionForm:
    title: str = ""
    description: str = ""
    tags: str = ""
    json_file_url: str = ""
    duration: str = "30 min"

    def problems(self) -> dict[str, str]:
        errors = {}
        if not self.title.strip():
            errors["title"] = "Title is required"
        if not self.description.strip():
            errors["description"] = "Description is required"
        if not self.tags.strip():
            errors["tags"] = "At least one tag is required"
        if not self.duration:
            errors["duration"] = "Duration is required"
        return errors

    @property
    def complete(self) -> bool:
        return not self.problems()

    def to_payload(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_session(cls, session: dict[str, Any]) -> "SessionForm":
        return cls(
            title=session.get("title", ""),
            description=session.get("description", ""),
            tags=", ".join(session.get("tags") or []),
            json_file_url=session.get("json_file_url") or "",
            duration=session.get("duration") or "30 min",
        )


FORM_FIELDS = frozenset(f.name for f in fields(SessionForm))


class SessionEditor:
    def __init__(
        self,
        api: WellnessApi,
        *,
        session_id: int | None = None,
        autosave_delay: float | None = None,
        saved_reset: float | None = None,
        navigate: Callable[[str], None] | None = None,
    ) -> None:
        settings = get_client_settings()
        self.api = api
        self.session_id = session_id
        self.form = SessionForm()
        self.errors: dict[str, str] = {}
        self.status = AutoSaveStatus.idle
        self.last_saved: datetime | None = None
        self.loading = False
        self.saving = False
        self.closed = False
        self._navigate = navigate
        # serializes creates and updates so a draft is created once
        self._persist_lock = asyncio.Lock()
        self._autosave = Debouncer(
            settings.AUTOSAVE_DELAY if autosave_delay is None else autosave_delay, self._auto_save,
        )
        self._status_reset = Debouncer(
            settings.SAVED_STATUS_RESET if saved_reset is None else saved_reset, self._back_to_idle,
        )

    @property
    def is_editing(self) -> bool:
        return self.session_id is not None

    async def load(self) -> None:
        if self.session_id is None:
            return
        self.loading = True
        try:
            session = await self.api.get_session(self.session_id)
            if not self.closed:
                self.form = SessionForm.from_session(session)
        except ApiError as exc:
            log.error("Failed to load session: %s", exc)
        finally:
            self.loading = False

    def edit(self, **changes: str) -> None:
        """Apply field edits and restart the auto-save countdown."""
        unknown = set(changes) - FORM_FIELDS
        if unknown:
            raise ValueError(f"unknown form fields: {', '.join(sorted(unknown))}")
        for name, value in changes.items():
            setattr(self.form, name, value)
            self.errors.pop(name, None)
        if self.closed:
            return
        if self.form.complete:
            self._autosave.schedule()
        else:
            self._autosave.cancel()

    def validate(self) -> bool:
        self.errors = self.form.problems()
        return not self.errors

    async def _persist(self) -> dict[str, Any]:
        async with self._persist_lock:
            payload = self.form.to_payload()
            if self.session_id is not None:
                return await self.api.update_session(self.session_id, payload)
            session = await self.api.create_session(payload)
            # later saves update this draft instead of creating another one
            self.session_id = session["id"]
            return session

    async def _auto_save(self) -> None:
        if self.closed or not self.form.complete:
            return
        self.status = AutoSaveStatus.saving
        try:
            await self._persist()
        except ApiError as exc:
            log.error("Auto-save failed: %s", exc)
            if not self.closed:
                self.status = AutoSaveStatus.error
            return
        if self.closed:
            return
        self.status = AutoSaveStatus.saved
        self.last_saved = datetime.now(timezone.utc)
        self._status_reset.schedule()

    async def _back_to_idle(self) -> None:
        if self.status == AutoSaveStatus.saved:
            self.status = AutoSaveStatus.idle

    async def _save_then_leave(self, publish: bool) -> bool:
        if not self.validate():
            return False
        self._autosave.cancel()
        self.saving = True
        try:
            await self._autosave.drain()
            session = await self._persist()
            if publish:
                await self.api.publish_session(session["id"])
        except ApiError as exc:
            log.error("%s failed: %s", "Publish" if publish else "Save draft", exc)
            self.errors["form"] = exc.message
            return False
        finally:
            self.saving = False
        if self._navigate is not None and not self.closed:
            self._navigate(MY_SESSIONS_ROUTE)
        return True

    async def save_draft(self) -> bool:
        return await self._save_then_leave(publish=False)

    async def publish(self) -> bool:
        return await self._save_then_leave(publish=True)

    def close(self) -> None:
        """Tear down: no timer may fire against a closed editor."""
        self.closed = True
        self._autosave.cancel()
        self._status_reset.cancel()

    async def settle(self) -> None:
        """Wait for a pending or running auto-save to finish."""
        await self._autosave.drain()
