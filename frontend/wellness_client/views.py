"""Browse (public feed) and manage (my sessions) views."""
from __future__ import annotations

import logging
from typing import Any

from wellness_client.api import ApiError
from wellness_client.auth_context import AuthContext

log = logging.getLogger(__name__)

ALL = "all"
STATUS_FILTERS = (ALL, "draft", "published")


def _index(sessions: list[dict[str, Any]], session_id: int) -> int | None:
    for i, s in enumerate(sessions):
        if s["id"] == session_id:
            return i
    return None


class BrowseView:
    """Published sessions with server-side filters plus a local search/tag filter."""

    def __init__(self, auth: AuthContext) -> None:
        self.auth = auth
        self.sessions: list[dict[str, Any]] = []
        self.pagination: dict[str, Any] = {}
        self.loading = False
        self.search_term = ""
        self.selected_tag = ALL
        self.like_pending: set[int] = set()

    async def refresh(self, **filters: Any) -> None:
        """filters: page, limit, search, category, difficulty"""
        self.loading = True
        try:
            body = await self.auth.api.list_public(**filters)
            self.sessions = body.get("data") or []
            self.pagination = body.get("pagination") or {}
        except ApiError as exc:
            log.error("Failed to fetch sessions: %s", exc)
        finally:
            self.loading = False

    @property
    def all_tags(self) -> list[str]:
        tags = dict.fromkeys(tag for s in self.sessions for tag in s.get("tags", []))
        return [ALL, *tags]

    @property
    def visible(self) -> list[dict[str, Any]]:
        term = self.search_term.lower()

        def matches(s: dict[str, Any]) -> bool:
            text_ok = term in s["title"].lower() or term in s["description"].lower()
            tag_ok = self.selected_tag == ALL or self.selected_tag in s.get("tags", [])
            return text_ok and tag_ok

        return [s for s in self.sessions if matches(s)]

    async def toggle_like(self, session_id: int) -> bool:
        """Flip the like locally, confirm with the server, roll back on failure."""
        i = _index(self.sessions, session_id)
        if i is None or session_id in self.like_pending or self.auth.user is None:
            return False
        me = self.auth.user["id"]
        before = list(self.sessions[i].get("likes", []))
        after = [u for u in before if u != me] if me in before else [*before, me]
        self.sessions[i] = {**self.sessions[i], "likes": after, "like_count": len(after)}
        self.like_pending.add(session_id)
        try:
            updated = await self.auth.api.like_session(session_id)
        except ApiError as exc:
            log.error("Like failed: %s", exc)
            self._patch(session_id, likes=before, like_count=len(before))
            return False
        finally:
            self.like_pending.discard(session_id)
        self._patch(session_id, likes=updated["likes"], like_count=updated["like_count"])
        return True

    def _patch(self, session_id: int, **values: Any) -> None:
        i = _index(self.sessions, session_id)
        if i is not None:
            self.sessions[i] = {**self.sessions[i], **values}


class ManageView:
    """The signed-in user's own sessions, drafts and published."""

    def __init__(self, auth: AuthContext) -> None:
        self.auth = auth
        self.sessions: list[dict[str, Any]] = []
        self.loading = False
        self._filter = ALL

    @property
    def filter(self) -> str:
        return self._filter

    @filter.setter
    def filter(self, value: str) -> None:
        if value not in STATUS_FILTERS:
            raise ValueError(f"filter must be one of {STATUS_FILTERS}")
        self._filter = value

    @property
    def counts(self) -> dict[str, int]:
        counts = {key: 0 for key in STATUS_FILTERS}
        counts[ALL] = len(self.sessions)
        for s in self.sessions:
            counts[s["status"]] = counts.get(s["status"], 0) + 1
        return counts

    @property
    def visible(self) -> list[dict[str, Any]]:
        if self._filter == ALL:
            return list(self.sessions)
        return [s for s in self.sessions if s["status"] == self._filter]

    async def refresh(self) -> None:
        if not self.auth.is_authenticated:
            return
        self.loading = True
        try:
            self.sessions = await self.auth.api.list_mine()
        except ApiError as exc:
            log.error("Failed to fetch user sessions: %s", exc)
        finally:
            self.loading = False

    async def publish(self, session_id: int) -> bool:
        try:
            await self.auth.api.publish_session(session_id)
        except ApiError as exc:
            log.error("Failed to publish session: %s", exc)
            return False
        await self.refresh()
        return True

    async def delete(self, session_id: int) -> bool:
        """Drop the row immediately; put it back if the server refuses."""
        i = _index(self.sessions, session_id)
        removed = self.sessions.pop(i) if i is not None else None
        try:
            await self.auth.api.delete_session(session_id)
        except ApiError as exc:
            log.error("Failed to delete session: %s", exc)
            if removed is not None:
                self.sessions.insert(i, removed)
            return False
        await self.refresh()
        return True
