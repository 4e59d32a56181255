"""Session Workflow Service.

Owns the draft -> published lifecycle, ownership checks, likes and view
counting. Every operation is one read-modify-write against one record; there
is no conflict detection, concurrent writers are last-write-wins.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from wellness_api.errors import InvalidState, NotFound, NotOwner
from wellness_api.models import Category, Difficulty, SessionStatus, User, WellnessSession
from wellness_api.repositories.session_repo import SessionRepository
from wellness_api.schemas.envelope import PageRef, Pagination
from wellness_api.schemas.session import SessionCreate, SessionUpdate

log = logging.getLogger(__name__)

NOT_FOUND = "Session not found"


def normalize_tags(raw: str | Iterable[str] | None) -> list[str]:
    """Split a comma separated string (or list) into trimmed, lowercased, de-duplicated tags.

    First occurrence wins, so the original order is kept.
    """
    if raw is None:
        return []
    parts = raw.split(",") if isinstance(raw, str) else raw
    seen: dict[str, None] = {}
    for part in parts:
        tag = str(part).strip().lower()
        if tag:
            seen.setdefault(tag, None)
    return list(seen)


def page_info(page: int, limit: int, total: int) -> Pagination:
    info = Pagination(total=total)
    if page * limit < total:
        info.next = PageRef(page=page + 1, limit=limit)
    if page > 1:
        info.prev = PageRef(page=page - 1, limit=limit)
    return info


@dataclass(slots=True)
class PublicListing:
    items: list[WellnessSession]
    total: int
    pagination: Pagination


class SessionWorkflow:
    def __init__(self, db: Session):
        self.db = db
        self.sessions = SessionRepository(db)

    def _get_or_404(self, session_id: int) -> WellnessSession:
        sess = self.sessions.get(session_id)
        if not sess:
            raise NotFound(NOT_FOUND)
        return sess

    def _get_owned(self, session_id: int, actor: User, action: str) -> WellnessSession:
        sess = self._get_or_404(session_id)
        if not sess.is_owned_by(actor.id) and not actor.is_admin:
            raise NotOwner(f"Not authorized to {action} this session")
        return sess

    def create(self, owner: User, payload: SessionCreate) -> WellnessSession:
        fields = payload.model_dump(exclude={"tags"})
        sess = self.sessions.create(
            owner.id,
            status=SessionStatus.draft,
            tags=normalize_tags(payload.tags),
            **fields,
        )
        log.info("session %s created by user %s", sess.id, owner.id)
        return sess

    def update(self, session_id: int, actor: User, payload: SessionUpdate) -> WellnessSession:
        sess = self._get_owned(session_id, actor, "update")
        changes = payload.changes()
        if "tags" in changes:
            changes["tags"] = normalize_tags(changes["tags"])
        return self.sessions.update(sess, changes)

    def delete(self, session_id: int, actor: User) -> None:
        sess = self._get_owned(session_id, actor, "delete")
        self.sessions.delete(sess)
        log.info("session %s deleted by user %s", session_id, actor.id)

    def publish(self, session_id: int, actor: User) -> WellnessSession:
        sess = self._get_owned(session_id, actor, "publish")
        if sess.status == SessionStatus.published:
            return sess
        sess.status = SessionStatus.published
        sess = self.sessions.save(sess)
        log.info("session %s published", session_id)
        return sess

    def toggle_like(self, session_id: int, actor: User) -> tuple[WellnessSession, bool]:
        """Returns the session and True when the call added the like."""
        sess = self._get_or_404(session_id)
        if sess.status != SessionStatus.published:
            raise InvalidState("Cannot like unpublished session")
        liked = actor not in sess.likers
        if liked:
            sess.likers.append(actor)
        else:
            sess.likers.remove(actor)
        return self.sessions.save(sess), liked

    def view(self, session_id: int, viewer: Optional[User] = None) -> WellnessSession:
        sess = self.sessions.get(session_id)
        is_owner = viewer is not None and sess is not None and sess.is_owned_by(viewer.id)
        # a draft looks exactly like a missing session to anyone but its owner
        if not sess or (sess.status == SessionStatus.draft and not is_owner):
            raise NotFound(NOT_FOUND)
        if viewer is not None and not is_owner:
            sess.views += 1
            sess = self.sessions.save(sess)
        return sess

    def list_public(
        self,
        *,
        search: str | None = None,
        category: Category | None = None,
        difficulty: Difficulty | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> PublicListing:
        result = self.sessions.list_published(
            search=search.strip() if search else None,
            category=category,
            difficulty=difficulty,
            limit=limit,
            offset=(page - 1) * limit,
        )
        return PublicListing(result.items, result.total, page_info(page, limit, result.total))

    def list_owned(self, owner: User, status: SessionStatus | None = None) -> list[WellnessSession]:
        return self.sessions.list_by_owner(owner.id, status=status)
