from __future__ import annotations
from typing import Optional
from sqlalchemy import or_, select
from wellness_api.models import SessionStatus, SessionTag, WellnessSession
from wellness_api.repositories.base import BaseRepository, Page


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class SessionRepository(BaseRepository[WellnessSession]):
    model = WellnessSession

    def _newest_first(self, stmt):
        return stmt.order_by(WellnessSession.created_at.desc(), WellnessSession.id.desc())

    # READS
    def get(self, session_id: int) -> Optional[WellnessSession]:
        return self.db.get(WellnessSession, session_id)

    def list_by_owner(self, user_id: int, *, status: SessionStatus | None = None) -> list[WellnessSession]:
        stmt = select(WellnessSession).where(WellnessSession.user_id == user_id)
        if status is not None:
            stmt = stmt.where(WellnessSession.status == status)
        return list(self.db.execute(self._newest_first(stmt)).scalars().all())

    def list_published(
        self,
        *,
        search: str | None = None,
        category: str | None = None,
        difficulty: str | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> Page[WellnessSession]:
        stmt = select(WellnessSession).where(
            WellnessSession.status == SessionStatus.published,
            WellnessSession.is_active.is_(True),
        )
        if search:
            pattern = _like_pattern(search)
            stmt = stmt.where(or_(
                WellnessSession.title.ilike(pattern, escape="\\"),
                WellnessSession.description.ilike(pattern, escape="\\"),
                WellnessSession.tag_rows.any(SessionTag.tag.ilike(pattern, escape="\\")),
            ))
        if category:
            stmt = stmt.where(WellnessSession.category == category)
        if difficulty:
            stmt = stmt.where(WellnessSession.difficulty == difficulty)
        return self.page_from_stmt(self._newest_first(stmt), limit=limit, offset=offset)

    # WRITES
    def create(self, user_id: int, **fields) -> WellnessSession:
        sess = WellnessSession(user_id=user_id, **fields)
        return self.save(sess)

    def update(self, sess: WellnessSession, changes: dict) -> WellnessSession:
        for key, value in changes.items():
            setattr(sess, key, value)
        return self.save(sess)

    def delete(self, sess: WellnessSession) -> None:
        self.db.delete(sess)
        self.db.commit()
