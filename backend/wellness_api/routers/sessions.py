from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from wellness_api.db import get_db
from wellness_api.deps.auth import get_current_user, get_optional_user
from wellness_api.models import Category, Difficulty, SessionStatus, User
from wellness_api.schemas.envelope import Envelope
from wellness_api.schemas.session import SessionCreate, SessionRead, SessionUpdate
from wellness_api.services.session_workflow import SessionWorkflow
from wellness_api.settings import get_settings

router = APIRouter(prefix="/api/sessions", tags=["sessions"])
settings = get_settings()

def _read(sess) -> SessionRead:
    return SessionRead.model_validate(sess)

def _read_all(items) -> list[SessionRead]:
    return [SessionRead.model_validate(s) for s in items]

@router.get("", response_model=Envelope[list[SessionRead]], response_model_exclude_none=True)
def list_public_sessions(
    db: Session = Depends(get_db),
    _viewer: User | None = Depends(get_optional_user),
    page: int = Query(1, ge=1, le=settings.MAX_PAGE),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT),
    search: str | None = Query(None, max_length=100),
    category: Category | None = None,
    difficulty: Difficulty | None = None,
):
    listing = SessionWorkflow(db).list_public(
        search=search, category=category, difficulty=difficulty, page=page, limit=limit,
    )
    return Envelope(
        data=_read_all(listing.items),
        count=len(listing.items),
        pagination=listing.pagination,
    )

# Declared before /{session_id} so the literal path wins
@router.get("/my-sessions", response_model=Envelope[list[SessionRead]], response_model_exclude_none=True)
def list_my_sessions(
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    status: SessionStatus | None = None,
):
    items = SessionWorkflow(db).list_owned(current, status=status)
    return Envelope(data=_read_all(items), count=len(items))

@router.get("/{session_id}", response_model=Envelope[SessionRead], response_model_exclude_none=True)
def get_session(
    session_id: int,
    db: Session = Depends(get_db),
    viewer: User | None = Depends(get_optional_user),
):
    return Envelope(data=_read(SessionWorkflow(db).view(session_id, viewer)))

@router.post("", response_model=Envelope[SessionRead], response_model_exclude_none=True, status_code=201)
def create_session(payload: SessionCreate, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    sess = SessionWorkflow(db).create(current, payload)
    return Envelope(message="Session created successfully", data=_read(sess))

@router.put("/{session_id}", response_model=Envelope[SessionRead], response_model_exclude_none=True)
def update_session(
    session_id: int,
    payload: SessionUpdate,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    sess = SessionWorkflow(db).update(session_id, current, payload)
    return Envelope(message="Session updated successfully", data=_read(sess))

@router.delete("/{session_id}", response_model=Envelope[dict], response_model_exclude_none=True)
def delete_session(session_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    SessionWorkflow(db).delete(session_id, current)
    return Envelope(message="Session deleted successfully", data={})

@router.put("/{session_id}/publish", response_model=Envelope[SessionRead], response_model_exclude_none=True)
def publish_session(session_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    sess = SessionWorkflow(db).publish(session_id, current)
    return Envelope(message="Session published successfully", data=_read(sess))

@router.put("/{session_id}/like", response_model=Envelope[SessionRead], response_model_exclude_none=True)
def like_session(session_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    sess, liked = SessionWorkflow(db).toggle_like(session_id, current)
    return Envelope(message="Session liked" if liked else "Session unliked", data=_read(sess))
