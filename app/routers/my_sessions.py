from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.schemas.session import SessionFields, SessionResponse, SessionStatus, SessionUpdate
from app.services import session_service
from app.services.auth_middleware import get_current_user
from app.utils.response import create_response, handle_exception

router = APIRouter(prefix="/my-sessions", tags=["My Sessions"], dependencies=[Depends(get_current_user)])


def _serialize(session) -> dict:
    return SessionResponse.model_validate(session).model_dump()


@router.post("/publish")
def publish_session(
    body: SessionFields,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        session = session_service.create_session(
            db, current_user.id, body.model_dump(), SessionStatus.published
        )
        return create_response(
            message="Session published successfully",
            data=_serialize(session),
            status_code=status.HTTP_201_CREATED,
        )
    except Exception as exc:
        return handle_exception(exc, "Error publishing session", db=db)


@router.post("/save-draft")
def save_draft(
    body: SessionFields,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        session = session_service.create_session(
            db, current_user.id, body.model_dump(), SessionStatus.draft
        )
        return create_response(
            message="Session draft saved successfully",
            data=_serialize(session),
            status_code=status.HTTP_201_CREATED,
        )
    except Exception as exc:
        return handle_exception(exc, "Error saving draft", db=db)


@router.get("")
def list_my_sessions(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        sessions = session_service.list_owned_sessions(db, current_user.id)
        return create_response(
            message="Sessions fetched successfully",
            data=[_serialize(session) for session in sessions],
        )
    except Exception as exc:
        return handle_exception(exc, "Failed to fetch sessions", db=db)


@router.put("/{session_id}")
def update_session(
    session_id: int,
    body: SessionUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        session = session_service.update_session(db, session_id, current_user.id, body.model_dump())
        return create_response(
            message="Session updated successfully",
            data=_serialize(session),
        )
    except Exception as exc:
        return handle_exception(exc, "Error updating session", db=db)


@router.delete("/{session_id}")
def delete_session(
    session_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        session_service.delete_session(db, session_id, current_user.id)
        return create_response(
            message="Session deleted successfully",
            data={"session_id": session_id},
        )
    except Exception as exc:
        return handle_exception(exc, "Error deleting session", db=db)
