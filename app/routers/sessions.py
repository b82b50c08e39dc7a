from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.schemas.session import SessionResponse
from app.services import session_service
from app.services.auth_middleware import get_current_user
from app.utils.response import create_response, handle_exception

router = APIRouter(prefix="/sessions", tags=["Sessions"])


@router.get("")
def list_published_sessions(db: Session = Depends(get_db)):
    try:
        sessions = session_service.list_published_sessions(db)
        return create_response(
            message="Published sessions fetched successfully",
            data=[SessionResponse.model_validate(session).model_dump() for session in sessions],
        )
    except Exception as exc:
        return handle_exception(exc, db=db)


@router.post("/{session_id}/register")
def register_for_session(
    session_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        count = session_service.register_for_session(db, session_id, current_user.id)
        return create_response(
            message="Successfully registered",
            data={"count": count, "session_id": session_id},
        )
    except Exception as exc:
        return handle_exception(exc, "Error registering for session", db=db)


@router.get("/{session_id}/registrations")
def get_registrations(session_id: int, db: Session = Depends(get_db)):
    try:
        payload = session_service.get_session_registrations(db, session_id)
        return create_response(message="Registrations fetched successfully", data=payload)
    except Exception as exc:
        return handle_exception(exc, db=db)
