import logging
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.session import MentorSession, SessionRegistration
from app.schemas.user import RegistrantResponse
from app.utils.exceptions import ConflictError, InvalidStateError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("title", "description", "duration", "date", "time", "mentor")


def _enum_value(value):
    return getattr(value, "value", value)


def validate_mode_fields(mode, meeting_link: str | None, location: str | None) -> tuple[str, str | None, str | None]:
    """Apply the mode rule and return ``(mode, meeting_link, location)``.

    Online sessions need a meeting link, offline ones a location. The field
    the mode does not use is dropped.
    """
    mode = _enum_value(mode) or "offline"
    if mode == "online":
        if not (meeting_link or "").strip():
            raise ValidationError("Meeting link is required for online sessions")
        return mode, meeting_link, None
    if mode == "offline":
        if not (location or "").strip():
            raise ValidationError("Location is required for offline sessions")
        return mode, None, location
    raise ValidationError(f"Unsupported session mode: {mode}")


def _session_values(fields: dict) -> dict:
    mode, meeting_link, location = validate_mode_fields(
        fields.get("mode"),
        fields.get("meeting_link"),
        fields.get("location"),
    )
    values = {name: fields.get(name) for name in EDITABLE_FIELDS}
    values.update(mode=mode, meeting_link=meeting_link, location=location)
    return values


def create_session(db: Session, owner_id: int, fields: dict, status: str) -> MentorSession:
    values = _session_values(fields)
    session = MentorSession(
        **values,
        status=_enum_value(status),
        owner_id=owner_id,
        registered_count=0,
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    logger.info("User %s created %s session id=%s", owner_id, session.status, session.id)
    return session


def list_owned_sessions(db: Session, owner_id: int) -> list[MentorSession]:
    return (
        db.query(MentorSession)
        .filter(MentorSession.owner_id == owner_id)
        .order_by(MentorSession.id.asc())
        .all()
    )


def list_published_sessions(db: Session) -> list[MentorSession]:
    return (
        db.query(MentorSession)
        .filter(MentorSession.status == "published")
        .order_by(MentorSession.id.asc())
        .all()
    )


def update_session(db: Session, session_id: int, owner_id: int, fields: dict) -> MentorSession:
    values = _session_values(fields)
    status = _enum_value(fields.get("status"))
    if status:
        values["status"] = status
    values["updated_at"] = datetime.utcnow()

    # Existence and ownership are one condition so a stranger cannot tell them apart.
    updated = (
        db.query(MentorSession)
        .filter(MentorSession.id == session_id, MentorSession.owner_id == owner_id)
        .update(values, synchronize_session=False)
    )
    if not updated:
        raise NotFoundError("Session not found or unauthorized")
    db.commit()

    logger.info("User %s updated session id=%s", owner_id, session_id)
    return db.get(MentorSession, session_id)


def delete_session(db: Session, session_id: int, owner_id: int) -> None:
    deleted = (
        db.query(MentorSession)
        .filter(MentorSession.id == session_id, MentorSession.owner_id == owner_id)
        .delete(synchronize_session=False)
    )
    if not deleted:
        raise NotFoundError("Session not found or unauthorized")
    db.query(SessionRegistration).filter(
        SessionRegistration.session_id == session_id
    ).delete(synchronize_session=False)
    db.commit()
    logger.info("User %s deleted session id=%s", owner_id, session_id)


def register_for_session(db: Session, session_id: int, user_id: int) -> int:
    """Register ``user_id`` on a published session and return the new count.

    The unique (session, user) constraint turns the duplicate check and the
    append into one store operation, and the count is recomputed from the
    registration rows rather than incremented. The session row is locked
    first so concurrent registrants recount one after another.
    """
    session = (
        db.query(MentorSession)
        .filter(MentorSession.id == session_id)
        .with_for_update()
        .first()
    )
    if not session:
        raise NotFoundError("Session not found")
    if session.status != "published":
        raise InvalidStateError("Only published sessions are open for registration")

    db.add(SessionRegistration(session_id=session_id, user_id=user_id))
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Already registered")

    registration_count = (
        select(func.count(SessionRegistration.id))
        .where(SessionRegistration.session_id == MentorSession.id)
        .scalar_subquery()
    )
    db.query(MentorSession).filter(MentorSession.id == session_id).update(
        {MentorSession.registered_count: registration_count},
        synchronize_session=False,
    )
    db.commit()
    db.refresh(session)

    logger.info(
        "User %s registered for session id=%s count=%s",
        user_id,
        session_id,
        session.registered_count,
    )
    return session.registered_count


def get_session_registrations(db: Session, session_id: int) -> dict:
    session = db.get(MentorSession, session_id)
    if not session:
        raise NotFoundError("Session not found")

    users = [
        RegistrantResponse.model_validate(registration.user).model_dump()
        for registration in session.registrations
    ]
    return {"count": len(users), "users": users}
