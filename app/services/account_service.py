import logging

from sqlalchemy.orm import Session

from app.models.pending_registration import PendingRegistration
from app.models.user import User
from app.services.auth_service import create_access_token, hash_password, verify_password
from app.services.email_services import send_email_otp
from app.services.otp_service import OtpChallenge, generate_otp, otp_expiry
from app.utils.exceptions import ConflictError, ForbiddenError, NotFoundError, UnauthorizedError

logger = logging.getLogger(__name__)


def _find_user(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()


def _require_user(db: Session, email: str) -> User:
    user = _find_user(db, email)
    if not user:
        raise NotFoundError("User not found")
    return user


# ================= Registration =================

def send_registration_otp(db: Session, email: str, password: str, name: str | None = None) -> PendingRegistration:
    """Store (or replace) the pending registration for ``email`` and mail its OTP.

    The pending row is committed before the email goes out, so a failed send
    leaves the latest OTP in place for a retry of this call.
    """
    existing = _find_user(db, email)
    if existing and existing.is_verified:
        raise ConflictError("User already exists")

    password_hash = hash_password(password)
    otp = generate_otp()

    record = db.query(PendingRegistration).filter(PendingRegistration.email == email).first()
    if record:
        record.password_hash = password_hash
        record.otp = otp
        record.otp_expires_at = otp_expiry()
        record.name = name
    else:
        record = PendingRegistration(
            email=email,
            name=name,
            password_hash=password_hash,
            otp=otp,
            otp_expires_at=otp_expiry(),
        )
        db.add(record)
    db.commit()
    db.refresh(record)
    logger.info("Registration OTP stored for %s", email)

    send_email_otp(email, otp, purpose="register")
    return record


def verify_registration_otp(db: Session, email: str, otp: str | int) -> tuple[User, str]:
    record = db.query(PendingRegistration).filter(PendingRegistration.email == email).first()
    if not record:
        raise NotFoundError("No OTP request found for this email")

    challenge = OtpChallenge(
        subject=record.email,
        code=record.otp,
        expires_at=record.otp_expires_at,
        strip_input=True,
    )
    challenge.verify(otp)

    user = _find_user(db, record.email)
    if user:
        user.password_hash = record.password_hash
        user.name = record.name or user.name
        user.is_verified = True
    else:
        user = User(
            email=record.email,
            name=record.name,
            password_hash=record.password_hash,
            is_verified=True,
        )
        db.add(user)

    if challenge.single_use:
        db.delete(record)
    db.commit()
    db.refresh(user)
    logger.info("User %s registered id=%s", user.email, user.id)

    return user, create_access_token(user.id)


# ================= Login =================

def authenticate(db: Session, email: str, password: str) -> str:
    user = _require_user(db, email)
    if not user.is_verified:
        raise ForbiddenError("Please verify your email first")
    if not verify_password(password, user.password_hash):
        raise UnauthorizedError("Invalid credentials")

    logger.info("User %s logged in", user.id)
    return create_access_token(user.id)


# ================= Password reset =================

def request_password_reset(db: Session, email: str) -> User:
    user = _require_user(db, email)

    otp = generate_otp()
    user.otp = otp
    user.otp_expires_at = otp_expiry()
    db.commit()
    logger.info("Password reset OTP stored for user %s", user.id)

    send_email_otp(email, otp, purpose="reset")
    return user


def verify_reset_otp(db: Session, email: str, otp: str | int) -> User:
    user = _require_user(db, email)
    OtpChallenge(
        subject=user.email,
        code=user.otp,
        expires_at=user.otp_expires_at,
        single_use=False,
    ).verify_combined(otp)
    return user


def reset_password(db: Session, email: str, new_password: str) -> User:
    user = _require_user(db, email)
    user.password_hash = hash_password(new_password)
    user.otp = None
    user.otp_expires_at = None
    db.commit()
    logger.info("Password reset for user %s", user.id)
    return user
