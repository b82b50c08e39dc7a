import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.user import (
    ForgotPasswordRequest,
    LoginRequest,
    ResetPasswordRequest,
    SendRegistrationOtp,
    VerifyOtp,
)
from app.services import account_service
from app.utils.response import create_response, handle_exception

router = APIRouter(tags=["Auth"])
logger = logging.getLogger(__name__)


# ================= Registration =================

@router.post("/register/send-otp")
def send_registration_otp(body: SendRegistrationOtp, db: Session = Depends(get_db)):
    try:
        account_service.send_registration_otp(db, body.email, body.password, body.name)
        return create_response(
            message="OTP sent to email",
            data={"email": body.email},
            status_code=status.HTTP_201_CREATED,
        )
    except Exception as exc:
        return handle_exception(exc, db=db)


@router.post("/register/verify-otp")
def verify_registration_otp(body: VerifyOtp, db: Session = Depends(get_db)):
    try:
        user, token = account_service.verify_registration_otp(db, body.email, body.otp)
        return create_response(
            message="Account created successfully!",
            data={"success": True, "token": token, "user_id": user.id},
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, db=db)


# ================= Login =================

@router.post("/login")
def login(body: LoginRequest, db: Session = Depends(get_db)):
    try:
        token = account_service.authenticate(db, body.email, body.password)
        return create_response(
            message="Login successful",
            data={"token": token, "token_type": "bearer"},
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, db=db)


# ================= Password reset =================

@router.post("/forgot-password")
def forgot_password(body: ForgotPasswordRequest, db: Session = Depends(get_db)):
    try:
        account_service.request_password_reset(db, body.email)
        return create_response(
            message="Password reset OTP sent to email",
            data={"email": body.email},
        )
    except Exception as exc:
        return handle_exception(exc, db=db)


@router.post("/forgot-password/verify-otp")
def verify_reset_otp(body: VerifyOtp, db: Session = Depends(get_db)):
    try:
        account_service.verify_reset_otp(db, body.email, body.otp)
        return create_response(
            message="OTP verified, you can reset password now",
            data={"success": True},
        )
    except Exception as exc:
        return handle_exception(exc, db=db)


@router.post("/reset-password")
def reset_password(body: ResetPasswordRequest, db: Session = Depends(get_db)):
    try:
        account_service.reset_password(db, body.email, body.new_password)
        return create_response(
            message="Password reset successfully!",
            data={"success": True},
        )
    except Exception as exc:
        return handle_exception(exc, db=db)
