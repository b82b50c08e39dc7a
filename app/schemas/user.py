from typing import Annotated

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel


def _check_email_format(value: str) -> str:
    """Reject malformed addresses but keep the accepted one exactly as sent."""
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValueError(str(exc))
    return value


EmailAddress = Annotated[str, AfterValidator(_check_email_format)]


class SendRegistrationOtp(BaseModel):
    email: EmailAddress
    password: str
    name: str | None = None


class VerifyOtp(BaseModel):
    email: EmailAddress
    otp: str | int


class LoginRequest(BaseModel):
    email: EmailAddress
    password: str


class ForgotPasswordRequest(BaseModel):
    email: EmailAddress


class ResetPasswordRequest(BaseModel):
    email: EmailAddress
    new_password: str


class RegistrantResponse(BaseModel):
    id: int
    name: str | None
    email: str

    model_config = {"from_attributes": True}
