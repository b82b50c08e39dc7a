from app.services.email_services import build_otp_message


def _parts(msg):
    return {part.get_content_type(): part.get_payload(decode=True).decode() for part in msg.get_payload()}


def test_registration_message_carries_otp():
    msg = build_otp_message("a@x.com", "123456", "register")
    parts = _parts(msg)

    assert msg["To"] == "a@x.com"
    assert "Verify your account" in msg["Subject"]
    assert parts["text/plain"] == "Your OTP is 123456. It is valid for 10 minutes."
    assert "123456" in parts["text/html"]


def test_reset_message_uses_reset_copy():
    msg = build_otp_message("a@x.com", "654321", "reset")
    parts = _parts(msg)

    assert msg["Subject"].startswith("Reset your password")
    assert "password reset OTP is 654321" in parts["text/plain"]
