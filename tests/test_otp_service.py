from datetime import datetime, timedelta

import pytest

from app.services.otp_service import OtpChallenge, generate_otp, is_expired, otp_expiry
from app.utils.exceptions import ExpiredError, InvalidInputError

NOW = datetime(2026, 1, 1, 12, 0, 0)


def test_generate_otp_is_six_digits():
    for _ in range(50):
        otp = generate_otp()
        assert len(otp) == 6
        assert otp.isdigit()
        assert otp[0] != "0"


def test_otp_expiry_is_ten_minutes_ahead():
    assert otp_expiry(NOW) == NOW + timedelta(minutes=10)


def test_is_expired_boundary():
    expires_at = otp_expiry(NOW)
    assert is_expired(expires_at, expires_at) is False
    assert is_expired(expires_at, expires_at + timedelta(seconds=1)) is True
    assert is_expired(None, NOW) is True


def test_strip_input_challenge_trims_both_sides():
    challenge = OtpChallenge("a@x.com", " 123456", otp_expiry(NOW), strip_input=True)
    challenge.verify("123456 ", now=NOW)


def test_raw_challenge_requires_exact_value():
    challenge = OtpChallenge("a@x.com", "123456", otp_expiry(NOW))
    assert challenge.matches("123456")
    assert not challenge.matches(" 123456")
    assert not challenge.matches(123456)


def test_verify_reports_mismatch_before_expiry():
    challenge = OtpChallenge("a@x.com", "123456", NOW - timedelta(seconds=1), strip_input=True)

    with pytest.raises(InvalidInputError):
        challenge.verify("654321", now=NOW)
    with pytest.raises(ExpiredError):
        challenge.verify("123456", now=NOW)


def test_verify_combined_uses_one_error():
    challenge = OtpChallenge("a@x.com", "123456", NOW - timedelta(seconds=1), single_use=False)

    with pytest.raises(InvalidInputError, match="Invalid or expired OTP"):
        challenge.verify_combined("123456", now=NOW)
    with pytest.raises(InvalidInputError, match="Invalid or expired OTP"):
        challenge.verify_combined("000000", now=NOW + timedelta(minutes=-20))


def test_rejections_are_logged_with_subject(caplog):
    challenge = OtpChallenge("a@x.com", "123456", otp_expiry(NOW))

    with caplog.at_level("INFO", logger="app.services.otp_service"):
        with pytest.raises(InvalidInputError):
            challenge.verify("000000", now=NOW)

    assert "a@x.com" in caplog.text
