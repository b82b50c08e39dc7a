import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from app.config import settings

logger = logging.getLogger(__name__)


# -----------------------------
#  HTML EMAIL TEMPLATE (SkillConnect)
# -----------------------------
OTP_TEMPLATE = """
<!DOCTYPE html>
<html>
  <body style="margin:0; padding:0; font-family:Arial, Helvetica, sans-serif; background:#f4f4f4;">
    <table width="100%" cellpadding="0" cellspacing="0" style="background:#f4f4f4; padding:40px 0;">
      <tr>
        <td align="center">
          <table width="420" cellpadding="0" cellspacing="0" style="background:#ffffff; border-radius:12px; padding:30px;">
            <tr>
              <td style="font-size:15px; color:#555; line-height:1.6;">
                Hello,<br><br>
                {{INTRO}}
              </td>
            </tr>
            <tr><td style="height:24px;"></td></tr>
            <tr>
              <td align="center">
                <div style="font-size:32px; font-weight:bold; letter-spacing:6px; padding:16px 24px; background:#4f46e5; color:white; border-radius:8px; display:inline-block;">
                  {{OTP}}
                </div>
              </td>
            </tr>
            <tr><td style="height:24px;"></td></tr>
            <tr>
              <td style="font-size:14px; color:#999; line-height:1.5;">
                This OTP is valid for {{MINUTES}} minutes.<br>
                If you didn't request this, you may ignore this email.<br><br>
                Thank you for using <strong>{{APP_NAME}}</strong>
              </td>
            </tr>
          </table>
        </td>
      </tr>
    </table>
  </body>
</html>
"""

OTP_PURPOSES = {
    "register": {
        "subject": "{app} - Verify your account",
        "intro": "Use the OTP below to finish creating your account.",
        "text": "Your OTP is {otp}. It is valid for {minutes} minutes.",
    },
    "reset": {
        "subject": "Reset your password - {app}",
        "intro": "Use the OTP below to reset your password.",
        "text": "Your password reset OTP is {otp}. It is valid for {minutes} minutes.",
    },
}


def build_otp_message(to_email: str, otp: str, purpose: str = "register") -> MIMEMultipart:
    copy = OTP_PURPOSES[purpose]
    minutes = settings.OTP_EXPIRE_MINUTES

    html = (
        OTP_TEMPLATE.replace("{{INTRO}}", copy["intro"])
        .replace("{{OTP}}", otp)
        .replace("{{MINUTES}}", str(minutes))
        .replace("{{APP_NAME}}", settings.APP_NAME)
    )

    msg = MIMEMultipart("alternative")
    msg["Subject"] = copy["subject"].format(app=settings.APP_NAME)
    msg["From"] = f'"{settings.APP_NAME} Team" <{settings.FROM_EMAIL}>'
    msg["To"] = to_email
    msg.attach(MIMEText(copy["text"].format(otp=otp, minutes=minutes), "plain"))
    msg.attach(MIMEText(html, "html"))
    return msg


def send_email_otp(to_email: str, otp: str, purpose: str = "register"):
    msg = build_otp_message(to_email, otp, purpose)

    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT) as server:
        server.starttls()
        if settings.SMTP_USER:
            server.login(settings.SMTP_USER, settings.SMTP_PASS)
        server.send_message(msg)

    logger.info("Sent %s OTP email to %s", purpose, to_email)
