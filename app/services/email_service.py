"""
Email Service - outbound transactional mail over SMTP.

Disabled (logs and returns False) when settings.smtp_host is empty.
"""

import logging
import smtplib
from email.message import EmailMessage

from app.core.config import get_settings

logger = logging.getLogger(__name__)


def send_email(to: str, subject: str, html: str) -> bool:
    """
    Send an HTML email.

    Returns True when the message was handed to the SMTP server. Failures
    are logged and reported as False; callers run this in the background
    and have no client to report to.
    """
    settings = get_settings()
    if not settings.smtp_host:
        logger.info(f"SMTP not configured, skipping email to {to}: {subject}")
        return False

    msg = EmailMessage()
    msg["From"] = settings.email_from
    msg["To"] = to
    msg["Subject"] = subject
    msg.set_content("This message requires an HTML-capable mail client.")
    msg.add_alternative(html, subtype="html")

    try:
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=15) as smtp:
            if settings.smtp_use_tls:
                smtp.starttls()
            if settings.smtp_username:
                smtp.login(settings.smtp_username, settings.smtp_password)
            smtp.send_message(msg)
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Failed to send email to {to}: {e}")
        return False

    logger.info(f"📧 Email sent to {to}: {subject}")
    return True


def send_verification_email(student: dict) -> bool:
    """Tell a student their profile was verified by the placement office."""
    html = (
        f"<p>Hi {student.get('name', 'there')},</p>"
        "<p>Your profile has been verified by the Training &amp; Placement Office. "
        "Recruiters can now see you in the verified students list.</p>"
    )
    return send_email(student["email"], "Your placement profile is verified", html)
