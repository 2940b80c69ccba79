"""Best-effort account notifications (approval / rejection) over SMTP."""

from __future__ import annotations

import html
import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


def _redact_email(email: str) -> str:
    """Redact an email address for logging to avoid PII leakage."""
    if "@" not in email:
        return "redacted"
    local, domain = email.split("@", 1)
    return f"{local[:2]}***@{domain}"


class EmailNotifier:
    """
    Sends account-status emails. Never raises: a failed send is logged and
    reported as False, so callers can fire and forget.

    When SMTP_HOST or a sender address is missing the message is logged
    instead of sent (dev mode).
    """

    def __init__(self, settings: Settings) -> None:
        self.smtp_host = settings.SMTP_HOST
        self.smtp_port = settings.SMTP_PORT
        self.smtp_user = settings.SMTP_USER
        self.smtp_password = (
            settings.SMTP_PASSWORD.get_secret_value() if settings.SMTP_PASSWORD else None
        )
        self.smtp_use_tls = settings.SMTP_USE_TLS
        self.from_email = settings.SMTP_FROM_EMAIL or settings.SMTP_USER
        self.from_name = settings.SMTP_FROM_NAME
        self.timeout = settings.SMTP_TIMEOUT_SEC

    @property
    def is_configured(self) -> bool:
        return bool(self.smtp_host and self.from_email)

    def send_approved(self, to_email: str, username: str) -> bool:
        name = html.escape(username or "")
        return self._send(
            to_email,
            "Account Approved",
            f"<p>Hello {name},</p><p>Your account has been approved. You can now log in.</p>"
            f"<p>{html.escape(self.from_name)} Team</p>",
        )

    def send_rejected(self, to_email: str, username: str, reason: str | None = None) -> bool:
        name = html.escape(username or "")
        reason_html = f"<p>Reason: {html.escape(reason)}</p>" if reason else ""
        return self._send(
            to_email,
            "Account Rejected",
            f"<p>Hello {name},</p><p>Your account registration has been rejected by admin.</p>"
            f"{reason_html}<p>{html.escape(self.from_name)} Team</p>",
        )

    def _send(self, to_email: str, subject: str, html_body: str) -> bool:
        if not self.is_configured:
            logger.info(
                "Email not configured; skipping send",
                extra={"to": _redact_email(to_email), "subject": subject},
            )
            return True
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self.from_name} <{self.from_email}>"
        msg["To"] = to_email
        msg.attach(MIMEText(html_body, "html"))
        context = ssl.create_default_context()
        try:
            if self.smtp_use_tls:
                with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.timeout) as server:
                    server.starttls(context=context)
                    if self.smtp_user and self.smtp_password:
                        server.login(self.smtp_user, self.smtp_password)
                    server.sendmail(self.from_email, to_email, msg.as_string())
            else:
                with smtplib.SMTP_SSL(
                    self.smtp_host, self.smtp_port, context=context, timeout=self.timeout
                ) as server:
                    if self.smtp_user and self.smtp_password:
                        server.login(self.smtp_user, self.smtp_password)
                    server.sendmail(self.from_email, to_email, msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            logger.warning(
                "Notification email failed",
                extra={"to": _redact_email(to_email), "subject": subject, "error": type(e).__name__},
            )
            return False
        logger.info("Notification email sent", extra={"to": _redact_email(to_email), "subject": subject})
        return True
