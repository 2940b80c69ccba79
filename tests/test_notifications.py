"""EmailNotifier: dev-mode logging, SMTP delivery and failure reporting."""

import smtplib
import unittest
from unittest.mock import MagicMock, patch

from app.services.notifications import EmailNotifier, _redact_email
from tests.support import make_settings


class TestUnconfigured(unittest.TestCase):

    @patch("app.services.notifications.smtplib.SMTP")
    def test_logs_instead_of_sending(self, smtp_cls: MagicMock) -> None:
        notifier = EmailNotifier(make_settings())
        self.assertFalse(notifier.is_configured)
        self.assertTrue(notifier.send_approved("ana@example.org", "ana"))
        smtp_cls.assert_not_called()


class TestConfigured(unittest.TestCase):

    def setUp(self) -> None:
        self.notifier = EmailNotifier(
            make_settings(
                SMTP_HOST="smtp.example.org",
                SMTP_USER="mailer@example.org",
                SMTP_PASSWORD="secret",
            )
        )

    @patch("app.services.notifications.smtplib.SMTP")
    def test_sends_over_starttls(self, smtp_cls: MagicMock) -> None:
        server = smtp_cls.return_value.__enter__.return_value
        self.assertTrue(self.notifier.send_rejected("ana@example.org", "ana", "Incomplete form"))
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("mailer@example.org", "secret")
        sender, recipient, body = server.sendmail.call_args.args
        self.assertEqual(sender, "mailer@example.org")
        self.assertEqual(recipient, "ana@example.org")
        self.assertIn("Account Rejected", body)

    @patch("app.services.notifications.smtplib.SMTP")
    def test_connection_failure_returns_false(self, smtp_cls: MagicMock) -> None:
        smtp_cls.side_effect = OSError("connection refused")
        self.assertFalse(self.notifier.send_approved("ana@example.org", "ana"))

    @patch("app.services.notifications.smtplib.SMTP")
    def test_smtp_error_returns_false(self, smtp_cls: MagicMock) -> None:
        server = smtp_cls.return_value.__enter__.return_value
        server.login.side_effect = smtplib.SMTPAuthenticationError(535, b"bad credentials")
        self.assertFalse(self.notifier.send_approved("ana@example.org", "ana"))


class TestRedaction(unittest.TestCase):

    def test_redact_email(self) -> None:
        self.assertEqual(_redact_email("maria@example.org"), "ma***@example.org")
        self.assertEqual(_redact_email("nope"), "redacted")
