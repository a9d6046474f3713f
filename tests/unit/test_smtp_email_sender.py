"""
Unit tests for SmtpEmailSender adapter.

smtplib.SMTP is patched; no network connection is made.
"""

from unittest.mock import patch

import pytest

from learnovous.adapters.smtp.smtp import SmtpEmailSender


@pytest.fixture
def smtp_class():
    with patch("learnovous.adapters.smtp.smtp.smtplib.SMTP") as smtp_class:
        yield smtp_class


def connection(smtp_class):
    return smtp_class.return_value.__enter__.return_value


class TestSendEmail:
    def test_sends_plain_text_message(self, smtp_class) -> None:
        sender = SmtpEmailSender(host="mail.local", port=2525, sender="no-reply@example.com")

        sender.send_email(["a@example.com", "b@example.com"], "Account Verification", "hello")

        smtp_class.assert_called_once_with("mail.local", 2525, timeout=10.0)
        message = connection(smtp_class).send_message.call_args[0][0]
        assert message["From"] == "no-reply@example.com"
        assert message["To"] == "a@example.com, b@example.com"
        assert message["Subject"] == "Account Verification"
        assert message.get_content().strip() == "hello"

    def test_starttls_and_login(self, smtp_class) -> None:
        sender = SmtpEmailSender(
            host="mail.local",
            port=587,
            sender="no-reply@example.com",
            username="mailer",
            password="secret",
        )

        sender.send_email(["a@example.com"], "s", "t")

        conn = connection(smtp_class)
        conn.starttls.assert_called_once()
        conn.login.assert_called_once_with("mailer", "secret")

    def test_plain_connection_without_credentials(self, smtp_class) -> None:
        sender = SmtpEmailSender(
            host="localhost", port=25, sender="no-reply@example.com", use_tls=False
        )

        sender.send_email(["a@example.com"], "s", "t")

        conn = connection(smtp_class)
        conn.starttls.assert_not_called()
        conn.login.assert_not_called()
        conn.send_message.assert_called_once()

    def test_transport_errors_propagate(self, smtp_class) -> None:
        """Failures are left to the caller to absorb."""
        connection(smtp_class).send_message.side_effect = OSError("connection reset")
        sender = SmtpEmailSender(host="localhost", port=25, sender="no-reply@example.com")

        with pytest.raises(OSError):
            sender.send_email(["a@example.com"], "s", "t")
