"""
SMTP email sender adapter - Implements EmailSender protocol over smtplib.
"""

import logging
import smtplib
from email.message import EmailMessage

logger = logging.getLogger(__name__)


class SmtpEmailSender:
    """
    Implements EmailSender protocol by delivering plain-text mail over SMTP.

    A connection is opened per message. Transport errors propagate to the
    caller.
    """

    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        timeout: float = 10.0,
    ) -> None:
        self._host = host
        self._port = port
        self._sender = sender
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._timeout = timeout

    def send_email(self, to: list[str], subject: str, text: str) -> None:
        message = EmailMessage()
        message["From"] = self._sender
        message["To"] = ", ".join(to)
        message["Subject"] = subject
        message.set_content(text)

        with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as smtp:
            if self._use_tls:
                smtp.starttls()
            if self._username:
                smtp.login(self._username, self._password or "")
            smtp.send_message(message)

        logger.info("Sent email %r to %s", subject, ", ".join(to))
