"""
Console email sender adapter - Implements EmailSender protocol.

This module provides a console-based implementation of the domain's
email sender port, logging outgoing emails for development.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleEmailSender:
    """
    Implements EmailSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def send_email(self, to: list[str], subject: str, text: str) -> None:
        """
        Log the email instead of delivering it.

        Logged at INFO level so confirmation links show up in container logs.

        Args:
            to: Recipient email addresses
            subject: Email subject
            text: Plain-text body
        """
        logger.info("[EMAIL] To: %s Subject: %s\n%s", ", ".join(to), subject, text)
