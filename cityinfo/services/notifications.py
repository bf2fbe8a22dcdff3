"""Mail notifications.

No mail is actually delivered: both implementations write the message to the
log. ``LocalMailService`` is used during development and ``CloudMailService``
everywhere else, so the seam for a real provider is in place.
"""

from typing import Protocol

from loguru import logger

from cityinfo.core.config import MailConfig, get_settings


class MailService(Protocol):
    """Sends a notification mail to the configured recipient."""

    def send(self, subject: str, message: str) -> None:
        """Send a mail with the given subject and body."""
        ...


class _LoggingMailService:
    def __init__(self, mail_config: MailConfig) -> None:
        self.mail_to = mail_config.mail_to_address
        self.mail_from = mail_config.mail_from_address

    def send(self, subject: str, message: str) -> None:
        logger.info(
            "Mail from {} to {}, with {}.",
            self.mail_from,
            self.mail_to,
            type(self).__name__,
            mail_subject=subject,
            mail_message=message,
        )


class LocalMailService(_LoggingMailService):
    """Mail service for development."""


class CloudMailService(_LoggingMailService):
    """Mail service for deployed environments."""


def get_mail_service() -> MailService:
    """Pick the mail service for the configured environment."""
    settings = get_settings()
    if settings.environment == "development":
        return LocalMailService(settings.mail_config)
    return CloudMailService(settings.mail_config)
