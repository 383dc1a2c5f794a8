"""Email delivery adapters."""

from examiner_identity.infrastructure.email.smtp_notification_sender import (
    SmtpNotificationSender,
)

__all__ = ["SmtpNotificationSender"]
