"""SMTP delivery of verification emails.

Connection, TLS mode and sender address come from the SMTP_* settings;
with SMTP_ENABLED=false every send reports VERIFICATION_SEND_FAILED.
"""

import asyncio
import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from examiner_config.settings import Settings
from examiner_identity.application.ports import NotificationSender
from examiner_identity.application.results import OperationResult, ResultKind

logger = logging.getLogger(__name__)


class SmtpNotificationSender(NotificationSender):
    """Delivers notifications over SMTP.

    smtplib is blocking, so each delivery runs in a worker thread.
    Delivery is attempted once; failures come back as a failed result.
    """

    def __init__(self, settings: Settings):
        self._settings = settings

    async def send_message(
        self,
        template: str,
        recipient_email: str,
        subject: str,
        body: str,
    ) -> OperationResult[None]:
        if not self._settings.smtp_enabled:
            logger.warning(
                "SMTP disabled, %s email not sent to %s",
                template,
                recipient_email,
            )
            return OperationResult.fail(
                ResultKind.VERIFICATION_SEND_FAILED,
                "Email delivery is disabled",
            )

        if not self._settings.smtp_host:
            logger.error("SMTP host not configured")
            return OperationResult.fail(
                ResultKind.VERIFICATION_SEND_FAILED,
                "Email delivery is not configured",
            )

        message = self._create_message(recipient_email, subject, body)
        try:
            await asyncio.to_thread(self._send_email, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(
                "Failed to send %s email to %s: %s",
                template,
                recipient_email,
                e,
            )
            return OperationResult.fail(
                ResultKind.VERIFICATION_SEND_FAILED,
                "Email could not be delivered",
            )

        logger.info("Email sent to %s (%s)", recipient_email, template)
        return OperationResult.ok("Email sent")

    def _create_message(
        self,
        to_email: str,
        subject: str,
        text_body: str,
    ) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        settings = self._settings
        msg["From"] = f"{settings.smtp_from_name} <{settings.smtp_from_email}>"
        msg["To"] = to_email

        msg.attach(MIMEText(text_body, "plain"))
        return msg

    def _send_email(self, message: MIMEMultipart) -> None:
        settings = self._settings
        smtp_password = (
            settings.smtp_password.get_secret_value() if settings.smtp_password else ""
        )

        if settings.smtp_use_tls and not settings.smtp_starttls:
            # Implicit TLS (port 465)
            context = ssl.create_default_context()
            with smtplib.SMTP_SSL(
                settings.smtp_host,
                settings.smtp_port,
                context=context,
                timeout=settings.smtp_timeout_seconds,
            ) as server:
                if settings.smtp_user:
                    server.login(settings.smtp_user, smtp_password)
                server.send_message(message)
        else:
            # STARTTLS (port 587) or plain
            with smtplib.SMTP(
                settings.smtp_host,
                settings.smtp_port,
                timeout=settings.smtp_timeout_seconds,
            ) as server:
                if settings.smtp_starttls:
                    context = ssl.create_default_context()
                    server.starttls(context=context)
                if settings.smtp_user:
                    server.login(settings.smtp_user, smtp_password)
                server.send_message(message)
