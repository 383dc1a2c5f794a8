"""Port for delivering account notifications."""

from abc import ABC, abstractmethod

from examiner_identity.application.results import OperationResult


class NotificationSender(ABC):
    """Delivers a rendered message to a recipient.

    No retry is attempted at this boundary; callers decide whether and
    when to try again.
    """

    @abstractmethod
    async def send_message(
        self,
        template: str,
        recipient_email: str,
        subject: str,
        body: str,
    ) -> OperationResult[None]:
        """Send a message and report delivery as a result envelope."""
