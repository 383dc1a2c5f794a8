"""NotificationSender that prints messages to the terminal.

Used by the CLI when SMTP is disabled so a developer can still receive
verification codes locally.
"""

from rich.console import Console
from rich.panel import Panel

from examiner_identity.application.ports import NotificationSender
from examiner_identity.application.results import OperationResult


class ConsoleNotificationSender(NotificationSender):
    def __init__(self, console: Console):
        self._console = console

    async def send_message(
        self,
        template: str,
        recipient_email: str,
        subject: str,
        body: str,
    ) -> OperationResult[None]:
        self._console.print(
            Panel(
                body.rstrip(),
                title=f"[bold]{subject}[/bold]",
                subtitle=f"to {recipient_email} ({template})",
                border_style="blue",
            ),
        )
        return OperationResult.ok("Message printed to console")
