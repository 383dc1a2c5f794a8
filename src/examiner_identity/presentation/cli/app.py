"""Examiner CLI application using Typer.

This module provides command-line utilities for the credential store:
secret generation, schema initialization and the account lifecycle
(register, login, verify, resend code, change password, enable/disable).
"""

import asyncio
import secrets
from typing import Awaitable, Callable, Optional

import typer
from rich.console import Console
from rich.table import Table

from examiner_config.settings import get_settings
from examiner_identity.application.factories import build_credential_lifecycle_service
from examiner_identity.application.ports import AdministratorAuthorizationPolicy
from examiner_identity.application.results import OperationResult
from examiner_identity.application.services import CredentialLifecycleService
from examiner_identity.infrastructure.logging_config import configure_logging
from examiner_identity.infrastructure.persistence.sqlalchemy import (
    create_engine_from_settings,
    create_session_maker,
    create_tables,
)
from examiner_identity.infrastructure.persistence.sqlalchemy.database import (
    display_database_url,
)
from examiner_identity.presentation.cli.console_notification_sender import (
    ConsoleNotificationSender,
)

app = typer.Typer(
    name="examiner",
    help="Examiner - credential and verification lifecycle CLI",
    no_args_is_help=True,
)
console = Console()


secrets_app = typer.Typer(
    name="secrets",
    help="Secret generation utilities",
    no_args_is_help=True,
)
app.add_typer(secrets_app)

db_app = typer.Typer(
    name="db",
    help="Credential store schema management",
    no_args_is_help=True,
)
app.add_typer(db_app)

accounts_app = typer.Typer(
    name="accounts",
    help="Account lifecycle operations",
    no_args_is_help=True,
)
app.add_typer(accounts_app)


@secrets_app.command("generate")
def generate_secrets() -> None:
    """Generate secure secrets for Examiner configuration.

    Generates two required secrets:
    - JWT_SECRET_KEY: Secret for signing JWT authentication tokens
    - POSTGRES_PASSWORD: Database password

    Copy the output to your .env file.
    """
    console.print("\n[bold green]Examiner Secret Generation[/bold green]")
    console.print("=" * 60)
    console.print(
        "\nGenerated secrets for your [bold].env[/bold] configuration file:\n"
    )

    # 64 bytes of entropy for HS256 signing
    jwt_secret = secrets.token_urlsafe(64)
    console.print(f"[cyan]JWT_SECRET_KEY[/cyan]={jwt_secret}")

    db_password = secrets.token_urlsafe(32)
    console.print(f"[cyan]POSTGRES_PASSWORD[/cyan]={db_password}")

    console.print("\n" + "=" * 60)
    console.print(
        "[yellow]Keep these secrets secure and never commit them "
        "to version control![/yellow]"
    )
    console.print(
        "[dim]Copy the above values to your config/.env (Docker) or "
        "config/.env.dev (local) file.[/dim]\n"
    )


@db_app.command("init")
def init_db() -> None:
    """Create the credential store tables (idempotent)."""
    configure_logging()
    settings = get_settings()
    console.print(f"Database: {display_database_url(settings.database_url)}")

    async def _init() -> None:
        engine = create_engine_from_settings(settings)
        try:
            await create_tables(engine)
        finally:
            await engine.dispose()

    asyncio.run(_init())
    console.print("[green]Credential store schema is up to date.[/green]")


def _run(
    operation: Callable[[CredentialLifecycleService], Awaitable[OperationResult]],
) -> OperationResult:
    """Run one lifecycle operation in its own session and engine."""
    configure_logging()
    settings = get_settings()
    sender = None if settings.smtp_enabled else ConsoleNotificationSender(console)

    async def _execute() -> OperationResult:
        engine = create_engine_from_settings(settings)
        try:
            session_maker = create_session_maker(engine)
            async with session_maker() as session:
                service = build_credential_lifecycle_service(
                    session,
                    settings,
                    notification_sender=sender,
                    authorization_policy=AdministratorAuthorizationPolicy(),
                )
                return await operation(service)
        finally:
            await engine.dispose()

    return asyncio.run(_execute())


def _report(result: OperationResult) -> None:
    """Print a result envelope and exit non-zero on failure."""
    if not result.success:
        kind = result.kind.value if result.kind else "UNKNOWN"
        console.print(f"[bold red]{result.message}[/bold red] [dim]({kind})[/dim]")
        raise typer.Exit(code=1)

    console.print(f"[bold green]{result.message}[/bold green]")
    if result.payload is not None and hasattr(result.payload, "to_dict"):
        table = Table(show_header=False, box=None)
        table.add_column(style="cyan")
        table.add_column()
        for key, value in result.payload.to_dict().items():
            table.add_row(key, str(value))
        console.print(table)


@accounts_app.command("register")
def register(
    email: str = typer.Argument(..., help="Email address of the new account"),
    role: str = typer.Option(
        "Student",
        "--role",
        "-r",
        help="Administrator, Tutor or Student",
    ),
    password: str = typer.Option(..., prompt=True, hide_input=True),
    confirm_password: str = typer.Option(
        ...,
        prompt="Repeat password",
        hide_input=True,
    ),
) -> None:
    """Register an account and send its verification code."""
    _report(
        _run(lambda service: service.register(email, password, confirm_password, role)),
    )


@accounts_app.command("login")
def login(
    email: str = typer.Argument(...),
    password: str = typer.Option(..., prompt=True, hide_input=True),
) -> None:
    """Authenticate and print an access token."""
    _report(_run(lambda service: service.authenticate(email, password)))


@accounts_app.command("verify")
def verify(
    email: str = typer.Argument(...),
    code: str = typer.Argument(..., help="Code received by email"),
) -> None:
    """Confirm an account's email address with its verification code."""
    _report(_run(lambda service: service.validate_verification_code(email, code)))


@accounts_app.command("resend-code")
def resend_code(
    email: str = typer.Argument(...),
    expires_in: Optional[int] = typer.Option(
        None,
        "--expires-in",
        min=0,
        help="Validity in seconds (defaults to VERIFICATION_CODE_TTL_SECONDS)",
    ),
) -> None:
    """Issue a new verification code, superseding the current one."""
    _report(_run(lambda service: service.issue_verification_code(email, expires_in)))


@accounts_app.command("change-password")
def change_password(
    email: str = typer.Argument(...),
    old_password: str = typer.Option(..., prompt="Current password", hide_input=True),
    new_password: str = typer.Option(..., prompt="New password", hide_input=True),
    confirm_password: str = typer.Option(
        ...,
        prompt="Repeat new password",
        hide_input=True,
    ),
    requester_email: Optional[str] = typer.Option(
        None,
        "--as",
        help="Account performing the change; non-owners must be administrators",
    ),
) -> None:
    """Change an account's password."""

    async def _change(service: CredentialLifecycleService) -> OperationResult:
        requester = None
        if requester_email is not None:
            lookup = await service.find_requester(requester_email)
            if not lookup.success:
                return lookup
            requester = lookup.payload

        return await service.change_password(
            email,
            old_password,
            new_password,
            confirm_password,
            requester=requester,
        )

    _report(_run(_change))


@accounts_app.command("set-active")
def set_active(
    email: str = typer.Argument(...),
    active: bool = typer.Option(True, "--enable/--disable"),
) -> None:
    """Enable or disable an account."""
    _report(_run(lambda service: service.set_account_active(email, active)))


def cli() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    cli()
