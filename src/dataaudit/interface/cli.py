"""
DataAudit CLI entry point.

Typer application with Rich output:
    dataaudit run        - run all (or one) audits and print a summary
    dataaudit validate   - load audit definitions and list them
    dataaudit connection - show how a connection string is parsed
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from dataaudit import __version__
from dataaudit.application.audit_runner import AuditRunner
from dataaudit.application.observers import LoggingObserver
from dataaudit.domain.config import AppSettings
from dataaudit.domain.errors import NoAuditsLoadedError
from dataaudit.domain.models import Audit, AuditResult
from dataaudit.infrastructure.config_loader import ConfigLoader
from dataaudit.infrastructure.connection_string import ConnectionDescriptor
from dataaudit.infrastructure.logging_config import setup_logging
from dataaudit.infrastructure.notifications import LoggingNotifier, Notifier, SmtpNotifier

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path("config")

console = Console()

app = typer.Typer(
    name="dataaudit",
    help="🔍 Database data-quality audits with e-mail notification",
    add_completion=False,
    rich_markup_mode="rich",
)

RESULT_STYLES = {
    AuditResult.PASSED: "[green]✅ PASSED[/green]",
    AuditResult.FAILED: "[red]❌ FAILED[/red]",
    AuditResult.NOT_RUN: "[dim]NOT RUN[/dim]",
}


def _version_callback(value: bool):
    if value:
        console.print(f"dataaudit {__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit."
    ),
):
    """Database data-quality audits."""


def _build_notifier(settings: AppSettings, dry_run: bool) -> Notifier:
    """Pick the notification transport for a run."""
    if dry_run:
        return LoggingNotifier()
    if settings.smtp is None:
        logger.warning("No SMTP settings configured - notifications will only be logged")
        return LoggingNotifier()
    return SmtpNotifier(settings.smtp)


def _print_summary(audits: list[Audit]) -> None:
    table = Table(title="Audit Results")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Audit", style="cyan", no_wrap=True)
    table.add_column("Tests", justify="right")
    table.add_column("Result", no_wrap=True)
    table.add_column("Message", overflow="fold")

    for index, audit in enumerate(audits, start=1):
        # passed tests can still carry a message, e.g. a tolerated connection failure
        messages = [
            escape(test.test_failed_message) if test.result is AuditResult.FAILED
            else f"[dim]{escape(test.test_failed_message)}[/dim]"
            for test in audit.tests
            if test.test_failed_message
        ]
        table.add_row(
            str(index), escape(audit.name), str(len(audit.tests)), RESULT_STYLES[audit.result], "; ".join(messages)
        )

    console.print(table)


@app.command()
def run(
    audits_file: str = typer.Option("audits.json", "--audits", help="Audit definitions file."),
    settings_file: str = typer.Option("settings.json", "--settings", help="Runner and SMTP settings file."),
    config_dir: Path = typer.Option(DEFAULT_CONFIG_DIR, "--config-dir", help="Directory holding config files."),
    audit_name: Optional[str] = typer.Option(None, "--audit", help="Run only the audit with this name."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Log notifications instead of sending them."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write a DEBUG log to this file."),
):
    """
    Run audits and send failure notifications.

    Exits with code 1 when any audit failed and code 2 on configuration errors.
    """
    setup_logging(logging.DEBUG if verbose else logging.INFO, log_file)

    loader = ConfigLoader(config_dir)
    try:
        collection = loader.load_audits(audits_file)
        settings = loader.load_settings(settings_file)
    except (FileNotFoundError, ValueError) as e:
        logger.error("Configuration error: %s", e)
        console.print(f"[red]❌ Error:[/red] {escape(str(e))}")
        raise typer.Exit(2)

    runner = AuditRunner(
        notifier=_build_notifier(settings, dry_run),
        settings=settings.runner,
        observers=[LoggingObserver()],
    )

    if audit_name:
        audit = collection.get(audit_name)
        if audit is None:
            console.print(f"[red]❌ Error:[/red] No audit named '{escape(audit_name)}'")
            console.print(f"[dim]Available: {escape(', '.join(collection.names))}[/dim]")
            raise typer.Exit(2)
        runner.run_audit(audit)
        ran = [audit]
    else:
        runner.audits = collection
        try:
            runner.run_audits()
        except NoAuditsLoadedError as e:
            logger.error("Configuration error: %s", e)
            console.print(f"[red]❌ Error:[/red] {escape(str(e))}")
            raise typer.Exit(2)
        ran = list(collection)

    _print_summary(ran)

    if any(audit.result is AuditResult.FAILED for audit in ran):
        raise typer.Exit(1)


@app.command()
def validate(
    audits_file: str = typer.Option("audits.json", "--audits", help="Audit definitions file."),
    config_dir: Path = typer.Option(DEFAULT_CONFIG_DIR, "--config-dir", help="Directory holding config files."),
):
    """Load audit definitions and list them without running anything."""
    loader = ConfigLoader(config_dir)
    try:
        collection = loader.load_audits(audits_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]❌ Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    table = Table(title=f"{len(collection)} audits")
    table.add_column("Audit", style="cyan", no_wrap=True)
    table.add_column("Provider")
    table.add_column("Tests", justify="right")
    table.add_column("Subscribers", justify="right")
    for audit in collection:
        table.add_row(escape(audit.name), audit.provider, str(len(audit.tests)), str(len(audit.email_subscribers)))

    console.print(table)
    console.print("[green]✅ Audit definitions are valid[/green]")


@app.command()
def connection(
    connection_string: str = typer.Argument(..., help="Connection string to parse."),
    provider: str = typer.Option(..., "--provider", "-p", help="Provider id, e.g. system.data.sqlclient."),
):
    """Show the parsed fields of a connection string (password masked)."""
    descriptor = ConnectionDescriptor(connection_string, provider)

    table = Table(title=f"Connection ({descriptor.provider_id})", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for field, value in descriptor.as_dict().items():
        if field == "password" and value:
            value = "****"
        table.add_row(field, escape(value))
    console.print(table)

    rendered = descriptor.to_string(mask_password=True)
    if rendered:
        console.print(f"[bold]Provider string:[/bold] {escape(rendered)}", highlight=False)
    else:
        console.print(f"[yellow]⚠️  No connection string dialect for provider '{escape(provider)}'[/yellow]")


def main() -> int:
    """Main entry point for DataAudit CLI."""
    try:
        app()
    except SystemExit as e:
        if e.code is None:
            return 0
        return e.code if isinstance(e.code, int) else 1
    return 0
