"""Doctor command for configuration and connectivity diagnostics."""

from __future__ import annotations

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from adapters.cinebot_client import CinebotClient
from cli.ui_components import build_status_panel
from core.config import ClientSettings, build_settings, resolve_timeouts
from core.errors import CinebotError, ConfigurationError
from core.logging_config import get_logger

app = typer.Typer(no_args_is_help=True, help="Configuration and connectivity checks.")

_console = Console()


def open_client(settings: ClientSettings, *, verbose: bool = False) -> CinebotClient:
    """Build a client from settings; `verbose` wires a JSON debug logger."""

    logger = get_logger("cinebot", logging.DEBUG) if verbose else None
    return CinebotClient.from_settings(settings, logger=logger)


def load_settings() -> ClientSettings:
    try:
        return build_settings()
    except ConfigurationError as exc:
        _console.print(f"[red]{exc.message}[/red]")
        _console.print("Set CINEBOT_BASE_URL / CINEBOT_IDPV / CINEBOT_PASSKEY (environment or .env).")
        raise typer.Exit(code=2) from exc


@app.command()
def run(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log raw requests/responses."),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Per-call timeout for the ping (seconds)."),
) -> None:
    """Check configuration and ping the remote system."""

    settings = load_settings()
    total, connect = resolve_timeouts(settings, timeout)

    table = Table(title="Cinebot Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("Base URL", "OK", settings.base_url)
    table.add_row("Client id", "OK", settings.idpv)
    table.add_row("Timeouts", "OK", f"total={total:g}s connect={connect:g}s")
    if settings.verify_tls:
        table.add_row("TLS verify", "OK", "certificate and hostname verified")
    else:
        table.add_row("TLS verify", "DISABLED", "self-signed certificates accepted")

    healthy = False
    status = None
    with open_client(settings, verbose=verbose) as client:
        try:
            status = client.ping(timeout)
        except CinebotError as exc:
            table.add_row("Ping", "FAIL", f"{type(exc).__name__}: {exc}")
        else:
            table.add_row("Ping", "OK", status.codicesistema or "-")
            table.add_row("Version", "OK", status.versione or "-")
            table.add_row("Ready", "OK" if status.ready else "NOT READY", status.utente or "-")
            healthy = status.ready

    _console.print(table)
    if status is not None:
        _console.print(build_status_panel(status))
    if not healthy:
        raise typer.Exit(code=1)

