"""CLI de diagnóstico del cliente Cinebot (Typer).

Por qué una CLI mínima:
- Verificar configuración y conectividad contra un sistema on-premise sin
  escribir código (`cinebot doctor run`).
- Inspeccionar el catálogo publicado (`cinebot programmazione`).
"""

from __future__ import annotations

import typer
from rich.console import Console

from cli import doctor
from cli.ui_components import build_abbonamenti_table, build_programmazione_table, print_banner
from core.errors import CinebotError

app = typer.Typer(no_args_is_help=True, help="Cinebot remote client tools.")
app.add_typer(doctor.app, name="doctor")

_console = Console()


@app.command()
def programmazione(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log raw requests/responses."),
    abbonamenti: bool = typer.Option(False, "--abbonamenti", help="Also list subscription types."),
    banner: bool = typer.Option(True, "--banner/--no-banner", help="Show the banner."),
) -> None:
    """Show the current programming (titles, events, sectors)."""

    settings = doctor.load_settings()
    if banner:
        print_banner(_console)

    with doctor.open_client(settings, verbose=verbose) as client:
        try:
            catalog = client.get_programmazione()
        except CinebotError as exc:
            _console.print(f"[red]{type(exc).__name__}:[/red] {exc}")
            raise typer.Exit(code=1) from exc

    _console.print(build_programmazione_table(catalog))
    if abbonamenti:
        _console.print(build_abbonamenti_table(catalog))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
