"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import Programmazione, SystemStatus


def print_banner(console: Console) -> None:
    title = Text("Cinebot", style="bold cyan")
    subtitle = Text("Remote client • Programmazione • Emissione", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_status_panel(status: SystemStatus) -> Panel:
    """Panel con la respuesta de `ping`."""

    body = Text()
    body.append(f"Codice sistema: {status.codicesistema or '-'}\n")
    body.append(f"Utente: {status.utente or '-'}\n")
    body.append(f"Versione fiscale: {status.versione_fiscale or '-'}")
    if status.build:
        body.append(f" (build {status.build})", style="dim")
    body.append(f"\nStep programmazione: {status.stepprog}  abbonamenti: {status.stepabb}\n")
    if status.ready:
        body.append("READY", style="bold green")
    else:
        body.append("NOT READY", style="bold red")
    return Panel(body, title=Text("Sistema", style="bold yellow"), border_style="yellow")


def build_programmazione_table(programmazione: Programmazione) -> Table:
    """Una fila por evento, agrupadas por título."""

    table = Table(title=f"Programmazione (step {programmazione.stepprog})")
    table.add_column("Titolo", style="cyan")
    table.add_column("Evento", style="white", no_wrap=True)
    table.add_column("Inizio", style="magenta")
    table.add_column("Locale", style="white")
    table.add_column("Settori", style="green")
    table.add_column("Numerato", style="dim")

    for titolo in programmazione.titoli:
        for evento in titolo.eventi:
            inizio = evento.inizio_dt
            table.add_row(
                titolo.titolo,
                str(evento.id),
                inizio.strftime("%Y-%m-%d %H:%M") if inizio else "-",
                evento.locale or "-",
                ", ".join(s.nome or str(s.id) for s in evento.settori) or "-",
                "yes" if evento.numerato else "no",
            )
    return table


def build_abbonamenti_table(programmazione: Programmazione) -> Table:
    table = Table(title="Tipi abbonamento")
    table.add_column("Codice", style="cyan", no_wrap=True)
    table.add_column("Nome", style="white")
    table.add_column("Entrate", style="green")
    table.add_column("Importo", style="magenta")
    for tipo in programmazione.tipiabbonamenti:
        table.add_row(
            tipo.codice or str(tipo.id),
            tipo.nome or "-",
            str(tipo.entrate) if tipo.entrate is not None else "-",
            f"{tipo.importo:.2f}" if tipo.importo is not None else "-",
        )
    return table
