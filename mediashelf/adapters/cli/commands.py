"""
Commandes CLI de MediaShelf : scan, maintenance du catalogue, reglages.

Les commandes ne contiennent aucune logique de reconciliation : elles
declenchent les services du container et affichent les resultats avec Rich.
"""

import asyncio
from typing import Annotated, Optional

import typer
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from mediashelf.adapters.cli.helpers import (
    close_providers,
    console,
    suppress_loguru,
    with_container,
)
from mediashelf.core.entities.media import MediaCategory
from mediashelf.services.progress import ProgressEmitter, ScanEvent, ScanEventType
from mediashelf.services.reconciliation.dataclasses import ScanResult
from mediashelf.utils.constants import DEFAULT_SETTINGS

CATEGORY_LABELS = {
    MediaCategory.TV: "Séries",
    MediaCategory.MOVIES: "Films",
    MediaCategory.BOOKS: "Livres",
}


def scan(
    kind: Annotated[
        Optional[MediaCategory],
        typer.Option("--kind", "-k", help="Type a scanner (tv, movies, books). Tous par defaut."),
    ] = None,
    skip_metadata: Annotated[
        bool,
        typer.Option("--skip-metadata", help="Scan rapide sans appel aux fournisseurs"),
    ] = False,
    if_empty: Annotated[
        bool,
        typer.Option("--if-empty", help="Scan rapide de premier demarrage, seulement si le catalogue est vide"),
    ] = False,
) -> None:
    """Synchronise le catalogue avec les repertoires de medias."""
    asyncio.run(_scan_async(kind, skip_metadata, if_empty))


@with_container()
async def _scan_async(
    container, kind: Optional[MediaCategory], skip_metadata: bool, if_empty: bool
) -> None:
    """Implementation async de la commande scan."""
    service = container.reconciliation_service()

    with suppress_loguru():
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TextColumn("[dim]{task.completed} traite(s)"),
            console=console,
            transient=False,
        ) as progress:
            tasks: dict[MediaCategory, int] = {}

            def on_event(event: ScanEvent) -> None:
                label = CATEGORY_LABELS[event.category]
                if event.type == ScanEventType.STARTED:
                    tasks[event.category] = progress.add_task(f"[cyan]{label}", total=None)
                    return
                task = tasks.get(event.category)
                if task is None:
                    return
                if event.type == ScanEventType.SCANNING:
                    progress.update(task, description=f"[cyan]{label}[/cyan] {event.title}")
                elif event.type == ScanEventType.SCANNED:
                    progress.advance(task)
                elif event.type == ScanEventType.COMPLETE:
                    progress.update(task, description=f"[green]{label} termine", total=1, completed=1)

            emitter = ProgressEmitter(on_event)
            try:
                if if_empty:
                    results = await service.scan_on_startup(emitter)
                elif kind is None:
                    results = await service.scan_all(emitter, skip_metadata=skip_metadata)
                else:
                    results = {kind: await service.scan(kind, emitter, skip_metadata=skip_metadata)}
            finally:
                await close_providers(container)

    if results is None:
        console.print("[dim]Catalogue deja peuple, scan de demarrage ignore.[/dim]")
        return
    _display_results(results)


def _display_results(results: dict[MediaCategory, ScanResult]) -> None:
    """Affiche le bilan des scans dans un tableau."""
    table = Table(title="Bilan du scan")
    table.add_column("Type", style="cyan")
    table.add_column("Ajoutes", justify="right", style="green")
    table.add_column("Mis a jour", justify="right")
    table.add_column("Supprimes", justify="right", style="yellow")
    table.add_column("Erreurs", justify="right", style="red")

    for category, result in results.items():
        table.add_row(
            CATEGORY_LABELS[category],
            str(result.added),
            str(result.updated),
            str(result.removed),
            str(len(result.errors)),
        )
    console.print(table)

    for category, result in results.items():
        for error in result.errors:
            console.print(f"[red]{CATEGORY_LABELS[category]}:[/red] {error}")


def clear_metadata(
    category: Annotated[MediaCategory, typer.Argument(help="tv, movies ou books")],
) -> None:
    """Efface les metadonnees en cache d'une categorie."""
    asyncio.run(_clear_metadata_async(category))


@with_container()
async def _clear_metadata_async(container, category: MediaCategory) -> None:
    cleared = container.maintenance_service().clear_metadata(category)
    console.print(
        f"[green]{cleared}[/green] entree(s) effacee(s) pour {CATEGORY_LABELS[category]}"
    )


def stats() -> None:
    """Affiche le nombre de series, films et livres du catalogue."""
    asyncio.run(_stats_async())


@with_container()
async def _stats_async(container) -> None:
    counts = container.maintenance_service().stats()
    table = Table(title="Catalogue")
    table.add_column("Type", style="cyan")
    table.add_column("Nombre", justify="right")
    for category, count in counts.items():
        table.add_row(CATEGORY_LABELS[category], str(count))
    console.print(table)


def test_connections() -> None:
    """Teste les cles API TMDB, TVDB et Hardcover."""
    asyncio.run(_test_connections_async())


@with_container(requires_db=False)
async def _test_connections_async(container) -> None:
    service = container.maintenance_service()
    try:
        with suppress_loguru():
            results = await service.test_connections()
    finally:
        await close_providers(container)

    for source, result in results.items():
        status = "[green]OK[/green]" if result.success else "[red]ECHEC[/red]"
        console.print(f"{source.upper():<10} {status} {result.message}")


def settings_set(
    key: Annotated[str, typer.Argument(help=f"Reglage ({', '.join(DEFAULT_SETTINGS)})")],
    value: Annotated[bool, typer.Argument(help="true ou false")],
) -> None:
    """Active ou desactive un interrupteur d'execution."""
    asyncio.run(_settings_set_async(key, value))


@with_container()
async def _settings_set_async(container, key: str, value: bool) -> None:
    try:
        container.maintenance_service().set_setting(key, value)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)
    console.print(f"{key} = [cyan]{'true' if value else 'false'}[/cyan]")
