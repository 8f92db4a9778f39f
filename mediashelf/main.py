"""
Point d'entrée CLI de MediaShelf.

Initialise le container DI, configure le logging et fournit les commandes CLI.
"""

import typer
from loguru import logger

from .adapters.cli.commands import (
    clear_metadata,
    scan,
    settings_set,
    stats,
    test_connections,
)
from .config import Settings
from .container import Container
from .logging_config import configure_logging

__version__ = "0.1.0"

app = typer.Typer(
    name="mediashelf",
    help="Catalogue de series TV, films et livres",
)
container = Container()

# Monter les commandes depuis commands.py
app.command()(scan)
app.command(name="clear-metadata")(clear_metadata)
app.command()(stats)
app.command(name="test-connections")(test_connections)
app.command(name="settings-set")(settings_set)


def get_config() -> Settings:
    """Récupère les paramètres de l'application depuis le container DI."""
    return container.config()


@app.command()
def info() -> None:
    """Affiche la configuration actuelle."""
    config = get_config()
    typer.echo(f"Séries TV : {config.tv_shows_dir}")
    typer.echo(f"Films : {config.movies_dir}")
    typer.echo(f"Livres : {config.books_dir}")
    typer.echo(f"Base de données : {config.database_url}")
    typer.echo(f"API TMDB : {'activée' if config.tmdb_enabled else 'désactivée'}")
    typer.echo(f"API TVDB : {'activée' if config.tvdb_enabled else 'désactivée'}")
    typer.echo(f"API Hardcover : {'activée' if config.hardcover_enabled else 'désactivée'}")
    typer.echo(f"Suppression des médias disparus : {'oui' if config.prune_missing_media else 'non'}")
    typer.echo(f"Niveau de log : {config.log_level}")


@app.command()
def version() -> None:
    """Affiche les informations de version."""
    typer.echo(f"MediaShelf v{__version__}")


def main() -> None:
    """Point d'entrée de l'application."""
    settings = container.config()
    configure_logging(
        log_level=settings.log_level,
        log_file=settings.log_file,
        rotation_size=settings.log_rotation_size,
        retention_count=settings.log_retention_count,
    )

    # Crée les tables et les réglages par défaut si nécessaire
    container.database.init()

    logger.info("Démarrage de MediaShelf", version=__version__)
    app()


if __name__ == "__main__":
    main()
