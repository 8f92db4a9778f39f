"""
Utilitaires partages pour les commandes CLI de MediaShelf.

Ce module fournit :
- console : instance Rich Console partagee
- suppress_loguru : context manager pour desactiver/reactiver les logs loguru
- with_container : decorateur injectant un container initialise
- close_providers : fermeture des clients HTTP en fin de commande
"""

from contextlib import contextmanager
from functools import wraps

from loguru import logger as loguru_logger
from rich.console import Console

from mediashelf.container import Container

console = Console()


@contextmanager
def suppress_loguru():
    """
    Context manager pour desactiver les logs loguru pendant l'affichage Rich.

    Usage:
        with suppress_loguru():
            console.print(...)
    """
    loguru_logger.disable("mediashelf")
    try:
        yield
    finally:
        loguru_logger.enable("mediashelf")


def with_container(requires_db: bool = True):
    """
    Decorateur qui injecte un container initialise en premier argument.

    Args:
        requires_db: Si True (defaut), initialise la base de donnees.

    Usage:
        @with_container()
        async def my_command(container, ...):
            config = container.config()
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            container = Container()
            if requires_db:
                container.database.init()
            return await func(container, *args, **kwargs)
        return wrapper
    return decorator


async def close_providers(container: Container) -> None:
    """Ferme les clients HTTP et le cache disque du container."""
    await container.tmdb_client().close()
    await container.tvdb_client().close()
    await container.hardcover_client().close()
    await container.image_downloader().close()
    container.api_cache().close()
