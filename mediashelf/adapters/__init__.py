"""
Couche adaptateurs (infrastructure).

Les adaptateurs implémentent les ports définis dans core/ports/ :
- api/ : clients des fournisseurs de métadonnées (TMDB, TVDB, Hardcover)
- cli/ : interface ligne de commande (Typer)
- file_system : classification des entrées de la bibliothèque
- images : téléchargement local des images

core/ ne dépend jamais des adaptateurs.
"""

from mediashelf.adapters.file_system import FileSystemAdapter
from mediashelf.adapters.images import ImageDownloader

__all__ = [
    "FileSystemAdapter",
    "ImageDownloader",
]
