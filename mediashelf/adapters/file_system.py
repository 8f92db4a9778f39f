"""
Adaptateur pour le parcours et la classification du systeme de fichiers.

Decide, a partir des extensions et de la forme des repertoires, si une entree
est une unite lisible (video, fichier de livre), un conteneur (dossier de film),
ou un dossier d'organisation (saison, serie de livres, auteur).

Toutes les lectures sont non recursives : chaque niveau de la bibliotheque
est inspecte separement par le scanner correspondant.
"""

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional

from mediashelf.core.entities.media import BookKind

# Extensions video supportees
VIDEO_EXTENSIONS: frozenset[str] = frozenset({
    ".mkv", ".mp4", ".avi", ".mov", ".wmv", ".flv", ".webm"
})

EBOOK_EXTENSIONS: frozenset[str] = frozenset({
    ".epub", ".pdf", ".mobi", ".azw3", ".cbz", ".cbr"
})

AUDIOBOOK_EXTENSIONS: frozenset[str] = frozenset({
    ".mp3", ".m4a", ".m4b", ".aac", ".flac", ".ogg", ".opus", ".wav"
})

BOOK_EXTENSIONS: dict[BookKind, frozenset[str]] = {
    BookKind.AUDIOBOOK: AUDIOBOOK_EXTENSIONS,
    BookKind.EBOOK: EBOOK_EXTENSIONS,
}

SEASON_PATTERN = re.compile(r"season\s*(\d+)", re.IGNORECASE)
EPISODE_PATTERN = re.compile(r"(?:e|episode\s*)(\d+)", re.IGNORECASE)


class BookDirectoryKind(str, Enum):
    """Forme d'un dossier place sous un auteur."""

    STANDALONE = "standalone"  # fichiers de livre directs, aucun sous-dossier
    SERIES = "series"  # contient des sous-dossiers (un livre par sous-dossier)
    IGNORED = "ignored"


@dataclass
class MovieEntry:
    """
    Entree de premier niveau reconnue comme film.

    Attributs:
        title: Nom du dossier (conteneur) ou nom du fichier sans extension
        file_size: Taille du fichier representatif en octets
        video_file: Fichier representatif (le plus gros pour un conteneur)
        is_container: True si l'entree est un dossier
    """

    title: str
    file_size: int
    video_file: Path
    is_container: bool


def parse_season_number(name: str) -> Optional[int]:
    """
    Extrait le numero de saison d'un nom de dossier.

    Returns:
        Le numero ("Season 02" -> 2), ou None si le nom n'est pas une saison
    """
    match = SEASON_PATTERN.search(name)
    return int(match.group(1)) if match else None


def parse_episode_number(name: str) -> int:
    """
    Extrait le numero d'episode d'un nom de fichier.

    Reconnait "S01E05" et "Episode 5". Retourne 0 si absent : deux fichiers
    sans numero dans la meme saison partagent alors le numero 0.
    """
    match = EPISODE_PATTERN.search(name)
    return int(match.group(1)) if match else 0


def has_extension(path: Path, extensions: Iterable[str]) -> bool:
    """Verifie l'extension d'un chemin (insensible a la casse)."""
    return path.suffix.lower() in extensions


class FileSystemAdapter:
    """
    Classification des entrees de la bibliotheque.

    Les erreurs de lecture d'un repertoire sont propagees : c'est au scanner
    de decider si elles concernent une entree (erreur enregistree, on continue)
    ou la racine (scan du type interrompu).
    """

    def exists(self, path: Path) -> bool:
        """Verifie si un chemin existe."""
        return path.exists()

    def get_size(self, path: Path) -> int:
        """
        Recupere la taille du fichier en octets.

        Retourne 0 si le fichier n'existe pas.
        """
        try:
            return path.stat().st_size
        except OSError:
            return 0

    def list_entries(self, directory: Path) -> list[Path]:
        """
        Liste les entrees directes d'un repertoire, triees par nom.

        Les entrees cachees (nom commencant par ".") sont ignorees.

        Raises:
            OSError: si le repertoire ne peut pas etre lu
        """
        return sorted(
            (entry for entry in directory.iterdir() if not entry.name.startswith(".")),
            key=lambda entry: entry.name,
        )

    def list_subdirectories(self, directory: Path) -> list[Path]:
        """Liste les sous-repertoires directs."""
        return [entry for entry in self.list_entries(directory) if entry.is_dir()]

    def list_files(self, directory: Path, extensions: Iterable[str]) -> list[Path]:
        """Liste les fichiers directs ayant une des extensions donnees."""
        extensions = frozenset(extensions)
        return [
            entry
            for entry in self.list_entries(directory)
            if entry.is_file() and has_extension(entry, extensions)
        ]

    # Series TV

    def list_season_folders(self, show_dir: Path) -> list[tuple[Path, int]]:
        """
        Liste les dossiers de saison d'une serie avec leur numero.

        Returns:
            Liste de tuples (chemin, numero de saison)
        """
        seasons = []
        for entry in self.list_subdirectories(show_dir):
            number = parse_season_number(entry.name)
            if number is not None:
                seasons.append((entry, number))
        return seasons

    def list_episode_files(self, season_dir: Path) -> list[Path]:
        """Liste les fichiers video d'un dossier de saison."""
        return self.list_files(season_dir, VIDEO_EXTENSIONS)

    # Films

    def classify_movie_entry(self, entry: Path) -> Optional[MovieEntry]:
        """
        Classe une entree de premier niveau du repertoire des films.

        - Dossier contenant au moins une video : conteneur, le fichier le plus
          gros est representatif et le nom du dossier sert de titre.
        - Fichier video : le nom sans extension sert de titre.
        - Tout le reste : None (pas un film).
        """
        if entry.is_dir():
            videos = self.list_files(entry, VIDEO_EXTENSIONS)
            if not videos:
                return None
            # A taille egale, le premier fichier (ordre alphabetique) l'emporte
            largest = videos[0]
            largest_size = self.get_size(largest)
            for video in videos[1:]:
                size = self.get_size(video)
                if size > largest_size:
                    largest, largest_size = video, size
            return MovieEntry(
                title=entry.name,
                file_size=largest_size,
                video_file=largest,
                is_container=True,
            )

        if entry.is_file() and has_extension(entry, VIDEO_EXTENSIONS):
            return MovieEntry(
                title=entry.stem,
                file_size=self.get_size(entry),
                video_file=entry,
                is_container=False,
            )

        return None

    # Livres

    def classify_book_directory(
        self, directory: Path, extensions: Iterable[str]
    ) -> BookDirectoryKind:
        """
        Classe un dossier place sous un auteur.

        Les sous-dossiers l'emportent : un dossier qui en contient est une
        serie, meme s'il contient aussi des fichiers de livre.
        """
        entries = self.list_entries(directory)
        if any(entry.is_dir() for entry in entries):
            return BookDirectoryKind.SERIES
        extensions = frozenset(extensions)
        if any(entry.is_file() and has_extension(entry, extensions) for entry in entries):
            return BookDirectoryKind.STANDALONE
        return BookDirectoryKind.IGNORED
