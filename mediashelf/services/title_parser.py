"""
Nettoyage des noms de dossiers et fichiers avant recherche fournisseur.

Utilise pour les films et les series TV :

    >>> parse_media_title("The.Matrix.1999.1080p.BluRay.mkv")
    ParsedTitle(title='The Matrix', year='1999')
    >>> parse_media_title("Breaking Bad (2008)")
    ParsedTitle(title='Breaking Bad', year='2008')
"""

import re
from dataclasses import dataclass
from typing import Optional

from mediashelf.adapters.file_system import VIDEO_EXTENSIONS

# Annee entre parentheses ou crochets : "(1999)", "[1999]"
BRACKETED_YEAR_PATTERN = re.compile(r"[\(\[](\d{4})[\)\]]")

# Annee nue apres le titre : "The.Matrix.1999.1080p"
BARE_YEAR_PATTERN = re.compile(r"(?<=[\s._])((?:19|20)\d{2})(?=[\s._]|$)")

QUALITY_TAGS_PATTERN = re.compile(
    r"\b(1080p|720p|2160p|4K|WEBDL|BluRay|BRRip|DVDRip|HDTV|WEBRip)\b",
    re.IGNORECASE,
)

# Seules les extensions video sont retirees : "Star.Wars" reste "Star Wars"
EXTENSION_PATTERN = re.compile(
    r"\.(?:" + "|".join(sorted(ext.lstrip(".") for ext in VIDEO_EXTENSIONS)) + r")$",
    re.IGNORECASE,
)
SEPARATORS_PATTERN = re.compile(r"[._]")
WHITESPACE_PATTERN = re.compile(r"\s+")


@dataclass(frozen=True)
class ParsedTitle:
    """Titre nettoye et annee eventuelle (chaine de 4 chiffres)."""

    title: str
    year: Optional[str] = None


def _extract_year(name: str) -> tuple[str, Optional[str]]:
    """Retire l'annee du nom et la retourne."""
    match = BRACKETED_YEAR_PATTERN.search(name)
    if match:
        return name[: match.start()] + name[match.end():], match.group(1)

    # La derniere annee nue l'emporte : "Blade.Runner.2049.2017" -> 2017
    matches = list(BARE_YEAR_PATTERN.finditer(name))
    if matches:
        last = matches[-1]
        return name[: last.start()] + name[last.end():], last.group(1)

    return name, None


def parse_media_title(name: str) -> ParsedTitle:
    """
    Nettoie un nom de dossier ou de fichier.

    Etapes : extraction de l'annee, suppression des marqueurs de qualite,
    de l'extension video finale, remplacement de "." et "_" par des espaces,
    puis normalisation des espaces.

    Args:
        name: Nom brut (dossier de serie ou de film, ou fichier video)

    Returns:
        ParsedTitle avec le titre nettoye et l'annee si trouvee
    """
    title, year = _extract_year(name)
    title = QUALITY_TAGS_PATTERN.sub("", title)
    title = EXTENSION_PATTERN.sub("", title)
    title = SEPARATORS_PATTERN.sub(" ", title)
    title = WHITESPACE_PATTERN.sub(" ", title).strip()
    return ParsedTitle(title=title, year=year)
