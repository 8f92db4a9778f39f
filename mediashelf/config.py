"""
Configuration de l'application via pydantic-settings.

La configuration est chargée depuis les variables d'environnement avec le préfixe MEDIASHELF_,
et peut optionnellement être fournie via un fichier .env.

Les clés API (TMDB, TVDB, Hardcover) sont optionnelles - l'enrichissement correspondant
ne trouve simplement aucune métadonnée si elles ne sont pas fournies.

Les interrupteurs d'enrichissement (movies_metadata_enabled, save_images_locally, ...)
ne sont PAS ici : ils sont stockés dans la table settings du catalogue et modifiables
à chaud.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Trouver le fichier .env à la racine du projet (parent de mediashelf/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Paramètres de l'application avec support des variables d'environnement.

    Tous les paramètres peuvent être surchargés via des variables d'environnement
    avec le préfixe MEDIASHELF_.
    Exemple : MEDIASHELF_MOVIES_DIR=/mnt/films

    Les chemins sont automatiquement étendus (~ -> répertoire home).
    """

    model_config = SettingsConfigDict(
        env_prefix="MEDIASHELF_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Racines des bibliothèques (avec expansion ~)
    tv_shows_dir: Path = Field(default=Path("/tv"))
    movies_dir: Path = Field(default=Path("/movies"))
    books_dir: Path = Field(default=Path("/books"))

    # Base de données
    database_url: str = Field(default="sqlite:///mediashelf.db")

    # Clés API (OPTIONNELLES)
    tmdb_api_key: Optional[str] = Field(default=None)
    tvdb_api_key: Optional[str] = Field(default=None)
    hardcover_api_key: Optional[str] = Field(default=None)

    # Cache disque des réponses API (saisons TVDB, détails séries)
    cache_dir: Path = Field(default=Path(".cache/api"))

    # Borne supérieure d'un appel fournisseur (attente du rate limiter incluse)
    provider_timeout_seconds: float = Field(default=60.0, gt=0)

    # Suppression des séries/films disparus du disque (désactivé par défaut)
    prune_missing_media: bool = Field(default=False)

    # Logging (fichier + stderr, rotation 10MB, 5 fichiers de rétention)
    log_level: str = Field(default="INFO")
    log_file: Path = Field(default=Path("logs/mediashelf.log"))
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)

    @field_validator(
        "tv_shows_dir", "movies_dir", "books_dir", "cache_dir", "log_file", mode="before"
    )
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        """Étend ~ vers le répertoire home dans les chemins."""
        return Path(v).expanduser()

    @property
    def tmdb_enabled(self) -> bool:
        """Vérifie si l'API TMDB est configurée."""
        return self.tmdb_api_key is not None

    @property
    def tvdb_enabled(self) -> bool:
        """Vérifie si l'API TVDB est configurée."""
        return self.tvdb_api_key is not None

    @property
    def hardcover_enabled(self) -> bool:
        """Vérifie si l'API Hardcover est configurée."""
        return self.hardcover_api_key is not None
