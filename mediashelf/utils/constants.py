"""
Constantes partagées de MediaShelf.

Centralise les clés de la table settings du catalogue et leurs valeurs
par défaut. Les valeurs sont stockées sous forme de chaînes ("true"/"false").
"""

from mediashelf.core.entities.media import MediaCategory

# Clés des interrupteurs d'enrichissement
MOVIES_METADATA_ENABLED = "movies_metadata_enabled"
TV_METADATA_ENABLED = "tv_metadata_enabled"
BOOKS_METADATA_ENABLED = "books_metadata_enabled"
TV_EPISODES_METADATA_ENABLED = "tv_episodes_metadata_enabled"
SAVE_IMAGES_LOCALLY = "save_images_locally"

# Interrupteur d'enrichissement par catégorie de scan
METADATA_SETTING_BY_CATEGORY: dict[MediaCategory, str] = {
    MediaCategory.TV: TV_METADATA_ENABLED,
    MediaCategory.MOVIES: MOVIES_METADATA_ENABLED,
    MediaCategory.BOOKS: BOOKS_METADATA_ENABLED,
}

# Valeurs insérées a l'initialisation de la base (sans écraser l'existant)
DEFAULT_SETTINGS: dict[str, str] = {
    MOVIES_METADATA_ENABLED: "false",
    TV_METADATA_ENABLED: "false",
    BOOKS_METADATA_ENABLED: "false",
    TV_EPISODES_METADATA_ENABLED: "false",
    SAVE_IMAGES_LOCALLY: "false",
}

# Noms des fichiers image écrits a côté des médias
POSTER_FILENAME = "poster.jpg"
COVER_FILENAME = "cover.jpg"
EPISODE_THUMB_TEMPLATE = "episode_{number}_thumb.jpg"
