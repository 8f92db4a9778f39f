"""
Socle commun des procedures de reconciliation.
"""

from pathlib import Path
from typing import Optional

from mediashelf.adapters.file_system import FileSystemAdapter
from mediashelf.adapters.images import ImageDownloader
from mediashelf.config import Settings
from mediashelf.core.entities.media import MediaCategory
from mediashelf.core.ports.repositories import ICatalogRepository
from mediashelf.services.enrichment import MetadataEnrichmentPolicy
from mediashelf.services.progress import ProgressEmitter
from mediashelf.utils.constants import METADATA_SETTING_BY_CATEGORY, SAVE_IMAGES_LOCALLY


class BaseScanner:
    """
    Dependances et utilitaires partages par les scanners TV, films et livres.

    Chaque scanner recoit son propre repository (et donc sa propre session).
    """

    category: MediaCategory

    def __init__(
        self,
        repository: ICatalogRepository,
        file_system: FileSystemAdapter,
        settings: Settings,
        image_downloader: Optional[ImageDownloader] = None,
    ) -> None:
        self._repository = repository
        self._file_system = file_system
        self._settings = settings
        self._image_downloader = image_downloader

    def _is_enabled(self, key: str) -> bool:
        """Lit un interrupteur de la table settings ("true" uniquement)."""
        return self._repository.get_setting(key) == "true"

    def _metadata_enabled(self) -> bool:
        return self._is_enabled(METADATA_SETTING_BY_CATEGORY[self.category])

    def _new_policy(
        self, emitter: ProgressEmitter, skip_metadata: bool
    ) -> MetadataEnrichmentPolicy:
        return MetadataEnrichmentPolicy(
            category=self.category,
            emitter=emitter,
            skip_metadata=skip_metadata,
            timeout=self._settings.provider_timeout_seconds,
        )

    async def _store_image(
        self, url: Optional[str], destination_dir: Path, filename: str
    ) -> Optional[str]:
        """
        Remplace une URL d'image par le fichier local si le reglage est actif.

        Retourne l'URL d'origine si le reglage est inactif ou en cas d'echec.
        """
        if not url or self._image_downloader is None:
            return url
        if not self._is_enabled(SAVE_IMAGES_LOCALLY):
            return url
        return await self._image_downloader.maybe_download(url, destination_dir, filename)
