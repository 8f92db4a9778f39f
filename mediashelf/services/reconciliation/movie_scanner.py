"""
Reconciliation des films.

Chaque entree de premier niveau de movies_dir est un film : soit un
dossier contenant des videos (conteneur), soit un fichier video nu.
"""

from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from loguru import logger

from mediashelf.adapters.file_system import FileSystemAdapter, MovieEntry
from mediashelf.adapters.images import ImageDownloader
from mediashelf.config import Settings
from mediashelf.core.entities.media import MediaCategory, MediaItem, MediaKind
from mediashelf.core.ports.api_clients import IMovieMetadataProvider
from mediashelf.core.ports.repositories import ICatalogRepository
from mediashelf.services.enrichment import MetadataEnrichmentPolicy
from mediashelf.services.progress import ProgressEmitter
from mediashelf.services.reconciliation.base import BaseScanner
from mediashelf.services.reconciliation.dataclasses import ScanResult
from mediashelf.services.title_parser import parse_media_title
from mediashelf.utils.constants import POSTER_FILENAME


class MovieScanner(BaseScanner):
    """Scanner des films."""

    category = MediaCategory.MOVIES

    def __init__(
        self,
        repository: ICatalogRepository,
        file_system: FileSystemAdapter,
        movie_client: IMovieMetadataProvider,
        settings: Settings,
        image_downloader: Optional[ImageDownloader] = None,
    ) -> None:
        super().__init__(repository, file_system, settings, image_downloader)
        self._movie_client = movie_client

    async def scan(
        self,
        emitter: Optional[ProgressEmitter] = None,
        skip_metadata: bool = False,
    ) -> ScanResult:
        """Reconcilie le catalogue avec movies_dir."""
        emitter = emitter or ProgressEmitter()
        result = ScanResult()
        root = self._settings.movies_dir
        emitter.started(self.category)

        if not self._file_system.exists(root):
            logger.info("Repertoire des films absent, rien a scanner", path=str(root))
            emitter.complete(self.category, result)
            return result

        try:
            entries = self._file_system.list_entries(root)
        except OSError as e:
            logger.error("Lecture du repertoire des films impossible", path=str(root), error=str(e))
            result.errors.append(f"Error scanning movies directory: {e}")
            emitter.complete(self.category, result)
            return result

        if self._settings.prune_missing_media:
            result.removed += self._prune(root)

        policy = self._new_policy(emitter, skip_metadata)
        enabled = self._metadata_enabled()
        now = datetime.now(timezone.utc)

        for entry in entries:
            try:
                movie = self._file_system.classify_movie_entry(entry)
                if movie is None:
                    continue
                is_new = await self._process_movie(root, entry, movie, policy, enabled, now)
                result.record(is_new)
            except Exception as e:
                logger.error("Erreur sur un film", entry=entry.name, error=str(e))
                result.errors.append(f"Error scanning movie {entry.name}: {e}")

        logger.info(
            "Scan des films termine",
            added=result.added,
            updated=result.updated,
            removed=result.removed,
            errors=len(result.errors),
        )
        emitter.complete(self.category, result)
        return result

    async def _process_movie(
        self,
        root: Path,
        entry: Path,
        movie: MovieEntry,
        policy: MetadataEnrichmentPolicy,
        enabled: bool,
        scanned_at: datetime,
    ) -> bool:
        """Upserte un film. Retourne True s'il est nouveau."""
        existing = self._repository.get_media_item_by_path(MediaKind.MOVIE, entry.name)
        parsed = parse_media_title(movie.title)

        # Un fichier nu n'a pas de dossier propre : le poster va a la racine
        if movie.is_container:
            image_dir, poster_name = entry, POSTER_FILENAME
        else:
            image_dir, poster_name = root, f"{movie.title}-{POSTER_FILENAME}"

        async def fetch() -> Optional[dict]:
            metadata = await self._movie_client.search_movie(parsed.title, parsed.year)
            if metadata is None:
                return None
            data = asdict(metadata)
            data["poster_url"] = await self._store_image(data["poster_url"], image_dir, poster_name)
            return data

        outcome = await policy.resolve(
            movie.title,
            existing.metadata_json if existing else None,
            enabled,
            fetch,
        )

        self._repository.upsert_media_item(
            MediaItem(
                kind=MediaKind.MOVIE,
                title=movie.title,
                path=entry.name,
                file_size=movie.file_size,
                last_scanned_at=scanned_at,
                metadata_json=outcome.metadata_json,
            )
        )
        return existing is None

    def _prune(self, root: Path) -> int:
        """Supprime les films dont l'entree n'existe plus."""
        removed = 0
        for movie in self._repository.list_media_items(MediaKind.MOVIE):
            if not self._file_system.exists(root / movie.path):
                logger.info("Film disparu du disque, suppression", path=movie.path)
                self._repository.delete_media_item(movie.id)
                removed += 1
        return removed
