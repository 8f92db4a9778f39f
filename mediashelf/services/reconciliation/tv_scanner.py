"""
Reconciliation des series TV.

Parcourt tv_shows_dir/Serie/Saison NN/fichiers video. Chaque serie est un
MediaItem(tv_show) identifie par le nom de son dossier ; chaque episode est
identifie par son chemin relatif serie/saison/fichier.
"""

import json
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from loguru import logger

from mediashelf.adapters.file_system import FileSystemAdapter, parse_episode_number
from mediashelf.adapters.images import ImageDownloader
from mediashelf.config import Settings
from mediashelf.core.entities.media import MediaCategory, MediaItem, MediaKind, TVEpisode
from mediashelf.core.ports.api_clients import ITVMetadataProvider
from mediashelf.core.ports.repositories import ICatalogRepository
from mediashelf.services.enrichment import MetadataEnrichmentPolicy
from mediashelf.services.progress import ProgressEmitter
from mediashelf.services.reconciliation.base import BaseScanner
from mediashelf.services.reconciliation.dataclasses import ScanResult
from mediashelf.services.title_parser import parse_media_title
from mediashelf.utils.constants import (
    EPISODE_THUMB_TEMPLATE,
    POSTER_FILENAME,
    TV_EPISODES_METADATA_ENABLED,
)


class TVScanner(BaseScanner):
    """
    Scanner des series TV.

    Seules les series sont comptees dans added/updated ; les episodes sont
    upsertes sans compteur propre.
    """

    category = MediaCategory.TV

    def __init__(
        self,
        repository: ICatalogRepository,
        file_system: FileSystemAdapter,
        tv_client: ITVMetadataProvider,
        settings: Settings,
        image_downloader: Optional[ImageDownloader] = None,
    ) -> None:
        super().__init__(repository, file_system, settings, image_downloader)
        self._tv_client = tv_client

    async def scan(
        self,
        emitter: Optional[ProgressEmitter] = None,
        skip_metadata: bool = False,
    ) -> ScanResult:
        """
        Reconcilie le catalogue avec tv_shows_dir.

        Args:
            emitter: Emetteur de progression (aucun ecouteur si None)
            skip_metadata: Mode rapide, aucun appel fournisseur

        Returns:
            ScanResult de la procedure TV
        """
        emitter = emitter or ProgressEmitter()
        result = ScanResult()
        root = self._settings.tv_shows_dir
        emitter.started(self.category)

        if not self._file_system.exists(root):
            logger.info("Repertoire des series absent, rien a scanner", path=str(root))
            emitter.complete(self.category, result)
            return result

        try:
            show_dirs = self._file_system.list_subdirectories(root)
        except OSError as e:
            logger.error("Lecture du repertoire des series impossible", path=str(root), error=str(e))
            result.errors.append(f"Error scanning TV shows directory: {e}")
            emitter.complete(self.category, result)
            return result

        if self._settings.prune_missing_media:
            result.removed += self._prune(root)

        policy = self._new_policy(emitter, skip_metadata)
        shows_enabled = self._metadata_enabled()
        episodes_enabled = self._is_enabled(TV_EPISODES_METADATA_ENABLED)
        now = datetime.now(timezone.utc)

        for show_dir in show_dirs:
            try:
                is_new = await self._process_show(
                    root, show_dir, policy, shows_enabled, episodes_enabled, now
                )
                result.record(is_new)
            except Exception as e:
                logger.error("Erreur sur une serie", show=show_dir.name, error=str(e))
                result.errors.append(f"Error scanning show {show_dir.name}: {e}")

        logger.info(
            "Scan des series termine",
            added=result.added,
            updated=result.updated,
            removed=result.removed,
            errors=len(result.errors),
        )
        emitter.complete(self.category, result)
        return result

    async def _process_show(
        self,
        root: Path,
        show_dir: Path,
        policy: MetadataEnrichmentPolicy,
        shows_enabled: bool,
        episodes_enabled: bool,
        scanned_at: datetime,
    ) -> bool:
        """Upserte une serie et ses episodes. Retourne True si la serie est nouvelle."""
        relative_path = show_dir.name
        existing = self._repository.get_media_item_by_path(MediaKind.TV_SHOW, relative_path)
        parsed = parse_media_title(show_dir.name)

        async def fetch_show() -> Optional[dict]:
            metadata = await self._tv_client.search_show(parsed.title, parsed.year)
            if metadata is None:
                return None
            data = asdict(metadata)
            data["poster_url"] = await self._store_image(
                data["poster_url"], show_dir, POSTER_FILENAME
            )
            return data

        outcome = await policy.resolve(
            show_dir.name,
            existing.metadata_json if existing else None,
            shows_enabled,
            fetch_show,
        )

        show_id = self._repository.upsert_media_item(
            MediaItem(
                kind=MediaKind.TV_SHOW,
                title=show_dir.name,
                path=relative_path,
                last_scanned_at=scanned_at,
                metadata_json=outcome.metadata_json,
            )
        )

        series_id = _tvdb_id_of(outcome.metadata_json)
        for season_dir, season_number in self._file_system.list_season_folders(show_dir):
            for episode_file in self._file_system.list_episode_files(season_dir):
                await self._process_episode(
                    show_id,
                    show_dir.name,
                    season_dir,
                    season_number,
                    episode_file,
                    series_id,
                    policy,
                    episodes_enabled,
                    scanned_at,
                )

        return existing is None

    async def _process_episode(
        self,
        show_id: int,
        show_name: str,
        season_dir: Path,
        season_number: int,
        episode_file: Path,
        series_id: Optional[str],
        policy: MetadataEnrichmentPolicy,
        episodes_enabled: bool,
        scanned_at: datetime,
    ) -> None:
        episode_number = parse_episode_number(episode_file.name)
        file_path = Path(show_name, season_dir.name, episode_file.name).as_posix()
        existing = self._repository.get_episode_by_path(file_path)
        metadata_json = existing.metadata_json if existing else None

        if episodes_enabled and series_id is not None:
            async def fetch_episode() -> Optional[dict]:
                metadata = await self._tv_client.get_episode(
                    series_id, season_number, episode_number
                )
                if metadata is None:
                    return None
                data = asdict(metadata)
                data["still_url"] = await self._store_image(
                    data["still_url"],
                    season_dir,
                    EPISODE_THUMB_TEMPLATE.format(number=episode_number),
                )
                return data

            outcome = await policy.resolve(
                f"{show_name} S{season_number:02d}E{episode_number:02d}",
                metadata_json,
                episodes_enabled,
                fetch_episode,
            )
            metadata_json = outcome.metadata_json

        self._repository.upsert_tv_episode(
            TVEpisode(
                show_id=show_id,
                season_number=season_number,
                episode_number=episode_number,
                title=episode_file.name,
                file_path=file_path,
                file_size=self._file_system.get_size(episode_file),
                last_scanned_at=scanned_at,
                metadata_json=metadata_json,
            )
        )

    def _prune(self, root: Path) -> int:
        """Supprime les series et episodes dont le chemin n'existe plus."""
        removed = 0
        for show in self._repository.list_media_items(MediaKind.TV_SHOW):
            if not self._file_system.exists(root / show.path):
                logger.info("Serie disparue du disque, suppression", path=show.path)
                self._repository.delete_media_item(show.id)
                removed += 1
                continue
            for episode in self._repository.list_episodes(show.id):
                if not self._file_system.exists(root / episode.file_path):
                    self._repository.delete_episode(episode.id)
                    removed += 1
        return removed


def _tvdb_id_of(metadata_json: Optional[str]) -> Optional[str]:
    """Identifiant TVDB de la serie, si ses metadonnees en portent un."""
    if not metadata_json:
        return None
    try:
        tvdb_id = json.loads(metadata_json).get("tvdb_id")
    except (ValueError, AttributeError):
        return None
    return str(tvdb_id) if tvdb_id else None
