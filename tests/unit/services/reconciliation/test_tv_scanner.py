"""
Tests unitaires pour TVScanner.

Arborescence reelle sous tmp_path, catalogue SQLite temporaire,
client TVDB mocke.
"""

import json
from pathlib import Path
from typing import Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from mediashelf.adapters.file_system import FileSystemAdapter
from mediashelf.adapters.images import ImageDownloader
from mediashelf.config import Settings
from mediashelf.core.entities.media import MediaKind
from mediashelf.core.ports.api_clients import (
    EpisodeMetadata,
    ProviderAuthenticationError,
    TVShowMetadata,
)
from mediashelf.infrastructure.persistence.repositories import SQLModelCatalogRepository
from mediashelf.services.progress import ProgressEmitter, ScanEvent, ScanEventType, ScanStatus
from mediashelf.services.reconciliation import TVScanner
from mediashelf.utils.constants import (
    SAVE_IMAGES_LOCALLY,
    TV_EPISODES_METADATA_ENABLED,
    TV_METADATA_ENABLED,
)

BREAKING_BAD = TVShowMetadata(
    tvdb_id="81189",
    title="Breaking Bad",
    first_air_year="2008",
    poster_url="https://artworks.thetvdb.com/posters/81189.jpg",
)

PILOT = EpisodeMetadata(
    tvdb_id="349232",
    name="Pilot",
    season_number=1,
    episode_number=1,
    still_url="https://artworks.thetvdb.com/episodes/349232.jpg",
)


@pytest.fixture
def scanner(
    repository: SQLModelCatalogRepository,
    file_system: FileSystemAdapter,
    mock_tv_client: MagicMock,
    settings: Settings,
) -> TVScanner:
    return TVScanner(repository, file_system, mock_tv_client, settings)


@pytest.fixture
def library(settings: Settings, make_file: Callable[..., Path]) -> Path:
    """Deux series : Breaking Bad (2 episodes) et The Wire (1 episode + Extras)."""
    root = settings.tv_shows_dir
    make_file(root / "Breaking Bad (2008)" / "Season 1" / "Breaking Bad S01E01.mkv", 100)
    make_file(root / "Breaking Bad (2008)" / "Season 1" / "Breaking Bad S01E02.mkv", 200)
    make_file(root / "Breaking Bad (2008)" / "Season 1" / "notes.txt")
    make_file(root / "The Wire" / "Season 2" / "S02E03.mp4", 50)
    make_file(root / "The Wire" / "Extras" / "behind.mkv")
    return root


class TestTVScannerWalk:
    """Tests du parcours sans enrichissement."""

    @pytest.mark.asyncio
    async def test_first_scan_adds_shows_and_episodes(
        self,
        scanner: TVScanner,
        repository: SQLModelCatalogRepository,
        library: Path,
        mock_tv_client: MagicMock,
    ) -> None:
        result = await scanner.scan()

        assert result.added == 2
        assert result.updated == 0
        assert result.errors == []

        show = repository.get_media_item_by_path(MediaKind.TV_SHOW, "Breaking Bad (2008)")
        assert show.title == "Breaking Bad (2008)"
        episodes = repository.list_episodes(show.id)
        assert [e.file_path for e in episodes] == [
            "Breaking Bad (2008)/Season 1/Breaking Bad S01E01.mkv",
            "Breaking Bad (2008)/Season 1/Breaking Bad S01E02.mkv",
        ]
        assert [e.file_size for e in episodes] == [100, 200]

        wire = repository.get_media_item_by_path(MediaKind.TV_SHOW, "The Wire")
        wire_episodes = repository.list_episodes(wire.id)
        assert [(e.season_number, e.episode_number) for e in wire_episodes] == [(2, 3)]

        # Enrichissement desactive par defaut
        mock_tv_client.search_show.assert_not_called()

    @pytest.mark.asyncio
    async def test_second_scan_updates(self, scanner: TVScanner, library: Path) -> None:
        await scanner.scan()
        result = await scanner.scan()

        assert result.added == 0
        assert result.updated == 2

    @pytest.mark.asyncio
    async def test_renamed_episode_creates_new_row(
        self,
        scanner: TVScanner,
        repository: SQLModelCatalogRepository,
        library: Path,
    ) -> None:
        """Un fichier renomme est une nouvelle ligne ; l'ancienne reste sans pruning."""
        await scanner.scan()
        season = library / "The Wire" / "Season 2"
        (season / "S02E03.mp4").rename(season / "The Wire S02E03.mp4")

        await scanner.scan()

        wire = repository.get_media_item_by_path(MediaKind.TV_SHOW, "The Wire")
        assert sorted(e.file_path for e in repository.list_episodes(wire.id)) == [
            "The Wire/Season 2/S02E03.mp4",
            "The Wire/Season 2/The Wire S02E03.mp4",
        ]

    @pytest.mark.asyncio
    async def test_missing_root_is_empty_result(self, scanner: TVScanner) -> None:
        result = await scanner.scan()

        assert result.added == 0
        assert result.errors == []

    @pytest.mark.asyncio
    async def test_unreadable_root_records_error(
        self,
        repository: SQLModelCatalogRepository,
        mock_tv_client: MagicMock,
        settings: Settings,
    ) -> None:
        """Une erreur de lecture de la racine interrompt le scan TV."""
        fs = MagicMock(spec=FileSystemAdapter)
        fs.exists.return_value = True
        fs.list_subdirectories.side_effect = PermissionError("denied")
        scanner = TVScanner(repository, fs, mock_tv_client, settings)

        result = await scanner.scan()

        assert result.errors == ["Error scanning TV shows directory: denied"]

    @pytest.mark.asyncio
    async def test_error_on_one_show_does_not_stop_scan(
        self,
        repository: SQLModelCatalogRepository,
        file_system: FileSystemAdapter,
        mock_tv_client: MagicMock,
        settings: Settings,
        library: Path,
    ) -> None:
        """Une serie en erreur est comptee dans errors, les autres sont traitees."""
        original = file_system.list_season_folders

        def failing(show_dir: Path):
            if show_dir.name == "The Wire":
                raise OSError("I/O error")
            return original(show_dir)

        file_system.list_season_folders = failing
        scanner = TVScanner(repository, file_system, mock_tv_client, settings)

        result = await scanner.scan()

        assert result.errors == ["Error scanning show The Wire: I/O error"]
        assert result.added == 1


class TestTVScannerEnrichment:
    """Tests de l'enrichissement des series et episodes."""

    @pytest.mark.asyncio
    async def test_show_enriched_with_cleaned_title(
        self,
        scanner: TVScanner,
        repository: SQLModelCatalogRepository,
        mock_tv_client: MagicMock,
        library: Path,
    ) -> None:
        repository.set_setting(TV_METADATA_ENABLED, "true")
        mock_tv_client.search_show = AsyncMock(
            side_effect=lambda title, year: BREAKING_BAD if title == "Breaking Bad" else None
        )

        await scanner.scan()

        mock_tv_client.search_show.assert_any_await("Breaking Bad", "2008")
        mock_tv_client.search_show.assert_any_await("The Wire", None)
        show = repository.get_media_item_by_path(MediaKind.TV_SHOW, "Breaking Bad (2008)")
        assert json.loads(show.metadata_json)["tvdb_id"] == "81189"
        wire = repository.get_media_item_by_path(MediaKind.TV_SHOW, "The Wire")
        assert wire.metadata_json is None

    @pytest.mark.asyncio
    async def test_cached_show_not_fetched_again(
        self,
        scanner: TVScanner,
        repository: SQLModelCatalogRepository,
        mock_tv_client: MagicMock,
        library: Path,
    ) -> None:
        repository.set_setting(TV_METADATA_ENABLED, "true")
        mock_tv_client.search_show = AsyncMock(return_value=BREAKING_BAD)
        await scanner.scan()
        mock_tv_client.search_show.reset_mock()

        await scanner.scan()

        mock_tv_client.search_show.assert_not_called()

    @pytest.mark.asyncio
    async def test_episodes_enriched_when_enabled(
        self,
        scanner: TVScanner,
        repository: SQLModelCatalogRepository,
        mock_tv_client: MagicMock,
        library: Path,
    ) -> None:
        """Les episodes sont enrichis avec l'id TVDB de la serie."""
        repository.set_setting(TV_METADATA_ENABLED, "true")
        repository.set_setting(TV_EPISODES_METADATA_ENABLED, "true")
        mock_tv_client.search_show = AsyncMock(
            side_effect=lambda title, year: BREAKING_BAD if title == "Breaking Bad" else None
        )
        mock_tv_client.get_episode = AsyncMock(
            side_effect=lambda series_id, season, episode: PILOT if episode == 1 else None
        )

        await scanner.scan()

        mock_tv_client.get_episode.assert_any_await("81189", 1, 1)
        mock_tv_client.get_episode.assert_any_await("81189", 1, 2)
        # Serie sans id TVDB : pas d'appel pour ses episodes
        assert mock_tv_client.get_episode.await_count == 2
        pilot = repository.get_episode_by_path(
            "Breaking Bad (2008)/Season 1/Breaking Bad S01E01.mkv"
        )
        assert json.loads(pilot.metadata_json)["name"] == "Pilot"

    @pytest.mark.asyncio
    async def test_skip_metadata_never_calls_provider(
        self,
        scanner: TVScanner,
        repository: SQLModelCatalogRepository,
        mock_tv_client: MagicMock,
        library: Path,
    ) -> None:
        repository.set_setting(TV_METADATA_ENABLED, "true")

        result = await scanner.scan(skip_metadata=True)

        assert result.added == 2
        mock_tv_client.search_show.assert_not_called()

    @pytest.mark.asyncio
    async def test_authentication_failure_skips_remaining(
        self,
        scanner: TVScanner,
        repository: SQLModelCatalogRepository,
        mock_tv_client: MagicMock,
        library: Path,
    ) -> None:
        """Apres un echec d'authentification, plus aucun appel pendant ce scan."""
        repository.set_setting(TV_METADATA_ENABLED, "true")
        mock_tv_client.search_show = AsyncMock(
            side_effect=ProviderAuthenticationError("no token")
        )
        events: list[ScanEvent] = []

        result = await scanner.scan(ProgressEmitter(events.append))

        assert mock_tv_client.search_show.await_count == 1
        assert result.added == 2
        assert result.errors == []
        scanned = [e.status for e in events if e.type == ScanEventType.SCANNED]
        assert scanned == [ScanStatus.SKIPPED, ScanStatus.SKIPPED]

    @pytest.mark.asyncio
    async def test_events_sequence(
        self, scanner: TVScanner, library: Path
    ) -> None:
        """started puis un scanned par serie puis complete."""
        events: list[ScanEvent] = []

        result = await scanner.scan(ProgressEmitter(events.append))

        assert [e.type for e in events] == [
            ScanEventType.STARTED,
            ScanEventType.SCANNED,
            ScanEventType.SCANNED,
            ScanEventType.COMPLETE,
        ]
        assert events[-1].result is result

    @pytest.mark.asyncio
    async def test_poster_saved_locally(
        self,
        repository: SQLModelCatalogRepository,
        file_system: FileSystemAdapter,
        mock_tv_client: MagicMock,
        settings: Settings,
        library: Path,
    ) -> None:
        """Avec save_images_locally, le poster est ecrit dans le dossier de la serie."""
        repository.set_setting(TV_METADATA_ENABLED, "true")
        repository.set_setting(SAVE_IMAGES_LOCALLY, "true")
        mock_tv_client.search_show = AsyncMock(
            side_effect=lambda title, year: BREAKING_BAD if title == "Breaking Bad" else None
        )
        downloader = MagicMock(spec=ImageDownloader)
        downloader.maybe_download = AsyncMock(return_value="poster.jpg")
        scanner = TVScanner(repository, file_system, mock_tv_client, settings, downloader)

        await scanner.scan()

        downloader.maybe_download.assert_awaited_once_with(
            BREAKING_BAD.poster_url, library / "Breaking Bad (2008)", "poster.jpg"
        )
        show = repository.get_media_item_by_path(MediaKind.TV_SHOW, "Breaking Bad (2008)")
        assert json.loads(show.metadata_json)["poster_url"] == "poster.jpg"


class TestTVScannerPrune:
    """Tests de la suppression des series disparues."""

    @pytest.mark.asyncio
    async def test_prune_disabled_keeps_rows(
        self,
        scanner: TVScanner,
        repository: SQLModelCatalogRepository,
        library: Path,
    ) -> None:
        await scanner.scan()
        for f in (library / "The Wire").rglob("*"):
            if f.is_file():
                f.unlink()
        (library / "The Wire" / "Season 2").rmdir()
        (library / "The Wire" / "Extras").rmdir()
        (library / "The Wire").rmdir()

        result = await scanner.scan()

        assert result.removed == 0
        assert repository.get_media_item_by_path(MediaKind.TV_SHOW, "The Wire") is not None

    @pytest.mark.asyncio
    async def test_prune_enabled_removes_missing(
        self,
        repository: SQLModelCatalogRepository,
        file_system: FileSystemAdapter,
        mock_tv_client: MagicMock,
        settings: Settings,
        library: Path,
    ) -> None:
        """Serie disparue et episode disparu sont supprimes."""
        settings.prune_missing_media = True
        scanner = TVScanner(repository, file_system, mock_tv_client, settings)
        await scanner.scan()
        (library / "Breaking Bad (2008)" / "Season 1" / "Breaking Bad S01E02.mkv").unlink()
        for f in (library / "The Wire").rglob("*.m*"):
            f.unlink()
        (library / "The Wire" / "Season 2").rmdir()
        (library / "The Wire" / "Extras").rmdir()
        (library / "The Wire").rmdir()

        result = await scanner.scan()

        assert result.removed == 2
        assert repository.get_media_item_by_path(MediaKind.TV_SHOW, "The Wire") is None
        show = repository.get_media_item_by_path(MediaKind.TV_SHOW, "Breaking Bad (2008)")
        assert len(repository.list_episodes(show.id)) == 1
