"""
Tests unitaires pour ReconciliationService (scanners mockes).
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from mediashelf.core.entities.media import MediaCategory
from mediashelf.core.ports.repositories import ICatalogRepository
from mediashelf.services.progress import ProgressEmitter
from mediashelf.services.reconciliation import (
    BookScanner,
    MovieScanner,
    ReconciliationService,
    ScanResult,
    TVScanner,
)


@pytest.fixture
def scanners() -> dict[MediaCategory, MagicMock]:
    mocks = {}
    for category, spec in [
        (MediaCategory.TV, TVScanner),
        (MediaCategory.MOVIES, MovieScanner),
        (MediaCategory.BOOKS, BookScanner),
    ]:
        scanner = MagicMock(spec=spec)
        scanner.scan = AsyncMock(return_value=ScanResult(added=1))
        mocks[category] = scanner
    return mocks


@pytest.fixture
def mock_repository() -> MagicMock:
    repository = MagicMock(spec=ICatalogRepository)
    repository.count_by_category.return_value = {
        MediaCategory.TV: 0,
        MediaCategory.MOVIES: 0,
        MediaCategory.BOOKS: 0,
    }
    return repository


@pytest.fixture
def service(scanners, mock_repository) -> ReconciliationService:
    return ReconciliationService(
        tv_scanner=scanners[MediaCategory.TV],
        movie_scanner=scanners[MediaCategory.MOVIES],
        book_scanner=scanners[MediaCategory.BOOKS],
        repository=mock_repository,
    )


class TestReconciliationService:
    """Tests pour scan, scan_all et scan_on_startup."""

    @pytest.mark.asyncio
    async def test_scan_single_category(self, service, scanners) -> None:
        emitter = ProgressEmitter()

        result = await service.scan(MediaCategory.MOVIES, emitter, skip_metadata=True)

        assert result.added == 1
        scanners[MediaCategory.MOVIES].scan.assert_awaited_once_with(
            emitter=emitter, skip_metadata=True
        )
        scanners[MediaCategory.TV].scan.assert_not_called()

    @pytest.mark.asyncio
    async def test_scan_all_runs_every_category(self, service, scanners) -> None:
        results = await service.scan_all()

        assert set(results) == set(MediaCategory)
        for scanner in scanners.values():
            scanner.scan.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_scan_all_isolates_failures(self, service, scanners) -> None:
        """Une procedure qui leve n'affecte pas les autres."""
        scanners[MediaCategory.BOOKS].scan = AsyncMock(side_effect=RuntimeError("disk gone"))

        results = await service.scan_all()

        assert results[MediaCategory.BOOKS].errors == ["Error scanning books: disk gone"]
        assert results[MediaCategory.TV].added == 1
        assert results[MediaCategory.MOVIES].added == 1

    @pytest.mark.asyncio
    async def test_scan_on_startup_empty_catalog(self, service, scanners) -> None:
        """Catalogue vide : scan rapide de tous les types."""
        results = await service.scan_on_startup()

        assert results is not None
        for scanner in scanners.values():
            assert scanner.scan.call_args.kwargs["skip_metadata"] is True

    @pytest.mark.asyncio
    async def test_scan_on_startup_populated_catalog(
        self, service, scanners, mock_repository
    ) -> None:
        """Catalogue peuple : aucun scan."""
        mock_repository.count_by_category.return_value = {
            MediaCategory.TV: 0,
            MediaCategory.MOVIES: 3,
            MediaCategory.BOOKS: 0,
        }

        assert await service.scan_on_startup() is None
        for scanner in scanners.values():
            scanner.scan.assert_not_called()
