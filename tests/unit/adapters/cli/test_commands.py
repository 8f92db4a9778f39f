"""
Tests unitaires pour les commandes CLI.

Tests couvrant:
- scan: un type, tous les types, scan de demarrage
- clear-metadata, stats, settings-set, test-connections
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from mediashelf.core.entities.media import MediaCategory
from mediashelf.core.ports.api_clients import ConnectionTestResult
from mediashelf.main import app
from mediashelf.services.reconciliation.dataclasses import ScanResult

runner = CliRunner()


@pytest.fixture
def mock_container():
    """Mock le Container instancie par le decorateur @with_container()."""
    with patch("mediashelf.adapters.cli.helpers.Container") as mock_cls:
        container_instance = MagicMock()
        mock_cls.return_value = container_instance
        container_instance.database.init = MagicMock()
        for name in ("tmdb_client", "tvdb_client", "hardcover_client", "image_downloader"):
            getattr(container_instance, name).return_value.close = AsyncMock()
        yield container_instance


@pytest.fixture
def reconciliation(mock_container) -> MagicMock:
    service = MagicMock()
    service.scan = AsyncMock(return_value=ScanResult(added=2, errors=["Error scanning movie X: boom"]))
    service.scan_all = AsyncMock(
        return_value={category: ScanResult(updated=1) for category in MediaCategory}
    )
    service.scan_on_startup = AsyncMock(return_value=None)
    mock_container.reconciliation_service.return_value = service
    return service


@pytest.fixture
def maintenance(mock_container) -> MagicMock:
    service = MagicMock()
    mock_container.maintenance_service.return_value = service
    return service


class TestScanCommand:
    """Tests pour la commande scan."""

    def test_scan_single_kind(self, reconciliation: MagicMock, mock_container) -> None:
        result = runner.invoke(app, ["scan", "--kind", "movies", "--skip-metadata"])

        assert result.exit_code == 0
        reconciliation.scan.assert_awaited_once()
        args, kwargs = reconciliation.scan.call_args
        assert args[0] == MediaCategory.MOVIES
        assert kwargs["skip_metadata"] is True
        assert "Error scanning movie X: boom" in result.output
        mock_container.database.init.assert_called_once()
        mock_container.tmdb_client.return_value.close.assert_awaited_once()

    def test_scan_all_kinds(self, reconciliation: MagicMock) -> None:
        result = runner.invoke(app, ["scan"])

        assert result.exit_code == 0
        reconciliation.scan_all.assert_awaited_once()
        assert "Bilan du scan" in result.output

    def test_scan_if_empty_on_populated_catalog(self, reconciliation: MagicMock) -> None:
        result = runner.invoke(app, ["scan", "--if-empty"])

        assert result.exit_code == 0
        reconciliation.scan_on_startup.assert_awaited_once()
        assert "deja peuple" in result.output

    def test_invalid_kind_rejected(self, reconciliation: MagicMock) -> None:
        result = runner.invoke(app, ["scan", "--kind", "music"])

        assert result.exit_code != 0
        reconciliation.scan.assert_not_called()


class TestMaintenanceCommands:
    """Tests pour clear-metadata, stats, settings-set et test-connections."""

    def test_clear_metadata(self, maintenance: MagicMock) -> None:
        maintenance.clear_metadata.return_value = 7

        result = runner.invoke(app, ["clear-metadata", "tv"])

        assert result.exit_code == 0
        maintenance.clear_metadata.assert_called_once_with(MediaCategory.TV)
        assert "7" in result.output

    def test_stats(self, maintenance: MagicMock) -> None:
        maintenance.stats.return_value = {
            MediaCategory.TV: 3,
            MediaCategory.MOVIES: 12,
            MediaCategory.BOOKS: 0,
        }

        result = runner.invoke(app, ["stats"])

        assert result.exit_code == 0
        assert "12" in result.output

    def test_settings_set(self, maintenance: MagicMock) -> None:
        result = runner.invoke(app, ["settings-set", "save_images_locally", "true"])

        assert result.exit_code == 0
        maintenance.set_setting.assert_called_once_with("save_images_locally", True)

    def test_settings_set_unknown_key(self, maintenance: MagicMock) -> None:
        maintenance.set_setting.side_effect = ValueError("Unknown setting: turbo")

        result = runner.invoke(app, ["settings-set", "turbo", "false"])

        assert result.exit_code == 1
        assert "Unknown setting: turbo" in result.output

    def test_test_connections_without_database(
        self, maintenance: MagicMock, mock_container
    ) -> None:
        maintenance.test_connections = AsyncMock(
            return_value={
                "tmdb": ConnectionTestResult(True, "TMDB API connection successful"),
                "tvdb": ConnectionTestResult(False, "TVDB API key not configured"),
                "hardcover": ConnectionTestResult(False, "Hardcover API key not configured"),
            }
        )

        result = runner.invoke(app, ["test-connections"])

        assert result.exit_code == 0
        assert "TVDB API key not configured" in result.output
        mock_container.database.init.assert_not_called()


class TestVersionCommand:
    """Tests pour la commande version."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "MediaShelf v" in result.output
