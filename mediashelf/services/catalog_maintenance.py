"""
Operations de maintenance du catalogue.

Effacement des metadonnees (pour forcer un nouvel enrichissement),
statistiques, tests de connexion aux fournisseurs et modification
des reglages d'execution.
"""

import asyncio

from loguru import logger

from mediashelf.core.entities.media import MediaCategory
from mediashelf.core.ports.api_clients import ConnectionTestResult, IMetadataProvider
from mediashelf.core.ports.repositories import ICatalogRepository
from mediashelf.utils.constants import DEFAULT_SETTINGS


class CatalogMaintenanceService:
    """Maintenance du catalogue et verification des fournisseurs."""

    def __init__(
        self,
        repository: ICatalogRepository,
        tmdb_client: IMetadataProvider,
        tvdb_client: IMetadataProvider,
        hardcover_client: IMetadataProvider,
    ) -> None:
        self._repository = repository
        self._providers = [tmdb_client, tvdb_client, hardcover_client]

    def clear_metadata(self, category: MediaCategory) -> int:
        """
        Efface les metadonnees d'une categorie.

        Le prochain scan avec enrichissement actif les recuperera de nouveau.

        Returns:
            Nombre de lignes effacees (series + episodes pour la TV)
        """
        cleared = self._repository.clear_metadata(category)
        logger.info("Metadonnees effacees", category=category.value, cleared=cleared)
        return cleared

    def stats(self) -> dict[MediaCategory, int]:
        """Nombre de series, films et livres du catalogue."""
        return self._repository.count_by_category()

    async def test_connections(self) -> dict[str, ConnectionTestResult]:
        """Teste les trois fournisseurs en parallele (un client par fournisseur)."""
        results = await asyncio.gather(
            *(provider.test_connection() for provider in self._providers)
        )
        return {
            provider.source: result
            for provider, result in zip(self._providers, results)
        }

    def set_setting(self, key: str, value: bool) -> None:
        """
        Modifie un interrupteur d'execution.

        Raises:
            ValueError: si la cle n'est pas un reglage connu
        """
        if key not in DEFAULT_SETTINGS:
            raise ValueError(f"Unknown setting: {key}")
        self._repository.set_setting(key, "true" if value else "false")
        logger.info("Reglage modifie", key=key, value=value)
