"""
Service de reconciliation : point d'entree des scans.

Coordonne les trois procedures (TV, films, livres). "Tout scanner" les lance
en parallele ; chacune parcourt son arborescence sequentiellement et
utilise son propre client fournisseur (donc son propre rate limiter).
"""

import asyncio
from typing import Optional

from loguru import logger

from mediashelf.core.entities.media import MediaCategory
from mediashelf.core.ports.repositories import ICatalogRepository
from mediashelf.services.progress import ProgressEmitter
from mediashelf.services.reconciliation.book_scanner import BookScanner
from mediashelf.services.reconciliation.dataclasses import ScanResult
from mediashelf.services.reconciliation.movie_scanner import MovieScanner
from mediashelf.services.reconciliation.tv_scanner import TVScanner


class ReconciliationService:
    """
    Declenche les scans d'un ou de tous les types de medias.

    Utilisation typique:
        service = container.reconciliation_service()
        results = await service.scan_all(ProgressEmitter(listener))
    """

    def __init__(
        self,
        tv_scanner: TVScanner,
        movie_scanner: MovieScanner,
        book_scanner: BookScanner,
        repository: ICatalogRepository,
    ) -> None:
        """
        Args:
            tv_scanner: Scanner des series (avec son propre repository)
            movie_scanner: Scanner des films (avec son propre repository)
            book_scanner: Scanner des livres (avec son propre repository)
            repository: Repository utilise pour verifier si le catalogue est vide
        """
        self._scanners = {
            MediaCategory.TV: tv_scanner,
            MediaCategory.MOVIES: movie_scanner,
            MediaCategory.BOOKS: book_scanner,
        }
        self._repository = repository

    async def scan(
        self,
        category: MediaCategory,
        emitter: Optional[ProgressEmitter] = None,
        skip_metadata: bool = False,
    ) -> ScanResult:
        """Scanne un seul type de media."""
        logger.info("Scan demarre", category=category.value, skip_metadata=skip_metadata)
        return await self._scanners[category].scan(emitter=emitter, skip_metadata=skip_metadata)

    async def scan_all(
        self,
        emitter: Optional[ProgressEmitter] = None,
        skip_metadata: bool = False,
    ) -> dict[MediaCategory, ScanResult]:
        """
        Scanne les trois types en parallele.

        Une exception non prevue dans une procedure est convertie en
        ScanResult d'erreur pour ce type ; les autres types ne sont pas affectes.
        """
        categories = list(self._scanners)
        outcomes = await asyncio.gather(
            *(self.scan(category, emitter, skip_metadata) for category in categories),
            return_exceptions=True,
        )

        results: dict[MediaCategory, ScanResult] = {}
        for category, outcome in zip(categories, outcomes):
            if isinstance(outcome, BaseException):
                logger.error("Scan interrompu", category=category.value, error=str(outcome))
                outcome = ScanResult(errors=[f"Error scanning {category.value}: {outcome}"])
            results[category] = outcome
        return results

    async def scan_on_startup(
        self, emitter: Optional[ProgressEmitter] = None
    ) -> Optional[dict[MediaCategory, ScanResult]]:
        """
        Scan rapide (sans metadonnees) si le catalogue est vide.

        Returns:
            Les resultats du scan, ou None si le catalogue contenait deja des entrees
        """
        counts = self._repository.count_by_category()
        if any(counts.values()):
            logger.debug("Catalogue deja peuple, pas de scan de demarrage")
            return None

        logger.info("Catalogue vide, scan rapide de demarrage")
        return await self.scan_all(emitter=emitter, skip_metadata=True)
