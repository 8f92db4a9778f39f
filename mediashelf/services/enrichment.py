"""
Politique d'enrichissement des metadonnees, commune aux trois types de medias.

Une entree n'est enrichie que si l'enrichissement est active pour son type,
que le scan n'est pas en mode rapide (skip_metadata) et qu'elle n'a pas deja
de metadonnees en cache. Une absence de resultat n'est pas une erreur.
"""

import asyncio
import json
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from loguru import logger

from mediashelf.core.entities.media import MediaCategory
from mediashelf.core.ports.api_clients import ProviderAuthenticationError
from mediashelf.services.progress import ProgressEmitter, ScanStatus

MetadataFetcher = Callable[[], Awaitable[Optional[dict[str, Any]]]]


@dataclass
class EnrichmentOutcome:
    """
    Resultat de l'enrichissement d'une entree.

    Attributs:
        metadata_json: JSON a persister (existant reporte, nouveau, ou None)
        status: Statut emis pour l'entree
    """

    metadata_json: Optional[str]
    status: ScanStatus


class MetadataEnrichmentPolicy:
    """
    Applique la regle d'enrichissement et emet la progression associee.

    Une instance par scan de type : apres un echec d'authentification
    fournisseur, toutes les entrees suivantes de ce scan sont ignorees.
    """

    def __init__(
        self,
        category: MediaCategory,
        emitter: ProgressEmitter,
        skip_metadata: bool = False,
        timeout: float = 60.0,
    ) -> None:
        """
        Args:
            category: Categorie du scan (pour les evenements)
            emitter: Emetteur de progression du scan
            skip_metadata: Mode rapide, aucun appel fournisseur
            timeout: Duree maximale d'un appel fournisseur en secondes
        """
        self._category = category
        self._emitter = emitter
        self._skip_metadata = skip_metadata
        self._timeout = timeout
        self.blocked = False

    def should_fetch(self, enabled: bool, existing_metadata_json: Optional[str]) -> bool:
        return (
            enabled
            and not self._skip_metadata
            and not self.blocked
            and existing_metadata_json is None
        )

    async def resolve(
        self,
        title: str,
        existing_metadata_json: Optional[str],
        enabled: bool,
        fetch: MetadataFetcher,
    ) -> EnrichmentOutcome:
        """
        Determine les metadonnees a persister pour une entree.

        Args:
            title: Titre affiche dans les evenements
            existing_metadata_json: Metadonnees deja en cache, ou None
            enabled: Interrupteur d'enrichissement du type
            fetch: Appel fournisseur, retourne un dict ou None

        Returns:
            EnrichmentOutcome (le statut a deja ete emis)
        """
        if existing_metadata_json is not None:
            outcome = EnrichmentOutcome(existing_metadata_json, ScanStatus.CACHED)
        elif not self.should_fetch(enabled, existing_metadata_json):
            outcome = EnrichmentOutcome(None, ScanStatus.SKIPPED)
        else:
            self._emitter.scanning(self._category, title)
            outcome = await self._fetch(title, fetch)

        self._emitter.scanned(self._category, title, outcome.status)
        return outcome

    async def _fetch(self, title: str, fetch: MetadataFetcher) -> EnrichmentOutcome:
        try:
            metadata = await asyncio.wait_for(fetch(), timeout=self._timeout)
        except ProviderAuthenticationError as e:
            # Plus aucun token obtenable : le reste du scan est ignore
            self.blocked = True
            logger.error(
                "Authentification fournisseur impossible, enrichissement desactive",
                category=self._category.value,
                error=str(e),
            )
            return EnrichmentOutcome(None, ScanStatus.SKIPPED)
        except asyncio.TimeoutError:
            logger.warning(
                "Delai depasse pour l'appel fournisseur",
                category=self._category.value,
                title=title,
                timeout=self._timeout,
            )
            return EnrichmentOutcome(None, ScanStatus.NO_METADATA)
        except Exception as e:
            logger.warning(
                "Erreur fournisseur, entree sans metadonnees",
                category=self._category.value,
                title=title,
                error=str(e),
            )
            return EnrichmentOutcome(None, ScanStatus.NO_METADATA)

        if metadata is None:
            logger.info("Aucune metadonnee trouvee", category=self._category.value, title=title)
            return EnrichmentOutcome(None, ScanStatus.NO_METADATA)

        return EnrichmentOutcome(json.dumps(metadata), ScanStatus.METADATA_FETCHED)
