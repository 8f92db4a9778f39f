"""
Evenements de progression d'un scan.

Un ProgressEmitter enveloppe un ecouteur optionnel et est passe
explicitement a chaque procedure de scan. Les evenements sont delivres
de maniere synchrone, sans file d'attente ni rejeu : un ecouteur absent
au moment de l'evenement ne le recevra jamais.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional

from loguru import logger

from mediashelf.core.entities.media import MediaCategory

if TYPE_CHECKING:
    from mediashelf.services.reconciliation.dataclasses import ScanResult


class ScanEventType(str, Enum):
    """Type d'evenement de progression."""

    STARTED = "started"
    SCANNING = "scanning"
    SCANNED = "scanned"
    COMPLETE = "complete"


class ScanStatus(str, Enum):
    """Statut d'enrichissement associe a une entree."""

    FETCHING_METADATA = "fetching_metadata"
    METADATA_FETCHED = "metadata_fetched"
    NO_METADATA = "no_metadata"
    SKIPPED = "skipped"
    CACHED = "cached"


@dataclass
class ScanEvent:
    """
    Evenement emis pendant un scan.

    Attributs:
        type: started | scanning | scanned | complete
        category: Categorie du scan emetteur
        title: Titre de l'entree (scanning, scanned)
        status: Statut d'enrichissement (scanning, scanned)
        result: Resultat final (complete)
    """

    type: ScanEventType
    category: MediaCategory
    title: Optional[str] = None
    status: Optional[ScanStatus] = None
    result: Optional["ScanResult"] = None


ProgressListener = Callable[[ScanEvent], None]


class ProgressEmitter:
    """Diffuse les evenements d'un scan vers un ecouteur optionnel."""

    def __init__(self, listener: Optional[ProgressListener] = None) -> None:
        self._listener = listener

    def emit(self, event: ScanEvent) -> None:
        """
        Transmet l'evenement a l'ecouteur.

        Une exception levee par l'ecouteur est journalisee et n'interrompt
        jamais le scan.
        """
        if self._listener is None:
            return
        try:
            self._listener(event)
        except Exception as e:
            logger.warning(
                "Ecouteur de progression en erreur",
                event_type=event.type.value,
                error=str(e),
            )

    def started(self, category: MediaCategory) -> None:
        self.emit(ScanEvent(type=ScanEventType.STARTED, category=category))

    def scanning(self, category: MediaCategory, title: str) -> None:
        self.emit(
            ScanEvent(
                type=ScanEventType.SCANNING,
                category=category,
                title=title,
                status=ScanStatus.FETCHING_METADATA,
            )
        )

    def scanned(self, category: MediaCategory, title: str, status: ScanStatus) -> None:
        self.emit(
            ScanEvent(type=ScanEventType.SCANNED, category=category, title=title, status=status)
        )

    def complete(self, category: MediaCategory, result: "ScanResult") -> None:
        self.emit(ScanEvent(type=ScanEventType.COMPLETE, category=category, result=result))
