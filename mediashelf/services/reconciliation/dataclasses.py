"""
Dataclasses de la reconciliation.
"""

from dataclasses import dataclass, field


@dataclass
class ScanResult:
    """
    Bilan d'un scan pour un type de media.

    Attributs:
        added: Entrees creees
        updated: Entrees existantes mises a jour
        removed: Lignes supprimees (livres, series, auteurs, ou medias si pruning)
        errors: Messages d'erreur, une entree par element en echec
    """

    added: int = 0
    updated: int = 0
    removed: int = 0
    errors: list[str] = field(default_factory=list)

    def record(self, is_new: bool) -> None:
        """Compte une entree creee ou mise a jour."""
        if is_new:
            self.added += 1
        else:
            self.updated += 1
