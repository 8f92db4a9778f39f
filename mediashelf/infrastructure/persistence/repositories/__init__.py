"""
Implementation SQLModel du repository du catalogue.

Recoit une session SQLModel par injection de dependances et convertit
entre entites de domaine (dataclass) et modeles DB (SQLModel).
"""

from mediashelf.infrastructure.persistence.repositories.catalog_repository import (
    SQLModelCatalogRepository,
)

__all__ = ["SQLModelCatalogRepository"]
