"""
Cache persistant des reponses fournisseurs.

Le cache utilise diskcache pour conserver les donnees entre les redemarrages.
Il evite de recharger une saison TVDB complete pour chaque episode et de
redemander les details d'une serie deja resolue.

Les metadonnees elles-memes sont cachees dans le catalogue (metadata_json) :
ce cache ne concerne que les reponses brutes intermediaires.
"""

import asyncio
from functools import partial
from typing import Any, Optional

from diskcache import Cache


class APICache:
    """
    Cache asynchrone avec TTL pour les appels API.

    Utilise run_in_executor pour ne pas bloquer la boucle pendant les acces disque.

    Attributes:
        DETAILS_TTL: Duree de vie des details et listes d'episodes (7 jours)
    """

    DETAILS_TTL = 7 * 24 * 60 * 60

    def __init__(self, cache_dir: str = ".cache/api") -> None:
        """
        Args:
            cache_dir: Chemin vers le repertoire du cache (cree si inexistant)
        """
        self._cache = Cache(str(cache_dir))

    async def get(self, key: str) -> Optional[Any]:
        """Recupere une valeur, ou None si absente ou expiree."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._cache.get, key)

    async def set(self, key: str, value: Any, ttl: int) -> None:
        """Stocke une valeur avec une duree de vie en secondes."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(
            None, partial(self._cache.set, key, value, expire=ttl)
        )

    async def set_details(self, key: str, value: Any) -> None:
        """Stocke des details (TTL de 7 jours)."""
        await self.set(key, value, self.DETAILS_TTL)

    async def clear(self) -> None:
        """Supprime toutes les entrees du cache."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._cache.clear)

    def close(self) -> None:
        """Ferme la connexion au cache (a appeler a la fin)."""
        self._cache.close()
