"""
Espacement minimal entre appels sortants d'un client API.

Chaque client possede son propre RateLimiter : il n'y a aucune interaction
entre fournisseurs, et deux taches qui partagent un meme client sont
serialisees par le verrou.

Usage:
    limiter = RateLimiter(min_interval=0.5)
    async with limiter:
        response = await client.get(...)
"""

import asyncio
import time
from typing import Callable, Optional


class RateLimiter:
    """
    Garantit un delai minimal entre deux appels.

    La sequence lecture du dernier appel -> attente -> ecriture du nouvel
    horodatage est faite sous un asyncio.Lock.

    Attributes:
        min_interval: Delai minimal entre deux appels, en secondes
    """

    def __init__(
        self,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialise le limiteur.

        Args:
            min_interval: Delai minimal en secondes (0.25 = 4 req/s)
            clock: Horloge monotone (injectable pour les tests)
        """
        self.min_interval = min_interval
        self._clock = clock
        self._last_call: Optional[float] = None
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        """Attend si necessaire puis enregistre l'appel courant."""
        async with self._lock:
            if self._last_call is not None:
                elapsed = self._clock() - self._last_call
                if elapsed < self.min_interval:
                    await asyncio.sleep(self.min_interval - elapsed)
            self._last_call = self._clock()

    async def __aenter__(self) -> "RateLimiter":
        await self.acquire()
        return self

    async def __aexit__(self, *exc_info) -> None:
        return None
