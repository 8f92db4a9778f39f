"""
Mecanisme de retry avec backoff exponentiel pour les API externes.

Les reponses 429 (rate limiting) sont relancees avec un delai croissant
et du jitter aleatoire. Le RateLimiter du client est repasse a chaque
tentative pour que l'espacement minimal reste respecte.

Usage:
    response = await request_with_retry(client, "GET", url, rate_limiter=limiter)
"""

from typing import Optional

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)

from mediashelf.adapters.api.rate_limiter import RateLimiter


class RateLimitError(Exception):
    """
    Exception levee quand l'API retourne 429 Too Many Requests.

    Attributes:
        retry_after: Nombre de secondes a attendre (header Retry-After),
                     ou None si non specifie.
    """

    def __init__(self, retry_after: Optional[int] = None) -> None:
        self.retry_after = retry_after
        super().__init__(f"Rate limited. Retry after: {retry_after}s")


def with_retry(max_attempts: int = 3, max_wait: int = 30):
    """
    Decorateur pour relancer sur RateLimitError avec backoff exponentiel.

    Args:
        max_attempts: Nombre maximum de tentatives (defaut: 3)
        max_wait: Delai maximum entre les tentatives en secondes (defaut: 30)
    """
    return retry(
        retry=retry_if_exception_type(RateLimitError),
        wait=wait_random_exponential(multiplier=1, min=1, max=max_wait),
        stop=stop_after_attempt(max_attempts),
        reraise=True,
    )


async def request_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    rate_limiter: Optional[RateLimiter] = None,
    max_attempts: int = 3,
    **kwargs,
) -> httpx.Response:
    """
    Execute une requete HTTP espacee par le rate limiter, avec retry sur 429.

    Les autres erreurs HTTP (4xx, 5xx) sont propagees immediatement sans retry.

    Args:
        client: Client httpx async a utiliser
        method: Methode HTTP (GET, POST, etc.)
        url: URL a appeler
        rate_limiter: Limiteur du client (acquis avant chaque tentative)
        max_attempts: Nombre maximum de tentatives (defaut: 3)
        **kwargs: Arguments supplementaires passes a client.request()

    Raises:
        RateLimitError: Si 429 apres epuisement des tentatives
        httpx.HTTPStatusError: Pour les autres erreurs HTTP
    """

    @with_retry(max_attempts=max_attempts)
    async def _do_request() -> httpx.Response:
        if rate_limiter is not None:
            await rate_limiter.acquire()
        response = await client.request(method, url, **kwargs)
        if response.status_code == 429:
            retry_after_header = response.headers.get("Retry-After")
            retry_after = int(retry_after_header) if retry_after_header else None
            raise RateLimitError(retry_after)
        response.raise_for_status()
        return response

    return await _do_request()
