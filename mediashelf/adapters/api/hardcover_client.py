"""
Client Hardcover (GraphQL) pour les livres.

Implemente IBookMetadataProvider. La recherche renvoie jusqu'a cinq
candidats dans l'ordre de pertinence de Hardcover ; le choix du bon
candidat est fait par le service de rapprochement (book_matcher).
"""

from typing import Any, Optional

import httpx
from loguru import logger

from mediashelf.adapters.api.rate_limiter import RateLimiter
from mediashelf.adapters.api.retry import RateLimitError, request_with_retry
from mediashelf.core.ports.api_clients import (
    BookMetadata,
    ConnectionTestResult,
    IBookMetadataProvider,
)

SEARCH_BOOKS_QUERY = """
query SearchBooks($query: String!, $perPage: Int!) {
  search(
    query: $query,
    query_type: "Book",
    fields: "title,alternative_titles",
    weights: "5,1",
    per_page: $perPage
  ) {
    results
  }
}
"""

ME_QUERY = """
query Test {
  me {
    username
  }
}
"""


class HardcoverClient(IBookMetadataProvider):
    """
    Client GraphQL Hardcover.

    Attributes:
        GRAPHQL_URL: Point d'entree GraphQL
        MIN_INTERVAL: Delai minimal entre deux appels (secondes)
        PER_PAGE: Nombre de candidats demandes par recherche
    """

    GRAPHQL_URL = "https://api.hardcover.app/v1/graphql"
    MIN_INTERVAL = 0.5
    PER_PAGE = 5

    def __init__(
        self,
        api_key: Optional[str],
        rate_limiter: Optional[RateLimiter] = None,
    ) -> None:
        self._api_key = api_key
        self._rate_limiter = rate_limiter or RateLimiter(self.MIN_INTERVAL)
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Retourne le client HTTP (lazy init). La cle est envoyee telle quelle."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                headers={
                    "Authorization": self._api_key or "",
                    "Content-Type": "application/json",
                },
                timeout=httpx.Timeout(30.0, connect=10.0),
            )
        return self._client

    @property
    def source(self) -> str:
        return "hardcover"

    async def _execute(
        self, query: str, operation_name: str, variables: Optional[dict] = None
    ) -> dict[str, Any]:
        """Execute une requete GraphQL et retourne le corps JSON."""
        response = await request_with_retry(
            self._get_client(), "POST", self.GRAPHQL_URL,
            rate_limiter=self._rate_limiter,
            json={"query": query, "operationName": operation_name, "variables": variables or {}},
        )
        return response.json()

    async def search_books(
        self,
        title: str,
        author_hint: Optional[str] = None,
    ) -> list[BookMetadata]:
        """
        Recherche des livres par titre (et auteur si fourni).

        Returns:
            Candidats dans l'ordre Hardcover, liste vide si aucun resultat,
            cle absente ou erreur fournisseur
        """
        if not self._api_key:
            logger.warning("Hardcover non configure, recherche ignoree", title=title)
            return []

        search_query = f"{title} {author_hint}" if author_hint else title
        logger.debug("Recherche Hardcover", query=search_query)

        try:
            body = await self._execute(
                SEARCH_BOOKS_QUERY,
                "SearchBooks",
                {"query": search_query, "perPage": self.PER_PAGE},
            )
        except (httpx.HTTPError, RateLimitError, ValueError) as e:
            logger.warning("Erreur Hardcover lors de la recherche", query=search_query, error=str(e))
            return []

        if body.get("errors"):
            logger.warning("Erreurs GraphQL Hardcover", errors=body["errors"])
            return []

        results = ((body.get("data") or {}).get("search") or {}).get("results") or {}
        hits = results.get("hits") or []
        candidates = [_to_metadata(hit["document"]) for hit in hits if hit.get("document")]
        logger.info("Candidats Hardcover", query=search_query, count=len(candidates))
        return candidates

    async def test_connection(self) -> ConnectionTestResult:
        """Teste la cle avec la requete me { username }."""
        if not self._api_key:
            return ConnectionTestResult(success=False, message="Hardcover API key not configured")

        try:
            body = await self._execute(ME_QUERY, "Test")
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 401:
                return ConnectionTestResult(success=False, message="Invalid API key")
            if status == 403:
                return ConnectionTestResult(
                    success=False, message="API key lacks required permissions (403)"
                )
            return ConnectionTestResult(success=False, message=f"Hardcover API error: {status}")
        except (httpx.HTTPError, RateLimitError, ValueError) as e:
            return ConnectionTestResult(success=False, message=f"Connection failed: {e}")

        if body.get("errors"):
            message = body["errors"][0].get("message", "Unknown error")
            return ConnectionTestResult(success=False, message=f"GraphQL error: {message}")

        # me est retourne sous forme de liste
        me = (body.get("data") or {}).get("me") or []
        username = me[0].get("username") if me else None
        if username:
            return ConnectionTestResult(success=True, message=f"Connected as {username}")
        return ConnectionTestResult(success=False, message="Unable to fetch user information")

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None


def _to_metadata(document: dict[str, Any]) -> BookMetadata:
    """Convertit un document de recherche Hardcover en BookMetadata."""
    featured = document.get("featured_series") or {}
    isbns = document.get("isbns") or []
    hardcover_id = document.get("id")
    return BookMetadata(
        title=document.get("title", ""),
        authors=list(document.get("author_names") or []),
        hardcover_id=int(hardcover_id) if hardcover_id is not None else None,
        subtitle=document.get("subtitle") or None,
        description=document.get("description") or None,
        series=(featured.get("series") or {}).get("name") or None,
        series_position=featured.get("position") or None,
        pages=document.get("pages") or None,
        isbn_10=next((isbn for isbn in isbns if len(isbn) == 10), None),
        isbn_13=next((isbn for isbn in isbns if len(isbn) == 13), None),
        release_date=document.get("release_date") or None,
        cover_url=(document.get("image") or {}).get("url") or None,
        genres=list(document.get("genres") or []),
    )
