"""
Client TMDB pour la recherche de metadonnees de films.

Implemente IMovieMetadataProvider pour TMDB (The Movie Database).
Les appels sont espaces de 250 ms (4 req/s, TMDB en autorise bien plus)
et les erreurs fournisseur sont converties en "aucune metadonnee".

Usage:
    client = TMDBClient(api_key="your_key")
    metadata = await client.search_movie("The Matrix", year="1999")
    await client.close()
"""

from typing import Optional

import httpx
from loguru import logger

from mediashelf.adapters.api.rate_limiter import RateLimiter
from mediashelf.adapters.api.retry import RateLimitError, request_with_retry
from mediashelf.core.ports.api_clients import (
    ConnectionTestResult,
    IMovieMetadataProvider,
    MovieMetadata,
)


class TMDBClient(IMovieMetadataProvider):
    """
    Client API TMDB pour les metadonnees de films.

    Attributes:
        TMDB_BASE_URL: URL de base de l'API TMDB v3
        TMDB_IMAGE_BASE_URL: URL de base pour les images
        MIN_INTERVAL: Delai minimal entre deux appels (secondes)
    """

    TMDB_BASE_URL = "https://api.themoviedb.org/3"
    TMDB_IMAGE_BASE_URL = "https://image.tmdb.org/t/p"
    MIN_INTERVAL = 0.25

    def __init__(
        self,
        api_key: Optional[str],
        rate_limiter: Optional[RateLimiter] = None,
    ) -> None:
        """
        Initialise le client TMDB.

        Args:
            api_key: Cle API TMDB (v3) ou Read Access Token (v4), None si non configuree
            rate_limiter: Limiteur dedie (cree avec MIN_INTERVAL si absent)
        """
        self._api_key = api_key
        self._rate_limiter = rate_limiter or RateLimiter(self.MIN_INTERVAL)
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """
        Retourne le client HTTP, le cree si necessaire (lazy init).

        Supporte les deux modes d'authentification TMDB:
        - API Key v3 (32 caracteres hex) : passe en parametre api_key
        - Read Access Token v4 (long JWT) : passe en header Bearer
        """
        if self._client is None or self._client.is_closed:
            headers = {"Accept": "application/json"}
            params = {}

            if self._api_key and len(self._api_key) > 40:
                headers["Authorization"] = f"Bearer {self._api_key}"
            elif self._api_key:
                params["api_key"] = self._api_key

            self._client = httpx.AsyncClient(
                base_url=self.TMDB_BASE_URL,
                headers=headers,
                params=params,
                timeout=httpx.Timeout(30.0, connect=10.0),
            )
        return self._client

    @property
    def source(self) -> str:
        """Retourne l'identifiant de la source API."""
        return "tmdb"

    def _image_url(self, path: Optional[str], size: str) -> Optional[str]:
        return f"{self.TMDB_IMAGE_BASE_URL}/{size}{path}" if path else None

    async def search_movie(
        self,
        title: str,
        year: Optional[str] = None,
    ) -> Optional[MovieMetadata]:
        """
        Recherche un film et retourne les metadonnees du premier resultat.

        Les details (genres nommes, duree) sont recuperes dans un second appel ;
        s'il echoue, les donnees de la recherche seule sont retournees.

        Args:
            title: Titre nettoye
            year: Annee de sortie optionnelle ("1999")

        Returns:
            MovieMetadata, ou None si aucun resultat ou erreur fournisseur
        """
        if not self._api_key:
            logger.warning("TMDB non configure, recherche ignoree", title=title)
            return None

        client = self._get_client()
        params = {"query": title, "include_adult": "false"}
        if year:
            params["year"] = year

        logger.debug("Recherche TMDB", title=title, year=year)
        try:
            response = await request_with_retry(
                client, "GET", "/search/movie",
                rate_limiter=self._rate_limiter, params=params,
            )
            results = response.json().get("results", [])
        except (httpx.HTTPError, RateLimitError, ValueError) as e:
            logger.warning("Erreur TMDB lors de la recherche", title=title, error=str(e))
            return None

        if not results:
            logger.info("Aucun resultat TMDB", title=title, year=year)
            return None

        # Le premier resultat est le plus pertinent
        movie = results[0]
        release_date = movie.get("release_date") or ""
        metadata = MovieMetadata(
            tmdb_id=movie["id"],
            title=movie.get("title", ""),
            original_title=movie.get("original_title"),
            overview=movie.get("overview"),
            release_year=release_date.split("-")[0] if release_date else "",
            poster_url=self._image_url(movie.get("poster_path"), "w500"),
            backdrop_url=self._image_url(movie.get("backdrop_path"), "original"),
            rating=movie.get("vote_average"),
            vote_count=movie.get("vote_count"),
        )

        await self._add_details(metadata)
        logger.info("Film trouve sur TMDB", title=metadata.title, tmdb_id=metadata.tmdb_id)
        return metadata

    async def _add_details(self, metadata: MovieMetadata) -> None:
        """Complete les metadonnees avec /movie/{id} (genres, duree, slogan)."""
        client = self._get_client()
        try:
            response = await request_with_retry(
                client, "GET", f"/movie/{metadata.tmdb_id}",
                rate_limiter=self._rate_limiter,
            )
            data = response.json()
        except (httpx.HTTPError, RateLimitError, ValueError) as e:
            logger.warning(
                "Details TMDB indisponibles, donnees de recherche conservees",
                tmdb_id=metadata.tmdb_id,
                error=str(e),
            )
            return

        metadata.genres = [g["name"] for g in data.get("genres", []) if g.get("name")]
        metadata.runtime = data.get("runtime")
        metadata.tagline = data.get("tagline") or None
        metadata.status = data.get("status")
        metadata.original_language = data.get("original_language")

    async def test_connection(self) -> ConnectionTestResult:
        """Verifie la cle via l'endpoint /configuration."""
        if not self._api_key:
            return ConnectionTestResult(success=False, message="TMDB API key not configured")

        client = self._get_client()
        try:
            await self._rate_limiter.acquire()
            response = await client.get("/configuration")
        except httpx.HTTPError as e:
            return ConnectionTestResult(success=False, message=f"Connection failed: {e}")

        if response.status_code == 200:
            return ConnectionTestResult(success=True, message="TMDB API connection successful")
        if response.status_code == 401:
            return ConnectionTestResult(success=False, message="Invalid API key")
        return ConnectionTestResult(
            success=False, message=f"TMDB API error: {response.status_code}"
        )

    async def close(self) -> None:
        """Ferme le client HTTP."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
