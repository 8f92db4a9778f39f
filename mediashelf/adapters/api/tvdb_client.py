"""
Client TVDB API v4 pour les series TV.

Implemente ITVMetadataProvider : recherche d'une serie (premier resultat puis
details etendus) et recuperation d'un episode par saison/numero.
Gere l'authentification par token, l'espacement des appels (500 ms) et le
cache des details et listes d'episodes.

Reference API: https://thetvdb.github.io/v4-api/
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import httpx
from loguru import logger

from mediashelf.adapters.api.cache import APICache
from mediashelf.adapters.api.rate_limiter import RateLimiter
from mediashelf.adapters.api.retry import RateLimitError, request_with_retry
from mediashelf.core.ports.api_clients import (
    ConnectionTestResult,
    EpisodeMetadata,
    ITVMetadataProvider,
    ProviderAuthenticationError,
    TVShowMetadata,
)


class TVDBClient(ITVMetadataProvider):
    """
    Client TVDB pour la recherche de series TV.

    Le token est obtenu a la premiere requete et reutilise pendant 24 heures
    (il est valide environ un mois cote TVDB). Sans cle ou si la connexion
    est refusee, ProviderAuthenticationError est levee : c'est le seul cas
    d'erreur propage par ce client.

    Attributes:
        BASE_URL: URL de base de l'API TVDB v4
        MIN_INTERVAL: Delai minimal entre deux appels (secondes)
        TOKEN_LIFETIME: Duree de reutilisation du token

    Example:
        cache = APICache(cache_dir=".cache/api")
        client = TVDBClient(api_key="your-api-key", cache=cache)
        show = await client.search_show("Breaking Bad", year="2008")
        episode = await client.get_episode(show.tvdb_id, 1, 1)
        await client.close()
    """

    BASE_URL = "https://api4.thetvdb.com/v4"
    MIN_INTERVAL = 0.5
    TOKEN_LIFETIME = timedelta(hours=24)

    def __init__(
        self,
        api_key: Optional[str],
        cache: APICache,
        rate_limiter: Optional[RateLimiter] = None,
    ) -> None:
        """
        Initialise le client TVDB.

        Args:
            api_key: Cle API TVDB (Project API Key), None si non configuree
            cache: Instance de APICache pour les details et saisons
            rate_limiter: Limiteur dedie (cree avec MIN_INTERVAL si absent)
        """
        self._api_key = api_key
        self._cache = cache
        self._rate_limiter = rate_limiter or RateLimiter(self.MIN_INTERVAL)
        self._token: Optional[str] = None
        self._token_expiry: Optional[datetime] = None
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Retourne le client HTTP, cree s'il n'existe pas."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.BASE_URL,
                headers={"Accept": "application/json"},
                timeout=httpx.Timeout(30.0, connect=10.0),
            )
        return self._client

    @property
    def source(self) -> str:
        """Retourne l'identifiant de la source API."""
        return "tvdb"

    async def _ensure_token(self) -> str:
        """
        S'assure qu'un token valide est disponible.

        Returns:
            Token bearer

        Raises:
            ProviderAuthenticationError: cle absente ou connexion refusee
        """
        if self._token and self._token_expiry and datetime.now(timezone.utc) < self._token_expiry:
            return self._token

        if not self._api_key:
            raise ProviderAuthenticationError("TVDB API key not configured")

        client = self._get_client()
        try:
            response = await request_with_retry(
                client, "POST", "/login",
                rate_limiter=self._rate_limiter,
                json={"apikey": self._api_key},
            )
            token = response.json()["data"]["token"]
        except (httpx.HTTPError, RateLimitError, ValueError, KeyError, TypeError) as e:
            self._token = None
            self._token_expiry = None
            logger.error("Authentification TVDB echouee", error=str(e))
            raise ProviderAuthenticationError(f"TVDB authentication failed: {e}") from e

        self._token = token
        self._token_expiry = datetime.now(timezone.utc) + self.TOKEN_LIFETIME
        logger.info("Authentification TVDB reussie")
        return token

    async def _get(self, url: str, params: Optional[dict] = None) -> dict[str, Any]:
        """GET authentifie, retourne le JSON decode."""
        token = await self._ensure_token()
        response = await request_with_retry(
            self._get_client(), "GET", url,
            rate_limiter=self._rate_limiter,
            params=params,
            headers={"Authorization": f"Bearer {token}"},
        )
        return response.json()

    async def search_show(
        self,
        title: str,
        year: Optional[str] = None,
    ) -> Optional[TVShowMetadata]:
        """
        Recherche une serie et retourne les metadonnees du premier resultat.

        Les details etendus (genres, reseau, saisons) sont recuperes ensuite ;
        s'ils sont indisponibles, les donnees de la recherche sont retournees.

        Raises:
            ProviderAuthenticationError: si aucun token n'est obtenable
        """
        params = {"query": title, "type": "series"}
        if year:
            params["year"] = year

        logger.debug("Recherche TVDB", title=title, year=year)
        try:
            data = await self._get("/search", params=params)
        except (httpx.HTTPError, RateLimitError, ValueError) as e:
            logger.warning("Erreur TVDB lors de la recherche", title=title, error=str(e))
            return None

        results = data.get("data") or []
        if not results:
            logger.info("Aucun resultat TVDB", title=title, year=year)
            return None

        show = results[0]
        show_id = str(show.get("tvdb_id") or show.get("id"))
        extended = await self._get_series_extended(show_id)

        if extended is None:
            return TVShowMetadata(
                tvdb_id=show_id,
                title=show.get("name", ""),
                overview=show.get("overview") or "",
                first_air_year=show.get("year") or _year_of(show.get("first_air_time")),
                poster_url=show.get("image_url"),
                status=show.get("status") or "Unknown",
                original_language=show.get("primary_language") or "",
            )

        network = extended.get("latestNetwork") or extended.get("originalNetwork") or {}
        metadata = TVShowMetadata(
            tvdb_id=str(extended.get("tvdb_id") or extended.get("id") or show_id),
            title=extended.get("name") or show.get("name", ""),
            overview=extended.get("overview") or "",
            first_air_year=extended.get("year") or _year_of(extended.get("firstAired")),
            poster_url=extended.get("image") or show.get("image_url"),
            status=(extended.get("status") or {}).get("name") or "Unknown",
            genres=[g["name"] for g in extended.get("genres") or [] if g.get("name")],
            runtime=extended.get("averageRuntime"),
            network=network.get("name"),
            original_language=extended.get("originalLanguage") or "",
            num_seasons=len(extended.get("seasons") or []),
        )
        logger.info("Serie trouvee sur TVDB", title=metadata.title, tvdb_id=metadata.tvdb_id)
        return metadata

    async def _get_series_extended(self, series_id: str) -> Optional[dict[str, Any]]:
        """Details etendus d'une serie, depuis le cache si possible."""
        cache_key = f"tvdb:series:{series_id}:extended"
        cached = await self._cache.get(cache_key)
        if cached is not None:
            return cached

        try:
            data = await self._get(f"/series/{series_id}/extended")
        except (httpx.HTTPError, RateLimitError, ValueError) as e:
            logger.warning("Details TVDB indisponibles", series_id=series_id, error=str(e))
            return None

        extended = data.get("data")
        if extended:
            await self._cache.set_details(cache_key, extended)
        return extended

    async def _get_season_episodes(self, series_id: str, season: int) -> list[dict[str, Any]]:
        """Liste des episodes d'une saison (ordre par defaut), mise en cache."""
        cache_key = f"tvdb:episodes:{series_id}:{season}"
        cached = await self._cache.get(cache_key)
        if cached is not None:
            return cached

        data = await self._get(
            f"/series/{series_id}/episodes/default", params={"season": season}
        )
        episodes = (data.get("data") or {}).get("episodes") or []
        await self._cache.set_details(cache_key, episodes)
        return episodes

    async def get_episode(
        self,
        series_id: str,
        season: int,
        episode: int,
    ) -> Optional[EpisodeMetadata]:
        """
        Recupere un episode par numero dans la liste de sa saison.

        Raises:
            ProviderAuthenticationError: si aucun token n'est obtenable
        """
        try:
            episodes = await self._get_season_episodes(series_id, season)
        except (httpx.HTTPError, RateLimitError, ValueError) as e:
            logger.warning(
                "Erreur TVDB lors de la recuperation de la saison",
                series_id=series_id,
                season=season,
                error=str(e),
            )
            return None

        # Les episodes speciaux d'autres saisons peuvent apparaitre dans la liste
        match = next(
            (
                ep for ep in episodes
                if ep.get("number") == episode
                and ep.get("seasonNumber", season) == season
            ),
            None,
        )
        if match is None:
            logger.info(
                "Episode introuvable sur TVDB",
                series_id=series_id,
                season=season,
                episode=episode,
            )
            return None

        return EpisodeMetadata(
            tvdb_id=str(match.get("id", "")),
            name=match.get("name") or f"Episode {episode}",
            season_number=season,
            episode_number=episode,
            overview=match.get("overview") or "",
            aired=match.get("aired") or "",
            still_url=match.get("image"),
            runtime=match.get("runtime"),
        )

    async def test_connection(self) -> ConnectionTestResult:
        """Teste l'authentification (force un nouveau login)."""
        self._token = None
        self._token_expiry = None
        try:
            await self._ensure_token()
        except ProviderAuthenticationError as e:
            return ConnectionTestResult(success=False, message=str(e))
        return ConnectionTestResult(success=True, message="TVDB API connection successful")

    async def close(self) -> None:
        """Ferme le client HTTP."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None


def _year_of(date: Optional[str]) -> str:
    """Extrait l'annee d'une date YYYY-MM-DD ("" si absente)."""
    return date.split("-")[0] if date else ""
