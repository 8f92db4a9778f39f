"""
Clients API externes pour l'enrichissement des metadonnees.

- TMDB: films
- TVDB: series TV et episodes
- Hardcover: livres

Infrastructure partagee:
- RateLimiter: delai minimal entre deux appels, un par client
- request_with_retry: retry avec backoff exponentiel sur 429
- APICache: cache persistant des details et listes d'episodes TVDB
"""

from mediashelf.adapters.api.cache import APICache
from mediashelf.adapters.api.hardcover_client import HardcoverClient
from mediashelf.adapters.api.rate_limiter import RateLimiter
from mediashelf.adapters.api.retry import RateLimitError, request_with_retry, with_retry
from mediashelf.adapters.api.tmdb_client import TMDBClient
from mediashelf.adapters.api.tvdb_client import TVDBClient

__all__ = [
    "APICache",
    "HardcoverClient",
    "RateLimiter",
    "RateLimitError",
    "TMDBClient",
    "TVDBClient",
    "request_with_retry",
    "with_retry",
]
