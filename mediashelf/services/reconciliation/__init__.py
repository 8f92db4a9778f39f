"""
Package de reconciliation du catalogue avec le systeme de fichiers.
"""

from .book_scanner import BookScanner, resolve_book_roots
from .dataclasses import ScanResult
from .movie_scanner import MovieScanner
from .reconciliation_service import ReconciliationService
from .tv_scanner import TVScanner

__all__ = [
    "BookScanner",
    "MovieScanner",
    "ReconciliationService",
    "ScanResult",
    "TVScanner",
    "resolve_book_roots",
]
