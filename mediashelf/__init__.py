"""
MediaShelf - Catalogue de series TV, films et livres.

Ce package parcourt les repertoires de medias, reconcilie leur contenu avec
un catalogue persistant et enrichit chaque entree avec des metadonnees
TMDB (films), TVDB (series) et Hardcover (livres).

Architecture : Hexagonale (Ports et Adaptateurs)
- core/ : Couche domaine (entites, ports)
- services/ : Couche application (reconciliation, enrichissement, progression)
- adapters/ : Couche infrastructure (CLI, systeme de fichiers, clients API)
- infrastructure/ : Persistance SQLite via SQLModel
"""
