"""
Couche domaine (core).

Contient les entités du catalogue et les ports (interfaces abstraites).
Cette couche n'a AUCUNE dépendance vers l'infrastructure (adapters, frameworks, BDD).

Sous-packages :
- entities/ : Entités métier (MediaItem, TVEpisode, Author, BookSeries, Book)
- ports/ : Interfaces abstraites définissant les contrats pour les adaptateurs
"""
