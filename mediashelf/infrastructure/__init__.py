"""
Couche infrastructure de MediaShelf.

- persistence/ : stockage SQLite avec SQLModel (modeles et repository du catalogue)

Les adaptateurs ici implementent les ports du domaine.
"""
