"""
Telechargement des images (posters, vignettes, couvertures) a cote des medias.

Utilise uniquement quand le reglage save_images_locally est actif : l'URL
distante stockee dans les metadonnees est alors remplacee par le nom du
fichier local. Tout echec conserve l'URL d'origine.
"""

from pathlib import Path
from typing import Optional

import httpx
from loguru import logger


class ImageDownloader:
    """Telecharge une image et l'enregistre dans le repertoire du media."""

    def __init__(self, timeout: float = 30.0) -> None:
        self._timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                follow_redirects=True,
                timeout=httpx.Timeout(self._timeout, connect=10.0),
            )
        return self._client

    async def maybe_download(self, url: str, destination_dir: Path, filename: str) -> str:
        """
        Telecharge url vers destination_dir/filename.

        Args:
            url: URL distante de l'image
            destination_dir: Repertoire du media (cree si absent)
            filename: Nom du fichier local (ex: "poster.jpg")

        Returns:
            filename si l'image a ete enregistree, sinon url inchangee
        """
        destination = Path(destination_dir) / filename
        try:
            response = await self._get_client().get(url)
            response.raise_for_status()
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_bytes(response.content)
        except (httpx.HTTPError, OSError) as e:
            logger.warning("Echec du telechargement d'image", url=url, error=str(e))
            return url

        logger.debug("Image enregistree", path=str(destination))
        return filename

    async def close(self) -> None:
        """Ferme le client HTTP."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
