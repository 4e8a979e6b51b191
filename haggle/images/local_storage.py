"""
Stockage des images sur le système de fichiers local.

Les fichiers sont servis par l'application sous ``STATIC_URL_PATH``.
"""
import asyncio
import logging
import mimetypes
import os
import uuid
from pathlib import Path
from typing import Optional

from haggle.images.exceptions import ImageDeletionException, ImageUploadException
from haggle.images.storage import AbstractImageStorage, ImageUpload, StoredImage

logger = logging.getLogger(__name__)


def build_image_name(image: ImageUpload) -> str:
    """Nom aléatoire conservant l'extension d'origine si elle est connue."""
    extension: Optional[str] = None
    if image.filename:
        extension = os.path.splitext(image.filename)[1].lower() or None
    if not extension and image.content_type:
        extension = mimetypes.guess_extension(image.content_type)
    return f"{uuid.uuid4().hex}{extension or ''}"


class LocalImageStorage(AbstractImageStorage):
    """Écrit les images dans un répertoire et retourne leur URL publique."""

    def __init__(self, directory: str, public_url_prefix: str):
        self.directory = Path(directory)
        self.public_url_prefix = public_url_prefix.rstrip("/")

    async def upload(self, image: ImageUpload) -> StoredImage:
        name = build_image_name(image)
        try:
            await asyncio.to_thread(self._write_sync, name, image.content)
        except OSError as e:
            logger.error("[LocalImageStorage] Écriture de %s échouée: %s", name, e)
            raise ImageUploadException("écriture sur disque impossible", original_exception=e) from e
        logger.info("[LocalImageStorage] Image écrite: %s (%d octets)", name, len(image.content))
        return StoredImage(url=f"{self.public_url_prefix}/{name}", image_id=name)

    async def delete(self, image_id: str) -> None:
        # Le handle est un simple nom de fichier, jamais un chemin
        if Path(image_id).name != image_id:
            raise ImageDeletionException(image_id)
        try:
            await asyncio.to_thread(self._delete_sync, image_id)
        except OSError as e:
            logger.error("[LocalImageStorage] Suppression de %s échouée: %s", image_id, e)
            raise ImageDeletionException(image_id, original_exception=e) from e

    def _write_sync(self, name: str, content: bytes) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        (self.directory / name).write_bytes(content)

    def _delete_sync(self, name: str) -> None:
        (self.directory / name).unlink(missing_ok=True)
