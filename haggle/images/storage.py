from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel

from haggle.images.exceptions import InvalidImageException


class ImageUpload(BaseModel):
    """Image reçue du client, avant stockage."""
    content: bytes
    filename: Optional[str] = None
    content_type: Optional[str] = None


class StoredImage(BaseModel):
    """Réponse du fournisseur : URL publique stable et identifiant de suppression."""
    url: str
    image_id: str


class AbstractImageStorage(ABC):
    """Interface abstraite pour un fournisseur de stockage d'images."""

    @abstractmethod
    async def upload(self, image: ImageUpload) -> StoredImage:
        """Stocke l'image et retourne son URL et son identifiant.

        Raises:
            ImageUploadException: Si le fournisseur échoue.
        """
        raise NotImplementedError

    @abstractmethod
    async def delete(self, image_id: str) -> None:
        """Supprime une image à partir de son identifiant.

        Raises:
            ImageDeletionException: Si la suppression échoue.
        """
        raise NotImplementedError


def validate_image_upload(image: ImageUpload, max_size_bytes: int) -> None:
    """Vérifie qu'un fichier reçu peut être envoyé au fournisseur."""
    if not image.content:
        raise InvalidImageException("Le fichier image est vide.")
    if len(image.content) > max_size_bytes:
        raise InvalidImageException(f"Le fichier image dépasse la taille maximale ({max_size_bytes} octets).")
    if image.content_type and not image.content_type.startswith("image/"):
        raise InvalidImageException(f"Type de contenu non supporté: {image.content_type}")
