"""Exceptions spécifiques au stockage des images."""

from typing import Optional

from haggle.exceptions import DomainException, UploadFailedException, ValidationException


class ImageUploadException(UploadFailedException):
    """Levée lorsque le fournisseur de stockage refuse ou échoue à stocker l'image."""
    def __init__(self, message: str, original_exception: Optional[Exception] = None):
        super().__init__(f"Erreur lors de l'envoi de l'image: {message}", original_exception=original_exception)


class ImageDeletionException(DomainException):
    """Levée lorsque la suppression d'une image stockée échoue."""
    def __init__(self, image_id: str, original_exception: Optional[Exception] = None):
        self.image_id = image_id
        self.original_exception = original_exception
        super().__init__(f"Impossible de supprimer l'image {image_id}")


class InvalidImageException(ValidationException):
    """Levée lorsque le fichier reçu n'est pas une image acceptable."""
    def __init__(self, reason: str):
        super().__init__("Image invalide", errors={"image": reason})


class ImageStorageConfigurationException(DomainException):
    """Levée si la configuration du stockage des images est invalide ou manquante."""
