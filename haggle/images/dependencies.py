"""
Construction et injection du fournisseur de stockage des images.
"""
import logging
from typing import Annotated

from fastapi import Depends, Request

from haggle.config import Settings
from haggle.images.exceptions import ImageStorageConfigurationException
from haggle.images.local_storage import LocalImageStorage
from haggle.images.storage import AbstractImageStorage

logger = logging.getLogger(__name__)


def build_image_storage(settings: Settings) -> AbstractImageStorage:
    """Instancie l'adaptateur choisi par IMAGE_STORAGE_BACKEND."""
    backend = settings.IMAGE_STORAGE_BACKEND.lower()
    if backend == "local":
        prefix = f"{settings.PUBLIC_BASE_URL.rstrip('/')}{settings.STATIC_URL_PATH}/images"
        logger.info("Stockage des images local: %s", settings.LOCAL_IMAGE_DIR)
        return LocalImageStorage(directory=settings.LOCAL_IMAGE_DIR, public_url_prefix=prefix)
    if backend == "s3":
        if not settings.S3_BUCKET_NAME:
            raise ImageStorageConfigurationException("S3_BUCKET_NAME est requis pour le stockage S3")
        # Import tardif : boto3 n'est chargé que si S3 est utilisé
        from haggle.images.s3_storage import S3ImageStorage

        logger.info("Stockage des images S3: bucket %s", settings.S3_BUCKET_NAME)
        return S3ImageStorage(
            bucket=settings.S3_BUCKET_NAME,
            region=settings.S3_REGION,
            key_prefix=settings.S3_KEY_PREFIX,
            public_base_url=settings.S3_PUBLIC_BASE_URL,
            access_key_id=settings.S3_ACCESS_KEY_ID,
            secret_access_key=settings.S3_SECRET_ACCESS_KEY,
        )
    raise ImageStorageConfigurationException(f"Backend de stockage d'images inconnu: {backend}")


def get_image_storage(request: Request) -> AbstractImageStorage:
    """Fournit l'adaptateur construit au démarrage de l'application."""
    storage = getattr(request.app.state, "image_storage", None)
    if storage is None:
        logger.error("Le stockage des images n'est pas initialisé.")
        raise RuntimeError("Image storage is not initialized.")
    return storage


ImageStorageDep = Annotated[AbstractImageStorage, Depends(get_image_storage)]
