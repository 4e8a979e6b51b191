"""
Stockage des images dans un bucket S3 (boto3).

Les appels boto3 sont bloquants : ils sont exécutés dans un thread pour ne
pas bloquer la boucle asyncio. Aucune nouvelle tentative n'est faite en cas
d'échec ; l'erreur remonte au client.
"""
import asyncio
import logging
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from haggle.images.exceptions import ImageDeletionException, ImageUploadException
from haggle.images.local_storage import build_image_name
from haggle.images.storage import AbstractImageStorage, ImageUpload, StoredImage

logger = logging.getLogger(__name__)


class S3ImageStorage(AbstractImageStorage):
    """Adaptateur S3 : l'identifiant de l'image est la clé de l'objet."""

    def __init__(
        self,
        bucket: str,
        region: str,
        key_prefix: str = "adverts",
        public_base_url: Optional[str] = None,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        s3_client: Any = None,
    ):
        # Sans identifiants explicites, boto3 utilise sa chaîne habituelle (env, profil...)
        self.s3_client = s3_client or boto3.client(
            "s3",
            region_name=region,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
        )
        self.bucket = bucket
        self.key_prefix = key_prefix.strip("/")
        base_url = public_base_url or f"https://{bucket}.s3.{region}.amazonaws.com"
        self.public_base_url = base_url.rstrip("/")

    async def upload(self, image: ImageUpload) -> StoredImage:
        key = self._build_key(build_image_name(image))
        try:
            await asyncio.to_thread(self._upload_sync, key, image.content, image.content_type)
        except (ClientError, BotoCoreError) as e:
            logger.error("[S3ImageStorage] Envoi de %s vers %s échoué: %s", key, self.bucket, e)
            raise ImageUploadException("le stockage S3 a refusé l'image", original_exception=e) from e
        logger.info("[S3ImageStorage] Image envoyée: s3://%s/%s", self.bucket, key)
        return StoredImage(url=f"{self.public_base_url}/{key}", image_id=key)

    async def delete(self, image_id: str) -> None:
        try:
            await asyncio.to_thread(self.s3_client.delete_object, Bucket=self.bucket, Key=image_id)
        except (ClientError, BotoCoreError) as e:
            logger.error("[S3ImageStorage] Suppression de %s échouée: %s", image_id, e)
            raise ImageDeletionException(image_id, original_exception=e) from e
        logger.info("[S3ImageStorage] Image supprimée: s3://%s/%s", self.bucket, image_id)

    # --- Appels synchrones (exécutés dans un thread) ---

    def _upload_sync(self, key: str, data: bytes, content_type: Optional[str]) -> None:
        self.s3_client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=data,
            ContentType=content_type or "application/octet-stream",
        )

    def _build_key(self, name: str) -> str:
        return f"{self.key_prefix}/{name}" if self.key_prefix else name
