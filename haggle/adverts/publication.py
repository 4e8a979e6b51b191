"""
Publication d'une annonce : authentification, envoi de l'image, création
de l'annonce puis ajout à l'index du vendeur.

Les écritures ne partagent aucune transaction. Une fois l'annonce créée,
un échec de l'ajout à l'index est journalisé et signalé dans le résultat,
sans annuler l'annonce (``Advert.seller`` fait foi).
"""
import logging
from typing import Any, Dict, Optional

from haggle.adverts.schemas import PublicationResult
from haggle.adverts.service import AdvertService, validate_advert_fields
from haggle.auth.service import AuthService
from haggle.exceptions import DomainException
from haggle.images.exceptions import InvalidImageException
from haggle.images.storage import AbstractImageStorage, ImageUpload, validate_image_upload
from haggle.users.service import UserService

logger = logging.getLogger(__name__)


class PublicationService:
    """Orchestre la publication d'une annonce en étapes successives."""

    def __init__(
        self,
        auth_service: AuthService,
        advert_service: AdvertService,
        user_service: UserService,
        image_storage: AbstractImageStorage,
        max_image_size_bytes: int,
        delete_orphaned_images: bool = True,
    ):
        self.auth_service = auth_service
        self.advert_service = advert_service
        self.user_service = user_service
        self.image_storage = image_storage
        self.max_image_size_bytes = max_image_size_bytes
        self.delete_orphaned_images = delete_orphaned_images

    async def publish(
        self,
        access_token: Optional[str],
        fields: Dict[str, Any],
        image: Optional[ImageUpload],
    ) -> PublicationResult:
        """Publie une annonce pour le porteur du token.

        Raises:
            UnauthorizedException: Token absent ou inconnu (aucun envoi d'image).
            ValidationException: Champs ou image invalides (aucun envoi d'image).
            UploadFailedException: Le stockage de l'image a échoué.
            AdvertCreationFailedException: L'annonce n'a pas pu être enregistrée.
        """
        seller = await self.auth_service.authenticate_by_token(access_token)
        seller_id = seller.id
        # Aucune connexion ne doit rester ouverte pendant l'envoi de l'image
        await self.auth_service.release()

        advert_in = validate_advert_fields(fields)
        if image is None:
            raise InvalidImageException("Une image est requise.")
        validate_image_upload(image, self.max_image_size_bytes)

        stored_image = await self.image_storage.upload(image)
        logger.info("[Publication] Image stockée (%s) pour le vendeur %s", stored_image.image_id, seller_id)

        try:
            advert = await self.advert_service.create_advert(advert_in, seller_id, stored_image)
        except DomainException:
            logger.error(
                "[Publication] Création de l'annonce échouée, image orpheline: %s", stored_image.image_id
            )
            await self._discard_image(stored_image.image_id)
            raise
        advert_id = advert.id

        try:
            await self.user_service.append_advert(seller_id, advert_id)
        except DomainException as e:
            logger.error(
                "[Publication] Annonce %s créée mais non ajoutée à l'index du vendeur %s: %s",
                advert_id,
                seller_id,
                e.message,
            )
            return PublicationResult(advert_id=advert_id, linked=False, link_error=e.message)

        return PublicationResult(advert_id=advert_id, linked=True)

    async def _discard_image(self, image_id: str) -> None:
        if not self.delete_orphaned_images:
            return
        try:
            await self.image_storage.delete(image_id)
            logger.info("[Publication] Image orpheline supprimée: %s", image_id)
        except DomainException as e:
            logger.error("[Publication] Suppression de l'image orpheline %s échouée: %s", image_id, e.message)
