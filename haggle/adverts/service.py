"""
Module contenant la logique métier (services) pour les annonces.
"""
import logging
from typing import Any, AsyncIterator, Dict, List, Optional

from pydantic import ValidationError

from haggle.adverts.exceptions import AdvertNotFoundException, AdvertValidationException
from haggle.adverts.models import Advert
from haggle.adverts.repositories import AbstractAdvertRepository
from haggle.adverts.schemas import AdvertCreate, AdvertRead, SellerAdverts
from haggle.exception_handlers import format_validation_errors
from haggle.exceptions import DomainException
from haggle.images.storage import StoredImage
from haggle.users.service import UserService

logger = logging.getLogger(__name__)


def validate_advert_fields(fields: Dict[str, Any]) -> AdvertCreate:
    """Valide les champs bruts d'une annonce ou lève AdvertValidationException."""
    try:
        return AdvertCreate.model_validate(fields)
    except ValidationError as e:
        raise AdvertValidationException(format_validation_errors(e.errors())) from e


class AdvertService:
    """Service pour gérer les annonces (magasin des annonces)."""

    def __init__(self, advert_repo: AbstractAdvertRepository, batch_size: int = 100):
        self.advert_repo = advert_repo
        self.batch_size = batch_size

    async def create_advert(self, advert_in: AdvertCreate, seller_id: int, stored_image: StoredImage) -> Advert:
        """Crée une annonce rattachée au vendeur avec l'image déjà stockée.

        Une annonce n'est jamais persistée sans URL ni identifiant d'image.
        """
        errors: Dict[str, str] = {}
        if not stored_image.url:
            errors["imageUrl"] = "L'URL de l'image est requise"
        if not stored_image.image_id:
            errors["imageId"] = "L'identifiant de l'image est requis"
        if errors:
            raise AdvertValidationException(errors)

        advert = Advert(
            title=advert_in.title,
            description=advert_in.description,
            price=advert_in.price,
            currency=advert_in.currency,
            image_url=stored_image.url,
            image_id=stored_image.image_id,
            condition=advert_in.condition.value,
            category=advert_in.category.value,
            delivery=[method.value for method in advert_in.delivery],
            seller=seller_id,
        )
        return await self.advert_repo.add(advert)

    async def get_advert(self, advert_id: int) -> Advert:
        advert = await self.advert_repo.get_by_id(advert_id)
        if advert is None:
            logger.info("[AdvertService] Annonce ID %s non trouvée.", advert_id)
            raise AdvertNotFoundException(advert_id)
        return advert

    def iter_adverts(self) -> AsyncIterator[Advert]:
        """Itère sur toutes les annonces ; chaque appel relit la base."""
        return self.advert_repo.iter_all(self.batch_size)

    async def list_adverts(self) -> List[Advert]:
        return [advert async for advert in self.iter_adverts()]

    async def count_adverts(self) -> int:
        return await self.advert_repo.count()

    async def list_seller_adverts(self, seller_id: int) -> List[Advert]:
        """Requête autoritaire : les annonces dont ``seller`` est ce vendeur."""
        return await self.advert_repo.list_by_seller(seller_id)

    async def reconcile_seller_adverts(
        self, seller_id: int, user_service: UserService, adverts: Optional[List[Advert]] = None
    ) -> List[int]:
        """Rajoute à l'index du vendeur les annonces qui y manquent.

        Retourne les IDs rattachés lors de cet appel.
        """
        if adverts is None:
            adverts = await self.list_seller_adverts(seller_id)
        indexed = set(await user_service.list_advert_ids(seller_id))
        relinked: List[int] = []
        for advert_id in [advert.id for advert in adverts]:
            if advert_id in indexed:
                continue
            try:
                await user_service.append_advert(seller_id, advert_id)
            except DomainException as e:
                # La lecture reste valable : Advert.seller fait foi
                logger.error("[AdvertService] Réparation de l'index échouée pour l'annonce %s: %s", advert_id, e.message)
                continue
            relinked.append(advert_id)
        if relinked:
            logger.warning("[AdvertService] Index du vendeur %s réparé pour les annonces %s", seller_id, relinked)
        return relinked

    async def get_seller_adverts(self, seller_id: int, user_service: UserService) -> SellerAdverts:
        """Annonces du vendeur par requête autoritaire, avec réparation de l'index."""
        adverts = await self.list_seller_adverts(seller_id)
        # Copie avant réparation : un rollback expirerait les instances
        advert_reads = [AdvertRead.model_validate(advert) for advert in adverts]
        relinked = await self.reconcile_seller_adverts(seller_id, user_service, adverts=adverts)
        advert_ids = await user_service.list_advert_ids(seller_id)
        return SellerAdverts(
            adverts=advert_reads,
            advert_ids=advert_ids,
            relinked=relinked,
        )
