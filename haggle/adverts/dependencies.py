"""
Module définissant les dépendances FastAPI pour le module des annonces.
"""
import logging
from typing import Annotated

from fastapi import Depends

from haggle.adverts.publication import PublicationService
from haggle.adverts.repositories import AbstractAdvertRepository, SQLModelAdvertRepository
from haggle.adverts.service import AdvertService
from haggle.auth.dependencies import AuthServiceDep
from haggle.core.dependencies import SettingsDep
from haggle.images.dependencies import ImageStorageDep
from haggle.users.dependencies import DbSessionDep, UserServiceDep

logger = logging.getLogger(__name__)


def get_advert_repository(session: DbSessionDep) -> AbstractAdvertRepository:
    return SQLModelAdvertRepository(session=session)


AdvertRepositoryDep = Annotated[AbstractAdvertRepository, Depends(get_advert_repository)]


def get_advert_service(advert_repo: AdvertRepositoryDep, settings: SettingsDep) -> AdvertService:
    """Injecte le service des annonces."""
    logger.debug("Fourniture de AdvertService")
    return AdvertService(advert_repo=advert_repo, batch_size=settings.ADVERTS_BATCH_SIZE)


AdvertServiceDep = Annotated[AdvertService, Depends(get_advert_service)]


def get_publication_service(
    auth_service: AuthServiceDep,
    advert_service: AdvertServiceDep,
    user_service: UserServiceDep,
    image_storage: ImageStorageDep,
    settings: SettingsDep,
) -> PublicationService:
    """Injecte le service de publication avec tous ses collaborateurs."""
    return PublicationService(
        auth_service=auth_service,
        advert_service=advert_service,
        user_service=user_service,
        image_storage=image_storage,
        max_image_size_bytes=settings.MAX_IMAGE_SIZE_BYTES,
        delete_orphaned_images=settings.DELETE_ORPHANED_IMAGES,
    )


PublicationServiceDep = Annotated[PublicationService, Depends(get_publication_service)]
