"""
Implémentation des repositories pour les annonces.
"""
import logging
from abc import ABC, abstractmethod
from typing import AsyncIterator, List, Optional

from fastcrud import FastCRUD
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from haggle.adverts.exceptions import AdvertCreationFailedException
from haggle.adverts.models import Advert

logger = logging.getLogger(__name__)


class AbstractAdvertRepository(ABC):
    """Interface abstraite pour le dépôt des annonces."""

    @abstractmethod
    async def add(self, advert: Advert) -> Advert:
        raise NotImplementedError

    @abstractmethod
    async def get_by_id(self, advert_id: int) -> Optional[Advert]:
        raise NotImplementedError

    @abstractmethod
    def iter_all(self, batch_size: int) -> AsyncIterator[Advert]:
        """Parcourt toutes les annonces par lots, triées par ID."""
        raise NotImplementedError

    @abstractmethod
    async def list_by_seller(self, seller_id: int) -> List[Advert]:
        raise NotImplementedError

    @abstractmethod
    async def count(self) -> int:
        raise NotImplementedError


class SQLModelAdvertRepository(AbstractAdvertRepository):
    """Implémentation SQLAlchemy/SQLModel du dépôt des annonces."""

    def __init__(self, session: AsyncSession):
        self.db = session
        self.advert_crud = FastCRUD(Advert)

    async def add(self, advert: Advert) -> Advert:
        self.db.add(advert)
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("[AdvertRepo] Erreur DB lors de la création de l'annonce: %s", e, exc_info=True)
            raise AdvertCreationFailedException(original_exception=e) from e
        await self.db.refresh(advert)
        logger.info("[AdvertRepo] Annonce créée ID: %s (vendeur %s)", advert.id, advert.seller)
        return advert

    async def get_by_id(self, advert_id: int) -> Optional[Advert]:
        logger.debug("[AdvertRepo] Récupération annonce ID: %s", advert_id)
        return await self.db.get(Advert, advert_id)

    async def iter_all(self, batch_size: int) -> AsyncIterator[Advert]:
        # Pagination par clé : chaque lot reprend après le dernier ID vu
        last_id = 0
        while True:
            result = await self.db.execute(
                select(Advert).where(Advert.id > last_id).order_by(Advert.id).limit(batch_size)
            )
            batch = list(result.scalars().all())
            for advert in batch:
                yield advert
            if len(batch) < batch_size:
                return
            last_id = batch[-1].id

    async def list_by_seller(self, seller_id: int) -> List[Advert]:
        result = await self.db.execute(
            select(Advert).where(Advert.seller == seller_id).order_by(Advert.id)
        )
        return list(result.scalars().all())

    async def count(self) -> int:
        return await self.advert_crud.count(db=self.db)
