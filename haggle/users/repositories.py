import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from fastcrud import FastCRUD
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from haggle.users.exceptions import AdvertLinkException, EmailAlreadyExistsException, UserNotFoundException
from haggle.users.models import User, UserAdvertLink

logger = logging.getLogger(__name__)


class AbstractUserRepository(ABC):
    """Interface abstraite pour le dépôt des utilisateurs."""

    @abstractmethod
    async def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    async def get_by_access_token(self, access_token: str) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    async def email_exists(self, email: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def add(self, user: User) -> User:
        """Persiste un nouvel utilisateur (hash et token déjà calculés)."""
        raise NotImplementedError

    @abstractmethod
    async def append_advert(self, user_id: int, advert_id: int) -> None:
        """Ajoute une annonce à l'index du vendeur, sans transaction commune avec l'annonce."""
        raise NotImplementedError

    @abstractmethod
    async def list_advert_ids(self, user_id: int) -> List[int]:
        raise NotImplementedError

    @abstractmethod
    async def end_transaction(self) -> None:
        """Termine la transaction de lecture en cours et rend la connexion au pool."""
        raise NotImplementedError


class SQLModelUserRepository(AbstractUserRepository):
    """Implémentation SQLAlchemy/SQLModel du dépôt des utilisateurs.

    Chaque écriture est validée (commit) immédiatement : il n'y a pas de
    transaction englobant plusieurs écritures.
    """

    def __init__(self, session: AsyncSession):
        self.db = session
        self.user_crud = FastCRUD(User)

    async def get_by_id(self, user_id: int) -> Optional[User]:
        logger.debug("[UserRepo] Récupération User ID: %s", user_id)
        return await self.db.get(User, user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        logger.debug("[UserRepo] Récupération User par email: %s", email)
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_by_access_token(self, access_token: str) -> Optional[User]:
        # Le token n'est jamais journalisé
        result = await self.db.execute(select(User).where(User.access_token == access_token))
        return result.scalar_one_or_none()

    async def email_exists(self, email: str) -> bool:
        return await self.user_crud.exists(db=self.db, email=email)

    async def add(self, user: User) -> User:
        logger.debug("[UserRepo] Ajout utilisateur: %s", user.email)
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError as e:
            # L'index unique sur l'email tranche les créations concurrentes
            await self.db.rollback()
            logger.warning("[UserRepo] Erreur d'intégrité lors de l'ajout de %s: %s", user.email, e.orig)
            raise EmailAlreadyExistsException(user.email) from e
        await self.db.refresh(user)
        logger.info("[UserRepo] Utilisateur ajouté ID: %s", user.id)
        return user

    async def _link_exists(self, user_id: int, advert_id: int) -> bool:
        existing = await self.db.execute(
            select(UserAdvertLink.id).where(
                UserAdvertLink.user_id == user_id,
                UserAdvertLink.advert_id == advert_id,
            )
        )
        return existing.first() is not None

    async def append_advert(self, user_id: int, advert_id: int) -> None:
        logger.debug("[UserRepo] Ajout annonce %s à l'index du vendeur %s", advert_id, user_id)
        try:
            if await self.db.get(User, user_id) is None:
                raise UserNotFoundException(user_id)

            if await self._link_exists(user_id, advert_id):
                logger.debug("[UserRepo] Annonce %s déjà liée au vendeur %s", advert_id, user_id)
                return

            self.db.add(UserAdvertLink(user_id=user_id, advert_id=advert_id))
            await self.db.commit()
            return
        except IntegrityError as e:
            await self.db.rollback()
            integrity_error = e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("[UserRepo] Erreur DB lors du lien annonce %s / vendeur %s: %s", advert_id, user_id, e)
            raise AdvertLinkException(user_id, advert_id, original_exception=e) from e

        # Doublon concurrent (lien présent) ou contrainte violée (clé étrangère...)
        try:
            linked = await self._link_exists(user_id, advert_id)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise AdvertLinkException(user_id, advert_id, original_exception=e) from e
        if linked:
            logger.info("[UserRepo] Lien annonce %s / vendeur %s déjà présent", advert_id, user_id)
            return
        logger.error(
            "[UserRepo] Lien annonce %s / vendeur %s refusé par la base: %s", advert_id, user_id, integrity_error.orig
        )
        raise AdvertLinkException(user_id, advert_id, original_exception=integrity_error) from integrity_error

    async def list_advert_ids(self, user_id: int) -> List[int]:
        result = await self.db.execute(
            select(UserAdvertLink.advert_id)
            .where(UserAdvertLink.user_id == user_id)
            .order_by(UserAdvertLink.id)
        )
        return list(result.scalars().all())

    async def end_transaction(self) -> None:
        await self.db.commit()
