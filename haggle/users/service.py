"""
Module contenant la logique métier (services) pour les utilisateurs.
"""
import logging
from typing import List, Optional

from pydantic import ValidationError

from haggle.exception_handlers import format_validation_errors
from haggle.users.exceptions import EmailAlreadyExistsException, UserNotFoundException, UserValidationException
from haggle.users.models import User
from haggle.users.repositories import AbstractUserRepository
from haggle.users.schemas import UserCreate
from haggle.users.security import generate_access_token, get_password_hash

logger = logging.getLogger(__name__)


class UserService:
    """Service pour gérer les comptes utilisateurs (magasin d'identifiants)."""

    def __init__(self, user_repo: AbstractUserRepository):
        self.user_repo = user_repo

    async def create_user(self, name: str, email: str, password: str) -> User:
        """Crée un utilisateur : validation, hachage du mot de passe, génération du token.

        Un mot de passe trop court est refusé ; il n'est jamais stocké tel quel.
        """
        try:
            user_data = UserCreate(name=name, email=email, password=password)
        except ValidationError as e:
            logger.info("[UserService] Données utilisateur invalides pour: %s", email)
            raise UserValidationException(format_validation_errors(e.errors())) from e

        logger.debug("[UserService] Tentative de création utilisateur: %s", user_data.email)

        if await self.user_repo.email_exists(user_data.email):
            logger.warning("[UserService] Email déjà existant: %s", user_data.email)
            raise EmailAlreadyExistsException(user_data.email)

        user = User(
            name=user_data.name,
            email=user_data.email,
            password_hash=get_password_hash(user_data.password),
            access_token=generate_access_token(),
        )
        created_user = await self.user_repo.add(user)
        logger.info("[UserService] Utilisateur créé avec ID: %s", created_user.id)
        return created_user

    async def find_by_id(self, user_id: int) -> Optional[User]:
        return await self.user_repo.get_by_id(user_id)

    async def find_by_email(self, email: str) -> Optional[User]:
        return await self.user_repo.get_by_email(email)

    async def find_by_access_token(self, access_token: str) -> Optional[User]:
        return await self.user_repo.get_by_access_token(access_token)

    async def get_user(self, user_id: int) -> User:
        """Récupère un utilisateur par son ID ou lève UserNotFoundException."""
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            logger.warning("[UserService] Utilisateur ID %s non trouvé.", user_id)
            raise UserNotFoundException(user_id)
        return user

    async def append_advert(self, user_id: int, advert_id: int) -> None:
        """Ajoute l'annonce à l'index du vendeur (écriture indépendante)."""
        await self.user_repo.append_advert(user_id, advert_id)
        logger.info("[UserService] Annonce %s ajoutée à l'index du vendeur %s", advert_id, user_id)

    async def list_advert_ids(self, user_id: int) -> List[int]:
        return await self.user_repo.list_advert_ids(user_id)
