"""
Service d'authentification pour l'API.

Contient la logique métier pour:
- L'authentification par token d'accès opaque
- L'authentification par email et mot de passe

L'authentification est en lecture seule : le token n'est jamais modifié.
"""
import logging
from typing import Optional

from haggle.auth.exceptions import InvalidCredentialsException, TokenInvalidException
from haggle.users.models import User
from haggle.users.repositories import AbstractUserRepository
from haggle.users.schemas import normalize_email
from haggle.users.security import verify_password, verify_password_against_nothing

logger = logging.getLogger(__name__)


class AuthService:
    """Service pour vérifier l'identité de l'appelant."""

    def __init__(self, user_repo: AbstractUserRepository):
        self.user_repo = user_repo

    async def authenticate_by_token(self, access_token: Optional[str]) -> User:
        """Retourne l'utilisateur porteur du token, ou lève TokenInvalidException.

        Le format du token n'est pas inspecté : seule compte la correspondance
        exacte avec un utilisateur.
        """
        if not access_token:
            raise TokenInvalidException()

        user = await self.user_repo.get_by_access_token(access_token)
        if user is None:
            logger.warning("[AuthService] Token ne correspondant à aucun utilisateur.")
            raise TokenInvalidException()

        logger.debug("[AuthService] Utilisateur authentifié par token: ID %s", user.id)
        return user

    async def authenticate_by_password(self, email: str, password: str) -> User:
        """Authentifie un utilisateur par email et mot de passe.

        Un email inconnu et un mauvais mot de passe donnent la même
        InvalidCredentialsException, pour un coût bcrypt équivalent.
        """
        email = normalize_email(email)
        logger.debug("[AuthService] Tentative d'authentification pour: %s", email)
        user = await self.user_repo.get_by_email(email)

        if user is None:
            verify_password_against_nothing(password)
            logger.warning("[AuthService] Échec authentification pour: %s", email)
            raise InvalidCredentialsException()

        if not verify_password(password, user.password_hash):
            logger.warning("[AuthService] Échec authentification pour: %s", email)
            raise InvalidCredentialsException()

        logger.info("[AuthService] Authentification réussie pour: %s (ID: %s)", email, user.id)
        return user

    async def release(self) -> None:
        """Rend la connexion utilisée pour la lecture avant un appel externe long."""
        await self.user_repo.end_transaction()
