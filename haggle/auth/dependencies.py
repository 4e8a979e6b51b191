"""
Module définissant les dépendances FastAPI pour l'authentification.

Fournit des dépendances pour:
- Le service d'authentification (AuthService)
- L'extraction du token d'accès de l'en-tête Authorization
- L'obtention de l'utilisateur courant à partir du token
"""
import logging
from typing import Annotated, Optional

from fastapi import Depends, Header

from haggle.auth.constants import BEARER_PREFIX
from haggle.auth.exceptions import TokenMissingException
from haggle.auth.service import AuthService
from haggle.users.dependencies import UserRepositoryDep
from haggle.users.models import User

logger = logging.getLogger(__name__)


def get_auth_service(user_repo: UserRepositoryDep) -> AuthService:
    """Fournit une instance du service d'authentification."""
    logger.debug("Fourniture de AuthService")
    return AuthService(user_repo=user_repo)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


def extract_access_token(authorization: Optional[str]) -> Optional[str]:
    """Extrait le token de l'en-tête Authorization (token brut ou préfixé par 'Bearer ')."""
    if authorization is None:
        return None
    token = authorization.strip()
    if token.startswith(BEARER_PREFIX):
        token = token[len(BEARER_PREFIX):].strip()
    return token or None


async def get_access_token(authorization: Annotated[Optional[str], Header()] = None) -> str:
    token = extract_access_token(authorization)
    if token is None:
        logger.warning("Token manquant dans la requête.")
        raise TokenMissingException()
    return token


AccessTokenDep = Annotated[str, Depends(get_access_token)]


async def get_current_user(access_token: AccessTokenDep, auth_service: AuthServiceDep) -> User:
    """Vérifie le token et retourne l'utilisateur courant."""
    return await auth_service.authenticate_by_token(access_token)


CurrentUserDep = Annotated[User, Depends(get_current_user)]
