"""
Module définissant les dépendances FastAPI pour le module utilisateur.
"""
import logging
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from haggle.database import get_db_session
from haggle.users.repositories import AbstractUserRepository, SQLModelUserRepository
from haggle.users.service import UserService

logger = logging.getLogger(__name__)

# Type hint pour la dépendance de session DB
DbSessionDep = Annotated[AsyncSession, Depends(get_db_session)]


def get_user_repository(session: DbSessionDep) -> AbstractUserRepository:
    """Injecte l'implémentation SQL du dépôt utilisateur."""
    return SQLModelUserRepository(session=session)


UserRepositoryDep = Annotated[AbstractUserRepository, Depends(get_user_repository)]


def get_user_service(user_repo: UserRepositoryDep) -> UserService:
    """Injecte le service utilisateur."""
    logger.debug("Fourniture de UserService")
    return UserService(user_repo=user_repo)


UserServiceDep = Annotated[UserService, Depends(get_user_service)]
