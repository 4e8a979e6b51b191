"""
Module définissant les routes API FastAPI pour les utilisateurs.

Contient les endpoints pour:
- POST /users : Enregistrement d'un nouvel utilisateur.
- GET /users/current : Informations de l'utilisateur connecté.
"""
import logging

from fastapi import APIRouter, status

from haggle.auth.dependencies import CurrentUserDep
from haggle.users.constants import MESSAGE_USER_CREATED
from haggle.users.dependencies import UserServiceDep
from haggle.users.schemas import CurrentUser, UserCreate, UserRegistered

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=UserRegistered, status_code=status.HTTP_201_CREATED)
async def register_user(user_in: UserCreate, user_service: UserServiceDep):
    """Enregistre un nouvel utilisateur et retourne son token d'accès."""
    logger.info("[Router] Tentative d'enregistrement pour: %s", user_in.email)
    user = await user_service.create_user(
        name=user_in.name,
        email=user_in.email,
        password=user_in.password,
    )
    return UserRegistered(message=MESSAGE_USER_CREATED, user_id=user.id, access_token=user.access_token)


@router.get("/current", response_model=CurrentUser)
async def read_current_user(current_user: CurrentUserDep):
    """Récupère le nom et l'email de l'utilisateur authentifié."""
    logger.info("[Router] Récupération infos pour user ID: %s", current_user.id)
    return CurrentUser(name=current_user.name, email=current_user.email)


user_router = router
