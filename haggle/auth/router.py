"""
Module définissant les routes API FastAPI pour l'authentification.

Contient l'endpoint:
- POST /sessions : connexion par email et mot de passe, retourne le token d'accès
"""
import logging

from fastapi import APIRouter

from haggle.auth.dependencies import AuthServiceDep
from haggle.auth.schemas import SessionCreate, SessionRead

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=SessionRead)
async def create_session(credentials: SessionCreate, auth_service: AuthServiceDep):
    """
    Authentifie l'utilisateur et retourne son identifiant et son token d'accès.

    - **email**: Email de l'utilisateur
    - **password**: Mot de passe de l'utilisateur
    """
    logger.info("[Router] Tentative de login pour: %s", credentials.email)
    user = await auth_service.authenticate_by_password(credentials.email, credentials.password)
    return SessionRead(user_id=user.id, access_token=user.access_token)


# Créer une instance du routeur pour l'export
session_router = router
