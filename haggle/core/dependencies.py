"""
Dépendances FastAPI communes.
"""
from typing import Annotated

from fastapi import Depends, Request

from haggle.config import Settings


def get_settings(request: Request) -> Settings:
    """Retourne la configuration chargée au démarrage de l'application."""
    return request.app.state.settings


SettingsDep = Annotated[Settings, Depends(get_settings)]
