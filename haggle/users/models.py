# haggle/users/models.py
"""
Module définissant les modèles SQLModel pour l'entité User.

Ce module contient :
- User : modèle de table des comptes.
- UserAdvertLink : index des annonces d'un vendeur (référence inverse
  dénormalisée, non autoritaire ; ``Advert.seller`` fait foi).
"""
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from haggle.users.constants import EMAIL_MAX_LENGTH, NAME_MAX_LENGTH


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserBase(SQLModel):
    """Champs communs d'un utilisateur."""
    name: str = Field(max_length=NAME_MAX_LENGTH, nullable=False)
    email: str = Field(unique=True, index=True, max_length=EMAIL_MAX_LENGTH, nullable=False)


class User(UserBase, table=True):
    """Modèle de table SQLModel pour les utilisateurs."""
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    password_hash: str = Field(max_length=255, nullable=False)
    access_token: str = Field(unique=True, index=True, max_length=256, nullable=False)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)


class UserAdvertLink(SQLModel, table=True):
    """Une ligne par annonce rattachée à un vendeur, dans l'ordre d'ajout.

    Chaque ajout est un INSERT indépendant : deux publications concurrentes
    pour le même vendeur ne s'écrasent pas.
    """
    __tablename__ = "user_adverts"
    __table_args__ = (UniqueConstraint("user_id", "advert_id", name="uq_user_adverts_user_advert"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True, nullable=False)
    advert_id: int = Field(foreign_key="adverts.id", index=True, nullable=False)
