# haggle/adverts/models.py
"""
Module définissant les modèles SQLModel pour l'entité Advert.

Le champ ``seller`` est le lien autoritaire entre une annonce et son
vendeur ; l'index ``user_adverts`` côté utilisateur n'en est qu'une copie.
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional

from sqlalchemy import JSON
from sqlmodel import Field, SQLModel

from haggle.adverts.constants import (
    CURRENCY_MAX_LENGTH,
    DEFAULT_CURRENCY,
    DESCRIPTION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
)
from haggle.users.models import utcnow


class AdvertCondition(str, Enum):
    AS_NEW = "As new"
    GOOD = "Good"
    USED = "Used"
    NEEDS_ALTERATIONS = "Needs alterations"


class AdvertCategory(str, Enum):
    TEXTILES = "Textiles"
    LIGHTNING = "Lightning"
    DECORATION = "Decoration"
    RUGS = "Rugs"
    FURNITURE = "Furniture"


class DeliveryMethod(str, Enum):
    PICK_UP = "Pick up"
    MEET_UP = "Meet up"
    SHIP = "Ship"


class Advert(SQLModel, table=True):
    """Modèle de table SQLModel pour les annonces.

    Les valeurs énumérées sont stockées sous forme de texte (leur valeur,
    pas leur nom) ; la validation se fait dans ``AdvertCreate``.
    """
    __tablename__ = "adverts"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(max_length=TITLE_MAX_LENGTH, nullable=False)
    description: str = Field(max_length=DESCRIPTION_MAX_LENGTH, nullable=False)
    price: float = Field(nullable=False)
    currency: str = Field(default=DEFAULT_CURRENCY, max_length=CURRENCY_MAX_LENGTH)
    image_url: str = Field(max_length=1024, nullable=False)
    image_id: str = Field(max_length=512, nullable=False)
    condition: str = Field(max_length=32, nullable=False)
    category: str = Field(max_length=32, nullable=False)
    delivery: List[str] = Field(default_factory=list, sa_type=JSON)
    sold: bool = Field(default=False)
    published_date: datetime = Field(default_factory=utcnow, nullable=False)
    seller: int = Field(foreign_key="users.id", index=True, nullable=False)
