from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, Field, field_validator

from haggle.adverts.constants import (
    DEFAULT_CURRENCY,
    DESCRIPTION_MAX_LENGTH,
    DESCRIPTION_MIN_LENGTH,
    PRICE_MAX,
    PRICE_MIN,
    TITLE_MAX_LENGTH,
    TITLE_MIN_LENGTH,
)
from haggle.adverts.models import AdvertCategory, AdvertCondition, DeliveryMethod
from haggle.core.schemas import CamelModel


# ======================================================
# Schémas: Annonces
# ======================================================

class AdvertCreate(BaseModel):
    """Champs fournis par le vendeur, validés avant tout envoi d'image."""
    title: str = Field(..., min_length=TITLE_MIN_LENGTH, max_length=TITLE_MAX_LENGTH)
    description: str = Field(..., min_length=DESCRIPTION_MIN_LENGTH, max_length=DESCRIPTION_MAX_LENGTH)
    price: float = Field(..., ge=PRICE_MIN, le=PRICE_MAX)
    currency: str = DEFAULT_CURRENCY
    condition: AdvertCondition
    category: AdvertCategory
    delivery: List[DeliveryMethod] = Field(..., min_length=1)

    @field_validator("title", "description", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("currency", mode="before")
    @classmethod
    def default_currency(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_CURRENCY
        return value.strip().upper() if isinstance(value, str) else value

    @field_validator("delivery", mode="before")
    @classmethod
    def split_delivery(cls, value: Union[str, List[str], None]):
        # Accepte un champ répété ou une liste séparée par des virgules
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        items: List[str] = []
        for raw in value:
            if isinstance(raw, str):
                items.extend(part.strip() for part in raw.split(",") if part.strip())
            else:
                items.append(raw)
        return items

    @field_validator("delivery")
    @classmethod
    def dedupe_delivery(cls, value: List[DeliveryMethod]) -> List[DeliveryMethod]:
        return list(dict.fromkeys(value))


class AdvertRead(CamelModel):
    id: int
    title: str
    description: str
    price: float
    currency: str
    image_url: str
    image_id: str
    condition: str
    category: str
    delivery: List[str]
    sold: bool
    published_date: datetime
    seller: int


class AdvertPublished(CamelModel):
    message: str
    ad_id: int
    created: bool = True
    linked: bool


class SellerAdverts(CamelModel):
    """Annonces du vendeur (requête autoritaire) et état de son index."""
    adverts: List[AdvertRead]
    advert_ids: List[int]
    relinked: List[int] = []


class PublicationResult(BaseModel):
    advert_id: int
    linked: bool
    link_error: Optional[str] = None
