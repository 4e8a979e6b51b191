from pydantic import BaseModel

from haggle.core.schemas import CamelModel


class SessionCreate(BaseModel):
    # Pas de validation de format ici : un email mal formé est simplement inconnu
    email: str
    password: str


class SessionRead(CamelModel):
    user_id: int
    access_token: str
