from pydantic import BaseModel, EmailStr, Field, TypeAdapter, ValidationError, field_validator

from haggle.core.schemas import CamelModel
from haggle.users.constants import NAME_MAX_LENGTH, NAME_MIN_LENGTH, PASSWORD_MAX_BYTES, PASSWORD_MIN_LENGTH

_email_adapter = TypeAdapter(EmailStr)


def normalize_email(email: str) -> str:
    """Forme canonique d'un email, identique à celle stockée à l'enregistrement.

    Une adresse mal formée est retournée telle quelle (elle ne correspondra
    à aucun compte).
    """
    try:
        return _email_adapter.validate_python(email)
    except ValidationError:
        return email


# ======================================================
# Schémas: Utilisateurs
# ======================================================

class UserCreate(BaseModel):
    name: str = Field(..., min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH)  # Mot de passe en clair lors de la création

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
            raise ValueError(f"Le mot de passe ne doit pas dépasser {PASSWORD_MAX_BYTES} octets")
        return value


class UserRegistered(CamelModel):
    message: str
    user_id: int
    access_token: str


class CurrentUser(CamelModel):
    name: str
    email: str
