"""
Exceptions personnalisées pour le module de gestion des utilisateurs.
"""
from typing import Any, Dict, Optional

from haggle.exceptions import ConflictException, DomainException, NotFoundException, ValidationException
from haggle.users.constants import ERROR_ADVERT_LINK, ERROR_EMAIL_EXISTS, ERROR_USER_INVALID


class UserValidationException(ValidationException):
    """Levée lorsque les champs d'un utilisateur ne respectent pas les contraintes."""
    def __init__(self, errors: Dict[str, Any]):
        super().__init__(ERROR_USER_INVALID, errors=errors)


class EmailAlreadyExistsException(ConflictException):
    """Levée lorsqu'un utilisateur avec cet email existe déjà."""
    def __init__(self, email: str):
        self.email = email
        super().__init__(ERROR_EMAIL_EXISTS)


class UserNotFoundException(NotFoundException):
    """Levée lorsque l'utilisateur n'est pas trouvé."""
    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__(f"Utilisateur {user_id} non trouvé")


class AdvertLinkException(DomainException):
    """Levée lorsque l'ajout d'une annonce à l'index du vendeur échoue."""
    def __init__(self, user_id: int, advert_id: int, original_exception: Optional[Exception] = None):
        self.user_id = user_id
        self.advert_id = advert_id
        self.original_exception = original_exception
        super().__init__(f"{ERROR_ADVERT_LINK} (annonce {advert_id}, vendeur {user_id})")
