"""
Exceptions personnalisées pour le module des annonces.
"""
from typing import Any, Dict, Optional

from haggle.adverts.constants import (
    ERROR_ADVERT_CREATION_FAILED,
    ERROR_ADVERT_ID_INVALID,
    ERROR_ADVERT_INVALID,
    ERROR_ADVERT_NOT_FOUND,
)
from haggle.exceptions import NotFoundException, ValidationException


class AdvertValidationException(ValidationException):
    """Levée lorsque les champs d'une annonce ne respectent pas les contraintes."""
    def __init__(self, errors: Dict[str, Any]):
        super().__init__(ERROR_ADVERT_INVALID, errors=errors)


class InvalidAdvertIdException(ValidationException):
    """Levée lorsque l'identifiant fourni dans l'URL est mal formé."""
    def __init__(self, raw_id: str):
        self.raw_id = raw_id
        super().__init__(ERROR_ADVERT_ID_INVALID, errors={"advertId": raw_id})


class AdvertNotFoundException(NotFoundException):
    """Levée lorsque l'annonce n'est pas trouvée."""
    def __init__(self, advert_id: int):
        self.advert_id = advert_id
        super().__init__(f"{ERROR_ADVERT_NOT_FOUND} (ID: {advert_id})")


class AdvertCreationFailedException(ValidationException):
    """Levée lorsque l'écriture de l'annonce est refusée par la base de données."""
    def __init__(self, original_exception: Optional[Exception] = None):
        self.original_exception = original_exception
        super().__init__(ERROR_ADVERT_CREATION_FAILED, errors={})
