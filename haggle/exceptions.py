"""Taxonomie commune des exceptions du domaine.

Les services lèvent ces exceptions (ou leurs sous-classes par module) ;
la couche HTTP les traduit en réponses dans ``haggle.exception_handlers``.
"""
from typing import Any, Dict, Optional


class DomainException(Exception):
    """Classe de base pour toutes les exceptions métier."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ValidationException(DomainException):
    """Une contrainte de champ n'est pas respectée."""

    def __init__(self, message: str, errors: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.errors = errors or {}


class ConflictException(DomainException):
    """Une contrainte d'unicité n'est pas respectée."""


class UnauthorizedException(DomainException):
    """Token d'accès absent ou invalide."""


class NotFoundException(DomainException):
    """Ressource absente ou identifiants qui ne correspondent pas."""


class UploadFailedException(DomainException):
    """Le stockage externe de l'image a échoué."""

    def __init__(self, message: str, original_exception: Optional[Exception] = None):
        full_message = message
        if original_exception:
            full_message += f" (Erreur originale: {original_exception})"
        super().__init__(full_message)
        self.original_exception = original_exception
