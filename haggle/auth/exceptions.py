"""
Exceptions personnalisées pour le module d'authentification.
"""
from haggle.auth.constants import ERROR_CREDENTIALS_INVALID, ERROR_TOKEN_INVALID, ERROR_TOKEN_MISSING
from haggle.exceptions import NotFoundException, UnauthorizedException


class TokenMissingException(UnauthorizedException):
    """Aucun token dans la requête."""
    def __init__(self):
        super().__init__(ERROR_TOKEN_MISSING)


class TokenInvalidException(UnauthorizedException):
    """Le token ne correspond à aucun utilisateur."""
    def __init__(self):
        super().__init__(ERROR_TOKEN_INVALID)


class InvalidCredentialsException(NotFoundException):
    """Email inconnu ou mot de passe incorrect (les deux cas sont indiscernables)."""
    def __init__(self):
        super().__init__(ERROR_CREDENTIALS_INVALID)
