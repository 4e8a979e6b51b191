"""
Fonctions utilitaires de sécurité pour les comptes utilisateurs.

Comprend le hachage/vérification de mot de passe (bcrypt) et la génération
du token d'accès opaque.
"""
import logging
import secrets
from functools import lru_cache

import bcrypt

from haggle.users.constants import ACCESS_TOKEN_BYTES

logger = logging.getLogger(__name__)


def get_password_hash(password: str) -> str:
    """Génère le hash bcrypt (salé) d'un mot de passe."""
    password_bytes = password.encode('utf-8')
    hashed_bytes = bcrypt.hashpw(password_bytes, bcrypt.gensalt())
    return hashed_bytes.decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Vérifie un mot de passe en clair contre un hash bcrypt."""
    try:
        return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))
    except ValueError as e:
        # Hash mal formé en base, ou mot de passe au-delà de 72 octets
        logger.warning("Vérification du mot de passe impossible: %s", e)
        return False


@lru_cache(maxsize=1)
def _dummy_password_hash() -> str:
    return get_password_hash(secrets.token_hex(16))


def verify_password_against_nothing(plain_password: str) -> bool:
    """Effectue une vérification bcrypt factice quand l'utilisateur n'existe pas.

    Le coût est le même que pour un mauvais mot de passe, ce qui évite de
    révéler l'existence d'un compte par le temps de réponse.
    """
    verify_password(plain_password, _dummy_password_hash())
    return False


def generate_access_token() -> str:
    """Génère un token d'accès opaque à partir d'une source aléatoire sûre."""
    return secrets.token_hex(ACCESS_TOKEN_BYTES)
