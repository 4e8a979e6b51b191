"""
Constantes pour le module des annonces.
"""

# --- Contraintes de champs ---
TITLE_MIN_LENGTH = 5
TITLE_MAX_LENGTH = 50
DESCRIPTION_MIN_LENGTH = 4
DESCRIPTION_MAX_LENGTH = 400
PRICE_MIN = 1
PRICE_MAX = 10000
DEFAULT_CURRENCY = "SEK"
CURRENCY_MAX_LENGTH = 8
# Bornes d'une clé primaire BIGINT
ADVERT_ID_MIN = 1
ADVERT_ID_MAX = 2**63 - 1

# --- Messages ---
MESSAGE_ADVERT_CREATED = "Annonce créée"
ERROR_ADVERT_INVALID = "Impossible de créer l'annonce: champs invalides"
ERROR_ADVERT_NOT_FOUND = "Annonce non trouvée"
ERROR_ADVERT_ID_INVALID = "Identifiant d'annonce invalide"
ERROR_ADVERT_CREATION_FAILED = "Impossible d'enregistrer l'annonce"
