"""
Constantes pour le module utilisateur.
"""

# --- Contraintes de champs ---
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 40
EMAIL_MAX_LENGTH = 255
PASSWORD_MIN_LENGTH = 8
# Limite de bcrypt, en octets UTF-8
PASSWORD_MAX_BYTES = 72

# 128 octets aléatoires -> 256 caractères hexadécimaux
ACCESS_TOKEN_BYTES = 128

# --- Messages ---
MESSAGE_USER_CREATED = "Utilisateur créé"
ERROR_USER_INVALID = "Impossible de créer l'utilisateur: champs invalides"
ERROR_EMAIL_EXISTS = "Un compte avec cet email existe déjà"
ERROR_ADVERT_LINK = "Impossible de lier l'annonce à son vendeur"
