"""Haggle: annuaire de petites annonces (comptes, sessions, annonces)."""

__version__ = "1.0.0"
