"""Utilitaires partagés (constantes de réglages)."""
