"""Dossier - résumé ingestion and description normalization."""

__version__ = "0.1.0"
