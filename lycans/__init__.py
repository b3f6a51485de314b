"""Moteur de statistiques Lycans (rôles, camps, filtres et agrégations)."""

__version__ = "0.1.0"
