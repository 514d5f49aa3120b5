"""Chirpy - short message API."""

__version__ = "0.1.0"
