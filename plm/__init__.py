"""Garment PLM core - lifecycle, composition and attribute rules for apparel."""

__version__ = "0.1.0"
