"""Attraction detail data sourced from a headless CMS."""

__version__ = "0.1.0"
