"""Persistence helpers."""

from .json_writer import JsonStore

__all__ = ["JsonStore"]
