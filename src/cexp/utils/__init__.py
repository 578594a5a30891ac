"""Utility helpers."""

from .serialization import to_json

__all__ = ["to_json"]
