"""
Data models for the URL shortener service.

This module imports and exports all SQLModel models used in the service.
"""

from sqlmodel import SQLModel

from shortener.models.pair import (
    ShortPair,
    ShortPairBase,
    ShortPairCreate,
)

__all__ = [
    "SQLModel",
    "ShortPair",
    "ShortPairBase",
    "ShortPairCreate",
]
