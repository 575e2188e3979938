"""Variantman adapters."""

from variantman.adapters.memory import InMemoryVariantStorage
from variantman.adapters.orm import OrmVariantStorage

__all__ = [
    "InMemoryVariantStorage",
    "OrmVariantStorage",
]
