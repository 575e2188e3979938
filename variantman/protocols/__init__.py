"""Variantman protocols."""

from variantman.protocols.storage import SnapshotStore, VariantStorage
from variantman.protocols.variants import (
    DisabledCombination,
    OptionGroup,
    OptionValue,
    PriceRange,
    Snapshot,
    Variant,
    VariantModel,
)

__all__ = [
    "DisabledCombination",
    "OptionGroup",
    "OptionValue",
    "PriceRange",
    "Snapshot",
    "SnapshotStore",
    "Variant",
    "VariantModel",
    "VariantStorage",
]
