"""Variantman models."""

from variantman.models.disabled_combination import DisabledCombination
from variantman.models.option import OptionGroup, OptionValue
from variantman.models.variant import Variant

__all__ = [
    "DisabledCombination",
    "OptionGroup",
    "OptionValue",
    "Variant",
]
