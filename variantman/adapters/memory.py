"""
In-memory VariantStorage.

For tests, fixtures and hosts that build variant data themselves. Data is
not persisted across restarts.

Usage in settings.py:
    VARIANTMAN = {
        "STORAGE_BACKEND": "variantman.adapters.memory.InMemoryVariantStorage",
    }
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable

from variantman.protocols import (
    DisabledCombination,
    OptionGroup,
    Snapshot,
    SnapshotStore,
    Variant,
    VariantStorage,
)


class InMemoryVariantStorage:
    """VariantStorage and SnapshotStore backed by dicts keyed by product SKU."""

    def __init__(self):
        self._groups: dict[str, list[OptionGroup]] = defaultdict(list)
        self._variants: dict[str, list[Variant]] = defaultdict(list)
        self._disabled: dict[str, list[DisabledCombination]] = defaultdict(list)

    def add_product(
        self,
        product_sku: str,
        groups: Iterable[OptionGroup] = (),
        variants: Iterable[Variant] = (),
        disabled: Iterable[DisabledCombination] = (),
    ) -> None:
        """Register (or replace) the variant data of a product."""
        self._groups[product_sku] = list(groups)
        self._variants[product_sku] = list(variants)
        self._disabled[product_sku] = list(disabled)

    def load_option_groups(self, product_sku: str) -> list[OptionGroup]:
        return sorted(self._groups.get(product_sku, []), key=lambda group: group.order)

    def load_variants(self, product_sku: str) -> list[Variant]:
        return list(self._variants.get(product_sku, []))

    def load_disabled_combinations(self, product_sku: str) -> list[DisabledCombination]:
        return list(self._disabled.get(product_sku, []))

    def save_snapshot(self, product_sku: str, snapshot: Snapshot) -> None:
        self._groups[product_sku] = list(snapshot.groups)
        self._disabled[product_sku] = list(snapshot.disabled)

    def clear(self) -> None:
        self._groups.clear()
        self._variants.clear()
        self._disabled.clear()


# Verify implementation at import time
if not isinstance(InMemoryVariantStorage(), VariantStorage):
    raise TypeError("InMemoryVariantStorage does not implement VariantStorage protocol")
if not isinstance(InMemoryVariantStorage(), SnapshotStore):
    raise TypeError("InMemoryVariantStorage does not implement SnapshotStore protocol")
