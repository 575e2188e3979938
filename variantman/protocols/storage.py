"""
Storage protocols.

Variantman never owns persistence. Hosts plug a backend in through
settings:

    VARIANTMAN = {
        "STORAGE_BACKEND": "variantman.adapters.orm.OrmVariantStorage",
    }

Any object with the three loaders below is a valid backend, e.g.:

    class ApiVariantStorage:
        def load_option_groups(self, product_sku):
            return [OptionGroup(...) for row in api.options(product_sku)]
        ...
"""

from typing import Protocol, runtime_checkable

from variantman.protocols.variants import (
    DisabledCombination,
    OptionGroup,
    Snapshot,
    Variant,
)


@runtime_checkable
class VariantStorage(Protocol):
    """Interface for loading a product's variant model."""

    def load_option_groups(self, product_sku: str) -> list[OptionGroup]:
        """Return option groups (with nested values) in selection order."""
        ...

    def load_variants(self, product_sku: str) -> list[Variant]:
        """Return all variants, including unavailable ones."""
        ...

    def load_disabled_combinations(self, product_sku: str) -> list[DisabledCombination]:
        """Return the disabled combination set."""
        ...


@runtime_checkable
class SnapshotStore(Protocol):
    """Optional interface for backends that can persist editor snapshots."""

    def save_snapshot(self, product_sku: str, snapshot: Snapshot) -> None:
        """Persist groups and disabled combinations of a snapshot."""
        ...
