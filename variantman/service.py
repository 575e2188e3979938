"""
Variantman public API.

CORE (essential):
    VariantService.load(product_sku)          - Load VariantModel from storage
    VariantService.open_session(product_sku)  - Selection session
    VariantService.save_snapshot(sku, snap)   - Persist an editor snapshot

CONVENIENCE (helpers):
    VariantService.price_range(product_sku)   - Min/max variant price

VARIANT MATRIX (editor, ORM only):
    VariantService.generate_variants(product_sku)          - Create missing combinations
    VariantService.set_availability(product_sku, flag)     - Bulk availability
"""

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from django.db import transaction

from variantman import resolver
from variantman.conf import get_storage_backend
from variantman.exceptions import VariantError
from variantman.protocols import PriceRange, Snapshot, SnapshotStore, VariantModel
from variantman.session import VariantSession

if TYPE_CHECKING:
    from variantman.models import Variant

logger = logging.getLogger(__name__)


class VariantService:
    """
    Variantman public API.

    Uses @classmethod for extensibility.

    CORE (essential):
        load(product_sku)          - VariantModel from the storage backend
        open_session(product_sku)  - VariantSession with default selection
        save_snapshot(...)         - Persist structural edits

    CONVENIENCE (helpers):
        price_range(product_sku)   - Price range over available variants
    """

    # ======================================================================
    # CORE API
    # ======================================================================

    @classmethod
    def load(cls, product_sku: str, storage=None) -> VariantModel:
        """
        Load a product's options, variants and disabled combinations.

        Args:
            product_sku: Product code
            storage: VariantStorage override (default: configured backend)

        Returns:
            VariantModel (empty for products without options)
        """
        storage = storage or cls._get_storage()
        return VariantModel.build(
            groups=storage.load_option_groups(product_sku),
            variants=storage.load_variants(product_sku),
            disabled=storage.load_disabled_combinations(product_sku),
        )

    @classmethod
    def _get_storage(cls):
        """Internal: storage backend. Override for per-tenant backends, etc."""
        return get_storage_backend()

    @classmethod
    def open_session(
        cls,
        product_sku: str,
        selection: Mapping[str, str] | None = None,
        storage=None,
    ) -> VariantSession:
        """
        Open a selection session for a product.

        Args:
            product_sku: Product code
            selection: Previous selection to restore (repaired if stale)
            storage: VariantStorage override

        Returns:
            VariantSession
        """
        model = cls.load(product_sku, storage=storage)
        return VariantSession(model, product_sku=product_sku, selection=selection)

    @classmethod
    def save_snapshot(cls, product_sku: str, snapshot: Snapshot, storage=None) -> None:
        """
        Persist groups and disabled combinations of an editor snapshot.

        Raises:
            VariantError: If the backend cannot persist snapshots
        """
        storage = storage or cls._get_storage()
        if not isinstance(storage, SnapshotStore):
            raise VariantError("STORAGE_UNSUPPORTED", backend=type(storage).__name__)
        storage.save_snapshot(product_sku, snapshot)

    # ======================================================================
    # CONVENIENCE API
    # ======================================================================

    @classmethod
    def price_range(
        cls,
        product_sku: str,
        base_price_q: int | None = None,
        only_available: bool = True,
        storage=None,
    ) -> PriceRange:
        """
        Price range in cents over the product's variants.

        Args:
            product_sku: Product code
            base_price_q: Fallback for variants without their own price
            only_available: False to include unavailable variants
        """
        storage = storage or cls._get_storage()
        return resolver.price_range(storage.load_variants(product_sku), base_price_q, only_available)

    # ======================================================================
    # VARIANT MATRIX API
    # ======================================================================

    @classmethod
    def generate_variants(cls, product_sku: str) -> list["Variant"]:
        """
        Create a Variant for every combination that has none.

        New variants start unavailable so the merchant reviews them first.

        Returns:
            List of created Variant instances

        Raises:
            VariantError: If the product has no option groups
        """
        from variantman.adapters.orm import OrmVariantStorage
        from variantman.models import Variant

        model = cls.load(product_sku, storage=OrmVariantStorage())
        if not model.groups:
            raise VariantError("PRODUCT_NOT_FOUND", product_sku=product_sku)

        created = []
        with transaction.atomic():
            for combination in resolver.missing_combinations(model):
                variant = Variant.objects.create(product_sku=product_sku, is_available=False)
                variant.values.set([int(value_id) for value_id in combination.values()])
                created.append(variant)

        logger.info("Generated %d variant(s) for %s", len(created), product_sku)
        return created

    @classmethod
    def set_availability(
        cls,
        product_sku: str,
        is_available: bool,
        variant_ids: list[str] | None = None,
    ) -> int:
        """
        Mark variants of a product (all, or `variant_ids`) available or not.

        Returns:
            Number of variants updated
        """
        from variantman.models import Variant

        qs = Variant.objects.for_product(product_sku)
        if variant_ids is not None:
            qs = qs.filter(pk__in=[int(variant_id) for variant_id in variant_ids])

        updated = 0
        # save() per row so simple_history records the change
        for variant in qs:
            if variant.is_available != is_available:
                variant.is_available = is_available
                variant.save(update_fields=["is_available", "updated_at"])
                updated += 1
        return updated
