"""VariantStorage implementation backed by Variantman's Django models."""

import logging

from django.db import transaction

from variantman import protocols
from variantman.exceptions import VariantError
from variantman.protocols import SnapshotStore, VariantStorage

logger = logging.getLogger(__name__)


class OrmVariantStorage:
    """
    VariantStorage using the OptionGroup, OptionValue, Variant and
    DisabledCombination models.

    Primary keys are exposed as strings.
    """

    def load_option_groups(self, product_sku: str) -> list[protocols.OptionGroup]:
        """Return option groups with nested values, in selection order."""
        from variantman.models import OptionGroup

        groups = (
            OptionGroup.objects.filter(product_sku=product_sku)
            .prefetch_related("values")
            .order_by("sort_order", "id")
        )
        return [
            protocols.OptionGroup(
                id=str(group.pk),
                name=group.name,
                order=group.sort_order,
                values=tuple(
                    protocols.OptionValue(id=str(value.pk), group_id=str(group.pk), label=value.label)
                    for value in group.values.all()
                ),
            )
            for group in groups
        ]

    def load_variants(self, product_sku: str) -> list[protocols.Variant]:
        """Return all variants (available or not) in storage order."""
        from variantman.models import Variant

        variants = Variant.objects.for_product(product_sku).prefetch_related("values").order_by("id")
        return [
            protocols.Variant(
                id=str(variant.pk),
                value_ids=frozenset(str(value.pk) for value in variant.values.all()),
                price_q=variant.price_q,
                image_url=variant.image_url or None,
                is_available=variant.is_available,
                sku=variant.sku or None,
            )
            for variant in variants
        ]

    def load_disabled_combinations(self, product_sku: str) -> list[protocols.DisabledCombination]:
        """Return the disabled combination set."""
        from variantman.models import DisabledCombination

        combinations = (
            DisabledCombination.objects.filter(product_sku=product_sku)
            .prefetch_related("values")
            .order_by("id")
        )
        result = []
        for combination in combinations:
            pairs = frozenset((str(value.group_id), str(value.pk)) for value in combination.values.all())
            if not pairs:
                logger.warning("Skipping empty disabled combination %s", combination.pk)
                continue
            result.append(protocols.DisabledCombination(pairs=pairs))
        return result

    def save_snapshot(self, product_sku: str, snapshot: protocols.Snapshot) -> None:
        """
        Persist an editor snapshot.

        Groups and values missing from the snapshot are deleted; the
        disabled set is synced to the snapshot's. New groups and values
        must be created through the models first.
        """
        from variantman.models import DisabledCombination, OptionGroup, OptionValue

        group_pks = [_pk(group.id) for group in snapshot.groups]
        value_pks = [_pk(value.id) for group in snapshot.groups for value in group.values]
        wanted = {combination.pairs: combination for combination in snapshot.disabled}

        with transaction.atomic():
            OptionGroup.objects.filter(product_sku=product_sku).exclude(pk__in=group_pks).delete()
            OptionValue.objects.filter(group__product_sku=product_sku).exclude(pk__in=value_pks).delete()

            existing = (
                DisabledCombination.objects.filter(product_sku=product_sku)
                .prefetch_related("values")
                .order_by("id")
            )
            for stored in existing:
                pairs = frozenset((str(value.group_id), str(value.pk)) for value in stored.values.all())
                if pairs in wanted:
                    wanted.pop(pairs)
                else:
                    stored.delete()

            for combination in wanted.values():
                stored = DisabledCombination.objects.create(product_sku=product_sku)
                stored.values.set([_pk(value_id) for _, value_id in combination.pairs])

        logger.info(
            "Saved snapshot for %s: %d group(s), %d disabled combination(s)",
            product_sku,
            len(snapshot.groups),
            len(snapshot.disabled),
        )


def _pk(identifier: str) -> int:
    try:
        return int(identifier)
    except (TypeError, ValueError):
        raise VariantError("STORAGE_UNSUPPORTED", message=f"Not a stored id: {identifier!r}") from None


# Verify implementation at import time
if not isinstance(OrmVariantStorage(), VariantStorage):
    raise TypeError("OrmVariantStorage does not implement VariantStorage protocol")
if not isinstance(OrmVariantStorage(), SnapshotStore):
    raise TypeError("OrmVariantStorage does not implement SnapshotStore protocol")
